from __future__ import annotations

import gc
import importlib.util
import unittest
from unittest import mock


JAX_AVAILABLE = importlib.util.find_spec("jax") is not None


@unittest.skipUnless(JAX_AVAILABLE, "jax is required for relational tests")
class RelationalComparisonTests(unittest.TestCase):
    def test_every_operator_token_against_a_scalar(self) -> None:
        from tsvec_jax import vector

        v = vector(1, 2, 3)
        cases = {
            "==": [False, True, False],
            "~=": [True, False, True],
            "!=": [True, False, True],
            "≠": [True, False, True],
            "<": [True, False, False],
            "<=": [True, True, False],
            "≤": [True, True, False],
            ">": [False, False, True],
            ">=": [False, True, True],
            "≥": [False, True, True],
        }
        for token, expected in cases.items():
            with self.subTest(token=token):
                self.assertEqual(v(token, 2).tolist(), expected)

    def test_enum_members_are_accepted(self) -> None:
        from tsvec_jax import Comparison, vector

        v = vector(1, 5)
        self.assertEqual(v.compare(Comparison.GE, vector(1, 6)).tolist(), [True, False])

    def test_mask_source_is_always_the_left_vector(self) -> None:
        from tsvec_jax import vector

        a = vector(1, 2)
        b = vector(2, 1)
        self.assertIs(a("<", b).source, a)
        self.assertIs(b(">", a).source, b)

    def test_unknown_operator_raises(self) -> None:
        from tsvec_jax import InvalidOperatorError, vector

        with self.assertRaises(InvalidOperatorError) as ctx:
            vector(1)("=>", 0)
        self.assertEqual(ctx.exception.token, "=>")
        self.assertIn("<=", ctx.exception.expected)
        self.assertIn("'=>'", str(ctx.exception))

    def test_mismatched_lengths_warn_and_compare_absent_tail(self) -> None:
        from tsvec_jax import LengthMismatchWarning, vector

        v = vector(1, 2, 3)
        with self.assertWarns(LengthMismatchWarning):
            self.assertEqual(v("==", vector(1, 2)).tolist(), [True, True, False])
        with self.assertWarns(LengthMismatchWarning):
            self.assertEqual(v("~=", vector(1, 2)).tolist(), [False, False, True])
        with self.assertWarns(LengthMismatchWarning):
            self.assertEqual(v("<", vector(2, 3, 4, 5)).tolist(), [True, True, True])

    def test_comparison_warning_points_at_the_calling_line(self) -> None:
        from tsvec_jax import LengthMismatchWarning, vector

        with self.assertWarns(LengthMismatchWarning) as ctx:
            vector(1, 2, 3)("<", vector(1, 2))
        self.assertEqual(ctx.filename, __file__)

    def test_strict_mode_rejects_mismatched_lengths(self) -> None:
        from tsvec_jax import LengthMismatchError, config, vector

        with mock.patch.object(config, "STRICT_COMPARE", True):
            with self.assertRaises(LengthMismatchError):
                vector(1, 2, 3)("<", vector(1, 2))

    def test_comparing_with_none_is_a_type_mismatch(self) -> None:
        from tsvec_jax import TypeMismatchError, vector

        with self.assertRaises(TypeMismatchError):
            vector(1, 2)(">", None)

    def test_all_predicates(self) -> None:
        from tsvec_jax import vector

        v = vector(1, 2, 3)
        self.assertTrue(v.all_equals([1, 2, 3]))
        self.assertFalse(v.all_equals([1, 2]))
        self.assertTrue(v.not_all_equals(1))
        self.assertTrue(vector(4, 4).all_equals(4))
        self.assertTrue(v.all_less_than(4))
        self.assertFalse(v.all_less_than(3))
        self.assertTrue(v.all_less_than_or_equal(3))
        self.assertTrue(v.all_more_than(0))
        self.assertTrue(v.all_more_than_or_equal(vector(1, 1, 3)))
        self.assertFalse(v.all_more_than_or_equal(vector(2, 1, 3)))


@unittest.skipUnless(JAX_AVAILABLE, "jax is required for indexing tests")
class GatherTests(unittest.TestCase):
    def test_single_position_is_one_based(self) -> None:
        from tsvec_jax import bool_vector, vector

        v = vector(10, 20, 30)
        self.assertEqual(v[1], 10.0)
        self.assertEqual(v[3], 30.0)
        self.assertIs(bool_vector(False, True)[2], True)

    def test_gather_by_index_list_keeps_order_and_repeats(self) -> None:
        from tsvec_jax import Vector, vector

        v = vector(10, 20, 30)
        self.assertEqual(v[[3, 1]].tolist(), [30.0, 10.0])
        out = v[vector(2, 2, 1)]
        self.assertIsInstance(out, Vector)
        self.assertEqual(out.tolist(), [20.0, 20.0, 10.0])
        self.assertEqual(v[[]].tolist(), [])

    def test_gather_on_mask_by_positions_returns_sourceless_mask(self) -> None:
        from tsvec_jax import BoolMask, vector

        mask = vector(1, -1, 2)(">", 0)
        picked = mask[[1, 2]]
        self.assertIsInstance(picked, BoolMask)
        self.assertEqual(picked.tolist(), [True, False])
        self.assertIsNone(picked.source)

    def test_out_of_range_positions(self) -> None:
        from tsvec_jax import IndexOutOfRangeError, vector

        v = vector(1, 2)
        for bad in (0, 3, -1, [1, 5]):
            with self.subTest(index=bad):
                with self.assertRaises(IndexOutOfRangeError):
                    v[bad]

    def test_non_integral_positions_are_rejected(self) -> None:
        from tsvec_jax import TypeMismatchError, vector

        with self.assertRaises(TypeMismatchError):
            vector(1, 2)[1.5]
        with self.assertRaises(TypeMismatchError):
            vector(1, 2)[["a"]]

    def test_mask_indexing_filters_positive_values(self) -> None:
        from tsvec_jax import vector

        v = vector(-1, 2, -3, 4)
        self.assertEqual(v[v(">", 0)].tolist(), [2.0, 4.0])

    def test_mask_indexing_reads_from_mask_source_not_receiver(self) -> None:
        from tsvec_jax import vector

        v = vector(-1, 2, -3, 4)
        other = vector(100, 200, 300, 400)
        self.assertEqual(other[v(">", 0)].tolist(), [2.0, 4.0])

    def test_filter_and_filter_except(self) -> None:
        from tsvec_jax import filter, filter_except, vector

        v = vector(-1, 2, -3, 4)
        mask = v(">=", 0)
        self.assertEqual(filter_except(mask).tolist(), [2.0, 4.0])
        self.assertEqual(filter(mask).tolist(), [-1.0, -3.0])
        self.assertEqual(mask.filter().tolist(), [-1.0, -3.0])

    def test_filter_order_follows_the_compared_vector(self) -> None:
        from tsvec_jax import filter_except, vector

        a = vector(1, 5, 3)
        b = vector(2, 4, 6)
        self.assertEqual(filter_except(a(">", b)).tolist(), [5.0])
        self.assertEqual(filter_except(b("<", a)).tolist(), [4.0])

    def test_filter_without_source_raises(self) -> None:
        from tsvec_jax import MissingSourceReferenceError, bool_vector, filter, filter_except, vector

        mask = bool_vector(True, False)
        with self.assertRaises(MissingSourceReferenceError):
            filter_except(mask)
        with self.assertRaises(MissingSourceReferenceError):
            filter(mask)
        with self.assertRaises(MissingSourceReferenceError):
            vector(1, 2)[mask]

    def test_source_reference_does_not_keep_vector_alive(self) -> None:
        from tsvec_jax import MissingSourceReferenceError, vector

        mask = vector(1, 2, 3)(">", 1)
        gc.collect()
        self.assertIsNone(mask.source)
        self.assertEqual(mask.tolist(), [False, True, True])
        with self.assertRaises(MissingSourceReferenceError):
            mask.filter_except()

    def test_which_and_which_not(self) -> None:
        from tsvec_jax import bool_vector, vector, which, which_not

        v = vector(5, -1, 7, -2)
        self.assertEqual(which(v("<", 0)).tolist(), [2.0, 4.0])
        self.assertEqual(which_not(v("<", 0)).tolist(), [1.0, 3.0])
        self.assertEqual(which([False, False]).tolist(), [])
        self.assertEqual(bool_vector(True, False, True).which().tolist(), [1.0, 3.0])

    def test_which_max_and_min(self) -> None:
        from tsvec_jax import vector, which_max, which_min

        self.assertEqual(which_max(vector(3, 9, 1, 9)), 2)
        self.assertEqual(which_min([3, 9, 1, 9]), 3)
        self.assertEqual(which_max([]), 0)
        self.assertEqual(which_min([]), 0)

    def test_between(self) -> None:
        from tsvec_jax import vector

        v = vector(10, 20, 30, 40, 50)
        self.assertEqual(v.between(2, 4).tolist(), [20.0, 30.0, 40.0])
        self.assertEqual(v.between(3).tolist(), [10.0, 20.0, 30.0])
        self.assertEqual(v.between(1, 5, 2).tolist(), [10.0, 30.0, 50.0])

    def test_mask_reductions(self) -> None:
        from tsvec_jax import bool_vector

        mask = bool_vector(True, False, True)
        self.assertTrue(mask.any())
        self.assertFalse(mask.all())
        self.assertEqual(mask.count(), 2)


@unittest.skipUnless(JAX_AVAILABLE, "jax is required for indexing tests")
class ScatterTests(unittest.TestCase):
    def test_mask_assignment_broadcasts_scalar(self) -> None:
        from tsvec_jax import vector

        v = vector(-1, 3, 8, 5.5, 0.2)
        v[v(">", 0) & v("<", 5.6)] = 10
        self.assertEqual(v.tolist(), [-1.0, 10.0, 8.0, 10.0, 10.0])

    def test_index_list_assignment_is_positional(self) -> None:
        from tsvec_jax import vector

        v = vector(1, 2, 3)
        v.set([3, 1], vector(30, 10))
        self.assertEqual(v.tolist(), [10.0, 2.0, 30.0])
        v[2] = -2
        self.assertEqual(v.tolist(), [10.0, -2.0, 30.0])

    def test_assignment_length_must_match_selection(self) -> None:
        from tsvec_jax import LengthMismatchError, vector

        v = vector(1, 2, 3)
        with self.assertRaises(LengthMismatchError):
            v[[1, 2]] = [5, 6, 7]
        with self.assertRaises(LengthMismatchError):
            v[v(">", 1)] = [9]
        self.assertEqual(v.tolist(), [1.0, 2.0, 3.0])

    def test_assignment_just_past_the_end_appends(self) -> None:
        from tsvec_jax import vector

        v = vector(1, 2)
        v[3] = 3
        v.set([4, 5], [4, 5])
        self.assertEqual(v.tolist(), [1.0, 2.0, 3.0, 4.0, 5.0])

    def test_assignment_leaving_a_hole_is_rejected(self) -> None:
        from tsvec_jax import IndexOutOfRangeError, vector

        v = vector(1, 2)
        with self.assertRaises(IndexOutOfRangeError):
            v[4] = 1
        with self.assertRaises(IndexOutOfRangeError):
            v[0] = 1
        self.assertEqual(v.tolist(), [1.0, 2.0])

    def test_repeated_positions_keep_last_write(self) -> None:
        from tsvec_jax import vector

        v = vector(0, 0)
        v[[1, 1, 2]] = [5, 6, 7]
        self.assertEqual(v.tolist(), [6.0, 7.0])

    def test_assignment_rejects_wrong_value_kind(self) -> None:
        from tsvec_jax import TypeMismatchError, bool_vector, vector

        v = vector(1, 2)
        with self.assertRaises(TypeMismatchError):
            v[1] = "x"
        mask = bool_vector(True, False)
        with self.assertRaises(TypeMismatchError):
            mask[1] = 3
        mask[2] = True
        self.assertEqual(mask.tolist(), [True, True])

    def test_previously_gathered_values_are_not_aliased(self) -> None:
        from tsvec_jax import vector

        v = vector(1, 2, 3)
        head = v[[1, 2]]
        v[1] = 100
        self.assertEqual(head.tolist(), [1.0, 2.0])


if __name__ == "__main__":
    unittest.main()
