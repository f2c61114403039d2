"""Runtime value model: numeric vectors and boolean masks.

Both kinds wrap a 1-d ``jax.Array``. Every public position is 1-based:
``v[1]`` is the first element and :func:`which` reports 1-based positions.

Indexing a sequence with a mask reads from the mask's *source*, the vector
the mask was compared from, not from the sequence being indexed::

    v = vector(-1, 2, -3, 4)
    v[v(">", 0)]          # Vector([2.0, 4.0])
    other[v(">", 0)]      # also Vector([2.0, 4.0]); `other` is not read

The source is held through a weak reference and never keeps the vector alive.
"""

from __future__ import annotations

import math
import numbers
import weakref
from collections.abc import Iterable, Iterator

import jax
import jax.numpy as jnp
from jax import dtypes

from . import config  # noqa: F401  (x64 switch must run before arrays are built)
from .broadcast import ArithmeticOp, LogicalOp, broadcast_arithmetic, broadcast_logical
from .errors import InvalidArgumentError, LengthMismatchError, MissingSourceReferenceError, TypeMismatchError
from .indexing import check_positions, gather_positions, normalize_positions, scatter_positions
from .relational import Comparison, compare_arrays


def float_dtype():
    return dtypes.canonicalize_dtype(jnp.float64)


def is_scalar(value: object) -> bool:
    if isinstance(value, jax.Array):
        return value.ndim == 0
    return isinstance(value, numbers.Real)


def is_sequence(value: object) -> bool:
    if isinstance(value, (SequenceValue, list, tuple)):
        return True
    return isinstance(value, jax.Array) and value.ndim == 1


def items_of(value) -> list:
    """Python list of the elements of a sequence value, array or iterable."""
    if isinstance(value, (SequenceValue, jax.Array)):
        return value.tolist()
    return list(value)


def as_numeric_array(value: object, *, where: str = "value") -> jax.Array:
    """1-d float array from a Vector, a 1-d array or an iterable of reals."""
    if isinstance(value, Vector):
        return value.data
    if isinstance(value, BoolMask):
        raise TypeMismatchError(f"{where}: a boolean mask is not a numeric sequence")
    if isinstance(value, jax.Array):
        if value.ndim != 1:
            raise TypeMismatchError(f"{where}: expected a 1-d array, got shape {tuple(value.shape)}")
        if jnp.issubdtype(value.dtype, jnp.complexfloating):
            raise TypeMismatchError(f"{where}: complex values are not supported")
        return value.astype(float_dtype())
    if isinstance(value, (str, bytes)) or not isinstance(value, Iterable):
        raise TypeMismatchError(f"{where}: expected a sequence of numbers, got {type(value).__name__}")

    items = []
    for idx, item in enumerate(value):
        if isinstance(item, jax.Array) and item.ndim == 0:
            item = item.item()
        if not isinstance(item, numbers.Real):
            raise TypeMismatchError(f"{where}[{idx + 1}] has non-numeric type {type(item).__name__}")
        items.append(float(item))
    return jnp.asarray(items, dtype=float_dtype())


def as_bool_array(value: object, *, where: str = "value") -> jax.Array:
    """1-d boolean array from a BoolMask, a boolean array or an iterable of bools."""
    if isinstance(value, BoolMask):
        return value.data
    if isinstance(value, jax.Array):
        if value.ndim != 1 or value.dtype != jnp.bool_:
            raise TypeMismatchError(f"{where}: expected a 1-d boolean array, got {value.dtype}{tuple(value.shape)}")
        return value
    if isinstance(value, (str, bytes, Vector)) or not isinstance(value, Iterable):
        raise TypeMismatchError(f"{where}: expected a sequence of booleans, got {type(value).__name__}")

    items = []
    for idx, item in enumerate(value):
        if isinstance(item, jax.Array) and item.ndim == 0 and item.dtype == jnp.bool_:
            item = item.item()
        if not isinstance(item, bool):
            raise TypeMismatchError(f"{where}[{idx + 1}] is not a boolean: {item!r}")
        items.append(item)
    return jnp.asarray(items, dtype=jnp.bool_)


class SequenceValue:
    """Capabilities shared by Vector and BoolMask."""

    _data: jax.Array

    @property
    def data(self) -> jax.Array:
        return self._data

    def __len__(self) -> int:
        return int(self._data.shape[0])

    def __iter__(self) -> Iterator:
        return iter(self.tolist())

    def tolist(self) -> list:
        return self._data.tolist()

    def _wrap(self, data: jax.Array) -> "SequenceValue":
        raise NotImplementedError

    def _coerce(self, values: object) -> jax.Array:
        raise NotImplementedError

    def _coerce_item(self, value: object) -> object:
        raise NotImplementedError

    def __getitem__(self, index):
        if isinstance(index, BoolMask):
            return filter_except(index)
        if is_scalar(index):
            (pos,) = normalize_positions(index)
            check_positions((pos,), len(self))
            return self._data[pos - 1].item()
        return self._wrap(gather_positions(self._data, normalize_positions(index)))

    def __setitem__(self, index, value) -> None:
        self.set(index, value)

    def set(self, index, value) -> None:
        """Write ``value`` at the selected positions, in place.

        ``index`` is a position, a list of positions or a mask (its true
        positions). A scalar ``value`` goes to every selected position, a
        sequence is assigned positionally and must match the selection size.
        """
        if isinstance(index, BoolMask):
            positions = normalize_positions(index.which().data)
        else:
            positions = normalize_positions(index)
        if is_sequence(value):
            payload = self._coerce(value)
        else:
            payload = self._coerce_item(value)
        self._data = scatter_positions(self._data, positions, payload)

    def concat(self, other) -> "SequenceValue":
        """New sequence of this kind with ``other`` (scalar or sequence) appended."""
        if is_sequence(other):
            tail = self._coerce(other)
        else:
            tail = jnp.asarray([self._coerce_item(other)], dtype=self._data.dtype)
        return self._wrap(jnp.concatenate([self._data, tail]))

    def between(self, start: int, stop: int | None = None, step: int = 1) -> "SequenceValue":
        """Elements at positions ``start..stop`` (inclusive); ``between(n)`` is ``1..n``."""
        positions = seq(start, stop, step)
        return self._wrap(gather_positions(self._data, normalize_positions(positions.data)))

    def __str__(self) -> str:
        return ", ".join(_format_item(item) for item in self.tolist())


def _format_item(item: object) -> str:
    if isinstance(item, bool):
        return "true" if item else "false"
    if isinstance(item, float) and item.is_integer():
        return str(int(item))
    return str(item)


class Vector(SequenceValue):
    """Ordered, mutable, 1-indexed sequence of reals with broadcasting arithmetic."""

    def __init__(self, values: Iterable = ()) -> None:
        self._data = as_numeric_array(values, where="Vector")

    @classmethod
    def from_array(cls, data: jax.Array) -> "Vector":
        out = cls.__new__(cls)
        out._data = data
        return out

    def _wrap(self, data: jax.Array) -> "Vector":
        return Vector.from_array(data)

    def _coerce(self, values: object) -> jax.Array:
        return as_numeric_array(values, where="Vector assignment")

    def _coerce_item(self, value: object) -> object:
        if not is_scalar(value) or (isinstance(value, jax.Array) and jnp.issubdtype(value.dtype, jnp.complexfloating)):
            raise TypeMismatchError(f"Vector assignment: expected a real number, got {type(value).__name__}")
        return value

    def __repr__(self) -> str:
        return f"Vector({self.tolist()!r})"

    # arithmetic

    def _arith(self, op: ArithmeticOp, other, *, reflected: bool = False) -> "Vector":
        if is_sequence(other):
            other = as_numeric_array(other, where=op.value)
        elif not is_scalar(other):
            raise TypeMismatchError(f"{op.value}: cannot combine Vector with {type(other).__name__}")
        if reflected:
            return Vector.from_array(broadcast_arithmetic(op, other, self._data))
        return Vector.from_array(broadcast_arithmetic(op, self._data, other))

    def __add__(self, other) -> "Vector":
        return self._arith(ArithmeticOp.ADD, other)

    def __radd__(self, other) -> "Vector":
        return self._arith(ArithmeticOp.ADD, other, reflected=True)

    def __sub__(self, other) -> "Vector":
        return self._arith(ArithmeticOp.SUB, other)

    def __rsub__(self, other) -> "Vector":
        return self._arith(ArithmeticOp.SUB, other, reflected=True)

    def __mul__(self, other) -> "Vector":
        return self._arith(ArithmeticOp.MUL, other)

    def __rmul__(self, other) -> "Vector":
        return self._arith(ArithmeticOp.MUL, other, reflected=True)

    def __truediv__(self, other) -> "Vector":
        return self._arith(ArithmeticOp.DIV, other)

    def __rtruediv__(self, other) -> "Vector":
        return self._arith(ArithmeticOp.DIV, other, reflected=True)

    def __mod__(self, other) -> "Vector":
        return self._arith(ArithmeticOp.MOD, other)

    def __rmod__(self, other) -> "Vector":
        return self._arith(ArithmeticOp.MOD, other, reflected=True)

    def __pow__(self, other) -> "Vector":
        return self._arith(ArithmeticOp.POW, other)

    def __rpow__(self, other) -> "Vector":
        return self._arith(ArithmeticOp.POW, other, reflected=True)

    def __neg__(self) -> "Vector":
        return Vector.from_array(-self._data)

    # comparison

    def compare(self, op: Comparison | str, other) -> "BoolMask":
        """Mask of ``self[i] op other[i]``; the mask's source is ``self``."""
        comparison = Comparison.parse(op)
        if is_sequence(other):
            other = as_numeric_array(other, where=comparison.value)
        elif not is_scalar(other):
            raise TypeMismatchError(f"{comparison.value}: cannot compare Vector with {type(other).__name__}")
        return BoolMask.from_array(compare_arrays(comparison, self._data, other), source=self)

    def __call__(self, op: Comparison | str, other) -> "BoolMask":
        return self.compare(op, other)

    def _all(self, op: Comparison, other) -> bool:
        if is_sequence(other):
            other = as_numeric_array(other, where=op.value)
            if int(other.shape[0]) != len(self):
                return False
        elif not is_scalar(other):
            raise TypeMismatchError(f"{op.value}: cannot compare Vector with {type(other).__name__}")
        return bool(jnp.all(compare_arrays(op, self._data, other)))

    def all_equals(self, other) -> bool:
        return self._all(Comparison.EQ, other)

    def not_all_equals(self, other) -> bool:
        return not self.all_equals(other)

    def all_less_than(self, other) -> bool:
        return self._all(Comparison.LT, other)

    def all_less_than_or_equal(self, other) -> bool:
        return self._all(Comparison.LE, other)

    def all_more_than(self, other) -> bool:
        return self._all(Comparison.GT, other)

    def all_more_than_or_equal(self, other) -> bool:
        return self._all(Comparison.GE, other)


class BoolMask(SequenceValue):
    """Ordered sequence of booleans, optionally tied to the vector it came from."""

    def __init__(self, values: Iterable = (), source: Vector | None = None) -> None:
        self._data = as_bool_array(values, where="BoolMask")
        self._source_ref = None
        if source is not None:
            self._bind_source(source)

    @classmethod
    def from_array(cls, data: jax.Array, source: Vector | None = None) -> "BoolMask":
        out = cls.__new__(cls)
        out._data = data
        out._source_ref = None
        if source is not None:
            out._bind_source(source)
        return out

    def _bind_source(self, source: Vector) -> None:
        if not isinstance(source, Vector):
            raise TypeMismatchError(f"mask source must be a Vector, got {type(source).__name__}")
        if len(source) != len(self):
            raise LengthMismatchError(f"mask of length {len(self)} cannot refer to a vector of length {len(source)}")
        self._source_ref = weakref.ref(source)

    @property
    def source(self) -> Vector | None:
        if self._source_ref is None:
            return None
        return self._source_ref()

    def _wrap(self, data: jax.Array) -> "BoolMask":
        return BoolMask.from_array(data)

    def _coerce(self, values: object) -> jax.Array:
        return as_bool_array(values, where="BoolMask assignment")

    def _coerce_item(self, value: object) -> object:
        if isinstance(value, jax.Array) and value.ndim == 0 and value.dtype == jnp.bool_:
            return value
        if not isinstance(value, bool):
            raise TypeMismatchError(f"BoolMask assignment: expected a boolean, got {type(value).__name__}")
        return value

    def __repr__(self) -> str:
        return f"BoolMask({self.tolist()!r})"

    # logical algebra

    def negate(self) -> "BoolMask":
        return BoolMask.from_array(jnp.logical_not(self._data), source=_pick_source(len(self), self.source))

    def __invert__(self) -> "BoolMask":
        return self.negate()

    def _logical(self, op: LogicalOp, other, *, reflected: bool = False) -> "BoolMask":
        other_source = other.source if isinstance(other, BoolMask) else None
        if is_sequence(other):
            other = as_bool_array(other, where=op.value)
        elif not (isinstance(other, bool) or (isinstance(other, jax.Array) and other.ndim == 0)):
            raise TypeMismatchError(f"{op.value}: cannot combine BoolMask with {type(other).__name__}")
        if reflected:
            data = broadcast_logical(op, other, self._data)
        else:
            data = broadcast_logical(op, self._data, other)
        source = _pick_source(int(data.shape[0]), self.source, other_source)
        return BoolMask.from_array(data, source=source)

    def or_(self, other) -> "BoolMask":
        return self._logical(LogicalOp.OR, other)

    def and_(self, other) -> "BoolMask":
        return self._logical(LogicalOp.AND, other)

    def __or__(self, other) -> "BoolMask":
        return self._logical(LogicalOp.OR, other)

    def __ror__(self, other) -> "BoolMask":
        return self._logical(LogicalOp.OR, other, reflected=True)

    def __and__(self, other) -> "BoolMask":
        return self._logical(LogicalOp.AND, other)

    def __rand__(self, other) -> "BoolMask":
        return self._logical(LogicalOp.AND, other, reflected=True)

    # positions and reductions

    def which(self) -> Vector:
        return which(self)

    def which_not(self) -> Vector:
        return which_not(self)

    def filter_except(self) -> Vector:
        return filter_except(self)

    def filter(self) -> Vector:
        return filter(self)

    def any(self) -> bool:
        return bool(jnp.any(self._data))

    def all(self) -> bool:
        return bool(jnp.all(self._data))

    def count(self) -> int:
        return int(jnp.sum(self._data))


def _pick_source(length: int, *candidates: Vector | None) -> Vector | None:
    for candidate in candidates:
        if candidate is not None and len(candidate) == length:
            return candidate
    return None


# construction


def vector(*values) -> Vector:
    return Vector(values)


def vector_of(sequence) -> Vector:
    """``sequence`` as a Vector; an existing Vector is returned unchanged."""
    if isinstance(sequence, Vector):
        return sequence
    return Vector(sequence)


def bool_vector(*values) -> BoolMask:
    return BoolMask(values)


def bool_vector_of(sequence) -> BoolMask:
    if isinstance(sequence, BoolMask):
        return sequence
    return BoolMask(sequence)


def seq(start: float, stop: float | None = None, step: float = 1) -> Vector:
    """Inclusive arithmetic progression; ``seq(n)`` is ``1..n``."""
    if stop is None:
        start, stop = 1, start
    if step == 0:
        raise InvalidArgumentError("seq: step must be non-zero")
    count = math.floor((stop - start) / step) + 1
    if count <= 0:
        return Vector.from_array(jnp.zeros((0,), dtype=float_dtype()))
    return Vector.from_array(start + step * jnp.arange(count, dtype=float_dtype()))


def replicate(sequence, times: float) -> Vector:
    """``sequence`` repeated ``floor(times)`` times, e.g. ``[1, 4]`` x2 -> ``[1, 4, 1, 4]``."""
    data = as_bool_array(sequence).astype(float_dtype()) if isinstance(sequence, BoolMask) else as_numeric_array(sequence)
    return Vector.from_array(jnp.tile(data, max(0, math.floor(times))))


def concat(left, right) -> SequenceValue:
    """``left`` followed by ``right``; the result takes the kind of the sequence on the left."""
    if isinstance(left, SequenceValue):
        return left.concat(right)
    if isinstance(right, BoolMask):
        return bool_vector_of([left] if not is_sequence(left) else left).concat(right)
    return vector_of([left] if not is_sequence(left) else left).concat(right)


# positions and filters


def _mask_array(mask) -> jax.Array:
    if isinstance(mask, BoolMask):
        return mask.data
    return as_bool_array(mask, where="which")


def which(mask) -> Vector:
    """1-based positions of the true entries."""
    positions = jnp.nonzero(_mask_array(mask))[0] + 1
    return Vector.from_array(positions.astype(float_dtype()))


def which_not(mask) -> Vector:
    """1-based positions of the false entries."""
    positions = jnp.nonzero(jnp.logical_not(_mask_array(mask)))[0] + 1
    return Vector.from_array(positions.astype(float_dtype()))


def which_max(sequence) -> int:
    """1-based position of the first maximum, 0 for an empty sequence."""
    data = as_numeric_array(sequence, where="which_max")
    if data.shape[0] == 0:
        return 0
    return int(jnp.argmax(data)) + 1


def which_min(sequence) -> int:
    data = as_numeric_array(sequence, where="which_min")
    if data.shape[0] == 0:
        return 0
    return int(jnp.argmin(data)) + 1


def _require_source(mask: BoolMask, where: str) -> Vector:
    source = mask.source if isinstance(mask, BoolMask) else None
    if source is None:
        raise MissingSourceReferenceError(f"{where}: mask has no source vector to read from")
    return source


def filter_except(mask: BoolMask) -> Vector:
    """Values of ``mask.source`` where the mask is true.

    Order matters: ``filter_except(a("<", b))`` reads ``a``, while
    ``filter_except(b(">", a))`` reads ``b``.
    """
    source = _require_source(mask, "filter_except")
    return Vector.from_array(gather_positions(source.data, normalize_positions(which(mask).data)))


def filter(mask: BoolMask) -> Vector:  # noqa: A001
    """Values of ``mask.source`` where the mask is false."""
    source = _require_source(mask, "filter")
    return Vector.from_array(gather_positions(source.data, normalize_positions(which_not(mask).data)))
