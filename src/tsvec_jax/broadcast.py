"""Elementwise binary kernels with fallback padding for mismatched lengths.

Operands are Python scalars or 1-d ``jax.Array`` values; wrapping into
``Vector``/``BoolMask`` happens in :mod:`tsvec_jax.values`.

When two arrays of different length meet, the result follows the longer one
and the missing positions of the shorter side are filled with an operator
and side specific fallback, so ``[1, 2, 3] + [10, 20]`` is ``[11, 22, 3]``.
"""

from __future__ import annotations

import numbers
import operator
import warnings
from dataclasses import dataclass
from enum import Enum
from typing import Callable, Final

import jax
import jax.numpy as jnp

from .errors import LengthMismatchWarning, TypeMismatchError


class ArithmeticOp(str, Enum):
    ADD = "add"
    SUB = "sub"
    MUL = "mul"
    DIV = "div"
    MOD = "mod"
    POW = "pow"


class LogicalOp(str, Enum):
    OR = "or"
    AND = "and"


@dataclass(frozen=True)
class OpRule:
    symbol: str
    kernel: Callable[[object, object], jax.Array]
    scalar_kernel: Callable[[object, object], object]
    right_fallback: object
    left_fallback: object


_ARITHMETIC_RULES: Final[dict[ArithmeticOp, OpRule]] = {
    ArithmeticOp.ADD: OpRule("+", jnp.add, operator.add, 0.0, 0.0),
    ArithmeticOp.SUB: OpRule("-", jnp.subtract, operator.sub, 0.0, 0.0),
    ArithmeticOp.MUL: OpRule("*", jnp.multiply, operator.mul, 1.0, 1.0),
    ArithmeticOp.DIV: OpRule("/", jnp.true_divide, operator.truediv, 1.0, 0.0),
    ArithmeticOp.MOD: OpRule("%", jnp.mod, operator.mod, 1.0, 0.0),
    ArithmeticOp.POW: OpRule("**", jnp.power, operator.pow, 0.0, 1.0),
}

_LOGICAL_RULES: Final[dict[LogicalOp, OpRule]] = {
    LogicalOp.OR: OpRule("|", jnp.logical_or, lambda a, b: bool(a) or bool(b), False, False),
    LogicalOp.AND: OpRule("&", jnp.logical_and, lambda a, b: bool(a) and bool(b), False, False),
}


def arithmetic_rule(op: ArithmeticOp) -> OpRule:
    return _ARITHMETIC_RULES[op]


def logical_rule(op: LogicalOp) -> OpRule:
    return _LOGICAL_RULES[op]


def _is_numeric_scalar(value: object) -> bool:
    if isinstance(value, jax.Array):
        return value.ndim == 0 and not jnp.issubdtype(value.dtype, jnp.complexfloating)
    return isinstance(value, numbers.Real)


def _is_bool_scalar(value: object) -> bool:
    if isinstance(value, jax.Array):
        return value.ndim == 0 and value.dtype == jnp.bool_
    return isinstance(value, bool)


def _is_array(value: object) -> bool:
    return isinstance(value, jax.Array) and value.ndim == 1


def pad_to(arr: jax.Array, length: int, fill: object) -> jax.Array:
    missing = length - int(arr.shape[0])
    if missing <= 0:
        return arr
    return jnp.concatenate([arr, jnp.full((missing,), fill, dtype=arr.dtype)])


def _warn_length_mismatch(symbol: str, left_len: int, right_len: int) -> None:
    warnings.warn(
        f"{symbol}: operands have different lengths ({left_len} vs {right_len}); "
        "missing positions use the fallback value",
        LengthMismatchWarning,
        stacklevel=6,
    )


def _apply(rule: OpRule, left, right, is_scalar: Callable[[object], bool], kind: str):
    left_scalar = is_scalar(left)
    right_scalar = is_scalar(right)
    if left_scalar and right_scalar:
        return rule.scalar_kernel(left, right)
    if left_scalar and _is_array(right):
        return rule.kernel(left, right)
    if right_scalar and _is_array(left):
        return rule.kernel(left, right)
    if not (_is_array(left) and _is_array(right)):
        raise TypeMismatchError(
            f"{rule.symbol}: cannot combine {type(left).__name__} with {type(right).__name__} "
            f"({kind} operands required)"
        )

    left_len = int(left.shape[0])
    right_len = int(right.shape[0])
    if left_len != right_len:
        _warn_length_mismatch(rule.symbol, left_len, right_len)
        length = max(left_len, right_len)
        left = pad_to(left, length, rule.left_fallback)
        right = pad_to(right, length, rule.right_fallback)
    return rule.kernel(left, right)


def broadcast_arithmetic(op: ArithmeticOp, left, right):
    """Apply ``op`` to scalars and/or 1-d float arrays.

    Returns a Python scalar when both sides are scalars, otherwise a new
    1-d array whose length is the longer operand's.
    """
    return _apply(_ARITHMETIC_RULES[op], left, right, _is_numeric_scalar, "numeric")


def broadcast_logical(op: LogicalOp, left, right):
    """Boolean counterpart of :func:`broadcast_arithmetic`; padding is ``False``."""
    rule = _LOGICAL_RULES[op]
    for side in (left, right):
        if _is_array(side) and side.dtype != jnp.bool_:
            raise TypeMismatchError(f"{rule.symbol}: logical operands must be boolean, got {side.dtype}")
    return _apply(rule, left, right, _is_bool_scalar, "boolean")
