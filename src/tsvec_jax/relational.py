"""Relational comparison of a float array against a scalar or another array."""

from __future__ import annotations

import warnings
from enum import Enum
from typing import Callable, Final

import jax
import jax.numpy as jnp

from . import config
from .errors import InvalidOperatorError, LengthMismatchError, LengthMismatchWarning


class Comparison(str, Enum):
    EQ = "=="
    NE = "~="
    LT = "<"
    LE = "<="
    GT = ">"
    GE = ">="

    @classmethod
    def parse(cls, token: object) -> "Comparison":
        if isinstance(token, Comparison):
            return token
        if isinstance(token, str):
            found = _TOKEN_ALIASES.get(token.strip())
            if found is not None:
                return found
        raise InvalidOperatorError(token=token, expected=tuple(_TOKEN_ALIASES))


_TOKEN_ALIASES: Final[dict[str, Comparison]] = {
    "==": Comparison.EQ,
    "~=": Comparison.NE,
    "!=": Comparison.NE,
    "≠": Comparison.NE,
    "<": Comparison.LT,
    "<=": Comparison.LE,
    "≤": Comparison.LE,
    ">": Comparison.GT,
    ">=": Comparison.GE,
    "≥": Comparison.GE,
}

_KERNELS: Final[dict[Comparison, Callable[[jax.Array, object], jax.Array]]] = {
    Comparison.EQ: jnp.equal,
    Comparison.NE: jnp.not_equal,
    Comparison.LT: jnp.less,
    Comparison.LE: jnp.less_equal,
    Comparison.GT: jnp.greater,
    Comparison.GE: jnp.greater_equal,
}


def compare_arrays(op: Comparison, left: jax.Array, right) -> jax.Array:
    """Boolean array of ``left[i] op right[i]`` (or ``op right`` for a scalar).

    The result always has ``len(left)`` entries. Against a shorter array the
    unmatched tail of ``left`` compares against an absent element: only
    ``~=`` holds there.
    """
    kernel = _KERNELS[op]
    if not isinstance(right, jax.Array) or right.ndim == 0:
        return kernel(left, right)

    left_len = int(left.shape[0])
    right_len = int(right.shape[0])
    if left_len == right_len:
        return kernel(left, right)

    message = f"{op.value}: compared arrays of different lengths ({left_len} vs {right_len})"
    if config.STRICT_COMPARE:
        raise LengthMismatchError(message)
    warnings.warn(message, LengthMismatchWarning, stacklevel=4)

    common = min(left_len, right_len)
    head = kernel(left[:common], right[:common])
    tail = jnp.full((left_len - common,), op is Comparison.NE, dtype=jnp.bool_)
    return jnp.concatenate([head, tail])
