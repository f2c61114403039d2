"""1-based position handling for gather and scatter on 1-d arrays."""

from __future__ import annotations

import math
import numbers

import jax
import jax.numpy as jnp

from .errors import IndexOutOfRangeError, LengthMismatchError, TypeMismatchError


def _as_position(raw: object) -> int:
    if isinstance(raw, jax.Array):
        if raw.ndim != 0:
            raise TypeMismatchError(f"position must be a scalar, got shape {tuple(raw.shape)}")
        raw = raw.item()
    if isinstance(raw, numbers.Integral):
        return int(raw)
    if isinstance(raw, numbers.Real) and math.isfinite(raw) and float(raw).is_integer():
        return int(raw)
    raise TypeMismatchError(f"position must be an integral number, got {raw!r}")


def normalize_positions(index: object) -> tuple[int, ...]:
    """Integral scalar or iterable of integral values -> tuple of ints."""
    if isinstance(index, jax.Array):
        if index.ndim == 0:
            return (_as_position(index),)
        if index.ndim != 1:
            raise TypeMismatchError(f"index array must be 1-d, got shape {tuple(index.shape)}")
        return tuple(_as_position(item) for item in index.tolist())
    if isinstance(index, (numbers.Real, str, bytes)) or not hasattr(index, "__iter__"):
        return (_as_position(index),)
    return tuple(_as_position(item) for item in index)


def check_positions(positions: tuple[int, ...], length: int) -> None:
    for pos in positions:
        if pos < 1 or pos > length:
            raise IndexOutOfRangeError(f"position {pos} outside 1..{length}")


def gather_positions(data: jax.Array, positions: tuple[int, ...]) -> jax.Array:
    """New array ``[data[p] for p in positions]`` (1-based)."""
    check_positions(positions, int(data.shape[0]))
    if not positions:
        return jnp.zeros((0,), dtype=data.dtype)
    return data[jnp.asarray(positions, dtype=jnp.int32) - 1]


def scatter_positions(data: jax.Array, positions: tuple[int, ...], values) -> jax.Array:
    """Array with ``values`` written at ``positions``.

    ``values`` is a scalar (broadcast) or a 1-d array with one entry per
    position. Writing at ``len + 1`` appends, so the result never has holes;
    repeated positions keep the last write.
    """
    if isinstance(values, jax.Array) and values.ndim == 1:
        if int(values.shape[0]) != len(positions):
            raise LengthMismatchError(
                f"assignment of {int(values.shape[0])} values to {len(positions)} positions"
            )
        items = values.tolist()
    else:
        items = [values] * len(positions)
    if not positions:
        return data

    length = int(data.shape[0])
    updates: dict[int, object] = {}
    for pos, item in zip(positions, items, strict=True):
        if pos == length + 1:
            length += 1
        elif pos < 1 or pos > length:
            raise IndexOutOfRangeError(f"position {pos} outside 1..{length + 1}")
        updates[pos] = item

    grown = int(data.shape[0])
    if length > grown:
        data = jnp.concatenate([data, jnp.zeros((length - grown,), dtype=data.dtype)])
    targets = jnp.asarray(list(updates), dtype=jnp.int32) - 1
    return data.at[targets].set(jnp.asarray(list(updates.values()), dtype=data.dtype))
