"""Weighted random sampling from a sequence.

Randomness comes from an injected :class:`UniformSource`; the default
:class:`JaxUniformSource` splits a ``jax.random`` key for every draw.
"""

from __future__ import annotations

import bisect
import itertools
import logging
import math
import time
import warnings
from typing import Protocol

import jax

from . import config
from .errors import InvalidArgumentError, ProbabilityTableWarning
from .values import BoolMask, Vector, float_dtype, is_sequence, items_of

logger = logging.getLogger(__name__)


class UniformSource(Protocol):
    def next(self) -> float:
        """Uniform random number in ``[0, 1)``."""
        ...


class JaxUniformSource:
    """Uniform draws from a ``jax.random`` key chain."""

    def __init__(self, seed: int | None = None) -> None:
        if seed is None:
            seed = config.SAMPLE_SEED
        if seed is None:
            seed = time.time_ns() & 0x7FFF_FFFF
        self.seed = seed
        self._key = jax.random.PRNGKey(seed)

    def next(self) -> float:
        self._key, subkey = jax.random.split(self._key)
        return float(jax.random.uniform(subkey, dtype=float_dtype()))


def _checked_weights(weights, population_size: int, size: int) -> list[float]:
    if weights is None:
        table = [1 / size] * size if size > 0 else []
    elif is_sequence(weights):
        table = [float(w) for w in items_of(weights)]
    else:
        raise InvalidArgumentError(f"sample: weights must be a sequence, got {type(weights).__name__}")

    for idx, weight in enumerate(table, start=1):
        if weight < 0 or math.isnan(weight):
            raise InvalidArgumentError(f"sample: weight {idx} is {weight}; weights must be non-negative")

    if abs(1 - sum(table)) > config.PROBABILITY_TOLERANCE or len(table) != population_size:
        warnings.warn(
            "sample: improper probability table; some values may have no chance of being picked",
            ProbabilityTableWarning,
            stacklevel=3,
        )
    return table


def _fallback_index(remaining: dict[int, float]) -> int | None:
    # u landed above a cumulative total that only misses 1 by rounding
    if abs(1 - sum(remaining.values())) > config.PROBABILITY_TOLERANCE:
        return None
    for idx in reversed(list(remaining)):
        if remaining[idx] > 0:
            return idx
    return None


def _draw_with_replacement(items: list, table: list[float], size: int, source: UniformSource) -> list:
    cumulative = list(itertools.accumulate(table))
    out = []
    for _ in range(size):
        chosen = bisect.bisect_right(cumulative, source.next())
        if chosen >= len(cumulative):
            chosen = _fallback_index(dict(enumerate(table)))
        if chosen is not None and chosen < len(items):
            out.append(items[chosen])
    return out


def _draw_without_replacement(items: list, table: list[float], size: int, source: UniformSource) -> list:
    remaining = dict(enumerate(table))
    out = []
    for _ in range(size):
        u = source.next()
        chosen = None
        running = 0.0
        for idx, weight in remaining.items():
            running += weight
            if u < running and weight > 0:
                chosen = idx
                break
        if chosen is None:
            chosen = _fallback_index(remaining)
        if chosen is None:
            continue

        if chosen < len(items):
            out.append(items[chosen])
        left_over = 1 - remaining.pop(chosen)
        if left_over <= 0:
            logger.debug("sample: probability mass exhausted after %d draws", len(out))
            break
        remaining = {idx: weight / left_over for idx, weight in remaining.items()}
    return out


def sample(population, size: float | None = None, replace: bool = True, weights=None, *, source: UniformSource | None = None):
    """Random sample of ``population``.

    ``weights`` is a probability per element (default: uniform ``1/size``).
    Without replacement the size is capped at the population length and the
    remaining weights are renormalized after every pick; this costs
    O(size * len(population)).

    The result may be shorter than ``size`` when the weights leave some draws
    without a match.
    """
    if not is_sequence(population):
        raise InvalidArgumentError(f"sample: population must be a sequence, got {type(population).__name__}")
    items = items_of(population)
    size = len(items) if size is None else math.floor(size)
    if size < 0:
        raise InvalidArgumentError(f"sample: size must be non-negative, got {size}")
    if size == 0:
        return BoolMask() if isinstance(population, BoolMask) else Vector()
    table = _checked_weights(weights, len(items), size)
    if source is None:
        source = JaxUniformSource()

    if replace:
        picked = _draw_with_replacement(items, table, size, source)
    else:
        if size > len(items):
            logger.debug("sample: size %d capped at population length %d", size, len(items))
        picked = _draw_without_replacement(items, table, min(len(items), size), source)

    if isinstance(population, BoolMask):
        return BoolMask(picked)
    return Vector(picked)
