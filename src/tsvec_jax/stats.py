"""Descriptive and time-series statistics built on Vector algebra."""

from __future__ import annotations

import logging
import math
import numbers
from typing import Final, NamedTuple

import jax.numpy as jnp

from .errors import DegenerateInputError, EmptyInputError, InvalidArgumentError
from .lifting import lifted, sum_all
from .values import Vector, as_numeric_array, seq, which

logger = logging.getLogger(__name__)

NO_SEASONALITY: Final[int] = 0


def _vector(values, where: str) -> Vector:
    if isinstance(values, Vector):
        return values
    return Vector.from_array(as_numeric_array(values, where=where))


def mean(values) -> float:
    x = _vector(values, "mean")
    if len(x) == 0:
        raise EmptyInputError("mean: empty sequence")
    return float(jnp.sum(x.data)) / len(x)


expectation = mean


def variance(values) -> float:
    """Sample variance, ``(E[X^2] - E[X]^2) * n / (n - 1)``."""
    x = _vector(values, "variance")
    n = len(x)
    if n == 0:
        raise EmptyInputError("variance: empty sequence")
    if n == 1:
        raise DegenerateInputError("variance: a single value has no sample variance")
    return (mean(x**2) - mean(x) ** 2) * n / (n - 1)


def diff(values, order: int = 1) -> Vector:
    """``order``-th difference; the first one is ``x[2:n] - x[1:n-1]``."""
    x = _vector(values, "diff")
    if not isinstance(order, numbers.Real) or isinstance(order, bool) or not math.isfinite(order):
        raise InvalidArgumentError(f"diff: order must be a number, got {order!r}")
    order = math.floor(order)
    if order < 1:
        raise InvalidArgumentError(f"diff: order must be at least 1, got {order}")
    if order >= len(x):
        raise InvalidArgumentError(f"diff: order {order} needs more than {len(x)} values")
    for _ in range(order):
        n = len(x)
        x = x[seq(2, n)] - x[seq(1, n - 1)]
    return x


def median(values) -> float:
    x = _vector(values, "median")
    n = len(x)
    if n == 0:
        raise EmptyInputError("median: empty sequence")
    ordered = jnp.sort(x.data)
    if n % 2 == 0:
        return float(ordered[n // 2 - 1] + ordered[n // 2]) / 2
    return float(ordered[n // 2])


def autocorrelation(values) -> Vector:
    """Autocorrelation for lags ``0..n-1``.

    Lag ``k`` sums ``(x[t] - m) * (x[t-k] - m)`` and divides by ``n - k/2``
    instead of the textbook ``n - k``; the whole series is then scaled by the
    sample variance.
    """
    x = _vector(values, "autocorrelation")
    n = len(x)
    centered = (x - mean(x)).data
    lagged = jnp.correlate(centered, centered, mode="full")[n - 1 :]
    denominators = n - 0.5 * jnp.arange(n, dtype=centered.dtype)
    return Vector.from_array(lagged / denominators) / variance(x)


def estimate_seasonality(values) -> int:
    """Smallest lag with a positive autocorrelation crest, or ``NO_SEASONALITY``."""
    ac = autocorrelation(values)
    if len(ac) < 3:
        logger.debug("estimate_seasonality: %d values are too few to find a crest", len(ac))
        return NO_SEASONALITY

    # crest at lag k: slope sign falls between ac[k] and ac[k+1] (1-based)
    crests = which(diff(lifted("sign")(diff(ac)))("<", 0))
    if len(crests) == 0:
        logger.debug("estimate_seasonality: no pattern of seasonality found")
        return NO_SEASONALITY
    positive = crests[which(ac[crests + 1](">", 0))]
    if len(positive) == 0:
        logger.debug("estimate_seasonality: no crest with positive correlation")
        return NO_SEASONALITY
    return int(positive[1])


class LinearFit(NamedTuple):
    """``y = alpha + beta * x``."""

    alpha: float
    beta: float

    def predict(self, x):
        return self.alpha + self.beta * x


def linear_regression(x_values, y_values) -> LinearFit:
    """Ordinary least squares line through ``(x, y)``; slope is 0 when x is constant."""
    x = _vector(x_values, "linear_regression")
    y = _vector(y_values, "linear_regression")
    x_mean, y_mean = mean(x), mean(y)
    dx = x - x_mean
    denominator = sum_all(dx**2)
    beta = sum_all(dx * (y - y_mean)) / denominator if denominator != 0 else 0.0
    return LinearFit(alpha=y_mean - beta * x_mean, beta=beta)


def guess_pattern(values, extra_count: float) -> Vector:
    """Extend ``values`` by ``extra_count`` points from a trend plus seasonal model.

    A line is fitted and removed, the period of the residual is estimated and
    every position (historical and new) gets the mean residual of its phase
    plus the line. With no period the original values are returned followed
    by the extended line. Works best on data with a constant period.
    """
    extra = math.floor(extra_count)
    if extra < 1:
        raise InvalidArgumentError(f"guess_pattern: extra_count should be at least 1, got {extra_count}")
    y = _vector(values, "guess_pattern")
    n = len(y)
    x = seq(n)
    fit = linear_regression(x, y)
    residual = y - fit.predict(x)

    period = estimate_seasonality(residual)
    if period == NO_SEASONALITY:
        return y.concat(fit.predict(seq(n + 1, n + extra)))

    seasonal = Vector.from_array(jnp.zeros((n + extra,), dtype=residual.data.dtype))
    for phase in range(1, period + 1):
        phase_mean = mean(residual[seq(phase, n, period)])
        seasonal[seq(phase, n + extra, period)] = phase_mean
    return seasonal + fit.predict(seq(n + extra))
