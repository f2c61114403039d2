"""Lift scalar functions over sequences.

``forall(f, a, 4, b)`` calls ``f`` once per position of the sequences ``a``
and ``b`` (which must share a length) with the scalar ``4`` repeated, and
collects the results in a Vector. The registry :data:`LIFTED` holds the
lifted forms of the usual scalar math so ``lifting.sin(2 * v) ** 3`` works
on vectors and numbers alike.
"""

from __future__ import annotations

import functools
import math
from typing import Callable, Final

from .errors import InvalidArgumentError, LengthMismatchError
from .values import Vector, is_sequence, items_of

_DERIVATIVE_STEP: Final[float] = 1e-3


def forall(func: Callable, *args):
    """Apply ``func`` positionwise over every sequence argument.

    Without any sequence argument this is just ``func(*args)``.
    """
    seq_slots = [i for i, arg in enumerate(args) if is_sequence(arg)]
    if not seq_slots:
        return func(*args)

    columns = {i: items_of(args[i]) for i in seq_slots}
    lengths = sorted({len(column) for column in columns.values()})
    if len(lengths) != 1:
        raise LengthMismatchError(f"forall: sequences of different lengths {lengths} are not accepted")

    inputs = list(args)
    out = []
    for row in range(lengths[0]):
        for i in seq_slots:
            inputs[i] = columns[i][row]
        out.append(func(*inputs))
    return Vector(out)


def lift(func: Callable) -> Callable:
    """``func`` wrapped so that it accepts sequences via :func:`forall`."""

    @functools.wraps(func)
    def lifted_func(*args):
        return forall(func, *args)

    return lifted_func


def _sign(x: float) -> int:
    if x > 0:
        return 1
    if x < 0:
        return -1
    return 0


def _clamp(x: float, low: float, high: float) -> float:
    if low > high:
        raise InvalidArgumentError(f"clamp: lower bound {low} exceeds upper bound {high}")
    return min(max(x, low), high)


_SCALAR_FUNCTIONS: Final[dict[str, Callable]] = {
    "abs": abs,
    "acos": math.acos,
    "asin": math.asin,
    "atan": math.atan,
    "atan2": math.atan2,
    "ceil": math.ceil,
    "clamp": _clamp,
    "cos": math.cos,
    "cosh": math.cosh,
    "degrees": math.degrees,
    "exp": math.exp,
    "floor": math.floor,
    "fmod": math.fmod,
    "log": math.log,
    "log10": math.log10,
    "max": max,
    "min": min,
    "pow": math.pow,
    "radians": math.radians,
    "round": round,
    "sign": _sign,
    "sin": math.sin,
    "sinh": math.sinh,
    "sqrt": math.sqrt,
    "tan": math.tan,
    "tanh": math.tanh,
}

LIFTED: Final[dict[str, Callable]] = {name: lift(func) for name, func in _SCALAR_FUNCTIONS.items()}


def lifted(name: str) -> Callable:
    func = LIFTED.get(name)
    if func is None:
        raise InvalidArgumentError(f"{name} is not a registered scalar function")
    return func


def register_scalar_function(name: str, func: Callable) -> Callable:
    """Lift ``func`` and make it available as ``lifted(name)``."""
    if not callable(func):
        raise InvalidArgumentError(f"register_scalar_function: {name} is not callable")
    LIFTED[name] = lift(func)
    return LIFTED[name]


def __getattr__(name: str) -> Callable:
    try:
        return LIFTED[name]
    except KeyError:
        raise AttributeError(f"module {__name__!r} has no attribute {name!r}") from None


def derivative(func: Callable[[float], float], sub_values=None, times: int = 1):
    """Central-difference derivative of ``func``.

    Returns the derivative function, or its values at ``sub_values`` when
    given. ``times`` repeats the differentiation; accuracy drops with each
    repetition.
    """
    if times < 1:
        raise InvalidArgumentError(f"derivative: times must be at least 1, got {times}")

    def deriv(x):
        return 0.5 * (func(x + _DERIVATIVE_STEP) - func(x - _DERIVATIVE_STEP)) / _DERIVATIVE_STEP

    if times > 1:
        return derivative(deriv, sub_values, times - 1)
    if sub_values is not None:
        return forall(deriv, sub_values)
    return deriv


def sum_all(*args) -> float:
    """Sum of a mix of numbers and sequences."""
    total = 0.0
    for arg in args:
        if is_sequence(arg):
            total += sum(items_of(arg))
        else:
            total += arg
    return total
