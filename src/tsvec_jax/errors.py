"""Structured error types and advisory warning categories."""

from __future__ import annotations

from dataclasses import dataclass


class TSVecError(Exception):
    """Base class for structured tsvec-jax errors."""


class TSVecRuntimeError(TSVecError):
    """Generic failure of a vector or statistics operation."""


class EmptyInputError(TSVecRuntimeError, ValueError):
    """Operation needs at least one element."""


class DegenerateInputError(TSVecRuntimeError, ZeroDivisionError):
    """Input is too small for the estimator (e.g. variance of a singleton)."""


class LengthMismatchError(TSVecRuntimeError, ValueError):
    """Positional correspondence is mandatory and the lengths differ."""


class TypeMismatchError(TSVecRuntimeError, TypeError):
    """Operand kind is not accepted by the operator."""


@dataclass(frozen=True)
class InvalidOperatorError(TSVecRuntimeError, ValueError):
    """Relational token is not one of the known comparison operators."""

    token: object
    expected: tuple[str, ...] = ()

    def __str__(self) -> str:
        expected = ""
        if self.expected:
            expected = f"; expected one of {', '.join(self.expected)}"
        return f"unknown comparison operator {self.token!r}{expected}"


class MissingSourceReferenceError(TSVecRuntimeError, ValueError):
    """Mask carries no source vector to filter from."""


class IndexOutOfRangeError(TSVecRuntimeError, IndexError):
    """Position outside 1..n."""


class InvalidArgumentError(TSVecRuntimeError, ValueError):
    """Argument value outside the operation's domain."""


class TSVecWarning(UserWarning):
    """Base category for advisory (non-fatal) conditions."""


class LengthMismatchWarning(TSVecWarning):
    """Broadcasting proceeded over operands of different lengths."""


class ProbabilityTableWarning(TSVecWarning):
    """Sampling weights do not sum to 1 or do not match the population."""
