"""Error classes for bigdecimalmath.

Every arithmetic failure is a BigDecimalMathError. It derives from the
builtin ArithmeticError, so callers can catch either.
"""

from __future__ import annotations

__all__ = [
    "BigDecimalMathError",
    "NegativeArgumentError",
    "NonPositiveRootError",
    "InvalidPowerError",
    "DivisionByZero",
    "FloatRangeError",
    "ZeroApproximationError",
    "RootDidNotConverge",
]


class BigDecimalMathError(ArithmeticError):
    """Base error for decimal math operations.

    Attributes:
        message: Human-readable description of the failure
    """

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class NegativeArgumentError(BigDecimalMathError):
    """Root of a negative number was requested."""

    pass


class NonPositiveRootError(BigDecimalMathError):
    """Root index must be a positive integer."""

    pass


class InvalidPowerError(BigDecimalMathError):
    """Integer power exponent is outside 0..999_999_999."""

    pass


class DivisionByZero(BigDecimalMathError):
    """Division by zero."""

    pass


class FloatRangeError(BigDecimalMathError):
    """Value has no finite, non-zero floating-point approximation."""

    pass


class ZeroApproximationError(BigDecimalMathError):
    """Root iteration reached an approximation of exactly zero."""

    pass


class RootDidNotConverge(BigDecimalMathError):
    """Root iteration did not converge within the iteration budget."""

    pass
