"""Exact arbitrary-precision decimal values.

A BigDecimal is the pair (int_val, scale) and represents
int_val * 10^(-scale). The pair is never normalised behind the caller's
back: 1.50 and 1.5 compare equal but keep their own scales, and the scale
decides the unit in the last place. Scale may be negative.

Addition, subtraction, multiplication and integer powers are exact.
Division and rounding take a MathContext (significant digits + rounding
mode) and go through the divide-and-round primitives.

Digit counting, rescaling and division draw their powers of ten from the
shared DEFAULT_TEN_POWERS cache. Only divide_and_round_by_ten_power accepts
an injected TenPowers.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from decimal import ROUND_DOWN, Decimal, InvalidOperation
from typing import Union

from bigdecimalmath.errors import DivisionByZero, FloatRangeError, InvalidPowerError
from bigdecimalmath.rounding import (
    DEFAULT_ROUNDING,
    check_rounding,
    divide_and_round,
    divide_and_round_by_ten_power,
)
from bigdecimalmath.ten_powers import power_of_ten

__all__ = [
    "BigDecimal",
    "MathContext",
    "DIVISION_CONTEXT",
    "MAX_POWER_EXPONENT",
]

# Largest exponent accepted by BigDecimal.pow
MAX_POWER_EXPONENT = 999_999_999


@dataclass(frozen=True)
class MathContext:
    """Target precision for an inexact operation.

    Attributes:
        precision: Number of significant digits (must be positive)
        rounding: Rounding mode, one of the decimal module constants
    """

    precision: int
    rounding: str = DEFAULT_ROUNDING

    def __post_init__(self) -> None:
        if self.precision <= 0:
            raise ValueError(f"MathContext precision must be positive, got {self.precision}")
        check_rounding(self.rounding)


# Precision used by the / operator
DIVISION_CONTEXT = MathContext(100)


def _digit_length(value: int) -> int:
    """Number of decimal digits in |value|; zero has one digit.

    Estimates from the bit length (646456993 / 2^31 ~ log10(2)) and corrects
    by a single comparison, so no int -> str conversion is needed.
    """
    magnitude = abs(value)
    if magnitude == 0:
        return 1
    r = ((magnitude.bit_length() + 1) * 646456993) >> 31
    return r if magnitude < power_of_ten(r) else r + 1


Operand = Union["BigDecimal", int, Decimal]


class BigDecimal:
    """Immutable decimal number int_val * 10^(-scale).

    Example: BigDecimal(15, 1) is 1.5 and BigDecimal(150, 2) is 1.50;
    they are equal but have different precision and ulp.
    """

    __slots__ = ("_int_val", "_scale")
    _int_val: int
    _scale: int

    def __init__(self, int_val: int = 0, scale: int = 0) -> None:
        """Create a BigDecimal from an unscaled integer and a scale.

        Raises:
            TypeError: If int_val or scale is not an int
        """
        if isinstance(int_val, bool) or not isinstance(int_val, int):
            raise TypeError(f"BigDecimal requires int unscaled value, got {type(int_val).__name__}")
        if isinstance(scale, bool) or not isinstance(scale, int):
            raise TypeError(f"BigDecimal requires int scale, got {type(scale).__name__}")
        self._int_val = int_val
        self._scale = scale

    # --- Construction ---

    @classmethod
    def from_str(cls, s: str) -> BigDecimal:
        """Parse a decimal literal such as "1.79", "-0.005" or "1.2E+3".

        Raises:
            ValueError: If the string is not a finite decimal number
        """
        if not isinstance(s, str):
            raise TypeError(f"from_str requires str, got {type(s).__name__}")
        try:
            d = Decimal(s)
        except InvalidOperation:
            raise ValueError(f"Invalid decimal literal: {s!r}") from None
        return cls.from_decimal(d)

    @classmethod
    def from_decimal(cls, d: Decimal) -> BigDecimal:
        """Convert a decimal.Decimal exactly, keeping its exponent as the scale.

        Raises:
            ValueError: If d is NaN or infinite
        """
        if not d.is_finite():
            raise ValueError(f"BigDecimal requires a finite value, got {d}")
        sign, digits, exponent = d.as_tuple()
        magnitude = int(Decimal((0, digits, 0)))
        return cls(-magnitude if sign else magnitude, -exponent)

    @classmethod
    def from_float(cls, f: float) -> BigDecimal:
        """Convert a float through its shortest round-trip representation.

        BigDecimal.from_float(0.1) is 0.1, not the exact binary value.

        Raises:
            FloatRangeError: If f is NaN or infinite
        """
        if not math.isfinite(f):
            raise FloatRangeError(f"Cannot convert non-finite float {f!r} to BigDecimal")
        return cls.from_decimal(Decimal(repr(float(f))))

    @classmethod
    def coerce(cls, value: BigDecimal | int | Decimal | str) -> BigDecimal:
        """Convert a supported value to BigDecimal.

        Floats are rejected; use from_float to opt into binary conversion.

        Raises:
            TypeError: If value has an unsupported type
            ValueError: If value is a string or Decimal that is not a finite number
        """
        if isinstance(value, BigDecimal):
            return value
        if isinstance(value, bool):
            raise TypeError("Cannot convert bool to BigDecimal")
        if isinstance(value, int):
            return cls(value)
        if isinstance(value, Decimal):
            return cls.from_decimal(value)
        if isinstance(value, str):
            return cls.from_str(value)
        raise TypeError(f"Cannot convert {type(value).__name__} to BigDecimal")

    # --- Accessors ---

    @property
    def int_val(self) -> int:
        """The unscaled integer."""
        return self._int_val

    @property
    def scale(self) -> int:
        """Number of digits after the decimal point (may be negative)."""
        return self._scale

    def as_integer_and_scale(self) -> tuple[int, int]:
        return self._int_val, self._scale

    def precision(self) -> int:
        """Number of significant digits in the unscaled integer (at least 1)."""
        return _digit_length(self._int_val)

    def ulp(self) -> BigDecimal:
        """Unit in the last place: the smallest increment at this scale."""
        return BigDecimal(1, self._scale)

    def signum(self) -> int:
        return (self._int_val > 0) - (self._int_val < 0)

    def is_zero(self) -> bool:
        return self._int_val == 0

    # --- Rescaling and rounding ---

    def with_scale(self, new_scale: int, rounding: str = DEFAULT_ROUNDING) -> BigDecimal:
        """Return the same value at another scale.

        Raising the scale is exact. Lowering it drops digits and rounds.
        """
        diff = new_scale - self._scale
        if diff >= 0:
            return BigDecimal(self._int_val * power_of_ten(diff), new_scale)
        return BigDecimal(divide_and_round_by_ten_power(self._int_val, -diff, rounding), new_scale)

    def with_prec(self, precision: int, rounding: str = DEFAULT_ROUNDING) -> BigDecimal:
        """Return the value with exactly `precision` significant digits.

        Extra digits are rounded away; missing digits are padded with zeros.

        Raises:
            ValueError: If precision is not positive
        """
        if precision <= 0:
            raise ValueError(f"precision must be positive, got {precision}")
        digits = self.precision()
        if digits > precision:
            drop = digits - precision
            rounded = divide_and_round_by_ten_power(self._int_val, drop, rounding)
            scale = self._scale - drop
            # Rounding carried into a new digit (e.g. 999.6 -> 1000)
            if _digit_length(rounded) > precision:
                rounded //= 10
                scale -= 1
            return BigDecimal(rounded, scale)
        if digits < precision:
            pad = precision - digits
            return BigDecimal(self._int_val * power_of_ten(pad), self._scale + pad)
        return self

    def round(self, ndigits: int, rounding: str = DEFAULT_ROUNDING) -> BigDecimal:
        """Round to `ndigits` digits after the decimal point.

        A value that already has no more than `ndigits` fractional digits is
        returned unchanged, without padding.
        """
        if self._scale <= ndigits:
            return self
        return self.with_scale(ndigits, rounding)

    def __round__(self, ndigits: int | None = None) -> BigDecimal | int:
        if ndigits is None:
            return int(self.round(0))
        return self.round(ndigits)

    # --- Arithmetic ---

    def pow(self, n: int) -> BigDecimal:
        """Raise to a non-negative integer power exactly.

        The unscaled integer is raised to n and the scale multiplied by n,
        so no rounding takes place.

        Raises:
            InvalidPowerError: If n is not an int in 0..999_999_999
        """
        if isinstance(n, bool) or not isinstance(n, int) or not 0 <= n <= MAX_POWER_EXPONENT:
            raise InvalidPowerError(
                f"Invalid power operation: exponent {n!r} outside 0..{MAX_POWER_EXPONENT}"
            )
        return BigDecimal(self._int_val**n, self._scale * n)

    def divide(self, divisor: Operand, mc: MathContext = DIVISION_CONTEXT) -> BigDecimal:
        """Divide, rounding the quotient to exactly mc.precision significant digits.

        A zero dividend gives zero at the scale self.scale - divisor.scale.

        Raises:
            DivisionByZero: If divisor is zero
        """
        other = BigDecimal.coerce(divisor)
        if other.is_zero():
            raise DivisionByZero("Division by zero")
        preferred_scale = self._scale - other._scale
        if self.is_zero():
            return BigDecimal(0, preferred_scale)

        a = self._int_val
        b = other._int_val
        a_digits = _digit_length(a)
        b_digits = _digit_length(b)

        # Shift so that the truncated quotient has exactly mc.precision digits:
        # one more place when a's leading digits are smaller than b's.
        shift = mc.precision - a_digits + b_digits - 1
        if abs(a) * power_of_ten(b_digits) < abs(b) * power_of_ten(a_digits):
            shift += 1

        if shift >= 0:
            quotient = divide_and_round(a * power_of_ten(shift), b, mc.rounding)
        else:
            quotient = divide_and_round(a, b * power_of_ten(-shift), mc.rounding)
        scale = preferred_scale + shift

        # Rounding carried into a new digit; the quotient is a power of ten
        if _digit_length(quotient) > mc.precision:
            quotient //= 10
            scale -= 1
        return BigDecimal(quotient, scale)

    def _align(self, other: BigDecimal) -> tuple[int, int, int]:
        """Unscaled integers of self and other at their common (larger) scale."""
        if self._scale == other._scale:
            return self._int_val, other._int_val, self._scale
        if self._scale > other._scale:
            shifted = other._int_val * power_of_ten(self._scale - other._scale)
            return self._int_val, shifted, self._scale
        shifted = self._int_val * power_of_ten(other._scale - self._scale)
        return shifted, other._int_val, other._scale

    def __add__(self, other: Operand) -> BigDecimal:
        rhs = _operand(other)
        if rhs is None:
            return NotImplemented
        a, b, scale = self._align(rhs)
        return BigDecimal(a + b, scale)

    def __radd__(self, other: Operand) -> BigDecimal:
        return self.__add__(other)

    def __sub__(self, other: Operand) -> BigDecimal:
        rhs = _operand(other)
        if rhs is None:
            return NotImplemented
        a, b, scale = self._align(rhs)
        return BigDecimal(a - b, scale)

    def __rsub__(self, other: Operand) -> BigDecimal:
        lhs = _operand(other)
        if lhs is None:
            return NotImplemented
        return lhs.__sub__(self)

    def __mul__(self, other: Operand) -> BigDecimal:
        rhs = _operand(other)
        if rhs is None:
            return NotImplemented
        return BigDecimal(self._int_val * rhs._int_val, self._scale + rhs._scale)

    def __rmul__(self, other: Operand) -> BigDecimal:
        return self.__mul__(other)

    def __truediv__(self, other: Operand) -> BigDecimal:
        rhs = _operand(other)
        if rhs is None:
            return NotImplemented
        return self.divide(rhs, DIVISION_CONTEXT)

    def __rtruediv__(self, other: Operand) -> BigDecimal:
        lhs = _operand(other)
        if lhs is None:
            return NotImplemented
        return lhs.divide(self, DIVISION_CONTEXT)

    def __pow__(self, n: int, modulo: None = None) -> BigDecimal:
        if modulo is not None:
            return NotImplemented
        return self.pow(n)

    def __neg__(self) -> BigDecimal:
        return BigDecimal(-self._int_val, self._scale)

    def __pos__(self) -> BigDecimal:
        return self

    def __abs__(self) -> BigDecimal:
        if self._int_val >= 0:
            return self
        return BigDecimal(-self._int_val, self._scale)

    # --- Comparison ---

    def _compare(self, other: BigDecimal) -> int:
        a, b, _ = self._align(other)
        return (a > b) - (a < b)

    def __eq__(self, other: object) -> bool:
        rhs = _operand(other)
        if rhs is None:
            return NotImplemented
        return self._compare(rhs) == 0

    def __ne__(self, other: object) -> bool:
        rhs = _operand(other)
        if rhs is None:
            return NotImplemented
        return self._compare(rhs) != 0

    def __lt__(self, other: Operand) -> bool:
        rhs = _operand(other)
        if rhs is None:
            return NotImplemented
        return self._compare(rhs) < 0

    def __le__(self, other: Operand) -> bool:
        rhs = _operand(other)
        if rhs is None:
            return NotImplemented
        return self._compare(rhs) <= 0

    def __gt__(self, other: Operand) -> bool:
        rhs = _operand(other)
        if rhs is None:
            return NotImplemented
        return self._compare(rhs) > 0

    def __ge__(self, other: Operand) -> bool:
        rhs = _operand(other)
        if rhs is None:
            return NotImplemented
        return self._compare(rhs) >= 0

    def __hash__(self) -> int:
        # Equal values hash equal, across scales and with int/Decimal
        return hash(self.to_decimal())

    # --- Conversion ---

    def to_decimal(self) -> Decimal:
        """Exact decimal.Decimal with the same digits and exponent."""
        _, digits, _ = Decimal(abs(self._int_val)).as_tuple()
        return Decimal((1 if self._int_val < 0 else 0, digits, -self._scale))

    def to_float(self) -> float:
        """Nearest float; overflows to +/-inf and underflows to 0.0."""
        return float(self.to_decimal())

    def __float__(self) -> float:
        return self.to_float()

    def __int__(self) -> int:
        """Integer part, truncated toward zero."""
        if self._scale <= 0:
            return self._int_val * power_of_ten(-self._scale)
        return divide_and_round_by_ten_power(self._int_val, self._scale, ROUND_DOWN)

    def __bool__(self) -> bool:
        return self._int_val != 0

    def __str__(self) -> str:
        return format(self.to_decimal(), "f")

    def __repr__(self) -> str:
        return f"BigDecimal('{self}')"


def _operand(value: object) -> BigDecimal | None:
    """Convert an arithmetic/comparison operand, or None if unsupported."""
    if isinstance(value, BigDecimal):
        return value
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        return BigDecimal(value)
    if isinstance(value, Decimal) and value.is_finite():
        return BigDecimal.from_decimal(value)
    return None
