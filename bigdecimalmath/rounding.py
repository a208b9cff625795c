"""Integer divide-and-round primitives.

These are the building blocks of every inexact decimal operation: a
decimal is rounded by dividing its unscaled integer by a power of ten, and
a decimal quotient is an integer quotient rounded once. Rounding modes are
the decimal module constants (ROUND_HALF_UP, ROUND_HALF_EVEN, ...), and the
increment decision matches java.math.BigDecimal.divideAndRound.

Two paths exist. When the divisor fits a signed 64-bit integer the remainder
is classified against half the divisor by doubling it. Otherwise
compare_half walks both magnitudes word by word and never builds
divisor / 2.
"""

from __future__ import annotations

import struct
from decimal import (
    ROUND_05UP,
    ROUND_CEILING,
    ROUND_DOWN,
    ROUND_FLOOR,
    ROUND_HALF_DOWN,
    ROUND_HALF_EVEN,
    ROUND_HALF_UP,
    ROUND_UP,
)
from typing import Callable

from bigdecimalmath.errors import DivisionByZero
from bigdecimalmath.ten_powers import LONG_MAX, LONG_TEN_POWERS_TABLE, TenPowers, power_of_ten

__all__ = [
    "ROUNDING_MODES",
    "DEFAULT_ROUNDING",
    "check_rounding",
    "compare_half",
    "divide_and_round",
    "divide_and_round_by_ten_power",
]

ROUNDING_MODES = frozenset(
    {
        ROUND_UP,
        ROUND_DOWN,
        ROUND_CEILING,
        ROUND_FLOOR,
        ROUND_HALF_UP,
        ROUND_HALF_DOWN,
        ROUND_HALF_EVEN,
        ROUND_05UP,
    }
)

# Ties away from zero
DEFAULT_ROUNDING = ROUND_HALF_UP

_WORD_BITS = 32
_WORD_HIGH_BIT = 1 << (_WORD_BITS - 1)


def check_rounding(rounding: str) -> str:
    """Return the rounding mode unchanged if it is supported.

    Raises:
        ValueError: If rounding is not one of the decimal module rounding constants
    """
    if rounding not in ROUNDING_MODES:
        raise ValueError(f"Unknown rounding mode: {rounding!r}")
    return rounding


def _words(magnitude: int) -> tuple[int, ...]:
    """Split a non-negative integer into big-endian 32-bit words. Zero has none."""
    count = (magnitude.bit_length() + _WORD_BITS - 1) // _WORD_BITS
    return struct.unpack(f">{count}I", magnitude.to_bytes(count * 4, "big"))


def compare_half(remainder: int, divisor: int) -> int:
    """Classify |remainder| against half of |divisor|.

    The divisor is halved on the fly: each of its words is shifted right by
    one bit and the bit shifted out of the previous word is carried in as
    the high bit. A divisor one word longer than the remainder can only be
    within reach if its top word is 1, in which case that word becomes the
    initial carry.

    Args:
        remainder: Value to classify (sign ignored)
        divisor: Non-zero divisor (sign ignored)

    Returns:
        -1 if |remainder| < |divisor| / 2, 0 if equal, 1 if greater

    Raises:
        DivisionByZero: If divisor is zero
    """
    if divisor == 0:
        raise DivisionByZero("compare_half with a zero divisor")

    rem = _words(abs(remainder))
    div = _words(abs(divisor))
    rem_len = len(rem)
    div_len = len(div)

    if rem_len == 0:
        return -1
    if rem_len > div_len:
        return 1
    if rem_len < div_len - 1:
        return -1

    start = 0
    carry = 0
    if rem_len != div_len:
        if div[0] != 1:
            return -1
        start = 1
        carry = _WORD_HIGH_BIT

    for value, word in zip(rem, div[start:]):
        half = (word >> 1) + carry
        if value != half:
            return -1 if value < half else 1
        carry = (word & 1) << (_WORD_BITS - 1)

    # An odd divisor leaves half a unit over, so an exact match is still below half
    return 0 if carry == 0 else -1


def _long_compare_half(remainder: int, divisor: int) -> int:
    """compare_half for divisors that fit a signed 64-bit integer."""
    doubled = 2 * abs(remainder)
    magnitude = abs(divisor)
    return (doubled > magnitude) - (doubled < magnitude)


def _need_increment(
    rounding: str,
    negative: bool,
    quotient: int,
    remainder: int,
    divisor: int,
    compare: Callable[[int, int], int],
) -> bool:
    """Decide whether a truncated, non-zero-remainder quotient moves away from zero.

    Args:
        rounding: Rounding mode
        negative: Sign of the exact quotient
        quotient: Truncated quotient magnitude
        remainder: Remainder magnitude (non-zero)
        divisor: Divisor magnitude
        compare: Half classifier for this divisor width
    """
    if rounding == ROUND_UP:
        return True
    if rounding == ROUND_DOWN:
        return False
    if rounding == ROUND_CEILING:
        return not negative
    if rounding == ROUND_FLOOR:
        return negative
    if rounding == ROUND_05UP:
        return quotient % 10 in (0, 5)

    cmp_half = compare(remainder, divisor)
    if cmp_half < 0:
        return False
    if cmp_half > 0:
        return True
    if rounding == ROUND_HALF_UP:
        return True
    if rounding == ROUND_HALF_DOWN:
        return False
    # ROUND_HALF_EVEN
    return quotient & 1 == 1


def _divide_and_round(
    dividend: int,
    divisor: int,
    rounding: str,
    compare: Callable[[int, int], int],
) -> int:
    negative = (dividend < 0) != (divisor < 0)
    divisor_mag = abs(divisor)
    quotient, remainder = divmod(abs(dividend), divisor_mag)
    if remainder and _need_increment(
        rounding, negative, quotient, remainder, divisor_mag, compare
    ):
        quotient += 1
    return -quotient if negative else quotient


def divide_and_round(dividend: int, divisor: int, rounding: str = DEFAULT_ROUNDING) -> int:
    """Divide two integers and round the quotient to an integer.

    Args:
        dividend: Integer dividend
        divisor: Non-zero integer divisor
        rounding: Rounding mode (default: ROUND_HALF_UP)

    Returns:
        dividend / divisor rounded per the rounding mode

    Raises:
        DivisionByZero: If divisor is zero
        ValueError: If the rounding mode is unknown

    Examples:
        divide_and_round(7, 2) == 4        (3.5, ties away from zero)
        divide_and_round(-7, 2) == -4
        divide_and_round(7, 2, ROUND_HALF_EVEN) == 4
        divide_and_round(5, 2, ROUND_HALF_EVEN) == 2
    """
    check_rounding(rounding)
    if divisor == 0:
        raise DivisionByZero("Division by zero in divide_and_round")
    compare = _long_compare_half if abs(divisor) <= LONG_MAX else compare_half
    return _divide_and_round(dividend, divisor, rounding, compare)


def divide_and_round_by_ten_power(
    value: int,
    k: int,
    rounding: str = DEFAULT_ROUNDING,
    ten_powers: TenPowers | None = None,
) -> int:
    """Divide an integer by 10^k and round the quotient to an integer.

    Uses the fixed 64-bit table when 10^k and value both fit a signed 64-bit
    integer, and the power-of-ten cache otherwise.

    Args:
        value: Integer to divide
        k: Non-negative power of ten
        rounding: Rounding mode (default: ROUND_HALF_UP)
        ten_powers: Cache to draw large powers from (default: shared cache)

    Returns:
        value / 10^k rounded per the rounding mode

    Raises:
        ValueError: If k is negative or the rounding mode is unknown
    """
    check_rounding(rounding)
    if k < 0:
        raise ValueError(f"power of ten exponent must be non-negative, got {k}")
    if k == 0:
        return value
    if k < len(LONG_TEN_POWERS_TABLE) and -LONG_MAX <= value <= LONG_MAX:
        return _divide_and_round(value, LONG_TEN_POWERS_TABLE[k], rounding, _long_compare_half)
    return _divide_and_round(value, power_of_ten(k, ten_powers), rounding, compare_half)
