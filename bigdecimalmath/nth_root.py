"""N-th root of a BigDecimal.

Algorithm (R. J. Mathar, "A Java Math.BigDecimal Implementation of Core
Mathematical Functions", arXiv:0908.3030):

    1. Seed s from the double precision estimate float(x) ** (1/n).
    2. Iterate Newton's method for s^n - x = 0, written as
           c = (s - x / s^(n-1)) / n,   s = s - c
       with x / s^(n-1) computed to the precision of x plus guard digits,
       and the division by n carried at the precision actually present in
       s - x / s^(n-1).
    3. Stop once |c / s| drops below eps = ulp(x) / (2 n x), the relative
       error already present in x.
    4. Round s to the number of fractional digits implied by eps.

The result is as accurate as x itself, not more: the root of 9.125 has
fewer digits than the root of 9.1250000.
"""

from __future__ import annotations

import math
from decimal import Decimal

import structlog

from bigdecimalmath.bigdecimal import BigDecimal, MathContext
from bigdecimalmath.config import DEFAULT_ROOT_CONFIG, RootConfig
from bigdecimalmath.errors import (
    FloatRangeError,
    NegativeArgumentError,
    NonPositiveRootError,
    RootDidNotConverge,
    ZeroApproximationError,
)

__all__ = [
    "root",
    "err2prec",
    "scale_prec",
    "relative_tolerance",
]

logger = structlog.get_logger()

# Significant digits used when a decimal ratio is converted to float
_RATIO_CONTEXT = MathContext(17)


def err2prec(xerr: float) -> int:
    """Number of fractional digits justified by a relative error.

    err2prec(eps) = 1 + floor(log10(|0.5 / eps|))

    Args:
        xerr: Relative error (non-zero)

    Returns:
        Digits to keep after the decimal point
    """
    return 1 + math.floor(math.log10(abs(0.5 / xerr)))


def scale_prec(x: BigDecimal, d: int) -> BigDecimal:
    """Same value as x with d more digits after the decimal point."""
    return x.with_scale(x.scale + d)


def relative_tolerance(n: int, x: BigDecimal) -> float:
    """Relative error eps = ulp(x) / (2 n x) of the n-th root of x.

    The ratio is formed in decimal first, so it stays in float range even
    when x itself does not.

    Raises:
        FloatRangeError: If eps underflows to 0.0 (x has too many digits)
    """
    eps = x.ulp().divide(x * (2 * n), _RATIO_CONTEXT).to_float()
    if eps == 0.0:
        raise FloatRangeError(
            f"Relative tolerance of root underflows float ({x.precision()} digits)"
        )
    return eps


def _seed(n: int, x: BigDecimal) -> BigDecimal:
    """Double precision estimate of x^(1/n) as a BigDecimal."""
    x_float = x.to_float()
    if x_float == 0.0 or math.isinf(x_float):
        raise FloatRangeError("Root argument is outside the floating-point range of the seed")
    return BigDecimal.from_float(math.pow(x_float, 1.0 / n))


def root(
    n: int,
    x: BigDecimal | int | Decimal | str,
    *,
    config: RootConfig | None = None,
) -> BigDecimal:
    """Calculate x^(1/n) rounded to the precision implied by x.

    Args:
        n: The positive root index
        x: The non-negative number to take the root of

    Returns:
        The n-th root of x, rounded to err2prec(ulp(x) / (2 n x)) fractional digits

    Raises:
        NegativeArgumentError: If x < 0
        NonPositiveRootError: If n <= 0
        FloatRangeError: If x is too large, too small or too precise for the
            double precision seed and tolerance
        ZeroApproximationError: If the iteration reaches exactly zero
        RootDidNotConverge: If the iteration budget is exhausted

    Example:
        root(4, BigDecimal.from_str("14.75")) == BigDecimal.from_str("1.9597")
    """
    cfg = config or DEFAULT_ROOT_CONFIG
    x = BigDecimal.coerce(x)

    if x.signum() < 0:
        raise NegativeArgumentError(f"negative argument {x} of root")
    if isinstance(n, bool) or not isinstance(n, int):
        raise NonPositiveRootError(f"root index must be a positive integer, got {n!r}")
    if n <= 0:
        raise NonPositiveRootError(f"non-positive index {n} of root")

    if n == 1 or x.is_zero():
        return x

    s = _seed(n, x)
    logger.debug("root_seed", n=n, precision=x.precision(), seed=str(s))

    nth = BigDecimal(n)
    # Internal accuracy slightly above what eps below demands
    xhighpr = scale_prec(x, cfg.guard_digits)
    mc = MathContext(cfg.guard_digits + x.precision())
    eps = relative_tolerance(n, x)

    for iteration in range(1, cfg.max_iterations + 1):
        c = xhighpr.divide(s.pow(n - 1), mc)
        c = s - c
        locmc = MathContext(c.precision())
        c = c.divide(nth, locmc)
        s = s - c

        if s.is_zero():
            raise ZeroApproximationError(
                f"root iteration {iteration} reached zero for index {n}"
            )

        ratio = abs(c.divide(s, _RATIO_CONTEXT).to_float())
        logger.debug("root_iteration", iteration=iteration, ratio=ratio, eps=eps)
        if ratio < eps:
            digits = err2prec(eps)
            logger.debug("root_converged", n=n, iterations=iteration, digits=digits)
            return s.round(digits)

    logger.warning("root_did_not_converge", n=n, max_iterations=cfg.max_iterations)
    raise RootDidNotConverge(
        f"root of index {n} did not converge after {cfg.max_iterations} iterations"
    )
