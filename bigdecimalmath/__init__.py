"""Big Decimal Math.

Arbitrary-precision decimal arithmetic: an exact BigDecimal value type, the
divide-and-round primitives it is built on, and the n-th root of a
BigDecimal rounded to the precision implied by its argument.

Mathematical functions after R. J. Mathar, arXiv:0908.3030.
"""

from bigdecimalmath.bigdecimal import DIVISION_CONTEXT, MAX_POWER_EXPONENT, BigDecimal, MathContext
from bigdecimalmath.config import (
    DEFAULT_ROOT_CONFIG,
    DEFAULT_TEN_POWERS_CONFIG,
    RootConfig,
    TenPowersConfig,
)
from bigdecimalmath.errors import (
    BigDecimalMathError,
    DivisionByZero,
    FloatRangeError,
    InvalidPowerError,
    NegativeArgumentError,
    NonPositiveRootError,
    RootDidNotConverge,
    ZeroApproximationError,
)
from bigdecimalmath.nth_root import err2prec, relative_tolerance, root, scale_prec
from bigdecimalmath.rounding import (
    DEFAULT_ROUNDING,
    ROUNDING_MODES,
    compare_half,
    divide_and_round,
    divide_and_round_by_ten_power,
)
from bigdecimalmath.ten_powers import (
    DEFAULT_TEN_POWERS,
    LONG_TEN_POWERS_TABLE,
    TenPowers,
    power_of_ten,
)

__version__ = "0.1.0"
__all__ = [
    # Root
    "root",
    "err2prec",
    "scale_prec",
    "relative_tolerance",
    # Values
    "BigDecimal",
    "MathContext",
    "DIVISION_CONTEXT",
    "MAX_POWER_EXPONENT",
    # Rounding
    "DEFAULT_ROUNDING",
    "ROUNDING_MODES",
    "compare_half",
    "divide_and_round",
    "divide_and_round_by_ten_power",
    # Powers of ten
    "TenPowers",
    "DEFAULT_TEN_POWERS",
    "LONG_TEN_POWERS_TABLE",
    "power_of_ten",
    # Config
    "RootConfig",
    "TenPowersConfig",
    "DEFAULT_ROOT_CONFIG",
    "DEFAULT_TEN_POWERS_CONFIG",
    # Errors
    "BigDecimalMathError",
    "NegativeArgumentError",
    "NonPositiveRootError",
    "InvalidPowerError",
    "DivisionByZero",
    "FloatRangeError",
    "ZeroApproximationError",
    "RootDidNotConverge",
    "__version__",
]
