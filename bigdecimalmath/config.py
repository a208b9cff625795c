"""Configuration for the decimal math kernel.

Defaults can be overridden through environment variables:
- BIGDECIMALMATH_GUARD_DIGITS: extra digits carried by the root iteration (default: 2)
- BIGDECIMALMATH_MAX_ITERATIONS: root iteration budget (default: 200)
- BIGDECIMALMATH_TEN_POWERS_INITIAL_LENGTH: initial power-of-ten cache length (default: 20)
- BIGDECIMALMATH_TEN_POWERS_MAX_EXPONENT: exponents at or above this are not cached (default: 4096)
"""

from __future__ import annotations

import os
from collections.abc import Mapping
from dataclasses import dataclass

ENV_PREFIX = "BIGDECIMALMATH_"


def _env_int(environ: Mapping[str, str], name: str, default: int) -> int:
    """Read an integer setting, falling back to the default when unset.

    Raises:
        ValueError: If the variable is set but is not an integer
    """
    raw = environ.get(ENV_PREFIX + name)
    if raw is None or raw.strip() == "":
        return default
    try:
        return int(raw)
    except ValueError:
        raise ValueError(f"{ENV_PREFIX}{name} must be an integer, got {raw!r}") from None


@dataclass(frozen=True)
class RootConfig:
    """Settings for the n-th root iteration.

    Attributes:
        guard_digits: Digits carried above the input's own precision while
            iterating (default: 2)
        max_iterations: Iterations allowed before giving up (default: 200)
    """

    guard_digits: int = 2
    max_iterations: int = 200

    def __post_init__(self) -> None:
        if self.guard_digits < 0:
            raise ValueError(f"guard_digits must be non-negative, got {self.guard_digits}")
        if self.max_iterations <= 0:
            raise ValueError(f"max_iterations must be positive, got {self.max_iterations}")

    @classmethod
    def from_env(cls, environ: Mapping[str, str] | None = None) -> RootConfig:
        """Build a config from environment variables (os.environ by default)."""
        env = os.environ if environ is None else environ
        return cls(
            guard_digits=_env_int(env, "GUARD_DIGITS", cls.guard_digits),
            max_iterations=_env_int(env, "MAX_ITERATIONS", cls.max_iterations),
        )


@dataclass(frozen=True)
class TenPowersConfig:
    """Settings for the shared power-of-ten cache.

    Attributes:
        initial_length: Number of powers (10^0 upwards) cached up front
        max_cached_exponent: Exponents at or above this are computed
            directly instead of being cached
    """

    initial_length: int = 20
    max_cached_exponent: int = 4096

    def __post_init__(self) -> None:
        if self.initial_length <= 0:
            raise ValueError(f"initial_length must be positive, got {self.initial_length}")
        if self.max_cached_exponent < self.initial_length:
            raise ValueError(
                f"max_cached_exponent ({self.max_cached_exponent}) must be at least "
                f"initial_length ({self.initial_length})"
            )

    @classmethod
    def from_env(cls, environ: Mapping[str, str] | None = None) -> TenPowersConfig:
        """Build a config from environment variables (os.environ by default)."""
        env = os.environ if environ is None else environ
        return cls(
            initial_length=_env_int(env, "TEN_POWERS_INITIAL_LENGTH", cls.initial_length),
            max_cached_exponent=_env_int(
                env, "TEN_POWERS_MAX_EXPONENT", cls.max_cached_exponent
            ),
        )


# Default configuration instances, read once at import
DEFAULT_ROOT_CONFIG = RootConfig.from_env()
DEFAULT_TEN_POWERS_CONFIG = TenPowersConfig.from_env()

__all__ = [
    "ENV_PREFIX",
    "RootConfig",
    "TenPowersConfig",
    "DEFAULT_ROOT_CONFIG",
    "DEFAULT_TEN_POWERS_CONFIG",
]
