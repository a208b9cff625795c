"""Exact powers of ten.

Small powers come from a fixed table that fits a signed 64-bit integer.
Larger powers come from a TenPowers cache that grows on demand: a miss
doubles the cached length until it covers the requested exponent, then
fills the new entries in increasing order, each one ten times the
previous entry.

The cache is copy-on-grow. Readers index a snapshot of the current list
without locking; growers build an extended copy under a lock and publish
it with a single reference assignment, so a reader never observes a
partially filled entry and existing entries are never rewritten.

BigDecimal always uses DEFAULT_TEN_POWERS; a separate TenPowers instance
is only consulted by callers that pass it explicitly, such as
divide_and_round_by_ten_power.
"""

from __future__ import annotations

import threading

import structlog

from bigdecimalmath.config import DEFAULT_TEN_POWERS_CONFIG, TenPowersConfig

__all__ = [
    "LONG_MAX",
    "LONG_TEN_POWERS_TABLE",
    "TenPowers",
    "DEFAULT_TEN_POWERS",
    "power_of_ten",
]

logger = structlog.get_logger()

LONG_MAX = 2**63 - 1

# 10^0 .. 10^18, every power of ten that fits a signed 64-bit integer
LONG_TEN_POWERS_TABLE: tuple[int, ...] = tuple(10**i for i in range(19))


class TenPowers:
    """Thread-safe, append-only cache of exact powers of ten.

    Index i of the cache holds 10^i. Instances are independent, so tests
    and callers that want isolation can build their own; everything else
    shares DEFAULT_TEN_POWERS.
    """

    __slots__ = ("_lock", "_powers", "_max_cached_exponent")

    def __init__(self, initial_length: int = 20, max_cached_exponent: int = 4096) -> None:
        """Create a cache holding 10^0 .. 10^(initial_length - 1).

        Args:
            initial_length: Number of powers cached up front (must be positive)
            max_cached_exponent: Exponents at or above this are computed
                directly and never cached

        Raises:
            ValueError: If initial_length is not positive or exceeds max_cached_exponent
        """
        if initial_length <= 0:
            raise ValueError(f"initial_length must be positive, got {initial_length}")
        if max_cached_exponent < initial_length:
            raise ValueError(
                f"max_cached_exponent ({max_cached_exponent}) must be at least "
                f"initial_length ({initial_length})"
            )
        self._lock = threading.Lock()
        self._powers: list[int] = [10**i for i in range(initial_length)]
        self._max_cached_exponent = max_cached_exponent

    @classmethod
    def from_config(cls, config: TenPowersConfig) -> TenPowers:
        """Create a cache from a TenPowersConfig."""
        return cls(
            initial_length=config.initial_length,
            max_cached_exponent=config.max_cached_exponent,
        )

    @property
    def cached_length(self) -> int:
        """Number of consecutive powers currently cached."""
        return len(self._powers)

    @property
    def max_cached_exponent(self) -> int:
        return self._max_cached_exponent

    def get(self, k: int) -> int:
        """Return 10^k.

        Raises:
            ValueError: If k is negative
        """
        if k < 0:
            raise ValueError(f"power of ten exponent must be non-negative, got {k}")
        if k < len(LONG_TEN_POWERS_TABLE):
            return LONG_TEN_POWERS_TABLE[k]
        if k >= self._max_cached_exponent:
            return 10**k
        powers = self._powers
        if k < len(powers):
            return powers[k]
        return self._expand(k)

    def _expand(self, k: int) -> int:
        """Grow the cache until it covers index k and return 10^k."""
        with self._lock:
            powers = self._powers
            cur_len = len(powers)
            # Another thread may have grown the cache while we waited
            if cur_len <= k:
                new_len = cur_len << 1
                while new_len <= k:
                    new_len <<= 1
                new_len = min(new_len, self._max_cached_exponent)

                grown = list(powers)
                for i in range(cur_len, new_len):
                    grown.append(grown[i - 1] * 10)
                self._powers = grown
                powers = grown

                logger.debug(
                    "ten_powers_cache_grown",
                    old_length=cur_len,
                    new_length=new_len,
                    requested=k,
                )
            return powers[k]


DEFAULT_TEN_POWERS = TenPowers.from_config(DEFAULT_TEN_POWERS_CONFIG)


def power_of_ten(k: int, ten_powers: TenPowers | None = None) -> int:
    """Return 10^k from the given cache, or from the shared default cache.

    Raises:
        ValueError: If k is negative
    """
    return (ten_powers or DEFAULT_TEN_POWERS).get(k)
