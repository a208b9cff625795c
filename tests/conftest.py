"""Pytest configuration and fixtures."""

import pytest

from bigdecimalmath import TenPowers


@pytest.fixture
def ten_powers() -> TenPowers:
    """Return an isolated power-of-ten cache with the default initial length."""
    return TenPowers(initial_length=20, max_cached_exponent=4096)


@pytest.fixture
def small_ten_powers() -> TenPowers:
    """Return an isolated power-of-ten cache with a low caching cap."""
    return TenPowers(initial_length=20, max_cached_exponent=64)
