"""Tests for the n-th root of a BigDecimal."""

import random
from decimal import Decimal

import pytest
from structlog.testing import capture_logs

from bigdecimalmath import root
from bigdecimalmath.bigdecimal import BigDecimal
from bigdecimalmath.config import RootConfig
from bigdecimalmath.errors import (
    BigDecimalMathError,
    FloatRangeError,
    NegativeArgumentError,
    NonPositiveRootError,
    RootDidNotConverge,
    ZeroApproximationError,
)
from bigdecimalmath.nth_root import err2prec, relative_tolerance, scale_prec

D = BigDecimal.from_str

SQRT2_30 = "1.414213562373095048801688724210"


class TestRootValues:
    """Known roots, rounded to the precision of their argument."""

    @pytest.mark.parametrize(
        "n,x,expected",
        [
            (1, "1.79", "1.79"),
            (4, "9.125", "1.73803"),
            (5, "9.3245600", "1.562880129"),
            (5, "9.32456", "1.5628801"),
            (13, "129.32456087", "1.453573513976"),
            (135, "159765.989751345", "1.09280916443673520"),
            (4, "14.75", "1.9597"),
        ],
    )
    def test_reference_values(self, n, x, expected):
        """root(n, x) matches reference values."""
        assert root(n, D(x)) == D(expected)

    def test_result_scale_follows_tolerance(self):
        """The result carries exactly the justified fractional digits."""
        assert root(5, D("9.3245600")).scale == 9
        assert root(5, D("9.32456")).scale == 7
        assert str(root(135, D("159765.989751345"))) == "1.09280916443673520"

    def test_trailing_zeros_add_precision(self):
        """More digits in x give more digits in the root."""
        assert root(2, D("2")) == D("1.4")
        assert root(2, D("2.00")) == D("1.414")
        assert root(2, D("2.0000")) == D("1.41421")
        assert root(2, D("2." + "0" * 29)) == D(SQRT2_30)

    def test_exact_root(self):
        """Perfect powers come out exact."""
        assert root(3, D("27")) == 3
        assert root(2, D("6.25")) == D("2.5")

    @pytest.mark.parametrize(
        "x,n",
        [("1.5", 3), ("2", 2), ("12.34", 5), ("0.5", 7), ("3.14159", 4), ("100", 3)],
    )
    def test_power_of_root_within_ulp(self, x, n):
        """Raising the root back to n lands within one ulp of x."""
        value = D(x)
        r = root(n, value)
        assert abs(r.pow(n) - value) <= value.ulp()

    @pytest.mark.parametrize(
        "x,n",
        [("1", 2), ("1.5", 3), ("2.25", 2), ("12.34", 5), ("3.14159", 4), ("100", 3), ("7.001", 12)],
    )
    def test_root_of_power_recovers_base(self, x, n):
        """root(n, x^n) gives back x to within half an ulp for x >= 1."""
        value = D(x)
        assert 2 * abs(root(n, value.pow(n)) - value) <= value.ulp()

    def test_root_of_power_recovers_base_random(self):
        """Seeded random bases of at least one come back from their powers."""
        rng = random.Random(8675309)
        for _ in range(300):
            scale = rng.randint(0, 4)
            value = BigDecimal(rng.randint(10**scale, 10 ** (scale + 6)), scale)
            n = rng.randint(1, 12)
            r = root(n, value.pow(n))
            assert 2 * abs(r - value) <= value.ulp(), (n, value, r)

    def test_root_below_one_keeps_fractional_digits_only(self):
        """Below one the result keeps decimal places, not significant digits."""
        assert root(2, D("0.00000009")) == D("0.00")
        assert root(2, D("0.0003").pow(2)) == D("0.00")
        assert root(3, D("0.0006").pow(3)) == D("0.001")

    def test_index_one_returns_argument(self):
        """The first root of x is x itself."""
        value = D("1.79")
        assert root(1, value) is value

    def test_zero(self):
        """The root of zero is zero."""
        assert root(3, D("0.000")) == 0
        assert root(7, BigDecimal(0)).is_zero()

    def test_accepts_coercible_arguments(self):
        """Strings, ints and Decimals are accepted for x."""
        assert root(4, "14.75") == D("1.9597")
        assert root(4, Decimal("14.75")) == D("1.9597")
        assert root(2, 4) == 2

    def test_more_guard_digits(self):
        """Extra guard digits do not change the rounded result."""
        assert root(4, D("9.125"), config=RootConfig(guard_digits=4)) == D("1.73803")


class TestRootErrors:
    """Tests for root() error conditions."""

    def test_negative_argument(self):
        """Negative x raises NegativeArgumentError."""
        with pytest.raises(NegativeArgumentError, match="negative argument -2 of root"):
            root(2, D("-2"))

    def test_negative_argument_is_arithmetic_error(self):
        """Errors can be caught as ArithmeticError."""
        with pytest.raises(ArithmeticError):
            root(3, D("-0.5"))

    @pytest.mark.parametrize("n", [0, -3])
    def test_non_positive_index(self, n):
        """n <= 0 raises NonPositiveRootError."""
        with pytest.raises(NonPositiveRootError, match="non-positive index"):
            root(n, D("2"))

    @pytest.mark.parametrize("n", [2.0, True])
    def test_non_integer_index(self, n):
        """Non-int indices raise NonPositiveRootError."""
        with pytest.raises(NonPositiveRootError):
            root(n, D("2"))  # type: ignore

    def test_negative_argument_checked_first(self):
        """A negative argument is reported before a bad index."""
        with pytest.raises(NegativeArgumentError):
            root(0, D("-1"))

    def test_errors_raise_before_iterating(self):
        """Argument errors are raised before the seed is computed."""
        with capture_logs() as logs:
            with pytest.raises(BigDecimalMathError):
                root(2, D("-1"))
            with pytest.raises(BigDecimalMathError):
                root(-2, D("1"))
        assert not [log for log in logs if log["event"] == "root_seed"]

    @pytest.mark.parametrize(
        "x",
        [BigDecimal(1, -400), BigDecimal(1, 400)],
        ids=["overflow", "underflow"],
    )
    def test_seed_out_of_float_range(self, x):
        """Arguments outside the float range cannot be seeded."""
        with pytest.raises(FloatRangeError):
            root(2, x)

    def test_tolerance_out_of_float_range(self):
        """Arguments with too many digits underflow the tolerance."""
        with pytest.raises(FloatRangeError):
            root(2, BigDecimal(10**399 + 1, 399))

    def test_iteration_budget(self):
        """An exhausted iteration budget raises RootDidNotConverge."""
        with capture_logs() as logs:
            with pytest.raises(RootDidNotConverge, match="did not converge"):
                root(2, D("2." + "0" * 29), config=RootConfig(max_iterations=1))
        warnings = [log for log in logs if log["event"] == "root_did_not_converge"]
        assert len(warnings) == 1
        assert warnings[0]["log_level"] == "warning"

    def test_zero_approximation(self, monkeypatch):
        """An iterate of exactly zero raises ZeroApproximationError."""
        # The float seed of a positive argument is positive and Newton steps
        # on s^n - x from there stay above the root, so no real input reaches
        # zero. Seeding cbrt(2) with -1 lands the first step on 0.00.
        monkeypatch.setattr("bigdecimalmath.nth_root._seed", lambda n, x: BigDecimal(-1))
        with pytest.raises(ZeroApproximationError):
            root(3, D("2"))


class TestRootLogging:
    """Tests for root() log events."""

    def test_seed_iterations_and_convergence_logged(self):
        """A successful root logs its seed, each iteration and convergence."""
        with capture_logs() as logs:
            root(4, D("9.125"))
        root_logs = [log for log in logs if log["event"].startswith("root_")]
        events = [log["event"] for log in root_logs]
        assert events[0] == "root_seed"
        assert "root_iteration" in events
        assert events[-1] == "root_converged"
        converged = root_logs[-1]
        assert converged["n"] == 4
        assert converged["digits"] == 5
        assert converged["iterations"] >= 1


class TestHelpers:
    """Tests for err2prec, scale_prec and relative_tolerance."""

    def test_err2prec(self):
        """err2prec counts digits justified by a relative error."""
        assert err2prec(0.125) == 1
        assert err2prec(-0.125) == 1
        assert err2prec(1.3699e-5) == 5
        assert err2prec(1.25e-30) == 30

    def test_scale_prec(self):
        """scale_prec appends zeros without changing the value."""
        value = scale_prec(D("1.79"), 2)
        assert value.as_integer_and_scale() == (17900, 4)
        assert value == D("1.79")

    def test_relative_tolerance(self):
        """eps = ulp(x) / (2 n x)."""
        assert relative_tolerance(4, D("9.125")) == pytest.approx(0.001 / (8 * 9.125))
        assert relative_tolerance(2, D("2.00")) == pytest.approx(0.00125)

    def test_relative_tolerance_underflow(self):
        """A tolerance below the float range raises FloatRangeError."""
        with pytest.raises(FloatRangeError):
            relative_tolerance(2, BigDecimal(10**399 + 1, 399))
