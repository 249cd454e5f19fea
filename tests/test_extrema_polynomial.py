"""
Tests for Polynomial Extrema
"""

from fractions import Fraction

import pytest
from ballbound import Ball, CollectingObserver, EventKind, Polynomial
from ballbound.extrema import (
    check_signs,
    extrema_polynomial,
    extrema_polynomial_low_degree,
    maximum_polynomial,
    minimum_polynomial,
)


class TestCheckSigns:
    """Test sign bookkeeping."""

    def test_same_sign(self):
        """All positive."""
        assert check_signs([Ball(1, 2), Ball(3, 4)]) == 1

    def test_different_signs(self):
        """Provably different signs."""
        assert check_signs([Ball(1, 2), Ball(-1, 1), Ball(-4, -3)]) == -1

    def test_undetermined(self):
        """A value containing zero and no sign change."""
        assert check_signs([Ball(1, 2), Ball(-1, 1)]) == 0


class TestLowDegree:
    """Test closed-form extrema of degree at most two."""

    def test_linear(self):
        """p = 1 + 3x."""
        p = Polynomial([1, 3])
        assert extrema_polynomial_low_degree(p, -1, 1) == (Ball(-2, -2), Ball(4, 4))
        assert extrema_polynomial_low_degree(p, 0, 1) == (Ball(1, 1), Ball(4, 4))
        assert extrema_polynomial_low_degree(p, -2, -1) == (Ball(-5, -5), Ball(-2, -2))

    def test_linear_abs(self):
        """|1 + 3x| crosses zero on [-1, 1]."""
        p = Polynomial([1, 3])
        assert extrema_polynomial_low_degree(p, -1, 1, True) == (Ball(0, 0), Ball(4, 4))
        assert extrema_polynomial_low_degree(p, 0, 1, True) == (Ball(1, 1), Ball(4, 4))
        assert extrema_polynomial_low_degree(p, -2, -1, True) == (Ball(2, 2), Ball(5, 5))

    def test_quadratic(self):
        """p = -3 - x + 2x^2 on [-1, 1] has its minimum at 1/4."""
        p = Polynomial([-3, -1, 2])
        minimum, maximum = extrema_polynomial_low_degree(p, -1, 1)
        assert minimum.contains(Fraction(-25, 8))
        assert minimum.diameter() < 1e-15
        assert maximum.contains(0)
        assert maximum.diameter() < 1e-15

    def test_quadratic_critical_point_outside(self):
        """Critical point outside the interval is ignored."""
        p = Polynomial([0, 0, 1])
        assert extrema_polynomial_low_degree(p, 1, 2) == (Ball(1, 1), Ball(4, 4))

    def test_constant(self):
        """Constant polynomials."""
        p = Polynomial([-2])
        assert extrema_polynomial_low_degree(p, 0, 1) == (Ball(-2, -2), Ball(-2, -2))
        assert extrema_polynomial_low_degree(p, 0, 1, True) == (Ball(2, 2), Ball(2, 2))

    def test_degree_too_high(self):
        """Degree above two is rejected."""
        with pytest.raises(ValueError):
            extrema_polynomial_low_degree(Polynomial([0, 0, 0, 1]), 0, 1)


class TestExtremaPolynomial:
    """Test extrema of general polynomials."""

    def test_quadratic(self):
        """x^2 - 1 on [-1.5, 1.5]."""
        p = Polynomial([-1, 0, 1])
        minimum, maximum = extrema_polynomial(p, -1.5, 1.5)
        assert minimum == Ball(-1, -1)
        assert maximum == Ball(1.25, 1.25)

    def test_cubic_interior(self):
        """x^3 - 3x on [-1.5, 1.5] has its extrema at -1 and 1."""
        p = Polynomial([0, -3, 0, 1])
        minimum, maximum = extrema_polynomial(p, -1.5, 1.5)
        assert minimum.contains(-2)
        assert maximum.contains(2)
        assert minimum.diameter() < 1e-6
        assert maximum.diameter() < 1e-6

    def test_cubic_endpoints(self):
        """x^3 - x on [-2, 2] has its extrema at the endpoints."""
        p = Polynomial([0, -1, 0, 1])
        minimum, maximum = extrema_polynomial(p, -2, 2)
        assert minimum.contains(-6)
        assert maximum.contains(6)
        assert minimum.diameter() < 1e-6
        assert maximum.diameter() < 1e-6

    def test_one_sided(self):
        """minimum_polynomial and maximum_polynomial agree with both."""
        p = Polynomial([0, -3, 0, 1])
        minimum, maximum = extrema_polynomial(p, -1.5, 1.5)
        assert minimum_polynomial(p, -1.5, 1.5).overlaps(minimum)
        assert maximum_polynomial(p, -1.5, 1.5).overlaps(maximum)

    def test_abs_crossing_zero(self):
        """|x^3 - 3x| on [-1.5, 1.5] has minimum zero."""
        p = Polynomial([0, -3, 0, 1])
        minimum, maximum = extrema_polynomial(p, -1.5, 1.5, abs_value=True)
        assert minimum == Ball(0, 0)
        assert maximum.contains(2)

    def test_abs_interior_zero(self):
        """(x^2 - 1)^2 x + 1 on [0, 1] has minimum 1 at both endpoints."""
        p = Polynomial([1, 1, 0, -2, 0, 1])
        minimum = minimum_polynomial(p, 0, 1, abs_value=True)
        maximum = maximum_polynomial(p, 0, 1, abs_value=True)
        assert minimum.contains(1)
        assert maximum.lo > 1

    def test_thin_interval(self):
        """A thin interval gives the value there."""
        p = Polynomial([0, -3, 0, 1])
        assert extrema_polynomial(p, 2, 2) == (Ball(2, 2), Ball(2, 2))

    def test_not_polynomial(self):
        """Only Polynomials are accepted."""
        with pytest.raises(TypeError):
            extrema_polynomial(lambda x: x, 0, 1)

    def test_wide_coefficients(self):
        """Very wide coefficients fall back to interval evaluation."""
        observer = CollectingObserver()
        p = Polynomial([Ball(-100, 100), 0, 0, 1])
        minimum, maximum = extrema_polynomial(p, 0, 1, observer=observer)
        assert minimum.contains(-100)
        assert maximum.contains(101)
        assert any("too wide" in m for m in observer.messages(EventKind.INFO))


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
