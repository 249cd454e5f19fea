"""
Tests for Extrema Enclosures
"""

import math

import gmpy2
import pytest
from ballbound import (
    Ball,
    CollectingObserver,
    EventKind,
    cos,
    extrema_enclosure,
    maximum_enclosure,
    minimum_enclosure,
    sin,
    sqrt,
)
from ballbound.arithmetic import DOWN, to_bound
from ballbound.cli import FUNCTIONS
from ballbound.extrema import ExtremumBound


INF = gmpy2.mpfr("inf")


class TestExtremumBound:
    """Test the running bounds of one extremum."""

    def test_minimum_current(self):
        """Current bounds fold in the open values."""
        bound = ExtremumBound(True, 0, None, None, Ball(INF, INF))
        bound.update_current([Ball(1, 2), Ball(3, 4)])
        assert bound.current_low == 1
        assert bound.current_upp == 2
        assert not bound.possible(Ball(3, 4))
        assert bound.possible(Ball(1.5, 5))

    def test_minimum_non_finite(self):
        """A non-finite value removes the lower bound."""
        bound = ExtremumBound(True, 0, None, None, Ball(INF, INF))
        bound.update_current([Ball(1, 2), Ball.nan()])
        assert bound.current_low == -INF
        assert bound.current_upp == 2
        assert bound.possible(Ball.nan())

    def test_maximum_current(self):
        """Maximum side with an a priori lower bound."""
        bound = ExtremumBound(False, 0, None, None, Ball(3.5, 3.5))
        bound.update_current([Ball(1, 2), Ball(3, 4)])
        assert bound.current_low == 3.5
        assert bound.current_upp == 4
        assert not bound.possible(Ball(1, 2))

    def test_point_value(self):
        """Point values tighten the upper bound of the minimum."""
        bound = ExtremumBound(True, 0, None, None, Ball(INF, INF))
        bound.update_point_value(Ball(1.5, 1.5))
        bound.update_point_value(Ball.nan())
        bound.update_current([Ball(1, 2)])
        assert bound.current_upp == 1.5

    def test_bound_tolerance(self):
        """Values provably above lbound_tol are done."""
        bound = ExtremumBound(True, 0, 1e-10, Ball(0, 0), Ball(INF, INF))
        assert bound.within_tolerance(Ball(1, 2))
        assert not bound.within_tolerance(Ball(-1, 2))

    def test_settle(self):
        """Exhaustion falls back to the current bounds."""
        bound = ExtremumBound(True, 0, None, None, Ball(INF, INF))
        bound.update_current([Ball(1, 2)])
        bound.settle_on_current()
        assert bound.result(64, False) == Ball(1, 2)


class TestExtremaEnclosure:
    """Test enclosures of minimum and maximum."""

    def test_maximum_cos(self):
        """The maximum of cos on [-4, 4] is 1."""
        maximum = maximum_enclosure(cos, -4, 4)
        assert maximum.overlaps(Ball(1, 1))
        assert maximum.diameter() < 1e-4

    def test_minimum_cos(self):
        """The minimum of cos on [-4, 4] is -1."""
        minimum = minimum_enclosure(cos, -4, 4)
        assert minimum.overlaps(Ball(-1, -1))
        assert minimum.diameter() < 1e-4

    def test_both(self):
        """x^2 - 1 on [-1.5, 1.5]."""
        minimum, maximum = extrema_enclosure(lambda x: x ** 2 - 1, -1.5, 1.5)
        assert minimum.contains(-1)
        assert maximum.contains(1.25)

    def test_abs_value(self):
        """|x - 1/2| on [0, 1]."""
        minimum, maximum = extrema_enclosure(lambda x: x - 0.5, 0, 1, abs_value=True)
        assert minimum == Ball(0, 0)
        assert maximum == Ball(0.5, 0.5)

    def test_thin_interval(self):
        """A thin interval gives the value there."""
        minimum, maximum = extrema_enclosure(lambda x: x ** 2, 1, 1)
        assert minimum == maximum == Ball(1, 1)
        assert minimum_enclosure(lambda x: x - 2, 1, 1, abs_value=True) == Ball(1, 1)

    def test_plain_evaluation(self):
        """Negative degree bisects with plain ball evaluation."""
        minimum = minimum_enclosure(lambda x: 2 * x + 1, 0, 1, degree=-1, atol=1e-3)
        maximum = maximum_enclosure(lambda x: 2 * x + 1, 0, 1, degree=-1, atol=1e-3)
        assert minimum.contains(1)
        assert maximum.contains(3)
        assert minimum.diameter() <= 1e-3
        assert maximum.diameter() <= 1e-3

    def test_lbound_tol(self):
        """A minimum provably above lbound_tol needs no bisection."""
        observer = CollectingObserver()
        minimum = minimum_enclosure(cos, -1, 1, lbound_tol=0, observer=observer)
        assert minimum.contains(math.cos(1))
        assert minimum.lo > 0
        assert len(observer.of_kind(EventKind.ROUND)) == 1

    def test_ubound_tol(self):
        """A maximum provably below ubound_tol needs no bisection."""
        observer = CollectingObserver()
        maximum = maximum_enclosure(cos, 2, 3, ubound_tol=0, observer=observer)
        assert maximum.contains(math.cos(2))
        assert len(observer.of_kind(EventKind.ROUND)) == 1

    def test_point_values(self):
        """A priori values are accepted and keep the result valid."""
        minimum, maximum = extrema_enclosure(
            cos, -4, 4,
            point_value_min=Ball(-0.5, -0.5),
            point_value_max=Ball(0.5, 0.5),
        )
        assert minimum.overlaps(Ball(-1, -1))
        assert maximum.overlaps(Ball(1, 1))

    def test_budget_exhaustion(self):
        """Exhaustion returns the current bounds and reports it."""
        observer = CollectingObserver()
        minimum, maximum = extrema_enclosure(
            cos, -4, 4, degree=-1, maxevals=10, observer=observer)
        assert minimum.contains(-1)
        assert maximum.contains(1)
        assert minimum.is_finite()
        assert len(observer.of_kind(EventKind.STOP)) == 1

    def test_depth_start(self):
        """Initial bisection gives the same answer."""
        maximum = maximum_enclosure(cos, -4, 4, depth_start=3)
        assert maximum.overlaps(Ball(1, 1))

    def test_log_bisection(self):
        """Logarithmic bisection on a positive interval."""
        minimum = minimum_enclosure(lambda x: x + 1 / x, 0.1, 10, log_bisection=True)
        assert minimum.overlaps(Ball(2, 2))

    def test_threaded(self):
        """Threaded evaluation gives the same enclosure."""
        serial = maximum_enclosure(cos, -4, 4)
        threaded = maximum_enclosure(cos, -4, 4, threaded=True)
        assert serial == threaded

    def test_invalid_interval(self):
        """Invalid intervals raise."""
        with pytest.raises(ValueError):
            extrema_enclosure(cos, 1, 0)


class TestEnclosurePrecision:
    """Test enclosures above double precision."""

    def test_minimum_at_high_precision_endpoint(self):
        """The minimum of x is the 128 bit left endpoint itself."""
        a = to_bound("0.1", 128, DOWN)
        minimum = minimum_enclosure(lambda x: x, a, 1, prec=128)
        assert minimum == Ball(a, a, 128)

    def test_minimum_at_inexact_endpoint(self):
        """An endpoint given as a string is rounded outward, never inward."""
        minimum = minimum_enclosure(lambda x: x, "0.1", 1, prec=128)
        assert minimum.lo <= gmpy2.mpq(1, 10)
        assert minimum.diameter() < 1e-30

    @pytest.mark.parametrize("prec", [53, 128, 256])
    def test_maximum_cos(self, prec):
        """The maximum of cos on [-4, 4] at several precisions."""
        maximum = maximum_enclosure(cos, -4, 4, prec=prec)
        assert maximum.overlaps(Ball(1, 1, prec))
        assert maximum.prec == prec

    @pytest.mark.parametrize("prec", [53, 128, 256])
    def test_extrema_polynomial_function(self, prec):
        """x^2 - 1 on [-1.5, 1.5] at several precisions."""
        minimum, maximum = extrema_enclosure(lambda x: x ** 2 - 1, -1.5, 1.5, prec=prec)
        assert minimum.contains(-1)
        assert maximum.contains(1.25)


class TestEnclosureTolerance:
    """Test that tighter tolerances give tighter enclosures."""

    def test_minimum_tighter_atol(self):
        """A tighter atol gives an enclosure inside the looser one."""
        loose = minimum_enclosure(cos, -4, 4, degree=-1, atol=1e-2)
        tight = minimum_enclosure(cos, -4, 4, degree=-1, atol=1e-4)
        assert loose.contains(tight)
        assert tight.diameter() <= 1e-4

    def test_extrema_tighter_atol(self):
        """Both sides shrink with atol."""
        loose = extrema_enclosure(cos, -4, 4, degree=-1, atol=1e-2)
        tight = extrema_enclosure(cos, -4, 4, degree=-1, atol=1e-4)
        for outer, inner in zip(loose, tight):
            assert outer.contains(inner)


def expected_extrema(name):
    """Known minimum and maximum of the demo functions."""
    if name == 'cos-cos':
        return Ball(-1.5, -1.5), Ball(3, 3)
    if name == 'sinpi-half':
        return Ball(-1, -1), Ball(1, 1)
    if name == 'rational':
        return (7 - 5 * sqrt(Ball(2, 2))) / 2, (7 + 5 * sqrt(Ball(2, 2))) / 2
    if name == 'x-sin':
        return None, -10 * sin(Ball(10, 10))
    raise KeyError(name)


class TestDemoFunctions:
    """Test enclosures of the command line demo functions."""

    @pytest.mark.parametrize("name", ['cos-cos', 'sinpi-half', 'rational', 'x-sin'])
    def test_extrema(self, name):
        """Enclosures overlap the known extrema."""
        f, (a, b) = FUNCTIONS[name]
        minimum, maximum = extrema_enclosure(f, a, b)
        expected_min, expected_max = expected_extrema(name)
        if expected_min is not None:
            assert minimum.overlaps(expected_min)
        assert maximum.overlaps(expected_max)

    def test_x_sin_minimum(self):
        """-x sin x on [0, 10] has its minimum near x = 7.9787."""
        f, (a, b) = FUNCTIONS['x-sin']
        minimum = minimum_enclosure(f, a, b)
        assert abs(float(minimum) + 7.916727) < 1e-4
        assert minimum.lo <= f(Ball(7.9787, 7.9787)).hi

    @pytest.mark.parametrize("name", ['cos-cos', 'rational'])
    def test_tolerance_met(self, name):
        """The default tolerance is met on the simple demo functions."""
        f, (a, b) = FUNCTIONS[name]
        minimum, maximum = extrema_enclosure(f, a, b)
        assert minimum.diameter() < 1e-6
        assert maximum.diameter() < 1e-6


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
