"""
Tests for Root Isolation
"""

from fractions import Fraction

import pytest
from ballbound import (
    Ball,
    CollectingObserver,
    EventKind,
    InvalidIntervalError,
    Polynomial,
    isolate_roots,
    sinpi,
)
from ballbound.roots import CallableTarget, PolynomialTarget, target_for
from ballbound.arithmetic import Sign
from ballbound.bisection import interval_bounds


def contains_point(interval, x):
    lo, hi = interval
    return lo <= x <= hi


class TestIsolateRoots:
    """Test root isolation on callables."""

    def test_sinpi_even_roots(self):
        """sin(pi x / 2) on [-9.5, 19.5] has the 14 even integers as roots."""
        found, flags = isolate_roots(lambda x: sinpi(x / 2), -9.5, 19.5)
        roots = list(range(-8, 20, 2))
        assert len(roots) == 14
        assert len(found) == 14
        assert all(flags)
        for interval, root in zip(found, roots):
            assert contains_point(interval, root)

    def test_sorted_and_disjoint(self):
        """Found intervals are sorted by lower endpoint."""
        found, _ = isolate_roots(lambda x: sinpi(x / 2), -9.5, 19.5)
        for (_, hi), (lo, _) in zip(found, found[1:]):
            assert hi <= lo

    def test_no_roots(self):
        """x^2 + 1 has no real roots."""
        found, flags = isolate_roots(lambda x: x ** 2 + 1, -1, 1)
        assert found == []
        assert flags == []

    def test_check_unique_false(self):
        """Without uniqueness checks no interval is flagged."""
        found, flags = isolate_roots(lambda x: sinpi(x / 2), -9.5, 19.5,
                                     check_unique=False)
        assert not any(flags)
        for root in range(-8, 20, 2):
            assert any(contains_point(interval, root) for interval in found)

    def test_zero_depth(self):
        """depth <= 0 returns the input interval unchecked."""
        found, flags = isolate_roots(lambda x: x, -1, 1, depth=0)
        assert found == [(-1, 1)]
        assert flags == [False]

    def test_thin_interval_root(self):
        """A thin interval at an exact root is a unique root."""
        found, flags = isolate_roots(lambda x: x - 1, 1, 1)
        assert found == [(1, 1)]
        assert flags == [True]

    def test_thin_interval_no_root(self):
        """A thin interval away from the root is empty."""
        found, flags = isolate_roots(lambda x: x - 1, 2, 2)
        assert found == []

    def test_invalid_interval(self):
        """Invalid intervals raise."""
        with pytest.raises(InvalidIntervalError):
            isolate_roots(lambda x: x, 1, 0)

    def test_threaded(self):
        """Threaded isolation finds the same intervals."""
        f = lambda x: sinpi(x / 2)
        serial = isolate_roots(f, -9.5, 19.5)
        threaded = isolate_roots(f, -9.5, 19.5, threaded=True)
        assert serial == threaded

    def test_proof_events(self):
        """Every unique root is reported."""
        observer = CollectingObserver()
        found, flags = isolate_roots(lambda x: sinpi(x / 2), -9.5, 19.5,
                                     observer=observer)
        assert len(observer.of_kind(EventKind.PROOF)) == sum(flags)
        assert len(observer.of_kind(EventKind.ROUND)) > 0

    def test_verbose_prints(self, capsys):
        """verbose=True prints progress."""
        isolate_roots(lambda x: x - 0.3, 0, 1, verbose=True)
        out = capsys.readouterr().out
        assert "isolate_roots" in out
        assert "Found: 1" in out


class TestIsolateHighPrecision:
    """Test root isolation above double precision."""

    @pytest.mark.parametrize("prec", [53, 64, 128, 256])
    def test_sinpi_roots(self, prec):
        """sin(pi x / 2) on [-3.3, 4.7] at several precisions."""
        found, flags = isolate_roots(lambda x: sinpi(x / 2), -3.3, 4.7, prec=prec)
        assert len(found) == 4
        assert all(flags)
        for interval, root in zip(found, [-2, 0, 2, 4]):
            assert contains_point(interval, root)

    def test_root_next_to_endpoint(self):
        """A root just inside a 128 bit endpoint is not lost."""
        f = lambda x: (10 * x - 1) * (x - Fraction(1, 2)) * (x - Fraction(7, 10))
        found, _ = isolate_roots(f, "0.1", 1, prec=128)
        a, _ = interval_bounds("0.1", 1, 128)
        assert found[0][0] == a
        for root in [Fraction(1, 10), Fraction(1, 2), Fraction(7, 10)]:
            assert any(Ball(lo, hi, 128).contains(root) for lo, hi in found)


class TestIsolatePolynomialRoots:
    """Test root isolation on polynomials."""

    def test_cubic(self):
        """(x - 1)(x - 2)(x - 3) on [0, 4.5]."""
        p = Polynomial.from_roots([1, 2, 3])
        found, flags = isolate_roots(p, 0, 4.5)
        assert len(found) == 3
        assert all(flags)
        for interval, root in zip(found, [1, 2, 3]):
            assert contains_point(interval, root)

    def test_double_root(self):
        """A double root is never proved unique."""
        p = Polynomial.from_roots([0.25, 0.25])
        found, flags = isolate_roots(p, 0, 1)
        assert len(found) > 0
        assert not any(flags)
        assert any(contains_point(interval, 0.25) for interval in found)


class TestTargets:
    """Test the function shape wrappers."""

    def test_target_for(self):
        """Polynomials and callables get their own target."""
        assert isinstance(target_for(Polynomial([1, 1]), 64), PolynomialTarget)
        assert isinstance(target_for(lambda x: x, 64), CallableTarget)
        with pytest.raises(TypeError):
            target_for(3, 64)

    def test_callable_derivative(self):
        """Derivative through a degree one series."""
        target = CallableTarget(lambda x: x ** 3, 64)
        assert target.derivative(Ball(2, 2)) == Ball(12, 12)

    def test_constant_derivative(self):
        """Functions returning numbers have zero derivative."""
        target = CallableTarget(lambda x: 5, 64)
        assert target.derivative(Ball(0, 1)).is_zero()
        assert target.value(Ball(0, 1)) == Ball(5, 5)

    def test_check_root_interval(self):
        """Sign change with monotone function is a unique root."""
        target = CallableTarget(lambda x: x - 0.5, 64)
        a, b = Ball(0, 0).lo, Ball(1, 1).lo
        assert target.check_root_interval(a, b, Sign.NEGATIVE, Sign.POSITIVE) == (True, True)

    def test_check_root_interval_excluded(self):
        """No root when the value excludes zero."""
        target = CallableTarget(lambda x: x + 2, 64)
        a, b = Ball(0, 0).lo, Ball(1, 1).lo
        assert target.check_root_interval(a, b, Sign.POSITIVE, Sign.POSITIVE) == (False, False)

    def test_check_root_interval_indeterminate(self):
        """An endpoint of unknown sign proves nothing."""
        target = CallableTarget(lambda x: x, 64)
        a, b = Ball(0, 0).lo, Ball(1, 1).lo
        assert target.check_root_interval(a, b, Sign.INDETERMINATE, Sign.POSITIVE) == (True, False)

    def test_polynomial_same_sign_monotone(self):
        """Same sign at both ends and monotone excludes a root."""
        target = PolynomialTarget(Polynomial([0.9, -1.9, 1]), 64)
        a, b = Ball(1.1, 1.1).lo, Ball(2, 2).lo
        sign_a, sign_b = target.sign_at(a), target.sign_at(b)
        assert sign_a == sign_b == Sign.POSITIVE
        # Horner overestimates p on [a, b] to contain zero
        assert target.value(Ball(a, b)).contains_zero()
        assert target.check_root_interval(a, b, sign_a, sign_b) == (False, False)


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
