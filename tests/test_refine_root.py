"""
Tests for Root Refinement
"""

import gmpy2
import pytest
from ballbound import (
    Ball,
    CollectingObserver,
    EventKind,
    Polynomial,
    refine_root,
    refine_root_bisection,
    sin,
)


def square_minus_two(x):
    return x ** 2 - 2


def encloses_sqrt2(x: Ball) -> bool:
    # x contains sqrt(2) only if x^2 - 2 contains zero
    return (x * x - 2).contains_zero()


class TestRefineRoot:
    """Test interval Newton refinement."""

    def test_sqrt2(self):
        """Refine sqrt(2) from [1, 2]."""
        root = refine_root(square_minus_two, Ball(1, 2))
        assert root.is_finite()
        assert encloses_sqrt2(root)
        assert root.diameter() < 1e-15
        assert Ball(1, 2).contains(root)

    def test_polynomial(self):
        """Refine a root of a Polynomial."""
        root = refine_root(Polynomial([-2, 0, 1]), Ball(1, 2))
        assert encloses_sqrt2(root)
        assert root.diameter() < 1e-15

    def test_sin_pi(self):
        """Refine pi as a root of sin."""
        root = refine_root(sin, Ball(3, 3.5))
        assert root.overlaps(Ball.pi())
        assert root.diameter() < 1e-15

    def test_strict_failure(self):
        """Without a proof a strict refinement is indeterminate."""
        root = refine_root(square_minus_two, Ball(-1, 1))
        assert root.is_nan()

    def test_non_strict(self):
        """A failed non-strict refinement keeps the input."""
        root = refine_root(square_minus_two, Ball(-1, 1), strict=False)
        assert root == Ball(-1, 1)

    def test_monotone_refinement(self):
        """Every iteration stays inside the input."""
        start = Ball(1.3, 1.5)
        for iterations in range(1, 5):
            root = refine_root(square_minus_two, start, max_iterations=iterations)
            assert start.contains(root)
            assert encloses_sqrt2(root)

    def test_tolerance(self):
        """A loose tolerance stops early."""
        root = refine_root(square_minus_two, Ball(1, 2), atol=0.1)
        assert root.diameter() <= 0.1
        assert encloses_sqrt2(root)

    def test_proof_event(self):
        """The proof is reported once."""
        observer = CollectingObserver()
        refine_root(square_minus_two, Ball(1, 2), observer=observer)
        assert len(observer.of_kind(EventKind.PROOF)) == 1

    def test_failure_event(self):
        """A failed Newton step is reported."""
        observer = CollectingObserver()
        refine_root(square_minus_two, Ball(-1, 1), observer=observer)
        assert len(observer.of_kind(EventKind.STOP)) == 1


class TestRefineRootBisection:
    """Test refinement by bisection on a sign change."""

    def test_sqrt2(self):
        """Bracket sqrt(2) in [1, 2]."""
        a, b = refine_root_bisection(square_minus_two, 1, 2)
        assert a < b
        assert Ball(a, a) ** 2 - 2 < 0
        assert Ball(b, b) ** 2 - 2 > 0
        assert b - a < 1e-8

    def test_no_sign_change_strict(self):
        """x^2 has no sign change on [-1, 1]."""
        a, b = refine_root_bisection(lambda x: x ** 2, -1, 1)
        assert gmpy2.is_nan(a)
        assert gmpy2.is_nan(b)

    def test_no_sign_change_non_strict(self):
        """Non-strict refinement returns the input."""
        a, b = refine_root_bisection(lambda x: x ** 2, -1, 1, strict=False)
        assert (a, b) == (-1, 1)

    def test_max_iterations(self):
        """Each iteration halves the bracket."""
        a, b = refine_root_bisection(square_minus_two, 1, 2, max_iterations=3)
        assert b - a == 0.125

    def test_exact_root_at_midpoint(self):
        """A root exactly at the midpoint is stepped around."""
        a, b = refine_root_bisection(lambda x: x - 1, 0, 2)
        assert a < 1 < b
        assert b - a < 1e-8

    def test_polynomial(self):
        """Polynomials are accepted."""
        a, b = refine_root_bisection(Polynomial([-2, 0, 1]), 1, 2)
        assert b - a < 1e-8


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
