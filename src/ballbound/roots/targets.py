"""
Function shapes seen by the root finders.

A root finder accepts either a Python callable (evaluated on Balls and,
for derivatives, on TaylorSeries) or a Polynomial. target_for wraps
either one behind the same RootTarget interface so the algorithms do not
branch on the shape.
"""

from typing import Callable, Tuple, Union

from ..arithmetic.ball import MPFR, Ball, Sign
from ..arithmetic.polynomial import Polynomial
from ..arithmetic.series import TaylorSeries


class RootTarget:
    """A function whose roots are searched."""

    def __init__(self, prec: int):
        self.prec = prec

    def point(self, x) -> Ball:
        if isinstance(x, Ball):
            return x
        return Ball.point(x, self.prec)

    def value(self, x: Ball) -> Ball:
        raise NotImplementedError

    def derivative(self, x: Ball) -> Ball:
        raise NotImplementedError

    def sign_at(self, x: MPFR) -> Sign:
        """Certain sign of the function at the point x."""
        return self.value(self.point(x)).sign()

    def check_root_interval(self, a: MPFR, b: MPFR, sign_a: Sign, sign_b: Sign,
                            check_unique: bool = True) -> Tuple[bool, bool]:
        """
        (maybe, unique) for the interval [a, b].

        maybe is False only if the function provably has no root in [a, b];
        unique is True only if it provably has exactly one.
        """
        raise NotImplementedError


class CallableTarget(RootTarget):
    """Python callable accepting Balls and TaylorSeries."""

    def __init__(self, f: Callable, prec: int):
        super().__init__(prec)
        self.f = f

    def value(self, x: Ball) -> Ball:
        y = self.f(x)
        if isinstance(y, Ball):
            return y
        return Ball.point(y, self.prec)

    def derivative(self, x: Ball) -> Ball:
        y = self.f(TaylorSeries.variable(x, 1))
        if isinstance(y, TaylorSeries):
            return y[1]
        # Constant function
        return Ball.zero(self.prec)

    def check_root_interval(self, a, b, sign_a, sign_b, check_unique=True):
        # A value enclosing zero at an endpoint leaves nothing to prove
        if sign_a == Sign.INDETERMINATE or sign_b == Sign.INDETERMINATE:
            return True, False

        x = Ball(a, b, self.prec)
        if not self.value(x).contains_zero():
            return False, False

        if check_unique and sign_a != sign_b:
            # Sign change and a derivative bounded away from zero
            return True, not self.derivative(x).contains_zero()
        return True, False


class PolynomialTarget(RootTarget):
    """Polynomial, evaluated together with its derivative."""

    def __init__(self, p: Polynomial, prec: int):
        super().__init__(prec)
        self.p = p
        self.dp = p.derivative()

    def value(self, x: Ball) -> Ball:
        return self.p(x)

    def derivative(self, x: Ball) -> Ball:
        return self.dp(x)

    def check_root_interval(self, a, b, sign_a, sign_b, check_unique=True):
        x = Ball(a, b, self.prec)
        if not check_unique:
            return self.p(x).contains_zero(), False

        y, dy = self.p.evaluate2(x)
        if not y.contains_zero():
            return False, False

        s = sign_a * sign_b
        if s < 0:
            return True, not dy.contains_zero()
        if s > 0:
            # Same sign at both ends and monotone: no root
            return dy.contains_zero(), False
        return True, False


def target_for(f: Union[Callable, Polynomial], prec: int) -> RootTarget:
    """Wrap a callable or a Polynomial as a RootTarget."""
    if isinstance(f, RootTarget):
        return f
    if isinstance(f, Polynomial):
        return PolynomialTarget(f, prec)
    if callable(f):
        return CallableTarget(f, prec)
    raise TypeError(f"Expected a callable or a Polynomial, got {type(f).__name__}")
