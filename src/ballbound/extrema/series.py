"""
Taylor-Model Extrema

Enclose the extrema of f on a single interval X = [a, b] by a Taylor
polynomial at the midpoint m of X plus a remainder bound:

    f(x) = q(x - m) + R(x),    R(x) in p[n + 1] * (x - m)^(n + 1)

where q is the degree n expansion of f at m and p[n + 1] encloses the
next Taylor coefficient over all of X. The extrema of q are found with
the polynomial extrema on [a - m, b - m] and the remainder is added.

If the first derivative does not vanish on X, f is monotone and only
the endpoints are evaluated.

These functions are the per-interval step of the bisection in
ballbound.extrema.enclosure but can be used on their own.
"""

from typing import Callable, Optional, Tuple

from ..arithmetic.ball import MPFR, Ball, Sign, ball_max, ball_min
from ..arithmetic.series import TaylorSeries
from ..bisection import interval_bounds
from ..config import DEFAULT_DEGREE, DEFAULT_PRECISION
from ..observer import Observer, resolve_observer
from .polynomial import (
    check_signs,
    extrema_polynomial,
    maximum_polynomial,
    minimum_polynomial,
)


def taylor_remainder(p: TaylorSeries, x: Ball) -> Ball:
    """
    Remainder term p[n] * (x - mid(x))^n for a series p of degree n.

    p is expected to be the expansion of f on the whole ball x.
    """
    n = p.degree
    return p[n] * (x - x.midpoint()) ** n


def _maybe_abs(v: Ball, abs_value: bool) -> Ball:
    return abs(v) if abs_value else v


def _value(f: Callable, x: Ball) -> Ball:
    y = f(x)
    if isinstance(y, Ball):
        return y
    return Ball.point(y, x.prec)


def _add_remainder(value: Ball, remainder: Ball, abs_value: bool) -> Ball:
    if abs_value:
        # | |q| - |f| | <= |R|, so widen symmetrically
        m = max(-remainder.lo, remainder.hi)
        return value + Ball(-m, m, remainder.prec)
    return value + remainder


class _TaylorModel:
    """Expansion of f on [a, b]: the remainder and the midpoint polynomial."""

    def __init__(self, f: Callable, a: MPFR, b: MPFR, degree: int, prec: int):
        if degree < 0:
            raise ValueError(f"degree must be non-negative, got {degree}")
        self.f = f
        self.a = a
        self.b = b
        self.degree = degree
        self.prec = prec
        self.x = Ball(a, b, prec)
        self.p = _series(f, self.x, degree + 1)

    def is_monotone(self) -> bool:
        return not self.p[1].contains_zero()

    def increasing(self) -> bool:
        return self.p[1].sign() == Sign.POSITIVE

    def endpoint_values(self) -> Tuple[Ball, Ball]:
        return (_value(self.f, Ball(self.a, self.a, self.prec)),
                _value(self.f, Ball(self.b, self.b, self.prec)))

    def remainder(self) -> Ball:
        return taylor_remainder(self.p, self.x)

    def midpoint_expansion(self) -> TaylorSeries:
        return _series(self.f, self.x.midpoint(), self.degree)

    def offsets(self) -> Tuple[Ball, Ball]:
        """a - m and b - m as balls (inexact when rounding occurred)."""
        m = self.x.midpoint()
        return (Ball(self.a, self.a, self.prec) - m,
                Ball(self.b, self.b, self.prec) - m)


def _series(f: Callable, x: Ball, degree: int) -> TaylorSeries:
    p = f(TaylorSeries.variable(x, degree))
    if isinstance(p, TaylorSeries):
        return p
    # Constant function
    return TaylorSeries.constant(p, degree, x.prec)


def _prepare(a, b, prec, observer, verbose):
    prec = prec or DEFAULT_PRECISION
    a, b = interval_bounds(a, b, prec)
    return a, b, prec, resolve_observer(observer, verbose)


def _widen_offsets(q_poly, c: Ball, d: Ball, abs_value: bool,
                   minimum: Optional[Ball], maximum: Optional[Ball]):
    # Include the parts of [c, d] lost by rounding a - m and b - m
    for offset in (c, d):
        if not offset.is_exact():
            y = _maybe_abs(q_poly(offset), abs_value)
            if minimum is not None:
                minimum = ball_min(minimum, y)
            if maximum is not None:
                maximum = ball_max(maximum, y)
    return minimum, maximum


def extrema_series(
    f: Callable,
    a,
    b,
    degree: int = DEFAULT_DEGREE,
    abs_value: bool = False,
    prec: Optional[int] = None,
    observer: Optional[Observer] = None,
    verbose: bool = False,
) -> Tuple[Ball, Ball, Ball]:
    """
    Enclosures (min, max, mid_value) of f on [a, b].

    mid_value encloses f at the midpoint of the interval; it is
    indeterminate when the expansion at the midpoint was not computed.
    With abs_value the extrema of |f| are enclosed.
    """
    a, b, prec, observer = _prepare(a, b, prec, observer, verbose)

    if a == b:
        fa = _maybe_abs(_value(f, Ball(a, a, prec)), abs_value)
        return fa, fa, fa

    model = _TaylorModel(f, a, b, degree, prec)

    if model.is_monotone():
        observer.info("extrema_series", "monotone on interval - evaluate on endpoints")
        fa, fb = model.endpoint_values()
        if abs_value:
            if check_signs([fa, fb]) == -1:
                return Ball.zero(prec), ball_max(abs(fa), abs(fb)), Ball.nan(prec)
            return (ball_min(abs(fa), abs(fb)).nonnegative_part(),
                    ball_max(abs(fa), abs(fb)), Ball.nan(prec))
        return ball_min(fa, fb), ball_max(fa, fb), Ball.nan(prec)

    remainder = model.remainder()
    if not remainder.is_finite():
        observer.info("extrema_series", "non-finite remainder term")
        res = _maybe_abs(model.p[0], abs_value)
        return res, res, res

    q = model.midpoint_expansion()
    q_poly = q.to_polynomial()
    c, d = model.offsets()

    if c.hi <= d.lo:
        minimum, maximum = extrema_polynomial(q_poly, c.hi, d.lo, abs_value)
        minimum, maximum = _widen_offsets(q_poly, c, d, abs_value, minimum, maximum)
    else:
        # Offsets overlap after rounding, fall back to direct evaluation
        minimum = maximum = _maybe_abs(q_poly(c.union(d)), abs_value)

    return (_add_remainder(minimum, remainder, abs_value),
            _add_remainder(maximum, remainder, abs_value),
            _maybe_abs(q[0], abs_value))


def minimum_series(
    f: Callable,
    a,
    b,
    degree: int = DEFAULT_DEGREE,
    abs_value: bool = False,
    prec: Optional[int] = None,
    observer: Optional[Observer] = None,
    verbose: bool = False,
) -> Tuple[Ball, Ball]:
    """Enclosures (min, mid_value) of f (or |f|) on [a, b]."""
    a, b, prec, observer = _prepare(a, b, prec, observer, verbose)

    if a == b:
        fa = _maybe_abs(_value(f, Ball(a, a, prec)), abs_value)
        return fa, fa

    model = _TaylorModel(f, a, b, degree, prec)

    if model.is_monotone():
        observer.info("minimum_series", "monotone on interval - evaluate on endpoints")
        if abs_value:
            fa, fb = model.endpoint_values()
            if check_signs([fa, fb]) == -1:
                res = Ball.zero(prec)
            else:
                res = ball_min(abs(fa), abs(fb)).nonnegative_part()
        elif model.increasing():
            res = _value(f, Ball(a, a, prec))
        else:
            res = _value(f, Ball(b, b, prec))
        return res, Ball.nan(prec)

    remainder = model.remainder()
    if not remainder.is_finite():
        observer.info("minimum_series", "non-finite remainder term")
        res = _maybe_abs(model.p[0], abs_value)
        return res, res

    q = model.midpoint_expansion()
    q_poly = q.to_polynomial()
    c, d = model.offsets()

    if c.hi <= d.lo:
        minimum = minimum_polynomial(q_poly, c.hi, d.lo, abs_value)
        minimum, _ = _widen_offsets(q_poly, c, d, abs_value, minimum, None)
    else:
        minimum = _maybe_abs(q_poly(c.union(d)), abs_value)

    return _add_remainder(minimum, remainder, abs_value), _maybe_abs(q[0], abs_value)


def maximum_series(
    f: Callable,
    a,
    b,
    degree: int = DEFAULT_DEGREE,
    abs_value: bool = False,
    prec: Optional[int] = None,
    observer: Optional[Observer] = None,
    verbose: bool = False,
) -> Tuple[Ball, Ball]:
    """Enclosures (max, mid_value) of f (or |f|) on [a, b]."""
    a, b, prec, observer = _prepare(a, b, prec, observer, verbose)

    if a == b:
        fa = _maybe_abs(_value(f, Ball(a, a, prec)), abs_value)
        return fa, fa

    model = _TaylorModel(f, a, b, degree, prec)

    if model.is_monotone():
        observer.info("maximum_series", "monotone on interval - evaluate on endpoints")
        if abs_value:
            fa, fb = model.endpoint_values()
            res = ball_max(abs(fa), abs(fb))
        elif model.increasing():
            res = _value(f, Ball(b, b, prec))
        else:
            res = _value(f, Ball(a, a, prec))
        return res, Ball.nan(prec)

    remainder = model.remainder()
    if not remainder.is_finite():
        observer.info("maximum_series", "non-finite remainder term")
        res = _maybe_abs(model.p[0], abs_value)
        return res, res

    q = model.midpoint_expansion()
    q_poly = q.to_polynomial()
    c, d = model.offsets()

    if c.hi <= d.lo:
        maximum = maximum_polynomial(q_poly, c.hi, d.lo, abs_value)
        _, maximum = _widen_offsets(q_poly, c, d, abs_value, None, maximum)
    else:
        maximum = _maybe_abs(q_poly(c.union(d)), abs_value)

    return _add_remainder(maximum, remainder, abs_value), _maybe_abs(q[0], abs_value)
