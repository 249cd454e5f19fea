"""
Polynomial Extrema

Enclosures of the minimum and maximum of a polynomial with Ball
coefficients on an interval [a, b]. The extrema are attained either at
an endpoint or at a root of the derivative; the roots are isolated with
isolate_roots, the polynomial is evaluated on every candidate, and the
unique roots whose values could still decide an extremum are refined
with interval Newton steps before the final evaluation.

Polynomials of degree at most two are handled in closed form.

With abs_value the extrema of |p| are computed. The maximum only needs
absolute values of the evaluations. For the minimum, p may cross zero:
if two candidates have provably different signs the minimum is zero.
"""

from functools import reduce
from typing import List, Optional, Sequence, Tuple

from ..arithmetic.ball import MPFR, Ball, Sign, ball_max, ball_min
from ..arithmetic.polynomial import Polynomial
from ..bisection import interval_bounds
from ..observer import Observer, resolve_observer
from ..roots.isolate import isolate_roots
from ..roots.refine import refine_root


# Above this ratio the endpoint evaluations are no tighter than evaluating
# on the whole interval and root isolation on the derivative is pointless
WIDE_COEFFICIENT_RATIO = 0.99


def check_signs(values: Sequence[Ball]) -> int:
    """
    1 if all values provably have the same sign, -1 if two of them
    provably have different signs, 0 otherwise.
    """
    has_negative = has_positive = has_zero = False
    for v in values:
        sign = v.sign()
        has_negative |= sign == Sign.NEGATIVE
        has_positive |= sign == Sign.POSITIVE
        has_zero |= sign == Sign.INDETERMINATE
        if has_negative and has_positive:
            return -1
    return 0 if has_zero else 1


def _maybe_abs(v: Ball, abs_value: bool) -> Ball:
    return abs(v) if abs_value else v


def _endpoints(p: Polynomial, a, b) -> Tuple[MPFR, MPFR]:
    return interval_bounds(a, b, p.prec)


def _point(x: MPFR, prec: int) -> Ball:
    return Ball(x, x, prec)


# ----------------------------------------------------------------------
# Degree <= 2
# ----------------------------------------------------------------------

def _low_degree_candidates(p: Polynomial, a: MPFR, b: MPFR) -> List[Ball]:
    prec = p.prec
    values = [p(_point(a, prec)), p(_point(b, prec))]
    if p.degree == 2:
        x = Ball(a, b, prec)
        t = -p[1] / (p[2] * 2)
        if not t.is_finite():
            # Critical point unknown, it could be anywhere in [a, b]
            values.append(p(x))
        elif t.overlaps(x):
            values.append(p(t.intersection(x)))
    return values


def extrema_polynomial_low_degree(p: Polynomial, a, b,
                                  abs_value: bool = False) -> Tuple[Ball, Ball]:
    """Closed-form extrema of a polynomial of degree at most two."""
    if p.degree > 2:
        raise ValueError(f"expected degree at most 2, got {p.degree}")
    a, b = _endpoints(p, a, b)

    if p.degree <= 0:
        c = p[0]
        if abs_value:
            c = abs(c).nonnegative_part()
        return c, c

    values = _low_degree_candidates(p, a, b)
    if not abs_value:
        return reduce(ball_min, values), reduce(ball_max, values)

    magnitudes = [abs(v) for v in values]
    if check_signs(values) == -1:
        minimum = Ball.zero(p.prec)
    else:
        minimum = reduce(ball_min, magnitudes).nonnegative_part()
    return minimum, reduce(ball_max, magnitudes).nonnegative_part()


def minimum_polynomial_low_degree(p: Polynomial, a, b, abs_value: bool = False) -> Ball:
    return extrema_polynomial_low_degree(p, a, b, abs_value)[0]


def maximum_polynomial_low_degree(p: Polynomial, a, b, abs_value: bool = False) -> Ball:
    return extrema_polynomial_low_degree(p, a, b, abs_value)[1]


# ----------------------------------------------------------------------
# General degree
# ----------------------------------------------------------------------

def _too_wide(pa: Ball, pb: Ball, whole: Ball) -> bool:
    if not whole.is_finite():
        return False
    r = whole.rad
    if r == 0:
        return False
    return max(pa.rad, pb.rad) / r > WIDE_COEFFICIENT_RATIO


class _Candidates:
    """Running extrema over the endpoint values and the derivative roots."""

    def __init__(self, pa: Ball, pb: Ball, abs_value: bool, want_min: bool):
        self.pa = pa
        self.pb = pb
        self.abs_value = abs_value
        self.want_min = want_min
        va, vb = _maybe_abs(pa, abs_value), _maybe_abs(pb, abs_value)
        self.min_endpoints = ball_min(va, vb)
        self.max_endpoints = ball_max(va, vb)
        self.min_value = self.min_endpoints
        self.min_done = False

    def crosses_zero(self, values: Sequence[Ball] = ()) -> bool:
        """Check (once proved, permanently) whether p provably crosses zero."""
        if self.abs_value and self.want_min and not self.min_done:
            if check_signs([self.pa, self.pb] + list(values)) == -1:
                self.min_value = Ball.zero(self.pa.prec)
                self.min_done = True
                return True
        return False

    def fold(self, values: Sequence[Ball]) -> Tuple[Ball, Ball]:
        minimum = self.min_value if self.min_done else self.min_endpoints
        maximum = self.max_endpoints
        for v in values:
            v = _maybe_abs(v, self.abs_value)
            if not self.min_done:
                minimum = ball_min(minimum, v)
            maximum = ball_max(maximum, v)
        if self.abs_value:
            minimum = minimum.nonnegative_part()
            maximum = maximum.nonnegative_part()
        return minimum, maximum


def _enclose_extrema(p: Polynomial, a: MPFR, b: MPFR, abs_value: bool,
                     want_min: bool, want_max: bool,
                     observer: Observer, source: str) -> Tuple[Ball, Ball]:
    prec = p.prec
    pa, pb = p(_point(a, prec)), p(_point(b, prec))
    state = _Candidates(pa, pb, abs_value, want_min)

    if abs_value and want_min:
        sgn = check_signs([pa, pb])
        if sgn == -1:
            observer.info(source, "sign of endpoints differ - minimum is zero")
            state.crosses_zero()
        elif sgn == 0:
            # An endpoint value contains zero, nothing better than that
            state.min_value = ball_min(abs(pa), abs(pb)).nonnegative_part()
            state.min_done = True
            observer.info(source, "sign of endpoints undetermined - minimum on endpoints")

    if not (state.min_endpoints.is_finite() and state.max_endpoints.is_finite()):
        return Ball.nan(prec), Ball.nan(prec)

    whole = p(Ball(a, b, prec))
    if _too_wide(pa, pb, whole):
        whole = _maybe_abs(whole, abs_value)
        observer.info(source, "coefficients too wide - using interval evaluation")
        minimum = state.min_value if state.min_done else Ball(
            min(whole.lo, state.min_endpoints.lo), state.min_endpoints.hi, prec)
        maximum = Ball(state.max_endpoints.lo,
                       max(whole.hi, state.max_endpoints.hi), prec)
        if abs_value:
            minimum = minimum.nonnegative_part()
            maximum = maximum.nonnegative_part()
        return minimum, maximum

    dp = p.derivative()
    found, flags = isolate_roots(dp, a, b, prec=max(prec, a.precision, b.precision))
    roots = [Ball(lo, hi, prec) for lo, hi in found]
    observer.info(source, f"found {len(roots)} intervals with possible roots "
                          f"of which {sum(flags)} unique")

    values = [p(root) for root in roots]
    if state.crosses_zero(values):
        observer.info(source, "polynomial crosses zero - minimum is zero")
    minimum, maximum = state.fold(values)

    count = 0
    for i, root in enumerate(roots):
        if not flags[i]:
            continue
        v = _maybe_abs(values[i], abs_value)
        could_be_min = want_min and not (state.min_done or v > minimum)
        could_be_max = want_max and not (v < maximum)
        if could_be_min or could_be_max:
            roots[i] = refine_root(dp, root, strict=False)
            values[i] = p(roots[i])
            count += 1
    observer.info(source, f"refined {count} roots")

    if state.crosses_zero(values):
        observer.info(source, "polynomial crosses zero - minimum is zero")
    return state.fold(values)


def _prepare(p: Polynomial, a, b, observer, verbose):
    if not isinstance(p, Polynomial):
        raise TypeError(f"Expected a Polynomial, got {type(p).__name__}")
    a, b = _endpoints(p, a, b)
    return a, b, resolve_observer(observer, verbose)


def extrema_polynomial(p: Polynomial, a, b, abs_value: bool = False,
                       observer: Optional[Observer] = None,
                       verbose: bool = False) -> Tuple[Ball, Ball]:
    """
    Enclosures (min, max) of the polynomial p on [a, b].

    With abs_value the extrema of |p| are enclosed instead. Non-finite
    values at the endpoints give indeterminate results.
    """
    a, b, observer = _prepare(p, a, b, observer, verbose)
    if a == b:
        v = _maybe_abs(p(_point(a, p.prec)), abs_value)
        return v, v
    if p.degree <= 2:
        return extrema_polynomial_low_degree(p, a, b, abs_value)
    return _enclose_extrema(p, a, b, abs_value, True, True,
                            observer, "extrema_polynomial")


def minimum_polynomial(p: Polynomial, a, b, abs_value: bool = False,
                       observer: Optional[Observer] = None,
                       verbose: bool = False) -> Ball:
    """Enclosure of the minimum of p (or |p|) on [a, b]."""
    a, b, observer = _prepare(p, a, b, observer, verbose)
    if a == b:
        return _maybe_abs(p(_point(a, p.prec)), abs_value)
    if p.degree <= 2:
        return minimum_polynomial_low_degree(p, a, b, abs_value)
    return _enclose_extrema(p, a, b, abs_value, True, False,
                            observer, "minimum_polynomial")[0]


def maximum_polynomial(p: Polynomial, a, b, abs_value: bool = False,
                       observer: Optional[Observer] = None,
                       verbose: bool = False) -> Ball:
    """Enclosure of the maximum of p (or |p|) on [a, b]."""
    a, b, observer = _prepare(p, a, b, observer, verbose)
    if a == b:
        return _maybe_abs(p(_point(a, p.prec)), abs_value)
    if p.degree <= 2:
        return maximum_polynomial_low_degree(p, a, b, abs_value)
    return _enclose_extrema(p, a, b, abs_value, False, True,
                            observer, "maximum_polynomial")[1]
