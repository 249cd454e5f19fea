"""
Extrema Enclosure

Enclose the minimum and/or maximum of f on [a, b] to a given tolerance
by adaptive bisection, using the Taylor-model extrema of
ballbound.extrema.series on every subinterval (or plain ball evaluation
when degree < 0).

For each extremum two bounds are kept: the extremum over the finished
subintervals, and the current estimate which also folds in the open
ones. A subinterval is dropped when its values cannot reach the current
estimate (e.g. its minimum is provably above the best known upper bound
for the global minimum), finished when its enclosure satisfies the
tolerance, and split otherwise. When the budget is exhausted the current
estimate is returned.
"""

from typing import Callable, List, Optional, Tuple

import gmpy2

from ..arithmetic.ball import MPFR, Ball, ball_max, ball_min
from ..bisection import (
    BisectionDriver,
    BisectionStep,
    WorkItem,
    bisect_interval_recursive,
    check_tolerance,
    format_interval,
    interval_bounds,
)
from ..config import (
    DEFAULT_DEGREE,
    DEFAULT_DEPTH,
    DEFAULT_MAXEVALS,
    DEFAULT_PRECISION,
    BisectionConfig,
    default_rtol,
)
from ..observer import Observer, resolve_observer
from .series import extrema_series, maximum_series, minimum_series


POS_INF = gmpy2.mpfr("inf")
NEG_INF = gmpy2.mpfr("-inf")


class ExtremumBound:
    """
    Running bounds of either the minimum or the maximum.

    low/upp bound the extremum over the finished subintervals; current()
    additionally folds in the values of the open subintervals.
    """

    def __init__(self, is_min: bool, atol, rtol, bound_tol: Optional[Ball],
                 point_value: Ball):
        self.is_min = is_min
        self.atol = atol
        self.rtol = rtol
        self.bound_tol = bound_tol
        self.point_value = point_value
        neutral = POS_INF if is_min else NEG_INF
        self.low = neutral
        self.upp = neutral
        self.current_low = neutral
        self.current_upp = neutral

    def _pick(self, x, y):
        return min(x, y) if self.is_min else max(x, y)

    def update_point_value(self, v: Ball) -> None:
        if v.is_finite():
            pick = ball_min if self.is_min else ball_max
            self.point_value = pick(self.point_value, v)

    def update_current(self, values: List[Ball]) -> None:
        if all(v.is_finite() for v in values):
            low, upp = self.low, self.upp
            for v in values:
                low = self._pick(low, v.lo)
                upp = self._pick(upp, v.hi)
        elif self.is_min:
            # Some minimum could be anything: no lower bound
            low, upp = NEG_INF, self.upp
            for v in values:
                if v.is_finite():
                    upp = min(upp, v.hi)
        else:
            low, upp = self.low, POS_INF
            for v in values:
                if v.is_finite():
                    low = max(low, v.lo)

        # A priori values tighten the side facing away from infinity
        if self.is_min:
            upp = min(upp, self.point_value.hi)
        else:
            low = max(low, self.point_value.lo)
        self.current_low, self.current_upp = low, upp

    def possible(self, v: Ball) -> bool:
        """Whether the extremum could be attained where the value is v."""
        if not v.is_finite():
            return True
        if self.is_min:
            return v.lo <= self.current_upp
        return self.current_low <= v.hi

    def within_tolerance(self, v: Ball) -> bool:
        if check_tolerance(v, self.atol, self.rtol):
            return True
        if self.bound_tol is None or not v.is_finite():
            return False
        if self.is_min:
            return v > self.bound_tol
        return v < self.bound_tol

    def finish(self, v: Ball) -> None:
        self.low = self._pick(self.low, v.lo)
        self.upp = self._pick(self.upp, v.hi)

    def settle_on_current(self) -> None:
        self.low, self.upp = self.current_low, self.current_upp

    def result(self, prec: int, abs_value: bool) -> Ball:
        res = Ball(self.low, self.upp, prec)
        if abs_value:
            res = res.nonnegative_part()
        return res

    def describe(self) -> str:
        return format_interval(self.current_low, self.current_upp)


class ExtremaStep(BisectionStep):
    """One round of extrema_enclosure and its one-sided variants."""

    def __init__(self, f: Callable, prec: int, degree: int, abs_value: bool,
                 minimum: Optional[ExtremumBound], maximum: Optional[ExtremumBound]):
        self.f = f
        self.prec = prec
        self.degree = degree
        self.abs_value = abs_value
        self.minimum = minimum
        self.maximum = maximum
        self.non_finite = 0

    def evaluate(self, item: WorkItem) -> Tuple[Optional[Ball], Optional[Ball], Optional[Ball]]:
        if self.degree < 0:
            v = self.f(item.ball(self.prec))
            if not isinstance(v, Ball):
                v = Ball.point(v, self.prec)
            if self.abs_value:
                v = abs(v)
            return (v if self.minimum is not None else None,
                    v if self.maximum is not None else None, None)

        kwargs = dict(degree=self.degree, abs_value=self.abs_value, prec=self.prec)
        if self.minimum is not None and self.maximum is not None:
            return extrema_series(self.f, item.lo, item.hi, **kwargs)
        if self.minimum is not None:
            v, mid = minimum_series(self.f, item.lo, item.hi, **kwargs)
            return v, None, mid
        v, mid = maximum_series(self.f, item.lo, item.hi, **kwargs)
        return None, v, mid

    def _sides(self):
        return [(index, side) for index, side in enumerate((self.minimum, self.maximum))
                if side is not None]

    def accumulate(self, items, values):
        sides = self._sides()

        for _, _, mid in values:
            if mid is not None:
                for _, side in sides:
                    side.update_point_value(mid)

        for index, side in sides:
            side.update_current([v[index] for v in values])

        self.non_finite = sum(
            1 for v in values for index, _ in sides if not v[index].is_finite())

        to_split = []
        for v in values:
            possible = [(index, side) for index, side in sides if side.possible(v[index])]
            if not possible:
                to_split.append(False)
                continue
            if all(side.within_tolerance(v[index]) for index, side in possible):
                for index, side in sides:
                    side.finish(v[index])
                to_split.append(False)
            else:
                to_split.append(True)
        return to_split

    def describe(self) -> str:
        parts = []
        if self.minimum is not None:
            parts.append(f"Min: {self.minimum.describe()}")
        if self.maximum is not None:
            parts.append(f"Max: {self.maximum.describe()}")
        if self.non_finite:
            parts.append(f"Non-finite: {self.non_finite:,}")
        return " | ".join(parts)


def _thin_value(f: Callable, a: MPFR, prec: int, abs_value: bool) -> Ball:
    res = f(Ball(a, a, prec))
    if not isinstance(res, Ball):
        res = Ball.point(res, prec)
    if abs_value:
        res = abs(res).nonnegative_part()
    return res


def _a_priori(value: Optional[Ball], default: MPFR, prec: int) -> Ball:
    if value is None:
        return Ball(default, default, prec)
    if not isinstance(value, Ball):
        return Ball.point(value, prec)
    return value


def _tolerance_ball(value, prec: int) -> Optional[Ball]:
    if value is None:
        return None
    return Ball.point(value, prec)


def _run(f, a, b, prec, degree, abs_value, minimum, maximum, log_bisection,
         depth_start, maxevals, depth, threaded, observer, source):
    config = BisectionConfig(depth=depth, depth_start=depth_start, maxevals=maxevals,
                             log_bisection=log_bisection, threaded=threaded)
    items = [WorkItem(lo, hi) for lo, hi in
             bisect_interval_recursive(a, b, depth_start, log_bisection)]
    step = ExtremaStep(f, prec, degree, abs_value, minimum, maximum)
    outcome = BisectionDriver(config, observer, source).run(items, step)
    if outcome.exhausted:
        for side in (minimum, maximum):
            if side is not None:
                side.settle_on_current()


def extrema_enclosure(
    f: Callable,
    a,
    b,
    degree: int = DEFAULT_DEGREE,
    atol=0,
    rtol=None,
    lbound_tol=None,
    ubound_tol=None,
    abs_value: bool = False,
    log_bisection: bool = False,
    point_value_min: Optional[Ball] = None,
    point_value_max: Optional[Ball] = None,
    depth_start: int = 0,
    maxevals: int = DEFAULT_MAXEVALS,
    depth: int = DEFAULT_DEPTH,
    threaded: bool = False,
    prec: Optional[int] = None,
    observer: Optional[Observer] = None,
    verbose: bool = False,
) -> Tuple[Ball, Ball]:
    """
    Enclosures (min, max) of f on [a, b].

    Args:
        f: callable accepting Balls and, unless degree < 0, TaylorSeries
        degree: degree of the Taylor models; negative for plain evaluation
        atol, rtol: a subinterval is finished once its enclosures satisfy
            check_tolerance (rtol defaults to sqrt(eps))
        lbound_tol: also finish once the minimum is provably above this
        ubound_tol: also finish once the maximum is provably below this
        abs_value: enclose the extrema of |f| instead
        log_bisection: bisect at geometric midpoints
        point_value_min, point_value_max: a priori upper bound for the
            minimum and lower bound for the maximum, e.g. values of f at
            some points
        depth_start: bisect this many times before the first evaluation
        maxevals, depth: budget; depth includes depth_start
        threaded: evaluate the subintervals of a round on a thread pool
    """
    prec = prec or DEFAULT_PRECISION
    a, b = interval_bounds(a, b, prec)
    observer = resolve_observer(observer, verbose)

    if a == b:
        res = _thin_value(f, a, prec, abs_value)
        return res, res

    rtol = default_rtol(prec) if rtol is None else rtol
    minimum = ExtremumBound(True, atol, rtol, _tolerance_ball(lbound_tol, prec),
                            _a_priori(point_value_min, POS_INF, prec))
    maximum = ExtremumBound(False, atol, rtol, _tolerance_ball(ubound_tol, prec),
                            _a_priori(point_value_max, NEG_INF, prec))
    _run(f, a, b, prec, degree, abs_value, minimum, maximum, log_bisection,
         depth_start, maxevals, depth, threaded, observer, "extrema_enclosure")
    return minimum.result(prec, abs_value), maximum.result(prec, abs_value)


def minimum_enclosure(
    f: Callable,
    a,
    b,
    degree: int = DEFAULT_DEGREE,
    atol=0,
    rtol=None,
    lbound_tol=None,
    abs_value: bool = False,
    log_bisection: bool = False,
    point_value_min: Optional[Ball] = None,
    depth_start: int = 0,
    maxevals: int = DEFAULT_MAXEVALS,
    depth: int = DEFAULT_DEPTH,
    threaded: bool = False,
    prec: Optional[int] = None,
    observer: Optional[Observer] = None,
    verbose: bool = False,
) -> Ball:
    """Enclosure of the minimum of f (or |f|) on [a, b], see extrema_enclosure."""
    prec = prec or DEFAULT_PRECISION
    a, b = interval_bounds(a, b, prec)
    observer = resolve_observer(observer, verbose)

    if a == b:
        return _thin_value(f, a, prec, abs_value)

    rtol = default_rtol(prec) if rtol is None else rtol
    minimum = ExtremumBound(True, atol, rtol, _tolerance_ball(lbound_tol, prec),
                            _a_priori(point_value_min, POS_INF, prec))
    _run(f, a, b, prec, degree, abs_value, minimum, None, log_bisection,
         depth_start, maxevals, depth, threaded, observer, "minimum_enclosure")
    return minimum.result(prec, abs_value)


def maximum_enclosure(
    f: Callable,
    a,
    b,
    degree: int = DEFAULT_DEGREE,
    atol=0,
    rtol=None,
    ubound_tol=None,
    abs_value: bool = False,
    log_bisection: bool = False,
    point_value_max: Optional[Ball] = None,
    depth_start: int = 0,
    maxevals: int = DEFAULT_MAXEVALS,
    depth: int = DEFAULT_DEPTH,
    threaded: bool = False,
    prec: Optional[int] = None,
    observer: Optional[Observer] = None,
    verbose: bool = False,
) -> Ball:
    """Enclosure of the maximum of f (or |f|) on [a, b], see extrema_enclosure."""
    prec = prec or DEFAULT_PRECISION
    a, b = interval_bounds(a, b, prec)
    observer = resolve_observer(observer, verbose)

    if a == b:
        return _thin_value(f, a, prec, abs_value)

    rtol = default_rtol(prec) if rtol is None else rtol
    maximum = ExtremumBound(False, atol, rtol, _tolerance_ball(ubound_tol, prec),
                            _a_priori(point_value_max, NEG_INF, prec))
    _run(f, a, b, prec, degree, abs_value, None, maximum, log_bisection,
         depth_start, maxevals, depth, threaded, observer, "maximum_enclosure")
    return maximum.result(prec, abs_value)
