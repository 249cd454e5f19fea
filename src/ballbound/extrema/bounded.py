"""
Bound Checking

bounded_by proves f(x) <= C (or |f(x)| <= C) for all x in [a, b]. It
bisects like maximum_enclosure but only until every subinterval is
certainly below C, and gives up as soon as one subinterval is certainly
above it.
"""

from typing import Callable, Optional

import gmpy2

from ..arithmetic.ball import Ball
from ..bisection import (
    BisectionDriver,
    BisectionStatus,
    BisectionStep,
    WorkItem,
    bisect_interval_recursive,
    format_interval,
    interval_bounds,
)
from ..config import DEFAULT_DEGREE, DEFAULT_DEPTH, DEFAULT_MAXEVALS, DEFAULT_PRECISION, BisectionConfig
from ..observer import Observer, resolve_observer
from .series import maximum_series


class BoundStep(BisectionStep):
    """Split subintervals whose maximum is not yet certainly below C."""

    def __init__(self, f: Callable, C: Ball, prec: int, degree: int,
                 abs_value: bool, observer: Observer):
        self.f = f
        self.C = C
        self.prec = prec
        self.degree = degree
        self.abs_value = abs_value
        self.observer = observer
        self.violated = False
        self.remaining_max = None
        self.non_finite = 0

    def evaluate(self, item: WorkItem) -> Ball:
        if self.degree < 0:
            v = self.f(item.ball(self.prec))
            if not isinstance(v, Ball):
                v = Ball.point(v, self.prec)
            return abs(v) if self.abs_value else v
        v, _ = maximum_series(self.f, item.lo, item.hi, degree=self.degree,
                              abs_value=self.abs_value, prec=self.prec)
        return v

    def accumulate(self, items, values):
        to_split = []
        low = upp = gmpy2.mpfr("-inf")
        for item, v in zip(items, values):
            if v > self.C:
                self.observer.info(
                    "bounded_by",
                    f"bound doesn't hold on {format_interval(item.lo, item.hi)}, "
                    f"maximum is {v}")
                self.violated = True
                self.stop = True
                return [False] * len(items)
            split = not (v <= self.C)
            if split and v.is_finite():
                low, upp = max(low, v.lo), max(upp, v.hi)
            to_split.append(split)
        self.remaining_max = (low, upp) if any(to_split) else None
        self.non_finite = sum(1 for v in values if not v.is_finite())
        return to_split

    def describe(self) -> str:
        parts = []
        if self.remaining_max is not None:
            parts.append(f"Max on remaining: {format_interval(*self.remaining_max)}")
        if self.non_finite:
            parts.append(f"Non-finite: {self.non_finite:,}")
        return " | ".join(parts)


def bounded_by(
    f: Callable,
    a,
    b,
    C,
    degree: int = DEFAULT_DEGREE,
    abs_value: bool = False,
    log_bisection: bool = False,
    depth_start: int = 0,
    maxevals: int = DEFAULT_MAXEVALS,
    depth: int = DEFAULT_DEPTH,
    threaded: bool = False,
    prec: Optional[int] = None,
    observer: Optional[Observer] = None,
    verbose: bool = False,
) -> bool:
    """
    True if f(x) <= C (or |f(x)| <= C with abs_value) is proved on [a, b].

    False means the bound is violated on some subinterval or could not
    be proved within the budget. The arguments are as for
    maximum_enclosure.
    """
    prec = prec or DEFAULT_PRECISION
    a, b = interval_bounds(a, b, prec)
    observer = resolve_observer(observer, verbose)
    C = Ball.point(C, prec)

    if a == b:
        v = f(Ball(a, a, prec))
        if not isinstance(v, Ball):
            v = Ball.point(v, prec)
        if abs_value:
            v = abs(v)
        return v <= C

    config = BisectionConfig(depth=depth, depth_start=depth_start, maxevals=maxevals,
                             log_bisection=log_bisection, threaded=threaded)
    items = [WorkItem(lo, hi) for lo, hi in
             bisect_interval_recursive(a, b, depth_start, log_bisection)]
    step = BoundStep(f, C, prec, degree, abs_value, observer)
    outcome = BisectionDriver(config, observer, "bounded_by").run(items, step)

    return outcome.status == BisectionStatus.COMPLETED and not step.violated
