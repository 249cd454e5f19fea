"""
Root Isolation

Find all roots of a univariate function on [a, b] by adaptive bisection.
Intervals on which the function provably has no root are discarded,
intervals on which it provably has exactly one root are kept as found,
everything else is split until the depth budget is used up.

An interval is proved to contain exactly one root when the function
changes sign between its endpoints and its derivative does not vanish
on it. The endpoint signs are cached on each interval so every split
costs one new point evaluation.
"""

from typing import Callable, List, Optional, Tuple, Union

from ..arithmetic.ball import MPFR, Ball
from ..arithmetic.polynomial import Polynomial
from ..bisection import (
    BisectionDriver,
    BisectionStep,
    WorkItem,
    format_interval,
    interval_bounds,
)
from ..config import DEFAULT_ISOLATION_DEPTH, DEFAULT_PRECISION, BisectionConfig
from ..observer import Observer, resolve_observer
from .targets import RootTarget, target_for


class IsolationStep(BisectionStep):
    """Classify intervals as discarded, found (unique root) or to split."""

    def __init__(self, target: RootTarget, check_unique: bool, observer: Observer):
        self.target = target
        self.check_unique = check_unique
        self.observer = observer
        self.found: List[Tuple[MPFR, MPFR]] = []
        self.iteration = 0
        self.pending = 0

    def evaluate(self, item: WorkItem) -> Tuple[bool, bool]:
        sign_a, sign_b = item.data
        return self.target.check_root_interval(
            item.lo, item.hi, sign_a, sign_b, self.check_unique)

    def accumulate(self, items, values):
        self.iteration += 1
        to_split = []
        for item, (maybe, unique) in zip(items, values):
            if unique:
                self.found.append(item.interval)
                self.observer.proof(
                    "isolate_roots",
                    f"unique root in {format_interval(item.lo, item.hi)}",
                    self.iteration)
            to_split.append(maybe and not unique)
        self.pending = sum(to_split)
        return to_split

    def split_data(self, item, mid):
        sign_a, sign_b = item.data
        sign_mid = self.target.sign_at(mid)
        return (sign_a, sign_mid), (sign_mid, sign_b)

    def describe(self) -> str:
        return f"Found: {len(self.found):,} | Remaining: {self.pending:,}"


def isolate_roots(
    f: Union[Callable, Polynomial],
    a,
    b,
    depth: int = DEFAULT_ISOLATION_DEPTH,
    check_unique: bool = True,
    prec: Optional[int] = None,
    threaded: bool = False,
    observer: Optional[Observer] = None,
    verbose: bool = False,
) -> Tuple[List[Tuple[MPFR, MPFR]], List[bool]]:
    """
    Isolate the roots of f on [a, b].

    Returns (found, flags): intervals sorted by their lower endpoint and,
    for each, whether it provably contains exactly one root. f has no
    root in [a, b] outside the returned intervals. Intervals flagged False
    may contain any number of roots, including none.

    Args:
        f: callable accepting Balls and TaylorSeries, or a Polynomial
        a, b: the interval; widened outward to the working precision
        depth: maximum number of bisection rounds
        check_unique: if False, only exclusion is attempted and no interval
            is ever reported as unique
        prec: working precision in bits
        threaded: evaluate the intervals of a round on a thread pool
        observer: receives progress events; verbose=True prints them
    """
    prec = prec or DEFAULT_PRECISION
    a, b = interval_bounds(a, b, prec)
    observer = resolve_observer(observer, verbose)
    target = target_for(f, prec)

    if a == b:
        fa = target.value(Ball(a, a, prec))
        if fa.contains_zero():
            return [(a, b)], [fa.is_zero()]
        return [], []

    if depth <= 0:
        return [(a, b)], [False]

    step = IsolationStep(target, check_unique, observer)
    driver = BisectionDriver(
        BisectionConfig(depth=depth, maxevals=None, threaded=threaded),
        observer, source="isolate_roots")
    start = WorkItem(a, b, (target.sign_at(a), target.sign_at(b)))
    outcome = driver.run([start], step)

    found = [(interval, True) for interval in step.found]
    found += [(item.interval, False) for item in outcome.remaining]
    found.sort(key=lambda pair: pair[0][0])

    return [interval for interval, _ in found], [flag for _, flag in found]
