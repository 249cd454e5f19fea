"""
Adaptive Bisection

Interval utilities (validation, splitting, tolerance checks) and the
breadth-first driver shared by root isolation, the extrema enclosures
and bounded_by.

The driver works in rounds. Every open interval is evaluated (optionally
on a thread pool), then the step accumulates the values single-threaded
and flags the intervals that must be split. Flagged intervals are
bisected for the next round until nothing is flagged, the step asks to
stop, or a budget (evaluations or rounds) is exhausted; in the last two
cases the flagged intervals are handed back unsplit.
"""

from concurrent.futures import ThreadPoolExecutor
from contextlib import nullcontext
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, List, Optional, Sequence, Tuple

import gmpy2
import numpy as np

from .arithmetic.ball import DOWN, NEAREST, UP, Ball, MPFR, rounding, to_bound
from .config import DEFAULT_PRECISION, BisectionConfig
from .errors import InvalidIntervalError
from .observer import Observer, resolve_observer


Interval = Tuple[MPFR, MPFR]


# ----------------------------------------------------------------------
# Interval utilities
# ----------------------------------------------------------------------

def _as_bound(x, rnd=NEAREST) -> MPFR:
    # MPFR endpoints are taken as they are, at their own precision
    if isinstance(x, MPFR):
        return x
    return to_bound(x, DEFAULT_PRECISION, rnd)


def is_valid_interval(a, b) -> bool:
    """Both endpoints finite and a <= b."""
    a, b = _as_bound(a, DOWN), _as_bound(b, UP)
    return gmpy2.is_finite(a) and gmpy2.is_finite(b) and a <= b


def check_interval(a, b) -> None:
    """Raise InvalidIntervalError unless [a, b] is a finite interval."""
    a_, b_ = _as_bound(a, DOWN), _as_bound(b, UP)
    if not (gmpy2.is_finite(a_) and gmpy2.is_finite(b_)):
        raise InvalidIntervalError(a, b, "endpoints must be finite")
    if a_ > b_:
        raise InvalidIntervalError(a, b, "lower endpoint above upper endpoint")


def _exact_precision(x, prec: int) -> int:
    if isinstance(x, MPFR):
        return max(prec, x.precision)
    return prec


def interval_bounds(a, b, prec: int) -> Interval:
    """
    Endpoints as MPFR bounds.

    MPFR endpoints are kept exactly; other numbers are rounded outward to
    precision prec.
    """
    a = to_bound(a, _exact_precision(a, prec), gmpy2.RoundDown)
    b = to_bound(b, _exact_precision(b, prec), gmpy2.RoundUp)
    check_interval(a, b)
    return a, b


def interval_midpoint(a: MPFR, b: MPFR, log_midpoint: bool = False) -> MPFR:
    """
    Split point of [a, b], always inside the closed interval.

    With log_midpoint, intervals on one side of zero and away from it are
    split at the geometric midpoint sign * sqrt(|a| |b|) and intervals
    straddling zero are split at zero.
    """
    prec = max(a.precision, b.precision)
    if log_midpoint and a < 0 < b:
        return gmpy2.mpfr(0)
    with rounding(prec, NEAREST):
        if log_midpoint and a * b > 0:
            mid = gmpy2.sqrt(a * b)
            if a < 0:
                mid = -mid
        else:
            mid = (a + b) / 2
    if mid < a:
        return a
    if mid > b:
        return b
    return mid


def bisect_interval(a, b, log_midpoint: bool = False) -> Tuple[Interval, Interval]:
    """((a, mid), (mid, b)) with both halves sharing the midpoint."""
    a, b = _as_bound(a, DOWN), _as_bound(b, UP)
    mid = interval_midpoint(a, b, log_midpoint)
    return (a, mid), (mid, b)


def bisect_interval_recursive(a, b, depth: int,
                              log_midpoint: bool = False) -> List[Interval]:
    """The 2^depth pieces of [a, b] in increasing order."""
    intervals = [(_as_bound(a, DOWN), _as_bound(b, UP))]
    for _ in range(depth):
        intervals = bisect_intervals(intervals, [True] * len(intervals), log_midpoint)
    return intervals


def bisect_intervals(intervals: Sequence[Interval], to_split: Sequence[bool],
                     log_midpoint: bool = False) -> List[Interval]:
    """Children of the intervals flagged in to_split, in order."""
    children: List[Interval] = []
    for (a, b), split in zip(intervals, to_split):
        if split:
            children.extend(bisect_interval(a, b, log_midpoint))
    return children


def check_tolerance(x: Ball, atol=None, rtol=None) -> bool:
    """
    Whether the ball is narrow enough.

    True if the diameter is at most atol or at most rtol |x|. The relative
    test can only pass for an exact zero when x contains zero. Non-finite
    balls never pass; with neither tolerance given every ball passes.
    """
    if atol is None and rtol is None:
        return True
    if not x.is_finite():
        return False
    error = x.diameter()
    if atol is not None and error <= atol:
        return True
    if rtol is not None:
        if x.contains_zero():
            return error == 0
        return error <= (abs(x) * rtol).lo
    return False


def format_interval(lo, hi, digits: int = 6) -> str:
    """Short human readable form of [lo, hi]."""
    return f"[{float(lo):.{digits}g}, {float(hi):.{digits}g}]"


# ----------------------------------------------------------------------
# Driver
# ----------------------------------------------------------------------

class BisectionStatus(Enum):
    """Why a bisection run ended."""
    COMPLETED = "completed"    # Nothing left to split
    MAX_EVALS = "max_evals"    # Evaluation budget exhausted
    MAX_DEPTH = "max_depth"    # Round budget exhausted
    STOPPED = "stopped"        # The step asked to stop


@dataclass(frozen=True)
class WorkItem:
    """One open interval together with data cached for it."""
    lo: MPFR
    hi: MPFR
    data: Any = None

    @property
    def interval(self) -> Interval:
        return (self.lo, self.hi)

    def ball(self, prec: int) -> Ball:
        return Ball(self.lo, self.hi, prec)


@dataclass
class BisectionOutcome:
    """Result of BisectionDriver.run."""
    status: BisectionStatus
    iterations: int
    evaluations: int
    remaining: List[WorkItem] = field(default_factory=list)

    @property
    def exhausted(self) -> bool:
        return self.status in (BisectionStatus.MAX_EVALS, BisectionStatus.MAX_DEPTH)


class BisectionStep:
    """
    Per-interval behaviour plugged into BisectionDriver.

    evaluate() may run on worker threads and must not touch shared state.
    accumulate() runs on the calling thread and returns one split flag per
    item. Setting `stop` inside accumulate ends the run.
    """

    stop: bool = False

    def evaluate(self, item: WorkItem) -> Any:
        raise NotImplementedError

    def accumulate(self, items: List[WorkItem], values: List[Any]) -> Sequence[bool]:
        raise NotImplementedError

    def split_data(self, item: WorkItem, mid: MPFR) -> Tuple[Any, Any]:
        """Cached data for the children (item.lo, mid) and (mid, item.hi)."""
        return None, None

    def describe(self) -> str:
        """One-line progress summary after a round."""
        return ""


class BisectionDriver:
    """Breadth-first adaptive bisection under a BisectionConfig budget."""

    def __init__(self, config: Optional[BisectionConfig] = None,
                 observer: Optional[Observer] = None,
                 source: str = "bisection"):
        self.config = config or BisectionConfig()
        self.observer = resolve_observer(observer)
        self.source = source

    def run(self, items: Sequence[WorkItem], step: BisectionStep) -> BisectionOutcome:
        items = list(items)
        iterations = 0
        evaluations = 0

        pool = (ThreadPoolExecutor(max_workers=self.config.max_workers)
                if self.config.threaded else nullcontext())
        with pool as executor:
            while items:
                iterations += 1
                evaluations += len(items)

                values = self._evaluate(executor, step, items)
                to_split = np.asarray(step.accumulate(items, values), dtype=bool)
                flagged = [item for item, split in zip(items, to_split) if split]

                message = step.describe()
                self.observer.round(
                    self.source, iterations,
                    f"Intervals: {len(items):,} | Split: {int(to_split.sum()):,} | "
                    f"Evals: {evaluations:,}" + (f" | {message}" if message else "")
                )

                if step.stop:
                    self.observer.stop(self.source, "stopped by step", iterations)
                    return BisectionOutcome(BisectionStatus.STOPPED, iterations,
                                            evaluations, flagged)
                if not flagged:
                    break
                if self.config.maxevals is not None and evaluations >= self.config.maxevals:
                    self.observer.stop(
                        self.source,
                        f"maximum number of evaluations reached ({evaluations:,})",
                        iterations)
                    return BisectionOutcome(BisectionStatus.MAX_EVALS, iterations,
                                            evaluations, flagged)
                if iterations >= self.config.max_rounds:
                    self.observer.stop(
                        self.source,
                        f"maximum depth reached ({iterations:,} rounds)",
                        iterations)
                    return BisectionOutcome(BisectionStatus.MAX_DEPTH, iterations,
                                            evaluations, flagged)

                items = self._split(step, flagged)

        return BisectionOutcome(BisectionStatus.COMPLETED, iterations, evaluations, [])

    def _evaluate(self, executor, step: BisectionStep,
                  items: List[WorkItem]) -> List[Any]:
        if executor is not None and len(items) > 1:
            return list(executor.map(step.evaluate, items))
        return [step.evaluate(item) for item in items]

    def _split(self, step: BisectionStep, flagged: List[WorkItem]) -> List[WorkItem]:
        children: List[WorkItem] = []
        for item in flagged:
            (a, mid), (_, b) = bisect_interval(item.lo, item.hi, self.config.log_bisection)
            left, right = step.split_data(item, mid)
            children.append(WorkItem(a, mid, left))
            children.append(WorkItem(mid, b, right))
        return children
