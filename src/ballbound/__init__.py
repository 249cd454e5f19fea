"""
ballbound - Rigorous Root and Extrema Enclosures

Computer-verified statements about univariate real functions on an
interval, built on ball arithmetic over gmpy2 MPFR numbers:
- isolate_roots: all roots, with proofs of uniqueness
- refine_root: interval Newton refinement of a single root
- extrema_enclosure: enclosures of the minimum and maximum
- bounded_by: proof that f <= C on the interval

Functions are passed as Python callables that accept both Ball and
TaylorSeries arguments, or as Polynomials. Use the elementary functions
exported here (sin, exp, ...) so that both work.

Every result is an enclosure: the true value is guaranteed to lie in the
returned ball. Where a proof fails the result is the indeterminate (NaN)
ball, never a wrong answer.
"""

from .arithmetic import (
    Ball,
    Sign,
    ball_min,
    ball_max,
    TaylorSeries,
    Polynomial,
)
from .arithmetic.functions import (
    sin,
    cos,
    sinpi,
    cospi,
    exp,
    log,
    sqrt,
    atan,
    pi,
)
from .bisection import (
    BisectionDriver,
    BisectionOutcome,
    BisectionStatus,
    BisectionStep,
    WorkItem,
    is_valid_interval,
    check_interval,
    interval_midpoint,
    bisect_interval,
    bisect_interval_recursive,
    bisect_intervals,
    check_tolerance,
    format_interval,
)
from .config import (
    BisectionConfig,
    DEFAULT_PRECISION,
    DEFAULT_DEGREE,
    DEFAULT_MAXEVALS,
    DEFAULT_DEPTH,
    DEFAULT_ISOLATION_DEPTH,
)
from .observer import (
    Event,
    EventKind,
    Observer,
    PrintObserver,
    CollectingObserver,
)
from .errors import BallboundError, InvalidIntervalError
from .roots import isolate_roots, refine_root, refine_root_bisection
from .extrema import (
    extrema_polynomial,
    minimum_polynomial,
    maximum_polynomial,
    extrema_series,
    minimum_series,
    maximum_series,
    extrema_enclosure,
    minimum_enclosure,
    maximum_enclosure,
    bounded_by,
)

__version__ = "0.1.0"

__all__ = [
    # Roots
    "isolate_roots",
    "refine_root",
    "refine_root_bisection",
    # Extrema
    "extrema_polynomial",
    "minimum_polynomial",
    "maximum_polynomial",
    "extrema_series",
    "minimum_series",
    "maximum_series",
    "extrema_enclosure",
    "minimum_enclosure",
    "maximum_enclosure",
    "bounded_by",
    # Arithmetic
    "Ball",
    "Sign",
    "ball_min",
    "ball_max",
    "TaylorSeries",
    "Polynomial",
    "sin",
    "cos",
    "sinpi",
    "cospi",
    "exp",
    "log",
    "sqrt",
    "atan",
    "pi",
    # Bisection
    "BisectionDriver",
    "BisectionOutcome",
    "BisectionStatus",
    "BisectionStep",
    "WorkItem",
    "is_valid_interval",
    "check_interval",
    "interval_midpoint",
    "bisect_interval",
    "bisect_interval_recursive",
    "bisect_intervals",
    "check_tolerance",
    "format_interval",
    # Config
    "BisectionConfig",
    "DEFAULT_PRECISION",
    "DEFAULT_DEGREE",
    "DEFAULT_MAXEVALS",
    "DEFAULT_DEPTH",
    "DEFAULT_ISOLATION_DEPTH",
    # Observer
    "Event",
    "EventKind",
    "Observer",
    "PrintObserver",
    "CollectingObserver",
    # Errors
    "BallboundError",
    "InvalidIntervalError",
]
