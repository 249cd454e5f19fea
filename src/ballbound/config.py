"""
Configuration

Module-level defaults shared by the root finders and the extrema
enclosures, the precision-derived tolerances, and BisectionConfig which
collects the budget of a bisection run.
"""

from dataclasses import dataclass
from typing import Optional

import gmpy2


# Working precision in bits for every Ball created without an explicit one
DEFAULT_PRECISION = 64

# Degree of the Taylor models used by the series extrema
DEFAULT_DEGREE = 8

# Budgets of the adaptive bisection
DEFAULT_MAXEVALS = 1000
DEFAULT_DEPTH = 20
DEFAULT_ISOLATION_DEPTH = 10


def eps(prec: int) -> gmpy2.mpfr:
    """Machine epsilon 2^(1 - prec) of the given precision (exact)."""
    with gmpy2.context(precision=max(prec, 2)):
        return gmpy2.mpfr(2) ** (1 - prec)


def default_rtol(prec: int) -> gmpy2.mpfr:
    """Relative tolerance sqrt(eps) used by bisection refinement and extrema."""
    with gmpy2.context(precision=max(prec, 2)):
        return gmpy2.sqrt(eps(prec))


def refine_rtol(prec: int) -> gmpy2.mpfr:
    """Relative tolerance 4 eps used by interval Newton refinement."""
    return 4 * eps(prec)


@dataclass
class BisectionConfig:
    """Budget and behaviour of one adaptive bisection run."""
    depth: int = DEFAULT_DEPTH
    depth_start: int = 0
    maxevals: Optional[int] = DEFAULT_MAXEVALS
    log_bisection: bool = False

    threaded: bool = False
    max_workers: Optional[int] = None

    def __post_init__(self):
        if self.depth < 0:
            raise ValueError(f"depth must be non-negative, got {self.depth}")
        if self.depth_start < 0:
            raise ValueError(f"depth_start must be non-negative, got {self.depth_start}")
        if self.maxevals is not None and self.maxevals <= 0:
            raise ValueError(f"maxevals must be positive, got {self.maxevals}")

    @property
    def max_rounds(self) -> int:
        """Number of bisection rounds allowed by depth and depth_start."""
        return max(self.depth - self.depth_start, 0)

    @classmethod
    def quick(cls, **kwargs) -> 'BisectionConfig':
        """Small budget for interactive use."""
        defaults = dict(depth=10, maxevals=200)
        defaults.update(kwargs)
        return cls(**defaults)

    @classmethod
    def thorough(cls, **kwargs) -> 'BisectionConfig':
        """Large budget for hard enclosures."""
        defaults = dict(depth=40, maxevals=20_000)
        defaults.update(kwargs)
        return cls(**defaults)
