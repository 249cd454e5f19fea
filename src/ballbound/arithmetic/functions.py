"""
Elementary functions for Balls, TaylorSeries and plain numbers.

Functions passed to the root finders and extrema enclosures are called
both with Ball and with TaylorSeries arguments, so they should be
written with these instead of math or numpy functions:

    from ballbound import sin
    f = lambda x: sin(x) + sin(Fraction(10, 3) * x)
"""

from typing import Optional

from ..config import DEFAULT_PRECISION
from .ball import Ball
from .series import TaylorSeries


def _lift(x, prec: Optional[int] = None):
    if isinstance(x, (Ball, TaylorSeries)):
        return x
    return Ball.point(x, prec or DEFAULT_PRECISION)


def sin(x):
    return _lift(x).sin()


def cos(x):
    return _lift(x).cos()


def sinpi(x):
    """sin(pi x)"""
    return _lift(x).sinpi()


def cospi(x):
    """cos(pi x)"""
    return _lift(x).cospi()


def exp(x):
    return _lift(x).exp()


def log(x):
    return _lift(x).log()


def sqrt(x):
    return _lift(x).sqrt()


def atan(x):
    return _lift(x).atan()


def pi(prec: Optional[int] = None) -> Ball:
    return Ball.pi(prec)
