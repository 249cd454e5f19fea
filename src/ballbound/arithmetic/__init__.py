"""
Arithmetic substrate: balls, truncated Taylor series, polynomials and
the elementary functions acting on them.
"""

from .ball import (
    Ball,
    Sign,
    ball_min,
    ball_max,
    to_bound,
    rounding,
    DOWN,
    UP,
    NEAREST,
)
from .series import TaylorSeries
from .polynomial import Polynomial
from . import functions

__all__ = [
    "Ball",
    "Sign",
    "ball_min",
    "ball_max",
    "to_bound",
    "rounding",
    "DOWN",
    "UP",
    "NEAREST",
    "TaylorSeries",
    "Polynomial",
    "functions",
]
