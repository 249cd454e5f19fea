"""
Extrema: closed-form and root-based extrema of polynomials, Taylor-model
extrema on a single interval, adaptive enclosures and bound checking.
"""

from .polynomial import (
    check_signs,
    extrema_polynomial,
    minimum_polynomial,
    maximum_polynomial,
    extrema_polynomial_low_degree,
    minimum_polynomial_low_degree,
    maximum_polynomial_low_degree,
)
from .series import (
    taylor_remainder,
    extrema_series,
    minimum_series,
    maximum_series,
)
from .enclosure import (
    ExtremumBound,
    extrema_enclosure,
    minimum_enclosure,
    maximum_enclosure,
)
from .bounded import bounded_by

__all__ = [
    "check_signs",
    "extrema_polynomial",
    "minimum_polynomial",
    "maximum_polynomial",
    "extrema_polynomial_low_degree",
    "minimum_polynomial_low_degree",
    "maximum_polynomial_low_degree",
    "taylor_remainder",
    "extrema_series",
    "minimum_series",
    "maximum_series",
    "ExtremumBound",
    "extrema_enclosure",
    "minimum_enclosure",
    "maximum_enclosure",
    "bounded_by",
]
