"""
Polynomials with Ball coefficients.

Coefficients are stored in increasing order of degree; trailing exact
zeros are dropped, so the zero polynomial has degree -1.
"""

from typing import List, Optional, Sequence, Tuple

from ..config import DEFAULT_PRECISION
from .ball import Ball, _is_number


class Polynomial:
    """p(x) = c[0] + c[1] x + ... + c[n] x^n"""

    __slots__ = ("coeffs", "prec")

    def __init__(self, coeffs: Sequence = (), prec: Optional[int] = None):
        if prec is None:
            precs = [c.prec for c in coeffs if isinstance(c, Ball)]
            prec = max(precs) if precs else DEFAULT_PRECISION
        balls = [Ball.point(c, prec) for c in coeffs]
        while balls and balls[-1].is_zero():
            balls.pop()
        self.coeffs: Tuple[Ball, ...] = tuple(balls)
        self.prec = prec

    @classmethod
    def from_roots(cls, roots: Sequence, prec: Optional[int] = None) -> 'Polynomial':
        """(x - r_1) (x - r_2) ... (x - r_n)"""
        prec = prec or DEFAULT_PRECISION
        p = cls([1], prec=prec)
        for r in roots:
            p = p * cls([-Ball.point(r, prec), 1], prec=prec)
        return p

    @property
    def degree(self) -> int:
        return len(self.coeffs) - 1

    def __getitem__(self, k: int) -> Ball:
        if 0 <= k < len(self.coeffs):
            return self.coeffs[k]
        if k < 0:
            raise IndexError(k)
        return Ball.zero(self.prec)

    def __len__(self) -> int:
        return len(self.coeffs)

    def __repr__(self) -> str:
        terms = ", ".join(repr(c) for c in self.coeffs)
        return f"Polynomial({terms})"

    def __eq__(self, other) -> bool:
        if not isinstance(other, Polynomial):
            return NotImplemented
        return self.coeffs == other.coeffs

    def __hash__(self) -> int:
        return hash(self.coeffs)

    def is_finite(self) -> bool:
        return all(c.is_finite() for c in self.coeffs)

    def _argument(self, x):
        if _is_number(x):
            return Ball.point(x, self.prec)
        return x

    def __call__(self, x):
        """Horner evaluation at a number, a Ball or a TaylorSeries."""
        x = self._argument(x)
        if not self.coeffs:
            return Ball.zero(self.prec) + x * 0
        result = self.coeffs[-1]
        for c in reversed(self.coeffs[:-1]):
            result = result * x + c
        return result

    def evaluate2(self, x) -> Tuple[Ball, Ball]:
        """Value and derivative at x in one Horner pass."""
        x = self._argument(x)
        zero = Ball.zero(self.prec)
        if not self.coeffs:
            return zero, zero
        value = self.coeffs[-1]
        deriv = zero
        for c in reversed(self.coeffs[:-1]):
            deriv = deriv * x + value
            value = value * x + c
        return value, deriv

    def derivative(self) -> 'Polynomial':
        return Polynomial([c * k for k, c in enumerate(self.coeffs) if k > 0],
                          prec=self.prec)

    def _operand(self, other) -> Optional['Polynomial']:
        if isinstance(other, Polynomial):
            return other
        if isinstance(other, Ball) or _is_number(other):
            return Polynomial([other], prec=self.prec)
        return None

    def __add__(self, other) -> 'Polynomial':
        other = self._operand(other)
        if other is None:
            return NotImplemented
        n = max(len(self), len(other))
        return Polynomial([self[k] + other[k] for k in range(n)],
                          prec=max(self.prec, other.prec))

    def __radd__(self, other) -> 'Polynomial':
        return self.__add__(other)

    def __sub__(self, other) -> 'Polynomial':
        other = self._operand(other)
        if other is None:
            return NotImplemented
        n = max(len(self), len(other))
        return Polynomial([self[k] - other[k] for k in range(n)],
                          prec=max(self.prec, other.prec))

    def __rsub__(self, other) -> 'Polynomial':
        other = self._operand(other)
        if other is None:
            return NotImplemented
        return other.__sub__(self)

    def __neg__(self) -> 'Polynomial':
        return Polynomial([-c for c in self.coeffs], prec=self.prec)

    def __mul__(self, other) -> 'Polynomial':
        other = self._operand(other)
        if other is None:
            return NotImplemented
        prec = max(self.prec, other.prec)
        if not self.coeffs or not other.coeffs:
            return Polynomial([], prec=prec)
        coeffs: List[Ball] = [Ball.zero(prec)] * (len(self) + len(other) - 1)
        for i, a in enumerate(self.coeffs):
            for j, b in enumerate(other.coeffs):
                coeffs[i + j] = coeffs[i + j] + a * b
        return Polynomial(coeffs, prec=prec)

    def __rmul__(self, other) -> 'Polynomial':
        return self.__mul__(other)
