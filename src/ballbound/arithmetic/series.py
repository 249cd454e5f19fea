"""
Truncated Taylor Series

A TaylorSeries of degree n holds Ball enclosures of the first n + 1
Taylor coefficients of a function at some point (or, when the point is
a wide ball, enclosures valid for every point in it). Applying a Python
function written with the usual operators and the functions in
ballbound.arithmetic.functions to TaylorSeries.variable(x, n) yields the
Taylor expansion of that function; this is how derivatives and Taylor
models are computed.

Binary operations between series truncate to the smaller degree.
Elementary functions use the standard power series recurrences.
"""

from typing import List, Optional, Sequence, Tuple

from ..config import DEFAULT_PRECISION
from .ball import Ball, Sign, _integer_exponent, _is_number


class TaylorSeries:
    """Truncated power series with Ball coefficients."""

    __slots__ = ("coeffs", "prec")

    def __init__(self, coeffs: Sequence, degree: Optional[int] = None,
                 prec: Optional[int] = None):
        if prec is None:
            precs = [c.prec for c in coeffs if isinstance(c, Ball)]
            prec = max(precs) if precs else DEFAULT_PRECISION
        balls = [Ball.point(c, prec) for c in coeffs]
        if degree is not None:
            if degree < 0:
                raise ValueError(f"degree must be non-negative, got {degree}")
            balls = balls[:degree + 1]
            balls += [Ball.zero(prec)] * (degree + 1 - len(balls))
        if not balls:
            raise ValueError("a series needs at least one coefficient")
        self.coeffs: Tuple[Ball, ...] = tuple(balls)
        self.prec = prec

    @classmethod
    def variable(cls, x, degree: int, prec: Optional[int] = None) -> 'TaylorSeries':
        """The series of the identity function at x: x + t."""
        if not isinstance(x, Ball):
            x = Ball.point(x, prec)
        prec = prec or x.prec
        return cls([x, Ball.point(1, prec)], degree=degree, prec=prec)

    @classmethod
    def constant(cls, c, degree: int, prec: Optional[int] = None) -> 'TaylorSeries':
        return cls([c], degree=degree, prec=prec)

    @property
    def degree(self) -> int:
        return len(self.coeffs) - 1

    def __len__(self) -> int:
        return len(self.coeffs)

    def __getitem__(self, k: int) -> Ball:
        return self.coeffs[k]

    def __iter__(self):
        return iter(self.coeffs)

    def __repr__(self) -> str:
        terms = ", ".join(repr(c) for c in self.coeffs)
        return f"TaylorSeries({terms})"

    def is_finite(self) -> bool:
        return all(c.is_finite() for c in self.coeffs)

    def derivative(self) -> 'TaylorSeries':
        """Series of the derivative (one degree lower)."""
        if self.degree == 0:
            return TaylorSeries([Ball.zero(self.prec)], prec=self.prec)
        return TaylorSeries([c * k for k, c in enumerate(self.coeffs) if k > 0],
                            prec=self.prec)

    def to_polynomial(self):
        """The truncated series as a Polynomial in the offset t."""
        from .polynomial import Polynomial
        return Polynomial(self.coeffs, prec=self.prec)

    def __call__(self, t):
        """Evaluate the truncated series at the offset t (Horner)."""
        result = self.coeffs[-1]
        for c in reversed(self.coeffs[:-1]):
            result = result * t + c
        return result

    # ------------------------------------------------------------------
    # Arithmetic
    # ------------------------------------------------------------------

    def _operand(self, other) -> Optional['TaylorSeries']:
        if isinstance(other, TaylorSeries):
            return other
        if isinstance(other, Ball) or _is_number(other):
            return TaylorSeries.constant(other, self.degree, self.prec)
        return None

    def _new(self, coeffs: List[Ball]) -> 'TaylorSeries':
        return TaylorSeries(coeffs, prec=max(c.prec for c in coeffs))

    def __add__(self, other) -> 'TaylorSeries':
        other = self._operand(other)
        if other is None:
            return NotImplemented
        n = min(self.degree, other.degree)
        return self._new([self[k] + other[k] for k in range(n + 1)])

    def __radd__(self, other) -> 'TaylorSeries':
        return self.__add__(other)

    def __sub__(self, other) -> 'TaylorSeries':
        other = self._operand(other)
        if other is None:
            return NotImplemented
        n = min(self.degree, other.degree)
        return self._new([self[k] - other[k] for k in range(n + 1)])

    def __rsub__(self, other) -> 'TaylorSeries':
        other = self._operand(other)
        if other is None:
            return NotImplemented
        return other.__sub__(self)

    def __neg__(self) -> 'TaylorSeries':
        return self._new([-c for c in self.coeffs])

    def __pos__(self) -> 'TaylorSeries':
        return self

    def __mul__(self, other) -> 'TaylorSeries':
        if isinstance(other, Ball) or _is_number(other):
            return self._new([c * other for c in self.coeffs])
        other = self._operand(other)
        if other is None:
            return NotImplemented
        n = min(self.degree, other.degree)
        return self._new([_dot(self.coeffs, other.coeffs, k) for k in range(n + 1)])

    def __rmul__(self, other) -> 'TaylorSeries':
        return self.__mul__(other)

    def __truediv__(self, other) -> 'TaylorSeries':
        if isinstance(other, Ball) or _is_number(other):
            return self._new([c / other for c in self.coeffs])
        other = self._operand(other)
        if other is None:
            return NotImplemented
        n = min(self.degree, other.degree)
        a, b = self.coeffs, other.coeffs
        q: List[Ball] = []
        for k in range(n + 1):
            s = a[k]
            for j in range(1, k + 1):
                s = s - b[j] * q[k - j]
            q.append(s / b[0])
        return self._new(q)

    def __rtruediv__(self, other) -> 'TaylorSeries':
        other = self._operand(other)
        if other is None:
            return NotImplemented
        return other.__truediv__(self)

    def __pow__(self, exponent) -> 'TaylorSeries':
        n = _integer_exponent(exponent)
        if n is not None:
            if n < 0:
                return 1 / self._pow_int(-n)
            return self._pow_int(n)
        if isinstance(exponent, TaylorSeries):
            return (exponent * self.log()).exp()
        if isinstance(exponent, Ball) or _is_number(exponent):
            return (self.log() * exponent).exp()
        return NotImplemented

    def __rpow__(self, base) -> 'TaylorSeries':
        if isinstance(base, Ball) or _is_number(base):
            return (self * Ball.point(base, self.prec).log()).exp()
        return NotImplemented

    def _pow_int(self, n: int) -> 'TaylorSeries':
        result = TaylorSeries.constant(1, self.degree, self.prec)
        base = self
        while n > 0:
            if n & 1:
                result = result * base
            n >>= 1
            if n:
                base = base * base
        return result

    def __abs__(self) -> 'TaylorSeries':
        sign = self[0].sign()
        if sign == Sign.POSITIVE:
            return self
        if sign == Sign.NEGATIVE:
            return -self
        # Not differentiable where the value may vanish
        return self._new([abs(self[0])] + [Ball.nan(self.prec)] * self.degree)

    # ------------------------------------------------------------------
    # Elementary functions
    # ------------------------------------------------------------------

    def exp(self) -> 'TaylorSeries':
        a = self.coeffs
        b = [a[0].exp()]
        for k in range(1, self.degree + 1):
            s = Ball.zero(self.prec)
            for j in range(1, k + 1):
                s = s + a[j] * b[k - j] * j
            b.append(s / k)
        return self._new(b)

    def log(self) -> 'TaylorSeries':
        a = self.coeffs
        b = [a[0].log()]
        for k in range(1, self.degree + 1):
            s = Ball.zero(self.prec)
            for j in range(1, k):
                s = s + b[j] * a[k - j] * j
            b.append((a[k] - s / k) / a[0])
        return self._new(b)

    def sqrt(self) -> 'TaylorSeries':
        a = self.coeffs
        b = [a[0].sqrt()]
        for k in range(1, self.degree + 1):
            s = a[k]
            for j in range(1, k):
                s = s - b[j] * b[k - j]
            b.append(s / (b[0] * 2))
        return self._new(b)

    def sin_cos(self) -> Tuple['TaylorSeries', 'TaylorSeries']:
        """Series of sin and cos together."""
        a = self.coeffs
        s = [a[0].sin()]
        c = [a[0].cos()]
        for k in range(1, self.degree + 1):
            ds = Ball.zero(self.prec)
            dc = Ball.zero(self.prec)
            for j in range(1, k + 1):
                ds = ds + a[j] * c[k - j] * j
                dc = dc + a[j] * s[k - j] * j
            s.append(ds / k)
            c.append(-dc / k)
        return self._new(s), self._new(c)

    def sin(self) -> 'TaylorSeries':
        return self.sin_cos()[0]

    def cos(self) -> 'TaylorSeries':
        return self.sin_cos()[1]

    def sinpi(self) -> 'TaylorSeries':
        """sin(pi x)"""
        return (self * Ball.pi(self.prec)).sin()

    def cospi(self) -> 'TaylorSeries':
        """cos(pi x)"""
        return (self * Ball.pi(self.prec)).cos()

    def atan(self) -> 'TaylorSeries':
        # atan(f)' = f' / (1 + f^2), integrated term by term
        if self.degree == 0:
            return self._new([self[0].atan()])
        d = self.derivative() / (1 + self * self)
        b = [self[0].atan()]
        for k in range(1, self.degree + 1):
            b.append(d[k - 1] / k)
        return self._new(b)


def _dot(a: Sequence[Ball], b: Sequence[Ball], k: int) -> Ball:
    s = a[0] * b[k]
    for i in range(1, k + 1):
        s = s + a[i] * b[k - i]
    return s
