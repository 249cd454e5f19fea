"""
Ball Arithmetic

Rigorous enclosures of real numbers. A Ball is a closed interval
[lo, hi] whose endpoints are MPFR numbers; every operation computes the
lower endpoint rounded toward -inf and the upper endpoint rounded toward
+inf, so the exact result of the operation on any members of the
operands is always contained in the result.

The working precision travels with the value: each Ball carries `prec`
and every operation enters its own gmpy2 context with that precision.
Binary operations use the larger precision of the two operands. gmpy2
contexts are thread-local, so balls may be used from worker threads.

A Ball with NaN endpoints is the indeterminate value: it stands for
"could be anything", contains everything and proves nothing.

Comparisons <, <=, >, >= are certain comparisons: they are True only if
the relation holds for every pair of members. == is structural
(identical endpoints).
"""

import numbers
from dataclasses import dataclass
from enum import IntEnum
from fractions import Fraction
from typing import Optional

import gmpy2

from ..config import DEFAULT_PRECISION
from ..errors import InvalidIntervalError


DOWN = gmpy2.RoundDown
UP = gmpy2.RoundUp
NEAREST = gmpy2.RoundToNearest

MPFR = type(gmpy2.mpfr(0))
MPQ = type(gmpy2.mpq(0))
MPZ = type(gmpy2.mpz(0))


def rounding(prec: int, rnd=NEAREST):
    """gmpy2 context with the given precision and rounding mode."""
    return gmpy2.context(precision=prec, round=rnd)


def to_bound(x, prec: int = DEFAULT_PRECISION, rnd=NEAREST) -> MPFR:
    """
    Convert a number to an MPFR bound of precision `prec`.

    Exact when representable, otherwise rounded in direction `rnd`.
    """
    if isinstance(x, Ball):
        raise TypeError("to_bound expects a number, got a Ball")
    if isinstance(x, Fraction):
        x = gmpy2.mpq(x.numerator, x.denominator)
    elif isinstance(x, bool):
        x = int(x)
    elif isinstance(x, numbers.Integral) and not isinstance(x, (int, MPZ)):
        x = int(x)
    elif isinstance(x, numbers.Real) and not isinstance(x, (float, MPFR, MPQ, MPZ, int)):
        x = float(x)
    with rounding(prec, rnd):
        return gmpy2.mpfr(x)


def _is_number(x) -> bool:
    return isinstance(x, (numbers.Real, Fraction, MPFR, MPQ, MPZ)) and not isinstance(x, Ball)


class Sign(IntEnum):
    """Certain sign of a ball."""
    NEGATIVE = -1
    INDETERMINATE = 0
    POSITIVE = 1


@dataclass(frozen=True, eq=False)
class Ball:
    """
    A closed interval [lo, hi] with MPFR endpoints and a working precision.

    Numbers given as endpoints are converted with lo rounded down and hi
    rounded up.
    """
    lo: MPFR
    hi: MPFR
    prec: int = DEFAULT_PRECISION

    def __post_init__(self):
        if self.prec is None:
            object.__setattr__(self, "prec", DEFAULT_PRECISION)
        if not isinstance(self.lo, MPFR):
            object.__setattr__(self, "lo", to_bound(self.lo, self.prec, DOWN))
        if not isinstance(self.hi, MPFR):
            object.__setattr__(self, "hi", to_bound(self.hi, self.prec, UP))
        if self.lo > self.hi:
            raise InvalidIntervalError(self.lo, self.hi, "lo > hi")

    # ------------------------------------------------------------------
    # Constructors
    # ------------------------------------------------------------------

    @classmethod
    def point(cls, x, prec: Optional[int] = None) -> 'Ball':
        """The tightest ball containing the number x."""
        prec = prec or DEFAULT_PRECISION
        if isinstance(x, Ball):
            return x
        return cls(to_bound(x, prec, DOWN), to_bound(x, prec, UP), prec)

    @classmethod
    def interval(cls, a, b, prec: Optional[int] = None) -> 'Ball':
        """The tightest ball containing [a, b]."""
        prec = prec or DEFAULT_PRECISION
        return cls(to_bound(a, prec, DOWN), to_bound(b, prec, UP), prec)

    @classmethod
    def nan(cls, prec: Optional[int] = None) -> 'Ball':
        """The indeterminate ball."""
        return cls(gmpy2.nan(), gmpy2.nan(), prec or DEFAULT_PRECISION)

    @classmethod
    def zero(cls, prec: Optional[int] = None) -> 'Ball':
        return cls(gmpy2.mpfr(0), gmpy2.mpfr(0), prec or DEFAULT_PRECISION)

    @classmethod
    def pi(cls, prec: Optional[int] = None) -> 'Ball':
        """Enclosure of pi."""
        prec = prec or DEFAULT_PRECISION
        with rounding(prec, DOWN):
            lo = gmpy2.const_pi()
        with rounding(prec, UP):
            hi = gmpy2.const_pi()
        return cls(lo, hi, prec)

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    @property
    def mid(self) -> MPFR:
        """A number inside the ball, close to its center."""
        prec = max(self.prec, self.lo.precision, self.hi.precision) + 1
        with rounding(prec, NEAREST):
            m = (self.lo + self.hi) / 2
        if m < self.lo:
            return self.lo
        if m > self.hi:
            return self.hi
        return m

    @property
    def rad(self) -> MPFR:
        """Upper bound for half the width."""
        with rounding(self.prec, UP):
            return (self.hi - self.lo) / 2

    def midpoint(self) -> 'Ball':
        """Exact point ball at `mid`."""
        m = self.mid
        return Ball(m, m, self.prec)

    def diameter(self) -> MPFR:
        """Upper bound for the width."""
        with rounding(self.prec, UP):
            return self.hi - self.lo

    def is_nan(self) -> bool:
        return gmpy2.is_nan(self.lo) or gmpy2.is_nan(self.hi)

    def is_finite(self) -> bool:
        return gmpy2.is_finite(self.lo) and gmpy2.is_finite(self.hi)

    def is_exact(self) -> bool:
        return self.lo == self.hi

    def is_zero(self) -> bool:
        """True for the exact ball 0."""
        return self.lo == 0 and self.hi == 0

    def contains(self, x) -> bool:
        """Whether every member of x (a ball or a number) is in the ball."""
        if self.is_nan():
            return True
        if isinstance(x, Ball):
            if x.is_nan():
                return False
            return self.lo <= x.lo and x.hi <= self.hi
        if isinstance(x, Fraction):
            x = gmpy2.mpq(x.numerator, x.denominator)
        return self.lo <= x <= self.hi

    def contains_interior(self, x: 'Ball') -> bool:
        """Whether x lies strictly inside the ball."""
        x = self._coerce(x)
        return self.lo < x.lo and x.hi < self.hi

    def contains_zero(self) -> bool:
        if self.is_nan():
            return True
        return self.lo <= 0 <= self.hi

    def overlaps(self, other: 'Ball') -> bool:
        other = self._coerce(other)
        if self.is_nan() or other.is_nan():
            return True
        return self.lo <= other.hi and other.lo <= self.hi

    def sign(self) -> Sign:
        if self.lo > 0:
            return Sign.POSITIVE
        if self.hi < 0:
            return Sign.NEGATIVE
        return Sign.INDETERMINATE

    # ------------------------------------------------------------------
    # Set operations
    # ------------------------------------------------------------------

    def intersection(self, other: 'Ball') -> 'Ball':
        """
        Enclosure of the intersection.

        The indeterminate ball is returned when the balls are disjoint;
        callers check `overlaps` first.
        """
        other = self._coerce(other)
        prec = max(self.prec, other.prec)
        if self.is_nan():
            return Ball(other.lo, other.hi, prec)
        if other.is_nan():
            return Ball(self.lo, self.hi, prec)
        lo = max(self.lo, other.lo)
        hi = min(self.hi, other.hi)
        if lo > hi:
            return Ball.nan(prec)
        return Ball(lo, hi, prec)

    def union(self, other: 'Ball') -> 'Ball':
        """Smallest ball containing both."""
        other = self._coerce(other)
        prec = max(self.prec, other.prec)
        if self.is_nan() or other.is_nan():
            return Ball.nan(prec)
        return Ball(min(self.lo, other.lo), max(self.hi, other.hi), prec)

    def nonnegative_part(self) -> 'Ball':
        """Enclosure of the ball intersected with [0, inf)."""
        if self.is_nan():
            return Ball(gmpy2.mpfr(0), gmpy2.mpfr("inf"), self.prec)
        zero = gmpy2.mpfr(0)
        return Ball(max(self.lo, zero), max(self.hi, zero), self.prec)

    # ------------------------------------------------------------------
    # Arithmetic
    # ------------------------------------------------------------------

    def _coerce(self, other) -> 'Ball':
        if isinstance(other, Ball):
            return other
        if _is_number(other):
            return Ball.point(other, self.prec)
        raise TypeError(f"Cannot combine Ball with {type(other).__name__}")

    def _binary_operand(self, other) -> Optional['Ball']:
        if isinstance(other, Ball):
            return other
        if _is_number(other):
            return Ball.point(other, self.prec)
        return None

    def __add__(self, other) -> 'Ball':
        other = self._binary_operand(other)
        if other is None:
            return NotImplemented
        prec = max(self.prec, other.prec)
        with rounding(prec, DOWN):
            lo = self.lo + other.lo
        with rounding(prec, UP):
            hi = self.hi + other.hi
        return _make(lo, hi, prec)

    def __radd__(self, other) -> 'Ball':
        return self.__add__(other)

    def __sub__(self, other) -> 'Ball':
        other = self._binary_operand(other)
        if other is None:
            return NotImplemented
        prec = max(self.prec, other.prec)
        with rounding(prec, DOWN):
            lo = self.lo - other.hi
        with rounding(prec, UP):
            hi = self.hi - other.lo
        return _make(lo, hi, prec)

    def __rsub__(self, other) -> 'Ball':
        other = self._binary_operand(other)
        if other is None:
            return NotImplemented
        return other.__sub__(self)

    def __neg__(self) -> 'Ball':
        return Ball(-self.hi, -self.lo, self.prec)

    def __pos__(self) -> 'Ball':
        return self

    def __mul__(self, other) -> 'Ball':
        other = self._binary_operand(other)
        if other is None:
            return NotImplemented
        prec = max(self.prec, other.prec)
        if self.is_nan() or other.is_nan():
            return Ball.nan(prec)
        pairs = [(self.lo, other.lo), (self.lo, other.hi),
                 (self.hi, other.lo), (self.hi, other.hi)]
        # 0 * inf: the zero factor is an exact zero, so is the product
        with rounding(prec, DOWN):
            lows = [_zero_if_nan(x * y) for x, y in pairs]
        with rounding(prec, UP):
            highs = [_zero_if_nan(x * y) for x, y in pairs]
        return _make(min(lows), max(highs), prec)

    def __rmul__(self, other) -> 'Ball':
        return self.__mul__(other)

    def __truediv__(self, other) -> 'Ball':
        other = self._binary_operand(other)
        if other is None:
            return NotImplemented
        prec = max(self.prec, other.prec)
        if self.is_nan() or other.contains_zero():
            return Ball.nan(prec)
        pairs = [(self.lo, other.lo), (self.lo, other.hi),
                 (self.hi, other.lo), (self.hi, other.hi)]
        with rounding(prec, DOWN):
            lows = [x / y for x, y in pairs]
        with rounding(prec, UP):
            highs = [x / y for x, y in pairs]
        return _make(min(lows), max(highs), prec)

    def __rtruediv__(self, other) -> 'Ball':
        other = self._binary_operand(other)
        if other is None:
            return NotImplemented
        return other.__truediv__(self)

    def __pow__(self, exponent) -> 'Ball':
        n = _integer_exponent(exponent)
        if n is not None:
            return self._pow_int(n)
        if isinstance(exponent, Ball) or _is_number(exponent):
            y = self._coerce(exponent)
            return (y * self.log()).exp()
        return NotImplemented

    def __rpow__(self, base) -> 'Ball':
        if not _is_number(base):
            return NotImplemented
        return Ball.point(base, self.prec) ** self

    def _pow_int(self, n: int) -> 'Ball':
        if n == 0:
            return Ball.point(1, self.prec)
        if n < 0:
            return 1 / self._pow_int(-n)
        if self.is_nan():
            return self
        prec = self.prec
        if n % 2 == 1 or self.lo >= 0:
            with rounding(prec, DOWN):
                lo = self.lo ** n
            with rounding(prec, UP):
                hi = self.hi ** n
            return _make(lo, hi, prec)
        if self.hi <= 0:
            with rounding(prec, DOWN):
                lo = self.hi ** n
            with rounding(prec, UP):
                hi = self.lo ** n
            return _make(lo, hi, prec)
        m = max(-self.lo, self.hi)
        with rounding(prec, UP):
            hi = m ** n
        return _make(gmpy2.mpfr(0), hi, prec)

    def sqr(self) -> 'Ball':
        return self._pow_int(2)

    def __abs__(self) -> 'Ball':
        return self.abs()

    def abs(self) -> 'Ball':
        if self.lo >= 0:
            return self
        if self.hi <= 0:
            return -self
        if self.is_nan():
            return self
        return Ball(gmpy2.mpfr(0), max(-self.lo, self.hi), self.prec)

    # ------------------------------------------------------------------
    # Elementary functions
    # ------------------------------------------------------------------

    def _monotone(self, fn) -> 'Ball':
        with rounding(self.prec, DOWN):
            lo = fn(self.lo)
        with rounding(self.prec, UP):
            hi = fn(self.hi)
        return _make(lo, hi, self.prec)

    def sqrt(self) -> 'Ball':
        if self.is_nan() or self.lo < 0:
            return Ball.nan(self.prec)
        return self._monotone(gmpy2.sqrt)

    def exp(self) -> 'Ball':
        if self.is_nan():
            return self
        return self._monotone(gmpy2.exp)

    def log(self) -> 'Ball':
        if self.is_nan() or self.lo <= 0:
            return Ball.nan(self.prec)
        return self._monotone(gmpy2.log)

    def atan(self) -> 'Ball':
        if self.is_nan():
            return self
        return self._monotone(gmpy2.atan)

    def _hits(self, offset: 'Ball') -> bool:
        """Whether the ball may contain offset + 2 k pi for an integer k."""
        two_pi = Ball.pi(self.prec) * 2
        t_lo = ((Ball(self.lo, self.lo, self.prec) - offset) / two_pi).lo
        t_hi = ((Ball(self.hi, self.hi, self.prec) - offset) / two_pi).hi
        return gmpy2.ceil(t_lo) <= t_hi

    def _periodic(self, fn, max_at: 'Ball', min_at: 'Ball') -> 'Ball':
        # fn has period 2 pi, maximum 1 at max_at and minimum -1 at min_at
        prec = self.prec
        if self.is_nan():
            return self
        if not self.is_finite() or self.diameter() >= 7:
            return Ball(-1, 1, prec)
        with rounding(prec, DOWN):
            lo = min(fn(self.lo), fn(self.hi))
        with rounding(prec, UP):
            hi = max(fn(self.lo), fn(self.hi))
        one = gmpy2.mpfr(1)
        if self._hits(max_at):
            hi = one
        if self._hits(min_at):
            lo = -one
        return Ball(max(lo, -one), min(hi, one), prec)

    def sin(self) -> 'Ball':
        half_pi = Ball.pi(self.prec) / 2
        return self._periodic(gmpy2.sin, half_pi, -half_pi)

    def cos(self) -> 'Ball':
        return self._periodic(gmpy2.cos, Ball.zero(self.prec), Ball.pi(self.prec))

    def sinpi(self) -> 'Ball':
        """sin(pi x)"""
        return (self * Ball.pi(self.prec)).sin()

    def cospi(self) -> 'Ball':
        """cos(pi x)"""
        return (self * Ball.pi(self.prec)).cos()

    # ------------------------------------------------------------------
    # Comparisons
    # ------------------------------------------------------------------

    def __lt__(self, other) -> bool:
        other = self._binary_operand(other)
        if other is None:
            return NotImplemented
        return self.hi < other.lo

    def __le__(self, other) -> bool:
        other = self._binary_operand(other)
        if other is None:
            return NotImplemented
        return self.hi <= other.lo

    def __gt__(self, other) -> bool:
        other = self._binary_operand(other)
        if other is None:
            return NotImplemented
        return self.lo > other.hi

    def __ge__(self, other) -> bool:
        other = self._binary_operand(other)
        if other is None:
            return NotImplemented
        return self.lo >= other.hi

    def __eq__(self, other) -> bool:
        other = self._binary_operand(other)
        if other is None:
            return NotImplemented
        return self.lo == other.lo and self.hi == other.hi

    def __ne__(self, other) -> bool:
        result = self.__eq__(other)
        if result is NotImplemented:
            return result
        return not result

    def __hash__(self) -> int:
        return hash((self.lo, self.hi))

    def __float__(self) -> float:
        return float(self.mid)

    def __repr__(self) -> str:
        return f"[{float(self.lo):.10g}, {float(self.hi):.10g}]"


def _make(lo, hi, prec: int) -> Ball:
    # NaN in either endpoint poisons the whole ball
    if gmpy2.is_nan(lo) or gmpy2.is_nan(hi):
        return Ball.nan(prec)
    return Ball(lo, hi, prec)


def _zero_if_nan(x):
    return gmpy2.mpfr(0) if gmpy2.is_nan(x) else x


def _integer_exponent(exponent) -> Optional[int]:
    if isinstance(exponent, bool):
        return int(exponent)
    if isinstance(exponent, (int, MPZ)) or isinstance(exponent, numbers.Integral):
        return int(exponent)
    if isinstance(exponent, Fraction):
        return int(exponent) if exponent.denominator == 1 else None
    if isinstance(exponent, Ball):
        if exponent.is_exact() and gmpy2.is_integer(exponent.lo):
            return int(exponent.lo)
        return None
    if isinstance(exponent, (float, MPFR)):
        if gmpy2.is_finite(gmpy2.mpfr(exponent)) and gmpy2.is_integer(gmpy2.mpfr(exponent)):
            return int(exponent)
    return None


def ball_min(x: Ball, y: Ball) -> Ball:
    """Enclosure of min(a, b) for a in x and b in y."""
    prec = max(x.prec, y.prec)
    if x.is_nan() or y.is_nan():
        return Ball.nan(prec)
    return Ball(min(x.lo, y.lo), min(x.hi, y.hi), prec)


def ball_max(x: Ball, y: Ball) -> Ball:
    """Enclosure of max(a, b) for a in x and b in y."""
    prec = max(x.prec, y.prec)
    if x.is_nan() or y.is_nan():
        return Ball.nan(prec)
    return Ball(max(x.lo, y.lo), max(x.hi, y.hi), prec)
