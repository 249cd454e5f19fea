"""
Root Refinement

refine_root: interval Newton iteration on a ball known to contain a root.
Each step computes

    N(X) = m - f(m) / f'(X),    m = midpoint of X

and intersects it with X. If N(X) lies strictly inside the original ball
then, by the interval Newton theorem, the original ball contains exactly
one root; without that proof a strict refinement returns the
indeterminate ball.

refine_root_bisection: plain bisection on a sign change, for functions
whose derivative is not available or not useful.
"""

from typing import Callable, Optional, Tuple, Union

import gmpy2

from ..arithmetic.ball import MPFR, Ball, Sign
from ..arithmetic.polynomial import Polynomial
from ..bisection import check_tolerance, format_interval, interval_bounds, interval_midpoint
from ..config import DEFAULT_PRECISION, default_rtol, refine_rtol
from ..observer import Observer, resolve_observer
from .targets import target_for


def refine_root(
    f: Union[Callable, Polynomial],
    root: Ball,
    atol=0,
    rtol=None,
    min_iterations: int = 1,
    max_iterations: int = 20,
    strict: bool = True,
    observer: Optional[Observer] = None,
    verbose: bool = False,
) -> Ball:
    """
    Refine an enclosure of a root of f with interval Newton steps.

    Args:
        f: callable accepting Balls and TaylorSeries, or a Polynomial
        root: ball containing the root
        atol, rtol: stop once the enclosure is this narrow (rtol defaults
            to 4 eps of the ball's precision)
        min_iterations: iterations done before stall detection kicks in
        max_iterations: hard cap on the number of Newton steps
        strict: if True, return the indeterminate ball unless the Newton
            step proved that the input ball contains a unique root

    Returns:
        A ball contained in `root` (or NaN, see `strict`).
    """
    observer = resolve_observer(observer, verbose)
    prec = root.prec
    if rtol is None:
        rtol = refine_rtol(prec)
    target = target_for(f, prec)

    original_root = root
    mid = root.midpoint()
    error_previous = root.rad
    proved = False

    for iteration in range(1, max_iterations + 1):
        y = target.value(mid)
        dy = target.derivative(root)

        new_root = mid - y / dy

        if not proved and original_root.contains_interior(new_root):
            proved = True
            observer.proof("refine_root", "unique root in the input ball", iteration)

        if not new_root.is_finite() or not root.overlaps(new_root):
            observer.stop("refine_root",
                          f"Newton step failed at {format_interval(root.lo, root.hi)}",
                          iteration)
            break

        root = root.intersection(new_root)

        if check_tolerance(root, atol, rtol):
            break

        error = root.rad
        if iteration >= min_iterations and error * 1.5 > error_previous:
            observer.stop("refine_root", "no further progress", iteration)
            break
        error_previous = error

        mid = root.midpoint()

    if strict and not proved:
        return Ball.nan(prec)
    return root


def refine_root_bisection(
    f: Union[Callable, Polynomial],
    a,
    b,
    atol=0,
    rtol=None,
    max_iterations: Optional[int] = None,
    strict: bool = True,
    prec: Optional[int] = None,
    observer: Optional[Observer] = None,
    verbose: bool = False,
) -> Tuple[MPFR, MPFR]:
    """
    Shrink a bracket [a, b] of a sign change of f by bisection.

    The endpoints of the returned bracket always have provably different
    signs. If the signs at a and b cannot be proved to differ, (nan, nan)
    is returned when strict, else (a, b) unchanged.

    Args:
        atol, rtol: stop once the bracket is this narrow (rtol defaults to
            sqrt(eps) of the working precision)
        max_iterations: defaults to half the working precision
    """
    observer = resolve_observer(observer, verbose)
    prec = prec or DEFAULT_PRECISION
    a, b = interval_bounds(a, b, prec)
    if rtol is None:
        rtol = default_rtol(prec)
    if max_iterations is None:
        max_iterations = prec // 2
    target = target_for(f, prec)

    sign_a = target.sign_at(a)
    sign_b = target.sign_at(b)
    if sign_a == Sign.INDETERMINATE or sign_b == Sign.INDETERMINATE or sign_a == sign_b:
        observer.stop("refine_root_bisection",
                      f"no sign change proved on {format_interval(a, b)}")
        if strict:
            return gmpy2.nan(), gmpy2.nan()
        return a, b

    for iteration in range(1, max_iterations + 1):
        if check_tolerance(Ball(a, b, prec), atol, rtol):
            break

        mid = interval_midpoint(a, b)
        if mid == a or mid == b:
            observer.stop("refine_root_bisection",
                          "midpoint equals an endpoint at this precision", iteration)
            break

        sign_mid = target.sign_at(mid)
        if sign_mid == Sign.INDETERMINATE:
            # Try a point a little to the left before giving up
            mid = interval_midpoint(a, mid)
            sign_mid = target.sign_at(mid) if mid != a else Sign.INDETERMINATE
            if sign_mid == Sign.INDETERMINATE:
                observer.stop("refine_root_bisection",
                              f"sign undetermined near {format_interval(a, b)}",
                              iteration)
                break

        if sign_mid == sign_a:
            a = mid
        else:
            b = mid

    return a, b
