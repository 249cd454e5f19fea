"""
ballbound Command-Line Interface

Runs root isolation, extrema enclosures and bound checks on a registry
of demo functions.
"""

import sys
import argparse
import time
from fractions import Fraction
from typing import Callable, Dict, List, Optional, Tuple

import numpy as np

from . import (
    Ball,
    BisectionConfig,
    bounded_by,
    cos,
    exp,
    extrema_enclosure,
    format_interval,
    isolate_roots,
    log,
    refine_root,
    sin,
    sinpi,
)
from .config import DEFAULT_DEGREE, DEFAULT_ISOLATION_DEPTH


def _sum_sin(x):
    return -sum(k * sin((k + 1) * x + k) for k in range(1, 7))


FUNCTIONS: Dict[str, Tuple[Callable, Tuple[float, float]]] = {
    'sin-sin': (lambda x: sin(x) + sin(Fraction(10, 3) * x), (2.7, 7.5)),
    'sum-sin': (_sum_sin, (-10.0, 10.0)),
    'poly-exp': (lambda x: -(16 * x ** 2 - 24 * x + 5) * exp(-x), (1.9, 3.9)),
    'sin-log': (lambda x: sin(x) + sin(Fraction(10, 3) * x) + log(x) - 0.84 * x + 3,
                (2.7, 7.5)),
    'x-sin': (lambda x: -x * sin(x), (0.0, 10.0)),
    'cos-cos': (lambda x: 2 * cos(x) + cos(2 * x), (-1.5, 6.0)),
    'exp-sinpi': (lambda x: -exp(-x) * sinpi(2 * x), (0.0, 4.0)),
    'rational': (lambda x: (x ** 2 - 5 * x + 6) / (x ** 2 + 1), (-5.0, 5.0)),
    'sinpi-half': (lambda x: sinpi(x / 2), (-9.5, 19.5)),
}


def _interval(args) -> Tuple[float, float]:
    default = FUNCTIONS[args.function][1]
    a = args.lower if args.lower is not None else default[0]
    b = args.upper if args.upper is not None else default[1]
    return a, b


PRESETS: Dict[str, Callable[..., BisectionConfig]] = {
    'default': BisectionConfig,
    'quick': BisectionConfig.quick,
    'thorough': BisectionConfig.thorough,
}


def _budget(args) -> BisectionConfig:
    """The preset budget with --maxevals and --depth applied on top."""
    overrides = {key: value for key, value in (('maxevals', args.maxevals),
                                               ('depth', args.depth))
                 if value is not None}
    return PRESETS[args.preset](**overrides)


def _header(title: str) -> None:
    print("=" * 60)
    print(title)
    print("=" * 60)


def cmd_roots(args):
    """Isolate and refine the roots of a demo function."""
    _header("ballbound Root Isolation")
    f, _ = FUNCTIONS[args.function]
    a, b = _interval(args)
    print(f"\nFunction: {args.function}")
    print(f"Interval: [{a}, {b}]")
    print(f"Depth: {args.depth}")

    start = time.time()
    found, flags = isolate_roots(f, a, b, depth=args.depth, prec=args.prec,
                                 threaded=args.threaded, verbose=args.verbose)
    elapsed = time.time() - start

    print("\n" + "-" * 60)
    print("RESULTS")
    print("-" * 60)
    print(f"Intervals: {len(found)} | Unique: {sum(flags)} | Time: {elapsed:.3f}s")
    for (lo, hi), unique in zip(found, flags):
        if unique and args.refine:
            root = refine_root(f, Ball(lo, hi, args.prec))
            print(f"  [UNIQUE] {root}")
        else:
            status = "UNIQUE" if unique else "MAYBE "
            print(f"  [{status}] {format_interval(lo, hi, 10)}")
    return 0


def _point_values(f: Callable, a: float, b: float, samples: int,
                  prec: int) -> Tuple[Optional[Ball], Optional[Ball]]:
    if samples <= 0:
        return None, None
    values: List[Ball] = [f(Ball.point(x, prec)) for x in np.linspace(a, b, samples)]
    values = [v for v in values if v.is_finite()]
    if not values:
        return None, None
    lo = min(values, key=lambda v: v.hi)
    hi = max(values, key=lambda v: v.lo)
    return lo, hi


def cmd_extrema(args):
    """Enclose the minimum and maximum of a demo function."""
    _header("ballbound Extrema Enclosure")
    f, _ = FUNCTIONS[args.function]
    a, b = _interval(args)
    print(f"\nFunction: {args.function}")
    print(f"Interval: [{a}, {b}]")
    print(f"Degree: {args.degree}")
    print(f"Abs value: {args.abs_value}")
    budget = _budget(args)
    print(f"Budget: {budget.maxevals} evals, depth {budget.depth}")

    point_min, point_max = (None, None) if args.abs_value else _point_values(
        f, a, b, args.samples, args.prec)

    start = time.time()
    minimum, maximum = extrema_enclosure(
        f, a, b,
        degree=args.degree,
        abs_value=args.abs_value,
        point_value_min=point_min,
        point_value_max=point_max,
        maxevals=budget.maxevals,
        depth=budget.depth,
        threaded=args.threaded,
        prec=args.prec,
        verbose=args.verbose,
    )
    elapsed = time.time() - start

    print("\n" + "-" * 60)
    print("RESULTS")
    print("-" * 60)
    print(f"Minimum: {minimum}")
    print(f"Maximum: {maximum}")
    print(f"Time: {elapsed:.3f}s")
    return 0 if minimum.is_finite() and maximum.is_finite() else 1


def cmd_bounded(args):
    """Prove that a demo function is bounded by C."""
    _header("ballbound Bound Check")
    f, _ = FUNCTIONS[args.function]
    a, b = _interval(args)
    print(f"\nFunction: {args.function}")
    print(f"Interval: [{a}, {b}]")
    print(f"Bound: {args.bound}")
    budget = _budget(args)

    start = time.time()
    proved = bounded_by(
        f, a, b, args.bound,
        degree=args.degree,
        abs_value=args.abs_value,
        maxevals=budget.maxevals,
        depth=budget.depth,
        threaded=args.threaded,
        prec=args.prec,
        verbose=args.verbose,
    )
    elapsed = time.time() - start

    status = "PROVED" if proved else "NOT PROVED"
    print(f"\n[{status}] {'|f|' if args.abs_value else 'f'} <= {args.bound} "
          f"({elapsed:.3f}s)")
    return 0 if proved else 1


def _add_common(parser: argparse.ArgumentParser) -> None:
    parser.add_argument('function', choices=list(FUNCTIONS.keys()),
                        help='Demo function')
    parser.add_argument('--lower', type=float, help='Lower endpoint (default: per function)')
    parser.add_argument('--upper', type=float, help='Upper endpoint (default: per function)')
    parser.add_argument('--prec', '-p', type=int, default=64,
                        help='Working precision in bits (default: 64)')
    parser.add_argument('--threaded', action='store_true',
                        help='Evaluate subintervals on a thread pool')
    parser.add_argument('--verbose', '-v', action='store_true',
                        help='Print progress')


def _add_budget(parser: argparse.ArgumentParser) -> None:
    parser.add_argument('--degree', '-d', type=int, default=DEFAULT_DEGREE,
                        help=f'Taylor model degree (default: {DEFAULT_DEGREE})')
    parser.add_argument('--abs-value', action='store_true',
                        help='Work with |f| instead of f')
    parser.add_argument('--preset', choices=list(PRESETS.keys()), default='default',
                        help='Bisection budget preset (default: default)')
    parser.add_argument('--maxevals', '-n', type=int,
                        help='Max evaluations (default: per preset)')
    parser.add_argument('--depth', type=int,
                        help='Max bisection depth (default: per preset)')


def main(argv: Optional[List[str]] = None):
    """Main CLI entry point."""
    parser = argparse.ArgumentParser(
        prog='ballbound',
        description='ballbound - Rigorous Root and Extrema Enclosures'
    )
    subparsers = parser.add_subparsers(dest='command', help='Commands')

    roots_parser = subparsers.add_parser('roots', help='Isolate roots')
    _add_common(roots_parser)
    roots_parser.add_argument('--depth', type=int, default=DEFAULT_ISOLATION_DEPTH,
                              help=f'Max bisection depth (default: {DEFAULT_ISOLATION_DEPTH})')
    roots_parser.add_argument('--refine', action='store_true',
                              help='Refine unique roots with interval Newton')
    roots_parser.set_defaults(func=cmd_roots)

    extrema_parser = subparsers.add_parser('extrema', help='Enclose minimum and maximum')
    _add_common(extrema_parser)
    _add_budget(extrema_parser)
    extrema_parser.add_argument('--samples', type=int, default=16,
                                help='Point evaluations used as a priori bounds (default: 16)')
    extrema_parser.set_defaults(func=cmd_extrema)

    bounded_parser = subparsers.add_parser('bounded', help='Prove f <= C')
    _add_common(bounded_parser)
    _add_budget(bounded_parser)
    bounded_parser.add_argument('bound', type=float, help='The bound C')
    bounded_parser.set_defaults(func=cmd_bounded)

    args = parser.parse_args(argv)

    if args.command is None:
        parser.print_help()
        return 0

    return args.func(args)


if __name__ == "__main__":
    sys.exit(main())
