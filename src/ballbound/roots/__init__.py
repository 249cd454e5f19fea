"""
Root finding: isolation by bisection, refinement by interval Newton
steps or by bisection on a sign change.
"""

from .isolate import isolate_roots
from .refine import refine_root, refine_root_bisection
from .targets import CallableTarget, PolynomialTarget, RootTarget, target_for

__all__ = [
    "isolate_roots",
    "refine_root",
    "refine_root_bisection",
    "RootTarget",
    "CallableTarget",
    "PolynomialTarget",
    "target_for",
]
