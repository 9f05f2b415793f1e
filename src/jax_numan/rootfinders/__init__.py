"""Root-finding and fixed-point algorithms."""

from .protocol import RootFinderProtocol
from .results import IterationResult, RootResult
from .fixedpoint import fixed_point_iterate
from .newtonraphson import (
    NewtonRaphson,
    fixed_point_newton,
    newton,
    newton_system,
)
from .bisection import bisection, bisection_iteration_bound


__all__ = [
    "RootFinderProtocol",
    "IterationResult",
    "RootResult",
    "fixed_point_iterate",
    "newton",
    "fixed_point_newton",
    "newton_system",
    "NewtonRaphson",
    "bisection",
    "bisection_iteration_bound",
]
