"""One-step time-stepping schemes for initial value problems."""

from .base import AbstractStepper
from .explicit import ForwardEuler, Midpoint, RK4
from .implicit import BackwardEuler

__all__ = [
    # Base class
    'AbstractStepper',

    # Explicit methods
    'ForwardEuler',
    'Midpoint',
    'RK4',

    # Implicit methods
    'BackwardEuler',
]
