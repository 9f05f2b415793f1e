"""
Fixed-step one-step methods for initial value problems written in JAX.
"""

# Problem description and solver interface
from .problem import ODEProblem, ODESolution
from .solve import solve_ivp

# Time-stepping schemes
from .timesteppers import AbstractStepper, ForwardEuler, Midpoint, RK4, BackwardEuler

__all__ = [
    # Problem description and solver interface
    'ODEProblem',
    'ODESolution',
    'solve_ivp',

    # Time-stepping methods
    'AbstractStepper',
    'ForwardEuler',
    'Midpoint',
    'RK4',
    'BackwardEuler',
]
