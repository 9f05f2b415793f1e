"""
JAX Numerical Analysis

Fixed-size, one-step numerical solvers written in JAX:
root finding (fixed-point iteration, Newton, bisection) and
initial value problems (Forward Euler, Midpoint, RK4, Backward Euler).

Main components:
- rootfinders: Fixed-point, Newton and bisection solvers
- integrate: One-step time integration methods
- derivatives: Derivative and Jacobian providers
- diagnostics: Error and convergence-order utilities

Importing the package enables `jax_enable_x64` for the whole process, so
floats created afterwards by any JAX code default to float64. Call
`jax.config.update("jax_enable_x64", False)` after the import to restore
single precision elsewhere; the solvers then run in float32 and tolerances
below about 1e-7 can no longer be reached.
"""

import jax

# All solvers work in double precision
jax.config.update("jax_enable_x64", True)

from .errors import BracketError, SingularJacobianError  # noqa: E402

# Derivatives
from .derivatives import derivative, jacobian  # noqa: E402

# Root finding
from .rootfinders import (  # noqa: E402
    IterationResult,
    RootResult,
    NewtonRaphson,
    bisection,
    bisection_iteration_bound,
    fixed_point_iterate,
    fixed_point_newton,
    newton,
    newton_system,
)

# Linear solvers
from .linsolvers import DirectDense  # noqa: E402

# Time integration
from .integrate import (  # noqa: E402
    ODEProblem,
    ODESolution,
    solve_ivp,
    ForwardEuler,
    Midpoint,
    RK4,
    BackwardEuler,
)

# Diagnostics
from .diagnostics import (  # noqa: E402
    convergence_ratios,
    estimate_order,
    global_error,
    has_diverged,
    iteration_errors,
    local_truncation_error,
)

__all__ = [
    # Errors
    "BracketError",
    "SingularJacobianError",

    # Derivatives
    "derivative",
    "jacobian",

    # Root finding
    "IterationResult",
    "RootResult",
    "fixed_point_iterate",
    "newton",
    "fixed_point_newton",
    "newton_system",
    "NewtonRaphson",
    "bisection",
    "bisection_iteration_bound",

    # Linear solvers
    "DirectDense",

    # Time integration
    "ODEProblem",
    "ODESolution",
    "solve_ivp",
    "ForwardEuler",
    "Midpoint",
    "RK4",
    "BackwardEuler",

    # Diagnostics
    "global_error",
    "convergence_ratios",
    "iteration_errors",
    "estimate_order",
    "local_truncation_error",
    "has_diverged",
]
