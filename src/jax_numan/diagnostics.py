"""
Error and convergence diagnostics.

These helpers are used to verify convergence orders empirically. They are
not needed to run any solver.
"""

import math
from typing import Callable, Sequence

import jax
import jax.numpy as jnp
from jax import Array

from .custom_types import RHSFunction
from .errors import TRACER_ERRORS
from .integrate import AbstractStepper, ODESolution


def _norms(values: Array) -> Array:
    """Norm of every entry along the leading axis."""
    values = jnp.asarray(values)
    if values.ndim == 1:
        return jnp.abs(values)
    flat = values.reshape(values.shape[0], math.prod(values.shape[1:]))
    return jnp.linalg.norm(flat, axis=1)


def global_error(solution: ODESolution, reference: Callable) -> float:
    """
    Maximal error max_n |u_n - u(t_n)| of a trace against a reference.

    For vector states the maximum is also taken over the components.

    Args:
        solution: Trace returned by `solve_ivp`.
        reference: Exact (or very accurate) solution t -> u(t). Evaluated
            on all nodes at once with `jax.vmap`; references that cannot
            be traced (math/numpy code) are evaluated node by node.
    """
    try:
        exact = jax.vmap(reference)(solution.t)
    except TRACER_ERRORS:
        exact = jnp.stack([jnp.asarray(reference(t_n)) for t_n in solution.t])
    exact = exact.reshape(solution.u.shape)
    return float(jnp.max(jnp.abs(solution.u - exact)))


def convergence_ratios(history_r: Array, q: float) -> Array:
    """
    Ratios ||r_{k+1}|| / ||r_k||^q of consecutive residuals.

    For an iteration of order q these tend to a nonzero constant; for a
    lower order they tend to zero and for a higher order they blow up.
    """
    norms = _norms(history_r)
    return norms[1:] / norms[:-1] ** q


def iteration_errors(history_x: Array, x_star: Array) -> Array:
    """Errors ||x_k - x*|| of all iterates against a known solution."""
    history_x = jnp.asarray(history_x)
    return _norms(history_x - jnp.asarray(x_star))


def estimate_order(step_sizes: Sequence[float], errors: Sequence[float]) -> float:
    """
    Empirical convergence order p from errors ≈ C h^p.

    Least-squares slope of log(error) against log(h).
    """
    log_h = jnp.log(jnp.asarray(step_sizes, dtype=float))
    log_e = jnp.log(jnp.asarray(errors, dtype=float))
    slope, _ = jnp.polyfit(log_h, log_e, 1)
    return float(slope)


def local_truncation_error(
    method: AbstractStepper,
    fun: RHSFunction,
    exact: Callable,
    t: float,
    h: float,
    args: tuple = (),
) -> float:
    """
    Local truncation error of a one-step method at time t.

    Takes one step from the exact value u(t) and compares with u(t + h):
    tau = ||u(t + h) - step(u(t))|| / h.
    """
    u_t = jnp.asarray(exact(t), dtype=float)
    u_next = method.step(fun, jnp.asarray(t, dtype=float), u_t, h, args)
    return float(jnp.linalg.norm(jnp.ravel(exact(t + h) - u_next)) / h)


def has_diverged(solution: ODESolution, bound: float = 1e8) -> bool:
    """Whether a trace contains non-finite values or values above bound."""
    u = solution.u
    return bool(~jnp.all(jnp.isfinite(u)) | jnp.any(jnp.abs(u) > bound))
