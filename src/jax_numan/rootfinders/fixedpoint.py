"""Fixed-point iteration with a residual-based stopping criterion."""

import logging

import jax
import jax.numpy as jnp
from jax import Array

from ..custom_types import ScalarMap, StepFunction
from ..errors import traced_callables
from .results import IterationResult

logger = logging.getLogger(__name__)


def residual_norm(r: Array) -> Array:
    """Absolute value of a scalar residual, Euclidean norm of a vector one."""
    return jnp.linalg.norm(jnp.ravel(r))


def as_state(x0) -> Array:
    """Convert an initial guess to a floating point state."""
    return jnp.asarray(x0, dtype=float)


def check_tolerances(tol: float, maxiter: int) -> None:
    if tol < 0:
        raise ValueError(f"tol must be non-negative, got {tol}.")
    if maxiter < 1:
        raise ValueError(f"maxiter must be a positive integer, got {maxiter}.")


def iterate(
    step: StepFunction, x0: Array, tol: float, maxiter: int
) -> tuple[Array, Array, Array, Array, Array, Array]:
    """
    Repeat x <- step(x) until the residual norm drops below tol.

    The loop runs inside `jax.lax.while_loop`. Iterates and residuals are
    written to buffers of length maxiter + 1 and maxiter respectively;
    unused entries are NaN.

    Args:
        step: Update with signature x -> (x_next, info). A nonzero info
            stops the loop, e.g. on a singular Newton matrix.
        x0: Initial guess.
        tol: Stop once ||x_next - x|| < tol.
        maxiter: Maximal number of iterations.

    Returns:
        (x, r, n_iter, info, history_x, history_r)
    """
    history_x = jnp.full((maxiter + 1, *x0.shape), jnp.nan, dtype=x0.dtype)
    history_x = history_x.at[0].set(x0)
    history_r = jnp.full((maxiter, *x0.shape), jnp.nan, dtype=x0.dtype)

    zero = jnp.asarray(0, dtype=jnp.int32)
    state0 = (x0, jnp.full_like(x0, jnp.inf), zero, zero, history_x, history_r)

    def cond_fun(state):
        _, r_k, k, info, _, _ = state
        return (k < maxiter) & (residual_norm(r_k) >= tol) & (info == 0)

    def body_fun(state):
        x_k, _, k, _, history_x, history_r = state
        x_kp1, info = step(x_k)
        x_kp1 = jnp.asarray(x_kp1, dtype=x_k.dtype)
        r_kp1 = x_kp1 - x_k
        history_x = history_x.at[k + 1].set(x_kp1)
        history_r = history_r.at[k].set(r_kp1)
        info = jnp.asarray(info, dtype=jnp.int32)
        return (x_kp1, r_kp1, k + 1, info, history_x, history_r)

    return jax.lax.while_loop(cond_fun, body_fun, state0)


def make_result(
    x: Array,
    r: Array,
    n_iter: Array,
    history_x: Array,
    history_r: Array,
    tol: float,
    maxiter: int,
    name: str = "Fixed-point iteration",
) -> IterationResult:
    """Truncate the history buffers and log non-convergence."""
    n_iter = int(n_iter)
    finite = bool(jnp.all(jnp.isfinite(x)))
    norm = float(residual_norm(r))
    converged = finite and norm < tol

    if not finite:
        logger.warning(
            "%s produced a non-finite iterate after %d iterations.",
            name, n_iter,
        )
    elif not converged:
        logger.warning(
            "%s did not converge within %d iterations. "
            "Final residual norm: %.2e",
            name, maxiter, norm,
        )

    return IterationResult(
        value=x,
        residual=r,
        n_iter=n_iter,
        history_x=history_x[: n_iter + 1],
        history_r=history_r[:n_iter],
        converged=converged,
    )


def fixed_point_iterate(
    g: ScalarMap, x0, tol: float = 1e-6, maxiter: int = 100
) -> IterationResult:
    """
    Find a fixed point x = g(x) by iterating x <- g(x).

    Iteration stops once the residual r = g(x) - x satisfies ||r|| < tol or
    after `maxiter` iterations, whichever comes first. The residual is only
    an error indicator: when |g'(x*)| is close to 1 a small residual does not
    imply a small error.

    Args:
        g: Fixed-point map, scalar or vector valued. Must be traceable by JAX.
        x0: Initial guess.
        tol: Residual tolerance.
        maxiter: Maximal number of iterations.

    Returns:
        IterationResult. Non-convergence is reported through
        `converged == False` and a logged warning, never an exception.

    Raises:
        TypeError: If g cannot be traced by JAX.

    Example usage:
    ```python
    import jax.numpy as jnp
    from jax_numan import fixed_point_iterate

    result = fixed_point_iterate(jnp.cos, 0.5, tol=1e-10)
    result.fixed_point  # 0.739085...
    ```
    """
    check_tolerances(tol, maxiter)
    x0 = as_state(x0)

    def step(x):
        return g(x), 0

    with traced_callables("g"):
        x, r, k, _, history_x, history_r = iterate(step, x0, tol, maxiter)
    return make_result(x, r, k, history_x, history_r, tol, maxiter)
