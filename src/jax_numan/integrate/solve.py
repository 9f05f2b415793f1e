import logging
import time

import jax
import jax.numpy as jnp

from ..errors import SingularJacobianError, traced_callables
from .problem import ODEProblem, ODESolution
from .timesteppers import AbstractStepper

logger = logging.getLogger(__name__)


def solve_ivp(
    problem: ODEProblem,
    method: AbstractStepper,
    n_steps: int,
    verbose: bool = False,
) -> ODESolution:
    """
    Integrate du/dt = fun(t, u, *args) over problem.t_span with a fixed step.

    The interval [a, b] is split into n_steps subintervals of width
    h = (b - a) / n_steps and the method is applied once per subinterval.
    The loop runs inside `jax.lax.scan`, so the right-hand side (and the
    Jacobian given to implicit methods) must be traceable by JAX.

    Unstable configurations of explicit methods are not detected: the trace
    simply grows or oscillates. Use `has_diverged` to check.

    Args:
        problem: Initial value problem.
        method: Time-stepping method instance (e.g., RK4(), BackwardEuler())
        n_steps: Number of subintervals N.
        verbose: Log progress information at INFO level.

    Returns:
        ODESolution with nodes t_0, ..., t_N and states u_0, ..., u_N.

    Raises:
        SingularJacobianError: If an implicit method meets a singular
            Newton matrix.
        TypeError: If the right-hand side cannot be traced by JAX.

    Example usage:
    ```python
    import jax.numpy as jnp
    from jax_numan import ODEProblem, solve_ivp, RK4

    # Define ODE: du/dt = -k*u
    def fun(t, u, k):
        return -k * u

    problem = ODEProblem(fun, u0=1.0, t_span=(0.0, 2.0), args=(0.5,))
    solution = solve_ivp(problem, RK4(), n_steps=200)
    solution.u[-1]  # ≈ exp(-1)
    ```

    Example usage with an implicit method and user-defined parameters:
    ```python
    from jax_numan import BackwardEuler, NewtonRaphson

    method = BackwardEuler(root_finder=NewtonRaphson(tol=1e-12, maxiter=20))
    solution = solve_ivp(problem, method, n_steps=200)
    ```
    """
    if n_steps < 1:
        raise ValueError(f"n_steps must be a positive integer, got {n_steps}.")

    a, b = problem.t_span
    h = (b - a) / n_steps
    t = a + h * jnp.arange(n_steps + 1, dtype=float)
    t = t.at[-1].set(b)
    u0 = jnp.asarray(problem.u0, dtype=float)

    if verbose:
        logger.info(
            "Solving with %s on [%s, %s], h=%.3e, %d steps",
            type(method).__name__, a, b, h, n_steps,
        )
    start_wallclock = time.time()

    def body_fn(carry, xs):
        u_n, failed_at = carry
        n, t_n = xs
        u_next, info = method.step_with_info(problem.fun, t_n, u_n, h, problem.args)
        u_next = jnp.asarray(u_next, dtype=u_n.dtype)
        # Keep the first failing step
        failed_at = jnp.where((failed_at < 0) & (info != 0), n, failed_at)
        return (u_next, failed_at), u_next

    carry0 = (u0, jnp.asarray(-1, dtype=jnp.int32))
    steps = jnp.arange(n_steps, dtype=jnp.int32)
    with traced_callables("problem.fun and the method's jac"):
        (_, failed_at), u_steps = jax.lax.scan(body_fn, carry0, (steps, t[:-1]))

    failed_at = int(failed_at)
    if failed_at >= 0:
        raise SingularJacobianError(
            f"{type(method).__name__} met a singular Newton matrix in step "
            f"{failed_at} (t = {float(t[failed_at]):.6g}).",
            step=failed_at,
        )

    u = jnp.concatenate([u0[None], u_steps], axis=0)

    if verbose:
        u.block_until_ready()
        logger.info("Completed in %.3fs", time.time() - start_wallclock)

    return ODESolution(t=t, u=u)
