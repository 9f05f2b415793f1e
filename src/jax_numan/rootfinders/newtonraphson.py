"""Newton's method for scalar equations and systems of equations."""

import logging
from typing import Optional

from flax import nnx
import jax
from jax import Array

from ..custom_types import ScalarMap, VectorMap, JacobianConstructor, StepFunction
from ..derivatives import derivative, jacobian
from ..errors import SingularJacobianError, traced_callables
from ..linsolvers import LinearSolverProtocol, DirectDense
from .fixedpoint import (
    as_state,
    check_tolerances,
    iterate,
    make_result,
    residual_norm,
)
from .results import IterationResult

logger = logging.getLogger(__name__)


def newton(
    f: ScalarMap,
    df: Optional[ScalarMap],
    x0,
    tol: float = 1e-6,
    maxiter: int = 40,
) -> IterationResult:
    """
    Find a root of a scalar function with Newton's method.

    Runs the fixed-point iteration on $g(x) = x - f(x) / f'(x)$, so the
    residual of each step is $r = -f(x) / f'(x)$.

    Convergence is quadratic near a simple root and only local. A vanishing
    derivative along the path is not trapped: it shows up as a non-finite
    iterate and `converged == False`.

    Args:
        f: Function whose root is sought.
        df: Derivative of f. If None, obtained by automatic differentiation.
        x0: Initial guess.
        tol: Tolerance on the Newton step |r|.
        maxiter: Maximal number of iterations.

    Returns:
        IterationResult

    Raises:
        TypeError: If f or df cannot be traced by JAX.
    """
    check_tolerances(tol, maxiter)
    x0 = as_state(x0)
    if df is None:
        df = derivative(f)

    def step(x):
        return x - f(x) / df(x), 0

    with traced_callables("f and df"):
        x, r, k, _, history_x, history_r = iterate(step, x0, tol, maxiter)
    return make_result(
        x, r, k, history_x, history_r, tol, maxiter, name="Newton's method"
    )


def fixed_point_newton(
    g: ScalarMap,
    dg: Optional[ScalarMap],
    x0,
    tol: float = 1e-6,
    maxiter: int = 40,
) -> IterationResult:
    """
    Find a fixed point of g by applying Newton's method to g(x) - x.

    Args:
        g: Fixed-point map.
        dg: Derivative of g. If None, obtained by automatic differentiation.
        x0: Initial guess.
        tol: Tolerance on the Newton step.
        maxiter: Maximal number of iterations.
    """
    if dg is None:
        dg = derivative(g)
    return newton(
        lambda x: g(x) - x, lambda x: dg(x) - 1.0, x0, tol=tol, maxiter=maxiter
    )


def newton_update(
    F: VectorMap, J: JacobianConstructor, linsolver: LinearSolverProtocol
) -> StepFunction:
    """
    Build the Newton update x -> x + r with J(x) r = -F(x).

    The returned step also reports the linear solver's info flag.
    """

    def step(x):
        r, info = linsolver(J(x), -F(x))
        return x + r, info

    return step


def newton_system(
    F: VectorMap,
    J: Optional[JacobianConstructor],
    x0,
    tol: float = 1e-8,
    maxiter: int = 40,
    linsolver: Optional[LinearSolverProtocol] = None,
) -> IterationResult:
    """
    Find a root of F: R^n -> R^n with Newton's method.

    Each iteration evaluates $y = F(x)$ and $A = J(x)$, solves $A r = -y$
    and updates $x \\leftarrow x + r$, until $\\|r\\| < tol$.

    Args:
        F: Vector-valued function.
        J: Jacobian of F with signature x -> J(x) of shape (n, n).
            If None, obtained by automatic differentiation.
        x0: Initial guess of shape (n,).
        tol: Tolerance on the Euclidean norm of the Newton step.
        maxiter: Maximal number of iterations.
        linsolver: Inner linear solver. Default: DirectDense (pivoted LU).

    Returns:
        IterationResult

    Raises:
        SingularJacobianError: If the Jacobian is singular at an iterate.
        TypeError: If F or J cannot be traced by JAX.

    Example usage:
    ```python
    import jax.numpy as jnp
    from jax_numan import newton_system

    F = lambda x: jnp.array([x[0]**2 + x[1]**2 - 1.0, x[0] - x[1]])
    result = newton_system(F, None, jnp.array([1.0, 0.5]), tol=1e-12)
    ```
    """
    check_tolerances(tol, maxiter)
    x0 = as_state(x0)
    if x0.ndim != 1:
        raise ValueError(
            f"newton_system expects a one-dimensional initial guess, "
            f"got shape {x0.shape}."
        )
    if J is None:
        J = jacobian(F)
    if linsolver is None:
        linsolver = DirectDense()

    step = newton_update(F, J, linsolver)
    with traced_callables("F and J"):
        x, r, k, info, history_x, history_r = iterate(step, x0, tol, maxiter)

    if int(info) != 0:
        k = int(k)
        raise SingularJacobianError(
            f"Jacobian is singular in Newton iteration {k} "
            f"at x = {history_x[k - 1]}.",
            iteration=k,
        )

    return make_result(
        x, r, k, history_x, history_r, tol, maxiter, name="Newton's method"
    )


class NewtonRaphson(nnx.Module):
    """
    Newton-Raphson root-finding algorithm for implicit time stepping.

    Iterative update: $y \\leftarrow y - J^{-1}(y) R(y)$

    Unlike `newton_system` this returns only the solution and a status flag,
    so it can run inside `jax.lax.scan`.

    Implements: RootFinderProtocol

    Attributes:
        tol: Convergence tolerance for the norm of the Newton step
        maxiter: Maximum number of Newton-Raphson iterations
        linsolver: Linear solver for the Newton systems (default: DirectDense)
    """

    def __init__(
        self,
        tol: float = 1e-10,
        maxiter: int = 40,
        linsolver: Optional[LinearSolverProtocol] = None,
    ):
        check_tolerances(tol, maxiter)
        self.tol = tol
        self.maxiter = maxiter
        self.linsolver = DirectDense() if linsolver is None else linsolver

    def __call__(
        self,
        residual_fn: VectorMap,
        y_guess: Array,
        jac_fn: Optional[JacobianConstructor] = None,
    ) -> tuple[Array, Array]:
        """
        Find the root of residual_fn(y) = 0 using Newton-Raphson method.

        Args:
            residual_fn: Residual function R(y), y of shape (n,)
            y_guess: Initial guess
            jac_fn: Function returning the dense Jacobian of R with
                signature y -> J(y). If None, uses `jax.jacfwd`.

        Returns:
            y: Solution
            info: 0 on success, 1 if a Newton matrix was singular
        """
        if jac_fn is None:
            jac_fn = jax.jacfwd(residual_fn)

        step = newton_update(residual_fn, jac_fn, self.linsolver)
        y_final, r_final, niters, info, _, _ = iterate(
            step, y_guess, self.tol, self.maxiter
        )

        def warn_callback(iters, info, step_norm):
            if info == 0 and iters >= self.maxiter and step_norm >= self.tol:
                logger.warning(
                    "Newton-Raphson did not converge within %d iterations. "
                    "Final step norm: %.2e",
                    self.maxiter, float(step_norm),
                )

        jax.debug.callback(warn_callback, niters, info, residual_norm(r_final))

        return y_final, info
