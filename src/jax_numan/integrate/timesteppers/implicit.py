"""
Implicit time-stepping schemes.
"""

from typing import Callable, Optional

from jax import Array
import jax.numpy as jnp

from ...custom_types import RHSFunction, VectorMap, JacobianConstructor
from ...rootfinders import NewtonRaphson, RootFinderProtocol
from .base import AbstractStepper


class BackwardEuler(AbstractStepper):
    """
    Backward Euler time-stepping scheme.

    Discretisation:
    $$ \\frac{\\partial y}{\\partial t} \\rightarrow
    \\frac{y_{n+1} - y_n}{h} = f(t_{n+1}, y_{n+1}) $$

    Residual:
    $$ R(y_{n+1}) = y_{n+1} - y_n - h f(t_{n+1}, y_{n+1}) $$

    Jacobian:
    $$ J = \\frac{\\partial R}{\\partial y_{n+1}}
    = I - h \\frac{\\partial f(t_{n+1}, y_{n+1})}{\\partial y} $$

    First order and unconditionally stable for dy/dt = -λy, λ > 0.

    Attributes:
        root_finder: Root-finding algorithm for the implicit equation.
            Default: NewtonRaphson(tol=1e-10).
        jac: Optional user-provided Jacobian of the right-hand side with
            signature (t, y, *args) -> ∂f/∂y.

    If jac is not provided, the Newton matrix is obtained by automatic
    differentiation with `jax.jacfwd`. Scalar and vector states are both
    supported; the root finder always works on the flattened state.
    """

    order = 1
    stages = 1

    def __init__(
        self,
        root_finder: Optional[RootFinderProtocol] = None,
        jac: Optional[Callable] = None,
    ):
        self.root_finder = NewtonRaphson() if root_finder is None else root_finder
        self.jac = jac

    @staticmethod
    def make_residual(
        fun: RHSFunction,
        t_prev: Array,
        y_prev: Array,
        h: Array,
        args: tuple = (),
    ) -> VectorMap:
        """
        Create residual function for a backward Euler scheme.

        Residual: $R(y_{n+1}) = y_{n+1} - y_n - h f(t_{n+1}, y_{n+1}, \\cdot)$

        Args:
            fun: Right-hand side of system dy/dt = f(t, y, *args).
            t_prev: Time at previous step.
            y_prev: Solution at previous time step.
            h: Time step size.
            args: Additional arguments to pass to fun.

        Returns:
            A function with signature z -> R(z), acting on the flattened
            state z = ravel(y_{n+1}).
        """
        t_next = t_prev + h
        shape = jnp.shape(y_prev)

        def residual_fn(z: Array) -> Array:
            y_next = jnp.reshape(z, shape)
            return jnp.ravel(y_next - y_prev - h * fun(t_next, y_next, *args))

        return residual_fn

    @staticmethod
    def make_jacobian(
        jac: Callable,
        t_prev: Array,
        y_prev: Array,
        h: Array,
        args: tuple = (),
    ) -> JacobianConstructor:
        """
        Function factory for the dense Newton matrix.

        Jacobian: $J = I - h \\frac{\\partial f}{\\partial y}$

        Args:
            jac: Jacobian matrix function (t, y, *args) -> ∂f/∂y
            t_prev: Time at previous step.
            y_prev: Solution at previous time step (fixes the state shape).
            h: Time step size.
            args: Additional arguments to pass to jac

        Returns:
            A function with signature z -> J_z on the flattened state.
        """
        t_next = t_prev + h
        shape = jnp.shape(y_prev)
        n = jnp.size(y_prev)

        def jac_fn(z: Array) -> Array:
            dfdy = jac(t_next, jnp.reshape(z, shape), *args)
            return jnp.eye(n, dtype=z.dtype) - h * jnp.reshape(dfdy, (n, n))

        return jac_fn

    def step_with_info(
        self,
        fun: RHSFunction,
        t: Array,
        y: Array,
        h: Array,
        args: tuple = (),
    ) -> tuple[Array, Array]:
        """
        Perform a backward Euler step.

        Solves $$ y_{n+1} - y_n - h f(t_{n+1}, y_{n+1}, \\cdot) = 0 $$
        for $y_{n+1}$ using the root finder, starting from $y_n$.

        Args:
            fun: Right-hand side of system dydt = f(t, y, *args).
            t: Current time.
            y: Current solution at time t.
            h: Time step size.
            args: Additional arguments to pass to fun and jac.

        Returns:
            Solution at time t + h and the root finder's info flag.
        """
        residual_fn = self.make_residual(fun, t, y, h, args)

        jac_fn = None
        if self.jac is not None:
            jac_fn = self.make_jacobian(self.jac, t, y, h, args)

        z_next, info = self.root_finder(residual_fn, jnp.ravel(y), jac_fn=jac_fn)
        return jnp.reshape(z_next, jnp.shape(y)), info

    def step(
        self,
        fun: RHSFunction,
        t: Array,
        y: Array,
        h: Array,
        args: tuple = (),
    ) -> Array:
        """Perform a backward Euler step, discarding the info flag."""
        y_next, _ = self.step_with_info(fun, t, y, h, args)
        return y_next
