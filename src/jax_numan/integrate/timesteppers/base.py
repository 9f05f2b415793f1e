"""Abstract base class for one-step time-stepping schemes."""

from flax import nnx
from jax import Array
import jax.numpy as jnp

from ...custom_types import RHSFunction


class AbstractStepper(nnx.Module):
    """
    Base class for one-step methods $u_{n+1} = u_n + h \\phi(u_n, t_n, h)$.

    Class attributes:
        order: Global convergence order of the method.
        stages: Number of right-hand side evaluations per step.
    """

    order = 0
    stages = 0

    def step(
        self,
        fun: RHSFunction,
        t: Array,
        y: Array,
        h: Array,
        args: tuple = ()
    ) -> Array:
        """
        Take a single time step.

        Args:
            fun: Right-hand side of system dydt = f(t, y, *args).
            t: Current time. Type: 0-dimensional JAX array.
            y: Current solution.
            h: Time step size.
            args: Additional arguments to pass to fun.

        Returns:
            Solution at t + h.
        """
        raise NotImplementedError

    def step_with_info(
        self,
        fun: RHSFunction,
        t: Array,
        y: Array,
        h: Array,
        args: tuple = ()
    ) -> tuple[Array, Array]:
        """
        Take a single time step and report whether it succeeded.

        Explicit methods cannot fail, so the default always reports 0.

        Returns:
            Solution at t + h and an info flag (0 on success).
        """
        return self.step(fun, t, y, h, args), jnp.asarray(0, dtype=jnp.int32)
