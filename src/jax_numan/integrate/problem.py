"""Initial value problem descriptor and solution trace."""

from dataclasses import dataclass
from typing import Any

from jax import Array

from ..custom_types import RHSFunction


@dataclass(frozen=True)
class ODEProblem:
    """
    Initial value problem du/dt = fun(t, u, *args), u(a) = u0, t in [a, b].

    Attributes:
        fun: Right-hand side with signature (t, u, *args) -> du/dt.
        u0: Initial value, scalar or one-dimensional.
        t_span: Time interval (a, b) with a < b.
        args: Additional parameters passed to fun.
    """

    fun: RHSFunction
    u0: Any
    t_span: tuple[float, float]
    args: tuple = ()

    def __post_init__(self):
        a, b = self.t_span
        if not b > a:
            raise ValueError(f"t_span must satisfy a < b, got {self.t_span}.")


@dataclass(frozen=True)
class ODESolution:
    """
    Trace of a one-step method on equally spaced nodes.

    Attributes:
        t: Nodes t_0 = a, ..., t_N = b, shape (N + 1,).
        u: Approximations u_n ≈ u(t_n), shape (N + 1, *u0.shape).
    """

    t: Array
    u: Array

    @property
    def n_steps(self) -> int:
        return self.t.shape[0] - 1

    @property
    def h(self) -> float:
        return float(self.t[1] - self.t[0])
