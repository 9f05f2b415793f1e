"""Protocol for root-finding algorithms."""

from typing import Optional, Protocol, runtime_checkable

from jax import Array

from ..custom_types import VectorMap, JacobianConstructor


@runtime_checkable
class RootFinderProtocol(Protocol):
    """
    Protocol for root-finding algorithms.

    Used by implicit time-stepping schemes to solve the nonlinear systems
    that arise from implicit discretization. Implementations must be
    traceable by JAX, so failures are reported through the returned info
    flag rather than by raising.
    """

    def __call__(
        self,
        residual_fn: VectorMap,
        y_guess: Array,
        jac_fn: Optional[JacobianConstructor] = None,
    ) -> tuple[Array, Array]:
        """
        Find the root of residual_fn(y) = 0.

        Args:
            residual_fn: Function mapping y -> R(y), where we seek R(y) = 0
            y_guess: Initial guess for the solution
            jac_fn: Optional dense Jacobian function y -> J

        Returns:
            y: Solution such that residual_fn(y) ≈ 0
            info: 0 on success, nonzero on failure
        """
        ...
