"""Protocol for linear solvers used by Newton-type methods."""

from typing import Protocol, runtime_checkable

from jax import Array


@runtime_checkable
class LinearSolverProtocol(Protocol):
    """
    Protocol for linear solvers.

    Defines the interface for solving linear systems of the form A*x = b.
    Any class implementing a __call__() method with this signature can be used
    as the inner solver of `newton_system` and `NewtonRaphson`.
    """

    def __call__(self, A: Array, b: Array) -> tuple[Array, Array]:
        """
        Solve the linear system A*x = b.

        Args:
            A: Dense matrix
            b: Right-hand side vector

        Returns:
            x: Solution vector such that A*x ≈ b
            info: 0 on success, nonzero if the system could not be solved
        """
        ...
