"""Result records returned by the iterative solvers."""

from dataclasses import dataclass

from jax import Array


@dataclass(frozen=True)
class IterationResult:
    """
    Outcome of a fixed-point or Newton iteration.

    Attributes:
        value: Final iterate.
        residual: Last residual r_k = x_k - x_{k-1}. Infinite if no
            iteration was performed.
        n_iter: Number of iterations performed.
        history_x: Iterates x_0, ..., x_{n_iter}, shape (n_iter + 1, ...).
        history_r: Residuals r_1, ..., r_{n_iter}, shape (n_iter, ...).
        converged: Whether the final iterate is finite and the residual
            norm dropped below the tolerance.

    Reaching the iteration cap is not an error. Callers that need a
    converged answer must check `converged` (or `n_iter` and `residual`).
    """

    value: Array
    residual: Array
    n_iter: int
    history_x: Array
    history_r: Array
    converged: bool

    @property
    def fixed_point(self) -> Array:
        return self.value

    @property
    def root(self) -> Array:
        return self.value


@dataclass(frozen=True)
class RootResult:
    """
    Outcome of the bisection method.

    Attributes:
        root: Midpoint of the final bracket.
        n_iter: Number of halvings performed.
        history_x: Midpoint after each halving, shape (n_iter,).
        history_a: Left end of the bracket, starting with the initial one,
            shape (n_iter + 1,).
        history_b: Right end of the bracket, shape (n_iter + 1,).
    """

    root: Array
    n_iter: int
    history_x: Array
    history_a: Array
    history_b: Array

    @property
    def lower(self) -> Array:
        return self.history_a[-1]

    @property
    def upper(self) -> Array:
        return self.history_b[-1]
