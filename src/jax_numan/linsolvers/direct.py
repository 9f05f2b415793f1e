"""Direct linear solvers."""

from typing import Optional

from flax import nnx
import jax.numpy as jnp
import jax.scipy.linalg as jax_linalg
from jax import Array


class DirectDense(nnx.Module):
    """
    Direct solver for dense linear systems using a pivoted LU factorisation.

    Dispatches to `jax.scipy.linalg.lu_factor` and `jax.scipy.linalg.lu_solve`.
    Only suitable for small systems where the Jacobian is provided explicitly.

    A factor is flagged as singular when its smallest pivot is not larger
    than `rcond` times its largest pivot, or when it contains non-finite
    entries.

    Attributes:
        rcond: Relative pivot threshold. Default: n * machine epsilon.
    """

    def __init__(self, rcond: Optional[float] = None):
        self.rcond = rcond

    def __call__(self, A: Array, b: Array) -> tuple[Array, Array]:
        """
        Solve A*x = b.

        Args:
            A: Dense matrix of shape (n, n)
            b: Right-hand side vector of shape (n,)

        Returns:
            x: Solution vector. Zero if A is singular.
            info: 0 on success, 1 if A is (numerically) singular.

        Raises:
            TypeError: If A is a callable (linear operator) instead of a matrix
        """
        if callable(A):
            raise TypeError(
                "DirectDense requires a dense matrix, not a linear operator. "
                "Please provide the Jacobian as a dense matrix."
            )

        b = jnp.asarray(b)
        A = jnp.asarray(A, dtype=jnp.result_type(A, b, float))
        n = A.shape[0]

        lu, piv = jax_linalg.lu_factor(A)
        pivots = jnp.abs(jnp.diag(lu))

        rcond = n * jnp.finfo(A.dtype).eps if self.rcond is None else self.rcond
        # NaN pivots fail the comparison and count as singular
        regular = (jnp.min(pivots) > rcond * jnp.max(pivots)) & jnp.all(
            jnp.isfinite(lu)
        )

        x = jax_linalg.lu_solve((lu, piv), b)
        x = jnp.where(regular, x, jnp.zeros_like(x))
        info = jnp.where(regular, 0, 1)
        return x, info
