"""Exceptions raised by the solvers."""

from contextlib import contextmanager
from typing import Optional

import jax

# Raised when a traced loop body meets code that needs concrete values
TRACER_ERRORS = (
    jax.errors.ConcretizationTypeError,
    jax.errors.TracerArrayConversionError,
    jax.errors.TracerBoolConversionError,
    jax.errors.TracerIntegerConversionError,
)


class BracketError(ValueError):
    """The interval passed to bisection does not bracket a sign change."""


class SingularJacobianError(ArithmeticError):
    """
    A Newton linear system could not be solved because its matrix is
    singular or numerically singular.

    Attributes:
        iteration: Newton iteration (1-based) at which the failure occurred.
        step: Time step (0-based) of the ODE driver, if raised by one.
    """

    def __init__(
        self,
        message: str,
        iteration: Optional[int] = None,
        step: Optional[int] = None,
    ):
        super().__init__(message)
        self.iteration = iteration
        self.step = step


@contextmanager
def traced_callables(names: str):
    """
    Turn JAX tracer errors raised by user callables into a TypeError.

    The solvers run user functions inside `jax.lax.while_loop` and
    `jax.lax.scan`, where `math`/`numpy` calls and Python branches on the
    argument fail with tracer errors.

    Args:
        names: Names of the callables, used in the error message.
    """
    try:
        yield
    except TRACER_ERRORS as err:
        raise TypeError(
            f"{names} must be written with jax.numpy (no math/numpy calls "
            f"or Python branches on their arguments), since they are traced "
            f"inside a jax.lax loop."
        ) from err
