"""
Derivative and Jacobian providers for Newton-type methods.

Each provider takes a function and returns a new function evaluating its
derivative. Three methods are available:

- "autodiff": exact derivatives by automatic differentiation (`jax.grad`,
  `jax.jacfwd`). Requires the function to be written with `jax.numpy`.
- "forward": forward finite differences, first-order accurate.
- "central": central finite differences, second-order accurate.

Finite difference steps are relative: the step is multiplied by max(1, |x|).
"""

from typing import Optional

import jax
import jax.numpy as jnp
from jax import Array

from .custom_types import ScalarMap, VectorMap, JacobianConstructor

METHODS = ("autodiff", "forward", "central")

_EPS = float(jnp.finfo(jnp.float64).eps)

DEFAULT_STEPS = {
    "forward": _EPS ** 0.5,
    "central": _EPS ** (1.0 / 3.0),
}


def _check_method(method: str) -> None:
    if method not in METHODS:
        raise ValueError(
            f"Unknown differentiation method '{method}'. "
            f"Expected one of {METHODS}."
        )


def derivative(
    f: ScalarMap, method: str = "autodiff", step: Optional[float] = None
) -> ScalarMap:
    """
    Build the derivative x -> f'(x) of a scalar function.

    Args:
        f: Scalar function R -> R.
        method: "autodiff", "forward" or "central".
        step: Relative finite difference step. Ignored for "autodiff".

    Returns:
        A function with signature x -> f'(x).
    """
    _check_method(method)
    if method == "autodiff":
        return jax.grad(f)

    base = DEFAULT_STEPS[method] if step is None else step

    def df(x: Array) -> Array:
        h = base * jnp.maximum(1.0, jnp.abs(x))
        h = (x + h) - x  # exactly representable step
        if method == "forward":
            return (f(x + h) - f(x)) / h
        return (f(x + h) - f(x - h)) / (2.0 * h)

    return df


def jacobian(
    F: VectorMap, method: str = "autodiff", step: Optional[float] = None
) -> JacobianConstructor:
    """
    Build the Jacobian x -> J_F(x) of a vector-valued function.

    Args:
        F: Function R^n -> R^n.
        method: "autodiff", "forward" or "central".
        step: Relative finite difference step. Ignored for "autodiff".

    Returns:
        A function with signature x -> J(x), where J(x) has shape (n, n)
        and J(x)[i, j] = dF_i/dx_j.
    """
    _check_method(method)
    if method == "autodiff":
        return jax.jacfwd(F)

    base = DEFAULT_STEPS[method] if step is None else step

    def jac(x: Array) -> Array:
        x = jnp.asarray(x)
        h = base * jnp.maximum(1.0, jnp.linalg.norm(x))
        basis = jnp.eye(x.size, dtype=x.dtype)
        if method == "forward":
            fx = F(x)
            column = lambda e: (F(x + h * e) - fx) / h
        else:
            column = lambda e: (F(x + h * e) - F(x - h * e)) / (2.0 * h)
        # vmap stacks one column per row, hence the transpose
        return jax.vmap(column)(basis).T

    return jac
