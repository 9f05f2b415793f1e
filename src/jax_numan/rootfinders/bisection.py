"""Bisection method for scalar root finding."""

import math

import jax
import jax.numpy as jnp

from ..custom_types import ScalarMap
from ..errors import BracketError, traced_callables
from .results import RootResult


def bisection_iteration_bound(a: float, b: float, tol: float) -> int:
    """
    A priori number of halvings K = ceil(log2((b - a) / tol) - 1).

    After k halvings the midpoint is within (b - a) / 2^(k + 1) of the root,
    so K halvings guarantee an error of at most tol.
    """
    return math.ceil(math.log2((b - a) / tol) - 1)


def bisection(f: ScalarMap, a: float, b: float, tol: float = 1e-6) -> RootResult:
    """
    Find a root of f in [a, b] by repeated interval halving.

    Each iteration evaluates f at the midpoint m and keeps the half of the
    bracket where f changes sign. Iteration stops when (b - a) / 2 < tol.
    If f(m) is exactly zero the bracket collapses to [m, m].

    Convergence is unconditional given a sign change, and linear with
    rate 1/2.

    Args:
        f: Continuous scalar function. Must be traceable by JAX.
        a: Left end of the bracket.
        b: Right end of the bracket.
        tol: Half-width of the final bracket.

    Returns:
        RootResult

    Raises:
        ValueError: If tol is not positive.
        BracketError: If a > b or f(a) and f(b) do not differ in sign.
        TypeError: If f cannot be traced by JAX.
    """
    if not tol > 0:
        raise ValueError(f"tol must be positive, got {tol}.")
    if a > b:
        raise BracketError(f"Expected a <= b, got a={a}, b={b}.")

    a = jnp.asarray(a, dtype=float)
    b = jnp.asarray(b, dtype=float)
    fa = f(a)
    fb = f(b)
    if not bool(fa * fb < 0):
        raise BracketError(
            f"f(a) and f(b) must have opposite signs, "
            f"got f({float(a)})={float(fa)} and f({float(b)})={float(fb)}."
        )

    # floor(log2(width / tol)) halvings are needed; two spare slots absorb
    # rounding in the computed widths
    maxiter = max(bisection_iteration_bound(float(a), float(b), tol) + 2, 1)

    history_x = jnp.full((maxiter,), jnp.nan, dtype=a.dtype)
    history_a = jnp.full((maxiter + 1,), jnp.nan, dtype=a.dtype).at[0].set(a)
    history_b = jnp.full((maxiter + 1,), jnp.nan, dtype=a.dtype).at[0].set(b)

    k0 = jnp.asarray(0, dtype=jnp.int32)
    state0 = (a, b, jnp.asarray(fa, dtype=a.dtype), k0,
              history_x, history_a, history_b)

    def cond_fun(state):
        a_k, b_k, _, k, _, _, _ = state
        return ((b_k - a_k) / 2 >= tol) & (k < maxiter)

    def body_fun(state):
        a_k, b_k, fa_k, k, history_x, history_a, history_b = state
        m = (a_k + b_k) / 2
        fm = jnp.asarray(f(m), dtype=fa_k.dtype)

        left = fm * fa_k < 0  # root in [a, m]
        exact = fm == 0

        a_kp1 = jnp.where(left, a_k, m)
        b_kp1 = jnp.where(left | exact, m, b_k)
        fa_kp1 = jnp.where(left, fa_k, fm)

        history_x = history_x.at[k].set((a_kp1 + b_kp1) / 2)
        history_a = history_a.at[k + 1].set(a_kp1)
        history_b = history_b.at[k + 1].set(b_kp1)
        return (a_kp1, b_kp1, fa_kp1, k + 1, history_x, history_a, history_b)

    with traced_callables("f"):
        a, b, _, k, history_x, history_a, history_b = jax.lax.while_loop(
            cond_fun, body_fun, state0
        )

    n_iter = int(k)
    return RootResult(
        root=(a + b) / 2,
        n_iter=n_iter,
        history_x=history_x[:n_iter],
        history_a=history_a[: n_iter + 1],
        history_b=history_b[: n_iter + 1],
    )
