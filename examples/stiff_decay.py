import logging
import math

import jax.numpy as jnp
from jax_numan import (
    ODEProblem,
    solve_ivp,
    ForwardEuler,
    Midpoint,
    RK4,
    BackwardEuler,
    estimate_order,
    global_error,
    has_diverged,
)


def main(lam=1.0, t_span=(0.0, 1.0), n_steps=(10, 20, 40, 80, 160)):
    """
    Solve the decay equation du/dt = -lam * u with every one-step method
    and print the global errors and the observed convergence orders.
    Then repeat with a stiff rate to compare Forward and Backward Euler.

    Arguments:
        lam - Decay rate (default 1.0)
        t_span - Simulation time (default (0.0, 1.0))
        n_steps - Numbers of steps for the convergence study
    """
    fun = lambda t, u, lam: -lam * u
    problem = ODEProblem(fun, u0=1.0, t_span=t_span, args=(lam,))
    exact = lambda t: jnp.exp(-lam * (t - t_span[0]))

    # Convergence study
    for method in (ForwardEuler(), Midpoint(), RK4(), BackwardEuler()):
        errors = [global_error(solve_ivp(problem, method, n), exact) for n in n_steps]
        step_sizes = [(t_span[1] - t_span[0]) / n for n in n_steps]
        for n, error in zip(n_steps, errors):
            print(f"{type(method).__name__:>13s}  N={n:4d}: error = {error:.3e}")
        print(f"{'':>13s}  observed order = {estimate_order(step_sizes, errors):.2f}")

    # Stability with h = 0.5 and lam = 100: |1 - h*lam| = 49 > 1
    stiff = ODEProblem(fun, u0=1.0, t_span=(0.0, 10.0), args=(100.0,))
    for method in (ForwardEuler(), BackwardEuler()):
        solution = solve_ivp(stiff, method, n_steps=20, verbose=True)
        print(
            f"{type(method).__name__:>13s}: u(10) = {float(solution.u[-1]):.3e}, "
            f"diverged = {has_diverged(solution)}"
        )
    print(f"Exact: u(10) = {math.exp(-1000.0):.3e}")


if __name__ == "__main__":
    logging.basicConfig(level=logging.INFO)
    main()
