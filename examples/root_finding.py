import jax.numpy as jnp
from jax_numan import (
    bisection,
    bisection_iteration_bound,
    convergence_ratios,
    fixed_point_iterate,
    newton,
    newton_system,
)


def main(tol=1e-10):
    """
    Compare fixed-point iteration, bisection and Newton's method on
    x = cos(x), then solve a small non-linear system with Newton.

    Arguments:
        tol - Stopping tolerance (default 1e-10)
    """
    # Fixed point of cos: linear convergence with rate |sin(x*)|
    fp = fixed_point_iterate(jnp.cos, 0.5, tol=tol)
    print(f"Fixed-point: x = {float(fp.value):.12f} after {fp.n_iter} iterations")
    print(f"  residual ratios: {convergence_ratios(fp.history_r, 1)[-3:]}")

    # Bisection on the same root
    f = lambda x: x - jnp.cos(x)
    K = bisection_iteration_bound(0.0, 1.0, tol)
    bs = bisection(f, 0.0, 1.0, tol=tol)
    print(f"Bisection:   x = {float(bs.root):.12f} after {bs.n_iter} iterations (bound {K})")

    # Newton, derivative by automatic differentiation
    nt = newton(f, None, 0.5, tol=tol)
    print(f"Newton:      x = {float(nt.root):.12f} after {nt.n_iter} iterations")
    print(f"  quadratic ratios: {convergence_ratios(nt.history_r, 2)}")

    # Newton for a system of three equations
    def F(x):
        return jnp.array([
            -x[0] * jnp.cos(x[1]) - 1.0,
            x[0] * x[1] + x[2],
            jnp.exp(-x[2]) * jnp.sin(x[0] + x[1]) + x[0]**2 - x[1]**2,
        ])

    ns = newton_system(F, None, jnp.array([1.5, -1.5, 5.0]), tol=tol)
    print(f"System:      x = {ns.root} after {ns.n_iter} iterations")
    print(f"  ||F(x)|| = {float(jnp.linalg.norm(F(ns.root))):.3e}")


if __name__ == "__main__":
    main()
