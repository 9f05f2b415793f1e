"""Unit tests for the bisection method."""

import math

import pytest
import jax.numpy as jnp

from jax_numan import BracketError
from jax_numan.rootfinders import bisection, bisection_iteration_bound


@pytest.fixture
def shifted_exponential():
    """f(x) = exp(x) - 1.2 with root log(1.2) inside [-0.5, 0.5]."""
    f = lambda x: jnp.exp(x) - 1.2
    return f, math.log(1.2)


class TestBisection:

    def test_a_priori_bound(self, shifted_exponential):
        f, x_star = shifted_exponential
        K = bisection_iteration_bound(-0.5, 0.5, 1e-6)
        assert K == 19

        result = bisection(f, -0.5, 0.5, tol=1e-6)
        assert result.n_iter <= K
        assert abs(float(result.root) - x_star) <= 1e-6

    def test_bracket_invariant(self, shifted_exponential):
        f, x_star = shifted_exponential
        result = bisection(f, -0.5, 0.5, tol=1e-10)

        assert result.history_a.shape == (result.n_iter + 1,)
        assert result.history_b.shape == (result.n_iter + 1,)
        assert jnp.all(result.history_a <= x_star)
        assert jnp.all(result.history_b >= x_star)

        widths = result.history_b - result.history_a
        expected = 1.0 / 2.0 ** jnp.arange(result.n_iter + 1)
        assert jnp.allclose(widths, expected, rtol=1e-12, atol=0)
        assert float(result.upper - result.lower) == pytest.approx(
            2.0 ** -result.n_iter
        )

    def test_error_bound(self, shifted_exponential):
        f, x_star = shifted_exponential
        result = bisection(f, -0.5, 0.5, tol=1e-8)

        k = jnp.arange(1, result.n_iter + 1)
        errors = jnp.abs(result.history_x - x_star)
        assert jnp.all(errors <= 1.0 / 2.0 ** (k + 1) + 1e-15)

    def test_root_is_midpoint_of_final_bracket(self, shifted_exponential):
        f, _ = shifted_exponential
        result = bisection(f, -0.5, 0.5)
        assert float(result.root) == float((result.lower + result.upper) / 2)
        assert float(result.root) == float(result.history_x[-1])

    def test_exact_root_at_midpoint(self):
        result = bisection(lambda x: x, -1.0, 1.0)
        assert result.n_iter == 1
        assert float(result.root) == 0.0
        assert float(result.lower) == float(result.upper) == 0.0

    def test_no_sign_change(self):
        with pytest.raises(BracketError):
            bisection(lambda x: x**2 + 1.0, -1.0, 1.0)

    def test_reversed_interval(self):
        with pytest.raises(ValueError):
            bisection(lambda x: x, 1.0, -1.0)

    def test_non_positive_tolerance(self):
        with pytest.raises(ValueError):
            bisection(lambda x: x, -1.0, 2.0, tol=0.0)

    def test_non_jax_function_raises_type_error(self):
        # f(a) and f(b) are evaluated eagerly; the midpoints are traced
        with pytest.raises(TypeError, match="jax.numpy"):
            bisection(lambda x: math.exp(x) - 1.2, -0.5, 0.5)
