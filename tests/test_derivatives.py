"""Unit tests for the derivative and Jacobian providers."""

import pytest
import jax.numpy as jnp

from jax_numan.derivatives import derivative, jacobian


@pytest.fixture
def scalar_function():
    """f(x) = sin(exp(x + 1)) with f'(x) = cos(exp(x + 1)) exp(x + 1)."""
    f = lambda x: jnp.sin(jnp.exp(x + 1.0))
    df = lambda x: jnp.cos(jnp.exp(x + 1.0)) * jnp.exp(x + 1.0)
    return f, df


@pytest.fixture
def vector_function():
    F = lambda x: jnp.array([x[0]**2 * x[1], jnp.sin(x[0]) + x[1]**3])
    J = lambda x: jnp.array([
        [2.0 * x[0] * x[1], x[0]**2],
        [jnp.cos(x[0]), 3.0 * x[1]**2],
    ])
    x = jnp.array([0.7, -1.3])
    return F, J, x


class TestDerivative:

    def test_autodiff(self, scalar_function):
        f, df = scalar_function
        x = jnp.asarray(0.3)
        assert jnp.allclose(derivative(f)(x), df(x), rtol=1e-14, atol=1e-14)

    def test_forward_difference(self, scalar_function):
        f, df = scalar_function
        x = jnp.asarray(0.3)
        assert abs(float(derivative(f, "forward")(x) - df(x))) < 1e-6

    def test_central_difference(self, scalar_function):
        f, df = scalar_function
        x = jnp.asarray(0.3)
        assert abs(float(derivative(f, "central")(x) - df(x))) < 1e-8

    def test_central_is_second_order(self):
        x = jnp.asarray(0.0)
        h = 1e-2
        forward_error = abs(float(derivative(jnp.exp, "forward", h)(x)) - 1.0)
        central_error = abs(float(derivative(jnp.exp, "central", h)(x)) - 1.0)
        assert forward_error == pytest.approx(h / 2, rel=0.05)
        assert central_error == pytest.approx(h**2 / 6, rel=0.05)

    def test_unknown_method(self, scalar_function):
        f, _ = scalar_function
        with pytest.raises(ValueError):
            derivative(f, "backward")


class TestJacobian:

    def test_autodiff(self, vector_function):
        F, J, x = vector_function
        assert jnp.allclose(jacobian(F)(x), J(x), atol=1e-14)

    @pytest.mark.parametrize("method, atol", [("forward", 1e-6), ("central", 1e-8)])
    def test_finite_differences(self, vector_function, method, atol):
        F, J, x = vector_function
        approx = jacobian(F, method)(x)
        assert approx.shape == (2, 2)
        assert jnp.allclose(approx, J(x), atol=atol)

    def test_unknown_method(self, vector_function):
        F, _, _ = vector_function
        with pytest.raises(ValueError):
            jacobian(F, "complex-step")
