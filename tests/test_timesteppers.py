"""Unit tests for the time stepping schemes."""

import math

import pytest
import jax.numpy as jnp

from jax_numan.diagnostics import local_truncation_error
from jax_numan.integrate import (
    ForwardEuler,
    Midpoint,
    RK4,
    BackwardEuler,
)
from jax_numan.linsolvers import DirectDense
from jax_numan.rootfinders import NewtonRaphson


@pytest.fixture
def decay_problem():
    """
    ODE: dy/dt = -lam * y,  y(0) = 1

    Exact solution: y(t) = exp(-lam * t)
    """
    fun = lambda t, y, lam: -lam * y
    jac = lambda t, y, lam: -lam
    exact = lambda t: jnp.exp(-t)
    return fun, jac, exact


@pytest.fixture
def harmonic_oscillator():
    """
    ODE: x'' = -k x written as the system u = (x, v), u' = (v, -k x).
    """
    fun = lambda t, u, k: jnp.array([u[1], -k * u[0]])
    jac = lambda t, u, k: jnp.array([[0.0, 1.0], [-k, 0.0]])
    return fun, jac


class TestExplicitMethods:
    """Single steps of the explicit methods on dy/dt = -y."""

    @pytest.mark.parametrize("method, expected", [
        (ForwardEuler(), 0.9),
        (Midpoint(), 0.905),
        (RK4(), 0.9048375),
    ])
    def test_single_step(self, decay_problem, method, expected):
        fun, _, _ = decay_problem
        y1 = method.step(fun, jnp.asarray(0.0), jnp.asarray(1.0), 0.1, (1.0,))
        assert float(y1) == pytest.approx(expected, abs=1e-12)

    @pytest.mark.parametrize("method, order, stages", [
        (ForwardEuler(), 1, 1),
        (Midpoint(), 2, 2),
        (RK4(), 4, 4),
        (BackwardEuler(), 1, 1),
    ])
    def test_order_and_stages(self, method, order, stages):
        assert method.order == order
        assert method.stages == stages

    def test_rhs_evaluations(self, decay_problem):
        """Each explicit method calls the right-hand side once per stage."""
        fun, _, _ = decay_problem
        for method in (ForwardEuler(), Midpoint(), RK4()):
            calls = []

            def counting_fun(t, y, lam):
                calls.append(t)
                return fun(t, y, lam)

            method.step(counting_fun, jnp.asarray(0.0), jnp.asarray(1.0), 0.1, (1.0,))
            assert len(calls) == method.stages

    def test_vector_state(self, harmonic_oscillator):
        fun, _ = harmonic_oscillator
        u0 = jnp.array([1.0, 0.0])
        h = 0.1
        u1 = ForwardEuler().step(fun, jnp.asarray(0.0), u0, h, (2.0,))
        assert jnp.allclose(u1, jnp.array([1.0, -0.2]), atol=1e-15)

    def test_step_with_info_reports_success(self, decay_problem):
        fun, _, _ = decay_problem
        y1, info = RK4().step_with_info(
            fun, jnp.asarray(0.0), jnp.asarray(1.0), 0.1, (1.0,)
        )
        assert int(info) == 0
        assert float(y1) == pytest.approx(0.9048375, abs=1e-12)


class TestImplicitMethods:
    """Single steps of Backward Euler."""

    def test_autodiff(self, decay_problem):
        fun, _, _ = decay_problem
        method = BackwardEuler()
        y1 = method.step(fun, jnp.asarray(0.0), jnp.asarray(1.0), 0.1, (1.0,))
        assert jnp.shape(y1) == ()
        assert float(y1) == pytest.approx(1.0 / 1.1, abs=1e-12)

    def test_user_jacobian(self, decay_problem):
        fun, jac, _ = decay_problem
        method = BackwardEuler(jac=jac)
        y1 = method.step(fun, jnp.asarray(0.0), jnp.asarray(1.0), 0.1, (1.0,))
        assert float(y1) == pytest.approx(1.0 / 1.1, abs=1e-12)

    def test_vector_state(self, harmonic_oscillator):
        fun, jac = harmonic_oscillator
        k = 2.0
        h = 0.1
        u0 = jnp.array([1.0, 0.0])
        A = jac(0.0, u0, k)
        expected = jnp.linalg.solve(jnp.eye(2) - h * A, u0)

        root_finder = NewtonRaphson(tol=1e-12, maxiter=10, linsolver=DirectDense())
        for method in (BackwardEuler(root_finder=root_finder),
                       BackwardEuler(root_finder=root_finder, jac=jac)):
            u1, info = method.step_with_info(fun, jnp.asarray(0.0), u0, h, (k,))
            assert int(info) == 0
            assert u1.shape == (2,)
            assert jnp.allclose(u1, expected, atol=1e-12)

    def test_singular_newton_matrix_flag(self):
        # 1 - h * 2 = 0 for h = 0.5
        fun = lambda t, y: 2.0 * y
        _, info = BackwardEuler().step_with_info(
            fun, jnp.asarray(0.0), jnp.asarray(1.0), 0.5
        )
        assert int(info) == 1

    def test_residual_vanishes_at_next_step(self, decay_problem):
        fun, _, _ = decay_problem
        t, y, h = jnp.asarray(0.0), jnp.asarray(1.0), 0.1
        residual_fn = BackwardEuler.make_residual(fun, t, y, h, (1.0,))
        assert jnp.allclose(residual_fn(jnp.array([1.0 / 1.1])), 0.0, atol=1e-15)


class TestLocalTruncationError:
    """Halving h divides the local truncation error by about 2^p."""

    @pytest.mark.parametrize("method, h", [
        (ForwardEuler(), 0.01),
        (Midpoint(), 0.1),
        (RK4(), 0.1),
        (BackwardEuler(root_finder=NewtonRaphson(tol=1e-12)), 0.01),
    ])
    def test_order(self, decay_problem, method, h):
        fun, _, exact = decay_problem
        tau_h = local_truncation_error(method, fun, exact, 0.0, h, (1.0,))
        tau_half = local_truncation_error(method, fun, exact, 0.0, h / 2, (1.0,))
        assert tau_h / tau_half == pytest.approx(2**method.order, rel=0.05)

    def test_forward_euler_leading_term(self, decay_problem):
        """tau(h) = |exp(-h) - (1 - h)| / h ≈ h / 2."""
        fun, _, exact = decay_problem
        h = 1e-3
        tau = local_truncation_error(ForwardEuler(), fun, exact, 0.0, h, (1.0,))
        assert tau == pytest.approx((math.exp(-h) - (1.0 - h)) / h, rel=1e-6)
