"""Tests for the fixed-step integrators."""

import math

import pytest
import numpy as np
from numpy.testing import assert_allclose
from scipy.integrate import solve_ivp

from cosmogenesis.integrator import rk4_step, rk4_integrate, euler_step


def harmonic_oscillator(omega=1.0):
    """dy/dt for y = [x, v] with x'' = -ω²x."""

    def f(_t, y):
        return [y[1], -omega * omega * y[0]]

    return f


def exponential_decay(rate=1.0):
    def f(_t, y):
        return [-rate * y[0]]

    return f


class TestRK4Step:
    """Tests for a single RK4 step."""

    def test_harmonic_oscillator_step(self):
        """One step of size 0.1 should match cos/sin to 4th order."""
        y_new = rk4_step([1.0, 0.0], 0.0, 0.1, harmonic_oscillator())
        assert_allclose(y_new[0], np.cos(0.1), atol=1e-7)
        assert_allclose(y_new[1], -np.sin(0.1), atol=1e-7)

    def test_zero_step_returns_state(self):
        """dt = 0 leaves the state unchanged."""
        y = [0.3, -1.7]
        assert rk4_step(y, 2.0, 0.0, harmonic_oscillator()) == y

    def test_negative_step_reverses(self):
        """Stepping forward then backward recovers the start."""
        f = harmonic_oscillator(2.0)
        y0 = [1.0, 0.5]
        y1 = rk4_step(y0, 0.0, 0.01, f)
        y_back = rk4_step(y1, 0.01, -0.01, f)
        assert_allclose(y_back, y0, atol=1e-10)

    def test_time_dependent_rhs(self):
        """dy/dt = t integrates t²/2 exactly (RK4 is exact for quadratics)."""
        y_new = rk4_step([0.0], 0.0, 2.0, lambda t, y: [t])
        assert_allclose(y_new[0], 2.0, rtol=1e-14)

    def test_numpy_state_stays_array(self):
        """An ndarray state comes back as an ndarray."""
        y_new = rk4_step(np.array([1.0, 0.0]), 0.0, 0.1, harmonic_oscillator())
        assert isinstance(y_new, np.ndarray)
        assert y_new.shape == (2,)

    def test_complex_components(self):
        """dy/dt = iy rotates a complex state: y(t) = exp(it)."""
        y_new = rk4_step([1.0 + 0.0j], 0.0, 0.05, lambda t, y: [1j * y[0]])
        assert_allclose(y_new[0], np.exp(0.05j), atol=1e-10)

    def test_derivative_length_mismatch(self):
        """A derivative with the wrong length is rejected."""
        with pytest.raises(ValueError, match="components"):
            rk4_step([1.0, 2.0], 0.0, 0.1, lambda t, y: [1.0])


class TestRK4Integrate:
    """Tests for multi-step integration."""

    def test_exponential_decay(self):
        """y' = -y from 0 to 1 reaches exp(-1)."""
        y, t = rk4_integrate([1.0], 0.0, 1.0, 0.01, exponential_decay())
        assert t == 1.0
        assert_allclose(y[0], math.exp(-1.0), rtol=1e-9)

    def test_matches_scipy_reference(self):
        """Oscillator over several periods agrees with solve_ivp at tight tolerance."""
        f = harmonic_oscillator(3.0)
        y, _ = rk4_integrate([1.0, 0.0], 0.0, 5.0, 1e-3, f)

        reference = solve_ivp(
            lambda t, y: f(t, y), (0.0, 5.0), [1.0, 0.0], rtol=1e-11, atol=1e-12
        )
        assert_allclose(y, reference.y[:, -1], atol=1e-8)

    def test_step_count_adjusted(self):
        """ceil((t1-t0)/dt) equal steps are used, never overshooting t1."""
        calls = []

        def f(t, y):
            calls.append(t)
            return [1.0]

        y, t = rk4_integrate([0.0], 0.0, 1.0, 0.3, f)

        # 4 steps of 0.25, four evaluations each
        assert len(calls) == 16
        assert max(calls) <= 1.0
        assert_allclose(y[0], 1.0, rtol=1e-14)
        assert t == 1.0

    def test_nonpositive_dt_is_noop(self):
        """dt <= 0 returns the input unchanged."""
        y0 = [1.0]
        for dt in (0.0, -0.1):
            y, t = rk4_integrate(y0, 0.0, 1.0, dt, exponential_decay())
            assert y == y0
            assert t == 0.0

    def test_empty_interval_is_noop(self):
        """t1 <= t0 returns the input unchanged."""
        y0 = [2.0]
        y, t = rk4_integrate(y0, 1.0, 1.0, 0.1, exponential_decay())
        assert y == y0 and t == 1.0

        y, t = rk4_integrate(y0, 1.0, 0.5, 0.1, exponential_decay())
        assert y == y0 and t == 1.0

    def test_fourth_order_convergence(self):
        """Halving dt cuts the error by roughly 2⁴."""
        exact = math.exp(-2.0)
        err_coarse = abs(rk4_integrate([1.0], 0.0, 2.0, 0.2, exponential_decay())[0][0] - exact)
        err_fine = abs(rk4_integrate([1.0], 0.0, 2.0, 0.1, exponential_decay())[0][0] - exact)
        assert 12.0 < err_coarse / err_fine < 20.0


class TestEulerStep:
    """Tests for the Euler companion step."""

    def test_first_order_update(self):
        """Euler gives y + f·dt."""
        y_new = euler_step([1.0, 0.0], 0.0, 0.1, harmonic_oscillator())
        assert_allclose(y_new, [1.0, -0.1])
