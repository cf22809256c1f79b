"""Tests for the primordial power spectrum."""

import pytest
import numpy as np
from numpy.testing import assert_allclose

from cosmogenesis.perturbations import PowerSpectrum


class TestPowerSpectrum:
    """Tests for P(k) = A·k^(n_s − 1)."""

    def test_amplitude_at_unit_k(self):
        """P(1) = A for any spectral index."""
        ps = PowerSpectrum(spectral_index=0.96, amplitude=2.1e-9)
        assert ps.compute(1.0) == pytest.approx(2.1e-9)

    def test_power_law(self):
        ps = PowerSpectrum(spectral_index=0.5, amplitude=3.0)
        assert_allclose(ps.compute(4.0), 3.0 * 4.0**-0.5, rtol=1e-12)

    def test_scale_invariant(self):
        """n_s = 1 gives a flat spectrum."""
        ps = PowerSpectrum(spectral_index=1.0, amplitude=1.0)
        assert ps.compute(0.1) == ps.compute(100.0) == 1.0

    def test_red_tilt_decreasing(self):
        """With n_s < 1 power falls with k."""
        ps = PowerSpectrum(spectral_index=0.96, amplitude=1.0)
        assert ps.compute(1.0) > ps.compute(2.0) > ps.compute(10.0)

    @pytest.mark.parametrize("k", [0.0, -1.0, -1e-12])
    def test_non_positive_k_has_no_power(self, k):
        ps = PowerSpectrum(spectral_index=0.96, amplitude=1.0)
        assert ps.compute(k) == 0.0

    def test_callable(self):
        ps = PowerSpectrum(spectral_index=0.96, amplitude=1.0)
        assert ps(2.0) == ps.compute(2.0)

    def test_array_matches_scalar(self):
        ps = PowerSpectrum(spectral_index=0.9, amplitude=2.0)
        k = np.array([-1.0, 0.0, 0.5, 1.0, 7.0])
        expected = [ps.compute(x) for x in k]
        assert_allclose(ps.compute_array(k), expected, rtol=1e-14)

    def test_planck2018(self):
        ps = PowerSpectrum.planck2018()
        assert ps.spectral_index == pytest.approx(0.9649)
        assert ps.amplitude == pytest.approx(2.1e-9)

    def test_frozen(self):
        ps = PowerSpectrum(spectral_index=0.96, amplitude=1.0)
        with pytest.raises(AttributeError):
            ps.amplitude = 2.0
