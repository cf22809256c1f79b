"""Tests for the separable 3-D FFT engine."""

import pytest
import numpy as np
from numpy.testing import assert_allclose, assert_array_equal

from cosmogenesis.perturbations import DensityFft, GaussianRandomField, PowerSpectrum
from cosmogenesis.utils.numerics import FieldSizeMismatchError


@pytest.fixture
def fft8():
    return DensityFft(8)


@pytest.fixture
def fft16():
    return DensityFft(16)


def plane_wave(n, func):
    """Field func(2π·x/N) varying along x only, flat z·N² + y·N + x layout."""
    x = np.arange(n)
    cube = np.broadcast_to(func(2.0 * np.pi * x / n), (n, n, n))
    return cube.reshape(-1).copy()


class TestWavenumbers:
    """Tests for the k-grid bookkeeping."""

    def test_wrapped_even(self):
        assert_array_equal(DensityFft(4).wrapped_indices(), [0, 1, 2, -1])

    def test_wrapped_odd(self):
        assert_array_equal(DensityFft(5).wrapped_indices(), [0, 1, 2, -2, -1])

    def test_magnitudes(self, fft8):
        """|k| at flat index z·N² + y·N + x."""
        k = fft8.wavenumber_magnitudes()
        n = 8
        assert k.shape == (n**3,)
        assert k[0] == 0.0
        assert k[1] == 1.0
        assert k[n * n] == 1.0
        assert k[n - 1] == 1.0  # wraps to −1
        assert_allclose(k[n * n + n + 1], np.sqrt(3.0))
        assert k[4] == 4.0  # Nyquist

    def test_invalid_size(self):
        with pytest.raises(ValueError):
            DensityFft(0)

    def test_properties(self, fft8):
        assert fft8.size == 8
        assert fft8.n_cells == 512


class TestTransforms:
    """Tests for real_to_kspace and kspace_to_real."""

    def test_round_trip(self, fft16):
        """Forward then inverse recovers the field to 1e-10."""
        field = GaussianRandomField.generate(16, 1.0, seed=42).flat()
        recovered = fft16.kspace_to_real(fft16.real_to_kspace(field))
        assert_allclose(recovered, field, atol=1e-10)

    def test_parseval(self, fft16):
        """Σ|x|² = Σ|X|²/N³."""
        field = GaussianRandomField.generate(16, 1.0, seed=12345).flat()
        kspace = fft16.real_to_kspace(field)

        real_power = np.sum(field**2)
        k_power = np.sum(np.abs(kspace) ** 2) / fft16.n_cells
        assert_allclose(k_power, real_power, rtol=1e-8)

    def test_constant_field_dc(self, fft16):
        """A constant 5.0 on 16³ puts 5·4096 = 20480 in the DC cell only."""
        kspace = fft16.real_to_kspace(np.full(16**3, 5.0))
        assert_allclose(kspace[0].real, 20480.0, rtol=1e-12)
        assert_allclose(kspace[1:], 0.0, atol=1e-9)

    def test_zero_field(self, fft8):
        assert_array_equal(fft8.real_to_kspace(np.zeros(512)), np.zeros(512))

    def test_sine_wave(self, fft8):
        """sin(2πx/N) puts ∓i·N³/2 at kx = ±1 and nothing elsewhere."""
        n = 8
        kspace = fft8.real_to_kspace(plane_wave(n, np.sin))

        assert_allclose(kspace[1], -0.5j * n**3, atol=1e-9)
        assert_allclose(kspace[n - 1], 0.5j * n**3, atol=1e-9)

        rest = np.delete(kspace, [1, n - 1])
        assert_allclose(rest, 0.0, atol=1e-9)

    def test_matches_numpy_fftn(self, fft8):
        """The axis-by-axis transform equals a full 3-D FFT."""
        field = GaussianRandomField.generate(8, 1.0, seed=5).flat()
        expected = np.fft.fftn(field.reshape(8, 8, 8)).reshape(-1)
        assert_allclose(fft8.real_to_kspace(field), expected, atol=1e-10)

    def test_accepts_lists(self, fft8):
        field = [1.0] * 512
        assert_allclose(fft8.real_to_kspace(field)[0].real, 512.0)

    def test_size_mismatch(self, fft8):
        with pytest.raises(FieldSizeMismatchError, match="Field size mismatch"):
            fft8.real_to_kspace(np.zeros(100))
        with pytest.raises(FieldSizeMismatchError, match="Field size mismatch"):
            fft8.kspace_to_real(np.zeros(100, dtype=complex))


class TestApplyPowerSpectrum:
    """Tests for imprinting P(k) with random phases."""

    @pytest.fixture
    def spectrum(self):
        return PowerSpectrum(spectral_index=0.96, amplitude=2.1e-9)

    def test_dc_zeroed(self, fft8, spectrum):
        field = np.ones(512, dtype=np.complex128)
        fft8.apply_power_spectrum(field, spectrum, seed=42)
        assert field[0] == 0.0

    def test_real_space_mean_zero(self, fft8):
        field = np.ones(512, dtype=np.complex128)
        fft8.apply_power_spectrum(field, PowerSpectrum(0.96, 1.0), seed=42)
        density = fft8.kspace_to_real(field)
        assert abs(np.mean(density)) < 1e-12

    def test_in_place_and_returned(self, fft8, spectrum):
        field = np.ones(512, dtype=np.complex128)
        result = fft8.apply_power_spectrum(field, spectrum, seed=42)
        assert result is field

    def test_reproducible(self, fft16, spectrum):
        a = np.ones(16**3, dtype=np.complex128)
        b = np.ones(16**3, dtype=np.complex128)
        fft16.apply_power_spectrum(a, spectrum, seed=12345)
        fft16.apply_power_spectrum(b, spectrum, seed=12345)
        assert_array_equal(a, b)

    def test_distinct_seeds(self, fft8, spectrum):
        a = np.ones(512, dtype=np.complex128)
        b = np.ones(512, dtype=np.complex128)
        fft8.apply_power_spectrum(a, spectrum, seed=11111)
        fft8.apply_power_spectrum(b, spectrum, seed=22222)
        assert not np.array_equal(a, b)

    def test_all_finite(self, fft16, spectrum):
        field = np.ones(16**3, dtype=np.complex128)
        fft16.apply_power_spectrum(field, spectrum, seed=42)
        assert np.all(np.isfinite(field))

    def test_mean_power_follows_spectrum(self, fft16):
        """With unit input, E|f_k|² = 2P(k); P = ½ gives 1 per mode."""
        field = np.full(16**3, np.sqrt(16**3), dtype=np.complex128)
        fft16.apply_power_spectrum(field, PowerSpectrum(1.0, 0.5), seed=7)

        _, power, counts = fft16.measure_power_spectrum(field)
        overall = np.sum(power * counts) / np.sum(counts)
        assert overall == pytest.approx(1.0, abs=0.1)

    def test_size_mismatch_leaves_field(self, fft8, spectrum):
        field = np.ones(100, dtype=np.complex128)
        with pytest.raises(FieldSizeMismatchError, match="Field size mismatch"):
            fft8.apply_power_spectrum(field, spectrum, seed=42)
        assert_array_equal(field, np.ones(100))

    def test_real_array_rejected(self, fft8, spectrum):
        with pytest.raises(TypeError):
            fft8.apply_power_spectrum(np.ones(512), spectrum, seed=42)


class TestZeldovich:
    """Tests for the Zel'dovich displacement."""

    def test_plane_wave_displacement(self, fft16):
        """δ = cos(kx) gives ψx = −sin(kx)/k and no transverse motion."""
        n = 16
        k = 2.0 * np.pi / n
        kspace = fft16.real_to_kspace(plane_wave(n, np.cos))

        psi_x, psi_y, psi_z = fft16.zeldovich_displacement(kspace, spacing=1.0)

        assert_allclose(psi_x, -plane_wave(n, np.sin) / k, atol=1e-10)
        assert_allclose(psi_y, 0.0, atol=1e-10)
        assert_allclose(psi_z, 0.0, atol=1e-10)

    def test_spacing_scales_displacement(self, fft8):
        """Doubling the cell size doubles ψ."""
        kspace = fft8.real_to_kspace(GaussianRandomField.generate(8, 1.0, seed=3).flat())
        psi_1 = fft8.zeldovich_displacement(kspace, spacing=1.0)[0]
        psi_2 = fft8.zeldovich_displacement(kspace, spacing=2.0)[0]
        assert_allclose(psi_2, 2.0 * psi_1, atol=1e-12)

    def test_constant_density_no_displacement(self, fft8):
        kspace = fft8.real_to_kspace(np.full(512, 3.0))
        for psi in fft8.zeldovich_displacement(kspace):
            assert_allclose(psi, 0.0, atol=1e-12)


class TestMeasurePowerSpectrum:
    """Tests for the binned power estimate."""

    def test_white_noise_is_flat(self, fft16):
        """Unit white noise measures ≈ 1 averaged over all modes."""
        noise = GaussianRandomField.generate(16, 1.0, seed=2024).flat()
        kspace = fft16.real_to_kspace(noise)

        centres, power, counts = fft16.measure_power_spectrum(kspace, n_bins=8)

        assert centres.shape == power.shape == counts.shape == (8,)
        assert np.sum(counts) == 16**3 - 1
        overall = np.sum(power * counts) / np.sum(counts)
        assert overall == pytest.approx(1.0, abs=0.1)

    def test_invalid_bins(self, fft8):
        with pytest.raises(ValueError):
            fft8.measure_power_spectrum(np.zeros(512, dtype=complex), n_bins=0)
