"""Separable 3-D Fourier transforms for density fields on an N³ grid.

Fields are flat arrays of N³ values in row-major order, flat index
z·N² + y·N + x. The 3-D transform is built from the 1-D complex FFT
(``scipy.fft.fft``) applied as three full passes: x, then y, then z for the
forward direction and z, y, x for the inverse. Each pass finishes before
the next starts.

Wavenumbers use FFT wrapping on each axis: index i maps to i for
i <= N/2 and to i − N otherwise, so |k| is measured in grid units.
"""

import logging
from typing import Optional, Tuple
import numpy as np
from numpy.typing import NDArray
import scipy.fft

from .power_spectrum import PowerSpectrum
from .random_field import make_rng, box_muller_pair, draw_uniform_pairs
from ..utils.numerics import FieldSizeMismatchError, check_divergence

logger = logging.getLogger(__name__)

# Axis of the reshaped (z, y, x) cube for each spatial direction
_X_AXIS, _Y_AXIS, _Z_AXIS = 2, 1, 0


class DensityFft:
    """FFT engine for N³ density fields.

    Holds no simulation state, only the per-size plan: the wrapped
    frequency indices and the |k| grid derived from them. Build one per
    grid size and reuse it.

    Args:
        size: Grid points per axis N
    """

    def __init__(self, size: int):
        if size < 1:
            raise ValueError(f"FFT size = {size} must be >= 1")

        self._size = size
        self._n_cells = size**3

        index = np.arange(size)
        self._wrapped = np.where(index <= size / 2, index, index - size).astype(float)

        kz, ky, kx = np.meshgrid(self._wrapped, self._wrapped, self._wrapped, indexing="ij")
        self._k_components = (kx.reshape(-1), ky.reshape(-1), kz.reshape(-1))
        self._k_magnitude = np.sqrt(kx**2 + ky**2 + kz**2).reshape(-1)

    @property
    def size(self) -> int:
        """Grid points per axis."""
        return self._size

    @property
    def n_cells(self) -> int:
        """Total cells N³."""
        return self._n_cells

    def _check_length(self, field) -> None:
        if len(field) != self._n_cells:
            raise FieldSizeMismatchError(self._n_cells, len(field), self._size)

    def _cube(self, field, dtype) -> NDArray:
        self._check_length(field)
        n = self._size
        return np.array(field, dtype=dtype).reshape(n, n, n)

    def wrapped_indices(self) -> NDArray[np.floating]:
        """Signed frequency index per axis position."""
        return self._wrapped.copy()

    def wavenumber_magnitudes(self) -> NDArray[np.floating]:
        """|k| = sqrt(kx² + ky² + kz²) per cell, flat, grid units."""
        return self._k_magnitude.copy()

    def real_to_kspace(self, field) -> NDArray[np.complex128]:
        """Forward 3-D transform of a real field.

        Args:
            field: Flat sequence of N³ real values

        Returns:
            Flat complex128 array of N³ Fourier coefficients (unnormalised)
        """
        buffer = self._cube(field, np.complex128)

        buffer = scipy.fft.fft(buffer, axis=_X_AXIS)
        buffer = scipy.fft.fft(buffer, axis=_Y_AXIS)
        buffer = scipy.fft.fft(buffer, axis=_Z_AXIS)

        return buffer.reshape(-1)

    def kspace_to_real(self, field) -> NDArray[np.float64]:
        """Inverse 3-D transform back to a real field.

        Applies unnormalised inverse passes along z, y, x, divides by N³
        and keeps the real part, so ``kspace_to_real(real_to_kspace(x))``
        returns x to rounding.

        Args:
            field: Flat sequence of N³ complex coefficients

        Returns:
            Flat float64 array of N³ values
        """
        buffer = self._cube(field, np.complex128)

        # norm="forward" leaves the inverse unscaled
        buffer = scipy.fft.ifft(buffer, axis=_Z_AXIS, norm="forward")
        buffer = scipy.fft.ifft(buffer, axis=_Y_AXIS, norm="forward")
        buffer = scipy.fft.ifft(buffer, axis=_X_AXIS, norm="forward")

        return (buffer.real / self._n_cells).reshape(-1)

    def apply_power_spectrum(
        self,
        field: NDArray[np.complex128],
        power_spectrum: PowerSpectrum,
        seed: Optional[int],
    ) -> NDArray[np.complex128]:
        """Imprint a power spectrum with random phases onto a k-space field in place.

        Every cell except k = 0 is multiplied by (z1 + i·z2)·sqrt(P(|k|)),
        where (z1, z2) is a Box-Muller pair drawn from the seeded generator
        in flat-index order. The k = 0 cell is set to exactly zero so the
        real-space field has zero mean.

        Args:
            field: Flat complex array of N³ coefficients, modified in place
            power_spectrum: Spectrum P(k), k in grid units
            seed: Generator seed (None = OS entropy)

        Returns:
            The same array, for chaining

        Raises:
            FieldSizeMismatchError: if len(field) != N³ (field left untouched)
            TypeError: if field is not a complex numpy array
        """
        self._check_length(field)
        if not isinstance(field, np.ndarray) or not np.iscomplexobj(field):
            raise TypeError("apply_power_spectrum needs a complex numpy array")

        rng = make_rng(seed)

        u1, u2 = draw_uniform_pairs(rng, self._n_cells - 1)
        z1, z2 = box_muller_pair(u1, u2)

        amplitude = np.sqrt(power_spectrum.compute_array(self._k_magnitude[1:]))

        field[1:] *= (z1 + 1j * z2) * amplitude
        field[0] = 0.0

        divergence = check_divergence(field)
        if divergence.has_divergence:
            logger.warning(f"Non-finite k-space values after power spectrum: {divergence.message}")

        return field

    def zeldovich_displacement(
        self,
        field: NDArray[np.complex128],
        spacing: float = 1.0,
    ) -> Tuple[NDArray[np.float64], NDArray[np.float64], NDArray[np.float64]]:
        """Zel'dovich displacement ψ with ∇·ψ = −δ from a k-space density field.

        ψ_k = i·k·δ_k / k² per axis, with physical k = 2π·m / (N·spacing).
        The k = 0 mode carries no displacement.

        Args:
            field: Flat complex array of N³ density coefficients
            spacing: Cell size

        Returns:
            Tuple (ψx, ψy, ψz) of flat real arrays
        """
        self._check_length(field)

        scale = 2.0 * np.pi / (self._size * spacing)
        k_squared = (self._k_magnitude * scale) ** 2
        inv_k_squared = np.divide(
            1.0, k_squared, out=np.zeros_like(k_squared), where=k_squared > 0
        )

        delta_k = np.asarray(field, dtype=np.complex128)
        displacement = []
        for k_axis in self._k_components:
            psi_k = 1j * (k_axis * scale) * delta_k * inv_k_squared
            displacement.append(self.kspace_to_real(psi_k))

        return displacement[0], displacement[1], displacement[2]

    def measure_power_spectrum(
        self,
        field: NDArray[np.complex128],
        n_bins: int = 16,
    ) -> Tuple[NDArray[np.floating], NDArray[np.floating], NDArray[np.intp]]:
        """Spherically averaged power ⟨|δ_k|²⟩/N³ in radial |k| bins.

        Normalised so that unit-variance white noise measures 1 in every
        bin. The k = 0 cell is excluded.

        Args:
            field: Flat complex array of N³ coefficients
            n_bins: Number of linear bins between 0 and max |k|

        Returns:
            Tuple of (bin-centre k, mean power, modes per bin); empty bins
            report zero power.
        """
        self._check_length(field)
        if n_bins < 1:
            raise ValueError(f"n_bins = {n_bins} must be >= 1")

        k = self._k_magnitude[1:]
        power = np.abs(np.asarray(field)[1:]) ** 2 / self._n_cells

        edges = np.linspace(0.0, k.max() if k.size else 1.0, n_bins + 1)
        which = np.clip(np.digitize(k, edges) - 1, 0, n_bins - 1)

        counts = np.bincount(which, minlength=n_bins)
        totals = np.bincount(which, weights=power, minlength=n_bins)
        mean_power = np.divide(totals, counts, out=np.zeros(n_bins), where=counts > 0)

        centres = 0.5 * (edges[:-1] + edges[1:])
        return centres, mean_power, counts
