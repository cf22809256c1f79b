"""Primordial power spectrum P(k) = A·k^(n_s − 1)."""

from dataclasses import dataclass
from typing import Union
import numpy as np
from numpy.typing import NDArray

from ..utils.constants import PLANCK_2018


@dataclass(frozen=True)
class PowerSpectrum:
    """Power-law spectrum of density fluctuations.

    Attributes:
        spectral_index: n_s (1 is scale invariant)
        amplitude: A, the power at k = 1

    Non-positive wavenumbers carry no power: ``compute`` returns exactly 0.0
    for k <= 0 rather than raising.
    """

    spectral_index: float
    amplitude: float

    @classmethod
    def planck2018(cls) -> "PowerSpectrum":
        """Spectrum with n_s and A_s close to Planck 2018."""
        return cls(spectral_index=PLANCK_2018.n_s, amplitude=PLANCK_2018.A_s)

    def compute(self, k: float) -> float:
        """P(k) for a single wavenumber."""
        if k <= 0.0:
            return 0.0
        return self.amplitude * k ** (self.spectral_index - 1.0)

    def compute_array(self, k: Union[float, NDArray[np.floating]]) -> NDArray[np.floating]:
        """Vectorised P(k), zero wherever k <= 0."""
        k = np.asarray(k, dtype=float)
        positive = k > 0.0
        safe_k = np.where(positive, k, 1.0)
        return np.where(positive, self.amplitude * safe_k ** (self.spectral_index - 1.0), 0.0)

    def __call__(self, k: float) -> float:
        return self.compute(k)
