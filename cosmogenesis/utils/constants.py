"""Physical constants and unit conversions for the cosmogenesis core.

Natural units (ħ = c = 1) are used throughout: energies and masses in GeV,
energy densities in GeV⁴, times and lengths in GeV⁻¹.
"""

from dataclasses import dataclass
from typing import Final
import numpy as np


@dataclass(frozen=True)
class PhysicalConstants:
    """Physical constants used by the Friedmann and inflaton models."""

    # Natural units
    M_pl_reduced: float  # Reduced Planck mass [GeV]
    hbar_GeV_s: float  # ħ [GeV·s]

    # Time bookkeeping
    yr_in_s: float  # Year in seconds (365.25 days)

    @property
    def M_pl_squared(self) -> float:
        """Reduced Planck mass squared [GeV²]."""
        return self.M_pl_reduced**2


NATURAL_UNITS: Final[PhysicalConstants] = PhysicalConstants(
    M_pl_reduced=2.435e18,
    hbar_GeV_s=6.582e-25,
    yr_in_s=31_557_600.0,
)

SECONDS_PER_YEAR: Final[float] = NATURAL_UNITS.yr_in_s
HBAR_GEV_S: Final[float] = NATURAL_UNITS.hbar_GeV_s

# (2.435e18 GeV)²
M_PL_SQUARED: Final[float] = 5.929225e36

# Prefactor of ρ in the Friedmann equation, (8π/3)·M_pl²
FRIEDMANN_PREFACTOR: Final[float] = (8.0 * np.pi / 3.0) * M_PL_SQUARED

# Hubble rate during inflation [GeV]
INFLATION_HUBBLE_GEV: Final[float] = 1e14

# Inflation window in cosmic years
INFLATION_START_YEARS: Final[float] = 1e-44
INFLATION_END_YEARS: Final[float] = 1e-32


@dataclass(frozen=True)
class Planck2018Primordial:
    """Primordial spectrum parameters close to Planck 2018 (TT,TE,EE+lowE+lensing)."""

    n_s: float = 0.9649
    n_s_sigma: float = 0.0042

    A_s: float = 2.1e-9


PLANCK_2018: Final[Planck2018Primordial] = Planck2018Primordial()


def seconds_to_years(seconds: float) -> float:
    """Convert seconds to cosmic years."""
    return seconds / SECONDS_PER_YEAR


def years_to_seconds(years: float) -> float:
    """Convert cosmic years to seconds."""
    return years * SECONDS_PER_YEAR


def years_to_gev_inv(years: float) -> float:
    """Convert years to natural time units.

    1 GeV⁻¹ = ħ / 1 GeV ≈ 6.582e-25 s, so one year is ≈ 4.79e31 GeV⁻¹.
    """
    return years * SECONDS_PER_YEAR / HBAR_GEV_S


def gev_inv_to_years(t_natural: float) -> float:
    """Convert natural time units (GeV⁻¹) to years."""
    return t_natural * HBAR_GEV_S / SECONDS_PER_YEAR
