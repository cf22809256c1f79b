"""Expansion history: scale factor and Hubble rate under the Friedmann equation.

In natural units (ħ = c = 1) the Friedmann equation reads

    H² = (8π/3)·M_pl²·ρ − k/a²

with M_pl the reduced Planck mass (2.435e18 GeV), ρ the total energy
density in GeV⁴, k ∈ {−1, 0, +1} the spatial curvature and a the scale
factor. H² is clamped at zero before taking the root.

The scale factor is advanced by one of three rules:
    - exponential: a(t+dt) = a(t)·exp(H_inf·dt) with fixed H_inf (inflation)
    - Euler:       a(t+dt) = a(t) + ȧ·dt
    - RK4:         state [a, ȧ], d/dt [a, ȧ] = [ȧ, H·ȧ] with H frozen
                   for the step (the a·dH/dt term is dropped)

``Cosmology.advance`` picks exponential before the end of inflation and RK4
afterwards. Time steps are in GeV⁻¹.
"""

import logging
from dataclasses import dataclass, field, asdict
from enum import Enum
from typing import Dict, Any
import numpy as np

from .integrator import rk4_step
from .utils.constants import (
    FRIEDMANN_PREFACTOR,
    INFLATION_HUBBLE_GEV,
    INFLATION_END_YEARS,
)
from .utils.numerics import ensure_finite, ensure_positive

logger = logging.getLogger(__name__)


class Curvature(Enum):
    """Spatial curvature k of the universe."""

    OPEN = -1  # hyperbolic
    FLAT = 0  # Euclidean
    CLOSED = 1  # spherical

    def to_float(self) -> float:
        """Numeric k used in the Friedmann curvature term."""
        return float(self.value)

    @classmethod
    def from_name(cls, name: str) -> "Curvature":
        """Look up a curvature by name ('open', 'flat', 'closed')."""
        try:
            return cls[name.upper()]
        except KeyError:
            raise ValueError(f"Unknown curvature: {name}") from None


class CosmicEpoch(Enum):
    """Coarse-grained epochs of cosmic history.

    Only the inflation/post-inflation split changes the integration rule;
    the other tags are descriptive.
    """

    PLANCK = "planck"
    INFLATION = "inflation"
    QUARK_GLUON_PLASMA = "quark_gluon_plasma"
    NUCLEOSYNTHESIS = "nucleosynthesis"
    RECOMBINATION = "recombination"
    DARK_AGES = "dark_ages"
    COSMIC_DAWN = "cosmic_dawn"
    STRUCTURE = "structure"


@dataclass
class ScaleFactor:
    """Scale factor a(t) and its bookkeeping.

    Attributes:
        value: a (dimensionless, > 0)
        derivative: ȧ [GeV]
        time: Cosmic time in natural units [GeV⁻¹]
        epoch: Current descriptive epoch tag
    """

    value: float = 1.0
    derivative: float = 0.0
    time: float = 0.0
    epoch: CosmicEpoch = CosmicEpoch.PLANCK


@dataclass
class HubbleParameter:
    """Hubble rate H = ȧ/a [GeV] and its square [GeV²]."""

    value: float = 0.0
    squared: float = 0.0

    def set(self, value: float) -> None:
        """Store H and H² together."""
        self.value = value
        self.squared = value * value


@dataclass
class EnergyDensity:
    """Energy density components in GeV⁴.

    ``total`` is what enters the Friedmann equation. It is set independently
    of the components; use ``component_sum`` or ``sync_total`` to derive it.
    """

    total: float = 0.0
    matter: float = 0.0
    radiation: float = 0.0
    dark_energy: float = 0.0
    inflaton: float = 0.0

    @classmethod
    def matter_dominated(cls, matter_density: float) -> "EnergyDensity":
        """Matter-only density."""
        return cls(total=matter_density, matter=matter_density)

    @classmethod
    def radiation_dominated(cls, radiation_density: float) -> "EnergyDensity":
        """Radiation-only density."""
        return cls(total=radiation_density, radiation=radiation_density)

    @classmethod
    def inflaton_dominated(cls, inflaton_density: float) -> "EnergyDensity":
        """Inflaton-only density (inflation epoch)."""
        return cls(total=inflaton_density, inflaton=inflaton_density)

    def component_sum(self) -> float:
        """Sum of the individual components."""
        return self.matter + self.radiation + self.dark_energy + self.inflaton

    def sync_total(self) -> None:
        """Set ``total`` to the sum of the components."""
        self.total = self.component_sum()


def friedmann_h_squared(
    energy_density: float,
    scale_factor: float,
    curvature: Curvature,
) -> float:
    """Unclamped H² = (8π/3)·M_pl²·ρ − k/a² [GeV²]."""
    curvature_term = curvature.to_float() / (scale_factor * scale_factor)
    return FRIEDMANN_PREFACTOR * energy_density - curvature_term


def compute_hubble(
    energy_density: float,
    scale_factor: float,
    curvature: Curvature,
) -> float:
    """Hubble parameter from the Friedmann equation.

    Args:
        energy_density: Total energy density ρ [GeV⁴]
        scale_factor: Scale factor a (> 0)
        curvature: Spatial curvature

    Returns:
        H = sqrt(max(H², 0)) [GeV]
    """
    h_squared = friedmann_h_squared(energy_density, scale_factor, curvature)
    return float(np.sqrt(max(h_squared, 0.0)))


def compute_scale_factor_derivative(hubble: float, scale_factor: float) -> float:
    """ȧ = H·a."""
    return hubble * scale_factor


def compute_exponential_scale_factor(a0: float, t_elapsed: float, hubble: float) -> float:
    """a(t) = a₀·exp(H·t) for constant H.

    Args:
        a0: Initial scale factor
        t_elapsed: Elapsed time [GeV⁻¹]
        hubble: Constant Hubble rate [GeV]
    """
    return a0 * np.exp(hubble * t_elapsed)


@dataclass
class Cosmology:
    """Owner of the expansion state: scale factor, Hubble rate, density, curvature.

    All integration methods mutate the state in place. After any of them
    returns, ``scale_factor.time``, ``scale_factor.value``,
    ``scale_factor.derivative`` and ``hubble`` describe the same instant.

    Example:
        >>> cosmo = Cosmology()
        >>> cosmo.energy_density = EnergyDensity.inflaton_dominated(1e64)
        >>> cosmo.update_hubble()
        >>> cosmo.integrate_scale_factor_euler(1e-35)
    """

    scale_factor: ScaleFactor = field(default_factory=ScaleFactor)
    hubble: HubbleParameter = field(default_factory=HubbleParameter)
    energy_density: EnergyDensity = field(default_factory=EnergyDensity)
    curvature: Curvature = Curvature.FLAT
    inflation_hubble: float = INFLATION_HUBBLE_GEV

    @classmethod
    def with_curvature(cls, curvature: Curvature) -> "Cosmology":
        """Default state with the given curvature."""
        return cls(curvature=curvature)

    def update_hubble(self) -> None:
        """Recompute H and H² from the current ρ, a and k."""
        h_squared = friedmann_h_squared(
            self.energy_density.total,
            self.scale_factor.value,
            self.curvature,
        )
        if h_squared < 0.0:
            logger.debug(f"H² = {h_squared:.3e} < 0 clamped to zero (k={self.curvature.name})")

        h = float(np.sqrt(max(h_squared, 0.0)))
        self.hubble.set(ensure_finite("H", h, self.scale_factor.time))

    def update_scale_factor_derivative(self) -> None:
        """Set ȧ = H·a from the current Hubble rate."""
        self.scale_factor.derivative = compute_scale_factor_derivative(
            self.hubble.value,
            self.scale_factor.value,
        )

    def integrate_scale_factor_euler(self, dt: float) -> None:
        """Advance a by one Euler step a += ȧ·dt, then refresh H.

        Args:
            dt: Time step [GeV⁻¹]

        Raises:
            NonFiniteStateError: if a overflows
            NonPhysicalStateError: if a would become <= 0 (e.g. a large negative dt)
        """
        sf = self.scale_factor
        a_dot = compute_scale_factor_derivative(self.hubble.value, sf.value)
        a_new = sf.value + a_dot * dt
        ensure_positive("scale factor", ensure_finite("scale factor", a_new, sf.time), sf.time)

        sf.derivative = a_dot
        sf.value = a_new
        sf.time += dt

        self.update_hubble()

    def integrate_scale_factor_rk4(self, dt: float) -> None:
        """Advance [a, ȧ] by one RK4 step with H held fixed, then refresh H.

        d/dt [a, ȧ] = [ȧ, H·ȧ]. Dropping a·dH/dt is fine while ρ changes
        slowly compared with the expansion time 1/H.

        Args:
            dt: Time step [GeV⁻¹]

        Raises:
            NonFiniteStateError: if a or ȧ overflows
            NonPhysicalStateError: if a would become <= 0
        """
        sf = self.scale_factor
        h = self.hubble.value

        def derivative(_t, state):
            a_dot = state[1]
            return [a_dot, h * a_dot]

        y = [sf.value, compute_scale_factor_derivative(h, sf.value)]
        a_new, a_dot_new = rk4_step(y, sf.time, dt, derivative)

        ensure_positive("scale factor", ensure_finite("scale factor", a_new, sf.time), sf.time)
        ensure_finite("scale factor derivative", a_dot_new, sf.time)

        sf.value = a_new
        sf.derivative = a_dot_new
        sf.time += dt

        self.update_hubble()

    def integrate_scale_factor_inflation(self, dt: float) -> None:
        """Advance a by exponential expansion at the inflationary Hubble rate.

        a(t+dt) = a(t)·exp(H_inf·dt), ȧ = H_inf·a. The stored Hubble rate
        is set to H_inf so ȧ = H·a holds on return.

        Args:
            dt: Time step [GeV⁻¹]
        """
        h = self.inflation_hubble
        with np.errstate(over="ignore"):
            new_a = float(compute_exponential_scale_factor(self.scale_factor.value, dt, h))

        # H_inf·dt above ~709 e-folds overflows a double
        self.scale_factor.value = ensure_finite("scale factor", new_a, self.scale_factor.time)
        self.scale_factor.time += dt
        self.scale_factor.derivative = h * self.scale_factor.value
        self.hubble.set(h)

    def advance(self, dt: float, cosmic_years: float) -> str:
        """Advance by dt using the rule for the current cosmic time.

        Args:
            dt: Time step [GeV⁻¹]
            cosmic_years: Accumulated cosmic time used for the dispatch

        Returns:
            Name of the rule applied ('inflation' or 'rk4')
        """
        if cosmic_years < INFLATION_END_YEARS:
            self.integrate_scale_factor_inflation(dt)
            return "inflation"

        self.integrate_scale_factor_rk4(dt)
        return "rk4"

    def state(self) -> Dict[str, Any]:
        """Snapshot of the current state as plain values."""
        snapshot = {
            "scale_factor": asdict(self.scale_factor),
            "hubble": asdict(self.hubble),
            "energy_density": asdict(self.energy_density),
            "curvature": self.curvature.name.lower(),
        }
        snapshot["scale_factor"]["epoch"] = self.scale_factor.epoch.value
        return snapshot
