"""Configuration and parameter classes for cosmogenesis."""

from dataclasses import dataclass, field
from typing import Optional, Literal
import numpy as np

from .constants import INFLATION_HUBBLE_GEV, PLANCK_2018


@dataclass
class TimeConfig:
    """Cosmic clock settings.

    Attributes:
        initial_years: Cosmic time at simulation start
        acceleration_min: Lower clamp for the time-acceleration factor
        acceleration_max: Upper clamp for the time-acceleration factor
        default_acceleration: Acceleration used before the caller sets one
    """

    initial_years: float = 0.0
    acceleration_min: float = 1.0
    acceleration_max: float = 1e12
    default_acceleration: float = 1.0

    def validate(self) -> tuple[bool, list[str]]:
        """Validate clock settings.

        Returns:
            Tuple of (is_valid, list of error messages)
        """
        errors = []

        if self.initial_years < 0:
            errors.append(f"initial_years = {self.initial_years} must be >= 0")

        if self.acceleration_min < 1.0:
            errors.append(f"acceleration_min = {self.acceleration_min} must be >= 1")

        if self.acceleration_max < self.acceleration_min:
            errors.append(
                f"acceleration_max = {self.acceleration_max} must be >= "
                f"acceleration_min = {self.acceleration_min}"
            )

        if not self.acceleration_min <= self.default_acceleration <= self.acceleration_max:
            errors.append(
                f"default_acceleration = {self.default_acceleration} outside "
                f"[{self.acceleration_min}, {self.acceleration_max}]"
            )

        return len(errors) == 0, errors


@dataclass
class CosmologyConfig:
    """Initial state of the expansion history.

    Attributes:
        curvature: Spatial geometry ('open', 'flat', 'closed')
        initial_scale_factor: a at t = 0
        initial_energy_density: Total ρ in GeV⁴ (inflaton dominated at start)
        inflation_hubble: Fixed H during the exponential epoch [GeV]
    """

    curvature: Literal["open", "flat", "closed"] = "flat"
    initial_scale_factor: float = 1.0
    initial_energy_density: float = 0.0
    inflation_hubble: float = INFLATION_HUBBLE_GEV

    def validate(self) -> tuple[bool, list[str]]:
        """Validate cosmology settings."""
        errors = []

        if self.curvature not in ("open", "flat", "closed"):
            errors.append(f"Unknown curvature: {self.curvature}")

        if self.initial_scale_factor <= 0:
            errors.append(
                f"initial_scale_factor = {self.initial_scale_factor} must be > 0"
            )

        if self.initial_energy_density < 0:
            errors.append(
                f"Negative initial_energy_density = {self.initial_energy_density}"
            )

        if self.inflation_hubble < 0:
            errors.append(f"Negative inflation_hubble = {self.inflation_hubble}")

        return len(errors) == 0, errors


@dataclass
class InflatonConfig:
    """Inflaton field settings.

    Attributes:
        mass: Mass parameter m of V(φ) = ½m²φ² [GeV]
        phi_initial: Initial field value (dimensionless); 0 means vacuum
    """

    mass: float = 1.0e16
    phi_initial: float = 0.0

    def validate(self) -> tuple[bool, list[str]]:
        """Validate inflaton settings."""
        errors = []

        if self.mass <= 0:
            errors.append(f"Inflaton mass = {self.mass} must be > 0")

        if not np.isfinite(self.phi_initial):
            errors.append(f"Non-finite phi_initial = {self.phi_initial}")

        return len(errors) == 0, errors


@dataclass
class PerturbationConfig:
    """Initial perturbation grid settings.

    Attributes:
        grid_size: Grid points per axis N (field holds N³ cells)
        spacing: Physical distance per cell
        spectral_index: n_s of P(k) = A k^(n_s - 1)
        amplitude: A of P(k)
        seed: Seed for the deterministic generator (None = OS entropy)
    """

    grid_size: int = 32
    spacing: float = 1.0
    spectral_index: float = PLANCK_2018.n_s
    amplitude: float = PLANCK_2018.A_s
    seed: Optional[int] = None

    def validate(self) -> tuple[bool, list[str]]:
        """Validate perturbation settings."""
        errors = []

        if self.grid_size < 2:
            errors.append(f"grid_size = {self.grid_size} too small")

        if self.spacing <= 0:
            errors.append(f"spacing = {self.spacing} must be > 0")

        if self.amplitude < 0:
            errors.append(f"Negative amplitude = {self.amplitude}")

        if self.seed is not None and self.seed < 0:
            errors.append(f"seed = {self.seed} must be non-negative")

        return len(errors) == 0, errors


@dataclass
class SimulationConfig:
    """Full simulation configuration combining all sections."""

    time: TimeConfig = field(default_factory=TimeConfig)
    cosmology: CosmologyConfig = field(default_factory=CosmologyConfig)
    inflaton: InflatonConfig = field(default_factory=InflatonConfig)
    perturbations: PerturbationConfig = field(default_factory=PerturbationConfig)

    def validate(self) -> tuple[bool, list[str]]:
        """Validate every section, collecting all messages."""
        errors = []
        for section in (self.time, self.cosmology, self.inflaton, self.perturbations):
            _, section_errors = section.validate()
            errors.extend(section_errors)

        return len(errors) == 0, errors
