"""Simulation aggregate driving the expansion history tick by tick.

The caller (the outer scheduling loop) owns real time. Each tick it calls
``Simulation.step(elapsed_seconds, acceleration)``; the simulation turns
that into cosmic years and natural time units, advances the scale factor
with the rule for the current epoch and returns a snapshot of the state.

Perturbation seeding is a separate batch call, ``seed_perturbations``,
usually made once when structure formation starts.
"""

import logging
from dataclasses import dataclass
from typing import Optional
import numpy as np
from numpy.typing import NDArray

from .clock import CosmicClock, epoch_at
from .cosmology import (
    Cosmology,
    CosmicEpoch,
    Curvature,
    EnergyDensity,
    HubbleParameter,
    ScaleFactor,
    compute_hubble,
)
from .inflaton import Inflaton
from .perturbations import DensityFft, GaussianRandomField, PowerSpectrum
from .utils.config import SimulationConfig
from .utils.constants import years_to_gev_inv
from .utils.numerics import ensure_finite

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class StepResult:
    """State after one tick.

    Attributes:
        years: Accumulated cosmic time after the tick
        delta_years: Cosmic time added by the tick
        dt_natural: Same interval in GeV⁻¹
        scale_factor: Copy of the scale factor state
        hubble: Copy of the Hubble parameter
        energy_density: Copy of the energy density
        epoch: Descriptive epoch tag after the tick
        method: Integration rule used ('inflation', 'rk4' or 'paused')
    """

    years: float
    delta_years: float
    dt_natural: float
    scale_factor: ScaleFactor
    hubble: HubbleParameter
    energy_density: EnergyDensity
    epoch: CosmicEpoch
    method: str


@dataclass(frozen=True, eq=False)
class PerturbationField:
    """Initial perturbations on an N³ grid.

    Attributes:
        density: Density contrast δ, shape (N, N, N) indexed [z, y, x]
        kspace: Flat k-space coefficients δ_k that produced ``density``
        displacement: Zel'dovich displacement, shape (3, N, N, N), x/y/z
        velocity: Peculiar velocity a·H·f·ψ with growth rate f = 1
        spacing: Cell size
        scale_factor: a at which the field was seeded
        seed: Seed used (None if drawn from OS entropy)

    Equality compares the arrays element by element; instances are not hashable.
    """

    density: NDArray[np.float64]
    kspace: NDArray[np.complex128]
    displacement: NDArray[np.float64]
    velocity: NDArray[np.float64]
    spacing: float
    scale_factor: float
    seed: Optional[int]

    __hash__ = None

    @property
    def resolution(self) -> int:
        return self.density.shape[0]

    def __eq__(self, other) -> bool:
        if not isinstance(other, PerturbationField):
            return NotImplemented
        return (
            self.spacing == other.spacing
            and self.scale_factor == other.scale_factor
            and self.seed == other.seed
            and all(
                np.array_equal(mine, theirs)
                for mine, theirs in (
                    (self.density, other.density),
                    (self.kspace, other.kspace),
                    (self.displacement, other.displacement),
                    (self.velocity, other.velocity),
                )
            )
        )


class Simulation:
    """Owner of the cosmology, inflaton and clock state.

    Args:
        config: Simulation configuration (default: SimulationConfig())

    Raises:
        ValueError: if the configuration does not validate
    """

    def __init__(self, config: Optional[SimulationConfig] = None):
        self.config = config or SimulationConfig()

        valid, errors = self.config.validate()
        if not valid:
            raise ValueError(f"Invalid simulation configuration: {errors}")

        self.clock = CosmicClock(self.config.time)

        inflaton_cfg = self.config.inflaton
        if inflaton_cfg.phi_initial == 0.0:
            self.inflaton = Inflaton.vacuum(mass=inflaton_cfg.mass)
        else:
            self.inflaton = Inflaton(inflaton_cfg.phi_initial, mass=inflaton_cfg.mass)

        self.cosmology = self._initial_cosmology()
        self._fft: Optional[DensityFft] = None

    def _initial_cosmology(self) -> Cosmology:
        cfg = self.config.cosmology

        cosmology = Cosmology(
            curvature=Curvature.from_name(cfg.curvature),
            inflation_hubble=cfg.inflation_hubble,
        )
        cosmology.scale_factor.value = cfg.initial_scale_factor
        cosmology.scale_factor.epoch = epoch_at(self.clock.years)

        if cfg.initial_energy_density > 0.0:
            density = cfg.initial_energy_density
        else:
            density = self.inflaton.energy_density()
        cosmology.energy_density = EnergyDensity.inflaton_dominated(density)

        cosmology.update_hubble()
        cosmology.update_scale_factor_derivative()
        return cosmology

    def _snapshot(self, delta_years: float, dt: float, method: str) -> StepResult:
        sf = self.cosmology.scale_factor
        hubble = self.cosmology.hubble
        rho = self.cosmology.energy_density
        return StepResult(
            years=self.clock.years,
            delta_years=delta_years,
            dt_natural=dt,
            scale_factor=ScaleFactor(sf.value, sf.derivative, sf.time, sf.epoch),
            hubble=HubbleParameter(hubble.value, hubble.squared),
            energy_density=EnergyDensity(
                rho.total, rho.matter, rho.radiation, rho.dark_energy, rho.inflaton
            ),
            epoch=sf.epoch,
            method=method,
        )

    def step(self, elapsed_seconds: float, acceleration: float = 1.0) -> StepResult:
        """Advance the expansion by one scheduler tick.

        The integration rule is chosen from the cosmic time reached before
        this tick: exponential expansion until the end of inflation, RK4
        on the Friedmann equation afterwards.

        Args:
            elapsed_seconds: Wall-clock time since the previous tick (> 0)
            acceleration: Time-acceleration factor, clamped to the configured range

        Returns:
            StepResult snapshot

        Raises:
            ValueError: if elapsed_seconds is not positive
            NonFiniteStateError: if the step overflows; state is left as before
        """
        if not elapsed_seconds > 0.0:
            raise ValueError(f"elapsed_seconds = {elapsed_seconds} must be positive")

        if self.clock.is_paused:
            logger.debug("Clock paused; step skipped")
            return self._snapshot(0.0, 0.0, "paused")

        self.clock.set_acceleration(acceleration)

        years_before = self.clock.years
        delta_years = self.clock.delta_years(elapsed_seconds)
        dt = years_to_gev_inv(delta_years)

        method = self.cosmology.advance(dt, years_before)
        self.clock.add_time(elapsed_seconds)
        self.cosmology.scale_factor.epoch = epoch_at(self.clock.years)

        logger.debug(
            f"step: {method} dt={dt:.3e} GeV⁻¹, a={self.cosmology.scale_factor.value:.6e}, "
            f"H={self.cosmology.hubble.value:.3e}"
        )
        return self._snapshot(delta_years, dt, method)

    def set_inflaton(self, phi: float, update_density: bool = True) -> None:
        """Move the inflaton to φ and optionally make ρ inflaton dominated by V(φ).

        Everything is checked before anything is assigned, so a failure
        leaves the inflaton and the cosmology untouched.

        Raises:
            SlowRollUndefinedError: if φ = 0
            NonFiniteStateError: if V(φ) gives a non-finite Hubble rate
        """
        candidate = Inflaton(phi, mass=self.inflaton.mass)

        if update_density:
            density = EnergyDensity.inflaton_dominated(candidate.energy_density())
            sf = self.cosmology.scale_factor
            ensure_finite(
                "H",
                compute_hubble(density.total, sf.value, self.cosmology.curvature),
                sf.time,
            )

        self.inflaton.phi = phi
        if update_density:
            self.cosmology.energy_density = density
            self.cosmology.update_hubble()
            self.cosmology.update_scale_factor_derivative()

    def density_fft(self) -> DensityFft:
        """FFT engine for the configured grid size, built once and reused."""
        size = self.config.perturbations.grid_size
        if self._fft is None or self._fft.size != size:
            self._fft = DensityFft(size)
        return self._fft

    def seed_perturbations(self, seed: Optional[int] = None) -> PerturbationField:
        """Generate initial density, displacement and velocity fields.

        White noise from GaussianRandomField is transformed to k-space,
        normalised to unit power per mode, given the configured power
        spectrum with random phases, and transformed back. Displacements
        follow from the Zel'dovich approximation and velocities from
        v = a·H·ψ at the current scale factor.

        Args:
            seed: Overrides the configured seed; None falls back to it

        Returns:
            PerturbationField
        """
        cfg = self.config.perturbations
        seed = cfg.seed if seed is None else seed

        fft = self.density_fft()
        n = fft.size

        noise = GaussianRandomField.generate(n, cfg.spacing, seed)
        spectrum = PowerSpectrum(cfg.spectral_index, cfg.amplitude)

        # Independent stream for the phases so they do not repeat the noise
        phase_seed = None
        if seed is not None:
            phase_seed = int(np.random.SeedSequence(seed).generate_state(1)[0])

        kspace = fft.real_to_kspace(noise.flat()) / np.sqrt(fft.n_cells)
        fft.apply_power_spectrum(kspace, spectrum, phase_seed)
        density = fft.kspace_to_real(kspace).reshape(n, n, n)

        displacement = np.stack(
            [psi.reshape(n, n, n) for psi in fft.zeldovich_displacement(kspace, cfg.spacing)]
        )
        a = self.cosmology.scale_factor.value
        velocity = a * self.cosmology.hubble.value * displacement

        logger.info(
            f"Seeded {n}³ perturbations (seed={seed}, a={a:.3e}, "
            f"sigma_delta={float(np.std(density)):.3e})"
        )
        return PerturbationField(
            density=density,
            kspace=kspace,
            displacement=displacement,
            velocity=velocity,
            spacing=cfg.spacing,
            scale_factor=a,
            seed=seed,
        )
