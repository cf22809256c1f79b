"""cosmogenesis - expansion history and primordial perturbations for a toy universe.

This package computes:
- The scale factor and Hubble rate under the Friedmann equation
- Exponential expansion during inflation, RK4 integration afterwards
- A quadratic-potential inflaton and its slow-roll parameters
- Seeded Gaussian random fields with a power-law spectrum via 3-D FFTs

Key modules:
    integrator: Fixed-step RK4 (and Euler) for vector ODEs
    inflaton: Quadratic-potential inflaton field
    cosmology: Scale factor, Hubble parameter, energy density, curvature
    clock: Cosmic time accumulation and epoch labels
    simulation: Per-tick driver owning all state
    perturbations: Power spectrum, Gaussian random field, DensityFft

Natural units (ħ = c = 1) throughout: GeV, GeV⁴ for densities, GeV⁻¹ for time.

Example usage:
    >>> from cosmogenesis import Simulation, SimulationConfig
    >>> sim = Simulation(SimulationConfig())
    >>> result = sim.step(elapsed_seconds=1e-40, acceleration=1.0)
    >>> print(f"a = {result.scale_factor.value:.6f}, H = {result.hubble.value:.3e} GeV")
"""

__version__ = "0.1.0"

# Configuration and constants
from .utils.config import (
    TimeConfig,
    CosmologyConfig,
    InflatonConfig,
    PerturbationConfig,
    SimulationConfig,
)
from .utils.constants import (
    NATURAL_UNITS,
    PLANCK_2018,
    SECONDS_PER_YEAR,
    INFLATION_HUBBLE_GEV,
    INFLATION_START_YEARS,
    INFLATION_END_YEARS,
    years_to_gev_inv,
    gev_inv_to_years,
)
from .utils.numerics import (
    SlowRollUndefinedError,
    FieldSizeMismatchError,
    NonFiniteStateError,
    NonPhysicalStateError,
)

# Integrators
from .integrator import rk4_step, rk4_integrate, euler_step

# Inflaton
from .inflaton import (
    Inflaton,
    INFLATON_MASS,
    quadratic_potential,
    quadratic_potential_first_derivative,
    quadratic_potential_second_derivative,
    slow_roll_epsilon,
    slow_roll_eta,
)

# Expansion history
from .cosmology import (
    Cosmology,
    CosmicEpoch,
    Curvature,
    EnergyDensity,
    HubbleParameter,
    ScaleFactor,
    compute_hubble,
    compute_scale_factor_derivative,
    compute_exponential_scale_factor,
)
from .clock import CosmicClock, EPOCH_TIMELINE, epoch_at

# Perturbations
from .perturbations import (
    PowerSpectrum,
    GaussianRandomField,
    DensityFft,
    box_muller_pair,
)

# Driver
from .simulation import Simulation, StepResult, PerturbationField
