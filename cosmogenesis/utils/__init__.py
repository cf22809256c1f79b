"""cosmogenesis utility modules."""

from .constants import (
    PhysicalConstants,
    NATURAL_UNITS,
    PLANCK_2018,
    SECONDS_PER_YEAR,
    seconds_to_years,
    years_to_seconds,
    years_to_gev_inv,
    gev_inv_to_years,
)
from .config import (
    TimeConfig,
    CosmologyConfig,
    InflatonConfig,
    PerturbationConfig,
    SimulationConfig,
)
from .numerics import (
    SlowRollUndefinedError,
    FieldSizeMismatchError,
    NonFiniteStateError,
    NonPhysicalStateError,
    check_divergence,
    ensure_finite,
    ensure_positive,
)

__all__ = [
    "PhysicalConstants",
    "NATURAL_UNITS",
    "PLANCK_2018",
    "SECONDS_PER_YEAR",
    "seconds_to_years",
    "years_to_seconds",
    "years_to_gev_inv",
    "gev_inv_to_years",
    "TimeConfig",
    "CosmologyConfig",
    "InflatonConfig",
    "PerturbationConfig",
    "SimulationConfig",
    "SlowRollUndefinedError",
    "FieldSizeMismatchError",
    "NonFiniteStateError",
    "NonPhysicalStateError",
    "check_divergence",
    "ensure_finite",
    "ensure_positive",
]
