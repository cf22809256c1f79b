"""Cosmic time accumulation and the descriptive epoch timeline.

The external scheduler owns the real-time clock. Each tick it reports an
elapsed wall-clock interval which the ``CosmicClock`` scales by the
time-acceleration factor and turns into cosmic years:

    Δyears = Δseconds · acceleration / SECONDS_PER_YEAR
"""

import bisect
import logging
from typing import Final, Optional, Tuple

from .cosmology import CosmicEpoch
from .utils.config import TimeConfig
from .utils.constants import (
    INFLATION_END_YEARS,
    INFLATION_START_YEARS,
    SECONDS_PER_YEAR,
    seconds_to_years,
)

logger = logging.getLogger(__name__)


# Start of each epoch in cosmic years; an epoch lasts until the next begins.
# The inflation label spans the same window in which Cosmology.advance uses
# the exponential rule.
EPOCH_TIMELINE: Final[Tuple[Tuple[CosmicEpoch, float], ...]] = (
    (CosmicEpoch.PLANCK, 0.0),
    (CosmicEpoch.INFLATION, INFLATION_START_YEARS),
    (CosmicEpoch.QUARK_GLUON_PLASMA, INFLATION_END_YEARS),
    (CosmicEpoch.NUCLEOSYNTHESIS, seconds_to_years(180.0)),
    (CosmicEpoch.RECOMBINATION, seconds_to_years(1200.0)),
    (CosmicEpoch.DARK_AGES, 3.8e5),
    (CosmicEpoch.COSMIC_DAWN, 1.0e8),
    (CosmicEpoch.STRUCTURE, 1.0e9),
)

_EPOCH_STARTS = [start for _, start in EPOCH_TIMELINE]


def epoch_at(years: float) -> CosmicEpoch:
    """Descriptive epoch tag for a cosmic time in years.

    Negative times are reported as the Planck epoch.
    """
    index = bisect.bisect_right(_EPOCH_STARTS, years) - 1
    return EPOCH_TIMELINE[max(index, 0)][0]


class CosmicClock:
    """Accumulated cosmic time with a clamped acceleration factor and pause state."""

    def __init__(self, config: Optional[TimeConfig] = None):
        self.config = config or TimeConfig()

        valid, errors = self.config.validate()
        if not valid:
            raise ValueError(f"Invalid time configuration: {errors}")

        self.years = self.config.initial_years
        self.acceleration = self.config.default_acceleration
        self._paused = False

    def set_acceleration(self, acceleration: float) -> float:
        """Clamp and store the acceleration factor, returning the stored value."""
        clamped = min(max(acceleration, self.config.acceleration_min), self.config.acceleration_max)
        if clamped != acceleration:
            logger.debug(f"Acceleration {acceleration:.3e} clamped to {clamped:.3e}")
        self.acceleration = clamped
        return clamped

    def delta_years(self, delta_seconds: float) -> float:
        """Cosmic years corresponding to a wall-clock interval at the current acceleration."""
        return delta_seconds * self.acceleration / SECONDS_PER_YEAR

    def add_time(self, delta_seconds: float) -> float:
        """Accumulate a wall-clock interval.

        Returns:
            Years added (0.0 while paused)
        """
        if self._paused:
            return 0.0

        delta = self.delta_years(delta_seconds)
        self.years += delta
        return delta

    def pause(self) -> None:
        self._paused = True

    def resume(self) -> None:
        self._paused = False

    def toggle_pause(self) -> None:
        self._paused = not self._paused

    @property
    def is_paused(self) -> bool:
        return self._paused

    @property
    def epoch(self) -> CosmicEpoch:
        """Epoch tag for the accumulated time."""
        return epoch_at(self.years)

    def reset(self) -> None:
        """Return to the configured initial time and resume."""
        self.years = self.config.initial_years
        self._paused = False
