"""Seeded Gaussian white-noise fields via the Box-Muller transform.

Reproducibility rests on the generator: every draw comes from
``numpy.random.Generator(PCG64(seed))``. PCG64 is a permuted congruential
generator with published reference streams, and numpy guarantees the
``Generator.random`` stream for a given seed across platforms. With no seed
the generator is seeded from OS entropy and nothing is reproducible.

Each cell consumes two uniforms (u1, u2) in row-major (z, y, x) order.
Uniforms arrive in [0, 1) and are mapped to (0, 1] as 1 − u so that
ln(u1) stays finite.
"""

import logging
from dataclasses import dataclass
from typing import Optional, Tuple, Union
import numpy as np
from numpy.typing import NDArray

logger = logging.getLogger(__name__)


def make_rng(seed: Optional[int] = None) -> np.random.Generator:
    """PCG64-backed generator; ``None`` seeds from OS entropy."""
    return np.random.Generator(np.random.PCG64(seed))


def box_muller_pair(
    u1: Union[float, NDArray[np.floating]],
    u2: Union[float, NDArray[np.floating]],
) -> Tuple:
    """Map two uniforms in (0, 1] to two independent standard normals.

    z1 = sqrt(−2 ln u1)·cos(2π u2)
    z2 = sqrt(−2 ln u1)·sin(2π u2)

    Works elementwise on arrays.
    """
    radius = np.sqrt(-2.0 * np.log(u1))
    angle = 2.0 * np.pi * u2
    return radius * np.cos(angle), radius * np.sin(angle)


def draw_uniform_pairs(rng: np.random.Generator, n: int) -> Tuple[NDArray, NDArray]:
    """Draw n (u1, u2) pairs in (0, 1], interleaved u1, u2, u1, u2, ..."""
    u = 1.0 - rng.random((n, 2))
    return u[:, 0], u[:, 1]


@dataclass(frozen=True, eq=False)
class GaussianRandomField:
    """Cube of independent standard-normal values.

    Attributes:
        resolution: Grid points per axis N
        spacing: Physical distance per cell
        values: Read-only (N, N, N) float64 array indexed [z, y, x]

    Two fields are equal when resolution, spacing and every value match.
    Fields hold arrays, so they are not hashable.
    """

    resolution: int
    spacing: float
    values: NDArray[np.float64]

    __hash__ = None

    @classmethod
    def generate(
        cls,
        resolution: int,
        spacing: float,
        seed: Optional[int] = None,
    ) -> "GaussianRandomField":
        """Generate an N³ field with the cosine branch of Box-Muller per cell.

        Args:
            resolution: Grid points per axis (>= 1)
            spacing: Cell size (> 0)
            seed: Generator seed; identical seeds give bit-identical fields

        Returns:
            GaussianRandomField
        """
        if resolution < 1:
            raise ValueError(f"resolution = {resolution} must be >= 1")
        if spacing <= 0:
            raise ValueError(f"spacing = {spacing} must be > 0")

        rng = make_rng(seed)
        n_cells = resolution**3

        u1, u2 = draw_uniform_pairs(rng, n_cells)
        z, _ = box_muller_pair(u1, u2)

        values = z.reshape(resolution, resolution, resolution)
        values.flags.writeable = False

        logger.debug(f"Generated {resolution}³ Gaussian field (seed={seed})")
        return cls(resolution=resolution, spacing=spacing, values=values)

    @property
    def box_size(self) -> float:
        """Side length of the cube, N·spacing."""
        return self.resolution * self.spacing

    def flat(self) -> NDArray[np.float64]:
        """Row-major flattened copy, the layout used by DensityFft."""
        return self.values.reshape(-1).copy()

    def __eq__(self, other) -> bool:
        if not isinstance(other, GaussianRandomField):
            return NotImplemented
        return (
            self.resolution == other.resolution
            and self.spacing == other.spacing
            and np.array_equal(self.values, other.values)
        )

    def mean(self) -> float:
        return float(np.mean(self.values))

    def std(self) -> float:
        return float(np.std(self.values))
