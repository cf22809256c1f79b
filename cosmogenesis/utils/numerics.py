"""Numerical utilities and error types for cosmogenesis computations."""

from dataclasses import dataclass
from typing import Optional
import numpy as np
from numpy.typing import NDArray


class SlowRollUndefinedError(ZeroDivisionError):
    """Raised when slow-roll parameters are requested at V(φ) = 0.

    Both ε = ½(V'/V)² and η = V''/V divide by the potential, so they have
    no value at the bottom of the quadratic well (φ = 0).
    """

    def __init__(self, phi: float, potential: float, message: Optional[str] = None):
        self.phi = phi
        self.potential = potential

        if message is None:
            message = (
                f"Slow-roll parameters undefined: V(phi={phi:.6e}) = {potential:.3e}"
            )

        super().__init__(message)


class FieldSizeMismatchError(ValueError):
    """Raised when a flattened grid does not hold size³ cells."""

    def __init__(self, expected: int, actual: int, size: Optional[int] = None):
        self.expected = expected
        self.actual = actual
        self.size = size

        grid = f" ({size}³ grid)" if size is not None else ""
        super().__init__(
            f"Field size mismatch: expected {expected} elements{grid}, got {actual}"
        )


class NonFiniteStateError(ArithmeticError):
    """Raised when an integration step produces NaN or infinite state."""

    def __init__(self, quantity: str, value: float, time: Optional[float] = None):
        self.quantity = quantity
        self.value = value
        self.time = time

        t_str = f" at t={time:.3e}" if time is not None else ""
        super().__init__(f"Non-finite {quantity} = {value}{t_str}")


class NonPhysicalStateError(ArithmeticError):
    """Raised when a step would leave a quantity outside its physical range."""

    def __init__(self, quantity: str, value: float, constraint: str, time: Optional[float] = None):
        self.quantity = quantity
        self.value = value
        self.constraint = constraint
        self.time = time

        t_str = f" at t={time:.3e}" if time is not None else ""
        super().__init__(f"Unphysical {quantity} = {value}{t_str}; must be {constraint}")


@dataclass
class DivergenceResult:
    """Result of divergence check."""

    has_divergence: bool
    divergence_indices: Optional[NDArray[np.intp]] = None
    divergence_values: Optional[NDArray[np.floating]] = None
    message: str = ""


def check_divergence(
    values: NDArray,
    threshold: float = np.inf,
    check_nan: bool = True,
    check_inf: bool = True,
) -> DivergenceResult:
    """Check a (flattened) array for non-finite or oversized entries.

    Complex input is checked on its modulus.

    Args:
        values: Array to check
        threshold: Magnitude above which a value counts as divergent
        check_nan: Whether to flag NaN as divergence
        check_inf: Whether to flag Inf as divergence

    Returns:
        DivergenceResult with divergence information
    """
    flat = np.ravel(values)
    magnitude = np.abs(flat)

    with np.errstate(invalid="ignore"):
        divergent = magnitude > threshold

    if check_nan:
        divergent |= np.isnan(magnitude)
    if check_inf:
        divergent |= np.isinf(magnitude)

    if np.any(divergent):
        indices = np.where(divergent)[0]
        return DivergenceResult(
            has_divergence=True,
            divergence_indices=indices,
            divergence_values=flat[divergent],
            message=f"Divergence detected at {len(indices)} points; "
            f"first at index {indices[0]}, value = {flat[indices[0]]}",
        )

    return DivergenceResult(has_divergence=False, message="No divergence detected")


def ensure_finite(quantity: str, value: float, time: Optional[float] = None) -> float:
    """Return value unchanged, raising NonFiniteStateError if it is NaN or ±inf."""
    if not np.isfinite(value):
        raise NonFiniteStateError(quantity, value, time)
    return value


def ensure_positive(quantity: str, value: float, time: Optional[float] = None) -> float:
    """Return value unchanged, raising NonPhysicalStateError unless it is > 0."""
    if not value > 0.0:
        raise NonPhysicalStateError(quantity, value, "> 0", time)
    return value
