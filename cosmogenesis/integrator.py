"""Fixed-step Runge-Kutta integrators for vector ODEs dy/dt = f(t, y).

The state is any sequence (list, tuple, numpy array) whose elements support
addition with each other and multiplication/division by a float, so real,
complex and numpy scalar components all work. The right-hand side is a
plain callable f(t, y) returning a sequence of the same length.

All times are in natural units (GeV⁻¹) when used by the cosmology engine,
but nothing here depends on that.
"""

import logging
import math
from typing import Callable, Sequence, Tuple, Union, Any
import numpy as np
from numpy.typing import NDArray

logger = logging.getLogger(__name__)

State = Union[Sequence[Any], NDArray]
Derivative = Callable[[float, State], State]


def _like(template: State, values: list) -> State:
    """Return values in the container kind of template (ndarray stays ndarray)."""
    if isinstance(template, np.ndarray):
        return np.array(values)
    return values


def _axpy(y: State, k: State, h: float) -> State:
    """Compute y + k·h elementwise."""
    if len(k) != len(y):
        raise ValueError(
            f"Derivative has {len(k)} components but state has {len(y)}"
        )
    return _like(y, [yi + ki * h for yi, ki in zip(y, k)])


def rk4_step(y: State, t: float, dt: float, f: Derivative) -> State:
    """Advance y by one classic 4th-order Runge-Kutta step.

    k1 = f(t, y)
    k2 = f(t + dt/2, y + k1·dt/2)
    k3 = f(t + dt/2, y + k2·dt/2)
    k4 = f(t + dt, y + k3·dt)
    y(t + dt) = y + (k1 + 2k2 + 2k3 + k4)·dt/6

    Args:
        y: Current state vector
        t: Current time
        dt: Step size (may be zero or negative)
        f: Derivative function f(t, y) -> dy/dt

    Returns:
        New state vector, same container kind as y
    """
    half_dt = dt / 2.0

    k1 = f(t, y)
    k2 = f(t + half_dt, _axpy(y, k1, half_dt))
    k3 = f(t + half_dt, _axpy(y, k2, half_dt))
    k4 = f(t + dt, _axpy(y, k3, dt))

    sixth_dt = dt / 6.0
    y_new = [
        yi + (a + b * 2.0 + c * 2.0 + d) * sixth_dt
        for yi, a, b, c, d in zip(y, k1, k2, k3, k4)
    ]
    return _like(y, y_new)


def euler_step(y: State, t: float, dt: float, f: Derivative) -> State:
    """Advance y by one explicit Euler step y + f(t, y)·dt."""
    return _axpy(y, f(t, y), dt)


def rk4_integrate(
    y0: State,
    t0: float,
    t1: float,
    dt: float,
    f: Derivative,
) -> Tuple[State, float]:
    """Integrate from t0 to t1 with equal RK4 steps no larger than dt.

    The number of steps is ceil((t1 - t0)/dt) and the step actually used is
    (t1 - t0)/n_steps, so the last step lands exactly on t1.

    A non-positive dt or an empty/backwards interval is a no-op: the input
    state and t0 are returned unchanged.

    Args:
        y0: Initial state at t0
        t0: Initial time
        t1: Final time
        dt: Nominal (maximum) step size
        f: Derivative function f(t, y) -> dy/dt

    Returns:
        Tuple of (final state, final time)
    """
    total_time = t1 - t0

    if dt <= 0.0 or total_time <= 0.0:
        logger.debug(
            f"rk4_integrate no-op: dt={dt}, t0={t0}, t1={t1}; returning initial state"
        )
        return y0, t0

    n_steps = math.ceil(total_time / dt)
    actual_dt = total_time / n_steps

    y = y0
    for i in range(n_steps):
        y = rk4_step(y, t0 + i * actual_dt, actual_dt, f)

    return y, t1
