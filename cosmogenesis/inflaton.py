"""Inflaton field with a quadratic potential.

The inflaton φ is the scalar field whose potential energy drives the early
exponential expansion. For the quadratic (mass) potential

    V(φ) = ½m²φ²,   V'(φ) = m²φ,   V''(φ) = m²

the slow-roll parameters reduce to

    ε = ½(V'/V)² = 2/φ²,   η = V''/V = 2/φ²

so inflation (ε, |η| ≪ 1) needs a super-Planckian field value. Both are
undefined at φ = 0 where V vanishes.
"""

from typing import Tuple

from .utils.numerics import SlowRollUndefinedError

# Inflaton mass parameter m [GeV]
INFLATON_MASS: float = 1.0e16


def quadratic_potential(phi: float, mass: float = INFLATON_MASS) -> float:
    """V(φ) = ½m²φ²."""
    return 0.5 * mass**2 * phi**2


def quadratic_potential_first_derivative(phi: float, mass: float = INFLATON_MASS) -> float:
    """dV/dφ = m²φ."""
    return mass**2 * phi


def quadratic_potential_second_derivative(phi: float, mass: float = INFLATON_MASS) -> float:
    """d²V/dφ² = m², independent of φ."""
    return mass**2


def slow_roll_epsilon(potential: float, potential_first_derivative: float) -> float:
    """First slow-roll parameter ε = ½(V'/V)².

    Raises:
        ZeroDivisionError: if the potential is zero
    """
    return 0.5 * (potential_first_derivative / potential) ** 2


def slow_roll_eta(potential: float, potential_second_derivative: float) -> float:
    """Second slow-roll parameter η = V''/V.

    Raises:
        ZeroDivisionError: if the potential is zero
    """
    return potential_second_derivative / potential


class Inflaton:
    """Inflaton field value together with its derived quantities.

    Attributes:
        phi: Field value φ (dimensionless)
        mass: Mass parameter m [GeV]
        potential: V(φ)
        potential_first_derivative: V'(φ)
        potential_second_derivative: V''(φ)
        epsilon: ε = ½(V'/V)²
        eta: η = V''/V

    Construction computes everything at once. Assigning ``phi`` re-derives
    all fields through the property setter; an assignment that raises
    leaves φ and every derived field as they were. The explicit ``update_*``
    methods remain for callers that edit the derived fields directly and
    want them recomputed.

    Raises:
        SlowRollUndefinedError: when constructed with (or set to) φ = 0
    """

    def __init__(self, phi: float, mass: float = INFLATON_MASS):
        self.mass = mass
        self._phi = phi
        self._assign(*self._derive(phi))

    @classmethod
    def vacuum(cls, mass: float = INFLATON_MASS) -> "Inflaton":
        """Inflaton at φ = 0 with V = V' = 0 and V'' = m².

        This is the resting state before a field value is assigned; the
        slow-roll parameters are left at zero since they are undefined.
        """
        inflaton = cls.__new__(cls)
        inflaton.mass = mass
        inflaton._phi = 0.0
        inflaton.potential = 0.0
        inflaton.potential_first_derivative = 0.0
        inflaton.potential_second_derivative = quadratic_potential_second_derivative(0.0, mass)
        inflaton.epsilon = 0.0
        inflaton.eta = 0.0
        return inflaton

    @property
    def phi(self) -> float:
        """Field value φ."""
        return self._phi

    @phi.setter
    def phi(self, value: float) -> None:
        derived = self._derive(value)
        self._phi = value
        self._assign(*derived)

    def _derive(self, phi: float) -> Tuple[float, float, float, float, float]:
        """(V, V', V'', ε, η) at φ, computed without touching the instance.

        Raises:
            SlowRollUndefinedError: if V(φ) is zero
        """
        potential = quadratic_potential(phi, self.mass)
        first = quadratic_potential_first_derivative(phi, self.mass)
        second = quadratic_potential_second_derivative(phi, self.mass)

        if potential == 0.0:
            raise SlowRollUndefinedError(phi, potential)

        return (
            potential,
            first,
            second,
            slow_roll_epsilon(potential, first),
            slow_roll_eta(potential, second),
        )

    def _assign(self, potential, first, second, epsilon, eta) -> None:
        self.potential = potential
        self.potential_first_derivative = first
        self.potential_second_derivative = second
        self.epsilon = epsilon
        self.eta = eta

    def update_potential(self) -> None:
        """Recompute V, V', V'' for the current φ."""
        self.potential = quadratic_potential(self._phi, self.mass)
        self.potential_first_derivative = quadratic_potential_first_derivative(
            self._phi, self.mass
        )
        self.potential_second_derivative = quadratic_potential_second_derivative(
            self._phi, self.mass
        )

    def update_slow_roll_parameters(self) -> None:
        """Recompute ε and η from the stored potential values.

        Raises:
            SlowRollUndefinedError: if the stored potential is zero
        """
        if self.potential == 0.0:
            raise SlowRollUndefinedError(self._phi, self.potential)

        self.epsilon = slow_roll_epsilon(self.potential, self.potential_first_derivative)
        self.eta = slow_roll_eta(self.potential, self.potential_second_derivative)

    def update_all(self) -> None:
        """Recompute potential, derivatives and slow-roll parameters together.

        Nothing is modified if the slow-roll parameters are undefined.
        """
        self._assign(*self._derive(self._phi))

    def slow_roll_parameters(self) -> Tuple[float, float]:
        """Return (ε, η)."""
        return self.epsilon, self.eta

    def is_slow_roll(self, epsilon_max: float = 1.0, eta_max: float = 1.0) -> bool:
        """Whether ε < epsilon_max and |η| < eta_max."""
        return self.epsilon < epsilon_max and abs(self.eta) < eta_max

    def energy_density(self, phi_dot: float = 0.0) -> float:
        """Field energy density ρ_φ = ½φ̇² + V(φ)."""
        return 0.5 * phi_dot**2 + self.potential

    def __repr__(self) -> str:
        return (
            f"Inflaton(phi={self._phi:.6e}, V={self.potential:.6e}, "
            f"epsilon={self.epsilon:.3e}, eta={self.eta:.3e})"
        )
