#!/usr/bin/env python3
"""
Example Cosmic Evolution with cosmogenesis

This script walks a toy universe through its first moments:
1. Slow-roll parameters of the quadratic inflaton
2. Exponential expansion during inflation
3. Friedmann (RK4) expansion afterwards, for each curvature
4. Seeding primordial density perturbations and measuring their spectrum

Usage:
    python example_evolution.py
"""

import logging

import numpy as np

from cosmogenesis import (
    Cosmology,
    CosmologyConfig,
    Curvature,
    EnergyDensity,
    Inflaton,
    PerturbationConfig,
    Simulation,
    SimulationConfig,
    TimeConfig,
    NonFiniteStateError,
)
from cosmogenesis.utils.constants import FRIEDMANN_PREFACTOR


def print_header(title: str):
    """Print a formatted section header."""
    print("\n" + "=" * 70)
    print(f" {title}")
    print("=" * 70)


def demonstrate_slow_roll():
    """Slow-roll parameters across field values."""
    print_header("1. INFLATON SLOW ROLL")

    print(f"\n{'phi':<12} {'V(phi) [GeV^4]':<18} {'epsilon':<14} {'eta':<14} {'slow roll'}")
    print("-" * 70)

    for phi in (1e16, 100.0, 10.0, 2.0, 1.0, 0.5):
        inflaton = Inflaton(phi)
        print(
            f"{phi:<12.3g} {inflaton.potential:<18.3e} {inflaton.epsilon:<14.3e} "
            f"{inflaton.eta:<14.3e} {inflaton.is_slow_roll()}"
        )

    print("\nFor V = ½m²φ², ε = η = 2/φ²: inflation ends near φ = √2.")


def demonstrate_inflation():
    """Exponential growth of a at H_inf."""
    print_header("2. INFLATION")

    sim = Simulation()
    print(f"\nH_inf = {sim.cosmology.inflation_hubble:.1e} GeV")
    print(f"{'tick':<6} {'years':<14} {'a':<16} {'H [GeV]':<12} {'epoch'}")
    print("-" * 70)

    for tick in range(5):
        result = sim.step(elapsed_seconds=1e-38)
        print(
            f"{tick:<6} {result.years:<14.3e} {result.scale_factor.value:<16.6e} "
            f"{result.hubble.value:<12.3e} {result.epoch.value}"
        )

    try:
        sim.step(elapsed_seconds=1.0)
    except NonFiniteStateError as err:
        print(f"\nA one-second tick overflows: {err}")
        print(f"State kept at a = {sim.cosmology.scale_factor.value:.6e}")


def demonstrate_curvature():
    """Post-inflation RK4 expansion for open, flat and closed geometries."""
    print_header("3. FRIEDMANN EXPANSION AND CURVATURE")

    rho = 1.0 / FRIEDMANN_PREFACTOR
    dt = 0.01
    n_steps = 200

    print(f"\nρ chosen so H = 1 GeV for a flat universe at a = 1; dt = {dt} GeV⁻¹")
    print(f"{'curvature':<12} {'a(t=2)':<14} {'H(t=2)':<14}")
    print("-" * 70)

    for curvature in Curvature:
        cosmo = Cosmology.with_curvature(curvature)
        cosmo.energy_density = EnergyDensity.matter_dominated(rho)
        cosmo.update_hubble()

        for _ in range(n_steps):
            cosmo.integrate_scale_factor_rk4(dt)

        print(
            f"{curvature.name.lower():<12} {cosmo.scale_factor.value:<14.6f} "
            f"{cosmo.hubble.value:<14.6f}"
        )

    print("\nOpen expands fastest; the closed universe stalls once H² clamps to zero.")


def demonstrate_perturbations():
    """Seed a 32³ field and compare its measured spectrum with the input."""
    print_header("4. PRIMORDIAL PERTURBATIONS")

    config = SimulationConfig(
        time=TimeConfig(initial_years=1.0),
        cosmology=CosmologyConfig(initial_energy_density=4e-98),
        perturbations=PerturbationConfig(grid_size=32, seed=42),
    )
    sim = Simulation(config)
    field = sim.seed_perturbations()

    print(f"\nGrid: {field.resolution}³, seed {field.seed}")
    print(f"δ mean = {np.mean(field.density):.3e}, σ_δ = {np.std(field.density):.3e}")
    print(f"|ψ| rms = {np.sqrt(np.mean(field.displacement**2)):.3e}")

    fft = sim.density_fft()
    centres, power, counts = fft.measure_power_spectrum(field.kspace, n_bins=8)

    print(f"\n{'k':<10} {'modes':<8} {'measured':<14}")
    print("-" * 70)
    for k, p, n in zip(centres, power, counts):
        print(f"{k:<10.2f} {n:<8d} {p:<14.3e}")


def main():
    """Run all demonstrations."""
    logging.basicConfig(level=logging.INFO, format="%(name)s: %(message)s")

    print("\n" + "=" * 70)
    print(" COSMOGENESIS - EXAMPLE EVOLUTION")
    print("=" * 70)

    demonstrate_slow_roll()
    demonstrate_inflation()
    demonstrate_curvature()
    demonstrate_perturbations()

    print("=" * 70)
    print(" END OF DEMONSTRATION")
    print("=" * 70)


if __name__ == "__main__":
    main()
