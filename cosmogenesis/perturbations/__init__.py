"""Primordial density perturbations: power spectrum, white noise and FFT engine."""

from .power_spectrum import PowerSpectrum
from .random_field import (
    GaussianRandomField,
    box_muller_pair,
    draw_uniform_pairs,
    make_rng,
)
from .fft import DensityFft

__all__ = [
    "PowerSpectrum",
    "GaussianRandomField",
    "box_muller_pair",
    "draw_uniform_pairs",
    "make_rng",
    "DensityFft",
]
