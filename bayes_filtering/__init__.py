"""
Recursive Bayesian state estimation.

This package contains implementations of:
- Gaussian and particle beliefs
- Process and observation models, including robust feature models
- Filtering algorithms (Kalman, sigma-point, particle, robust Gaussian filters)
- Utility functions (metrics, visualization)
"""
from .distributions import Gaussian, ParticleBelief
from .exceptions import (
    FilteringError,
    DimensionMismatchError,
    NumericalInstabilityError,
    ParticleDegeneracyError,
)
from .filters import GaussianFilter, ParticleFilter, RobustGaussianFilter

__version__ = "0.1.0"

__all__ = [
    'Gaussian',
    'ParticleBelief',
    'GaussianFilter',
    'ParticleFilter',
    'RobustGaussianFilter',
    'FilteringError',
    'DimensionMismatchError',
    'NumericalInstabilityError',
    'ParticleDegeneracyError',
]
