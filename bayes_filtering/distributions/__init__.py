"""Belief and noise distributions."""
from .gaussian import Gaussian, cholesky_lower, matrix_sqrt
from .moments import Moments, mixture_moments
from .particles import ParticleBelief, systematic_resample, multinomial_resample

__all__ = [
    'Gaussian',
    'Moments',
    'ParticleBelief',
    'cholesky_lower',
    'matrix_sqrt',
    'mixture_moments',
    'systematic_resample',
    'multinomial_resample',
]
