"""Filtering algorithm implementations."""
from .interface import FilterInterface
from .gaussian import GaussianFilter
from .particle import ParticleFilter, systematic_resample, multinomial_resample
from .robust import RobustGaussianFilter
from .policies import (
    LinearGaussianPrediction,
    LinearGaussianUpdate,
    SigmaPointPrediction,
    SigmaPointUpdate,
)
from .quadrature import UnscentedTransform, SigmaPointQuadrature, Moments
from .common import joseph_update, standard_update, kalman_gain, symmetrize

__all__ = [
    # Main filters
    'FilterInterface',
    'GaussianFilter',
    'ParticleFilter',
    'RobustGaussianFilter',
    # Gaussian filter policies
    'LinearGaussianPrediction',
    'LinearGaussianUpdate',
    'SigmaPointPrediction',
    'SigmaPointUpdate',
    # Quadrature
    'UnscentedTransform',
    'SigmaPointQuadrature',
    'Moments',
    # Utilities
    'systematic_resample',
    'multinomial_resample',
    'joseph_update',
    'standard_update',
    'kalman_gain',
    'symmetrize',
]
