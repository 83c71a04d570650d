"""
Utility Functions.

This module contains utility functions for:
- Metrics computation
- Visualization
"""
from .metrics import (
    compute_mse,
    compute_rmse,
    compute_nees,
    compute_nis,
    compute_symmetry_error,
    compute_min_eigenvalues,
    stability_summary,
    belief_mahalanobis,
    moments_are_similar,
)
from .visualization import (
    plot_covariance_ellipse,
    plot_gaussian_belief,
    plot_particle_belief,
    plot_trajectory_2d,
    plot_filter_estimates,
)

__all__ = [
    # metrics
    'compute_mse',
    'compute_rmse',
    'compute_nees',
    'compute_nis',
    'compute_symmetry_error',
    'compute_min_eigenvalues',
    'stability_summary',
    'belief_mahalanobis',
    'moments_are_similar',
    # visualization
    'plot_covariance_ellipse',
    'plot_gaussian_belief',
    'plot_particle_belief',
    'plot_trajectory_2d',
    'plot_filter_estimates',
]
