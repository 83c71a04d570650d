"""First two moments of a transformed Gaussian and of mixtures of them."""
from dataclasses import dataclass

import numpy as np

from .gaussian import Gaussian


@dataclass
class Moments:
    """First two moments of a transformed distribution.

    Attributes
    ----------
    mean : ndarray [n_y]
    covariance : ndarray [n_y, n_y]
    cross_covariance : ndarray [n_x, n_y]
        Covariance between the input state and the output
    """
    mean: np.ndarray
    covariance: np.ndarray
    cross_covariance: np.ndarray

    def to_gaussian(self):
        return Gaussian(len(self.mean), self.mean, self.covariance)


def mixture_moments(components):
    """
    Moments of a mixture from the moments of its components.

    All components must be integrated under the same input distribution, so
    the cross-covariances combine linearly.

    Parameters
    ----------
    components : list of (float, Moments)
        Mixture weights (summing to one) and component moments

    Returns
    -------
    Moments
    """
    weights = np.array([w for w, _ in components], dtype=float)
    if weights.size == 0 or np.any(weights < 0) or not np.isclose(weights.sum(), 1.0):
        raise ValueError(f"mixture weights must be non-negative and sum to one, got {weights}")

    mean = sum(w * m.mean for w, m in components)
    covariance = np.zeros((len(mean), len(mean)))
    cross_covariance = np.zeros_like(components[0][1].cross_covariance, dtype=float)
    for w, m in components:
        d = m.mean - mean
        covariance += w * (m.covariance + np.outer(d, d))
        cross_covariance += w * m.cross_covariance
    return Moments(mean, covariance, cross_covariance)
