"""Weighted particle set belief and resampling schemes."""
import numpy as np

from ..exceptions import DimensionMismatchError, ParticleDegeneracyError
from .gaussian import Gaussian


def systematic_resample(w, rng):
    """Systematic resampling (low variance)."""
    N = len(w)
    cumsum = np.cumsum(w)
    u = rng.uniform(0, 1.0 / N) + np.arange(N) / N
    return np.clip(np.searchsorted(cumsum, u), 0, N - 1)


def multinomial_resample(w, rng):
    """Multinomial resampling: N independent draws proportional to w."""
    N = len(w)
    cumsum = np.cumsum(w)
    u = np.sort(rng.uniform(0, 1.0, size=N))
    return np.clip(np.searchsorted(cumsum, u), 0, N - 1)


class ParticleBelief:
    """Weighted particle approximation of a distribution.

    Parameters
    ----------
    locations : ndarray [N, n]
        Particle states
    weights : ndarray [N], optional
        Non-negative weights, normalized on construction. Uniform if omitted.
    """

    def __init__(self, locations, weights=None):
        locations = np.asarray(locations, dtype=float)
        if locations.ndim != 2 or locations.shape[0] == 0:
            raise DimensionMismatchError(
                f"locations must have shape (N, n) with N > 0, got {locations.shape}")
        N = locations.shape[0]

        if weights is None:
            weights = np.full(N, 1.0 / N)
        else:
            weights = np.asarray(weights, dtype=float)
            if weights.shape != (N,):
                raise DimensionMismatchError(
                    f"weights must have shape ({N},), got {weights.shape}")
            if np.any(weights < 0):
                raise ValueError("particle weights must be non-negative")
            total = weights.sum()
            if not np.isfinite(total) or total <= 0:
                raise ParticleDegeneracyError(
                    "particle weights sum to zero or are not finite")
            weights = weights / total

        self.locations = locations
        self.weights = weights

    @classmethod
    def from_distribution(cls, distribution, n_particles, rng):
        """
        Seed a particle belief by sampling a Gaussian.

        Parameters
        ----------
        distribution : Gaussian
        n_particles : int
        rng : numpy.random.Generator

        Returns
        -------
        ParticleBelief
            n_particles independent samples with weight 1/n_particles each
        """
        if n_particles < 1:
            raise ValueError(f"n_particles must be positive, got {n_particles}")
        return cls(distribution.sample(rng, size=n_particles))

    def __len__(self):
        return self.locations.shape[0]

    def __repr__(self):
        return f"ParticleBelief(n_particles={len(self)}, dimension={self.dimension})"

    @property
    def dimension(self):
        return self.locations.shape[1]

    @property
    def mean(self):
        return self.weights @ self.locations

    @property
    def covariance(self):
        diff = self.locations - self.mean
        return np.einsum('i,ij,ik->jk', self.weights, diff, diff)

    def to_gaussian(self):
        """Moment-matched Gaussian."""
        return Gaussian(self.dimension, self.mean, self.covariance)

    def effective_sample_size(self):
        return 1.0 / np.sum(self.weights**2)

    def resample(self, rng, resampler=systematic_resample):
        """Draw an equally weighted particle set of the same size."""
        idx = resampler(self.weights, rng)
        return ParticleBelief(self.locations[idx])

    def copy(self):
        return ParticleBelief(self.locations.copy(), self.weights.copy())
