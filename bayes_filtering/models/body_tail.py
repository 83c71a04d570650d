"""Heavy-tailed observation models built from a body and a tail model."""
import numpy as np
from scipy.stats import norm

from ..distributions import mixture_moments
from ..exceptions import DimensionMismatchError
from .interface import ObservationModel, integrate_observation


class UniformObservationModel(ObservationModel):
    """Observation uniformly distributed on a box, independent of the state.

    Standard normal noise is mapped to the box through the normal CDF.

    Parameters
    ----------
    low, high : ndarray [n_y]
        Box bounds, high > low componentwise
    """

    def __init__(self, low, high):
        low = np.atleast_1d(np.asarray(low, dtype=float))
        high = np.atleast_1d(np.asarray(high, dtype=float))
        if low.shape != high.shape or low.ndim != 1:
            raise DimensionMismatchError(
                f"low and high must be vectors of equal length, got {low.shape} and {high.shape}")
        if np.any(high <= low):
            raise ValueError("uniform bounds must satisfy high > low")
        self.low = low
        self.high = high

    @property
    def observation_dimension(self):
        return self.low.shape[0]

    @property
    def noise_dimension(self):
        return self.low.shape[0]

    def observation(self, state, noise):
        return self.low + (self.high - self.low) * norm.cdf(noise)

    def log_density(self, observation):
        """Log density of a single observation."""
        inside = np.all((observation >= self.low) & (observation <= self.high))
        if not inside:
            return -np.inf
        return -np.sum(np.log(self.high - self.low))

    def log_probability(self, observation, states):
        return np.full(len(states), self.log_density(observation))


class BodyTailObservationModel(ObservationModel):
    """Mixture of a body model and a tail model.

    With probability `tail_weight` the observation is drawn from the tail.
    The noise vector is [body noise, tail noise, selector]; the selector is
    mapped to a uniform variate which picks the tail when it falls below
    `tail_weight`. The selector only serves sampling: quadrature integrates
    body and tail separately through `observation_moments()` and combines
    them as a mixture.

    Parameters
    ----------
    body : ObservationModel
    tail : ObservationModel
    tail_weight : float
        Mixture weight of the tail, in [0, 1)
    """

    def __init__(self, body, tail, tail_weight=0.1):
        if body.observation_dimension != tail.observation_dimension:
            raise DimensionMismatchError(
                f"body and tail observation dimensions differ: "
                f"{body.observation_dimension} != {tail.observation_dimension}")
        if not 0.0 <= tail_weight < 1.0:
            raise ValueError(f"tail_weight must be in [0, 1), got {tail_weight}")
        self.body = body
        self.tail = tail
        self.tail_weight = tail_weight

    @property
    def observation_dimension(self):
        return self.body.observation_dimension

    @property
    def noise_dimension(self):
        return self.body.noise_dimension + self.tail.noise_dimension + 1

    def observation(self, state, noise):
        n_b = self.body.noise_dimension
        if norm.cdf(noise[-1]) < self.tail_weight:
            return self.tail.observation(state, noise[n_b:-1])
        return self.body.observation(state, noise[:n_b])

    def log_probability(self, observation, states):
        w = self.tail_weight
        log_body = np.log1p(-w) + self.body.log_probability(observation, states)
        if w == 0.0:
            return log_body
        log_tail = np.log(w) + self.tail.log_probability(observation, states)
        return np.logaddexp(log_body, log_tail)

    def mixture_components(self):
        """(weight, model) pairs of the mixture, zero-weight components left out."""
        components = [(1.0 - self.tail_weight, self.body)]
        if self.tail_weight > 0.0:
            components.append((self.tail_weight, self.tail))
        return components

    def observation_moments(self, quadrature, state_distr):
        """
        Observation moments of the mixture.

        Each component is integrated over its own noise and the results are
        combined with the mixture mean and covariance formulas.

        Parameters
        ----------
        quadrature : SigmaPointQuadrature
        state_distr : Gaussian

        Returns
        -------
        Moments
        """
        return mixture_moments([
            (w, integrate_observation(quadrature, model, state_distr))
            for w, model in self.mixture_components()
        ])
