"""
Feature observation models.

A feature model wraps a raw observation model and replaces the raw
observation by a feature of it. Before each update the filter calibrates
the feature model with the predicted distribution of the raw observation
(the body distribution) through `parameters()`, then transforms the actual
observation with `feature_observation()`.
"""
from abc import abstractmethod

import numpy as np

from ..distributions import Moments, mixture_moments
from ..exceptions import DimensionMismatchError, check_vector
from .body_tail import BodyTailObservationModel
from .interface import ObservationModel


class FeatureObservationModel(ObservationModel):
    """Base class of observation models acting on features of a raw model.

    Parameters
    ----------
    obsrv_model : ObservationModel
        Raw observation model
    """

    def __init__(self, obsrv_model):
        self._obsrv_model = obsrv_model
        self.body_distribution = None
        self.reference_state = None

    @property
    def embedded_obsrv_model(self):
        return self._obsrv_model

    def parameters(self, body_distribution, reference_state):
        """
        Calibrate the feature model for the next observation.

        Parameters
        ----------
        body_distribution : Gaussian
            Predicted distribution of the raw observation
        reference_state : ndarray [n_x]
            State the calibration refers to, usually the predicted mean
        """
        n_y = self._obsrv_model.observation_dimension
        if body_distribution.dimension != n_y:
            raise DimensionMismatchError(
                f"body distribution must have dimension {n_y}, "
                f"got {body_distribution.dimension}")
        self.body_distribution = body_distribution
        self.reference_state = np.asarray(reference_state, dtype=float)

    @abstractmethod
    def feature_observation(self, observation):
        """Map a raw observation [n_y] to feature space."""


class IdentityFeatureModel(FeatureObservationModel):
    """Feature model whose feature is the raw observation itself.

    The capabilities the update policies look for (linear sensor matrix,
    additive noise, self-integrated moments) are forwarded from the raw
    model, so a filter picks the same policy path with or without the
    wrapper. A capability the raw model lacks raises AttributeError.
    """

    @property
    def sensor_matrix(self):
        return self._obsrv_model.sensor_matrix

    @property
    def noise_matrix(self):
        return self._obsrv_model.noise_matrix

    @property
    def noise_covariance(self):
        return self._obsrv_model.noise_covariance

    @property
    def expected_observation(self):
        return self._obsrv_model.expected_observation

    @property
    def observation_moments(self):
        return self._obsrv_model.observation_moments

    @property
    def observation_dimension(self):
        return self._obsrv_model.observation_dimension

    @property
    def noise_dimension(self):
        return self._obsrv_model.noise_dimension

    def observation(self, state, noise):
        return self._obsrv_model.observation(state, noise)

    def observations(self, states, noises):
        return self._obsrv_model.observations(states, noises)

    def log_probability(self, observation, states):
        return self._obsrv_model.log_probability(observation, states)

    def feature_observation(self, observation):
        return check_vector("observation", observation, self.observation_dimension)


class RobustFeatureObservationModel(FeatureObservationModel):
    """Robust feature of a raw observation under a body/tail mixture.

    For the body distribution N(mu_b, S_b) the body responsibility of y is

        r = (1-w) p_b(y) / ((1-w) p_b(y) + w p_t(y))

    and the feature is [r, r (y - mu_b)]. Outliers get r close to zero, so
    their feature carries almost no information about the state.

    Sampling goes through the feature of the body/tail mixture observation.
    Quadrature goes through `observation_moments()`, which integrates the
    feature under the body and under the tail separately and combines them
    as a mixture. Tail models exposing `log_density(y)` are taken to be
    independent of the state; their component is integrated over the body
    distribution, where the feature is concentrated.

    Parameters
    ----------
    obsrv_model : ObservationModel
        Raw (body) observation model
    tail_model : ObservationModel
        Tail model, must provide log_probability()
        (and log_density() when it does not depend on the state)
    tail_weight : float
        Mixture weight of the tail, in (0, 1)
    """

    def __init__(self, obsrv_model, tail_model, tail_weight=0.1):
        if not 0.0 < tail_weight < 1.0:
            raise ValueError(f"tail_weight must be in (0, 1), got {tail_weight}")
        super().__init__(obsrv_model)
        self.tail_model = tail_model
        self.tail_weight = tail_weight
        self._body_tail = BodyTailObservationModel(obsrv_model, tail_model, tail_weight)

    @property
    def body_tail_obsrv_model(self):
        return self._body_tail

    @property
    def observation_dimension(self):
        return self._obsrv_model.observation_dimension + 1

    @property
    def noise_dimension(self):
        return self._body_tail.noise_dimension

    def observation(self, state, noise):
        return self.feature_observation(self._body_tail.observation(state, noise))

    def body_weight(self, observation):
        """Body responsibility r of a raw observation."""
        if self.body_distribution is None:
            raise RuntimeError("parameters() must be called before transforming observations")
        w = self.tail_weight
        log_body = np.log1p(-w) + self.body_distribution.log_probability(observation)
        log_tail = np.log(w) + self.tail_model.log_probability(
            observation, self.reference_state[np.newaxis])[0]
        return float(np.exp(log_body - np.logaddexp(log_body, log_tail)))

    def feature_observation(self, observation):
        y = check_vector("observation", observation, self._obsrv_model.observation_dimension)
        r = self.body_weight(y)
        return np.concatenate([[r], r * (y - self.body_distribution.mean)])

    def observation_moments(self, quadrature, state_distr):
        """
        Feature moments of the body/tail mixture under `state_distr`.

        Parameters
        ----------
        quadrature : SigmaPointQuadrature
        state_distr : Gaussian

        Returns
        -------
        Moments
            Mean and covariance [n_y + 1], cross-covariance [n_x, n_y + 1]
        """
        if self.body_distribution is None:
            raise RuntimeError("parameters() must be called before integrating the feature")
        body = self._component_moments(quadrature, self._obsrv_model, state_distr)
        if hasattr(self.tail_model, 'log_density'):
            tail = self._independent_tail_moments(quadrature, state_distr.dimension)
        else:
            tail = self._component_moments(quadrature, self.tail_model, state_distr)
        w = self.tail_weight
        return mixture_moments([(1.0 - w, body), (w, tail)])

    def _component_moments(self, quadrature, model, state_distr):
        if model.noise_dimension == 0:
            return quadrature.integrate_moments(
                lambda x: self.feature_observation(model.observation(x, np.zeros(0))),
                state_distr)
        return quadrature.integrate_moments(
            lambda x, v: self.feature_observation(model.observation(x, v)),
            state_distr, model.noise_distribution())

    def _independent_tail_moments(self, quadrature, state_dim):
        """
        Feature moments under a state-independent tail density p_t.

        E_t[g(y)] = E_b[g(y) p_t(y) / p_b(y)] with the expectation on the
        right taken over the body distribution. The cross-covariance with the
        state is zero.
        """
        body = self.body_distribution
        n_f = self.observation_dimension

        def weighted(y):
            g = self.feature_observation(y)
            ratio = np.exp(self.tail_model.log_density(y) - body.log_probability(y))
            return ratio * np.concatenate([g, np.outer(g, g).ravel()])

        integral = quadrature.integrate_moments(weighted, body).mean
        mean = integral[:n_f]
        second = integral[n_f:].reshape(n_f, n_f)
        covariance = second - np.outer(mean, mean)
        return Moments(mean, 0.5 * (covariance + covariance.T), np.zeros((state_dim, n_f)))
