"""
Process and observation model contracts.

Every model maps a standard normal noise vector through its own noise
matrix, so `noise_distribution()` is always N(0, I) of `noise_dimension`.
"""
from abc import ABC, abstractmethod

import numpy as np

from ..distributions import Gaussian, matrix_sqrt
from ..exceptions import NumericalInstabilityError, check_matrix


class ProcessModel(ABC):
    """State transition x' = f(x, w, u)."""

    @property
    @abstractmethod
    def state_dimension(self):
        """Dimension of the state."""

    @property
    @abstractmethod
    def noise_dimension(self):
        """Dimension of the standard noise vector."""

    @property
    def input_dimension(self):
        return 0

    @abstractmethod
    def state(self, prev_state, noise, u):
        """
        Next state.

        Parameters
        ----------
        prev_state : ndarray [n_x]
        noise : ndarray [n_w]
            Standard normal noise sample
        u : ndarray [n_u]
            Control input

        Returns
        -------
        ndarray [n_x]
        """

    def states(self, prev_states, noises, u):
        """Batched state(): prev_states [K, n_x], noises [K, n_w] -> [K, n_x]."""
        return np.array([self.state(x, w, u) for x, w in zip(prev_states, noises)])

    def noise_distribution(self):
        return Gaussian(self.noise_dimension)


class AdditiveProcessModel(ProcessModel):
    """Process model with additive noise x' = g(x, u) + N w."""

    @property
    @abstractmethod
    def noise_matrix(self):
        """Noise matrix N [n_x, n_w]."""

    @abstractmethod
    def expected_state(self, prev_state, u):
        """Noise-free transition g(x, u)."""

    @property
    def noise_dimension(self):
        return self.noise_matrix.shape[1]

    @property
    def noise_covariance(self):
        N = self.noise_matrix
        return N @ N.T

    def state(self, prev_state, noise, u):
        return self.expected_state(prev_state, u) + self.noise_matrix @ noise


class ObservationModel(ABC):
    """Observation y = h(x, v)."""

    @property
    @abstractmethod
    def observation_dimension(self):
        """Dimension of the observation."""

    @property
    @abstractmethod
    def noise_dimension(self):
        """Dimension of the standard noise vector."""

    @abstractmethod
    def observation(self, state, noise):
        """
        Observation for a state and a standard noise sample.

        Parameters
        ----------
        state : ndarray [n_x]
        noise : ndarray [n_v]

        Returns
        -------
        ndarray [n_y]
        """

    def observations(self, states, noises):
        """Batched observation(): states [K, n_x], noises [K, n_v] -> [K, n_y]."""
        return np.array([self.observation(x, v) for x, v in zip(states, noises)])

    def noise_distribution(self):
        return Gaussian(self.noise_dimension)

    def log_probability(self, observation, states):
        """
        Log likelihood log p(y | x) for each state.

        Parameters
        ----------
        observation : ndarray [n_y]
        states : ndarray [K, n_x]

        Returns
        -------
        ndarray [K]
        """
        raise NotImplementedError(
            f"{type(self).__name__} does not provide an observation likelihood")


class AdditiveObservationModel(ObservationModel):
    """Observation model with additive Gaussian noise y = h(x) + N v."""

    @property
    @abstractmethod
    def noise_matrix(self):
        """Noise matrix N [n_y, n_v]."""

    @abstractmethod
    def expected_observation(self, state):
        """Noise-free observation h(x)."""

    def expected_observations(self, states):
        """Batched expected_observation(): [K, n_x] -> [K, n_y]."""
        return np.array([self.expected_observation(x) for x in states])

    @property
    def noise_dimension(self):
        return self.noise_matrix.shape[1]

    @property
    def noise_covariance(self):
        N = self.noise_matrix
        return N @ N.T

    def observation(self, state, noise):
        return self.expected_observation(state) + self.noise_matrix @ noise

    def observations(self, states, noises):
        return self.expected_observations(states) + noises @ self.noise_matrix.T

    def log_probability(self, observation, states):
        y_pred = self.expected_observations(states)
        noise = Gaussian(self.observation_dimension, covariance=self.noise_covariance)
        return noise.log_probability(observation - y_pred)


class AdditiveUncorrelatedObservationModel(AdditiveObservationModel):
    """Additive observation model whose noise components are independent.

    Subclasses provide the diagonal of the noise matrix; the full noise
    matrix, the covariance and the likelihood are derived from it.
    """

    @property
    @abstractmethod
    def noise_matrix_diagonal(self):
        """Diagonal of N [n_y]."""

    @property
    def noise_covariance_diagonal(self):
        return self.noise_matrix_diagonal**2

    @property
    def noise_matrix(self):
        return np.diag(self.noise_matrix_diagonal)

    def observations(self, states, noises):
        return self.expected_observations(states) + noises * self.noise_matrix_diagonal

    def log_probability(self, observation, states):
        var = self.noise_covariance_diagonal
        if np.any(var <= 0):
            raise NumericalInstabilityError(
                "observation noise variance must be positive to evaluate the likelihood")
        diff = observation - self.expected_observations(states)
        return -0.5 * (np.sum(np.log(2 * np.pi * var))
                       + np.sum(diff**2 / var, axis=1))


def noise_matrix_from_covariance(covariance, dimension):
    """Noise matrix N with N @ N.T = covariance for a [dimension, dimension] input."""
    Q = check_matrix("noise covariance", covariance, (dimension, dimension))
    if not np.allclose(Q, Q.T):
        raise ValueError("noise covariance must be symmetric")
    return matrix_sqrt(Q)


def _has(model, attribute):
    try:
        getattr(model, attribute)
    except AttributeError:
        return False
    return True


def is_additive_obsrv_model(model):
    """True when the model exposes expected_observation() and noise_covariance."""
    return _has(model, 'expected_observation') and _has(model, 'noise_covariance')


def integrate_observation(quadrature, obsrv_model, state_distr, exploit_additive_noise=True):
    """
    Moments of the observation of `obsrv_model` under `state_distr`.

    Models exposing `observation_moments(quadrature, state_distr)` integrate
    themselves (mixtures do so component by component). Additive models
    integrate the noise-free observation and add R when
    `exploit_additive_noise` is set; every other model is integrated jointly
    with its noise.

    Parameters
    ----------
    quadrature : SigmaPointQuadrature
    obsrv_model : ObservationModel
    state_distr : Gaussian
    exploit_additive_noise : bool

    Returns
    -------
    Moments
    """
    if _has(obsrv_model, 'observation_moments'):
        return obsrv_model.observation_moments(quadrature, state_distr)
    if exploit_additive_noise and is_additive_obsrv_model(obsrv_model):
        moments = quadrature.integrate_moments(obsrv_model.expected_observation, state_distr)
        moments.covariance = moments.covariance + obsrv_model.noise_covariance
        return moments
    if obsrv_model.noise_dimension == 0:
        return quadrature.integrate_moments(
            lambda x: obsrv_model.observation(x, np.zeros(0)), state_distr)
    return quadrature.integrate_moments(
        obsrv_model.observation, state_distr, obsrv_model.noise_distribution())
