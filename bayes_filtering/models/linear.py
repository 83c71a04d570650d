"""Linear Gaussian process and observation models."""
import numpy as np

from ..exceptions import check_matrix
from .interface import (
    AdditiveObservationModel, AdditiveProcessModel, noise_matrix_from_covariance
)


class LinearStateTransitionModel(AdditiveProcessModel):
    """Linear dynamics x' = A x + B u + N w.

    Parameters
    ----------
    state_dim : int
        State dimension n_x
    input_dim : int
        Control input dimension n_u (default: 0)
    noise_dim : int, optional
        Noise dimension n_w (default: n_x)

    Defaults are A = I, B = 0 and N = I.
    """

    def __init__(self, state_dim, input_dim=0, noise_dim=None):
        if noise_dim is None:
            noise_dim = state_dim
        self._state_dim = state_dim
        self._input_dim = input_dim
        self._A = np.eye(state_dim)
        self._B = np.zeros((state_dim, input_dim))
        self._N = np.eye(state_dim, noise_dim)

    @property
    def state_dimension(self):
        return self._state_dim

    @property
    def input_dimension(self):
        return self._input_dim

    @property
    def dynamics_matrix(self):
        return self._A

    @dynamics_matrix.setter
    def dynamics_matrix(self, A):
        n = self._state_dim
        self._A = check_matrix("dynamics matrix", A, (n, n)).copy()

    @property
    def input_matrix(self):
        return self._B

    @input_matrix.setter
    def input_matrix(self, B):
        self._B = check_matrix("input matrix", B, (self._state_dim, self._input_dim)).copy()

    @property
    def noise_matrix(self):
        return self._N

    @noise_matrix.setter
    def noise_matrix(self, N):
        self._N = check_matrix("noise matrix", N, self._N.shape).copy()

    @property
    def noise_covariance(self):
        return self._N @ self._N.T

    @noise_covariance.setter
    def noise_covariance(self, Q):
        N = noise_matrix_from_covariance(Q, self._state_dim)
        if self._N.shape[1] != self._state_dim:
            raise ValueError(
                "noise covariance can only be set when noise_dim equals state_dim")
        self._N = N

    def expected_state(self, prev_state, u):
        return self._A @ prev_state + self._B @ u

    def states(self, prev_states, noises, u):
        return prev_states @ self._A.T + self._B @ u + noises @ self._N.T


class LinearGaussianObservationModel(AdditiveObservationModel):
    """Linear observation y = H x + N v.

    Parameters
    ----------
    obsrv_dim : int
        Observation dimension n_y
    state_dim : int
        State dimension n_x
    noise_dim : int, optional
        Noise dimension n_v (default: n_y)

    Defaults are H = [I | 0] and N = I.
    """

    def __init__(self, obsrv_dim, state_dim, noise_dim=None):
        if noise_dim is None:
            noise_dim = obsrv_dim
        self._obsrv_dim = obsrv_dim
        self._state_dim = state_dim
        self._H = np.eye(obsrv_dim, state_dim)
        self._N = np.eye(obsrv_dim, noise_dim)

    @property
    def observation_dimension(self):
        return self._obsrv_dim

    @property
    def state_dimension(self):
        return self._state_dim

    @property
    def sensor_matrix(self):
        return self._H

    @sensor_matrix.setter
    def sensor_matrix(self, H):
        self._H = check_matrix("sensor matrix", H, (self._obsrv_dim, self._state_dim)).copy()

    @property
    def noise_matrix(self):
        return self._N

    @noise_matrix.setter
    def noise_matrix(self, N):
        self._N = check_matrix("noise matrix", N, self._N.shape).copy()

    @property
    def noise_covariance(self):
        return self._N @ self._N.T

    @noise_covariance.setter
    def noise_covariance(self, R):
        N = noise_matrix_from_covariance(R, self._obsrv_dim)
        if self._N.shape[1] != self._obsrv_dim:
            raise ValueError(
                "noise covariance can only be set when noise_dim equals obsrv_dim")
        self._N = N

    def expected_observation(self, state):
        return self._H @ state

    def expected_observations(self, states):
        return states @ self._H.T
