"""Shared pytest fixtures for unit tests."""

import numpy as np
import pytest

import sys
import os
sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..', '..'))

from bayes_filtering.distributions import Gaussian
from bayes_filtering.models import (
    AdditiveObservationModel, LinearGaussianObservationModel,
    LinearStateTransitionModel, ObservationModel, ProcessModel
)


@pytest.fixture
def rng():
    """Seeded random number generator."""
    return np.random.default_rng(42)


@pytest.fixture
def linear_model():
    """Simple 2D linear model for testing."""
    n_x = 2
    A = np.array([[0.9, 0.1], [0.0, 0.95]])
    H = np.eye(n_x)
    Q = 0.1 * np.eye(n_x)
    R = 0.1 * np.eye(n_x)

    process = LinearStateTransitionModel(n_x)
    process.dynamics_matrix = A
    process.noise_covariance = Q

    obsrv = LinearGaussianObservationModel(n_x, n_x)
    obsrv.sensor_matrix = H
    obsrv.noise_covariance = R

    prior = Gaussian(n_x, np.zeros(n_x), np.eye(n_x))

    return {
        'process': process, 'obsrv': obsrv, 'prior': prior,
        'A': A, 'H': H, 'Q': Q, 'R': R,
    }


@pytest.fixture
def linear_ssm(rng, linear_model):
    """Generate linear SSM data."""
    T, n_x, n_y = 30, 2, 2
    m = linear_model

    xs = np.zeros((T, n_x))
    ys = np.zeros((T, n_y))
    x = rng.multivariate_normal(np.zeros(n_x), np.eye(n_x))

    for t in range(T):
        x = m['A'] @ x + rng.multivariate_normal(np.zeros(n_x), m['Q'])
        y = m['H'] @ x + rng.multivariate_normal(np.zeros(n_y), m['R'])
        xs[t], ys[t] = x, y

    return {**m, 'xs': xs, 'ys': ys, 'T': T}


class DriftProcessModel(ProcessModel):
    """Nonlinear drift with state-dependent noise gain."""

    def __init__(self, sigma=0.3):
        self.sigma = sigma

    @property
    def state_dimension(self):
        return 2

    @property
    def noise_dimension(self):
        return 2

    def state(self, prev_state, noise, u):
        drift = 0.9 * prev_state + 0.1 * np.sin(prev_state[::-1])
        gain = self.sigma * (1.0 + 0.1 * prev_state**2)
        return drift + gain * noise


class RangeBearing2DModel(AdditiveObservationModel):
    """Range and bearing of a 2D position from the origin."""

    def __init__(self, r_range=0.3, r_bearing=0.2):
        self._N = np.diag([r_range, r_bearing])

    @property
    def observation_dimension(self):
        return 2

    @property
    def noise_matrix(self):
        return self._N

    def expected_observation(self, state):
        return np.array([np.hypot(state[0], state[1]), np.arctan2(state[1], state[0])])


class SquaredObservationModel(ObservationModel):
    """Non-additive scalar observation y = x0 * (1 + v) + x1^2."""

    @property
    def observation_dimension(self):
        return 1

    @property
    def noise_dimension(self):
        return 1

    def observation(self, state, noise):
        return np.array([state[0] * (1.0 + 0.1 * noise[0]) + 0.2 * state[1]**2])


@pytest.fixture
def nonlinear_model():
    """Nonlinear drift process with a range-bearing sensor."""
    prior = Gaussian(2, np.array([3.0, 3.0]), np.array([[0.5, 0.1], [0.1, 0.5]]))
    return {
        'process': DriftProcessModel(),
        'obsrv': RangeBearing2DModel(),
        'non_additive_obsrv': SquaredObservationModel(),
        'prior': prior,
        'y': np.array([4.2, 0.7]),
    }


def check_psd(matrix, tol=1e-10):
    """Check if matrix is positive semi-definite."""
    return np.all(np.linalg.eigvalsh(matrix) >= -tol)


def check_symmetric(matrix, tol=1e-12):
    """Check if matrix is symmetric."""
    return np.allclose(matrix, matrix.T, atol=tol, rtol=0)
