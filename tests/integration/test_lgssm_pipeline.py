"""Integration tests for the linear Gaussian state space pipeline."""

import numpy as np
import pytest

import sys
import os
sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..', '..'))

from bayes_filtering.distributions import Gaussian
from bayes_filtering.filters import (
    GaussianFilter, ParticleFilter, SigmaPointPrediction, SigmaPointUpdate
)
from bayes_filtering.models import (
    LinearGaussianObservationModel, LinearStateTransitionModel, simulate
)
from bayes_filtering.utils.metrics import belief_mahalanobis, compute_rmse, moments_are_similar


@pytest.fixture
def lgssm_data(rng):
    """Generate LGSSM data."""
    T = 50
    process = LinearStateTransitionModel(2)
    process.dynamics_matrix = np.array([[0.9, 0.1], [0.0, 0.95]])
    process.noise_covariance = 0.1 * np.eye(2)
    obsrv = LinearGaussianObservationModel(2, 2)
    obsrv.noise_covariance = 0.1 * np.eye(2)
    prior = Gaussian(2, np.zeros(2), np.eye(2))

    xs, ys = simulate(process, obsrv, prior.sample(rng), T, rng)

    return {
        'process': process,
        'obsrv': obsrv,
        'prior': prior,
        'xs': xs,
        'ys': ys,
        'T': T
    }


class TestKFOnLGSSM:
    """Test Kalman filter on LGSSM."""

    def test_kf_on_lgssm(self, lgssm_data):
        """KF should beat the raw observations."""
        d = lgssm_data
        kf = GaussianFilter(d['process'], d['obsrv'])

        m_filt, P_filt, _ = kf.run(d['prior'], d['ys'])

        assert not np.any(np.isnan(m_filt))
        assert compute_rmse(m_filt, d['xs']) < compute_rmse(d['ys'], d['xs'])


class TestUKFMatchesKF:
    """Test sigma-point filter matches KF on linear system."""

    def test_ukf_matches_kf_on_lgssm(self, lgssm_data):
        """UKF should match KF for linear models."""
        d = lgssm_data
        kf = GaussianFilter(d['process'], d['obsrv'])
        ukf = GaussianFilter(d['process'], d['obsrv'],
                             prediction=SigmaPointPrediction(exploit_additive_noise=False),
                             update=SigmaPointUpdate(exploit_additive_noise=False))

        m_kf, P_kf, _ = kf.run(d['prior'], d['ys'])
        m_ukf, P_ukf, _ = ukf.run(d['prior'], d['ys'])

        np.testing.assert_allclose(m_ukf, m_kf, atol=1e-8)
        np.testing.assert_allclose(P_ukf, P_kf, atol=1e-8)


class TestPFConvergesToKF:
    """Test PF converges to KF with many particles."""

    def test_pf_converges_to_kf(self, rng, lgssm_data):
        """After 10 predict/update cycles with 10 000 particles the PF mean lies
        within Mahalanobis distance 1 of the KF belief."""
        d = lgssm_data
        kf = GaussianFilter(d['process'], d['obsrv'])
        pf = ParticleFilter(d['process'], d['obsrv'], n_particles=10000, rng=rng)

        gaussian_belief = d['prior']
        particle_belief = pf.from_gaussian(d['prior'])

        for t in range(10):
            gaussian_belief = kf.update(kf.predict(gaussian_belief), d['ys'][t])
            particle_belief = pf.update(pf.predict(particle_belief), d['ys'][t])

            assert belief_mahalanobis(gaussian_belief, particle_belief) <= 1.0

        assert moments_are_similar(gaussian_belief.mean, gaussian_belief.covariance,
                                   particle_belief.mean, particle_belief.covariance,
                                   epsilon=0.2)


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
