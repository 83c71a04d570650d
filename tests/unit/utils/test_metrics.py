"""Unit tests for metrics utility functions."""

import numpy as np
import pytest

import sys
import os
sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..', '..', '..'))

from bayes_filtering.distributions import Gaussian, ParticleBelief
from bayes_filtering.exceptions import NumericalInstabilityError
from bayes_filtering.utils.metrics import (
    belief_mahalanobis, compute_min_eigenvalues, compute_mse, compute_nees, compute_nis,
    compute_rmse, compute_symmetry_error, moments_are_similar, stability_summary
)


class TestComputeMSE:
    """Tests for MSE computation."""

    def test_known_value(self):
        """MSE should match hand-computed value."""
        estimated = np.array([1.0, 2.0, 3.0])
        true = np.array([0.0, 0.0, 0.0])

        mse = compute_mse(estimated, true)

        # MSE = (1 + 4 + 9) / 3 = 14/3
        np.testing.assert_allclose(mse, 14.0 / 3.0)

    def test_rmse_is_sqrt_of_mse(self):
        """RMSE should be square root of MSE."""
        estimated = np.array([1.0, 2.0, 3.0])
        true = np.zeros(3)

        np.testing.assert_allclose(compute_rmse(estimated, true),
                                   np.sqrt(compute_mse(estimated, true)))


class TestConsistencyStatistics:
    """Tests for NEES and NIS."""

    def test_nees_known_value(self):
        """NEES with diagonal covariance."""
        m_filt = np.zeros((2, 2))
        P_filt = np.array([np.diag([1.0, 4.0]), np.eye(2)])
        xs = np.array([[1.0, 2.0], [0.0, 3.0]])

        np.testing.assert_allclose(compute_nees(m_filt, P_filt, xs), [2.0, 9.0])

    def test_nis_known_value(self):
        """NIS of a unit innovation."""
        nis = compute_nis(np.array([[2.0]]), np.array([[[4.0]]]))
        np.testing.assert_allclose(nis, [1.0])

    def test_nees_chi_squared_mean(self, rng):
        """Errors drawn from P give mean NEES close to n_x."""
        T, n_x = 2000, 3
        P = np.diag([0.5, 1.0, 2.0])
        xs = rng.multivariate_normal(np.zeros(n_x), P, size=T)
        nees = compute_nees(np.zeros((T, n_x)), np.repeat(P[np.newaxis], T, axis=0), xs)

        assert np.mean(nees) == pytest.approx(n_x, rel=0.1)

    def test_singular_covariance_raises(self):
        """Singular covariances are not silently regularized."""
        with pytest.raises(NumericalInstabilityError):
            compute_nees(np.zeros((1, 2)), np.zeros((1, 2, 2)), np.ones((1, 2)))

    def test_indefinite_innovation_covariance_raises(self):
        """NIS reports an indefinite innovation covariance with the package error."""
        S = np.array([[[1.0, 0.0], [0.0, -1.0]]])
        with pytest.raises(NumericalInstabilityError, match="innovation covariance at step 0"):
            compute_nis(np.ones((1, 2)), S)


class TestStabilityMetrics:
    """Tests for covariance health metrics."""

    def test_symmetry_error(self):
        """Symmetric matrices have zero error, zero matrices too."""
        P = np.array([np.eye(2), [[1.0, 0.5], [0.0, 1.0]], np.zeros((2, 2))])
        err = compute_symmetry_error(P)

        assert err[0] == 0.0
        assert err[1] > 0.0
        assert err[2] == 0.0

    def test_min_eigenvalues(self):
        """Negative eigenvalues reveal loss of definiteness."""
        P = np.array([np.diag([1.0, 2.0]), np.diag([1.0, -0.5])])
        np.testing.assert_allclose(compute_min_eigenvalues(P), [1.0, -0.5])

    def test_stability_summary(self):
        """Summary collects condition numbers and health indicators."""
        P = np.array([np.diag([1.0, 2.0]), np.diag([1.0, 10.0])])
        summary = stability_summary(P, mse=0.5)

        assert summary['max_cond'] == pytest.approx(10.0)
        assert summary['mean_cond'] == pytest.approx(6.0)
        assert summary['min_eigenvalue'] == pytest.approx(1.0)
        assert summary['max_symmetry_error'] == 0.0
        assert summary['mse'] == 0.5


class TestBeliefComparison:
    """Tests for comparing beliefs."""

    def test_belief_mahalanobis(self):
        """Distance of the other mean under the reference covariance."""
        reference = Gaussian(2, np.zeros(2), np.diag([4.0, 1.0]))
        other = ParticleBelief(np.array([[2.0, 0.0], [2.0, 0.0]]))

        assert belief_mahalanobis(reference, other) == pytest.approx(1.0)

    def test_moments_are_similar(self):
        """Small perturbations are similar, large ones are not."""
        P = np.array([[1.0, 0.2], [0.2, 0.5]])
        m = np.array([1.0, 2.0])

        assert moments_are_similar(m, P, m + 0.01, 1.02 * P)
        assert not moments_are_similar(m, P, m + 1.0, P)
        assert not moments_are_similar(m, P, m, 2.0 * P)

    def test_moments_are_similar_needs_pd_reference(self):
        """A singular reference covariance cannot measure the mean distance."""
        with pytest.raises(NumericalInstabilityError):
            moments_are_similar(np.zeros(2), np.zeros((2, 2)), np.zeros(2), np.eye(2))


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
