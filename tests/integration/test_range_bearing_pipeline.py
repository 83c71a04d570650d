"""Integration tests for Range-Bearing tracking pipeline."""

import numpy as np
import pytest

import sys
import os
sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..', '..'))

from bayes_filtering.distributions import Gaussian
from bayes_filtering.filters import GaussianFilter, ParticleFilter, RobustGaussianFilter
from bayes_filtering.models import (
    ConstantVelocityModel, RangeBearingObservationModel, UniformObservationModel, simulate
)
from bayes_filtering.utils.metrics import compute_rmse


@pytest.fixture
def range_bearing_data(rng):
    """Generate range-bearing tracking data."""
    T = 40
    process = ConstantVelocityModel(dt=1.0, q=0.1)
    obsrv = RangeBearingObservationModel(r_range=0.5, r_bearing=0.05)
    prior = Gaussian(4, np.array([5.0, 0.5, 5.0, 0.5]), np.diag([0.5, 0.1, 0.5, 0.1]))
    xs, ys = simulate(process, obsrv, prior.mean, T, rng)

    return {
        'process': process,
        'obsrv': obsrv,
        'prior': prior,
        'xs': xs,
        'ys': ys,
        'T': T
    }


@pytest.fixture
def contaminated_ys(range_bearing_data):
    """Every 5th range reading replaced by a gross outlier."""
    ys = range_bearing_data['ys'].copy()
    ys[4::5, 0] += 30.0
    return ys


class TestUKFOnRangeBearing:
    """Test UKF on range-bearing tracking."""

    def test_ukf_on_range_bearing(self, range_bearing_data):
        """UKF should track range-bearing model."""
        d = range_bearing_data
        ukf = GaussianFilter(d['process'], d['obsrv'])

        m_filt, P_filt, _ = ukf.run(d['prior'], d['ys'])

        assert not np.any(np.isnan(m_filt))
        assert not np.any(np.isnan(P_filt))

        rmse = compute_rmse(m_filt, d['xs'])
        assert rmse < 5.0, f"RMSE too large: {rmse}"


class TestPFOnRangeBearing:
    """Test Particle Filter on range-bearing tracking."""

    def test_pf_on_range_bearing(self, rng, range_bearing_data):
        """PF should track range-bearing model."""
        d = range_bearing_data
        pf = ParticleFilter(d['process'], d['obsrv'], n_particles=1000, rng=rng)

        m_filt, P_filt, _ = pf.run(pf.from_gaussian(d['prior']), d['ys'])

        assert not np.any(np.isnan(m_filt))
        assert 1.0 <= pf.last_ess <= 1000

        rmse = compute_rmse(m_filt, d['xs'])
        assert rmse < 10.0, f"RMSE too large: {rmse}"


class TestRobustFilterOnRangeBearing:
    """Test the robust Gaussian filter on range-bearing tracking."""

    @pytest.fixture
    def tail(self):
        return UniformObservationModel([0.0, -np.pi], [100.0, np.pi])

    def test_clean_data(self, range_bearing_data, tail):
        """Without outliers the robust filter tracks like the UKF."""
        d = range_bearing_data
        rf = RobustGaussianFilter(d['process'], d['obsrv'], tail, tail_weight=0.1)

        m_filt, P_filt, _ = rf.run(d['prior'], d['ys'])

        assert not np.any(np.isnan(m_filt))
        rmse = compute_rmse(m_filt, d['xs'])
        assert rmse < 5.0, f"RMSE too large: {rmse}"

    def test_outliers(self, range_bearing_data, contaminated_ys, tail):
        """Gross range outliers hurt the UKF far more than the robust filter."""
        d = range_bearing_data
        ukf = GaussianFilter(d['process'], d['obsrv'])
        rf = RobustGaussianFilter(d['process'], d['obsrv'], tail, tail_weight=0.1)

        m_ukf, _, _ = ukf.run(d['prior'], contaminated_ys)
        m_rf, P_rf, _ = rf.run(d['prior'], contaminated_ys)

        rmse_ukf = compute_rmse(m_ukf, d['xs'])
        rmse_rf = compute_rmse(m_rf, d['xs'])
        assert rmse_rf < rmse_ukf
        assert rmse_rf < 5.0, f"RMSE too large: {rmse_rf}"
        for P in P_rf:
            assert np.all(np.linalg.eigvalsh(P) >= -1e-10)


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
