"""Unit tests for visualization utilities."""

import matplotlib
matplotlib.use("Agg")

import matplotlib.pyplot as plt
import numpy as np
import pytest

import sys
import os
sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..', '..', '..'))

from bayes_filtering.distributions import Gaussian, ParticleBelief
from bayes_filtering.utils.visualization import (
    plot_covariance_ellipse, plot_filter_estimates, plot_gaussian_belief,
    plot_particle_belief, plot_trajectory_2d
)


@pytest.fixture
def ax():
    fig, ax = plt.subplots()
    yield ax
    plt.close(fig)


class TestPlotCovarianceEllipse:
    """Tests for covariance ellipses."""

    def test_axis_lengths(self, ax):
        """Ellipse axes are 2 n_std sqrt(eigenvalue)."""
        ellipse = plot_covariance_ellipse(ax, np.zeros(2), np.diag([4.0, 1.0]), n_std=1.0)

        assert ellipse.width == pytest.approx(4.0)
        assert ellipse.height == pytest.approx(2.0)
        assert ellipse in ax.patches

    def test_rotation(self, ax):
        """Correlated covariance gives a rotated ellipse."""
        ellipse = plot_covariance_ellipse(ax, np.zeros(2), np.array([[2.0, 1.0], [1.0, 2.0]]))
        assert ellipse.angle % 180 == pytest.approx(45.0)


class TestBeliefPlots:
    """Tests for belief plots."""

    def test_gaussian_belief_levels(self, ax):
        """One ellipse per level on the selected dimensions."""
        belief = Gaussian(4, np.arange(4.0), np.eye(4))
        ellipses = plot_gaussian_belief(ax, belief, dims=(0, 2), levels=(1.0, 2.0, 3.0))

        assert len(ellipses) == 3
        np.testing.assert_allclose(ellipses[0].center, [0.0, 2.0])

    def test_particle_belief(self, ax, rng):
        """All particles are drawn."""
        belief = ParticleBelief(rng.standard_normal((50, 2)), rng.dirichlet(np.ones(50)))
        collection = plot_particle_belief(ax, belief)
        assert collection.get_offsets().shape == (50, 2)


class TestTrajectoryPlots:
    """Tests for trajectory and estimate plots."""

    def test_trajectory_2d(self, ax):
        """Line plus start and end markers."""
        trajectory = np.column_stack([np.arange(5.0), np.zeros(5), np.arange(5.0)**2, np.zeros(5)])
        plot_trajectory_2d(ax, trajectory, pos_indices=(0, 2), label='True')

        line = ax.get_lines()[0]
        np.testing.assert_allclose(line.get_ydata(), np.arange(5.0)**2)
        assert len(ax.collections) == 2

    def test_filter_estimates(self, rng, tmp_path):
        """One panel per state component, saved to file when requested."""
        T = 20
        m_filt = rng.standard_normal((T, 3))
        P_filt = np.repeat(np.eye(3)[np.newaxis], T, axis=0)
        path = tmp_path / "estimates.png"

        fig = plot_filter_estimates(np.arange(T), m_filt + 0.1, m_filt, P_filt,
                                    ys=m_filt[:, :1], obsrv_indices=[0],
                                    save_path=str(path))

        assert len(fig.axes) == 3
        assert path.exists()


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
