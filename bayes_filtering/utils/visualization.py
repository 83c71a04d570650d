"""
Visualization utilities for beliefs and filter results.

Functions for plotting:
- Covariance ellipses of Gaussian beliefs
- Particle clouds
- 2D trajectories
- Filter estimates with uncertainty bands
"""
import logging
from typing import Optional, Sequence

import matplotlib.pyplot as plt
import numpy as np
from matplotlib.patches import Ellipse

logger = logging.getLogger(__name__)


def plot_covariance_ellipse(
    ax: plt.Axes,
    mean: np.ndarray,
    cov: np.ndarray,
    n_std: float = 2.0,
    **kwargs
) -> Ellipse:
    """
    Plot covariance ellipse on given axis.

    Parameters
    ----------
    ax : matplotlib.axes.Axes
        Axis to plot on
    mean : ndarray [2]
        Center of ellipse (x, y)
    cov : ndarray [2, 2]
        2x2 covariance matrix
    n_std : float
        Number of standard deviations for ellipse size
    **kwargs
        Additional arguments passed to matplotlib.patches.Ellipse

    Returns
    -------
    ellipse : matplotlib.patches.Ellipse
    """
    eigenvalues, eigenvectors = np.linalg.eigh(cov)
    order = eigenvalues.argsort()[::-1]
    eigenvalues = np.clip(eigenvalues[order], 0.0, None)
    eigenvectors = eigenvectors[:, order]

    angle = np.degrees(np.arctan2(eigenvectors[1, 0], eigenvectors[0, 0]))
    width, height = 2 * n_std * np.sqrt(eigenvalues)

    kwargs.setdefault('fill', False)
    ellipse = Ellipse(mean, width, height, angle=angle, **kwargs)
    ax.add_patch(ellipse)
    return ellipse


def plot_gaussian_belief(
    ax: plt.Axes,
    belief,
    dims: Sequence[int] = (0, 1),
    levels: Sequence[float] = (1.0, 2.0),
    color: str = 'blue',
    label: Optional[str] = None,
    **kwargs
) -> list:
    """
    Plot the mean and confidence ellipses of a Gaussian belief.

    Parameters
    ----------
    ax : matplotlib.axes.Axes
    belief : Gaussian
    dims : pair of int
        State components on the x and y axis
    levels : sequence of float
        Standard deviation levels of the ellipses

    Returns
    -------
    list of Ellipse
    """
    idx = np.asarray(dims)
    mean = belief.mean[idx]
    cov = belief.covariance[np.ix_(idx, idx)]
    ax.scatter(mean[0], mean[1], color=color, marker='+', s=80, label=label, zorder=10)
    return [plot_covariance_ellipse(ax, mean, cov, n_std=level, edgecolor=color, **kwargs)
            for level in levels]


def plot_particle_belief(
    ax: plt.Axes,
    belief,
    dims: Sequence[int] = (0, 1),
    color: str = 'blue',
    alpha: float = 0.5,
    max_size: float = 40,
    label: Optional[str] = None,
    **kwargs
):
    """
    Plot a particle belief, marker area proportional to weight.

    Parameters
    ----------
    ax : matplotlib.axes.Axes
    belief : ParticleBelief
    dims : pair of int
    max_size : float
        Marker size of the heaviest particle

    Returns
    -------
    matplotlib.collections.PathCollection
    """
    ix, iy = dims
    sizes = max_size * belief.weights / belief.weights.max()
    return ax.scatter(belief.locations[:, ix], belief.locations[:, iy],
                      s=sizes, c=color, alpha=alpha, label=label, **kwargs)


def plot_trajectory_2d(
    ax: plt.Axes,
    trajectory: np.ndarray,
    pos_indices: Sequence[int] = (0, 1),
    label: Optional[str] = None,
    color: str = 'blue',
    linestyle: str = '-',
    marker_start: str = 'o',
    marker_end: str = 'x',
    **kwargs
) -> None:
    """
    Plot a 2D trajectory with start/end markers.

    Parameters
    ----------
    ax : matplotlib.axes.Axes
    trajectory : ndarray [T, n_x]
    pos_indices : pair of int
        Indices of the x and y position in the state vector
    """
    ix, iy = pos_indices
    xs, ys = trajectory[:, ix], trajectory[:, iy]
    ax.plot(xs, ys, color=color, linestyle=linestyle, label=label, **kwargs)
    if marker_start:
        ax.scatter(xs[0], ys[0], color=color, marker=marker_start, s=60, zorder=10)
    if marker_end:
        ax.scatter(xs[-1], ys[-1], color=color, marker=marker_end, s=60, zorder=10)


def plot_filter_estimates(t, xs_true, m_filt, P_filt, title="Filter", n_sigma=2.0,
                          ys=None, obsrv_indices=None, save_path=None):
    """
    Plot filtered means with uncertainty bands, one panel per state component.

    Parameters
    ----------
    t : ndarray [T]
        Time array
    xs_true : ndarray [T, n_x] or None
        True states
    m_filt : ndarray [T, n_x]
        Filtered means
    P_filt : ndarray [T, n_x, n_x]
        Filtered covariances
    title : str
    n_sigma : float
        Width of the bands in standard deviations
    ys : ndarray [T, n_y], optional
        Observations, drawn on the panels listed in obsrv_indices
    obsrv_indices : sequence of int, optional
        State component observed by each observation component
    save_path : str, optional
        Save and close the figure instead of returning it open

    Returns
    -------
    fig : matplotlib.figure.Figure
    """
    n_x = m_filt.shape[1]
    fig, axes = plt.subplots(n_x, 1, figsize=(12, 3 * n_x), sharex=True, squeeze=False)

    for i in range(n_x):
        ax = axes[i, 0]
        std = np.sqrt(np.clip(P_filt[:, i, i], 0.0, None))
        if xs_true is not None:
            ax.plot(t, xs_true[:, i], 'k-', linewidth=2, label='True State', alpha=0.8)
        ax.plot(t, m_filt[:, i], 'b--', linewidth=1.5, label='Filter Mean')
        ax.fill_between(t, m_filt[:, i] - n_sigma * std, m_filt[:, i] + n_sigma * std,
                        alpha=0.2, color='blue', label=f'+/-{n_sigma:g}sigma')
        if ys is not None and obsrv_indices is not None:
            for j, k in enumerate(obsrv_indices):
                if k == i:
                    ax.plot(t, ys[:, j], 'r.', markersize=4, label='Observation')
        ax.set_ylabel(f'State {i + 1}')
        ax.grid(True, alpha=0.3)
    axes[0, 0].set_title(title)
    axes[0, 0].legend(loc='best', fontsize=8)
    axes[-1, 0].set_xlabel('Time')
    fig.tight_layout()

    if save_path:
        fig.savefig(save_path, dpi=150, bbox_inches='tight')
        logger.info("saved %s", save_path)
        plt.close(fig)
    return fig
