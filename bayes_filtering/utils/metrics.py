"""
Metrics for evaluating filter performance and comparing beliefs.
"""
import numpy as np
from scipy.linalg import cho_factor, cho_solve

from ..exceptions import NumericalInstabilityError


def compute_mse(estimated, true):
    """
    Compute Mean Squared Error.

    Parameters
    ----------
    estimated : ndarray
        Estimated values
    true : ndarray
        True values

    Returns
    -------
    float
        Mean squared error
    """
    return np.mean((np.asarray(estimated) - np.asarray(true))**2)


def compute_rmse(estimated, true):
    """Root Mean Squared Error."""
    return np.sqrt(compute_mse(estimated, true))


def _solve_pd(P, e, name):
    try:
        factor = cho_factor(P)
    except np.linalg.LinAlgError as exc:
        raise NumericalInstabilityError(f"{name} is not positive definite") from exc
    return cho_solve(factor, e)


def _quadratic_forms(errors, covariances, name):
    values = np.zeros(errors.shape[0])
    for t, (e, P) in enumerate(zip(errors, covariances)):
        values[t] = e @ _solve_pd(np.asarray(P), e, f"{name} at step {t}")
    return values


def compute_nees(m_filt, P_filt, xs):
    """
    Compute Normalized Estimation Error Squared (NEES).

    NEES = (x - m)' * P^{-1} * (x - m)

    For a consistent filter, NEES should follow chi-squared(n_x) distribution.

    Parameters
    ----------
    m_filt : ndarray [T, n_x]
        Filtered means
    P_filt : ndarray [T, n_x, n_x]
        Filtered covariances, positive definite
    xs : ndarray [T, n_x]
        True states

    Returns
    -------
    ndarray [T]
        NEES values at each time step

    Raises
    ------
    NumericalInstabilityError
        If a covariance is not positive definite
    """
    return _quadratic_forms(np.asarray(xs) - np.asarray(m_filt), P_filt, "covariance")


def compute_nis(innovations, S_innov):
    """
    Compute Normalized Innovation Squared (NIS).

    NIS = (y - y_hat)' S^{-1} (y - y_hat)

    For a consistent filter, NIS should follow chi-squared(n_y) distribution.

    Parameters
    ----------
    innovations : ndarray [T, n_y]
        Innovation vectors
    S_innov : ndarray [T, n_y, n_y]
        Innovation covariances

    Returns
    -------
    ndarray [T]
    """
    return _quadratic_forms(np.asarray(innovations), S_innov, "innovation covariance")


def compute_symmetry_error(P_filt):
    """
    Compute symmetry error ||P - P'||_F / ||P||_F over all time steps.

    Parameters
    ----------
    P_filt : ndarray [T, n_x, n_x]

    Returns
    -------
    ndarray [T]
        Relative symmetry error at each time step (0 for a zero matrix)
    """
    P_filt = np.asarray(P_filt)
    norms = np.linalg.norm(P_filt, axis=(1, 2))
    asym = np.linalg.norm(P_filt - np.swapaxes(P_filt, 1, 2), axis=(1, 2))
    return np.divide(asym, norms, out=np.zeros_like(norms), where=norms > 0)


def compute_min_eigenvalues(P_filt):
    """
    Minimum eigenvalue of P at each time step.

    Negative values indicate loss of positive semi-definiteness.
    """
    return np.linalg.eigvalsh(np.asarray(P_filt)).min(axis=-1)


def stability_summary(P_filt, mse=None):
    """
    Summary statistics for the numerical health of a covariance sequence.

    Parameters
    ----------
    P_filt : ndarray [T, n_x, n_x]
    mse : float, optional

    Returns
    -------
    dict
        mean_cond, max_cond, max_symmetry_error, min_eigenvalue (and mse)
    """
    cond_nums = np.linalg.cond(np.asarray(P_filt))
    summary = {
        'mean_cond': np.mean(cond_nums),
        'max_cond': np.max(cond_nums),
        'max_symmetry_error': np.max(compute_symmetry_error(P_filt)),
        'min_eigenvalue': np.min(compute_min_eigenvalues(P_filt)),
    }
    if mse is not None:
        summary['mse'] = mse
    return summary


def belief_mahalanobis(reference, other):
    """
    Mahalanobis distance of other's mean under the reference belief.

    Parameters
    ----------
    reference : Gaussian
    other : Gaussian or ParticleBelief

    Returns
    -------
    float
    """
    return float(np.sqrt(reference.mahalanobis_squared(other.mean)))


def moments_are_similar(mean_a, cov_a, mean_b, cov_b, epsilon=0.1):
    """
    Check whether two sets of moments agree.

    The means must be within Mahalanobis distance epsilon under cov_a, and
    the covariances must agree to a relative Frobenius error of epsilon.

    Returns
    -------
    bool
    """
    mean_a, mean_b = np.asarray(mean_a, dtype=float), np.asarray(mean_b, dtype=float)
    cov_a, cov_b = np.asarray(cov_a, dtype=float), np.asarray(cov_b, dtype=float)
    diff = mean_a - mean_b
    mean_dist = np.sqrt(diff @ _solve_pd(cov_a, diff, "reference covariance"))
    cov_err = np.linalg.norm(cov_a - cov_b) / np.linalg.norm(cov_a)
    return bool(mean_dist <= epsilon and cov_err <= epsilon)
