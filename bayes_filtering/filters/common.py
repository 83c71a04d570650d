"""Common utilities for Kalman filter variants."""
import numpy as np
from scipy.linalg import cho_factor as cholesky_factor, cho_solve as cholesky_solve

from ..exceptions import NumericalInstabilityError


def joseph_update(P_pred, K, H, R):
    """
    Compute Joseph-stabilized covariance update.

    Parameters
    ----------
    P_pred : ndarray [n_x, n_x]
        Predicted covariance
    K : ndarray [n_x, n_y]
        Kalman gain
    H : ndarray [n_y, n_x]
        Observation matrix
    R : ndarray [n_y, n_y]
        Observation noise covariance

    Returns
    -------
    ndarray [n_x, n_x]
        Updated covariance
    """
    n_x = P_pred.shape[0]
    I = np.eye(n_x)
    IKH = I - K @ H
    return IKH @ P_pred @ IKH.T + K @ R @ K.T


def standard_update(P_pred, K, S):
    """
    Compute standard covariance update: P = P_pred - K S K'.

    Parameters
    ----------
    P_pred : ndarray [n_x, n_x]
        Predicted covariance
    K : ndarray [n_x, n_y]
        Kalman gain
    S : ndarray [n_y, n_y]
        Innovation covariance

    Returns
    -------
    ndarray [n_x, n_x]
        Updated covariance
    """
    return P_pred - K @ S @ K.T


def kalman_gain(C, S):
    """
    Kalman gain K = C S^{-1} through a Cholesky solve.

    Parameters
    ----------
    C : ndarray [n_x, n_y]
        State/observation cross-covariance
    S : ndarray [n_y, n_y]
        Innovation covariance

    Returns
    -------
    ndarray [n_x, n_y]
    """
    if not np.all(np.isfinite(S)):
        raise NumericalInstabilityError("innovation covariance contains NaN or Inf")
    try:
        L, lower = cholesky_factor(S)
    except np.linalg.LinAlgError as exc:
        raise NumericalInstabilityError(
            "innovation covariance is not positive definite") from exc
    return cholesky_solve((L, lower), C.T).T


def symmetrize(P):
    return 0.5 * (P + P.T)
