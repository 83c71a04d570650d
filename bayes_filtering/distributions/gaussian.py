"""Multivariate Gaussian used both as belief and as noise distribution."""
import numpy as np
from scipy import linalg as sla

from ..exceptions import (
    DimensionMismatchError, NumericalInstabilityError, check_matrix, check_vector
)


def cholesky_lower(P, name="covariance"):
    """
    Lower Cholesky factor L with L @ L.T = P.

    Raises NumericalInstabilityError when P is not positive definite.
    """
    if P.size == 0:
        return np.zeros_like(P)
    try:
        return sla.cholesky(P, lower=True)
    except np.linalg.LinAlgError as exc:
        raise NumericalInstabilityError(
            f"{name} is not positive definite") from exc


def matrix_sqrt(P, tol=1e-10):
    """
    Square root S of a positive semi-definite matrix, S @ S.T = P.

    Uses Cholesky when P is positive definite and the symmetric
    eigendecomposition when P is only semi-definite.

    Parameters
    ----------
    P : ndarray [n, n]
        Symmetric positive semi-definite matrix
    tol : float
        Relative tolerance on negative eigenvalues

    Returns
    -------
    ndarray [n, n]
    """
    if P.size == 0:
        return np.zeros_like(P)
    try:
        return sla.cholesky(P, lower=True)
    except np.linalg.LinAlgError:
        pass

    eigvals, eigvecs = np.linalg.eigh(P)
    scale = max(np.max(np.abs(eigvals)), 1.0) if eigvals.size else 1.0
    if np.any(eigvals < -tol * scale):
        raise NumericalInstabilityError(
            f"matrix is not positive semi-definite (min eigenvalue {eigvals.min():.3e})")
    return eigvecs @ np.diag(np.sqrt(np.clip(eigvals, 0.0, None)))


class Gaussian:
    """Gaussian distribution N(mean, covariance).

    Parameters
    ----------
    dimension : int, optional
        Dimension n. Required when mean is not given.
    mean : ndarray [n], optional
        Defaults to zeros
    covariance : ndarray [n, n], optional
        Defaults to identity

    Notes
    -----
    The precision matrix and the Cholesky factor are computed on demand and
    cached until mean or covariance is reassigned.
    """

    def __init__(self, dimension=None, mean=None, covariance=None):
        if dimension is None:
            if mean is None:
                raise ValueError("either dimension or mean must be given")
            dimension = np.asarray(mean).shape[0]
        if dimension < 0:
            raise ValueError(f"dimension must be non-negative, got {dimension}")

        self._dimension = int(dimension)
        self._mean = np.zeros(self._dimension)
        self._covariance = np.eye(self._dimension)
        self._precision = None
        self._sqrt = None

        if mean is not None:
            self.mean = mean
        if covariance is not None:
            self.covariance = covariance

    def __repr__(self):
        return f"Gaussian(dimension={self._dimension}, mean={self._mean!r})"

    @property
    def dimension(self):
        return self._dimension

    @property
    def mean(self):
        return self._mean

    @mean.setter
    def mean(self, value):
        self._mean = check_vector("mean", value, self._dimension).copy()

    @property
    def covariance(self):
        return self._covariance

    @covariance.setter
    def covariance(self, value):
        n = self._dimension
        self._covariance = check_matrix("covariance", value, (n, n)).copy()
        self._precision = None
        self._sqrt = None

    @property
    def precision(self):
        """Inverse covariance, computed from the Cholesky factor."""
        if self._precision is None:
            L = self.square_root()
            self._precision = sla.cho_solve((L, True), np.eye(self._dimension))
        return self._precision

    def set_standard(self):
        """Reset to zero mean and identity covariance."""
        self.mean = np.zeros(self._dimension)
        self.covariance = np.eye(self._dimension)

    def square_root(self):
        """Lower Cholesky factor of the covariance."""
        if self._sqrt is None:
            self._sqrt = cholesky_lower(self._covariance)
        return self._sqrt

    def copy(self):
        return Gaussian(self._dimension, self._mean, self._covariance)

    def sample(self, rng, size=None):
        """
        Draw samples.

        Parameters
        ----------
        rng : numpy.random.Generator
        size : int, optional
            Number of samples. None returns a single vector.

        Returns
        -------
        ndarray [n] or [size, n]
        """
        S = matrix_sqrt(self._covariance)
        if size is None:
            return self._mean + S @ rng.standard_normal(self._dimension)
        z = rng.standard_normal((size, self._dimension))
        return self._mean + z @ S.T

    def mahalanobis_squared(self, x):
        """Squared Mahalanobis distance of one point [n] or a batch [K, n]."""
        x = np.asarray(x, dtype=float)
        if x.shape[-1] != self._dimension:
            raise DimensionMismatchError(
                f"point must have trailing dimension {self._dimension}, got {x.shape}")
        diff = x - self._mean
        L = self.square_root()
        if diff.ndim == 1:
            z = sla.solve_triangular(L, diff, lower=True)
            return float(z @ z)
        z = sla.solve_triangular(L, diff.T, lower=True)
        return np.sum(z**2, axis=0)

    def log_probability(self, x):
        """Log density of one point [n] or a batch [K, n]."""
        L = self.square_root()
        log_det = 2.0 * np.sum(np.log(np.diag(L)))
        maha_2 = self.mahalanobis_squared(x)
        return -0.5 * (self._dimension * np.log(2 * np.pi) + log_det + maha_2)

    def probability(self, x):
        return np.exp(self.log_probability(x))
