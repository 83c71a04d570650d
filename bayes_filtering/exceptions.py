"""Error taxonomy shared by all filters and models."""
import numpy as np


class FilteringError(Exception):
    """Base class for errors raised by filters and models."""


class DimensionMismatchError(FilteringError, ValueError):
    """A vector or matrix does not have the size the model declares."""


class NumericalInstabilityError(FilteringError, np.linalg.LinAlgError):
    """A covariance that must be positive definite is not."""


class ParticleDegeneracyError(FilteringError):
    """All particle weights collapsed to zero."""


def check_vector(name, v, dim):
    """
    Convert v to a float vector and check its length.

    Parameters
    ----------
    name : str
        Name used in the error message
    v : array_like [dim]
    dim : int
        Expected length

    Returns
    -------
    ndarray [dim]
    """
    v = np.asarray(v, dtype=float)
    if v.ndim != 1 or v.shape[0] != dim:
        raise DimensionMismatchError(
            f"{name} must have shape ({dim},), got {v.shape}")
    return v


def check_matrix(name, M, shape):
    """Convert M to a float matrix and check its shape."""
    M = np.asarray(M, dtype=float)
    if M.shape != tuple(shape):
        raise DimensionMismatchError(
            f"{name} must have shape {tuple(shape)}, got {M.shape}")
    return M
