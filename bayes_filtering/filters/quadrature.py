"""
Sigma-point quadrature.

The unscented transform places 2n+1 deterministic points around a Gaussian
so that their weighted mean and covariance match it exactly. Integrating a
function over those points gives its output moments without linearization.
"""
import numpy as np
from scipy.linalg import block_diag

from ..distributions import Moments, cholesky_lower
from ..exceptions import DimensionMismatchError


class UnscentedTransform:
    """
    Scaled unscented point set.

    Parameters
    ----------
    alpha : float
        Spread of the points around the mean
    beta : float
        Prior knowledge of the distribution (2 is optimal for a Gaussian)
    kappa : float
        Secondary scaling parameter
    """

    def __init__(self, alpha=1.0, beta=2.0, kappa=0.0):
        if alpha <= 0:
            raise ValueError(f"alpha must be positive, got {alpha}")
        self.alpha = alpha
        self.beta = beta
        self.kappa = kappa

    def __repr__(self):
        return (f"UnscentedTransform(alpha={self.alpha}, beta={self.beta}, "
                f"kappa={self.kappa})")

    @staticmethod
    def number_of_points(n):
        return 2 * n + 1

    def weights(self, n):
        """
        Compute UT weights and scaling factor.

        Parameters
        ----------
        n : int
            Dimension of the distribution

        Returns
        -------
        W_m : ndarray [2n+1]
            Mean weights
        W_c : ndarray [2n+1]
            Covariance weights
        gamma : float
            Scaling of the covariance square root columns
        """
        alpha, beta, kappa = self.alpha, self.beta, self.kappa
        lam = alpha**2 * (n + kappa) - n
        if n + lam <= 0:
            raise ValueError(
                f"n + lambda must be positive (n={n}, alpha={alpha}, kappa={kappa})")
        gamma = np.sqrt(n + lam)

        W_m = np.full(2 * n + 1, 1 / (2 * (n + lam)))
        W_c = W_m.copy()
        W_m[0] = lam / (n + lam)
        W_c[0] = lam / (n + lam) + (1 - alpha**2 + beta)

        return W_m, W_c, gamma

    def sigma_points(self, m, P):
        """
        Generate sigma points around (m, P).

        Parameters
        ----------
        m : ndarray [n]
            Mean
        P : ndarray [n, n]
            Covariance, must be positive definite

        Returns
        -------
        ndarray [2n+1, n]
        """
        n = len(m)
        _, _, gamma = self.weights(n)
        sqrt_P = cholesky_lower(P)

        sigma = np.zeros((2 * n + 1, n))
        sigma[0] = m
        sigma[1:n + 1] = m + gamma * sqrt_P.T
        sigma[n + 1:] = m - gamma * sqrt_P.T
        return sigma


class SigmaPointQuadrature:
    """
    Numeric integration of nonlinear functions of Gaussian variables.

    Parameters
    ----------
    transform : UnscentedTransform, optional
        Point set. Defaults to UnscentedTransform().
    """

    def __init__(self, transform=None):
        self.transform = transform if transform is not None else UnscentedTransform()

    def __repr__(self):
        return f"SigmaPointQuadrature({self.transform!r})"

    def integrate_moments(self, f, state_distr, noise_distr=None):
        """
        Moments of y = f(x, w) with x ~ state_distr and w ~ noise_distr.

        x and w are independent; the points are generated from their joint
        block-diagonal Gaussian. Without noise_distr, f is called as f(x).

        Parameters
        ----------
        f : callable
            f(x, w) -> y, or f(x) -> y when noise_distr is None
        state_distr : Gaussian
        noise_distr : Gaussian, optional

        Returns
        -------
        Moments
        """
        n_x = state_distr.dimension
        if noise_distr is None:
            mean, cov = state_distr.mean, state_distr.covariance
        else:
            mean = np.concatenate([state_distr.mean, noise_distr.mean])
            cov = block_diag(state_distr.covariance, noise_distr.covariance)

        W_m, W_c, _ = self.transform.weights(len(mean))
        sigma = self.transform.sigma_points(mean, cov)
        X = sigma[:, :n_x]

        if noise_distr is None:
            Y = np.array([np.atleast_1d(f(x)) for x in X])
        else:
            Y = np.array([np.atleast_1d(f(s[:n_x], s[n_x:])) for s in sigma])
        if Y.ndim != 2:
            raise DimensionMismatchError(
                f"integrated function must return vectors, got shape {Y.shape[1:]}")

        y_mean = W_m @ Y
        dY = Y - y_mean
        dX = X - state_distr.mean
        P_yy = (W_c * dY.T) @ dY
        P_xy = (W_c * dX.T) @ dY
        return Moments(y_mean, P_yy, P_xy)
