"""
Prediction and update strategies of the Gaussian filter.

A prediction policy maps (process model, prior, input) to a predicted
Gaussian. An update policy computes the predicted observation moments; the
shared Kalman correction then turns them into the posterior.
"""
import numpy as np

from ..distributions import Gaussian
from ..exceptions import DimensionMismatchError
from ..models import AdditiveProcessModel, integrate_observation
from .common import joseph_update, kalman_gain, standard_update, symmetrize
from .quadrature import SigmaPointQuadrature


def _require(model, attributes, policy):
    missing = [a for a in attributes if not _has(model, a)]
    if missing:
        raise TypeError(
            f"{policy} requires a linear model exposing {', '.join(missing)}; "
            f"got {type(model).__name__}")


def _has(model, attribute):
    try:
        getattr(model, attribute)
    except AttributeError:
        return False
    return True


def is_linear_process_model(model):
    return all(_has(model, a) for a in ('dynamics_matrix', 'input_matrix', 'noise_covariance'))


def is_linear_obsrv_model(model):
    return all(_has(model, a) for a in ('sensor_matrix', 'noise_covariance'))


class LinearGaussianPrediction:
    """Closed-form prediction: m' = A m + B u, P' = A P A' + Q."""

    def check_model(self, process_model):
        _require(process_model, ('dynamics_matrix', 'input_matrix', 'noise_covariance'),
                 type(self).__name__)

    def predict(self, process_model, prior, u):
        A = process_model.dynamics_matrix
        B = process_model.input_matrix
        Q = process_model.noise_covariance

        m_pred = A @ prior.mean + B @ u
        P_pred = A @ prior.covariance @ A.T + Q
        return Gaussian(len(m_pred), m_pred, symmetrize(P_pred))


class SigmaPointPrediction:
    """
    Quadrature prediction through a nonlinear process model.

    Parameters
    ----------
    quadrature : SigmaPointQuadrature, optional
    exploit_additive_noise : bool
        For additive models, integrate only the noise-free transition over
        the state and add Q, instead of augmenting the state with the noise.
    """

    def __init__(self, quadrature=None, exploit_additive_noise=True):
        self.quadrature = quadrature if quadrature is not None else SigmaPointQuadrature()
        self.exploit_additive_noise = exploit_additive_noise

    def check_model(self, process_model):
        pass

    def predict(self, process_model, prior, u):
        if self.exploit_additive_noise and isinstance(process_model, AdditiveProcessModel):
            moments = self.quadrature.integrate_moments(
                lambda x: process_model.expected_state(x, u), prior)
            P_pred = moments.covariance + process_model.noise_covariance
        elif process_model.noise_dimension == 0:
            moments = self.quadrature.integrate_moments(
                lambda x: process_model.state(x, np.zeros(0), u), prior)
            P_pred = moments.covariance
        else:
            moments = self.quadrature.integrate_moments(
                lambda x, w: process_model.state(x, w, u),
                prior, process_model.noise_distribution())
            P_pred = moments.covariance
        if moments.mean.shape != prior.mean.shape:
            raise DimensionMismatchError(
                f"process function returned shape {moments.mean.shape}, "
                f"expected {prior.mean.shape}")
        return Gaussian(len(moments.mean), moments.mean, symmetrize(P_pred))


class LinearGaussianUpdate:
    """
    Closed-form observation moments: y_hat = H m, S = H P H' + R, C = P H'.

    Parameters
    ----------
    joseph : bool
        Use Joseph stabilized covariance update (default: True)
    """

    def __init__(self, joseph=True):
        self.joseph = joseph

    def check_model(self, obsrv_model):
        _require(obsrv_model, ('sensor_matrix', 'noise_covariance'), type(self).__name__)

    def update(self, obsrv_model, predicted, y):
        H = obsrv_model.sensor_matrix
        R = obsrv_model.noise_covariance
        m_pred, P_pred = predicted.mean, predicted.covariance

        S = H @ P_pred @ H.T + R
        K = kalman_gain(P_pred @ H.T, S)
        m = m_pred + K @ (y - H @ m_pred)
        P = joseph_update(P_pred, K, H, R) if self.joseph else standard_update(P_pred, K, S)
        return Gaussian(len(m), m, symmetrize(P))


class SigmaPointUpdate:
    """
    Quadrature observation moments through a nonlinear observation model.

    Parameters
    ----------
    quadrature : SigmaPointQuadrature, optional
    exploit_additive_noise : bool
        For additive models, integrate only the noise-free observation over
        the state and add R, instead of augmenting the state with the noise.
    """

    def __init__(self, quadrature=None, exploit_additive_noise=True):
        self.quadrature = quadrature if quadrature is not None else SigmaPointQuadrature()
        self.exploit_additive_noise = exploit_additive_noise

    def check_model(self, obsrv_model):
        pass

    def observation_moments(self, obsrv_model, predicted):
        """Mean, covariance and state cross-covariance of the predicted observation."""
        return integrate_observation(self.quadrature, obsrv_model, predicted,
                                     self.exploit_additive_noise)

    def update(self, obsrv_model, predicted, y):
        moments = self.observation_moments(obsrv_model, predicted)
        if moments.mean.shape != y.shape:
            raise DimensionMismatchError(
                f"observation function returned shape {moments.mean.shape}, "
                f"expected {y.shape}")
        S, C = moments.covariance, moments.cross_covariance

        K = kalman_gain(C, S)
        m = predicted.mean + K @ (y - moments.mean)
        P = standard_update(predicted.covariance, K, S)
        return Gaussian(len(m), m, symmetrize(P))
