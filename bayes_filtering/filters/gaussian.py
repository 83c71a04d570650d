"""Gaussian filter engine with pluggable prediction and update policies."""
import logging

import numpy as np

from ..distributions import Gaussian
from ..exceptions import DimensionMismatchError, check_vector
from .interface import FilterInterface
from .policies import (
    LinearGaussianPrediction, LinearGaussianUpdate, SigmaPointPrediction,
    SigmaPointUpdate, is_linear_obsrv_model, is_linear_process_model
)
from .quadrature import SigmaPointQuadrature

logger = logging.getLogger(__name__)


class GaussianFilter(FilterInterface):
    """
    Gaussian filter: Kalman filter for linear models, sigma-point (unscented)
    filter for nonlinear ones.

    The numeric work is delegated to a prediction and an update policy.
    When not given, closed-form policies are used for linear models and
    sigma-point policies sharing `quadrature` otherwise.

    Parameters
    ----------
    process_model : ProcessModel
    obsrv_model : ObservationModel
    prediction : LinearGaussianPrediction or SigmaPointPrediction, optional
    update : LinearGaussianUpdate or SigmaPointUpdate, optional
    quadrature : SigmaPointQuadrature, optional
        Quadrature for the default sigma-point policies

    Examples
    --------
    >>> kf = GaussianFilter(process_model, obsrv_model)
    >>> belief = kf.create_belief()
    >>> belief = kf.predict(belief, u)
    >>> belief = kf.update(belief, y)
    """

    def __init__(self, process_model, obsrv_model, prediction=None, update=None,
                 quadrature=None):
        obsrv_state_dim = getattr(obsrv_model, 'state_dimension', None)
        if obsrv_state_dim is not None and obsrv_state_dim != process_model.state_dimension:
            raise DimensionMismatchError(
                f"observation model expects state dimension {obsrv_state_dim}, "
                f"process model has {process_model.state_dimension}")

        self._process_model = process_model
        self._obsrv_model = obsrv_model
        self._quadrature = quadrature if quadrature is not None else SigmaPointQuadrature()

        if prediction is None:
            if is_linear_process_model(process_model):
                prediction = LinearGaussianPrediction()
            else:
                prediction = SigmaPointPrediction(self._quadrature)
        if update is None:
            if is_linear_obsrv_model(obsrv_model):
                update = LinearGaussianUpdate()
            else:
                update = SigmaPointUpdate(self._quadrature)

        prediction.check_model(process_model)
        update.check_model(obsrv_model)
        self.prediction = prediction
        self.update_policy = update
        logger.debug("%s using %s and %s", type(self).__name__,
                     type(prediction).__name__, type(update).__name__)

    def __repr__(self):
        return (f"{type(self).__name__}(prediction={type(self.prediction).__name__}, "
                f"update={type(self.update_policy).__name__})")

    @property
    def process_model(self):
        return self._process_model

    @property
    def obsrv_model(self):
        return self._obsrv_model

    @property
    def quadrature(self):
        return self._quadrature

    def create_belief(self):
        return Gaussian(self._process_model.state_dimension)

    def check_belief(self, belief):
        n_x = self._process_model.state_dimension
        if belief.dimension != n_x:
            raise DimensionMismatchError(
                f"belief has dimension {belief.dimension}, model state dimension is {n_x}")

    def predict(self, prior_belief, u=None):
        """
        Prediction step.

        Parameters
        ----------
        prior_belief : Gaussian
        u : ndarray [n_u], optional
            Control input (zeros if omitted)

        Returns
        -------
        Gaussian
            Predicted belief
        """
        self.check_belief(prior_belief)
        n_u = self._process_model.input_dimension
        u = np.zeros(n_u) if u is None else check_vector("input", u, n_u)
        return self.prediction.predict(self._process_model, prior_belief, u)

    def update(self, predicted_belief, y):
        """
        Update step.

        Parameters
        ----------
        predicted_belief : Gaussian
        y : ndarray [n_y]
            Observation

        Returns
        -------
        Gaussian
            Posterior belief
        """
        self.check_belief(predicted_belief)
        y = check_vector("observation", y, self._obsrv_model.observation_dimension)
        return self.update_policy.update(self._obsrv_model, predicted_belief, y)
