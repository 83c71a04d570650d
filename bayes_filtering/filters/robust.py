"""Outlier-robust Gaussian filter through a feature observation model."""
import logging

from ..exceptions import check_vector
from ..models import (
    FeatureObservationModel, RobustFeatureObservationModel, integrate_observation
)
from .gaussian import GaussianFilter
from .interface import FilterInterface

logger = logging.getLogger(__name__)


class RobustGaussianFilter(FilterInterface):
    """
    Gaussian filter acting on a robust feature of the raw observation.

    Each update first integrates the predicted raw observation (the body
    distribution) with sigma-point quadrature, calibrates the feature model
    with it, maps the raw observation to feature space and then runs the
    ordinary Gaussian update of the feature. The feature moments of the
    robust model are a body/tail mixture, so an outlier (body weight near
    zero) leaves the estimate where it was.

    Parameters
    ----------
    process_model : ProcessModel
    obsrv_model : ObservationModel or FeatureObservationModel
        Raw observation model, wrapped into a RobustFeatureObservationModel
        unless it already is a feature model
    tail_model : ObservationModel, optional
        Outlier model, required when obsrv_model is a raw model
    tail_weight : float
        Prior probability of an observation coming from the tail
    prediction, update : policy, optional
        Policies of the wrapped GaussianFilter
    quadrature : SigmaPointQuadrature, optional

    Examples
    --------
    >>> tail = UniformObservationModel(low=[-10.0], high=[10.0])
    >>> rf = RobustGaussianFilter(process_model, obsrv_model, tail, tail_weight=0.1)
    >>> belief = rf.update(rf.predict(belief), y)
    """

    def __init__(self, process_model, obsrv_model, tail_model=None, tail_weight=0.1,
                 prediction=None, update=None, quadrature=None):
        if isinstance(obsrv_model, FeatureObservationModel):
            feature_model = obsrv_model
        else:
            if tail_model is None:
                raise ValueError("a tail model is required to make a raw observation model robust")
            feature_model = RobustFeatureObservationModel(obsrv_model, tail_model, tail_weight)

        self._feature_model = feature_model
        self._filter = GaussianFilter(process_model, feature_model, prediction, update,
                                      quadrature)
        logger.debug("RobustGaussianFilter wrapping %s with %s",
                     type(feature_model.embedded_obsrv_model).__name__,
                     type(feature_model).__name__)

    def __repr__(self):
        return f"RobustGaussianFilter({self._filter!r})"

    @property
    def process_model(self):
        return self._filter.process_model

    @property
    def obsrv_model(self):
        """Raw observation model."""
        return self._feature_model.embedded_obsrv_model

    @property
    def feature_obsrv_model(self):
        return self._feature_model

    @property
    def gaussian_filter(self):
        return self._filter

    @property
    def quadrature(self):
        return self._filter.quadrature

    def create_belief(self):
        return self._filter.create_belief()

    def predict(self, prior_belief, u=None):
        return self._filter.predict(prior_belief, u)

    def body_moments(self, predicted_belief):
        """Moments of the raw observation under the predicted belief."""
        return integrate_observation(self.quadrature, self.obsrv_model, predicted_belief)

    def update(self, predicted_belief, y):
        """
        Update with a raw observation.

        Parameters
        ----------
        predicted_belief : Gaussian
        y : ndarray [n_y]
            Raw observation

        Returns
        -------
        Gaussian
        """
        self._filter.check_belief(predicted_belief)
        y = check_vector("observation", y, self.obsrv_model.observation_dimension)

        body = self.body_moments(predicted_belief).to_gaussian()
        self._feature_model.parameters(body, predicted_belief.mean)
        feature = self._feature_model.feature_observation(y)
        return self._filter.update(predicted_belief, feature)
