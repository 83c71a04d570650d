"""Process and observation model contracts and plugins."""
from .interface import (
    ProcessModel,
    AdditiveProcessModel,
    ObservationModel,
    AdditiveObservationModel,
    AdditiveUncorrelatedObservationModel,
    integrate_observation,
    is_additive_obsrv_model,
)
from .linear import LinearStateTransitionModel, LinearGaussianObservationModel
from .composed import ComposedProcessModel
from .range_bearing import ConstantVelocityModel, RangeBearingObservationModel
from .body_tail import UniformObservationModel, BodyTailObservationModel
from .feature import (
    FeatureObservationModel,
    IdentityFeatureModel,
    RobustFeatureObservationModel,
)
from .simulate import simulate

__all__ = [
    # Contracts
    'ProcessModel',
    'AdditiveProcessModel',
    'ObservationModel',
    'AdditiveObservationModel',
    'AdditiveUncorrelatedObservationModel',
    'integrate_observation',
    'is_additive_obsrv_model',
    # Plugins
    'LinearStateTransitionModel',
    'LinearGaussianObservationModel',
    'ComposedProcessModel',
    'ConstantVelocityModel',
    'RangeBearingObservationModel',
    # Robust observation models
    'UniformObservationModel',
    'BodyTailObservationModel',
    'FeatureObservationModel',
    'IdentityFeatureModel',
    'RobustFeatureObservationModel',
    # Simulation
    'simulate',
]
