"""Bootstrap particle filter engine."""
import logging

import numpy as np
from scipy.special import logsumexp

from ..distributions import (
    Gaussian, ParticleBelief, multinomial_resample, systematic_resample
)
from ..exceptions import DimensionMismatchError, ParticleDegeneracyError, check_vector
from ..models import ObservationModel
from .interface import FilterInterface

logger = logging.getLogger(__name__)

__all__ = ['ParticleFilter', 'systematic_resample', 'multinomial_resample']


class ParticleFilter(FilterInterface):
    """
    Bootstrap Particle Filter (BPF).

    Particles are propagated through the process model with one noise draw
    each and reweighted by the observation likelihood. Sequential Importance
    Sampling (SIS) is obtained with resample_threshold=0.0.

    Parameters
    ----------
    process_model : ProcessModel
    obsrv_model : ObservationModel
        Must implement log_probability(observation, states)
    n_particles : int
        Number of particles for create_belief and from_gaussian
    resample_threshold : float
        Resample when ESS < resample_threshold * N
    resampler : callable
        resampler(w, rng) -> indices [N]
    rng : np.random.Generator, optional

    Attributes
    ----------
    last_ess : float or None
        Effective sample size computed by the last update
    last_resampled : bool
        Whether the last update resampled
    """

    def __init__(self, process_model, obsrv_model, n_particles=1000,
                 resample_threshold=0.5, resampler=systematic_resample, rng=None):
        if n_particles < 1:
            raise ValueError(f"n_particles must be positive, got {n_particles}")
        if not 0.0 <= resample_threshold <= 1.0:
            raise ValueError(
                f"resample_threshold must lie in [0, 1], got {resample_threshold}")
        obsrv_state_dim = getattr(obsrv_model, 'state_dimension', None)
        if obsrv_state_dim is not None and obsrv_state_dim != process_model.state_dimension:
            raise DimensionMismatchError(
                f"observation model expects state dimension {obsrv_state_dim}, "
                f"process model has {process_model.state_dimension}")
        likelihood = getattr(type(obsrv_model), 'log_probability', None)
        if likelihood is None or likelihood is ObservationModel.log_probability:
            raise TypeError(
                f"ParticleFilter requires an observation model with log_probability(); "
                f"{type(obsrv_model).__name__} does not provide one")

        self.process_model = process_model
        self.obsrv_model = obsrv_model
        self.n_particles = n_particles
        self.resample_threshold = resample_threshold
        self.resampler = resampler
        self.rng = rng if rng is not None else np.random.default_rng()

        self.last_ess = None
        self.last_resampled = False

    def __repr__(self):
        return (f"ParticleFilter(n_particles={self.n_particles}, "
                f"resample_threshold={self.resample_threshold})")

    def create_belief(self):
        return self.from_gaussian(Gaussian(self.process_model.state_dimension))

    def from_gaussian(self, gaussian):
        """Seed n_particles equally weighted samples from a Gaussian belief."""
        if gaussian.dimension != self.process_model.state_dimension:
            raise DimensionMismatchError(
                f"belief has dimension {gaussian.dimension}, "
                f"model state dimension is {self.process_model.state_dimension}")
        return ParticleBelief.from_distribution(gaussian, self.n_particles, self.rng)

    def check_belief(self, belief):
        n_x = self.process_model.state_dimension
        if belief.dimension != n_x:
            raise DimensionMismatchError(
                f"belief has dimension {belief.dimension}, model state dimension is {n_x}")

    def predict(self, prior_belief, u=None):
        """
        Propagate every particle with its own process noise draw.

        Parameters
        ----------
        prior_belief : ParticleBelief
        u : ndarray [n_u], optional

        Returns
        -------
        ParticleBelief
            Moved particles, weights unchanged
        """
        self.check_belief(prior_belief)
        n_u = self.process_model.input_dimension
        u = np.zeros(n_u) if u is None else check_vector("input", u, n_u)

        N = len(prior_belief)
        noises = self.process_model.noise_distribution().sample(self.rng, size=N)
        locations = np.asarray(
            self.process_model.states(prior_belief.locations, noises, u), dtype=float)
        if locations.shape != prior_belief.locations.shape:
            raise DimensionMismatchError(
                f"process model returned particles of shape {locations.shape}, "
                f"expected {prior_belief.locations.shape}")
        return ParticleBelief(locations, prior_belief.weights.copy())

    def update(self, predicted_belief, y):
        """
        Reweight particles by p(y | x_i), resampling when the ESS drops.

        Parameters
        ----------
        predicted_belief : ParticleBelief
        y : ndarray [n_y]

        Returns
        -------
        ParticleBelief
        """
        self.check_belief(predicted_belief)
        y = check_vector("observation", y, self.obsrv_model.observation_dimension)

        log_lik = np.asarray(
            self.obsrv_model.log_probability(y, predicted_belief.locations), dtype=float)
        N = len(predicted_belief)
        if log_lik.shape != (N,):
            raise DimensionMismatchError(
                f"log_probability returned shape {log_lik.shape}, expected ({N},)")

        with np.errstate(divide='ignore'):
            log_w = np.log(predicted_belief.weights) + log_lik
        log_w[np.isnan(log_w)] = -np.inf
        if not np.any(np.isfinite(log_w)):
            raise ParticleDegeneracyError(
                "all particle weights vanished; the observation is impossible "
                "under every particle")

        w = np.exp(log_w - logsumexp(log_w))
        belief = ParticleBelief(predicted_belief.locations.copy(), w)

        ess = belief.effective_sample_size()
        self.last_ess = ess
        self.last_resampled = ess < self.resample_threshold * N
        if ess < 1.0 + 1e-6 and N > 1:
            logger.warning("particle weights collapsed onto a single particle (ESS %.3f)", ess)
        if self.last_resampled:
            logger.debug("ESS %.1f below %.1f, resampling %d particles",
                         ess, self.resample_threshold * N, N)
            belief = belief.resample(self.rng, self.resampler)
        return belief
