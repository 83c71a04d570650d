"""Common predict/update contract of all filters."""
from abc import ABC, abstractmethod

import numpy as np

from ..exceptions import DimensionMismatchError


class FilterInterface(ABC):
    """
    Recursive Bayesian filter.

    A filter holds no belief of its own: every call takes a belief and
    returns a new one, so predict and update may be called in any order.
    """

    @abstractmethod
    def predict(self, prior_belief, u=None):
        """Advance the belief through the process model."""

    @abstractmethod
    def update(self, predicted_belief, y):
        """Condition the belief on an observation."""

    @abstractmethod
    def create_belief(self):
        """Default belief for the state dimension of the process model."""

    def run(self, belief, ys, us=None):
        """
        Alternate predict and update over a sequence of observations.

        Parameters
        ----------
        belief : Gaussian or ParticleBelief
            Belief before the first prediction
        ys : ndarray [T, n_y]
            Observations
        us : ndarray [T, n_u], optional
            Control inputs

        Returns
        -------
        m_filt : ndarray [T, n_x]
            Filtered means
        P_filt : ndarray [T, n_x, n_x]
            Filtered covariances
        belief : Gaussian or ParticleBelief
            Final posterior belief
        """
        ys = np.asarray(ys, dtype=float)
        T = ys.shape[0]
        if us is not None and len(us) != T:
            raise DimensionMismatchError(
                f"got {len(us)} inputs for {T} observations")

        n_x = belief.dimension
        m_filt = np.zeros((T, n_x))
        P_filt = np.zeros((T, n_x, n_x))

        for t in range(T):
            belief = self.predict(belief, None if us is None else us[t])
            belief = self.update(belief, ys[t])
            m_filt[t], P_filt[t] = belief.mean, belief.covariance

        return m_filt, P_filt, belief
