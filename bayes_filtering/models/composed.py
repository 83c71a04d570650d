"""Composition of independent process models into one joint model."""
import numpy as np
from scipy.linalg import block_diag

from .interface import ProcessModel


def _offsets(sizes):
    return np.concatenate([[0], np.cumsum(sizes)]).astype(int)


class ComposedProcessModel(ProcessModel):
    """Stack of independent process models.

    The joint state, noise and input vectors are the concatenations of the
    component vectors, in the order the models are given. Each component
    only sees its own slices.

    When every component is linear (exposes dynamics, input and noise
    matrices) the composed model exposes the block-diagonal matrices too, so
    it can be used with the closed-form prediction.

    Parameters
    ----------
    models : list of ProcessModel
    """

    def __init__(self, models):
        if not models:
            raise ValueError("at least one process model is required")
        self.models = list(models)
        self._x_off = _offsets([m.state_dimension for m in self.models])
        self._w_off = _offsets([m.noise_dimension for m in self.models])
        self._u_off = _offsets([m.input_dimension for m in self.models])

    @property
    def state_dimension(self):
        return int(self._x_off[-1])

    @property
    def noise_dimension(self):
        return int(self._w_off[-1])

    @property
    def input_dimension(self):
        return int(self._u_off[-1])

    def _slices(self, i):
        return (slice(self._x_off[i], self._x_off[i + 1]),
                slice(self._w_off[i], self._w_off[i + 1]),
                slice(self._u_off[i], self._u_off[i + 1]))

    def state(self, prev_state, noise, u):
        x = np.empty(self.state_dimension)
        for i, model in enumerate(self.models):
            sx, sw, su = self._slices(i)
            x[sx] = model.state(prev_state[sx], noise[sw], u[su])
        return x

    def states(self, prev_states, noises, u):
        xs = np.empty((prev_states.shape[0], self.state_dimension))
        for i, model in enumerate(self.models):
            sx, sw, su = self._slices(i)
            xs[:, sx] = model.states(prev_states[:, sx], noises[:, sw], u[su])
        return xs

    @property
    def is_linear(self):
        return all(hasattr(m, 'dynamics_matrix') and hasattr(m, 'input_matrix')
                   and hasattr(m, 'noise_matrix') for m in self.models)

    def _block(self, attr):
        if not self.is_linear:
            raise AttributeError(
                f"{attr} is only defined when all component models are linear")
        return block_diag(*[getattr(m, attr) for m in self.models])

    @property
    def dynamics_matrix(self):
        return self._block('dynamics_matrix')

    @property
    def input_matrix(self):
        return self._block('input_matrix')

    @property
    def noise_matrix(self):
        return self._block('noise_matrix')

    @property
    def noise_covariance(self):
        N = self.noise_matrix
        return N @ N.T
