"""Range-Bearing tracking models."""
import numpy as np

from ..distributions import matrix_sqrt
from .interface import AdditiveUncorrelatedObservationModel
from .linear import LinearStateTransitionModel


class ConstantVelocityModel(LinearStateTransitionModel):
    """2D constant velocity dynamics.

    State: [x, vx, y, vy] - 2D position and velocity

    Parameters
    ----------
    dt : float
        Time step
    q : float
        Process noise intensity (discrete white noise acceleration)
    """

    def __init__(self, dt=1.0, q=0.1):
        super().__init__(state_dim=4)
        self.dt = dt
        self.q = q

        self.dynamics_matrix = np.array([
            [1, dt, 0, 0],
            [0, 1, 0, 0],
            [0, 0, 1, dt],
            [0, 0, 0, 1]
        ])

        # Rank-deficient per axis, so the noise matrix comes from the
        # eigendecomposition rather than Cholesky
        Q = q**2 * np.array([
            [dt**4/4, dt**3/2, 0, 0],
            [dt**3/2, dt**2, 0, 0],
            [0, 0, dt**4/4, dt**3/2],
            [0, 0, dt**3/2, dt**2]
        ])
        self.noise_matrix = matrix_sqrt(Q)


class RangeBearingObservationModel(AdditiveUncorrelatedObservationModel):
    """Range and bearing of a [x, vx, y, vy] state seen from a fixed sensor.

    Parameters
    ----------
    r_range : float
        Range observation noise std
    r_bearing : float
        Bearing observation noise std (radians)
    sensor_pos : ndarray [2]
        Sensor position [x, y]
    """

    def __init__(self, r_range=0.1, r_bearing=0.05, sensor_pos=None):
        self.r_range = r_range
        self.r_bearing = r_bearing
        self.sensor_pos = sensor_pos if sensor_pos is not None else np.array([0.0, 0.0])

    @property
    def observation_dimension(self):
        return 2

    @property
    def state_dimension(self):
        return 4

    @property
    def noise_matrix_diagonal(self):
        return np.array([self.r_range, self.r_bearing])

    def expected_observation(self, state):
        """Observation function: [range, bearing].

        Parameters
        ----------
        state : ndarray [4]
            State [x, vx, y, vy]

        Returns
        -------
        y : ndarray [2]
            [range, bearing]
        """
        px = state[0] - self.sensor_pos[0]
        py = state[2] - self.sensor_pos[1]
        return np.array([np.sqrt(px**2 + py**2), np.arctan2(py, px)])

    def expected_observations(self, states):
        px = states[:, 0] - self.sensor_pos[0]
        py = states[:, 2] - self.sensor_pos[1]
        return np.column_stack([np.sqrt(px**2 + py**2), np.arctan2(py, px)])
