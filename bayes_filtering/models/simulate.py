"""Simulation of state and observation trajectories from model plugins."""
import numpy as np

from ..exceptions import check_vector


def simulate(process_model, obsrv_model, x0, T, rng, inputs=None):
    """
    Simulate a state space model driven by standard normal noise.

    Parameters
    ----------
    process_model : ProcessModel
    obsrv_model : ObservationModel
    x0 : ndarray [n_x]
        Initial state (before the first transition)
    T : int
        Number of time steps
    rng : numpy.random.Generator
        Random number generator
    inputs : ndarray [T, n_u], optional
        Control inputs. Zeros if omitted.

    Returns
    -------
    xs : ndarray [T, n_x]
        Latent states
    ys : ndarray [T, n_y]
        Observations
    """
    n_x = process_model.state_dimension
    n_y = obsrv_model.observation_dimension
    n_w, n_v = process_model.noise_dimension, obsrv_model.noise_dimension

    x = check_vector("x0", x0, n_x)
    if inputs is None:
        inputs = np.zeros((T, process_model.input_dimension))

    xs = np.zeros((T, n_x))
    ys = np.zeros((T, n_y))

    for t in range(T):
        x = process_model.state(x, rng.standard_normal(n_w), inputs[t])
        y = obsrv_model.observation(x, rng.standard_normal(n_v))
        xs[t], ys[t] = x, y

    return xs, ys
