"""
Finite difference linearisation of a plant

The Jacobians of the plant about a reference point :math:`(x_0, u_0, y_0)` are obtained entry by entry with the
fourth order central stencil

.. math::
    \\frac{\\partial f_i}{\\partial z_j} \\approx \\frac{8(f_i(z_j + h) - f_i(z_j - h)) - (f_i(z_j + 2h) - f_i(z_j - 2h))}
    {12 h}

where each of the four perturbed evaluations restores the complete reference point, perturbs the single component
:math:`z_j`, advances the plant one time step and reads the rows of interest.
"""
import numpy as np

import trimlin.utils.cout_utils as cout
from trimlin.linear.src.libss import LinearModel
from trimlin.utils.format_utils import console_matrices

# relative position and weight of each perturbed run in the stencil
stencil = ((1., 8.), (2., -1.), (-1., -8.), (-2., 1.))


class StateSpace:
    """
    Linearisation engine

    Args:
        plant (trimlin.utils.plant_interface.BasePlant): plant the vectors are bound to
        x (trimlin.linear.src.components.StateVector): states
        u (trimlin.linear.src.components.StateVector): inputs
        y (trimlin.linear.src.components.StateVector): outputs. Defaults to state feedback ``y = x``

    The plant is owned exclusively by the engine while :meth:`linearise` runs.
    """
    def __init__(self, plant, x, u, y=None):
        self.plant = plant
        self.x = x
        self.u = u
        if y is None:
            y = x.as_outputs()
        self.y = y

    def linearise(self, x0=None, u0=None, y0=None, h=1e-5, dt=None):
        """
        Computes A, B, C and D about the reference point.

        Args:
            x0 (np.ndarray): reference state. Current plant state if ``None``
            u0 (np.ndarray): reference input. Current plant input if ``None``
            y0 (np.ndarray): reference output. Current plant output if ``None``
            h (float): finite difference step
            dt (float): plant time step used in the perturbed runs. Defaults to ``h``

        Returns:
            LinearModel: linear model about ``(x0, u0, y0)``. Non-finite entries are returned as they are computed.
        """
        if x0 is None:
            x0 = self.x.snapshot()
        if u0 is None:
            u0 = self.u.snapshot()
        if y0 is None:
            y0 = self.y.snapshot()
        x0 = np.array(x0, dtype=float)
        u0 = np.array(u0, dtype=float)
        y0 = np.array(y0, dtype=float)
        if dt is None:
            dt = h

        saved_dt = self.plant.get_time_step()
        self.plant.set_time_step(dt)
        try:
            A, C = self._jacobian(self.x, x0, x0, u0, y0, h, dt)
            B, D = self._jacobian(self.u, u0, x0, u0, y0, h, dt)
        finally:
            self.plant.set_time_step(saved_dt)
            self.reset(x0, u0, y0)

        return LinearModel(A, B, C, D, x0, u0, y0,
                           state_names=self.x.names, input_names=self.u.names, output_names=self.y.names,
                           state_units=self.x.units, input_units=self.u.units, output_units=self.y.units)

    def reset(self, x0, u0, y0):
        """Writes the complete reference point back into the plant"""
        self.y.restore(y0)
        self.x.restore(x0)
        self.u.restore(u0)

    def _jacobian(self, perturbed, reference, x0, u0, y0, h, dt):
        """Derivative of the state rates and of the outputs with respect to each component of ``perturbed``"""
        n_col = perturbed.size
        dxdot = np.zeros((self.x.size, n_col))
        dy = np.zeros((self.y.size, n_col))

        for j in range(n_col):
            for offset, weight in stencil:
                self.reset(x0, u0, y0)
                perturbed.set(j, reference[j] + offset * h)
                xdot, y = self._step(dt)
                dxdot[:, j] += weight * xdot
                dy[:, j] += weight * y

        return dxdot / (12. * h), dy / (12. * h)

    def _step(self, dt):
        """Advances the plant one step and returns the state rates and outputs"""
        x_set = self.x.snapshot()
        self.plant.run_one_step()
        xdot = np.zeros((self.x.size, ))
        for i, component in enumerate(self.x):
            if component.has_derivative:
                xdot[i] = component.get_derivative()
            else:
                xdot[i] = (component.get() - x_set[i]) / dt
        return xdot, self.y.snapshot()

    def echo(self, model, precision=3, width=10):
        """Prints the vectors and matrices of ``model`` to screen"""
        cout.cout_wrap('\nX:\n' + repr(self.x), 1)
        cout.cout_wrap('U:\n' + repr(self.u), 1)
        cout.cout_wrap('Y:\n' + repr(self.y), 1)
        cout.cout_wrap(console_matrices(model, precision, width))
