"""
Trim cost function

The :class:`Trimmer` maps the trim parameters

    ``[throttle, elevator, alpha, aileron, rudder, beta]``

to a scalar measuring how far the plant is from the steady flight condition described by :class:`Constraints`.
Each evaluation writes the candidate into the plant, derives the attitude and body rates that the flight condition
imposes, advances the plant one time step and sums the weighted squares of the accelerations.

Evaluations mutate the plant: two calls at the same candidate only return the same cost if the plant state they
start from is the same.
"""
from enum import Enum

import numpy as np

import trimlin.utils.algebra as algebra
import trimlin.utils.cout_utils as cout
import trimlin.utils.exceptions as exceptions
from trimlin.linear.src.components import create_component, StateVector
from trimlin.trim.evaluation import EvaluationResult

deg2rad = np.pi / 180.

parameter_names = ['throttle', 'elevator', 'alpha', 'aileron', 'rudder', 'beta']
parameter_units = ['norm', 'norm', 'rad', 'norm', 'norm', 'rad']

default_lower_bound = np.array([0., -1., -20 * deg2rad, -1., -1., -20 * deg2rad])
default_upper_bound = np.array([1., 1., 20 * deg2rad, 1., 1., 20 * deg2rad])
default_initial_step = np.array([0.2, 0.1, 0.1, 0.1, 0.1, 0.1])
default_initial_guess = np.array([0.5, 0., 0., 0., 0., 0.])

# Vt_dot^2, alpha_dot^2 + beta_dot^2, p_dot^2 + q_dot^2 + r_dot^2, |pqr - pqr_target|^2
default_weights = np.array([1., 100., 10., 10.])

# identifiers of the quantities printed by Trimmer.print_state
state_identifiers = ['Vt', 'Alpha', 'Beta', 'Theta', 'Phi', 'Psi', 'P', 'Q', 'R', 'Alt',
                     'ThrottleCmd', 'DeCmd', 'DaCmd', 'DrCmd']


class TrimMode(Enum):
    NON_TURNING = 'non-turning'
    ROLLING = 'rolling'
    PITCHING = 'pitching'
    TURNING = 'turning'


class Constraints:
    """
    Target flight condition

    Args:
        velocity (float): true airspeed (ft/s)
        altitude (float): altitude above sea level (ft)
        gamma (float): flight path angle (rad)
        mode (TrimMode or str): trim mode
        roll_rate (float): commanded roll rate in ``rolling`` mode (rad/s)
        pitch_rate (float): commanded pitch rate in ``pitching`` mode (rad/s)
        yaw_rate (float): turn rate in ``turning`` mode (rad/s). See :meth:`set_turn_from_bank`
        stability_axis_roll (bool): the roll rate is about the stability x axis. Only used in ``rolling`` mode
    """
    def __init__(self, velocity=500., altitude=1000., gamma=0., mode=TrimMode.NON_TURNING,
                 roll_rate=0., pitch_rate=0., yaw_rate=0., stability_axis_roll=False):
        self.velocity = velocity
        self.altitude = altitude
        self.gamma = gamma
        self.mode = TrimMode(mode)
        self.roll_rate = roll_rate
        self.pitch_rate = pitch_rate
        self.yaw_rate = yaw_rate
        self.stability_axis_roll = stability_axis_roll

    def set_turn_from_bank(self, phi, theta, gravity):
        """Sets the turn rate of a coordinated turn at bank angle ``phi`` and pitch attitude ``theta``"""
        self.yaw_rate = algebra.turn_yaw_rate(phi, theta, gravity, self.velocity)
        return self.yaw_rate

    def __repr__(self):
        return ('Constraints(velocity={:g}, altitude={:g}, gamma={:g}, mode={:s}, roll_rate={:g}, '
                'pitch_rate={:g}, yaw_rate={:g}, stability_axis_roll={})').format(
            self.velocity, self.altitude, self.gamma, self.mode.value, self.roll_rate, self.pitch_rate,
            self.yaw_rate, self.stability_axis_roll)


class Trimmer:
    """
    Cost function evaluator

    Args:
        plant (trimlin.utils.plant_interface.BasePlant): plant to trim
        constraints (Constraints): flight condition
        lower_bound (np.ndarray): lower bound of the parameters. Defaults to ``default_lower_bound``
        upper_bound (np.ndarray): upper bound of the parameters. Defaults to ``default_upper_bound``
        weights (np.ndarray): cost weights. Defaults to ``default_weights``
    """
    def __init__(self, plant, constraints, lower_bound=None, upper_bound=None, weights=None):
        self.plant = plant
        self.constraints = constraints

        if lower_bound is None:
            lower_bound = default_lower_bound
        if upper_bound is None:
            upper_bound = default_upper_bound
        if weights is None:
            weights = default_weights
        self.lower_bound = np.array(lower_bound, dtype=float)
        self.upper_bound = np.array(upper_bound, dtype=float)
        self.weights = np.array(weights, dtype=float)
        if self.weights.shape != (4, ):
            raise exceptions.ConfigurationError('Four cost weights are required, got %s' % self.weights)

        self.vt = create_component('Vt', plant)
        self.alpha = create_component('Alpha', plant)
        self.beta = create_component('Beta', plant)
        self.phi = create_component('Phi', plant)
        self.theta = create_component('Theta', plant)
        self.alt = create_component('Alt', plant)
        self.rates = StateVector.from_identifiers(['P', 'Q', 'R'], plant)
        self.controls = StateVector.from_identifiers(['ThrottleCmd', 'DeCmd', 'DaCmd', 'DrCmd'], plant,
                                                     category='control')

        self.target_rates = np.zeros((3, ))
        self.n_evaluations = 0

    def __call__(self, v):
        return self.evaluate(v)

    def evaluate(self, v):
        """
        Cost of the candidate ``v``

        Returns:
            EvaluationResult: failed result with infinite cost if the plant diverges

        Raises:
            exceptions.OutOfBounds: if ``v`` is outside the bounds
        """
        try:
            cost = self.compute_cost(v)
        except exceptions.EvaluationError as e:
            return EvaluationResult.failure(str(e))
        return EvaluationResult.success(cost)

    def compute_cost(self, v):
        v = np.asarray(v, dtype=float)
        self.check_bounds(v)
        self.constrain(v)
        self.plant.run_one_step()
        self.n_evaluations += 1

        vt_dot = self.vt.get_derivative()
        alpha_dot = self.alpha.get_derivative()
        beta_dot = self.beta.get_derivative()
        pqr_dot = self.rates.derivatives()
        pqr = self.rates.snapshot()

        residuals = np.concatenate(([vt_dot, alpha_dot, beta_dot], pqr_dot, pqr))
        if not np.all(np.isfinite(residuals)):
            raise exceptions.EvaluationError('Non-finite plant state after the step at %s' % v)

        cost = (self.weights[0] * vt_dot ** 2 +
                self.weights[1] * (alpha_dot ** 2 + beta_dot ** 2) +
                self.weights[2] * np.sum(pqr_dot ** 2) +
                self.weights[3] * np.sum((pqr - self.target_rates) ** 2))
        return float(cost)

    def check_bounds(self, v):
        if v.shape != self.lower_bound.shape:
            raise ValueError('Expected %g trim parameters, received %s' % (self.lower_bound.shape[0], v.shape))
        if np.any(v < self.lower_bound) or np.any(v > self.upper_bound):
            raise exceptions.OutOfBounds(v, self.lower_bound, self.upper_bound)

    def constrain(self, v):
        """Writes the candidate ``v`` and the attitude and rates it implies into the plant"""
        throttle, elevator, alpha, aileron, rudder, beta = v
        constraints = self.constraints

        self.controls.restore([throttle, elevator, aileron, rudder])
        self.alpha.set(alpha)
        self.beta.set(beta)
        self.vt.set(constraints.velocity)
        self.alt.set(constraints.altitude)

        if constraints.mode is TrimMode.TURNING:
            phi = algebra.coordinated_turn_bank(constraints.yaw_rate, constraints.velocity, self.plant.gravity(),
                                                alpha, beta, constraints.gamma)
        else:
            phi = 0.
        theta = algebra.rate_of_climb_pitch(constraints.gamma, alpha, beta, phi)
        self.phi.set(phi)
        self.theta.set(theta)

        if constraints.mode is TrimMode.ROLLING:
            if constraints.stability_axis_roll:
                pqr = algebra.stability_to_body_rates(alpha, [constraints.roll_rate, 0., 0.])
            else:
                pqr = np.array([constraints.roll_rate, 0., 0.])
        elif constraints.mode is TrimMode.PITCHING:
            pqr = np.array([0., constraints.pitch_rate, 0.])
        elif constraints.mode is TrimMode.TURNING:
            pqr = algebra.euler_rates_to_body([phi, theta, 0.], [0., 0., constraints.yaw_rate])
        else:
            pqr = np.zeros((3, ))

        self.target_rates = np.array(pqr, dtype=float)
        self.rates.restore(self.target_rates)
        self.plant.settle_propulsion()

    def print_solution(self, v):
        """
        Prints the parameters, their cost and the resulting flight state. The plant is left at the solution,
        before any time step.
        """
        v = np.asarray(v, dtype=float)
        result = self.evaluate(v)
        self.constrain(v)

        cout.cout_wrap('\nsolution:', 1)
        for name, unit, value in zip(parameter_names, parameter_units, v):
            cout.cout_wrap('\t{:<10s}{:>16.8g}  {:s}'.format(name, value, unit), 1)
        cout.cout_wrap('\tfinal cost: {:e}'.format(result.cost), 1)
        self.print_state()
        return result.cost

    def print_state(self):
        state = StateVector.from_identifiers(state_identifiers, self.plant)
        cout.cout_wrap('\nstate:', 1)
        cout.cout_wrap(repr(state), 1)
