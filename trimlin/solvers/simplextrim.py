import os

import numpy as np

import trimlin.utils.cout_utils as cout
import trimlin.utils.exceptions as exceptions
import trimlin.utils.settings as settings_utils
from trimlin.utils.solver_interface import solver, BaseSolver
import trimlin.trim.trimmer as trimmer_module
from trimlin.trim.trimmer import Trimmer, Constraints, TrimMode
from trimlin.trim.neldermead import NelderMead, SolverStatus, bounds_policies


@solver
class SimplexTrim(BaseSolver):
    """
    Finds the trim condition of ``data.plant`` with the Nelder-Mead simplex method.

    The trim parameters are ``[throttle, elevator, alpha, aileron, rudder, beta]``. Throttle and control surface
    commands are normalised and the aerodynamic angles are in radians.

    The flight condition is given by the velocity, altitude and flight path angle and by the trim ``mode``:

        * ``non-turning``: steady straight flight.
        * ``rolling``: steady roll at ``roll_rate``, about the stability axis if ``stability_axis_roll``.
        * ``pitching``: pull-up at ``pitch_rate``.
        * ``turning``: coordinated turn. The turn rate follows from ``bank_angle``, the pitch attitude of the plant
          and gravity.

    Once a terminal state is reached the solution is loaded into the plant and stored in ``data.trim_solution``.
    A run that hits ``max_iter`` still provides its best point, with a warning.
    """
    solver_id = 'SimplexTrim'
    solver_classification = 'Flight dynamics'

    settings_types = dict()
    settings_default = dict()
    settings_description = dict()
    settings_options = dict()

    settings_types['print_info'] = 'bool'
    settings_default['print_info'] = True
    settings_description['print_info'] = 'Print info to screen'

    settings_types['velocity'] = 'float'
    settings_default['velocity'] = 500.
    settings_description['velocity'] = 'True airspeed (ft/s)'

    settings_types['altitude'] = 'float'
    settings_default['altitude'] = 1000.
    settings_description['altitude'] = 'Altitude above sea level (ft)'

    settings_types['gamma'] = 'float'
    settings_default['gamma'] = 0.
    settings_description['gamma'] = 'Flight path angle (deg)'

    settings_types['mode'] = 'str'
    settings_default['mode'] = 'non-turning'
    settings_description['mode'] = 'Trim mode'
    settings_options['mode'] = [mode.value for mode in TrimMode]

    settings_types['roll_rate'] = 'float'
    settings_default['roll_rate'] = 0.
    settings_description['roll_rate'] = 'Roll rate in ``rolling`` mode (rad/s)'

    settings_types['stability_axis_roll'] = 'bool'
    settings_default['stability_axis_roll'] = False
    settings_description['stability_axis_roll'] = 'Roll about the stability x axis in ``rolling`` mode'

    settings_types['pitch_rate'] = 'float'
    settings_default['pitch_rate'] = 0.
    settings_description['pitch_rate'] = 'Pitch rate in ``pitching`` mode (rad/s)'

    settings_types['bank_angle'] = 'float'
    settings_default['bank_angle'] = 0.
    settings_description['bank_angle'] = 'Bank angle used to derive the turn rate in ``turning`` mode (deg)'

    settings_types['initial_guess'] = 'list(float)'
    settings_default['initial_guess'] = trimmer_module.default_initial_guess.tolist()
    settings_description['initial_guess'] = 'Initial trim parameters'

    settings_types['lower_bound'] = 'list(float)'
    settings_default['lower_bound'] = trimmer_module.default_lower_bound.tolist()
    settings_description['lower_bound'] = 'Lower bound of the trim parameters'

    settings_types['upper_bound'] = 'list(float)'
    settings_default['upper_bound'] = trimmer_module.default_upper_bound.tolist()
    settings_description['upper_bound'] = 'Upper bound of the trim parameters'

    settings_types['initial_step'] = 'list(float)'
    settings_default['initial_step'] = trimmer_module.default_initial_step.tolist()
    settings_description['initial_step'] = 'Size of the initial simplex along each parameter'

    settings_types['cost_weights'] = 'list(float)'
    settings_default['cost_weights'] = trimmer_module.default_weights.tolist()
    settings_description['cost_weights'] = 'Weights of the airspeed rate, aerodynamic angle rates, angular ' \
                                            'accelerations and body rate errors in the cost'

    settings_types['max_iter'] = 'int'
    settings_default['max_iter'] = 2000
    settings_description['max_iter'] = 'Maximum number of simplex iterations'

    settings_types['rtol'] = 'float'
    settings_default['rtol'] = float(10 * np.finfo(np.float32).eps)
    settings_description['rtol'] = 'Relative tolerance on the spread of the vertex costs'

    settings_types['abstol'] = 'float'
    settings_default['abstol'] = float(10 * np.finfo(np.float64).eps)
    settings_description['abstol'] = 'Absolute tolerance on the spread of the vertex costs'

    settings_types['speed'] = 'float'
    settings_default['speed'] = 2.
    settings_description['speed'] = 'Expansion factor of the simplex. Must be greater than 1'

    settings_types['random'] = 'float'
    settings_default['random'] = 0.
    settings_description['random'] = 'Scale of the random perturbation of the costs. Zero for repeatable runs'

    settings_types['random_seed'] = 'int'
    settings_default['random_seed'] = -1
    settings_description['random_seed'] = 'Seed of the cost perturbation. Negative for a random seed'

    settings_types['bounds_policy'] = 'str'
    settings_default['bounds_policy'] = 'penalise'
    settings_description['bounds_policy'] = 'Treatment of candidates outside the bounds'
    settings_options['bounds_policy'] = bounds_policies

    settings_types['max_invalid_evaluations'] = 'int'
    settings_default['max_invalid_evaluations'] = 100
    settings_description['max_invalid_evaluations'] = 'Consecutive non-finite evaluations before failing'

    settings_types['show_converge_status'] = 'bool'
    settings_default['show_converge_status'] = False
    settings_description['show_converge_status'] = 'Print the cost of the best and worst vertices every iteration'

    settings_types['show_simplex'] = 'bool'
    settings_default['show_simplex'] = False
    settings_description['show_simplex'] = 'Print the simplex every iteration'

    settings_types['checkpoint'] = 'bool'
    settings_default['checkpoint'] = False
    settings_description['checkpoint'] = 'Append the best vertex of every iteration to ' \
                                         '``<output folder>/<case>_trim_checkpoint.txt``'

    settings_table = settings_utils.SettingsTable()
    __doc__ += settings_table.generate(settings_types, settings_default, settings_description, settings_options)

    def __init__(self):
        self.data = None
        self.settings = None

        self.constraints = None
        self.trimmer = None
        self.optimiser = None
        self.checkpoint_file = None

    def initialise(self, data, custom_settings=None, restart=False):
        self.data = data
        if custom_settings is None:
            self.settings = data.settings[self.solver_id]
        else:
            self.settings = custom_settings
        settings_utils.to_custom_types(self.settings, self.settings_types, self.settings_default,
                                       self.settings_options)

        if self.data.plant is None:
            raise exceptions.NotValidInputFile('SimplexTrim requires a plant. Add PlantLoader to the flow first')

        self.constraints = Constraints(velocity=self.settings['velocity'],
                                       altitude=self.settings['altitude'],
                                       gamma=self.settings['gamma'] * np.pi / 180,
                                       mode=self.settings['mode'],
                                       roll_rate=self.settings['roll_rate'],
                                       pitch_rate=self.settings['pitch_rate'],
                                       stability_axis_roll=self.settings['stability_axis_roll'])
        if self.constraints.mode is TrimMode.TURNING:
            plant = self.data.plant
            theta = plant.get_property('attitude/theta-rad')
            yaw_rate = self.constraints.set_turn_from_bank(self.settings['bank_angle'] * np.pi / 180,
                                                           theta, plant.gravity())
            cout.cout_wrap('Turn rate derived from the bank angle: %g rad/s' % yaw_rate, 1)

        self.trimmer = Trimmer(self.data.plant, self.constraints,
                               lower_bound=self.settings['lower_bound'],
                               upper_bound=self.settings['upper_bound'],
                               weights=self.settings['cost_weights'])

        callback = None
        if self.settings['checkpoint']:
            self.checkpoint_file = os.path.join(self.data.output_folder,
                                                self.data.case_name + '_trim_checkpoint.txt')
            with open(self.checkpoint_file, 'w') as f:
                f.write('# iteration ' + ' '.join(trimmer_module.parameter_names) + '\n')
            callback = self.write_checkpoint

        random_seed = self.settings['random_seed']
        if random_seed < 0:
            random_seed = None

        self.optimiser = NelderMead(self.trimmer,
                                    self.settings['initial_guess'],
                                    self.settings['lower_bound'],
                                    self.settings['upper_bound'],
                                    self.settings['initial_step'],
                                    max_iter=self.settings['max_iter'],
                                    rtol=self.settings['rtol'],
                                    abstol=self.settings['abstol'],
                                    speed=self.settings['speed'],
                                    random=self.settings['random'],
                                    show_converge_status=self.settings['show_converge_status'],
                                    show_simplex=self.settings['show_simplex'],
                                    callback=callback,
                                    bounds_policy=self.settings['bounds_policy'],
                                    max_invalid_evaluations=self.settings['max_invalid_evaluations'],
                                    random_seed=random_seed)

    def run(self, **kwargs):
        if self.settings['print_info']:
            cout.cout_wrap('Running simplex trim', 1)
            cout.cout_wrap('\t' + repr(self.constraints), 1)

        solution = self.optimiser.run()

        if solution.status is SolverStatus.CONVERGED:
            cout.cout_wrap('Trim converged after %g iterations' % solution.n_iter, 2)
        elif solution.status is SolverStatus.MAX_ITERATIONS_REACHED:
            cout.cout_wrap('Trim did not fully converge in %g iterations. '
                           'Using the best point found' % solution.n_iter, 3)
        else:
            if solution.point is None:
                raise exceptions.FatalSolverFault('Trim failed without any valid point')
            cout.cout_wrap('Trim failed. Using the last valid point', 4)

        if self.settings['print_info']:
            self.trimmer.print_solution(solution.point)
        else:
            self.trimmer.constrain(solution.point)

        self.data.constraints = self.constraints
        self.data.trim_solution = solution
        return self.data

    def write_checkpoint(self, i_iter, best_vertex):
        with open(self.checkpoint_file, 'a') as f:
            f.write('%d ' % i_iter + ' '.join(['%.10e' % value for value in best_vertex]) + '\n')
