import numpy as np

import trimlin.utils.cout_utils as cout
import trimlin.utils.exceptions as exceptions
import trimlin.utils.settings as settings_utils
from trimlin.utils.solver_interface import solver, BaseSolver
from trimlin.linear.src.components import StateVector, component_definitions
from trimlin.linear.src.statespace import StateSpace
from trimlin.trim.neldermead import SolverStatus


def default_states(plant):
    """
    Default state vector: the rigid body states with every propulsion state of ``plant``, so that the perturbed
    runs of the linearisation restore the complete engine state.
    """
    return (['Vt', 'Alpha', 'Theta', 'Q'] + list(plant.propulsion_states()) +
            ['Beta', 'Phi', 'P', 'R', 'Alt', 'Psi', 'Longitude', 'Latitude'])


@solver
class LinearStateSpace(BaseSolver):
    """
    Linearises ``data.plant`` about its current condition, normally the trim point found by the previous solver
    in the flow.

    The states, inputs and outputs are given as identifiers of the component registry
    (:data:`~trimlin.linear.src.components.component_definitions`). If no outputs are given, the outputs are the
    states (state feedback).

    The resulting :class:`~trimlin.linear.src.libss.LinearModel` is stored in ``data.linear``.
    """
    solver_id = 'LinearStateSpace'
    solver_classification = 'Linear'

    settings_types = dict()
    settings_default = dict()
    settings_description = dict()
    settings_options = dict()

    settings_types['print_info'] = 'bool'
    settings_default['print_info'] = True
    settings_description['print_info'] = 'Print the vectors and matrices to screen'

    settings_types['states'] = 'list(str)'
    settings_default['states'] = []
    settings_description['states'] = 'State components. Empty for the rigid body and propulsion states of the plant'
    settings_options['states'] = list(component_definitions.keys())

    settings_types['inputs'] = 'list(str)'
    settings_default['inputs'] = ['ThrottleCmd', 'DaCmd', 'DeCmd', 'DrCmd']
    settings_description['inputs'] = 'Input components'
    settings_options['inputs'] = list(component_definitions.keys())

    settings_types['outputs'] = 'list(str)'
    settings_default['outputs'] = []
    settings_description['outputs'] = 'Output components. Empty for state feedback'
    settings_options['outputs'] = list(component_definitions.keys())

    settings_types['step'] = 'float'
    settings_default['step'] = 1e-5
    settings_description['step'] = 'Finite difference step'

    settings_types['dt'] = 'float'
    settings_default['dt'] = 0.
    settings_description['dt'] = 'Plant time step of the perturbed runs. Zero to use ``step``'

    settings_types['echo_precision'] = 'int'
    settings_default['echo_precision'] = 3
    settings_description['echo_precision'] = 'Decimals of the matrices printed to screen'

    settings_types['echo_width'] = 'int'
    settings_default['echo_width'] = 10
    settings_description['echo_width'] = 'Column width of the matrices printed to screen'

    settings_table = settings_utils.SettingsTable()
    __doc__ += settings_table.generate(settings_types, settings_default, settings_description, settings_options)

    def __init__(self):
        self.data = None
        self.settings = None
        self.ss = None

    def initialise(self, data, custom_settings=None, restart=False):
        self.data = data
        if custom_settings is None:
            self.settings = data.settings[self.solver_id]
        else:
            self.settings = custom_settings
        settings_utils.to_custom_types(self.settings, self.settings_types, self.settings_default,
                                       self.settings_options)

        if self.data.plant is None:
            raise exceptions.NotValidInputFile('LinearStateSpace requires a plant. Add PlantLoader to the flow first')

        plant = self.data.plant
        states = self.settings['states']
        if not states:
            states = default_states(plant)
        x = StateVector.from_identifiers(states, plant, category='state')
        u = StateVector.from_identifiers(self.settings['inputs'], plant, category='control')
        if self.settings['outputs']:
            y = StateVector.from_identifiers(self.settings['outputs'], plant, category='output')
        else:
            y = x.as_outputs()
        self.ss = StateSpace(plant, x, u, y)

    def run(self, **kwargs):
        trim_solution = self.data.trim_solution
        if trim_solution is not None and trim_solution.status is not SolverStatus.CONVERGED:
            cout.cout_wrap('Linearising about a trim point that did not converge (%s)' % trim_solution.status.name, 3)

        dt = self.settings['dt']
        if dt <= 0:
            dt = None
        model = self.ss.linearise(h=self.settings['step'], dt=dt)

        if not all([np.all(np.isfinite(mat)) for mat in model.get_mats()]):
            cout.cout_wrap('The linear model contains non-finite entries', 3)

        if self.settings['print_info']:
            cout.cout_wrap('\nlinearisation:', 1)
            self.ss.echo(model, self.settings['echo_precision'], self.settings['echo_width'])

        self.data.x = self.ss.x
        self.data.u = self.ss.u
        self.data.y = self.ss.y
        self.data.linear = model
        return self.data
