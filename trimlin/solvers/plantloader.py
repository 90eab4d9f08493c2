import trimlin.utils.cout_utils as cout
import trimlin.utils.plant_interface as plant_interface
import trimlin.utils.settings as settings_utils
from trimlin.utils.solver_interface import solver, BaseSolver


@solver
class PlantLoader(BaseSolver):
    """
    Creates the plant the rest of the flow trims and linearises and attaches it to the data object as
    ``data.plant``.

    The plant is chosen among those registered with the :func:`~trimlin.utils.plant_interface.plant` decorator
    through ``plant_id`` and initialised with ``plant_settings``.
    """
    solver_id = 'PlantLoader'
    solver_classification = 'loader'

    settings_types = dict()
    settings_default = dict()
    settings_description = dict()

    settings_types['plant_id'] = 'str'
    settings_default['plant_id'] = 'SimpleAircraft'
    settings_description['plant_id'] = 'Identifier of the plant to load'

    settings_types['plant_settings'] = 'dict'
    settings_default['plant_settings'] = dict()
    settings_description['plant_settings'] = 'Settings of the plant'

    settings_types['time_step'] = 'float'
    settings_default['time_step'] = 1. / 120
    settings_description['time_step'] = 'Fixed time step of the plant used while trimming (s)'

    settings_table = settings_utils.SettingsTable()
    __doc__ += settings_table.generate(settings_types, settings_default, settings_description)

    def __init__(self):
        self.data = None
        self.settings = None
        self.plant = None

    def initialise(self, data, custom_settings=None, restart=False):
        import trimlin.plants

        self.data = data
        if custom_settings is None:
            self.settings = data.settings[self.solver_id]
        else:
            self.settings = custom_settings
        settings_utils.to_custom_types(self.settings, self.settings_types, self.settings_default)

        self.plant = plant_interface.initialise_plant(self.settings['plant_id'])
        self.plant.initialise(self.settings['plant_settings'])

    def run(self, **kwargs):
        self.plant.set_time_step(self.settings['time_step'])
        self.data.plant = self.plant
        cout.cout_wrap('Plant %s loaded with a time step of %g s' % (self.settings['plant_id'],
                                                                     self.plant.get_time_step()), 1)
        return self.data
