import configobj
import os
import trimlin.utils.cout_utils as cout
from trimlin.utils.solver_interface import solver, dict_of_solvers
import trimlin.utils.settings as settings
import trimlin.utils.exceptions as exceptions


@solver
class PreTrim(object):
    """
    The PreTrim solver is the main loader of trimlin. It takes the admin-like settings for the run, including the
    case name, case route and the list of solvers to run and in which order to run them. This order of solvers is
    referred to, throughout trimlin, as the ``flow`` setting.

    The object is also the data container handed from solver to solver: the plant, the trim solution and the
    linear model are attached to it as the flow progresses.

    This is a mandatory solver for all runs at the start so it is never included in the ``flow`` setting.

    The settings for this solver are parsed through in the configuration file under the header ``TrimLin``. I.e, when
    you are defining the config file for a run, the settings for PreTrim are included as:

    .. code-block:: python

        import configobj
        filename = '<case_route>/<case_name>.trimlin'
        config = configobj.ConfigObj()
        config.filename = filename
        config['TrimLin'] = {'case': '<your case name>',  # an example setting
                             # Rest of your settings for the PreTrim class
                             }

    """
    solver_id = 'PreTrim'
    solver_classification = 'loader'

    settings_types = dict()
    settings_default = dict()
    settings_description = dict()

    settings_types['flow'] = 'list(str)'
    settings_default['flow'] = None
    settings_description['flow'] = "List of the desired solvers' ``solver_id`` to run in sequential order."

    settings_types['case'] = 'str'
    settings_default['case'] = 'default_case_name'
    settings_description['case'] = 'Case name'

    settings_types['route'] = 'str'
    settings_default['route'] = './'
    settings_description['route'] = 'Route to case files'

    settings_types['write_screen'] = 'bool'
    settings_default['write_screen'] = True
    settings_description['write_screen'] = 'Display output on terminal screen'

    settings_types['write_log'] = 'bool'
    settings_default['write_log'] = False
    settings_description['write_log'] = 'Write log file'

    settings_types['log_folder'] = 'str'
    settings_default['log_folder'] = './output/'
    settings_description['log_folder'] = 'A folder with the case name will be created at this directory ' \
                                         'containing the trimlin log and output files'

    settings_types['log_file'] = 'str'
    settings_default['log_file'] = 'log'
    settings_description['log_file'] = 'Name of the log file'

    settings_types['save_settings'] = 'bool'
    settings_default['save_settings'] = False
    settings_description['save_settings'] = 'Save a copy of the settings to a ``.trimlin`` file in the output ' \
                                            'directory specified in ``log_folder``'

    settings_table = settings.SettingsTable()
    __doc__ += settings_table.generate(settings_types, settings_default, settings_description,
                                       header_line='The following are the settings that the PreTrim class takes:')

    def __init__(self, in_settings=None):
        self._settings = True
        if in_settings is None:
            # call for documentation only
            self._settings = False

        # filled in by the solvers in the flow
        self.plant = None
        self.constraints = None
        self.trim_solution = None
        self.x = None
        self.u = None
        self.y = None
        self.linear = None

        if self._settings:
            self.update_settings(in_settings)

            for solver_name in self.settings['TrimLin']['flow']:
                if solver_name not in dict_of_solvers:
                    raise exceptions.NotImplementedSolver(solver_name)

            cout.cout_wrap('trimlin output folder set')
            cout.cout_wrap('\t' + self.output_folder, 1)

            if self.settings['TrimLin']['save_settings']:
                self.save_settings()

    def initialise(self):
        pass

    def update_settings(self, new_settings):
        self.settings = new_settings
        settings.to_custom_types(self.settings['TrimLin'], self.settings_types, self.settings_default)

        self.output_folder = self.settings['TrimLin']['log_folder'] + '/' + self.settings['TrimLin']['case'] + '/'
        if not os.path.isdir(self.output_folder):
            os.makedirs(self.output_folder)

        cout.cout_wrap.initialise(self.settings['TrimLin']['write_screen'],
                                  self.settings['TrimLin']['write_log'],
                                  self.output_folder,
                                  self.settings['TrimLin']['log_file'])

        self.case_route = self.settings['TrimLin']['route'] + '/'
        self.case_name = self.settings['TrimLin']['case']

    def save_settings(self):
        """
        Saves the settings to a ``.trimlin`` config obj file in the output directory.
        """
        out_settings = configobj.ConfigObj()
        for k, v in self.settings.items():
            out_settings[k] = v
        out_settings.filename = self.output_folder + self.settings['TrimLin']['case'] + '.trimlin'
        out_settings.write()
