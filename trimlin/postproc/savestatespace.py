import os

import trimlin.utils.solver_interface as solver_interface
import trimlin.utils.settings as settings
import trimlin.utils.cout_utils as cout
import trimlin.utils.format_utils as format_utils


@solver_interface.solver
class SaveStateSpace(solver_interface.BaseSolver):
    """
    Writes the linear model in ``data.linear`` as a Scilab script ``<name>_lin.<extension>`` and, optionally, to h5
    as ``<name>.statespace.h5``
    """
    solver_id = 'SaveStateSpace'
    solver_classification = 'post-processor'

    settings_types = dict()
    settings_default = dict()
    settings_description = dict()

    settings_types['folder'] = 'str'
    settings_default['folder'] = ''
    settings_description['folder'] = 'Output folder. Defaults to the case output folder'

    settings_types['name'] = 'str'
    settings_default['name'] = ''
    settings_description['name'] = 'Name of the system in the script and of the files. Defaults to the case name'

    settings_types['extension'] = 'str'
    settings_default['extension'] = 'sce'
    settings_description['extension'] = 'Extension of the script file'

    settings_types['precision'] = 'int'
    settings_default['precision'] = 10
    settings_description['precision'] = 'Decimals of the numbers in the script'

    settings_types['width'] = 'int'
    settings_default['width'] = 20
    settings_description['width'] = 'Column width of the numbers in the script'

    settings_types['save_h5'] = 'bool'
    settings_default['save_h5'] = False
    settings_description['save_h5'] = 'Also save the model to an h5 file'

    settings_types['print_info'] = 'bool'
    settings_default['print_info'] = True
    settings_description['print_info'] = 'Write output to screen.'

    settings_table = settings.SettingsTable()
    __doc__ += settings_table.generate(settings_types, settings_default, settings_description)

    def __init__(self):
        self.settings = None
        self.folder = None
        self.name = None

        self.print_info = False

        self.data = None

    def initialise(self, data, custom_settings=None, restart=False):

        self.data = data

        if not custom_settings:
            self.settings = self.data.settings[self.solver_id]
        else:
            self.settings = custom_settings
        settings.to_custom_types(self.settings, self.settings_types, self.settings_default)

        self.print_info = self.settings['print_info']

        if self.settings['folder']:
            self.folder = os.path.abspath(self.settings['folder'])
        else:
            self.folder = os.path.abspath(self.data.output_folder)
        if not os.path.exists(self.folder):
            os.makedirs(self.folder)

        if self.settings['name']:
            self.name = self.settings['name']
        else:
            self.name = self.data.case_name

    def run(self, model=None, name=None, **kwargs):
        if model is None:
            model = self.data.linear
        if name is None:
            name = self.name
        if model is None:
            raise AttributeError('No linear model to save. Run LinearStateSpace before SaveStateSpace')

        filename = os.path.join(self.folder, name + '_lin.' + self.settings['extension'])
        with open(filename, 'w') as f:
            f.write(format_utils.scicos_script(name, model,
                                               precision=self.settings['precision'],
                                               width=self.settings['width']))
        if self.print_info:
            cout.cout_wrap('Saving linear system script to')
            cout.cout_wrap('\t{:s}'.format(filename), 1)

        if self.settings['save_h5']:
            h5_filename = os.path.join(self.folder, name + '.statespace.h5')
            model.save(h5_filename)
            if self.print_info:
                cout.cout_wrap('Saving state-space object to')
                cout.cout_wrap('\t{:s}'.format(h5_filename), 1)

        return self.data
