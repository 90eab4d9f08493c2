"""Plant Interface

A plant is the nonlinear dynamic system that is trimmed and linearised. The trim and linearisation routines only
talk to it through the methods of :class:`BasePlant`: set a fixed time step, advance exactly one step and read/write
named scalar properties.
"""
from abc import ABCMeta, abstractmethod
import os

import trimlin.utils.cout_utils as cout
import trimlin.utils.exceptions as exceptions

dict_of_plants = {}
plants = {}  # for internal working


# decorator
def plant(arg):
    global dict_of_plants
    try:
        arg.plant_id
    except AttributeError:
        raise AttributeError('Class defined as plant has no plant_id attribute')
    dict_of_plants[arg.plant_id] = arg
    return arg


class BasePlant(metaclass=ABCMeta):
    """
    Narrow interface to the nonlinear model.

    Only one trim or linearisation run may drive a plant instance at any time: every call to
    :meth:`run_one_step` or :meth:`set_property` mutates the live state in place.
    """

    settings_types = dict()
    settings_description = dict()
    settings_default = dict()

    @property
    def plant_id(self):
        raise NotImplementedError

    def initialise(self, in_dict=None):
        pass

    @abstractmethod
    def set_time_step(self, dt):
        """Sets the fixed time step used by every call to :meth:`run_one_step`."""
        pass

    @abstractmethod
    def get_time_step(self):
        pass

    @abstractmethod
    def run_one_step(self):
        """Advances the plant exactly one fixed time step."""
        pass

    @abstractmethod
    def get_property(self, name):
        pass

    @abstractmethod
    def set_property(self, name, value):
        pass

    def gravity(self):
        return self.get_property('accelerations/gravity-ft_sec2')

    def settle_propulsion(self):
        """Brings the propulsion system to steady state for the current commands. No-op by default."""
        pass

    def propulsion_states(self):
        """
        Identifiers of the component registry that hold the propulsion states of the plant

        Returns:
            list(str): one engine speed by default
        """
        return ['Rpm0']


def plant_from_string(string):
    try:
        cls_type = dict_of_plants[string]
    except KeyError:
        raise exceptions.PlantNotFound(string)
    return cls_type


def plant_list_from_path(cwd):
    onlyfiles = [f for f in os.listdir(cwd) if os.path.isfile(os.path.join(cwd, f))]

    files = []
    for file in onlyfiles:
        if file.split('.')[-1] == 'py' and file != '__init__.py':
            files.append(file.replace('.py', ''))
    return files


def initialise_plant(plant_name, print_info=True):
    if print_info:
        cout.cout_wrap('Generating an instance of %s' % plant_name, 2)
    cls_type = plant_from_string(plant_name)
    return cls_type()
