"""Plants

Nonlinear models that can be trimmed and linearised. A plant is registered with the
:func:`~trimlin.utils.plant_interface.plant` decorator and must implement
:class:`~trimlin.utils.plant_interface.BasePlant`.
"""
import importlib
import os

import trimlin.utils.plant_interface as plant_interface

files = plant_interface.plant_list_from_path(os.path.dirname(__file__))

for file in sorted(files):
    plant_interface.plants[file] = importlib.import_module(__name__ + "." + file)
