import importlib
import os

import trimlin.utils.solver_interface as solver_interface

files = solver_interface.solver_list_from_path(os.path.dirname(__file__))

for file in sorted(files):
    solver_interface.solvers[file] = importlib.import_module(__name__ + "." + file)
