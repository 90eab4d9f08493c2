from abc import ABCMeta, abstractmethod
import trimlin.utils.cout_utils as cout
import os
import trimlin.utils.exceptions as exceptions

dict_of_solvers = {}
solvers = {}  # for internal working


# decorator
def solver(arg):
    global dict_of_solvers
    try:
        arg.solver_id
    except AttributeError:
        raise AttributeError('Class defined as solver has no solver_id attribute')
    dict_of_solvers[arg.solver_id] = arg
    return arg


class BaseSolver(metaclass=ABCMeta):

    settings_types = dict()
    settings_description = dict()
    settings_default = dict()

    # Solver id for populating available_solvers[]
    @property
    def solver_id(self):
        raise NotImplementedError

    # The input is a ProblemData class structure
    @abstractmethod
    def initialise(self, data, custom_settings=None, restart=False):
        pass

    # This executes the solver
    @abstractmethod
    def run(self, **kwargs):
        pass

    def teardown(self):
        pass


def solver_from_string(string):
    try:
        solver = dict_of_solvers[string]
    except KeyError:
        raise exceptions.SolverNotFound(string)
    return solver


def solver_list_from_path(cwd):
    onlyfiles = [f for f in os.listdir(cwd) if os.path.isfile(os.path.join(cwd, f))]

    for i_file in range(len(onlyfiles)):
        if onlyfiles[i_file].split('.')[-1] == 'py':  # support autosaved files in the folder
            if onlyfiles[i_file] == "__init__.py":
                onlyfiles[i_file] = ""
                continue
            onlyfiles[i_file] = onlyfiles[i_file].replace('.py', '')
        else:
            onlyfiles[i_file] = ""

    files = [file for file in onlyfiles if not file == ""]
    return files


def initialise_solver(solver_name, print_info=True):
    if print_info:
        cout.cout_wrap('Generating an instance of %s' % solver_name, 2)
    cls_type = solver_from_string(solver_name)
    solver = cls_type()
    return solver

