"""trimlin Exception Classes
"""
import trimlin.utils.cout_utils as cout


class DefaultValueBaseException(Exception):
    def __init__(self, variable, value, message=''):
        super().__init__(message)

    def output_message(self, message, color_id=3):
        if cout.cout_wrap is None:
            print(message)
        else:
            cout.cout_wrap.print_separator(3)
            cout.cout_wrap(message, color_id)
            cout.cout_wrap.print_separator(3)


class NoDefaultValueException(DefaultValueBaseException):
    def __init__(self, variable, value=None, message=''):
        super().__init__(variable, value, message)
        self.output_message("The variable " + variable + " has no default value, please indicate one")


class NotValidInputFile(Exception):
    def __init__(self, message):
        super().__init__(message)


class NotImplementedSolver(Exception):
    def __init__(self, solver_name, message=''):
        super().__init__(message)
        cout.cout_wrap("The solver " + solver_name + " is not implemented. Check the list of available solvers "
                       "when starting trimlin", 3)


class NotValidSetting(DefaultValueBaseException):
    """
    Raised when a user gives a setting an invalid value
    """

    def __init__(self, setting, variable, options, value=None, message=''):
        message = 'The setting %s with entry %s is not one of the valid options: %s' % (setting, variable, options)
        super().__init__(variable, value, message=message)
        self.output_message(message, color_id=4)


class NotValidSettingType(DefaultValueBaseException):
    """
    Raised when a user gives a setting with an invalid type
    """

    def __init__(self, setting, variable, data_types, value=None, message=''):
        message = 'The setting %s with entry %s is not one of the valid types: %s' % (setting, variable, data_types)
        super().__init__(variable, value, message=message)
        self.output_message(message, color_id=4)


class NotRecognisedSetting(DefaultValueBaseException):
    """
    Raised when a setting is not recognised
    """
    def __init__(self, setting, value=None, message=''):
        message = 'Unrecognised setting {:s}. Please check input file and/or documentation'.format(setting)
        super().__init__(variable=None, value=None, message=message)
        self.output_message(message, color_id=4)


class SolverNotFound(Exception):
    def __init__(self, solver_name):
        message = 'The solver %s cannot be found in the list of solvers. Ensure you have spelt the solver name ' \
                  'correctly.' % solver_name
        super().__init__(message)


class PlantNotFound(Exception):
    def __init__(self, plant_name):
        message = 'The plant %s cannot be found in the list of plants. Ensure you have spelt the plant name ' \
                  'correctly.' % plant_name
        super().__init__(message)


class ComponentNotFound(KeyError):
    def __init__(self, identifier):
        super().__init__('No component registered under the identifier %s' % identifier)


class UnknownProperty(KeyError):
    """
    Raised by a plant when asked for a property it does not expose
    """
    def __init__(self, plant_name, property_name):
        super().__init__('The plant %s has no property %s' % (plant_name, property_name))


class ConfigurationError(ValueError):
    """
    Inconsistent solver configuration, e.g. a lower bound that is not strictly below the upper bound.

    Raised at construction, before any evaluation of the cost function takes place.
    """
    pass


class EvaluationError(ArithmeticError):
    """
    The plant produced a non-finite state during a single cost evaluation or perturbation step.
    """
    pass


class OutOfBounds(ValueError):
    """
    The cost function was called with a candidate outside its declared bounds.
    """
    def __init__(self, candidate, lower_bound, upper_bound):
        self.candidate = candidate
        message = 'Candidate %s is outside the bounds [%s, %s]' % (candidate, lower_bound, upper_bound)
        super().__init__(message)


class ConvergenceFailure(RuntimeWarning):
    """
    The optimiser reached its iteration cap without meeting the tolerances. The best vertex found is still
    reported as the solution.
    """
    pass


class FatalSolverFault(RuntimeError):
    """
    An unexpected fault escaped the cost function and aborted the run.

    Attributes:
        solution (np.ndarray or None): last known valid solution, if any.
    """
    def __init__(self, message, solution=None):
        super().__init__(message)
        self.solution = solution
