"""
Nelder-Mead downhill simplex optimiser with box constraints

The optimiser is driven one iteration at a time through :meth:`NelderMead.update`, so that the caller may report,
checkpoint or abandon the run between iterations:

.. code-block:: python

    solver = NelderMead(cost, guess, lower, upper, step)
    while not solver.terminated:
        solver.update()
    x = solver.get_solution()

No candidate outside ``[lower_bound, upper_bound]`` is ever passed to the cost function. The handling of a
candidate that leaves the box is selected with ``bounds_policy``:

* ``penalise``: the candidate is given an infinite cost without being evaluated, which drives the simplex to
  contract or shrink back into the box.
* ``clamp``: the candidate is projected onto the box and evaluated there.
"""
from collections import namedtuple
from enum import Enum
import warnings

import numpy as np

import trimlin.utils.cout_utils as cout
import trimlin.utils.exceptions as exceptions
from trimlin.trim.evaluation import EvaluationResult

bounds_policies = ['penalise', 'clamp']


class SolverStatus(Enum):
    INITIALISING = 0
    ITERATING = 1
    CONVERGED = 2
    MAX_ITERATIONS_REACHED = 3
    FAILED = 4


terminal_status = (SolverStatus.CONVERGED, SolverStatus.MAX_ITERATIONS_REACHED, SolverStatus.FAILED)

TrimSolution = namedtuple('TrimSolution', ['point', 'cost', 'status', 'n_iter'])


class SimplexState:
    """
    The ``n + 1`` vertices of the simplex and their costs

    Attributes:
        vertices (np.ndarray): ``(n + 1, n)`` array of points
        costs (np.ndarray): ``(n + 1, )`` costs of the vertices
    """
    def __init__(self, vertices, costs):
        self.vertices = vertices
        self.costs = costs

    @property
    def n(self):
        return self.vertices.shape[1]

    def sort(self):
        """Ranks the vertices by non-decreasing cost. Ties keep their previous order."""
        order = np.argsort(self.costs, kind='stable')
        self.vertices = self.vertices[order]
        self.costs = self.costs[order]

    @property
    def best(self):
        return self.vertices[0]

    @property
    def worst(self):
        return self.vertices[-1]

    def spread(self):
        return self.costs[-1] - self.costs[0]

    def copy(self):
        return SimplexState(self.vertices.copy(), self.costs.copy())


class NelderMead:
    """
    Nelder-Mead simplex minimiser.

    Args:
        cost_function (callable): ``f(x)`` returning a ``float`` or an
            :class:`~trimlin.trim.evaluation.EvaluationResult`. An
            :class:`~trimlin.utils.exceptions.EvaluationError` raised by it is taken as an infinite cost; any other
            exception aborts the run with :class:`~trimlin.utils.exceptions.FatalSolverFault`.
        initial_guess (np.ndarray): starting point
        lower_bound (np.ndarray): lower bound of each dimension
        upper_bound (np.ndarray): upper bound of each dimension
        initial_step (np.ndarray): size of the initial simplex along each dimension
        max_iter (int): iteration cap
        rtol (float): relative tolerance on the spread of the vertex costs
        abstol (float): absolute tolerance on the spread of the vertex costs
        speed (float): expansion factor, greater than one
        random (float): scale of the uniform random perturbation added to every evaluated cost. Zero for
            deterministic runs
        show_converge_status (bool): print an iteration table
        show_simplex (bool): print the vertices every iteration
        callback (callable): ``callback(i_iter, best_vertex)`` invoked after every iteration
        bounds_policy (str): ``penalise`` or ``clamp``
        max_invalid_evaluations (int): consecutive non-finite evaluations after which the run fails
        random_seed (int): seed of the random perturbation generator

    Raises:
        exceptions.ConfigurationError: on inconsistent inputs, before the cost function is evaluated
    """
    def __init__(self, cost_function, initial_guess, lower_bound, upper_bound, initial_step,
                 max_iter=2000, rtol=10*np.finfo(np.float32).eps, abstol=10*np.finfo(np.float64).eps,
                 speed=2.0, random=0.0, show_converge_status=False, show_simplex=False, callback=None,
                 bounds_policy='penalise', max_invalid_evaluations=100, random_seed=None):

        self.cost_function = cost_function
        self.initial_guess = np.array(initial_guess, dtype=float).reshape(-1)
        self.lower_bound = np.array(lower_bound, dtype=float).reshape(-1)
        self.upper_bound = np.array(upper_bound, dtype=float).reshape(-1)
        self.initial_step = np.array(initial_step, dtype=float).reshape(-1)
        self.max_iter = max_iter
        self.rtol = rtol
        self.abstol = abstol
        self.speed = speed
        self.random = random
        self.show_converge_status = show_converge_status
        self.show_simplex = show_simplex
        self.callback = callback
        self.bounds_policy = bounds_policy
        self.max_invalid_evaluations = max_invalid_evaluations

        self.check_configuration()

        self.n = self.initial_guess.shape[0]
        self.rng = np.random.default_rng(random_seed)
        self.i_iter = 0
        self.n_evaluations = 0
        self.n_invalid = 0
        self.last_operation = ''
        self.table = None
        self._status = SolverStatus.INITIALISING
        self.simplex = None

        self.initialise_simplex()

    def check_configuration(self):
        n = self.initial_guess.shape[0]
        if n == 0:
            raise exceptions.ConfigurationError('The initial guess is empty')
        for name in ['lower_bound', 'upper_bound', 'initial_step']:
            if getattr(self, name).shape != (n, ):
                raise exceptions.ConfigurationError('%s has shape %s, expected (%g,)' %
                                                    (name, getattr(self, name).shape, n))
        bad_dims = np.where(~(self.lower_bound < self.upper_bound))[0]
        if bad_dims.size > 0:
            raise exceptions.ConfigurationError('Lower bound not below upper bound in dimensions %s' %
                                                bad_dims.tolist())
        if np.any(self.initial_guess < self.lower_bound) or np.any(self.initial_guess > self.upper_bound):
            raise exceptions.ConfigurationError('Initial guess %s outside the bounds' % self.initial_guess)
        if np.any(~(self.initial_step > 0)):
            raise exceptions.ConfigurationError('Initial step sizes must be positive')
        if not self.speed > 1:
            raise exceptions.ConfigurationError('Expansion speed must be greater than 1, got %s' % self.speed)
        if self.max_iter < 1:
            raise exceptions.ConfigurationError('max_iter must be at least 1')
        if self.random < 0:
            raise exceptions.ConfigurationError('random must be non-negative')
        if self.bounds_policy not in bounds_policies:
            raise exceptions.ConfigurationError('Unknown bounds policy %s. Options are %s' %
                                                (self.bounds_policy, bounds_policies))

    def initialise_simplex(self):
        """
        Vertex 0 is the initial guess and vertex ``i + 1`` is displaced by the initial step along dimension ``i``.
        A displacement leaving the box is taken in the opposite direction and, if still outside, clamped on the
        side with more room.
        """
        vertices = np.tile(self.initial_guess, (self.n + 1, 1))
        for i in range(self.n):
            value = self.initial_guess[i] + self.initial_step[i]
            if value > self.upper_bound[i]:
                value = self.initial_guess[i] - self.initial_step[i]
                if value < self.lower_bound[i]:
                    if self.upper_bound[i] - self.initial_guess[i] >= self.initial_guess[i] - self.lower_bound[i]:
                        value = self.upper_bound[i]
                    else:
                        value = self.lower_bound[i]
            vertices[i + 1, i] = value

        costs = np.full((self.n + 1, ), np.inf)
        self.simplex = SimplexState(vertices, costs)
        for i_vertex in range(self.n + 1):
            costs[i_vertex] = self.evaluate(vertices[i_vertex])
        self.simplex.sort()

        if not np.any(np.isfinite(self.simplex.costs)):
            self._status = SolverStatus.FAILED
            cout.cout_wrap('Every vertex of the initial simplex has a non-finite cost', 4)
        else:
            self._status = SolverStatus.ITERATING

        if self.show_converge_status:
            self.table = cout.TablePrinter(4, field_length=[10, 14, 14, 16], field_types=['g', 'e', 'e', 's'])
            self.table.print_header(['iter', 'best cost', 'worst cost', 'step'])

    def status(self):
        return self._status

    @property
    def terminated(self):
        return self._status in terminal_status

    def evaluate(self, point):
        """
        Cost of ``point``, after applying the bounds policy

        Returns:
            float: cost, ``np.inf`` for failed or penalised candidates
        """
        if np.any(point < self.lower_bound) or np.any(point > self.upper_bound):
            if self.bounds_policy == 'penalise':
                return np.inf
            point[:] = np.clip(point, self.lower_bound, self.upper_bound)

        self.n_evaluations += 1
        try:
            result = self.cost_function(point.copy())
        except exceptions.EvaluationError as e:
            result = EvaluationResult.failure(str(e))
        except Exception as e:
            self._status = SolverStatus.FAILED
            raise exceptions.FatalSolverFault('Cost function failed at %s: %s' % (point, e),
                                              solution=self.valid_solution()) from e

        if not isinstance(result, EvaluationResult):
            result = EvaluationResult.from_cost(result)

        if not result.ok:
            self.n_invalid += 1
            return np.inf

        self.n_invalid = 0
        cost = result.cost
        if self.random > 0:
            cost += self.random * (self.rng.random() - 0.5)
        return cost

    def update(self):
        """
        Performs one Nelder-Mead iteration

        Returns:
            SolverStatus: status after the iteration
        """
        if self.terminated:
            return self._status

        self.simplex.sort()
        if self.check_convergence():
            self._status = SolverStatus.CONVERGED
            return self._status

        if self.i_iter >= self.max_iter:
            self._status = SolverStatus.MAX_ITERATIONS_REACHED
            warnings.warn('Maximum number of iterations (%g) reached. Cost spread %g' %
                          (self.max_iter, self.simplex.spread()), exceptions.ConvergenceFailure)
            return self._status

        self.step()
        self.simplex.sort()
        self.i_iter += 1

        if self.n_invalid > self.max_invalid_evaluations:
            self._status = SolverStatus.FAILED
            cout.cout_wrap('%g consecutive evaluations returned non-finite costs' % self.n_invalid, 4)
        elif not np.isfinite(self.simplex.costs[0]):
            self._status = SolverStatus.FAILED

        if self.show_converge_status:
            self.table.print_line([self.i_iter, self.simplex.costs[0], self.simplex.costs[-1], self.last_operation])
        if self.show_simplex:
            cout.cout_wrap('Simplex at iteration %g' % self.i_iter, 1)
            for vertex, cost in zip(self.simplex.vertices, self.simplex.costs):
                cout.cout_wrap('\t' + np.array2string(vertex, precision=6) + '\tcost: %e' % cost, 1)
        if self.callback is not None:
            self.callback(self.i_iter, self.simplex.best.copy())

        return self._status

    def check_convergence(self):
        fmin = self.simplex.costs[0]
        fmax = self.simplex.costs[-1]
        if not (np.isfinite(fmin) and np.isfinite(fmax)):
            return False
        if fmax - fmin < self.abstol:
            return True
        return 2 * abs(fmax - fmin) / (abs(fmax) + abs(fmin) + np.finfo(float).tiny) < self.rtol

    def step(self):
        simplex = self.simplex
        f_best = simplex.costs[0]
        f_second_worst = simplex.costs[-2]
        f_worst = simplex.costs[-1]
        x_worst = simplex.worst

        centroid = np.mean(simplex.vertices[:-1], axis=0)

        x_reflect = centroid + (centroid - x_worst)
        f_reflect = self.evaluate(x_reflect)

        if f_reflect < f_best:
            x_expand = centroid + self.speed * (centroid - x_worst)
            f_expand = self.evaluate(x_expand)
            if f_expand < f_reflect:
                self.replace_worst(x_expand, f_expand, 'expand')
            else:
                self.replace_worst(x_reflect, f_reflect, 'reflect')
        elif f_reflect < f_second_worst:
            self.replace_worst(x_reflect, f_reflect, 'reflect')
        elif f_reflect < f_worst:
            x_contract = centroid + 0.5 * (x_reflect - centroid)
            f_contract = self.evaluate(x_contract)
            if f_contract <= f_reflect:
                self.replace_worst(x_contract, f_contract, 'contract')
            else:
                self.shrink()
        else:
            x_contract = centroid + 0.5 * (x_worst - centroid)
            f_contract = self.evaluate(x_contract)
            if f_contract < f_worst:
                self.replace_worst(x_contract, f_contract, 'contract')
            else:
                self.shrink()

    def replace_worst(self, point, cost, operation):
        self.simplex.vertices[-1] = point
        self.simplex.costs[-1] = cost
        self.last_operation = operation

    def shrink(self):
        best = self.simplex.best.copy()
        for i_vertex in range(1, self.n + 1):
            self.simplex.vertices[i_vertex] = best + 0.5 * (self.simplex.vertices[i_vertex] - best)
            self.simplex.costs[i_vertex] = self.evaluate(self.simplex.vertices[i_vertex])
        self.last_operation = 'shrink'

    def valid_solution(self):
        """Best vertex with a finite cost, ``None`` if there is none"""
        if self.simplex is None:
            return None
        finite = np.isfinite(self.simplex.costs)
        if not np.any(finite):
            return None
        i_best = np.argmin(np.where(finite, self.simplex.costs, np.inf))
        return self.simplex.vertices[i_best].copy()

    def get_solution(self):
        """
        Best parameter vector found. Meaningful once :attr:`terminated` is ``True``.

        Raises:
            exceptions.FatalSolverFault: if no vertex has a finite cost
        """
        solution = self.valid_solution()
        if solution is None:
            raise exceptions.FatalSolverFault('No vertex with a finite cost is available')
        return solution

    def solution(self):
        """
        Returns:
            TrimSolution: best point, its cost, the status and the number of iterations performed
        """
        point = self.valid_solution()
        cost = np.inf if point is None else float(np.min(self.simplex.costs))
        return TrimSolution(point, cost, self._status, self.i_iter)

    def run(self):
        """Iterates until a terminal status is reached"""
        while not self.terminated:
            self.update()
        if self.table is not None:
            self.table.print_divider_line()
        return self.solution()
