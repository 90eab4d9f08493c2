"""
Outcome of a single cost function evaluation

Numerical failures of the plant are reported as values rather than raised through the optimiser loop: a failed
evaluation carries an infinite cost that the simplex ranking discards.
"""
from collections import namedtuple
from enum import Enum

import numpy as np


class EvaluationKind(Enum):
    SUCCESS = 0
    FAILURE = 1


class EvaluationResult(namedtuple('EvaluationResult', ['kind', 'cost', 'message'])):
    """
    Attributes:
        kind (EvaluationKind): success or failure
        cost (float): cost of the candidate. ``np.inf`` on failure
        message (str): reason of the failure
    """
    __slots__ = ()

    @classmethod
    def success(cls, cost):
        return cls(EvaluationKind.SUCCESS, float(cost), '')

    @classmethod
    def failure(cls, message=''):
        return cls(EvaluationKind.FAILURE, np.inf, message)

    @classmethod
    def from_cost(cls, cost):
        """Wraps a plain float, flagging non-finite values as failures"""
        cost = float(cost)
        if np.isfinite(cost):
            return cls.success(cost)
        return cls.failure('Non-finite cost %s' % cost)

    @property
    def ok(self):
        return self.kind is EvaluationKind.SUCCESS
