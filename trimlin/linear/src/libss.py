"""
Linear Time Invariant systems

Container of the continuous time linear model obtained by linearising a plant about a trim point

.. math::
    \\dot{\\delta x} = A \\delta x + B \\delta u, \\qquad \\delta y = C \\delta x + D \\delta u

where :math:`\\delta x = x - x_0` and :math:`\\delta u = u - u_0`.

Methods:
- eigenvalues: eigenvalues of the plant matrix
- is_stable: all eigenvalues in the left half plane
- to_control: conversion to a ``control.StateSpace`` object
- transfer_function: transfer function matrix via ``control.ss2tf``
- save / load: HDF5 storage
"""
import numpy as np
import scipy.linalg as scalg
import h5py


class LinearModel:
    """
    Linear model about the reference point (x0, u0, y0).

    The matrices and reference vectors are read-only once the object is created.

    Args:
        A (np.ndarray): plant matrix, ``nx x nx``
        B (np.ndarray): input matrix, ``nx x nu``
        C (np.ndarray): output matrix, ``ny x nx``
        D (np.ndarray): feedthrough matrix, ``ny x nu``
        x0 (np.ndarray): reference state
        u0 (np.ndarray): reference input
        y0 (np.ndarray): reference output
        state_names (list(str)): optional names of the states
        input_names (list(str)): optional names of the inputs
        output_names (list(str)): optional names of the outputs
        state_units, input_units, output_units (list(str)): optional units
    """
    def __init__(self, A, B, C, D, x0, u0, y0,
                 state_names=None, input_names=None, output_names=None,
                 state_units=None, input_units=None, output_units=None):

        self.A = self._freeze(A, 2)
        self.B = self._freeze(B, 2)
        self.C = self._freeze(C, 2)
        self.D = self._freeze(D, 2)
        self.x0 = self._freeze(x0, 1)
        self.u0 = self._freeze(u0, 1)
        self.y0 = self._freeze(y0, 1)

        self.state_names = self._labels(state_names, self.states, 'x')
        self.input_names = self._labels(input_names, self.inputs, 'u')
        self.output_names = self._labels(output_names, self.outputs, 'y')
        self.state_units = self._labels(state_units, self.states, '')
        self.input_units = self._labels(input_units, self.inputs, '')
        self.output_units = self._labels(output_units, self.outputs, '')

        # verify dimensions
        assert self.A.shape == (self.states, self.states), 'A is not square'
        assert self.B.shape == (self.states, self.inputs), 'A and B rows not matching'
        assert self.C.shape == (self.outputs, self.states), 'A and C columns not matching'
        assert self.D.shape == (self.outputs, self.inputs), 'C and D rows or B and D columns not matching'
        assert self.x0.shape[0] == self.states, 'x0 and A not matching'
        assert self.u0.shape[0] == self.inputs, 'u0 and B not matching'
        assert self.y0.shape[0] == self.outputs, 'y0 and C not matching'

    @staticmethod
    def _freeze(value, ndim):
        array = np.array(value, dtype=float)
        if ndim == 2:
            array = np.atleast_2d(array)
        else:
            array = np.atleast_1d(array).reshape(-1)
        array.setflags(write=False)
        return array

    @staticmethod
    def _labels(labels, n, prefix):
        if labels is None:
            if prefix:
                return ['%s%g' % (prefix, i) for i in range(n)]
            return [''] * n
        labels = [str(label) for label in labels]
        if len(labels) != n:
            raise ValueError('Expected %g labels, received %g' % (n, len(labels)))
        return labels

    @property
    def states(self):
        """Number of states"""
        return self.A.shape[0]

    @property
    def inputs(self):
        """Number of inputs"""
        return self.B.shape[1]

    @property
    def outputs(self):
        """Number of outputs"""
        return self.C.shape[0]

    def get_mats(self):
        return self.A, self.B, self.C, self.D

    def __repr__(self):
        str_out = ''
        str_out += 'Linear model\n'
        str_out += 'States: {:g}\n'.format(self.states)
        str_out += 'Inputs: {:g}\n'.format(self.inputs)
        str_out += 'Outputs: {:g}\n'.format(self.outputs)
        str_out += 'State Variables: ' + ', '.join(self.state_names) + '\n'
        str_out += 'Input Variables: ' + ', '.join(self.input_names) + '\n'
        str_out += 'Output Variables: ' + ', '.join(self.output_names) + '\n'
        return str_out

    def eigenvalues(self):
        """
        Returns:
            np.ndarray: Eigenvalues of the plant matrix sorted by decreasing real part. All ``NaN`` if the plant
            matrix has non-finite entries.
        """
        if not np.all(np.isfinite(self.A)):
            return np.full((self.states, ), np.nan, dtype=complex)
        eigs = scalg.eigvals(self.A)
        order = np.argsort(-eigs.real)
        return eigs[order]

    def max_eig(self):
        """Real part of the most unstable eigenvalue"""
        return np.max(self.eigenvalues().real)

    def is_stable(self, tol=0.):
        """
        Continuous time stability check.

        Args:
            tol (float): eigenvalues with a real part below ``tol`` are considered stable

        Returns:
            bool: ``True`` if every eigenvalue is finite and has a real part below ``tol``
        """
        eigs = self.eigenvalues()
        if not np.all(np.isfinite(eigs)):
            return False
        return bool(np.all(eigs.real < tol))

    def to_control(self):
        """
        Returns:
            control.StateSpace: continuous time state-space system of the ``python-control`` package
        """
        import control
        return control.ss(np.array(self.A), np.array(self.B), np.array(self.C), np.array(self.D))

    def transfer_function(self):
        """
        Transfer function matrix of the model, equivalent to Scilab's ``ss2tf``

        Returns:
            control.TransferFunction: ``ny x nu`` transfer function
        """
        import control
        return control.ss2tf(self.to_control())

    def transfer_function_evaluation(self, s):
        r"""
        Returns the transfer function of the system evaluated at :math:`s\in\mathbb{C}`.
        """
        n = self.states
        return self.C.dot(scalg.solve(s * np.eye(n) - self.A, self.B)) + self.D

    def save(self, path):
        """Save linear model to h5 file"""
        with h5py.File(path, 'w') as f:
            for name in ['A', 'B', 'C', 'D', 'x0', 'u0', 'y0']:
                f.create_dataset(name.lower(), data=getattr(self, name))
            str_type = h5py.string_dtype()
            for name in ['state_names', 'input_names', 'output_names',
                         'state_units', 'input_units', 'output_units']:
                f.create_dataset(name, data=np.array(getattr(self, name), dtype=object), dtype=str_type)

    @classmethod
    def load(cls, path):
        """
        Loads a linear model saved with :meth:`save`

        Args:
            path (str): path to the h5 file

        Returns:
            LinearModel: loaded model
        """
        with h5py.File(path, 'r') as f:
            data = dict()
            for name in ['a', 'b', 'c', 'd', 'x0', 'u0', 'y0']:
                data[name] = f[name][()]
            labels = dict()
            for name in ['state_names', 'input_names', 'output_names',
                         'state_units', 'input_units', 'output_units']:
                if name in f:
                    labels[name] = [label.decode('utf-8') if isinstance(label, bytes) else str(label)
                                    for label in f[name][()]]

        return cls(data['a'], data['b'], data['c'], data['d'], data['x0'], data['u0'], data['y0'], **labels)
