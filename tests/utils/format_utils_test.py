import unittest

import numpy as np

import trimlin.utils.format_utils as format_utils
from trimlin.linear.src.libss import LinearModel


class TestFormatUtils(unittest.TestCase):
    """
    Tests the formatting of vectors, matrices and the Scilab script
    """

    def test_format_number(self):
        field = format_utils.format_number(1.5, precision=10, width=20)
        self.assertEqual(field, '    1.5000000000e+00')
        self.assertEqual(len(field), 20)

        self.assertEqual(format_utils.format_number(-2., precision=3, width=10, notation='fixed'), '    -2.000')
        self.assertEqual(format_utils.format_number(0.25, precision=3, width=8, notation='general'), '    0.25')

        # wider than the column, never truncated
        self.assertEqual(format_utils.format_number(-1.5e10, precision=3, width=4, notation='fixed'),
                         '-15000000000.000')

        with self.assertRaises(ValueError):
            format_utils.format_number(1., notation='engineering')

    def test_format_vector(self):
        self.assertEqual(format_utils.format_vector([1., 2.], precision=2, width=10),
                         '[  1.00e+00;\n   2.00e+00]')
        self.assertEqual(format_utils.format_vector(3., precision=1, width=5, notation='fixed'), '[  3.0]')

    def test_format_matrix(self):
        matrix = np.array([[1., -2.], [0.5, 4.]])
        self.assertEqual(format_utils.format_matrix(matrix, precision=1, width=6, notation='fixed'),
                         '[   1.0,  -2.0;\n    0.5,   4.0]')
        self.assertEqual(format_utils.format_matrix(np.zeros((0, 3))), '[]')
        self.assertEqual(format_utils.format_matrix(np.array([1., 2.]), precision=0, width=3, notation='fixed'),
                         '[  1,  2]')

    def test_non_finite_entries(self):
        text = format_utils.format_matrix(np.array([[np.nan, np.inf]]), precision=2, width=8)
        self.assertEqual(text, '[     nan,     inf]')

    def test_scicos_script(self):
        model = LinearModel(np.array([[-1., 0.], [1., -2.]]),
                            np.array([[1.], [0.]]),
                            np.eye(2),
                            np.zeros((2, 1)),
                            [500., 0.03],
                            [0.2],
                            [500., 0.03])
        script = format_utils.scicos_script('jet', model)
        lines = script.split('\n')

        self.assertEqual(lines[0], 'jet.x0=..')
        self.assertEqual(lines[1], '[    5.0000000000e+02;')
        self.assertEqual(lines[2], '     3.0000000000e-02];')
        self.assertEqual(lines[3], 'jet.u0=..')
        self.assertEqual(lines[4], '[    2.0000000000e-01];')
        self.assertEqual(lines[5], "jet.sys = syslin('c',..")
        self.assertEqual(lines[6], '[   -1.0000000000e+00,    0.0000000000e+00;')
        self.assertEqual(lines[7], '     1.0000000000e+00,   -2.0000000000e+00],..')
        self.assertEqual(lines[8], '[    1.0000000000e+00;')
        self.assertEqual(lines[-3], '     0.0000000000e+00]);')
        self.assertEqual(lines[-2], 'jet.tfm = ss2tf(jet.sys);')
        self.assertEqual(lines[-1], '')

    def test_console_matrices(self):
        model = LinearModel([[-1.]], [[2.]], [[1.]], [[0.]], [0.], [0.], [0.])
        text = format_utils.console_matrices(model)
        self.assertIn('A=\n[    -1.000]', text)
        self.assertIn('B=\n[     2.000]', text)
        self.assertIn('D=\n[     0.000]', text)
