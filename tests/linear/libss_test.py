import os
import shutil
import tempfile
import unittest

import numpy as np

from trimlin.linear.src.libss import LinearModel


class TestLinearModel(unittest.TestCase):
    """
    Tests the linear model container
    """

    def setUp(self):
        self.A = np.array([[-0.5, 1., 0.],
                           [-1., -0.5, 0.],
                           [0., 0., -2.]])
        self.B = np.array([[0.], [1.], [0.5]])
        self.C = np.array([[1., 0., 0.],
                           [0., 0., 1.]])
        self.D = np.array([[0.], [0.1]])
        self.model = LinearModel(self.A, self.B, self.C, self.D,
                                 x0=[500., 0.03, 1000.], u0=[0.2], y0=[500., 1000.],
                                 state_names=['Vt', 'Alpha', 'Alt'], input_names=['ThrottleCmd'],
                                 output_names=['Vt', 'Alt'], state_units=['ft/s', 'rad', 'ft'])

        self.test_dir = tempfile.mkdtemp()

    def tearDown(self):
        shutil.rmtree(self.test_dir)

    def test_dimensions(self):
        self.assertEqual(self.model.states, 3)
        self.assertEqual(self.model.inputs, 1)
        self.assertEqual(self.model.outputs, 2)
        self.assertEqual(self.model.input_units, [''])
        self.assertIn('Alpha', repr(self.model))

        default_labels = LinearModel(self.A, self.B, self.C, self.D, np.zeros(3), np.zeros(1), np.zeros(2))
        self.assertEqual(default_labels.state_names, ['x0', 'x1', 'x2'])
        self.assertEqual(default_labels.output_names, ['y0', 'y1'])

        with self.assertRaises(AssertionError):
            LinearModel(self.A, self.B[:2], self.C, self.D, np.zeros(3), np.zeros(1), np.zeros(2))
        with self.assertRaises(ValueError):
            LinearModel(self.A, self.B, self.C, self.D, np.zeros(3), np.zeros(1), np.zeros(2),
                        state_names=['Vt'])

    def test_read_only(self):
        with self.assertRaises(ValueError):
            self.model.A[0, 0] = 1.
        with self.assertRaises(ValueError):
            self.model.x0[0] = 1.
        # the model holds a copy of the input arrays
        self.A[0, 0] = 10.
        self.assertEqual(self.model.A[0, 0], -0.5)

    def test_eigenvalues(self):
        eigs = self.model.eigenvalues()
        np.testing.assert_allclose(eigs.real, [-0.5, -0.5, -2.])
        np.testing.assert_allclose(np.sort(eigs[:2].imag), [-1., 1.])
        self.assertAlmostEqual(self.model.max_eig(), -0.5)
        self.assertTrue(self.model.is_stable())
        self.assertFalse(self.model.is_stable(tol=-1.))

        unstable = LinearModel([[0.1]], [[1.]], [[1.]], [[0.]], [0.], [0.], [0.])
        self.assertFalse(unstable.is_stable())

    def test_transfer_function_evaluation(self):
        s = 1j
        expected = self.C.dot(np.linalg.solve(s * np.eye(3) - self.A, self.B)) + self.D
        np.testing.assert_allclose(self.model.transfer_function_evaluation(s), expected)

    def test_control(self):
        sys = self.model.to_control()
        np.testing.assert_array_equal(np.asarray(sys.A), self.A)
        np.testing.assert_array_equal(np.asarray(sys.D), self.D)

        # static gain of the second output
        gain = self.model.transfer_function_evaluation(0.)
        np.testing.assert_allclose(gain[1, 0], 0.5 / 2. + 0.1)

    def test_save_load(self):
        path = os.path.join(self.test_dir, 'model.statespace.h5')
        self.model.save(path)
        loaded = LinearModel.load(path)

        for mat_saved, mat_loaded in zip(self.model.get_mats(), loaded.get_mats()):
            np.testing.assert_array_equal(mat_saved, mat_loaded)
        np.testing.assert_array_equal(loaded.x0, self.model.x0)
        np.testing.assert_array_equal(loaded.y0, self.model.y0)
        self.assertEqual(loaded.state_names, ['Vt', 'Alpha', 'Alt'])
        self.assertEqual(loaded.state_units, ['ft/s', 'rad', 'ft'])
        self.assertEqual(loaded.input_units, [''])
