import os
import shutil
import tempfile
import unittest
import warnings

import configobj
import numpy as np

import trimlin.utils.cout_utils as cout
import trimlin.utils.exceptions as exceptions
import trimlin.utils.input_arg as input_arg
from trimlin.trimlin_main import main, build_parser
from trimlin.trim.neldermead import SolverStatus


class TestTrimlin(unittest.TestCase):
    """
    Trims and linearises the reference aircraft through the complete flow
    """

    def setUp(self):
        cout.cout_quiet()
        self.test_dir = tempfile.mkdtemp()

    def tearDown(self):
        shutil.rmtree(self.test_dir)

    def run_quiet(self, *args, **kwargs):
        with warnings.catch_warnings():
            warnings.simplefilter('ignore', exceptions.ConvergenceFailure)
            return main(*args, **kwargs)

    def test_default_flow(self):
        settings = input_arg.default_settings(output=self.test_dir)
        settings['TrimLin']['write_screen'] = False
        data = self.run_quiet(trimlin_input_dict=settings)

        solution = data.trim_solution
        self.assertIn(solution.status, (SolverStatus.CONVERGED, SolverStatus.MAX_ITERATIONS_REACHED))
        self.assertLess(solution.cost, 1e-6)

        model = data.linear
        self.assertEqual(model.A.shape, (13, 13))
        self.assertEqual(model.B.shape, (13, 4))
        self.assertEqual(model.C.shape, (13, 13))
        self.assertEqual(model.D.shape, (13, 4))
        self.assertEqual(model.state_names[:5], ['Vt', 'Alpha', 'Theta', 'Q', 'Rpm0'])
        self.assertEqual(model.input_names, ['ThrottleCmd', 'DaCmd', 'DeCmd', 'DrCmd'])
        self.assertEqual(model.x0[0], 500.)
        self.assertAlmostEqual(model.u0[0], solution.point[0])
        self.assertTrue(np.all(np.isfinite(model.A)))

        # state feedback read after one step
        np.testing.assert_allclose(np.diag(model.C), 1., atol=1e-3)

        # the plant is left at the trim point
        np.testing.assert_array_equal(data.x.snapshot(), model.x0)
        np.testing.assert_array_equal(data.u.snapshot(), model.u0)

        # airspeed is a stable, slow mode of a trimmed aircraft: speeding up increases drag
        self.assertLess(model.A[0, 0], 0.)
        # elevator (trailing edge down) pitches the nose down
        self.assertLess(model.B[3, 2], 0.)

        filename = os.path.join(self.test_dir, 'generic_jet_lin.sce')
        self.assertTrue(os.path.isfile(filename))
        with open(filename, 'r') as f:
            script = f.read()
        self.assertTrue(script.startswith('generic_jet.x0=..\n'))
        self.assertTrue(script.endswith('generic_jet.tfm = ss2tf(generic_jet.sys);\n'))

    def test_settings_file(self):
        config = configobj.ConfigObj()
        config.filename = os.path.join(self.test_dir, 'jet_turn.trimlin')
        config['TrimLin'] = {'case': 'jet_turn',
                             'route': self.test_dir,
                             'flow': ['PlantLoader', 'SimplexTrim', 'LinearStateSpace', 'SaveStateSpace'],
                             'write_screen': 'off',
                             'log_folder': self.test_dir,
                             'save_settings': 'on'}
        config['PlantLoader'] = {'plant_id': 'SimpleAircraft',
                                 'plant_settings': {'aircraft': 'generic_jet'}}
        config['SimplexTrim'] = {'mode': 'turning',
                                 'bank_angle': 15.,
                                 'checkpoint': 'on',
                                 'print_info': 'off'}
        config['LinearStateSpace'] = {'states': ['Vt', 'Alpha', 'Theta', 'Q'],
                                      'inputs': ['ThrottleCmd', 'DeCmd'],
                                      'outputs': ['Vt', 'DePos'],
                                      'print_info': 'off'}
        config['SaveStateSpace'] = {'save_h5': 'on'}
        config.write()

        data = self.run_quiet(['', config.filename])

        self.assertIn(data.trim_solution.status, (SolverStatus.CONVERGED, SolverStatus.MAX_ITERATIONS_REACHED))
        self.assertGreater(data.constraints.yaw_rate, 0.)
        self.assertGreater(data.plant.get_property('attitude/phi-rad'), 0.)

        model = data.linear
        self.assertEqual(model.A.shape, (4, 4))
        self.assertEqual(model.D.shape, (2, 2))
        self.assertEqual(model.output_names, ['Vt', 'DePos'])
        # elevator position follows the command
        self.assertAlmostEqual(model.D[1, 1], 1., 6)

        output_folder = os.path.join(self.test_dir, 'jet_turn')
        self.assertTrue(os.path.isfile(os.path.join(output_folder, 'jet_turn_lin.sce')))
        self.assertTrue(os.path.isfile(os.path.join(output_folder, 'jet_turn.statespace.h5')))
        self.assertTrue(os.path.isfile(os.path.join(output_folder, 'jet_turn.trimlin')))

        with open(os.path.join(output_folder, 'jet_turn_trim_checkpoint.txt'), 'r') as f:
            lines = f.readlines()
        self.assertTrue(lines[0].startswith('#'))
        self.assertEqual(len(lines) - 1, data.trim_solution.n_iter)
        self.assertEqual(len(lines[-1].split()), 7)

    def test_command_line(self):
        data = self.run_quiet(['trimlin', '--aircraft', 'light_single', '--velocity', '160', '--altitude', '3000',
                               '-o', self.test_dir])
        self.assertEqual(data.linear.x0[0], 160.)
        self.assertTrue(os.path.isfile(os.path.join(self.test_dir, 'light_single_lin.sce')))

    def test_arguments(self):
        parser = build_parser()
        args = parser.parse_args(['--aircraft', 'light_single', '--velocity', '160', '--mode', 'turning',
                                  '--bank-angle', '20', '--max-iter', '100', '-o', self.test_dir])
        settings = input_arg.read_settings(args)

        self.assertEqual(settings['TrimLin']['case'], 'light_single')
        self.assertEqual(settings['TrimLin']['log_folder'], self.test_dir)
        self.assertEqual(settings['PlantLoader']['plant_settings'], {'aircraft': 'light_single', 'velocity': 160.})
        self.assertEqual(settings['SimplexTrim'], {'velocity': 160., 'mode': 'turning', 'bank_angle': 20.,
                                                   'max_iter': 100})
        self.assertEqual(settings['SaveStateSpace']['folder'], self.test_dir)

        with self.assertRaises(SystemExit):
            parser.parse_args(['--mode', 'spinning'])

    def test_invalid_flow(self):
        settings = input_arg.default_settings(output=self.test_dir)
        settings['TrimLin']['write_screen'] = False

        settings['TrimLin']['flow'] = ['SimplexTrim']
        with self.assertRaises(exceptions.NotValidInputFile):
            self.run_quiet(trimlin_input_dict=settings)

        settings['TrimLin']['flow'] = ['PlantLoader', 'Trim']
        with self.assertRaises(exceptions.SolverNotFound):
            self.run_quiet(trimlin_input_dict=settings)
