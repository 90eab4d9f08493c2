import unittest

import numpy as np

import trimlin.utils.algebra as algebra
import trimlin.utils.cout_utils as cout
import trimlin.utils.exceptions as exceptions
from trimlin.plants.simpleaircraft import SimpleAircraft
from trimlin.trim.neldermead import NelderMead, SolverStatus
from trimlin.trim.trimmer import Trimmer, Constraints, TrimMode, default_lower_bound, default_upper_bound, \
    default_initial_guess, default_initial_step


class TestTrimmer(unittest.TestCase):
    """
    Tests the trim cost function on the reference aircraft
    """

    def setUp(self):
        cout.cout_quiet()
        self.plant = SimpleAircraft()
        self.plant.initialise({'aircraft': 'generic_jet'})
        self.v = np.array([0.2, -0.05, 0.04, 0.01, -0.02, 0.005])

    def test_constraints(self):
        constraints = Constraints(velocity=500., mode='turning')
        self.assertIs(constraints.mode, TrimMode.TURNING)
        yaw_rate = constraints.set_turn_from_bank(0.2, 0.05, 32.174)
        self.assertAlmostEqual(yaw_rate, np.tan(0.2) * 32.174 * np.cos(0.05) / 500., 14)
        self.assertAlmostEqual(yaw_rate, 0.013028, 5)
        self.assertEqual(constraints.yaw_rate, yaw_rate)
        self.assertIn('turning', repr(constraints))

        with self.assertRaises(ValueError):
            Constraints(mode='spinning')

    def test_out_of_bounds(self):
        trimmer = Trimmer(self.plant, Constraints())
        with self.assertRaises(exceptions.OutOfBounds) as context:
            trimmer.evaluate([1.2, 0., 0., 0., 0., 0.])
        np.testing.assert_array_equal(context.exception.candidate, [1.2, 0., 0., 0., 0., 0.])
        self.assertEqual(trimmer.n_evaluations, 0)

        with self.assertRaises(ValueError):
            trimmer.evaluate([0.5, 0.])

    def test_non_turning(self):
        trimmer = Trimmer(self.plant, Constraints(velocity=450., altitude=2000.))
        trimmer.constrain(self.v)
        plant = self.plant

        self.assertEqual(plant.get_property('fcs/throttle-cmd-norm'), 0.2)
        self.assertEqual(plant.get_property('fcs/elevator-cmd-norm'), -0.05)
        self.assertEqual(plant.get_property('fcs/aileron-cmd-norm'), 0.01)
        self.assertEqual(plant.get_property('fcs/rudder-cmd-norm'), -0.02)
        self.assertEqual(plant.get_property('aero/alpha-rad'), 0.04)
        self.assertEqual(plant.get_property('aero/beta-rad'), 0.005)
        self.assertEqual(plant.get_property('velocities/vt-fps'), 450.)
        self.assertEqual(plant.get_property('position/h-sl-ft'), 2000.)
        self.assertEqual(plant.get_property('attitude/phi-rad'), 0.)
        self.assertAlmostEqual(plant.get_property('attitude/theta-rad'),
                               algebra.rate_of_climb_pitch(0., 0.04, 0.005, 0.), 14)
        for prop in ['velocities/p-rad_sec', 'velocities/q-rad_sec', 'velocities/r-rad_sec']:
            self.assertEqual(plant.get_property(prop), 0.)

        # engine settled at the commanded speed
        self.assertAlmostEqual(plant.get_property('propulsion/engine[0]/engine-rpm'), 3000. + 0.2 * 7000.)

    def test_climb(self):
        trimmer = Trimmer(self.plant, Constraints(gamma=0.05))
        trimmer.constrain([0.5, 0., 0.03, 0., 0., 0.])
        self.assertAlmostEqual(self.plant.get_property('attitude/theta-rad'), 0.08, 12)

    def test_turning(self):
        constraints = Constraints(velocity=500., mode=TrimMode.TURNING)
        gravity = self.plant.gravity()
        constraints.set_turn_from_bank(0.3, 0., gravity)
        trimmer = Trimmer(self.plant, constraints)
        trimmer.constrain(self.v)

        phi = self.plant.get_property('attitude/phi-rad')
        theta = self.plant.get_property('attitude/theta-rad')
        self.assertAlmostEqual(phi, algebra.coordinated_turn_bank(constraints.yaw_rate, 500., gravity,
                                                                  0.04, 0.005, 0.), 14)
        self.assertGreater(phi, 0.)

        pqr = np.array([self.plant.get_property('velocities/p-rad_sec'),
                        self.plant.get_property('velocities/q-rad_sec'),
                        self.plant.get_property('velocities/r-rad_sec')])
        psi_dot = constraints.yaw_rate
        np.testing.assert_allclose(pqr, [-psi_dot * np.sin(theta),
                                         psi_dot * np.sin(phi) * np.cos(theta),
                                         psi_dot * np.cos(phi) * np.cos(theta)], atol=1e-15)
        np.testing.assert_array_equal(trimmer.target_rates, pqr)

    def test_rolling(self):
        constraints = Constraints(mode='rolling', roll_rate=0.2)
        trimmer = Trimmer(self.plant, constraints)
        trimmer.constrain(self.v)
        self.assertEqual(self.plant.get_property('velocities/p-rad_sec'), 0.2)
        self.assertEqual(self.plant.get_property('velocities/r-rad_sec'), 0.)

        constraints.stability_axis_roll = True
        trimmer.constrain(self.v)
        self.assertAlmostEqual(self.plant.get_property('velocities/p-rad_sec'), 0.2 * np.cos(0.04), 14)
        self.assertAlmostEqual(self.plant.get_property('velocities/r-rad_sec'), 0.2 * np.sin(0.04), 14)

    def test_pitching(self):
        trimmer = Trimmer(self.plant, Constraints(mode='pitching', pitch_rate=0.05))
        trimmer.constrain(self.v)
        self.assertEqual(self.plant.get_property('velocities/q-rad_sec'), 0.05)
        self.assertEqual(self.plant.get_property('velocities/p-rad_sec'), 0.)

    def test_cost(self):
        trimmer = Trimmer(self.plant, Constraints())
        result = trimmer(default_initial_guess)
        self.assertTrue(result.ok)
        self.assertTrue(np.isfinite(result.cost))
        self.assertGreater(result.cost, 0.)
        self.assertEqual(trimmer.n_evaluations, 1)

        # the step advances the plant
        self.assertGreater(self.plant.get_property('simulation/sim-time-sec'), 0.)

        # same candidate and starting state, same cost
        self.assertEqual(trimmer(default_initial_guess).cost, result.cost)

        # heavier weight on the airspeed rate
        heavy = Trimmer(self.plant, Constraints(), weights=[10., 100., 10., 10.])
        self.assertGreater(heavy(default_initial_guess).cost, result.cost)

        with self.assertRaises(exceptions.ConfigurationError):
            Trimmer(self.plant, Constraints(), weights=[1., 1.])

    def test_failed_evaluation(self):
        """
        A diverging plant yields a failed result with infinite cost instead of an exception
        """
        trimmer = Trimmer(self.plant, Constraints(velocity=0.))
        result = trimmer.evaluate(default_initial_guess)
        self.assertFalse(result.ok)
        self.assertEqual(result.cost, np.inf)
        self.assertNotEqual(result.message, '')

    def test_trim(self):
        trimmer = Trimmer(self.plant, Constraints(velocity=500., altitude=1000.))
        optimiser = NelderMead(trimmer, default_initial_guess, default_lower_bound, default_upper_bound,
                               default_initial_step, max_iter=5000, abstol=1e-10)
        solution = optimiser.run()

        self.assertIs(solution.status, SolverStatus.CONVERGED)
        self.assertLess(solution.cost, 1e-6)

        throttle, elevator, alpha, aileron, rudder, beta = solution.point
        self.assertGreater(alpha, 0.)
        self.assertLess(alpha, 0.1)
        self.assertGreater(throttle, 0.)
        self.assertAlmostEqual(beta, 0., 3)
        self.assertAlmostEqual(aileron, 0., 3)
        self.assertAlmostEqual(rudder, 0., 3)

        cost = trimmer.print_solution(solution.point)
        self.assertLess(cost, 1e-6)
        self.assertEqual(self.plant.get_property('aero/alpha-rad'), alpha)
