import trimlin.utils.algebra as algebra
import numpy as np
import unittest


class TestAlgebra(unittest.TestCase):
    """
    Tests the algebra module
    """

    def test_rotation_matrices(self):
        """
        Rotation matrices are orthonormal and compose in yaw, pitch, roll order
        """
        euler = np.array([0.3, -0.2, 1.1])
        rot = algebra.euler2rot(euler)
        np.testing.assert_allclose(rot.dot(rot.T), np.eye(3), atol=1e-14)
        self.assertAlmostEqual(np.linalg.det(rot), 1.0, 12)

        np.testing.assert_allclose(algebra.rotation3d_z(np.pi / 2).dot([1., 0., 0.]), [0., 1., 0.], atol=1e-14)
        np.testing.assert_allclose(algebra.rotation3d_y(np.pi / 2).dot([0., 0., 1.]), [1., 0., 0.], atol=1e-14)
        np.testing.assert_allclose(algebra.rotation3d_x(np.pi / 2).dot([0., 1., 0.]), [0., 0., 1.], atol=1e-14)

        # nose down pitch points the body x axis towards the ground (positive down)
        nose = algebra.euler2rot([0., -0.1, 0.]).dot([1., 0., 0.])
        self.assertGreater(nose[2], 0.)

    def test_euler_rates(self):
        """
        The Euler rate propagation matrix and the body rates from Euler rates are inverse to each other
        """
        for euler in [np.array([0., 0., 0.]),
                      np.array([0.4, 0.2, -1.]),
                      np.array([-1.2, -0.6, 2.5])]:
            rates = np.array([0.1, -0.3, 0.05])
            body = algebra.euler_rates_to_body(euler, rates)
            np.testing.assert_allclose(algebra.deuler_dt(euler).dot(body), rates, atol=1e-14)

    def test_turn_yaw_rate(self):
        yaw_rate = algebra.turn_yaw_rate(0.2, 0.05, 32.174, 500.)
        self.assertAlmostEqual(yaw_rate, np.tan(0.2) * 32.174 * np.cos(0.05) / 500., 14)
        self.assertAlmostEqual(yaw_rate, 0.013028, 5)

        self.assertEqual(algebra.turn_yaw_rate(0., 0.05, 32.174, 500.), 0.)

    def test_coordinated_turn_bank(self):
        """
        With zero aerodynamic angles and level flight the bank angle is that of the classical coordinated turn
        """
        gravity = 32.174
        velocity = 500.
        phi = 0.35
        psi_dot = algebra.turn_yaw_rate(phi, 0., gravity, velocity)
        self.assertAlmostEqual(algebra.coordinated_turn_bank(psi_dot, velocity, gravity, 0., 0., 0.), phi, 12)

        self.assertEqual(algebra.coordinated_turn_bank(0., velocity, gravity, 0.05, 0.01, 0.02), 0.)

        # banking further to hold the same turn with a positive angle of attack
        phi_alpha = algebra.coordinated_turn_bank(psi_dot, velocity, gravity, 0.1, 0., 0.)
        self.assertGreater(phi_alpha, phi)

    def test_rate_of_climb_pitch(self):
        # level flight, no sideslip nor bank
        self.assertAlmostEqual(algebra.rate_of_climb_pitch(0., 0.07, 0., 0.), 0.07, 14)
        # climb at zero angle of attack
        self.assertAlmostEqual(algebra.rate_of_climb_pitch(0.1, 0., 0., 0.), 0.1, 14)
        # climb with angle of attack
        self.assertAlmostEqual(algebra.rate_of_climb_pitch(0.1, 0.05, 0., 0.), 0.15, 12)
        # in a bank the pitch attitude needed for level flight is smaller than alpha
        self.assertLess(algebra.rate_of_climb_pitch(0., 0.07, 0., 0.5), 0.07)

    def test_stability_to_body_rates(self):
        alpha = 0.1
        np.testing.assert_allclose(algebra.stability_to_body_rates(alpha, [0.2, 0., 0.]),
                                   [0.2 * np.cos(alpha), 0., 0.2 * np.sin(alpha)])
        np.testing.assert_allclose(algebra.stability_to_body_rates(0., [0.2, 0.1, -0.3]), [0.2, 0.1, -0.3])

    def test_wind2body_velocity(self):
        uvw = algebra.wind2body_velocity(300., 0.1, -0.05)
        self.assertAlmostEqual(np.linalg.norm(uvw), 300., 10)
        self.assertAlmostEqual(np.arctan2(uvw[2], uvw[0]), 0.1, 14)
        self.assertAlmostEqual(np.arcsin(uvw[1] / 300.), -0.05, 14)
