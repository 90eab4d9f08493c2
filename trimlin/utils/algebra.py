"""
Algebra package

Rotations, Euler angle kinematics and the flight-path relations used to constrain the attitude and body rates
while trimming.

Note:
    Tests can be found in ``tests/utils/algebra_test``
"""

import numpy as np


def rotation3d_x(angle):
    r"""

    Rotation matrix about the x axis by the input angle :math:`\Phi`

    .. math::

        \mathbf{\tau}_x = \begin{bmatrix}
            1 & 0 & 0 \\
            0 & \cos(\Phi) & -\sin(\Phi) \\
            0 & \sin(\Phi) & \cos(\Phi)
        \end{bmatrix}


    Args:
        angle (float): angle of rotation in radians about the x axis

    Returns:
        np.array: 3x3 rotation matrix about the x axis

    """
    c = np.cos(angle)
    s = np.sin(angle)
    mat = np.zeros((3, 3))
    mat[0, :] = [1.0, 0.0, 0.0]
    mat[1, :] = [0.0,   c,  -s]
    mat[2, :] = [0.0,   s,   c]
    return mat


def rotation3d_y(angle):
    r"""
    Rotation matrix about the y axis by the input angle :math:`\Theta`

    .. math::

        \mathbf{\tau}_y = \begin{bmatrix}
            \cos(\Theta) & 0 & \sin(\Theta) \\
            0 & 1 & 0 \\
            -\sin(\Theta) & 0 & \cos(\Theta)
        \end{bmatrix}


    Args:
        angle (float): angle of rotation in radians about the y axis

    Returns:
        np.array: 3x3 rotation matrix about the y axis

    """

    c = np.cos(angle)
    s = np.sin(angle)
    mat = np.zeros((3, 3))
    mat[0, :] = [c, 0.0, s]
    mat[1, :] = [0.0, 1.0, 0.0]
    mat[2, :] = [-s, 0.0,  c]
    return mat


def rotation3d_z(angle):
    r"""
    Rotation matrix about the z axis by the input angle :math:`\Psi`

    .. math::
        \mathbf{\tau}_z = \begin{bmatrix}
            \cos(\Psi) & -\sin(\Psi) & 0 \\
            \sin(\Psi) & \cos(\Psi) & 0 \\
            0 & 0 & 1
        \end{bmatrix}

    Args:
        angle (float): angle of rotation in radians about the z axis

    Returns:
        np.array: 3x3 rotation matrix about the z axis

    """

    c = np.cos(angle)
    s = np.sin(angle)
    mat = np.zeros((3, 3))
    mat[0, :] = [  c,  -s, 0.0]
    mat[1, :] = [  s,   c, 0.0]
    mat[2, :] = [0.0, 0.0, 1.0]
    return mat


def euler2rot(euler):
    r"""

    Transforms Euler angles (roll, pitch and yaw :math:`\Phi, \Theta, \Psi`) into a 3x3 rotation matrix that
    projects a body-axes vector onto the local North-East-Down axes.

    .. math::

        \mathbf{C}_{NB} = \mathbf{\tau}_z(\Psi) \mathbf{\tau}_y(\Theta) \mathbf{\tau}_x(\Phi)

    Args:
        euler (np.array): 1x3 array with the Euler angles in the form ``[roll, pitch, yaw]`` in radians

    Returns:
        np.array: 3x3 transformation matrix describing the rotation by the input Euler angles.

    """
    rot = rotation3d_z(euler[2]).dot(rotation3d_y(euler[1]).dot(rotation3d_x(euler[0])))
    return rot


def deuler_dt(euler):
    r"""
    Propagation matrix relating the body angular velocity :math:`\omega^B=[p, q, r]` to the rate of change of the
    Euler angles.

    .. math::
        \begin{bmatrix}\dot{\phi} \\ \dot{\theta} \\ \dot{\psi}\end{bmatrix} =
        \begin{bmatrix}
        1 & \sin\phi\tan\theta & \cos\phi\tan\theta \\
        0 & \cos\phi & -\sin\phi \\
        0 & \frac{\sin\phi}{\cos\theta} & \frac{\cos\phi}{\cos\theta}
        \end{bmatrix}
        \begin{bmatrix}
        p \\ q \\ r
        \end{bmatrix}

    Args:
        euler (np.ndarray): Euler angles :math:`[\phi, \theta, \psi]` for roll, pitch and yaw, respectively.

    Returns:
        np.ndarray: Propagation matrix relating the rotational velocities to the euler angles.
    """
    phi = euler[0]
    theta = euler[1]

    A = np.zeros((3, 3))
    A[0, 0] = 1
    A[0, 1] = np.tan(theta) * np.sin(phi)
    A[0, 2] = np.tan(theta) * np.cos(phi)

    A[1, 1] = np.cos(phi)
    A[1, 2] = -np.sin(phi)

    A[2, 1] = np.sin(phi) / np.cos(theta)
    A[2, 2] = np.cos(phi) / np.cos(theta)

    return A


def euler_rates_to_body(euler, euler_rates):
    r"""
    Body angular velocity from the Euler angle rates, the inverse of :func:`deuler_dt`.

    .. math::
        p &= \dot{\phi} - \dot{\psi}\sin\theta \\
        q &= \dot{\theta}\cos\phi + \dot{\psi}\sin\phi\cos\theta \\
        r &= -\dot{\theta}\sin\phi + \dot{\psi}\cos\phi\cos\theta

    Args:
        euler (np.ndarray): Euler angles ``[phi, theta, psi]``
        euler_rates (np.ndarray): Euler angle rates ``[phi_dot, theta_dot, psi_dot]``

    Returns:
        np.ndarray: body rates ``[p, q, r]``
    """
    phi = euler[0]
    theta = euler[1]
    phi_dot, theta_dot, psi_dot = euler_rates

    p = phi_dot - psi_dot * np.sin(theta)
    q = theta_dot * np.cos(phi) + psi_dot * np.sin(phi) * np.cos(theta)
    r = -theta_dot * np.sin(phi) + psi_dot * np.cos(phi) * np.cos(theta)
    return np.array([p, q, r])


def stability_to_body_rates(alpha, rates):
    """
    Rotates the angular rates ``[p_s, q_s, r_s]`` expressed in stability axes into body axes.

    Args:
        alpha (float): angle of attack in radians
        rates (np.ndarray): stability axes rates

    Returns:
        np.ndarray: body rates ``[p, q, r]``
    """
    p_s, q_s, r_s = rates
    return np.array([p_s * np.cos(alpha) - r_s * np.sin(alpha),
                     q_s,
                     p_s * np.sin(alpha) + r_s * np.cos(alpha)])


def turn_yaw_rate(phi, theta, gravity, velocity):
    r"""
    Yaw rate of a steady coordinated turn for a given bank angle and pitch attitude

    .. math:: \dot{\psi} = \frac{g\tan\phi\cos\theta}{V}

    Args:
        phi (float): bank angle in radians
        theta (float): pitch attitude in radians
        gravity (float): local gravitational acceleration
        velocity (float): true airspeed

    Returns:
        float: yaw rate in rad/s
    """
    return np.tan(phi) * gravity * np.cos(theta) / velocity


def coordinated_turn_bank(psi_dot, velocity, gravity, alpha, beta, gamma):
    r"""
    Bank angle that satisfies the coordinated turn constraint for a given turn rate, flight path angle and
    aerodynamic angles (Stevens and Lewis, eq. 3.6-7).

    Args:
        psi_dot (float): turn rate in rad/s
        velocity (float): true airspeed
        gravity (float): local gravitational acceleration
        alpha (float): angle of attack in radians
        beta (float): sideslip angle in radians
        gamma (float): flight path angle in radians

    Returns:
        float: bank angle ``phi`` in radians
    """
    g_ratio = psi_dot * velocity / gravity
    a = 1 - g_ratio * np.tan(alpha) * np.sin(beta)
    b = np.sin(gamma) / np.cos(beta)
    c = 1 + g_ratio ** 2 * np.cos(beta) ** 2

    num = (a - b ** 2) + b * np.tan(alpha) * np.sqrt(c * (1 - b ** 2) + g_ratio ** 2 * np.sin(beta) ** 2)
    den = a ** 2 - b ** 2 * (1 + c * np.tan(alpha) ** 2)
    return np.arctan(g_ratio * np.cos(beta) / np.cos(alpha) * num / den)


def rate_of_climb_pitch(gamma, alpha, beta, phi):
    r"""
    Pitch attitude that yields the flight path angle ``gamma`` for the given aerodynamic angles and bank angle
    (rate of climb constraint, Stevens and Lewis eq. 3.6-3).

    .. math::
        \tan\theta = \frac{ab + \sin\gamma\sqrt{a^2 - \sin^2\gamma + b^2}}{a^2 - \sin^2\gamma}

    with :math:`a = \cos\alpha\cos\beta` and :math:`b = \sin\phi\sin\beta + \cos\phi\sin\alpha\cos\beta`.

    Returns:
        float: pitch attitude ``theta`` in radians
    """
    a = np.cos(alpha) * np.cos(beta)
    b = np.sin(phi) * np.sin(beta) + np.cos(phi) * np.sin(alpha) * np.cos(beta)
    sgam = np.sin(gamma)
    return np.arctan((a * b + sgam * np.sqrt(a ** 2 - sgam ** 2 + b ** 2)) / (a ** 2 - sgam ** 2))


def wind2body_velocity(vt, alpha, beta):
    """
    Body axes velocity components ``[u, v, w]`` from airspeed, angle of attack and sideslip.
    """
    return vt * np.array([np.cos(alpha) * np.cos(beta),
                          np.sin(beta),
                          np.sin(alpha) * np.cos(beta)])
