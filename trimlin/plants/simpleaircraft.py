import numpy as np

import trimlin.utils.algebra as algebra
import trimlin.utils.exceptions as exceptions
import trimlin.utils.plant_interface as plant_interface
import trimlin.utils.settings as settings
import trimlin.plants.hangar as hangar

g0 = 32.174  # ft/s2
rho0 = 0.0023769  # slug/ft3
earth_radius = 20925650.  # ft
max_engines = 4  # engine speeds in the component registry


@plant_interface.plant
class SimpleAircraft(plant_interface.BasePlant):
    r"""
    Rigid aircraft flying over a flat, non-rotating Earth

    The state is integrated with a forward Euler step of fixed size. The state rates returned by the derivative
    properties are those evaluated at the beginning of the last step.

    Aerodynamics are linear in the stability derivatives of the parameter set, with a parabolic drag polar

    .. math:: C_D = C_{D_0} + k C_L^2

    and the thrust of each engine grows with the square of its speed and with the air density. The engine speed
    follows the throttle command with a first order lag.

    Properties exposed (besides their time derivatives):

        ``velocities/vt-fps``, ``aero/alpha-rad``, ``aero/beta-rad``, ``attitude/phi-rad``,
        ``attitude/theta-rad``, ``attitude/psi-rad``, ``velocities/p-rad_sec``, ``velocities/q-rad_sec``,
        ``velocities/r-rad_sec``, ``position/h-sl-ft``, ``position/lat-geod-rad``, ``position/long-gc-rad``,
        ``propulsion/engine[i]/engine-rpm``, ``fcs/<surface>-cmd-norm``, ``fcs/<surface>-pos-norm``,
        ``accelerations/gravity-ft_sec2``, ``atmosphere/rho-slugs_ft3``, ``aero/qbar-psf``,
        ``simulation/sim-time-sec``
    """
    plant_id = 'SimpleAircraft'

    settings_types = dict()
    settings_default = dict()
    settings_description = dict()
    settings_options = dict()

    settings_types['aircraft'] = 'str'
    settings_default['aircraft'] = 'generic_jet'
    settings_description['aircraft'] = 'Parameter set from the hangar'
    settings_options['aircraft'] = list(hangar.aircraft.keys())

    settings_types['velocity'] = 'float'
    settings_default['velocity'] = 500.
    settings_description['velocity'] = 'Initial true airspeed (ft/s)'

    settings_types['altitude'] = 'float'
    settings_default['altitude'] = 1000.
    settings_description['altitude'] = 'Initial altitude (ft)'

    settings_types['time_step'] = 'float'
    settings_default['time_step'] = 1. / 120
    settings_description['time_step'] = 'Integration time step (s)'

    settings_types['parameters'] = 'dict'
    settings_default['parameters'] = dict()
    settings_description['parameters'] = 'Values overriding those of the hangar parameter set'

    settings_table = settings.SettingsTable()
    __doc__ += settings_table.generate(settings_types, settings_default, settings_description, settings_options)

    state_properties = ['velocities/vt-fps',
                        'aero/alpha-rad',
                        'aero/beta-rad',
                        'attitude/phi-rad',
                        'attitude/theta-rad',
                        'attitude/psi-rad',
                        'velocities/p-rad_sec',
                        'velocities/q-rad_sec',
                        'velocities/r-rad_sec',
                        'position/h-sl-ft',
                        'position/lat-geod-rad',
                        'position/long-gc-rad']

    derivative_properties = ['accelerations/vtdot-ft_sec2',
                             'aero/alphadot-rad_sec',
                             'aero/betadot-rad_sec',
                             'velocities/phidot-rad_sec',
                             'velocities/thetadot-rad_sec',
                             'velocities/psidot-rad_sec',
                             'accelerations/pdot-rad_sec2',
                             'accelerations/qdot-rad_sec2',
                             'accelerations/rdot-rad_sec2',
                             'velocities/h-dot-fps',
                             'velocities/lat-dot-rad_sec',
                             'velocities/long-dot-rad_sec']

    surfaces = ['throttle', 'elevator', 'aileron', 'rudder']

    def __init__(self):
        self.settings = None
        self.params = None
        self.dt = 1. / 120
        self.time = 0.

        self.n_engines = 1
        self.state = None
        self.state_dot = None
        self.index = dict()
        self.derivative_index = dict()
        self.commands = dict()

        self.inertia = None
        self.mass = None

    def initialise(self, in_dict=None):
        if in_dict is None:
            in_dict = dict()
        self.settings = in_dict
        settings.to_custom_types(self.settings, self.settings_types, self.settings_default, self.settings_options)

        self.params = hangar.get_aircraft(self.settings['aircraft'])
        for k, v in self.settings['parameters'].items():
            if k not in self.params:
                raise KeyError('Unknown aircraft parameter %s' % k)
            self.params[k] = float(v)

        p = self.params
        self.n_engines = int(p['n_engines'])
        if not 1 <= self.n_engines <= max_engines:
            raise ValueError('Number of engines must be between 1 and %d, got %d' % (max_engines, self.n_engines))
        self.mass = p['weight'] / g0
        self.inertia = np.array([[p['Ixx'], 0., -p['Ixz']],
                                 [0., p['Iyy'], 0.],
                                 [-p['Ixz'], 0., p['Izz']]])

        names = self.state_properties + ['propulsion/engine[%d]/engine-rpm' % i for i in range(self.n_engines)]
        dnames = self.derivative_properties + \
            ['propulsion/engine[%d]/engine-rpm-dot' % i for i in range(self.n_engines)]
        self.index = {name: i for i, name in enumerate(names)}
        self.derivative_index = {name: i for i, name in enumerate(dnames)}

        self.state = np.zeros((len(names), ))
        self.state[self.index['velocities/vt-fps']] = self.settings['velocity']
        self.state[self.index['position/h-sl-ft']] = self.settings['altitude']
        self.commands = {surface: 0. for surface in self.surfaces}
        self.commands['throttle'] = 0.5
        self.settle_propulsion()

        self.set_time_step(self.settings['time_step'])
        self.time = 0.
        self.state_dot = self.derivatives(self.state)

    def set_time_step(self, dt):
        self.dt = float(dt)

    def get_time_step(self):
        return self.dt

    def run_one_step(self):
        self.state_dot = self.derivatives(self.state)
        with np.errstate(all='ignore'):
            self.state = self.state + self.dt * self.state_dot
        self.time += self.dt

    def get_property(self, name):
        try:
            return self.state[self.index[name]]
        except KeyError:
            pass
        try:
            return self.state_dot[self.derivative_index[name]]
        except KeyError:
            pass

        if name.startswith('fcs/'):
            surface, kind = name[4:].split('-')[:2]
            if surface in self.commands:
                if kind == 'cmd':
                    return self.commands[surface]
                elif kind == 'pos':
                    return self.surface_position(surface)
        elif name == 'accelerations/gravity-ft_sec2':
            return self.gravity_at(self.state[self.index['position/h-sl-ft']])
        elif name == 'atmosphere/rho-slugs_ft3':
            return self.density(self.state[self.index['position/h-sl-ft']])
        elif name == 'aero/qbar-psf':
            return 0.5 * self.density(self.state[self.index['position/h-sl-ft']]) * \
                   self.state[self.index['velocities/vt-fps']] ** 2
        elif name == 'simulation/sim-time-sec':
            return self.time
        raise exceptions.UnknownProperty(self.plant_id, name)

    def set_property(self, name, value):
        try:
            self.state[self.index[name]] = value
            return
        except KeyError:
            pass

        if name.startswith('fcs/') and name.endswith('-cmd-norm'):
            surface = name[4:-len('-cmd-norm')]
            if surface in self.commands:
                self.commands[surface] = float(value)
                return
        if name in self.derivative_index or name.startswith('fcs/'):
            raise TypeError('Property %s of %s is read-only' % (name, self.plant_id))
        raise exceptions.UnknownProperty(self.plant_id, name)

    def settle_propulsion(self):
        for i_engine in range(self.n_engines):
            self.state[self.index['propulsion/engine[%d]/engine-rpm' % i_engine]] = self.commanded_rpm()

    def propulsion_states(self):
        return ['Rpm%d' % i_engine for i_engine in range(self.n_engines)]

    def surface_position(self, surface):
        if surface == 'throttle':
            return float(np.clip(self.commands[surface], 0., 1.))
        return float(np.clip(self.commands[surface], -1., 1.))

    def commanded_rpm(self):
        p = self.params
        return p['rpm_idle'] + self.surface_position('throttle') * (p['rpm_max'] - p['rpm_idle'])

    @staticmethod
    def density(altitude):
        with np.errstate(all='ignore'):
            return rho0 * (1 - 6.8756e-6 * altitude) ** 4.2561

    @staticmethod
    def gravity_at(altitude):
        return g0 * (earth_radius / (earth_radius + altitude)) ** 2

    def derivatives(self, state):
        """Time derivative of ``state`` for the current commands"""
        p = self.params
        ix = self.index
        with np.errstate(all='ignore'):
            vt = state[ix['velocities/vt-fps']]
            alpha = state[ix['aero/alpha-rad']]
            beta = state[ix['aero/beta-rad']]
            euler = state[[ix['attitude/phi-rad'], ix['attitude/theta-rad'], ix['attitude/psi-rad']]]
            omega = state[[ix['velocities/p-rad_sec'], ix['velocities/q-rad_sec'], ix['velocities/r-rad_sec']]]
            altitude = state[ix['position/h-sl-ft']]
            lat = state[ix['position/lat-geod-rad']]
            rpm = np.array([state[ix['propulsion/engine[%d]/engine-rpm' % i]] for i in range(self.n_engines)])
            phi, theta = euler[0], euler[1]
            p_rate, q_rate, r_rate = omega

            rho = self.density(altitude)
            qbar_s = 0.5 * rho * vt ** 2 * p['wing_area']
            c_hat = p['chord'] / (2 * vt)
            b_hat = p['span'] / (2 * vt)

            de = self.surface_position('elevator') * p['de_max']
            da = self.surface_position('aileron') * p['da_max']
            dr = self.surface_position('rudder') * p['dr_max']

            # aerodynamics
            cl = p['CL0'] + p['CLa'] * alpha + p['CLq'] * q_rate * c_hat + p['CLde'] * de
            cd = p['CD0'] + p['k'] * cl ** 2
            cy = p['CYb'] * beta + p['CYdr'] * dr
            c_roll = (p['Clb'] * beta + p['Clp'] * p_rate * b_hat + p['Clr'] * r_rate * b_hat +
                      p['Clda'] * da + p['Cldr'] * dr)
            c_pitch = p['Cm0'] + p['Cma'] * alpha + p['Cmq'] * q_rate * c_hat + p['Cmde'] * de
            c_yaw = (p['Cnb'] * beta + p['Cnp'] * p_rate * b_hat + p['Cnr'] * r_rate * b_hat +
                     p['Cnda'] * da + p['Cndr'] * dr)

            lift = qbar_s * cl
            drag = qbar_s * cd

            # propulsion
            thrust = np.sum(p['max_thrust'] / self.n_engines * (rpm / p['rpm_max']) ** 2) * rho / rho0
            rpm_dot = (self.commanded_rpm() - rpm) / p['engine_time_constant']

            forces = np.array([-drag * np.cos(alpha) + lift * np.sin(alpha) + thrust,
                               qbar_s * cy,
                               -drag * np.sin(alpha) - lift * np.cos(alpha)])
            gravity = self.gravity_at(altitude) * np.array([-np.sin(theta),
                                                            np.sin(phi) * np.cos(theta),
                                                            np.cos(phi) * np.cos(theta)])
            moments = qbar_s * np.array([p['span'] * c_roll, p['chord'] * c_pitch, p['span'] * c_yaw])

            # translational dynamics in body axes
            uvw = algebra.wind2body_velocity(vt, alpha, beta)
            u, v, w = uvw
            uvw_dot = np.cross(uvw, omega) + forces / self.mass + gravity
            u_dot, v_dot, w_dot = uvw_dot

            vt_dot = (u * u_dot + v * v_dot + w * w_dot) / vt
            alpha_dot = (u * w_dot - w * u_dot) / (u ** 2 + w ** 2)
            beta_dot = (vt * v_dot - v * vt_dot) / (vt ** 2 * np.cos(beta))

            # rotational dynamics
            omega_dot = np.linalg.solve(self.inertia, moments - np.cross(omega, self.inertia.dot(omega)))

            # kinematics
            euler_dot = algebra.deuler_dt(euler).dot(omega)
            ned_velocity = algebra.euler2rot(euler).dot(uvw)
            h_dot = -ned_velocity[2]
            lat_dot = ned_velocity[0] / (earth_radius + altitude)
            lon_dot = ned_velocity[1] / ((earth_radius + altitude) * np.cos(lat))

        return np.concatenate(([vt_dot, alpha_dot, beta_dot], euler_dot, omega_dot,
                               [h_dot, lat_dot, lon_dot], rpm_dot))
