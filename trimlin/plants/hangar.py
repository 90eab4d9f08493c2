"""Aircraft parameter sets for :class:`~trimlin.plants.simpleaircraft.SimpleAircraft`

Units are feet, slugs, pounds force and seconds. Control derivatives are per radian of surface deflection and the
surface deflection limits are the deflections reached at a normalised command of one.
"""
import numpy as np

deg2rad = np.pi / 180.

aircraft = dict()

aircraft['generic_jet'] = {
    # mass and geometry
    'weight': 20500.,
    'wing_area': 300.,
    'span': 30.,
    'chord': 11.32,
    'Ixx': 9496.,
    'Iyy': 55814.,
    'Izz': 63100.,
    'Ixz': 982.,
    # propulsion
    'n_engines': 1,
    'max_thrust': 15000.,
    'rpm_max': 10000.,
    'rpm_idle': 3000.,
    'engine_time_constant': 1.,
    # longitudinal
    'CL0': 0.1,
    'CLa': 4.5,
    'CLq': 0.,
    'CLde': 0.3,
    'CD0': 0.02,
    'k': 0.12,
    'Cm0': 0.02,
    'Cma': -0.6,
    'Cmq': -5.,
    'Cmde': -1.,
    # lateral
    'CYb': -0.6,
    'CYdr': 0.15,
    'Clb': -0.08,
    'Clp': -0.4,
    'Clr': 0.1,
    'Clda': -0.1,
    'Cldr': 0.01,
    'Cnb': 0.1,
    'Cnp': -0.02,
    'Cnr': -0.3,
    'Cnda': 0.005,
    'Cndr': -0.08,
    # surface limits
    'de_max': 25. * deg2rad,
    'da_max': 21.5 * deg2rad,
    'dr_max': 30. * deg2rad,
}

aircraft['light_single'] = {
    'weight': 2300.,
    'wing_area': 174.,
    'span': 35.8,
    'chord': 4.9,
    'Ixx': 948.,
    'Iyy': 1346.,
    'Izz': 1967.,
    'Ixz': 0.,
    'n_engines': 1,
    'max_thrust': 700.,
    'rpm_max': 2700.,
    'rpm_idle': 600.,
    'engine_time_constant': 0.5,
    'CL0': 0.31,
    'CLa': 5.14,
    'CLq': 3.9,
    'CLde': 0.43,
    'CD0': 0.031,
    'k': 0.054,
    'Cm0': 0.04,
    'Cma': -0.89,
    'Cmq': -12.4,
    'Cmde': -1.28,
    'CYb': -0.31,
    'CYdr': 0.187,
    'Clb': -0.089,
    'Clp': -0.47,
    'Clr': 0.096,
    'Clda': -0.178,
    'Cldr': 0.0147,
    'Cnb': 0.065,
    'Cnp': -0.03,
    'Cnr': -0.099,
    'Cnda': -0.053,
    'Cndr': -0.0657,
    'de_max': 25. * deg2rad,
    'da_max': 20. * deg2rad,
    'dr_max': 16. * deg2rad,
}


def get_aircraft(name):
    """Copy of the parameter set ``name``"""
    try:
        return dict(aircraft[name])
    except KeyError:
        raise KeyError('Unknown aircraft %s. Available: %s' % (name, ', '.join(aircraft.keys())))
