import unittest

import numpy as np

import trimlin.utils.exceptions as exceptions
from trimlin.linear.src.components import Component, StateVector, create_component, component_definitions
from trimlin.utils.plant_interface import BasePlant


class DictPlant(BasePlant):
    """Plant whose properties are the entries of a dictionary"""
    plant_id = 'DictPlant'

    def __init__(self, properties):
        self.properties = dict(properties)
        self.dt = 0.01
        self.n_steps = 0

    def set_time_step(self, dt):
        self.dt = dt

    def get_time_step(self):
        return self.dt

    def run_one_step(self):
        self.n_steps += 1

    def get_property(self, name):
        try:
            return self.properties[name]
        except KeyError:
            raise exceptions.UnknownProperty(self.plant_id, name)

    def set_property(self, name, value):
        if name not in self.properties:
            raise exceptions.UnknownProperty(self.plant_id, name)
        self.properties[name] = value


class TestComponents(unittest.TestCase):
    """
    Tests the plant components and the state vectors built from them
    """

    def setUp(self):
        self.plant = DictPlant({'velocities/vt-fps': 500.,
                                'accelerations/vtdot-ft_sec2': -0.5,
                                'aero/alpha-rad': 0.03,
                                'aero/alphadot-rad_sec': 0.001,
                                'fcs/throttle-cmd-norm': 0.4,
                                'fcs/elevator-pos-norm': -0.1,
                                'propulsion/engine[0]/n1': 88.})

    def test_create_component(self):
        vt = create_component('Vt', self.plant)
        self.assertEqual(vt.name, 'Vt')
        self.assertEqual(vt.unit, 'ft/s')
        self.assertEqual(vt.category, 'state')
        self.assertEqual(vt.get(), 500.)
        self.assertEqual(vt.get_derivative(), -0.5)

        vt.set(450.)
        self.assertEqual(self.plant.properties['velocities/vt-fps'], 450.)
        self.assertEqual(self.plant.n_steps, 0)

        as_output = create_component('Vt', self.plant, category='output')
        self.assertEqual(as_output.category, 'output')

        with self.assertRaises(exceptions.ComponentNotFound):
            create_component('Airspeed', self.plant)

    def test_registry(self):
        for identifier, definition in component_definitions.items():
            self.assertEqual(identifier, definition.name)
            self.assertIn(definition.category, ['state', 'control', 'output'])
        for identifier in ['ThrottleCmd', 'DaCmd', 'DeCmd', 'DrCmd']:
            self.assertEqual(component_definitions[identifier].category, 'control')
        for identifier in self.plant.propulsion_states():
            self.assertEqual(component_definitions[identifier].category, 'state')

    def test_read_only(self):
        de_pos = create_component('DePos', self.plant)
        self.assertFalse(de_pos.writable)
        self.assertEqual(de_pos.get(), -0.1)
        with self.assertRaises(TypeError):
            de_pos.set(0.2)

        n1 = create_component('N1', self.plant)
        self.assertFalse(n1.has_derivative)
        with self.assertRaises(TypeError):
            n1.get_derivative()

    def test_unknown_category(self):
        with self.assertRaises(ValueError):
            Component('x', '-', 'parameter', lambda: 0.)

    def test_state_vector(self):
        x = StateVector.from_identifiers(['Vt', 'Alpha', 'N1'], self.plant)
        self.assertEqual(x.size, 3)
        self.assertEqual(len(x), 3)
        self.assertEqual(x.names, ['Vt', 'Alpha', 'N1'])
        self.assertEqual(x.units, ['ft/s', 'rad', '%'])
        self.assertEqual(x.name(1), 'Alpha')
        self.assertEqual(x.unit(0), 'ft/s')
        self.assertEqual(x.index('N1'), 2)
        with self.assertRaises(exceptions.ComponentNotFound):
            x.index('Beta')

        np.testing.assert_array_equal(x.snapshot(), [500., 0.03, 88.])
        derivatives = x.derivatives()
        np.testing.assert_array_equal(derivatives[:2], [-0.5, 0.001])
        self.assertTrue(np.isnan(derivatives[2]))

        x.set(1, 0.05)
        self.assertEqual(self.plant.properties['aero/alpha-rad'], 0.05)
        self.assertEqual(x.get(1), 0.05)

        self.assertIn('Alpha', repr(x))

    def test_duplicate_names(self):
        x = StateVector.from_identifiers(['Vt', 'Alpha'], self.plant)
        with self.assertRaises(ValueError):
            x.add(create_component('Vt', self.plant))
        self.assertEqual(x.size, 2)

        with self.assertRaises(ValueError):
            StateVector.from_identifiers(['Alpha', 'Alpha'], self.plant)

    def test_snapshot_restore(self):
        x = StateVector.from_identifiers(['Vt', 'Alpha', 'ThrottleCmd'], self.plant)
        x0 = x.snapshot()

        x.restore([300., -0.1, 0.9])
        np.testing.assert_array_equal(x.snapshot(), [300., -0.1, 0.9])

        x.restore(x0)
        np.testing.assert_array_equal(x.snapshot(), x0)

        # the snapshot is a copy, not a view of the plant
        x0[0] = 0.
        self.assertEqual(self.plant.properties['velocities/vt-fps'], 500.)

        with self.assertRaises(ValueError):
            x.restore([1., 2.])

    def test_restore_skips_read_only(self):
        y = StateVector.from_identifiers(['Vt', 'DePos'], self.plant, category='output')
        y.restore([400., 0.7])
        self.assertEqual(self.plant.properties['velocities/vt-fps'], 400.)
        self.assertEqual(self.plant.properties['fcs/elevator-pos-norm'], -0.1)

    def test_shared_plant(self):
        """
        Vectors bound to the same plant see each other's writes
        """
        x = StateVector.from_identifiers(['Vt', 'Alpha'], self.plant)
        y = x.as_outputs()
        self.assertEqual(y.category, 'output')
        self.assertEqual([component.category for component in y], ['output', 'output'])
        self.assertEqual(y.names, x.names)

        x.set(0, 320.)
        self.assertEqual(y.get(0), 320.)

        other = StateVector.from_identifiers(['Alpha'], self.plant)
        other.set(0, 0.2)
        self.assertEqual(x.get(1), 0.2)
