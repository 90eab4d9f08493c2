"""
Named plant quantities and ordered vectors of them

A :class:`Component` is a scalar quantity of the plant (airspeed, angle of attack, throttle command...) with a unit
and getter/setter bound to one plant instance. A :class:`StateVector` is an ordered sequence of components whose
order defines the row/column indices of the linear system matrices.

Components are not subclassed per quantity. They are built by :func:`create_component` from the
``component_definitions`` registry, keyed by a symbolic identifier, e.g.

.. code-block:: python

    x = StateVector.from_identifiers(['Vt', 'Alpha', 'Theta', 'Q'], plant)
    x0 = x.snapshot()

Writing through a component (``set`` or ``restore``) writes directly into the live plant and never advances time.
Any two vectors bound to the same plant see each other's writes.
"""
from collections import namedtuple

import numpy as np

import trimlin.utils.exceptions as exceptions

categories = ['state', 'control', 'output']

ComponentDefinition = namedtuple('ComponentDefinition',
                                 ['name', 'unit', 'category', 'property', 'derivative_property', 'read_only'],
                                 defaults=(None, False))

component_definitions = dict()

# states
component_definitions['Vt'] = ComponentDefinition('Vt', 'ft/s', 'state',
                                                  'velocities/vt-fps', 'accelerations/vtdot-ft_sec2')
component_definitions['Alpha'] = ComponentDefinition('Alpha', 'rad', 'state',
                                                     'aero/alpha-rad', 'aero/alphadot-rad_sec')
component_definitions['Beta'] = ComponentDefinition('Beta', 'rad', 'state',
                                                    'aero/beta-rad', 'aero/betadot-rad_sec')
component_definitions['Phi'] = ComponentDefinition('Phi', 'rad', 'state',
                                                   'attitude/phi-rad', 'velocities/phidot-rad_sec')
component_definitions['Theta'] = ComponentDefinition('Theta', 'rad', 'state',
                                                     'attitude/theta-rad', 'velocities/thetadot-rad_sec')
component_definitions['Psi'] = ComponentDefinition('Psi', 'rad', 'state',
                                                   'attitude/psi-rad', 'velocities/psidot-rad_sec')
component_definitions['P'] = ComponentDefinition('P', 'rad/s', 'state',
                                                 'velocities/p-rad_sec', 'accelerations/pdot-rad_sec2')
component_definitions['Q'] = ComponentDefinition('Q', 'rad/s', 'state',
                                                 'velocities/q-rad_sec', 'accelerations/qdot-rad_sec2')
component_definitions['R'] = ComponentDefinition('R', 'rad/s', 'state',
                                                 'velocities/r-rad_sec', 'accelerations/rdot-rad_sec2')
component_definitions['Alt'] = ComponentDefinition('Alt', 'ft', 'state',
                                                   'position/h-sl-ft', 'velocities/h-dot-fps')
component_definitions['Longitude'] = ComponentDefinition('Longitude', 'rad', 'state',
                                                         'position/long-gc-rad', 'velocities/long-dot-rad_sec')
component_definitions['Latitude'] = ComponentDefinition('Latitude', 'rad', 'state',
                                                        'position/lat-geod-rad', 'velocities/lat-dot-rad_sec')
for i_engine in range(4):
    component_definitions['Rpm%d' % i_engine] = \
        ComponentDefinition('Rpm%d' % i_engine, 'rev/min', 'state',
                            'propulsion/engine[%d]/engine-rpm' % i_engine,
                            'propulsion/engine[%d]/engine-rpm-dot' % i_engine)
component_definitions['PropPitch'] = ComponentDefinition('PropPitch', 'deg', 'state',
                                                         'propulsion/engine[0]/blade-angle')
component_definitions['N1'] = ComponentDefinition('N1', '%', 'state', 'propulsion/engine[0]/n1')
component_definitions['N2'] = ComponentDefinition('N2', '%', 'state', 'propulsion/engine[0]/n2')

# controls
component_definitions['ThrottleCmd'] = ComponentDefinition('ThrottleCmd', 'norm', 'control',
                                                           'fcs/throttle-cmd-norm')
component_definitions['DaCmd'] = ComponentDefinition('DaCmd', 'norm', 'control', 'fcs/aileron-cmd-norm')
component_definitions['DeCmd'] = ComponentDefinition('DeCmd', 'norm', 'control', 'fcs/elevator-cmd-norm')
component_definitions['DrCmd'] = ComponentDefinition('DrCmd', 'norm', 'control', 'fcs/rudder-cmd-norm')

# outputs, driven by the flight control system
component_definitions['ThrottlePos'] = ComponentDefinition('ThrottlePos', 'norm', 'output',
                                                           'fcs/throttle-pos-norm', read_only=True)
component_definitions['DaPos'] = ComponentDefinition('DaPos', 'norm', 'output', 'fcs/aileron-pos-norm',
                                                     read_only=True)
component_definitions['DePos'] = ComponentDefinition('DePos', 'norm', 'output', 'fcs/elevator-pos-norm',
                                                     read_only=True)
component_definitions['DrPos'] = ComponentDefinition('DrPos', 'norm', 'output', 'fcs/rudder-pos-norm',
                                                     read_only=True)


class Component:
    """
    Scalar plant quantity bound to a getter and, optionally, a setter and a time derivative accessor.

    Args:
        name (str): unique name within a vector
        unit (str): unit label
        category (str): ``state``, ``control`` or ``output``
        getter (callable): returns the current value from the plant
        setter (callable): writes a value into the plant. ``None`` for read-only quantities
        derivative (callable): returns the current time derivative, if the plant provides it
    """
    def __init__(self, name, unit, category, getter, setter=None, derivative=None):
        if category not in categories:
            raise ValueError('Unknown component category %s' % category)
        self.name = name
        self.unit = unit
        self.category = category
        self._getter = getter
        self._setter = setter
        self._derivative = derivative

    @property
    def writable(self):
        return self._setter is not None

    @property
    def has_derivative(self):
        return self._derivative is not None

    def get(self):
        return float(self._getter())

    def set(self, value):
        if self._setter is None:
            raise TypeError('Component %s is read-only' % self.name)
        self._setter(float(value))

    def get_derivative(self):
        if self._derivative is None:
            raise TypeError('Component %s has no derivative accessor' % self.name)
        return float(self._derivative())

    def copy(self, category=None):
        if category is None:
            category = self.category
        return Component(self.name, self.unit, category, self._getter, self._setter, self._derivative)

    def __repr__(self):
        return '({:s}: {:s}, {:s})'.format(self.name, self.unit, self.category)


def create_component(identifier, plant, category=None):
    """
    Builds a :class:`Component` bound to ``plant`` from the registry entry ``identifier``.

    Args:
        identifier (str): key of ``component_definitions``
        plant (trimlin.utils.plant_interface.BasePlant): plant the accessors are bound to
        category (str): overrides the registry category, e.g. to use a state as an output

    Raises:
        exceptions.ComponentNotFound: if the identifier is not registered
    """
    try:
        definition = component_definitions[identifier]
    except KeyError:
        raise exceptions.ComponentNotFound(identifier)

    prop = definition.property

    def getter():
        return plant.get_property(prop)

    setter = None
    if not definition.read_only:
        def setter(value):
            plant.set_property(prop, value)

    derivative = None
    if definition.derivative_property is not None:
        dprop = definition.derivative_property

        def derivative():
            return plant.get_property(dprop)

    if category is None:
        category = definition.category
    return Component(definition.name, definition.unit, category, getter, setter, derivative)


class StateVector:
    """
    Ordered sequence of :class:`Component`.

    Mutating the vector writes into the plant the components are bound to. The vector holds no values of its own.
    """
    def __init__(self, components=None, category='state'):
        self.category = category
        self.components = []
        if components is not None:
            for component in components:
                self.add(component)

    @classmethod
    def from_identifiers(cls, identifiers, plant, category='state'):
        return cls([create_component(identifier, plant) for identifier in identifiers], category=category)

    def add(self, component):
        if component.name in self.names:
            raise ValueError('A component named %s already exists in this vector' % component.name)
        self.components.append(component)
        return self

    @property
    def size(self):
        return len(self.components)

    def __len__(self):
        return len(self.components)

    def __iter__(self):
        return iter(self.components)

    def __getitem__(self, item):
        return self.components[item]

    @property
    def names(self):
        return [component.name for component in self.components]

    @property
    def units(self):
        return [component.unit for component in self.components]

    def name(self, i):
        return self.components[i].name

    def unit(self, i):
        return self.components[i].unit

    def index(self, name):
        try:
            return self.names.index(name)
        except ValueError:
            raise exceptions.ComponentNotFound(name)

    def get(self, i):
        return self.components[i].get()

    def set(self, i, value):
        self.components[i].set(value)

    def snapshot(self):
        """Current values of all components as a 1D ``np.ndarray``"""
        return np.array([component.get() for component in self.components], dtype=float)

    def restore(self, values):
        """
        Writes ``values`` into the plant, skipping read-only components.

        Args:
            values (np.ndarray): one value per component, in vector order
        """
        values = np.atleast_1d(np.asarray(values, dtype=float))
        if values.shape != (self.size,):
            raise ValueError('Expected %g values, received %g' % (self.size, values.size))
        for component, value in zip(self.components, values):
            if component.writable:
                component.set(value)

    def derivatives(self):
        """Time derivatives of the components. ``NaN`` where the plant provides no derivative."""
        values = np.full((self.size, ), np.nan)
        for i, component in enumerate(self.components):
            if component.has_derivative:
                values[i] = component.get_derivative()
        return values

    def as_outputs(self):
        """New vector sharing the same plant accessors, with every component tagged as an output"""
        return StateVector([component.copy(category='output') for component in self.components],
                           category='output')

    def __repr__(self):
        string_out = ''
        for component in self.components:
            try:
                value = '{:g}'.format(component.get())
            except (KeyError, TypeError, ValueError):
                value = 'n/a'
            string_out += '\t{:s}\t{:s}\t:\t{:s}\n'.format(component.name, component.unit, value)
        return string_out
