"""Environment models: planet/moon bodies, gravity and atmosphere.

Example:
    >>> from rocketsim.environment import Environment
    >>>
    >>> env = Environment.default()
    >>> g = env.gravity(position, time=0.0)      # m/s^2, dominant body only
    >>> rho = env.density(position)              # kg/m^3
"""

from rocketsim.environment.atmosphere import (
    ExponentialAtmosphere,
    drag_force,
)
from rocketsim.environment.bodies import (
    BodyFrame,
    CelestialBody,
    Environment,
    EnvironmentForces,
)
from rocketsim.environment.gravity import (
    point_mass_gravity,
    sphere_of_influence,
)

__all__ = [
    "BodyFrame",
    "CelestialBody",
    "Environment",
    "EnvironmentForces",
    "ExponentialAtmosphere",
    "drag_force",
    "point_mass_gravity",
    "sphere_of_influence",
]
