"""Two-body planetary system with patched-conic gravity.

The primary (planet) sits fixed at the origin. The secondary (moon) follows a
fixed circular orbit whose position is a pure function of time. At any
instant exactly one body's gravity acts on the craft: the moon's inside its
sphere of influence, the planet's everywhere else. Only the primary has an
atmosphere.

All physical constants reach the physics through an `Environment` instance;
`Environment.default()` builds the stock Kerbin-like system.

Example:
    >>> from rocketsim.environment import Environment
    >>> import numpy as np
    >>>
    >>> env = Environment.default()
    >>> position = np.array([0.0, -env.primary.radius - 1000.0])
    >>> frame = env.reference_frame(position, time=0.0)
    >>> print(frame.body.name)  # "Planet"
    >>> g = env.gravity(position, time=0.0)
"""

from dataclasses import dataclass

import numpy as np
from beartype import beartype
from numpy.typing import NDArray

from rocketsim.environment.atmosphere import (
    DRAG_FACTOR,
    MIN_DRAG_SPEED,
    ExponentialAtmosphere,
    drag_force,
)
from rocketsim.environment.gravity import point_mass_gravity, sphere_of_influence

# =============================================================================
# Constants
# =============================================================================

# Kerbin-like planet
PLANET_RADIUS: float = 600000.0  # [m]
PLANET_SURFACE_GRAVITY: float = 9.81  # [m/s^2]

# "Mun"-like moon
MOON_RADIUS: float = 200000.0  # [m]
MOON_SURFACE_GRAVITY: float = 1.63  # [m/s^2]
MOON_ORBIT_RADIUS: float = 12000000.0  # [m]


# =============================================================================
# Bodies
# =============================================================================


@beartype
@dataclass(frozen=True)
class CelestialBody:
    """A spherical gravitating body.

    Attributes:
        name: Display name (used in event log entries)
        radius: Surface radius [m]
        surface_gravity: Gravity at the surface [m/s^2]
        atmosphere: Atmosphere model, None for airless bodies
    """
    name: str
    radius: float
    surface_gravity: float
    atmosphere: ExponentialAtmosphere | None = None

    def __post_init__(self) -> None:
        if self.radius <= 0:
            raise ValueError(f"Body radius must be positive, got {self.radius}")
        if self.surface_gravity <= 0:
            raise ValueError(f"Surface gravity must be positive, got {self.surface_gravity}")

    @property
    def mu(self) -> float:
        """Gravitational parameter GM = g * R^2 [m^3/s^2]."""
        return self.surface_gravity * self.radius * self.radius


@beartype
@dataclass(frozen=True)
class BodyFrame:
    """Frame of the body whose gravity currently acts on the craft.

    Attributes:
        body: The dominant body
        center: Body center in world coordinates [m]
        velocity: Body velocity in world coordinates [m/s]
    """
    body: CelestialBody
    center: NDArray[np.float64]
    velocity: NDArray[np.float64]

    def relative_position(self, position: NDArray[np.float64]) -> NDArray[np.float64]:
        return position - self.center

    def relative_velocity(self, velocity: NDArray[np.float64]) -> NDArray[np.float64]:
        return velocity - self.velocity

    def altitude(self, position: NDArray[np.float64]) -> float:
        """Height above the body surface [m]."""
        return float(np.linalg.norm(position - self.center) - self.body.radius)


@beartype
@dataclass(frozen=True)
class EnvironmentForces:
    """Environmental forces on the craft.

    Attributes:
        gravity: Gravitational force [N]
        drag: Aerodynamic drag force [N]
        frame: Dominant body frame used for gravity
    """
    gravity: NDArray[np.float64]
    drag: NDArray[np.float64]
    frame: BodyFrame


# =============================================================================
# Environment
# =============================================================================


@beartype
@dataclass(frozen=True)
class Environment:
    """Planet + moon system.

    Attributes:
        primary: Planet, fixed at the origin
        secondary: Moon on a circular orbit about the primary
        secondary_orbit_radius: Moon orbit radius [m]
        secondary_phase: Moon orbital angle at t=0 [rad]
    """
    primary: CelestialBody
    secondary: CelestialBody
    secondary_orbit_radius: float
    secondary_phase: float = 0.0

    @classmethod
    def default(cls) -> "Environment":
        """Stock planet/moon system."""
        return cls(
            primary=CelestialBody(
                name="Planet",
                radius=PLANET_RADIUS,
                surface_gravity=PLANET_SURFACE_GRAVITY,
                atmosphere=ExponentialAtmosphere(),
            ),
            secondary=CelestialBody(
                name="Moon",
                radius=MOON_RADIUS,
                surface_gravity=MOON_SURFACE_GRAVITY,
            ),
            secondary_orbit_radius=MOON_ORBIT_RADIUS,
        )

    @property
    def bodies(self) -> tuple[CelestialBody, CelestialBody]:
        return (self.primary, self.secondary)

    @property
    def secondary_period(self) -> float:
        """Moon orbital period [s]."""
        return float(2 * np.pi * np.sqrt(self.secondary_orbit_radius ** 3 / self.primary.mu))

    @property
    def secondary_angular_rate(self) -> float:
        """Moon mean motion [rad/s]."""
        return 2 * np.pi / self.secondary_period

    @property
    def soi_radius(self) -> float:
        """Moon sphere of influence radius [m]."""
        return sphere_of_influence(
            self.secondary_orbit_radius, self.secondary.mu, self.primary.mu
        )

    @beartype
    def secondary_position(self, time: float) -> NDArray[np.float64]:
        """Moon center at time t [m]."""
        angle = self.secondary_phase + self.secondary_angular_rate * time
        return self.secondary_orbit_radius * np.array([np.cos(angle), np.sin(angle)])

    @beartype
    def secondary_velocity(self, time: float) -> NDArray[np.float64]:
        """Moon velocity at time t [m/s]."""
        n = self.secondary_angular_rate
        angle = self.secondary_phase + n * time
        return self.secondary_orbit_radius * n * np.array([-np.sin(angle), np.cos(angle)])

    @beartype
    def body_frame(self, body: CelestialBody, time: float) -> BodyFrame:
        """Frame of a specific body at time t."""
        if body is self.secondary:
            return BodyFrame(body, self.secondary_position(time), self.secondary_velocity(time))
        return BodyFrame(body, np.zeros(2), np.zeros(2))

    @beartype
    def in_secondary_soi(self, position: NDArray[np.float64], time: float) -> bool:
        """Whether the craft is strictly inside the moon's sphere of influence."""
        distance = float(np.linalg.norm(position - self.secondary_position(time)))
        return distance < self.soi_radius

    @beartype
    def reference_frame(self, position: NDArray[np.float64], time: float) -> BodyFrame:
        """Dominant body frame under the patched-conic rule."""
        if self.in_secondary_soi(position, time):
            return self.body_frame(self.secondary, time)
        return self.body_frame(self.primary, time)

    @beartype
    def gravity(self, position: NDArray[np.float64], time: float) -> NDArray[np.float64]:
        """Gravitational acceleration from the dominant body only [m/s^2]."""
        frame = self.reference_frame(position, time)
        return point_mass_gravity(position - frame.center, frame.body.mu)

    @beartype
    def primary_altitude(self, position: NDArray[np.float64]) -> float:
        """Height above the primary surface [m]."""
        return float(np.linalg.norm(position) - self.primary.radius)

    @beartype
    def density(self, position: NDArray[np.float64]) -> float:
        """Air density at position [kg/m^3]; only the primary has air."""
        atmosphere = self.primary.atmosphere
        if atmosphere is None:
            return 0.0
        return atmosphere.density(self.primary_altitude(position))

    @beartype
    def drag(
        self,
        position: NDArray[np.float64],
        velocity: NDArray[np.float64],
        area: float,
        drag_factor: float = DRAG_FACTOR,
        min_speed: float = MIN_DRAG_SPEED,
    ) -> NDArray[np.float64]:
        """Drag force [N] in the primary's (non-rotating) atmosphere."""
        return drag_force(velocity, self.density(position), area, drag_factor, min_speed)

    @beartype
    def forces(
        self,
        position: NDArray[np.float64],
        velocity: NDArray[np.float64],
        time: float,
        mass: float,
        area: float,
        drag_factor: float = DRAG_FACTOR,
        min_speed: float = MIN_DRAG_SPEED,
    ) -> EnvironmentForces:
        """Gravity and drag forces on a craft of given mass and drag area."""
        frame = self.reference_frame(position, time)
        g = point_mass_gravity(position - frame.center, frame.body.mu)
        return EnvironmentForces(
            gravity=mass * g,
            drag=self.drag(position, velocity, area, drag_factor, min_speed),
            frame=frame,
        )
