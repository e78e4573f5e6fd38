"""Planar rigid-body state vector.

The state vector contains:
- Position (2): [x, y] in the world frame, origin at the planet center
- Velocity (2): [vx, vy] in the world frame
- Rotation (1): heading angle [rad]
- Angular velocity (1): [rad/s]

Total: 6 state variables

Heading convention: rotation = 0 points along -y (straight up from the
launch pad at (0, -R)); the heading unit vector is (sin theta, -cos theta).
"""

from dataclasses import dataclass

import numpy as np
from beartype import beartype
from numpy.typing import NDArray

# =============================================================================
# Angle Utilities
# =============================================================================


@beartype
def heading_vector(rotation: float) -> NDArray[np.float64]:
    """Unit thrust direction for a given rotation."""
    return np.array([np.sin(rotation), -np.cos(rotation)])


@beartype
def heading_for_direction(direction: NDArray[np.float64]) -> float:
    """Rotation that points the heading along `direction`."""
    return float(np.arctan2(direction[1], direction[0]) + np.pi / 2)


@beartype
def wrap_angle(angle: float) -> float:
    """Wrap an angle into [-pi, pi]."""
    return float((angle + np.pi) % (2 * np.pi) - np.pi)


# =============================================================================
# State Classes
# =============================================================================


@beartype
@dataclass
class FlightState:
    """Planar rigid-body kinematic state.

    Attributes:
        position: [x, y] position [m]
        velocity: [vx, vy] velocity [m/s]
        rotation: Heading angle [rad]
        angular_velocity: Rotation rate [rad/s]
        time: Simulation time [s]
    """
    position: NDArray[np.float64]
    velocity: NDArray[np.float64]
    rotation: float = 0.0
    angular_velocity: float = 0.0
    time: float = 0.0

    def __post_init__(self) -> None:
        """Validate vector shapes."""
        self.position = np.asarray(self.position, dtype=np.float64)
        self.velocity = np.asarray(self.velocity, dtype=np.float64)

        if self.position.shape != (2,):
            raise ValueError(f"Position must be shape (2,), got {self.position.shape}")
        if self.velocity.shape != (2,):
            raise ValueError(f"Velocity must be shape (2,), got {self.velocity.shape}")

    def to_array(self) -> NDArray[np.float64]:
        """Convert state to flat array for integration."""
        return np.concatenate([
            self.position,
            self.velocity,
            [self.rotation, self.angular_velocity],
        ])

    @classmethod
    def from_array(cls, arr: NDArray[np.float64], time: float = 0.0) -> "FlightState":
        """Create state from flat array."""
        return cls(
            position=arr[0:2].copy(),
            velocity=arr[2:4].copy(),
            rotation=float(arr[4]),
            angular_velocity=float(arr[5]),
            time=time,
        )

    def copy(self) -> "FlightState":
        """Create a copy of this state."""
        return FlightState(
            position=self.position.copy(),
            velocity=self.velocity.copy(),
            rotation=self.rotation,
            angular_velocity=self.angular_velocity,
            time=self.time,
        )

    @property
    def heading(self) -> NDArray[np.float64]:
        """Unit heading vector."""
        return heading_vector(self.rotation)

    @property
    def speed(self) -> float:
        """Speed magnitude [m/s]."""
        return float(np.linalg.norm(self.velocity))


@beartype
@dataclass
class StateDerivative:
    """Time derivative of the planar state.

    Attributes:
        position_dot: d(position)/dt = velocity [m/s]
        velocity_dot: d(velocity)/dt = acceleration [m/s^2]
        rotation_dot: d(rotation)/dt = angular velocity [rad/s]
        angular_velocity_dot: angular acceleration [rad/s^2]
    """
    position_dot: NDArray[np.float64]
    velocity_dot: NDArray[np.float64]
    rotation_dot: float
    angular_velocity_dot: float

    def to_array(self) -> NDArray[np.float64]:
        """Convert to flat array for integration."""
        return np.concatenate([
            self.position_dot,
            self.velocity_dot,
            [self.rotation_dot, self.angular_velocity_dot],
        ])
