"""Dynamics module for planar rigid-body simulation.

This module provides the equations of motion and state representation
for simulating the vehicle's translation and rotation in the plane.

Example:
    >>> from rocketsim.dynamics import FlightState, planar_derivatives, rk4_step
    >>> import numpy as np
    >>>
    >>> state = FlightState(position=np.array([0.0, -600000.0]), velocity=np.zeros(2))
    >>> state_dot = planar_derivatives(state, np.zeros(2), 0.0, mass=1000.0, inertia=1e4)
"""

from rocketsim.dynamics.rigid_body import (
    euler_step,
    planar_derivatives,
    rk4_step,
)
from rocketsim.dynamics.state import (
    FlightState,
    StateDerivative,
    heading_for_direction,
    heading_vector,
    wrap_angle,
)

__all__ = [
    # State
    "FlightState",
    "StateDerivative",
    # Angle utilities
    "heading_for_direction",
    "heading_vector",
    "wrap_angle",
    # Rigid body dynamics
    "planar_derivatives",
    # Integration
    "euler_step",
    "rk4_step",
]
