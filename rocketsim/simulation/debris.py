"""Low-fidelity propagation of detached stages.

Debris is cosmetic: a single explicit Euler step per substep under gravity
and drag with a fixed nominal mass, no torque. Debris that sinks below any
body's surface is dropped without a crash event.
"""

import logging

import numpy as np
from beartype import beartype

from rocketsim.dynamics.rigid_body import euler_step, planar_derivatives
from rocketsim.dynamics.state import FlightState, StateDerivative
from rocketsim.environment.atmosphere import DRAG_FACTOR, MIN_DRAG_SPEED
from rocketsim.environment.bodies import Environment
from rocketsim.simulation.state import Debris
from rocketsim.vehicle.mass import PARACHUTE_AREA_MULTIPLIER, drag_area

logger = logging.getLogger(__name__)

DEBRIS_NOMINAL_MASS: float = 1000.0  # [kg]
DEBRIS_INERTIA: float = 1.0  # Unused with zero torque, must be positive [kg*m^2]


@beartype
def is_below_surface(environment: Environment, debris: Debris) -> bool:
    """Whether the debris is inside any body."""
    position = debris.kinematics.position
    time = debris.kinematics.time
    for body in environment.bodies:
        frame = environment.body_frame(body, time)
        if float(np.linalg.norm(frame.relative_position(position))) < body.radius:
            return True
    return False


@beartype
def advance_debris(
    debris: list[Debris],
    environment: Environment,
    dt: float,
    nominal_mass: float = DEBRIS_NOMINAL_MASS,
    drag_factor: float = DRAG_FACTOR,
    min_drag_speed: float = MIN_DRAG_SPEED,
    parachute_multiplier: float = PARACHUTE_AREA_MULTIPLIER,
) -> list[Debris]:
    """Step every debris object once and drop the ones that hit a surface.

    Args:
        debris: Tracked debris (kinematics are replaced in place)
        environment: Planet/moon system
        dt: Step duration [s]
        nominal_mass: Mass used for every debris object [kg]
        drag_factor: Lumped drag coefficient
        min_drag_speed: Speed below which drag is zero [m/s]
        parachute_multiplier: Deployed chute area factor

    Returns:
        Debris still above every surface
    """
    survivors: list[Debris] = []
    for d in debris:
        area = drag_area(d.parts, parachute_multiplier)

        def derivatives(s: FlightState) -> StateDerivative:
            forces = environment.forces(
                s.position, s.velocity, s.time, nominal_mass, area,
                drag_factor, min_drag_speed,
            )
            return planar_derivatives(
                s, forces.gravity + forces.drag, 0.0, nominal_mass, DEBRIS_INERTIA,
            )

        d.kinematics = euler_step(d.kinematics, dt, derivatives)

        if is_below_surface(environment, d):
            logger.debug("Dropped debris %r (%d parts)", d.name, len(d.parts))
            continue
        survivors.append(d)
    return survivors
