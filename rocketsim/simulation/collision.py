"""Surface contact against a celestial body.

Contact is evaluated in the body's frame, using the craft's velocity
relative to the body:

- inward radial speed above `impact_speed`: crash (terminal)
- total speed below `rest_speed`: landed (terminal) if the craft has flown
  above `landing_min_altitude`, otherwise it is resting on the pad and is
  clamped to the surface
- anything else: sliding contact, clamp to the surface and remove the
  inward radial velocity while keeping the tangential component
"""

import logging
from dataclasses import dataclass
from enum import Enum

import numpy as np
from beartype import beartype
from numpy.typing import NDArray

from rocketsim.environment.bodies import BodyFrame

logger = logging.getLogger(__name__)

# Defaults
IMPACT_SPEED: float = 10.0  # [m/s]
REST_SPEED: float = 1.0  # [m/s]
LANDING_MIN_ALTITUDE: float = 50.0  # [m]


class ContactResult(Enum):
    """Kind of surface interaction."""

    NONE = "none"
    CRASHED = "crashed"
    LANDED = "landed"
    RESTING = "resting"
    SLIDING = "sliding"


@beartype
@dataclass
class ContactOutcome:
    """Result of a surface contact check.

    Attributes:
        result: Kind of interaction
        position: Craft position after contact handling [m]
        velocity: Craft velocity after contact handling [m/s]
        event: Event log entry for terminal outcomes
    """
    result: ContactResult
    position: NDArray[np.float64]
    velocity: NDArray[np.float64]
    event: str | None = None

    @property
    def terminal(self) -> bool:
        """Whether the flight ends here."""
        return self.result in (ContactResult.CRASHED, ContactResult.LANDED)


@beartype
def resolve_surface_contact(
    position: NDArray[np.float64],
    velocity: NDArray[np.float64],
    frame: BodyFrame,
    max_altitude: float,
    impact_speed: float = IMPACT_SPEED,
    rest_speed: float = REST_SPEED,
    landing_min_altitude: float = LANDING_MIN_ALTITUDE,
) -> ContactOutcome:
    """Classify and resolve contact between the craft and one body.

    Args:
        position: World position [m]
        velocity: World velocity [m/s]
        frame: Body frame (center and velocity of the body)
        max_altitude: Highest altitude reached so far [m]
        impact_speed: Inward radial speed that counts as a crash [m/s]
        rest_speed: Speed below which the craft is at rest [m/s]
        landing_min_altitude: Altitude that must have been exceeded for a
            rest to count as a landing [m]

    Returns:
        ContactOutcome (result NONE and unchanged vectors when above ground)
    """
    body = frame.body
    r_rel = frame.relative_position(position)
    distance = float(np.linalg.norm(r_rel))

    if distance > body.radius:
        return ContactOutcome(ContactResult.NONE, position, velocity)

    normal = r_rel / distance if distance > 0 else np.array([0.0, -1.0])
    v_rel = frame.relative_velocity(velocity)
    radial_speed = float(np.dot(v_rel, normal))
    surface = frame.center + normal * body.radius

    if radial_speed < -impact_speed:
        logger.info("Crashed into %s at %.1f m/s", body.name, -radial_speed)
        return ContactOutcome(
            ContactResult.CRASHED, surface, velocity.copy(),
            event=f"Crashed into {body.name}",
        )

    if float(np.linalg.norm(v_rel)) < rest_speed:
        at_rest = frame.velocity.copy()
        if max_altitude > landing_min_altitude:
            logger.info("Landed on %s", body.name)
            return ContactOutcome(
                ContactResult.LANDED, surface, at_rest,
                event=f"Landed on {body.name}",
            )
        return ContactOutcome(ContactResult.RESTING, surface, at_rest)

    if radial_speed < 0:
        v_rel = v_rel - radial_speed * normal
    return ContactOutcome(ContactResult.SLIDING, surface, frame.velocity + v_rel)
