"""Staging and parachute deployment.

The next decoupler to fire is the one lowest on the stack, i.e. the one with
the largest layout offset along the stack axis. Firing it detaches its whole
subtree as debris. With no decouplers left, staging deploys the parachutes.

Example:
    >>> from rocketsim.simulation.staging import stage
    >>>
    >>> outcome = stage(parts, state.kinematics)
    >>> parts = outcome.parts
    >>> if outcome.debris is not None:
    ...     debris.append(outcome.debris)
"""

import logging
from dataclasses import dataclass

from beartype import beartype

from rocketsim.dynamics.state import FlightState
from rocketsim.simulation.state import Debris
from rocketsim.vehicle.parts import Part, PartType, copy_parts
from rocketsim.vehicle.tree import children_map, collect_subtree, compute_layout, is_decoupler

logger = logging.getLogger(__name__)

PARACHUTE_EVENT = "Parachutes deployed"


@beartype
@dataclass
class StagingOutcome:
    """Result of a staging action.

    Attributes:
        parts: Parts still attached to the active vehicle
        debris: Detached subtree, if a decoupler fired
        event: Event log entry, if anything happened
        deployed: Number of parachutes deployed
    """
    parts: list[Part]
    debris: Debris | None = None
    event: str | None = None
    deployed: int = 0


@beartype
def select_next_decoupler(parts: list[Part]) -> Part | None:
    """Decoupler lowest on the stack, or None if there is none.

    Ties keep list order; a decoupler that cannot be placed counts as
    sitting at the root.
    """
    decouplers = [p for p in parts if is_decoupler(p)]
    if not decouplers:
        return None

    layout = compute_layout(parts)
    best = decouplers[0]
    best_y = layout[best.instance_id].y if best.instance_id in layout else 0.0
    for d in decouplers[1:]:
        y = layout[d.instance_id].y if d.instance_id in layout else 0.0
        if y > best_y:
            best, best_y = d, y
    return best


@beartype
def deploy_parachutes(parts: list[Part]) -> int:
    """Deploy every undeployed parachute in place.

    Returns:
        Number of parachutes newly deployed
    """
    count = 0
    for p in parts:
        if p.type == PartType.PARACHUTE and not p.is_deployed:
            p.is_deployed = True
            count += 1
    if count:
        logger.info("Deployed %d parachute(s)", count)
    return count


@beartype
def stage(
    parts: list[Part],
    kinematics: FlightState,
    separation_speed: float = 0.0,
) -> StagingOutcome:
    """Fire the next decoupler, or deploy parachutes when none remain.

    The input list is not restructured; the returned outcome carries the
    remaining parts. Parachute deployment marks the input parts in place.

    Args:
        parts: Active vehicle parts
        kinematics: Current vehicle kinematic state
        separation_speed: Speed at which debris is pushed back along the
            heading [m/s]

    Returns:
        StagingOutcome
    """
    target = select_next_decoupler(parts)

    if target is None:
        deployed = deploy_parachutes(parts)
        return StagingOutcome(
            parts=parts,
            event=PARACHUTE_EVENT if deployed else None,
            deployed=deployed,
        )

    detached = collect_subtree(target.instance_id, children_map(parts))
    remaining = [p for p in parts if p.instance_id not in detached]
    released = copy_parts([p for p in parts if p.instance_id in detached])

    debris_state = kinematics.copy()
    debris_state.velocity = debris_state.velocity - separation_speed * kinematics.heading

    logger.info(
        "Staged %s: released %d part(s), %d remain",
        target.name, len(released), len(remaining),
    )
    return StagingOutcome(
        parts=remaining,
        debris=Debris(parts=released, kinematics=debris_state, name=target.name),
        event=f"Staged: {target.name}",
    )
