"""Flight simulation: tick orchestration, staging and surface contact.

Provides the pure `step(state, controls, dt)` function and the `Simulator`
wrapper that keeps the current state and a recorded history.

Example:
    >>> from rocketsim.simulation import Controls, Simulator
    >>>
    >>> sim = Simulator.from_launch(parts)
    >>> sim.step(Controls(throttle=1.0))
    >>> sim.step(Controls(throttle=1.0, stage=True))
    >>> print(sim.state.events)
"""

from rocketsim.simulation.collision import (
    ContactOutcome,
    ContactResult,
    resolve_surface_contact,
)
from rocketsim.simulation.debris import advance_debris
from rocketsim.simulation.simulator import (
    SimulationResult,
    Simulator,
    initial_state,
    step,
    substep_plan,
)
from rocketsim.simulation.staging import (
    StagingOutcome,
    deploy_parachutes,
    select_next_decoupler,
    stage,
)
from rocketsim.simulation.state import (
    Controls,
    Debris,
    ForceBreakdown,
    SimConfig,
    SimulationState,
)

__all__ = [
    "ContactOutcome",
    "ContactResult",
    "Controls",
    "Debris",
    "ForceBreakdown",
    "SimConfig",
    "SimulationResult",
    "SimulationState",
    "Simulator",
    "StagingOutcome",
    "advance_debris",
    "deploy_parachutes",
    "initial_state",
    "resolve_surface_contact",
    "select_next_decoupler",
    "stage",
    "step",
    "substep_plan",
]
