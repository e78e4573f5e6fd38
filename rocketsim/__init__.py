"""Rocketsim - 2D rocket flight simulation core.

This package provides the physics of a planar rocket flight game: a vehicle
assembled from parts, staged propulsion with tree-routed fuel, patched-conic
planet/moon gravity, atmospheric drag, SAS attitude control, and surface
contact.

Example:
    >>> from rocketsim import Controls, Simulator
    >>>
    >>> sim = Simulator.from_launch(parts)
    >>> while not sim.state.finished and sim.time < 120.0:
    ...     sim.step(Controls(throttle=1.0))
    >>> print(f"Max altitude: {sim.state.max_altitude/1000:.1f} km")
"""

__version__ = "0.1.0"

# Environment
from rocketsim.environment import (
    BodyFrame,
    CelestialBody,
    Environment,
    ExponentialAtmosphere,
)

# Attitude control
from rocketsim.gnc import AttitudeController, PDGains, SASMode

# Orbital mechanics
from rocketsim.orbital import (
    OrbitalElements,
    circular_velocity,
    compute_orbital_elements,
    escape_velocity,
    orbital_period,
)

# Propulsion
from rocketsim.propulsion import (
    find_fuel_sources,
    is_engine_blocked_by_stage,
    resolve_propulsion,
)

# Simulation
from rocketsim.simulation import (
    Controls,
    Debris,
    SimConfig,
    SimulationResult,
    SimulationState,
    Simulator,
    initial_state,
    step,
)

# Vehicle
from rocketsim.vehicle import (
    AttachNode,
    NodeKind,
    Part,
    PartDef,
    PartType,
    StageStats,
    VehicleTreeError,
    compute_stage_stats,
    format_stage_summary,
    validate_tree,
)

__all__ = [
    # Version
    "__version__",
    # Environment
    "BodyFrame",
    "CelestialBody",
    "Environment",
    "ExponentialAtmosphere",
    # Attitude control
    "AttitudeController",
    "PDGains",
    "SASMode",
    # Orbital mechanics
    "OrbitalElements",
    "circular_velocity",
    "compute_orbital_elements",
    "escape_velocity",
    "orbital_period",
    # Propulsion
    "find_fuel_sources",
    "is_engine_blocked_by_stage",
    "resolve_propulsion",
    # Simulation
    "Controls",
    "Debris",
    "SimConfig",
    "SimulationResult",
    "SimulationState",
    "Simulator",
    "initial_state",
    "step",
    # Vehicle
    "AttachNode",
    "NodeKind",
    "Part",
    "PartDef",
    "PartType",
    "StageStats",
    "VehicleTreeError",
    "compute_stage_stats",
    "format_stage_summary",
    "validate_tree",
]
