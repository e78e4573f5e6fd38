"""Propulsion: fuel routing across the part tree and thrust resolution.

Example:
    >>> from rocketsim.propulsion import resolve_propulsion
    >>>
    >>> result = resolve_propulsion(parts, throttle=0.8, dt=0.05)
    >>> print(result.thrust, result.fuel_drawn)
"""

from rocketsim.propulsion.fuel_routing import (
    FuelSource,
    find_fuel_sources,
    is_engine_blocked_by_stage,
)
from rocketsim.propulsion.resolver import (
    EngineReport,
    PropulsionResult,
    plan_engine_draw,
    resolve_propulsion,
)

__all__ = [
    "EngineReport",
    "FuelSource",
    "PropulsionResult",
    "find_fuel_sources",
    "is_engine_blocked_by_stage",
    "plan_engine_draw",
    "resolve_propulsion",
]
