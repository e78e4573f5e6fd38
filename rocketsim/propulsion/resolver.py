"""Engine fuel draw and thrust resolution for one integration substep.

Works in two phases so the result never depends on engine iteration order:

1. Plan (read-only): each unblocked engine computes its demand
   (burn_rate * throttle * dt) and spreads a claim over its reachable tanks,
   farthest distance tier first, proportional to fuel level within a tier.
2. Commit: claims are summed per tank. A tank that can cover every claim
   honors them in full; an oversubscribed tank scales all of its claims by
   available / claimed. Honored amounts are then deducted.

Each engine's thrust is max_thrust * throttle * (obtained / demanded); below
a 1% supply ratio the engine produces no thrust and is not flagged thrusting.

Example:
    >>> from rocketsim.propulsion import resolve_propulsion
    >>>
    >>> result = resolve_propulsion(parts, throttle=1.0, dt=0.05)
    >>> print(f"Thrust: {result.thrust/1000:.0f} kN, mass: {result.mass:.0f} kg")
"""

from collections import defaultdict
from dataclasses import dataclass, field

from beartype import beartype

from rocketsim.propulsion.fuel_routing import (
    FuelSource,
    find_fuel_sources,
    is_engine_blocked_by_stage,
)
from rocketsim.vehicle.mass import vehicle_mass
from rocketsim.vehicle.parts import Part, PartType
from rocketsim.vehicle.tree import children_map, parts_by_id

THROTTLE_EPSILON: float = 1e-6
MIN_THRUST_RATIO: float = 0.01
FUEL_EPSILON: float = 1e-9  # Tanks at or below this are treated as empty


@beartype
@dataclass(frozen=True)
class EngineReport:
    """Outcome for a single engine over one substep.

    Attributes:
        instance_id: Engine instance id
        demand: Fuel requested [kg]
        obtained: Fuel actually delivered [kg]
        thrust: Thrust produced [N]
        blocked: Engine sits above an unstaged stack decoupler
    """
    instance_id: str
    demand: float
    obtained: float
    thrust: float
    blocked: bool = False

    @property
    def supply_ratio(self) -> float:
        return self.obtained / self.demand if self.demand > 0 else 0.0


@beartype
@dataclass
class PropulsionResult:
    """Aggregate propulsion output for one substep.

    Attributes:
        thrust: Total thrust magnitude along the heading [N]
        mass: Vehicle mass after fuel deduction [kg]
        fuel_drawn: Total fuel removed from tanks [kg]
        engines: Per-engine reports
    """
    thrust: float
    mass: float
    fuel_drawn: float = 0.0
    engines: list[EngineReport] = field(default_factory=list)


# =============================================================================
# Plan
# =============================================================================


@beartype
def plan_engine_draw(demand: float, sources: list[FuelSource]) -> dict[str, float]:
    """Spread one engine's demand over its sources without touching fuel.

    Distance tiers are drained farthest first. Within a tier the claim is
    split proportionally to each tank's current fuel, so symmetric tanks
    empty together.

    Args:
        demand: Fuel requested [kg]
        sources: Candidate sources from `find_fuel_sources`

    Returns:
        Mapping tank instance id -> claimed fuel [kg]
    """
    tiers: dict[int, list[Part]] = defaultdict(list)
    for s in sources:
        if s.part.fuel > FUEL_EPSILON:
            tiers[s.distance].append(s.part)

    claims: dict[str, float] = {}
    remaining = demand
    for distance in sorted(tiers, reverse=True):
        if remaining <= 0:
            break
        tanks = tiers[distance]
        tier_total = sum(t.fuel for t in tanks)
        if tier_total <= 0:
            continue
        take = min(tier_total, remaining)
        for t in tanks:
            claims[t.instance_id] = claims.get(t.instance_id, 0.0) + take * t.fuel / tier_total
        remaining -= take

    return claims


# =============================================================================
# Resolve
# =============================================================================


@beartype
def resolve_propulsion(
    parts: list[Part],
    throttle: float,
    dt: float,
    children: dict[str, list[Part]] | None = None,
    throttle_epsilon: float = THROTTLE_EPSILON,
    min_thrust_ratio: float = MIN_THRUST_RATIO,
) -> PropulsionResult:
    """Draw fuel for every engine and compute total thrust.

    Mutates `current_fuel` of drained tanks and `is_thrusting` of engines.

    Args:
        parts: Active vehicle parts
        throttle: Global throttle [0, 1]
        dt: Substep duration [s]
        children: Precomputed parent -> children map (built if omitted)
        throttle_epsilon: Throttle below this skips all fuel computation
        min_thrust_ratio: Supply ratio below which an engine yields no thrust

    Returns:
        PropulsionResult with total thrust and post-burn mass
    """
    if not 0.0 <= throttle <= 1.0:
        raise ValueError(f"Throttle must be in [0, 1], got {throttle}")
    if dt < 0:
        raise ValueError(f"Time step must be non-negative, got {dt}")

    engines = [p for p in parts if p.type == PartType.ENGINE]

    if throttle < throttle_epsilon:
        for e in engines:
            e.is_thrusting = False
        return PropulsionResult(thrust=0.0, mass=vehicle_mass(parts))

    if children is None:
        children = children_map(parts)

    # Phase 1: plan claims against a read-only view of fuel levels
    demands: dict[str, float] = {}
    engine_claims: dict[str, dict[str, float]] = {}
    blocked: set[str] = set()
    for engine in engines:
        if is_engine_blocked_by_stage(engine, children):
            blocked.add(engine.instance_id)
            continue
        demand = engine.burn_rate * throttle * dt
        if engine.thrust <= 0 or demand <= 0:
            continue
        demands[engine.instance_id] = demand
        sources = find_fuel_sources(engine, parts, children)
        engine_claims[engine.instance_id] = plan_engine_draw(demand, sources)

    totals: dict[str, float] = defaultdict(float)
    for claims in engine_claims.values():
        for tank_id, amount in claims.items():
            totals[tank_id] += amount

    index = parts_by_id(parts)
    scale: dict[str, float] = {}
    for tank_id, claimed in totals.items():
        available = index[tank_id].fuel
        if claimed <= 0:
            continue
        scale[tank_id] = 1.0 if claimed <= available else available / claimed

    # Phase 2: commit deductions and thrust
    drawn: dict[str, float] = defaultdict(float)
    reports: list[EngineReport] = []
    total_thrust = 0.0

    for engine in engines:
        eid = engine.instance_id
        if eid not in demands:
            engine.is_thrusting = False
            reports.append(EngineReport(eid, 0.0, 0.0, 0.0, blocked=eid in blocked))
            continue

        obtained = 0.0
        for tank_id, amount in engine_claims[eid].items():
            honored = amount * scale.get(tank_id, 0.0)
            drawn[tank_id] += honored
            obtained += honored

        ratio = obtained / demands[eid]
        if ratio < min_thrust_ratio:
            thrust = 0.0
            engine.is_thrusting = False
        else:
            thrust = engine.thrust * throttle * min(ratio, 1.0)
            engine.is_thrusting = True
        total_thrust += thrust
        reports.append(EngineReport(eid, demands[eid], obtained, thrust))

    for tank_id, amount in drawn.items():
        tank = index[tank_id]
        tank.set_fuel(tank.fuel - amount)

    return PropulsionResult(
        thrust=total_thrust,
        mass=vehicle_mass(parts),
        fuel_drawn=float(sum(drawn.values())),
        engines=reports,
    )
