"""Mass properties of a part list.

Mass, moment of inertia and drag area are recomputed from live fuel levels
on every integration substep, so these are plain sums with no caching.
"""

from beartype import beartype

from rocketsim.vehicle.parts import Part, PartType

# Defaults (SimConfig carries the values actually used in flight)
INERTIA_PER_KG: float = 10.0  # [m^2], I = sum(wet mass) * INERTIA_PER_KG
MIN_INERTIA: float = 100.0  # [kg*m^2]
PARACHUTE_AREA_MULTIPLIER: float = 3000.0  # Deployed chute cross-section factor


@beartype
def vehicle_mass(parts: list[Part]) -> float:
    """Total wet mass [kg]."""
    return float(sum(p.wet_mass for p in parts))


@beartype
def fuel_mass(parts: list[Part]) -> float:
    """Total fuel on board [kg]."""
    return float(sum(p.fuel for p in parts))


@beartype
def moment_of_inertia(
    parts: list[Part],
    per_kg: float = INERTIA_PER_KG,
    minimum: float = MIN_INERTIA,
) -> float:
    """Scalar moment of inertia about the pitch axis [kg*m^2].

    Uses the proxy I = sum(dry + fuel) * per_kg, floored to `minimum` so a
    very light craft keeps a finite control response.
    """
    return max(vehicle_mass(parts) * per_kg, minimum)


@beartype
def drag_area(
    parts: list[Part],
    parachute_multiplier: float = PARACHUTE_AREA_MULTIPLIER,
) -> float:
    """Effective drag area [m^2].

    Each part contributes width^2; a deployed parachute contributes its
    cross-section times `parachute_multiplier`.
    """
    area = 0.0
    for p in parts:
        a = p.width * p.width
        if p.type == PartType.PARACHUTE and p.is_deployed:
            a *= parachute_multiplier
        area += a
    return area
