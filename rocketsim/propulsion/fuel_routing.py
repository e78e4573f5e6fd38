"""Fuel source discovery across the part tree.

Fuel flows along tree edges in both directions (parent and child) but never
across a decoupler: an edge is blocked if either endpoint is a decoupler of
any kind. The engine's own internal fuel is a distance-0 source.

Example:
    >>> from rocketsim.propulsion import find_fuel_sources
    >>> from rocketsim.vehicle import children_map
    >>>
    >>> sources = find_fuel_sources(engine, parts, children_map(parts))
    >>> for s in sources:
    ...     print(s.part.name, s.distance)
"""

from collections import deque
from dataclasses import dataclass

from beartype import beartype

from rocketsim.vehicle.parts import Part
from rocketsim.vehicle.tree import is_decoupler, is_stack_decoupler, parts_by_id


@beartype
@dataclass(frozen=True)
class FuelSource:
    """A tank reachable from an engine.

    Attributes:
        part: The tank (or fueled part)
        distance: Hop count from the engine along tree edges
    """
    part: Part
    distance: int


@beartype
def find_fuel_sources(
    engine: Part,
    parts: list[Part],
    children: dict[str, list[Part]],
) -> list[FuelSource]:
    """Breadth-first search for every fuel container the engine can draw from.

    Args:
        engine: Engine part
        parts: All active parts (used to resolve parent ids)
        children: Parent -> children map

    Returns:
        Sources in BFS order, each tagged with its hop distance
    """
    index = parts_by_id(parts)
    sources: list[FuelSource] = []
    if engine.has_fuel_capacity:
        sources.append(FuelSource(engine, 0))

    visited = {engine.instance_id}
    queue: deque[tuple[Part, int]] = deque([(engine, 0)])

    while queue:
        current, dist = queue.popleft()

        neighbors: list[Part] = []
        if current.parent_id is not None and current.parent_id in index:
            neighbors.append(index[current.parent_id])
        neighbors.extend(children.get(current.instance_id, []))

        for neighbor in neighbors:
            if neighbor.instance_id in visited:
                continue
            if is_decoupler(current) or is_decoupler(neighbor):
                continue
            visited.add(neighbor.instance_id)
            queue.append((neighbor, dist + 1))
            if neighbor.has_fuel_capacity:
                sources.append(FuelSource(neighbor, dist + 1))

    return sources


@beartype
def is_engine_blocked_by_stage(engine: Part, children: dict[str, list[Part]]) -> bool:
    """Whether an unfired stack decoupler sits anywhere below the engine.

    Such an engine belongs to an upper stage and must not fire until the
    lower assembly has been staged away. Radial decouplers do not block.
    """
    queue: deque[Part] = deque([engine])
    seen = {engine.instance_id}
    while queue:
        current = queue.popleft()
        if is_stack_decoupler(current):
            return True
        for child in children.get(current.instance_id, []):
            if child.instance_id not in seen:
                seen.add(child.instance_id)
                queue.append(child)
    return False
