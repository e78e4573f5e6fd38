"""Structural queries over the parent-pointer part tree.

The vehicle is stored flat; these helpers build the parent -> children view
once per tick and answer the traversal questions every other component asks.
All traversals are iterative (explicit queue/stack) so deep stacks never hit
the interpreter recursion limit.

Example:
    >>> from rocketsim.vehicle import children_map, collect_subtree, validate_tree
    >>>
    >>> validate_tree(parts)           # raises VehicleTreeError if malformed
    >>> children = children_map(parts)
    >>> lower_stage = collect_subtree(decoupler.instance_id, children)
"""

from collections import deque
from dataclasses import dataclass

from beartype import beartype

from rocketsim.vehicle.parts import AttachNode, NodeKind, Part, PartType

# Radial parent nodes whose children attach with their inner side
RADIAL_PARENT_NODES = ("left", "right", "attach")


class VehicleTreeError(ValueError):
    """Raised when a part list does not form a single rooted tree."""


# =============================================================================
# Lookups
# =============================================================================


@beartype
def parts_by_id(parts: list[Part]) -> dict[str, Part]:
    """Index parts by instance id."""
    return {p.instance_id: p for p in parts}


@beartype
def children_map(parts: list[Part]) -> dict[str, list[Part]]:
    """Build parent id -> ordered children, preserving part-list order. O(n)."""
    children: dict[str, list[Part]] = {}
    for p in parts:
        if p.parent_id is not None:
            children.setdefault(p.parent_id, []).append(p)
    return children


@beartype
def find_root(parts: list[Part]) -> Part | None:
    """Return the first part without a parent, or None."""
    for p in parts:
        if p.parent_id is None:
            return p
    return None


@beartype
def validate_tree(parts: list[Part]) -> Part:
    """Check that the parts form exactly one connected, acyclic tree.

    Args:
        parts: Flat part list

    Returns:
        The root part

    Raises:
        VehicleTreeError: On an empty list, duplicate ids, zero or several
            roots, a parent id that names no part, or a cycle.
    """
    if not parts:
        raise VehicleTreeError("Vehicle has no parts")

    index: dict[str, Part] = {}
    for p in parts:
        if p.instance_id in index:
            raise VehicleTreeError(f"Duplicate part instance id {p.instance_id!r}")
        index[p.instance_id] = p

    roots = [p for p in parts if p.parent_id is None]
    if not roots:
        raise VehicleTreeError("Vehicle has no root part (every part has a parent)")
    if len(roots) > 1:
        names = ", ".join(r.instance_id for r in roots)
        raise VehicleTreeError(f"Vehicle has {len(roots)} root parts: {names}")

    for p in parts:
        if p.parent_id is not None and p.parent_id not in index:
            raise VehicleTreeError(
                f"Part {p.instance_id!r} references missing parent {p.parent_id!r}"
            )

    # With one root and valid parent links, every part reachable from the root
    # means no cycle (a cycle is never reachable from a parentless root).
    reached = collect_subtree(roots[0].instance_id, children_map(parts))
    if len(reached) != len(parts):
        stray = sorted(set(index) - reached)
        raise VehicleTreeError(f"Parts not connected to the root (cycle): {', '.join(stray)}")

    return roots[0]


# =============================================================================
# Traversal
# =============================================================================


@beartype
def collect_subtree(part_id: str, children: dict[str, list[Part]]) -> set[str]:
    """Collect the instance ids of a part and all of its descendants.

    Args:
        part_id: Instance id of the subtree root (included in the result)
        children: Parent -> children map from `children_map`

    Returns:
        Set of instance ids
    """
    collected = {part_id}
    stack = [part_id]
    while stack:
        current = stack.pop()
        for child in children.get(current, []):
            if child.instance_id not in collected:
                collected.add(child.instance_id)
                stack.append(child.instance_id)
    return collected


@beartype
def is_decoupler(part: Part) -> bool:
    """Any decoupler, stack or radial."""
    return part.type == PartType.DECOUPLER


@beartype
def is_stack_decoupler(part: Part) -> bool:
    """A decoupler with at least one stack node.

    Only stack decouplers separate vertical stages; radial decouplers hold
    side boosters and never block the main stack from firing.
    """
    return is_decoupler(part) and any(n.kind == NodeKind.STACK for n in part.nodes)


# =============================================================================
# Layout
# =============================================================================


@beartype
@dataclass(frozen=True)
class PlacedPart:
    """Part center position relative to the root part center.

    Attributes:
        instance_id: Part instance id
        x: Lateral offset [m]
        y: Offset along the stack axis [m], positive toward the bottom
    """
    instance_id: str
    x: float
    y: float


def _effective_x(part: Part, x: float) -> float:
    return -x if part.radial_offset == -1 else x


def _child_node(parent_node: AttachNode, child: Part) -> AttachNode | None:
    if parent_node.id == "bottom":
        node_id = "top"
    elif parent_node.id == "top":
        node_id = "bottom"
    elif parent_node.id in RADIAL_PARENT_NODES:
        node_id = "root" if child.type == PartType.DECOUPLER else "left"
    else:
        node_id = "top"

    node = child.definition.node(node_id)
    if node is None and child.nodes:
        node = child.nodes[0]
    return node


@beartype
def compute_layout(parts: list[Part]) -> dict[str, PlacedPart]:
    """Place every part by matching its attachment node to its parent's node.

    Breadth-first from the root; a child whose parent node cannot be found is
    left unplaced (and so is its subtree).

    Args:
        parts: Flat part list

    Returns:
        Mapping instance id -> PlacedPart for every placed part
    """
    root = find_root(parts)
    if root is None:
        return {}

    children = children_map(parts)
    layout: dict[str, PlacedPart] = {}
    queue: deque[tuple[Part, float, float]] = deque([(root, 0.0, 0.0)])

    while queue:
        part, x, y = queue.popleft()
        layout[part.instance_id] = PlacedPart(part.instance_id, x, y)

        for child in children.get(part.instance_id, []):
            if child.instance_id in layout or child.parent_node_id is None:
                continue
            parent_node = part.definition.node(child.parent_node_id)
            if parent_node is None:
                continue
            child_node = _child_node(parent_node, child)
            cx, cy = child_node.offset if child_node is not None else (0.0, 0.0)

            new_x = x + _effective_x(part, parent_node.offset[0]) - _effective_x(child, cx)
            new_y = y + parent_node.offset[1] - cy
            queue.append((child, float(new_x), float(new_y)))

    return layout
