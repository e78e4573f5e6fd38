"""Vehicle modeling: parts, the part tree, mass properties and stages.

Example:
    >>> from rocketsim.vehicle import Part, validate_tree, vehicle_mass
    >>>
    >>> root = validate_tree(parts)
    >>> print(f"{root.name}: {vehicle_mass(parts):.0f} kg")
"""

from rocketsim.vehicle.mass import (
    drag_area,
    fuel_mass,
    moment_of_inertia,
    vehicle_mass,
)
from rocketsim.vehicle.parts import (
    AttachNode,
    NodeKind,
    Part,
    PartDef,
    PartType,
    copy_parts,
)
from rocketsim.vehicle.stages import (
    StageStats,
    assign_stages,
    compute_stage_stats,
    format_stage_summary,
)
from rocketsim.vehicle.tree import (
    PlacedPart,
    VehicleTreeError,
    children_map,
    collect_subtree,
    compute_layout,
    find_root,
    is_decoupler,
    is_stack_decoupler,
    parts_by_id,
    validate_tree,
)

__all__ = [
    # Parts
    "AttachNode",
    "NodeKind",
    "Part",
    "PartDef",
    "PartType",
    "copy_parts",
    # Tree
    "PlacedPart",
    "VehicleTreeError",
    "children_map",
    "collect_subtree",
    "compute_layout",
    "find_root",
    "is_decoupler",
    "is_stack_decoupler",
    "parts_by_id",
    "validate_tree",
    # Mass
    "drag_area",
    "fuel_mass",
    "moment_of_inertia",
    "vehicle_mass",
    # Stages
    "StageStats",
    "assign_stages",
    "compute_stage_stats",
    "format_stage_summary",
]
