"""Part definitions and per-flight part instances.

A vehicle is a flat list of `Part` instances linked into a tree by
`parent_id` / `parent_node_id`. Each instance wraps an immutable `PartDef`
(the catalog record) and carries the mutable flight state: fuel level,
engine and deployment flags.

Node offsets are in meters relative to the part center, with +y pointing
down the stack (a "bottom" node has positive y).

Example:
    >>> from rocketsim.vehicle import AttachNode, NodeKind, Part, PartDef, PartType
    >>>
    >>> tank_def = PartDef(
    ...     id="tank-s", name="FL-T100 Fuel Tank", type=PartType.TANK,
    ...     mass=60.0, drag_coeff=0.2, width=1.2, height=1.0,
    ...     fuel_capacity=500.0,
    ...     nodes=(
    ...         AttachNode("top", (0.0, -0.5), NodeKind.STACK),
    ...         AttachNode("bottom", (0.0, 0.5), NodeKind.STACK),
    ...     ),
    ... )
    >>> tank = Part.from_def(tank_def, "tank-1", parent_id="pod-1", parent_node_id="bottom")
    >>> tank.current_fuel
    500.0
"""

from dataclasses import dataclass, field
from enum import Enum

from beartype import beartype

# =============================================================================
# Enums
# =============================================================================


class PartType(Enum):
    """Functional category of a part."""

    COMMAND = "COMMAND"
    TANK = "TANK"
    ENGINE = "ENGINE"
    DECOUPLER = "DECOUPLER"
    NOSE = "NOSE"
    FIN = "FIN"
    PAYLOAD = "PAYLOAD"
    STRUCTURAL = "STRUCTURAL"
    LEG = "LEG"
    PARACHUTE = "PARACHUTE"


class NodeKind(Enum):
    """Attachment node orientation."""

    STACK = "stack"    # In-line, vertical
    RADIAL = "radial"  # Side-mounted


# =============================================================================
# Catalog Records
# =============================================================================


@beartype
@dataclass(frozen=True)
class AttachNode:
    """Attachment point on a part.

    Attributes:
        id: Node name (e.g. "top", "bottom", "left", "root")
        offset: (x, y) position relative to part center [m], +y down the stack
        kind: Stack or radial node
        allowed_types: If set, only these part types may attach here
    """
    id: str
    offset: tuple[float, float]
    kind: NodeKind = NodeKind.STACK
    allowed_types: tuple[PartType, ...] | None = None


@beartype
@dataclass(frozen=True)
class PartDef:
    """Immutable catalog definition of a part.

    Attributes:
        id: Catalog identifier
        name: Display name (used in event log entries)
        type: Functional category
        mass: Dry mass [kg]
        drag_coeff: Drag coefficient [-]
        width: Width [m], cross-section is width^2
        height: Height [m]
        nodes: Attachment nodes
        fuel_capacity: Fuel capacity [kg] (0 for parts without fuel)
        thrust: Maximum thrust [N] (engines only)
        burn_rate: Fuel consumption at full throttle [kg/s] (engines only)
    """
    id: str
    name: str
    type: PartType
    mass: float
    drag_coeff: float
    width: float
    height: float
    nodes: tuple[AttachNode, ...] = ()
    fuel_capacity: float = 0.0
    thrust: float = 0.0
    burn_rate: float = 0.0

    def __post_init__(self) -> None:
        """Validate physical attributes."""
        if self.mass < 0:
            raise ValueError(f"Part mass must be non-negative, got {self.mass}")
        if self.fuel_capacity < 0:
            raise ValueError(f"Fuel capacity must be non-negative, got {self.fuel_capacity}")
        if self.thrust < 0 or self.burn_rate < 0:
            raise ValueError(f"Thrust and burn rate must be non-negative for {self.id!r}")

    def node(self, node_id: str) -> AttachNode | None:
        """Look up an attachment node by id."""
        for n in self.nodes:
            if n.id == node_id:
                return n
        return None


# =============================================================================
# Part Instance
# =============================================================================


@beartype
@dataclass
class Part:
    """A part placed on a vehicle, with its per-flight mutable state.

    Attributes:
        definition: Immutable catalog record
        instance_id: Unique id within the flight
        parent_id: Instance id of the parent part (None for the root)
        parent_node_id: Node on the parent this part is attached to
        radial_offset: +1 standard, -1 mirrored (symmetry counterpart)
        current_fuel: Fuel on board [kg]; None iff the part has no capacity
        is_thrusting: Engine produced visible thrust on the last substep
        is_deployed: Parachute/leg deployed
    """
    definition: PartDef
    instance_id: str
    parent_id: str | None = None
    parent_node_id: str | None = None
    radial_offset: int = 1
    current_fuel: float | None = None
    is_thrusting: bool = False
    is_deployed: bool = False

    def __post_init__(self) -> None:
        """Normalize fuel state against capacity."""
        capacity = self.definition.fuel_capacity
        if capacity > 0:
            if self.current_fuel is None:
                self.current_fuel = capacity
            self.current_fuel = min(max(float(self.current_fuel), 0.0), capacity)
        else:
            self.current_fuel = None

    @classmethod
    def from_def(
        cls,
        definition: PartDef,
        instance_id: str,
        parent_id: str | None = None,
        parent_node_id: str | None = None,
        radial_offset: int = 1,
    ) -> "Part":
        """Create a fully fueled instance of a catalog part."""
        return cls(
            definition=definition,
            instance_id=instance_id,
            parent_id=parent_id,
            parent_node_id=parent_node_id,
            radial_offset=radial_offset,
        )

    # Catalog passthroughs

    @property
    def name(self) -> str:
        return self.definition.name

    @property
    def type(self) -> PartType:
        return self.definition.type

    @property
    def mass(self) -> float:
        """Dry mass [kg]."""
        return self.definition.mass

    @property
    def width(self) -> float:
        return self.definition.width

    @property
    def fuel_capacity(self) -> float:
        return self.definition.fuel_capacity

    @property
    def thrust(self) -> float:
        return self.definition.thrust

    @property
    def burn_rate(self) -> float:
        return self.definition.burn_rate

    @property
    def nodes(self) -> tuple[AttachNode, ...]:
        return self.definition.nodes

    # Derived state

    @property
    def has_fuel_capacity(self) -> bool:
        """Whether this part can hold fuel (tanks, and engines with internal fuel)."""
        return self.type == PartType.TANK or self.fuel_capacity > 0

    @property
    def fuel(self) -> float:
        """Fuel on board [kg], zero for parts without capacity."""
        return self.current_fuel or 0.0

    @property
    def wet_mass(self) -> float:
        """Dry mass plus fuel [kg]."""
        return self.mass + self.fuel

    def set_fuel(self, amount: float) -> None:
        """Set fuel level, clamped into [0, capacity]."""
        if self.current_fuel is None:
            return
        self.current_fuel = min(max(amount, 0.0), self.fuel_capacity)

    def copy(self) -> "Part":
        """Copy the mutable state; the catalog definition is shared."""
        return Part(
            definition=self.definition,
            instance_id=self.instance_id,
            parent_id=self.parent_id,
            parent_node_id=self.parent_node_id,
            radial_offset=self.radial_offset,
            current_fuel=self.current_fuel,
            is_thrusting=self.is_thrusting,
            is_deployed=self.is_deployed,
        )


@beartype
def copy_parts(parts: list[Part]) -> list[Part]:
    """Deep-copy a part list (no instance is shared with the input)."""
    return [p.copy() for p in parts]
