"""Shared part catalog and vehicle factories for the test suite."""

import pytest

from rocketsim.vehicle import AttachNode, NodeKind, Part, PartDef, PartType


def stack_nodes(height: float, width: float | None = None) -> tuple[AttachNode, ...]:
    nodes = [
        AttachNode("top", (0.0, -height / 2), NodeKind.STACK),
        AttachNode("bottom", (0.0, height / 2), NodeKind.STACK),
    ]
    if width is not None:
        nodes.append(AttachNode("left", (-width / 2, 0.0), NodeKind.RADIAL))
        nodes.append(AttachNode("right", (width / 2, 0.0), NodeKind.RADIAL))
    return tuple(nodes)


POD = PartDef(
    id="cmd-mk1", name="Command Pod Mk1", type=PartType.COMMAND,
    mass=800.0, drag_coeff=0.2, width=1.5, height=1.5, nodes=stack_nodes(1.5),
)
CHUTE = PartDef(
    id="chute-mk1", name="Mk16 Parachute", type=PartType.PARACHUTE,
    mass=100.0, drag_coeff=0.5, width=0.8, height=0.4,
    nodes=(AttachNode("bottom", (0.0, 0.2), NodeKind.STACK),),
)
TANK_S = PartDef(
    id="tank-s", name="FL-T100 Fuel Tank", type=PartType.TANK,
    mass=60.0, drag_coeff=0.2, width=1.2, height=1.0,
    nodes=stack_nodes(1.0, width=1.2), fuel_capacity=500.0,
)
TANK_M = PartDef(
    id="tank-m", name="FL-T400 Fuel Tank", type=PartType.TANK,
    mass=250.0, drag_coeff=0.2, width=1.2, height=2.0,
    nodes=stack_nodes(2.0, width=1.2), fuel_capacity=2000.0,
)
ENGINE = PartDef(
    id="eng-swivel", name='LV-T45 "Swivel"', type=PartType.ENGINE,
    mass=1500.0, drag_coeff=0.2, width=1.2, height=1.5, nodes=stack_nodes(1.5),
    thrust=215000.0, burn_rate=80.0,
)
STACK_DECOUPLER = PartDef(
    id="decoupler-s", name="TR-18A Stack Decoupler", type=PartType.DECOUPLER,
    mass=50.0, drag_coeff=0.1, width=1.2, height=0.4, nodes=stack_nodes(0.4),
)
RADIAL_DECOUPLER = PartDef(
    id="decoupler-r", name="TT-38K Radial Decoupler", type=PartType.DECOUPLER,
    mass=75.0, drag_coeff=0.3, width=0.4, height=0.8,
    nodes=(
        AttachNode("root", (-0.2, 0.0), NodeKind.RADIAL),
        AttachNode("attach", (0.2, 0.0), NodeKind.RADIAL),
    ),
)


def make_part(
    definition: PartDef,
    instance_id: str,
    parent: str | None = None,
    node: str | None = "bottom",
    fuel: float | None = None,
    radial_offset: int = 1,
) -> Part:
    """Instance a catalog part; `node` is ignored for the root."""
    part = Part.from_def(
        definition,
        instance_id,
        parent_id=parent,
        parent_node_id=node if parent is not None else None,
        radial_offset=radial_offset,
    )
    if fuel is not None:
        part.set_fuel(fuel)
    return part


@pytest.fixture
def hopper() -> list[Part]:
    """Pod + small tank + engine: the single-stage reference vehicle."""
    return [
        make_part(POD, "pod"),
        make_part(TANK_S, "tank", parent="pod"),
        make_part(ENGINE, "engine", parent="tank"),
    ]


@pytest.fixture
def two_stage() -> list[Part]:
    """Capsule with chute above a stack decoupler, booster below."""
    return [
        make_part(POD, "pod"),
        make_part(CHUTE, "chute", parent="pod", node="top"),
        make_part(STACK_DECOUPLER, "dec", parent="pod"),
        make_part(TANK_M, "tank", parent="dec"),
        make_part(ENGINE, "engine", parent="tank"),
    ]


@pytest.fixture
def upper_stage_engine() -> list[Part]:
    """Upper engine on its own tank, with a stack decoupler and booster below."""
    return [
        make_part(POD, "pod"),
        make_part(TANK_S, "upper_tank", parent="pod"),
        make_part(ENGINE, "upper_engine", parent="upper_tank"),
        make_part(STACK_DECOUPLER, "dec", parent="upper_engine"),
        make_part(TANK_M, "lower_tank", parent="dec"),
        make_part(ENGINE, "lower_engine", parent="lower_tank"),
    ]
