"""Unit tests for the vehicle tree: parts, structure, layout and mass."""

import pytest
from conftest import (
    CHUTE,
    ENGINE,
    POD,
    RADIAL_DECOUPLER,
    STACK_DECOUPLER,
    TANK_S,
    make_part,
)
from numpy.testing import assert_allclose

from rocketsim.vehicle import (
    PartDef,
    PartType,
    VehicleTreeError,
    children_map,
    collect_subtree,
    compute_layout,
    copy_parts,
    drag_area,
    find_root,
    fuel_mass,
    is_decoupler,
    is_stack_decoupler,
    moment_of_inertia,
    vehicle_mass,
    validate_tree,
)

# =============================================================================
# Part Tests
# =============================================================================


class TestPart:
    """Test part instances."""

    def test_tank_starts_full(self):
        """Fuel defaults to capacity."""
        tank = make_part(TANK_S, "tank")
        assert tank.current_fuel == 500.0
        assert tank.has_fuel_capacity

    def test_dry_part_has_no_fuel(self):
        """Parts without capacity carry None fuel and report zero."""
        pod = make_part(POD, "pod")
        assert pod.current_fuel is None
        assert pod.fuel == 0.0
        assert not pod.has_fuel_capacity

    def test_set_fuel_clamps(self):
        """Fuel stays within [0, capacity]."""
        tank = make_part(TANK_S, "tank")
        tank.set_fuel(-10.0)
        assert tank.current_fuel == 0.0
        tank.set_fuel(1e6)
        assert tank.current_fuel == 500.0

    def test_wet_mass(self):
        """Wet mass is dry mass plus fuel."""
        tank = make_part(TANK_S, "tank", fuel=200.0)
        assert tank.wet_mass == 260.0

    def test_copy_is_independent(self):
        """Copies share the definition but not the mutable state."""
        tank = make_part(TANK_S, "tank")
        clone = tank.copy()
        clone.set_fuel(0.0)
        clone.is_thrusting = True
        assert tank.current_fuel == 500.0
        assert not tank.is_thrusting
        assert clone.definition is tank.definition

    def test_copy_parts(self, hopper):
        """copy_parts shares no instance with its input."""
        copies = copy_parts(hopper)
        assert all(a is not b for a, b in zip(hopper, copies))
        assert [p.instance_id for p in copies] == [p.instance_id for p in hopper]

    def test_negative_mass_rejected(self):
        """Catalog records validate physical attributes."""
        with pytest.raises(ValueError):
            PartDef(
                id="bad", name="Bad", type=PartType.STRUCTURAL,
                mass=-1.0, drag_coeff=0.1, width=1.0, height=1.0,
            )


# =============================================================================
# Tree Structure Tests
# =============================================================================


class TestTreeStructure:
    """Test adjacency, traversal and validation."""

    def test_children_map_preserves_order(self):
        """Children appear in part-list order."""
        parts = [
            make_part(TANK_S, "tank"),
            make_part(RADIAL_DECOUPLER, "r2", parent="tank", node="right"),
            make_part(RADIAL_DECOUPLER, "r1", parent="tank", node="left"),
        ]
        children = children_map(parts)
        assert [c.instance_id for c in children["tank"]] == ["r2", "r1"]

    def test_find_root(self, hopper):
        assert find_root(hopper).instance_id == "pod"

    def test_collect_subtree(self, two_stage):
        """Subtree of the decoupler is itself plus everything below it."""
        ids = collect_subtree("dec", children_map(two_stage))
        assert ids == {"dec", "tank", "engine"}

    def test_collect_subtree_leaf(self, hopper):
        assert collect_subtree("engine", children_map(hopper)) == {"engine"}

    def test_validate_returns_root(self, two_stage):
        assert validate_tree(two_stage).instance_id == "pod"

    def test_empty_vehicle_rejected(self):
        with pytest.raises(VehicleTreeError):
            validate_tree([])

    def test_duplicate_ids_rejected(self):
        parts = [make_part(POD, "pod"), make_part(TANK_S, "pod", parent="pod")]
        with pytest.raises(VehicleTreeError, match="Duplicate"):
            validate_tree(parts)

    def test_multiple_roots_rejected(self):
        parts = [make_part(POD, "a"), make_part(POD, "b")]
        with pytest.raises(VehicleTreeError, match="root"):
            validate_tree(parts)

    def test_rootless_vehicle_rejected(self):
        """Every part having a parent implies a cycle and no root."""
        parts = [
            make_part(TANK_S, "a", parent="b"),
            make_part(TANK_S, "b", parent="a"),
        ]
        with pytest.raises(VehicleTreeError, match="no root"):
            validate_tree(parts)

    def test_missing_parent_rejected(self):
        parts = [make_part(POD, "pod"), make_part(TANK_S, "tank", parent="ghost")]
        with pytest.raises(VehicleTreeError, match="missing parent"):
            validate_tree(parts)

    def test_detached_cycle_rejected(self):
        """A cycle hanging beside a valid root is unreachable."""
        parts = [
            make_part(POD, "pod"),
            make_part(TANK_S, "a", parent="b"),
            make_part(TANK_S, "b", parent="a"),
        ]
        with pytest.raises(VehicleTreeError, match="cycle"):
            validate_tree(parts)

    def test_tree_error_is_value_error(self):
        assert issubclass(VehicleTreeError, ValueError)


class TestDecouplerKinds:
    """Test decoupler classification."""

    def test_stack_decoupler(self):
        part = make_part(STACK_DECOUPLER, "d")
        assert is_decoupler(part)
        assert is_stack_decoupler(part)

    def test_radial_decoupler(self):
        part = make_part(RADIAL_DECOUPLER, "d")
        assert is_decoupler(part)
        assert not is_stack_decoupler(part)

    def test_tank_is_not_decoupler(self):
        part = make_part(TANK_S, "t")
        assert not is_decoupler(part)
        assert not is_stack_decoupler(part)


# =============================================================================
# Layout Tests
# =============================================================================


class TestLayout:
    """Test node-offset placement."""

    def test_root_at_origin(self, hopper):
        layout = compute_layout(hopper)
        assert layout["pod"].x == 0.0
        assert layout["pod"].y == 0.0

    def test_stack_placement(self, hopper):
        """Each part hangs below its parent, node to node."""
        layout = compute_layout(hopper)
        # pod bottom (0.75) to tank top (-0.5)
        assert_allclose(layout["tank"].y, 1.25)
        # tank bottom (0.5) to engine top (-0.75)
        assert_allclose(layout["engine"].y, 2.5)
        assert_allclose(layout["engine"].x, 0.0)

    def test_top_attachment_goes_up(self, two_stage):
        """A part on the top node sits above the root."""
        layout = compute_layout(two_stage)
        assert layout["chute"].y < 0.0

    def test_radial_mirroring(self):
        """A mirrored counterpart lands symmetric to the standard part."""
        parts = [
            make_part(TANK_S, "tank"),
            make_part(RADIAL_DECOUPLER, "left", parent="tank", node="left"),
            make_part(RADIAL_DECOUPLER, "right", parent="tank", node="right", radial_offset=-1),
        ]
        layout = compute_layout(parts)
        assert_allclose(layout["left"].x, -0.4)
        assert_allclose(layout["right"].x, 0.4)
        assert_allclose(layout["left"].y, layout["right"].y)

    def test_empty_layout(self):
        assert compute_layout([]) == {}


# =============================================================================
# Mass Property Tests
# =============================================================================


class TestMassProperties:
    """Test mass, inertia and drag area."""

    def test_vehicle_mass(self, hopper):
        assert_allclose(vehicle_mass(hopper), 800.0 + 560.0 + 1500.0)

    def test_fuel_mass(self, hopper):
        assert_allclose(fuel_mass(hopper), 500.0)

    def test_inertia_proxy(self, hopper):
        """I = total wet mass * 10."""
        assert_allclose(moment_of_inertia(hopper), 28600.0)

    def test_inertia_floor(self):
        """Very light craft keep the minimum inertia."""
        light = PartDef(
            id="probe", name="Probe", type=PartType.COMMAND,
            mass=1.0, drag_coeff=0.1, width=0.5, height=0.5,
        )
        assert moment_of_inertia([make_part(light, "p")]) == 100.0

    def test_drag_area(self, hopper):
        """Each part contributes width squared."""
        assert_allclose(drag_area(hopper), 1.5**2 + 1.2**2 + 1.2**2)

    def test_deployed_parachute_area(self):
        chute = make_part(CHUTE, "chute")
        assert_allclose(drag_area([chute]), 0.64)
        chute.is_deployed = True
        assert_allclose(drag_area([chute]), 0.64 * 3000.0)

    def test_engine_counts_in_mass(self):
        engine = make_part(ENGINE, "e")
        assert vehicle_mass([engine]) == 1500.0
