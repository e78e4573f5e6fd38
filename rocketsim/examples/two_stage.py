#!/usr/bin/env python
"""Two-stage flight with capsule recovery.

This example demonstrates staging and parachute recovery:
1. Assemble a capsule with a parachute on a decoupler above a booster
2. Burn the booster to depletion
3. Stage: the decoupler fires and the booster falls away as debris
4. Stage again at apoapsis: no decouplers remain, so the parachute deploys
5. Descend under the chute (time warp while high) and land

The capsule's terminal speed under the chute is well below the crash
threshold, so the flight ends with a landing.
"""

import logging

from rocketsim import (
    AttachNode,
    Controls,
    NodeKind,
    Part,
    PartDef,
    PartType,
    SASMode,
    SimulationResult,
    Simulator,
    compute_stage_stats,
    format_stage_summary,
)

WARP_CEILING = 2000.0  # Below this altitude fly at 1x [m]
HIGH_WARP = 40.0


def stack_nodes(height: float) -> tuple[AttachNode, ...]:
    return (
        AttachNode("top", (0.0, -height / 2), NodeKind.STACK),
        AttachNode("bottom", (0.0, height / 2), NodeKind.STACK),
    )


CHUTE = PartDef(
    id="chute-mk1", name="Mk16 Parachute", type=PartType.PARACHUTE,
    mass=100.0, drag_coeff=0.5, width=0.8, height=0.4,
    nodes=(AttachNode("bottom", (0.0, 0.2), NodeKind.STACK),),
)
POD = PartDef(
    id="cmd-mk1", name="Command Pod Mk1", type=PartType.COMMAND,
    mass=800.0, drag_coeff=0.2, width=1.5, height=1.5, nodes=stack_nodes(1.5),
)
DECOUPLER = PartDef(
    id="decoupler-s", name="TR-18A Stack Decoupler", type=PartType.DECOUPLER,
    mass=50.0, drag_coeff=0.1, width=1.2, height=0.4, nodes=stack_nodes(0.4),
)
TANK = PartDef(
    id="tank-m", name="FL-T400 Fuel Tank", type=PartType.TANK,
    mass=250.0, drag_coeff=0.2, width=1.2, height=2.0, nodes=stack_nodes(2.0),
    fuel_capacity=2000.0,
)
ENGINE = PartDef(
    id="eng-swivel", name='LV-T45 "Swivel"', type=PartType.ENGINE,
    mass=1500.0, drag_coeff=0.2, width=1.2, height=1.5, nodes=stack_nodes(1.5),
    thrust=215000.0, burn_rate=80.0,
)


def build_vehicle() -> list[Part]:
    return [
        Part.from_def(POD, "pod"),
        Part.from_def(CHUTE, "chute", parent_id="pod", parent_node_id="top"),
        Part.from_def(DECOUPLER, "decoupler", parent_id="pod", parent_node_id="bottom"),
        Part.from_def(TANK, "tank", parent_id="decoupler", parent_node_id="bottom"),
        Part.from_def(ENGINE, "engine", parent_id="tank", parent_node_id="bottom"),
    ]


def main() -> None:
    """Run the two-stage recovery example."""
    logging.basicConfig(level=logging.INFO, format="%(name)s: %(message)s")

    print("=" * 60)
    print("TWO-STAGE FLIGHT WITH RECOVERY")
    print("=" * 60)

    parts = build_vehicle()

    print("\n1. Stage analysis")
    print(format_stage_summary(compute_stage_stats(parts)))

    print("\n2. Flying...")
    sim = Simulator.from_launch(parts)

    phase = "ascent"
    while not sim.state.finished and sim.time < 7200.0:
        state = sim.state
        controls = Controls(throttle=1.0 if phase == "ascent" else 0.0,
                            sas_mode=SASMode.STABILITY)

        if phase == "ascent":
            engine = next((p for p in state.parts if p.type == PartType.ENGINE), None)
            if engine is not None and state.time > 1.0 and not engine.is_thrusting:
                controls.throttle = 0.0
                controls.stage = True
                phase = "coast"
        elif phase == "coast" and state.vertical_speed < 0:
            controls.stage = True
            phase = "descent"
        elif phase == "descent" and state.altitude > WARP_CEILING:
            controls.time_warp = HIGH_WARP

        sim.step(controls)

    result = SimulationResult.from_simulator(sim)
    print("\n3. Results")
    print(f"   Flight time:   {sim.time:.1f} s")
    print(f"   Max altitude:  {sim.state.max_altitude/1000:.2f} km")
    print(f"   Max speed:     {result.speed.max():.0f} m/s")
    print(f"   Parts left:    {', '.join(p.name for p in sim.state.parts)}")
    print(f"   Debris:        {len(sim.state.debris)} object(s) still falling")
    print("   Events:")
    for event in sim.state.events:
        print(f"     - {event}")


if __name__ == "__main__":
    main()
