#!/usr/bin/env python
"""Single-stage suborbital hop.

This example flies the simplest possible vehicle:
1. Assemble a command pod, a small tank and an engine
2. Print the stage analysis
3. Launch at full throttle and burn to depletion
4. Coast ballistically until the craft comes back down

There is no parachute, so the flight ends with an impact.
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


def stack_nodes(height: float) -> tuple[AttachNode, ...]:
    return (
        AttachNode("top", (0.0, -height / 2), NodeKind.STACK),
        AttachNode("bottom", (0.0, height / 2), NodeKind.STACK),
    )


POD = PartDef(
    id="cmd-mk1", name="Command Pod Mk1", type=PartType.COMMAND,
    mass=800.0, drag_coeff=0.2, width=1.5, height=1.5, nodes=stack_nodes(1.5),
)
TANK = PartDef(
    id="tank-s", name="FL-T100 Fuel Tank", type=PartType.TANK,
    mass=60.0, drag_coeff=0.2, width=1.2, height=1.0, nodes=stack_nodes(1.0),
    fuel_capacity=500.0,
)
ENGINE = PartDef(
    id="eng-swivel", name='LV-T45 "Swivel"', type=PartType.ENGINE,
    mass=1500.0, drag_coeff=0.2, width=1.2, height=1.5, nodes=stack_nodes(1.5),
    thrust=215000.0, burn_rate=80.0,
)


def main() -> None:
    """Run the suborbital hop example."""
    logging.basicConfig(level=logging.INFO, format="%(name)s: %(message)s")

    print("=" * 60)
    print("SUBORBITAL HOP")
    print("=" * 60)

    # =========================================================================
    # 1. Assemble the vehicle
    # =========================================================================
    parts = [
        Part.from_def(POD, "pod"),
        Part.from_def(TANK, "tank", parent_id="pod", parent_node_id="bottom"),
        Part.from_def(ENGINE, "engine", parent_id="tank", parent_node_id="bottom"),
    ]

    print("\n1. Stage analysis")
    print(format_stage_summary(compute_stage_stats(parts)))

    # =========================================================================
    # 2. Fly
    # =========================================================================
    print("\n2. Flying...")
    sim = Simulator.from_launch(parts)
    controls = Controls(throttle=1.0, sas_mode=SASMode.STABILITY)

    burnout_time = None
    while not sim.state.finished and sim.time < 600.0:
        state = sim.step(controls)
        engine = next(p for p in state.parts if p.type == PartType.ENGINE)
        if burnout_time is None and not engine.is_thrusting:
            burnout_time = state.time
            print(f"   Burnout at T+{burnout_time:.2f} s, "
                  f"altitude {state.altitude:.0f} m, speed {state.speed:.0f} m/s")

    # =========================================================================
    # 3. Results
    # =========================================================================
    result = SimulationResult.from_simulator(sim)
    print("\n3. Results")
    print(f"   Flight time:   {sim.time:.1f} s")
    print(f"   Max altitude:  {sim.state.max_altitude/1000:.2f} km")
    print(f"   Max speed:     {result.speed.max():.0f} m/s")
    print(f"   Events:        {', '.join(sim.state.events) or 'none'}")

    df = result.to_dataframe()
    print(f"   Recorded {df.height} samples")


if __name__ == "__main__":
    main()
