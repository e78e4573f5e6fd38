"""Per-stage performance analysis (delta-v, TWR, burn time).

Stages are structural: the root is stage 0 and every part below a decoupler
belongs to the next stage down. Stages fire from the highest index (the
launch stage) toward the payload, each lifting every lower-index stage.

Example:
    >>> from rocketsim.vehicle import compute_stage_stats
    >>>
    >>> for s in compute_stage_stats(parts):
    ...     print(f"Stage {s.stage_index}: dV={s.delta_v:.0f} m/s, TWR={s.twr:.2f}")
"""

from collections import deque
from dataclasses import dataclass

import numpy as np
from beartype import beartype

from rocketsim.vehicle.parts import Part, PartType
from rocketsim.vehicle.tree import children_map, find_root, is_decoupler

G0: float = 9.81  # Reference gravity for Isp/TWR [m/s^2]


@beartype
@dataclass(frozen=True)
class StageStats:
    """Performance of one structural stage.

    Attributes:
        stage_index: 0 is the root/payload, higher is lower in the stack
        delta_v: Ideal velocity change from the rocket equation [m/s]
        twr: Thrust-to-weight ratio at ignition [-]
        burn_time: Time to burn the stage's fuel at full throttle [s]
        start_mass: Mass at ignition including everything above [kg]
        end_mass: Mass at burnout including everything above [kg]
        thrust: Combined thrust of the stage's engines [N]
        isp: Effective specific impulse [s]
        wet_mass: Mass of this stage's own parts with fuel [kg]
        dry_mass: Mass of this stage's own parts without fuel [kg]
        part_count: Number of parts in the stage
    """
    stage_index: int
    delta_v: float
    twr: float
    burn_time: float
    start_mass: float
    end_mass: float
    thrust: float
    isp: float
    wet_mass: float
    dry_mass: float
    part_count: int


@beartype
def assign_stages(parts: list[Part]) -> dict[str, int]:
    """Map each part to its structural stage index."""
    root = find_root(parts)
    if root is None:
        return {}

    children = children_map(parts)
    stages: dict[str, int] = {}
    queue: deque[tuple[Part, int]] = deque([(root, 0)])
    while queue:
        part, stage = queue.popleft()
        stages[part.instance_id] = stage
        next_stage = stage + 1 if is_decoupler(part) else stage
        for child in children.get(part.instance_id, []):
            if child.instance_id not in stages:
                queue.append((child, next_stage))
    return stages


@beartype
def compute_stage_stats(parts: list[Part], g0: float = G0) -> list[StageStats]:
    """Compute performance for every stage, launch stage first.

    Args:
        parts: Flat part list (current fuel levels are used)
        g0: Reference gravity [m/s^2]

    Returns:
        StageStats ordered from the highest stage index down to 0
    """
    stage_of = assign_stages(parts)
    if not stage_of:
        return []

    max_stage = max(stage_of.values())
    stats: list[StageStats] = []

    for s in range(max_stage, -1, -1):
        stage_parts = [p for p in parts if stage_of.get(p.instance_id) == s]
        payload_mass = sum(p.wet_mass for p in parts if stage_of.get(p.instance_id, 0) < s)

        dry = sum(p.mass for p in stage_parts)
        fuel = sum(p.fuel for p in stage_parts)
        wet = dry + fuel
        start_mass = payload_mass + wet
        end_mass = payload_mass + dry

        engines = [p for p in stage_parts if p.type == PartType.ENGINE]
        total_thrust = sum(e.thrust for e in engines)
        total_burn = sum(e.burn_rate for e in engines)

        isp = delta_v = burn_time = twr = 0.0
        if total_thrust > 0 and total_burn > 0:
            isp = total_thrust / (total_burn * g0)
            if start_mass > 0 and end_mass > 0:
                delta_v = float(isp * g0 * np.log(start_mass / end_mass))
            burn_time = fuel / total_burn
            twr = total_thrust / (start_mass * g0)

        stats.append(StageStats(
            stage_index=s,
            delta_v=float(delta_v),
            twr=float(twr),
            burn_time=float(burn_time),
            start_mass=float(start_mass),
            end_mass=float(end_mass),
            thrust=float(total_thrust),
            isp=float(isp),
            wet_mass=float(wet),
            dry_mass=float(dry),
            part_count=len(stage_parts),
        ))

    return stats


@beartype
def format_stage_summary(stats: list[StageStats]) -> str:
    """Format stage stats as a readable table."""
    lines = [
        f"{'Stage':>5}  {'dV [m/s]':>9}  {'TWR':>5}  {'Burn [s]':>8}  {'Mass [t]':>8}",
        "-" * 44,
    ]
    for s in stats:
        lines.append(
            f"{s.stage_index:>5}  {s.delta_v:>9.0f}  {s.twr:>5.2f}  "
            f"{s.burn_time:>8.1f}  {s.start_mass / 1000:>8.2f}"
        )
    total = sum(s.delta_v for s in stats)
    lines.append("-" * 44)
    lines.append(f"Total delta-v: {total:.0f} m/s")
    return "\n".join(lines)
