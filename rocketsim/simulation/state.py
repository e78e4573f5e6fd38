"""Simulation configuration, control inputs and world snapshot.

`SimulationState` is the aggregate snapshot handed to rendering/telemetry
each tick. It owns the active vehicle parts and every debris object; a call
to `copy()` deep-copies all of it so a pure step never aliases its input.
"""

from dataclasses import dataclass, field

import numpy as np
from beartype import beartype
from numpy.typing import NDArray

from rocketsim.dynamics.state import FlightState
from rocketsim.environment.atmosphere import DRAG_FACTOR, MIN_DRAG_SPEED
from rocketsim.gnc.control.sas import (
    MANUAL_TORQUE,
    SAS_KD,
    SAS_KP,
    SAS_MIN_SPEED,
    STABILITY_GAIN,
    AttitudeController,
    PDGains,
    SASMode,
)
from rocketsim.orbital import OrbitalElements
from rocketsim.propulsion.resolver import MIN_THRUST_RATIO, THROTTLE_EPSILON
from rocketsim.vehicle.mass import INERTIA_PER_KG, MIN_INERTIA, PARACHUTE_AREA_MULTIPLIER
from rocketsim.vehicle.parts import Part, copy_parts

# =============================================================================
# Configuration
# =============================================================================


@beartype
@dataclass
class SimConfig:
    """Simulation tuning constants.

    Attributes:
        base_time_step: Duration of one tick at 1x warp [s]
        max_substeps: Hard cap on integration substeps per tick
        max_time_warp: Largest accepted time-warp multiplier
        throttle_epsilon: Throttle below this skips fuel computation
        min_thrust_ratio: Fuel supply ratio below which an engine is dark
        drag_factor: Lumped drag coefficient
        min_drag_speed: Speed below which drag is zero [m/s]
        parachute_area_multiplier: Deployed chute area factor
        inertia_per_kg: Inertia proxy factor [m^2]
        min_inertia: Inertia floor [kg*m^2]
        manual_torque: Turn-key torque [N*m]
        stability_gain: STABILITY damping gain [1/s]
        sas_kp: Heading-hold proportional gain [N*m/rad]
        sas_kd: Heading-hold derivative gain [N*m*s/rad]
        sas_min_speed: Speed above which prograde is defined [m/s]
        impact_speed: Inward radial speed above which contact is a crash [m/s]
        rest_speed: Speed below which contact is a landing or rest [m/s]
        landing_min_altitude: Max altitude needed before a rest counts as landed [m]
        separation_speed: Backward impulse given to staged debris [m/s]
        debris_nominal_mass: Mass used for debris propagation [kg]
    """
    base_time_step: float = 0.05
    max_substeps: int = 10
    max_time_warp: float = 100.0
    throttle_epsilon: float = THROTTLE_EPSILON
    min_thrust_ratio: float = MIN_THRUST_RATIO
    drag_factor: float = DRAG_FACTOR
    min_drag_speed: float = MIN_DRAG_SPEED
    parachute_area_multiplier: float = PARACHUTE_AREA_MULTIPLIER
    inertia_per_kg: float = INERTIA_PER_KG
    min_inertia: float = MIN_INERTIA
    manual_torque: float = MANUAL_TORQUE
    stability_gain: float = STABILITY_GAIN
    sas_kp: float = SAS_KP
    sas_kd: float = SAS_KD
    sas_min_speed: float = SAS_MIN_SPEED
    impact_speed: float = 10.0
    rest_speed: float = 1.0
    landing_min_altitude: float = 50.0
    separation_speed: float = 2.0
    debris_nominal_mass: float = 1000.0

    def __post_init__(self) -> None:
        if self.base_time_step <= 0:
            raise ValueError(f"base_time_step must be positive, got {self.base_time_step}")
        if self.max_substeps < 1:
            raise ValueError(f"max_substeps must be at least 1, got {self.max_substeps}")
        if self.max_time_warp < 1:
            raise ValueError(f"max_time_warp must be at least 1, got {self.max_time_warp}")

    def attitude_controller(self) -> AttitudeController:
        """SAS controller tuned by this config."""
        return AttitudeController(
            gains=PDGains(kp=self.sas_kp, kd=self.sas_kd),
            stability_gain=self.stability_gain,
            manual_torque=self.manual_torque,
            min_speed=self.sas_min_speed,
        )


# =============================================================================
# Control Inputs
# =============================================================================


@beartype
@dataclass
class Controls:
    """Control signals sampled once per tick.

    `stage` and `deploy_parachutes` are pulses: they act on the tick they are
    set and the caller is expected to clear them afterwards.

    Attributes:
        throttle: Global throttle [0, 1]
        sas_mode: Attitude hold mode
        turn_left: Turn-left key held
        turn_right: Turn-right key held
        time_warp: Time acceleration multiplier (clamped by the simulator)
        stage: Fire the next decoupler (or chutes when none remain)
        deploy_parachutes: Deploy every undeployed parachute
    """
    throttle: float = 0.0
    sas_mode: SASMode = SASMode.STABILITY
    turn_left: bool = False
    turn_right: bool = False
    time_warp: float = 1.0
    stage: bool = False
    deploy_parachutes: bool = False

    def __post_init__(self) -> None:
        if not 0.0 <= self.throttle <= 1.0:
            raise ValueError(f"Throttle must be in [0, 1], got {self.throttle}")


# =============================================================================
# World State
# =============================================================================


@beartype
@dataclass
class ForceBreakdown:
    """Force vectors acting on the craft on the last substep [N]."""
    thrust: NDArray[np.float64] = field(default_factory=lambda: np.zeros(2))
    gravity: NDArray[np.float64] = field(default_factory=lambda: np.zeros(2))
    drag: NDArray[np.float64] = field(default_factory=lambda: np.zeros(2))

    def copy(self) -> "ForceBreakdown":
        return ForceBreakdown(self.thrust.copy(), self.gravity.copy(), self.drag.copy())


@beartype
@dataclass
class Debris:
    """A detached subtree with its own kinematic state.

    Attributes:
        parts: Deep copies of the detached parts
        kinematics: Position/velocity/rotation of the debris
        name: Name of the decoupler that released it
    """
    parts: list[Part]
    kinematics: FlightState
    name: str = ""

    def copy(self) -> "Debris":
        return Debris(copy_parts(self.parts), self.kinematics.copy(), self.name)


@beartype
@dataclass
class SimulationState:
    """Aggregate world snapshot.

    Position and velocity are in world coordinates (origin at the planet
    center). Telemetry fields are relative to `reference_body`, the body
    whose sphere of influence contains the craft.

    Once `finished` is set the state is terminal and `step` returns it
    unchanged.
    """
    kinematics: FlightState
    parts: list[Part]
    throttle: float = 0.0
    sas_mode: SASMode = SASMode.STABILITY
    reference_body: str = ""
    altitude: float = 0.0
    speed: float = 0.0
    vertical_speed: float = 0.0
    horizontal_speed: float = 0.0
    acceleration: float = 0.0
    max_altitude: float = 0.0
    orbit: OrbitalElements | None = None
    active: bool = True
    finished: bool = False
    events: list[str] = field(default_factory=list)
    debris: list[Debris] = field(default_factory=list)
    forces: ForceBreakdown = field(default_factory=ForceBreakdown)

    # Kinematic passthroughs

    @property
    def position(self) -> NDArray[np.float64]:
        return self.kinematics.position

    @property
    def velocity(self) -> NDArray[np.float64]:
        return self.kinematics.velocity

    @property
    def rotation(self) -> float:
        return self.kinematics.rotation

    @property
    def angular_velocity(self) -> float:
        return self.kinematics.angular_velocity

    @property
    def time(self) -> float:
        """Mission elapsed time [s]."""
        return self.kinematics.time

    # Orbital telemetry

    @property
    def semi_major_axis(self) -> float:
        return self.orbit.semi_major_axis if self.orbit is not None else 0.0

    @property
    def eccentricity(self) -> float:
        return self.orbit.eccentricity if self.orbit is not None else 0.0

    @property
    def apoapsis(self) -> float:
        return self.orbit.apoapsis if self.orbit is not None else 0.0

    @property
    def periapsis(self) -> float:
        return self.orbit.periapsis if self.orbit is not None else 0.0

    @property
    def debris_parts(self) -> list[Part]:
        """Every part currently tracked as debris."""
        return [p for d in self.debris for p in d.parts]

    def copy(self) -> "SimulationState":
        """Deep copy of every mutable component."""
        return SimulationState(
            kinematics=self.kinematics.copy(),
            parts=copy_parts(self.parts),
            throttle=self.throttle,
            sas_mode=self.sas_mode,
            reference_body=self.reference_body,
            altitude=self.altitude,
            speed=self.speed,
            vertical_speed=self.vertical_speed,
            horizontal_speed=self.horizontal_speed,
            acceleration=self.acceleration,
            max_altitude=self.max_altitude,
            orbit=self.orbit,
            active=self.active,
            finished=self.finished,
            events=list(self.events),
            debris=[d.copy() for d in self.debris],
            forces=self.forces.copy(),
        )
