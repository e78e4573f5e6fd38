"""Tick-driven flight simulation.

`step(state, controls, dt, environment, config)` is a pure function: it
deep-copies its input and returns the next snapshot, so it can be driven
from a headless test harness or a render loop alike. `Simulator` wraps it
with a current state and a recorded history.

One tick:
    1. A finished state is returned unchanged.
    2. Time warp is clamped to [1, max_time_warp]; the tick is split into
       min(ceil(warp), max_substeps) equal substeps of dt * warp / substeps.
    3. Stage and parachute pulses are applied once.
    4. Each substep resolves propulsion (draining fuel), recomputes mass,
       inertia and drag area, advances the craft with RK4 (gravity, drag and
       SAS torque re-evaluated at every stage, thrust held constant),
       advances debris and checks surface contact against both bodies.
    5. Telemetry is refreshed relative to the dominant body.

Example:
    >>> from rocketsim.simulation import Controls, Simulator
    >>>
    >>> sim = Simulator.from_launch(parts)
    >>> controls = Controls(throttle=1.0)
    >>> while sim.time < 60.0 and not sim.state.finished:
    ...     sim.step(controls)
    >>> df = SimulationResult.from_simulator(sim).to_dataframe()
"""

import logging
import math
from dataclasses import dataclass, field

import numpy as np
from beartype import beartype
from numpy.typing import NDArray

from rocketsim.dynamics.rigid_body import planar_derivatives, rk4_step
from rocketsim.dynamics.state import FlightState, StateDerivative, heading_vector
from rocketsim.environment.bodies import Environment
from rocketsim.orbital import compute_orbital_elements
from rocketsim.propulsion.resolver import resolve_propulsion
from rocketsim.simulation.collision import resolve_surface_contact
from rocketsim.simulation.debris import advance_debris
from rocketsim.simulation.staging import PARACHUTE_EVENT, deploy_parachutes, stage
from rocketsim.simulation.state import (
    Controls,
    ForceBreakdown,
    SimConfig,
    SimulationState,
)
from rocketsim.vehicle.mass import drag_area, moment_of_inertia
from rocketsim.vehicle.parts import Part, copy_parts
from rocketsim.vehicle.tree import children_map, validate_tree

logger = logging.getLogger(__name__)

MIN_MASS: float = 1.0  # Mass floor for an (unphysical) empty vehicle [kg]


# =============================================================================
# Pure Step
# =============================================================================


@beartype
def substep_plan(time_warp: float, dt: float, config: SimConfig) -> tuple[int, float]:
    """Number of substeps and substep duration for one tick.

    Returns:
        (substeps, sub_dt)
    """
    warp = min(max(time_warp, 1.0), config.max_time_warp)
    substeps = min(math.ceil(warp), config.max_substeps)
    return substeps, dt * warp / substeps


def _update_telemetry(state: SimulationState, environment: Environment) -> None:
    """Refresh body-relative telemetry in place."""
    frame = environment.reference_frame(state.position, state.time)
    r_rel = frame.relative_position(state.position)
    v_rel = frame.relative_velocity(state.velocity)
    distance = float(np.linalg.norm(r_rel))

    state.reference_body = frame.body.name
    state.altitude = distance - frame.body.radius
    state.speed = float(np.linalg.norm(v_rel))
    state.max_altitude = max(state.max_altitude, state.altitude)

    if distance > 0:
        radial = r_rel / distance
        state.vertical_speed = float(np.dot(v_rel, radial))
        state.horizontal_speed = float(radial[0] * v_rel[1] - radial[1] * v_rel[0])
        state.orbit = compute_orbital_elements(r_rel, v_rel, frame.body.mu, frame.body.radius)
    else:
        state.vertical_speed = 0.0
        state.horizontal_speed = 0.0
        state.orbit = None


def _force_breakdown(
    kinematics: FlightState,
    thrust: float,
    mass: float,
    area: float,
    environment: Environment,
    config: SimConfig,
) -> ForceBreakdown:
    forces = environment.forces(
        kinematics.position, kinematics.velocity, kinematics.time, mass, area,
        config.drag_factor, config.min_drag_speed,
    )
    return ForceBreakdown(
        thrust=thrust * kinematics.heading,
        gravity=forces.gravity,
        drag=forces.drag,
    )


def _apply_pulses(state: SimulationState, controls: Controls, config: SimConfig) -> None:
    if controls.stage:
        outcome = stage(state.parts, state.kinematics, config.separation_speed)
        state.parts = outcome.parts
        if outcome.debris is not None:
            state.debris.append(outcome.debris)
        if outcome.event is not None:
            state.events.append(outcome.event)

    if controls.deploy_parachutes and deploy_parachutes(state.parts):
        state.events.append(PARACHUTE_EVENT)


@beartype
def initial_state(
    parts: list[Part],
    environment: Environment | None = None,
) -> SimulationState:
    """Launch snapshot: vehicle at rest on the pad at (0, -R).

    Raises:
        VehicleTreeError: If the parts do not form a single tree
    """
    if environment is None:
        environment = Environment.default()

    root = validate_tree(parts)
    kinematics = FlightState(
        position=np.array([0.0, -environment.primary.radius]),
        velocity=np.zeros(2),
    )
    state = SimulationState(kinematics=kinematics, parts=copy_parts(parts))
    _update_telemetry(state, environment)

    logger.info("Launch: %s with %d part(s)", root.name, len(parts))
    return state


@beartype
def step(
    state: SimulationState,
    controls: Controls,
    dt: float | None = None,
    environment: Environment | None = None,
    config: SimConfig | None = None,
) -> SimulationState:
    """Advance the simulation by one tick.

    Args:
        state: Current snapshot (never mutated)
        controls: Control signals held for the whole tick
        dt: Tick duration at 1x warp [s] (default config.base_time_step)
        environment: Planet/moon system (default Environment.default())
        config: Tuning constants (default SimConfig())

    Returns:
        Next snapshot (the input itself if it is already finished)
    """
    if state.finished:
        return state

    config = config or SimConfig()
    environment = environment or Environment.default()
    if dt is None:
        dt = config.base_time_step
    if dt < 0:
        raise ValueError(f"Time step must be non-negative, got {dt}")

    new = state.copy()
    new.throttle = controls.throttle
    new.sas_mode = controls.sas_mode

    substeps, sub_dt = substep_plan(controls.time_warp, dt, config)
    _apply_pulses(new, controls, config)

    controller = config.attitude_controller()
    children = children_map(new.parts)
    acceleration = 0.0

    for _ in range(substeps):
        propulsion = resolve_propulsion(
            new.parts, controls.throttle, sub_dt, children,
            config.throttle_epsilon, config.min_thrust_ratio,
        )
        mass = max(propulsion.mass, MIN_MASS)
        inertia = moment_of_inertia(new.parts, config.inertia_per_kg, config.min_inertia)
        area = drag_area(new.parts, config.parachute_area_multiplier)
        thrust = propulsion.thrust

        def derivatives(s: FlightState) -> StateDerivative:
            forces = environment.forces(
                s.position, s.velocity, s.time, mass, area,
                config.drag_factor, config.min_drag_speed,
            )
            torque = controller.torque(
                controls.sas_mode,
                s.rotation,
                s.angular_velocity,
                forces.frame.relative_velocity(s.velocity),
                inertia,
                controls.turn_left,
                controls.turn_right,
            )
            force = forces.gravity + forces.drag + thrust * heading_vector(s.rotation)
            return planar_derivatives(s, force, torque, mass, inertia)

        previous_velocity = new.velocity.copy()
        new.kinematics = rk4_step(new.kinematics, sub_dt, derivatives)
        new.debris = advance_debris(
            new.debris, environment, sub_dt, config.debris_nominal_mass,
            config.drag_factor, config.min_drag_speed, config.parachute_area_multiplier,
        )

        for body in environment.bodies:
            contact = resolve_surface_contact(
                new.position, new.velocity,
                environment.body_frame(body, new.time),
                new.max_altitude,
                config.impact_speed, config.rest_speed, config.landing_min_altitude,
            )
            new.kinematics.position = contact.position
            new.kinematics.velocity = contact.velocity
            if contact.terminal:
                new.events.append(contact.event)
                new.active = False
                new.finished = True
                break

        if sub_dt > 0:
            acceleration = float(np.linalg.norm(new.velocity - previous_velocity)) / sub_dt
        new.forces = _force_breakdown(new.kinematics, thrust, mass, area, environment, config)
        _update_telemetry(new, environment)

        if new.finished:
            break

    new.acceleration = acceleration
    return new


# =============================================================================
# Simulator
# =============================================================================


@beartype
@dataclass
class Simulator:
    """Stateful wrapper around `step` that records history.

    Example:
        >>> sim = Simulator.from_launch(parts)
        >>> for _ in range(200):  # 10 seconds at 20 Hz
        ...     sim.step(Controls(throttle=1.0))
        >>> print(f"{sim.state.altitude:.0f} m")
    """
    state: SimulationState
    environment: Environment = field(default_factory=Environment.default)
    config: SimConfig = field(default_factory=SimConfig)

    # Internal
    _history: list[SimulationState] = field(default_factory=list, init=False, repr=False)
    _record_history: bool = field(default=True)

    def __post_init__(self) -> None:
        if self._record_history:
            self._history = [self.state.copy()]

    @classmethod
    def from_launch(
        cls,
        parts: list[Part],
        environment: Environment | None = None,
        config: SimConfig | None = None,
        record_history: bool = True,
    ) -> "Simulator":
        """Create a simulator with the vehicle on the launch pad.

        Raises:
            VehicleTreeError: If the parts do not form a single tree
        """
        environment = environment or Environment.default()
        return cls(
            state=initial_state(parts, environment),
            environment=environment,
            config=config or SimConfig(),
            _record_history=record_history,
        )

    def get_state(self) -> SimulationState:
        """Get current state.

        Returns a copy to prevent external modification.
        """
        return self.state.copy()

    def step(self, controls: Controls, dt: float | None = None) -> SimulationState:
        """Advance one tick and record the result."""
        previous_events = len(self.state.events)
        self.state = step(self.state, controls, dt, self.environment, self.config)

        for event in self.state.events[previous_events:]:
            logger.info("T+%.2f s: %s", self.state.time, event)

        if self._record_history:
            self._history.append(self.state.copy())
        return self.state

    def run(
        self,
        controls: Controls,
        duration: float,
        dt: float | None = None,
    ) -> SimulationState:
        """Step with fixed controls until `duration` simulated seconds pass or the flight ends.

        Pulses in `controls` act on the first tick only.
        """
        t_end = self.state.time + duration
        current = controls
        while self.state.time < t_end and not self.state.finished:
            before = self.state.time
            self.step(current, dt)
            if current.stage or current.deploy_parachutes:
                current = Controls(
                    throttle=controls.throttle,
                    sas_mode=controls.sas_mode,
                    turn_left=controls.turn_left,
                    turn_right=controls.turn_right,
                    time_warp=controls.time_warp,
                )
            if self.state.time <= before:
                break
        return self.state

    def get_history(self) -> list[SimulationState]:
        """Get recorded state history."""
        return self._history.copy()

    def clear_history(self) -> None:
        """Clear recorded state history."""
        self._history = [self.state.copy()]

    @property
    def time(self) -> float:
        """Current mission time [s]."""
        return self.state.time

    @property
    def altitude(self) -> float:
        """Current altitude above the dominant body [m]."""
        return self.state.altitude


# =============================================================================
# Results and Analysis
# =============================================================================


@beartype
@dataclass
class SimulationResult:
    """Results from a completed simulation.

    Provides convenient access to trajectory data and analysis.
    """
    states: list[SimulationState]

    @property
    def time(self) -> NDArray[np.float64]:
        """Time array [s]."""
        return np.array([s.time for s in self.states])

    @property
    def position(self) -> NDArray[np.float64]:
        """Position history [m], shape (N, 2)."""
        return np.array([s.position for s in self.states])

    @property
    def velocity(self) -> NDArray[np.float64]:
        """Velocity history [m/s], shape (N, 2)."""
        return np.array([s.velocity for s in self.states])

    @property
    def altitude(self) -> NDArray[np.float64]:
        """Altitude history [m]."""
        return np.array([s.altitude for s in self.states])

    @property
    def speed(self) -> NDArray[np.float64]:
        """Speed history [m/s]."""
        return np.array([s.speed for s in self.states])

    @property
    def mass(self) -> NDArray[np.float64]:
        """Vehicle mass history [kg]."""
        return np.array([sum(p.wet_mass for p in s.parts) for s in self.states])

    @property
    def events(self) -> list[str]:
        """Event log of the final state."""
        return list(self.states[-1].events) if self.states else []

    @classmethod
    def from_simulator(cls, sim: Simulator) -> "SimulationResult":
        """Create result from simulator history."""
        return cls(states=sim.get_history())

    def to_dataframe(self):
        """Convert to Polars DataFrame."""
        import polars as pl

        return pl.DataFrame({
            "time": self.time,
            "altitude": self.altitude,
            "speed": self.speed,
            "vertical_speed": np.array([s.vertical_speed for s in self.states]),
            "horizontal_speed": np.array([s.horizontal_speed for s in self.states]),
            "mass": self.mass,
            "throttle": np.array([s.throttle for s in self.states]),
            "x": self.position[:, 0],
            "y": self.position[:, 1],
            "vx": self.velocity[:, 0],
            "vy": self.velocity[:, 1],
            "rotation": np.array([s.rotation for s in self.states]),
            "body": [s.reference_body for s in self.states],
        })
