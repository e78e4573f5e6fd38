"""Unit and integration tests for the tick-driven flight simulation."""

import logging

import numpy as np
import pytest
from numpy.testing import assert_allclose

from rocketsim.dynamics import FlightState
from rocketsim.environment import Environment
from rocketsim.gnc import SASMode
from rocketsim.simulation import (
    Controls,
    SimConfig,
    SimulationResult,
    Simulator,
    initial_state,
    step,
    substep_plan,
)
from rocketsim.vehicle import VehicleTreeError

ENV = Environment.default()
R = ENV.primary.radius


def part(state, instance_id):
    return next(p for p in state.parts if p.instance_id == instance_id)


def fly(sim, controls, ticks):
    for _ in range(ticks):
        sim.step(controls)
    return sim.state


# =============================================================================
# Launch State
# =============================================================================


class TestInitialState:
    """Test the launch snapshot."""

    def test_on_the_pad(self, hopper):
        state = initial_state(hopper)
        assert_allclose(state.position, [0.0, -R])
        assert_allclose(state.velocity, [0.0, 0.0])
        assert state.time == 0.0
        assert state.altitude == 0.0
        assert state.reference_body == "Planet"
        assert state.active and not state.finished
        assert state.events == []

    def test_parts_are_copied(self, hopper):
        state = initial_state(hopper)
        assert all(a is not b for a, b in zip(state.parts, hopper))
        part(state, "tank").set_fuel(0.0)
        assert hopper[1].fuel == 500.0

    def test_invalid_tree_rejected(self):
        with pytest.raises(VehicleTreeError):
            Simulator.from_launch([])

    def test_logs_launch(self, hopper, caplog):
        caplog.set_level(logging.INFO, logger="rocketsim")
        Simulator.from_launch(hopper)
        assert "Launch: Command Pod Mk1" in caplog.text


# =============================================================================
# Step Semantics
# =============================================================================


class TestSubstepPlan:
    """Test time warp clamping and substep splitting."""

    @pytest.mark.parametrize(
        "warp, substeps, sub_dt",
        [
            (1.0, 1, 0.05),
            (0.2, 1, 0.05),
            (5.0, 5, 0.05),
            (2.5, 3, 0.05 * 2.5 / 3),
            (100.0, 10, 0.5),
            (1000.0, 10, 0.5),
        ],
    )
    def test_plan(self, warp, substeps, sub_dt):
        n, dt = substep_plan(warp, 0.05, SimConfig())
        assert n == substeps
        assert_allclose(dt, sub_dt)


class TestStep:
    """Test the pure step function."""

    def test_input_not_mutated(self, hopper):
        state = initial_state(hopper)
        new = step(state, Controls(throttle=1.0))
        assert state.time == 0.0
        assert part(state, "tank").fuel == 500.0
        assert_allclose(state.position, [0.0, -R])
        assert_allclose(part(new, "tank").fuel, 496.0)
        assert_allclose(new.time, 0.05)

    def test_rests_on_pad_at_zero_throttle(self, hopper):
        state = initial_state(hopper)
        for _ in range(20):
            state = step(state, Controls())
        assert_allclose(state.position, [0.0, -R], atol=1e-9)
        assert_allclose(state.velocity, [0.0, 0.0])
        assert_allclose(state.altitude, 0.0, atol=1e-9)
        assert not state.finished
        assert state.events == []

    def test_time_warp_advances_time(self, hopper):
        state = initial_state(hopper)
        assert_allclose(step(state, Controls(time_warp=5.0)).time, 0.25)
        assert_allclose(step(state, Controls(time_warp=1000.0)).time, 5.0)

    def test_negative_dt_rejected(self, hopper):
        with pytest.raises(ValueError):
            step(initial_state(hopper), Controls(), dt=-0.1)

    def test_throttle_validated(self):
        with pytest.raises(ValueError):
            Controls(throttle=1.5)

    def test_config_validated(self):
        with pytest.raises(ValueError):
            SimConfig(max_substeps=0)

    def test_manual_turn(self, hopper):
        state = initial_state(hopper)
        for _ in range(10):
            state = step(state, Controls(sas_mode=SASMode.MANUAL, turn_right=True))
        assert state.rotation > 0.0
        assert state.angular_velocity > 0.0
        assert state.sas_mode == SASMode.MANUAL


# =============================================================================
# Flight
# =============================================================================


class TestPoweredFlight:
    """Single-stage ascent to burnout."""

    def test_lifts_off(self, hopper):
        sim = Simulator.from_launch(hopper, record_history=False)
        state = fly(sim, Controls(throttle=1.0), 20)
        assert 25.0 < state.altitude < 40.0
        assert state.vertical_speed > 0.0
        assert_allclose(part(state, "tank").fuel, 420.0, atol=1e-6)
        assert_allclose(state.position[0], 0.0, atol=1e-9)
        assert state.acceleration > 0.0

    def test_vertical_flight_apoapsis_finite(self, hopper):
        """A straight-up hop is a bound radial trajectory on every tick."""
        sim = Simulator.from_launch(hopper, record_history=False)
        assert np.isfinite(sim.state.apoapsis)
        assert_allclose(sim.state.apoapsis, 0.0, atol=1e-6)

        for _ in range(300):
            state = sim.step(Controls(throttle=1.0))
            assert np.isfinite(state.apoapsis)
            assert state.orbit.period > 0.0
            assert state.apoapsis >= state.altitude - 1e-6

    def test_burnout(self, hopper):
        """500 kg at 80 kg/s lasts 6.25 s."""
        sim = Simulator.from_launch(hopper, record_history=False)
        controls = Controls(throttle=1.0)

        state = fly(sim, controls, 124)
        assert_allclose(part(state, "tank").fuel, 4.0, atol=1e-6)
        assert part(state, "engine").is_thrusting

        state = fly(sim, controls, 1)
        assert_allclose(state.time, 6.25)
        assert_allclose(part(state, "tank").fuel, 0.0, atol=1e-6)

        state = fly(sim, controls, 1)
        assert not part(state, "engine").is_thrusting
        assert_allclose(state.forces.thrust, [0.0, 0.0])

        rising = state.vertical_speed
        state = fly(sim, controls, 20)
        assert 0.0 < state.vertical_speed < rising
        assert state.max_altitude == pytest.approx(state.altitude, rel=1e-12)

    def test_stable_circular_orbit(self, hopper):
        r = R + 100000.0
        v = np.sqrt(ENV.primary.mu / r)
        state = initial_state(hopper)
        state.kinematics = FlightState(position=np.array([0.0, -r]), velocity=np.array([v, 0.0]))

        state = step(state, Controls())
        assert state.eccentricity < 1e-6
        assert_allclose(state.apoapsis, 100000.0, atol=5.0)
        assert_allclose(state.periapsis, 100000.0, atol=5.0)
        assert_allclose(state.horizontal_speed, v, rtol=1e-6)
        assert_allclose(state.vertical_speed, 0.0, atol=1e-2)

    def test_moon_relative_telemetry(self, hopper):
        moon = ENV.secondary_position(0.0)
        state = initial_state(hopper)
        state.kinematics = FlightState(
            position=moon + np.array([0.0, -(ENV.secondary.radius + 10000.0)]),
            velocity=ENV.secondary_velocity(0.0),
        )

        state = step(state, Controls())
        assert state.reference_body == "Moon"
        assert_allclose(state.altitude, 10000.0, atol=1.0)
        assert state.speed < 1.0


class TestStaging:
    """Staging and parachutes through control pulses."""

    def test_stage_in_flight(self, two_stage):
        sim = Simulator.from_launch(two_stage, record_history=False)
        fly(sim, Controls(throttle=1.0), 20)

        state = sim.step(Controls(throttle=1.0, stage=True))
        assert state.events == ["Staged: TR-18A Stack Decoupler"]
        assert {p.instance_id for p in state.parts} == {"pod", "chute"}
        assert len(state.debris) == 1
        assert {p.instance_id for p in state.debris_parts} == {"dec", "tank", "engine"}
        assert_allclose(state.forces.thrust, [0.0, 0.0])

        state = fly(sim, Controls(), 5)
        assert len(state.debris) == 1

        state = sim.step(Controls(stage=True))
        assert state.events[-1] == "Parachutes deployed"
        assert part(state, "chute").is_deployed

    def test_deploy_pulse(self, two_stage):
        state = step(initial_state(two_stage), Controls(deploy_parachutes=True))
        assert state.events == ["Parachutes deployed"]
        assert part(state, "chute").is_deployed

        again = step(state, Controls(deploy_parachutes=True))
        assert again.events == ["Parachutes deployed"]

    def test_debris_pushed_into_pad_is_dropped(self, two_stage):
        state = step(initial_state(two_stage), Controls(stage=True))
        assert state.debris == []
        assert state.events == ["Staged: TR-18A Stack Decoupler"]


class TestSurfaceContact:
    """Terminal contact through the step function."""

    def test_crash(self, hopper):
        state = initial_state(hopper)
        state.kinematics = FlightState(
            position=np.array([0.0, -R - 5.0]), velocity=np.array([0.0, 50.0])
        )
        for _ in range(10):
            state = step(state, Controls())
            if state.finished:
                break

        assert state.finished
        assert not state.active
        assert state.events[-1] == "Crashed into Planet"
        assert step(state, Controls(throttle=1.0)) is state

    def test_landing(self, hopper):
        state = initial_state(hopper)
        state.kinematics = FlightState(
            position=np.array([0.0, -R - 0.01]), velocity=np.array([0.0, 0.2])
        )
        state.max_altitude = 1000.0

        state = step(state, Controls())
        assert state.finished
        assert state.events == ["Landed on Planet"]
        assert_allclose(state.velocity, [0.0, 0.0])
        assert_allclose(state.position, [0.0, -R])


# =============================================================================
# Simulator
# =============================================================================


class TestSimulator:
    """Test the stateful wrapper and results."""

    def test_history(self, hopper):
        sim = Simulator.from_launch(hopper)
        fly(sim, Controls(throttle=1.0), 10)
        history = sim.get_history()
        assert len(history) == 11
        assert history[0].time == 0.0
        assert_allclose(history[-1].time, 0.5)

        sim.clear_history()
        assert len(sim.get_history()) == 1

    def test_history_disabled(self, hopper):
        sim = Simulator.from_launch(hopper, record_history=False)
        fly(sim, Controls(), 3)
        assert sim.get_history() == []

    def test_get_state_is_copy(self, hopper):
        sim = Simulator.from_launch(hopper)
        snapshot = sim.get_state()
        snapshot.kinematics.position[0] = 123.0
        assert sim.state.position[0] == 0.0

    def test_run_for_duration(self, hopper):
        sim = Simulator.from_launch(hopper, record_history=False)
        sim.run(Controls(throttle=1.0), duration=1.0)
        assert 1.0 - 1e-9 <= sim.time < 1.1
        assert sim.altitude > 0.0

    def test_run_pulses_once(self, two_stage):
        sim = Simulator.from_launch(two_stage, record_history=False)
        state = sim.run(Controls(throttle=1.0, stage=True), duration=0.5)
        assert state.events == ["Staged: TR-18A Stack Decoupler"]

    def test_logs_events(self, two_stage, caplog):
        caplog.set_level(logging.INFO, logger="rocketsim")
        sim = Simulator.from_launch(two_stage)
        sim.step(Controls(deploy_parachutes=True))
        assert "Parachutes deployed" in caplog.text

    def test_result_dataframe(self, hopper):
        sim = Simulator.from_launch(hopper)
        fly(sim, Controls(throttle=1.0), 10)
        result = SimulationResult.from_simulator(sim)

        assert result.altitude.shape == (11,)
        assert result.position.shape == (11, 2)
        assert result.mass[0] > result.mass[-1]
        assert result.events == []

        df = result.to_dataframe()
        assert df.height == 11
        for column in ("time", "altitude", "speed", "mass", "x", "y", "body"):
            assert column in df.columns
        assert df["body"][0] == "Planet"
