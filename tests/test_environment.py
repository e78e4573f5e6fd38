"""Unit tests for the planet/moon environment, gravity and atmosphere."""

import numpy as np
import pytest
from numpy.testing import assert_allclose

from rocketsim.environment import (
    CelestialBody,
    Environment,
    ExponentialAtmosphere,
    drag_force,
    point_mass_gravity,
    sphere_of_influence,
)

# =============================================================================
# Bodies
# =============================================================================


class TestBodies:
    """Test celestial body parameters."""

    def test_mu_from_surface_gravity(self):
        body = CelestialBody(name="Planet", radius=600000.0, surface_gravity=9.81)
        assert_allclose(body.mu, 9.81 * 600000.0**2)

    def test_invalid_radius(self):
        with pytest.raises(ValueError):
            CelestialBody(name="Bad", radius=0.0, surface_gravity=9.81)

    def test_default_system(self):
        env = Environment.default()
        assert env.primary.name == "Planet"
        assert env.secondary.name == "Moon"
        assert env.primary.atmosphere is not None
        assert env.secondary.atmosphere is None

    def test_moon_period(self):
        env = Environment.default()
        expected = 2 * np.pi * np.sqrt(env.secondary_orbit_radius**3 / env.primary.mu)
        assert_allclose(env.secondary_period, expected)

    def test_soi_radius(self):
        env = Environment.default()
        expected = 12000000.0 * (env.secondary.mu / env.primary.mu) ** 0.4
        assert_allclose(env.soi_radius, expected)
        assert_allclose(
            sphere_of_influence(12000000.0, env.secondary.mu, env.primary.mu), expected
        )


# =============================================================================
# Gravity
# =============================================================================


class TestGravity:
    """Test point-mass gravity and SOI switching."""

    def test_surface_gravity_on_pad(self):
        """On the pad at (0, -R), gravity points +y with magnitude g."""
        env = Environment.default()
        g = env.gravity(np.array([0.0, -env.primary.radius]), 0.0)
        assert_allclose(g, [0.0, 9.81], atol=1e-9)

    def test_inverse_square(self):
        mu = 1e12
        g1 = point_mass_gravity(np.array([1000.0, 0.0]), mu)
        g2 = point_mass_gravity(np.array([2000.0, 0.0]), mu)
        assert_allclose(np.linalg.norm(g1) / np.linalg.norm(g2), 4.0)
        assert g1[0] < 0

    def test_moon_position_circular(self):
        env = Environment.default()
        a = env.secondary_orbit_radius
        assert_allclose(env.secondary_position(0.0), [a, 0.0])
        quarter = env.secondary_position(env.secondary_period / 4)
        assert_allclose(quarter, [0.0, a], atol=1e-3)

    def test_moon_velocity_tangential(self):
        env = Environment.default()
        pos = env.secondary_position(123.0)
        vel = env.secondary_velocity(123.0)
        assert_allclose(np.dot(pos, vel), 0.0, atol=1e-3)
        speed = 2 * np.pi * env.secondary_orbit_radius / env.secondary_period
        assert_allclose(np.linalg.norm(vel), speed)

    def test_outside_soi_uses_planet_only(self):
        env = Environment.default()
        moon = env.secondary_position(0.0)
        position = moon - np.array([env.soi_radius * 1.001, 0.0])
        assert not env.in_secondary_soi(position, 0.0)
        assert env.reference_frame(position, 0.0).body is env.primary
        assert_allclose(env.gravity(position, 0.0), point_mass_gravity(position, env.primary.mu))

    def test_inside_soi_uses_moon_only(self):
        env = Environment.default()
        moon = env.secondary_position(0.0)
        position = moon - np.array([env.soi_radius * 0.999, 0.0])
        assert env.in_secondary_soi(position, 0.0)
        frame = env.reference_frame(position, 0.0)
        assert frame.body is env.secondary
        assert_allclose(frame.velocity, env.secondary_velocity(0.0))
        assert_allclose(
            env.gravity(position, 0.0),
            point_mass_gravity(position - moon, env.secondary.mu),
        )

    def test_moon_gravity_points_at_moon(self):
        env = Environment.default()
        moon = env.secondary_position(0.0)
        position = moon + np.array([0.0, env.secondary.radius])
        g = env.gravity(position, 0.0)
        assert_allclose(g, [0.0, -1.63], atol=1e-9)


# =============================================================================
# Atmosphere and Drag
# =============================================================================


class TestAtmosphere:
    """Test the exponential atmosphere."""

    def test_sea_level(self):
        assert_allclose(ExponentialAtmosphere().density(0.0), 1.225)

    def test_scale_height(self):
        assert_allclose(ExponentialAtmosphere().density(7000.0), 1.225 / np.e)

    def test_ceiling(self):
        atm = ExponentialAtmosphere()
        assert atm.density(70000.0) == 0.0
        assert atm.density(69999.0) > 0.0

    def test_below_surface_clamped(self):
        assert_allclose(ExponentialAtmosphere().density(-100.0), 1.225)

    def test_profile(self):
        rho = ExponentialAtmosphere().profile([0.0, 7000.0, 80000.0])
        assert_allclose(rho, [1.225, 1.225 / np.e, 0.0])

    def test_no_air_near_moon(self):
        env = Environment.default()
        position = env.secondary_position(0.0) + np.array([env.secondary.radius + 10.0, 0.0])
        assert env.density(position) == 0.0


class TestDrag:
    """Test quadratic drag."""

    def test_drag_opposes_velocity(self):
        force = drag_force(np.array([100.0, 0.0]), 1.225, 2.0)
        # 0.5 * 1.225 * 100^2 * 2.0 * 0.2
        assert_allclose(force, [-2450.0, 0.0])

    def test_no_drag_when_slow(self):
        force = drag_force(np.array([0.05, 0.0]), 1.225, 2.0)
        assert_allclose(force, [0.0, 0.0])

    def test_no_drag_in_vacuum(self):
        assert_allclose(drag_force(np.array([100.0, 0.0]), 0.0, 2.0), [0.0, 0.0])

    def test_environment_forces(self):
        env = Environment.default()
        position = np.array([0.0, -env.primary.radius])
        velocity = np.array([0.0, -100.0])
        forces = env.forces(position, velocity, 0.0, 1000.0, 2.0)
        assert forces.frame.body is env.primary
        assert_allclose(forces.gravity, [0.0, 9810.0], atol=1e-6)
        assert_allclose(forces.drag, [0.0, 2450.0])
