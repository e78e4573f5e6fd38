"""Planar orbital mechanics for telemetry display.

Computes two-body orbital elements from a body-relative state vector. The
core is numba-compiled since it runs once per simulation tick.

Example:
    >>> from rocketsim.orbital import compute_orbital_elements
    >>>
    >>> elements = compute_orbital_elements(r_rel, v_rel, mu=body.mu, body_radius=body.radius)
    >>> print(f"Ap: {elements.apoapsis/1000:.1f} km  Pe: {elements.periapsis/1000:.1f} km")
"""

from typing import NamedTuple

import numpy as np
from beartype import beartype
from numba import njit
from numpy.typing import NDArray

# =============================================================================
# Data Classes
# =============================================================================


class OrbitalElements(NamedTuple):
    """Planar orbital elements.

    Attributes:
        semi_major_axis: Semi-major axis [m] (negative for hyperbolic, inf for parabolic)
        eccentricity: Orbital eccentricity [-]
        apoapsis: Apoapsis altitude above the surface [m] (inf if unbound)
        periapsis: Periapsis altitude above the surface [m]
        specific_energy: Specific orbital energy [J/kg]
        period: Orbital period [s] (0 if unbound)
    """
    semi_major_axis: float
    eccentricity: float
    apoapsis: float
    periapsis: float
    specific_energy: float
    period: float

    @property
    def is_bound(self) -> bool:
        return self.specific_energy < 0.0


# =============================================================================
# Core Numba Functions
# =============================================================================


@njit(cache=True)
def _orbital_elements_core(
    rx: float, ry: float,
    vx: float, vy: float,
    mu: float,
    r_body: float,
) -> tuple[float, float, float, float, float, float]:
    """Numba-optimized planar orbital elements.

    Returns tuple of:
        (sma, ecc, apoapsis_alt, periapsis_alt, energy, period)
    """
    r = np.sqrt(rx*rx + ry*ry)
    v_sq = vx*vx + vy*vy

    energy = v_sq / 2.0 - mu / r

    # Specific angular momentum (scalar in 2D)
    h = rx * vy - ry * vx

    # Eccentricity vector e = ((v^2 - mu/r) r - (r.v) v) / mu
    rdotv = rx * vx + ry * vy
    ex = ((v_sq - mu / r) * rx - rdotv * vx) / mu
    ey = ((v_sq - mu / r) * ry - rdotv * vy) / mu
    ecc = np.sqrt(ex*ex + ey*ey)

    # Periapsis radius from h^2 / (mu (1 + e)) is valid for every conic
    rp = h * h / (mu * (1.0 + ecc))

    if abs(energy) < 1e-12:
        sma = np.inf
    else:
        sma = -mu / (2.0 * energy)

    # Bound iff energy < 0; 2a - rp stays finite on radial (e = 1) trajectories
    if energy < 0.0 and sma < np.inf:
        ra = 2.0 * sma - rp
        period = 2.0 * np.pi * np.sqrt(sma**3 / mu)
        apo_alt = ra - r_body
    else:
        period = 0.0
        apo_alt = np.inf

    return (sma, ecc, apo_alt, rp - r_body, energy, period)


# =============================================================================
# Public API
# =============================================================================


@beartype
def compute_orbital_elements(
    position: NDArray[np.float64],
    velocity: NDArray[np.float64],
    mu: float,
    body_radius: float,
) -> OrbitalElements:
    """Compute orbital elements from a body-relative state vector.

    Args:
        position: Position relative to the body center [m]
        velocity: Velocity relative to the body [m/s]
        mu: Body gravitational parameter [m^3/s^2]
        body_radius: Body surface radius, for apsis altitudes [m]

    Returns:
        OrbitalElements
    """
    r = float(np.linalg.norm(position))
    if r <= 0.0:
        raise ValueError("Position must be non-zero to compute orbital elements")

    result = _orbital_elements_core(
        float(position[0]), float(position[1]),
        float(velocity[0]), float(velocity[1]),
        mu, body_radius,
    )
    return OrbitalElements(*(float(x) for x in result))


@beartype
def circular_velocity(mu: float, radius: float) -> float:
    """Circular orbital speed at radius [m/s]."""
    return float(np.sqrt(mu / radius))


@beartype
def escape_velocity(mu: float, radius: float) -> float:
    """Escape speed at radius [m/s]."""
    return float(np.sqrt(2 * mu / radius))


@beartype
def orbital_period(mu: float, semi_major_axis: float) -> float:
    """Period of an elliptical orbit [s]."""
    return float(2 * np.pi * np.sqrt(semi_major_axis ** 3 / mu))
