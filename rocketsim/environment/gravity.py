"""Point-mass gravity kernels.

Newtonian 1/r^2 attraction toward a body center, no oblateness. The scalar
kernel is numba-compiled since it is evaluated four times per RK4 substep.
"""

import numpy as np
from beartype import beartype
from numba import njit
from numpy.typing import NDArray

# Distances below this are clamped (surface contact keeps craft far above it)
MIN_RADIUS: float = 1.0  # [m]


@njit(cache=True)
def _point_mass_gravity(dx: float, dy: float, mu: float) -> tuple[float, float]:
    """Acceleration toward the origin of the (dx, dy) offset.

    g = -mu / r^2 * r_hat
    """
    r_sq = dx*dx + dy*dy
    r = np.sqrt(r_sq)
    if r < MIN_RADIUS:
        r = MIN_RADIUS
        r_sq = r * r
    g_over_r = mu / (r_sq * r)
    return (-g_over_r * dx, -g_over_r * dy)


@beartype
def point_mass_gravity(
    offset: NDArray[np.float64],
    mu: float,
) -> NDArray[np.float64]:
    """Gravitational acceleration from a point mass.

    Args:
        offset: Craft position relative to the body center [m]
        mu: Body gravitational parameter GM [m^3/s^2]

    Returns:
        Acceleration vector toward the body [m/s^2]
    """
    gx, gy = _point_mass_gravity(float(offset[0]), float(offset[1]), mu)
    return np.array([gx, gy])


@beartype
def sphere_of_influence(orbit_radius: float, mu_secondary: float, mu_primary: float) -> float:
    """Laplace sphere of influence radius r_SOI = a * (m2/m1)^(2/5) [m]."""
    return orbit_radius * (mu_secondary / mu_primary) ** 0.4
