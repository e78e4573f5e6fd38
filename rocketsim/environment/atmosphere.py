"""Exponential atmosphere and quadratic drag.

Density decays exponentially with altitude up to a hard ceiling, above which
the atmosphere is vacuum:

    rho(h) = rho0 * exp(-h / H)   for h < ceiling
    rho(h) = 0                    otherwise

Drag opposes the velocity with magnitude 0.5 * rho * v^2 * area * factor.

Example:
    >>> from rocketsim.environment import ExponentialAtmosphere
    >>>
    >>> atm = ExponentialAtmosphere()
    >>> rho = atm.density(10000.0)  # kg/m^3
"""

from dataclasses import dataclass

import numpy as np
from beartype import beartype
from numpy.typing import NDArray

# =============================================================================
# Constants
# =============================================================================

RHO0: float = 1.225  # Sea level density [kg/m^3]
SCALE_HEIGHT: float = 7000.0  # [m]
ATMOSPHERE_CEILING: float = 70000.0  # [m]

DRAG_FACTOR: float = 0.2  # Lumped drag coefficient applied to the summed area
MIN_DRAG_SPEED: float = 0.1  # Below this, drag is zero [m/s]


# =============================================================================
# Atmosphere Model
# =============================================================================


@beartype
@dataclass(frozen=True)
class ExponentialAtmosphere:
    """Isothermal exponential atmosphere with a hard ceiling.

    Attributes:
        sea_level_density: Density at zero altitude [kg/m^3]
        scale_height: e-folding height [m]
        ceiling: Altitude at and above which density is zero [m]
    """
    sea_level_density: float = RHO0
    scale_height: float = SCALE_HEIGHT
    ceiling: float = ATMOSPHERE_CEILING

    def __post_init__(self) -> None:
        if self.scale_height <= 0:
            raise ValueError(f"Scale height must be positive, got {self.scale_height}")

    @beartype
    def density(self, altitude: float) -> float:
        """Get density at altitude [kg/m^3].

        Altitudes below the surface are evaluated at the surface.
        """
        if altitude >= self.ceiling:
            return 0.0
        h = max(altitude, 0.0)
        return float(self.sea_level_density * np.exp(-h / self.scale_height))

    @beartype
    def profile(self, altitudes: NDArray[np.float64] | list[float]) -> NDArray[np.float64]:
        """Density over a range of altitudes [kg/m^3]."""
        return np.array([self.density(float(h)) for h in altitudes], dtype=np.float64)


# =============================================================================
# Drag
# =============================================================================


@beartype
def drag_force(
    velocity: NDArray[np.float64],
    density: float,
    area: float,
    drag_factor: float = DRAG_FACTOR,
    min_speed: float = MIN_DRAG_SPEED,
) -> NDArray[np.float64]:
    """Quadratic drag force opposing the velocity [N].

    Args:
        velocity: Velocity relative to the air [m/s]
        density: Air density [kg/m^3]
        area: Effective drag area [m^2]
        drag_factor: Lumped drag coefficient
        min_speed: Speed below which no drag is applied (direction undefined)

    Returns:
        Drag force vector [N]
    """
    speed = float(np.linalg.norm(velocity))
    if density <= 0 or speed <= min_speed:
        return np.zeros(2)
    magnitude = 0.5 * density * speed * speed * area * drag_factor
    return -magnitude * velocity / speed
