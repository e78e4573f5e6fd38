"""Stability Assist System (SAS) attitude controller.

Modes:
- MANUAL: no automatic torque; the craft drifts freely when no key is held
- STABILITY: rate damping only, torque = -omega * I * stability_gain
- PROGRADE / RETROGRADE: PD hold of the heading along (or against) the
  velocity relative to the dominant body. Below `min_speed` the direction is
  undefined and the controller falls back to STABILITY damping.

The PD law uses the measured rate directly ("derivative on measurement"):

    torque = kp * wrap(target - rotation) - kd * omega

Manual turn input adds a fixed torque on top of whatever SAS commands.

Example:
    >>> from rocketsim.gnc.control import AttitudeController, SASMode
    >>>
    >>> sas = AttitudeController()
    >>> torque = sas.torque(SASMode.PROGRADE, rotation, omega, v_rel, inertia)
"""

from dataclasses import dataclass, field
from enum import Enum

import numpy as np
from beartype import beartype
from numpy.typing import NDArray

from rocketsim.dynamics.state import heading_for_direction, wrap_angle

# Defaults
MANUAL_TORQUE: float = 10000.0  # [N*m]
STABILITY_GAIN: float = 2.0  # [1/s]
SAS_KP: float = 20000.0  # [N*m/rad]
SAS_KD: float = 20000.0  # [N*m*s/rad]
SAS_MIN_SPEED: float = 1.0  # [m/s]


class SASMode(Enum):
    """Attitude hold modes."""

    MANUAL = "MANUAL"
    STABILITY = "STABILITY"
    PROGRADE = "PROGRADE"
    RETROGRADE = "RETROGRADE"


# =============================================================================
# PD Gains
# =============================================================================


@beartype
@dataclass
class PDGains:
    """Proportional-derivative gains.

    Attributes:
        kp: Proportional gain [N*m/rad]
        kd: Derivative gain [N*m*s/rad]
    """
    kp: float = SAS_KP
    kd: float = SAS_KD

    def output(self, error: float, rate: float) -> float:
        """PD output with the derivative taken on the measured rate."""
        return self.kp * error - self.kd * rate


# =============================================================================
# Attitude Controller
# =============================================================================


@beartype
@dataclass
class AttitudeController:
    """Mode-switched attitude controller.

    Stateless apart from its tuning, so it can be evaluated at every RK4
    stage without side effects.

    Attributes:
        gains: PD gains for heading hold
        stability_gain: Damping gain for STABILITY mode [1/s]
        manual_torque: Torque applied while a turn key is held [N*m]
        min_speed: Speed below which prograde/retrograde is undefined [m/s]
    """
    gains: PDGains = field(default_factory=PDGains)
    stability_gain: float = STABILITY_GAIN
    manual_torque: float = MANUAL_TORQUE
    min_speed: float = SAS_MIN_SPEED

    @beartype
    def target_rotation(
        self,
        mode: SASMode,
        relative_velocity: NDArray[np.float64],
    ) -> float | None:
        """Heading to hold, or None when the mode holds no heading."""
        if mode not in (SASMode.PROGRADE, SASMode.RETROGRADE):
            return None
        if float(np.linalg.norm(relative_velocity)) <= self.min_speed:
            return None
        direction = relative_velocity if mode == SASMode.PROGRADE else -relative_velocity
        return heading_for_direction(direction)

    @beartype
    def input_torque(self, turn_left: bool, turn_right: bool) -> float:
        """Manual torque from the turn keys."""
        torque = 0.0
        if turn_left:
            torque -= self.manual_torque
        if turn_right:
            torque += self.manual_torque
        return torque

    @beartype
    def torque(
        self,
        mode: SASMode,
        rotation: float,
        angular_velocity: float,
        relative_velocity: NDArray[np.float64],
        inertia: float,
        turn_left: bool = False,
        turn_right: bool = False,
    ) -> float:
        """Total control torque for the current mode and input.

        Args:
            mode: SAS mode
            rotation: Current heading [rad]
            angular_velocity: Current rotation rate [rad/s]
            relative_velocity: Velocity relative to the dominant body [m/s]
            inertia: Current moment of inertia [kg*m^2]
            turn_left: Turn-left key held
            turn_right: Turn-right key held

        Returns:
            Torque [N*m]
        """
        torque = self.input_torque(turn_left, turn_right)

        if mode == SASMode.MANUAL:
            return torque

        target = self.target_rotation(mode, relative_velocity)
        if target is None:
            # STABILITY, or a heading mode without a defined direction
            return torque - angular_velocity * inertia * self.stability_gain

        error = wrap_angle(target - rotation)
        return torque + self.gains.output(error, angular_velocity)
