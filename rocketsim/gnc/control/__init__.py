"""Attitude control algorithms.

Example:
    >>> from rocketsim.gnc.control import AttitudeController, SASMode
    >>>
    >>> sas = AttitudeController()
    >>> torque = sas.torque(SASMode.STABILITY, 0.0, 0.3, v_rel, inertia=1e4)
"""

from rocketsim.gnc.control.sas import (
    AttitudeController,
    PDGains,
    SASMode,
)

__all__ = [
    "AttitudeController",
    "PDGains",
    "SASMode",
]
