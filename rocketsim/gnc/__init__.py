"""GNC (Guidance, Navigation, Control) module.

Currently provides the Stability Assist System attitude controller.

Example:
    >>> from rocketsim.gnc import AttitudeController, SASMode
"""

from rocketsim.gnc.control import (
    AttitudeController,
    PDGains,
    SASMode,
)

__all__ = [
    "AttitudeController",
    "PDGains",
    "SASMode",
]
