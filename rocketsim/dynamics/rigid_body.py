"""Planar rigid-body equations of motion and RK4 integration.

The equations use:
- Newton's second law for translation: a = F / m
- Scalar rotational dynamics about the out-of-plane axis: alpha = tau / I

Example:
    >>> from rocketsim.dynamics import FlightState, planar_derivatives, rk4_step
    >>> import numpy as np
    >>>
    >>> state = FlightState(position=np.array([0.0, -600000.0]), velocity=np.zeros(2))
    >>>
    >>> def derivatives(s):
    ...     force = np.array([0.0, 9.81 * 1000.0])
    ...     return planar_derivatives(s, force, torque=0.0, mass=1000.0, inertia=1e4)
    >>>
    >>> state = rk4_step(state, 0.05, derivatives)
"""

from collections.abc import Callable

import numpy as np
from beartype import beartype
from numpy.typing import NDArray

from rocketsim.dynamics.state import FlightState, StateDerivative

DerivativesFn = Callable[[FlightState], StateDerivative]


# =============================================================================
# Rigid Body Dynamics
# =============================================================================


@beartype
def planar_derivatives(
    state: FlightState,
    force: NDArray[np.float64],
    torque: float,
    mass: float,
    inertia: float,
) -> StateDerivative:
    """Compute state derivatives for planar rigid-body motion.

    Args:
        state: Current state
        force: Total force in the world frame [N]
        torque: Total torque about the out-of-plane axis [N*m]
        mass: Vehicle mass [kg]
        inertia: Moment of inertia [kg*m^2]

    Returns:
        State derivatives for integration
    """
    if mass <= 0:
        raise ValueError(f"Mass must be positive, got {mass}")
    if inertia <= 0:
        raise ValueError(f"Inertia must be positive, got {inertia}")

    return StateDerivative(
        position_dot=state.velocity.copy(),
        velocity_dot=force / mass,
        rotation_dot=state.angular_velocity,
        angular_velocity_dot=torque / inertia,
    )


# =============================================================================
# Integration
# =============================================================================


@beartype
def rk4_step(
    state: FlightState,
    dt: float,
    derivatives_fn: DerivativesFn,
) -> FlightState:
    """Perform one RK4 integration step.

    Args:
        state: Current state
        dt: Time step [s]
        derivatives_fn: Function that computes StateDerivative from FlightState

    Returns:
        State at t + dt
    """
    y0 = state.to_array()
    t0 = state.time

    def f(t: float, y: NDArray[np.float64]) -> NDArray[np.float64]:
        return derivatives_fn(FlightState.from_array(y, t)).to_array()

    # RK4 stages
    k1 = f(t0, y0)
    k2 = f(t0 + dt/2, y0 + dt/2 * k1)
    k3 = f(t0 + dt/2, y0 + dt/2 * k2)
    k4 = f(t0 + dt, y0 + dt * k3)

    y1 = y0 + (dt / 6) * (k1 + 2*k2 + 2*k3 + k4)

    return FlightState.from_array(y1, t0 + dt)


@beartype
def euler_step(
    state: FlightState,
    dt: float,
    derivatives_fn: DerivativesFn,
) -> FlightState:
    """Perform one explicit Euler step (low-fidelity propagation)."""
    y0 = state.to_array()
    k1 = derivatives_fn(state).to_array()
    return FlightState.from_array(y0 + dt * k1, state.time + dt)

