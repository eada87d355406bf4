# Copyright (C) 2025 Gil Benezer
#
# This program is free software: you can redistribute it and/or modify
# it under the terms of the GNU Affero General Public License as published
# by the Free Software Foundation, either version 3 of the License, or
# (at your option) any later version.
#
# This program is distributed in the hope that it will be useful,
# but WITHOUT ANY WARRANTY; without even the implied warranty of
# MERCHANTABILITY or FITNESS FOR A PARTICULAR PURPOSE.  See the
# GNU Affero General Public License for more details.
#
# You should have received a copy of the GNU Affero General Public License
# along with this program.  If not, see <https://www.gnu.org/licenses/>.

"""
Bounded RK4 Integrator

Classic fourth-order Runge-Kutta with a fixed, signed step, stopped early
when the state stops being useful for drawing:

- x or y becomes NaN or infinite
- x leaves [xmin, xmax] or y leaves [ymin, ymax] of the bounds

The rejected sample is never part of the output; everything accepted up
to that point is returned. Early termination is not an error.

Usage
-----
>>> from phaseplane.integration import rk4, integrate_bidirectional
>>>
>>> bounds = integration_bounds_for(view, seed)
>>> forward = rk4(system, seed, 0.001, 20000, bounds)     # (T, 2)
>>> both = integrate_bidirectional(system, seed, 0.001, 20000, bounds)
>>> both["backward"][0]   # equals seed
"""

import math
import time
from typing import Optional, Tuple

import numpy as np

from phaseplane.geometry.view_transform import ViewRect
from phaseplane.integration.integrator_base import IntegratorBase
from phaseplane.types.core import Point, PointArray
from phaseplane.types.protocols import PlanarSystemProtocol
from phaseplane.types.trajectories import (
    BidirectionalResult,
    IntegrationResult,
    TerminationReason,
)


class BoundedRK4Integrator(IntegratorBase):
    """
    Fixed-step RK4 integrator with bounded termination.

    Algorithm:
        k1 = F(x_k)
        k2 = F(x_k + dt/2 * k1)
        k3 = F(x_k + dt/2 * k2)
        k4 = F(x_k + dt * k3)
        x_{k+1} = x_k + dt/6 * (k1 + 2*k2 + 2*k3 + k4)

    Characteristics:
    - Order: 4 (error ∝ dt⁴)
    - Function evaluations: 4 per step
    - Fixed step: no error control, no step rejection other than the
      termination tests

    Examples
    --------
    >>> integrator = BoundedRK4Integrator(system, dt=0.001, bounds=bounds, max_steps=20000)
    >>> result = integrator.integrate(Point(4.0, 2.75))
    >>> result["termination"]
    'max_steps'
    >>> result["x"].shape
    (20001, 2)
    """

    def __init__(
        self,
        system: PlanarSystemProtocol,
        dt: float,
        bounds: Optional[ViewRect] = None,
        max_steps: int = 20000,
    ):
        super().__init__(system, dt, bounds, max_steps)

    def step(self, x: float, y: float, dt: Optional[float] = None) -> Tuple[float, float]:
        """
        Take one RK4 step using four evaluations of (f, g).

        Returns the raw next state; callers decide whether to accept it.
        """
        dt = dt if dt is not None else self.dt

        k1x, k1y = self._evaluate_dynamics(x, y)
        k2x, k2y = self._evaluate_dynamics(x + 0.5 * dt * k1x, y + 0.5 * dt * k1y)
        k3x, k3y = self._evaluate_dynamics(x + 0.5 * dt * k2x, y + 0.5 * dt * k2y)
        k4x, k4y = self._evaluate_dynamics(x + dt * k3x, y + dt * k3y)

        x_next = x + (dt / 6) * (k1x + 2 * k2x + 2 * k3x + k4x)
        y_next = y + (dt / 6) * (k1y + 2 * k2y + 2 * k3y + k4y)

        self._stats["total_steps"] += 1

        return x_next, y_next

    def integrate(self, p0: Point) -> IntegrationResult:
        """
        Integrate from p0 for at most max_steps steps.

        Parameters
        ----------
        p0 : Point
            Initial point; always the first row of the result, even if it
            lies outside the bounds

        Returns
        -------
        IntegrationResult
            TypedDict containing:
            - x: Accepted points (T, 2), T <= max_steps + 1
            - success: True
            - message: Status message
            - termination: 'max_steps', 'non_finite' or 'out_of_bounds'
            - nfev: Function evaluations in this run
            - nsteps: Accepted steps (T - 1)
            - integration_time: Computation time
            - solver: Integrator name
        """
        start_time = time.time()
        fev_before = self._stats["total_fev"]

        x, y = float(p0[0]), float(p0[1])
        points = [(x, y)]
        termination: TerminationReason = "max_steps"

        for _ in range(self.max_steps):
            x_next, y_next = self.step(x, y)

            if not (math.isfinite(x_next) and math.isfinite(y_next)):
                termination = "non_finite"
                break
            if not self._in_bounds(x_next, y_next):
                termination = "out_of_bounds"
                break

            x, y = x_next, y_next
            points.append((x, y))

        x_traj = np.array(points, dtype=np.float64)

        elapsed = time.time() - start_time
        self._stats["total_time"] += elapsed

        messages = {
            "max_steps": "RK4 integration completed",
            "non_finite": "RK4 integration stopped: state became non-finite",
            "out_of_bounds": "RK4 integration stopped: state left the bounds",
        }

        result: IntegrationResult = {
            "x": x_traj,
            "success": True,
            "message": messages[termination],
            "termination": termination,
            "nfev": self._stats["total_fev"] - fev_before,
            "nsteps": len(points) - 1,
            "integration_time": elapsed,
            "solver": self.name,
        }

        return result

    @property
    def name(self) -> str:
        return "RK4 (Bounded)"


# ============================================================================
# Functional Interface
# ============================================================================


def rk4(
    system: PlanarSystemProtocol,
    p0: Point,
    dt: float,
    steps: int,
    world_bounds: ViewRect,
) -> PointArray:
    """
    Bounded RK4 run as a plain function.

    Parameters
    ----------
    system : PlanarSystemProtocol
        System to integrate
    p0 : Point
        Initial point (first row of the result)
    dt : float
        Signed step size
    steps : int
        Step cap
    world_bounds : ViewRect
        Closed rectangle the trajectory must stay in

    Returns
    -------
    PointArray
        Accepted points, shape (T, 2)
    """
    integrator = BoundedRK4Integrator(system, dt, bounds=world_bounds, max_steps=steps)
    return integrator.integrate(p0)["x"]


def integrate_bidirectional(
    system: PlanarSystemProtocol,
    seed: Point,
    dt: float,
    steps: int,
    bounds: ViewRect,
) -> BidirectionalResult:
    """
    Independent forward (+dt) and backward (-dt) runs from seed.

    The two runs share no state: a forward run that blows up does not
    shorten the backward run.

    Returns
    -------
    BidirectionalResult
        {'forward': (T1, 2), 'backward': (T2, 2)}, both starting at seed
    """
    forward = rk4(system, seed, +dt, steps, bounds)
    backward = rk4(system, seed, -dt, steps, bounds)
    return {"forward": forward, "backward": backward}


__all__ = [
    "BoundedRK4Integrator",
    "rk4",
    "integrate_bidirectional",
]
