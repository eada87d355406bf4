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
Trajectory and Result Types

Defines result containers for integration and analysis:
- Single-direction integration results
- Bidirectional (forward + backward) results
- Seeded trajectories kept in session history
- Equilibrium verification reports

Shape Convention
----------------
Point sequences are time-major float64 arrays of shape (T, 2). The first
row is always the starting point of the run, so a trajectory that
terminated immediately still has shape (1, 2).

Usage
-----
>>> from phaseplane.types.trajectories import Trajectory
>>>
>>> traj: Trajectory = {
...     "seed": Point(1.0, 0.0),
...     "forward": forward_points,    # (T1, 2)
...     "backward": backward_points,  # (T2, 2)
... }
"""

from typing import Literal, Optional

from typing_extensions import TypedDict

from .core import Point, PointArray

TerminationReason = Literal["max_steps", "non_finite", "out_of_bounds"]
"""
Why a bounded integration run stopped.

- 'max_steps': step cap reached, every step accepted
- 'non_finite': x or y became NaN or infinite
- 'out_of_bounds': x or y left the integration rectangle
"""


class IntegrationResult(TypedDict, total=False):
    """
    Result of one bounded fixed-step integration run.

    Attributes
    ----------
    x : PointArray
        Accepted points (T, 2), starting with the initial point.
        The rejected sample that ended the run is never included.
    success : bool
        Always True; early termination is a nominal outcome
    message : str
        Human-readable status
    termination : TerminationReason
        Why the run stopped
    nsteps : int
        Number of accepted steps (T - 1)
    nfev : int
        Number of right-hand side evaluations (f and g counted together)
    integration_time : float
        Wall-clock time in seconds
    solver : str
        Name of the integrator

    Examples
    --------
    >>> result = integrator.integrate(Point(1.0, 0.0))
    >>> if result["termination"] == "out_of_bounds":
    ...     print(f"Left the window after {result['nsteps']} steps")
    """

    x: PointArray
    success: bool
    message: str
    termination: TerminationReason
    nsteps: int
    nfev: int
    integration_time: float
    solver: str


class BidirectionalResult(TypedDict):
    """
    Forward and backward runs from a common seed.

    Both arrays start with the seed. The two runs share no state.
    """

    forward: PointArray
    backward: PointArray


class Trajectory(TypedDict):
    """
    A seeded trajectory as kept in session history.

    Attributes
    ----------
    seed : Point
        World-space starting point
    forward : PointArray
        Forward-in-time points (T1, 2), first row is the seed
    backward : PointArray
        Backward-in-time points (T2, 2), first row is the seed
    """

    seed: Point
    forward: PointArray
    backward: PointArray


class EquilibriumReport(TypedDict):
    """
    Residual check of a refined equilibrium candidate.

    Attributes
    ----------
    point : Point
        Refined equilibrium estimate
    residual : float
        max(|f|, |g|) at the point
    verified : bool
        True if the residual is finite and within tolerance
    """

    point: Point
    residual: float
    verified: bool


class ProbeResult(TypedDict):
    """
    Local flow information at a hovered world point.

    Attributes
    ----------
    point : Point
        World-space location
    velocity : Point
        (f, g) evaluated at the point
    speed : float
        Euclidean norm of the velocity
    screen_angle : float or None
        Direction of motion on screen in radians (y axis pointing down),
        None where the flow is stationary
    """

    point: Point
    velocity: Point
    speed: float
    screen_angle: Optional[float]


__all__ = [
    "TerminationReason",
    "IntegrationResult",
    "BidirectionalResult",
    "Trajectory",
    "EquilibriumReport",
    "ProbeResult",
]
