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
Integrator Base - Abstract Interface for Planar Integration

Defines the abstract base class for fixed-step integrators of planar
autonomous systems. Integrators work on plain Python floats: a planar
state is two numbers, and scalar arithmetic keeps every run bit-for-bit
reproducible.

Results are IntegrationResult TypedDicts (see phaseplane.types.trajectories).
"""

import math
from abc import ABC, abstractmethod
from typing import Any, Dict, Optional, Tuple

from phaseplane.geometry.view_transform import ViewRect
from phaseplane.types.core import Point
from phaseplane.types.protocols import PlanarSystemProtocol
from phaseplane.types.trajectories import IntegrationResult


class IntegratorBase(ABC):
    """
    Abstract base class for bounded fixed-step integrators.

    All integrators must implement:
    - step(): Single integration step
    - integrate(): Multi-step run from an initial point
    - name: Integrator name for display

    Parameters
    ----------
    system : PlanarSystemProtocol
        System to integrate
    dt : float
        Signed step size; negative integrates backward in time
    bounds : Optional[ViewRect]
        Closed rectangle the state must stay in; None disables the check
    max_steps : int
        Step cap for integrate()

    Raises
    ------
    ValueError
        If dt is zero or not finite, or max_steps is negative

    Examples
    --------
    >>> integrator = BoundedRK4Integrator(system, dt=0.01, bounds=view, max_steps=500)
    >>> x_next, y_next = integrator.step(1.0, 0.0)
    >>> result = integrator.integrate(Point(1.0, 0.0))
    >>> print(f"Steps: {result['nsteps']}, Function evals: {result['nfev']}")
    """

    def __init__(
        self,
        system: PlanarSystemProtocol,
        dt: float,
        bounds: Optional[ViewRect] = None,
        max_steps: int = 20000,
    ):
        dt = float(dt)
        if not math.isfinite(dt) or dt == 0.0:
            raise ValueError(f"Time step dt must be finite and non-zero, got {dt}")
        if int(max_steps) != max_steps or max_steps < 0:
            raise ValueError(f"max_steps must be a non-negative integer, got {max_steps}")

        self.system = system
        self.dt = dt
        self.bounds = bounds
        self.max_steps = int(max_steps)

        # Statistics
        self._stats = {
            "total_steps": 0,
            "total_fev": 0,  # Function evaluations (f and g together)
            "total_time": 0.0,
        }

    @abstractmethod
    def step(self, x: float, y: float, dt: Optional[float] = None) -> Tuple[float, float]:
        """
        Take one integration step.

        Parameters
        ----------
        x, y : float
            Current state
        dt : Optional[float]
            Step size (uses self.dt if None)

        Returns
        -------
        Tuple[float, float]
            Next state; may be non-finite
        """
        pass

    @abstractmethod
    def integrate(self, p0: Point) -> IntegrationResult:
        """
        Integrate from p0 until the step cap, a non-finite state, or
        leaving the bounds.
        """
        pass

    @property
    @abstractmethod
    def name(self) -> str:
        """Integrator name for display."""
        pass

    def _evaluate_dynamics(self, x: float, y: float) -> Tuple[float, float]:
        """Evaluate (f, g) with statistics tracking."""
        self._stats["total_fev"] += 1
        params = self.system.params
        return self.system.f(x, y, params), self.system.g(x, y, params)

    def _in_bounds(self, x: float, y: float) -> bool:
        b = self.bounds
        if b is None:
            return True
        return b.xmin <= x <= b.xmax and b.ymin <= y <= b.ymax

    def get_stats(self) -> Dict[str, Any]:
        """
        Get integration statistics.

        Returns
        -------
        dict
            Statistics with keys:
            - 'total_steps': Total integration steps taken
            - 'total_fev': Total function evaluations
            - 'total_time': Total integration time
            - 'avg_fev_per_step': Average function evaluations per step
        """
        avg_fev = self._stats["total_fev"] / max(1, self._stats["total_steps"])

        return {
            **self._stats,
            "avg_fev_per_step": avg_fev,
        }

    def reset_stats(self):
        """Reset integration statistics to zero."""
        self._stats["total_steps"] = 0
        self._stats["total_fev"] = 0
        self._stats["total_time"] = 0.0

    def __repr__(self) -> str:
        return (
            f"{self.__class__.__name__}("
            f"dt={self.dt}, max_steps={self.max_steps}, bounds={self.bounds!r})"
        )

    def __str__(self) -> str:
        return f"{self.name} (dt={self.dt:.4g}, max_steps={self.max_steps})"


__all__ = ["IntegratorBase"]
