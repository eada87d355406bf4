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
Phase Plane Session - Caller-Owned Interaction State

The numerical core is stateless: it takes a view, a system, and options,
and returns point data. This module holds the state an interactive front
end keeps between those calls and exposes the operations its pointer and
keyboard events map onto:

==========================  ===============================================
Event                       Session operation
==========================  ===============================================
click on the plane          add_seed_at_pixel(px, py, width, height)
drag                        pan_by_pixels(dx_px, dy_px, width, height)
wheel                       zoom_at_pixel(px, py, width, height, zoom_in)
press/release               is_click(start_px, end_px)
"random" button             add_random_seeds()
edit of f, g or constants   set_expressions(f_text, g_text, constants)
"clear" / "reset" buttons   clear_trajectories() / reset_view()
pointer move                probe(world_point, width, height)
==========================  ===============================================

Trajectory history is most-recent-first and bounded; it is cleared
whenever the system changes, because trajectories of an old system are
meaningless for the new one.

Usage
-----
>>> session = PhasePlaneSession()            # Lotka-Volterra, [-10, 10]^2
>>> traj = session.add_seed(Point(2.0, 1.0))
>>> traj["forward"][0]
array([2., 1.])
>>> session.zoom_at_pixel(400, 400, 800, 800, zoom_in=True)
>>> session.view
ViewRect(xmin=-9.09091, xmax=9.09091, ymin=-9.09091, ymax=9.09091)
"""

import math
from typing import Dict, List, Mapping, Optional

import numpy as np

from phaseplane.analysis.equilibrium_solver import find_equilibria
from phaseplane.contours.stitching import zero_contour_polylines
from phaseplane.geometry.bounds import integration_bounds_for
from phaseplane.geometry.view_transform import ViewRect, screen_direction
from phaseplane.integration.rk4_integrator import integrate_bidirectional
from phaseplane.systems.builtin import load_builtin
from phaseplane.systems.expression import (
    DEFAULT_ALLOWED_SYMBOLS,
    ExpressionCompiler,
    ExpressionError,
    parse_constants,
)
from phaseplane.types.core import Point, Polyline, as_point
from phaseplane.types.options import (
    DEFAULT_EQUILIBRIUM_OPTIONS,
    DEFAULT_INTEGRATION_OPTIONS,
    DEFAULT_NULLCLINE_OPTIONS,
    DEFAULT_SESSION_OPTIONS,
    EquilibriumOptions,
    IntegrationOptions,
    NullclineOptions,
    SessionOptions,
    resolve_options,
)
from phaseplane.types.protocols import PlanarSystemProtocol
from phaseplane.types.trajectories import ProbeResult, Trajectory


def format_coordinate(value: float) -> str:
    """
    Format a coordinate for display.

    Examples
    --------
    >>> format_coordinate(3.14159)
    '3.142'
    >>> format_coordinate(-4e-7)
    '0'
    """
    if abs(value) < 1e-6:
        return "0"
    return f"{value:.3f}"


class PhasePlaneSession:
    """
    Mutable state of one interactive phase-plane view.

    Parameters
    ----------
    system : Optional[PlanarSystemProtocol]
        Initial system; defaults to the built-in Lotka-Volterra model
    integration : Optional[IntegrationOptions]
        Overrides for DEFAULT_INTEGRATION_OPTIONS
    nullclines : Optional[NullclineOptions]
        Overrides for DEFAULT_NULLCLINE_OPTIONS
    equilibria : Optional[EquilibriumOptions]
        Overrides for DEFAULT_EQUILIBRIUM_OPTIONS
    options : Optional[SessionOptions]
        Overrides for DEFAULT_SESSION_OPTIONS

    Raises
    ------
    ValueError
        If an option dictionary contains an unknown key

    Examples
    --------
    >>> session = PhasePlaneSession(
    ...     system=load_builtin("van_der_pol", mu=2.0),
    ...     integration={"dt": 0.005, "steps": 4000},
    ...     options={"history_limit": 50},
    ... )
    >>> session.add_random_seeds(rng=np.random.default_rng(0))
    >>> len(session.trajectories)
    10
    """

    def __init__(
        self,
        system: Optional[PlanarSystemProtocol] = None,
        integration: Optional[IntegrationOptions] = None,
        nullclines: Optional[NullclineOptions] = None,
        equilibria: Optional[EquilibriumOptions] = None,
        options: Optional[SessionOptions] = None,
    ):
        self.integration_options = resolve_options(DEFAULT_INTEGRATION_OPTIONS, integration)
        self.nullcline_options = resolve_options(DEFAULT_NULLCLINE_OPTIONS, nullclines)
        self.equilibrium_options = resolve_options(DEFAULT_EQUILIBRIUM_OPTIONS, equilibria)
        self.options = resolve_options(DEFAULT_SESSION_OPTIONS, options)

        if self.options["history_limit"] < 0:
            raise ValueError(
                f"history_limit must be non-negative, got {self.options['history_limit']}"
            )

        self._initial_view = ViewRect.from_bounds(self.options["initial_view"])
        self._view = self._initial_view
        self._system = system if system is not None else load_builtin("lotka_volterra")
        self._trajectories: List[Trajectory] = []

    # =========================================================================
    # State
    # =========================================================================

    @property
    def view(self) -> ViewRect:
        return self._view

    @view.setter
    def view(self, value: ViewRect):
        if not isinstance(value, ViewRect):
            raise ValueError(f"view must be a ViewRect, got {type(value).__name__}")
        self._view = value

    @property
    def system(self) -> PlanarSystemProtocol:
        return self._system

    @property
    def trajectories(self) -> List[Trajectory]:
        """History, most recent first (a copy)."""
        return list(self._trajectories)

    def set_system(self, system: PlanarSystemProtocol):
        """Replace the system and clear the trajectory history."""
        self._system = system
        self._trajectories = []

    def set_expressions(
        self,
        f_text: str,
        g_text: str,
        constants: Optional[Mapping[str, str]] = None,
    ) -> PlanarSystemProtocol:
        """
        Compile user-entered text and make it the current system.

        Parameters
        ----------
        f_text, g_text : str
            Right-hand sides for dx/dt and dy/dt
        constants : Optional[Mapping[str, str]]
            Constant values as typed, e.g. {"a": "1.1", "b": "0.4"}

        Returns
        -------
        PlanarSystemProtocol
            The new system

        Raises
        ------
        ExpressionError
            If an expression is invalid or a constant is not a finite
            number. The current system and history are left untouched.
        """
        values, invalid = parse_constants(constants or {})
        if invalid:
            raise ExpressionError(f"Invalid constant value(s) for {invalid}")

        compiler = ExpressionCompiler(DEFAULT_ALLOWED_SYMBOLS)
        system = compiler.compile_system(f_text, g_text, values)
        self.set_system(system)
        return system

    def clear_trajectories(self):
        self._trajectories = []

    def reset_view(self):
        """Return to the initial view; trajectories are kept."""
        self._view = self._initial_view

    # =========================================================================
    # Seeding
    # =========================================================================

    def add_seed(self, world_point: Point) -> Trajectory:
        """
        Integrate forward and backward from a world point and record it.

        The run is bounded by the current view expanded by
        ``bounds_factor`` and grown to contain the seed.

        Returns
        -------
        Trajectory
            The new history entry (also at index 0 of ``trajectories``)
        """
        seed = as_point(world_point)
        opts = self.integration_options
        bounds = integration_bounds_for(self._view, seed, opts["bounds_factor"])
        runs = integrate_bidirectional(self._system, seed, opts["dt"], opts["steps"], bounds)

        trajectory: Trajectory = {
            "seed": seed,
            "forward": runs["forward"],
            "backward": runs["backward"],
        }
        self._trajectories.insert(0, trajectory)
        del self._trajectories[self.options["history_limit"] :]
        return trajectory

    def add_seed_at_pixel(self, px: float, py: float, width: float, height: float) -> Trajectory:
        """Seed at a device position on a width x height surface."""
        return self.add_seed(self._view.to_world(width, height, Point(px, py)))

    def add_random_seeds(
        self,
        count: Optional[int] = None,
        rng: Optional[np.random.Generator] = None,
    ) -> List[Trajectory]:
        """
        Seed uniformly at random inside the current view.

        Parameters
        ----------
        count : Optional[int]
            Number of seeds (default: ``random_seed_count`` option)
        rng : Optional[np.random.Generator]
            Random source; pass a seeded generator for reproducible runs

        Returns
        -------
        List[Trajectory]
            New trajectories in creation order
        """
        count = self.options["random_seed_count"] if count is None else count
        rng = rng if rng is not None else np.random.default_rng()
        view = self._view

        created = []
        for _ in range(count):
            x = view.xmin + rng.random() * (view.xmax - view.xmin)
            y = view.ymin + rng.random() * (view.ymax - view.ymin)
            created.append(self.add_seed(Point(x, y)))
        return created

    # =========================================================================
    # Gestures
    # =========================================================================

    def pan_by_pixels(self, dx_px: float, dy_px: float, width: float, height: float):
        """
        Drag the plane by a pointer displacement in pixels.

        Content follows the pointer: dragging right moves the view left in
        world space, dragging down moves it up.
        """
        view = self._view
        dx = -dx_px / width * view.width
        dy = dy_px / height * view.height
        self._view = view.pan(dx, dy)

    def zoom_at_pixel(self, px: float, py: float, width: float, height: float, zoom_in: bool = True):
        """Zoom one wheel notch about the world point under the pointer."""
        step = self.options["zoom_step"]
        factor = step if zoom_in else 1 / step
        anchor = self._view.to_world(width, height, Point(px, py))
        self._view = self._view.zoom(anchor.x, anchor.y, factor)

    def is_click(self, start_px: Point, end_px: Point) -> bool:
        """True if a press/release pair moved little enough to be a click."""
        return math.hypot(end_px[0] - start_px[0], end_px[1] - start_px[1]) <= self.options[
            "click_tolerance"
        ]

    # =========================================================================
    # Derived Geometry
    # =========================================================================

    def nullclines(self, width: float, height: float) -> Dict[str, List[Polyline]]:
        """
        World-space nullcline polylines for a width x height surface.

        Returns
        -------
        dict
            {'f': polylines where dx/dt = 0, 'g': polylines where dy/dt = 0}
        """
        opts = self.nullcline_options
        system = self._system
        params = system.params

        def extract(component) -> List[Polyline]:
            return zero_contour_polylines(
                self._view,
                lambda x, y: component(x, y, params),
                opts["density"],
                width,
                height,
                tol=opts["stitch_tol"],
                min_density=opts["min_density"],
            )

        return {"f": extract(system.f), "g": extract(system.g)}

    def equilibria(self) -> List[Point]:
        """Equilibria inside the current view."""
        opts = self.equilibrium_options
        return find_equilibria(
            self._view,
            self._system,
            density=opts["density"],
            min_density=opts["min_density"],
            newton_iterations=opts["newton_iterations"],
        )

    def probe(self, world_point: Point, width: float, height: float) -> ProbeResult:
        """
        Velocity and on-screen flow direction at a hovered point.

        Examples
        --------
        >>> info = session.probe(Point(1.0, 1.0), 800, 800)
        >>> format_coordinate(info["velocity"].x)
        '0.700'
        """
        point = as_point(world_point)
        system = self._system
        velocity = Point(
            system.f(point.x, point.y, system.params),
            system.g(point.x, point.y, system.params),
        )
        return {
            "point": point,
            "velocity": velocity,
            "speed": math.hypot(velocity.x, velocity.y),
            "screen_angle": screen_direction(self._view, width, height, point, velocity),
        }

    def __repr__(self) -> str:
        return (
            f"PhasePlaneSession(system={getattr(self._system, 'name', self._system)!r}, "
            f"view={self._view!r}, trajectories={len(self._trajectories)})"
        )


__all__ = [
    "PhasePlaneSession",
    "format_coordinate",
]
