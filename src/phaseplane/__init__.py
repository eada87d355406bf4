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
phaseplane
==========

Phase-plane analysis of two-dimensional autonomous systems

    dx/dt = f(x, y),    dy/dt = g(x, y)

Trajectories, nullclines, and equilibria computed for a view rectangle,
plus an interaction session and Plotly rendering around them.

Quick Start
-----------
>>> import phaseplane as pp
>>>
>>> system = pp.compile_system("a*x - b*x*y", "-c*y + d*x*y",
...                            {"a": 1.1, "b": 0.4, "c": 0.4, "d": 0.1})
>>> view = pp.ViewRect(-10.0, 10.0, -10.0, 10.0)
>>>
>>> pp.find_equilibria(view, system)          # ~ (0, 0) and (4, 2.75)
>>>
>>> bounds = pp.integration_bounds_for(view, pp.Point(2.0, 1.0))
>>> runs = pp.integrate_bidirectional(system, pp.Point(2.0, 1.0), 0.001, 20000, bounds)
>>>
>>> session = pp.PhasePlaneSession(system)
>>> session.add_random_seeds()
>>> pp.PhasePlanePlotter().plot_session(session, show_nullclines=True).show()

Subpackages
-----------
- types: Points, segments, results, protocols, options
- geometry: ViewRect and integration bounds
- integration: Bounded fixed-step RK4
- contours: Marching squares and segment stitching
- analysis: Equilibrium search
- systems: PlanarSystem, expression compiler, built-in systems
- visualization: Plotly plotter and themes

Authors
-------
Gil Benezer

License
-------
GNU Affero General Public License v3.0
"""

__version__ = "0.1.0"

from .analysis import find_equilibria, verify_equilibria
from .contours import stitch_segments_to_polylines, zero_contour_polylines, zero_contour_segments
from .geometry import DEFAULT_VIEW, ViewRect, expanded_bounds_from_view, integration_bounds_for
from .integration import BoundedRK4Integrator, integrate_bidirectional, rk4
from .session import PhasePlaneSession, format_coordinate
from .systems import (
    ExpressionCompiler,
    ExpressionError,
    PlanarSystem,
    compile_system,
    list_builtin_systems,
    load_builtin,
)
from .types import Point, Segment, Trajectory
from .visualization import PhasePlanePlotter

__all__ = [
    "__version__",
    # Types
    "Point",
    "Segment",
    "Trajectory",
    # Geometry
    "ViewRect",
    "DEFAULT_VIEW",
    "expanded_bounds_from_view",
    "integration_bounds_for",
    # Integration
    "BoundedRK4Integrator",
    "rk4",
    "integrate_bidirectional",
    # Contours
    "zero_contour_segments",
    "stitch_segments_to_polylines",
    "zero_contour_polylines",
    # Analysis
    "find_equilibria",
    "verify_equilibria",
    # Systems
    "PlanarSystem",
    "ExpressionCompiler",
    "ExpressionError",
    "compile_system",
    "load_builtin",
    "list_builtin_systems",
    # Session and rendering
    "PhasePlaneSession",
    "format_coordinate",
    "PhasePlanePlotter",
]
