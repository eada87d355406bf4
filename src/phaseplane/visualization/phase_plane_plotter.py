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
Phase Plane Plotter - Plotly Rendering of a Phase Plane

Draws what the numerical core computes for one view of a planar system:

- Grid with spacing from nice_step and emphasised axes through the origin
- Normalized direction-field arrows at the centres of a regular grid
- Trajectories (backward and forward runs from each seed)
- A chevron at each seed pointing along the flow (a dot where the flow
  is stationary)
- Nullclines: f = 0 dashed, g = 0 dotted
- Equilibria as open rings

The figure's plotting area is width x height pixels and its axis ranges
are pinned to the view, so screen-space quantities (nullcline stitching
tolerance, arrow directions) match what is displayed.

Usage
-----
>>> from phaseplane.visualization import PhasePlanePlotter
>>>
>>> plotter = PhasePlanePlotter()
>>> fig = plotter.plot(
...     ViewRect(-10.0, 10.0, -10.0, 10.0),
...     load_builtin("lotka_volterra"),
...     trajectories=session.trajectories,
...     show_nullclines=True,
...     show_equilibria=True,
... )
>>> fig.show()
>>>
>>> # Straight from a session
>>> fig = plotter.plot_session(session, show_nullclines=True)
"""

import math
from typing import List, Optional, Sequence, Tuple, Union

import numpy as np
import plotly.graph_objects as go

from phaseplane.analysis.equilibrium_solver import find_equilibria
from phaseplane.contours.stitching import zero_contour_polylines
from phaseplane.geometry.view_transform import ViewRect, screen_direction
from phaseplane.types.core import Point, Polyline
from phaseplane.types.options import (
    DEFAULT_EQUILIBRIUM_OPTIONS,
    DEFAULT_NULLCLINE_OPTIONS,
    DEFAULT_VECTOR_FIELD_OPTIONS,
    EquilibriumOptions,
    NullclineOptions,
    VectorFieldOptions,
    resolve_options,
)
from phaseplane.types.protocols import PlanarSystemProtocol
from phaseplane.types.trajectories import Trajectory
from phaseplane.visualization.themes import ColorSchemes, PlotThemes, lighten_color, with_alpha

GRID_TARGET_STEPS = 12
"""Approximate number of grid intervals across each axis."""

ARROW_HEAD_PX = 6
"""Seed chevron size in pixels."""

MARGIN = dict(l=50, r=20, t=40, b=40)
"""Figure margins in pixels; the plotting area is exactly width x height."""


def nice_step(span: float, target_steps: int = GRID_TARGET_STEPS) -> float:
    """
    Round span / target_steps to 1, 2, 5 or 10 times a power of ten.

    Parameters
    ----------
    span : float
        Axis extent (> 0)
    target_steps : int
        Desired number of intervals (>= 1)

    Returns
    -------
    float
        Grid spacing

    Raises
    ------
    ValueError
        If span is not positive and finite or target_steps < 1

    Examples
    --------
    >>> nice_step(20.0, 12)
    2.0
    >>> nice_step(1.0, 12)
    0.1
    >>> nice_step(8.0, 1)
    10.0
    """
    if not (math.isfinite(span) and span > 0):
        raise ValueError(f"span must be positive and finite, got {span}")
    if target_steps < 1:
        raise ValueError(f"target_steps must be at least 1, got {target_steps}")

    raw = span / target_steps
    pow10 = 10.0 ** math.floor(math.log10(raw))
    frac = raw / pow10

    if frac < 1.5:
        nice_frac = 1
    elif frac < 3.5:
        nice_frac = 2
    elif frac < 7.5:
        nice_frac = 5
    else:
        nice_frac = 10

    return nice_frac * pow10


def vector_field_arrows(
    view: ViewRect,
    system: PlanarSystemProtocol,
    density: int = 18,
    arrow_scale: float = 0.35,
) -> Tuple[np.ndarray, np.ndarray]:
    """
    Tails and heads of normalized direction-field arrows.

    One arrow per cell of a density x density grid, anchored at the cell
    centre, of world length arrow_scale * min(cell width, cell height).
    Cells where the field is not finite get no arrow.

    Returns
    -------
    tails, heads : np.ndarray
        World-space arrays of shape (N, 2), N <= density**2
    """
    if density < 1:
        raise ValueError(f"density must be at least 1, got {density}")

    cols = rows = int(density)
    length = arrow_scale * min(view.width / cols, view.height / rows)
    params = system.params

    tails: List[Tuple[float, float]] = []
    heads: List[Tuple[float, float]] = []
    for i in range(cols):
        x = view.xmin + ((i + 0.5) / cols) * view.width
        for j in range(rows):
            y = view.ymin + ((j + 0.5) / rows) * view.height
            vx = system.f(x, y, params)
            vy = system.g(x, y, params)
            norm = math.hypot(vx, vy) + 1e-9
            if not math.isfinite(norm):
                continue
            tails.append((x, y))
            heads.append((x + vx / norm * length, y + vy / norm * length))

    return np.array(tails, dtype=np.float64).reshape(-1, 2), np.array(
        heads, dtype=np.float64
    ).reshape(-1, 2)


class PhasePlanePlotter:
    """
    Plotly renderer for phase-plane views.

    Parameters
    ----------
    theme : str or dict
        Theme name ('default', 'publication', 'dark') or dictionary
        (see PlotThemes)
    field_opacity : float
        Opacity of the direction-field arrows
    backward_shade : float
        lighten_color factor applied to backward runs (0 draws them like
        forward runs)

    Examples
    --------
    >>> plotter = PhasePlanePlotter(theme="publication", backward_shade=0.4)
    >>> fig = plotter.plot(view, system, trajectories, width=600, height=600)
    >>> fig.write_html("phase_plane.html")
    """

    def __init__(
        self,
        theme: Union[str, dict] = "default",
        field_opacity: float = 1.0,
        backward_shade: float = 0.0,
    ):
        self.theme = PlotThemes.get_theme(theme)
        self.palette = ColorSchemes.get_palette(self.theme["palette"])
        self.field_opacity = field_opacity
        self.backward_shade = backward_shade

    # =========================================================================
    # Main Plotting Methods
    # =========================================================================

    def plot(
        self,
        view: ViewRect,
        system: PlanarSystemProtocol,
        trajectories: Sequence[Trajectory] = (),
        show_field: bool = True,
        show_grid: bool = True,
        show_nullclines: bool = False,
        show_equilibria: bool = False,
        width: int = 800,
        height: int = 800,
        field_options: Optional[VectorFieldOptions] = None,
        nullcline_options: Optional[NullclineOptions] = None,
        equilibrium_options: Optional[EquilibriumOptions] = None,
        equilibria: Optional[Sequence[Point]] = None,
        title: Optional[str] = None,
    ) -> go.Figure:
        """
        Render one view of a system.

        Parameters
        ----------
        view : ViewRect
            World rectangle; becomes the fixed axis ranges
        system : PlanarSystemProtocol
            System to draw
        trajectories : Sequence[Trajectory]
            Seeded trajectories (e.g. session history)
        show_field, show_grid, show_nullclines, show_equilibria : bool
            Layer toggles
        width, height : int
            Plotting-area size in pixels
        field_options, nullcline_options, equilibrium_options : dict
            Overrides for the corresponding DEFAULT_*_OPTIONS
        equilibria : Optional[Sequence[Point]]
            Precomputed equilibria; searched for when None and
            show_equilibria is set
        title : Optional[str]
            Figure title; defaults to the system name if it has one

        Returns
        -------
        go.Figure

        Raises
        ------
        ValueError
            On unknown option keys or a non-positive size
        """
        if width <= 0 or height <= 0:
            raise ValueError(f"Figure size must be positive, got {width} x {height}")

        field_opts = resolve_options(DEFAULT_VECTOR_FIELD_OPTIONS, field_options)
        null_opts = resolve_options(DEFAULT_NULLCLINE_OPTIONS, nullcline_options)
        eq_opts = resolve_options(DEFAULT_EQUILIBRIUM_OPTIONS, equilibrium_options)

        fig = go.Figure()

        if show_field:
            self._add_vector_field(fig, view, system, field_opts)

        if show_nullclines:
            self._add_nullclines(fig, view, system, width, height, null_opts)

        for index, trajectory in enumerate(trajectories):
            self._add_trajectory(fig, trajectory, first=index == 0)
        for trajectory in trajectories:
            self._add_seed_marker(fig, view, system, trajectory["seed"], width, height)

        if show_equilibria:
            if equilibria is None:
                equilibria = find_equilibria(
                    view,
                    system,
                    density=eq_opts["density"],
                    min_density=eq_opts["min_density"],
                    newton_iterations=eq_opts["newton_iterations"],
                )
            self._add_equilibria(fig, equilibria)

        self._configure_layout(fig, view, show_grid, width, height, title, system)
        return fig

    def plot_session(self, session, width: int = 800, height: int = 800, **kwargs) -> go.Figure:
        """
        Render a PhasePlaneSession: its view, system, history and options.

        Keyword arguments are passed to plot() and take precedence over
        the session's options.
        """
        kwargs.setdefault("nullcline_options", session.nullcline_options)
        kwargs.setdefault("equilibrium_options", session.equilibrium_options)
        return self.plot(
            session.view,
            session.system,
            trajectories=session.trajectories,
            width=width,
            height=height,
            **kwargs,
        )

    # =========================================================================
    # Layers (Internal)
    # =========================================================================

    def _add_vector_field(
        self, fig: go.Figure, view: ViewRect, system: PlanarSystemProtocol, opts: dict
    ) -> None:
        tails, heads = vector_field_arrows(view, system, opts["density"], opts["arrow_scale"])
        color = with_alpha(self.palette["field"], self.field_opacity)

        for (x0, y0), (x1, y1) in zip(tails, heads):
            fig.add_annotation(
                x=x1,
                y=y1,
                ax=x0,
                ay=y0,
                xref="x",
                yref="y",
                axref="x",
                ayref="y",
                showarrow=True,
                arrowhead=2,
                arrowsize=1,
                arrowwidth=1,
                arrowcolor=color,
            )

    def _add_nullclines(
        self,
        fig: go.Figure,
        view: ViewRect,
        system: PlanarSystemProtocol,
        width: int,
        height: int,
        opts: dict,
    ) -> None:
        params = system.params
        layers = (
            ("dx/dt = 0", lambda x, y: system.f(x, y, params), "dash"),
            ("dy/dt = 0", lambda x, y: system.g(x, y, params), "dot"),
        )
        for name, field, dash in layers:
            polylines = zero_contour_polylines(
                view,
                field,
                opts["density"],
                width,
                height,
                tol=opts["stitch_tol"],
                min_density=opts["min_density"],
            )
            xs, ys = _join_polylines(polylines)
            fig.add_trace(
                go.Scatter(
                    x=xs,
                    y=ys,
                    mode="lines",
                    name=name,
                    line=dict(
                        color=self.palette["nullcline"],
                        width=self.theme["nullcline_width"],
                        dash=dash,
                    ),
                    hoverinfo="skip",
                )
            )

    def _add_trajectory(self, fig: go.Figure, trajectory: Trajectory, first: bool) -> None:
        color = self.palette["trajectory"]
        width = self.theme["trajectory_width"]
        runs = (
            ("backward", trajectory["backward"], lighten_color(color, self.backward_shade)),
            ("forward", trajectory["forward"], color),
        )
        for label, points, line_color in runs:
            if len(points) < 2:
                continue
            fig.add_trace(
                go.Scatter(
                    x=points[:, 0],
                    y=points[:, 1],
                    mode="lines",
                    name=f"Trajectories ({label})",
                    legendgroup=label,
                    line=dict(color=line_color, width=width),
                    showlegend=first,
                    hoverinfo="skip",
                )
            )

    def _add_seed_marker(
        self,
        fig: go.Figure,
        view: ViewRect,
        system: PlanarSystemProtocol,
        seed: Point,
        width: int,
        height: int,
    ) -> None:
        color = self.palette["trajectory"]
        velocity = Point(system.f(seed[0], seed[1], system.params), system.g(seed[0], seed[1], system.params))
        angle = screen_direction(view, width, height, Point(seed[0], seed[1]), velocity)

        if angle is None:
            fig.add_trace(
                go.Scatter(
                    x=[seed[0]],
                    y=[seed[1]],
                    mode="markers",
                    marker=dict(color=color, size=6),
                    showlegend=False,
                    hoverinfo="skip",
                )
            )
            return

        # tail offset in pixels, plotly pixel y points down like screen_direction
        fig.add_annotation(
            x=seed[0],
            y=seed[1],
            ax=-ARROW_HEAD_PX * math.cos(angle),
            ay=-ARROW_HEAD_PX * math.sin(angle),
            xref="x",
            yref="y",
            showarrow=True,
            arrowhead=2,
            arrowsize=1.5,
            arrowwidth=1.6,
            arrowcolor=color,
        )

    def _add_equilibria(self, fig: go.Figure, equilibria: Sequence[Point]) -> None:
        if not equilibria:
            return
        color = self.palette["equilibrium"]
        fig.add_trace(
            go.Scatter(
                x=[p[0] for p in equilibria],
                y=[p[1] for p in equilibria],
                mode="markers",
                name="Equilibria",
                marker=dict(
                    color="rgba(0, 0, 0, 0)",
                    size=self.theme["equilibrium_size"],
                    symbol="circle-open",
                    line=dict(color=color, width=2.5),
                ),
            )
        )

    def _configure_layout(
        self,
        fig: go.Figure,
        view: ViewRect,
        show_grid: bool,
        width: int,
        height: int,
        title: Optional[str],
        system: PlanarSystemProtocol,
    ) -> None:
        axis_common = dict(
            showgrid=show_grid,
            gridcolor=self.palette["grid"],
            griddash="dash",
            zeroline=show_grid,
            zerolinecolor=self.palette["axis"],
            zerolinewidth=1.2,
            tick0=0.0,
            fixedrange=False,
        )
        fig.update_xaxes(
            range=[view.xmin, view.xmax],
            dtick=nice_step(view.width),
            title_text="x",
            **axis_common,
        )
        fig.update_yaxes(
            range=[view.ymin, view.ymax],
            dtick=nice_step(view.height),
            title_text="y",
            **axis_common,
        )

        fig.update_layout(
            title=title if title is not None else getattr(system, "name", None),
            width=width + MARGIN["l"] + MARGIN["r"],
            height=height + MARGIN["t"] + MARGIN["b"],
            margin=MARGIN,
            showlegend=True,
        )
        PlotThemes.apply_theme(fig, self.theme)


# ============================================================================
# Helpers
# ============================================================================


def _join_polylines(polylines: Sequence[Polyline]) -> Tuple[List[Optional[float]], List[Optional[float]]]:
    """Concatenate polylines into one x/y list pair separated by None gaps."""
    xs: List[Optional[float]] = []
    ys: List[Optional[float]] = []
    for poly in polylines:
        if len(poly) < 2:
            continue
        xs.extend(p.x for p in poly)
        ys.extend(p.y for p in poly)
        xs.append(None)
        ys.append(None)
    return xs, ys


__all__ = [
    "PhasePlanePlotter",
    "nice_step",
    "vector_field_arrows",
]
