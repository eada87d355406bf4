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
Equilibrium Solver - Nullcline Intersection with Newton Refinement

Locates points where f(x, y) = 0 and g(x, y) = 0 simultaneously:

1. Extract the zero contours of f and g independently (marching squares)
2. Intersect every f-segment with every g-segment
3. Merge candidates closer than 0.75 grid cells (first seen wins)
4. Polish each survivor with a few Newton iterations using a central
   finite-difference Jacobian

This is a resolution-bounded heuristic, not an exact solver: equilibria
closer together than the grid spacing may merge or be missed, and an
equilibrium where the nullclines touch without crossing may not be found.

Usage
-----
>>> system = load_builtin("lotka_volterra")
>>> view = ViewRect(-10.0, 10.0, -10.0, 10.0)
>>> points = find_equilibria(view, system, density=120)
>>> reports = verify_equilibria(system, points)
>>> [r["verified"] for r in reports]
[True, True]
"""

import math
import warnings
from typing import List, Optional, Sequence

import numpy as np

from phaseplane.contours.marching_squares import zero_contour_segments
from phaseplane.geometry.view_transform import ViewRect
from phaseplane.types.core import Point, Segment
from phaseplane.types.protocols import PlanarSystemProtocol
from phaseplane.types.trajectories import EquilibriumReport

PARALLEL_TOL = 1e-20
"""Segment pairs with |determinant| below this are treated as parallel."""

PARAM_SLACK = 1e-9
"""Parametric slack: intersections with t, u in [-slack, 1 + slack] count."""

SINGULAR_TOL = 1e-20
"""Newton stops when |det J| falls below this."""

STEP_TOL = 1e-12
"""Newton stops once the correction norm falls below this."""

MERGE_FACTOR = 0.75
"""Candidate merge radius as a fraction of the smaller grid cell side."""


# ============================================================================
# Geometric Primitives
# ============================================================================


def segment_intersection(a: Point, b: Point, c: Point, d: Point) -> Optional[Point]:
    """
    Intersection of segment ab with segment cd.

    Parameters
    ----------
    a, b : Point
        First segment
    c, d : Point
        Second segment

    Returns
    -------
    Optional[Point]
        Intersection point on ab, or None for (near-)parallel segments
        and for crossings outside either segment

    Examples
    --------
    >>> segment_intersection(Point(-1.0, 0.0), Point(1.0, 0.0), Point(0.0, -1.0), Point(0.0, 1.0))
    Point(x=0.0, y=0.0)
    >>> segment_intersection(Point(0.0, 0.0), Point(1.0, 0.0), Point(0.0, 1.0), Point(1.0, 1.0)) is None
    True
    """
    x1, y1 = a
    x2, y2 = b
    x3, y3 = c
    x4, y4 = d

    den = (x1 - x2) * (y3 - y4) - (y1 - y2) * (x3 - x4)
    if abs(den) < PARALLEL_TOL:
        return None

    t = ((x1 - x3) * (y3 - y4) - (y1 - y3) * (x3 - x4)) / den
    u = ((x1 - x3) * (y1 - y2) - (y1 - y3) * (x1 - x2)) / den

    if t < -PARAM_SLACK or t > 1 + PARAM_SLACK or u < -PARAM_SLACK or u > 1 + PARAM_SLACK:
        return None

    return Point(x1 + t * (x2 - x1), y1 + t * (y2 - y1))


def _pairwise_intersections(first: Sequence[Segment], second: Sequence[Segment]) -> List[Point]:
    """
    All intersections between two segment sets, first-major order.

    Same arithmetic as segment_intersection, vectorized over ``second``.
    """
    if not first or not second:
        return []

    other = np.array([(s.a.x, s.a.y, s.b.x, s.b.y) for s in second], dtype=np.float64)
    x3, y3, x4, y4 = other.T
    dx34 = x3 - x4
    dy34 = y3 - y4

    points: List[Point] = []
    for (x1, y1), (x2, y2) in first:
        den = (x1 - x2) * dy34 - (y1 - y2) * dx34
        with np.errstate(divide="ignore", invalid="ignore"):
            t = ((x1 - x3) * dy34 - (y1 - y3) * dx34) / den
            u = ((x1 - x3) * (y1 - y2) - (y1 - y3) * (x1 - x2)) / den

        hit = (np.abs(den) >= PARALLEL_TOL) & ~(
            (t < -PARAM_SLACK) | (t > 1 + PARAM_SLACK) | (u < -PARAM_SLACK) | (u > 1 + PARAM_SLACK)
        )
        for k in np.flatnonzero(hit):
            tk = float(t[k])
            points.append(Point(x1 + tk * (x2 - x1), y1 + tk * (y2 - y1)))

    return points


def deduplicate_points(candidates: Sequence[Point], tol: float) -> List[Point]:
    """
    Greedy first-seen-wins merge.

    A candidate is kept unless some already kept point lies within
    Euclidean distance <= tol. The result depends on candidate order.

    Examples
    --------
    >>> deduplicate_points([Point(0.0, 0.0), Point(0.1, 0.0), Point(1.0, 0.0)], 0.5)
    [Point(x=0.0, y=0.0), Point(x=1.0, y=0.0)]
    """
    kept: List[Point] = []
    for p in candidates:
        if any(math.hypot(p.x - q.x, p.y - q.y) <= tol for q in kept):
            continue
        kept.append(p)
    return kept


# ============================================================================
# Newton Refinement
# ============================================================================


def newton_polish(
    system: PlanarSystemProtocol,
    p: Point,
    step: float,
    max_iter: int = 3,
) -> Point:
    """
    Refine an equilibrium estimate with Newton's method.

    The Jacobian is estimated by central differences with spacing step.
    Iteration stops early when the Jacobian is (near-)singular, keeping
    the current estimate, or when the correction is negligible.

    Parameters
    ----------
    system : PlanarSystemProtocol
        System whose (f, g) root is sought
    p : Point
        Starting estimate
    step : float
        Finite-difference spacing
    max_iter : int
        Maximum number of iterations

    Returns
    -------
    Point
        Refined estimate (p itself if the first Jacobian is singular)
    """
    f, g, params = system.f, system.g, system.params
    x, y = p
    h2 = 2 * step

    for _ in range(max_iter):
        fv = f(x, y, params)
        gv = g(x, y, params)

        a = (f(x + step, y, params) - f(x - step, y, params)) / h2
        b = (f(x, y + step, params) - f(x, y - step, params)) / h2
        c = (g(x + step, y, params) - g(x - step, y, params)) / h2
        d = (g(x, y + step, params) - g(x, y - step, params)) / h2

        det = a * d - b * c
        if not abs(det) >= SINGULAR_TOL:
            break

        # J [sx, sy]^T = -[fv, gv]^T
        sx = (-fv * d + b * gv) / det
        sy = (-a * gv + fv * c) / det

        x += sx
        y += sy
        if math.hypot(sx, sy) < STEP_TOL:
            break

    return Point(x, y)


# ============================================================================
# Public Interface
# ============================================================================


def find_equilibria(
    rect: ViewRect,
    system: PlanarSystemProtocol,
    density: float = 120,
    min_density: int = 8,
    newton_iterations: int = 3,
) -> List[Point]:
    """
    Find equilibria of a planar system inside rect.

    Parameters
    ----------
    rect : ViewRect
        World rectangle to search
    system : PlanarSystemProtocol
        Planar system
    density : float
        Grid cells per axis for both contour extractions; clamped to
        at least min_density
    min_density : int
        Lower clamp for density
    newton_iterations : int
        Maximum Newton iterations per candidate

    Returns
    -------
    List[Point]
        Refined equilibria in the order their first candidate was found

    Examples
    --------
    >>> points = find_equilibria(ViewRect(-10.0, 10.0, -10.0, 10.0), load_builtin("lotka_volterra"))
    >>> len(points)
    2
    """
    n = max(int(min_density), math.floor(density))
    params = system.params

    f_segments = zero_contour_segments(rect, lambda x, y: system.f(x, y, params), n, n)
    g_segments = zero_contour_segments(rect, lambda x, y: system.g(x, y, params), n, n)

    candidates = _pairwise_intersections(f_segments, g_segments)

    tol = min(rect.width / n, rect.height / n) * MERGE_FACTOR
    unique = deduplicate_points(candidates, tol)

    step = tol * 0.5
    return [newton_polish(system, p, step, newton_iterations) for p in unique]


def verify_equilibria(
    system: PlanarSystemProtocol,
    points: Sequence[Point],
    tol: float = 1e-6,
) -> List[EquilibriumReport]:
    """
    Check the residual max(|f|, |g|) at each point.

    Issues a UserWarning for every point whose residual is non-finite or
    above tol; the point is still reported.

    Parameters
    ----------
    system : PlanarSystemProtocol
        Planar system
    points : Sequence[Point]
        Candidate equilibria (typically from find_equilibria)
    tol : float
        Residual tolerance

    Returns
    -------
    List[EquilibriumReport]
        One report per point, same order
    """
    reports: List[EquilibriumReport] = []
    for point in points:
        fv, gv = system.f(point.x, point.y, system.params), system.g(point.x, point.y, system.params)
        residual = float(np.max(np.abs([fv, gv])))

        if not math.isfinite(residual):
            warnings.warn(
                f"Equilibrium candidate at ({point.x:.6g}, {point.y:.6g}) has a non-finite "
                f"residual; the field is undefined there.",
                UserWarning,
                stacklevel=2,
            )
            verified = False
        elif residual > tol:
            warnings.warn(
                f"Equilibrium candidate at ({point.x:.6g}, {point.y:.6g}) failed verification: "
                f"max(|f|, |g|) = {residual:.3g} exceeds tolerance {tol}. "
                f"Increase the search density or check for tangent nullclines.",
                UserWarning,
                stacklevel=2,
            )
            verified = False
        else:
            verified = True

        reports.append({"point": point, "residual": residual, "verified": verified})

    return reports


__all__ = [
    "segment_intersection",
    "deduplicate_points",
    "newton_polish",
    "find_equilibria",
    "verify_equilibria",
]
