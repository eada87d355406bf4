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
Core Geometric Types

Defines the basic building blocks shared by every phaseplane module:
- Points in world or screen space
- Line segments produced by contour extraction
- Polylines produced by segment stitching
- Scalar fields and parameter mappings

World space is where the dynamical system lives (x to the right, y up).
Screen space is a device surface of size (width, height) in pixels
(x to the right, y down). Both use the same Point type; functions make the
space explicit in their argument names instead of in the type.

Usage
-----
>>> from phaseplane.types.core import Point, Segment
>>>
>>> p = Point(1.0, 2.0)
>>> x, y = p
>>> seg = Segment(Point(0.0, 0.0), p)
>>> seg.a.x
0.0
"""

from typing import Callable, List, Mapping, NamedTuple, Tuple

import numpy as np

# ============================================================================
# Points and Segments
# ============================================================================


class Point(NamedTuple):
    """
    A 2D point (x, y) stored as two IEEE-754 doubles.

    Hashable and unpackable, so it can be used directly as a dict key
    or in ``x, y = point`` assignments.
    """

    x: float
    y: float


class Segment(NamedTuple):
    """Ordered pair of endpoints. Orientation carries no meaning."""

    a: Point
    b: Point


Polyline = List[Point]
"""
Ordered chain of points, length >= 2.

Represents one maximal connected run of segments. A closed contour is a
polyline whose first and last points coincide (within stitching tolerance).
"""

Bounds = Tuple[float, float, float, float]
"""Plain (xmin, xmax, ymin, ymax) tuple."""

PointArray = np.ndarray
"""
Sequence of points as a float64 array of shape (T, 2).

Row k is the k-th point; column 0 is x and column 1 is y.
"""

# ============================================================================
# Fields and Parameters
# ============================================================================

ScalarField = Callable[[float, float], float]
"""
Pure scalar function of position.

Examples
--------
>>> field: ScalarField = lambda x, y: x**2 + y**2 - 1.0
>>> field(1.0, 0.0)
0.0
"""

ParameterMap = Mapping[str, float]
"""Named numeric parameters a system's right-hand sides close over."""

SystemFunction = Callable[[float, float, ParameterMap], float]
"""Right-hand side component f(x, y, params) or g(x, y, params)."""


def as_point(value) -> Point:
    """
    Coerce any length-2 sequence (tuple, list, array) to a Point of floats.

    Examples
    --------
    >>> as_point(np.array([1, 2]))
    Point(x=1.0, y=2.0)
    """
    x, y = value
    return Point(float(x), float(y))


__all__ = [
    "Point",
    "Segment",
    "Polyline",
    "Bounds",
    "PointArray",
    "ScalarField",
    "ParameterMap",
    "SystemFunction",
    "as_point",
]
