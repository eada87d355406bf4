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
Marching Squares - Zero Level Set Extraction

Samples a scalar field on a regular grid over a world rectangle and emits
one or two line segments per grid cell where the field changes sign. The
segments are unordered and carry no connectivity; see
``phaseplane.contours.stitching`` for reassembly into polylines.

Cell Layout
-----------
Corners and edges of the cell [x0, x1] x [y0, y1]::

        TL ----- 3 ----- TR        corner code bits:
        |                 |          BL -> 1, BR -> 2, TR -> 4, TL -> 8
        0                 2        edges:
        |                 |          0 = left (BL-TL), 1 = bottom (BL-BR)
        BL ----- 1 ----- BR          2 = right (BR-TR), 3 = top (TL-TR)

A corner bit is set when the sampled value is > 0.

Known Limitation
----------------
Codes 5 and 10 (diagonally opposite corners share a sign) are ambiguous:
the cell holds a saddle of the interpolant and either pairing of the four
crossings is plausible. This module always uses the same pairing
(5 -> left/bottom + right/top, 10 -> left/right + bottom/top) instead of
sampling the cell centre, so contours can be misconnected close to saddle
points of the field. Refine the grid to make such cells rarer.

Usage
-----
>>> view = ViewRect(-10.0, 10.0, -10.0, 10.0)
>>> segments = zero_contour_segments(view, lambda x, y: x * x + y * y - 25.0, 40, 40)
>>> len(segments) > 0
True
"""

import math
from typing import Dict, List, Tuple

import numpy as np

from phaseplane.geometry.view_transform import ViewRect
from phaseplane.types.core import Point, ScalarField, Segment

ZERO_EPSILON = 1e-15
"""Samples with magnitude below this are replaced by a signed epsilon."""

# code -> pairs of edges joined by a segment
_SEGMENT_TABLE: Dict[int, Tuple[Tuple[int, int], ...]] = {
    1: ((0, 1),),
    14: ((0, 1),),
    2: ((1, 2),),
    13: ((1, 2),),
    3: ((0, 2),),
    12: ((0, 2),),
    4: ((2, 3),),
    11: ((2, 3),),
    5: ((0, 1), (2, 3)),
    6: ((1, 3),),
    9: ((1, 3),),
    7: ((0, 3),),
    8: ((0, 3),),
    10: ((0, 2), (1, 3)),
}


def lerp_zero(x1: float, y1: float, v1: float, x2: float, y2: float, v2: float) -> Point:
    """
    Zero crossing of the linear interpolant between two samples.

    Parameters
    ----------
    x1, y1, v1 : float
        First sample position and value
    x2, y2, v2 : float
        Second sample position and value; sign must differ from v1

    Returns
    -------
    Point
        (x1, y1) + t * ((x2, y2) - (x1, y1)) with t = v1 / (v1 - v2)
    """
    t = v1 / (v1 - v2)
    return Point(x1 + t * (x2 - x1), y1 + t * (y2 - y1))


def sample_grid(rect: ViewRect, field: ScalarField, cols: int, rows: int) -> np.ndarray:
    """
    Sample field on the (rows + 1) x (cols + 1) grid spanning rect.

    Node (j, i) sits at (xmin + i * dx, ymin + j * dy). Values with
    magnitude below ZERO_EPSILON become +ZERO_EPSILON (zero and small
    positives) or -ZERO_EPSILON (small negatives).

    Returns
    -------
    np.ndarray
        Array of shape (rows + 1, cols + 1), row index j, column index i
    """
    dx = (rect.xmax - rect.xmin) / cols
    dy = (rect.ymax - rect.ymin) / rows

    values = np.empty((rows + 1, cols + 1), dtype=np.float64)
    for j in range(rows + 1):
        y = rect.ymin + j * dy
        for i in range(cols + 1):
            values[j, i] = field(rect.xmin + i * dx, y)

    with np.errstate(invalid="ignore"):
        tiny = np.abs(values) < ZERO_EPSILON
    values[tiny] = np.where(values[tiny] >= 0, ZERO_EPSILON, -ZERO_EPSILON)
    return values


def zero_contour_segments(
    rect: ViewRect,
    field: ScalarField,
    cols: int,
    rows: int,
) -> List[Segment]:
    """
    Extract the zero level set of field over rect as unordered segments.

    Parameters
    ----------
    rect : ViewRect
        World rectangle to scan
    field : ScalarField
        Pure function (x, y) -> float
    cols, rows : int
        Number of grid cells along x and y (>= 1)

    Returns
    -------
    List[Segment]
        World-space segments in row-major cell order. Cells with a
        non-finite corner sample are skipped.

    Raises
    ------
    ValueError
        If cols or rows is smaller than 1

    Examples
    --------
    >>> segs = zero_contour_segments(ViewRect(-10.0, 10.0, -10.0, 10.0), lambda x, y: x, 5, 5)
    >>> all(abs(p.x) < 1e-9 for s in segs for p in s)
    True
    """
    if int(cols) != cols or int(rows) != rows or cols < 1 or rows < 1:
        raise ValueError(f"Grid size must be positive integers, got cols={cols}, rows={rows}")
    cols, rows = int(cols), int(rows)

    dx = (rect.xmax - rect.xmin) / cols
    dy = (rect.ymax - rect.ymin) / rows
    values = sample_grid(rect, field, cols, rows).tolist()

    segments: List[Segment] = []
    for j in range(rows):
        y0 = rect.ymin + j * dy
        y1 = y0 + dy
        row_lo = values[j]
        row_hi = values[j + 1]

        for i in range(cols):
            v00 = row_lo[i]
            v10 = row_lo[i + 1]
            v11 = row_hi[i + 1]
            v01 = row_hi[i]

            code = (v00 > 0) | (v10 > 0) << 1 | (v11 > 0) << 2 | (v01 > 0) << 3
            if code == 0 or code == 15:
                continue
            if not all(math.isfinite(v) for v in (v00, v10, v11, v01)):
                continue

            x0 = rect.xmin + i * dx
            x1 = x0 + dx

            def crossing(edge: int) -> Point:
                if edge == 0:
                    return lerp_zero(x0, y0, v00, x0, y1, v01)
                if edge == 1:
                    return lerp_zero(x0, y0, v00, x1, y0, v10)
                if edge == 2:
                    return lerp_zero(x1, y0, v10, x1, y1, v11)
                return lerp_zero(x0, y1, v01, x1, y1, v11)

            for edge_a, edge_b in _SEGMENT_TABLE[code]:
                segments.append(Segment(crossing(edge_a), crossing(edge_b)))

    return segments


__all__ = [
    "ZERO_EPSILON",
    "lerp_zero",
    "sample_grid",
    "zero_contour_segments",
]
