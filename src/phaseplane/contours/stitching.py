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
Segment Stitching - Unordered Segments to Polylines

Reassembles the unordered segment soup produced by marching squares into
maximal open polylines. Endpoints are matched through a quantization grid
of spacing ``tol``: two endpoints are joined when both coordinates round
to the same multiple of tol.

Chains grow greedily. Starting from the first unused segment, the right
end is extended with the first unused segment touching it, then the left
end likewise. Every segment is consumed exactly once, so

    sum(len(p) - 1 for p in polylines) == len(segments)

A closed contour comes out as a chain whose first and last points share a
key; no cycle detection is done.

Usage
-----
>>> segments = [
...     Segment(Point(1.0, 0.0), Point(2.0, 0.0)),
...     Segment(Point(0.0, 0.0), Point(1.0, 0.0)),
... ]
>>> stitch_segments_to_polylines(segments)
[[Point(x=0.0, y=0.0), Point(x=1.0, y=0.0), Point(x=2.0, y=0.0)]]
"""

import math
from collections import deque
from typing import Callable, Dict, Hashable, List, Sequence, Tuple, Union

from phaseplane.contours.marching_squares import zero_contour_segments
from phaseplane.geometry.view_transform import ViewRect
from phaseplane.types.core import Point, Polyline, ScalarField, Segment

KeyFunction = Callable[[Point], Hashable]
KeyComponent = Union[int, str]


def _round_half_up(value: float) -> KeyComponent:
    # non-finite values key as "nan", "inf" or "-inf"
    if not math.isfinite(value):
        return repr(value)
    # half-up, not round()'s half-to-even
    return math.floor(value + 0.5)


def quantize(point: Point, tol: float) -> Tuple[KeyComponent, KeyComponent]:
    """
    Adjacency key of a point on a grid of spacing tol.

    A non-finite coordinate keys as its string form, so points with the
    same non-finite coordinates share a key and stitching never fails.

    Examples
    --------
    >>> quantize(Point(1.24, -0.26), 0.5)
    (2, -1)
    >>> quantize(Point(0.25, -0.25), 0.5)
    (1, 0)
    >>> quantize(Point(float("nan"), 1.0), 0.5)
    ('nan', 2)
    """
    return (_round_half_up(point.x / tol), _round_half_up(point.y / tol))


def _check_tol(tol: float):
    if not (math.isfinite(tol) and tol > 0):
        raise ValueError(f"Stitching tolerance must be positive and finite, got {tol}")


def _stitch(segments: Sequence[Segment], key: KeyFunction) -> List[Polyline]:
    starts = [s.a for s in segments]
    ends = [s.b for s in segments]
    start_keys = [key(p) for p in starts]
    end_keys = [key(p) for p in ends]

    incident: Dict[Hashable, List[int]] = {}
    for idx in range(len(segments)):
        incident.setdefault(start_keys[idx], []).append(idx)
        incident.setdefault(end_keys[idx], []).append(idx)

    used = [False] * len(segments)

    def take_next(k: Hashable):
        for idx in incident.get(k, ()):
            if used[idx]:
                continue
            if start_keys[idx] == k:
                used[idx] = True
                return ends[idx], end_keys[idx]
            if end_keys[idx] == k:
                used[idx] = True
                return starts[idx], start_keys[idx]
        return None

    polylines: List[Polyline] = []
    for i in range(len(segments)):
        if used[i]:
            continue
        used[i] = True
        chain = deque([starts[i], ends[i]])

        right_key = end_keys[i]
        while True:
            found = take_next(right_key)
            if found is None:
                break
            point, right_key = found
            chain.append(point)

        left_key = start_keys[i]
        while True:
            found = take_next(left_key)
            if found is None:
                break
            point, left_key = found
            chain.appendleft(point)

        polylines.append(list(chain))

    return polylines


def stitch_segments_to_polylines(segments: Sequence[Segment], tol: float = 0.5) -> List[Polyline]:
    """
    Join segments whose endpoints share a quantized key into polylines.

    Parameters
    ----------
    segments : Sequence[Segment]
        Unordered segments; non-finite endpoints are keyed, not rejected
    tol : float
        Quantization spacing, in the segments' own units (pixels for
        screen-space input)

    Returns
    -------
    List[Polyline]
        Open polylines in order of their first segment; points keep the
        exact coordinates of the input segments

    Raises
    ------
    ValueError
        If tol is not positive and finite
    """
    _check_tol(tol)
    return _stitch(segments, lambda p: quantize(p, tol))


def zero_contour_polylines(
    view: ViewRect,
    field: ScalarField,
    density: float,
    width: float,
    height: float,
    tol: float = 0.5,
    min_density: int = 8,
) -> List[Polyline]:
    """
    Zero level set of field over view as world-space polylines.

    Extraction runs on a square grid of max(min_density, floor(density))
    cells per axis. Endpoints are matched in screen space on a width x
    height surface, so tol is a pixel distance and the joins look right
    at any zoom level. The returned points are the extracted world points.

    Parameters
    ----------
    view : ViewRect
        World rectangle (also the screen mapping)
    field : ScalarField
        Pure function (x, y) -> float
    density : float
        Requested cells per axis
    width, height : float
        Surface size in pixels (> 0)
    tol : float
        Pixel stitching tolerance
    min_density : int
        Lower clamp for density

    Returns
    -------
    List[Polyline]
        World-space polylines

    Examples
    --------
    >>> view = ViewRect(-10.0, 10.0, -10.0, 10.0)
    >>> circle = zero_contour_polylines(view, lambda x, y: x * x + y * y - 25.0, 100, 800, 800)
    """
    if not (width > 0 and height > 0):
        raise ValueError(f"Surface size must be positive, got {width} x {height}")
    _check_tol(tol)

    n = max(int(min_density), math.floor(density))
    segments = zero_contour_segments(view, field, n, n)
    return _stitch(segments, lambda p: quantize(view.to_screen(width, height, p), tol))


__all__ = [
    "quantize",
    "stitch_segments_to_polylines",
    "zero_contour_polylines",
]
