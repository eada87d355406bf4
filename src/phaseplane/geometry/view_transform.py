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
View Transform - World/Screen Mapping

An axis-aligned world rectangle together with its linear map onto a
device surface of size (width, height). The rectangle is an immutable
value: pan and zoom return a new ViewRect and the caller keeps the
current one in its own state.

Screen convention: origin at the top-left corner, y increasing downward.
World convention: y increasing upward. The map flips y accordingly.

Usage
-----
>>> view = ViewRect(-10.0, 10.0, -10.0, 10.0)
>>> view.to_screen(800, 600, Point(0.0, 0.0))
Point(x=400.0, y=300.0)
>>> view = view.zoom(0.0, 0.0, 2.0)   # zoom in around the origin
>>> view.as_tuple()
(-5.0, 5.0, -5.0, 5.0)
"""

import math
from dataclasses import dataclass
from typing import Optional, Tuple

from phaseplane.types.core import Bounds, Point


@dataclass(frozen=True)
class ViewRect:
    """
    Immutable world-space rectangle with screen mapping.

    Attributes
    ----------
    xmin, xmax : float
        Horizontal extent, xmin < xmax
    ymin, ymax : float
        Vertical extent, ymin < ymax

    Raises
    ------
    ValueError
        If a bound is not finite or the rectangle is empty/inverted

    Examples
    --------
    >>> view = ViewRect(0.0, 4.0, 0.0, 2.0)
    >>> view.width, view.height
    (4.0, 2.0)
    >>> ViewRect(1.0, 1.0, 0.0, 1.0)
    Traceback (most recent call last):
        ...
    ValueError: ViewRect requires xmin < xmax, got xmin=1.0, xmax=1.0
    """

    xmin: float
    xmax: float
    ymin: float
    ymax: float

    def __post_init__(self):
        for name in ("xmin", "xmax", "ymin", "ymax"):
            value = getattr(self, name)
            if not math.isfinite(value):
                raise ValueError(f"ViewRect bound {name} must be finite, got {value}")
        if not self.xmin < self.xmax:
            raise ValueError(
                f"ViewRect requires xmin < xmax, got xmin={self.xmin}, xmax={self.xmax}"
            )
        if not self.ymin < self.ymax:
            raise ValueError(
                f"ViewRect requires ymin < ymax, got ymin={self.ymin}, ymax={self.ymax}"
            )

    @classmethod
    def from_bounds(cls, bounds: Bounds) -> "ViewRect":
        """Build from an (xmin, xmax, ymin, ymax) tuple."""
        xmin, xmax, ymin, ymax = bounds
        return cls(float(xmin), float(xmax), float(ymin), float(ymax))

    # =========================================================================
    # Properties
    # =========================================================================

    @property
    def width(self) -> float:
        return self.xmax - self.xmin

    @property
    def height(self) -> float:
        return self.ymax - self.ymin

    @property
    def center(self) -> Point:
        return Point((self.xmin + self.xmax) / 2, (self.ymin + self.ymax) / 2)

    def as_tuple(self) -> Bounds:
        return (self.xmin, self.xmax, self.ymin, self.ymax)

    def contains(self, point: Point) -> bool:
        """True if point lies in the closed rectangle."""
        x, y = point
        return self.xmin <= x <= self.xmax and self.ymin <= y <= self.ymax

    # =========================================================================
    # Coordinate Mapping
    # =========================================================================

    def to_screen(self, width: float, height: float, world_point: Point) -> Point:
        """
        Map a world point to device coordinates.

        Parameters
        ----------
        width, height : float
            Device surface size in pixels
        world_point : Point
            Point in world space

        Returns
        -------
        Point
            Device coordinates; y is flipped so world "up" is screen "up"
        """
        x, y = world_point
        sx = (x - self.xmin) / (self.xmax - self.xmin) * width
        sy = height - (y - self.ymin) / (self.ymax - self.ymin) * height
        return Point(sx, sy)

    def to_world(self, width: float, height: float, screen_point: Point) -> Point:
        """Inverse of to_screen."""
        px, py = screen_point
        x = (px / width) * (self.xmax - self.xmin) + self.xmin
        y = ((height - py) / height) * (self.ymax - self.ymin) + self.ymin
        return Point(x, y)

    # =========================================================================
    # Transforms (return new values)
    # =========================================================================

    def zoom(self, cx: float, cy: float, factor: float) -> "ViewRect":
        """
        Rescale both extents by 1/factor around world point (cx, cy).

        The anchor keeps its relative position inside the rectangle, so the
        point under the cursor stays under the cursor. factor > 1 zooms in.

        Parameters
        ----------
        cx, cy : float
            World-space anchor
        factor : float
            Positive, finite zoom factor

        Returns
        -------
        ViewRect
            Zoomed rectangle

        Raises
        ------
        ValueError
            If factor is not a positive finite number

        Examples
        --------
        >>> ViewRect(0.0, 10.0, 0.0, 10.0).zoom(0.0, 0.0, 2.0).as_tuple()
        (0.0, 5.0, 0.0, 5.0)
        """
        if not (math.isfinite(factor) and factor > 0):
            raise ValueError(f"Zoom factor must be positive and finite, got {factor}")

        xr = self.xmax - self.xmin
        yr = self.ymax - self.ymin
        nxr = xr / factor
        nyr = yr / factor

        xmin = cx - (cx - self.xmin) * (nxr / xr)
        ymin = cy - (cy - self.ymin) * (nyr / yr)
        return ViewRect(xmin, xmin + nxr, ymin, ymin + nyr)

    def pan(self, dx: float, dy: float) -> "ViewRect":
        """Translate all four bounds by (dx, dy)."""
        return ViewRect(self.xmin + dx, self.xmax + dx, self.ymin + dy, self.ymax + dy)

    def cell_size(self, cols: int, rows: int) -> Tuple[float, float]:
        """World size (dx, dy) of one cell of a cols x rows grid over the view."""
        return (self.width / cols, self.height / rows)

    def __repr__(self) -> str:
        return (
            f"ViewRect(xmin={self.xmin:g}, xmax={self.xmax:g}, "
            f"ymin={self.ymin:g}, ymax={self.ymax:g})"
        )


DEFAULT_VIEW = ViewRect(-10.0, 10.0, -10.0, 10.0)
"""Initial view of a new session: the square [-10, 10] x [-10, 10]."""

STATIONARY_SPEED = 1e-12
"""Below this speed the flow at a point has no drawable direction."""

DIRECTION_STEP_FRACTION = 0.02
"""World step used to find a screen direction, as a fraction of the smaller view side."""


def screen_direction(
    view: ViewRect,
    width: float,
    height: float,
    point: Point,
    velocity: Point,
) -> Optional[float]:
    """
    Angle of a world-space velocity as drawn on screen.

    A short world step along the normalized velocity is mapped to screen
    space and the angle of the screen displacement is returned, in radians
    with the y axis pointing down. Non-square views distort directions, so
    this is not simply atan2(-vy, vx).

    Returns
    -------
    Optional[float]
        Angle in (-pi, pi], or None when the speed is below
        STATIONARY_SPEED (or not finite)

    Examples
    --------
    >>> screen_direction(DEFAULT_VIEW, 800, 800, Point(0.0, 0.0), Point(0.0, 1.0))
    -1.5707963267948966
    """
    vx, vy = velocity
    speed = math.hypot(vx, vy)
    if not (math.isfinite(speed) and speed >= STATIONARY_SPEED):
        return None

    world_step = DIRECTION_STEP_FRACTION * min(view.width, view.height)
    start = view.to_screen(width, height, point)
    end = view.to_screen(
        width,
        height,
        Point(point.x + vx / speed * world_step, point.y + vy / speed * world_step),
    )
    return math.atan2(end.y - start.y, end.x - start.x)


__all__ = ["ViewRect", "DEFAULT_VIEW", "STATIONARY_SPEED", "screen_direction"]
