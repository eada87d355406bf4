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
Integration Bounds

Derives the rectangle a trajectory may travel in from the visible view.
Integration runs in a rectangle larger than the view so curves leaving
the window and coming back are drawn whole, and it always contains the
seed so a seed placed outside the window still integrates.
"""

from phaseplane.geometry.view_transform import ViewRect
from phaseplane.types.core import Point


def expanded_bounds_from_view(view: ViewRect, factor: float = 3) -> ViewRect:
    """
    Same centre as view, each half-extent multiplied by factor.

    Examples
    --------
    >>> expanded_bounds_from_view(ViewRect(-1.0, 1.0, 0.0, 2.0)).as_tuple()
    (-3.0, 3.0, -2.0, 4.0)
    """
    cx = (view.xmin + view.xmax) / 2
    cy = (view.ymin + view.ymax) / 2
    hw = ((view.xmax - view.xmin) / 2) * factor
    hh = ((view.ymax - view.ymin) / 2) * factor
    return ViewRect(cx - hw, cx + hw, cy - hh, cy + hh)


def integration_bounds_for(view: ViewRect, seed: Point, factor: float = 3) -> ViewRect:
    """
    Expanded view grown just enough to contain seed.

    Parameters
    ----------
    view : ViewRect
        Currently visible rectangle
    seed : Point
        World-space starting point, possibly outside view
    factor : float
        Half-extent multiplier (see expanded_bounds_from_view)

    Returns
    -------
    ViewRect
        Rectangle with seed in its closed interior
    """
    b = expanded_bounds_from_view(view, factor)
    x, y = seed
    return ViewRect(min(b.xmin, x), max(b.xmax, x), min(b.ymin, y), max(b.ymax, y))


__all__ = ["expanded_bounds_from_view", "integration_bounds_for"]
