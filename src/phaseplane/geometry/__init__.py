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
Geometry
========

World rectangles, world/screen mapping, and integration bounds.

>>> from phaseplane.geometry import ViewRect, integration_bounds_for
>>>
>>> view = ViewRect(-10.0, 10.0, -10.0, 10.0)
>>> bounds = integration_bounds_for(view, Point(50.0, 0.0))
>>> bounds.xmax
50.0
"""

from .bounds import expanded_bounds_from_view, integration_bounds_for
from .view_transform import DEFAULT_VIEW, STATIONARY_SPEED, ViewRect, screen_direction

__all__ = [
    "ViewRect",
    "DEFAULT_VIEW",
    "STATIONARY_SPEED",
    "screen_direction",
    "expanded_bounds_from_view",
    "integration_bounds_for",
]
