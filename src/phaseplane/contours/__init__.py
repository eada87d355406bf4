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
Contours
========

Zero level sets of scalar fields: marching-squares extraction and
stitching of the resulting segments into polylines.

>>> from phaseplane.contours import zero_contour_segments, stitch_segments_to_polylines
>>>
>>> segments = zero_contour_segments(view, system.f_field(), 120, 120)
>>> polylines = stitch_segments_to_polylines(segments, tol=1e-6)
>>>
>>> # Nullclines stitched at pixel tolerance for an 800 x 600 surface
>>> f_nullclines = zero_contour_polylines(view, system.f_field(), 200, 800, 600)
"""

from .marching_squares import ZERO_EPSILON, lerp_zero, sample_grid, zero_contour_segments
from .stitching import quantize, stitch_segments_to_polylines, zero_contour_polylines

__all__ = [
    "ZERO_EPSILON",
    "lerp_zero",
    "sample_grid",
    "zero_contour_segments",
    "quantize",
    "stitch_segments_to_polylines",
    "zero_contour_polylines",
]
