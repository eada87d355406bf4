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
Analysis
========

Qualitative structure of planar systems.

>>> from phaseplane.analysis import find_equilibria, verify_equilibria
>>>
>>> points = find_equilibria(view, system, density=160)
>>> reports = verify_equilibria(system, points, tol=1e-6)
"""

from .equilibrium_solver import (
    deduplicate_points,
    find_equilibria,
    newton_polish,
    segment_intersection,
    verify_equilibria,
)

__all__ = [
    "segment_intersection",
    "deduplicate_points",
    "newton_polish",
    "find_equilibria",
    "verify_equilibria",
]
