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
Types Module - Type Definitions for phaseplane

Central import point for all type definitions.

Module Organization
------------------
- core: Points, segments, polylines, scalar fields
- trajectories: Integration results and trajectory records
- protocols: Structural interface for planar systems
- options: Option TypedDicts and their defaults
"""

from .core import (
    Bounds,
    ParameterMap,
    Point,
    PointArray,
    Polyline,
    ScalarField,
    Segment,
    SystemFunction,
    as_point,
)
from .options import (
    DEFAULT_EQUILIBRIUM_OPTIONS,
    DEFAULT_INTEGRATION_OPTIONS,
    DEFAULT_NULLCLINE_OPTIONS,
    DEFAULT_SESSION_OPTIONS,
    DEFAULT_VECTOR_FIELD_OPTIONS,
    EquilibriumOptions,
    IntegrationOptions,
    NullclineOptions,
    SessionOptions,
    VectorFieldOptions,
    resolve_options,
)
from .protocols import PlanarSystemProtocol
from .trajectories import (
    BidirectionalResult,
    EquilibriumReport,
    IntegrationResult,
    ProbeResult,
    TerminationReason,
    Trajectory,
)

__all__ = [
    # Core
    "Point",
    "Segment",
    "Polyline",
    "Bounds",
    "PointArray",
    "ScalarField",
    "ParameterMap",
    "SystemFunction",
    "as_point",
    # Trajectories
    "TerminationReason",
    "IntegrationResult",
    "BidirectionalResult",
    "Trajectory",
    "EquilibriumReport",
    "ProbeResult",
    # Protocols
    "PlanarSystemProtocol",
    # Options
    "IntegrationOptions",
    "NullclineOptions",
    "EquilibriumOptions",
    "VectorFieldOptions",
    "SessionOptions",
    "DEFAULT_INTEGRATION_OPTIONS",
    "DEFAULT_NULLCLINE_OPTIONS",
    "DEFAULT_EQUILIBRIUM_OPTIONS",
    "DEFAULT_VECTOR_FIELD_OPTIONS",
    "DEFAULT_SESSION_OPTIONS",
    "resolve_options",
]
