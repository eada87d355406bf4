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
Unit Tests for Protocol Definitions

Tests structural typing of planar systems: anything with params, f and g
satisfies PlanarSystemProtocol and is accepted by the numerical core.
"""

import numpy as np

from phaseplane.geometry.view_transform import ViewRect
from phaseplane.integration.rk4_integrator import rk4
from phaseplane.types.core import Point
from phaseplane.types.protocols import PlanarSystemProtocol


class Rotation:
    """Duck-typed system with no base class."""

    params = {"omega": 2.0}

    def f(self, x, y, params):
        return -params["omega"] * y

    def g(self, x, y, params):
        return params["omega"] * x


class MissingG:
    params = {}

    def f(self, x, y, params):
        return 0.0


class TestPlanarSystemProtocol:
    """Test runtime protocol checks."""

    def test_duck_typed_system_conforms(self):
        assert isinstance(Rotation(), PlanarSystemProtocol)

    def test_incomplete_system_does_not_conform(self):
        assert not isinstance(MissingG(), PlanarSystemProtocol)

    def test_duck_typed_system_integrates(self):
        bounds = ViewRect(-2.0, 2.0, -2.0, 2.0)
        pts = rk4(Rotation(), Point(1.0, 0.0), 0.001, 1000, bounds)
        radii = np.hypot(pts[:, 0], pts[:, 1])
        assert np.allclose(radii, 1.0, atol=1e-9)
