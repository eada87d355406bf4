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
Unit Tests for PlanarSystem
===========================

Tests the immutable planar system value: evaluation, parameter handling,
bound scalar fields, and protocol conformance.
"""

import pytest

from phaseplane.systems.planar_system import PlanarSystem
from phaseplane.types.protocols import PlanarSystemProtocol


@pytest.fixture
def harmonic():
    return PlanarSystem(
        f=lambda x, y, p: y,
        g=lambda x, y, p: -p["k"] * x,
        params={"k": 4.0},
        name="harmonic",
    )


class TestEvaluation:
    """Test evaluation of the right-hand sides."""

    def test_evaluate(self, harmonic):
        assert harmonic.evaluate(1.0, 0.0) == (0.0, -4.0)
        assert harmonic.evaluate(0.5, 2.0) == (2.0, -2.0)

    def test_components_take_params(self, harmonic):
        assert harmonic.g(1.0, 0.0, {"k": 1.0}) == -1.0
        assert harmonic.f(1.0, 3.0, harmonic.params) == 3.0

    def test_bound_fields(self, harmonic):
        f_field = harmonic.f_field()
        g_field = harmonic.g_field()
        assert f_field(0.0, 7.0) == 7.0
        assert g_field(2.0, 0.0) == -8.0


class TestParameters:
    """Test parameter storage and replacement."""

    def test_params_are_floats(self):
        system = PlanarSystem(lambda x, y, p: 0.0, lambda x, y, p: 0.0, params={"a": 2})
        assert isinstance(system.params["a"], float)

    def test_params_read_only(self, harmonic):
        with pytest.raises(TypeError):
            harmonic.params["k"] = 1.0

    def test_params_copied_from_input(self):
        source = {"k": 1.0}
        system = PlanarSystem(lambda x, y, p: 0.0, lambda x, y, p: 0.0, params=source)
        source["k"] = 99.0
        assert system.params["k"] == 1.0

    def test_no_params(self):
        system = PlanarSystem(lambda x, y, p: x, lambda x, y, p: y)
        assert dict(system.params) == {}

    def test_with_params_returns_new_system(self, harmonic):
        stiffer = harmonic.with_params(k=9.0)
        assert harmonic.params["k"] == 4.0
        assert stiffer.params["k"] == 9.0
        assert stiffer.evaluate(1.0, 0.0) == (0.0, -9.0)
        assert stiffer.name == "harmonic"

    def test_with_unknown_param(self, harmonic):
        with pytest.raises(ValueError, match="Unknown parameter"):
            harmonic.with_params(m=1.0)


class TestConstructionAndDisplay:
    """Test validation, protocol conformance and repr."""

    def test_requires_callables(self):
        with pytest.raises(ValueError, match="callable"):
            PlanarSystem("y", lambda x, y, p: x)

    def test_satisfies_protocol(self, harmonic):
        assert isinstance(harmonic, PlanarSystemProtocol)

    def test_repr(self, harmonic):
        assert repr(harmonic) == "PlanarSystem('harmonic', k=4)"

    def test_repr_without_params(self):
        system = PlanarSystem(lambda x, y, p: x, lambda x, y, p: y, name="id")
        assert repr(system) == "PlanarSystem('id')"

    def test_is_slotted(self, harmonic):
        with pytest.raises(AttributeError):
            harmonic.extra = 1
