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
Unit Tests for Option Types and Defaults

Tests the default option dictionaries and resolve_options merging.
"""

import pytest

from phaseplane.types.options import (
    DEFAULT_EQUILIBRIUM_OPTIONS,
    DEFAULT_INTEGRATION_OPTIONS,
    DEFAULT_NULLCLINE_OPTIONS,
    DEFAULT_SESSION_OPTIONS,
    DEFAULT_VECTOR_FIELD_OPTIONS,
    resolve_options,
)


class TestDefaults:
    """Test default values."""

    def test_integration_defaults(self):
        assert DEFAULT_INTEGRATION_OPTIONS["dt"] == 0.001
        assert DEFAULT_INTEGRATION_OPTIONS["steps"] == 20000
        assert DEFAULT_INTEGRATION_OPTIONS["bounds_factor"] == 3.0

    def test_contour_defaults(self):
        assert DEFAULT_NULLCLINE_OPTIONS["min_density"] == 8
        assert DEFAULT_NULLCLINE_OPTIONS["stitch_tol"] == 0.5
        assert DEFAULT_EQUILIBRIUM_OPTIONS["newton_iterations"] == 3

    def test_session_defaults(self):
        assert DEFAULT_SESSION_OPTIONS["history_limit"] == 1000
        assert DEFAULT_SESSION_OPTIONS["zoom_step"] == 1.1
        assert DEFAULT_SESSION_OPTIONS["initial_view"] == (-10.0, 10.0, -10.0, 10.0)

    def test_vector_field_defaults(self):
        assert DEFAULT_VECTOR_FIELD_OPTIONS == {"density": 18, "arrow_scale": 0.35}


class TestResolveOptions:
    """Test merging of overrides."""

    def test_none_gives_copy_of_defaults(self):
        merged = resolve_options(DEFAULT_INTEGRATION_OPTIONS, None)
        assert merged == DEFAULT_INTEGRATION_OPTIONS
        assert merged is not DEFAULT_INTEGRATION_OPTIONS

    def test_override(self):
        merged = resolve_options(DEFAULT_INTEGRATION_OPTIONS, {"dt": 0.01})
        assert merged["dt"] == 0.01
        assert merged["steps"] == 20000

    def test_defaults_not_modified(self):
        resolve_options(DEFAULT_INTEGRATION_OPTIONS, {"dt": 0.5})
        assert DEFAULT_INTEGRATION_OPTIONS["dt"] == 0.001

    def test_unknown_key(self):
        with pytest.raises(ValueError, match=r"Unknown option\(s\) \['densty'\]"):
            resolve_options(DEFAULT_VECTOR_FIELD_OPTIONS, {"densty": 25})

    def test_empty_overrides(self):
        assert resolve_options(DEFAULT_NULLCLINE_OPTIONS, {}) == DEFAULT_NULLCLINE_OPTIONS
