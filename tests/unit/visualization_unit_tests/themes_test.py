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
Unit Tests for Plotting Themes Module

Tests color schemes, plot themes, and color manipulation utilities.
"""

import re

import plotly.graph_objects as go
import pytest

from phaseplane.visualization.themes import (
    PALETTE_KEYS,
    ColorSchemes,
    PlotThemes,
    hex_to_rgb,
    lighten_color,
    rgb_to_hex,
    with_alpha,
)

HEX_PATTERN = re.compile(r"^#[0-9a-f]{6}$")


# ============================================================================
# ColorSchemes Tests
# ============================================================================


class TestColorSchemes:
    """Test ColorSchemes class functionality."""

    @pytest.mark.parametrize(
        "palette", [ColorSchemes.PHASE_PLANE, ColorSchemes.COLORBLIND_SAFE, ColorSchemes.DARK]
    )
    def test_palettes_cover_all_elements(self, palette):
        """Every palette defines a colour for every drawn element."""
        assert set(palette) == set(PALETTE_KEYS)

    @pytest.mark.parametrize(
        "palette", [ColorSchemes.PHASE_PLANE, ColorSchemes.COLORBLIND_SAFE, ColorSchemes.DARK]
    )
    def test_colors_are_valid_hex(self, palette):
        """Verify all colors are lowercase '#rrggbb' codes."""
        for color in palette.values():
            assert HEX_PATTERN.match(color), color

    def test_default_palette_colors(self):
        """Default palette matches the documented colours."""
        palette = ColorSchemes.get_palette()
        assert palette["trajectory"] == "#3367d6"
        assert palette["field"] == "#44bb88"
        assert palette["nullcline"] == "#000000"
        assert palette["equilibrium"] == "#e11d48"

    @pytest.mark.parametrize(
        "name,expected",
        [
            ("phase_plane", "PHASE_PLANE"),
            ("default", "PHASE_PLANE"),
            ("colorblind_safe", "COLORBLIND_SAFE"),
            ("Colorblind-Safe", "COLORBLIND_SAFE"),
            ("wong", "COLORBLIND_SAFE"),
            ("dark", "DARK"),
        ],
    )
    def test_get_palette_names(self, name, expected):
        """Names and aliases resolve case-insensitively."""
        assert ColorSchemes.get_palette(name) == getattr(ColorSchemes, expected)

    def test_get_palette_returns_copy(self):
        """Modifying a returned palette does not affect the class attribute."""
        palette = ColorSchemes.get_palette("dark")
        palette["trajectory"] = "#ffffff"
        assert ColorSchemes.DARK["trajectory"] == "#7aa2f7"

    def test_get_palette_unknown(self):
        """Unknown scheme raises ValueError."""
        with pytest.raises(ValueError, match="Unknown color scheme"):
            ColorSchemes.get_palette("viridis")


# ============================================================================
# PlotThemes Tests
# ============================================================================


class TestPlotThemes:
    """Test PlotThemes class functionality."""

    @pytest.mark.parametrize("name", ["default", "publication", "dark", "DARK"])
    def test_get_theme_by_name(self, name):
        """Named themes have every key and a resolvable palette."""
        config = PlotThemes.get_theme(name)
        assert set(config) == set(PlotThemes.DEFAULT)
        ColorSchemes.get_palette(config["palette"])

    def test_publication_theme(self):
        """Publication theme uses serif fonts and the colorblind palette."""
        config = PlotThemes.get_theme("publication")
        assert config["palette"] == "colorblind_safe"
        assert "serif" in config["font_family"]

    def test_custom_theme_filled_from_default(self):
        """Custom dictionaries only need the keys they change."""
        config = PlotThemes.get_theme({"font_size": 20})
        assert config["font_size"] == 20
        assert config["template"] == PlotThemes.DEFAULT["template"]

    def test_get_theme_unknown(self):
        """Unknown theme name raises ValueError."""
        with pytest.raises(ValueError, match="Unknown theme"):
            PlotThemes.get_theme("neon")

    def test_get_theme_wrong_type(self):
        """Non-str, non-dict theme raises TypeError."""
        with pytest.raises(TypeError):
            PlotThemes.get_theme(42)

    def test_apply_theme(self):
        """apply_theme sets fonts on the figure and returns it."""
        fig = go.Figure()
        result = PlotThemes.apply_theme(fig, "publication")
        assert result is fig
        assert fig.layout.font.size == 14
        assert fig.layout.font.family == "Times New Roman, serif"
        assert fig.layout.template is not None


# ============================================================================
# Color Utilities Tests
# ============================================================================


class TestColorUtilities:
    """Test color manipulation helpers."""

    def test_hex_to_rgb(self):
        """Convert hex to RGB components."""
        assert hex_to_rgb("#44bb88") == (68, 187, 136)
        assert hex_to_rgb("ffffff") == (255, 255, 255)

    @pytest.mark.parametrize("bad", ["#fff", "#1234567", ""])
    def test_hex_to_rgb_invalid(self, bad):
        """Short or long strings are rejected."""
        with pytest.raises(ValueError, match="rrggbb"):
            hex_to_rgb(bad)

    def test_rgb_to_hex(self):
        """Convert RGB to hex."""
        assert rgb_to_hex(68, 187, 136) == "#44bb88"

    def test_rgb_to_hex_clamps(self):
        """Out-of-range values are clamped."""
        assert rgb_to_hex(-10, 300, 127.9) == "#00ff7f"

    def test_round_trip(self):
        """hex -> rgb -> hex is the identity for palette colours."""
        for color in ColorSchemes.PHASE_PLANE.values():
            assert rgb_to_hex(*hex_to_rgb(color)) == color

    def test_with_alpha(self):
        """rgba string carries the opacity."""
        assert with_alpha("#3367d6", 0.5) == "rgba(51, 103, 214, 0.5)"

    def test_lighten(self):
        """Positive factors move toward white."""
        assert lighten_color("#000000", 0.5) == "#7f7f7f"
        assert lighten_color("#3367d6", 1.0) == "#ffffff"

    def test_darken(self):
        """Negative factors move toward black."""
        assert lighten_color("#ffffff", -1.0) == "#000000"
        assert lighten_color("#804020", -0.5) == "#402010"

    def test_zero_factor_is_identity(self):
        """Factor 0 leaves the colour unchanged."""
        assert lighten_color("#3367d6", 0.0) == "#3367d6"
