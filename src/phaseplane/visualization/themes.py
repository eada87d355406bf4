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
Plotting Themes and Color Schemes

Palettes and figure-wide styling for phase-plane figures.

A palette names one colour per kind of element drawn on the plane
(trajectories, direction field, nullclines, equilibria, grid, axes), so
a figure can be restyled without touching the plotting code.

Main Classes
------------
ColorSchemes : Palette definitions
    PHASE_PLANE : Default palette (blue trajectories, green field)
    COLORBLIND_SAFE : Wong-palette variant
    DARK : Palette for dark backgrounds

PlotThemes : Complete theme configurations
    DEFAULT : White background, default palette
    PUBLICATION : Simple white template, serif fonts, colorblind palette
    DARK : Dark template and palette

Usage
-----
>>> from phaseplane.visualization.themes import ColorSchemes, PlotThemes
>>>
>>> palette = ColorSchemes.get_palette("colorblind_safe")
>>> palette["trajectory"]
'#0173b2'
>>> fig = PlotThemes.apply_theme(fig, theme="publication")
"""

from typing import Dict, Tuple, Union

import plotly.graph_objects as go

Palette = Dict[str, str]
"""Element name -> hex colour. Keys: trajectory, field, nullcline, equilibrium, grid, axis."""

PALETTE_KEYS: Tuple[str, ...] = ("trajectory", "field", "nullcline", "equilibrium", "grid", "axis")


class ColorSchemes:
    """
    Predefined phase-plane palettes.

    Attributes
    ----------
    PHASE_PLANE : Palette
        Default palette
    COLORBLIND_SAFE : Palette
        Built from the Wong palette, distinguishable under common
        colour-vision deficiencies
    DARK : Palette
        Light strokes for dark templates

    Examples
    --------
    >>> ColorSchemes.PHASE_PLANE["equilibrium"]
    '#e11d48'
    >>> ColorSchemes.get_palette("wong") == ColorSchemes.COLORBLIND_SAFE
    True
    """

    PHASE_PLANE: Palette = {
        "trajectory": "#3367d6",  # Blue
        "field": "#44bb88",  # Green
        "nullcline": "#000000",  # Black
        "equilibrium": "#e11d48",  # Rose
        "grid": "#cccccc",  # Light gray
        "axis": "#888888",  # Gray
    }

    COLORBLIND_SAFE: Palette = {
        "trajectory": "#0173b2",  # Blue
        "field": "#029e73",  # Green
        "nullcline": "#000000",  # Black
        "equilibrium": "#de8f05",  # Orange
        "grid": "#cccccc",
        "axis": "#949494",
    }

    DARK: Palette = {
        "trajectory": "#7aa2f7",  # Light blue
        "field": "#73daca",  # Teal
        "nullcline": "#e0e0e0",  # Near white
        "equilibrium": "#ff6692",  # Pink
        "grid": "#444444",
        "axis": "#9e9e9e",
    }

    @staticmethod
    def get_palette(scheme: str = "phase_plane") -> Palette:
        """
        Get a palette by name (returns a copy).

        Parameters
        ----------
        scheme : str
            'phase_plane' (alias 'default'), 'colorblind_safe'
            (alias 'wong'), or 'dark'

        Raises
        ------
        ValueError
            If scheme name is not recognized
        """
        scheme_lower = scheme.lower().replace("-", "_").replace(" ", "_")

        if scheme_lower in ("phase_plane", "default"):
            palette = ColorSchemes.PHASE_PLANE
        elif scheme_lower in ("colorblind_safe", "wong"):
            palette = ColorSchemes.COLORBLIND_SAFE
        elif scheme_lower == "dark":
            palette = ColorSchemes.DARK
        else:
            raise ValueError(
                f"Unknown color scheme '{scheme}'. Available: phase_plane, colorblind_safe, dark"
            )

        return dict(palette)


class PlotThemes:
    """
    Complete plotting theme configurations.

    A theme combines a Plotly template, fonts, a palette, and stroke
    widths. Custom themes are plain dictionaries with the same keys;
    missing keys fall back to DEFAULT.

    Examples
    --------
    >>> custom = dict(PlotThemes.DEFAULT, font_size=16, trajectory_width=2.0)
    >>> config = PlotThemes.get_theme(custom)
    >>> config["palette"]
    'phase_plane'
    """

    DEFAULT = {
        "palette": "phase_plane",
        "template": "plotly_white",
        "font_family": "Arial, sans-serif",
        "font_size": 12,
        "trajectory_width": 1.0,
        "nullcline_width": 1.2,
        "equilibrium_size": 12,
    }

    PUBLICATION = {
        "palette": "colorblind_safe",
        "template": "simple_white",
        "font_family": "Times New Roman, serif",
        "font_size": 14,
        "trajectory_width": 1.5,
        "nullcline_width": 1.5,
        "equilibrium_size": 12,
    }

    DARK = {
        "palette": "dark",
        "template": "plotly_dark",
        "font_family": "Arial, sans-serif",
        "font_size": 12,
        "trajectory_width": 1.0,
        "nullcline_width": 1.2,
        "equilibrium_size": 12,
    }

    @staticmethod
    def get_theme(theme: Union[str, dict] = "default") -> dict:
        """
        Resolve a theme name or dictionary to a full configuration.

        Raises
        ------
        ValueError
            If theme name is not recognized
        TypeError
            If theme is neither str nor dict
        """
        if isinstance(theme, str):
            theme_lower = theme.lower()
            if theme_lower == "default":
                config = PlotThemes.DEFAULT
            elif theme_lower == "publication":
                config = PlotThemes.PUBLICATION
            elif theme_lower == "dark":
                config = PlotThemes.DARK
            else:
                raise ValueError(f"Unknown theme '{theme}'. Available: default, publication, dark")
        elif isinstance(theme, dict):
            config = theme
        else:
            raise TypeError("theme must be str or dict")

        return {**PlotThemes.DEFAULT, **config}

    @staticmethod
    def apply_theme(fig: go.Figure, theme: Union[str, dict] = "default") -> go.Figure:
        """
        Apply the template and fonts of a theme to a figure.

        Stroke colours and widths are chosen when traces are created
        (see PhasePlanePlotter); this only restyles figure-wide settings.

        Parameters
        ----------
        fig : go.Figure
            Figure to style (modified in place and returned)
        theme : str or dict
            Theme name ('default', 'publication', 'dark') or dictionary

        Returns
        -------
        go.Figure
        """
        config = PlotThemes.get_theme(theme)
        fig.update_layout(
            template=config["template"],
            font=dict(family=config["font_family"], size=config["font_size"]),
        )
        return fig


# ============================================================================
# Color Manipulation Utilities
# ============================================================================


def hex_to_rgb(hex_color: str) -> Tuple[int, int, int]:
    """
    Convert '#rrggbb' to an (r, g, b) tuple of ints in [0, 255].

    Raises
    ------
    ValueError
        If the string is not a 6-digit hex colour

    Examples
    --------
    >>> hex_to_rgb('#44bb88')
    (68, 187, 136)
    """
    digits = hex_color.lstrip("#")
    if len(digits) != 6:
        raise ValueError(f"Expected a '#rrggbb' colour, got {hex_color!r}")
    return (int(digits[0:2], 16), int(digits[2:4], 16), int(digits[4:6], 16))


def rgb_to_hex(r: int, g: int, b: int) -> str:
    """Convert RGB ints to '#rrggbb' (values are clamped to [0, 255])."""
    r, g, b = (max(0, min(255, int(c))) for c in (r, g, b))
    return f"#{r:02x}{g:02x}{b:02x}"


def with_alpha(hex_color: str, alpha: float) -> str:
    """
    Plotly 'rgba(...)' string for a hex colour with opacity alpha.

    Examples
    --------
    >>> with_alpha('#3367d6', 0.5)
    'rgba(51, 103, 214, 0.5)'
    """
    r, g, b = hex_to_rgb(hex_color)
    return f"rgba({r}, {g}, {b}, {alpha})"


def lighten_color(hex_color: str, factor: float = 0.2) -> str:
    """
    Move a colour toward white (factor > 0) or black (factor < 0).

    Examples
    --------
    >>> lighten_color('#000000', 0.5)
    '#7f7f7f'
    >>> lighten_color('#ffffff', -1.0)
    '#000000'
    """
    r, g, b = hex_to_rgb(hex_color)
    if factor > 0:
        return rgb_to_hex(*(c + (255 - c) * factor for c in (r, g, b)))
    return rgb_to_hex(*(c * (1 + factor) for c in (r, g, b)))


__all__ = [
    "Palette",
    "PALETTE_KEYS",
    "ColorSchemes",
    "PlotThemes",
    "hex_to_rgb",
    "rgb_to_hex",
    "with_alpha",
    "lighten_color",
]
