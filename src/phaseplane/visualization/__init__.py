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
Visualization Tools
===================

Plotly rendering of phase-plane views.

Plotting
--------
>>> from phaseplane.visualization import PhasePlanePlotter
>>>
>>> plotter = PhasePlanePlotter()
>>> fig = plotter.plot(view, system, trajectories, show_nullclines=True)
>>> fig.show()
>>>
>>> # Everything a session holds
>>> fig = plotter.plot_session(session, show_equilibria=True)

Themes and Styling
------------------
>>> from phaseplane.visualization import ColorSchemes, PlotThemes
>>>
>>> palette = ColorSchemes.get_palette("colorblind_safe")
>>> plotter = PhasePlanePlotter(theme="publication")

Authors
-------
Gil Benezer

License
-------
GNU Affero General Public License v3.0
"""

# Plotters
from .phase_plane_plotter import PhasePlanePlotter, nice_step, vector_field_arrows

# Themes and styling
from .themes import (
    PALETTE_KEYS,
    ColorSchemes,
    Palette,
    PlotThemes,
    hex_to_rgb,
    lighten_color,
    rgb_to_hex,
    with_alpha,
)

__all__ = [
    # Plotters
    "PhasePlanePlotter",
    "nice_step",
    "vector_field_arrows",
    # Themes and styling
    "Palette",
    "PALETTE_KEYS",
    "ColorSchemes",
    "PlotThemes",
    "hex_to_rgb",
    "rgb_to_hex",
    "with_alpha",
    "lighten_color",
]
