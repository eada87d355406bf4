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
Option Types and Defaults

Keyword options accepted by the session and the renderer, each described
by a TypedDict and backed by a defaults dictionary. Options are merged
with ``resolve_options`` which rejects unknown keys early instead of
silently ignoring a typo.

Usage
-----
>>> from phaseplane.types.options import (
...     DEFAULT_INTEGRATION_OPTIONS,
...     resolve_options,
... )
>>>
>>> opts = resolve_options(DEFAULT_INTEGRATION_OPTIONS, {"dt": 0.01})
>>> opts["steps"]
20000
"""

from typing import Any, Dict, Mapping, Optional, Tuple

from typing_extensions import TypedDict


class IntegrationOptions(TypedDict, total=False):
    """
    Trajectory integration options.

    Attributes
    ----------
    dt : float
        Fixed step size (magnitude; backward runs use -dt)
    steps : int
        Step cap per direction
    bounds_factor : float
        Half-extent multiplier applied to the view to get the
        integration rectangle
    """

    dt: float
    steps: int
    bounds_factor: float


class NullclineOptions(TypedDict, total=False):
    """
    Nullcline extraction options.

    Attributes
    ----------
    density : int
        Grid cells per axis
    min_density : int
        Lower clamp applied to density
    stitch_tol : float
        Endpoint merge tolerance in screen pixels
    """

    density: int
    min_density: int
    stitch_tol: float


class EquilibriumOptions(TypedDict, total=False):
    """
    Equilibrium search options.

    Attributes
    ----------
    density : int
        Grid cells per axis for both contour extractions
    min_density : int
        Lower clamp applied to density
    newton_iterations : int
        Maximum Newton refinement iterations per candidate
    """

    density: int
    min_density: int
    newton_iterations: int


class VectorFieldOptions(TypedDict, total=False):
    """
    Direction field rendering options.

    Attributes
    ----------
    density : int
        Arrows per axis
    arrow_scale : float
        Arrow length as a fraction of the smaller cell side
    """

    density: int
    arrow_scale: float


class SessionOptions(TypedDict, total=False):
    """
    Interactive session options.

    Attributes
    ----------
    history_limit : int
        Maximum number of trajectories kept (most recent first)
    zoom_step : float
        Zoom factor applied per wheel notch
    click_tolerance : float
        Maximum pointer travel in pixels for a press/release to count
        as a click rather than a drag
    random_seed_count : int
        Trajectories added by one random-seeding request
    initial_view : Tuple[float, float, float, float]
        (xmin, xmax, ymin, ymax) used at start-up and on reset
    """

    history_limit: int
    zoom_step: float
    click_tolerance: float
    random_seed_count: int
    initial_view: Tuple[float, float, float, float]


# ============================================================================
# Defaults
# ============================================================================

DEFAULT_INTEGRATION_OPTIONS: IntegrationOptions = {
    "dt": 0.001,
    "steps": 20000,
    "bounds_factor": 3.0,
}

DEFAULT_NULLCLINE_OPTIONS: NullclineOptions = {
    "density": 200,
    "min_density": 8,
    "stitch_tol": 0.5,
}

DEFAULT_EQUILIBRIUM_OPTIONS: EquilibriumOptions = {
    "density": 160,
    "min_density": 8,
    "newton_iterations": 3,
}

DEFAULT_VECTOR_FIELD_OPTIONS: VectorFieldOptions = {
    "density": 18,
    "arrow_scale": 0.35,
}

DEFAULT_SESSION_OPTIONS: SessionOptions = {
    "history_limit": 1000,
    "zoom_step": 1.1,
    "click_tolerance": 5.0,
    "random_seed_count": 10,
    "initial_view": (-10.0, 10.0, -10.0, 10.0),
}


def resolve_options(
    defaults: Mapping[str, Any], overrides: Optional[Mapping[str, Any]] = None
) -> Dict[str, Any]:
    """
    Merge user overrides into a defaults dictionary.

    Parameters
    ----------
    defaults : Mapping
        One of the DEFAULT_*_OPTIONS dictionaries
    overrides : Optional[Mapping]
        User-supplied values; None means "use defaults"

    Returns
    -------
    dict
        New dictionary; neither input is modified

    Raises
    ------
    ValueError
        If overrides contains a key not present in defaults

    Examples
    --------
    >>> resolve_options(DEFAULT_VECTOR_FIELD_OPTIONS, {"density": 25})
    {'density': 25, 'arrow_scale': 0.35}
    >>> resolve_options(DEFAULT_VECTOR_FIELD_OPTIONS, {"densty": 25})
    Traceback (most recent call last):
        ...
    ValueError: Unknown option(s) ['densty']. Valid options: ['density', 'arrow_scale']
    """
    merged = dict(defaults)
    if not overrides:
        return merged

    unknown = [key for key in overrides if key not in defaults]
    if unknown:
        raise ValueError(f"Unknown option(s) {unknown}. Valid options: {list(defaults.keys())}")

    merged.update(overrides)
    return merged


__all__ = [
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
