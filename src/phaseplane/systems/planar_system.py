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
Planar System - Immutable Autonomous 2D Vector Field

Holds the two right-hand sides of

    dx/dt = f(x, y; p)
    dy/dt = g(x, y; p)

together with the parameter mapping p they are evaluated with. Instances
are values: parameters are frozen at construction and ``with_params``
returns a new system.
"""

from types import MappingProxyType
from typing import Mapping, Optional, Tuple

from phaseplane.types.core import ParameterMap, ScalarField, SystemFunction


class PlanarSystem:
    """
    Autonomous planar ODE system.

    Satisfies PlanarSystemProtocol, so it can be passed to every core
    routine (integration, contour extraction, equilibrium search).

    Parameters
    ----------
    f : SystemFunction
        Horizontal component f(x, y, params) -> float
    g : SystemFunction
        Vertical component g(x, y, params) -> float
    params : Optional[Mapping[str, float]]
        Parameter values; copied and frozen
    name : str
        Display name

    Examples
    --------
    >>> harmonic = PlanarSystem(
    ...     f=lambda x, y, p: y,
    ...     g=lambda x, y, p: -p["k"] * x,
    ...     params={"k": 4.0},
    ... )
    >>> harmonic.evaluate(1.0, 0.0)
    (0.0, -4.0)
    >>> stiffer = harmonic.with_params(k=9.0)
    >>> harmonic.params["k"], stiffer.params["k"]
    (4.0, 9.0)
    """

    __slots__ = ("_f", "_g", "_params", "_name")

    def __init__(
        self,
        f: SystemFunction,
        g: SystemFunction,
        params: Optional[Mapping[str, float]] = None,
        name: str = "planar system",
    ):
        if not callable(f) or not callable(g):
            raise ValueError("PlanarSystem requires callable f and g")

        self._f = f
        self._g = g
        self._params = MappingProxyType({k: float(v) for k, v in (params or {}).items()})
        self._name = name

    # =========================================================================
    # Protocol members
    # =========================================================================

    @property
    def f(self) -> SystemFunction:
        return self._f

    @property
    def g(self) -> SystemFunction:
        return self._g

    @property
    def params(self) -> ParameterMap:
        """Read-only view of the parameter values."""
        return self._params

    @property
    def name(self) -> str:
        return self._name

    # =========================================================================
    # Evaluation
    # =========================================================================

    def evaluate(self, x: float, y: float) -> Tuple[float, float]:
        """Velocity (f, g) at (x, y)."""
        return (self._f(x, y, self._params), self._g(x, y, self._params))

    def f_field(self) -> ScalarField:
        """f as a ScalarField with the parameters bound (the x-nullcline field)."""
        f, params = self._f, self._params
        return lambda x, y: f(x, y, params)

    def g_field(self) -> ScalarField:
        """g as a ScalarField with the parameters bound (the y-nullcline field)."""
        g, params = self._g, self._params
        return lambda x, y: g(x, y, params)

    def with_params(self, **updates: float) -> "PlanarSystem":
        """
        New system with some parameters replaced.

        Raises
        ------
        ValueError
            If an update names a parameter the system does not have
        """
        unknown = [k for k in updates if k not in self._params]
        if unknown:
            raise ValueError(
                f"Unknown parameter(s) {unknown}. Available: {list(self._params.keys())}"
            )
        merged = dict(self._params)
        merged.update(updates)
        return PlanarSystem(self._f, self._g, merged, name=self._name)

    def __repr__(self) -> str:
        params = ", ".join(f"{k}={v:g}" for k, v in self._params.items())
        return f"PlanarSystem({self._name!r}, {params})" if params else f"PlanarSystem({self._name!r})"


__all__ = ["PlanarSystem"]
