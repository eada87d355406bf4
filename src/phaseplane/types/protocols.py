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
Structural Subtyping Protocols for phaseplane
=============================================

The numerical core never depends on a concrete system class. Anything that
exposes two right-hand side callables and the parameter mapping they close
over can be integrated, contoured, and searched for equilibria.

**Protocols** (interfaces):
- PlanarSystemProtocol

**Concrete Classes** (implementations):
- phaseplane.systems.PlanarSystem

Usage Examples
--------------
>>> from phaseplane.types.protocols import PlanarSystemProtocol
>>>
>>> def speed_at(system: PlanarSystemProtocol, x: float, y: float) -> float:
...     dx = system.f(x, y, system.params)
...     dy = system.g(x, y, system.params)
...     return math.hypot(dx, dy)
>>>
>>> # Any duck-typed object works:
>>> class Rotation:
...     params = {}
...     @staticmethod
...     def f(x, y, p): return -y
...     @staticmethod
...     def g(x, y, p): return x
>>> speed_at(Rotation(), 1.0, 0.0)
1.0
"""

from typing import Protocol, runtime_checkable

from .core import ParameterMap


@runtime_checkable
class PlanarSystemProtocol(Protocol):
    """
    Autonomous planar system dx/dt = f(x, y), dy/dt = g(x, y).

    Attributes
    ----------
    params : ParameterMap
        Numeric parameters passed as the third argument of f and g

    Notes
    -----
    Implementations must be pure: the same (x, y, params) always returns
    the same value. The core relies on this for determinism.
    """

    @property
    def params(self) -> ParameterMap:
        ...

    def f(self, x: float, y: float, params: ParameterMap) -> float:
        """Horizontal velocity component."""
        ...

    def g(self, x: float, y: float, params: ParameterMap) -> float:
        """Vertical velocity component."""
        ...


__all__ = ["PlanarSystemProtocol"]
