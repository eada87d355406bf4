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
Integration
===========

Fixed-step integrators for planar autonomous systems that stop as soon as
a trajectory becomes non-finite or leaves a bounding rectangle.

>>> from phaseplane.integration import BoundedRK4Integrator, integrate_bidirectional
>>>
>>> integrator = BoundedRK4Integrator(system, dt=0.001, bounds=bounds)
>>> result = integrator.integrate(seed)
>>> result["termination"], result["nsteps"]
>>>
>>> # Forward and backward from the same seed
>>> both = integrate_bidirectional(system, seed, 0.001, 20000, bounds)

Authors
-------
Gil Benezer

License
-------
GNU Affero General Public License v3.0
"""

from .integrator_base import IntegratorBase
from .rk4_integrator import BoundedRK4Integrator, integrate_bidirectional, rk4

__all__ = [
    "IntegratorBase",
    "BoundedRK4Integrator",
    "rk4",
    "integrate_bidirectional",
]
