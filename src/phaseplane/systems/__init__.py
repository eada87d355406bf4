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
Systems
=======

Concrete planar systems and the collaborators that produce them.

>>> from phaseplane.systems import PlanarSystem, compile_system, load_builtin
>>>
>>> # From plain callables
>>> rotation = PlanarSystem(lambda x, y, p: -y, lambda x, y, p: x)
>>>
>>> # From user text
>>> system = compile_system("a*x - b*x*y", "-c*y + d*x*y", {"a": 1.1, "b": 0.4})
>>>
>>> # From the catalogue
>>> pendulum = load_builtin("damped_pendulum", beta=0.1)
"""

from .builtin import (
    BUILTIN_SYSTEMS,
    BuiltinDefinition,
    list_builtin_systems,
    load_builtin,
)
from .expression import (
    DEFAULT_ALLOWED_SYMBOLS,
    STATE_SYMBOLS,
    ExpressionCompiler,
    ExpressionError,
    compile_system,
    parse_constants,
)
from .planar_system import PlanarSystem

__all__ = [
    "PlanarSystem",
    # Expression compiler
    "ExpressionCompiler",
    "ExpressionError",
    "compile_system",
    "parse_constants",
    "STATE_SYMBOLS",
    "DEFAULT_ALLOWED_SYMBOLS",
    # Built-ins
    "BuiltinDefinition",
    "BUILTIN_SYSTEMS",
    "list_builtin_systems",
    "load_builtin",
]
