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
Built-in Planar Systems

A small catalogue of classic two-dimensional autonomous systems, written
as right-hand side expressions and compiled on demand through the
ExpressionCompiler.

>>> system = load_builtin("lotka_volterra")
>>> system.params["a"]
1.1
>>> faster = load_builtin("van_der_pol", mu=3.0)
"""

from dataclasses import dataclass, field
from typing import Dict, List, Tuple

from phaseplane.systems.expression import (
    DEFAULT_ALLOWED_SYMBOLS,
    ExpressionCompiler,
)
from phaseplane.systems.planar_system import PlanarSystem


@dataclass(frozen=True)
class BuiltinDefinition:
    """
    Text definition of a built-in system.

    Attributes
    ----------
    f, g : str
        Right-hand sides for dx/dt and dy/dt
    params : Dict[str, float]
        Default parameter values
    symbols : Tuple[str, ...]
        Allowed symbols (state first)
    description : str
        One-line summary
    """

    f: str
    g: str
    params: Dict[str, float] = field(default_factory=dict)
    symbols: Tuple[str, ...] = DEFAULT_ALLOWED_SYMBOLS
    description: str = ""


BUILTIN_SYSTEMS: Dict[str, BuiltinDefinition] = {
    # Predator-prey model. Equilibria at (0, 0) (saddle) and
    # (c/d, a/b) (centre). Closed orbits around the centre.
    "lotka_volterra": BuiltinDefinition(
        f="a*x - b*x*y",
        g="-c*y + d*x*y",
        params={"a": 1.1, "b": 0.4, "c": 0.4, "d": 0.1},
        symbols=("x", "y", "a", "b", "c", "d"),
        description="Predator-prey: x prey, y predators",
    ),
    # Relaxation oscillator with a single unstable focus/node at the
    # origin and an attracting limit cycle.
    "van_der_pol": BuiltinDefinition(
        f="y",
        g="mu*(1 - x^2)*y - x",
        params={"mu": 1.0},
        symbols=("x", "y", "mu"),
        description="Van der Pol oscillator with nonlinear damping mu",
    ),
    # x = angle, y = angular velocity. Equilibria at (k*pi, 0): stable
    # for even k (hanging), saddles for odd k (inverted).
    "damped_pendulum": BuiltinDefinition(
        f="y",
        g="-omega^2*sin(x) - beta*y",
        params={"omega": 1.0, "beta": 0.25},
        symbols=("x", "y", "omega", "beta"),
        description="Pendulum with natural frequency omega and damping beta",
    ),
    # Unforced Duffing oscillator. With alpha < 0 < beta: double well,
    # saddle at the origin and two stable foci at x = +-sqrt(-alpha/beta).
    "duffing": BuiltinDefinition(
        f="y",
        g="-delta*y - alpha*x - beta*x^3",
        params={"alpha": -1.0, "beta": 1.0, "delta": 0.2},
        symbols=("x", "y", "alpha", "beta", "delta"),
        description="Unforced Duffing oscillator (double-well for alpha < 0)",
    ),
    # General linear system; the origin is the only equilibrium unless
    # the matrix [[a, b], [c, d]] is singular.
    "linear": BuiltinDefinition(
        f="a*x + b*y",
        g="c*x + d*y",
        params={"a": 0.0, "b": 1.0, "c": -1.0, "d": 0.0},
        symbols=("x", "y", "a", "b", "c", "d"),
        description="Linear system dX/dt = [[a, b], [c, d]] X",
    ),
}


def list_builtin_systems() -> List[str]:
    """Names of all built-in systems."""
    return list(BUILTIN_SYSTEMS.keys())


def load_builtin(name: str, **param_overrides: float) -> PlanarSystem:
    """
    Compile a built-in system.

    Parameters
    ----------
    name : str
        Key of BUILTIN_SYSTEMS
    **param_overrides : float
        Replacement parameter values

    Returns
    -------
    PlanarSystem

    Raises
    ------
    ValueError
        If the name is unknown or an override names a parameter the
        system does not define
    """
    if name not in BUILTIN_SYSTEMS:
        raise ValueError(f"Unknown built-in system '{name}'. Available: {list_builtin_systems()}")

    definition = BUILTIN_SYSTEMS[name]
    unknown = [k for k in param_overrides if k not in definition.params]
    if unknown:
        raise ValueError(
            f"Unknown parameter(s) {unknown} for '{name}'. "
            f"Available: {list(definition.params.keys())}"
        )

    params = {**definition.params, **param_overrides}
    compiler = ExpressionCompiler(allowed_symbols=definition.symbols)
    return compiler.compile_system(definition.f, definition.g, params, name=name)


__all__ = [
    "BuiltinDefinition",
    "BUILTIN_SYSTEMS",
    "list_builtin_systems",
    "load_builtin",
]
