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
Expression Compiler - User Text to PlanarSystem

Turns the two right-hand sides typed by a user ("a*x - b*x*y") into a
PlanarSystem whose components are fast numeric callables. Parsing and
validation use SymPy; code generation uses ``sympy.lambdify`` with the
NumPy module so that floating-point exceptions follow IEEE rules:
division by zero gives inf and invalid operations give nan instead of
raising. The integrator then stops on the first non-finite state.

The numerical core never imports this module.

Usage
-----
>>> compiler = ExpressionCompiler()
>>> compiler.validate("a*x - b*x*y")
True
>>> compiler.validate("x + z")      # z is not an allowed symbol
False
>>> system = compiler.compile_system(
...     "a*x - b*x*y", "-c*y + d*x*y",
...     {"a": 1.1, "b": 0.4, "c": 0.4, "d": 0.1},
... )
>>> system.evaluate(1.0, 1.0)
(0.7000000000000001, -0.30000000000000004)
"""

import math
import warnings
from typing import Dict, List, Mapping, Optional, Sequence, Tuple

import numpy as np
import sympy as sp
from sympy.core.function import AppliedUndef
from sympy.parsing.sympy_parser import (
    convert_xor,
    parse_expr,
    standard_transformations,
)

from phaseplane.systems.planar_system import PlanarSystem
from phaseplane.types.core import ParameterMap, SystemFunction

STATE_SYMBOLS: Tuple[str, str] = ("x", "y")
DEFAULT_ALLOWED_SYMBOLS: Tuple[str, ...] = ("x", "y", "t", "a", "b", "c", "d", "e")

_TRANSFORMATIONS = standard_transformations + (convert_xor,)


class ExpressionError(ValueError):
    """Raised when user text cannot be turned into a numeric field"""

    pass


class ExpressionCompiler:
    """
    Parses, validates, and compiles right-hand side expressions.

    Parameters
    ----------
    allowed_symbols : Sequence[str]
        Names an expression may reference. Must include the state
        symbols 'x' and 'y'; every other name is a parameter.

    Examples
    --------
    >>> compiler = ExpressionCompiler(allowed_symbols=("x", "y", "mu"))
    >>> compiler.parameter_names
    ('mu',)
    >>> vdp = compiler.compile_system("y", "mu*(1 - x^2)*y - x", {"mu": 1.0})
    """

    def __init__(self, allowed_symbols: Sequence[str] = DEFAULT_ALLOWED_SYMBOLS):
        missing = [s for s in STATE_SYMBOLS if s not in allowed_symbols]
        if missing:
            raise ValueError(f"allowed_symbols must include state symbols {missing}")

        self._allowed = tuple(dict.fromkeys(allowed_symbols))
        self._symbols: Dict[str, sp.Symbol] = {
            name: sp.Symbol(name, real=True) for name in self._allowed
        }

    @property
    def allowed_symbols(self) -> Tuple[str, ...]:
        return self._allowed

    @property
    def parameter_names(self) -> Tuple[str, ...]:
        return tuple(n for n in self._allowed if n not in STATE_SYMBOLS)

    # =========================================================================
    # Parsing and Validation
    # =========================================================================

    def parse(self, text: str) -> sp.Expr:
        """
        Parse text into a SymPy expression over the allowed symbols.

        '^' is accepted as exponentiation. Standard functions (sin, exp,
        sqrt, ...) and constants (pi, E) are available.

        Raises
        ------
        ExpressionError
            On empty input, syntax errors, non-scalar results, complex
            constants, or symbols and functions SymPy does not know
        """
        if not isinstance(text, str) or not text.strip():
            raise ExpressionError("Expression is empty")

        try:
            expr = parse_expr(
                text,
                local_dict=dict(self._symbols),
                transformations=_TRANSFORMATIONS,
                evaluate=True,
            )
        except Exception as exc:
            raise ExpressionError(f"Cannot parse expression '{text}': {exc}") from exc

        if not isinstance(expr, sp.Expr):
            raise ExpressionError(f"Expression '{text}' is not a scalar expression")

        unknown = sorted(s.name for s in expr.free_symbols if s.name not in self._allowed)
        if unknown:
            raise ExpressionError(
                f"Expression '{text}' uses unknown symbol(s) {unknown}. "
                f"Allowed: {list(self._allowed)}"
            )

        undefined = sorted(str(fn.func) for fn in expr.atoms(AppliedUndef))
        if undefined:
            raise ExpressionError(f"Expression '{text}' calls unknown function(s) {undefined}")

        if expr.has(sp.I):
            raise ExpressionError(f"Expression '{text}' is complex-valued")

        return expr

    def validate(self, text: str) -> bool:
        """True if text parses into a valid expression."""
        try:
            self.parse(text)
        except ExpressionError:
            return False
        return True

    # =========================================================================
    # Compilation
    # =========================================================================

    def compile_function(self, expr: sp.Expr) -> SystemFunction:
        """
        Generate a numeric component f(x, y, params) from an expression.

        Parameters missing from the mapping passed at call time
        evaluate as 0.0.
        """
        ordered = [self._symbols[name] for name in self._allowed]
        func = sp.lambdify(ordered, expr, modules="numpy")
        names = self.parameter_names

        def component(x: float, y: float, params: ParameterMap) -> float:
            args = [np.float64(params.get(name, 0.0)) for name in names]
            with np.errstate(all="ignore"):
                value = func(np.float64(x), np.float64(y), *args)
            return float(value)

        return component

    def compile_system(
        self,
        f_text: str,
        g_text: str,
        params: Optional[Mapping[str, float]] = None,
        name: Optional[str] = None,
    ) -> PlanarSystem:
        """
        Compile two expressions into a PlanarSystem.

        Parameters
        ----------
        f_text, g_text : str
            Right-hand sides for dx/dt and dy/dt
        params : Optional[Mapping[str, float]]
            Parameter values; every parameter name not given is 0.0
        name : Optional[str]
            Display name; defaults to "dx/dt = ..., dy/dt = ..."

        Returns
        -------
        PlanarSystem

        Raises
        ------
        ExpressionError
            If either expression is invalid, or a parameter is unknown
            or not a finite number
        """
        values = self._check_params(params or {})
        f_expr = self.parse(f_text)
        g_expr = self.parse(g_text)

        state = {self._symbols[s] for s in STATE_SYMBOLS}
        for text, expr in ((f_text, f_expr), (g_text, g_expr)):
            if not expr.free_symbols & state:
                warnings.warn(
                    f"Expression '{text}' does not depend on x or y; its field is constant",
                    UserWarning,
                )

        return PlanarSystem(
            self.compile_function(f_expr),
            self.compile_function(g_expr),
            values,
            name=name or f"dx/dt = {f_text}, dy/dt = {g_text}",
        )

    def _check_params(self, params: Mapping[str, float]) -> Dict[str, float]:
        names = self.parameter_names
        unknown = [k for k in params if k not in names]
        if unknown:
            raise ExpressionError(f"Unknown parameter(s) {unknown}. Available: {list(names)}")

        values = {}
        for key in names:
            raw = params.get(key, 0.0)
            try:
                value = float(raw)
            except (TypeError, ValueError) as exc:
                raise ExpressionError(f"Parameter '{key}' is not numeric: {raw!r}") from exc
            if not math.isfinite(value):
                raise ExpressionError(f"Parameter '{key}' must be finite, got {value}")
            values[key] = value
        return values


def parse_constants(raw: Mapping[str, str]) -> Tuple[Dict[str, float], List[str]]:
    """
    Parse user-entered constant strings.

    Parameters
    ----------
    raw : Mapping[str, str]
        Constant name -> text as typed

    Returns
    -------
    values : Dict[str, float]
        Successfully parsed finite values
    invalid : List[str]
        Names whose text is empty, non-numeric, or not finite

    Examples
    --------
    >>> parse_constants({"a": "1.1", "b": "", "c": "abc", "d": " 2e-1 "})
    ({'a': 1.1, 'd': 0.2}, ['b', 'c'])
    """
    values: Dict[str, float] = {}
    invalid: List[str] = []
    for key, text in raw.items():
        try:
            value = float(text)
        except (TypeError, ValueError):
            invalid.append(key)
            continue
        if not math.isfinite(value):
            invalid.append(key)
            continue
        values[key] = value
    return values, invalid


def compile_system(
    f_text: str,
    g_text: str,
    params: Optional[Mapping[str, float]] = None,
    allowed_symbols: Sequence[str] = DEFAULT_ALLOWED_SYMBOLS,
) -> PlanarSystem:
    """Shortcut for ExpressionCompiler(allowed_symbols).compile_system(...)."""
    return ExpressionCompiler(allowed_symbols).compile_system(f_text, g_text, params)


__all__ = [
    "ExpressionError",
    "ExpressionCompiler",
    "compile_system",
    "parse_constants",
    "STATE_SYMBOLS",
    "DEFAULT_ALLOWED_SYMBOLS",
]
