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
Unit Tests for the Expression Compiler
======================================

Tests cover:
1. Parsing and validation of right-hand side text
2. Numeric code generation (IEEE semantics, parameter binding)
3. Parameter checks when compiling a system
4. Parsing of user-entered constants
"""

import math
import warnings

import pytest

from phaseplane.systems.expression import (
    DEFAULT_ALLOWED_SYMBOLS,
    ExpressionCompiler,
    ExpressionError,
    compile_system,
    parse_constants,
)
from phaseplane.systems.planar_system import PlanarSystem

LV_PARAMS = {"a": 1.1, "b": 0.4, "c": 0.4, "d": 0.1}


@pytest.fixture
def compiler():
    return ExpressionCompiler()


# ============================================================================
# Construction
# ============================================================================


class TestCompilerConstruction:
    """Test allowed symbol handling."""

    def test_default_symbols(self, compiler):
        assert compiler.allowed_symbols == DEFAULT_ALLOWED_SYMBOLS
        assert compiler.parameter_names == ("t", "a", "b", "c", "d", "e")

    def test_custom_symbols_deduplicated(self):
        compiler = ExpressionCompiler(("x", "y", "mu", "mu"))
        assert compiler.allowed_symbols == ("x", "y", "mu")
        assert compiler.parameter_names == ("mu",)

    def test_state_symbols_required(self):
        with pytest.raises(ValueError, match="state symbols"):
            ExpressionCompiler(("x", "mu"))


# ============================================================================
# Parsing and Validation
# ============================================================================


class TestParsing:
    """Test text to expression parsing."""

    @pytest.mark.parametrize(
        "text",
        ["a*x - b*x*y", "x^2 + y**2", "sin(x) * exp(-y)", "sqrt(x*x + 1)", "pi*x", "e*t + c"],
    )
    def test_valid(self, compiler, text):
        assert compiler.validate(text)

    @pytest.mark.parametrize("text", ["", "   ", "x +", "x + z", "foo(x)", "sqrt(-1)*x"])
    def test_invalid(self, compiler, text):
        assert not compiler.validate(text)

    def test_caret_is_power(self, compiler):
        assert compiler.parse("x^2") == compiler.parse("x**2")

    def test_unknown_symbol_message(self, compiler):
        with pytest.raises(ExpressionError, match="unknown symbol"):
            compiler.parse("x + q")

    def test_empty_message(self, compiler):
        with pytest.raises(ExpressionError, match="empty"):
            compiler.parse("")

    def test_expression_error_is_value_error(self, compiler):
        with pytest.raises(ValueError):
            compiler.parse("x + (")

    def test_non_string(self, compiler):
        with pytest.raises(ExpressionError):
            compiler.parse(None)


# ============================================================================
# Code Generation
# ============================================================================


class TestCompileFunction:
    """Test generated numeric components."""

    def test_evaluates_with_params(self, compiler):
        func = compiler.compile_function(compiler.parse("a*x - b*x*y"))
        assert func(2.0, 1.0, {"a": 1.0, "b": 0.5}) == pytest.approx(1.0)

    def test_missing_params_are_zero(self, compiler):
        func = compiler.compile_function(compiler.parse("a*x + 3"))
        assert func(5.0, 0.0, {}) == 3.0

    def test_returns_python_float(self, compiler):
        func = compiler.compile_function(compiler.parse("x + y"))
        assert type(func(1.0, 2.0, {})) is float

    def test_division_by_zero_is_infinite(self, compiler):
        func = compiler.compile_function(compiler.parse("1/x"))
        assert math.isinf(func(0.0, 0.0, {}))

    def test_invalid_operation_is_nan(self, compiler):
        func = compiler.compile_function(compiler.parse("log(x)"))
        with warnings.catch_warnings():
            warnings.simplefilter("error")
            value = func(-1.0, 0.0, {})
        assert math.isnan(value)

    def test_constant_expression(self, compiler):
        func = compiler.compile_function(compiler.parse("2.5"))
        assert func(10.0, -10.0, {}) == 2.5


# ============================================================================
# System Compilation
# ============================================================================


class TestCompileSystem:
    """Test building a PlanarSystem from text."""

    def test_lotka_volterra(self, compiler):
        system = compiler.compile_system("a*x - b*x*y", "-c*y + d*x*y", LV_PARAMS)
        assert isinstance(system, PlanarSystem)
        fv, gv = system.evaluate(1.0, 1.0)
        assert fv == pytest.approx(0.7)
        assert gv == pytest.approx(-0.3)

    def test_default_name(self, compiler):
        system = compiler.compile_system("y", "-x")
        assert system.name == "dx/dt = y, dy/dt = -x"

    def test_unset_params_default_to_zero(self, compiler):
        system = compiler.compile_system("a*x", "y", {})
        assert system.params["a"] == 0.0
        assert system.evaluate(3.0, 1.0) == (0.0, 1.0)

    def test_unknown_param(self, compiler):
        with pytest.raises(ExpressionError, match="Unknown parameter"):
            compiler.compile_system("x", "y", {"zeta": 1.0})

    @pytest.mark.parametrize("value", ["abc", float("nan"), float("inf")])
    def test_bad_param_value(self, compiler, value):
        with pytest.raises(ExpressionError, match="Parameter 'a'"):
            compiler.compile_system("a*x", "y", {"a": value})

    def test_numeric_string_param_accepted(self, compiler):
        system = compiler.compile_system("a*x", "y", {"a": "2"})
        assert system.params["a"] == 2.0

    def test_constant_field_warns(self, compiler):
        with pytest.warns(UserWarning, match="does not depend on x or y"):
            compiler.compile_system("1", "x")

    def test_invalid_expression_raises(self, compiler):
        with pytest.raises(ExpressionError):
            compiler.compile_system("x + z", "y")

    def test_with_params_keeps_compiled_components(self, compiler):
        system = compiler.compile_system("a*x", "y", {"a": 1.0}).with_params(a=3.0)
        assert system.evaluate(2.0, 0.0) == (6.0, 0.0)

    def test_module_shortcut(self):
        system = compile_system("mu*y", "-x", {"mu": 2.0}, allowed_symbols=("x", "y", "mu"))
        assert system.evaluate(0.0, 1.5) == (3.0, 0.0)


# ============================================================================
# Constants
# ============================================================================


class TestParseConstants:
    """Test parsing of constant text fields."""

    def test_mixed(self):
        values, invalid = parse_constants({"a": "1.1", "b": "", "c": "abc", "d": " 2e-1 "})
        assert values == {"a": 1.1, "d": 0.2}
        assert invalid == ["b", "c"]

    @pytest.mark.parametrize("text", ["nan", "inf", "-inf"])
    def test_non_finite_is_invalid(self, text):
        assert parse_constants({"a": text}) == ({}, ["a"])

    def test_none_is_invalid(self):
        assert parse_constants({"a": None}) == ({}, ["a"])

    def test_empty(self):
        assert parse_constants({}) == ({}, [])
