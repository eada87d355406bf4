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
Unit Tests for BoundedRK4Integrator
===================================

Tests cover:
1. Single-step accuracy against closed-form solutions
2. Termination: step cap, leaving the bounds, non-finite state
3. Result structure and statistics
4. Functional interface (rk4, integrate_bidirectional)
5. Long runs on a conservative system
6. Determinism of repeated runs
"""

import math

import numpy as np
import pytest

from phaseplane.geometry.view_transform import ViewRect
from phaseplane.integration.rk4_integrator import (
    BoundedRK4Integrator,
    integrate_bidirectional,
    rk4,
)
from phaseplane.systems.builtin import load_builtin
from phaseplane.systems.planar_system import PlanarSystem
from phaseplane.types.core import Point

# ============================================================================
# Fixtures
# ============================================================================


@pytest.fixture
def decay():
    """dx/dt = -x, dy/dt = -2y"""
    return PlanarSystem(lambda x, y, p: -x, lambda x, y, p: -2.0 * y, name="decay")


@pytest.fixture
def rotation():
    """Rigid rotation: circles about the origin."""
    return PlanarSystem(lambda x, y, p: -y, lambda x, y, p: x, name="rotation")


@pytest.fixture
def drift():
    """Constant velocity to the right."""
    return PlanarSystem(lambda x, y, p: 1.0, lambda x, y, p: 0.0, name="drift")


@pytest.fixture
def blowup():
    """dx/dt = x^2 from x = 1 escapes to infinity at t = 1."""
    return PlanarSystem(lambda x, y, p: x * x, lambda x, y, p: 0.0, name="blowup")


@pytest.fixture
def big_box():
    return ViewRect(-100.0, 100.0, -100.0, 100.0)


# ============================================================================
# Single Step
# ============================================================================


class TestStep:
    """Test one RK4 step."""

    def test_decay_step_matches_exponential(self, decay):
        integrator = BoundedRK4Integrator(decay, dt=0.1)
        x, y = integrator.step(1.0, 1.0)
        # RK4 local error is O(dt^5)
        assert x == pytest.approx(math.exp(-0.1), abs=1e-6)
        assert y == pytest.approx(math.exp(-0.2), abs=1e-5)

    def test_constant_field_is_exact(self, drift):
        integrator = BoundedRK4Integrator(drift, dt=0.25)
        assert integrator.step(1.0, 3.0) == (1.25, 3.0)

    def test_step_uses_override_dt(self, drift):
        integrator = BoundedRK4Integrator(drift, dt=0.25)
        assert integrator.step(0.0, 0.0, dt=-0.5) == (-0.5, 0.0)

    def test_step_counts_four_evaluations(self, decay):
        integrator = BoundedRK4Integrator(decay, dt=0.1)
        integrator.step(1.0, 1.0)
        stats = integrator.get_stats()
        assert stats["total_steps"] == 1
        assert stats["total_fev"] == 4
        assert stats["avg_fev_per_step"] == 4.0

    def test_rotation_preserves_radius_closely(self, rotation):
        integrator = BoundedRK4Integrator(rotation, dt=0.01)
        x, y = 1.0, 0.0
        for _ in range(628):
            x, y = integrator.step(x, y)
        assert math.hypot(x, y) == pytest.approx(1.0, abs=1e-8)


# ============================================================================
# Termination
# ============================================================================


class TestTermination:
    """Test when and how runs stop."""

    def test_max_steps(self, decay, big_box):
        result = BoundedRK4Integrator(decay, dt=0.01, bounds=big_box, max_steps=50).integrate(
            Point(1.0, 1.0)
        )
        assert result["termination"] == "max_steps"
        assert result["x"].shape == (51, 2)
        assert result["nsteps"] == 50
        assert result["success"] is True

    def test_zero_steps_returns_seed_only(self, decay):
        result = BoundedRK4Integrator(decay, dt=0.01, max_steps=0).integrate(Point(2.0, 3.0))
        np.testing.assert_array_equal(result["x"], [[2.0, 3.0]])
        assert result["termination"] == "max_steps"

    def test_out_of_bounds_stops_before_leaving(self, drift):
        bounds = ViewRect(-1.0, 1.0, -1.0, 1.0)
        result = BoundedRK4Integrator(drift, dt=0.25, bounds=bounds, max_steps=100).integrate(
            Point(0.0, 0.0)
        )
        assert result["termination"] == "out_of_bounds"
        # 0.25, 0.5, 0.75, 1.0 accepted (closed rectangle), 1.25 rejected
        np.testing.assert_array_equal(result["x"][:, 0], [0.0, 0.25, 0.5, 0.75, 1.0])

    def test_every_point_after_seed_is_in_bounds(self, rotation):
        bounds = ViewRect(-0.5, 2.0, -0.5, 2.0)
        result = BoundedRK4Integrator(rotation, dt=0.05, bounds=bounds, max_steps=1000).integrate(
            Point(1.0, 0.0)
        )
        pts = result["x"][1:]
        assert np.all(pts[:, 0] >= bounds.xmin) and np.all(pts[:, 0] <= bounds.xmax)
        assert np.all(pts[:, 1] >= bounds.ymin) and np.all(pts[:, 1] <= bounds.ymax)
        assert result["termination"] == "out_of_bounds"

    def test_seed_outside_bounds_is_still_first_row(self, drift):
        bounds = ViewRect(-1.0, 1.0, -1.0, 1.0)
        result = BoundedRK4Integrator(drift, dt=0.1, bounds=bounds, max_steps=10).integrate(
            Point(5.0, 0.0)
        )
        np.testing.assert_array_equal(result["x"], [[5.0, 0.0]])
        assert result["termination"] == "out_of_bounds"

    def test_non_finite_state_terminates(self, blowup):
        result = BoundedRK4Integrator(blowup, dt=0.01, max_steps=10000).integrate(Point(1.0, 0.0))
        assert result["termination"] == "non_finite"
        assert np.all(np.isfinite(result["x"]))
        assert result["nsteps"] < 10000

    def test_nan_field_terminates_immediately(self, big_box):
        system = PlanarSystem(lambda x, y, p: math.nan, lambda x, y, p: 0.0)
        result = BoundedRK4Integrator(system, dt=0.1, bounds=big_box, max_steps=100).integrate(
            Point(1.0, 2.0)
        )
        assert result["termination"] == "non_finite"
        np.testing.assert_array_equal(result["x"], [[1.0, 2.0]])

    def test_no_bounds_never_out_of_bounds(self, drift):
        result = BoundedRK4Integrator(drift, dt=10.0, max_steps=100).integrate(Point(0.0, 0.0))
        assert result["termination"] == "max_steps"
        assert result["x"][-1, 0] == pytest.approx(1000.0)


# ============================================================================
# Validation, Statistics and Display
# ============================================================================


class TestValidationAndStats:
    """Test constructor validation and statistics tracking."""

    @pytest.mark.parametrize("dt", [0.0, math.nan, math.inf])
    def test_invalid_dt(self, decay, dt):
        with pytest.raises(ValueError, match="dt"):
            BoundedRK4Integrator(decay, dt=dt)

    @pytest.mark.parametrize("steps", [-1, 2.5])
    def test_invalid_max_steps(self, decay, steps):
        with pytest.raises(ValueError, match="max_steps"):
            BoundedRK4Integrator(decay, dt=0.1, max_steps=steps)

    def test_result_fields(self, decay, big_box):
        result = BoundedRK4Integrator(decay, dt=0.01, bounds=big_box, max_steps=10).integrate(
            Point(1.0, 1.0)
        )
        assert result["solver"] == "RK4 (Bounded)"
        assert result["nfev"] == 40
        assert result["integration_time"] >= 0.0
        assert "completed" in result["message"]
        assert result["x"].dtype == np.float64

    def test_stats_accumulate_and_reset(self, decay):
        integrator = BoundedRK4Integrator(decay, dt=0.01, max_steps=5)
        integrator.integrate(Point(1.0, 1.0))
        integrator.integrate(Point(1.0, 1.0))
        assert integrator.get_stats()["total_steps"] == 10
        assert integrator.get_stats()["total_fev"] == 40

        integrator.reset_stats()
        stats = integrator.get_stats()
        assert stats["total_steps"] == 0
        assert stats["total_fev"] == 0
        assert stats["total_time"] == 0.0
        assert stats["avg_fev_per_step"] == 0.0

    def test_str_and_repr(self, decay):
        integrator = BoundedRK4Integrator(decay, dt=0.01, max_steps=7)
        assert "RK4 (Bounded)" in str(integrator)
        assert "max_steps=7" in repr(integrator)

    def test_params_are_passed_to_components(self, big_box):
        seen = []
        system = PlanarSystem(
            lambda x, y, p: seen.append(p["k"]) or 0.0,
            lambda x, y, p: 0.0,
            params={"k": 3.0},
        )
        BoundedRK4Integrator(system, dt=0.1, bounds=big_box, max_steps=1).integrate(Point(0.0, 0.0))
        assert seen == [3.0, 3.0, 3.0, 3.0]


# ============================================================================
# Functional Interface
# ============================================================================


class TestFunctionalInterface:
    """Test rk4 and integrate_bidirectional."""

    def test_rk4_returns_points(self, decay, big_box):
        pts = rk4(decay, Point(1.0, 1.0), 0.01, 100, big_box)
        assert pts.shape == (101, 2)
        np.testing.assert_array_equal(pts[0], [1.0, 1.0])
        assert pts[-1, 0] == pytest.approx(math.exp(-1.0), abs=1e-8)

    def test_bidirectional_both_start_at_seed(self, decay, big_box):
        both = integrate_bidirectional(decay, Point(0.5, -0.5), 0.01, 20, big_box)
        np.testing.assert_array_equal(both["forward"][0], [0.5, -0.5])
        np.testing.assert_array_equal(both["backward"][0], [0.5, -0.5])

    def test_backward_runs_in_reverse_time(self, decay, big_box):
        both = integrate_bidirectional(decay, Point(1.0, 1.0), 0.01, 100, big_box)
        assert both["forward"][-1, 0] == pytest.approx(math.exp(-1.0), abs=1e-8)
        assert both["backward"][-1, 0] == pytest.approx(math.exp(1.0), abs=1e-7)

    def test_runs_are_independent(self, drift):
        bounds = ViewRect(-10.0, 0.5, -1.0, 1.0)
        both = integrate_bidirectional(drift, Point(0.0, 0.0), 0.25, 8, bounds)
        # forward leaves the box after two steps, backward runs to the cap
        assert len(both["forward"]) == 3
        assert len(both["backward"]) == 9
        assert both["backward"][-1, 0] == -2.0


# ============================================================================
# Long Runs
# ============================================================================


class TestLotkaVolterraRun:
    """Long run at the interior equilibrium of the predator-prey model."""

    def test_equilibrium_seed_stays_put(self):
        system = load_builtin("lotka_volterra")
        view = ViewRect(-10.0, 10.0, -10.0, 10.0)
        pts = rk4(system, Point(4.0, 2.75), 0.001, 20000, view)
        assert pts.shape == (20001, 2)
        assert np.max(np.abs(pts - [4.0, 2.75])) < 1e-6

    def test_orbit_returns_close_to_itself(self):
        system = load_builtin("lotka_volterra")
        view = ViewRect(-30.0, 30.0, -30.0, 30.0)
        pts = rk4(system, Point(4.0, 1.0), 0.001, 20000, view)
        assert pts.shape == (20001, 2)
        # closed orbit: x stays positive and the path revisits the seed
        assert np.all(pts[:, 0] > 0)
        distances = np.hypot(pts[5000:, 0] - 4.0, pts[5000:, 1] - 1.0)
        assert distances.min() < 0.05


# ============================================================================
# Determinism
# ============================================================================


class TestDeterminism:
    """Identical inputs give bit-identical trajectories."""

    def test_rk4_repeated_calls_are_identical(self):
        system = load_builtin("van_der_pol")
        view = ViewRect(-10.0, 10.0, -10.0, 10.0)
        first = rk4(system, Point(0.5, -1.5), 0.001, 5000, view)
        second = rk4(system, Point(0.5, -1.5), 0.001, 5000, view)
        np.testing.assert_array_equal(first, second)

    def test_bidirectional_repeated_calls_are_identical(self):
        system = load_builtin("lotka_volterra")
        view = ViewRect(-10.0, 10.0, -10.0, 10.0)
        first = integrate_bidirectional(system, Point(2.0, 1.0), 0.001, 5000, view)
        second = integrate_bidirectional(system, Point(2.0, 1.0), 0.001, 5000, view)
        np.testing.assert_array_equal(first["forward"], second["forward"])
        np.testing.assert_array_equal(first["backward"], second["backward"])

    def test_reused_integrator_gives_same_trajectory(self, rotation, big_box):
        integrator = BoundedRK4Integrator(rotation, dt=0.01, bounds=big_box, max_steps=1000)
        first = integrator.integrate(Point(1.0, 0.0))
        second = integrator.integrate(Point(1.0, 0.0))
        np.testing.assert_array_equal(first["x"], second["x"])
        assert first["termination"] == second["termination"]
