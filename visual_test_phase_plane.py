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
Visual Test Suite for the Phase Plane Plotter

Generates HTML files for visual inspection of phase-plane rendering:
direction fields, trajectories, seed chevrons, nullclines and equilibria
for the built-in systems, plus zoom/pan views and themes.

Usage:
    python visual_test_phase_plane.py

Output:
    Creates HTML files in ./visual_tests/phase_plane/
"""

from pathlib import Path

import numpy as np

from phaseplane import (
    PhasePlanePlotter,
    PhasePlaneSession,
    ViewRect,
    load_builtin,
    verify_equilibria,
)
from phaseplane.types.core import Point

WIDTH = 700
HEIGHT = 700


def setup_output_directory():
    """Create output directory for visual tests."""
    output_dir = Path("visual_tests/phase_plane")
    output_dir.mkdir(parents=True, exist_ok=True)
    return output_dir


def seeded_session(system_name, seeds, view=None, **params):
    """Session for a built-in system with a few trajectories already drawn."""
    session = PhasePlaneSession(system=load_builtin(system_name, **params))
    if view is not None:
        session.view = view
    for seed in seeds:
        session.add_seed(Point(*seed))
    return session


def save(fig, output_dir, filename):
    fig.write_html(output_dir / filename)
    print(f"  ✓ Saved: {filename}")


def test_1_lotka_volterra(output_dir):
    """Test 1: Predator-prey closed orbits with nullclines and equilibria."""
    print("Generating Test 1: Lotka-Volterra...")

    session = seeded_session("lotka_volterra", [(4.0, 1.0), (2.0, 2.0), (6.0, 4.0), (1.0, 5.0)])
    reports = verify_equilibria(session.system, session.equilibria())
    print(f"  Equilibria: {[(round(r['point'].x, 4), round(r['point'].y, 4)) for r in reports]}")

    fig = PhasePlanePlotter().plot_session(
        session,
        WIDTH,
        HEIGHT,
        show_nullclines=True,
        show_equilibria=True,
        title="Test 1: Lotka-Volterra",
    )
    save(fig, output_dir, "01_lotka_volterra.html")


def test_2_van_der_pol(output_dir):
    """Test 2: Limit cycle approached from inside and outside."""
    print("Generating Test 2: Van der Pol...")

    session = seeded_session("van_der_pol", [(0.1, 0.0), (4.0, 4.0), (-3.0, -5.0)], mu=1.5)
    fig = PhasePlanePlotter(backward_shade=0.6).plot_session(
        session, WIDTH, HEIGHT, show_nullclines=True, title="Test 2: Van der Pol (mu = 1.5)"
    )
    save(fig, output_dir, "02_van_der_pol.html")


def test_3_damped_pendulum(output_dir):
    """Test 3: Stable and saddle equilibria along the angle axis."""
    print("Generating Test 3: Damped pendulum...")

    seeds = [(-8.0, 3.0), (-2.0, 2.5), (0.0, 3.0), (3.0, -1.0), (6.0, 2.0)]
    session = seeded_session("damped_pendulum", seeds)
    fig = PhasePlanePlotter().plot_session(
        session,
        WIDTH,
        HEIGHT,
        show_nullclines=True,
        show_equilibria=True,
        title="Test 3: Damped Pendulum",
    )
    save(fig, output_dir, "03_damped_pendulum.html")


def test_4_duffing(output_dir):
    """Test 4: Double-well Duffing oscillator."""
    print("Generating Test 4: Duffing oscillator...")

    session = seeded_session("duffing", [(0.0, 0.5), (0.1, -0.05), (-2.0, 1.0)])
    session.view = session.view.zoom(0.0, 0.0, 4.0)
    fig = PhasePlanePlotter().plot_session(
        session,
        WIDTH,
        HEIGHT,
        show_nullclines=True,
        show_equilibria=True,
        title="Test 4: Duffing (zoomed 4x)",
    )
    save(fig, output_dir, "04_duffing_zoomed.html")


def test_5_random_seeds(output_dir):
    """Test 5: Random seeding of a linear centre."""
    print("Generating Test 5: Random seeds...")

    session = PhasePlaneSession(system=load_builtin("linear"))
    session.add_random_seeds(count=12, rng=np.random.default_rng(2025))
    fig = PhasePlanePlotter().plot_session(session, WIDTH, HEIGHT, title="Test 5: Random Seeds")
    save(fig, output_dir, "05_random_seeds.html")


def test_6_pan_and_zoom(output_dir):
    """Test 6: View after a drag and three wheel notches."""
    print("Generating Test 6: Pan and zoom...")

    session = seeded_session("lotka_volterra", [(4.0, 1.5)])
    session.pan_by_pixels(-140, 70, WIDTH, HEIGHT)
    for _ in range(3):
        session.zoom_at_pixel(WIDTH / 2, HEIGHT / 2, WIDTH, HEIGHT, zoom_in=True)
    session.add_seed_at_pixel(WIDTH / 3, HEIGHT / 3, WIDTH, HEIGHT)
    print(f"  View: {session.view}")

    fig = PhasePlanePlotter().plot_session(
        session, WIDTH, HEIGHT, show_nullclines=True, title="Test 6: Panned and Zoomed"
    )
    save(fig, output_dir, "06_pan_and_zoom.html")


def test_7_custom_expressions(output_dir):
    """Test 7: System typed as text."""
    print("Generating Test 7: Custom expressions...")

    session = PhasePlaneSession()
    session.set_expressions("y", "-a*sin(x) + b*cos(y)", {"a": "1.0", "b": "0.3"})
    for seed in [(-2.0, 0.0), (1.0, 1.0), (4.0, -2.0)]:
        session.add_seed(Point(*seed))
    fig = PhasePlanePlotter().plot_session(
        session, WIDTH, HEIGHT, show_nullclines=True, title="Test 7: Custom Expressions"
    )
    save(fig, output_dir, "07_custom_expressions.html")


def test_8_non_square_view(output_dir):
    """Test 8: Direction chevrons and arrows in a stretched view."""
    print("Generating Test 8: Non-square view...")

    session = seeded_session(
        "van_der_pol", [(0.5, 0.5), (-2.0, 8.0)], view=ViewRect(-4.0, 4.0, -15.0, 15.0)
    )
    fig = PhasePlanePlotter().plot_session(
        session, 900, 450, show_nullclines=True, title="Test 8: Non-square View"
    )
    save(fig, output_dir, "08_non_square_view.html")


def test_9_themes(output_dir):
    """Test 9-11: Same plane in each theme."""
    session = seeded_session("lotka_volterra", [(4.0, 1.0), (6.0, 4.0)])
    for index, theme in enumerate(["default", "publication", "dark"], start=9):
        print(f"Generating Test {index}: Theme '{theme}'...")
        fig = PhasePlanePlotter(theme=theme).plot_session(
            session,
            WIDTH,
            HEIGHT,
            show_nullclines=True,
            show_equilibria=True,
            title=f"Test {index}: Theme '{theme}'",
        )
        save(fig, output_dir, f"{index:02d}_theme_{theme}.html")


def generate_index_html(output_dir):
    """Generate index.html for easy navigation."""
    print("\nGenerating index.html...")

    links = "\n".join(
        f'        <li><a href="{path.name}">{path.stem}</a></li>'
        for path in sorted(output_dir.glob("*.html"))
        if path.name != "index.html"
    )
    html_content = f"""<!DOCTYPE html>
<html>
<head>
    <title>Phase Plane Plotter Visual Tests</title>
    <style>
        body {{ font-family: Arial, sans-serif; max-width: 900px; margin: 0 auto; padding: 20px; }}
        h1 {{ color: #333; border-bottom: 3px solid #3367d6; padding-bottom: 10px; }}
        li {{ margin: 6px 0; }}
    </style>
</head>
<body>
    <h1>Phase Plane Plotter Visual Tests</h1>
    <ul>
{links}
    </ul>
</body>
</html>
"""
    (output_dir / "index.html").write_text(html_content, encoding="utf-8")
    print("  ✓ Saved: index.html")


def main():
    """Run all visual tests."""
    print("=" * 70)
    print("Phase Plane Plotter Visual Test Suite")
    print("=" * 70)
    print()

    output_dir = setup_output_directory()
    print(f"Output directory: {output_dir.absolute()}\n")

    test_1_lotka_volterra(output_dir)
    test_2_van_der_pol(output_dir)
    test_3_damped_pendulum(output_dir)
    test_4_duffing(output_dir)
    test_5_random_seeds(output_dir)
    test_6_pan_and_zoom(output_dir)
    test_7_custom_expressions(output_dir)
    test_8_non_square_view(output_dir)
    test_9_themes(output_dir)

    generate_index_html(output_dir)

    print("\n" + "=" * 70)
    print("✓ All visual tests generated successfully!")
    print("=" * 70)
    print(f"\nOpen this file in your browser:")
    print(f"  {(output_dir / 'index.html').absolute()}")
    print()


if __name__ == "__main__":
    main()
