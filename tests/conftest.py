"""Pytest configuration and shared dataset fixtures."""

from __future__ import annotations

import sys
from pathlib import Path

import pytest


def pytest_sessionstart() -> None:
    """Add src directory to sys.path for test imports."""
    project_root = Path(__file__).resolve().parent.parent
    src_path = project_root / "src"
    if str(src_path) not in sys.path:
        sys.path.insert(0, str(src_path))


@pytest.fixture
def sample_dataset():
    """Two objects with distinct points, one constellation left empty."""
    from core.types import Dataset, ObjectSeries, ObservationPoint

    jupiter_points = (
        ObservationPoint(
            julian_date=2451544.5,
            position=(4.0012, 2.9375, 1.1875),
            ra_dec=(0.625, 0.25),
            magnitude=-2.5,
            phase=0.99,
            angular_size=44.25,
            physical_size=142984.0,
            albedo=0.538,
            sun_distance=4.965,
            earth_distance=4.125,
            sun_angular_distance=1.75,
            theta_edo=0.5,
            ecliptic=(0.5625, 4.125, -0.0125),
            constellation="Ari",
        ),
        ObservationPoint(
            julian_date=2451545.5,
            position=(4.0, 2.9, 1.2),
            ra_dec=(0.626, 0.251),
            magnitude=-2.49,
            constellation="Ari",
        ),
    )
    mars_points = (
        ObservationPoint(
            julian_date=2451544.5,
            position=(1.25, -0.5, -0.25),
            ra_dec=(5.875, -0.375),
            magnitude=0.75,
            earth_distance=1.84,
        ),
    )
    return Dataset(
        objects=(
            ObjectSeries(name="jupiter", points=jupiter_points),
            ObjectSeries(name="mars", points=mars_points),
        )
    )
