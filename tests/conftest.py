"""Shared pytest fixtures for summit_panorama tests.

Provides mock elevation models, a synthetic HGT tile builder and a "cone"
landscape used by the end-to-end tests. All fixtures use explicit values
with documented rationale.

COORDINATE SYSTEM:
    Synthetic tiles use a coarse lattice (N = 1200, 3 arc-seconds, about 93 m
    between samples) so that whole tiles stay small. The observer stands at
    lat 0.5 deg, lon 0.2 deg on flat ground at sea level, well inside tile
    N00E000, so every ray of the tests stays on that tile.
"""

from math import cos, radians
from typing import Callable

import numpy as np
import pytest

from summit_panorama.core.elevation_model import CompositeElevationModel, ContinuousElevationModel
from summit_panorama.core.elevation_tile import ElevationTile, parse_tile_name
from summit_panorama.core.geo_calculator import EARTH_RADIUS_M, GeoCalculator
from summit_panorama.core.interval import Interval1D, Interval2D
from summit_panorama.errors import OutOfRangeError
from summit_panorama.model.geo_point import GeoPoint
from summit_panorama.model.summit import Summit

# Coarse lattice keeps synthetic tiles at 1201 x 1201 samples
TEST_SAMPLES_PER_DEGREE = 1200

# Meters per degree of latitude on the spherical Earth (~111,195 m)
METERS_PER_DEGREE = EARTH_RADIUS_M * np.pi / 180

# Observer: 1 m above flat sea-level ground, looking east. At elevation 0
# every ray would be intercepted at the observer itself.
OBSERVER_LON_DEG = 0.2
OBSERVER_LAT_DEG = 0.5
OBSERVER_ELEVATION_M = 1

# Cone: 1000 m tall, 5 km base radius, centred 20 km east of the observer.
# Its near edge is 15 km away along the 90 deg azimuth.
CONE_HEIGHT_M = 1000.0
CONE_RADIUS_M = 5000.0
CONE_DISTANCE_M = 20_000.0
CONE_NEAR_EDGE_M = CONE_DISTANCE_M - CONE_RADIUS_M

# Second cone of the same shape 32 km east: hidden behind the first one
HIDDEN_CONE_DISTANCE_M = 32_000.0


# =============================================================================
# MOCK ELEVATION MODELS
# =============================================================================


class MockDiscreteElevationModel:
    """Discrete elevation model computing samples from a formula of the index.

    Avoids building tiles when a test only needs lattice values:
        elevation = formula(x, y)

    Args:
        formula: Function of the global sample indices (x, y)
        extent: Covered index range; queries outside raise like a real tile
        samples_per_degree: Lattice resolution
    """

    def __init__(
        self,
        formula: Callable[[int, int], float],
        extent: Interval2D,
        samples_per_degree: int = TEST_SAMPLES_PER_DEGREE,
    ) -> None:
        self._formula = formula
        self._extent = extent
        self.samples_per_degree = samples_per_degree
        self.queries: list[tuple[int, int]] = []

    def extent(self) -> Interval2D:
        return self._extent

    def elevation_sample(self, x: int, y: int) -> float:
        if not self._extent.contains(x, y):
            raise OutOfRangeError(f"Sample ({x}, {y}) outside mock extent {self._extent}")
        self.queries.append((x, y))
        return float(self._formula(x, y))


class MockProfile:
    """Elevation profile given directly as a function of distance.

    Lets ray casting tests use simple 1D landscapes (hills, walls) without any
    geodesy involved.

    Example:
        MockProfile(lambda d: max(0.0, 0.1 * (d - 1000)))  # ramp from 1 km
    """

    def __init__(self, ground: Callable[[float], float]) -> None:
        self._ground = ground
        self.calls = 0

    def elevation_at(self, distance: float) -> float:
        self.calls += 1
        return float(self._ground(distance))


# =============================================================================
# SYNTHETIC TILES
# =============================================================================


def tile_bytes(name: str, samples_per_degree: int, elevation_fn: Callable) -> bytes:
    """Build the raw HGT bytes of a tile from an elevation function.

    Args:
        name: Tile name giving the origin, e.g. "N00E000.hgt"
        samples_per_degree: Lattice resolution N
        elevation_fn: Vectorised function (lon_deg, lat_deg) -> meters

    Returns:
        2 * (N + 1)^2 bytes of big-endian int16, north row first.
    """
    lat, lon = parse_tile_name(name)
    steps = np.arange(samples_per_degree + 1) / samples_per_degree
    lon_grid, lat_grid = np.meshgrid(lon + steps, lat + 1 - steps)
    samples = np.rint(elevation_fn(lon_grid, lat_grid)).astype(">i2")
    return samples.tobytes()


def make_tile(name: str, elevation_fn: Callable, samples_per_degree: int = TEST_SAMPLES_PER_DEGREE) -> ElevationTile:
    """Build an in-memory tile from an elevation function of (lon_deg, lat_deg)."""
    return ElevationTile(name, tile_bytes(name, samples_per_degree, elevation_fn), samples_per_degree)


def cone_elevation(center: GeoPoint, height_m: float = CONE_HEIGHT_M, radius_m: float = CONE_RADIUS_M) -> Callable:
    """Vectorised elevation function of a cone on flat ground at sea level.

    Uses an equirectangular approximation around the cone centre, exact to
    well under a meter over a 5 km radius.
    """
    lon_c, lat_c = center.lon_deg, center.lat_deg
    lon_scale = METERS_PER_DEGREE * cos(radians(lat_c))

    def elevation(lon_deg, lat_deg):
        dx = (lon_deg - lon_c) * lon_scale
        dy = (lat_deg - lat_c) * METERS_PER_DEGREE
        return height_m * np.clip(1 - np.hypot(dx, dy) / radius_m, 0, None)

    return elevation


def point_east_of_observer(distance_m: float) -> GeoPoint:
    """Point on the observer's 90 deg great circle at the given distance."""
    lon, lat = GeoCalculator.destination(
        lon=radians(OBSERVER_LON_DEG),
        lat=radians(OBSERVER_LAT_DEG),
        azimuth=radians(90),
        distance_m=distance_m,
    )
    return GeoPoint(longitude=lon, latitude=lat)


# =============================================================================
# FIXTURES
# =============================================================================


@pytest.fixture
def observer() -> GeoPoint:
    """Observer position inside tile N00E000."""
    return GeoPoint.from_degrees(lon=OBSERVER_LON_DEG, lat=OBSERVER_LAT_DEG)


@pytest.fixture
def linear_dem() -> MockDiscreteElevationModel:
    """Lattice where elevation = 2 * x + 3 * y over a small window.

    Bilinear interpolation reproduces a linear function exactly, so any point
    inside the window has a predictable elevation.
    """
    extent = Interval2D(Interval1D(0, 100), Interval1D(0, 100))
    return MockDiscreteElevationModel(lambda x, y: 2 * x + 3 * y, extent)


@pytest.fixture
def flat_cem() -> ContinuousElevationModel:
    """Sea-level plain covering lon/lat [-1, 2] degrees."""
    n = TEST_SAMPLES_PER_DEGREE
    extent = Interval2D(Interval1D(-n, 2 * n), Interval1D(-n, 2 * n))
    return ContinuousElevationModel(MockDiscreteElevationModel(lambda x, y: 0.0, extent))


@pytest.fixture(scope="module")
def cone_tile() -> ElevationTile:
    """Tile N00E000 with a 1000 m cone 20 km east of the observer."""
    return make_tile("N00E000.hgt", cone_elevation(point_east_of_observer(CONE_DISTANCE_M)))


@pytest.fixture(scope="module")
def twin_cone_tile() -> ElevationTile:
    """Tile N00E000 with the cone plus an identical one hidden 32 km east."""
    near = cone_elevation(point_east_of_observer(CONE_DISTANCE_M))
    far = cone_elevation(point_east_of_observer(HIDDEN_CONE_DISTANCE_M))
    return make_tile("N00E000.hgt", lambda lon, lat: np.maximum(near(lon, lat), far(lon, lat)))


@pytest.fixture(scope="module")
def cone_cem(cone_tile: ElevationTile) -> ContinuousElevationModel:
    return ContinuousElevationModel(CompositeElevationModel([cone_tile]))


@pytest.fixture(scope="module")
def twin_cone_cem(twin_cone_tile: ElevationTile) -> ContinuousElevationModel:
    return ContinuousElevationModel(CompositeElevationModel([twin_cone_tile]))


@pytest.fixture
def cone_summits() -> list[Summit]:
    """Summits of the twin cone landscape.

    - Cone: visible top of the near cone
    - Hidden: top of the far cone, behind the near one
    - North: far outside an eastward field of view
    """
    return [
        Summit(name="Cone", position=point_east_of_observer(CONE_DISTANCE_M), elevation=1000),
        Summit(name="Hidden", position=point_east_of_observer(HIDDEN_CONE_DISTANCE_M), elevation=1000),
        Summit(name="North", position=GeoPoint.from_degrees(lon=OBSERVER_LON_DEG, lat=0.6), elevation=500),
    ]
