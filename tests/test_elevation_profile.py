"""Unit tests for ElevationProfile and the curvature correction."""

from math import atan, cos, pi, radians

import pytest

from summit_panorama.core.elevation_model import ContinuousElevationModel
from summit_panorama.core.elevation_profile import ElevationProfile, curvature_drop
from summit_panorama.core.geo_calculator import GeoCalculator
from summit_panorama.core.interval import Interval1D, Interval2D
from summit_panorama.errors import ConfigurationError, DomainError
from summit_panorama.model.geo_point import GeoPoint
from conftest import TEST_SAMPLES_PER_DEGREE, MockDiscreteElevationModel

N = TEST_SAMPLES_PER_DEGREE
EAST = radians(90)


@pytest.fixture
def ramp_cem() -> ContinuousElevationModel:
    """Ground rising 1 m per lattice column towards the east.

    Covers lon/lat [-1, 2] degrees; elevation = x (the global column index).
    """
    extent = Interval2D(Interval1D(-N, 2 * N), Interval1D(-N, 2 * N))
    return ContinuousElevationModel(MockDiscreteElevationModel(lambda x, y: float(x), extent))


@pytest.fixture
def east_profile(ramp_cem: ContinuousElevationModel, observer: GeoPoint) -> ElevationProfile:
    return ElevationProfile(ramp_cem, origin=observer, azimuth=EAST, length=30_000)


class TestCurvatureDrop:
    """Tests for the refraction-corrected curvature drop."""

    def test_zero_at_observer(self) -> None:
        assert curvature_drop(0) == 0

    def test_ten_kilometers(self) -> None:
        """(1 - 0.13) * d^2 / 2R at 10 km is ~6.83 m."""
        assert curvature_drop(10_000) == pytest.approx(0.87 * 10_000**2 / (2 * 6_371_000))
        assert curvature_drop(10_000) == pytest.approx(6.83, abs=0.01)

    def test_no_refraction_is_geometric_drop(self) -> None:
        """With k = 0 the drop is the geometric d^2 / 2R."""
        assert curvature_drop(10_000, refraction_coefficient=0) == pytest.approx(10_000**2 / (2 * 6_371_000))

    def test_quadratic_growth(self) -> None:
        """Doubling the distance quadruples the drop."""
        assert curvature_drop(40_000) == pytest.approx(4 * curvature_drop(20_000))


class TestElevationProfile:
    """Tests for elevation and positions along a great circle."""

    def test_starts_at_origin(self, east_profile: ElevationProfile, observer: GeoPoint) -> None:
        start = east_profile.position_at(0)
        assert start.longitude == pytest.approx(observer.longitude, abs=1e-12)
        assert start.latitude == pytest.approx(observer.latitude, abs=1e-12)

    @pytest.mark.parametrize("distance", [4096, 10_000, 29_999.5, 30_000])
    def test_positions_follow_the_great_circle(
        self, east_profile: ElevationProfile, observer: GeoPoint, distance: float
    ) -> None:
        """Interpolated positions stay within millimeters of the exact geodesic."""
        lon, lat = GeoCalculator.destination(observer.longitude, observer.latitude, EAST, distance)
        position = east_profile.position_at(distance)
        assert position.longitude == pytest.approx(lon, abs=1e-8)
        assert position.latitude == pytest.approx(lat, abs=1e-8)

    def test_elevation_follows_the_ramp(self, east_profile: ElevationProfile, ramp_cem: ContinuousElevationModel) -> None:
        """Going east the ramp climbs 1 m per column spacing."""
        column_spacing = ramp_cem.sample_spacing_m * cos(radians(0.5))
        climb = east_profile.elevation_at(10_000) - east_profile.elevation_at(0)
        assert climb == pytest.approx(10_000 / column_spacing, abs=0.05)

    def test_apparent_elevation_subtracts_curvature(self, east_profile: ElevationProfile) -> None:
        expected = east_profile.elevation_at(20_000) - curvature_drop(20_000)
        assert east_profile.apparent_elevation_at(20_000) == pytest.approx(expected)

    @pytest.mark.parametrize("distance", [0, 15_000, 30_000])
    def test_slope_along_profile(
        self, east_profile: ElevationProfile, ramp_cem: ContinuousElevationModel, distance: float
    ) -> None:
        """Profile slope equals the ramp gradient, including at both clamped ends."""
        column_spacing = ramp_cem.sample_spacing_m * cos(radians(0.5))
        assert east_profile.slope_at(distance) == pytest.approx(atan(1 / column_spacing), rel=1e-3)

    def test_slope_across_ramp_is_flat(self, ramp_cem: ContinuousElevationModel, observer: GeoPoint) -> None:
        """Walking north along a ramp that rises eastwards stays level."""
        north = ElevationProfile(ramp_cem, origin=observer, azimuth=0.0, length=10_000)
        assert north.slope_at(5_000) == pytest.approx(0.0, abs=1e-6)

    def test_terrain_slope_ignores_direction(self, ramp_cem: ContinuousElevationModel, observer: GeoPoint) -> None:
        """The terrain slope is the surface steepness whatever the profile azimuth."""
        north = ElevationProfile(ramp_cem, origin=observer, azimuth=0.0, length=10_000)
        east = ElevationProfile(ramp_cem, origin=observer, azimuth=EAST, length=10_000)
        assert north.terrain_slope_at(5_000) == pytest.approx(east.terrain_slope_at(5_000), rel=1e-3)
        assert north.terrain_slope_at(5_000) > 0

    @pytest.mark.parametrize("distance", [-1, -1e-9, 30_000.001, 1e9])
    def test_distance_outside_profile_raises(self, east_profile: ElevationProfile, distance: float) -> None:
        """Distances outside [0, length] are a domain error."""
        with pytest.raises(DomainError):
            east_profile.elevation_at(distance)
        with pytest.raises(DomainError):
            east_profile.position_at(distance)

    @pytest.mark.parametrize("azimuth", [-0.1, 2 * pi, 7.0])
    def test_non_canonical_azimuth_raises(
        self, ramp_cem: ContinuousElevationModel, observer: GeoPoint, azimuth: float
    ) -> None:
        with pytest.raises(ConfigurationError):
            ElevationProfile(ramp_cem, origin=observer, azimuth=azimuth, length=1_000)

    @pytest.mark.parametrize("length", [0, -10])
    def test_non_positive_length_raises(
        self, ramp_cem: ContinuousElevationModel, observer: GeoPoint, length: float
    ) -> None:
        with pytest.raises(ConfigurationError):
            ElevationProfile(ramp_cem, origin=observer, azimuth=EAST, length=length)

    def test_accessors(self, east_profile: ElevationProfile, observer: GeoPoint) -> None:
        assert east_profile.origin == observer
        assert east_profile.azimuth == EAST
        assert east_profile.length == 30_000

    def test_crosses_antimeridian(self) -> None:
        """A profile running east over 180 deg continues at -180 deg."""
        extent = Interval2D(Interval1D(-180 * N, 180 * N), Interval1D(-N, N))
        cem = ContinuousElevationModel(MockDiscreteElevationModel(lambda x, y: 0.0, extent))
        profile = ElevationProfile(cem, origin=GeoPoint.from_degrees(lon=179.9, lat=0.5), azimuth=EAST, length=30_000)

        position = profile.position_at(20_000)
        assert -180 < position.lon_deg < -179.7
        assert profile.elevation_at(20_000) == 0.0
