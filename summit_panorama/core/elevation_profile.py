"""Ground elevation along a great-circle path.

An ElevationProfile starts at an observer position and follows a fixed
azimuth for a given length. Exact geodesic positions are computed every
ProfileConfig.SAMPLE_SPACING_M meters; positions in between are linearly
interpolated, which is far below the DEM resolution in error.
"""

import logging
from math import atan

import numpy as np

from summit_panorama.constants import EarthConfig, ProfileConfig
from summit_panorama.core.elevation_model import ContinuousElevationModel
from summit_panorama.core.geo_calculator import GeoCalculator
from summit_panorama.errors import ConfigurationError, DomainError
from summit_panorama.model.geo_point import GeoPoint

logger = logging.getLogger(__name__)


def curvature_drop(distance_m: float, refraction_coefficient: float = EarthConfig.REFRACTION_COEFFICIENT) -> float:
    """How far the ground falls below the observer's tangent plane at a distance.

    Refraction bends light towards the ground, which makes the earth look
    flatter: the geometric drop d^2 / 2R is reduced by the refraction coefficient.
    """
    return (1 - refraction_coefficient) * distance_m * distance_m / (2 * EarthConfig.EARTH_RADIUS_M)


class ElevationProfile:
    """Elevation as a function of the distance travelled from an origin.

    Example:
        profile = ElevationProfile(cem, origin=observer, azimuth=radians(90), length=20_000)
        ground = profile.elevation_at(5_000)
    """

    def __init__(
        self,
        elevation_model: ContinuousElevationModel,
        origin: GeoPoint,
        azimuth: float,
        length: float,
        sample_spacing_m: float = ProfileConfig.SAMPLE_SPACING_M,
    ):
        """Precompute the geodesic positions of the profile.

        Args:
            elevation_model: Continuous elevation model to query
            origin: Start of the profile (observer position)
            azimuth: Direction in radians clockwise from North, in [0, 2*pi)
            length: Profile length in meters, > 0
            sample_spacing_m: Distance between exactly computed positions

        Raises:
            ConfigurationError: If azimuth is not canonical or length is not positive.
        """
        if not GeoCalculator.is_canonical_azimuth(azimuth):
            raise ConfigurationError(f"Azimuth {azimuth} is not in [0, 2*pi)")
        if length <= 0:
            raise ConfigurationError(f"Profile length must be positive, got {length}")

        self._elevation_model = elevation_model
        self._origin = origin
        self._azimuth = azimuth
        self._length = float(length)

        # One extra position past the end so every distance has a right neighbour
        sample_count = int(np.ceil(self._length / sample_spacing_m)) + 1
        self._distances = np.arange(sample_count, dtype=np.float64) * sample_spacing_m
        positions = [
            GeoCalculator.destination(
                lon=origin.longitude,
                lat=origin.latitude,
                azimuth=azimuth,
                distance_m=float(d),
            )
            for d in self._distances
        ]
        # Unwrap so interpolation does not jump across the antimeridian
        self._longitudes = np.unwrap(np.array([lon for lon, _ in positions]))
        self._latitudes = np.array([lat for _, lat in positions])

    @property
    def origin(self) -> GeoPoint:
        return self._origin

    @property
    def azimuth(self) -> float:
        return self._azimuth

    @property
    def length(self) -> float:
        return self._length

    def position_at(self, distance: float) -> GeoPoint:
        """Position on the great circle at the given distance from the origin.

        Raises:
            DomainError: If distance is outside [0, length].
        """
        self._check_distance(distance)
        lon = float(np.interp(distance, self._distances, self._longitudes))
        lat = float(np.interp(distance, self._distances, self._latitudes))
        return GeoPoint(longitude=GeoCalculator.floor_mod(lon + np.pi, 2 * np.pi) - np.pi, latitude=lat)

    def elevation_at(self, distance: float) -> float:
        """Ground elevation in meters at the given distance from the origin.

        Raises:
            DomainError: If distance is outside [0, length].
            OutOfRangeError: If the position is not covered by the elevation model.
        """
        return self._elevation_model.elevation_at(self.position_at(distance))

    def apparent_elevation_at(self, distance: float) -> float:
        """Ground elevation relative to the observer's tangent plane.

        The ground is lowered by the refraction-reduced curvature drop.
        """
        return self.elevation_at(distance) - curvature_drop(distance)

    def terrain_slope_at(self, distance: float) -> float:
        """Slope angle (radians) of the terrain surface at the given distance."""
        return self._elevation_model.slope_at(self.position_at(distance))

    def slope_at(self, distance: float) -> float:
        """Slope angle (radians) of the profile itself, positive when climbing.

        Uses two elevations straddling the distance; the window is clamped at
        both ends of the profile.

        Raises:
            DomainError: If distance is outside [0, length].
        """
        self._check_distance(distance)
        before = max(0.0, distance - ProfileConfig.SLOPE_HALF_SPAN_M)
        after = min(self._length, distance + ProfileConfig.SLOPE_HALF_SPAN_M)
        return atan((self.elevation_at(after) - self.elevation_at(before)) / (after - before))

    def _check_distance(self, distance: float) -> None:
        if not 0 <= distance <= self._length:
            raise DomainError(f"Distance {distance} outside profile [0, {self._length}]")
