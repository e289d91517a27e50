"""Geodesic calculations on Earth's surface.

Provides geographic helper functions for panorama computation:
- Distance calculation (Haversine formula)
- Azimuth calculation (initial heading between points)
- Destination calculation (endpoint from start, azimuth, distance)
- Angle normalization (canonical azimuths, signed angular distance)

All calculations use a spherical Earth approximation (R = 6,371 km).
Unlike map-facing code, everything here works in radians.
"""

from math import asin, atan2, cos, floor, pi, sin, sqrt

from summit_panorama.constants import EarthConfig

EARTH_RADIUS_M = EarthConfig.EARTH_RADIUS_M

TWO_PI = 2 * pi


class GeoCalculator:
    """Static methods for geodesic calculations on Earth's surface.

    All methods use a spherical Earth model (R = 6,371 km).
    Coordinates are in radians.
    Azimuths are in radians clockwise from North, in [0, 2*pi).
    Distances are in meters.
    """

    EARTH_RADIUS_M = EARTH_RADIUS_M

    @staticmethod
    def floor_mod(value: float, divisor: float) -> float:
        """Remainder of value / divisor with the sign of the divisor."""
        remainder = value - divisor * floor(value / divisor)
        # Tiny negative values round up to the divisor itself
        return 0.0 if remainder == divisor else remainder

    @staticmethod
    def canonicalize_azimuth(azimuth: float) -> float:
        """Map any angle to the canonical azimuth range [0, 2*pi)."""
        return GeoCalculator.floor_mod(azimuth, TWO_PI)

    @staticmethod
    def is_canonical_azimuth(azimuth: float) -> bool:
        return 0 <= azimuth < TWO_PI

    @staticmethod
    def angular_distance(from_angle: float, to_angle: float) -> float:
        """Signed smallest rotation from from_angle to to_angle, in [-pi, pi)."""
        return GeoCalculator.floor_mod(to_angle - from_angle + pi, TWO_PI) - pi

    @staticmethod
    def haversine_distance_m(lon1: float, lat1: float, lon2: float, lat2: float) -> float:
        """Calculate great-circle distance between two points using Haversine formula.

        Args:
            lon1: Longitude of first point (radians)
            lat1: Latitude of first point (radians)
            lon2: Longitude of second point (radians)
            lat2: Latitude of second point (radians)

        Returns:
            Distance in meters.
        """
        dlat = lat2 - lat1
        dlon = lon2 - lon1
        a = sin(dlat / 2) ** 2 + cos(lat1) * cos(lat2) * sin(dlon / 2) ** 2
        return EARTH_RADIUS_M * 2 * atan2(sqrt(a), sqrt(1 - a))

    @staticmethod
    def initial_azimuth(lon1: float, lat1: float, lon2: float, lat2: float) -> float:
        """Calculate initial azimuth from point 1 to point 2.

        The azimuth is the compass direction to travel from start to end,
        measured clockwise from true North.

        Args:
            lon1: Longitude of start point (radians)
            lat1: Latitude of start point (radians)
            lon2: Longitude of end point (radians)
            lat2: Latitude of end point (radians)

        Returns:
            Azimuth in radians, in [0, 2*pi).
        """
        dlon = lon2 - lon1
        y = sin(dlon) * cos(lat2)
        x = cos(lat1) * sin(lat2) - sin(lat1) * cos(lat2) * cos(dlon)
        return GeoCalculator.canonicalize_azimuth(atan2(y, x))

    @staticmethod
    def destination(
        lon: float,
        lat: float,
        azimuth: float,
        distance_m: float,
    ) -> tuple[float, float]:
        """Calculate destination point given start, azimuth, and distance.

        Uses the formula for finding a point at given distance and azimuth
        from a starting point on a sphere.

        Args:
            lon: Longitude of start point (radians)
            lat: Latitude of start point (radians)
            azimuth: Azimuth in radians (clockwise from North)
            distance_m: Distance to travel in meters

        Returns:
            Tuple (lon, lat) of destination point in radians, longitude in [-pi, pi).
        """
        d_R = distance_m / EARTH_RADIUS_M

        lat2 = asin(sin(lat) * cos(d_R) + cos(lat) * sin(d_R) * cos(azimuth))
        lon2 = lon + atan2(
            sin(azimuth) * sin(d_R) * cos(lat),
            cos(d_R) - sin(lat) * sin(lat2),
        )
        return GeoCalculator.floor_mod(lon2 + pi, TWO_PI) - pi, lat2
