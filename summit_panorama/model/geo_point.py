"""GeoPoint - a position on the Earth's surface.

A GeoPoint represents a single longitude/latitude pair in radians.
It is the single source of truth for location throughout the system.

Used by:
- ElevationProfile (origin and sampled positions)
- Summit (catalog position)
- PanoramaParameters (observer position)
"""

from dataclasses import dataclass
from math import degrees, pi, radians

from summit_panorama.core.geo_calculator import GeoCalculator
from summit_panorama.errors import ConfigurationError


@dataclass(frozen=True)
class GeoPoint:
    """A point on the Earth's surface.

    Attributes:
        longitude: Longitude in radians, in [-pi, pi]
        latitude: Latitude in radians, in [-pi/2, pi/2]

    Example:
        point = GeoPoint.from_degrees(lon=7.65, lat=46.73)
    """

    longitude: float
    latitude: float

    def __post_init__(self) -> None:
        """Validate data after initialization."""
        if not -pi <= self.longitude <= pi:
            raise ConfigurationError(f"Longitude {self.longitude} outside [-pi, pi]")
        if not -pi / 2 <= self.latitude <= pi / 2:
            raise ConfigurationError(f"Latitude {self.latitude} outside [-pi/2, pi/2]")

    @classmethod
    def from_degrees(cls, lon: float, lat: float) -> "GeoPoint":
        """Create a point from decimal degrees."""
        return cls(longitude=radians(lon), latitude=radians(lat))

    @property
    def lon_deg(self) -> float:
        return degrees(self.longitude)

    @property
    def lat_deg(self) -> float:
        return degrees(self.latitude)

    def distance_to(self, other: "GeoPoint") -> float:
        """Calculate haversine distance to another point in meters.

        Args:
            other: Another GeoPoint to measure distance to

        Returns:
            Distance in meters using great-circle calculation.
        """
        return GeoCalculator.haversine_distance_m(
            lon1=self.longitude,
            lat1=self.latitude,
            lon2=other.longitude,
            lat2=other.latitude,
        )

    def azimuth_to(self, other: "GeoPoint") -> float:
        """Initial azimuth towards another point (radians clockwise from North, [0, 2*pi))."""
        return GeoCalculator.initial_azimuth(
            lon1=self.longitude,
            lat1=self.latitude,
            lon2=other.longitude,
            lat2=other.latitude,
        )

    def __str__(self) -> str:
        return f"({self.lon_deg:.4f},{self.lat_deg:.4f})"
