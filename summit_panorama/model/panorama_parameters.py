"""PanoramaParameters - observer, field of view and image size.

Maps image pixels to view angles and back. Pixels are square: the vertical
field of view follows from the horizontal one and the image aspect ratio.
Image x grows towards the east of the view, image y grows downwards.
"""

from dataclasses import dataclass
from math import pi
from typing import Optional

from summit_panorama.core.geo_calculator import GeoCalculator
from summit_panorama.errors import ConfigurationError, DomainError
from summit_panorama.model.geo_point import GeoPoint

# Rounding slack when testing an angle against the field of view edges
ANGLE_TOLERANCE = 1e-9


@dataclass(frozen=True)
class PanoramaParameters:
    """Parameters of a panorama computation.

    Attributes:
        observer_position: Where the observer stands
        observer_elevation: Eye elevation in meters
        center_azimuth: Azimuth of the image center (radians, [0, 2*pi))
        horizontal_field_of_view: Horizontal opening angle (radians, (0, 2*pi])
        max_distance: Maximum visibility distance in meters
        width: Image width in pixels (> 1)
        height: Image height in pixels (> 0)

    Example:
        params = PanoramaParameters(
            observer_position=GeoPoint.from_degrees(lon=6.8087, lat=47.0085),
            observer_elevation=1380,
            center_azimuth=radians(162),
            horizontal_field_of_view=radians(27),
            max_distance=300_000,
            width=2500,
            height=800,
        )
    """

    observer_position: GeoPoint
    observer_elevation: int
    center_azimuth: float
    horizontal_field_of_view: float
    max_distance: int
    width: int
    height: int

    def __post_init__(self) -> None:
        """Validate data after initialization."""
        if not GeoCalculator.is_canonical_azimuth(self.center_azimuth):
            raise ConfigurationError(f"Center azimuth {self.center_azimuth} is not in [0, 2*pi)")
        if not 0 < self.horizontal_field_of_view <= 2 * pi:
            raise ConfigurationError(f"Horizontal field of view {self.horizontal_field_of_view} not in (0, 2*pi]")
        if self.max_distance <= 0:
            raise ConfigurationError(f"Max distance must be positive, got {self.max_distance}")
        if self.width <= 1 or self.height <= 0:
            raise ConfigurationError(f"Invalid image size {self.width}x{self.height}")

    @property
    def vertical_field_of_view(self) -> float:
        return self.horizontal_field_of_view * (self.height - 1) / (self.width - 1)

    @property
    def angle_per_pixel(self) -> float:
        return self.horizontal_field_of_view / (self.width - 1)

    def azimuth_for_x(self, x: float) -> float:
        """Azimuth of image column x (radians, canonical)."""
        if not 0 <= x <= self.width - 1:
            raise DomainError(f"x={x} outside image [0, {self.width - 1}]")
        left = self.center_azimuth - self.horizontal_field_of_view / 2
        return GeoCalculator.canonicalize_azimuth(left + x * self.angle_per_pixel)

    def horizontal_offset(self, azimuth: float) -> Optional[float]:
        """Angle from the left image edge to an azimuth, None outside the horizontal field of view.

        Angles within a few rounding errors of either edge snap onto that edge.
        """
        left = self.center_azimuth - self.horizontal_field_of_view / 2
        offset = GeoCalculator.floor_mod(azimuth - left, 2 * pi)
        if offset > 2 * pi - ANGLE_TOLERANCE:
            # Just left of the left edge
            return 0.0
        if offset > self.horizontal_field_of_view + ANGLE_TOLERANCE:
            return None
        return min(offset, self.horizontal_field_of_view)

    def x_for_azimuth(self, azimuth: float) -> float:
        """Fractional image column of an azimuth inside the horizontal field of view."""
        offset = self.horizontal_offset(azimuth)
        if offset is None:
            raise DomainError(f"Azimuth {azimuth} outside the horizontal field of view")
        return min(offset / self.angle_per_pixel, self.width - 1)

    def is_in_horizontal_field_of_view(self, azimuth: float) -> bool:
        return self.horizontal_offset(azimuth) is not None

    def altitude_for_y(self, y: float) -> float:
        """Elevation angle of image row y (radians, 0 at the middle row)."""
        if not 0 <= y <= self.height - 1:
            raise DomainError(f"y={y} outside image [0, {self.height - 1}]")
        return ((self.height - 1) / 2 - y) * self.angle_per_pixel

    def y_for_altitude(self, altitude: float) -> float:
        """Fractional image row of an elevation angle inside the vertical field of view."""
        if not self.is_in_vertical_field_of_view(altitude):
            raise DomainError(f"Altitude {altitude} outside the vertical field of view")
        y = (self.height - 1) / 2 - altitude / self.angle_per_pixel
        return min(max(y, 0.0), self.height - 1)

    def is_in_vertical_field_of_view(self, altitude: float) -> bool:
        return abs(altitude) <= self.vertical_field_of_view / 2 + ANGLE_TOLERANCE

    def is_valid_sample_index(self, x: int, y: int) -> bool:
        return 0 <= x < self.width and 0 <= y < self.height

    def linear_sample_index(self, x: int, y: int) -> int:
        if not self.is_valid_sample_index(x, y):
            raise DomainError(f"Pixel ({x}, {y}) outside image {self.width}x{self.height}")
        return x + y * self.width
