"""Panorama - per-pixel visible terrain computed for a set of parameters.

The grids are indexed [y, x] like images. Pixels whose ray never hits the
terrain hold the "no terrain" record: infinite distance and NaN elsewhere.
"""

from dataclasses import dataclass
from math import inf, isinf, nan
from typing import Optional

import numpy as np

from summit_panorama.errors import DomainError
from summit_panorama.model.panorama_parameters import PanoramaParameters


@dataclass(frozen=True)
class VisiblePoint:
    """Terrain seen through one pixel.

    Attributes:
        distance: Distance along the ray in meters (inf for no terrain)
        altitude: Elevation angle of the ray (radians)
        elevation: Ground elevation in meters
        slope: Terrain slope angle (radians)
        longitude: Longitude of the hit point (radians)
        latitude: Latitude of the hit point (radians)
    """

    distance: float
    altitude: float
    elevation: float
    slope: float
    longitude: float
    latitude: float

    @property
    def is_terrain(self) -> bool:
        return not isinf(self.distance)


NO_TERRAIN = VisiblePoint(distance=inf, altitude=nan, elevation=nan, slope=nan, longitude=nan, latitude=nan)

_GRIDS = ("distance", "altitude", "elevation", "slope", "longitude", "latitude")


def empty_grids(width: int, height: int) -> dict[str, np.ndarray]:
    """Writable grids initialised to the "no terrain" record."""
    grids = {name: np.full((height, width), nan, dtype=np.float64) for name in _GRIDS}
    grids["distance"].fill(inf)
    return grids


class Panorama:
    """Read-only per-pixel terrain grids.

    Example:
        panorama = PanoramaComputer(cem).compute_panorama(params)
        if panorama.point_at(x=10, y=200).is_terrain:
            d = panorama.distance_at(x=10, y=200)
    """

    def __init__(self, parameters: PanoramaParameters, grids: dict[str, np.ndarray]):
        """Wrap computed grids; they are made read-only.

        Raises:
            DomainError: If a grid is missing or its shape does not match the image size.
        """
        shape = (parameters.height, parameters.width)
        for name in _GRIDS:
            if name not in grids or grids[name].shape != shape:
                raise DomainError(f"Grid {name!r} missing or not of shape {shape}")
            grids[name].flags.writeable = False

        self._parameters = parameters
        self._grids = grids

    @property
    def parameters(self) -> PanoramaParameters:
        return self._parameters

    def grid(self, name: str) -> np.ndarray:
        """One of "distance", "altitude", "elevation", "slope", "longitude", "latitude"."""
        return self._grids[name]

    def point_at(self, x: int, y: int) -> VisiblePoint:
        self._check_pixel(x, y)
        values = {name: float(self._grids[name][y, x]) for name in _GRIDS}
        if isinf(values["distance"]):
            return NO_TERRAIN
        return VisiblePoint(**values)

    def distance_at(self, x: int, y: int, default: Optional[float] = None) -> float:
        """Distance at a pixel; default is returned for pixels outside the image when given."""
        if default is not None and not self._parameters.is_valid_sample_index(x, y):
            return default
        return self._value("distance", x, y)

    def altitude_at(self, x: int, y: int) -> float:
        return self._value("altitude", x, y)

    def elevation_at(self, x: int, y: int) -> float:
        return self._value("elevation", x, y)

    def slope_at(self, x: int, y: int) -> float:
        return self._value("slope", x, y)

    def longitude_at(self, x: int, y: int) -> float:
        return self._value("longitude", x, y)

    def latitude_at(self, x: int, y: int) -> float:
        return self._value("latitude", x, y)

    def terrain_mask(self) -> np.ndarray:
        """Boolean grid, True where a pixel sees terrain."""
        return np.isfinite(self._grids["distance"])

    def _value(self, name: str, x: int, y: int) -> float:
        self._check_pixel(x, y)
        return float(self._grids[name][y, x])

    def _check_pixel(self, x: int, y: int) -> None:
        if not self._parameters.is_valid_sample_index(x, y):
            raise DomainError(f"Pixel ({x}, {y}) outside image {self._parameters.width}x{self._parameters.height}")
