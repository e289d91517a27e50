"""Discrete and continuous elevation models.

Provides the elevation surface consumed by profiles and ray casting:
- CompositeElevationModel: several tiles merged into one logical lattice
- ContinuousElevationModel: bilinear elevation at arbitrary coordinates
- Terrain gradient (slope angle and aspect) by central differences

Missing data is never replaced by a default elevation: every query outside
the covered extent raises OutOfRangeError.
"""

import logging
from dataclasses import dataclass
from functools import reduce
from math import atan, atan2, cos, floor, hypot, pi
from pathlib import Path
from typing import Iterable, Protocol

from summit_panorama.constants import DEMConfig, EarthConfig
from summit_panorama.core.elevation_tile import ElevationTile
from summit_panorama.core.geo_calculator import GeoCalculator
from summit_panorama.core.interval import Interval2D
from summit_panorama.errors import ConfigurationError, OutOfRangeError
from summit_panorama.model.geo_point import GeoPoint

logger = logging.getLogger(__name__)


class DiscreteElevationModel(Protocol):
    """Anything answering elevation queries by integer sample index."""

    @property
    def samples_per_degree(self) -> int: ...

    def extent(self) -> Interval2D: ...

    def elevation_sample(self, x: int, y: int) -> float: ...


@dataclass(frozen=True)
class TerrainGradient:
    """Result of terrain gradient calculation.

    Attributes:
        slope: Angle between the terrain and the horizontal plane (radians, 0 = flat)
        aspect: Direction of steepest descent (radians clockwise from North, [0, 2*pi))
    """

    slope: float
    aspect: float


class CompositeElevationModel:
    """Several elevation tiles seen as one discrete elevation model.

    Tiles are expected to be disjoint or to share border rows/columns; this is
    not checked. A query goes to the first tile (in construction order) whose
    extent contains the sample.

    Example:
        dem = CompositeElevationModel.from_files([Path("N46E007.hgt"), Path("N46E008.hgt")])
        elevation = dem.elevation_sample(x=25_300, y=167_400)
    """

    def __init__(self, tiles: Iterable[ElevationTile]):
        """Initialize from an ordered collection of tiles.

        Raises:
            ConfigurationError: If no tile is given or tile resolutions differ.
        """
        self._tiles = tuple(tiles)
        if not self._tiles:
            raise ConfigurationError("A composite elevation model needs at least one tile")

        resolutions = {tile.samples_per_degree for tile in self._tiles}
        if len(resolutions) != 1:
            raise ConfigurationError(f"Tiles mix samples-per-degree values: {sorted(resolutions)}")
        self._samples_per_degree = resolutions.pop()

        self._extent = reduce(Interval2D.bounding_union, (tile.extent() for tile in self._tiles))
        logger.debug(f"Composite elevation model with {len(self._tiles)} tiles, extent {self._extent}")

    @classmethod
    def from_files(
        cls,
        paths: Iterable[Path],
        samples_per_degree: int = DEMConfig.SAMPLES_PER_DEGREE,
    ) -> "CompositeElevationModel":
        """Load every HGT file and merge them. Any invalid file aborts the whole load."""
        tiles: list[ElevationTile] = []
        try:
            for path in paths:
                tiles.append(ElevationTile.from_file(path, samples_per_degree))
        except Exception:
            for tile in tiles:
                tile.close()
            raise
        return cls(tiles)

    @property
    def tiles(self) -> tuple[ElevationTile, ...]:
        return self._tiles

    @property
    def samples_per_degree(self) -> int:
        return self._samples_per_degree

    def extent(self) -> Interval2D:
        return self._extent

    def union(self, other: "CompositeElevationModel") -> "CompositeElevationModel":
        """New model with this model's tiles followed by the other's."""
        return CompositeElevationModel(self._tiles + other.tiles)

    def elevation_sample(self, x: int, y: int) -> float:
        """Raw elevation at global sample index (x, y).

        Raises:
            OutOfRangeError: If no tile contains (x, y).
        """
        for tile in self._tiles:
            if tile.extent().contains(x, y):
                return tile.elevation_sample(x, y)
        raise OutOfRangeError(f"Sample ({x}, {y}) not covered by any tile (extent {self._extent})")

    def close(self) -> None:
        for tile in self._tiles:
            tile.close()

    def __enter__(self) -> "CompositeElevationModel":
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()


class ContinuousElevationModel:
    """Elevation and slope at arbitrary coordinates.

    Bilinearly interpolates the four lattice samples surrounding a point.
    Holds a reference to the discrete model only; sample data is never copied.

    Example:
        cem = ContinuousElevationModel(dem)
        elevation = cem.elevation_at(GeoPoint.from_degrees(lon=7.65, lat=46.73))
    """

    def __init__(self, dem: DiscreteElevationModel):
        """Initialize with a discrete elevation model.

        Args:
            dem: Tile, composite model or any object with extent()/elevation_sample()
        """
        self._dem = dem
        self._samples_per_radian = dem.samples_per_degree * 180 / pi
        # Distance between two lattice rows in meters
        self._sample_spacing_m = EarthConfig.EARTH_RADIUS_M / self._samples_per_radian

    @property
    def dem(self) -> DiscreteElevationModel:
        """Access the discrete elevation model."""
        return self._dem

    @property
    def sample_spacing_m(self) -> float:
        return self._sample_spacing_m

    def sample_index(self, point: GeoPoint) -> tuple[float, float]:
        """Fractional lattice index (x, y) of a point."""
        return point.longitude * self._samples_per_radian, point.latitude * self._samples_per_radian

    def elevation_at(self, point: GeoPoint) -> float:
        """Bilinearly interpolated elevation in meters.

        Raises:
            OutOfRangeError: If one of the four surrounding samples is not covered.
        """
        x, y = self.sample_index(point)
        return self._interpolate(x, y)

    def gradient_at(self, point: GeoPoint) -> TerrainGradient:
        """Terrain gradient from central differences one sample apart in each axis.

        The east-west spacing shrinks with cos(latitude).

        Raises:
            OutOfRangeError: If the neighbourhood is not covered.
        """
        x, y = self.sample_index(point)
        spacing_x = self._sample_spacing_m * cos(point.latitude)
        spacing_y = self._sample_spacing_m

        dz_east = (self._interpolate(x + 1, y) - self._interpolate(x - 1, y)) / (2 * spacing_x)
        dz_north = (self._interpolate(x, y + 1) - self._interpolate(x, y - 1)) / (2 * spacing_y)

        magnitude = hypot(dz_east, dz_north)
        if magnitude == 0:
            return TerrainGradient(slope=0.0, aspect=0.0)

        aspect = GeoCalculator.canonicalize_azimuth(atan2(-dz_east, -dz_north))
        return TerrainGradient(slope=atan(magnitude), aspect=aspect)

    def slope_at(self, point: GeoPoint) -> float:
        """Terrain slope angle in radians (0 = flat)."""
        return self.gradient_at(point).slope

    def _interpolate(self, x: float, y: float) -> float:
        x0 = floor(x)
        y0 = floor(y)
        dx = x - x0
        dy = y - y0

        z00 = self._dem.elevation_sample(x0, y0)
        z10 = self._dem.elevation_sample(x0 + 1, y0)
        z01 = self._dem.elevation_sample(x0, y0 + 1)
        z11 = self._dem.elevation_sample(x0 + 1, y0 + 1)

        return (
            z00 * (1 - dx) * (1 - dy)
            + z10 * dx * (1 - dy)
            + z01 * (1 - dx) * dy
            + z11 * dx * dy
        )
