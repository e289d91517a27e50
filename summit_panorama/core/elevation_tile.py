"""Elevation tiles: one degree-by-degree grid of DEM samples.

Provides access to SRTM-style HGT data:
- Tile name parsing (N46E007.hgt -> geographic origin and sample extent)
- Strict byte-length validation: 2 * (N + 1)^2 bytes, no partial tiles
- O(1) sample lookup in a NumPy view over the raw big-endian buffer
- Explicit release of the buffer (close() or a with-block)

Data Source:
    SRTM 1 arc-second (N = 3600) or 3 arc-second (N = 1200) HGT tiles
    Download: https://dwtkns.com/srtm30m/
"""

import logging
import re
import time
from pathlib import Path
from typing import Optional, Union

import numpy as np

from summit_panorama.constants import DEMConfig
from summit_panorama.core.interval import Interval1D, Interval2D
from summit_panorama.errors import FormatError, OutOfRangeError, TileClosedError

logger = logging.getLogger(__name__)

_TILE_NAME_RE = re.compile(DEMConfig.TILE_NAME_PATTERN)

BytesLike = Union[bytes, bytearray, memoryview, np.ndarray]


def parse_tile_name(name: str) -> tuple[int, int]:
    """Parse a tile name into the (latitude, longitude) of its south-west corner.

    Args:
        name: Tile file name, e.g. "N46E007.hgt"

    Returns:
        Tuple (lat_deg, lon_deg) of integer degrees (south and west are negative).

    Raises:
        FormatError: If the name does not follow the [NS]dd[EW]ddd.hgt convention.
    """
    if len(name) != DEMConfig.TILE_NAME_LENGTH:
        raise FormatError(f"Tile name {name!r} must have {DEMConfig.TILE_NAME_LENGTH} characters")

    match = _TILE_NAME_RE.match(name)
    if match is None:
        raise FormatError(f"Tile name {name!r} does not match [NS]dd[EW]ddd{DEMConfig.TILE_SUFFIX}")

    lat_hemisphere, lat_digits, lon_hemisphere, lon_digits = match.groups()
    lat = int(lat_digits) * (1 if lat_hemisphere == "N" else -1)
    lon = int(lon_digits) * (1 if lon_hemisphere == "E" else -1)

    # The tile must lie entirely inside the valid coordinate range
    if not (-90 <= lat < 90 and -180 <= lon < 180):
        raise FormatError(f"Tile name {name!r} encodes an impossible origin (lat={lat}, lon={lon})")
    return lat, lon


class ElevationTile:
    """Elevation samples covering one degree of latitude and longitude.

    The extent is expressed in global sample indices: x along longitude and
    y along latitude, both multiplied by the samples-per-degree constant.
    Rows in the buffer run from north to south, so the first sample is the
    north-west corner.

    Example:
        with ElevationTile.from_file(Path("data/hgt/N46E007.hgt")) as tile:
            elevation = tile.elevation_sample(x=25_300, y=167_400)
    """

    def __init__(
        self,
        name: str,
        data: BytesLike,
        samples_per_degree: int = DEMConfig.SAMPLES_PER_DEGREE,
    ) -> None:
        """Build a tile from its name and raw bytes.

        Args:
            name: Tile name giving the geographic origin, e.g. "N46E007.hgt"
            data: Raw big-endian int16 samples (bytes, memoryview or uint8 array)
            samples_per_degree: Lattice resolution N (the tile has N + 1 samples per side)

        Raises:
            FormatError: If the name is malformed or the byte length is not 2 * (N + 1)^2.
        """
        lat, lon = parse_tile_name(name)

        expected = DEMConfig.tile_byte_length(samples_per_degree)
        actual = memoryview(data).nbytes
        if actual != expected:
            raise FormatError(f"Tile {name} has {actual} bytes, expected {expected}")

        self._name = name
        self._lat = lat
        self._lon = lon
        self._samples_per_degree = samples_per_degree
        self._samples: Optional[np.ndarray] = np.frombuffer(data, dtype=DEMConfig.SAMPLE_DTYPE)
        self._extent = Interval2D(
            Interval1D(lon * samples_per_degree, (lon + 1) * samples_per_degree),
            Interval1D(lat * samples_per_degree, (lat + 1) * samples_per_degree),
        )

    @classmethod
    def from_file(
        cls,
        path: Path,
        samples_per_degree: int = DEMConfig.SAMPLES_PER_DEGREE,
    ) -> "ElevationTile":
        """Memory-map an HGT file read-only and build a tile from it.

        Args:
            path: Path to the .hgt file; its file name gives the tile origin
            samples_per_degree: Lattice resolution N of the file

        Raises:
            FileNotFoundError: If the file does not exist.
            FormatError: If the name or the file size is invalid.
        """
        path = Path(path)
        if not path.exists():
            raise FileNotFoundError(f"Elevation tile not found at {path}")

        # Validate before mapping so no buffer is ever held for a bad tile
        parse_tile_name(path.name)
        expected = DEMConfig.tile_byte_length(samples_per_degree)
        size = path.stat().st_size
        if size != expected:
            raise FormatError(f"Tile file {path} has {size} bytes, expected {expected}")

        logger.info(f"Loading elevation tile from {path}...")
        start_time = time.time()
        tile = cls(path.name, np.memmap(path, dtype=np.uint8, mode="r"), samples_per_degree)
        elapsed = time.time() - start_time
        logger.info(f"Tile {path.name} mapped in {elapsed:.3f}s ({(samples_per_degree + 1) ** 2} samples)")
        return tile

    @property
    def name(self) -> str:
        return self._name

    @property
    def origin(self) -> tuple[int, int]:
        """(lat, lon) of the south-west corner in integer degrees."""
        return self._lat, self._lon

    @property
    def samples_per_degree(self) -> int:
        return self._samples_per_degree

    @property
    def closed(self) -> bool:
        return self._samples is None

    def extent(self) -> Interval2D:
        return self._extent

    def elevation_sample(self, x: int, y: int) -> float:
        """Raw elevation in meters at global sample index (x, y).

        Raises:
            TileClosedError: If the tile has been closed.
            OutOfRangeError: If (x, y) is outside the tile extent.
        """
        if self._samples is None:
            raise TileClosedError(f"Tile {self._name} has been closed")
        if not self._extent.contains(x, y):
            raise OutOfRangeError(f"Sample ({x}, {y}) outside tile {self._name} extent {self._extent}")

        column = x - self._extent.ix.included_from
        row = self._extent.iy.included_to - y
        return float(self._samples[column + row * (self._samples_per_degree + 1)])

    def close(self) -> None:
        """Release the sample buffer. Later queries raise TileClosedError."""
        if self._samples is not None:
            self._samples = None
            logger.info(f"Tile {self._name} closed")

    def __enter__(self) -> "ElevationTile":
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()

    def __repr__(self) -> str:
        state = "closed" if self.closed else "open"
        return f"ElevationTile({self._name}, N={self._samples_per_degree}, {state})"
