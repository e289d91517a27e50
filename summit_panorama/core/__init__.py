"""Core engine: elevation data, profiles and ray casting.

This module provides the computational backbone of panorama generation:
- GeoCalculator: Geodesic calculations (distances, azimuths, destinations)
- Interval1D/Interval2D: Sample index ranges
- ElevationTile: One HGT tile of elevation samples
- CompositeElevationModel, ContinuousElevationModel: Elevation surface
- ElevationProfile: Ground elevation along a great circle
- RayCaster: Gap function and bracketing root search
- PanoramaComputer: Per-pixel horizon scan
"""

from summit_panorama.core.elevation_tile import ElevationTile, parse_tile_name
from summit_panorama.core.geo_calculator import GeoCalculator
from summit_panorama.core.interval import Interval1D, Interval2D

# The remaining modules depend on summit_panorama.model, which imports
# GeoCalculator from here: import them directly, e.g.
# from summit_panorama.core.elevation_model import CompositeElevationModel

__all__ = [
    # Geo calculator
    "GeoCalculator",
    # Index intervals
    "Interval1D",
    "Interval2D",
    # Tiles
    "ElevationTile",
    "parse_tile_name",
]
