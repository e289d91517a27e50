"""Data model classes for panorama computation.

- GeoPoint: Position on the Earth's surface (radians)
- Summit: Named summit from a catalog
- PanoramaParameters: Observer, field of view and image size
- Panorama, VisiblePoint: Per-pixel visible terrain
"""

from summit_panorama.model.geo_point import GeoPoint
from summit_panorama.model.panorama import NO_TERRAIN, Panorama, VisiblePoint
from summit_panorama.model.panorama_parameters import PanoramaParameters
from summit_panorama.model.summit import Summit

__all__ = [
    "GeoPoint",
    "Summit",
    "PanoramaParameters",
    "Panorama",
    "VisiblePoint",
    "NO_TERRAIN",
]
