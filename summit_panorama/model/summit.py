"""Summit - a named mountain top from a gazetteer."""

from dataclasses import dataclass

from summit_panorama.model.geo_point import GeoPoint


@dataclass(frozen=True)
class Summit:
    """A named summit.

    Attributes:
        name: Display name
        position: Geographic position
        elevation: Catalog elevation in meters
    """

    name: str
    position: GeoPoint
    elevation: int

    def __str__(self) -> str:
        return f"{self.name} ({self.elevation})"
