"""Integer index intervals addressing elevation sample lattices.

Both bounds are included: a tile of N samples per degree spans N + 1
indices per side, e.g. Interval1D(0, 3600).
"""

from dataclasses import dataclass

from summit_panorama.errors import ConfigurationError


@dataclass(frozen=True)
class Interval1D:
    """Closed integer interval [included_from, included_to]."""

    included_from: int
    included_to: int

    def __post_init__(self) -> None:
        if self.included_from > self.included_to:
            raise ConfigurationError(
                f"Empty interval: included_from={self.included_from} > included_to={self.included_to}"
            )

    def contains(self, v: int) -> bool:
        return self.included_from <= v <= self.included_to

    def size(self) -> int:
        return self.included_to - self.included_from + 1

    def size_of_intersection_with(self, other: "Interval1D") -> int:
        low = max(self.included_from, other.included_from)
        high = min(self.included_to, other.included_to)
        return max(0, high - low + 1)

    def bounding_union(self, other: "Interval1D") -> "Interval1D":
        return Interval1D(
            min(self.included_from, other.included_from),
            max(self.included_to, other.included_to),
        )

    def is_unionable_with(self, other: "Interval1D") -> bool:
        """True if the union of both intervals is itself an interval."""
        return self.size() + other.size() - self.size_of_intersection_with(other) == self.bounding_union(other).size()

    def union(self, other: "Interval1D") -> "Interval1D":
        if not self.is_unionable_with(other):
            raise ConfigurationError(f"{self} and {other} are not unionable")
        return self.bounding_union(other)

    def __str__(self) -> str:
        return f"[{self.included_from}..{self.included_to}]"


@dataclass(frozen=True)
class Interval2D:
    """Cartesian product of two closed integer intervals (x = longitude axis, y = latitude axis)."""

    ix: Interval1D
    iy: Interval1D

    def contains(self, x: int, y: int) -> bool:
        return self.ix.contains(x) and self.iy.contains(y)

    def size(self) -> int:
        return self.ix.size() * self.iy.size()

    def size_of_intersection_with(self, other: "Interval2D") -> int:
        return self.ix.size_of_intersection_with(other.ix) * self.iy.size_of_intersection_with(other.iy)

    def bounding_union(self, other: "Interval2D") -> "Interval2D":
        return Interval2D(self.ix.bounding_union(other.ix), self.iy.bounding_union(other.iy))

    def is_unionable_with(self, other: "Interval2D") -> bool:
        return self.size() + other.size() - self.size_of_intersection_with(other) == self.bounding_union(other).size()

    def union(self, other: "Interval2D") -> "Interval2D":
        if not self.is_unionable_with(other):
            raise ConfigurationError(f"{self} and {other} are not unionable")
        return self.bounding_union(other)

    def __str__(self) -> str:
        return f"{self.ix}x{self.iy}"
