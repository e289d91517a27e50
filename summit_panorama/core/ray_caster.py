"""Ray casting over an elevation profile.

Implements the terrain intercept search shared by the panorama computer and
the labelizer:
- Gap function: signed height of a straight ray above the apparent ground
- Bracketing root search: first step-sized interval where the gap changes sign
- Bisection refinement of a bracketed root
- Point-to-point sight line test with a fixed tolerance

The root search is deliberately coarse: the obstruction is reported as the
left bound of the first bracketing step, so its error is at most one step,
and the tolerance constants in RayConfig are tuned to that behaviour.
"""

from dataclasses import dataclass
from math import atan, inf
from typing import Callable, Protocol

from summit_panorama.constants import RayConfig
from summit_panorama.core.elevation_profile import curvature_drop
from summit_panorama.errors import ConfigurationError


# Returned by the root search when the ray is never intercepted
NO_ROOT = inf

GapFunction = Callable[[float], float]


class Profile(Protocol):
    """Anything giving ground elevation as a function of distance."""

    def elevation_at(self, distance: float) -> float: ...


@dataclass(frozen=True)
class SightLine:
    """Result of a point-to-point visibility test.

    Attributes:
        distance: Distance to the target in meters
        slope: Initial slope of the ray aimed at the target ground
        altitude: Elevation angle of the ray (radians, atan(slope))
        obstruction_distance: Left bound of the first intercepting step, or NO_ROOT
        visible: True if nothing intercepts the ray before distance - tolerance
    """

    distance: float
    slope: float
    altitude: float
    obstruction_distance: float
    visible: bool


class RayCaster:
    """Static methods for casting rays over elevation profiles.

    Distances and elevations are in meters, slopes are rise/run ratios.
    """

    @staticmethod
    def ray_to_ground_distance(profile: Profile, ray_origin_elevation: float, ray_slope: float) -> GapFunction:
        """Build the gap function of a ray.

        gap(d) = e0 + s * d - (ground(d) - curvature_drop(d))

        Positive while the ray passes above the ground; zero or negative once
        the terrain intercepts it.

        Args:
            profile: Ground elevation along the ray direction
            ray_origin_elevation: Ray height at distance 0 (observer elevation)
            ray_slope: Initial slope of the ray (tan of its elevation angle)

        Returns:
            Function mapping a distance to the signed vertical gap in meters.
        """

        def gap(distance: float) -> float:
            ray_height = ray_origin_elevation + ray_slope * distance
            return ray_height - (profile.elevation_at(distance) - curvature_drop(distance))

        return gap

    @staticmethod
    def first_interval_containing_root(f: GapFunction, min_x: float, max_x: float, step: float) -> float:
        """Find the first step-sized interval of [min_x, max_x] containing a root of f.

        Samples f at min_x + i * step while the whole step fits in the range.

        Returns:
            Left bound of the first interval whose end values have opposite signs
            (or include a zero), NO_ROOT if there is none.

        Raises:
            ConfigurationError: If step is not positive or min_x > max_x.
        """
        if step <= 0:
            raise ConfigurationError(f"Root search step must be positive, got {step}")
        if min_x > max_x:
            raise ConfigurationError(f"Empty root search range [{min_x}, {max_x}]")

        i = 0
        left = min_x
        f_left = f(left)
        while left + step <= max_x:
            right = min_x + (i + 1) * step
            f_right = f(right)
            if f_left * f_right <= 0:
                return left
            i += 1
            left, f_left = right, f_right
        return NO_ROOT

    @staticmethod
    def improve_root(f: GapFunction, x1: float, x2: float, epsilon: float) -> float:
        """Shrink a bracket [x1, x2] around a root of f by bisection.

        Returns:
            Lower bound of a bracket no wider than epsilon.

        Raises:
            ConfigurationError: If epsilon is not positive or f(x1), f(x2) have the same sign.
        """
        if epsilon <= 0:
            raise ConfigurationError(f"Bisection precision must be positive, got {epsilon}")

        f1 = f(x1)
        if f1 * f(x2) > 0:
            raise ConfigurationError(f"[{x1}, {x2}] does not bracket a root")

        while x2 - x1 > epsilon:
            middle = (x1 + x2) / 2
            f_middle = f(middle)
            if f_middle == 0:
                return middle
            if f_middle * f1 > 0:
                x1, f1 = middle, f_middle
            else:
                x2 = middle
        return x1

    @staticmethod
    def sight_line(
        profile: Profile,
        observer_elevation: float,
        distance: float,
        step: float = RayConfig.SUMMIT_SCAN_STEP_M,
        tolerance: float = RayConfig.SUMMIT_TOLERANCE_M,
    ) -> SightLine:
        """Test whether the ground at a distance along the profile can be seen.

        The ray is aimed at the apparent ground at the target distance, so the
        gap function is zero there; the target is visible when the first root
        found by the coarse search lies within tolerance of the target.

        Args:
            profile: Elevation profile from the observer towards the target, length >= distance
            observer_elevation: Eye elevation in meters
            distance: Distance to the target in meters, > 0
            step: Root search step
            tolerance: Slack compensating the coarse step

        Raises:
            ConfigurationError: If distance is not positive.
        """
        if distance <= 0:
            raise ConfigurationError(f"Sight line distance must be positive, got {distance}")

        height = RayCaster.ray_to_ground_distance(profile, observer_elevation, 0.0)(distance)
        slope = -height / distance
        gap = RayCaster.ray_to_ground_distance(profile, observer_elevation, slope)

        obstruction = RayCaster.first_interval_containing_root(gap, 0.0, distance, step)
        return SightLine(
            distance=distance,
            slope=slope,
            altitude=atan(slope),
            obstruction_distance=obstruction,
            visible=obstruction >= distance - tolerance,
        )
