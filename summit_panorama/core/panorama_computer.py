"""Panorama computation by per-column horizon scans.

For every image column, an elevation profile is built along the column's
azimuth. Rays are cast from the bottom row upwards; each ray searches for
the terrain starting where the previous (lower) ray hit, since a higher ray
can only meet the ground further away. The column ends at the first ray
that reaches the maximum distance without hitting anything: every row above
it sees no terrain either.

The coarse bracket of each hit is refined by bisection before recording it,
so the pixel distance is precise to RayConfig.HORIZON_REFINE_STEP_M.
"""

import logging
import time
from math import cos, tan
from typing import Optional

from summit_panorama.constants import RayConfig
from summit_panorama.core.elevation_model import ContinuousElevationModel
from summit_panorama.core.elevation_profile import ElevationProfile
from summit_panorama.core.ray_caster import NO_ROOT, RayCaster
from summit_panorama.model.panorama import Panorama, empty_grids
from summit_panorama.model.panorama_parameters import PanoramaParameters

logger = logging.getLogger(__name__)


class PanoramaComputer:
    """Computes the visible terrain for every pixel of a panorama.

    Example:
        computer = PanoramaComputer(ContinuousElevationModel(dem))
        panorama = computer.compute_panorama(params)
    """

    def __init__(
        self,
        elevation_model: ContinuousElevationModel,
        scan_step_m: float = RayConfig.HORIZON_SCAN_STEP_M,
        refine_step_m: Optional[float] = RayConfig.HORIZON_REFINE_STEP_M,
    ):
        """Initialize panorama computer.

        Args:
            elevation_model: Continuous elevation model covering the visible area
            scan_step_m: Step of the coarse root search along each ray
            refine_step_m: Bisection precision for recorded hits (None keeps the coarse bracket)
        """
        self._elevation_model = elevation_model
        self._scan_step_m = scan_step_m
        self._refine_step_m = refine_step_m

    @property
    def elevation_model(self) -> ContinuousElevationModel:
        """Access the continuous elevation model."""
        return self._elevation_model

    def compute_panorama(self, parameters: PanoramaParameters) -> Panorama:
        """Cast one ray per pixel and record the first terrain hit.

        Raises:
            OutOfRangeError: If a ray leaves the area covered by the elevation model.
        """
        logger.info(f"Computing {parameters.width}x{parameters.height} panorama from {parameters.observer_position}")
        start_time = time.time()

        grids = empty_grids(parameters.width, parameters.height)
        for x in range(parameters.width):
            self._scan_column(parameters, x, grids)

        elapsed = time.time() - start_time
        logger.info(f"Panorama computed in {elapsed:.2f}s")
        return Panorama(parameters, grids)

    def _scan_column(self, parameters: PanoramaParameters, x: int, grids: dict) -> None:
        max_distance = parameters.max_distance
        profile = ElevationProfile(
            self._elevation_model,
            origin=parameters.observer_position,
            azimuth=parameters.azimuth_for_x(x),
            length=max_distance,
        )

        last_root = 0.0
        for y in range(parameters.height - 1, -1, -1):
            altitude = parameters.altitude_for_y(y)
            gap = RayCaster.ray_to_ground_distance(profile, parameters.observer_elevation, tan(altitude))

            root = RayCaster.first_interval_containing_root(gap, last_root, max_distance, self._scan_step_m)
            if root == NO_ROOT:
                logger.debug(f"Column {x}: no terrain above row {y}")
                break

            if self._refine_step_m is not None:
                root = RayCaster.improve_root(gap, root, root + self._scan_step_m, self._refine_step_m)

            position = profile.position_at(root)
            grids["distance"][y, x] = root / cos(altitude)
            grids["altitude"][y, x] = altitude
            grids["elevation"][y, x] = profile.elevation_at(root)
            grids["slope"][y, x] = profile.terrain_slope_at(root)
            grids["longitude"][y, x] = position.longitude
            grids["latitude"][y, x] = position.latitude
            last_root = root
