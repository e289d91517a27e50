"""Summit labelling for panoramas.

Implements greedy label placement:
- Selects the summits that are visible from the observer and inside the view
- Sorts them from the top of the image down (taller summit first on ties)
- Places each label in a single ordered pass, first come first served,
  reserving a fixed horizontal band in an occupancy bitmap

All labels share the baseline fixed by the first (highest) placed label and
are connected to their summit by a vertical leader line. Labels never overlap,
at the price of dropping visible summits when space runs out.
"""

import logging
from dataclasses import dataclass
from math import floor
from typing import Iterable, Optional

import numpy as np

from summit_panorama.constants import LabelConfig, RayConfig
from summit_panorama.core.elevation_model import ContinuousElevationModel
from summit_panorama.core.elevation_profile import ElevationProfile
from summit_panorama.core.ray_caster import RayCaster
from summit_panorama.model.panorama_parameters import PanoramaParameters
from summit_panorama.model.summit import Summit

logger = logging.getLogger(__name__)


def round_half_up(value: float) -> int:
    """Round to the nearest integer, halves towards +infinity."""
    return int(floor(value + 0.5))


@dataclass(frozen=True)
class VisibleSummit:
    """A summit visible from the observer with its image position.

    Attributes:
        summit: The catalog summit
        x: Image column of the summit (pixels)
        y: Image row of the summit (pixels)
        distance: Distance from the observer in meters
    """

    summit: Summit
    x: int
    y: int
    distance: float


@dataclass(frozen=True)
class SummitLabel:
    """Geometry of one placed label, for an external drawing layer.

    Attributes:
        summit: The labelled summit
        x: Image column of the summit and of the leader line
        y: Image row of the summit (bottom end of the leader line)
        baseline_y: Row of the label text anchor, shared by all labels
        text: Text to draw, e.g. "Eiger (3970)"
        text_rotation_deg: Rotation of the text around its anchor
    """

    summit: Summit
    x: int
    y: int
    baseline_y: int
    text: str
    text_rotation_deg: float = LabelConfig.TEXT_ROTATION_DEG

    @property
    def line_start(self) -> tuple[int, int]:
        """Top end of the leader line, just below the text anchor."""
        return self.x, self.baseline_y + LabelConfig.LINE_TO_SUMMIT_PX

    @property
    def line_end(self) -> tuple[int, int]:
        return self.x, self.y


class LabelPlacement:
    """Mutable placement state threaded through one ordered pass.

    Holds the horizontal occupancy bitmap of the non-border part of the image
    and the common baseline, fixed by the first accepted label.
    """

    def __init__(self, width: int):
        self._width = width
        self._max_x = width - LabelConfig.SIDE_BORDER_PX
        # Labels starting at the last allowed column still reserve a full band
        free_columns = max(0, width - 2 * LabelConfig.SIDE_BORDER_PX + 1)
        self._occupied = np.zeros(free_columns + LabelConfig.LABEL_WIDTH_PX, dtype=bool)
        self._baseline_y: Optional[int] = None

    @property
    def baseline_y(self) -> Optional[int]:
        return self._baseline_y

    def try_place(self, visible: VisibleSummit) -> Optional[SummitLabel]:
        """Place the summit's label if the constraints allow it.

        Returns:
            The placed label, or None if the summit is in a border or its band is taken.
        """
        x, y = visible.x, visible.y
        if not LabelConfig.SIDE_BORDER_PX <= x <= self._max_x:
            logger.debug(f"{visible.summit} dropped: x={x} in side border")
            return None
        if y < LabelConfig.ABOVE_BORDER_PX:
            logger.debug(f"{visible.summit} dropped: y={y} too close to the top")
            return None

        start = x - LabelConfig.SIDE_BORDER_PX
        band = self._occupied[start : start + LabelConfig.LABEL_WIDTH_PX]
        if band.any():
            logger.debug(f"{visible.summit} dropped: band at x={x} already taken")
            return None
        band[:] = True

        if self._baseline_y is None:
            self._baseline_y = y - LabelConfig.MIN_LINE_LENGTH_PX - LabelConfig.LINE_TO_SUMMIT_PX

        return SummitLabel(
            summit=visible.summit,
            x=x,
            y=y,
            baseline_y=self._baseline_y,
            text=str(visible.summit),
        )


class Labelizer:
    """Selects visible summits and places their labels.

    Example:
        labelizer = Labelizer(cem, summits)
        for label in labelizer.labels(params):
            draw_line(label.line_start, label.line_end)
    """

    def __init__(
        self,
        elevation_model: ContinuousElevationModel,
        summits: Iterable[Summit],
        scan_step_m: float = RayConfig.SUMMIT_SCAN_STEP_M,
        tolerance_m: float = RayConfig.SUMMIT_TOLERANCE_M,
    ):
        """Initialize labelizer.

        Args:
            elevation_model: Continuous elevation model covering the visible area
            summits: Summit catalog
            scan_step_m: Root search step of the visibility test
            tolerance_m: Slack of the visibility test
        """
        self._elevation_model = elevation_model
        self._summits = tuple(summits)
        self._scan_step_m = scan_step_m
        self._tolerance_m = tolerance_m

    @property
    def summits(self) -> tuple[Summit, ...]:
        return self._summits

    def visible_summits(self, parameters: PanoramaParameters) -> list[VisibleSummit]:
        """Summits inside the view and not hidden by terrain, with their pixel position.

        Raises:
            OutOfRangeError: If a sight line crosses an area not covered by the elevation model.
        """
        observer = parameters.observer_position

        visible: list[VisibleSummit] = []
        for summit in self._summits:
            distance = observer.distance_to(summit.position)
            if distance > parameters.max_distance or distance <= 0:
                logger.debug(f"{summit} rejected: distance {distance:.0f}m")
                continue

            azimuth = observer.azimuth_to(summit.position)
            if not parameters.is_in_horizontal_field_of_view(azimuth):
                logger.debug(f"{summit} rejected: outside horizontal field of view")
                continue

            profile = ElevationProfile(self._elevation_model, observer, azimuth, distance)
            sight = RayCaster.sight_line(
                profile,
                parameters.observer_elevation,
                distance,
                step=self._scan_step_m,
                tolerance=self._tolerance_m,
            )
            if not parameters.is_in_vertical_field_of_view(sight.altitude):
                logger.debug(f"{summit} rejected: outside vertical field of view")
                continue
            if not sight.visible:
                logger.debug(f"{summit} rejected: hidden by terrain at {sight.obstruction_distance:.0f}m")
                continue

            visible.append(
                VisibleSummit(
                    summit=summit,
                    x=round_half_up(parameters.x_for_azimuth(azimuth)),
                    y=round_half_up(parameters.y_for_altitude(sight.altitude)),
                    distance=distance,
                )
            )

        logger.info(f"{len(visible)} of {len(self._summits)} summits visible")
        return visible

    def labels(self, parameters: PanoramaParameters) -> list[SummitLabel]:
        """Place non-overlapping labels for the visible summits.

        Summits are taken from the top of the image down; on equal rows the
        taller summit comes first. The sort is stable, so remaining ties keep
        catalog order.
        """
        ordered = sorted(
            self.visible_summits(parameters),
            key=lambda v: (v.y, -v.summit.elevation),
        )

        placement = LabelPlacement(parameters.width)
        labels: list[SummitLabel] = []
        for visible in ordered:
            label = placement.try_place(visible)
            if label is not None:
                labels.append(label)

        logger.info(f"Placed {len(labels)} of {len(ordered)} visible summit labels")
        return labels
