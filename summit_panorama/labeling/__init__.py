"""Summit selection and label placement."""

from summit_panorama.labeling.labelizer import (
    LabelPlacement,
    Labelizer,
    SummitLabel,
    VisibleSummit,
)

__all__ = [
    "Labelizer",
    "LabelPlacement",
    "SummitLabel",
    "VisibleSummit",
]
