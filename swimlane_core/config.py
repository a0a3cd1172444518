"""
Layout configuration.

All layout and canvas constants live here so every rendering surface packs
lanes with the same numbers. Override individual values by constructing a
LayoutConfig or loading one from a JSON file.
"""

import json
from pathlib import Path

from pydantic import BaseModel, ConfigDict, Field


# Default canvas parameters
DEFAULT_CANVAS_WIDTH = 1200
DEFAULT_LANE_HEIGHT = 140
DEFAULT_LANE_GAP = 24
DEFAULT_LANE_HEADER_WIDTH = 120
DEFAULT_LEFT_MARGIN = 168     # lane gap + header width + 24px padding
DEFAULT_RIGHT_MARGIN = 32
DEFAULT_MIN_ELEMENT_GAP = 32  # Minimum horizontal gap between elements


class LayoutConfig(BaseModel):
    """Fixed constants used by the lane layout engine."""
    model_config = ConfigDict(frozen=True, extra="forbid")

    canvas_width: float = Field(default=DEFAULT_CANVAS_WIDTH, gt=0)
    lane_height: float = Field(default=DEFAULT_LANE_HEIGHT, gt=0)
    lane_gap: float = Field(default=DEFAULT_LANE_GAP, ge=0)
    lane_header_width: float = Field(default=DEFAULT_LANE_HEADER_WIDTH, ge=0)
    left_margin: float = Field(default=DEFAULT_LEFT_MARGIN, ge=0)
    right_margin: float = Field(default=DEFAULT_RIGHT_MARGIN, ge=0)
    min_element_gap: float = Field(default=DEFAULT_MIN_ELEMENT_GAP, ge=0)

    def lane_top(self, index: int) -> float:
        """Y coordinate where the band for lane `index` starts."""
        return self.lane_gap + index * (self.lane_height + self.lane_gap)

    def canvas_height(self, lane_count: int) -> float:
        return lane_count * self.lane_height + (lane_count + 1) * self.lane_gap


DEFAULT_LAYOUT_CONFIG = LayoutConfig()


def load_layout_config(path: str | Path) -> LayoutConfig:
    """
    Load layout overrides from a JSON file.

    Args:
        path: JSON file containing a subset of LayoutConfig fields

    Returns:
        LayoutConfig with the overrides applied on top of the defaults

    Raises:
        pydantic.ValidationError: if a key is unknown or a value is invalid
    """
    data = json.loads(Path(path).read_text(encoding="utf-8"))
    return LayoutConfig.model_validate(data)
