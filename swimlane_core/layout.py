"""
Lane layout for process diagrams.

Each swimlane is a fixed-height horizontal band. Elements are packed left to
right inside their lane's band in the lane's membership order:
- Vertical position centers the element's footprint in the band
- Horizontal position follows a running cursor with a minimum gap
- Stored element positions are ignored

Layout functions never modify the diagram; they return render positions.
"""

import logging
from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from .config import DEFAULT_LAYOUT_CONFIG, LayoutConfig
from .geometry import element_footprint
from .models import Position

if TYPE_CHECKING:
    from .models import ProcessDiagram

logger = logging.getLogger(__name__)


@dataclass
class LaneBand:
    """The canvas band reserved for one swimlane."""
    lane_id: str
    label: str
    index: int
    top: float
    height: float
    # (x, y, width, height)
    header_box: tuple[float, float, float, float] = (0, 0, 0, 0)
    content_box: tuple[float, float, float, float] = (0, 0, 0, 0)

    def to_dict(self) -> dict:
        return {
            "id": self.lane_id,
            "label": self.label,
            "index": self.index,
            "top": self.top,
            "height": self.height,
            "header_box": list(self.header_box),
            "content_box": list(self.content_box),
        }


@dataclass
class DiagramLayout:
    """Render positions plus the canvas geometry they were computed for."""
    positions: dict[str, Position] = field(default_factory=dict)
    lanes: list[LaneBand] = field(default_factory=list)
    width: float = 0
    height: float = 0

    def to_dict(self) -> dict:
        """Convert to dictionary for JSON serialization."""
        return {
            "width": self.width,
            "height": self.height,
            "lanes": [lane.to_dict() for lane in self.lanes],
            "positions": {
                element_id: pos.model_dump()
                for element_id, pos in self.positions.items()
            },
        }


def _lane_band(index: int, lane_id: str, label: str, config: LayoutConfig) -> LaneBand:
    top = config.lane_top(index)
    header_x = config.lane_gap
    content_x = config.lane_gap + config.lane_header_width
    content_width = config.canvas_width - config.lane_header_width - 2 * config.lane_gap
    return LaneBand(
        lane_id=lane_id,
        label=label,
        index=index,
        top=top,
        height=config.lane_height,
        header_box=(header_x, top, config.lane_header_width, config.lane_height),
        content_box=(content_x, top, content_width, config.lane_height),
    )


def build_layout(
    diagram: "ProcessDiagram",
    config: LayoutConfig | None = None
) -> DiagramLayout:
    """
    Compute the full lane layout for a diagram.

    Lanes are processed in list order. Within a lane, member ids are placed
    in stored order; ids that name no element are skipped and do not move
    the cursor. When an element is listed in several lanes the last placement
    wins. Elements that belong to no lane fall back to lane 0 at the left
    margin.

    Args:
        diagram: The diagram to lay out (not modified)
        config: Layout constants (defaults to DEFAULT_LAYOUT_CONFIG)

    Returns:
        DiagramLayout with positions keyed by element id in element order
    """
    config = config or DEFAULT_LAYOUT_CONFIG
    elements = diagram.element_index()

    def centered_y(lane_index: int, height: float) -> float:
        return config.lane_top(lane_index) + (config.lane_height - height) / 2

    placed: dict[str, Position] = {}
    for lane_index, lane in enumerate(diagram.swimlanes):
        cursor = config.left_margin
        for element_id in lane.elements:
            element = elements.get(element_id)
            if element is None:
                continue
            width, height = element_footprint(element.type)
            max_x = config.canvas_width - config.right_margin - width
            x = min(max(cursor, config.left_margin), max_x)
            placed[element_id] = Position(x=x, y=centered_y(lane_index, height))
            cursor = x + width + config.min_element_gap

    positions: dict[str, Position] = {}
    for element in diagram.elements:
        if element.id in placed:
            positions[element.id] = placed[element.id]
            continue
        # Not listed in any lane
        logger.debug("Element %s is in no lane; placing it in lane 0", element.id)
        _, height = element_footprint(element.type)
        positions[element.id] = Position(x=config.left_margin, y=centered_y(0, height))

    lane_count = len(diagram.swimlanes)
    return DiagramLayout(
        positions=positions,
        lanes=[
            _lane_band(i, lane.id, lane.label, config)
            for i, lane in enumerate(diagram.swimlanes)
        ],
        width=config.canvas_width,
        height=config.canvas_height(lane_count),
    )


def compute_layout(
    diagram: "ProcessDiagram",
    config: LayoutConfig | None = None
) -> dict[str, Position]:
    """Render position (top-left anchor) of every element, keyed by id."""
    return build_layout(diagram, config).positions
