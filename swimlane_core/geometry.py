"""
Boundary geometry for diagram shapes.

Pure functions shared by every rendering surface:
- Visual centers for each element type (position is the top-left anchor)
- Boundary projection: where a line toward another point leaves the shape
- Connector geometry: endpoints, curve controls and label anchor per connection

Shapes:
- task: 160x60 rectangle, projected with the L-infinity norm
- start/end event: circle of radius 18 inside a 40x40 footprint
- gateway: diamond with half-diagonal 28 inside a 56x56 footprint, L1 norm
"""

import math
from dataclasses import dataclass
from typing import TYPE_CHECKING

from .models import ElementType, Position

if TYPE_CHECKING:
    from .models import ProcessDiagram


# Shape footprints (width, height)
TASK_SIZE = (160, 60)
EVENT_SIZE = (40, 40)
GATEWAY_SIZE = (56, 56)

TASK_HALF_WIDTH = 80
TASK_HALF_HEIGHT = 30
EVENT_RADIUS = 18
GATEWAY_HALF_DIAGONAL = 28

# Connector label placement
LABEL_RAISE = 6
LABEL_BUMP = 14

# Label avoidance box adjustments per shape
GATEWAY_LABEL_OUTSET = 6
EVENT_LABEL_INSET = 2


def element_footprint(element_type: ElementType) -> tuple[int, int]:
    """Width and height reserved on the canvas for an element type."""
    if element_type == ElementType.TASK:
        return TASK_SIZE
    if element_type == ElementType.GATEWAY:
        return GATEWAY_SIZE
    return EVENT_SIZE


def element_center(element_type: ElementType, position: Position) -> Position:
    """Visual center of an element anchored at `position`."""
    width, height = element_footprint(element_type)
    return Position(x=position.x + width / 2, y=position.y + height / 2)


def resolve_boundary(
    element_type: ElementType,
    position: Position,
    toward: Position
) -> Position:
    """
    Find where a line from the element's center toward `toward` crosses the outline.

    Args:
        element_type: Type of the element (selects the shape)
        position: Render position (top-left anchor) of the element
        toward: Center of the other endpoint of the connection

    Returns:
        The boundary point, or the center itself when `toward` coincides with it
    """
    center = element_center(element_type, position)
    dx = toward.x - center.x
    dy = toward.y - center.y
    if dx == 0 and dy == 0:
        return center

    if element_type == ElementType.TASK:
        scale = 1 / max(abs(dx) / TASK_HALF_WIDTH, abs(dy) / TASK_HALF_HEIGHT)
    elif element_type == ElementType.GATEWAY:
        scale = GATEWAY_HALF_DIAGONAL / (abs(dx) + abs(dy))
    else:
        scale = EVENT_RADIUS / math.hypot(dx, dy)

    return Position(x=center.x + dx * scale, y=center.y + dy * scale)


def label_avoidance_box(
    element_type: ElementType,
    position: Position
) -> tuple[float, float, float, float]:
    """Box (x, y, right, bottom) that connector labels should not land in."""
    x, y = position.x, position.y
    width, height = element_footprint(element_type)
    if element_type == ElementType.TASK:
        return (x, y, x + width, y + height)
    if element_type == ElementType.GATEWAY:
        # The rotated square pokes out of its footprint
        pad = GATEWAY_LABEL_OUTSET
        return (x - pad, y - pad, x + width + pad, y + height + pad)
    pad = EVENT_LABEL_INSET
    return (x + pad, y + pad, x + width - pad, y + height - pad)


def _fmt(value: float) -> str:
    return f"{value:g}"


@dataclass
class ConnectorGeometry:
    """Everything a rendering surface needs to draw one connection."""
    source: str
    target: str
    start: Position
    end: Position
    control1: Position
    control2: Position
    label_anchor: Position
    label: str | None = None

    def path_data(self) -> str:
        """SVG path for the cubic curve between the two boundary points."""
        return (
            f"M {_fmt(self.start.x)} {_fmt(self.start.y)} "
            f"C {_fmt(self.control1.x)} {_fmt(self.control1.y)}, "
            f"{_fmt(self.control2.x)} {_fmt(self.control2.y)}, "
            f"{_fmt(self.end.x)} {_fmt(self.end.y)}"
        )

    def to_dict(self) -> dict:
        """Convert to dictionary for JSON serialization."""
        result = {
            "source": self.source,
            "target": self.target,
            "start": self.start.model_dump(),
            "end": self.end.model_dump(),
            "path": self.path_data(),
            "label_anchor": self.label_anchor.model_dump(),
        }
        if self.label is not None:
            result["label"] = self.label
        return result


def _inside(box: tuple[float, float, float, float], point: Position) -> bool:
    left, top, right, bottom = box
    return left <= point.x <= right and top <= point.y <= bottom


def compute_connectors(
    diagram: "ProcessDiagram",
    positions: dict[str, Position]
) -> list[ConnectorGeometry]:
    """
    Compute connector geometry for every drawable connection.

    Both endpoints are resolved against the other element's center, always
    using render positions. Connections whose endpoints are missing are
    skipped.

    Args:
        diagram: The diagram whose connections should be drawn
        positions: Render positions from the lane layout engine

    Returns:
        One ConnectorGeometry per drawable connection, in connection order
    """
    elements = diagram.element_index()

    def render_position(element_id: str) -> Position:
        if element_id in positions:
            return positions[element_id]
        return elements[element_id].position

    obstacles = [
        label_avoidance_box(el.type, render_position(el.id))
        for el in diagram.elements
    ]

    connectors: list[ConnectorGeometry] = []
    for connection in diagram.connections:
        source = elements.get(connection.source)
        target = elements.get(connection.target)
        if source is None or target is None:
            continue

        source_pos = render_position(source.id)
        target_pos = render_position(target.id)
        source_center = element_center(source.type, source_pos)
        target_center = element_center(target.type, target_pos)

        start = resolve_boundary(source.type, source_pos, target_center)
        end = resolve_boundary(target.type, target_pos, source_center)
        mid_x = (start.x + end.x) / 2

        label_anchor = Position(x=mid_x, y=(start.y + end.y) / 2 - LABEL_RAISE)
        if any(_inside(box, label_anchor) for box in obstacles):
            label_anchor = Position(x=label_anchor.x, y=label_anchor.y - LABEL_BUMP)

        connectors.append(ConnectorGeometry(
            source=source.id,
            target=target.id,
            start=start,
            end=end,
            control1=Position(x=mid_x, y=start.y),
            control2=Position(x=mid_x, y=end.y),
            label_anchor=label_anchor,
            label=connection.label,
        ))

    return connectors
