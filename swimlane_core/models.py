"""
Core data models for swimlane process diagrams.

These models define the canonical schema for a process diagram:
- Elements (start/end events, tasks, gateways) with a stored position
- Swimlanes that group element ids in a meaningful left-to-right order
- Connections (sequence flows) between elements using source/target naming

Field Naming Convention:
- The JSON document uses `processName` for the diagram title
- Python code uses `process_name`; both are accepted on input
- Connection labels are optional and omitted from JSON when absent
"""

from enum import Enum
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, model_validator


class ElementType(str, Enum):
    """Kinds of nodes a process diagram can contain."""
    START_EVENT = "start_event"
    END_EVENT = "end_event"
    TASK = "task"
    GATEWAY = "gateway"

    @property
    def is_event(self) -> bool:
        return self in (ElementType.START_EVENT, ElementType.END_EVENT)


class Position(BaseModel):
    """A point on the canvas (top-left anchor when attached to an element)."""
    model_config = ConfigDict(frozen=True)

    x: float = Field(strict=True)
    y: float = Field(strict=True)


class Element(BaseModel):
    """A node in the diagram."""
    model_config = ConfigDict(frozen=True)

    id: str = Field(min_length=1)
    type: ElementType
    label: str = ""
    # Stored position; rendering always uses the lane layout instead
    position: Position


class Swimlane(BaseModel):
    """An ordered horizontal grouping of element ids."""
    model_config = ConfigDict(frozen=True)

    id: str
    label: str = ""
    elements: list[str] = Field(default_factory=list)


class Connection(BaseModel):
    """A directed sequence flow between two elements."""
    model_config = ConfigDict(frozen=True)

    source: str
    target: str
    label: Optional[str] = None

    @property
    def pair(self) -> tuple[str, str]:
        return (self.source, self.target)

    def to_json_dict(self) -> dict:
        """Convert to JSON-serializable dict."""
        result = {"source": self.source, "target": self.target}
        # Only include the label if it's set
        if self.label is not None:
            result["label"] = self.label
        return result


class ProcessDiagram(BaseModel):
    """
    The complete process diagram.

    This is the document exchanged with the instruction applier, the
    persistence layer and the rendering surface. Instances are treated as
    immutable snapshots: every operation in this package returns a new
    diagram instead of editing one in place.
    """
    model_config = ConfigDict(frozen=True, populate_by_name=True)

    process_name: str = Field(alias="processName")
    swimlanes: list[Swimlane] = Field(default_factory=list)
    elements: list[Element] = Field(default_factory=list)
    connections: list[Connection] = Field(default_factory=list)

    @model_validator(mode="after")
    def check_unique_element_ids(self) -> "ProcessDiagram":
        seen: set[str] = set()
        for element in self.elements:
            if element.id in seen:
                raise ValueError(f"Duplicate element id: {element.id}")
            seen.add(element.id)
        return self

    def to_json_dict(self) -> dict:
        """Convert to JSON-serializable dict with proper field names."""
        return {
            "processName": self.process_name,
            "swimlanes": [lane.model_dump() for lane in self.swimlanes],
            "elements": [el.model_dump(mode="json") for el in self.elements],
            "connections": [c.to_json_dict() for c in self.connections],
        }

    @classmethod
    def from_json_dict(cls, data: dict) -> "ProcessDiagram":
        """Create a ProcessDiagram from a JSON dict."""
        return cls.model_validate(data)

    def element_index(self) -> dict[str, Element]:
        """Map element id -> Element, preserving element list order."""
        return {el.id: el for el in self.elements}

    def get_element(self, element_id: str) -> Optional[Element]:
        """Get an element by ID (O(n) - use element_index() for repeated lookups)."""
        for element in self.elements:
            if element.id == element_id:
                return element
        return None

    def has_connection(self, source: str, target: str) -> bool:
        """True if a connection source -> target already exists."""
        return any(c.source == source and c.target == target for c in self.connections)


def default_diagram() -> ProcessDiagram:
    """The starter diagram a new workflow opens with."""
    return ProcessDiagram(
        process_name="Untitled Process",
        swimlanes=[
            Swimlane(id="lane-1", label="Lane A", elements=["start-1", "task-1"]),
            Swimlane(id="lane-2", label="Lane B", elements=["end-1"]),
        ],
        elements=[
            Element(id="start-1", type=ElementType.START_EVENT, label="Start",
                    position=Position(x=80, y=80)),
            Element(id="task-1", type=ElementType.TASK, label="Task",
                    position=Position(x=240, y=70)),
            Element(id="end-1", type=ElementType.END_EVENT, label="End",
                    position=Position(x=420, y=80)),
        ],
        connections=[
            Connection(source="start-1", target="task-1"),
            Connection(source="task-1", target="end-1"),
        ],
    )
