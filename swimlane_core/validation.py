"""
Diagram validation - structural checks for process diagrams.

Two layers:
- parse_diagram() turns raw JSON data into a ProcessDiagram and rejects
  anything structurally malformed with SchemaViolation
- validate_diagram() reports topology problems on a parsed diagram; none of
  them are fatal because the repairer and the layout engine recover from all
  of them
"""

from collections import Counter
from dataclasses import dataclass
from enum import Enum
from typing import Any

from pydantic import ValidationError

from .analysis import find_connected_components
from .models import ElementType, ProcessDiagram


class SchemaViolation(ValueError):
    """Raw diagram data failed structural or type validation."""

    def __init__(self, errors: list[dict]):
        self.errors = errors
        details = "; ".join(
            f"{'/'.join(str(p) for p in err.get('loc', ())) or '<root>'}: {err.get('msg', '')}"
            for err in errors
        )
        super().__init__(f"Schema validation failed: {details}")


class IssueSeverity(str, Enum):
    """Severity levels for validation issues."""
    ERROR = "error"      # Reference problem, repaired by pruning
    WARNING = "warning"  # Potential problem, should review
    INFO = "info"        # Informational, may be intentional


@dataclass
class ValidationIssue:
    """A single validation issue found in a diagram."""
    severity: IssueSeverity
    message: str
    element_id: str | None = None
    lane_id: str | None = None

    def to_dict(self) -> dict:
        """Convert to dictionary for JSON serialization."""
        result = {
            "type": self.severity.value,
            "message": self.message
        }
        if self.element_id:
            result["element_id"] = self.element_id
        if self.lane_id:
            result["lane_id"] = self.lane_id
        return result


def parse_diagram(data: Any) -> ProcessDiagram:
    """
    Parse raw diagram data.

    Args:
        data: Decoded JSON document (dict)

    Returns:
        The validated ProcessDiagram

    Raises:
        SchemaViolation: if the data does not match the diagram schema
    """
    try:
        return ProcessDiagram.model_validate(data)
    except ValidationError as e:
        raise SchemaViolation(e.errors(include_url=False)) from e


def validate_diagram(diagram: ProcessDiagram) -> list[ValidationIssue]:
    """
    Validate a diagram and return a list of issues.

    Checks for:
    - Connections to non-existent elements - ERROR
    - Lane members that are not elements - WARNING
    - Elements in no lane / in several lanes - WARNING
    - Duplicate connections (same source->target) - WARNING
    - Self-referencing connections - WARNING
    - Disconnected graph - WARNING
    - Empty diagram, missing start event - INFO

    Args:
        diagram: The diagram to validate

    Returns:
        List of ValidationIssue objects
    """
    issues: list[ValidationIssue] = []

    if not diagram.elements:
        issues.append(ValidationIssue(
            severity=IssueSeverity.INFO,
            message="Diagram has no elements"
        ))
        return issues

    element_ids = {el.id for el in diagram.elements}

    # Check for invalid connection references
    for connection in diagram.connections:
        for role, ref in (("source", connection.source), ("target", connection.target)):
            if ref not in element_ids:
                issues.append(ValidationIssue(
                    severity=IssueSeverity.ERROR,
                    message=f"Connection references non-existent {role} element: {ref}",
                    element_id=ref
                ))

    # Check lane membership
    lanes_by_element: dict[str, list[str]] = {}
    for lane in diagram.swimlanes:
        for member in lane.elements:
            if member not in element_ids:
                issues.append(ValidationIssue(
                    severity=IssueSeverity.WARNING,
                    message=f"Lane lists non-existent element: {member}",
                    element_id=member,
                    lane_id=lane.id
                ))
                continue
            lanes_by_element.setdefault(member, []).append(lane.id)

    for element in diagram.elements:
        lanes = lanes_by_element.get(element.id, [])
        if not lanes:
            issues.append(ValidationIssue(
                severity=IssueSeverity.WARNING,
                message=f"Element is not assigned to any lane: {element.label or element.id}",
                element_id=element.id
            ))
        elif len(set(lanes)) > 1:
            issues.append(ValidationIssue(
                severity=IssueSeverity.WARNING,
                message=f"Element is listed in several lanes: {', '.join(lanes)}",
                element_id=element.id
            ))

    # Check for self-referencing connections
    for connection in diagram.connections:
        if connection.source == connection.target:
            issues.append(ValidationIssue(
                severity=IssueSeverity.WARNING,
                message="Self-referencing connection (element points to itself)",
                element_id=connection.source
            ))

    # Check for duplicate connections (same source->target)
    seen_pairs: set[tuple[str, str]] = set()
    for connection in diagram.connections:
        if connection.pair in seen_pairs:
            issues.append(ValidationIssue(
                severity=IssueSeverity.WARNING,
                message=f"Duplicate connection from {connection.source} to {connection.target}",
                element_id=connection.source
            ))
        else:
            seen_pairs.add(connection.pair)

    components = find_connected_components(diagram)
    if len(components) > 1:
        issues.append(ValidationIssue(
            severity=IssueSeverity.WARNING,
            message=f"Diagram is split into {len(components)} disconnected parts"
        ))

    if not any(el.type == ElementType.START_EVENT for el in diagram.elements):
        issues.append(ValidationIssue(
            severity=IssueSeverity.INFO,
            message="Diagram has no start event"
        ))

    return issues


def validation_summary(issues: list[ValidationIssue]) -> dict:
    """
    Create a summary of validation issues.

    Args:
        issues: List of validation issues

    Returns:
        Dictionary with counts by severity
    """
    counts = Counter(issue.severity for issue in issues)
    errors = counts[IssueSeverity.ERROR]
    return {
        "total": len(issues),
        "errors": errors,
        "warnings": counts[IssueSeverity.WARNING],
        "info": counts[IssueSeverity.INFO],
        "valid": errors == 0,
    }
