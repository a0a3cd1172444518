"""
Entry points that chain the core components.

accept_candidate(): candidate diagram -> validator -> connectivity repairer
render_plan():      diagram -> lane layout -> connector geometry
"""

import logging
from dataclasses import dataclass, field
from typing import Any

from .analysis import RepairResult, repair_connectivity
from .config import LayoutConfig
from .geometry import ConnectorGeometry, compute_connectors
from .layout import DiagramLayout, build_layout
from .models import ProcessDiagram
from .validation import IssueSeverity, parse_diagram, validate_diagram

logger = logging.getLogger(__name__)


@dataclass
class RenderPlan:
    """Layout and connector geometry for one render of a diagram."""
    layout: DiagramLayout
    connectors: list[ConnectorGeometry] = field(default_factory=list)

    def to_json_dict(self) -> dict:
        result = self.layout.to_dict()
        result["connectors"] = [c.to_dict() for c in self.connectors]
        return result


def accept_candidate(
    candidate: ProcessDiagram | dict[str, Any],
    config: LayoutConfig | None = None
) -> RepairResult:
    """
    Turn a candidate diagram into the next canonical diagram.

    Args:
        candidate: Raw JSON data or an already parsed ProcessDiagram
        config: Layout constants used by the repairer's distance checks

    Returns:
        RepairResult whose diagram is connected and reference-clean

    Raises:
        SchemaViolation: if raw data does not match the diagram schema
    """
    if isinstance(candidate, ProcessDiagram):
        diagram = candidate
    else:
        diagram = parse_diagram(candidate)

    for issue in validate_diagram(diagram):
        if issue.severity == IssueSeverity.INFO:
            logger.debug("Candidate diagram: %s", issue.message)
        else:
            logger.info("Candidate diagram: %s", issue.message)

    result = repair_connectivity(diagram, config)
    if result.changed:
        logger.info(
            "Repaired %r: %d connection(s) added, %d pruned",
            diagram.process_name,
            len(result.added_connections),
            len(result.pruned_connections),
        )
    return result


def render_plan(
    diagram: ProcessDiagram,
    config: LayoutConfig | None = None
) -> RenderPlan:
    """Compute positions and connector geometry for drawing a diagram."""
    layout = build_layout(diagram, config)
    return RenderPlan(
        layout=layout,
        connectors=compute_connectors(diagram, layout.positions),
    )
