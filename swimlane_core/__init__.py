"""
Swimlane Core - Repair, layout and boundary geometry for swimlane process diagrams.

This package is the single source of truth for diagram topology and
geometry: every rendering surface calls the same layout and boundary
functions, and every candidate diagram goes through the same repairer.
"""

from .models import (
    # Enums
    ElementType,
    # Core models
    Position,
    Element,
    Swimlane,
    Connection,
    ProcessDiagram,
    default_diagram,
)

from .config import LayoutConfig, DEFAULT_LAYOUT_CONFIG, load_layout_config
from .geometry import (
    ConnectorGeometry,
    compute_connectors,
    element_center,
    element_footprint,
    resolve_boundary,
)
from .layout import DiagramLayout, LaneBand, build_layout, compute_layout
from .analysis import (
    ConnectedComponent,
    DiagramSummary,
    RepairResult,
    find_connected_components,
    repair_connectivity,
    select_main_component,
    summarize_diagram,
)
from .validation import (
    IssueSeverity,
    SchemaViolation,
    ValidationIssue,
    parse_diagram,
    validate_diagram,
    validation_summary,
)
from .pipeline import RenderPlan, accept_candidate, render_plan

__version__ = "0.1.0"

__all__ = [
    # Enums
    "ElementType",
    # Models
    "Position",
    "Element",
    "Swimlane",
    "Connection",
    "ProcessDiagram",
    "default_diagram",
    # Configuration
    "LayoutConfig",
    "DEFAULT_LAYOUT_CONFIG",
    "load_layout_config",
    # Geometry
    "ConnectorGeometry",
    "compute_connectors",
    "element_center",
    "element_footprint",
    "resolve_boundary",
    # Layout
    "DiagramLayout",
    "LaneBand",
    "build_layout",
    "compute_layout",
    # Analysis / repair
    "ConnectedComponent",
    "DiagramSummary",
    "RepairResult",
    "find_connected_components",
    "repair_connectivity",
    "select_main_component",
    "summarize_diagram",
    # Validation
    "IssueSeverity",
    "SchemaViolation",
    "ValidationIssue",
    "parse_diagram",
    "validate_diagram",
    "validation_summary",
    # Pipeline
    "RenderPlan",
    "accept_candidate",
    "render_plan",
]
