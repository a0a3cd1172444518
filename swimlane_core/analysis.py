"""
Diagram analysis - connectivity discovery, repair and summarization.

The repairer guarantees that every diagram handed to the persistence layer
or a rendering surface is one connected structure with no dangling
references:
1. Prune connections whose source or target is not an element
2. Discover connected components (connections treated as undirected)
3. Pick the main component (first one holding a start event, else largest)
4. Join every other component to main through its nearest element pair
"""

import logging
import math
from collections import defaultdict
from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from .config import LayoutConfig
from .geometry import element_center
from .layout import compute_layout
from .models import Connection, ElementType

if TYPE_CHECKING:
    from .models import ProcessDiagram

logger = logging.getLogger(__name__)


@dataclass
class ConnectedComponent:
    """A connected component in the diagram graph."""
    element_ids: list[str] = field(default_factory=list)
    has_start_event: bool = False

    @property
    def size(self) -> int:
        return len(self.element_ids)


@dataclass
class RepairResult:
    """Outcome of a connectivity repair."""
    diagram: "ProcessDiagram"
    added_connections: list[Connection] = field(default_factory=list)
    pruned_connections: list[Connection] = field(default_factory=list)
    component_count: int = 0
    main_component: list[str] = field(default_factory=list)

    @property
    def changed(self) -> bool:
        return bool(self.added_connections or self.pruned_connections)

    def to_dict(self) -> dict:
        """Convert to dictionary for JSON serialization."""
        return {
            "diagram": self.diagram.to_json_dict(),
            "added_connections": [c.to_json_dict() for c in self.added_connections],
            "pruned_connections": [c.to_json_dict() for c in self.pruned_connections],
            "component_count": self.component_count,
            "main_component": list(self.main_component),
            "changed": self.changed,
        }


@dataclass
class DiagramSummary:
    """Structural summary of a process diagram."""
    name: str
    total_elements: int
    total_connections: int
    total_lanes: int
    elements_by_type: dict[str, int]
    connected_components: int
    orphan_count: int
    unassigned_elements: list[str]

    def to_dict(self) -> dict:
        """Convert to dictionary for JSON serialization."""
        return {
            "name": self.name,
            "total_elements": self.total_elements,
            "total_connections": self.total_connections,
            "total_lanes": self.total_lanes,
            "elements_by_type": self.elements_by_type,
            "start_events": self.elements_by_type.get(ElementType.START_EVENT.value, 0),
            "end_events": self.elements_by_type.get(ElementType.END_EVENT.value, 0),
            "connected_components": self.connected_components,
            "orphan_count": self.orphan_count,
            "unassigned_elements": self.unassigned_elements,
        }


def find_connected_components(diagram: "ProcessDiagram") -> list[ConnectedComponent]:
    """
    Find all connected components in the diagram using an iterative DFS.

    Connections are treated as undirected and connections that reference
    unknown elements are ignored. Traversal starts from the first unvisited
    element in list order; neighbours are pushed in connection order and
    marked visited when pushed. Each component lists its elements in the
    order they were popped, which makes discovery order reproducible.

    Args:
        diagram: The diagram to analyze

    Returns:
        List of ConnectedComponent objects in discovery order
    """
    ids = [el.id for el in diagram.elements]
    index_by_id = {element_id: i for i, element_id in enumerate(ids)}
    start_indexes = {
        i for i, el in enumerate(diagram.elements)
        if el.type == ElementType.START_EVENT
    }

    # Build adjacency list (undirected), indexed by element position
    adjacency: list[list[int]] = [[] for _ in ids]
    for connection in diagram.connections:
        a = index_by_id.get(connection.source)
        b = index_by_id.get(connection.target)
        if a is None or b is None:
            continue
        adjacency[a].append(b)
        adjacency[b].append(a)

    visited = [False] * len(ids)
    components: list[ConnectedComponent] = []

    for start in range(len(ids)):
        if visited[start]:
            continue

        visited[start] = True
        stack = [start]
        members: list[int] = []
        while stack:
            current = stack.pop()
            members.append(current)
            for neighbor in adjacency[current]:
                if not visited[neighbor]:
                    visited[neighbor] = True
                    stack.append(neighbor)

        components.append(ConnectedComponent(
            element_ids=[ids[i] for i in members],
            has_start_event=any(i in start_indexes for i in members),
        ))

    return components


def select_main_component(components: list[ConnectedComponent]) -> int:
    """
    Pick the component the others get merged into.

    The first component containing a start event wins. Otherwise the largest
    wins, ties going to the earliest discovered.

    Returns:
        Index into `components`
    """
    main = 0
    for i, component in enumerate(components):
        if component.has_start_event:
            return i
        if component.size > components[main].size:
            main = i
    return main


def repair_connectivity(
    diagram: "ProcessDiagram",
    config: LayoutConfig | None = None
) -> RepairResult:
    """
    Make a diagram a single connected structure without dangling references.

    Distances between components are measured between element centers on
    the lane layout positions, so merges follow what the user sees. Each
    non-main component gets exactly one new connection to the main
    component, directed left to right by center x.

    Args:
        diagram: A structurally valid diagram (not modified)
        config: Layout constants used to place elements for distance checks

    Returns:
        RepairResult with the repaired diagram and the connections that
        were added and pruned
    """
    elements = diagram.element_index()

    surviving: list[Connection] = []
    pruned: list[Connection] = []
    for connection in diagram.connections:
        if connection.source in elements and connection.target in elements:
            surviving.append(connection)
        else:
            pruned.append(connection)

    for connection in pruned:
        logger.info(
            "Pruned dangling connection %s -> %s", connection.source, connection.target
        )

    clean = diagram.model_copy(update={"connections": surviving})
    components = find_connected_components(clean)

    if len(components) <= 1:
        return RepairResult(
            diagram=clean,
            pruned_connections=pruned,
            component_count=len(components),
            main_component=components[0].element_ids if components else [],
        )

    main_idx = select_main_component(components)
    main_ids = components[main_idx].element_ids

    positions = compute_layout(clean, config)
    centers = {
        element_id: element_center(el.type, positions[element_id])
        for element_id, el in elements.items()
    }

    connections = list(surviving)
    existing = {c.pair for c in connections}
    added: list[Connection] = []

    for i, component in enumerate(components):
        if i == main_idx:
            continue

        best: tuple[str, str] | None = None
        best_distance = math.inf
        for a in main_ids:
            ca = centers[a]
            for b in component.element_ids:
                cb = centers[b]
                dx = ca.x - cb.x
                dy = ca.y - cb.y
                distance = dx * dx + dy * dy
                if distance < best_distance:
                    best_distance = distance
                    best = (a, b)

        a, b = best
        # Prefer left-to-right direction
        if centers[a].x <= centers[b].x:
            pair = (a, b)
        else:
            pair = (b, a)
        # Components are disjoint, so a merge pair is never already connected
        if pair in existing:
            continue

        connection = Connection(source=pair[0], target=pair[1])
        connections.append(connection)
        existing.add(pair)
        added.append(connection)
        logger.info(
            "Joined component of %d element(s) with connection %s -> %s",
            component.size, pair[0], pair[1]
        )

    return RepairResult(
        diagram=clean.model_copy(update={"connections": connections}),
        added_connections=added,
        pruned_connections=pruned,
        component_count=len(components),
        main_component=list(main_ids),
    )


def summarize_diagram(diagram: "ProcessDiagram") -> DiagramSummary:
    """
    Generate a structural summary of a diagram.

    Args:
        diagram: The diagram to summarize

    Returns:
        DiagramSummary object with all analysis results
    """
    type_counts: dict[str, int] = defaultdict(int)
    for element in diagram.elements:
        type_counts[element.type.value] += 1

    connected: set[str] = set()
    for connection in diagram.connections:
        connected.add(connection.source)
        connected.add(connection.target)

    in_lane = {element_id for lane in diagram.swimlanes for element_id in lane.elements}

    return DiagramSummary(
        name=diagram.process_name,
        total_elements=len(diagram.elements),
        total_connections=len(diagram.connections),
        total_lanes=len(diagram.swimlanes),
        elements_by_type=dict(type_counts),
        connected_components=len(find_connected_components(diagram)),
        orphan_count=sum(1 for el in diagram.elements if el.id not in connected),
        unassigned_elements=[el.id for el in diagram.elements if el.id not in in_lane],
    )
