"""Pytest configuration and shared fixtures for swimlane core tests."""

import pytest

from swimlane_core import (
    Connection,
    Element,
    ElementType,
    Position,
    ProcessDiagram,
    Swimlane,
    default_diagram,
)


def make_element(element_id, element_type="task", x=0, y=0, label=None):
    return Element(
        id=element_id,
        type=ElementType(element_type),
        label=label if label is not None else element_id,
        position=Position(x=x, y=y),
    )


def make_diagram(elements, connections=(), lanes=None, name="Test Process"):
    """
    Build a diagram from compact tuples.

    elements: list of (id, type) or (id, type, x, y) tuples
    connections: list of (source, target) or (source, target, label) tuples
    lanes: list of member-id lists; defaults to one lane holding every element
    """
    built = [make_element(*fields) for fields in elements]
    if lanes is None:
        lanes = [[el.id for el in built]]
    return ProcessDiagram(
        process_name=name,
        swimlanes=[
            Swimlane(id=f"lane-{i + 1}", label=f"Lane {chr(ord('A') + i)}", elements=list(members))
            for i, members in enumerate(lanes)
        ],
        elements=built,
        connections=[Connection(source=c[0], target=c[1], label=c[2] if len(c) > 2 else None)
                     for c in connections],
    )


@pytest.fixture
def starter_diagram():
    """The default two-lane diagram."""
    return default_diagram()


@pytest.fixture
def disjoint_diagram():
    """Two components: s1 -> t1 in lane A, t2 -> e1 in lane B."""
    return make_diagram(
        elements=[
            ("s1", "start_event"),
            ("t1", "task"),
            ("t2", "task"),
            ("e1", "end_event"),
        ],
        connections=[("s1", "t1"), ("t2", "e1")],
        lanes=[["s1", "t1"], ["t2", "e1"]],
    )


@pytest.fixture
def three_task_lane():
    """One lane with three tasks in order."""
    return make_diagram(
        elements=[("t1", "task"), ("t2", "task"), ("t3", "task")],
        connections=[("t1", "t2"), ("t2", "t3")],
    )


@pytest.fixture
def raw_document():
    """A candidate document as the instruction applier would hand it over."""
    return {
        "processName": "Order handling",
        "swimlanes": [
            {"id": "lane-1", "label": "Sales", "elements": ["start", "receive"]},
            {"id": "lane-2", "label": "Warehouse", "elements": ["ship", "end"]},
        ],
        "elements": [
            {"id": "start", "type": "start_event", "label": "Start", "position": {"x": 80, "y": 80}},
            {"id": "receive", "type": "task", "label": "Receive order", "position": {"x": 240, "y": 70}},
            {"id": "ship", "type": "task", "label": "Ship", "position": {"x": 240, "y": 250}},
            {"id": "end", "type": "end_event", "label": "End", "position": {"x": 420, "y": 260}},
        ],
        "connections": [
            {"source": "start", "target": "receive"},
            {"source": "ship", "target": "end", "label": "done"},
            {"source": "receive", "target": "ghost"},
        ],
    }
