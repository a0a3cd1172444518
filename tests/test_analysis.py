"""Tests for component discovery, connectivity repair and summaries."""

import logging
import random

import pytest

from swimlane_core import (
    Connection,
    ConnectedComponent,
    ElementType,
    find_connected_components,
    repair_connectivity,
    select_main_component,
    summarize_diagram,
)

from conftest import make_diagram


ELEMENT_TYPES = [t.value for t in ElementType]


def _random_diagram(seed):
    """Random diagram with a few lanes, random flows and some dangling refs."""
    rng = random.Random(seed)
    count = rng.randint(2, 12)
    ids = [f"n{i}" for i in range(count)]
    elements = [(element_id, rng.choice(ELEMENT_TYPES)) for element_id in ids]
    lanes = [[] for _ in range(rng.randint(1, 3))]
    for element_id in ids:
        rng.choice(lanes).append(element_id)
    connections = []
    for _ in range(rng.randint(0, count)):
        source = rng.choice(ids + ["ghost"])
        target = rng.choice(ids)
        connections.append((source, target))
    return make_diagram(elements=elements, connections=connections, lanes=lanes)


class TestFindConnectedComponents:
    """Tests for find_connected_components()."""

    def test_discovery_order_is_dfs_pop_order(self):
        diagram = make_diagram(
            elements=[("a", "task"), ("b", "task"), ("c", "task"), ("d", "task")],
            connections=[("a", "b"), ("a", "c"), ("c", "d")],
        )
        components = find_connected_components(diagram)
        assert [c.element_ids for c in components] == [["a", "c", "d", "b"]]

    def test_direction_is_ignored(self):
        diagram = make_diagram(
            elements=[("a", "task"), ("b", "task"), ("c", "task")],
            connections=[("b", "a"), ("c", "b")],
        )
        assert len(find_connected_components(diagram)) == 1

    def test_isolated_elements_are_components(self):
        diagram = make_diagram(elements=[("a", "task"), ("b", "task"), ("c", "start_event")])
        components = find_connected_components(diagram)
        assert [c.element_ids for c in components] == [["a"], ["b"], ["c"]]
        assert [c.has_start_event for c in components] == [False, False, True]

    def test_dangling_connections_ignored(self):
        diagram = make_diagram(
            elements=[("a", "task"), ("b", "task")],
            connections=[("a", "ghost"), ("ghost", "b")],
        )
        assert len(find_connected_components(diagram)) == 2

    def test_empty_diagram(self):
        assert find_connected_components(make_diagram(elements=[])) == []


class TestSelectMainComponent:
    """Tests for select_main_component()."""

    def test_start_event_wins_over_size(self):
        components = [
            ConnectedComponent(element_ids=["a", "b", "c"]),
            ConnectedComponent(element_ids=["s"], has_start_event=True),
        ]
        assert select_main_component(components) == 1

    def test_first_start_event_wins(self):
        components = [
            ConnectedComponent(element_ids=["a"]),
            ConnectedComponent(element_ids=["s1"], has_start_event=True),
            ConnectedComponent(element_ids=["s2", "x", "y"], has_start_event=True),
        ]
        assert select_main_component(components) == 1

    def test_largest_without_start_event(self):
        components = [
            ConnectedComponent(element_ids=["a"]),
            ConnectedComponent(element_ids=["b", "c", "d"]),
            ConnectedComponent(element_ids=["e", "f"]),
        ]
        assert select_main_component(components) == 1

    def test_size_tie_goes_to_earliest(self):
        components = [
            ConnectedComponent(element_ids=["a", "b"]),
            ConnectedComponent(element_ids=["c", "d"]),
        ]
        assert select_main_component(components) == 0


class TestRepairConnectivity:
    """Tests for repair_connectivity()."""

    def test_disjoint_merge_scenario(self, disjoint_diagram):
        result = repair_connectivity(disjoint_diagram)

        assert result.component_count == 2
        assert set(result.main_component) == {"s1", "t1"}
        assert result.added_connections == [Connection(source="s1", target="t2")]
        assert result.diagram.connections == [
            Connection(source="s1", target="t1"),
            Connection(source="t2", target="e1"),
            Connection(source="s1", target="t2"),
        ]
        assert len(find_connected_components(result.diagram)) == 1

    def test_distances_use_layout_positions(self, disjoint_diagram):
        # Stored positions would pair t1 with e1; layout positions do not
        moved = disjoint_diagram.model_copy(update={
            "elements": [
                el.model_copy(update={"position": el.position.model_copy(
                    update={"x": 1000 if el.id in ("t1", "e1") else 0}
                )})
                for el in disjoint_diagram.elements
            ]
        })
        result = repair_connectivity(moved)
        assert result.added_connections == [Connection(source="s1", target="t2")]

    def test_direction_is_left_to_right(self):
        # Main component sits to the right of the stray element
        diagram = make_diagram(
            elements=[("s", "start_event"), ("t", "task"), ("stray", "task")],
            connections=[("s", "t")],
            lanes=[["stray", "s", "t"]],
        )
        result = repair_connectivity(diagram)
        assert result.added_connections == [Connection(source="stray", target="s")]

    def test_main_element_is_source_on_equal_x(self):
        diagram = make_diagram(
            elements=[("s", "start_event"), ("t", "task"), ("below", "task")],
            connections=[("s", "t")],
            lanes=[["t", "s"], ["below"]],
        )
        result = repair_connectivity(diagram)
        assert result.added_connections == [Connection(source="t", target="below")]

    def test_merges_each_component_into_main(self):
        diagram = make_diagram(
            elements=[
                ("a", "task"), ("b", "task"), ("c", "task"),
                ("d", "task"), ("e", "task"), ("f", "task"),
            ],
            connections=[("a", "b"), ("d", "e"), ("e", "f")],
            lanes=[["a", "b"], ["c"], ["d", "e", "f"]],
        )
        result = repair_connectivity(diagram)

        main = set(result.main_component)
        assert main == {"d", "e", "f"}
        assert len(result.added_connections) == 2
        for connection in result.added_connections:
            assert (connection.source in main) != (connection.target in main)

    def test_prunes_dangling_connections(self):
        diagram = make_diagram(
            elements=[("s", "start_event"), ("t", "task")],
            connections=[("s", "ghost"), ("s", "t"), ("phantom", "t")],
        )
        result = repair_connectivity(diagram)

        assert result.pruned_connections == [
            Connection(source="s", target="ghost"),
            Connection(source="phantom", target="t"),
        ]
        assert result.diagram.connections == [Connection(source="s", target="t")]
        assert result.added_connections == []
        assert result.changed

    def test_connected_diagram_is_unchanged(self, starter_diagram):
        result = repair_connectivity(starter_diagram)
        assert result.diagram == starter_diagram
        assert result.diagram.connections == starter_diagram.connections
        assert not result.changed

    def test_input_is_not_modified(self, disjoint_diagram):
        before = disjoint_diagram.to_json_dict()
        repair_connectivity(disjoint_diagram)
        assert disjoint_diagram.to_json_dict() == before

    def test_no_connections_at_all(self):
        diagram = make_diagram(
            elements=[("s", "start_event"), ("a", "task"), ("b", "gateway"), ("e", "end_event")],
        )
        result = repair_connectivity(diagram)
        assert result.component_count == 4
        assert len(result.added_connections) == 3
        assert len(find_connected_components(result.diagram)) == 1

    @pytest.mark.parametrize("elements", [[], [("only", "task")]])
    def test_trivial_diagrams(self, elements):
        diagram = make_diagram(elements=elements)
        result = repair_connectivity(diagram)
        assert result.added_connections == []
        assert result.diagram == diagram

    def test_logs_added_connections(self, disjoint_diagram, caplog):
        with caplog.at_level(logging.INFO, logger="swimlane_core.analysis"):
            repair_connectivity(disjoint_diagram)
        assert "s1 -> t2" in caplog.text

    @pytest.mark.parametrize("seed", range(40))
    def test_random_diagrams_end_up_connected(self, seed):
        diagram = _random_diagram(seed)
        before = find_connected_components(diagram)
        result = repair_connectivity(diagram)
        ids = {el.id for el in result.diagram.elements}

        assert len(find_connected_components(result.diagram)) == 1
        assert len(result.added_connections) == len(before) - 1
        assert all(c.source in ids and c.target in ids for c in result.diagram.connections)
        assert result.diagram.elements == diagram.elements
        # Survivors keep their order, additions come last
        survivors = [c for c in diagram.connections if c.source in ids and c.target in ids]
        assert result.diagram.connections == survivors + result.added_connections

    @pytest.mark.parametrize("seed", range(10))
    def test_repair_is_deterministic_and_idempotent(self, seed):
        diagram = _random_diagram(seed)
        first = repair_connectivity(diagram)
        second = repair_connectivity(diagram)
        assert first.to_dict() == second.to_dict()

        again = repair_connectivity(first.diagram)
        assert again.diagram == first.diagram
        assert not again.changed


class TestSummarizeDiagram:
    """Tests for summarize_diagram()."""

    def test_summary_counts(self):
        diagram = make_diagram(
            elements=[("s", "start_event"), ("t", "task"), ("x", "task"), ("e", "end_event")],
            connections=[("s", "t")],
            lanes=[["s", "t"], ["e"]],
        )
        summary = summarize_diagram(diagram).to_dict()

        assert summary["total_elements"] == 4
        assert summary["total_connections"] == 1
        assert summary["total_lanes"] == 2
        assert summary["elements_by_type"] == {"start_event": 1, "task": 2, "end_event": 1}
        assert summary["start_events"] == 1
        assert summary["end_events"] == 1
        assert summary["connected_components"] == 3
        assert summary["orphan_count"] == 2
        assert summary["unassigned_elements"] == ["x"]
