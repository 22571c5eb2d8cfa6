"""Tests for the graph store's mutation API, selection and undo/redo."""

import json

import pytest
from pydantic import ValidationError

from flowcanvas.workflow import (
    NodeKind,
    NodePosition,
    WorkflowGraph,
    WorkflowGraphStore,
    parse_workflow,
)


def _add_pair(store: WorkflowGraphStore):
    a = store.add_node(NodeKind.START, {"x": 0, "y": 0})
    b = store.add_node(NodeKind.TASK, {"x": 0, "y": 100})
    return a, b


class TestAddNode:

    def test_defaults(self, store):
        node_id = store.add_node(NodeKind.TASK, {"x": 10, "y": 20})
        node = store.graph.get_node(node_id)

        assert node.kind == NodeKind.TASK
        assert node.label == "New task"
        assert node.execution_time == 0
        assert node.position == NodePosition(x=10, y=20)
        assert node_id.startswith("task-")

    def test_ids_unique_and_order_kept(self, store):
        ids = [store.add_node("decision", {"x": i, "y": 0}) for i in range(20)]
        assert len(set(ids)) == 20
        assert [n.id for n in store.nodes] == ids

    def test_unknown_kind_raises(self, store):
        with pytest.raises(ValueError):
            store.add_node("loop", {"x": 0, "y": 0})

    def test_pushes_history(self, store):
        store.add_node(NodeKind.START, {"x": 0, "y": 0})
        assert len(store.history) == 2
        assert store.history.current == store.graph


class TestUpdateNodeData:

    def test_merges_fields(self, store):
        node_id = store.add_node(NodeKind.TASK, {"x": 0, "y": 0})
        result = store.update_node_data(node_id, {"label": "Review"})
        assert result.changed
        store.update_node_data(node_id, {"executionTime": 4})

        node = store.graph.get_node(node_id)
        assert node.label == "Review"
        assert node.execution_time == 4

    def test_unknown_id_is_silent_noop(self, store):
        store.add_node(NodeKind.TASK, {"x": 0, "y": 0})
        before = store.graph
        length = len(store.history)

        result = store.update_node_data("missing", {"label": "x"})

        assert not result.changed
        assert result.reason == "unknown_node"
        assert store.graph is before
        assert len(store.history) == length

    def test_negative_execution_time_rejected(self, store):
        node_id = store.add_node(NodeKind.TASK, {"x": 0, "y": 0})
        with pytest.raises(ValidationError):
            store.update_node_data(node_id, {"execution_time": -1})
        assert store.graph.get_node(node_id).execution_time == 0

    def test_unknown_id_ignored_before_validation(self, store):
        store.add_node(NodeKind.TASK, {"x": 0, "y": 0})
        before = store.graph
        length = len(store.history)

        result = store.update_node_data("missing", {"execution_time": -1})

        assert not result.changed
        assert result.reason == "unknown_node"
        assert store.graph is before
        assert len(store.history) == length

    def test_selection_follows_update(self, store):
        node_id = store.add_node(NodeKind.TASK, {"x": 0, "y": 0})
        store.select_node(node_id)
        store.update_node_data(node_id, {"label": "Renamed"})
        assert store.selected_node == store.graph.get_node(node_id)
        assert store.selected_node.label == "Renamed"

    def test_earlier_snapshot_unchanged(self, store):
        node_id = store.add_node(NodeKind.TASK, {"x": 0, "y": 0})
        snapshot = store.history.current
        store.update_node_data(node_id, {"label": "Changed"})
        assert snapshot.get_node(node_id).label == "New task"


class TestNodeChanges:

    def test_only_dragging_position_changes_apply(self, store):
        a, b = _add_pair(store)
        length = len(store.history)

        result = store.apply_node_changes([
            {"type": "position", "id": a, "position": {"x": 50, "y": 60}, "dragging": True},
            {"type": "position", "id": b, "position": {"x": 99, "y": 99}, "dragging": False},
            {"type": "select", "id": b},
        ])

        assert result.changed
        assert store.graph.get_node(a).position == NodePosition(x=50, y=60)
        assert store.graph.get_node(b).position == NodePosition(x=0, y=100)
        assert len(store.history) == length + 1

    def test_batch_is_one_snapshot(self, store):
        a, b = _add_pair(store)
        length = len(store.history)
        store.apply_node_changes([
            {"type": "position", "id": a, "position": {"x": 1, "y": 1}, "dragging": True},
            {"type": "position", "id": b, "position": {"x": 2, "y": 2}, "dragging": True},
        ])
        assert len(store.history) == length + 1

    def test_batch_without_moves_records_nothing(self, store):
        a, _ = _add_pair(store)
        length = len(store.history)
        result = store.apply_node_changes([{"type": "dimensions", "id": a}])
        assert not result.changed
        assert len(store.history) == length


class TestEdges:

    def test_connect_appends_edge(self, store):
        a, b = _add_pair(store)
        result = store.connect(a, b)
        assert result.changed
        edge = store.edges[-1]
        assert edge.id == result.target_id
        assert (edge.source, edge.target) == (a, b)

    def test_connect_missing_endpoints_noop(self, store):
        _add_pair(store)
        length = len(store.history)
        result = store.connect("missing-a", "missing-b")
        assert not result.changed
        assert len(store.edges) == 0
        assert len(store.history) == length

    def test_connect_one_missing_endpoint_noop(self, store):
        a, _ = _add_pair(store)
        assert not store.connect(a, "ghost").changed
        assert len(store.edges) == 0

    def test_parallel_edges_allowed(self, store):
        a, b = _add_pair(store)
        first = store.connect(a, b)
        second = store.connect(a, b)
        assert len(store.edges) == 2
        assert first.target_id != second.target_id

    def test_remove_edges_batch(self, store):
        a, b = _add_pair(store)
        e1 = store.connect(a, b).target_id
        e2 = store.connect(b, a).target_id
        e3 = store.connect(a, b).target_id
        length = len(store.history)

        result = store.apply_edge_changes([
            {"type": "remove", "id": e1},
            {"type": "select", "id": e2},
            {"type": "remove", "id": e3},
        ])

        assert result.changed
        assert [e.id for e in store.edges] == [e2]
        assert len(store.history) == length + 1

    def test_remove_unknown_edge_noop(self, store):
        _add_pair(store)
        length = len(store.history)
        assert not store.apply_edge_changes([{"type": "remove", "id": "nope"}]).changed
        assert len(store.history) == length


class TestUndoRedo:

    def test_undo_restores_previous_graph(self, store):
        a, b = _add_pair(store)
        before = store.graph
        store.connect(a, b)

        assert store.undo()
        assert store.graph == before
        assert store.redo()
        assert len(store.edges) == 1

    def test_redo_unreachable_after_new_edit(self, store):
        a, b = _add_pair(store)
        store.connect(a, b)
        store.undo()
        store.update_node_data(a, {"label": "Begin"})
        assert not store.redo()
        assert len(store.edges) == 0

    def test_history_monotonic(self, store):
        a, b = _add_pair(store)
        store.connect(a, b)
        store.update_node_data(b, {"label": "Work"})
        assert len(store.history) >= 5
        assert store.history.current_index == len(store.history) - 1

    def test_undo_on_initial_state(self, store):
        assert not store.undo()
        assert store.graph == WorkflowGraph()

    def test_undo_clears_selection_of_removed_node(self, store):
        node_id = store.add_node(NodeKind.TASK, {"x": 0, "y": 0})
        store.select_node(node_id)
        store.undo()
        assert store.selected_node is None


class TestSelection:

    def test_select_and_highlight_do_not_touch_history(self, store):
        node_id = store.add_node(NodeKind.TASK, {"x": 0, "y": 0})
        length = len(store.history)

        store.select_node(node_id)
        store.highlight_node(node_id)
        assert store.selected_node.id == node_id
        assert store.highlighted_node_id == node_id

        store.select_node(None)
        store.highlight_node(None)
        assert store.selected_node is None
        assert store.highlighted_node_id is None
        assert len(store.history) == length


class TestExportImport:

    def test_round_trip(self, store, linear_graph):
        store.replace_graph(linear_graph.nodes, linear_graph.edges)
        text = store.export_workflow()

        other = WorkflowGraphStore()
        assert other.import_workflow(text).changed
        assert other.graph == store.graph

    def test_export_field_names(self, store, linear_graph):
        store.replace_graph(linear_graph.nodes, linear_graph.edges)
        data = store.export_snapshot()

        assert set(data) == {"nodes", "edges"}
        assert data["nodes"][1] == {
            "id": "task",
            "type": "task",
            "position": {"x": 0.0, "y": 0.0},
            "data": {"label": "Task", "executionTime": 2.0},
        }
        assert data["edges"][0] == {"id": "e1", "source": "start", "target": "task"}
        assert json.loads(store.export_workflow()) == data

    @pytest.mark.parametrize("text", [
        "not json",
        "[]",
        '{"nodes": []}',
        '{"edges": []}',
        '{"nodes": [{"id": "a", "type": "bogus"}], "edges": []}',
        '{"nodes": "x", "edges": []}',
        b'\xff\xfe{"nodes": [], "edges": []',
    ])
    def test_malformed_import_leaves_state(self, store, text):
        store.add_node(NodeKind.START, {"x": 0, "y": 0})
        before = store.graph
        length = len(store.history)

        result = store.import_workflow(text)

        assert not result.changed
        assert result.reason
        assert store.graph is before
        assert len(store.history) == length

    def test_replace_graph_trusts_dangling_edges(self, store):
        graph = parse_workflow('{"nodes": [], "edges": [{"id": "e", "source": "a", "target": "b"}]}')
        store.replace_graph(graph.nodes, graph.edges)
        assert len(store.edges) == 1
        assert len(store.history) == 2


class TestSubscribe:

    def test_listener_sees_every_change(self, store):
        seen = []
        unsubscribe = store.subscribe(seen.append)
        a, b = _add_pair(store)
        store.connect(a, b)
        store.undo()
        store.connect("x", "y")  # no-op, no notification

        assert len(seen) == 4
        assert seen[-1] == store.graph

        unsubscribe()
        store.redo()
        assert len(seen) == 4

    def test_failing_listener_does_not_revert_change(self, store):
        def boom(graph):
            raise RuntimeError("render failed")

        store.subscribe(boom)
        node_id = store.add_node(NodeKind.TASK, {"x": 0, "y": 0})
        assert store.graph.has_node(node_id)
