"""Tests for the JSON workflow format."""

import json

import pytest

from flowcanvas.workflow import (
    NodeKind,
    WorkflowImportError,
    dump_workflow,
    parse_workflow,
)
from flowcanvas.workflow.workflow_serialization import load_workflow_data


class TestParse:

    def test_editor_file_with_extra_keys(self):
        text = json.dumps({
            "nodes": [
                {
                    "id": "start-1",
                    "type": "start",
                    "position": {"x": 10, "y": 20},
                    "data": {"label": "Begin", "executionTime": 2},
                    "selected": True,
                    "width": 150,
                },
            ],
            "edges": [
                {"id": "e", "source": "start-1", "target": "start-1", "sourceHandle": None},
            ],
            "viewport": {"zoom": 1},
        })
        graph = parse_workflow(text)

        node = graph.nodes[0]
        assert node.kind == NodeKind.START
        assert node.label == "Begin"
        assert node.execution_time == 2
        assert graph.edges[0].source == "start-1"

    def test_missing_optional_fields_use_defaults(self):
        graph = load_workflow_data({
            "nodes": [{"id": "t", "type": "task"}],
            "edges": [{"source": "t", "target": "t"}],
        })
        assert graph.nodes[0].execution_time == 0
        assert graph.nodes[0].label == ""
        assert graph.edges[0].id.startswith("edge-")

    def test_negative_execution_time_rejected(self):
        with pytest.raises(WorkflowImportError):
            load_workflow_data({
                "nodes": [{"id": "t", "type": "task", "data": {"label": "x", "executionTime": -3}}],
                "edges": [],
            })

    def test_import_error_is_value_error(self):
        with pytest.raises(ValueError):
            parse_workflow("{")


class TestDump:

    def test_dump_is_json_serializable(self, linear_graph):
        data = dump_workflow(linear_graph)
        assert parse_workflow(json.dumps(data)) == linear_graph
        assert data["nodes"][0]["type"] == "start"
