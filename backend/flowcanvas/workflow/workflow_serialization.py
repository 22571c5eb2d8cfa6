"""
Workflow serialization — the ``{"nodes": [...], "edges": [...]}`` format.

Field names match the files the editor has always written:
``type`` for the node kind and ``data.executionTime`` for the
execution time in seconds.
"""

from __future__ import annotations

import json
from typing import Any, Dict, Union

from pydantic import ValidationError

from flowcanvas.workflow.workflow_model import WorkflowEdge, WorkflowGraph, WorkflowNode


class WorkflowImportError(ValueError):
    """Raised when serialized workflow text cannot be installed."""


def dump_workflow(graph: WorkflowGraph) -> Dict[str, Any]:
    """Return the graph as plain JSON-compatible data."""
    return {
        "nodes": [n.model_dump(mode="json", by_alias=True) for n in graph.nodes],
        "edges": [e.model_dump(mode="json") for e in graph.edges],
    }


def workflow_to_json(graph: WorkflowGraph, indent: int = 2) -> str:
    return json.dumps(dump_workflow(graph), indent=indent)


def load_workflow_data(data: Any) -> WorkflowGraph:
    """Build a graph from already-decoded data.

    Only the shape of individual records is checked. Structural
    problems (dangling edges, duplicate start nodes) are left to the
    validator.

    Raises:
        WorkflowImportError: If ``nodes``/``edges`` are missing or a
            record does not parse.
    """
    if not isinstance(data, dict) or "nodes" not in data or "edges" not in data:
        raise WorkflowImportError("Workflow must be an object with 'nodes' and 'edges'.")
    if not isinstance(data["nodes"], list) or not isinstance(data["edges"], list):
        raise WorkflowImportError("'nodes' and 'edges' must be arrays.")

    try:
        nodes = [WorkflowNode.model_validate(n) for n in data["nodes"]]
        edges = [WorkflowEdge.model_validate(e) for e in data["edges"]]
    except ValidationError as e:
        raise WorkflowImportError(f"Malformed workflow record: {e}") from e

    return WorkflowGraph.build(nodes, edges)


def parse_workflow(text: Union[str, bytes]) -> WorkflowGraph:
    """Parse JSON workflow text (or UTF-8/16/32 encoded bytes).

    Raises:
        WorkflowImportError: On invalid JSON, undecodable bytes or
            malformed content.
    """
    try:
        data = json.loads(text)
    except (TypeError, ValueError) as e:
        raise WorkflowImportError(f"Workflow is not valid JSON: {e}") from e
    return load_workflow_data(data)
