"""
Workflow Analytics — execution-time figures derived from a graph.

Feeds the dashboard charts: time per node (bar), time per node kind
(pie) and source+target time per edge (line).
"""

from __future__ import annotations

from typing import Dict, List

from pydantic import BaseModel, ConfigDict, Field

from flowcanvas.workflow.workflow_model import WorkflowGraph, WorkflowNode


class NodeExecutionTime(BaseModel):
    id: str
    name: str
    execution_time: float
    kind: str


class PathTime(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    from_label: str = Field(alias="from")
    to_label: str = Field(alias="to")
    time: float


class WorkflowAnalytics(BaseModel):
    execution_times: List[NodeExecutionTime] = Field(default_factory=list)
    execution_time_by_kind: Dict[str, float] = Field(default_factory=dict)
    path_times: List[PathTime] = Field(default_factory=list)
    total_execution_time: float = 0.0


def compute_workflow_analytics(graph: WorkflowGraph) -> WorkflowAnalytics:
    """Derive chart data from ``graph``.

    Edges whose source or target is missing are skipped. Kinds appear
    in ``execution_time_by_kind`` in order of first occurrence.
    """
    by_id: Dict[str, WorkflowNode] = {n.id: n for n in graph.nodes}

    per_node = [
        NodeExecutionTime(
            id=n.id,
            name=n.label,
            execution_time=n.execution_time,
            kind=n.kind.value,
        )
        for n in graph.nodes
    ]

    by_kind: Dict[str, float] = {}
    for n in graph.nodes:
        by_kind[n.kind.value] = by_kind.get(n.kind.value, 0.0) + n.execution_time

    paths: List[PathTime] = []
    for edge in graph.edges:
        source = by_id.get(edge.source)
        target = by_id.get(edge.target)
        if source is None or target is None:
            continue
        paths.append(PathTime(
            from_label=source.label,
            to_label=target.label,
            time=source.execution_time + target.execution_time,
        ))

    return WorkflowAnalytics(
        execution_times=per_node,
        execution_time_by_kind=by_kind,
        path_times=paths,
        total_execution_time=sum(n.execution_time for n in graph.nodes),
    )
