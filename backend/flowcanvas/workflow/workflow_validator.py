"""
Workflow Validator — structural checks shown as editor warnings.

``validate_workflow`` is a pure function. It never blocks editing:
the canvas recomputes it on every change and renders the warnings.
"""

from __future__ import annotations

from enum import Enum
from typing import List, Optional, Set

from pydantic import BaseModel, Field

from flowcanvas.workflow.workflow_model import NodeKind, WorkflowGraph


class WarningCode(str, Enum):
    MISSING_START_NODE = "missing_start_node"
    MULTIPLE_START_NODES = "multiple_start_nodes"
    DISCONNECTED_NODE = "disconnected_node"


class ValidationWarning(BaseModel):
    """An advisory finding. Never raised."""

    code: WarningCode
    message: str
    node_id: Optional[str] = None


class ValidationResult(BaseModel):
    is_valid: bool
    start_node_count: int
    missing_start_node: bool = False
    multiple_start_nodes: bool = False
    disconnected_node_ids: List[str] = Field(default_factory=list)
    warnings: List[ValidationWarning] = Field(default_factory=list)


def validate_workflow(graph: WorkflowGraph) -> ValidationResult:
    """Validate the workflow graph structure.

    Rules:
        - Exactly one Start node is required.
        - Every non-Start node must touch at least one edge, either
          as source or as target. Start nodes are exempt; a lone
          Start node is only unable to simulate.
    """
    warnings: List[ValidationWarning] = []

    start_count = len(graph.get_start_nodes())
    if start_count == 0:
        warnings.append(ValidationWarning(
            code=WarningCode.MISSING_START_NODE,
            message="Workflow must have exactly one Start node.",
        ))
    elif start_count > 1:
        warnings.append(ValidationWarning(
            code=WarningCode.MULTIPLE_START_NODES,
            message=f"Workflow must have exactly one Start node (found {start_count}).",
        ))

    touched: Set[str] = set()
    for edge in graph.edges:
        touched.add(edge.source)
        touched.add(edge.target)

    disconnected: List[str] = []
    for node in graph.nodes:
        if node.kind == NodeKind.START or node.id in touched:
            continue
        disconnected.append(node.id)
        warnings.append(ValidationWarning(
            code=WarningCode.DISCONNECTED_NODE,
            message=f"Node '{node.label or node.kind.value}' ({node.id}) is disconnected (no edges).",
            node_id=node.id,
        ))

    return ValidationResult(
        is_valid=start_count == 1 and not disconnected,
        start_node_count=start_count,
        missing_start_node=start_count == 0,
        multiple_start_nodes=start_count > 1,
        disconnected_node_ids=disconnected,
        warnings=warnings,
    )
