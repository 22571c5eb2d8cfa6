"""
Workflow Data Models — nodes, edges, graphs, and editor change records.

These are the serializable data structures that describe a
user-designed workflow graph. They are owned by
``WorkflowGraphStore``, snapshotted by ``WorkflowHistory`` and
walked by ``WorkflowSimulator``.

All models are frozen: a mutation always builds a new graph, so a
``WorkflowGraph`` held by the history log never changes afterwards.
"""

from __future__ import annotations

import uuid
from enum import Enum
from typing import Iterable, List, Optional, Tuple

from pydantic import BaseModel, ConfigDict, Field


class NodeKind(str, Enum):
    """Node types available on the canvas."""
    START = "start"
    TASK = "task"
    DECISION = "decision"
    END = "end"


def generate_node_id(kind: NodeKind) -> str:
    return f"{kind.value}-{uuid.uuid4().hex[:8]}"


def generate_edge_id() -> str:
    return f"edge-{uuid.uuid4().hex[:8]}"


class NodePosition(BaseModel):
    """Canvas coordinate. Presentation only, never read by the engine."""

    model_config = ConfigDict(frozen=True)

    x: float = 0.0
    y: float = 0.0


class NodeData(BaseModel):
    """User-editable payload of a node."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    label: str = ""
    execution_time: float = Field(default=0.0, ge=0, alias="executionTime")


class NodeDataUpdate(BaseModel):
    """Partial ``NodeData`` used by ``update_node_data``.

    Fields left as ``None`` keep their current value.
    """

    model_config = ConfigDict(populate_by_name=True)

    label: Optional[str] = None
    execution_time: Optional[float] = Field(default=None, ge=0, alias="executionTime")


class WorkflowNode(BaseModel):
    """A single node placed on the workflow canvas.

    ``kind`` is serialized as ``type`` to stay compatible with the
    editor's saved files.
    """

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    id: str
    kind: NodeKind = Field(alias="type")
    position: NodePosition = Field(default_factory=NodePosition)
    data: NodeData = Field(default_factory=NodeData)

    @property
    def label(self) -> str:
        return self.data.label

    @property
    def execution_time(self) -> float:
        return self.data.execution_time


class WorkflowEdge(BaseModel):
    """A directed edge between two nodes."""

    model_config = ConfigDict(frozen=True)

    id: str = Field(default_factory=generate_edge_id)
    source: str  # source node ID
    target: str  # target node ID


class WorkflowGraph(BaseModel):
    """A complete, immutable workflow graph.

    Node order is insertion order; the simulator relies on edge order
    to pick the first outgoing edge.
    """

    model_config = ConfigDict(frozen=True)

    nodes: Tuple[WorkflowNode, ...] = ()
    edges: Tuple[WorkflowEdge, ...] = ()

    @classmethod
    def build(
        cls,
        nodes: Iterable[WorkflowNode] = (),
        edges: Iterable[WorkflowEdge] = (),
    ) -> "WorkflowGraph":
        return cls(nodes=tuple(nodes), edges=tuple(edges))

    def get_node(self, node_id: str) -> Optional[WorkflowNode]:
        """Find a node by ID."""
        for n in self.nodes:
            if n.id == node_id:
                return n
        return None

    def has_node(self, node_id: str) -> bool:
        return self.get_node(node_id) is not None

    def get_edges_from(self, node_id: str) -> List[WorkflowEdge]:
        """Get all edges originating from a node, in insertion order."""
        return [e for e in self.edges if e.source == node_id]

    def get_edges_to(self, node_id: str) -> List[WorkflowEdge]:
        """Get all edges pointing to a node."""
        return [e for e in self.edges if e.target == node_id]

    def get_start_nodes(self) -> List[WorkflowNode]:
        return [n for n in self.nodes if n.kind == NodeKind.START]

    def get_start_node(self) -> Optional[WorkflowNode]:
        """Find the first node of kind 'start'."""
        starts = self.get_start_nodes()
        return starts[0] if starts else None


# ============================================================================
# Editor change records
# ============================================================================


class NodeChange(BaseModel):
    """One entry of a batched node change emitted by the canvas.

    Only ``position`` changes with ``dragging`` set move a node;
    other change types (``select``, ``dimensions``, ``remove``) are
    accepted and ignored.
    """

    type: str
    id: str
    position: Optional[NodePosition] = None
    dragging: bool = False


class EdgeChange(BaseModel):
    """One entry of a batched edge change emitted by the canvas."""

    type: str
    id: str


class MutationResult(BaseModel):
    """Outcome of a store operation that may be a silent no-op."""

    model_config = ConfigDict(frozen=True)

    changed: bool
    target_id: Optional[str] = None
    reason: Optional[str] = None

    def __bool__(self) -> bool:
        return self.changed

    @classmethod
    def applied(cls, target_id: Optional[str] = None) -> "MutationResult":
        return cls(changed=True, target_id=target_id)

    @classmethod
    def unchanged(cls, reason: str, target_id: Optional[str] = None) -> "MutationResult":
        return cls(changed=False, target_id=target_id, reason=reason)


EMPTY_GRAPH = WorkflowGraph()
