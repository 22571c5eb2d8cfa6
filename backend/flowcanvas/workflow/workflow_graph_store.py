"""
Workflow Graph Store — the live graph and every operation that edits it.

The store owns the current ``WorkflowGraph``, the selection /
highlight state, and a ``WorkflowHistory``. Each successful mutation
builds a new graph, records it in the history and installs it in one
synchronous step, then notifies subscribers (renderer, persistence).

Operations that reference an unknown node are silent no-ops: they
return a ``MutationResult`` with ``changed=False`` and leave both the
graph and the history untouched.
"""

from __future__ import annotations

from logging import getLogger
from typing import Any, Callable, Dict, Iterable, List, Mapping, Optional, Union

from flowcanvas.workflow.workflow_history import WorkflowHistory
from flowcanvas.workflow.workflow_model import (
    EdgeChange,
    MutationResult,
    NodeChange,
    NodeData,
    NodeDataUpdate,
    NodeKind,
    NodePosition,
    WorkflowEdge,
    WorkflowGraph,
    WorkflowNode,
    generate_edge_id,
    generate_node_id,
)
from flowcanvas.workflow.workflow_serialization import (
    WorkflowImportError,
    dump_workflow,
    parse_workflow,
    workflow_to_json,
)

logger = getLogger(__name__)

GraphListener = Callable[[WorkflowGraph], None]
PositionLike = Union[NodePosition, Mapping[str, float]]


class WorkflowGraphStore:
    """Mutation API over the live workflow graph.

    Usage::

        store = WorkflowGraphStore()
        start = store.add_node(NodeKind.START, {"x": 0, "y": 0})
        task = store.add_node(NodeKind.TASK, {"x": 0, "y": 120})
        store.connect(start, task)
        store.undo()
    """

    def __init__(self, history: Optional[WorkflowHistory] = None) -> None:
        self._history = history or WorkflowHistory()
        self._graph: WorkflowGraph = self._history.current
        self._selected_node: Optional[WorkflowNode] = None
        self._highlighted_node_id: Optional[str] = None
        self._listeners: List[GraphListener] = []

    # ========================================================================
    # Read-only accessors
    # ========================================================================

    @property
    def graph(self) -> WorkflowGraph:
        return self._graph

    @property
    def nodes(self):
        return self._graph.nodes

    @property
    def edges(self):
        return self._graph.edges

    @property
    def history(self) -> WorkflowHistory:
        return self._history

    @property
    def selected_node(self) -> Optional[WorkflowNode]:
        return self._selected_node

    @property
    def highlighted_node_id(self) -> Optional[str]:
        return self._highlighted_node_id

    @property
    def can_undo(self) -> bool:
        return self._history.can_undo

    @property
    def can_redo(self) -> bool:
        return self._history.can_redo

    # ========================================================================
    # Subscriptions
    # ========================================================================

    def subscribe(self, listener: GraphListener) -> Callable[[], None]:
        """Call ``listener(graph)`` after every graph change.

        Returns a function that removes the listener.
        """
        self._listeners.append(listener)

        def _unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return _unsubscribe

    # ========================================================================
    # Mutations (each records one history snapshot on success)
    # ========================================================================

    def add_node(self, kind: Union[NodeKind, str], position: PositionLike) -> str:
        """Create a node with a fresh ID and return the ID."""
        kind = NodeKind(kind)
        node_id = generate_node_id(kind)
        while self._graph.has_node(node_id):
            node_id = generate_node_id(kind)

        node = WorkflowNode(
            id=node_id,
            kind=kind,
            position=_to_position(position),
            data=NodeData(label=f"New {kind.value}", execution_time=0),
        )
        self._commit(
            WorkflowGraph.build((*self._graph.nodes, node), self._graph.edges),
            f"add_node {node_id}",
        )
        return node_id

    def update_node_data(
        self,
        node_id: str,
        data: Union[NodeDataUpdate, Mapping[str, Any]],
    ) -> MutationResult:
        """Merge ``label`` / ``execution_time`` into a node.

        Unknown IDs are ignored before the patch is looked at. For a
        known node, a negative execution time raises
        ``pydantic.ValidationError``.
        """
        node = self._graph.get_node(node_id)
        if node is None:
            logger.debug(f"update_node_data: unknown node {node_id}, ignored")
            return MutationResult.unchanged("unknown_node", node_id)

        update = data if isinstance(data, NodeDataUpdate) else NodeDataUpdate.model_validate(data)

        patch = update.model_dump(exclude_none=True)
        updated = node.model_copy(update={"data": node.data.model_copy(update=patch)})
        nodes = tuple(updated if n.id == node_id else n for n in self._graph.nodes)
        self._commit(WorkflowGraph.build(nodes, self._graph.edges), f"update_node_data {node_id}")
        return MutationResult.applied(node_id)

    def apply_node_changes(self, changes: Iterable[Union[NodeChange, Mapping[str, Any]]]) -> MutationResult:
        """Apply a batch of canvas node changes.

        Only ``position`` changes flagged ``dragging`` move a node.
        The whole batch produces at most one snapshot, and a batch that
        moves nothing records none. The canvas editor records one per
        batch regardless, so an undo there can be a visible no-op.
        """
        moves: Dict[str, NodePosition] = {}
        for change in _coerce(changes, NodeChange):
            if change.type == "position" and change.dragging and change.position is not None:
                if self._graph.has_node(change.id):
                    moves[change.id] = change.position

        if not moves:
            return MutationResult.unchanged("no_position_changes")

        nodes = tuple(
            n.model_copy(update={"position": moves[n.id]}) if n.id in moves else n
            for n in self._graph.nodes
        )
        self._commit(WorkflowGraph.build(nodes, self._graph.edges), f"move {len(moves)} node(s)")
        return MutationResult.applied()

    def apply_edge_changes(self, changes: Iterable[Union[EdgeChange, Mapping[str, Any]]]) -> MutationResult:
        """Remove the edges named by ``remove`` changes, as one snapshot.

        A batch that removes nothing (unknown ids, non-``remove``
        changes) records no snapshot, unlike the canvas editor, which
        records one per batch.
        """
        removed = {c.id for c in _coerce(changes, EdgeChange) if c.type == "remove"}
        edges = tuple(e for e in self._graph.edges if e.id not in removed)
        if len(edges) == len(self._graph.edges):
            return MutationResult.unchanged("no_edges_removed")

        self._commit(
            WorkflowGraph.build(self._graph.nodes, edges),
            f"remove {len(self._graph.edges) - len(edges)} edge(s)",
        )
        return MutationResult.applied()

    def connect(self, source: str, target: str) -> MutationResult:
        """Add an edge ``source -> target``.

        Either endpoint unknown → no-op. Parallel edges between the
        same pair are allowed.
        """
        if not self._graph.has_node(source) or not self._graph.has_node(target):
            logger.debug(f"connect: unknown endpoint in {source} -> {target}, ignored")
            return MutationResult.unchanged("unknown_node")

        edge = WorkflowEdge(id=generate_edge_id(), source=source, target=target)
        self._commit(
            WorkflowGraph.build(self._graph.nodes, (*self._graph.edges, edge)),
            f"connect {source} -> {target}",
        )
        return MutationResult.applied(edge.id)

    def replace_graph(
        self,
        nodes: Iterable[WorkflowNode],
        edges: Iterable[WorkflowEdge],
    ) -> None:
        """Install a whole new graph (startup load, file import).

        The data is trusted as given: no structural validation.
        """
        graph = WorkflowGraph.build(nodes, edges)
        self._commit(graph, f"replace_graph ({len(graph.nodes)} nodes, {len(graph.edges)} edges)")

    # ========================================================================
    # Selection (no history impact)
    # ========================================================================

    def select_node(self, node_id: Optional[str]) -> None:
        self._selected_node = self._graph.get_node(node_id) if node_id else None

    def highlight_node(self, node_id: Optional[str]) -> None:
        self._highlighted_node_id = node_id

    # ========================================================================
    # Undo / Redo
    # ========================================================================

    def undo(self) -> bool:
        graph = self._history.undo()
        if graph is None:
            return False
        self._install(graph)
        return True

    def redo(self) -> bool:
        graph = self._history.redo()
        if graph is None:
            return False
        self._install(graph)
        return True

    # ========================================================================
    # Export / Import
    # ========================================================================

    def export_snapshot(self) -> Dict[str, Any]:
        """Current nodes/edges as plain data."""
        return dump_workflow(self._graph)

    def export_workflow(self) -> str:
        """Current nodes/edges as JSON text."""
        return workflow_to_json(self._graph)

    def import_workflow(self, text: Union[str, bytes]) -> MutationResult:
        """Parse ``text`` and install it via ``replace_graph``.

        Malformed input leaves the graph and the history untouched.
        """
        try:
            graph = parse_workflow(text)
        except WorkflowImportError as e:
            logger.error(f"Failed to import workflow: {e}")
            return MutationResult.unchanged(str(e))

        self.replace_graph(graph.nodes, graph.edges)
        return MutationResult.applied()

    # ========================================================================
    # Internals
    # ========================================================================

    def _commit(self, graph: WorkflowGraph, action: str) -> None:
        self._history.record(graph)
        logger.debug(
            f"{action} (history {self._history.current_index + 1}/{len(self._history)})"
        )
        self._install(graph)

    def _install(self, graph: WorkflowGraph) -> None:
        self._graph = graph
        if self._selected_node is not None:
            self._selected_node = graph.get_node(self._selected_node.id)
        for listener in list(self._listeners):
            try:
                listener(graph)
            except Exception:
                logger.warning("Graph listener failed", exc_info=True)

    def __repr__(self) -> str:
        return (
            f"WorkflowGraphStore(nodes={len(self._graph.nodes)}, "
            f"edges={len(self._graph.edges)}, history={len(self._history)})"
        )


def _to_position(position: PositionLike) -> NodePosition:
    if isinstance(position, NodePosition):
        return position
    return NodePosition.model_validate(dict(position))


def _coerce(items, model):
    return [i if isinstance(i, model) else model.model_validate(i) for i in items]
