"""
Workflow Engine — state behind the visual task-graph editor.

Holds the live graph, its undo/redo history, structural validation,
derived analytics and the timed simulation walk.

Architecture:
    workflow_model         — Nodes, edges, immutable graphs, change records
    workflow_history       — Linear undo/redo snapshot log
    workflow_graph_store   — Mutation API over the live graph
    workflow_validator     — Start-node and connectivity warnings
    workflow_simulator     — Timed traversal cursor
    scheduling             — Cancellable delayed calls (asyncio / virtual clock)
    workflow_serialization — JSON export/import format
    workflow_persistence   — Load/save gateways
    workflow_analytics     — Execution-time chart data
    workflow_engine        — Explicitly owned bundle of the above
"""

from flowcanvas.workflow.scheduling import (
    AsyncioScheduler,
    Scheduler,
    VirtualClockScheduler,
)
from flowcanvas.workflow.workflow_analytics import (
    WorkflowAnalytics,
    compute_workflow_analytics,
)
from flowcanvas.workflow.workflow_engine import WorkflowEngine
from flowcanvas.workflow.workflow_graph_store import WorkflowGraphStore
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
)
from flowcanvas.workflow.workflow_persistence import (
    InMemoryWorkflowGateway,
    JsonFileWorkflowGateway,
    WorkflowGateway,
)
from flowcanvas.workflow.workflow_serialization import (
    WorkflowImportError,
    dump_workflow,
    parse_workflow,
    workflow_to_json,
)
from flowcanvas.workflow.workflow_simulator import (
    SimulationState,
    SimulationStep,
    WorkflowSimulator,
)
from flowcanvas.workflow.workflow_validator import (
    ValidationResult,
    ValidationWarning,
    WarningCode,
    validate_workflow,
)

__all__ = [
    "AsyncioScheduler",
    "Scheduler",
    "VirtualClockScheduler",
    "WorkflowAnalytics",
    "compute_workflow_analytics",
    "WorkflowEngine",
    "WorkflowGraphStore",
    "WorkflowHistory",
    "EdgeChange",
    "MutationResult",
    "NodeChange",
    "NodeData",
    "NodeDataUpdate",
    "NodeKind",
    "NodePosition",
    "WorkflowEdge",
    "WorkflowGraph",
    "WorkflowNode",
    "InMemoryWorkflowGateway",
    "JsonFileWorkflowGateway",
    "WorkflowGateway",
    "WorkflowImportError",
    "dump_workflow",
    "parse_workflow",
    "workflow_to_json",
    "SimulationState",
    "SimulationStep",
    "WorkflowSimulator",
    "ValidationResult",
    "ValidationWarning",
    "WarningCode",
    "validate_workflow",
]
