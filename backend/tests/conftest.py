"""Shared fixtures for workflow engine tests."""

import pytest

from flowcanvas.config import SimulationConfig
from flowcanvas.workflow import (
    NodeData,
    NodeKind,
    VirtualClockScheduler,
    WorkflowEdge,
    WorkflowGraph,
    WorkflowGraphStore,
    WorkflowNode,
    WorkflowSimulator,
)


def make_node(node_id: str, kind: NodeKind, label: str = "", execution_time: float = 0) -> WorkflowNode:
    return WorkflowNode(
        id=node_id,
        kind=kind,
        data=NodeData(label=label or node_id, execution_time=execution_time),
    )


@pytest.fixture(autouse=True)
def _clean_env(monkeypatch):
    for name in (
        "FLOWCANVAS_SIM_TIME_SCALE",
        "FLOWCANVAS_SIM_MIN_DWELL",
        "FLOWCANVAS_SIM_MAX_STEPS",
        "FLOWCANVAS_HISTORY_MAX_ENTRIES",
        "FLOWCANVAS_STORAGE_DIR",
        "FLOWCANVAS_STORAGE_KEY",
    ):
        monkeypatch.delenv(name, raising=False)


@pytest.fixture
def store() -> WorkflowGraphStore:
    return WorkflowGraphStore()


@pytest.fixture
def clock() -> VirtualClockScheduler:
    return VirtualClockScheduler()


@pytest.fixture
def linear_graph() -> WorkflowGraph:
    """Start(1s) → Task(2s) → End(0s)."""
    return WorkflowGraph.build(
        [
            make_node("start", NodeKind.START, "Start", 1),
            make_node("task", NodeKind.TASK, "Task", 2),
            make_node("end", NodeKind.END, "End", 0),
        ],
        [
            WorkflowEdge(id="e1", source="start", target="task"),
            WorkflowEdge(id="e2", source="task", target="end"),
        ],
    )


@pytest.fixture
def simulator(store, clock) -> WorkflowSimulator:
    return WorkflowSimulator(store, scheduler=clock, config=SimulationConfig())
