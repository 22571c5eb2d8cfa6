"""
Workflow Simulator — timed walk along the graph for visualization.

Idle → Running → Idle. A run starts at the first Start node, dwells
on each node for its execution time, then moves the cursor along the
node's first outgoing edge. The run ends at a node with no outgoing
edge, on ``stop()``, or when the optional step ceiling is reached.

Only one timer is pending at a time. Every scheduled step carries
the token of the run that scheduled it; a step whose token no longer
matches (the run was stopped or restarted) does nothing.
"""

from __future__ import annotations

from logging import getLogger
from typing import Callable, List, Optional

from pydantic import BaseModel, ConfigDict

from flowcanvas.config.sub_config.engine.simulation_config import SimulationConfig
from flowcanvas.workflow.scheduling import AsyncioScheduler, Scheduler, TimerHandle
from flowcanvas.workflow.workflow_graph_store import WorkflowGraphStore
from flowcanvas.workflow.workflow_model import WorkflowGraph

logger = getLogger(__name__)

STOP_COMPLETED = "completed"
STOP_REQUESTED = "stopped"
STOP_STEP_LIMIT = "step_limit"


class SimulationState(BaseModel):
    model_config = ConfigDict(frozen=True)

    is_running: bool = False
    active_node_id: Optional[str] = None
    steps: int = 0
    stop_reason: Optional[str] = None


class SimulationStep(BaseModel):
    """The cursor entered ``node_id`` at scheduler time ``at``."""

    model_config = ConfigDict(frozen=True)

    node_id: str
    at: float


SimulationListener = Callable[[SimulationState], None]


class WorkflowSimulator:
    """Drive the active-node cursor over a snapshot of the store's graph.

    The graph is captured at ``start()``; edits made while a run is in
    flight do not affect that run.
    """

    def __init__(
        self,
        store: WorkflowGraphStore,
        scheduler: Optional[Scheduler] = None,
        config: Optional[SimulationConfig] = None,
    ) -> None:
        self._store = store
        self._scheduler = scheduler or AsyncioScheduler()
        self._config = config or SimulationConfig()
        self._state = SimulationState()
        self._graph: Optional[WorkflowGraph] = None
        self._pending: Optional[TimerHandle] = None
        self._run_token = 0
        self._trace: List[SimulationStep] = []
        self._listeners: List[SimulationListener] = []

    # ── Accessors ──

    @property
    def state(self) -> SimulationState:
        return self._state

    @property
    def is_running(self) -> bool:
        return self._state.is_running

    @property
    def active_node_id(self) -> Optional[str]:
        return self._state.active_node_id

    @property
    def trace(self) -> List[SimulationStep]:
        """Cursor positions of the current (or last) run."""
        return list(self._trace)

    @property
    def config(self) -> SimulationConfig:
        return self._config

    def subscribe(self, listener: SimulationListener) -> Callable[[], None]:
        self._listeners.append(listener)

        def _unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return _unsubscribe

    # ── Control ──

    def start(self) -> bool:
        """Begin a run from the first Start node.

        Returns ``False`` (and stays idle) when the graph has no Start
        node. A run already in progress is stopped first.
        """
        graph = self._store.graph
        start_node = graph.get_start_node()
        if start_node is None:
            logger.info("Simulation not started: workflow has no Start node")
            return False

        if self._state.is_running:
            self._halt(STOP_REQUESTED)

        self._run_token += 1
        self._graph = graph
        self._trace = []
        logger.info(f"Simulation started at '{start_node.label}' ({start_node.id})")
        token = self._run_token
        self._enter(start_node.id, steps=0)
        if self._is_current(token):
            self._advance(token)
        return True

    def stop(self) -> None:
        """Stop immediately; a pending step will not fire its effect."""
        self._halt(STOP_REQUESTED)

    # ── Internals ──

    def _advance(self, token: int) -> None:
        node_id = self._state.active_node_id
        if not self._is_current(token) or self._graph is None or node_id is None:
            return

        outgoing = self._graph.get_edges_from(node_id)
        if not outgoing:
            logger.info(f"Simulation completed at {node_id} after {self._state.steps} step(s)")
            self._halt(STOP_COMPLETED)
            return

        node = self._graph.get_node(node_id)
        delay = self._config.dwell_seconds(node.execution_time if node else None)
        next_id = outgoing[0].target
        logger.debug(f"Simulation dwell {delay:.3f}s on {node_id}, next {next_id}")
        self._pending = self._scheduler.call_later(delay, lambda: self._on_timer(token, next_id))

    def _on_timer(self, token: int, next_id: str) -> None:
        if not self._is_current(token):
            return
        self._pending = None

        steps = self._state.steps + 1
        self._enter(next_id, steps)
        if not self._is_current(token):
            return

        limit = self._config.max_steps
        if limit is not None and steps >= limit:
            logger.warning(f"Simulation stopped after reaching the step ceiling ({limit})")
            self._halt(STOP_STEP_LIMIT)
            return
        self._advance(token)

    def _is_current(self, token: int) -> bool:
        # Listeners may stop or restart the run while being notified
        return token == self._run_token and self._state.is_running

    def _enter(self, node_id: str, steps: int) -> None:
        self._trace.append(SimulationStep(node_id=node_id, at=self._scheduler.now()))
        self._set_state(SimulationState(is_running=True, active_node_id=node_id, steps=steps))

    def _halt(self, reason: str) -> None:
        if self._pending is not None:
            self._pending.cancel()
            self._pending = None
        self._run_token += 1
        was_running = self._state.is_running
        self._set_state(SimulationState(steps=self._state.steps, stop_reason=reason))
        if was_running and reason == STOP_REQUESTED:
            logger.info("Simulation stopped")

    def _set_state(self, state: SimulationState) -> None:
        self._state = state
        for listener in list(self._listeners):
            try:
                listener(state)
            except Exception:
                logger.warning("Simulation listener failed", exc_info=True)

    def __repr__(self) -> str:
        return (
            f"WorkflowSimulator(running={self._state.is_running}, "
            f"active={self._state.active_node_id!r})"
        )
