"""
Workflow Engine — one editor session's store, history, simulator and gateway.

The host application constructs an engine explicitly; there is no
process-wide instance. When a gateway is attached the engine loads
from it once (``load()``) and saves after every graph change. Gateway
failures are logged and never interrupt editing.

Usage::

    engine = WorkflowEngine.create(gateway=JsonFileWorkflowGateway("~/.flowcanvas"))
    engine.load()
    start = engine.store.add_node("start", {"x": 0, "y": 0})
    engine.validate()
    engine.simulator.start()
"""

from __future__ import annotations

from logging import getLogger
from typing import Callable, Optional

from flowcanvas.config.sub_config.engine.history_config import HistoryConfig
from flowcanvas.config.sub_config.engine.simulation_config import SimulationConfig
from flowcanvas.workflow.scheduling import Scheduler
from flowcanvas.workflow.workflow_analytics import WorkflowAnalytics, compute_workflow_analytics
from flowcanvas.workflow.workflow_graph_store import WorkflowGraphStore
from flowcanvas.workflow.workflow_history import WorkflowHistory
from flowcanvas.workflow.workflow_model import WorkflowGraph
from flowcanvas.workflow.workflow_persistence import WorkflowGateway
from flowcanvas.workflow.workflow_simulator import WorkflowSimulator
from flowcanvas.workflow.workflow_validator import ValidationResult, validate_workflow

logger = getLogger(__name__)


class WorkflowEngine:
    """Explicitly owned engine state for one workflow editor."""

    def __init__(
        self,
        store: WorkflowGraphStore,
        simulator: WorkflowSimulator,
        gateway: Optional[WorkflowGateway] = None,
    ) -> None:
        self._store = store
        self._simulator = simulator
        self._gateway = gateway
        self._unsubscribe_save: Optional[Callable[[], None]] = None
        self._save_failures = 0

        if gateway is not None:
            self._unsubscribe_save = store.subscribe(self._save)

    @classmethod
    def create(
        cls,
        gateway: Optional[WorkflowGateway] = None,
        scheduler: Optional[Scheduler] = None,
        simulation_config: Optional[SimulationConfig] = None,
        history_config: Optional[HistoryConfig] = None,
    ) -> "WorkflowEngine":
        """Build an engine; configs default to their environment values."""
        history_config = history_config or HistoryConfig.get_default_instance()
        simulation_config = simulation_config or SimulationConfig.get_default_instance()

        for config in (history_config, simulation_config):
            errors = config.validate()
            if errors:
                raise ValueError(
                    f"Invalid {config.get_config_name()} config:\n"
                    + "\n".join(f"  • {e}" for e in errors)
                )

        store = WorkflowGraphStore(WorkflowHistory(max_entries=history_config.max_entries))
        simulator = WorkflowSimulator(store, scheduler=scheduler, config=simulation_config)
        return cls(store, simulator, gateway)

    # ── Components ──

    @property
    def store(self) -> WorkflowGraphStore:
        return self._store

    @property
    def history(self) -> WorkflowHistory:
        return self._store.history

    @property
    def simulator(self) -> WorkflowSimulator:
        return self._simulator

    @property
    def gateway(self) -> Optional[WorkflowGateway]:
        return self._gateway

    @property
    def save_failures(self) -> int:
        return self._save_failures

    # ── Derived state ──

    def validate(self) -> ValidationResult:
        return validate_workflow(self._store.graph)

    def analytics(self) -> WorkflowAnalytics:
        return compute_workflow_analytics(self._store.graph)

    # ── Persistence ──

    def load(self) -> bool:
        """Install the gateway's saved graph, if any.

        Returns ``False`` when there is no gateway, nothing saved, or
        the load failed; the engine then keeps its current graph.
        """
        if self._gateway is None:
            return False
        try:
            graph = self._gateway.load()
        except Exception as e:
            logger.warning(f"Workflow load failed, starting empty: {e}")
            return False
        if graph is None:
            return False
        self._store.replace_graph(graph.nodes, graph.edges)
        return True

    def detach(self) -> None:
        """Stop saving to the gateway and halt any simulation."""
        self._simulator.stop()
        if self._unsubscribe_save is not None:
            self._unsubscribe_save()
            self._unsubscribe_save = None

    def _save(self, graph: WorkflowGraph) -> None:
        try:
            self._gateway.save(graph)
        except Exception as e:
            self._save_failures += 1
            logger.warning(f"Workflow save failed (not retried): {e}")

    def __repr__(self) -> str:
        return f"WorkflowEngine(store={self._store!r}, simulator={self._simulator!r})"
