"""
Workflow Persistence — gateways that save and restore the live graph.

A gateway exposes ``load() -> WorkflowGraph | None`` and
``save(graph)``. ``JsonFileWorkflowGateway`` writes one JSON file per
storage key under a configurable directory; ``InMemoryWorkflowGateway``
keeps the serialized text in a dict.

Load failures are reported as ``None`` (start from an empty graph);
callers decide what to do with save failures.
"""

from __future__ import annotations

from logging import getLogger
from pathlib import Path
from typing import Dict, Optional, Protocol, Union

from flowcanvas.config.sub_config.general.storage_config import StorageConfig
from flowcanvas.workflow.workflow_model import WorkflowGraph
from flowcanvas.workflow.workflow_serialization import (
    WorkflowImportError,
    parse_workflow,
    workflow_to_json,
)

logger = getLogger(__name__)

DEFAULT_STORAGE_KEY = "workflow-state"


class WorkflowGateway(Protocol):
    def load(self) -> Optional[WorkflowGraph]: ...

    def save(self, graph: WorkflowGraph) -> None: ...


class JsonFileWorkflowGateway:
    """Persist the workflow as ``<storage_dir>/<key>.json``."""

    def __init__(
        self,
        storage_dir: Union[str, Path],
        key: str = DEFAULT_STORAGE_KEY,
    ) -> None:
        self._dir = Path(storage_dir)
        self._key = key

    @classmethod
    def from_config(cls, config: Optional[StorageConfig] = None) -> "JsonFileWorkflowGateway":
        config = config or StorageConfig.get_default_instance()
        return cls(config.storage_dir, config.storage_key)

    @property
    def path(self) -> Path:
        return self._path_for(self._key)

    def save(self, graph: WorkflowGraph) -> None:
        """Write the graph; OSError propagates to the caller."""
        self._dir.mkdir(parents=True, exist_ok=True)
        self.path.write_text(workflow_to_json(graph), encoding="utf-8")
        logger.debug(f"Workflow saved: {self.path} ({len(graph.nodes)} nodes)")

    def load(self) -> Optional[WorkflowGraph]:
        path = self.path
        if not path.exists():
            return None
        try:
            graph = parse_workflow(path.read_text(encoding="utf-8"))
        except (OSError, WorkflowImportError) as e:
            logger.error(f"Failed to load workflow {path.name}: {e}")
            return None
        logger.info(f"Workflow loaded: {path} ({len(graph.nodes)} nodes, {len(graph.edges)} edges)")
        return graph

    def delete(self) -> bool:
        path = self.path
        if path.exists():
            path.unlink()
            logger.info(f"Workflow deleted: {path}")
            return True
        return False

    def _path_for(self, key: str) -> Path:
        # Sanitize key for filesystem
        safe_key = "".join(c for c in key if c.isalnum() or c in "-_") or DEFAULT_STORAGE_KEY
        return self._dir / f"{safe_key}.json"


class InMemoryWorkflowGateway:
    """Key/value gateway holding serialized text, e.g. for tests or embedding."""

    def __init__(self, key: str = DEFAULT_STORAGE_KEY) -> None:
        self._key = key
        self.items: Dict[str, str] = {}

    def save(self, graph: WorkflowGraph) -> None:
        self.items[self._key] = workflow_to_json(graph)

    def load(self) -> Optional[WorkflowGraph]:
        raw = self.items.get(self._key)
        if raw is None:
            return None
        try:
            return parse_workflow(raw)
        except WorkflowImportError as e:
            logger.error(f"Failed to load workflow '{self._key}': {e}")
            return None
