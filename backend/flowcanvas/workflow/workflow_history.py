"""
Workflow History — linear undo/redo log of graph snapshots.

The log always holds at least one snapshot (the empty graph it was
created with) and a cursor pointing at the current one. Recording
after an undo discards the redo branch; branching history is not
supported.
"""

from __future__ import annotations

from logging import getLogger
from typing import List, Optional, Tuple

from flowcanvas.workflow.workflow_model import EMPTY_GRAPH, WorkflowGraph

logger = getLogger(__name__)


class WorkflowHistory:
    """Snapshot stack with a ``current_index`` cursor.

    Invariant: ``0 <= current_index < len(self)``.

    Snapshots are frozen ``WorkflowGraph`` objects, so storing the
    reference is enough to keep earlier entries independent.
    """

    def __init__(
        self,
        initial: WorkflowGraph = EMPTY_GRAPH,
        max_entries: Optional[int] = None,
    ) -> None:
        if max_entries is not None and max_entries < 1:
            raise ValueError(f"max_entries must be >= 1, got {max_entries}")
        self._entries: List[WorkflowGraph] = [initial]
        self._index = 0
        self._max_entries = max_entries

    # ── Accessors ──

    def __len__(self) -> int:
        return len(self._entries)

    @property
    def current_index(self) -> int:
        return self._index

    @property
    def current(self) -> WorkflowGraph:
        return self._entries[self._index]

    @property
    def entries(self) -> Tuple[WorkflowGraph, ...]:
        return tuple(self._entries)

    @property
    def can_undo(self) -> bool:
        return self._index > 0

    @property
    def can_redo(self) -> bool:
        return self._index < len(self._entries) - 1

    @property
    def max_entries(self) -> Optional[int]:
        return self._max_entries

    # ── State transitions ──

    def record(self, graph: WorkflowGraph) -> None:
        """Append ``graph`` after the cursor, dropping any redo branch."""
        dropped = len(self._entries) - (self._index + 1)
        del self._entries[self._index + 1:]
        self._entries.append(graph)
        self._index = len(self._entries) - 1
        if dropped:
            logger.debug(f"History: discarded {dropped} redo snapshot(s)")

        if self._max_entries is not None and len(self._entries) > self._max_entries:
            overflow = len(self._entries) - self._max_entries
            del self._entries[:overflow]
            self._index -= overflow

    def undo(self) -> Optional[WorkflowGraph]:
        """Step back one snapshot; ``None`` when already at the oldest."""
        if self._index == 0:
            return None
        self._index -= 1
        return self._entries[self._index]

    def redo(self) -> Optional[WorkflowGraph]:
        """Step forward one snapshot; ``None`` when already at the newest."""
        if self._index >= len(self._entries) - 1:
            return None
        self._index += 1
        return self._entries[self._index]

    def __repr__(self) -> str:
        return f"WorkflowHistory(entries={len(self._entries)}, current_index={self._index})"
