"""Bounded linear undo/redo history of graph snapshots."""

import logging

from funnelkit.models.funnel_graph import (
    FunnelEdge,
    FunnelNode,
    GraphSnapshot,
    NodeCounters,
)

logger = logging.getLogger(__name__)

MAX_HISTORY_SIZE = 50


class HistoryManager:
    """A stack of snapshots with a movable cursor.

    The cursor indexes the snapshot matching the live graph, or is -1 when
    the stack is empty. Pushing after an undo discards the redo branch.
    """

    def __init__(self, capacity: int = MAX_HISTORY_SIZE) -> None:
        if capacity < 1:
            raise ValueError("history capacity must be at least 1")
        self.capacity = capacity
        self._snapshots: list[GraphSnapshot] = []
        self._cursor = -1

    def __len__(self) -> int:
        return len(self._snapshots)

    @property
    def cursor(self) -> int:
        return self._cursor

    @property
    def can_undo(self) -> bool:
        return self._cursor > 0

    @property
    def can_redo(self) -> bool:
        return self._cursor < len(self._snapshots) - 1

    @property
    def current(self) -> GraphSnapshot | None:
        """The snapshot under the cursor."""
        if self._cursor < 0:
            return None
        return self._snapshots[self._cursor]

    def push(
        self,
        nodes: list[FunnelNode] | tuple[FunnelNode, ...],
        edges: list[FunnelEdge] | tuple[FunnelEdge, ...],
        counters: NodeCounters,
    ) -> GraphSnapshot:
        """Record a deep copy of the graph as the newest entry."""
        snapshot = GraphSnapshot.capture(nodes, edges, counters)
        del self._snapshots[self._cursor + 1:]
        self._snapshots.append(snapshot)
        self._cursor = len(self._snapshots) - 1

        if len(self._snapshots) > self.capacity:
            self._snapshots.pop(0)
            self._cursor -= 1
            logger.debug("history full, evicted oldest snapshot")

        return snapshot

    def undo(self) -> GraphSnapshot | None:
        """Step back one entry. Returns None at the oldest entry."""
        if not self.can_undo:
            return None
        self._cursor -= 1
        return self._snapshots[self._cursor]

    def redo(self) -> GraphSnapshot | None:
        """Step forward one entry. Returns None at the newest entry."""
        if not self.can_redo:
            return None
        self._cursor += 1
        return self._snapshots[self._cursor]

    def clear(self) -> None:
        """Drop every entry and reset the cursor."""
        self._snapshots.clear()
        self._cursor = -1
