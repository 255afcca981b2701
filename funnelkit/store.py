"""The authoritative in-memory funnel graph.

GraphStore is the only place the live (nodes, edges, counters) triple changes.
Every discrete action (add, remove, connect) builds the new triple first,
commits it in one step and then pushes it to history, so a failed action
leaves both the live graph and history untouched. Undo and redo replace the
live triple with a copy of a history snapshot.
"""

import logging
from collections.abc import Callable, Iterable

from funnelkit.factory import create_node, reconcile_counters
from funnelkit.history import HistoryManager
from funnelkit.models.change import GraphChange
from funnelkit.models.diagnostic import (
    NodeValidationState,
    RenderNode,
    ValidationResult,
)
from funnelkit.models.document import FunnelDocument
from funnelkit.models.funnel_graph import (
    FunnelEdge,
    FunnelNode,
    GraphSnapshot,
    NodeCounters,
    NodeKind,
    Position,
)
from funnelkit.utils.identifiers import generate_edge_id
from funnelkit.validation import FunnelValidator

logger = logging.getLogger(__name__)

StoreListener = Callable[["GraphStore"], None]


class GraphStore:
    """Owns the live funnel graph and its undo history.

    Usage:
        store = GraphStore()
        sales = store.add_node("salesPage", Position(x=0, y=0))
        order = store.add_node("orderPage", Position(x=300, y=0))
        store.connect(sales.id, order.id)
        store.validation.is_valid
        store.undo()
    """

    def __init__(
        self,
        history: HistoryManager | None = None,
        initial: GraphSnapshot | None = None,
    ) -> None:
        """Initialize the store and record its starting state.

        Args:
            history: history to push into. A fresh one is created if None.
            initial: starting graph. Defaults to an empty graph.
        """
        self.history = history or HistoryManager()
        self._nodes: list[FunnelNode] = []
        self._edges: list[FunnelEdge] = []
        self._counters = NodeCounters()
        self._listeners: list[StoreListener] = []
        self._restore(initial or GraphSnapshot())
        self.history.push(self._nodes, self._edges, self._counters)

    # read side

    @property
    def nodes(self) -> list[FunnelNode]:
        return [node.model_copy(deep=True) for node in self._nodes]

    @property
    def edges(self) -> list[FunnelEdge]:
        return [edge.model_copy(deep=True) for edge in self._edges]

    @property
    def counters(self) -> NodeCounters:
        return self._counters.model_copy()

    @property
    def can_undo(self) -> bool:
        return self.history.can_undo

    @property
    def can_redo(self) -> bool:
        return self.history.can_redo

    def snapshot(self) -> GraphSnapshot:
        """A deep copy of the live graph."""
        return GraphSnapshot.capture(self._nodes, self._edges, self._counters)

    def get_node(self, node_id: str) -> FunnelNode | None:
        for node in self._nodes:
            if node.id == node_id:
                return node.model_copy(deep=True)
        return None

    @property
    def validation(self) -> ValidationResult:
        """Whole-graph diagnostics for the current graph."""
        return FunnelValidator(self._nodes, self._edges).result

    def diagnostics_for(self, node_id: str) -> NodeValidationState | None:
        return FunnelValidator(self._nodes, self._edges).diagnostics_for(node_id)

    def render_nodes(self) -> list[RenderNode]:
        """Nodes joined with their validation state under data.validation."""
        validator = FunnelValidator(self._nodes, self._edges)
        rendered = []
        for node in self._nodes:
            payload = node.model_dump()
            payload["data"]["validation"] = validator.diagnostics_for(node.id)
            rendered.append(RenderNode.model_validate(payload))
        return rendered

    def subscribe(self, listener: StoreListener) -> Callable[[], None]:
        """Call listener after every change to the live graph.

        Returns:
            A callable that removes the listener again.
        """
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    # structural operations

    def add_node(self, kind: NodeKind | str, position: Position) -> FunnelNode:
        """Create a node of kind at position and append it.

        Raises:
            UnknownNodeKind: if kind has no template. Nothing is changed.
        """
        node, counters = create_node(kind, position, self._counters)
        self._commit([*self._nodes, node], self._edges, counters)
        logger.debug("added node %s", node.id)
        return node.model_copy(deep=True)

    def remove_nodes(self, node_ids: Iterable[str]) -> list[str]:
        """Remove nodes and every edge touching them as one step.

        Ids that are not in the graph are ignored.

        Returns:
            The ids that were actually removed.
        """
        doomed = set(node_ids)
        removed = [node.id for node in self._nodes if node.id in doomed]
        if removed:
            self._remove(set(removed), set())
            logger.debug("removed nodes %s", removed)
        return removed

    def remove_edges(self, edge_ids: Iterable[str]) -> list[str]:
        """Remove edges by id. Nodes are never touched.

        Returns:
            The ids that were actually removed.
        """
        doomed = set(edge_ids)
        removed = [edge.id for edge in self._edges if edge.id in doomed]
        if removed:
            self._remove(set(), set(removed))
        return removed

    def connect(self, source_id: str, target_id: str) -> FunnelEdge | None:
        """Add an edge from source_id to target_id.

        Self-loops, parallel edges and edges against a kind's connection
        capability are accepted here and reported by validation instead.

        Returns:
            The new edge, or None if either endpoint is not in the graph.
        """
        node_ids = {node.id for node in self._nodes}
        if source_id not in node_ids or target_id not in node_ids:
            logger.debug("connect skipped, missing endpoint %s -> %s", source_id, target_id)
            return None
        edge = FunnelEdge(
            id=generate_edge_id(source_id, target_id),
            source=source_id,
            target=target_id,
        )
        self._commit(self._nodes, [*self._edges, edge], self._counters)
        return edge.model_copy()

    def apply_changes(self, changes: Iterable[GraphChange], record: bool = False) -> None:
        """Apply position, selection and removal changes.

        Position and selection updates are transient and do not touch history
        unless record is True. All removals in the batch, node and edge alike,
        are committed as one history entry.
        """
        node_index = {node.id: node for node in self._nodes}
        edge_index = {edge.id: edge for edge in self._edges}
        removals: list[str] = []
        touched = False

        for change in changes:
            if change.type == "remove":
                removals.append(change.id)
                continue
            target = node_index.get(change.id) or edge_index.get(change.id)
            if target is None:
                continue
            if change.type == "position":
                if isinstance(target, FunnelNode):
                    target.position = change.position.model_copy()
                    touched = True
            elif change.type == "select":
                target.selected = change.selected
                touched = True

        recorded = bool(removals) and self._remove(set(removals), set(removals))
        if touched and not recorded:
            if record:
                self.history.push(self._nodes, self._edges, self._counters)
            self._notify()

    # history

    def undo(self) -> bool:
        """Restore the previous history entry. Returns False at the oldest."""
        snapshot = self.history.undo()
        if snapshot is None:
            return False
        self._restore(snapshot)
        self._notify()
        return True

    def redo(self) -> bool:
        """Restore the next history entry. Returns False at the newest."""
        snapshot = self.history.redo()
        if snapshot is None:
            return False
        self._restore(snapshot)
        self._notify()
        return True

    def replace(self, source: FunnelDocument | GraphSnapshot) -> None:
        """Swap in a whole new graph as a fresh history baseline."""
        if isinstance(source, FunnelDocument):
            source = source.to_snapshot()
        self._restore(source)
        self.history.clear()
        self.history.push(self._nodes, self._edges, self._counters)
        logger.info(
            "replaced funnel: %d nodes, %d edges", len(self._nodes), len(self._edges)
        )
        self._notify()

    # internals

    def _commit(
        self,
        nodes: list[FunnelNode],
        edges: list[FunnelEdge],
        counters: NodeCounters,
    ) -> None:
        self._nodes = nodes
        self._edges = edges
        self._counters = counters
        self.history.push(self._nodes, self._edges, self._counters)
        self._notify()

    def _remove(self, node_ids: set[str], edge_ids: set[str]) -> bool:
        """Drop the given nodes and edges plus every edge attached to a
        dropped node, and commit the result as one history entry.

        Returns:
            False if nothing matched.
        """
        nodes = [node for node in self._nodes if node.id not in node_ids]
        gone = {node.id for node in self._nodes} - {node.id for node in nodes}
        edges = [
            edge for edge in self._edges
            if edge.id not in edge_ids and edge.source not in gone and edge.target not in gone
        ]
        if len(nodes) == len(self._nodes) and len(edges) == len(self._edges):
            return False
        self._commit(nodes, edges, self._counters)
        return True

    def _restore(self, snapshot: GraphSnapshot) -> None:
        self._nodes = [node.model_copy(deep=True) for node in snapshot.nodes]
        self._edges = [edge.model_copy(deep=True) for edge in snapshot.edges]
        self._counters = reconcile_counters(self._nodes, snapshot.counters)

    def _notify(self) -> None:
        for listener in list(self._listeners):
            listener(self)
