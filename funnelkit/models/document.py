"""Persisted form of a funnel."""

from pydantic import BaseModel, Field

from funnelkit.models.funnel_graph import (
    FunnelEdge,
    FunnelNode,
    GraphSnapshot,
    NodeCounters,
)


class FunnelDocument(BaseModel):
    """A versioned funnel document for storage, import and export."""

    model_config = {"populate_by_name": True}

    nodes: list[FunnelNode]
    edges: list[FunnelEdge]
    node_counters: NodeCounters = Field(
        default_factory=NodeCounters, alias="nodeCounters"
    )
    version: str
    saved_at: str = Field(alias="savedAt")

    def to_snapshot(self) -> GraphSnapshot:
        """Copy the authoritative graph parts into a snapshot."""
        return GraphSnapshot.capture(self.nodes, self.edges, self.node_counters)
