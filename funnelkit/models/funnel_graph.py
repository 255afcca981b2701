"""Data models for the live funnel graph and its history snapshots.

Field aliases follow the JSON layout the editor persists (camelCase), so the
same models read and write stored and exported documents.
"""

from enum import Enum

from pydantic import BaseModel, Field


class NodeKind(str, Enum):
    """The closed set of funnel stage types."""

    salesPage = "salesPage"
    orderPage = "orderPage"
    upsell = "upsell"
    downsell = "downsell"
    thankYou = "thankYou"


class Position(BaseModel):
    """Canvas coordinates of a node."""

    x: float
    y: float


class NodeData(BaseModel):
    """User-visible content of a node."""

    model_config = {"populate_by_name": True}

    title: str
    button_label: str = Field(alias="buttonLabel")
    icon: str | None = None


class FunnelNode(BaseModel):
    """A stage in the funnel. The id is stable for the node's lifetime."""

    id: str
    type: NodeKind
    position: Position
    data: NodeData
    selected: bool = False


class FunnelEdge(BaseModel):
    """A directed connection between two nodes."""

    id: str
    source: str
    target: str
    selected: bool = False


class NodeCounters(BaseModel):
    """Per-kind sequence counters for upsell and downsell nodes.

    Counters only grow; deleting a node never hands its number out again.
    """

    upsell: int = Field(default=0, ge=0)
    downsell: int = Field(default=0, ge=0)


class GraphSnapshot(BaseModel):
    """An immutable copy of (nodes, edges, counters) at one point in time."""

    model_config = {"frozen": True}

    nodes: tuple[FunnelNode, ...] = ()
    edges: tuple[FunnelEdge, ...] = ()
    counters: NodeCounters = Field(default_factory=NodeCounters)

    @classmethod
    def capture(
        cls,
        nodes: list[FunnelNode] | tuple[FunnelNode, ...],
        edges: list[FunnelEdge] | tuple[FunnelEdge, ...],
        counters: NodeCounters,
    ) -> "GraphSnapshot":
        """Deep-copy the given graph parts into a new snapshot."""
        return cls(
            nodes=tuple(node.model_copy(deep=True) for node in nodes),
            edges=tuple(edge.model_copy(deep=True) for edge in edges),
            counters=counters.model_copy(),
        )
