"""Core data models for funnelkit."""

from funnelkit.models.change import GraphChange
from funnelkit.models.diagnostic import (
    GRAPH_SCOPE,
    Diagnostic,
    DiagnosticKind,
    NodeValidationState,
    RenderNode,
    RenderNodeData,
    ValidationResult,
)
from funnelkit.models.document import FunnelDocument
from funnelkit.models.funnel_graph import (
    FunnelEdge,
    FunnelNode,
    GraphSnapshot,
    NodeCounters,
    NodeData,
    NodeKind,
    Position,
)
from funnelkit.models.node_template import (
    NODE_TEMPLATES,
    NodeTemplate,
    can_have_incoming_connections,
    can_have_outgoing_connections,
)

__all__ = [
    # Graph
    "FunnelEdge",
    "FunnelNode",
    "GraphSnapshot",
    "NodeCounters",
    "NodeData",
    "NodeKind",
    "Position",
    # Templates
    "NODE_TEMPLATES",
    "NodeTemplate",
    "can_have_incoming_connections",
    "can_have_outgoing_connections",
    # Diagnostics
    "GRAPH_SCOPE",
    "Diagnostic",
    "DiagnosticKind",
    "NodeValidationState",
    "RenderNode",
    "RenderNodeData",
    "ValidationResult",
    # Changes and documents
    "GraphChange",
    "FunnelDocument",
]
