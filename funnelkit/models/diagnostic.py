"""Validation output models.

Diagnostics are derived from (nodes, edges) on demand. They are never part of
a snapshot or a persisted document.
"""

from enum import Enum

from pydantic import BaseModel, Field

from funnelkit.models.funnel_graph import FunnelNode, NodeData

GRAPH_SCOPE = "graph"


class DiagnosticKind(str, Enum):
    error = "error"
    warning = "warning"


class Diagnostic(BaseModel):
    """A single finding, scoped to the whole graph or one node id."""

    scope: str = GRAPH_SCOPE
    kind: DiagnosticKind
    message: str


class ValidationResult(BaseModel):
    """Whole-graph validation outcome. Warnings never affect is_valid."""

    model_config = {"populate_by_name": True}

    is_valid: bool = Field(alias="isValid")
    errors: list[str] = []
    warnings: list[str] = []


class NodeValidationState(BaseModel):
    """Per-node side-table entry joined onto nodes at render time."""

    model_config = {"populate_by_name": True}

    node_id: str = Field(alias="nodeId")
    has_error: bool = Field(default=False, alias="hasError")
    has_warning: bool = Field(default=False, alias="hasWarning")
    error_message: str | None = Field(default=None, alias="errorMessage")
    warning_message: str | None = Field(default=None, alias="warningMessage")
    diagnostics: list[Diagnostic] = []


class RenderNodeData(NodeData):
    validation: NodeValidationState | None = None


class RenderNode(FunnelNode):
    """A node enriched with its diagnostics for display only."""

    data: RenderNodeData
