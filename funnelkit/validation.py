"""Structural validation of a funnel graph.

Everything here is a pure function of (nodes, edges). Results are recomputed
on every call; nothing is cached between graph mutations.

Rules, evaluated per node:

- a Thank You node must not have outgoing connections (error)
- a Sales Page should have exactly one outgoing connection (warning for none
  or several)
- any other node with neither incoming nor outgoing connections is
  disconnected from the funnel (warning)
"""

from collections.abc import Sequence

from funnelkit.models.diagnostic import (
    Diagnostic,
    DiagnosticKind,
    NodeValidationState,
    ValidationResult,
)
from funnelkit.models.funnel_graph import FunnelEdge, FunnelNode, NodeKind


def outgoing_edges(node_id: str, edges: Sequence[FunnelEdge]) -> list[FunnelEdge]:
    """Edges leaving node_id."""
    return [edge for edge in edges if edge.source == node_id]


def incoming_edges(node_id: str, edges: Sequence[FunnelEdge]) -> list[FunnelEdge]:
    """Edges entering node_id."""
    return [edge for edge in edges if edge.target == node_id]


def _check_node(node: FunnelNode, edges: Sequence[FunnelEdge]) -> list[Diagnostic]:
    outgoing = len(outgoing_edges(node.id, edges))
    incoming = len(incoming_edges(node.id, edges))
    title = node.data.title
    found: list[Diagnostic] = []

    if node.type == NodeKind.thankYou and outgoing > 0:
        found.append(Diagnostic(
            scope=node.id,
            kind=DiagnosticKind.error,
            message=f'"{title}" (Thank You) should not have outgoing connections',
        ))

    if node.type == NodeKind.salesPage:
        if outgoing == 0:
            found.append(Diagnostic(
                scope=node.id,
                kind=DiagnosticKind.warning,
                message=f'"{title}" (Sales Page) should have at least one outgoing connection',
            ))
        elif outgoing > 1:
            found.append(Diagnostic(
                scope=node.id,
                kind=DiagnosticKind.warning,
                message=(
                    f'"{title}" (Sales Page) typically has one outgoing '
                    f"connection, but has {outgoing}"
                ),
            ))
    elif outgoing == 0 and incoming == 0:
        found.append(Diagnostic(
            scope=node.id,
            kind=DiagnosticKind.warning,
            message=f'"{title}" is not connected to the funnel',
        ))

    return found


def collect_diagnostics(
    nodes: Sequence[FunnelNode],
    edges: Sequence[FunnelEdge],
) -> list[Diagnostic]:
    """All diagnostics for the graph, in node order."""
    found: list[Diagnostic] = []
    for node in nodes:
        found.extend(_check_node(node, edges))
    return found


def _summarize(diagnostics: list[Diagnostic]) -> ValidationResult:
    errors = [d.message for d in diagnostics if d.kind == DiagnosticKind.error]
    warnings = [d.message for d in diagnostics if d.kind == DiagnosticKind.warning]
    return ValidationResult(is_valid=not errors, errors=errors, warnings=warnings)


def validate(
    nodes: Sequence[FunnelNode],
    edges: Sequence[FunnelEdge],
) -> ValidationResult:
    """Validate the whole graph. is_valid is true iff there are no errors."""
    return _summarize(collect_diagnostics(nodes, edges))


def _node_state(node_id: str, diagnostics: list[Diagnostic]) -> NodeValidationState:
    errors = [d.message for d in diagnostics if d.kind == DiagnosticKind.error]
    warnings = [d.message for d in diagnostics if d.kind == DiagnosticKind.warning]
    return NodeValidationState(
        node_id=node_id,
        has_error=bool(errors),
        has_warning=bool(warnings),
        error_message=errors[0] if errors else None,
        warning_message=warnings[0] if warnings else None,
        diagnostics=diagnostics,
    )


def node_diagnostics(
    nodes: Sequence[FunnelNode],
    edges: Sequence[FunnelEdge],
) -> dict[str, NodeValidationState]:
    """Side table of node id -> validation state, one entry per node."""
    return {node.id: _node_state(node.id, _check_node(node, edges)) for node in nodes}


class FunnelValidator:
    """One validation pass over a graph, with per-node lookup.

    Build a new validator after every mutation; an instance never observes
    later changes to the lists it was given.
    """

    def __init__(
        self,
        nodes: Sequence[FunnelNode],
        edges: Sequence[FunnelEdge],
    ) -> None:
        self._states = node_diagnostics(nodes, edges)
        self.result = _summarize(
            [d for state in self._states.values() for d in state.diagnostics]
        )

    def diagnostics_for(self, node_id: str) -> NodeValidationState | None:
        """Validation state for node_id, or None if it is not in the graph."""
        return self._states.get(node_id)
