"""Tests for the structural validation rules."""

from funnelkit.models import (
    FunnelEdge,
    FunnelNode,
    NodeData,
    NodeKind,
    Position,
)
from funnelkit.models.diagnostic import DiagnosticKind
from funnelkit.validation import FunnelValidator, node_diagnostics, validate


def _node(node_id: str, kind: NodeKind, title: str | None = None) -> FunnelNode:
    return FunnelNode(
        id=node_id,
        type=kind,
        position=Position(x=0, y=0),
        data=NodeData(title=title or kind.value, button_label="Go"),
    )


def _edge(source: str, target: str) -> FunnelEdge:
    return FunnelEdge(id=f"{source}->{target}", source=source, target=target)


class TestSalesPageRules:
    """Sales pages need exactly one way forward."""

    def test_lone_sales_page_warns_once(self):
        """A single sales page is valid but warns about its missing exit."""
        result = validate([_node("s", NodeKind.salesPage, "Sales Page")], [])
        assert result.is_valid
        assert result.errors == []
        assert len(result.warnings) == 1
        assert "should have at least one outgoing connection" in result.warnings[0]

    def test_connecting_sales_page_clears_warning(self):
        nodes = [_node("s", NodeKind.salesPage), _node("o", NodeKind.orderPage)]
        result = validate(nodes, [_edge("s", "o")])
        assert result.is_valid
        assert result.warnings == []

    def test_multiple_exits_warn_with_count(self):
        nodes = [
            _node("s", NodeKind.salesPage, "Sales Page"),
            _node("o", NodeKind.orderPage),
            _node("u", NodeKind.upsell),
        ]
        result = validate(nodes, [_edge("s", "o"), _edge("s", "u")])
        assert result.is_valid
        assert result.warnings == [
            '"Sales Page" (Sales Page) typically has one outgoing connection, but has 2'
        ]


class TestThankYouRules:
    """Thank-you pages end the funnel."""

    def test_outgoing_edge_is_an_error(self):
        """A thank-you node that continues the funnel invalidates the graph."""
        nodes = [_node("t", NodeKind.thankYou, "Thank You"), _node("o", NodeKind.orderPage)]
        result = validate(nodes, [_edge("t", "o")])
        assert not result.is_valid
        assert result.errors == ['"Thank You" (Thank You) should not have outgoing connections']

    def test_incoming_edge_is_fine(self):
        nodes = [_node("o", NodeKind.orderPage), _node("t", NodeKind.thankYou)]
        result = validate(nodes, [_edge("o", "t")])
        assert result.is_valid
        assert result.errors == []


class TestDisconnectedNodes:
    """Nodes with no connections at all."""

    def test_orphan_warns(self):
        result = validate([_node("u", NodeKind.upsell, "Upsell 1")], [])
        assert result.is_valid
        assert result.warnings == ['"Upsell 1" is not connected to the funnel']

    def test_incoming_only_is_connected(self):
        nodes = [_node("s", NodeKind.salesPage), _node("o", NodeKind.orderPage)]
        states = node_diagnostics(nodes, [_edge("s", "o")])
        assert not states["o"].has_warning

    def test_sales_page_never_reported_as_orphan(self):
        states = node_diagnostics([_node("s", NodeKind.salesPage)], [])
        messages = [d.message for d in states["s"].diagnostics]
        assert len(messages) == 1
        assert "not connected" not in messages[0]


class TestPerNodeLookup:
    """Diagnostics keyed by node id."""

    def test_diagnostics_for_node(self):
        nodes = [_node("t", NodeKind.thankYou), _node("o", NodeKind.orderPage)]
        validator = FunnelValidator(nodes, [_edge("t", "o")])

        thank_you = validator.diagnostics_for("t")
        assert thank_you.has_error
        assert thank_you.error_message.endswith("should not have outgoing connections")
        assert thank_you.diagnostics[0].kind == DiagnosticKind.error
        assert thank_you.diagnostics[0].scope == "t"

        order = validator.diagnostics_for("o")
        assert not order.has_error
        assert not order.has_warning

    def test_unknown_node_has_no_state(self):
        assert FunnelValidator([], []).diagnostics_for("missing") is None

    def test_results_are_deterministic(self):
        """The same graph content always yields the same diagnostics."""
        nodes = [_node("s", NodeKind.salesPage), _node("u", NodeKind.upsell)]
        first = validate(nodes, [])
        validate(nodes, [_edge("s", "u")])
        assert validate(nodes, []) == first
