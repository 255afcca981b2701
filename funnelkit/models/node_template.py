"""Static per-kind node templates.

Every kind-specific behaviour (default content, counter tracking, connection
capability) is a lookup into NODE_TEMPLATES rather than a subclass.
"""

from pydantic import BaseModel

from funnelkit.models.funnel_graph import NodeKind


class NodeTemplate(BaseModel):
    """Defaults and capabilities for one node kind."""

    model_config = {"frozen": True}

    type: NodeKind
    label: str
    icon: str
    default_title: str
    default_button_label: str
    counted: bool = False  # id/title carry a per-kind sequence number
    accepts_incoming: bool = True
    allows_outgoing: bool = True


NODE_TEMPLATES: dict[NodeKind, NodeTemplate] = {
    NodeKind.salesPage: NodeTemplate(
        type=NodeKind.salesPage,
        label="Sales Page",
        icon="📄",
        default_title="Sales Page",
        default_button_label="Buy Now",
        accepts_incoming=False,
    ),
    NodeKind.orderPage: NodeTemplate(
        type=NodeKind.orderPage,
        label="Order Page",
        icon="🛒",
        default_title="Order Page",
        default_button_label="Complete Order",
    ),
    NodeKind.upsell: NodeTemplate(
        type=NodeKind.upsell,
        label="Upsell",
        icon="⬆️",
        default_title="Upsell",
        default_button_label="Add to Order",
        counted=True,
    ),
    NodeKind.downsell: NodeTemplate(
        type=NodeKind.downsell,
        label="Downsell",
        icon="⬇️",
        default_title="Downsell",
        default_button_label="Add to Order",
        counted=True,
    ),
    NodeKind.thankYou: NodeTemplate(
        type=NodeKind.thankYou,
        label="Thank You",
        icon="✅",
        default_title="Thank You",
        default_button_label="Continue",
        allows_outgoing=False,
    ),
}


def can_have_incoming_connections(kind: NodeKind) -> bool:
    """Whether the editing surface should offer an incoming handle."""
    return NODE_TEMPLATES[kind].accepts_incoming


def can_have_outgoing_connections(kind: NodeKind) -> bool:
    """Whether the editing surface should offer an outgoing handle."""
    return NODE_TEMPLATES[kind].allows_outgoing
