"""Node creation from the static template table."""

import re
from collections.abc import Iterable

from funnelkit.errors import UnknownNodeKind
from funnelkit.models.funnel_graph import (
    FunnelNode,
    NodeCounters,
    NodeData,
    NodeKind,
    Position,
)
from funnelkit.models.node_template import NODE_TEMPLATES
from funnelkit.utils.identifiers import generate_node_id


def _resolve_kind(kind: NodeKind | str) -> NodeKind:
    try:
        return NodeKind(kind)
    except ValueError:
        raise UnknownNodeKind(kind) from None


def create_node(
    kind: NodeKind | str,
    position: Position,
    counters: NodeCounters,
) -> tuple[FunnelNode, NodeCounters]:
    """Build a new node of the given kind at position.

    Upsell and downsell nodes take the next number from their counter, which
    is embedded in both id and title (``upsell-2`` / ``"Upsell 2"``). Other
    kinds get a time-derived id and the template title.

    Returns:
        The new node and an updated copy of counters. The counters argument
        is left untouched.

    Raises:
        UnknownNodeKind: if kind has no template.
    """
    resolved = _resolve_kind(kind)
    template = NODE_TEMPLATES.get(resolved)
    if template is None:
        raise UnknownNodeKind(kind)

    updated = counters.model_copy()
    if template.counted:
        sequence = getattr(updated, resolved.value) + 1
        setattr(updated, resolved.value, sequence)
        node_id = f"{resolved.value}-{sequence}"
        title = f"{resolved.value.capitalize()} {sequence}"
    else:
        node_id = generate_node_id(resolved.value)
        title = template.default_title

    node = FunnelNode(
        id=node_id,
        type=resolved,
        position=position.model_copy(),
        data=NodeData(
            title=title,
            button_label=template.default_button_label,
            icon=template.icon,
        ),
    )
    return node, updated


def reconcile_counters(
    nodes: Iterable[FunnelNode],
    counters: NodeCounters,
) -> NodeCounters:
    """Raise counters past every sequence number already used in node ids.

    Documents may carry zero or missing counters next to ``upsell-N`` nodes.
    The result never hands out an id that is already in use.
    """
    node_ids = [node.id for node in nodes]
    updated = counters.model_copy()
    for kind, template in NODE_TEMPLATES.items():
        if not template.counted:
            continue
        pattern = re.compile(rf"^{re.escape(kind.value)}-(\d+)$")
        used = [int(m.group(1)) for node_id in node_ids if (m := pattern.match(node_id))]
        if used and max(used) > getattr(updated, kind.value):
            setattr(updated, kind.value, max(used))
    return updated
