"""Versioned JSON codec for funnel documents.

Derived fields (per-node ``validation``) are stripped on the way out and
dropped on the way in, so a document only ever carries the authoritative
graph: nodes, edges and node counters.
"""

import json
import logging
from collections.abc import Mapping, Sequence
from typing import Any

from pydantic import BaseModel, ValidationError

from funnelkit.errors import InvalidEncoding, MalformedDocument
from funnelkit.models.document import FunnelDocument
from funnelkit.models.funnel_graph import FunnelEdge, NodeCounters
from funnelkit.utils.identifiers import utc_timestamp

logger = logging.getLogger(__name__)

FUNNEL_VERSION = "1.0.0"

DERIVED_NODE_FIELDS = ("validation",)


def _strip_node(node: BaseModel | Mapping[str, Any]) -> dict[str, Any]:
    """Plain JSON-ready dict of a node without derived fields."""
    if isinstance(node, BaseModel):
        payload = node.model_dump(mode="json", by_alias=True)
    else:
        payload = json.loads(json.dumps(dict(node)))
    data = payload.get("data")
    if isinstance(data, dict):
        for name in DERIVED_NODE_FIELDS:
            data.pop(name, None)
    return payload


def serialize(
    nodes: Sequence[BaseModel | Mapping[str, Any]],
    edges: Sequence[FunnelEdge],
    counters: NodeCounters,
) -> FunnelDocument:
    """Build a document from the graph, stamped with version and save time."""
    return FunnelDocument.model_validate({
        "nodes": [_strip_node(node) for node in nodes],
        "edges": [edge.model_dump(mode="json") for edge in edges],
        "nodeCounters": counters.model_dump(),
        "version": FUNNEL_VERSION,
        "savedAt": utc_timestamp(),
    })


def encode(document: FunnelDocument, indent: int | None = 2) -> bytes:
    """Encode a document as UTF-8 JSON with the persisted field names."""
    text = json.dumps(
        document.model_dump(mode="json", by_alias=True),
        indent=indent,
        ensure_ascii=False,
    )
    return text.encode("utf-8")


def _decode(raw: bytes | str) -> Any:
    try:
        text = raw.decode("utf-8") if isinstance(raw, bytes) else raw
        return json.loads(text)
    except (UnicodeDecodeError, json.JSONDecodeError) as exc:
        raise InvalidEncoding(
            "Invalid JSON format. Please check the file and try again."
        ) from exc


def deserialize(raw: bytes | str | Mapping[str, Any] | FunnelDocument) -> FunnelDocument:
    """Decode and check a funnel document.

    Missing node counters default to zero. A version other than
    FUNNEL_VERSION is logged and the document is loaded as-is. Edges whose
    source or target is not among the nodes are logged and dropped.

    Raises:
        InvalidEncoding: if raw is not UTF-8 JSON.
        MalformedDocument: if the nodes or edges lists are missing or invalid.
    """
    if isinstance(raw, FunnelDocument):
        payload = raw.model_dump(mode="json", by_alias=True)
    elif isinstance(raw, Mapping):
        payload = dict(raw)
    else:
        payload = _decode(raw)
    if not isinstance(payload, dict):
        raise MalformedDocument("Invalid funnel data: expected a JSON object")

    nodes = payload.get("nodes")
    if not isinstance(nodes, list):
        raise MalformedDocument("Invalid funnel data: nodes array is missing or invalid")
    edges = payload.get("edges")
    if not isinstance(edges, list):
        raise MalformedDocument("Invalid funnel data: edges array is missing or invalid")

    version = str(payload.get("version") or FUNNEL_VERSION)
    if version != FUNNEL_VERSION:
        logger.warning(
            "Funnel version mismatch. Stored: %s, Current: %s", version, FUNNEL_VERSION
        )

    try:
        document = FunnelDocument.model_validate({
            "nodes": [_strip_node(node) if isinstance(node, dict) else node for node in nodes],
            "edges": edges,
            "nodeCounters": payload.get("nodeCounters") or NodeCounters().model_dump(),
            "version": version,
            "savedAt": str(payload.get("savedAt") or utc_timestamp()),
        })
    except ValidationError as exc:
        raise MalformedDocument(
            f"Invalid funnel data: {exc.error_count()} invalid field(s)"
        ) from exc

    node_ids = {node.id for node in document.nodes}
    kept = [
        edge for edge in document.edges
        if edge.source in node_ids and edge.target in node_ids
    ]
    if len(kept) < len(document.edges):
        dropped = [edge.id for edge in document.edges if edge not in kept]
        logger.warning("Dropping edges with missing endpoints: %s", dropped)
        document.edges = kept
    return document
