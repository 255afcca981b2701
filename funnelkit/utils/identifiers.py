"""ID generation and timestamp utilities."""

import time
import uuid
from datetime import datetime, timezone


def generate_node_id(kind: str) -> str:
    """Generate a node ID from its kind and the creation time in milliseconds.

    A short random suffix keeps IDs distinct for drops within the same
    millisecond.
    """
    return f"{kind}-{int(time.time() * 1000)}-{uuid.uuid4().hex[:6]}"


def generate_edge_id(source: str, target: str) -> str:
    """Generate a unique edge ID for a source/target pair."""
    return f"edge-{source}-{target}-{uuid.uuid4().hex[:8]}"


def utc_timestamp() -> str:
    """Generate an ISO8601 UTC timestamp."""
    return datetime.now(timezone.utc).isoformat()
