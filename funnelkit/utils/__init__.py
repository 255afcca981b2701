"""Utility functions for funnelkit."""

from funnelkit.utils.identifiers import (
    generate_edge_id,
    generate_node_id,
    utc_timestamp,
)

__all__ = [
    "generate_edge_id",
    "generate_node_id",
    "utc_timestamp",
]
