"""funnelkit - graph state engine for a visual sales-funnel editor."""

from funnelkit.codec import FUNNEL_VERSION, deserialize, encode, serialize
from funnelkit.errors import (
    FunnelError,
    InvalidEncoding,
    MalformedDocument,
    StorageUnavailable,
    UnknownNodeKind,
)
from funnelkit.factory import create_node
from funnelkit.history import MAX_HISTORY_SIZE, HistoryManager
from funnelkit.models import (
    FunnelDocument,
    FunnelEdge,
    FunnelNode,
    GraphChange,
    GraphSnapshot,
    NodeCounters,
    NodeKind,
    Position,
    ValidationResult,
)
from funnelkit.session import FunnelSession
from funnelkit.store import GraphStore
from funnelkit.validation import FunnelValidator, validate

__all__ = [
    # Models
    "FunnelDocument",
    "FunnelEdge",
    "FunnelNode",
    "GraphChange",
    "GraphSnapshot",
    "NodeCounters",
    "NodeKind",
    "Position",
    "ValidationResult",
    # Errors
    "FunnelError",
    "InvalidEncoding",
    "MalformedDocument",
    "StorageUnavailable",
    "UnknownNodeKind",
    # Core
    "create_node",
    "validate",
    "FunnelValidator",
    "HistoryManager",
    "MAX_HISTORY_SIZE",
    "GraphStore",
    "FUNNEL_VERSION",
    "serialize",
    "deserialize",
    "encode",
    # High-level APIs
    "FunnelSession",
]
