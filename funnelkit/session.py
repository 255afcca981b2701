"""Editor actions that cross the core's boundary: storage, import and export.

Every action decodes or encodes before it touches the store, so a failed
save, load or import leaves the live graph and its history exactly as they
were.
"""

import logging
from pathlib import Path
from typing import Protocol

from funnelkit.adapters.storage import KeyValueStore, MemoryStore
from funnelkit.codec import deserialize, encode, serialize
from funnelkit.config import FUNNEL_STORAGE_KEY
from funnelkit.errors import FunnelError
from funnelkit.models.document import FunnelDocument
from funnelkit.store import GraphStore

logger = logging.getLogger(__name__)

EXPORT_FILENAME = "funnel-export.json"


class AsyncReader(Protocol):
    """Anything with an awaitable read(), e.g. an uploaded file."""

    async def read(self) -> bytes | str:
        ...


class FunnelSession:
    """One editing session: a graph store bound to host storage.

    Usage:
        session = FunnelSession(SqliteStore("funnel.db"))
        session.restore_or_start()
        session.store.add_node("salesPage", Position(x=0, y=0))
        session.save()
    """

    def __init__(
        self,
        storage: KeyValueStore | None = None,
        store: GraphStore | None = None,
        storage_key: str = FUNNEL_STORAGE_KEY,
    ) -> None:
        self.storage = storage if storage is not None else MemoryStore()
        self.store = store or GraphStore()
        self.storage_key = storage_key

    def document(self) -> FunnelDocument:
        """The live graph as a freshly stamped document."""
        return serialize(self.store.nodes, self.store.edges, self.store.counters)

    # host storage

    def save(self) -> FunnelDocument:
        """Write the live graph under the storage key.

        Raises:
            StorageUnavailable: if the host storage refuses the write.
        """
        document = self.document()
        self.storage.set(self.storage_key, encode(document, indent=None).decode("utf-8"))
        logger.info("saved funnel under %r", self.storage_key)
        return document

    def has_stored_funnel(self) -> bool:
        return self.storage.get(self.storage_key) is not None

    def load(self) -> bool:
        """Replace the live graph with the stored one.

        Returns:
            False if nothing is stored.

        Raises:
            StorageUnavailable, MalformedDocument, InvalidEncoding
        """
        raw = self.storage.get(self.storage_key)
        if raw is None:
            return False
        self.store.replace(deserialize(raw))
        return True

    def clear_stored(self) -> None:
        self.storage.delete(self.storage_key)

    def restore_or_start(self) -> bool:
        """Load the stored funnel if there is a usable one.

        An unreadable stored document is logged and the empty graph kept.
        """
        try:
            return self.load()
        except FunnelError as exc:
            logger.error("failed to load stored funnel: %s", exc.message)
            return False

    # file import/export

    def export_bytes(self) -> bytes:
        """The live graph as an indented JSON document."""
        return encode(self.document())

    def export_to(self, directory: Path | str, filename: str = EXPORT_FILENAME) -> Path:
        """Write the export document into directory and return its path."""
        path = Path(directory) / filename
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_bytes(self.export_bytes())
        return path

    def import_bytes(self, raw: bytes | str) -> FunnelDocument:
        """Replace the live graph and reset history from raw document bytes.

        Raises:
            InvalidEncoding, MalformedDocument: the live graph is unchanged.
        """
        document = deserialize(raw)
        self.store.replace(document)
        return document

    async def import_stream(self, reader: AsyncReader) -> FunnelDocument:
        """Read an upload to the end, then import it."""
        raw = await reader.read()
        return self.import_bytes(raw)
