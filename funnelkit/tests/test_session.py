"""Tests for storage adapters and session actions."""

import asyncio
import json
import sqlite3

import pytest

from funnelkit.adapters.storage import FileStore, MemoryStore, SqliteStore
from funnelkit.errors import InvalidEncoding, MalformedDocument, StorageUnavailable
from funnelkit.models import Position
from funnelkit.session import EXPORT_FILENAME, FunnelSession


class FailingStore(MemoryStore):
    """Host storage that refuses writes."""

    def set(self, key: str, value: str) -> None:
        raise StorageUnavailable("Failed to save funnel. Please check storage permissions.")


class BytesReader:
    """Stands in for an uploaded file."""

    def __init__(self, content: bytes) -> None:
        self.content = content

    async def read(self) -> bytes:
        await asyncio.sleep(0)
        return self.content


def _build(session: FunnelSession) -> None:
    store = session.store
    sales = store.add_node("salesPage", Position(x=0, y=0))
    upsell = store.add_node("upsell", Position(x=200, y=0))
    store.connect(sales.id, upsell.id)


@pytest.fixture(params=["memory", "file", "sqlite"])
def storage(request, tmp_path):
    if request.param == "memory":
        return MemoryStore()
    if request.param == "file":
        return FileStore(tmp_path / "kv")
    return SqliteStore(tmp_path / "funnel.db")


class TestStorageAdapters:
    """Key-value stores behind the session."""

    def test_absent_key_reads_none(self, storage):
        assert storage.get("missing") is None

    def test_set_get_delete(self, storage):
        storage.set("k", '{"a": 1}')
        assert storage.get("k") == '{"a": 1}'
        storage.set("k", '{"a": 2}')
        assert storage.get("k") == '{"a": 2}'
        storage.delete("k")
        assert storage.get("k") is None
        storage.delete("k")

    def test_sqlite_connections_are_closed(self, tmp_path, monkeypatch):
        store = SqliteStore(tmp_path / "funnel.db")
        opened = []
        connect = store._connect

        def tracking_connect():
            conn = connect()
            opened.append(conn)
            return conn

        monkeypatch.setattr(store, "_connect", tracking_connect)
        store.set("k", "v")
        assert store.get("k") == "v"
        store.delete("k")

        assert len(opened) == 3
        for conn in opened:
            with pytest.raises(sqlite3.ProgrammingError):
                conn.execute("select 1")

    def test_file_store_unwritable(self, tmp_path):
        blocker = tmp_path / "blocker"
        blocker.write_text("not a directory")
        with pytest.raises(StorageUnavailable):
            FileStore(blocker / "kv").set("k", "v")


class TestSaveLoad:
    """Saving to and loading from host storage."""

    def test_save_then_load(self, storage):
        session = FunnelSession(storage)
        _build(session)
        expected = session.store.snapshot()
        session.save()

        fresh = FunnelSession(storage)
        assert fresh.has_stored_funnel()
        assert fresh.load()
        assert fresh.store.snapshot() == expected
        assert not fresh.store.can_undo

    def test_load_without_stored_funnel(self, storage):
        session = FunnelSession(storage)
        assert not session.has_stored_funnel()
        assert not session.load()

    def test_failed_save_keeps_state(self):
        session = FunnelSession(FailingStore())
        _build(session)
        before = session.store.snapshot()
        history_len = len(session.store.history)
        with pytest.raises(StorageUnavailable):
            session.save()
        assert session.store.snapshot() == before
        assert len(session.store.history) == history_len

    def test_clear_stored(self):
        session = FunnelSession(MemoryStore())
        session.save()
        session.clear_stored()
        assert not session.has_stored_funnel()

    def test_restore_ignores_corrupt_document(self):
        storage = MemoryStore()
        storage.set("cartpanda-funnel-data", "{broken")
        session = FunnelSession(storage, storage_key="cartpanda-funnel-data")
        assert not session.restore_or_start()
        assert session.store.nodes == []

    def test_restore_loads_stored_funnel(self):
        storage = MemoryStore()
        original = FunnelSession(storage)
        _build(original)
        original.save()

        restored = FunnelSession(storage)
        assert restored.restore_or_start()
        assert len(restored.store.nodes) == 2


class TestImportExport:
    """File export and import."""

    def test_export_is_indented_document(self):
        session = FunnelSession()
        _build(session)
        payload = json.loads(session.export_bytes())
        assert len(payload["nodes"]) == 2
        assert payload["nodeCounters"]["upsell"] == 1
        assert b"\n  " in session.export_bytes()

    def test_export_to_file(self, tmp_path):
        session = FunnelSession()
        _build(session)
        path = session.export_to(tmp_path)
        assert path.name == EXPORT_FILENAME
        assert json.loads(path.read_text(encoding="utf-8"))["version"]

    def test_import_replaces_graph_and_history(self):
        source = FunnelSession()
        _build(source)

        target = FunnelSession()
        target.store.add_node("thankYou", Position(x=0, y=0))
        target.import_bytes(source.export_bytes())

        assert target.store.snapshot() == source.store.snapshot()
        assert len(target.store.history) == 1
        assert not target.store.can_undo

    def test_failed_import_keeps_state(self):
        session = FunnelSession()
        _build(session)
        before = session.store.snapshot()
        history_len = len(session.store.history)

        with pytest.raises(InvalidEncoding):
            session.import_bytes(b"\x00garbage")
        with pytest.raises(MalformedDocument):
            session.import_bytes(b'{"nodes": "oops", "edges": []}')

        assert session.store.snapshot() == before
        assert len(session.store.history) == history_len
        assert session.store.can_undo

    def test_import_stream_reads_whole_upload(self):
        source = FunnelSession()
        _build(source)
        target = FunnelSession()

        document = asyncio.run(target.import_stream(BytesReader(source.export_bytes())))

        assert len(document.nodes) == 2
        assert target.store.snapshot() == source.store.snapshot()

    def test_import_drops_edges_to_missing_nodes(self):
        raw = {
            "nodes": [{
                "id": "o",
                "type": "orderPage",
                "position": {"x": 0, "y": 0},
                "data": {"title": "Order Page", "buttonLabel": "Complete Order"},
            }],
            "edges": [{"id": "e", "source": "o", "target": "ghost"}],
        }
        session = FunnelSession()
        session.import_bytes(json.dumps(raw).encode("utf-8"))

        assert [node.id for node in session.store.nodes] == ["o"]
        assert session.store.edges == []

    def test_import_without_counters_never_duplicates_ids(self):
        raw = {
            "nodes": [{
                "id": "upsell-1",
                "type": "upsell",
                "position": {"x": 0, "y": 0},
                "data": {"title": "Upsell 1", "buttonLabel": "Accept Offer"},
            }],
            "edges": [],
        }
        session = FunnelSession()
        session.import_bytes(json.dumps(raw).encode("utf-8"))

        added = session.store.add_node("upsell", Position(x=100, y=0))
        ids = [node.id for node in session.store.nodes]
        assert added.id == "upsell-2"
        assert len(ids) == len(set(ids))
