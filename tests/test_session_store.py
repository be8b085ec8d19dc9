# HONEYBEE/backend/tests/test_session_store.py : session persistence tests

import redis

from honeybee import session_store
from honeybee.schemas.schemas import EmployeeSnapshot
from honeybee.session_store import (
    FileSessionStore,
    MemorySessionStore,
    RedisSessionStore,
    session_store_for,
)


def snapshot(**overrides):
    data = {"id": "e-1", "name": "alice", "role": "admin", "is_active": True, "company_id": "c-1"}
    data.update(overrides)
    return EmployeeSnapshot(**data)


class FakeRedis:
    """Just enough of redis.Redis for the session store"""

    def __init__(self):
        self.data = {}
        self.expiry = {}

    def get(self, key):
        value = self.data.get(key)
        return value.encode("utf-8") if value is not None else None

    def set(self, key, value, ex=None):
        self.data[key] = value
        self.expiry[key] = ex

    def delete(self, key):
        self.data.pop(key, None)


class BrokenRedis:
    def get(self, key):
        raise redis.ConnectionError("down")

    def set(self, key, value, ex=None):
        raise redis.ConnectionError("down")

    def delete(self, key):
        raise redis.ConnectionError("down")


class TestMemorySessionStore:
    def test_save_load_clear(self):
        store = MemorySessionStore("employee_session", storage={})
        assert store.load() is None

        store.save(snapshot())
        loaded = store.load()
        assert loaded.id == "e-1"
        assert loaded.name == "alice"

        store.clear()
        assert store.load() is None

    def test_save_replaces_previous(self):
        store = MemorySessionStore("k", storage={})
        store.save(snapshot(name="alice"))
        store.save(snapshot(name="bob"))
        assert store.load().name == "bob"

    def test_clear_when_empty_is_harmless(self):
        store = MemorySessionStore("k", storage={})
        store.clear()
        store.clear()
        assert store.load() is None

    def test_corrupted_content_reads_as_absent(self):
        storage = {"k": "{not json"}
        assert MemorySessionStore("k", storage=storage).load() is None

    def test_content_missing_fields_reads_as_absent(self):
        storage = {"k": '{"name": "alice"}'}
        assert MemorySessionStore("k", storage=storage).load() is None

    def test_credential_never_persisted(self):
        storage = {}
        MemorySessionStore("k", storage=storage).save(snapshot())
        assert "password" not in storage["k"]

    def test_expired_session_reads_as_absent(self, monkeypatch):
        clock = {"now": 1000.0}
        monkeypatch.setattr(session_store, "_now", lambda: clock["now"])
        storage = {}
        store = MemorySessionStore("k", storage=storage, ttl=60)
        store.save(snapshot())

        clock["now"] = 1059.0
        assert store.load().id == "e-1"

        clock["now"] = 1060.0
        assert store.load() is None
        assert "k" not in storage
        assert "k" not in store.expiry

    def test_abandoned_sessions_are_evicted_on_save(self, monkeypatch):
        clock = {"now": 1000.0}
        monkeypatch.setattr(session_store, "_now", lambda: clock["now"])
        storage, expiry = {}, {}
        for token in range(50):
            MemorySessionStore(f"employee_session:{token}", storage=storage, ttl=60, expiry=expiry).save(snapshot())
        assert len(storage) == 50

        clock["now"] = 2000.0
        MemorySessionStore("employee_session:fresh", storage=storage, ttl=60, expiry=expiry).save(snapshot())
        assert list(storage) == ["employee_session:fresh"]

    def test_no_ttl_never_expires(self, monkeypatch):
        clock = {"now": 1000.0}
        monkeypatch.setattr(session_store, "_now", lambda: clock["now"])
        store = MemorySessionStore("k", storage={}, ttl=0)
        store.save(snapshot())
        clock["now"] = 10 ** 9
        assert store.load().id == "e-1"


class TestFileSessionStore:
    def test_round_trip(self, tmp_path):
        store = FileSessionStore("employee_session:abc/def", directory=str(tmp_path))
        store.save(snapshot())
        assert store.path.parent == tmp_path
        assert store.load().company_id == "c-1"
        store.clear()
        assert not store.path.exists()

    def test_corrupted_file(self, tmp_path):
        store = FileSessionStore("k", directory=str(tmp_path))
        store.path.write_text("garbage", encoding="utf-8")
        assert store.load() is None

    def test_unwritable_directory_does_not_raise(self, tmp_path):
        blocker = tmp_path / "blocker"
        blocker.write_text("", encoding="utf-8")
        store = FileSessionStore("k", directory=str(blocker / "sessions"))
        store.save(snapshot())
        assert store.load() is None

    def test_expired_file_reads_as_absent(self, tmp_path, monkeypatch):
        store = FileSessionStore("k", directory=str(tmp_path), ttl=60)
        store.save(snapshot())
        saved_at = store.path.stat().st_mtime

        monkeypatch.setattr(session_store, "_now", lambda: saved_at + 30)
        assert store.load().id == "e-1"

        monkeypatch.setattr(session_store, "_now", lambda: saved_at + 60)
        assert store.load() is None
        assert not store.path.exists()

    def test_expired_files_are_evicted_on_save(self, tmp_path, monkeypatch):
        old = FileSessionStore("old", directory=str(tmp_path), ttl=60)
        old.save(snapshot())
        saved_at = old.path.stat().st_mtime
        monkeypatch.setattr(session_store, "_now", lambda: saved_at + 120)
        FileSessionStore("new", directory=str(tmp_path), ttl=60).save(snapshot())
        assert sorted(p.name for p in tmp_path.iterdir()) == ["new.json"]


class TestRedisSessionStore:
    def test_round_trip_with_ttl(self):
        client = FakeRedis()
        store = RedisSessionStore("k", client=client, ttl=60)
        store.save(snapshot())
        assert client.expiry["k"] == 60
        assert store.load().name == "alice"
        store.clear()
        assert store.load() is None

    def test_no_ttl(self):
        client = FakeRedis()
        RedisSessionStore("k", client=client, ttl=0).save(snapshot())
        assert client.expiry["k"] is None

    def test_unavailable_redis_behaves_as_absent(self):
        store = RedisSessionStore("k", client=BrokenRedis(), ttl=0)
        store.save(snapshot())
        assert store.load() is None
        store.clear()


def test_store_for_token_is_keyed_by_token():
    first = session_store_for("token-a")
    second = session_store_for("token-b")
    assert first.key == "employee_session:token-a"
    first.save(snapshot())
    assert second.load() is None
    assert session_store_for("token-a").load().id == "e-1"
