"""Unit tests for the file-backed session store."""

from __future__ import annotations

import json
from pathlib import Path

from nexen_client.session import SessionStore


class TestSessionStore:
    def test_starts_signed_out(self, tmp_path: Path) -> None:
        store = SessionStore(tmp_path / "session.json")
        assert store.token is None
        assert store.user is None
        assert not store.is_authenticated

    def test_set_persists_across_instances(self, tmp_path: Path) -> None:
        path = tmp_path / "nested" / "session.json"
        SessionStore(path).set("tok", {"id": 1, "name": "Ada"})

        reloaded = SessionStore(path)
        assert reloaded.token == "tok"
        assert reloaded.user == {"id": 1, "name": "Ada"}
        assert json.loads(path.read_text())["token"] == "tok"

    def test_clear_removes_file(self, tmp_path: Path) -> None:
        path = tmp_path / "session.json"
        store = SessionStore(path)
        store.set("tok")
        store.clear()
        assert store.token is None
        assert not path.exists()
        store.clear()  # idempotent

    def test_unreadable_file_means_signed_out(self, tmp_path: Path) -> None:
        path = tmp_path / "session.json"
        path.write_text("{not json", encoding="utf-8")
        assert SessionStore(path).token is None

    def test_wrong_shape_is_ignored(self, tmp_path: Path) -> None:
        path = tmp_path / "session.json"
        path.write_text(json.dumps({"token": 42, "user": "nope"}), encoding="utf-8")
        store = SessionStore(path)
        assert store.token is None
        assert store.user is None

    def test_memory_only_store(self) -> None:
        store = SessionStore()
        store.set("tok")
        assert store.token == "tok"
        store.clear()
        assert store.token is None
