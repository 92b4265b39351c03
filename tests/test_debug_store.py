"""
Tests for the Debug Payload Store
"""

import json

from github_relay.services.debug_store import DebugPayloadStore


class TestDebugPayloadStore:

    async def test_save_writes_json(self, tmp_path):
        store = DebugPayloadStore(tmp_path)

        path = await store.save("push", {"ref": "refs/heads/main"})

        assert path is not None
        assert path.parent == tmp_path
        assert path.name.startswith("push-")
        assert json.loads(path.read_text()) == {"ref": "refs/heads/main"}

    async def test_event_name_is_sanitised(self, tmp_path):
        store = DebugPayloadStore(tmp_path)

        path = await store.save("../../etc/passwd", {})

        assert path.parent == tmp_path
        assert "/" not in path.name

    async def test_write_failure_returns_none(self, tmp_path):
        blocker = tmp_path / "file"
        blocker.write_text("")
        store = DebugPayloadStore(blocker / "debug")

        assert await store.save("push", {}) is None

    def test_prepare_creates_directory(self, tmp_path):
        store = DebugPayloadStore(tmp_path / "a" / "b")

        store.prepare()

        assert (tmp_path / "a" / "b").is_dir()
