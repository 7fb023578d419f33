"""Tests: session_to_snapshot / session_from_snapshot — durable record shape and validation.

Invariants:
    - Roundtrip preserves turns, files, preview, counter and updated_at
    - Missing keys default; malformed present values raise SnapshotFormatError
"""

import json

import pytest

from genstudio.core.artifacts import Artifact, GenerationResult
from genstudio.core.session_snapshot import (
    SnapshotFormatError, session_from_snapshot, session_to_snapshot,
)
from genstudio.core.session_state import Session


def _session():
    session = Session(request_count=2, updated_at=5_000)
    session.record_user_turn("Build a landing page", 1_000)
    session.commit_result(
        GenerationResult(
            preview_html="<h1>Hi</h1>",
            artifacts=(
                Artifact("index.html", "html", "<h1>Hi</h1>"),
                Artifact("src/app.js", "javascript", "console.log('hi')"),
            ),
            explanation="Landing page built.",
        ),
        2_000,
    )
    return session


class TestSessionToSnapshot:

    def test_uses_storage_keys(self):
        snapshot = session_to_snapshot(_session())
        assert set(snapshot) == {
            "messages", "files", "previewHtml", "requestCount", "updatedAt",
        }
        assert snapshot["files"][0] == {
            "name": "index.html", "language": "html", "content": "<h1>Hi</h1>",
        }
        assert snapshot["messages"][0]["role"] == "user"

    def test_is_json_safe(self):
        encoded = json.dumps(session_to_snapshot(_session()))
        assert "Landing page built." in encoded


class TestSessionFromSnapshot:

    def test_roundtrip(self):
        original = _session()
        restored = session_from_snapshot(
            json.loads(json.dumps(session_to_snapshot(original))),
        )
        assert restored.history.turns == original.history.turns
        assert restored.artifacts == original.artifacts
        assert restored.preview_html == original.preview_html
        assert restored.request_count == 2
        assert restored.updated_at == 5_000

    def test_empty_or_none_gives_default(self):
        assert session_from_snapshot(None).is_empty
        assert session_from_snapshot({}).is_empty

    def test_missing_keys_default(self):
        restored = session_from_snapshot({"previewHtml": "<p>x</p>"})
        assert restored.preview_html == "<p>x</p>"
        assert restored.artifacts == ()
        assert restored.request_count == 0
        assert restored.updated_at is None

    def test_non_object_rejected(self):
        with pytest.raises(SnapshotFormatError):
            session_from_snapshot(["messages"])

    def test_messages_not_list_rejected(self):
        with pytest.raises(SnapshotFormatError):
            session_from_snapshot({"messages": "oops"})

    def test_unknown_role_rejected(self):
        with pytest.raises(SnapshotFormatError):
            session_from_snapshot({
                "messages": [{"id": "1", "role": "robot", "text": "x", "timestamp": 1}],
            })

    def test_file_missing_field_rejected(self):
        with pytest.raises(SnapshotFormatError):
            session_from_snapshot({"files": [{"name": "a.ts", "content": "x"}]})

    def test_duplicate_file_names_rejected(self):
        files = [
            {"name": "a.ts", "language": "typescript", "content": "1"},
            {"name": "a.ts", "language": "typescript", "content": "2"},
        ]
        with pytest.raises(SnapshotFormatError):
            session_from_snapshot({"files": files})

    def test_bad_request_count_rejected(self):
        for bad in (-1, True, "3"):
            with pytest.raises(SnapshotFormatError):
                session_from_snapshot({"requestCount": bad})

    def test_bad_updated_at_rejected(self):
        for bad in ("yesterday", [1], -5, False, 1.5):
            with pytest.raises(SnapshotFormatError):
                session_from_snapshot({"messages": [], "updatedAt": bad})

    def test_preview_not_string_rejected(self):
        with pytest.raises(SnapshotFormatError):
            session_from_snapshot({"previewHtml": {"html": "<p/>"}})
