"""Session Snapshot — serialization / deserialization for Session.

Invariants:
    - session_to_snapshot produces a JSON-safe dict (no Enums, no dataclasses)
    - Snapshot keys match the durable storage record: messages, files, previewHtml,
      requestCount, updatedAt
    - Missing keys fall back to Session defaults (forward-compatible)
    - Present-but-malformed values raise SnapshotFormatError (caller treats as "no session")

Design Decisions:
    - camelCase keys: the stored record predates this service and is shared with the UI
    - Validation here, not in the store: the store only knows bytes in, dict out
"""

from genstudio.core.artifacts import Artifact, find_duplicate_paths
from genstudio.core.domain_types import Role, TurnId
from genstudio.core.history import HistoryLog, Turn
from genstudio.core.session_state import Session


class SnapshotFormatError(ValueError):
    """Stored snapshot exists but cannot be decoded into a Session."""


def session_to_snapshot(session: Session) -> dict:
    """Serialize Session to JSON-safe dict. Pure, no IO."""
    return {
        "messages": [
            {
                "id": t.id,
                "role": t.role.value,
                "text": t.text,
                "timestamp": t.timestamp,
            }
            for t in session.history
        ],
        "files": [
            {"name": a.path, "language": a.language, "content": a.content}
            for a in session.artifacts
        ],
        "previewHtml": session.preview_html,
        "requestCount": session.request_count,
        "updatedAt": session.updated_at,
    }


def session_from_snapshot(data: dict | None) -> Session:
    """Reconstruct Session from snapshot dict. Pure, no IO.

    Missing keys fall back to Session defaults. Raises SnapshotFormatError
    when a present value has the wrong shape.
    """
    session = Session()
    if not data:
        return session
    if not isinstance(data, dict):
        raise SnapshotFormatError("snapshot must be a JSON object")

    try:
        turns = [_turn_from_dict(m) for m in _list_field(data, "messages")]
        artifacts = tuple(
            _artifact_from_dict(f) for f in _list_field(data, "files")
        )
    except (KeyError, TypeError, ValueError) as e:
        raise SnapshotFormatError(f"invalid snapshot entry: {e}") from e

    duplicates = find_duplicate_paths(artifacts)
    if duplicates:
        raise SnapshotFormatError(f"duplicate file paths: {', '.join(duplicates)}")

    session.history = HistoryLog(turns)
    session.artifacts = artifacts
    session.preview_html = _str_field(data, "previewHtml")
    session.request_count = _int_field(data, "requestCount")
    session.updated_at = _optional_int_field(data, "updatedAt")
    return session


def _list_field(data: dict, key: str) -> list:
    value = data.get(key)
    if value is None:
        return []
    if not isinstance(value, list):
        raise SnapshotFormatError(f"'{key}' must be a list")
    return value


def _str_field(data: dict, key: str) -> str:
    value = data.get(key)
    if value is None:
        return ""
    if not isinstance(value, str):
        raise SnapshotFormatError(f"'{key}' must be a string")
    return value


def _int_field(data: dict, key: str) -> int:
    value = _optional_int_field(data, key)
    return 0 if value is None else value


def _optional_int_field(data: dict, key: str) -> int | None:
    value = data.get(key)
    if value is None:
        return None
    if isinstance(value, bool) or not isinstance(value, int) or value < 0:
        raise SnapshotFormatError(f"'{key}' must be a non-negative integer")
    return value
