"""Export Bundle — packages the current artifact set and preview as a ZIP archive.

Invariants:
    - Every artifact lands at its normalized path (slashes, no leading "/" or "./")
    - Paths escaping the archive root ("..") are rejected, never rewritten
    - The preview is written as preview.html; manifest.json lists every exported file
    - Refused only when there are neither files nor a preview
    - Pure function of its inputs: no session mutation, archive built in memory

Design Decisions:
    - zipfile + BytesIO: the archive is small and served directly from memory
    - Timestamp passed in by the caller so manifest and filename agree
"""

import io
import json
import zipfile
from datetime import datetime, timezone

from genstudio.core.artifacts import Artifact
from genstudio.core.errors import ExportError

PREVIEW_FILENAME = "preview.html"
MANIFEST_FILENAME = "manifest.json"
_RESERVED = {PREVIEW_FILENAME, MANIFEST_FILENAME}


def normalize_export_path(path: str) -> str:
    """Slash-normalize and strip leading separators. Raises ExportError if unsafe."""
    parts = [
        p for p in path.replace("\\", "/").split("/")
        if p not in ("", ".")
    ]
    if not parts:
        raise ExportError(f"Empty file path in export: {path!r}")
    if ".." in parts:
        raise ExportError(f"File path escapes export root: {path!r}")
    return "/".join(parts)


def export_filename(exported_at: datetime) -> str:
    return f"genstudio-export-{exported_at.strftime('%Y%m%d-%H%M%S')}.zip"


def build_manifest(
    entries: list[tuple[str, Artifact]], exported_at: datetime,
) -> dict:
    return {
        "exportedAt": exported_at.astimezone(timezone.utc).isoformat(),
        "preview": PREVIEW_FILENAME,
        "files": [
            {
                "path": path,
                "language": artifact.language,
                "bytes": len(artifact.content.encode("utf-8")),
            }
            for path, artifact in entries
        ],
    }


def build_export_archive(
    artifacts: tuple[Artifact, ...], preview_html: str, exported_at: datetime,
) -> bytes:
    """Build the export ZIP in memory. Raises ExportError when nothing is exportable.

    A preview with no files still exports (preview.html + manifest with an empty file list).
    """
    if not artifacts and not preview_html:
        raise ExportError("Nothing to export: no generated files or preview yet")

    entries = [(normalize_export_path(a.path), a) for a in artifacts]
    seen: set[str] = set()
    for path, _ in entries:
        if path in _RESERVED:
            raise ExportError(f"File path collides with export metadata: {path}")
        if path in seen:
            raise ExportError(f"Duplicate file path after normalization: {path}")
        seen.add(path)

    manifest = build_manifest(entries, exported_at)
    buffer = io.BytesIO()
    with zipfile.ZipFile(buffer, mode="w", compression=zipfile.ZIP_DEFLATED) as zf:
        for path, artifact in entries:
            zf.writestr(path, artifact.content)
        zf.writestr(PREVIEW_FILENAME, preview_html)
        zf.writestr(
            MANIFEST_FILENAME,
            json.dumps(manifest, indent=2, ensure_ascii=False),
        )
    return buffer.getvalue()
