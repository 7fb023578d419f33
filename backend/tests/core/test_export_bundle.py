"""Tests: build_export_archive — ZIP layout, manifest, and path safety.

Invariants:
    - Archive holds every artifact at its normalized path plus preview.html and manifest.json
    - Empty workspaces, escaping paths and colliding paths raise ExportError
"""

import io
import json
import zipfile
from datetime import datetime, timezone

import pytest

from genstudio.core.artifacts import Artifact
from genstudio.core.errors import ExportError
from genstudio.core.export_bundle import (
    build_export_archive, export_filename, normalize_export_path,
)

_AT = datetime(2026, 3, 1, 12, 30, 45, tzinfo=timezone.utc)

_ARTIFACTS = (
    Artifact("index.html", "html", "<div id='root'></div>"),
    Artifact("/src/App.tsx", "typescript", "export default App;"),
    Artifact("src\\styles\\main.css", "css", "body { margin: 0; }"),
)


def _open(archive: bytes) -> zipfile.ZipFile:
    return zipfile.ZipFile(io.BytesIO(archive))


class TestBuildExportArchive:

    def test_contains_files_preview_and_manifest(self):
        archive = build_export_archive(_ARTIFACTS, "<html>preview</html>", _AT)
        with _open(archive) as zf:
            assert sorted(zf.namelist()) == [
                "index.html", "manifest.json", "preview.html",
                "src/App.tsx", "src/styles/main.css",
            ]
            assert zf.read("src/App.tsx").decode() == "export default App;"
            assert zf.read("preview.html").decode() == "<html>preview</html>"

    def test_manifest_lists_files(self):
        archive = build_export_archive(_ARTIFACTS, "<p/>", _AT)
        with _open(archive) as zf:
            manifest = json.loads(zf.read("manifest.json"))
        assert manifest["exportedAt"] == "2026-03-01T12:30:45+00:00"
        assert manifest["preview"] == "preview.html"
        assert [f["path"] for f in manifest["files"]] == [
            "index.html", "src/App.tsx", "src/styles/main.css",
        ]
        assert manifest["files"][2]["bytes"] == len("body { margin: 0; }")

    def test_empty_workspace_rejected(self):
        with pytest.raises(ExportError):
            build_export_archive((), "", _AT)

    def test_preview_only_workspace_exports_preview_and_manifest(self):
        archive = build_export_archive((), "<html>only preview</html>", _AT)
        with _open(archive) as zf:
            assert sorted(zf.namelist()) == ["manifest.json", "preview.html"]
            assert zf.read("preview.html").decode() == "<html>only preview</html>"
            manifest = json.loads(zf.read("manifest.json"))
        assert manifest["files"] == []
        assert manifest["preview"] == "preview.html"

    def test_reserved_name_collision_rejected(self):
        artifacts = (Artifact("preview.html", "html", "x"),)
        with pytest.raises(ExportError):
            build_export_archive(artifacts, "<p/>", _AT)

    def test_duplicate_after_normalization_rejected(self):
        artifacts = (
            Artifact("src/a.ts", "typescript", "1"),
            Artifact("./src/a.ts", "typescript", "2"),
        )
        with pytest.raises(ExportError):
            build_export_archive(artifacts, "<p/>", _AT)


class TestNormalizeExportPath:

    def test_strips_leading_and_dot_segments(self):
        assert normalize_export_path("/src/./App.tsx") == "src/App.tsx"
        assert normalize_export_path("src\\App.tsx") == "src/App.tsx"

    def test_parent_segments_rejected(self):
        with pytest.raises(ExportError):
            normalize_export_path("../etc/passwd")

    def test_empty_path_rejected(self):
        with pytest.raises(ExportError):
            normalize_export_path("/./")


def test_export_filename_is_timestamped():
    assert export_filename(_AT) == "genstudio-export-20260301-123045.zip"
