"""Tests: error handlers called directly — body shape for each exception family."""

import json

from starlette.requests import Request

from genstudio.api.error_handlers import (
    handle_genstudio_error, handle_unexpected_error,
)
from genstudio.core.errors import ExportError, ResourceNotFoundError


def _request(path="/api/v1/workspace"):
    return Request({
        "type": "http", "method": "GET", "path": path,
        "headers": [], "query_string": b"",
    })


async def test_domain_error_uses_own_status():
    resp = await handle_genstudio_error(_request(), ResourceNotFoundError("File", "a.ts"))
    body = json.loads(resp.body)
    assert resp.status_code == 404
    assert body["error"]["code"] == "RESOURCE_NOT_FOUND"
    assert body["error"]["message"] == "File 'a.ts' not found"


async def test_export_error_is_conflict():
    resp = await handle_genstudio_error(_request(), ExportError("Nothing to export"))
    assert resp.status_code == 409
    assert json.loads(resp.body)["error"]["category"] == "export"


async def test_unexpected_error_hides_details():
    resp = await handle_unexpected_error(_request(), RuntimeError("secret path /etc"))
    body = json.loads(resp.body)
    assert resp.status_code == 500
    assert body["error"]["code"] == "INTERNAL_ERROR"
    assert "secret" not in resp.body.decode()
