"""API test fixtures — FastAPI app with a controller wired to fakes and the test DB.

Invariants:
    - app.state.controller replaced per test (ASGITransport does not run the lifespan)
    - db_manager singleton patched so readiness probes hit the in-memory engine

Design Decisions:
    - Real SqlWorkspaceStore on the test engine: route tests also cover persistence wiring
"""

import pytest
from httpx import ASGITransport, AsyncClient

import genstudio.infrastructure.database as db_module
from genstudio.main import app
from genstudio.services.session_controller import GenerationSessionController
from genstudio.services.workspace_store import SqlWorkspaceStore

from tests.services.fakes import ScriptedGenerator, make_result


@pytest.fixture
def generator():
    return ScriptedGenerator([
        make_result(explanation="Landing page ready."),
        make_result(paths=("src/App.tsx",), tag="v2", explanation="Updated."),
    ])


@pytest.fixture
async def controller(generator, test_db_manager):
    controller = GenerationSessionController(
        generator=generator,
        store=SqlWorkspaceStore(test_db_manager, "api.workspace"),
        coding_floor_ms=0,
    )
    await controller.hydrate()
    return controller


@pytest.fixture
async def client(controller, test_db_manager):
    original_manager = db_module.db_manager
    original_controller = getattr(app.state, "controller", None)
    db_module.db_manager = test_db_manager
    app.state.controller = controller

    async with AsyncClient(
        transport=ASGITransport(app=app), base_url="http://test",
    ) as c:
        yield c

    db_module.db_manager = original_manager
    app.state.controller = original_controller
