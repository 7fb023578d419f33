"""Workspace Routes — prompt submission, selection, reset, and export.

Invariants:
    - The controller comes from app.state (created and hydrated in the lifespan)
    - POST /prompts returns 200 whether or not the prompt was admitted; rejection is
      reported only as accepted=false
    - Export never mutates the session; ExportError maps to 409 via the global handler

Design Decisions:
    - POST /prompts awaits the whole generation and returns the settled workspace:
      the UI polls /status from a second connection while it waits
    - Export filename carries a timestamp so repeated downloads don't collide
"""

import logging
from datetime import datetime, timezone

from fastapi import APIRouter, Depends, Request, Response

from genstudio.core.export_bundle import build_export_archive, export_filename
from genstudio.schemas.workspace import (
    FileView, PromptAccepted, PromptSubmit, SelectionUpdate, StatusView,
    TurnView, WorkspaceView,
)
from genstudio.services.session_controller import GenerationSessionController

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/api/v1/workspace", tags=["workspace"])


def get_controller(request: Request) -> GenerationSessionController:
    """FastAPI dependency — the process-wide controller owned by the app."""
    controller = getattr(request.app.state, "controller", None)
    if controller is None:
        raise RuntimeError("Session controller not initialized")
    return controller


def build_status_view(controller: GenerationSessionController) -> StatusView:
    status = controller.status
    return StatusView(
        is_generating=status.is_generating,
        step=status.step,
        correlation_id=status.correlation_id,
    )


def build_workspace_view(controller: GenerationSessionController) -> WorkspaceView:
    session = controller.session
    selected = controller.selected
    return WorkspaceView(
        messages=[TurnView.from_turn(t) for t in session.history],
        files=[FileView.from_artifact(a) for a in session.artifacts],
        preview_html=session.preview_html,
        request_count=session.request_count,
        updated_at=session.updated_at,
        selected_path=selected.path if selected else None,
        status=build_status_view(controller),
    )


@router.get("", response_model=WorkspaceView)
async def get_workspace(
    controller: GenerationSessionController = Depends(get_controller),
):
    """Full workspace: conversation, files, preview, counters, status."""
    return build_workspace_view(controller)


@router.get("/status", response_model=StatusView)
async def get_status(
    controller: GenerationSessionController = Depends(get_controller),
):
    """Current generation step (idle / thinking / coding)."""
    return build_status_view(controller)


@router.post("/prompts", response_model=PromptAccepted)
async def submit_prompt(
    body: PromptSubmit,
    controller: GenerationSessionController = Depends(get_controller),
):
    """Run one generation for the prompt. Blank or concurrent prompts are dropped."""
    accepted = await controller.submit(body.prompt)
    return PromptAccepted(
        accepted=accepted, workspace=build_workspace_view(controller),
    )


@router.put("/selection", response_model=WorkspaceView)
async def select_file(
    body: SelectionUpdate,
    controller: GenerationSessionController = Depends(get_controller),
):
    """Select the file shown in the code view."""
    controller.select_artifact(body.path)
    return build_workspace_view(controller)


@router.delete("", response_model=WorkspaceView)
async def reset_workspace(
    controller: GenerationSessionController = Depends(get_controller),
):
    """Clear conversation, files and stored snapshot."""
    await controller.reset()
    logger.info("Workspace reset")
    return build_workspace_view(controller)


@router.get("/export")
async def export_workspace(
    controller: GenerationSessionController = Depends(get_controller),
):
    """Download the current project as a ZIP archive."""
    exported_at = datetime.now(timezone.utc)
    archive = build_export_archive(
        controller.session.artifacts,
        controller.session.preview_html,
        exported_at,
    )
    filename = export_filename(exported_at)
    logger.info(
        "Workspace exported: %d files, %d bytes",
        len(controller.session.artifacts), len(archive),
    )
    return Response(
        content=archive,
        media_type="application/zip",
        headers={"Content-Disposition": f'attachment; filename="{filename}"'},
    )
