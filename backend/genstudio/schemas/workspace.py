"""Workspace Schemas — request/response models for the workspace API.

Invariants:
    - PromptSubmit accepts blank prompts: blank input is refused silently by the
      request guard, not rejected with a 400
    - Responses use the same camelCase keys as the stored snapshot

Design Decisions:
    - Response models built from core objects via from_* classmethods: routes stay thin
"""

from pydantic import BaseModel, ConfigDict, Field

from genstudio.core.artifacts import Artifact
from genstudio.core.domain_types import GenerationStep, Role
from genstudio.core.history import Turn


class PromptSubmit(BaseModel):
    """User prompt for the next generation."""
    prompt: str = Field(max_length=20_000)


class SelectionUpdate(BaseModel):
    """Select a generated file by path."""
    path: str = Field(min_length=1, max_length=1024)


class _CamelModel(BaseModel):
    model_config = ConfigDict(populate_by_name=True)


class TurnView(_CamelModel):
    id: str
    role: Role
    text: str
    timestamp: int

    @classmethod
    def from_turn(cls, turn: Turn) -> "TurnView":
        return cls(id=turn.id, role=turn.role, text=turn.text, timestamp=turn.timestamp)


class FileView(_CamelModel):
    name: str
    language: str
    content: str

    @classmethod
    def from_artifact(cls, artifact: Artifact) -> "FileView":
        return cls(name=artifact.path, language=artifact.language, content=artifact.content)


class StatusView(_CamelModel):
    is_generating: bool = Field(alias="isGenerating")
    step: GenerationStep
    correlation_id: str | None = Field(None, alias="correlationId")


class WorkspaceView(_CamelModel):
    messages: list[TurnView]
    files: list[FileView]
    preview_html: str = Field(alias="previewHtml")
    request_count: int = Field(alias="requestCount")
    updated_at: int | None = Field(None, alias="updatedAt")
    selected_path: str | None = Field(None, alias="selectedPath")
    status: StatusView


class PromptAccepted(_CamelModel):
    accepted: bool
    workspace: WorkspaceView
