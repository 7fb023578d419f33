"""Generation Payload Schema — validates the structured output of the generation model.

Invariants:
    - previewHtml, files and explanation are all required
    - Every file has non-blank name, language and content strings
    - File names are unique within one payload
    - to_result() yields a core GenerationResult; nothing unvalidated reaches the controller

Design Decisions:
    - Pydantic over hand-written checks: the tool input_schema and this model describe
      the same contract, and pydantic's error list is loggable as-is
    - extra="ignore": models sometimes add commentary fields; they are dropped, not fatal
"""

from pydantic import BaseModel, ConfigDict, Field, field_validator

from genstudio.core.artifacts import Artifact, GenerationResult


class GeneratedFile(BaseModel):
    """One file in the generated project."""
    model_config = ConfigDict(extra="ignore")

    name: str = Field(min_length=1)
    language: str = Field(min_length=1)
    content: str

    @field_validator("name")
    @classmethod
    def name_not_blank(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("file name cannot be blank")
        return v


class GenerationPayload(BaseModel):
    """Complete project snapshot returned by the generation model."""
    model_config = ConfigDict(extra="ignore", populate_by_name=True)

    preview_html: str = Field(alias="previewHtml")
    files: list[GeneratedFile]
    explanation: str

    @field_validator("files")
    @classmethod
    def unique_names(cls, v: list[GeneratedFile]) -> list[GeneratedFile]:
        seen: set[str] = set()
        for f in v:
            if f.name in seen:
                raise ValueError(f"duplicate file name: {f.name}")
            seen.add(f.name)
        return v

    def to_result(self) -> GenerationResult:
        return GenerationResult(
            preview_html=self.preview_html,
            artifacts=tuple(
                Artifact(path=f.name, language=f.language, content=f.content)
                for f in self.files
            ),
            explanation=self.explanation,
        )
