"""Artifacts — generated source files and the result of one successful generation.

Invariants:
    - Artifact paths are unique within one GenerationResult
    - Artifact content is opaque text, never partially merged
    - GenerationResult.artifacts is an ordered tuple (generation order is display order)

Design Decisions:
    - Frozen dataclasses + tuple: a result cannot be mutated after validation, so the
      controller can commit it wholesale without copying
"""

from dataclasses import dataclass


@dataclass(frozen=True)
class Artifact:
    """One generated source file."""
    path: str
    language: str
    content: str


@dataclass(frozen=True)
class GenerationResult:
    """Output of one successful generation call."""
    preview_html: str
    artifacts: tuple[Artifact, ...]
    explanation: str


def find_duplicate_paths(artifacts: tuple[Artifact, ...] | list[Artifact]) -> list[str]:
    """Return paths that occur more than once, in first-seen order."""
    seen: set[str] = set()
    duplicates: list[str] = []
    for artifact in artifacts:
        if artifact.path in seen and artifact.path not in duplicates:
            duplicates.append(artifact.path)
        seen.add(artifact.path)
    return duplicates


def find_artifact(artifacts: tuple[Artifact, ...], path: str) -> Artifact | None:
    """Exact-path lookup. None when absent."""
    for artifact in artifacts:
        if artifact.path == path:
            return artifact
    return None
