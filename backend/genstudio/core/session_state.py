"""Session State — the whole persisted workspace, as a pure in-memory record.

Invariants:
    - Session is the only unit of persistence (serialized by session_snapshot.py)
    - artifacts and preview_html change only together, via commit_result()
    - A failed generation appends exactly one assistant turn and touches nothing else
    - request_count is monotonic; it counts attempts, not successes

Design Decisions:
    - Dataclass with explicit mutators: pure, deterministic, testable without mocks
    - No awaits anywhere in this module, so every mutator runs inside one scheduling turn
"""

from dataclasses import dataclass, field

from genstudio.core.artifacts import Artifact, GenerationResult
from genstudio.core.domain_types import Role
from genstudio.core.history import HistoryLog, Turn


@dataclass
class Session:
    """Persisted workspace — pure dataclass, no IO."""

    history: HistoryLog = field(default_factory=HistoryLog)

    # Current file set, in generation order
    artifacts: tuple[Artifact, ...] = ()

    # Renderable preview document paired with artifacts
    preview_html: str = ""

    # Number of admitted generation attempts (success or failure)
    request_count: int = 0

    # Epoch ms of the last successful save (None until first save)
    updated_at: int | None = None

    @property
    def is_empty(self) -> bool:
        return not self.history.turns and not self.artifacts and not self.preview_html

    def record_user_turn(self, text: str, now_ms: int) -> Turn:
        return self.history.append(Role.USER, text, now_ms)

    def commit_result(self, result: GenerationResult, now_ms: int) -> Turn:
        """Replace file set + preview and append the explanation turn as one unit."""
        self.artifacts = result.artifacts
        self.preview_html = result.preview_html
        return self.history.append(Role.ASSISTANT, result.explanation, now_ms)

    def record_failure(self, text: str, now_ms: int) -> Turn:
        """Append the synthetic failure turn. Artifacts and preview stay untouched."""
        return self.history.append(Role.ASSISTANT, text, now_ms)
