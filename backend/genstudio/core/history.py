"""History Log — append-only ordered sequence of conversation turns.

Invariants:
    - Turn is frozen: immutable once appended
    - Ordering = append order; turns are never removed except by replacing the whole log
    - Turn ids are unique within a log: "<epoch ms>-<position>"

Design Decisions:
    - Frozen dataclass for Turn: equality by value makes snapshot roundtrips testable
    - Clock passed in (now_ms) rather than read here: keeps core deterministic
"""

from dataclasses import dataclass, field
from typing import Iterator

from genstudio.core.domain_types import Role, TurnId


@dataclass(frozen=True)
class Turn:
    """One message in the conversation."""
    id: TurnId
    role: Role
    text: str
    timestamp: int  # epoch milliseconds


@dataclass
class HistoryLog:
    """Append-only list of turns. Pure data, no IO."""

    turns: list[Turn] = field(default_factory=list)

    def append(self, role: Role, text: str, now_ms: int) -> Turn:
        turn = Turn(
            id=TurnId(f"{now_ms}-{len(self.turns) + 1}"),
            role=role,
            text=text,
            timestamp=now_ms,
        )
        self.turns.append(turn)
        return turn

    def as_context(self) -> list[dict]:
        """Role + text only, stripped of ids and timestamps (generation context)."""
        return [{"role": t.role.value, "text": t.text} for t in self.turns]

    @property
    def last(self) -> Turn | None:
        return self.turns[-1] if self.turns else None

    def __len__(self) -> int:
        return len(self.turns)

    def __iter__(self) -> Iterator[Turn]:
        return iter(self.turns)
