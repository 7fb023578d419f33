"""Boundary Protocols — contracts between core and shell.

Invariants:
    - Core NEVER imports from shell — dependency arrows point inward only
    - The session controller depends on these Protocols, never on concrete classes

Design Decisions:
    - Protocol over ABC: structural subtyping, test fakes need no inheritance
    - Async in Protocol: implementations do IO; core functions that consume
      their results stay synchronous
"""

from typing import Protocol

from genstudio.core.artifacts import GenerationResult
from genstudio.core.session_state import Session


class CodeGenerator(Protocol):
    """Contract for the external code generation service.

    Raises GenerationFailure (or a subclass) on any transport,
    authentication or schema-validation problem.
    """
    async def generate(
        self, prompt: str, history: list[dict], correlation_id: str,
    ) -> GenerationResult: ...


class WorkspaceStore(Protocol):
    """Contract for durable workspace snapshots. Best-effort: never raises.

    save() returns the saved-at epoch ms, or None when the write failed.
    """
    async def hydrate(self) -> Session | None: ...
    async def save(self, session: Session) -> int | None: ...
    async def clear(self) -> bool: ...
