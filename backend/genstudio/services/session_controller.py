"""Generation Session Controller — turns prompts into committed, persisted workspace state.

Invariants:
    - Step machine: idle -> thinking -> coding -> idle; failures return to idle directly
    - At most one generate() call in flight (status flag AND RequestGuard both enforce it)
    - The user turn is appended before the generation call suspends
    - Artifacts, preview, explanation turn and selection are committed with no await
      in between: readers see the previous set or the new set, never a mixture
    - A failed generation appends exactly one fixed-text assistant turn and leaves
      artifacts and preview untouched
    - Snapshot saved only on settle (success and failure), never on thinking/coding
    - submit() never raises for generation or persistence failures
    - A result arriving after reset() is discarded (the session it belonged to is gone)

Design Decisions:
    - Explicitly owned object (app.state.controller), hydrate()/reset() lifecycle,
      no module-level session
    - Pacing floor on the coding step is configurable; 0 disables it for batch use
    - History sent to the generator excludes the prompt being submitted: the prompt
      travels separately as the new request
    - Reset bumps an epoch counter; in-flight attempts compare epochs before committing
"""

import asyncio
import logging
import time
from collections.abc import Awaitable, Callable
from dataclasses import dataclass

from genstudio.core.artifacts import Artifact, GenerationResult, find_artifact
from genstudio.core.domain_types import CorrelationId, GenerationStep
from genstudio.core.errors import (
    AdmissionRejectedError, ErrorContext, GenerationFailure, ResourceNotFoundError,
)
from genstudio.core.format_messages import GENERATION_FAILURE_TEXT
from genstudio.core.repository_protocols import CodeGenerator, WorkspaceStore
from genstudio.core.request_guard import RequestGuard, RequestHandle
from genstudio.core.selection import resolve_selection
from genstudio.core.session_state import Session

logger = logging.getLogger(__name__)


def _wall_clock_ms() -> int:
    return int(time.time() * 1000)


@dataclass(frozen=True)
class GenerationStatus:
    """Visible status signal."""
    is_generating: bool
    step: GenerationStep
    correlation_id: CorrelationId | None = None


StatusListener = Callable[[GenerationStatus], None]


class GenerationSessionController:
    """Single-flight orchestrator: guard -> generator -> commit -> persist."""

    def __init__(
        self,
        generator: CodeGenerator,
        store: WorkspaceStore,
        coding_floor_ms: int = 500,
        now_ms: Callable[[], int] = _wall_clock_ms,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
    ):
        self.generator = generator
        self.store = store
        self.coding_floor_ms = max(0, coding_floor_ms)
        self._now_ms = now_ms
        self._sleep = sleep
        self.session = Session()
        self.guard = RequestGuard(now_ms=now_ms)
        self._step = GenerationStep.IDLE
        self._selected: Artifact | None = None
        self._epoch = 0
        self._listeners: list[StatusListener] = []

    # -- Read side -----------------------------------------------------------

    @property
    def status(self) -> GenerationStatus:
        handle = self.guard.current
        return GenerationStatus(
            is_generating=self._step != GenerationStep.IDLE,
            step=self._step,
            correlation_id=handle.correlation_id if handle else None,
        )

    @property
    def selected(self) -> Artifact | None:
        return self._selected

    def add_status_listener(self, listener: StatusListener) -> None:
        self._listeners.append(listener)

    # -- Lifecycle -----------------------------------------------------------

    async def hydrate(self) -> Session:
        """Load the stored snapshot (empty default when absent/unreadable)."""
        restored = await self.store.hydrate()
        self.session = restored if restored is not None else Session()
        self.guard.seed(self.session.request_count)
        self._selected = resolve_selection(None, self.session.artifacts)
        logger.info(
            "Workspace hydrated: %d turns, %d files",
            len(self.session.history), len(self.session.artifacts),
        )
        return self.session

    async def reset(self) -> None:
        """Empty the session, clear storage, force-release any abandoned request."""
        dropped = self.guard.force_release()
        self._epoch += 1
        self.session = Session()
        self._selected = None
        self._set_step(GenerationStep.IDLE)
        if dropped is not None:
            logger.warning(
                "Reset abandoned in-flight request",
                extra={"correlation_id": dropped.correlation_id},
            )
        await self.store.clear()

    # -- Commands ------------------------------------------------------------

    async def submit(self, prompt: str) -> bool:
        """Run one generation attempt. False when admission is refused.

        Generation and persistence failures are absorbed into the session;
        nothing propagates to the caller.
        """
        if self._step != GenerationStep.IDLE:
            self._log_rejection("request in flight")
            return False

        with self.guard.admit(prompt) as handle:
            if handle is None:
                self._log_rejection(
                    "request in flight" if self.guard.active else "blank prompt",
                )
                return False
            epoch = self._epoch
            try:
                await self._run(handle, epoch)
            finally:
                if epoch == self._epoch:
                    self._set_step(GenerationStep.IDLE)
        return True

    def select_artifact(self, path: str) -> Artifact:
        """User-driven selection. Raises ResourceNotFoundError for unknown paths."""
        artifact = find_artifact(self.session.artifacts, path)
        if artifact is None:
            raise ResourceNotFoundError("File", path)
        self._selected = artifact
        return artifact

    # -- Internals -----------------------------------------------------------

    async def _run(self, handle: RequestHandle, epoch: int) -> None:
        history = self.session.history.as_context()
        self.session.request_count += 1
        self.session.record_user_turn(handle.prompt, handle.acquired_at)
        self._set_step(GenerationStep.THINKING)

        try:
            result = await self.generator.generate(
                handle.prompt, history, handle.correlation_id,
            )
        except Exception as e:
            if self._is_stale(epoch, handle):
                return
            self._log_failure(handle, e)
            self.session.record_failure(GENERATION_FAILURE_TEXT, self._now_ms())
        else:
            if self._is_stale(epoch, handle):
                return
            self._set_step(GenerationStep.CODING)
            if self.coding_floor_ms:
                await self._sleep(self.coding_floor_ms / 1000)
            if self._is_stale(epoch, handle):
                return
            self._commit(result, handle)

        await self._persist(handle)

    def _commit(self, result: GenerationResult, handle: RequestHandle) -> None:
        """Swap file set + preview + explanation + selection. No awaits allowed here."""
        prior_path = self._selected.path if self._selected else None
        self.session.commit_result(result, self._now_ms())
        self._selected = resolve_selection(prior_path, self.session.artifacts)
        logger.info(
            "Generation committed: %d files", len(result.artifacts),
            extra={
                "correlation_id": handle.correlation_id,
                "request_seq": handle.seq,
            },
        )

    async def _persist(self, handle: RequestHandle) -> None:
        saved_at = await self.store.save(self.session)
        if saved_at is None:
            logger.warning(
                "Workspace not persisted; continuing in memory",
                extra={"correlation_id": handle.correlation_id},
            )
            return
        self.session.updated_at = saved_at

    def _is_stale(self, epoch: int, handle: RequestHandle) -> bool:
        if epoch == self._epoch:
            return False
        logger.info(
            "Discarding result of request abandoned by reset",
            extra={"correlation_id": handle.correlation_id},
        )
        return True

    def _set_step(self, step: GenerationStep) -> None:
        if step == self._step:
            return
        self._step = step
        status = self.status
        logger.debug(
            "Generation step -> %s", step.value,
            extra={"step": step.value, "correlation_id": status.correlation_id},
        )
        for listener in list(self._listeners):
            try:
                listener(status)
            except Exception as e:
                logger.error(
                    "Status listener failed: %s", e, exc_info=True,
                )

    def _log_failure(self, handle: RequestHandle, error: Exception) -> None:
        extra = {
            "correlation_id": handle.correlation_id,
            "request_seq": handle.seq,
        }
        if isinstance(error, GenerationFailure):
            logger.warning(
                "Generation failed: %s", error.message,
                extra={**extra, "error_code": error.code},
            )
        else:
            logger.error(
                "Unexpected error during generation: %s", error,
                extra=extra, exc_info=True,
            )

    def _log_rejection(self, reason: str) -> None:
        rejection = AdmissionRejectedError(
            reason, ErrorContext(request_seq=self.guard.request_count),
        )
        logger.info(rejection.message, extra={"error_code": rejection.code})
