"""Resilient Anthropic Client — one-shot Messages API calls with retry, backoff, and error mapping.

Invariants:
    - Rate limits (429): retried with backoff, Retry-After header wins over computed delay
    - Transient failures (5xx, 529 overloaded, connection reset): retried up to max_retries
    - Timeouts and client errors (4xx except 429): raised on first occurrence
    - Every failure leaves this module as AnthropicAPIError (core/errors.py)

Design Decisions:
    - Wrapper over raw client: the generation client never sees SDK exceptions
      (ADR: single responsibility)
    - Classification separated from the retry loop: _classify() is a pure mapping
      from SDK exception to failure kind, the loop only decides retry vs raise
    - ±25% jitter on backoff: prevents thundering herd on shared rate limits
    - A timed-out generation is not repeated: the next attempt would take as long
"""

import asyncio
import random
import logging

import anthropic
from anthropic import (
    APIError,
    APIConnectionError,
    APIStatusError,
    RateLimitError,
    APITimeoutError,
    InternalServerError,
)

from genstudio.core.errors import AnthropicAPIError, ErrorContext

logger = logging.getLogger(__name__)

# OverloadedError (HTTP 529) is not re-exported by every SDK release.
_OVERLOADED_STATUS = 529

_RETRYABLE = {"rate_limit", "connection_error"}


def _classify(error: Exception) -> str:
    """Map an SDK exception to the api_error_type reported by AnthropicAPIError."""
    if isinstance(error, RateLimitError):
        return "rate_limit"
    # APITimeoutError subclasses APIConnectionError: check it first
    if isinstance(error, APITimeoutError):
        return "timeout"
    if isinstance(error, (APIConnectionError, InternalServerError)):
        return "connection_error"
    if isinstance(error, APIStatusError) and error.status_code == _OVERLOADED_STATUS:
        return "connection_error"
    if isinstance(error, APIError):
        return "client_error"
    return "unknown"


def _retry_after_ms(error: Exception) -> int | None:
    """Retry-After header in milliseconds, when the server sent one."""
    response = getattr(error, "response", None)
    if response is None:
        return None
    try:
        value = response.headers.get("retry-after")
        return int(value) * 1000 if value else None
    except (AttributeError, TypeError, ValueError):
        return None


class ResilientAnthropicClient:
    """AsyncAnthropic with this service's retry policy in front of it."""

    def __init__(
        self,
        api_key: str,
        max_retries: int = 3,
        base_delay_ms: int = 1000,
        max_delay_ms: int = 30_000,
        timeout_seconds: int = 120,
    ):
        # SDK-level retries disabled: this wrapper owns the retry policy
        self.client = anthropic.AsyncAnthropic(
            api_key=api_key,
            timeout=timeout_seconds,
            max_retries=0,
        )
        self.max_retries = max_retries
        self.base_delay_ms = base_delay_ms
        self.max_delay_ms = max_delay_ms

    async def create_message(
        self,
        *,
        model: str,
        max_tokens: int,
        system: str,
        tools: list,
        messages: list,
        tool_choice: dict | None = None,
        context: ErrorContext | None = None,
    ):
        """Single non-streaming Messages call. Raises AnthropicAPIError."""
        request: dict = {
            "model": model, "max_tokens": max_tokens,
            "system": system, "tools": tools, "messages": messages,
        }
        if tool_choice is not None:
            request["tool_choice"] = tool_choice

        attempt = 0
        while True:
            try:
                response = await self.client.messages.create(**request)
            except Exception as e:
                kind = _classify(e)
                if kind not in _RETRYABLE or attempt >= self.max_retries:
                    raise self._to_api_error(e, kind, attempt, context) from e
                delay = self._delay_for(e, kind, attempt)
                logger.warning(
                    "Anthropic %s, retry in %dms: %s", kind, delay, e,
                    extra={
                        "attempt": attempt + 1,
                        "correlation_id": context.correlation_id if context else None,
                    },
                )
                await asyncio.sleep(delay / 1000)
                attempt += 1
                continue

            self._log_success(response, attempt, context)
            return response

    def _to_api_error(
        self, error: Exception, kind: str, attempt: int,
        context: ErrorContext | None,
    ) -> AnthropicAPIError:
        if kind == "rate_limit":
            return AnthropicAPIError(
                "Rate limit exceeded after retries", kind,
                retry_after_ms=_retry_after_ms(error), context=context,
            )
        if kind == "connection_error":
            return AnthropicAPIError(
                f"Transient failure after {attempt} retries: {error}",
                kind, context=context,
            )
        if kind == "timeout":
            return AnthropicAPIError("API timeout", kind, context=context)
        if kind == "unknown":
            logger.error(f"Unexpected Anthropic error: {error}", exc_info=True)
        return AnthropicAPIError(str(error), kind, context=context)

    def _delay_for(self, error: Exception, kind: str, attempt: int) -> int:
        if kind == "rate_limit":
            return _retry_after_ms(error) or self._backoff(attempt)
        return self._backoff(attempt)

    def _backoff(self, attempt: int) -> int:
        """Exponential backoff with ±25% jitter."""
        delay = min(self.max_delay_ms, (2 ** attempt) * self.base_delay_ms)
        return int(delay * random.uniform(0.75, 1.25))  # nosec B311

    def _log_success(
        self, response, attempt: int, context: ErrorContext | None,
    ) -> None:
        usage = response.usage
        logger.info(
            "Anthropic API success",
            extra={
                "attempt": attempt + 1,
                "correlation_id": context.correlation_id if context else None,
                "input_tokens": usage.input_tokens,
                "output_tokens": usage.output_tokens,
            },
        )
