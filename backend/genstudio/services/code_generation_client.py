"""Code Generation Client — turns (prompt, history) into a validated GenerationResult.

Invariants:
    - Stateless: every call carries the full history as context, no server-side session
    - Any transport, authentication or schema problem raises GenerationFailure (or subclass)
    - A missing/placeholder API key fails before any network call (MissingCredentialError)
    - Output reaches the caller only after GenerationPayload validation

Design Decisions:
    - Forced emit_project tool (tool_choice) over free-form JSON text
    - Truncated replies (stop_reason == "max_tokens") rejected: a partial project is
      never better than the previous complete one
"""

import logging
from typing import Any

from pydantic import ValidationError

from genstudio.config import Settings
from genstudio.core.artifacts import GenerationResult
from genstudio.core.errors import (
    ErrorContext, MissingCredentialError, ResponseSchemaError,
)
from genstudio.core.format_messages import build_generation_message
from genstudio.infrastructure.anthropic_client import ResilientAnthropicClient
from genstudio.schemas.generation import GenerationPayload
from genstudio.services.define_generation_tools import (
    EMIT_PROJECT_TOOL_NAME, TOOL_EMIT_PROJECT,
)
from genstudio.services.system_prompt import build_system_prompt

logger = logging.getLogger(__name__)

_PLACEHOLDER_KEYS = {"", "sk-ant-placeholder"}


def has_usable_api_key(api_key: str | None) -> bool:
    return bool(api_key) and api_key.strip() not in _PLACEHOLDER_KEYS


class AnthropicCodeGenerator:
    """CodeGenerator implementation backed by the Anthropic Messages API."""

    def __init__(
        self,
        anthropic_client: ResilientAnthropicClient,
        model: str,
        max_tokens: int = 16_384,
        has_credential: bool = True,
    ):
        self.client = anthropic_client
        self.model = model
        self.max_tokens = max_tokens
        self.has_credential = has_credential

    @classmethod
    def from_settings(cls, settings: Settings) -> "AnthropicCodeGenerator":
        client = ResilientAnthropicClient(
            api_key=settings.anthropic_api_key,
            max_retries=settings.anthropic_max_retries,
            base_delay_ms=settings.anthropic_base_delay_ms,
            max_delay_ms=settings.anthropic_max_delay_ms,
            timeout_seconds=settings.anthropic_timeout_seconds,
        )
        return cls(
            client,
            model=settings.generation_model,
            max_tokens=settings.generation_max_tokens,
            has_credential=has_usable_api_key(settings.anthropic_api_key),
        )

    async def generate(
        self, prompt: str, history: list[dict], correlation_id: str,
    ) -> GenerationResult:
        """One stateless generation call. Raises GenerationFailure on any problem."""
        ctx = ErrorContext(correlation_id=correlation_id)
        if not self.has_credential:
            raise MissingCredentialError(ctx)

        response = await self.client.create_message(
            model=self.model,
            max_tokens=self.max_tokens,
            system=build_system_prompt(),
            tools=[TOOL_EMIT_PROJECT],
            messages=[{
                "role": "user",
                "content": build_generation_message(prompt, history),
            }],
            tool_choice={"type": "tool", "name": EMIT_PROJECT_TOOL_NAME},
            context=ctx,
        )
        return parse_generation_response(response, ctx)


def parse_generation_response(
    response: Any, context: ErrorContext | None = None,
) -> GenerationResult:
    """Extract and validate the emit_project tool input. Raises ResponseSchemaError."""
    if response is None:
        raise ResponseSchemaError("no response from model", context)
    if getattr(response, "stop_reason", None) == "max_tokens":
        raise ResponseSchemaError("response truncated at max_tokens", context)

    tool_input = _find_tool_input(response)
    if tool_input is None:
        raise ResponseSchemaError(
            f"model did not call {EMIT_PROJECT_TOOL_NAME}", context,
        )

    try:
        payload = GenerationPayload.model_validate(tool_input)
    except ValidationError as e:
        logger.warning(
            "Generation payload failed validation: %s", e.errors(),
            extra={"correlation_id": context.correlation_id if context else None},
        )
        raise ResponseSchemaError(
            f"{e.error_count()} validation error(s)", context,
        ) from e
    return payload.to_result()


def _find_tool_input(response: Any) -> dict | None:
    for block in getattr(response, "content", None) or []:
        if (getattr(block, "type", None) == "tool_use"
                and getattr(block, "name", None) == EMIT_PROJECT_TOOL_NAME):
            tool_input = getattr(block, "input", None)
            return tool_input if isinstance(tool_input, dict) else None
    return None
