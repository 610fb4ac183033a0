"""Chat model composing formatter, option adapters, transport and parser."""

from __future__ import annotations

import logging
import os
from collections.abc import Sequence

from thinkwire.llm.adapters.base import ChatCompletionParams, Transport
from thinkwire.llm.adapters.openai_formatter import OpenAIChatFormatter
from thinkwire.llm.adapters.openai_options import (
    apply_generate_options,
    apply_thinking,
    resolve_stream,
)
from thinkwire.llm.adapters.openai_parser import OpenAIResponseParser
from thinkwire.llm.errors import ConfigurationError
from thinkwire.llm.models import ChatResponse, GenerateOptions, Message

logger = logging.getLogger(__name__)

DEFAULT_MODEL = "o1"

_TRUTHY = ("1", "true", "yes", "on")


class OpenAIChatModel:
    """An OpenAI-compatible chat model with optional extended thinking.

    Per-call :class:`GenerateOptions` override ``default_options`` field by
    field. When thinking is enabled, every request is sent with
    ``stream=False`` regardless of what the options or the ``stream`` flag
    ask for.
    """

    def __init__(
        self,
        model_name: str,
        *,
        transport: Transport | None = None,
        api_key: str | None = None,
        base_url: str | None = None,
        enable_thinking: bool = False,
        stream: bool = False,
        default_options: GenerateOptions | None = None,
        formatter: OpenAIChatFormatter | None = None,
        parser: OpenAIResponseParser | None = None,
    ) -> None:
        if not model_name:
            raise ConfigurationError("model_name is required")
        self.model_name = model_name
        self.enable_thinking = enable_thinking
        self.stream = stream
        self.default_options = default_options or GenerateOptions()
        self._formatter = formatter or OpenAIChatFormatter()
        self._parser = parser or OpenAIResponseParser()
        if transport is None:
            from thinkwire.llm.transport import OpenAITransport

            transport = OpenAITransport(api_key=api_key, base_url=base_url)
        self._transport = transport

    @classmethod
    def from_env(cls, transport: Transport | None = None) -> OpenAIChatModel:
        """Create a model from environment variables.

        Environment variables:
            THINKWIRE_MODEL: Model name (default ``o1``).
            THINKWIRE_THINKING: Enable thinking when truthy.
            THINKWIRE_THINKING_BUDGET: Default thinking budget in tokens.
            OPENAI_API_KEY, OPENAI_BASE_URL: Read by the transport.

        Raises:
            ConfigurationError: If THINKWIRE_THINKING_BUDGET is not a
                positive integer.
        """
        budget_str = os.environ.get("THINKWIRE_THINKING_BUDGET", "").strip()
        budget: int | None = None
        if budget_str:
            try:
                budget = int(budget_str)
            except ValueError as exc:
                raise ConfigurationError(
                    f"THINKWIRE_THINKING_BUDGET must be an integer, got {budget_str!r}"
                ) from exc
            if budget <= 0:
                raise ConfigurationError(
                    f"THINKWIRE_THINKING_BUDGET must be positive, got {budget}"
                )
        thinking = os.environ.get("THINKWIRE_THINKING", "").strip().lower() in _TRUTHY
        return cls(
            os.environ.get("THINKWIRE_MODEL") or DEFAULT_MODEL,
            transport=transport,
            enable_thinking=thinking,
            default_options=GenerateOptions(thinking_budget=budget),
        )

    def build_params(
        self,
        messages: Sequence[Message],
        options: GenerateOptions | None = None,
    ) -> ChatCompletionParams:
        """Build the request for one call without sending it."""
        params = ChatCompletionParams(self.model_name, self._formatter.format(messages))
        apply_generate_options(params, options, self.default_options)

        stream = resolve_stream(options, self.default_options, fallback=self.stream)
        if self.enable_thinking:
            if stream:
                logger.debug("Streaming disabled: thinking is enabled for %s", self.model_name)
            stream = False
            apply_thinking(params, options, self.default_options)
        params.set("stream", stream)
        return params

    async def complete(
        self,
        messages: Sequence[Message],
        options: GenerateOptions | None = None,
    ) -> ChatResponse:
        """Send one chat completion and parse the reply.

        Raises:
            MalformedResponseError: The provider payload lacked required fields.
            SDKError: Any transport failure, propagated unchanged.
        """
        params = self.build_params(messages, options)
        logger.info(
            "Chat request: model=%s messages=%d thinking=%s stream=%s",
            self.model_name,
            len(messages),
            self.enable_thinking,
            params.get("stream"),
        )
        payload = await self._transport.send(params)
        return self._parser.parse(payload)
