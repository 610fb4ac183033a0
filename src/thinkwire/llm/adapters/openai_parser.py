"""Parse OpenAI-compatible chat-completion payloads into ChatResponse values.

Block order is always reasoning, then text, then any other modality, no
matter how the fields are ordered in the payload. A field counts as
present when its key exists with a non-null value, so an empty reasoning
string still yields a ThinkingContent block.
"""

from __future__ import annotations

import json
import logging
from collections.abc import Callable, Mapping
from typing import Any

from thinkwire.llm.errors import MalformedResponseError
from thinkwire.llm.models import (
    ChatResponse,
    ContentPart,
    TextContent,
    ThinkingContent,
    TokenUsage,
    ToolCallContent,
)

logger = logging.getLogger(__name__)

# Checked in order; the first present key wins.
REASONING_FIELDS = ("reasoning_content", "reasoning")
TEXT_FIELD = "content"


def _as_mapping(payload: Any) -> Mapping[str, Any] | None:
    """Accept plain mappings and SDK models exposing ``model_dump()``."""
    if isinstance(payload, Mapping):
        return payload
    dump = getattr(payload, "model_dump", None)
    if callable(dump):
        dumped = dump()
        if isinstance(dumped, Mapping):
            return dumped
    return None


def _present(obj: Mapping[str, Any], key: str) -> bool:
    return obj.get(key) is not None


class OpenAIResponseParser:
    """Maps a raw chat-completion payload to a :class:`ChatResponse`.

    Stateless; one instance may be shared across concurrent calls.
    """

    def parse(self, payload: Any) -> ChatResponse:
        """Parse a chat-completion payload.

        Only the first choice is read.

        Args:
            payload: A JSON-like mapping or an SDK ``ChatCompletion``.

        Returns:
            The parsed response.

        Raises:
            MalformedResponseError: If ``id`` or the first choice's
                ``finish_reason`` is missing, or a present reasoning or
                text field is not a string; every bad field is named.
        """
        data = _as_mapping(payload)
        if data is None:
            raise MalformedResponseError(["<payload>"], payload=payload)

        missing: list[str] = []
        response_id = data.get("id")
        if not isinstance(response_id, str):
            missing.append("id")

        choice: Mapping[str, Any] = {}
        choices = data.get("choices")
        if isinstance(choices, list) and choices and isinstance(choices[0], Mapping):
            choice = choices[0]
        finish_reason = choice.get("finish_reason")
        if not isinstance(finish_reason, str):
            missing.append("choices[0].finish_reason")

        message = _as_mapping(choice.get("message")) or {}
        for key in (*REASONING_FIELDS, TEXT_FIELD):
            if _present(message, key) and not isinstance(message[key], str):
                missing.append(f"choices[0].message.{key}")

        if missing:
            raise MalformedResponseError(missing, payload=payload)

        model = data.get("model")
        return ChatResponse(
            id=response_id,
            content=tuple(self.parse_message(message)),
            finish_reason=finish_reason,
            model=model if isinstance(model, str) else None,
            usage=self.parse_usage(data.get("usage")),
        )

    # -----------------------------------------------------------------
    # Message content
    # -----------------------------------------------------------------

    def parse_message(self, message: Mapping[str, Any]) -> list[ContentPart]:
        """Convert a message object into ordered content blocks."""
        blocks: list[ContentPart] = []

        for key in REASONING_FIELDS:
            if _present(message, key):
                blocks.append(ThinkingContent(text=message[key]))
                break

        if _present(message, TEXT_FIELD):
            blocks.append(TextContent(text=message[TEXT_FIELD]))

        # Remaining modalities follow in the message's own field order.
        handlers = self._other_handlers()
        for key, value in message.items():
            handler = handlers.get(key)
            if handler is not None and value is not None:
                blocks.extend(handler(value))

        return blocks

    def _other_handlers(self) -> dict[str, Callable[[Any], list[ContentPart]]]:
        return {
            "tool_calls": self._parse_tool_calls,
            "refusal": self._parse_refusal,
        }

    @staticmethod
    def _parse_tool_calls(tool_calls: Any) -> list[ContentPart]:
        parts: list[ContentPart] = []
        for raw in tool_calls or []:
            call = _as_mapping(raw)
            if call is None:
                continue
            function = _as_mapping(call.get("function")) or {}
            raw_args = function.get("arguments")
            if isinstance(raw_args, Mapping):
                # Some compatible servers send arguments already decoded.
                args = dict(raw_args)
                args_str = json.dumps(args)
            else:
                args_str = raw_args or ""
                try:
                    args = json.loads(args_str) if args_str else {}
                except (json.JSONDecodeError, TypeError) as exc:
                    logger.warning("Failed to parse tool call arguments: %s", exc)
                    args = {}
            if not isinstance(args, dict):
                logger.warning("Tool call arguments are not an object: %r", args_str)
                args = {}
            parts.append(
                ToolCallContent(
                    tool_call_id=call.get("id") or "",
                    tool_name=function.get("name") or "",
                    arguments=args,
                    arguments_json=args_str,
                )
            )
        return parts

    @staticmethod
    def _parse_refusal(refusal: Any) -> list[ContentPart]:
        return [TextContent(text=f"[Refusal: {refusal}]")]

    # -----------------------------------------------------------------
    # Usage
    # -----------------------------------------------------------------

    @staticmethod
    def parse_usage(raw: Any) -> TokenUsage | None:
        usage = _as_mapping(raw) if raw is not None else None
        if usage is None:
            return None
        details = _as_mapping(usage.get("completion_tokens_details")) or {}
        return TokenUsage(
            input_tokens=usage.get("prompt_tokens") or 0,
            output_tokens=usage.get("completion_tokens") or 0,
            reasoning_tokens=details.get("reasoning_tokens") or 0,
        )
