"""Transport for OpenAI-compatible chat-completion endpoints.

Sends a finished :class:`ChatCompletionParams` through the ``openai`` SDK
and returns the reply as a plain payload dict. Streamed replies are folded
into the same shape as a non-streamed completion, so the response parser
never sees chunks.
"""

from __future__ import annotations

import logging
import os
from collections.abc import Iterable, Mapping
from typing import Any

from thinkwire.llm.adapters.base import ChatCompletionParams
from thinkwire.llm.errors import (
    ConfigurationError,
    NetworkError,
    RequestTimeoutError,
    error_from_status,
)

logger = logging.getLogger(__name__)

PROVIDER = "openai"


def _extract_retry_after(exc: Any) -> float | None:
    """Extract Retry-After header from an SDK exception's response."""
    response = getattr(exc, "response", None)
    if response is None:
        return None
    headers = getattr(response, "headers", None)
    if headers is None:
        return None
    retry_str = headers.get("retry-after")
    if retry_str is None:
        return None
    try:
        return float(retry_str)
    except (ValueError, TypeError):
        return None


def _error_body(exc: Any) -> tuple[dict[str, Any] | None, str | None]:
    """Return the SDK exception's JSON body and its provider error code."""
    body = getattr(exc, "body", None)
    if not isinstance(body, Mapping):
        return None, None
    body = dict(body)
    detail = body.get("error")
    code = (detail if isinstance(detail, Mapping) else body).get("code")
    return body, code if isinstance(code, str) else None


def _dump(obj: Any) -> dict[str, Any]:
    if isinstance(obj, Mapping):
        return dict(obj)
    return obj.model_dump()


def aggregate_chunks(chunks: Iterable[Mapping[str, Any]]) -> dict[str, Any]:
    """Fold streamed ``chat.completion.chunk`` payloads into one completion.

    Text, reasoning and refusal deltas are concatenated; a field that never
    appeared in any delta stays absent. The first id and model and the last
    non-null finish reason win. Tool call fragments are joined by their index.
    """
    payload: dict[str, Any] = {}
    message: dict[str, Any] = {"role": "assistant"}
    finish_reason: str | None = None
    tool_calls: dict[int, dict[str, Any]] = {}

    for chunk in chunks:
        if chunk.get("id") and "id" not in payload:
            payload["id"] = chunk["id"]
        if chunk.get("model") and "model" not in payload:
            payload["model"] = chunk["model"]
        if chunk.get("usage") is not None:
            payload["usage"] = chunk["usage"]

        for choice in chunk.get("choices") or []:
            if choice.get("index", 0) != 0:
                continue
            delta = choice.get("delta") or {}
            for key in ("reasoning_content", "reasoning", "content", "refusal"):
                piece = delta.get(key)
                if piece is not None:
                    message[key] = message.get(key, "") + piece
            for tc in delta.get("tool_calls") or []:
                slot = tool_calls.setdefault(
                    tc.get("index", 0),
                    {"id": "", "type": "function", "function": {"name": "", "arguments": ""}},
                )
                if tc.get("id"):
                    slot["id"] = tc["id"]
                function = tc.get("function") or {}
                if function.get("name"):
                    slot["function"]["name"] = function["name"]
                if function.get("arguments"):
                    slot["function"]["arguments"] += function["arguments"]
            if choice.get("finish_reason") is not None:
                finish_reason = choice["finish_reason"]

    if tool_calls:
        message["tool_calls"] = [tool_calls[i] for i in sorted(tool_calls)]
    payload["choices"] = [
        {"index": 0, "message": message, "finish_reason": finish_reason}
    ]
    return payload


class OpenAITransport:
    """Sends chat-completion requests with ``openai.AsyncOpenAI``."""

    def __init__(
        self,
        api_key: str | None = None,
        base_url: str | None = None,
        timeout: float | None = None,
    ) -> None:
        import openai

        api_key = api_key or os.environ.get("OPENAI_API_KEY")
        if not api_key:
            raise ConfigurationError(
                "No API key: pass api_key or set OPENAI_API_KEY"
            )
        client_kwargs: dict[str, Any] = {
            "api_key": api_key,
            "base_url": base_url or os.environ.get("OPENAI_BASE_URL"),
        }
        if timeout is not None:
            client_kwargs["timeout"] = timeout
        self._client = openai.AsyncOpenAI(**client_kwargs)

    async def send(self, params: ChatCompletionParams) -> dict[str, Any]:
        """Send ``params`` and return the completion payload.

        Raises:
            ProviderError: Translated from ``openai.APIStatusError``.
            RequestTimeoutError: The SDK timed out.
            NetworkError: The connection failed.
        """
        import openai

        kwargs = params.to_kwargs()
        streaming = bool(kwargs.get("stream"))
        try:
            raw = await self._client.chat.completions.create(**kwargs)
            if not streaming:
                return _dump(raw)
            chunks = [_dump(chunk) async for chunk in raw]
        except openai.APIStatusError as exc:
            body, error_code = _error_body(exc)
            raise error_from_status(
                exc.status_code,
                str(exc),
                provider=PROVIDER,
                error_code=error_code,
                raw=body,
                retry_after=_extract_retry_after(exc),
            ) from exc
        except openai.APITimeoutError as exc:
            raise RequestTimeoutError(str(exc), provider=PROVIDER) from exc
        except openai.APIConnectionError as exc:
            raise NetworkError(str(exc)) from exc

        logger.debug("Aggregated %d stream chunks", len(chunks))
        return aggregate_chunks(chunks)
