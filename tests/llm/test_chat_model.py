"""Tests for thinkwire.llm.chat_model and message formatting."""

from __future__ import annotations

from unittest.mock import AsyncMock, MagicMock

import pytest

from thinkwire.llm.adapters.base import ChatCompletionParams
from thinkwire.llm.adapters.openai_formatter import OpenAIChatFormatter
from thinkwire.llm.chat_model import OpenAIChatModel
from thinkwire.llm.errors import (
    ConfigurationError,
    MalformedResponseError,
    RateLimitError,
)
from thinkwire.llm.models import (
    GenerateOptions,
    Message,
    Role,
    TextContent,
    ThinkingContent,
)


def _transport(payload: dict | None = None) -> MagicMock:
    transport = MagicMock()
    transport.send = AsyncMock(
        return_value=payload
        or {
            "id": "chatcmpl-1",
            "model": "o1",
            "choices": [
                {
                    "index": 0,
                    "finish_reason": "stop",
                    "message": {
                        "role": "assistant",
                        "reasoning_content": "Let me think about this problem...",
                        "content": "The answer is 42",
                    },
                }
            ],
        }
    )
    return transport


def _sent_params(transport: MagicMock) -> ChatCompletionParams:
    transport.send.assert_awaited_once()
    return transport.send.await_args.args[0]


# ---------------------------------------------------------------
# Construction
# ---------------------------------------------------------------


class TestConstruction:
    def test_thinking_disabled_by_default(self) -> None:
        model = OpenAIChatModel("gpt-4", transport=_transport())
        assert model.enable_thinking is False
        assert model.stream is False

    def test_empty_default_options(self) -> None:
        model = OpenAIChatModel("o1", transport=_transport(), enable_thinking=True)
        assert model.default_options == GenerateOptions()

    def test_model_name_required(self) -> None:
        with pytest.raises(ConfigurationError, match="model_name"):
            OpenAIChatModel("", transport=_transport())

    def test_from_env(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("THINKWIRE_MODEL", "o1-mini")
        monkeypatch.setenv("THINKWIRE_THINKING", "true")
        monkeypatch.setenv("THINKWIRE_THINKING_BUDGET", "5000")
        model = OpenAIChatModel.from_env(transport=_transport())
        assert model.model_name == "o1-mini"
        assert model.enable_thinking is True
        assert model.default_options.thinking_budget == 5000

    def test_from_env_defaults(self, monkeypatch: pytest.MonkeyPatch) -> None:
        for var in ("THINKWIRE_MODEL", "THINKWIRE_THINKING", "THINKWIRE_THINKING_BUDGET"):
            monkeypatch.delenv(var, raising=False)
        model = OpenAIChatModel.from_env(transport=_transport())
        assert model.model_name == "o1"
        assert model.enable_thinking is False
        assert model.default_options.thinking_budget is None

    @pytest.mark.parametrize("value", ["lots", "0", "-5"])
    def test_from_env_rejects_bad_budget(self, monkeypatch: pytest.MonkeyPatch, value: str) -> None:
        monkeypatch.setenv("THINKWIRE_THINKING_BUDGET", value)
        with pytest.raises(ConfigurationError, match="THINKWIRE_THINKING_BUDGET"):
            OpenAIChatModel.from_env(transport=_transport())


# ---------------------------------------------------------------
# Request building
# ---------------------------------------------------------------


class TestBuildParams:
    def test_thinking_disables_streaming(self) -> None:
        model = OpenAIChatModel(
            "o1", transport=_transport(), enable_thinking=True, stream=True
        )
        params = model.build_params([Message.user("hi")])
        assert params.get("stream") is False
        assert params.additional_body["thinking"] == {"type": "enabled"}

    def test_thinking_overrides_stream_requested_per_call(self) -> None:
        model = OpenAIChatModel("o1", transport=_transport(), enable_thinking=True)
        params = model.build_params(
            [Message.user("hi")], GenerateOptions(stream=True, thinking_budget=8000)
        )
        assert params.get("stream") is False
        assert params.additional_body["thinking"] == {"type": "enabled", "budget_tokens": 8000}

    def test_stream_honored_without_thinking(self) -> None:
        model = OpenAIChatModel("gpt-4", transport=_transport(), stream=True)
        params = model.build_params([Message.user("hi")])
        assert params.get("stream") is True
        assert "extra_body" not in params.to_kwargs()

    def test_call_stream_overrides_model_flag(self) -> None:
        model = OpenAIChatModel("gpt-4", transport=_transport(), stream=True)
        params = model.build_params([Message.user("hi")], GenerateOptions(stream=False))
        assert params.get("stream") is False

    def test_default_budget_used(self) -> None:
        model = OpenAIChatModel(
            "o1",
            transport=_transport(),
            enable_thinking=True,
            default_options=GenerateOptions(thinking_budget=1000),
        )
        params = model.build_params([Message.user("hi")])
        assert params.additional_body["thinking"]["budget_tokens"] == 1000

    def test_budget_ignored_when_thinking_disabled(self) -> None:
        model = OpenAIChatModel(
            "gpt-4",
            transport=_transport(),
            default_options=GenerateOptions(thinking_budget=1000, temperature=0.7),
        )
        kwargs = model.build_params([Message.user("hi")]).to_kwargs()
        assert "extra_body" not in kwargs
        assert kwargs["temperature"] == 0.7

    def test_sampling_options_written(self) -> None:
        model = OpenAIChatModel(
            "o1",
            transport=_transport(),
            enable_thinking=True,
            default_options=GenerateOptions(thinking_budget=3000, temperature=0.7, top_p=0.9, max_tokens=2000),
        )
        kwargs = model.build_params([Message.user("hi")]).to_kwargs()
        assert kwargs["model"] == "o1"
        assert kwargs["temperature"] == 0.7
        assert kwargs["top_p"] == 0.9
        assert kwargs["max_tokens"] == 2000
        assert kwargs["stream"] is False
        assert kwargs["extra_body"] == {"thinking": {"type": "enabled", "budget_tokens": 3000}}

    def test_messages_formatted(self) -> None:
        model = OpenAIChatModel("gpt-4", transport=_transport())
        params = model.build_params([Message.system("Be brief."), Message.user("hi")])
        assert params.get("messages") == [
            {"role": "system", "content": "Be brief."},
            {"role": "user", "content": "hi"},
        ]

    def test_custom_formatter_used(self) -> None:
        formatter = MagicMock()
        formatter.format.return_value = [{"role": "user", "content": "custom"}]
        model = OpenAIChatModel("o1", transport=_transport(), formatter=formatter)
        params = model.build_params([Message.user("hi")])
        assert params.get("messages") == [{"role": "user", "content": "custom"}]


# ---------------------------------------------------------------
# End-to-end completion
# ---------------------------------------------------------------


class TestComplete:
    @pytest.mark.asyncio
    async def test_reasoning_request_sent_non_streaming(self) -> None:
        transport = _transport()
        model = OpenAIChatModel(
            "o1",
            transport=transport,
            enable_thinking=True,
            stream=True,
            default_options=GenerateOptions(thinking_budget=1000),
        )
        response = await model.complete(
            [Message.user("What is 6 x 7?")], GenerateOptions(thinking_budget=8000)
        )

        kwargs = _sent_params(transport).to_kwargs()
        assert kwargs["stream"] is False
        assert kwargs["extra_body"]["thinking"] == {"type": "enabled", "budget_tokens": 8000}
        assert response.content == (
            ThinkingContent(text="Let me think about this problem..."),
            TextContent(text="The answer is 42"),
        )
        assert response.id == "chatcmpl-1"

    @pytest.mark.asyncio
    async def test_transport_errors_propagate(self) -> None:
        transport = MagicMock()
        transport.send = AsyncMock(side_effect=RateLimitError("slow down", provider="openai"))
        model = OpenAIChatModel("gpt-4", transport=transport)
        with pytest.raises(RateLimitError):
            await model.complete([Message.user("hi")])

    @pytest.mark.asyncio
    async def test_malformed_payload_propagates(self) -> None:
        transport = _transport({"choices": [{"finish_reason": "stop", "message": {}}]})
        model = OpenAIChatModel("gpt-4", transport=transport)
        with pytest.raises(MalformedResponseError) as exc_info:
            await model.complete([Message.user("hi")])
        assert exc_info.value.fields == ("id",)


# ---------------------------------------------------------------
# Formatter
# ---------------------------------------------------------------


class TestOpenAIChatFormatter:
    def test_history_thinking_dropped(self) -> None:
        formatter = OpenAIChatFormatter()
        formatted = formatter.format(
            [Message.assistant("The answer is 42", thinking="Let me think about this problem...")]
        )
        assert formatted == [{"role": "assistant", "content": "The answer is 42"}]

    def test_multiple_text_parts_joined(self) -> None:
        msg = Message(
            role=Role.USER, content=(TextContent(text="Hello, "), TextContent(text="world"))
        )
        assert OpenAIChatFormatter().format([msg]) == [{"role": "user", "content": "Hello, world"}]

    def test_empty_history(self) -> None:
        assert OpenAIChatFormatter().format([]) == []
