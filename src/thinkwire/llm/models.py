"""Core data models for thinkwire.

Defines the provider-agnostic content blocks, messages, sparse generation
options and the response envelope shared by the request and response sides
of the OpenAI-compatible adapter.
"""

from __future__ import annotations

import enum
import json
import uuid
from dataclasses import dataclass, field, fields
from datetime import datetime, timezone
from typing import Any

# ---------------------------------------------------------------------------
# Enums
# ---------------------------------------------------------------------------


class Role(str, enum.Enum):
    """Message roles following the standard LLM conversation model."""

    SYSTEM = "system"
    USER = "user"
    ASSISTANT = "assistant"
    TOOL = "tool"


class ContentKind(str, enum.Enum):
    """Discriminator for ContentPart tagged union."""

    TEXT = "text"
    THINKING = "thinking"
    TOOL_CALL = "tool_call"


# ---------------------------------------------------------------------------
# Content Parts (Tagged Union)
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class TextContent:
    """Plain text content."""

    kind: ContentKind = field(default=ContentKind.TEXT, init=False)
    text: str = ""


@dataclass(frozen=True)
class ThinkingContent:
    """Model reasoning content.

    An empty ``text`` is meaningful: the provider reported reasoning but
    nothing of it survived.
    """

    kind: ContentKind = field(default=ContentKind.THINKING, init=False)
    text: str = ""


@dataclass(frozen=True)
class ToolCallContent:
    """A tool/function call from the assistant.

    Maintains both a parsed ``arguments`` dict and a raw
    ``arguments_json`` string.  ``__post_init__`` fills whichever one
    was left empty so both representations stay consistent.
    """

    kind: ContentKind = field(default=ContentKind.TOOL_CALL, init=False)
    tool_call_id: str = field(default_factory=lambda: f"call_{uuid.uuid4().hex[:12]}")
    tool_name: str = ""
    arguments: dict[str, Any] = field(default_factory=dict, hash=False)
    arguments_json: str = ""

    def __post_init__(self) -> None:
        if self.arguments_json and not self.arguments:
            try:
                parsed = json.loads(self.arguments_json)
            except (json.JSONDecodeError, TypeError):
                parsed = None
            if isinstance(parsed, dict):
                object.__setattr__(self, "arguments", parsed)
        elif self.arguments and not self.arguments_json:
            object.__setattr__(self, "arguments_json", json.dumps(self.arguments))


# Union type for all content parts
ContentPart = TextContent | ThinkingContent | ToolCallContent


# ---------------------------------------------------------------------------
# Messages
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class Message:
    """A single message in a conversation."""

    role: Role
    content: tuple[ContentPart, ...] = ()

    @staticmethod
    def system(text: str) -> Message:
        """Create a system message with a single TextContent part."""
        return Message(role=Role.SYSTEM, content=(TextContent(text=text),))

    @staticmethod
    def user(text: str) -> Message:
        """Create a user message with a single TextContent part."""
        return Message(role=Role.USER, content=(TextContent(text=text),))

    @staticmethod
    def assistant(text: str, thinking: str | None = None) -> Message:
        """Create an assistant message.

        Args:
            text: The assistant's answer text.
            thinking: Optional reasoning that preceded the answer.

        Returns:
            A Message with role ASSISTANT; the ThinkingContent part, when
            given, precedes the TextContent part.
        """
        parts: list[ContentPart] = []
        if thinking is not None:
            parts.append(ThinkingContent(text=thinking))
        parts.append(TextContent(text=text))
        return Message(role=Role.ASSISTANT, content=tuple(parts))

    def text(self) -> str:
        """Concatenate the text of all TextContent parts."""
        return "".join(
            part.text for part in self.content if isinstance(part, TextContent)
        )

    def thinking(self) -> str | None:
        """Concatenate all ThinkingContent parts, or None if there are none."""
        chunks = [p.text for p in self.content if isinstance(p, ThinkingContent)]
        if not chunks:
            return None
        return "".join(chunks)

    def tool_calls(self) -> list[ToolCallContent]:
        """Extract all tool call content parts."""
        return [p for p in self.content if isinstance(p, ToolCallContent)]


# ---------------------------------------------------------------------------
# Generation options
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class GenerateOptions:
    """Sparse per-call generation settings.

    Every field defaults to ``None`` meaning *unset*. ``0`` and ``False``
    are real values and are kept distinct from ``None`` when options are
    resolved against defaults.

    Raises:
        ValueError: If a set value is out of range.
    """

    thinking_budget: int | None = None
    temperature: float | None = None
    top_p: float | None = None
    max_tokens: int | None = None
    stream: bool | None = None

    def __post_init__(self) -> None:
        if self.thinking_budget is not None and (
            isinstance(self.thinking_budget, bool) or self.thinking_budget <= 0
        ):
            raise ValueError(
                f"thinking_budget must be a positive integer, got {self.thinking_budget!r}"
            )
        if self.max_tokens is not None and (
            isinstance(self.max_tokens, bool) or self.max_tokens <= 0
        ):
            raise ValueError(
                f"max_tokens must be a positive integer, got {self.max_tokens!r}"
            )
        if self.temperature is not None and self.temperature < 0:
            raise ValueError(f"temperature must be >= 0, got {self.temperature}")
        if self.top_p is not None and not 0 <= self.top_p <= 1:
            raise ValueError(f"top_p must be within [0, 1], got {self.top_p}")

    def resolve(self, defaults: GenerateOptions) -> GenerateOptions:
        """Return the effective options, preferring fields set on ``self``.

        Args:
            defaults: Baseline options consulted for every unset field.

        Returns:
            A new GenerateOptions; neither input is modified.
        """
        merged = {}
        for f in fields(self):
            value = getattr(self, f.name)
            merged[f.name] = value if value is not None else getattr(defaults, f.name)
        return GenerateOptions(**merged)


# ---------------------------------------------------------------------------
# Response
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class TokenUsage:
    """Token consumption details."""

    input_tokens: int = 0
    output_tokens: int = 0
    reasoning_tokens: int = 0

    @property
    def total_tokens(self) -> int:
        return self.input_tokens + self.output_tokens


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


@dataclass(frozen=True)
class ChatResponse:
    """A parsed chat-completion response.

    ``created_at`` records when the response was wrapped and is left out
    of equality, so parsing the same payload twice gives equal values.
    """

    id: str
    content: tuple[ContentPart, ...] = ()
    finish_reason: str = "stop"
    model: str | None = None
    usage: TokenUsage | None = None
    created_at: datetime = field(default_factory=_utcnow, compare=False)

    def text(self) -> str:
        """Concatenate the text of all TextContent blocks."""
        return "".join(b.text for b in self.content if isinstance(b, TextContent))

    def thinking(self) -> str | None:
        """Concatenate all ThinkingContent blocks, or None if there are none."""
        chunks = [b.text for b in self.content if isinstance(b, ThinkingContent)]
        if not chunks:
            return None
        return "".join(chunks)

    def tool_calls(self) -> list[ToolCallContent]:
        return [b for b in self.content if isinstance(b, ToolCallContent)]
