"""Format conversation history as chat-completion ``messages``."""

from __future__ import annotations

import logging
from collections.abc import Iterable
from typing import Any

from thinkwire.llm.models import Message, TextContent, ThinkingContent

logger = logging.getLogger(__name__)


class OpenAIChatFormatter:
    """Maps :class:`Message` objects to ``{"role", "content"}`` dicts.

    Reasoning from earlier assistant turns is dropped: the chat-completion
    input has no slot for it. Tool calls and other modalities are not
    formatted.
    """

    def format(self, messages: Iterable[Message]) -> list[dict[str, Any]]:
        return [self._format_message(msg) for msg in messages]

    def _format_message(self, msg: Message) -> dict[str, Any]:
        texts: list[str] = []
        for part in msg.content:
            if isinstance(part, TextContent):
                texts.append(part.text)
            elif isinstance(part, ThinkingContent):
                logger.debug("Dropping thinking content from %s history", msg.role.value)
        return {"role": msg.role.value, "content": "".join(texts)}
