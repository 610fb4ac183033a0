"""OpenAI-compatible request and response adapters."""

from thinkwire.llm.adapters.base import ChatCompletionParams, RequestBuilder, Transport
from thinkwire.llm.adapters.openai_formatter import OpenAIChatFormatter
from thinkwire.llm.adapters.openai_options import (
    apply_generate_options,
    apply_thinking,
    build_thinking_config,
    resolve_stream,
)
from thinkwire.llm.adapters.openai_parser import OpenAIResponseParser

__all__ = [
    "ChatCompletionParams",
    "RequestBuilder",
    "Transport",
    "OpenAIChatFormatter",
    "OpenAIResponseParser",
    "apply_generate_options",
    "apply_thinking",
    "build_thinking_config",
    "resolve_stream",
]
