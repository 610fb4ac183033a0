"""OpenAI-compatible chat adapter with extended-thinking support."""

from __future__ import annotations

from thinkwire.llm.adapters import (
    ChatCompletionParams,
    OpenAIChatFormatter,
    OpenAIResponseParser,
    RequestBuilder,
    Transport,
    apply_generate_options,
    apply_thinking,
)
from thinkwire.llm.chat_model import OpenAIChatModel
from thinkwire.llm.errors import (
    AccessDeniedError,
    AuthenticationError,
    ConfigurationError,
    ContextLengthError,
    InvalidRequestError,
    MalformedResponseError,
    NetworkError,
    NotFoundError,
    ProviderError,
    RateLimitError,
    RequestTimeoutError,
    SDKError,
    ServerError,
)
from thinkwire.llm.models import (
    ChatResponse,
    ContentKind,
    ContentPart,
    GenerateOptions,
    Message,
    Role,
    TextContent,
    ThinkingContent,
    TokenUsage,
    ToolCallContent,
)

__all__ = [
    "OpenAIChatModel",
    # Adapters
    "ChatCompletionParams",
    "OpenAIChatFormatter",
    "OpenAIResponseParser",
    "RequestBuilder",
    "Transport",
    "apply_generate_options",
    "apply_thinking",
    # Errors
    "AccessDeniedError",
    "AuthenticationError",
    "ConfigurationError",
    "ContextLengthError",
    "InvalidRequestError",
    "MalformedResponseError",
    "NetworkError",
    "NotFoundError",
    "ProviderError",
    "RateLimitError",
    "RequestTimeoutError",
    "SDKError",
    "ServerError",
    # Models
    "ChatResponse",
    "ContentKind",
    "ContentPart",
    "GenerateOptions",
    "Message",
    "Role",
    "TextContent",
    "ThinkingContent",
    "TokenUsage",
    "ToolCallContent",
]
