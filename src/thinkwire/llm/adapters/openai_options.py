"""Map GenerateOptions onto an OpenAI-compatible chat-completion request.

Per-call options override the model's default options field by field.
Reasoning is requested through the provider-specific ``thinking`` body
field, which the OpenAI SDK has no named parameter for.
"""

from __future__ import annotations

import logging
from typing import Any

from thinkwire.llm.adapters.base import RequestBuilder
from thinkwire.llm.errors import ConfigurationError
from thinkwire.llm.models import GenerateOptions

logger = logging.getLogger(__name__)

THINKING_FIELD = "thinking"

# GenerateOptions field -> chat.completions parameter
_SAMPLING_FIELDS: dict[str, str] = {
    "temperature": "temperature",
    "top_p": "top_p",
    "max_tokens": "max_tokens",
}


def _require_defaults(default_options: GenerateOptions | None) -> GenerateOptions:
    if default_options is None:
        raise ConfigurationError(
            "default_options is required; pass GenerateOptions() for an empty baseline"
        )
    return default_options


def _effective(
    options: GenerateOptions | None,
    default_options: GenerateOptions | None,
) -> GenerateOptions:
    defaults = _require_defaults(default_options)
    return (options or GenerateOptions()).resolve(defaults)


def build_thinking_config(budget: int | None) -> dict[str, Any]:
    """Return the ``thinking`` body value for a resolved budget.

    ``budget_tokens`` is present only when a budget was resolved.
    """
    config: dict[str, Any] = {"type": "enabled"}
    if budget is not None:
        config["budget_tokens"] = budget
    return config


def apply_thinking(
    builder: RequestBuilder,
    options: GenerateOptions | None,
    default_options: GenerateOptions | None,
) -> None:
    """Enable extended reasoning on ``builder``.

    The budget comes from ``options`` when it sets one, else from
    ``default_options``; with neither, reasoning is enabled without a
    budget. Exactly one write is made. The stream flag is left alone:
    callers must disable streaming for reasoning requests themselves.

    Args:
        builder: Request under construction.
        options: Per-call overrides, or None.
        default_options: The model's baseline options.

    Raises:
        ConfigurationError: If ``default_options`` is None.
    """
    budget = _effective(options, default_options).thinking_budget
    config = build_thinking_config(budget)
    logger.debug("Requesting extended thinking: %s", config)
    builder.put_additional_body_property(THINKING_FIELD, config)


def apply_generate_options(
    builder: RequestBuilder,
    options: GenerateOptions | None,
    default_options: GenerateOptions | None,
) -> None:
    """Write the resolved sampling options (temperature, top_p, max_tokens).

    Fields that resolve to nothing are not written at all.

    Raises:
        ConfigurationError: If ``default_options`` is None.
    """
    effective = _effective(options, default_options)
    for name, param in _SAMPLING_FIELDS.items():
        value = getattr(effective, name)
        if value is not None:
            builder.set(param, value)


def resolve_stream(
    options: GenerateOptions | None,
    default_options: GenerateOptions | None,
    fallback: bool = False,
) -> bool:
    """Resolve the stream flag: call options, then defaults, then ``fallback``."""
    value = _effective(options, default_options).stream
    return fallback if value is None else bool(value)
