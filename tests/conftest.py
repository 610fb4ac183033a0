"""Shared fixtures, including smoke-test gating on real API keys."""

from __future__ import annotations

import os
from typing import Any

import pytest
from dotenv import load_dotenv

# Load API keys from .env.local (project root)
load_dotenv(".env.local")


def _has_key(env_var: str) -> bool:
    """Return True if the environment variable is set and non-placeholder."""
    val = os.environ.get(env_var, "")
    return bool(val) and val != "your-key-here"


@pytest.fixture(scope="session")
def requires_openai_key() -> None:
    """Skip the test if OPENAI_API_KEY is missing or placeholder."""
    if not _has_key("OPENAI_API_KEY"):
        pytest.skip("OPENAI_API_KEY not set, skipping smoke test")


def completion_payload(
    message: dict[str, Any] | None = None,
    *,
    response_id: str | None = "chatcmpl-test-123",
    finish_reason: str | None = "stop",
    **extra: Any,
) -> dict[str, Any]:
    """Build a chat-completion payload dict around ``message``."""
    choice: dict[str, Any] = {"index": 0, "message": message or {}}
    if finish_reason is not None:
        choice["finish_reason"] = finish_reason
    payload: dict[str, Any] = {"choices": [choice], **extra}
    if response_id is not None:
        payload["id"] = response_id
    return payload


@pytest.fixture()
def make_payload():
    """Expose :func:`completion_payload` to tests as a fixture."""
    return completion_payload
