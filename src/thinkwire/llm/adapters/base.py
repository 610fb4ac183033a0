"""Protocols shared by the OpenAI-compatible adapters, and the request builder."""

from __future__ import annotations

import copy
from typing import Any, Protocol, runtime_checkable


@runtime_checkable
class RequestBuilder(Protocol):
    """Mutable accumulator for an outgoing provider request.

    Option adapters write into it. Only the transport reads the finished
    request back.
    """

    def set(self, name: str, value: Any) -> None:
        """Set a top-level request field."""
        ...

    def get(self, name: str, default: Any = None) -> Any:
        """Return a top-level field if already set."""
        ...

    def put_additional_body_property(self, name: str, value: Any) -> None:
        """Set a provider-specific field sent verbatim in the request body."""
        ...


@runtime_checkable
class Transport(Protocol):
    """Sends a finished request and returns the raw provider payload."""

    async def send(self, params: ChatCompletionParams) -> dict[str, Any]:
        ...


class ChatCompletionParams:
    """Request builder for ``client.chat.completions.create``.

    Top-level fields become keyword arguments. Additional body properties,
    fields the SDK has no parameter for, travel in ``extra_body``.
    """

    def __init__(self, model: str, messages: list[dict[str, Any]] | None = None) -> None:
        self._fields: dict[str, Any] = {"model": model, "messages": list(messages or [])}
        self._additional_body: dict[str, Any] = {}

    def set(self, name: str, value: Any) -> None:
        self._fields[name] = value

    def get(self, name: str, default: Any = None) -> Any:
        return self._fields.get(name, default)

    def put_additional_body_property(self, name: str, value: Any) -> None:
        self._additional_body[name] = value

    @property
    def additional_body(self) -> dict[str, Any]:
        """A deep copy of the additional body properties."""
        return copy.deepcopy(self._additional_body)

    def to_kwargs(self) -> dict[str, Any]:
        """Build the keyword arguments for the SDK ``create`` call.

        Returns:
            A fresh dict; mutating it does not affect the builder.
        """
        kwargs = copy.deepcopy(self._fields)
        if self._additional_body:
            kwargs["extra_body"] = copy.deepcopy(self._additional_body)
        return kwargs

    def __repr__(self) -> str:
        return f"ChatCompletionParams({self._fields!r}, extra_body={self._additional_body!r})"
