"""CLI entry point for thinkwire.

Provides ``chat`` and ``parse`` sub-commands using Click and Rich for
output formatting.

Usage::

    thinkwire chat "Why is the sky blue?" --thinking --thinking-budget 4000
    thinkwire parse completion.json
"""

from __future__ import annotations

import asyncio
import json
import logging

import click
from dotenv import load_dotenv
from rich.console import Console
from rich.logging import RichHandler
from rich.markup import escape
from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from thinkwire.llm.adapters.openai_parser import OpenAIResponseParser
from thinkwire.llm.chat_model import DEFAULT_MODEL, OpenAIChatModel
from thinkwire.llm.errors import SDKError
from thinkwire.llm.models import (
    ChatResponse,
    GenerateOptions,
    Message,
    TextContent,
    ThinkingContent,
    ToolCallContent,
)

console = Console()


def _setup_logging(verbose: bool) -> None:
    level = logging.DEBUG if verbose else logging.WARNING
    logging.basicConfig(
        level=level,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(console=console, rich_tracebacks=True)],
    )


@click.group()
@click.version_option(package_name="thinkwire")
def main() -> None:
    """thinkwire: chat completions with extended thinking."""
    load_dotenv()


@main.command()
@click.argument("prompt")
@click.option("--model", envvar="THINKWIRE_MODEL", default=DEFAULT_MODEL, show_default=True)
@click.option("--system", "system_prompt", default=None, help="System instruction.")
@click.option("--thinking/--no-thinking", default=False, help="Request extended thinking.")
@click.option("--thinking-budget", type=click.IntRange(min=1), default=None)
@click.option("--temperature", type=float, default=None)
@click.option("--max-tokens", type=click.IntRange(min=1), default=None)
@click.option(
    "--stream/--no-stream",
    default=False,
    help="Stream the reply. Ignored when thinking is enabled.",
)
@click.option("--base-url", envvar="OPENAI_BASE_URL", default=None)
@click.option("--verbose", "-v", is_flag=True, help="Enable debug logging.")
def chat(
    prompt: str,
    model: str,
    system_prompt: str | None,
    thinking: bool,
    thinking_budget: int | None,
    temperature: float | None,
    max_tokens: int | None,
    stream: bool,
    base_url: str | None,
    verbose: bool,
) -> None:
    """Send PROMPT and print the reasoning and the answer."""
    _setup_logging(verbose)

    messages = []
    if system_prompt:
        messages.append(Message.system(system_prompt))
    messages.append(Message.user(prompt))

    try:
        chat_model = OpenAIChatModel(
            model,
            base_url=base_url,
            enable_thinking=thinking,
            stream=stream,
            default_options=GenerateOptions(
                thinking_budget=thinking_budget,
                temperature=temperature,
                max_tokens=max_tokens,
            ),
        )
        response = asyncio.run(chat_model.complete(messages))
    except SDKError as exc:
        console.print(f"[red]Request failed:[/red] {escape(str(exc))}")
        raise SystemExit(1) from exc

    _print_response(response)


@main.command()
@click.argument("payload_json", type=click.Path(exists=True, dir_okay=False))
def parse(payload_json: str) -> None:
    """Parse a saved chat-completion payload and list its content blocks."""
    try:
        with open(payload_json, encoding="utf-8") as fh:
            payload = json.load(fh)
        response = OpenAIResponseParser().parse(payload)
    except (OSError, json.JSONDecodeError, SDKError) as exc:
        console.print(f"[red]Failed to parse payload:[/red] {escape(str(exc))}")
        raise SystemExit(1) from exc

    table = Table(title=f"Response {response.id} ({response.finish_reason})")
    table.add_column("#", justify="right")
    table.add_column("Kind", style="cyan")
    table.add_column("Content")
    for i, block in enumerate(response.content):
        table.add_row(str(i), block.kind.value, Text(_describe(block)[:200]))
    console.print(table)


def _describe(block: TextContent | ThinkingContent | ToolCallContent) -> str:
    if isinstance(block, ToolCallContent):
        return f"{block.tool_name}({block.arguments_json})"
    return block.text


def _print_response(response: ChatResponse) -> None:
    """Print thinking in a dimmed panel, then the answer."""
    for block in response.content:
        if isinstance(block, ThinkingContent):
            console.print(Panel(Text(block.text), title="thinking", style="dim"))
        elif isinstance(block, TextContent):
            console.print(Text(block.text))
        elif isinstance(block, ToolCallContent):
            console.print(Text.assemble(("tool call: ", "yellow"), _describe(block)))
    if response.usage is not None:
        console.print(
            f"[dim]tokens: {response.usage.total_tokens} "
            f"(reasoning {response.usage.reasoning_tokens})[/dim]"
        )


if __name__ == "__main__":
    main()
