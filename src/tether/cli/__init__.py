"""Tether CLI -- interactive terminal chat backed by an MCP tool server.

This module is NEVER imported from tether/__init__.py.
It is only loaded via the ``tether`` entry point defined in pyproject.toml.
"""

from __future__ import annotations

import asyncio
import logging
import sys
from typing import TYPE_CHECKING

import click
from rich.logging import RichHandler

from tether.cli.formatting import FAREWELL, format_error, format_tool_step, get_console
from tether.cli.repl import repl, stdin_reader
from tether.conversation import ConversationDriver, policy_for_window
from tether.exceptions import TetherError
from tether.llm.client import OpenAIClient
from tether.mcp.session import open_session
from tether.models.config import AgentConfig
from tether.toolkit import McpToolInvoker, build_catalog

if TYPE_CHECKING:
    from rich.console import Console

logger = logging.getLogger(__name__)


def _configure_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(message)s",
        handlers=[RichHandler(show_path=False)],
        force=True,
    )


async def _chat(config: AgentConfig, console: Console, *, show_tools: bool) -> None:
    """Open the MCP session, build the agent and run the REPL."""
    console.print("Loading MCP server...", highlight=False)
    async with open_session(config) as session:
        console.print("Successfully opened.", highlight=False)
        catalog = build_catalog(await session.list_tools())
        console.print(f"[dim]{len(catalog)} tool(s) available[/dim]", highlight=False)

        async with OpenAIClient() as client:
            driver = ConversationDriver(
                client,
                McpToolInvoker(catalog, session),
                catalog,
                config,
                history_policy=policy_for_window(config.history_window),
                on_step=(lambda step: format_tool_step(step, console)) if show_tools else None,
            )
            await repl(driver, console, stdin_reader(sys.stdin))


@click.command()
@click.option("--mcp-url", default=None, help="SSE endpoint of the MCP tool server.")
@click.option("--model", default=None, help="Completion model name.")
@click.option("--temperature", type=float, default=None, help="Sampling temperature (0-2).")
@click.option("--max-tokens", type=int, default=None, help="Maximum tokens per completion.")
@click.option(
    "--max-tool-rounds",
    type=int,
    default=None,
    help="Maximum tool calls the model may make in one turn.",
)
@click.option(
    "--history-window",
    type=int,
    default=None,
    help="Send only the most recent N transcript messages with each request.",
)
@click.option("--show-tools", is_flag=True, help="Print a line for every tool call.")
@click.option("--verbose", "-v", is_flag=True, help="Enable debug logging.")
def cli(
    mcp_url: str | None,
    model: str | None,
    temperature: float | None,
    max_tokens: int | None,
    max_tool_rounds: int | None,
    history_window: int | None,
    show_tools: bool,
    verbose: bool,
) -> None:
    """Tether: chat with an agent that works through MCP tools."""
    _configure_logging(verbose)
    console = get_console()
    try:
        config = AgentConfig.from_env(
            mcp_url=mcp_url,
            model=model,
            temperature=temperature,
            max_tokens=max_tokens,
            max_tool_rounds=max_tool_rounds,
            history_window=history_window,
        )
        asyncio.run(_chat(config, console, show_tools=show_tools))
    except KeyboardInterrupt:
        console.print(FAREWELL, highlight=False)
    except TetherError as exc:
        format_error(str(exc), console)
        raise SystemExit(1) from None
    except Exception as exc:
        logger.debug("Session failed", exc_info=True)
        format_error(f"{type(exc).__name__}: {exc}", console)
        raise SystemExit(1) from None
