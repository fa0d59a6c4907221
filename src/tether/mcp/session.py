"""MCP session wrapper over the SSE transport.

Opens a persistent MCP client session (``mcp`` SDK), initializes it with
Tether's identity, and exposes the two operations the agent consumes:
listing tools and calling a tool. Transport failures are mapped to
TransportError and unexpected replies to ProtocolError. Retries and
reconnection are left to the SDK.
"""

from __future__ import annotations

import logging
from collections.abc import AsyncIterator
from contextlib import AsyncExitStack, asynccontextmanager
from datetime import timedelta
from typing import TYPE_CHECKING, Any

import anyio
import httpx
from mcp import ClientSession, types
from mcp.client.sse import sse_client
from mcp.shared.exceptions import McpError

from tether.exceptions import ProtocolError, ToolExecutionError, TransportError

if TYPE_CHECKING:
    from tether.models.config import AgentConfig

# Raised by the SDK when the session streams close under a request.
_STREAM_ERRORS = (anyio.ClosedResourceError, anyio.BrokenResourceError, anyio.EndOfStream)

logger = logging.getLogger(__name__)


def _unwrap(exc: BaseException) -> BaseException:
    """Return the sole leaf of nested single-member exception groups."""
    while isinstance(getattr(exc, "exceptions", None), tuple) and len(exc.exceptions) == 1:
        exc = exc.exceptions[0]
    return exc


def result_text(result: types.CallToolResult) -> str:
    """Join the textual parts of a tool result with newlines.

    Non-text parts (images, embedded resources) are rendered with a short
    placeholder naming their type.
    """
    parts: list[str] = []
    for item in result.content or []:
        if isinstance(item, types.TextContent):
            parts.append(item.text)
        else:
            parts.append(f"[{getattr(item, 'type', type(item).__name__)} content]")
    return "\n".join(parts)


class McpSession:
    """An initialized MCP client session.

    Usage::

        async with open_session(config) as session:
            tools = await session.list_tools()
            text = await session.call("list_rows", {"filter": "Bob"})
    """

    def __init__(self, session: ClientSession, *, tool_timeout: float | None = None) -> None:
        self._session = session
        self._tool_timeout = (
            timedelta(seconds=tool_timeout) if tool_timeout is not None else None
        )

    async def list_tools(self) -> list[types.Tool]:
        """Return the server's tool catalog, following pagination cursors."""
        tools: list[types.Tool] = []
        cursor: str | None = None
        while True:
            try:
                if cursor is None:
                    page = await self._session.list_tools()
                else:
                    page = await self._session.list_tools(cursor=cursor)
            except McpError as exc:
                raise ProtocolError(f"tools/list failed: {exc}") from exc
            except (httpx.HTTPError, OSError, *_STREAM_ERRORS) as exc:
                raise TransportError(f"tools/list failed: {type(exc).__name__}: {exc}") from exc
            tools.extend(page.tools)
            cursor = page.nextCursor
            if not cursor:
                return tools

    async def call(self, name: str, arguments: dict[str, Any]) -> str:
        """Call a tool and return its text output.

        Raises:
            ToolExecutionError: If the server reports the call as failed.
            ProtocolError: If the server rejects the request.
            TransportError: If the session connection fails.
        """
        try:
            result = await self._session.call_tool(
                name, arguments, read_timeout_seconds=self._tool_timeout
            )
        except McpError as exc:
            raise ProtocolError(f"tools/call {name} failed: {exc}") from exc
        except (httpx.HTTPError, OSError, *_STREAM_ERRORS) as exc:
            raise TransportError(
                f"tools/call {name} failed: {type(exc).__name__}: {exc}"
            ) from exc

        text = result_text(result)
        if result.isError:
            raise ToolExecutionError(name, text or "tool reported an error")
        return text


@asynccontextmanager
async def open_session(config: AgentConfig) -> AsyncIterator[McpSession]:
    """Open, initialize and yield an MCP session; close it on exit.

    Raises:
        TransportError: If the server cannot be reached or initialization
            fails at the transport level.
        ProtocolError: If the server rejects initialization.
    """
    logger.info("Connecting to MCP server at %s", config.mcp_url)
    async with AsyncExitStack() as stack:
        try:
            read_stream, write_stream = await stack.enter_async_context(
                sse_client(config.mcp_url)
            )
            session = await stack.enter_async_context(
                ClientSession(
                    read_stream,
                    write_stream,
                    client_info=types.Implementation(
                        name=config.client_name, version=config.client_version
                    ),
                )
            )
            init = await session.initialize()
        except McpError as exc:
            raise ProtocolError(f"MCP initialization rejected: {exc}") from exc
        except (httpx.HTTPError, OSError, *_STREAM_ERRORS) as exc:
            raise TransportError(
                f"Cannot open MCP session at {config.mcp_url}: {exc}"
            ) from exc
        except Exception as exc:
            # The SDK transport runs in a task group and wraps its failures.
            cause = _unwrap(exc)
            if isinstance(cause, McpError):
                raise ProtocolError(f"MCP initialization rejected: {cause}") from exc
            if isinstance(cause, (httpx.HTTPError, OSError, *_STREAM_ERRORS)):
                raise TransportError(
                    f"Cannot open MCP session at {config.mcp_url}: {cause}"
                ) from exc
            raise
        logger.info(
            "MCP session open: server=%s %s",
            init.serverInfo.name, init.serverInfo.version,
        )
        yield McpSession(session, tool_timeout=config.tool_timeout)
