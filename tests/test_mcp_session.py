"""Tests for the MCP session wrapper, using fake SDK objects."""

from __future__ import annotations

from contextlib import asynccontextmanager
from types import SimpleNamespace

import anyio
import httpx
import pytest
from mcp import types
from mcp.shared.exceptions import McpError

import tether.mcp.session as session_module
from tether.exceptions import ProtocolError, ToolExecutionError, TransportError
from tether.mcp import McpSession, open_session, result_text
from tests.stubs import make_config


def _tool(name: str) -> types.Tool:
    return types.Tool(name=name, description=f"{name} tool", inputSchema={"type": "object"})


def _text_result(*texts: str, is_error: bool = False) -> types.CallToolResult:
    return types.CallToolResult(
        content=[types.TextContent(type="text", text=t) for t in texts],
        isError=is_error,
    )


class FakeClientSession:
    """Stands in for mcp.ClientSession after initialization."""

    def __init__(self, pages=None, call_result=None, call_error=None):
        self._pages = list(pages or [])
        self._call_result = call_result
        self._call_error = call_error
        self.list_cursors: list[str | None] = []
        self.calls: list[tuple] = []

    async def list_tools(self, cursor=None):
        self.list_cursors.append(cursor)
        return self._pages.pop(0)

    async def call_tool(self, name, arguments=None, read_timeout_seconds=None):
        self.calls.append((name, arguments, read_timeout_seconds))
        if self._call_error is not None:
            raise self._call_error
        return self._call_result


class TestResultText:
    def test_joins_text_parts(self):
        assert result_text(_text_result("a", "b")) == "a\nb"

    def test_placeholder_for_non_text(self):
        result = types.CallToolResult(
            content=[types.ImageContent(type="image", data="AAAA", mimeType="image/png")]
        )
        assert result_text(result) == "[image content]"


class TestMcpSession:
    async def test_list_tools_follows_cursor(self):
        fake = FakeClientSession(pages=[
            types.ListToolsResult(tools=[_tool("a")], nextCursor="page2"),
            types.ListToolsResult(tools=[_tool("b")]),
        ])

        tools = await McpSession(fake).list_tools()

        assert [t.name for t in tools] == ["a", "b"]
        assert fake.list_cursors == [None, "page2"]

    async def test_call_returns_text_and_passes_timeout(self):
        fake = FakeClientSession(call_result=_text_result('[{"name":"Bob"}]'))

        text = await McpSession(fake, tool_timeout=5).call("list_rows", {"filter": "Bob"})

        assert text == '[{"name":"Bob"}]'
        name, arguments, timeout = fake.calls[0]
        assert (name, arguments) == ("list_rows", {"filter": "Bob"})
        assert timeout.total_seconds() == 5

    async def test_is_error_result_raises_tool_execution_error(self):
        fake = FakeClientSession(call_result=_text_result("sheet not found", is_error=True))

        with pytest.raises(ToolExecutionError) as exc_info:
            await McpSession(fake).call("list_rows", {})

        assert exc_info.value.tool_name == "list_rows"
        assert str(exc_info.value) == "Tool list_rows failed: sheet not found"

    async def test_mcp_error_becomes_protocol_error(self):
        error = McpError(types.ErrorData(code=-32602, message="invalid params"))
        fake = FakeClientSession(call_error=error)

        with pytest.raises(ProtocolError, match="invalid params"):
            await McpSession(fake).call("list_rows", {})

    async def test_connection_error_becomes_transport_error(self):
        fake = FakeClientSession(call_error=httpx.ReadError("connection dropped"))

        with pytest.raises(TransportError, match="connection dropped"):
            await McpSession(fake).call("list_rows", {})

    @pytest.mark.parametrize(
        "error",
        [anyio.BrokenResourceError(), anyio.ClosedResourceError(), anyio.EndOfStream()],
    )
    async def test_closed_stream_becomes_transport_error(self, error):
        fake = FakeClientSession(call_error=error)

        with pytest.raises(TransportError, match=type(error).__name__):
            await McpSession(fake).call("list_rows", {})

    async def test_closed_stream_during_listing_becomes_transport_error(self):
        class ClosedListing(FakeClientSession):
            async def list_tools(self, cursor=None):
                raise anyio.ClosedResourceError()

        with pytest.raises(TransportError, match="tools/list failed"):
            await McpSession(ClosedListing()).list_tools()


class TestOpenSession:
    async def test_initializes_with_client_identity(self, monkeypatch):
        seen: dict = {}

        @asynccontextmanager
        async def fake_sse_client(url):
            seen["url"] = url
            yield ("read", "write")

        class FakeSdkSession(FakeClientSession):
            def __init__(self, read, write, client_info=None):
                super().__init__()
                seen["streams"] = (read, write)
                seen["client_info"] = client_info

            async def __aenter__(self):
                return self

            async def __aexit__(self, *exc):
                seen["closed"] = True

            async def initialize(self):
                return SimpleNamespace(serverInfo=SimpleNamespace(name="gsheets", version="1.0"))

        monkeypatch.setattr(session_module, "sse_client", fake_sse_client)
        monkeypatch.setattr(session_module, "ClientSession", FakeSdkSession)
        config = make_config(mcp_url="http://sheets/sse", client_name="tether", client_version="9.9")

        async with open_session(config) as session:
            assert isinstance(session, McpSession)

        assert seen["url"] == "http://sheets/sse"
        assert seen["streams"] == ("read", "write")
        assert seen["client_info"].name == "tether"
        assert seen["client_info"].version == "9.9"
        assert seen["closed"] is True

    async def test_unreachable_server_raises_transport_error(self, monkeypatch):
        @asynccontextmanager
        async def refusing_sse_client(url):
            raise httpx.ConnectError("connection refused")
            yield  # pragma: no cover

        monkeypatch.setattr(session_module, "sse_client", refusing_sse_client)

        with pytest.raises(TransportError, match="connection refused"):
            async with open_session(make_config()):
                pass

    async def test_wrapped_transport_failure_is_unwrapped(self, monkeypatch):
        class TaskGroupError(Exception):
            def __init__(self, inner):
                super().__init__("unhandled errors in a TaskGroup")
                self.exceptions = (inner,)

        @asynccontextmanager
        async def failing_sse_client(url):
            raise TaskGroupError(httpx.ConnectError("connection refused"))
            yield  # pragma: no cover

        monkeypatch.setattr(session_module, "sse_client", failing_sse_client)

        with pytest.raises(TransportError, match="connection refused"):
            async with open_session(make_config()):
                pass
