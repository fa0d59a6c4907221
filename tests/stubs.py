"""Hand-written stand-ins for the agent's external collaborators.

ScriptedCompletion replays canned responses, RecordingInvoker answers tool
calls from a handler, and FakeToolSession mimics an MCP session. All record
what they were asked so tests can assert on it.
"""

from __future__ import annotations

import json
from collections.abc import Callable
from typing import Any

from tether.exceptions import ToolExecutionError
from tether.llm.protocols import CompletionResponse
from tether.models.config import AgentConfig
from tether.models.messages import Content, Text, ToolCall
from tether.models.tools import ToolCatalog, ToolDefinition
from tether.request import CompletionRequest
from tether.toolkit.models import ToolOutcome

LIST_ROWS_SCHEMA: dict[str, Any] = {
    "type": "object",
    "properties": {"filter": {"type": "string"}},
    "required": ["filter"],
    "additionalProperties": False,
}


def make_config(**overrides: Any) -> AgentConfig:
    values: dict[str, Any] = {"preamble": "You qualify leads.", "model": "test-model"}
    values.update(overrides)
    return AgentConfig(**values)


def make_catalog() -> ToolCatalog:
    return ToolCatalog.from_definitions([
        ToolDefinition(
            name="list_rows",
            description="List spreadsheet rows matching a filter.",
            parameters=LIST_ROWS_SCHEMA,
        ),
        ToolDefinition(name="create_sheet", description="", parameters={}),
    ])


def text_response(text: str) -> CompletionResponse:
    return CompletionResponse(content=(Text(text),))


def tool_response(
    call_id: str, name: str, arguments: dict | str, *extra: Content
) -> CompletionResponse:
    raw = arguments if isinstance(arguments, str) else json.dumps(arguments)
    return CompletionResponse(content=(ToolCall(id=call_id, name=name, arguments=raw), *extra))


class ScriptedCompletion:
    """Completion client that returns (or raises) scripted items in order."""

    def __init__(self, script: list[CompletionResponse | BaseException]) -> None:
        self._script = list(script)
        self.requests: list[CompletionRequest] = []
        self.closed = False

    async def complete(self, request: CompletionRequest) -> CompletionResponse:
        self.requests.append(request)
        if not self._script:
            raise AssertionError("ScriptedCompletion ran out of responses")
        item = self._script.pop(0)
        if isinstance(item, BaseException):
            raise item
        return item

    async def aclose(self) -> None:
        self.closed = True


class RecordingInvoker:
    """Tool invoker that answers through ``handler(name, arguments)``."""

    def __init__(self, handler: Callable[[str, str], ToolOutcome] | None = None) -> None:
        self._handler = handler or (
            lambda name, args: ToolOutcome(tool_name=name, success=True, output="ok")
        )
        self.calls: list[tuple[str, str]] = []

    async def invoke(self, name: str, arguments: str) -> ToolOutcome:
        self.calls.append((name, arguments))
        return self._handler(name, arguments)


class FakeToolSession:
    """MCP session stand-in: tools are plain functions of the argument dict.

    A tool function may raise ToolExecutionError to simulate an ``isError``
    result, or any TetherError to simulate a transport/protocol failure.
    """

    def __init__(self, tools: dict[str, Callable[[dict], str]]) -> None:
        self._tools = tools
        self.calls: list[tuple[str, dict]] = []

    async def call(self, name: str, arguments: dict[str, Any]) -> str:
        self.calls.append((name, arguments))
        if name not in self._tools:
            raise ToolExecutionError(name, "no such tool on server")
        return self._tools[name](arguments)
