"""Tool invokers: dispatch a tool call by name and return a ToolOutcome.

An invoker never raises for tool-level problems. Unknown tools, argument
errors and remote failures all come back as ``ToolOutcome(success=False)``
so the conversation driver can feed the error text to the model.
"""

from __future__ import annotations

import json
import logging
from typing import TYPE_CHECKING, Any, Protocol, runtime_checkable

import jsonschema
from jsonschema.exceptions import SchemaError, ValidationError

from tether.exceptions import ProtocolError, ToolExecutionError, TransportError
from tether.toolkit.models import ToolOutcome

if TYPE_CHECKING:
    from tether.models.tools import ToolCatalog


logger = logging.getLogger(__name__)


@runtime_checkable
class ToolSession(Protocol):
    """The part of an MCP session an invoker needs."""

    async def call(self, name: str, arguments: dict[str, Any]) -> str: ...


@runtime_checkable
class ToolInvoker(Protocol):
    """Protocol for tool invokers."""

    async def invoke(self, name: str, arguments: str) -> ToolOutcome:
        """Invoke ``name`` with the raw JSON ``arguments`` string."""
        ...


class McpToolInvoker:
    """Invokes catalog tools on an already-open MCP session.

    Usage::

        invoker = McpToolInvoker(catalog, session)
        outcome = await invoker.invoke("list_rows", '{"filter": "Bob"}')
        print(outcome.text)
    """

    def __init__(self, catalog: ToolCatalog, session: ToolSession) -> None:
        self._catalog = catalog
        self._session = session

    def _parse_arguments(self, name: str, arguments: str) -> dict[str, Any]:
        """Parse and schema-check arguments. Raises ValueError on failure."""
        try:
            parsed = json.loads(arguments) if arguments.strip() else {}
        except json.JSONDecodeError as exc:
            raise ValueError(f"arguments are not valid JSON: {exc}") from exc
        if not isinstance(parsed, dict):
            raise ValueError(
                f"arguments must be a JSON object, got {type(parsed).__name__}"
            )
        tool = self._catalog.get(name)
        if tool is not None and tool.parameters:
            try:
                jsonschema.validate(instance=parsed, schema=tool.parameters)
            except ValidationError as exc:
                raise ValueError(exc.message) from exc
            except SchemaError:
                logger.warning("Tool %s has an invalid schema; skipping validation", name)
        return parsed

    async def invoke(self, name: str, arguments: str) -> ToolOutcome:
        if name not in self._catalog:
            logger.debug("Model requested unknown tool %s", name)
            return ToolOutcome(tool_name=name, success=False, error=f"Unknown tool: {name}")

        try:
            parsed = self._parse_arguments(name, arguments)
        except ValueError as exc:
            return ToolOutcome(
                tool_name=name,
                success=False,
                error=f"Invalid arguments for {name}: {exc}",
            )

        try:
            output = await self._session.call(name, parsed)
        except ToolExecutionError as exc:
            return ToolOutcome(tool_name=name, success=False, error=str(exc))
        except (TransportError, ProtocolError) as exc:
            logger.debug("Tool %s failed remotely: %s", name, exc, exc_info=True)
            return ToolOutcome(
                tool_name=name, success=False, error=f"Tool {name} failed: {exc}"
            )
        return ToolOutcome(tool_name=name, success=True, output=output)
