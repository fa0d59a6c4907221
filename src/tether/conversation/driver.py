"""Conversation driver: the tool-calling loop behind each user turn.

For every turn the driver calls the completion backend, and while the
backend answers with a tool call it invokes the tool, folds the call and
its result into the transcript, and asks again. The turn ends when the
backend answers with text.

Tool failures never end a turn; their error text is handed to the model as
an ordinary tool result. Completion, transport and protocol errors end the
turn and roll the transcript back to where the turn started.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from tether.conversation.history import KeepAll
from tether.conversation.models import DriverState, ToolStep
from tether.exceptions import ProtocolError, ToolLoopExceededError
from tether.models.messages import Message, Role, Text, ToolCall, Transcript
from tether.request import build_request

if TYPE_CHECKING:
    from collections.abc import Callable

    from tether.conversation.history import HistoryPolicy
    from tether.llm.protocols import CompletionClient, CompletionResponse
    from tether.models.config import AgentConfig
    from tether.models.messages import Content
    from tether.models.tools import ToolCatalog
    from tether.toolkit.invoker import ToolInvoker

logger = logging.getLogger(__name__)


class ConversationDriver:
    """Runs user turns against a completion backend and a tool invoker.

    One driver owns one transcript. It is not safe to run two turns of the
    same driver concurrently; separate sessions need separate drivers.

    Usage::

        driver = ConversationDriver(client, invoker, catalog, config)
        answer = await driver.run("List leads named Bob")
        print(answer, len(driver.transcript))
    """

    def __init__(
        self,
        completion: CompletionClient,
        invoker: ToolInvoker,
        catalog: ToolCatalog,
        config: AgentConfig,
        *,
        transcript: Transcript | None = None,
        history_policy: HistoryPolicy | None = None,
        on_step: Callable[[ToolStep], None] | None = None,
    ) -> None:
        self._completion = completion
        self._invoker = invoker
        self._catalog = catalog
        self._config = config
        self._transcript = transcript if transcript is not None else Transcript()
        self._history_policy = history_policy or KeepAll()
        self._on_step = on_step
        self._state = DriverState.IDLE

    @property
    def state(self) -> DriverState:
        """Return the current driver state."""
        return self._state

    @property
    def transcript(self) -> Transcript:
        """The transcript this driver appends to."""
        return self._transcript

    async def run(self, prompt: str) -> str:
        """Run one user turn and return the model's text answer.

        Args:
            prompt: The user's message, forwarded verbatim.

        Returns:
            The text of the first completion response whose first content
            item is text.

        Raises:
            CompletionError: If a completion call fails.
            ToolLoopExceededError: If the model keeps calling tools past
                ``config.max_tool_rounds``.
            ProtocolError: If a response starts with an unexpected content
                variant.
            TransportError: If the completion endpoint is unreachable.
        """
        turn_start = len(self._transcript)
        pending = Message.user(prompt)
        rounds = 0

        try:
            while True:
                self._state = DriverState.AWAITING_COMPLETION
                response = await self._complete(pending)
                item = self._first_item(response)

                if isinstance(item, Text):
                    self._transcript.append_exchange(
                        pending, Message(Role.ASSISTANT, (item,))
                    )
                    self._state = DriverState.TERMINAL
                    logger.debug("Turn finished after %d tool round(s)", rounds)
                    return item.text

                if isinstance(item, ToolCall):
                    if rounds >= self._config.max_tool_rounds:
                        raise ToolLoopExceededError(self._config.max_tool_rounds)
                    rounds += 1
                    pending = await self._run_tool(pending, item, rounds)
                    continue

                raise ProtocolError(
                    f"Completion response starts with unsupported content: "
                    f"{type(item).__name__}"
                )
        except BaseException:
            # Covers cancellation too: the turn leaves no trace.
            self._transcript.truncate(turn_start)
            self._state = DriverState.IDLE
            raise

    # ------------------------------------------------------------------
    # Internal methods
    # ------------------------------------------------------------------

    async def _complete(self, pending: Message) -> CompletionResponse:
        history = self._history_policy.select(self._transcript.snapshot())
        request = build_request(self._config, history, pending, self._catalog)
        return await self._completion.complete(request)

    def _first_item(self, response: CompletionResponse) -> Content:
        """Return the first content item; extra items are dropped."""
        if len(response.content) > 1:
            logger.warning(
                "Completion returned %d content items; only the first is used",
                len(response.content),
            )
        return response.first

    async def _run_tool(self, pending: Message, call: ToolCall, round_num: int) -> Message:
        """Invoke a tool, record the exchange, return the next pending message."""
        self._state = DriverState.AWAITING_TOOL
        logger.debug("Round %d: calling tool %s", round_num, call.name)
        outcome = await self._invoker.invoke(call.name, call.arguments)
        if not outcome.success:
            logger.info("Tool %s failed, forwarding error to model: %s", call.name, outcome.error)

        self._transcript.append_exchange(pending, Message.tool_call(call))

        if self._on_step is not None:
            try:
                self._on_step(ToolStep(round=round_num, tool_call=call, outcome=outcome))
            except Exception:
                logger.debug("on_step callback error", exc_info=True)

        return Message.tool_result(call.id, outcome.text)
