"""Tests for the completion request builder."""

from __future__ import annotations

import dataclasses

import pytest

from tether.models.messages import Message, ToolCall
from tether.request import CompletionRequest, build_request
from tests.stubs import make_catalog, make_config


def test_build_request_copies_config_values():
    config = make_config(temperature=0.7, max_tokens=256)
    history = [Message.user("a"), Message.assistant("b")]

    request = build_request(config, tuple(history), Message.user("c"), make_catalog())

    assert request == CompletionRequest(
        model="test-model",
        preamble="You qualify leads.",
        history=(Message.user("a"), Message.assistant("b")),
        pending=Message.user("c"),
        temperature=0.7,
        max_tokens=256,
        tools=tuple(make_catalog()),
    )


def test_build_request_does_not_mutate_inputs():
    history = [Message.user("a"), Message.assistant("b")]
    before = list(history)

    request = build_request(make_config(), history, Message.user("c"), make_catalog())
    history.append(Message.user("late"))

    assert history[:2] == before
    assert len(request.history) == 2


def test_request_is_frozen():
    request = build_request(make_config(), (), Message.user("c"), make_catalog())
    with pytest.raises(dataclasses.FrozenInstanceError):
        request.temperature = 1.0  # type: ignore[misc]


def test_to_openai_payload():
    call = ToolCall(id="1", name="list_rows", arguments='{"filter":"Bob"}')
    request = build_request(
        make_config(),
        (Message.user("List leads named Bob"), Message.tool_call(call)),
        Message.tool_result("1", "[]"),
        make_catalog(),
    )

    payload = request.to_openai()

    assert payload["model"] == "test-model"
    assert payload["temperature"] == 0.0
    assert payload["max_tokens"] == 1024
    assert payload["messages"][0] == {"role": "system", "content": "You qualify leads."}
    assert payload["messages"][1] == {"role": "user", "content": "List leads named Bob"}
    assert payload["messages"][2]["tool_calls"][0]["id"] == "1"
    assert payload["messages"][3] == {"role": "tool", "tool_call_id": "1", "content": "[]"}
    assert [t["function"]["name"] for t in payload["tools"]] == ["list_rows", "create_sheet"]


def test_to_openai_omits_empty_preamble_and_tools():
    request = CompletionRequest(
        model="m",
        preamble="",
        history=(),
        pending=Message.user("hi"),
        temperature=0.0,
        max_tokens=10,
    )

    payload = request.to_openai()

    assert payload["messages"] == [{"role": "user", "content": "hi"}]
    assert "tools" not in payload
