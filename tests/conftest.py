"""Shared fixtures for voicespec tests."""

import json
from typing import Optional, Union

import pytest

from voicespec.llm.client import ChatClientError, LLMResponse

CALL_FLOW_JSON = {
    "introduction": "Hi, thanks for calling Acme Bank.",
    "verification": "Please confirm your full name and date of birth.",
    "purpose": "I can help you check your loan eligibility.",
    "information_gathering": [
        "What is your annual income?",
        "How much would you like to borrow?",
    ],
    "closing": "Thanks for calling, goodbye.",
}


class StubChatClient:
    """Chat client returning scripted replies (or raising scripted errors) in order."""

    def __init__(self, replies: list[Union[str, Exception]]):
        self._replies = list(replies)
        self.calls: list[list[dict]] = []
        self.closed = False

    async def call(
        self,
        messages: list[dict],
        model: Optional[str] = None,
        temperature: Optional[float] = None,
    ) -> LLMResponse:
        self.calls.append(messages)
        reply = self._replies.pop(0)
        if isinstance(reply, Exception):
            raise reply
        return LLMResponse(content=reply)

    async def aclose(self) -> None:
        self.closed = True


@pytest.fixture
def spec_data() -> dict:
    """A complete AgentSpec as stored JSON."""
    return {
        "business_type": "banking",
        "agent_role": "a loan advisor",
        "objective": "Help callers pre-qualify for personal loans.",
        "tone": "Professional and warm",
        "constraints": ["Never quote interest rates", "Do not collect card numbers"],
        "call_flow": dict(CALL_FLOW_JSON),
    }


@pytest.fixture
def call_flow_reply() -> str:
    """A model reply wrapping valid call-flow JSON in prose."""
    return "Here is the call flow:\n" + json.dumps(CALL_FLOW_JSON) + "\nLet me know!"


@pytest.fixture
def make_client():
    """Factory for StubChatClient."""
    return StubChatClient


@pytest.fixture
def failing_client() -> StubChatClient:
    return StubChatClient([ChatClientError("HTTP 503: unavailable")])
