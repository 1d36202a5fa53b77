"""
Shared fixtures: fake data clients and scripted model responses
"""
import json
from types import SimpleNamespace
from typing import Any, Dict, List, Optional
from unittest.mock import AsyncMock

import pytest

from modules.agent.context import AgentContext
from modules.tools.responses import ToolSuccess


# ============================================================================
# Model response builders (litellm ModelResponse look-alikes)
# ============================================================================

def make_tool_call(call_id: str, name: str, arguments: Dict[str, Any]) -> SimpleNamespace:
    return SimpleNamespace(
        id=call_id,
        type="function",
        function=SimpleNamespace(name=name, arguments=json.dumps(arguments))
    )


def make_response(
    content: Optional[str] = None,
    tool_calls: Optional[List[SimpleNamespace]] = None,
    finish_reason: Optional[str] = "stop"
) -> SimpleNamespace:
    message = SimpleNamespace(content=content, tool_calls=tool_calls)
    choice = SimpleNamespace(message=message, finish_reason=finish_reason)
    return SimpleNamespace(choices=[choice], usage=SimpleNamespace(total_tokens=42))


def make_empty_response() -> SimpleNamespace:
    return SimpleNamespace(choices=[], usage=None)


class FakeLLMHandler:
    """Returns scripted responses in order and records every call's kwargs"""

    def __init__(self, responses: List[Any]):
        self._responses = list(responses)
        self.calls: List[Dict[str, Any]] = []

    async def acompletion(self, phase: Optional[str] = None, **kwargs) -> Any:
        self.calls.append({"phase": phase, **kwargs})
        response = self._responses.pop(0)
        if isinstance(response, Exception):
            raise response
        return response


@pytest.fixture
def response_builders():
    """(make_response, make_tool_call, make_empty_response)"""
    return SimpleNamespace(
        response=make_response,
        tool_call=make_tool_call,
        empty=make_empty_response
    )


@pytest.fixture
def fake_llm():
    """Factory: fake_llm([response, ...]) -> FakeLLMHandler"""
    return FakeLLMHandler


# ============================================================================
# Data clients
# ============================================================================

@pytest.fixture
def fake_fmp():
    """FMP client whose get() returns an empty list unless reconfigured"""
    client = SimpleNamespace()
    client.get = AsyncMock(return_value=ToolSuccess(data=[]))
    client.aclose = AsyncMock()
    return client


@pytest.fixture
def fake_options():
    client = SimpleNamespace()
    client.fetch = AsyncMock(return_value=ToolSuccess(data={
        "underlyingSymbol": "AAPL",
        "expirationDates": [],
        "quote": {},
        "options": []
    }))
    return client


@pytest.fixture
def context(fake_fmp, fake_options):
    return AgentContext(fmp=fake_fmp, options=fake_options, user_id="test_user")
