"""Shared test fixtures for the OpenRouter client tests."""

import json
from typing import Any, Callable, Dict, List, Optional, Union

import httpx
import pytest

from openrouter_client.client import ChatClient
from openrouter_client.config import ClientConfig, validate_config
from openrouter_client.models import ChatMessage, ChatRequest

TEST_API_KEY = "sk-test-12345"
TEST_BASE_URL = "https://api.example.com/v1"


def make_success_body(**overrides: Any) -> Dict[str, Any]:
    """Return a well-formed chat completion body."""
    body: Dict[str, Any] = {
        "id": "gen-abc123",
        "model": "test/model",
        "created": 1700000000,
        "choices": [
            {
                "index": 0,
                "message": {"role": "assistant", "content": "Hello there."},
                "finish_reason": "stop",
            }
        ],
        "usage": {"prompt_tokens": 12, "completion_tokens": 3, "total_tokens": 15},
    }
    body.update(overrides)
    return body


def make_request(*contents: str, system: Optional[str] = None, **kwargs: Any) -> ChatRequest:
    """Build a ChatRequest with an optional system message and user messages."""
    messages: List[ChatMessage] = []
    if system is not None:
        messages.append(ChatMessage(role="system", content=system))
    for content in contents or ("Hello",):
        messages.append(ChatMessage(role="user", content=content))
    return ChatRequest(messages=messages, **kwargs)


class TransportSpy:
    """httpx MockTransport that replays scripted responses and records requests.

    Each script item is either (status, json_body) or an exception instance to
    raise. The last item repeats once the script is exhausted.
    """

    def __init__(self, script: List[Union[tuple, Exception]]) -> None:
        self.script = script
        self.requests: List[httpx.Request] = []
        self.transport = httpx.MockTransport(self._handle)

    @property
    def calls(self) -> int:
        return len(self.requests)

    def payload(self, index: int = -1) -> Dict[str, Any]:
        return json.loads(self.requests[index].content)

    def _handle(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        item = self.script[min(len(self.requests), len(self.script)) - 1]
        if isinstance(item, Exception):
            raise item
        status, body = item
        if isinstance(body, (bytes, str)):
            return httpx.Response(status, content=body)
        return httpx.Response(status, json=body)


async def no_sleep(delay: float) -> None:
    """Sleep replacement that returns immediately."""
    return None


@pytest.fixture()
def config() -> ClientConfig:
    """Return a validated test ClientConfig with 3 retries."""
    return validate_config(TEST_API_KEY, base_url=TEST_BASE_URL, max_retries=3)


@pytest.fixture()
def make_client(config: ClientConfig) -> Callable[..., ChatClient]:
    """Return a factory building a ChatClient wired to a TransportSpy."""

    def _make(spy: TransportSpy, client_config: Optional[ClientConfig] = None) -> ChatClient:
        return ChatClient(
            client_config or config, http_transport=spy.transport, sleep=no_sleep
        )

    return _make
