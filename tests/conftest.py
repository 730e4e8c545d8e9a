"""Pytest configuration and shared fixtures."""
import json
from collections.abc import Callable
from datetime import datetime

import httpx
import pytest

from chuself.events import EventEmitter
from chuself.storage import InMemoryKeyValueStore


class RecordingTransport(httpx.MockTransport):
    """MockTransport that keeps every request it served."""

    def __init__(self, handler: Callable[[httpx.Request], httpx.Response]):
        self.requests: list[httpx.Request] = []

        def record(request: httpx.Request) -> httpx.Response:
            self.requests.append(request)
            return handler(request)

        super().__init__(record)

    @property
    def last_json(self) -> dict:
        return json.loads(self.requests[-1].content)


class UnavailableStore(InMemoryKeyValueStore):
    """Store whose backing medium fails every access."""

    def get(self, key: str) -> str | None:
        raise OSError("storage unavailable")

    def set(self, key: str, value: str) -> None:
        raise OSError("storage unavailable")

    def remove(self, key: str) -> None:
        raise OSError("storage unavailable")


@pytest.fixture
def unavailable_store():
    """Return a store that raises OSError on every read and write."""
    return UnavailableStore()


@pytest.fixture
def store():
    """Return an empty in-memory key-value store."""
    return InMemoryKeyValueStore()


@pytest.fixture
def events():
    """Return a fresh event emitter."""
    return EventEmitter()


@pytest.fixture
def fixed_now():
    """Wednesday, 15 May 2024, 10:00 local time."""
    return datetime(2024, 5, 15, 10, 0, 0)


@pytest.fixture
def mock_transport():
    """Factory for recording transports answering with a fixed status and body."""
    def _make(status_code: int = 200, body: dict | str | None = None) -> RecordingTransport:
        def handler(request: httpx.Request) -> httpx.Response:
            if isinstance(body, str):
                return httpx.Response(status_code, text=body)
            return httpx.Response(status_code, json=body if body is not None else {})

        return RecordingTransport(handler)

    return _make


@pytest.fixture
def gemini_reply():
    """Body of a successful generateContent response."""
    def _reply(text: str = "Hi there") -> dict:
        return {
            "candidates": [
                {"content": {"role": "model", "parts": [{"text": text}]}, "finishReason": "STOP"}
            ],
            "usageMetadata": {"promptTokenCount": 3, "candidatesTokenCount": 2, "totalTokenCount": 5},
        }

    return _reply


@pytest.fixture
def completion_reply():
    """Body of a successful OpenAI-compatible chat completion."""
    def _reply(text: str = "Hi there", model: str = "llama-3.1-8b-instant") -> dict:
        return {
            "id": "chatcmpl-1",
            "object": "chat.completion",
            "created": 1715760000,
            "model": model,
            "choices": [
                {"index": 0, "message": {"role": "assistant", "content": text}, "finish_reason": "stop"}
            ],
            "usage": {"prompt_tokens": 3, "completion_tokens": 2, "total_tokens": 5},
        }

    return _reply


@pytest.fixture
def scripted_transport():
    """Factory for recording transports replaying (status, body) pairs in order.

    The last pair is repeated once the script runs out.
    """
    def _make(*responses: tuple[int, dict]) -> RecordingTransport:
        remaining = list(responses)

        def handler(request: httpx.Request) -> httpx.Response:
            status_code, body = remaining.pop(0) if len(remaining) > 1 else remaining[0]
            return httpx.Response(status_code, json=body)

        return RecordingTransport(handler)

    return _make
