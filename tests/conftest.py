"""
Pytest configuration and shared fixtures for testing.
"""
import pytest
import os
import sys
from types import SimpleNamespace

import httpx

# Add parent directory to path for imports
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from review import ExecutionRunner, PlagiarismAnalyzer

SANDBOX_URL = "https://sandbox.test/api/v2/execute"


class SandboxStub:
    """Test double for the execution sandbox, used as an httpx.MockTransport handler."""

    def __init__(self):
        self.requests: list[httpx.Request] = []
        self._response = httpx.Response(200, json={"run": {"stdout": "", "stderr": "", "code": 0}})
        self._exc: Exception | None = None

    def respond(self, status: int = 200, json=None, text: str | None = None):
        if text is not None:
            self._response = httpx.Response(status, text=text)
        else:
            self._response = httpx.Response(status, json=json)

    def fail_with(self, exc_type: type[httpx.HTTPError], message: str = "boom"):
        self._exc = exc_type(message)

    @property
    def call_count(self) -> int:
        return len(self.requests)

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        if self._exc is not None:
            raise self._exc
        return self._response


class FakeModels:
    """Stands in for client.aio.models of the google-genai client."""

    def __init__(self, reply: str | None = None, error: Exception | None = None):
        self.reply = reply
        self.error = error
        self.calls: list[dict] = []

    async def generate_content(self, model, contents):
        self.calls.append({"model": model, "contents": contents})
        if self.error is not None:
            raise self.error
        return SimpleNamespace(text=self.reply)


class FakeGenAIClient:
    def __init__(self, reply: str | None = None, error: Exception | None = None):
        self.models = FakeModels(reply, error)
        self.aio = SimpleNamespace(models=self.models)


@pytest.fixture
def sandbox():
    """Sandbox double that answers with an empty successful run by default."""
    return SandboxStub()


@pytest.fixture
def runner(sandbox):
    """ExecutionRunner wired to the sandbox double."""
    return ExecutionRunner(
        sandbox_url=SANDBOX_URL,
        timeout=5.0,
        max_output_chars=100,
        transport=httpx.MockTransport(sandbox),
    )


@pytest.fixture
def make_analyzer():
    """Factory for an analyzer backed by a fake model client."""
    def _make(reply: str | None = None, error: Exception | None = None):
        client = FakeGenAIClient(reply=reply, error=error)
        return PlagiarismAnalyzer(model="test-model", client=client), client.models
    return _make


@pytest.fixture
def sample_question():
    return {
        "question_title": "Two Sum",
        "question_description": "Given an array of integers nums and an integer target, "
                                "return indices of the two numbers such that they add up to target.",
    }
