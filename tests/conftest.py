"""Shared fixtures for the prompt enhancer tests."""

import asyncio
import json

import httpx
import pytest

from prompt_enhancer.core.engine import PromptEnhancer
from prompt_enhancer.instructions.catalog import InstructionCatalog
from prompt_enhancer.llm.provider_config import EnhancerConfig

TEST_IMAGE = "data:image/gif;base64,R0lGODlhAQABAIABAP8AAP///yH5BAEKAAEALAAAAAABAAEAAAICTAEAOw=="


class FakeCompletionClient:
    """Stand-in for `CompletionClient` that records payloads."""

    def __init__(self, response="  enhanced prompt  ", delay=0.0, error=None):
        self.response = response
        self.delay = delay
        self.error = error
        self.payloads = []
        self.completed = 0

    async def send(self, payload):
        self.payloads.append(payload)
        if self.delay:
            await asyncio.sleep(self.delay)
        self.completed += 1
        if self.error is not None:
            raise self.error
        return self.response

    @property
    def calls(self):
        return len(self.payloads)


class RecordingTransport:
    """`httpx.MockTransport` wrapper that keeps every request it served."""

    def __init__(self, status_code=200, text="A warm, sunlit bookstore..."):
        self.status_code = status_code
        self.text = text
        self.requests = []
        self.transport = httpx.MockTransport(self._handle)

    def _handle(self, request):
        self.requests.append(request)
        return httpx.Response(self.status_code, text=self.text)

    @property
    def bodies(self):
        return [json.loads(request.content) for request in self.requests]


@pytest.fixture
def catalog():
    return InstructionCatalog()


@pytest.fixture
def fake_client():
    return FakeCompletionClient()


@pytest.fixture
def engine(catalog, fake_client):
    return PromptEnhancer(catalog, fake_client)


@pytest.fixture
def config():
    return EnhancerConfig(api_url="https://completions.test/openai", referer="image.test", api_key=None)


@pytest.fixture
def run():
    """Run a coroutine to completion on a fresh event loop."""
    return asyncio.run


@pytest.fixture
def image_payload():
    return TEST_IMAGE


@pytest.fixture
def make_client():
    """Factory for fake clients with a custom response, delay or error."""
    return FakeCompletionClient


@pytest.fixture
def make_transport():
    """Factory for recording mock transports."""
    return RecordingTransport
