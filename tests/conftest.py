"""
qoracle Test Fixtures
"""

import asyncio
from typing import List, Tuple

import pytest

from qoracle.content.dictionary import GematriaDictionary
from qoracle.core.buffer import QuantumBuffer, StarvationPolicy
from qoracle.core.source import MockRandomSource


class FakeBot:
    """Records send_message calls instead of talking to Telegram."""

    def __init__(self, error: Exception = None):
        self.sent: List[Tuple[object, str]] = []
        self.error = error

    async def send_message(self, chat_id, text, **kwargs):
        if self.error is not None:
            raise self.error
        self.sent.append((chat_id, text))
        return {"chat_id": chat_id, "text": text}


class RecordingSink:
    """Messaging sink that remembers deliveries."""

    def __init__(self, accept: bool = True):
        self.accept = accept
        self.sent: List[Tuple[object, str]] = []

    async def deliver(self, chat_id, text) -> bool:
        self.sent.append((chat_id, text))
        return self.accept


@pytest.fixture
def async_runner():
    """Helper for running async functions in tests."""
    def runner(coro):
        loop = asyncio.new_event_loop()
        try:
            return loop.run_until_complete(coro)
        finally:
            loop.close()
    return runner


@pytest.fixture
def mock_source() -> MockRandomSource:
    """Source with a long deterministic script."""
    return MockRandomSource([(i * 7919) % 65536 for i in range(4096)])


@pytest.fixture
def offline_source() -> MockRandomSource:
    """Source that always fails."""
    return MockRandomSource(failing=True)


@pytest.fixture
def make_buffer():
    """Factory: buffer over a scripted source."""
    def factory(values=(), failing=False, batch_size=1024,
                policy=StarvationPolicy.FALLBACK, fallback_value=0, low_watermark=24):
        source = MockRandomSource(values, failing=failing)
        return QuantumBuffer(
            source,
            batch_size=batch_size,
            low_watermark=low_watermark,
            policy=policy,
            fallback_value=fallback_value,
        )
    return factory


@pytest.fixture
def small_dictionary() -> GematriaDictionary:
    """Two categories, one of them empty."""
    return GematriaDictionary({"A": ["x"], "B": []})


@pytest.fixture
def word_dictionary() -> GematriaDictionary:
    """Three populated categories."""
    return GematriaDictionary({
        "13": ["אחד", "אהבה"],
        "18": ["חי"],
        "45": ["אדם", "מה", "אמן"],
    })


@pytest.fixture
def fake_bot() -> FakeBot:
    return FakeBot()


@pytest.fixture
def recording_sink() -> RecordingSink:
    return RecordingSink()
