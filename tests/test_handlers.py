"""
qoracle Reply Handler Tests
"""

from types import SimpleNamespace

from telegram.ext import MessageHandler

from qoracle.bot.handlers import ReplyHandler
from qoracle.bot.sinks import JsonlRecordSink
from qoracle.content.phrase import PhraseSelector
from qoracle.core.buffer import StarvationPolicy
from qoracle.oracle.base import MockOracle

from conftest import RecordingSink


def make_handler(buffer, dictionary, oracle=None, sink=None, record_sink=None, reply_chance=1.0):
    return ReplyHandler(
        buffer,
        PhraseSelector(buffer, dictionary),
        oracle or MockOracle(["one"]),
        sink or RecordingSink(),
        record_sink=record_sink,
        reply_chance=reply_chance,
        actor="tester",
    )


def message_update(text, chat_id=42):
    return SimpleNamespace(effective_message=SimpleNamespace(text=text, chat_id=chat_id))


class TestReplyGate:
    """Tests for should_reply."""

    def test_always(self, make_buffer, small_dictionary):
        handler = make_handler(make_buffer(), small_dictionary, reply_chance=1.0)
        assert handler.should_reply(65535)

    def test_never(self, make_buffer, small_dictionary):
        handler = make_handler(make_buffer(), small_dictionary, reply_chance=0.0)
        assert not handler.should_reply(0)

    def test_threshold(self, make_buffer, small_dictionary):
        handler = make_handler(make_buffer(), small_dictionary, reply_chance=1 / 3)
        assert handler.should_reply(0)
        assert handler.should_reply(21845)
        assert not handler.should_reply(21846)


class TestRespond:
    """Tests for respond."""

    def test_reply_sent_and_logged(self, make_buffer, small_dictionary, tmp_path, async_runner):
        buffer = make_buffer([9, 1, 0, 0])
        sink = RecordingSink()
        records = JsonlRecordSink(tmp_path / "records.jsonl")
        handler = make_handler(buffer, small_dictionary, sink=sink, record_sink=records)

        reply = async_runner(handler.respond(42))

        assert reply == "one"
        assert sink.sent == [(42, "one")]
        saved = records.recent(target="42")
        assert len(saved) == 1
        assert saved[0].type == "reply"
        assert saved[0].content == "x"
        assert saved[0].actor == "tester"

    def test_gate_consumes_decision_value(self, make_buffer, small_dictionary, async_runner):
        buffer = make_buffer([60000, 1, 0, 0])
        sink = RecordingSink()
        handler = make_handler(buffer, small_dictionary, sink=sink, reply_chance=0.5)

        assert async_runner(handler.respond(42)) is None
        assert sink.sent == []
        assert len(buffer) == 3

    def test_provider_failure_sends_sentinel(self, make_buffer, small_dictionary, async_runner):
        buffer = make_buffer([0, 1, 0, 0])
        sink = RecordingSink()
        handler = make_handler(buffer, small_dictionary, oracle=MockOracle(failing=True), sink=sink)

        assert async_runner(handler.respond(7)) == "Translation failed."
        assert sink.sent == [(7, "Translation failed.")]

    def test_custom_failure_text(self, make_buffer, small_dictionary, async_runner):
        buffer = make_buffer([0, 1, 0, 0])
        handler = make_handler(buffer, small_dictionary, oracle=MockOracle(failing=True))
        handler.failure_text = "The oracle is silent."
        assert async_runner(handler.respond(7)) == "The oracle is silent."

    def test_undelivered_returns_none(self, make_buffer, small_dictionary, async_runner):
        buffer = make_buffer([0, 1, 0, 0])
        handler = make_handler(buffer, small_dictionary, sink=RecordingSink(accept=False))
        assert async_runner(handler.respond(7)) is None

    def test_empty_phrase_stays_silent(self, make_buffer, small_dictionary, async_runner):
        """Second reply lands on the empty category and stays silent."""
        buffer = make_buffer([0, 1, 0, 0, 0, 1, 65535, 0])
        oracle = MockOracle()
        handler = make_handler(buffer, small_dictionary, oracle=oracle)
        async_runner(handler.respond(1))
        async_runner(handler.respond(1))
        assert oracle.prompts == ["x"]
        assert len(buffer) == 0


class TestTelegramCallback:
    """Tests for the python-telegram-bot callback surface."""

    def test_text_message(self, make_buffer, small_dictionary, async_runner):
        sink = RecordingSink()
        handler = make_handler(make_buffer([0, 1, 0, 0]), small_dictionary, sink=sink)
        async_runner(handler(message_update("hello", chat_id=99), None))
        assert sink.sent == [(99, "one")]

    def test_ignores_empty_text(self, make_buffer, small_dictionary, async_runner):
        buffer = make_buffer([0, 1, 0, 0])
        sink = RecordingSink()
        handler = make_handler(buffer, small_dictionary, sink=sink)
        async_runner(handler(message_update(None), None))
        async_runner(handler(SimpleNamespace(effective_message=None), None))
        assert sink.sent == []
        assert buffer.source.fetch_count == 0

    def test_starvation_contained(self, make_buffer, small_dictionary, async_runner):
        buffer = make_buffer(policy=StarvationPolicy.DEFER)
        sink = RecordingSink()
        handler = make_handler(buffer, small_dictionary, sink=sink)
        async_runner(handler(message_update("hello"), None))
        assert sink.sent == []

    def test_unexpected_error_contained(self, make_buffer, small_dictionary, async_runner):
        class BrokenSink:
            async def deliver(self, chat_id, text):
                raise RuntimeError("boom")

        handler = make_handler(make_buffer([0, 1, 0, 0]), small_dictionary, sink=BrokenSink())
        async_runner(handler(message_update("hello"), None))

    def test_as_handler(self, make_buffer, small_dictionary):
        handler = make_handler(make_buffer(), small_dictionary)
        assert isinstance(handler.as_handler(), MessageHandler)
