"""
qoracle Launcher Tests
"""

import asyncio

import pytest

from qoracle.bot.config import BotConfig
from qoracle.bot.main import BotRuntime, main, parse_args
from qoracle.content.numerology import NumerologySelector
from qoracle.content.phrase import PhraseSelector
from qoracle.core.source import MockRandomSource
from qoracle.oracle.base import MockOracle

from conftest import FakeBot


def runtime_config(**overrides) -> BotConfig:
    env = {
        "TELEGRAM_TOKEN": "123:abc",
        "TELEGRAM_CHAT_ID": "-100500",
        "ORACLE_PROVIDER": "mock",
        "PACING_MIN_SECONDS": "30",
        "PACING_RANGE_SECONDS": "1",
    }
    env.update(overrides)
    return BotConfig.from_env(env)


class TestBotRuntime:
    """Tests for BotRuntime wiring."""

    def test_components_share_one_buffer(self):
        runtime = BotRuntime(runtime_config(), FakeBot(), source=MockRandomSource())
        assert runtime.scheduler.buffer is runtime.buffer
        assert runtime.reply_handler.buffer is runtime.buffer
        assert runtime.selector.buffer is runtime.buffer
        assert isinstance(runtime.selector, PhraseSelector)
        assert isinstance(runtime.oracle, MockOracle)
        assert runtime.record_sink is None

    def test_numerology_broadcast_keeps_pacing_values(self):
        config = runtime_config(BOT_STRATEGY="numerology")
        runtime = BotRuntime(config, FakeBot(), source=MockRandomSource())
        assert isinstance(runtime.selector, NumerologySelector)
        assert runtime.selector.min_available == 4
        assert runtime.scheduler.min_available == 4

    def test_run_once_delivers(self, tmp_path, async_runner):
        bot = FakeBot()
        config = runtime_config(RECORD_FILE=str(tmp_path / "records.jsonl"))
        source = MockRandomSource([(i * 4099) % 65536 for i in range(200)])
        runtime = BotRuntime(config, bot, source=source)

        result = async_runner(runtime.run_once())

        assert result.delivered
        assert bot.sent == [("-100500", result.response)]
        assert result.response == result.content
        assert len(runtime.record_sink.recent()) == 1

    @pytest.mark.timeout(5)
    def test_start_and_stop(self, async_runner):
        bot = FakeBot()
        source = MockRandomSource([(i * 4099) % 65536 for i in range(200)])
        runtime = BotRuntime(runtime_config(), bot, source=source)

        async def run():
            await runtime.start()
            await asyncio.sleep(0.05)
            await runtime.stop()

        async_runner(run())
        assert runtime.scheduler.cycles == 1
        assert len(bot.sent) == 1

    @pytest.mark.timeout(5)
    def test_reply_mode_starts_no_loop(self, async_runner):
        runtime = BotRuntime(runtime_config(BOT_MODE="reply"), FakeBot(), source=MockRandomSource([1, 2, 3]))

        async def run():
            await runtime.start()
            task = runtime._task
            await runtime.stop()
            return task

        assert async_runner(run()) is None
        assert len(runtime.buffer) == 3


class TestCommandLine:
    """Tests for argument parsing and exit codes."""

    def test_parse_args(self):
        args = parse_args(["--mode", "both", "--strategy", "numerology", "--provider", "mock", "--once"])
        assert args.mode == "both"
        assert args.strategy == "numerology"
        assert args.provider == "mock"
        assert args.once

    def test_parse_args_defaults(self):
        args = parse_args([])
        assert args.mode is None
        assert not args.once

    def test_bad_number_exits_2(self, monkeypatch):
        monkeypatch.setenv("QRNG_BATCH_SIZE", "lots")
        assert main([]) == 2

    def test_invalid_config_exits_2(self, monkeypatch):
        monkeypatch.setenv("BOT_STRATEGY", "tarot")
        assert main(["--log-level", "warning"]) == 2
