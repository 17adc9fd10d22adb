#!/usr/bin/env python3
"""
qoracle Bot Launcher

Run:
    qoracle-bot                      # polling bot, mode from BOT_MODE
    qoracle-bot --mode both          # reply handler + broadcast loop
    qoracle-bot --once               # one broadcast cycle, then exit

Configuration comes from the environment or a .env file (see README).
"""

from __future__ import annotations
import argparse
import asyncio
import logging
import sys
from typing import Any, Optional

from telegram import Bot
from telegram.error import TelegramError
from telegram.ext import Application, ApplicationBuilder

from qoracle import __version__
from qoracle.bot.config import BotConfig, setup_logging
from qoracle.bot.handlers import ReplyHandler
from qoracle.bot.scheduler import BroadcastScheduler, CycleResult
from qoracle.bot.sinks import JsonlRecordSink, TelegramSink
from qoracle.content import build_selector
from qoracle.core.buffer import QuantumBuffer, StarvationPolicy
from qoracle.core.source import QRNGSource
from qoracle.errors import ConfigError
from qoracle.oracle import build_oracle

logger = logging.getLogger(__name__)


class BotRuntime:
    """
    Shared components for one process: a single buffer, selector and
    oracle used by both the broadcast loop and the reply handler.
    """

    def __init__(self, config: BotConfig, bot: Any, source: Optional[Any] = None):
        self.config = config
        self.source = source or QRNGSource(
            url=config.quantum.url,
            timeout=config.quantum.timeout_sec,
        )
        self.buffer = QuantumBuffer(
            self.source,
            batch_size=config.quantum.batch_size,
            low_watermark=config.quantum.low_watermark,
            policy=StarvationPolicy(config.quantum.starvation_policy),
            fallback_value=config.quantum.fallback_value,
        )
        # Numerology paces from the same buffer, so keep a few values in hand
        min_available = 4 if config.strategy == "numerology" and config.broadcasts else 1
        self.selector = build_selector(
            config.strategy,
            self.buffer,
            dictionary_path=config.dictionary_path,
            decay_factor=config.decay_factor,
            min_available=min_available,
        )
        self.oracle = build_oracle(
            config.oracle.provider,
            google_api_key=config.oracle.google_api_key,
            gemini_api_key=config.oracle.gemini_api_key,
            openai_api_key=config.oracle.openai_api_key,
            gemini_model=config.oracle.gemini_model,
            openai_model=config.oracle.openai_model,
            source_lang=config.oracle.source_lang,
            target_lang=config.oracle.target_lang,
            timeout=config.oracle.timeout_sec,
        )
        self.sink = TelegramSink(bot)
        self.record_sink = JsonlRecordSink(config.log.record_file) if config.log.record_file else None

        self.scheduler = BroadcastScheduler(
            self.buffer,
            self.selector,
            self.oracle,
            self.sink,
            target=config.telegram.chat_id or "",
            record_sink=self.record_sink,
            pacing=config.pacing,
            actor=config.actor,
            min_available=min_available,
        )
        self.reply_handler = ReplyHandler(
            self.buffer,
            self.selector,
            self.oracle,
            self.sink,
            record_sink=self.record_sink,
            reply_chance=config.reply_chance,
            failure_text=config.failure_text,
            actor=config.actor,
        )

        self.stop_event = asyncio.Event()
        self._task: Optional[asyncio.Task] = None

    async def start(self) -> None:
        """Prime the buffer and start the broadcast loop if enabled."""
        appended = await self.buffer.refill()
        logger.info(f"Quantum buffer primed with {appended} values")
        if self.config.broadcasts:
            self._task = asyncio.create_task(self.scheduler.run(self.stop_event))

    async def stop(self) -> None:
        self.stop_event.set()
        if self._task is not None:
            await self._task
            self._task = None
        await self.oracle.aclose()
        await self.source.aclose()

    async def run_once(self) -> CycleResult:
        return await self.scheduler.run_cycle()


def build_application(config: BotConfig) -> Application:
    """Telegram application with the runtime wired into its lifecycle hooks."""

    async def post_init(application: Application) -> None:
        runtime = application.bot_data["runtime"] = BotRuntime(config, application.bot)
        if config.replies:
            application.add_handler(runtime.reply_handler.as_handler())
        await runtime.start()

    async def post_shutdown(application: Application) -> None:
        runtime = application.bot_data.get("runtime")
        if runtime is not None:
            await runtime.stop()

    return (
        ApplicationBuilder()
        .token(config.telegram.token or "")
        .post_init(post_init)
        .post_shutdown(post_shutdown)
        .build()
    )


async def run_once(config: BotConfig) -> CycleResult:
    """One broadcast cycle with a plain Bot, no polling."""
    async with Bot(config.telegram.token or "") as bot:
        runtime = BotRuntime(config, bot)
        try:
            return await runtime.run_once()
        finally:
            await runtime.stop()


def parse_args(argv: Optional[list] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Quantum-random Telegram oracle")
    parser.add_argument("--env-file", type=str, default=None, help=".env file to load")
    parser.add_argument("--mode", choices=["broadcast", "reply", "both"], default=None)
    parser.add_argument("--strategy", choices=["phrase", "numerology"], default=None)
    parser.add_argument("--provider", choices=["translate", "gemini", "openai", "mock"], default=None)
    parser.add_argument("--once", action="store_true", help="run a single broadcast cycle and exit")
    parser.add_argument("--log-level", type=str, default=None)
    parser.add_argument("--version", action="version", version=f"qoracle {__version__}")
    return parser.parse_args(argv)


def main(argv: Optional[list] = None) -> int:
    args = parse_args(argv)

    try:
        config = BotConfig.from_env(env_file=args.env_file)
    except ConfigError as e:
        print(f"Configuration error: {e}", file=sys.stderr)
        return 2

    if args.mode:
        config.mode = args.mode
    if args.strategy:
        config.strategy = args.strategy
    if args.provider:
        config.oracle.provider = args.provider
    if args.log_level:
        config.log.level = args.log_level.upper()

    setup_logging(config.log)
    errors = config.validate()
    for error in errors:
        logger.error(error)
    if errors:
        return 2
    for problem in config.missing_credentials():
        logger.warning(problem)

    logger.info(
        f"Starting qoracle {__version__}: mode={config.mode} strategy={config.strategy} "
        f"provider={config.oracle.provider}"
    )

    try:
        if args.once:
            result = asyncio.run(run_once(config))
            if result.error:
                logger.error(f"Cycle failed: {result.error}")
                return 1
            return 0

        application = build_application(config)
        application.run_polling(allowed_updates=["message"], drop_pending_updates=True)
    except ConfigError as e:
        logger.error(f"Configuration error: {e}")
        return 2
    except TelegramError as e:
        logger.error(f"Telegram error: {e}")
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
