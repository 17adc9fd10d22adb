"""
qoracle Bot

Telegram wiring: configuration, sinks, broadcast scheduler and reply
handler.
"""

from qoracle.bot.config import BotConfig, setup_logging
from qoracle.bot.handlers import ReplyHandler
from qoracle.bot.scheduler import BroadcastScheduler, CycleResult, SchedulerState
from qoracle.bot.sinks import CycleRecord, JsonlRecordSink, TelegramSink

__all__ = [
    "BotConfig",
    "setup_logging",
    "ReplyHandler",
    "BroadcastScheduler",
    "CycleResult",
    "SchedulerState",
    "CycleRecord",
    "JsonlRecordSink",
    "TelegramSink",
]
