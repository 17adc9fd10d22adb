"""
qoracle Sinks

Messaging sink (Telegram) and record sink (JSONL append log).

Both are fire-and-forget: failures are logged and reported as False,
never retried and never raised into the cycle.
"""

from __future__ import annotations
import asyncio
import json
import logging
from dataclasses import dataclass, asdict, field
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Dict, List, Optional, Union

from telegram.error import TelegramError

from qoracle.constants import TELEGRAM_MAX_MESSAGE, RECORD_TYPE_BROADCAST
from qoracle.errors import SinkFailureError

logger = logging.getLogger(__name__)


def utc_now() -> str:
    return datetime.now(timezone.utc).isoformat().replace("+00:00", "Z")


def truncate_message(text: str, limit: int = TELEGRAM_MAX_MESSAGE) -> str:
    """
    Fit text into Telegram's message limit.

    Telegram counts UTF-16 code units, so astral characters (emoji) take
    two. A split surrogate pair at the cut is dropped.
    """
    encoded = text.encode("utf-16-le")
    if len(encoded) // 2 <= limit:
        return text
    head = encoded[:(limit - 1) * 2].decode("utf-16-le", errors="ignore")
    return head + "…"


# =============================================================================
# Cycle record
# =============================================================================

@dataclass
class CycleRecord:
    """One logged exchange (broadcast cycle or reply)."""
    target: str
    actor: str
    content: str
    response: str
    type: str = RECORD_TYPE_BROADCAST
    timestamp: str = field(default_factory=utc_now)

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "CycleRecord":
        return cls(
            target=str(data.get("target", "")),
            actor=str(data.get("actor", "")),
            content=str(data.get("content", "")),
            response=str(data.get("response", "")),
            type=str(data.get("type", RECORD_TYPE_BROADCAST)),
            timestamp=str(data.get("timestamp", "")),
        )


# =============================================================================
# Messaging
# =============================================================================

class TelegramSink:
    """Delivers text to a chat through a python-telegram-bot Bot."""

    def __init__(self, bot: Any):
        self.bot = bot
        self.delivered = 0
        self.failed = 0

    async def deliver(self, chat_id: Union[int, str], text: str) -> bool:
        """
        Send text to chat_id.

        Returns:
            True if Telegram accepted the message
        """
        text = truncate_message(text)
        try:
            await self.bot.send_message(chat_id=chat_id, text=text)
        except TelegramError as e:
            self.failed += 1
            logger.error(f"Telegram delivery to {chat_id} failed: {e}")
            return False
        self.delivered += 1
        return True


# =============================================================================
# Record log
# =============================================================================

class JsonlRecordSink:
    """
    Append-only JSONL log of cycle records.

    Writes run in a worker thread so the event loop is not blocked.
    """

    def __init__(self, path: Union[str, Path]):
        self.path = Path(path)

    def _write(self, line: str) -> None:
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            with open(self.path, "a", encoding="utf-8") as f:
                f.write(line + "\n")
        except OSError as e:
            raise SinkFailureError(f"Cannot append to {self.path}: {e}") from e

    async def append(self, record: CycleRecord) -> bool:
        """Append one record; False if the write failed."""
        line = json.dumps(record.to_dict(), ensure_ascii=False)
        try:
            await asyncio.to_thread(self._write, line)
        except SinkFailureError as e:
            logger.error(f"Record log failed: {e}")
            return False
        return True

    def recent(self, limit: int = 10, target: Optional[str] = None) -> List[CycleRecord]:
        """
        Last records, oldest first.

        Args:
            limit: Maximum records returned
            target: Only records for this chat
        """
        if not self.path.exists():
            return []

        records = []
        with open(self.path, "r", encoding="utf-8") as f:
            for line in f:
                if not line.strip():
                    continue
                try:
                    data = json.loads(line)
                except json.JSONDecodeError:
                    continue
                if target is not None and str(data.get("target")) != str(target):
                    continue
                records.append(CycleRecord.from_dict(data))

        return records[-limit:] if limit > 0 else []
