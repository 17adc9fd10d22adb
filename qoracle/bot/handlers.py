"""
qoracle Reply Handler

Reply-on-message mode: every text message may get a quantum phrase back.

A decision value gates the reply (reply_chance of 1.0 always replies). On
provider failure the chat gets the failure sentinel instead of silence.
"""

from __future__ import annotations
import logging
from typing import Optional

from telegram import Update
from telegram.ext import ContextTypes, MessageHandler, filters

from qoracle.bot.scheduler import MessageSink
from qoracle.bot.sinks import CycleRecord, JsonlRecordSink
from qoracle.constants import (
    DEFAULT_ACTOR,
    FAILURE_TEXT,
    RECORD_TYPE_REPLY,
    REPLY_GATE_SCALE,
)
from qoracle.content.base import ContentSelector
from qoracle.core.buffer import QuantumBuffer
from qoracle.errors import ProviderFailureError, StarvedBufferError
from qoracle.oracle.base import OracleClient

logger = logging.getLogger(__name__)


class ReplyHandler:
    """Callable for a python-telegram-bot MessageHandler."""

    def __init__(
        self,
        buffer: QuantumBuffer,
        selector: ContentSelector,
        oracle: OracleClient,
        sink: MessageSink,
        record_sink: Optional[JsonlRecordSink] = None,
        reply_chance: float = 1.0,
        failure_text: str = FAILURE_TEXT,
        actor: str = DEFAULT_ACTOR
    ):
        self.buffer = buffer
        self.selector = selector
        self.oracle = oracle
        self.sink = sink
        self.record_sink = record_sink
        self.reply_chance = reply_chance
        self.failure_text = failure_text
        self.actor = actor

    def should_reply(self, decision: int) -> bool:
        """Gate on one quantum value: decision <= chance * 65536."""
        if self.reply_chance >= 1.0:
            return True
        if self.reply_chance <= 0.0:
            return False
        return decision <= self.reply_chance * REPLY_GATE_SCALE

    async def respond(self, chat_id: int) -> Optional[str]:
        """
        Produce and send the reply for one incoming message.

        Returns:
            The text sent, or None if nothing was sent
        """
        await self.buffer.ensure_available()
        decision = await self.buffer.draw()
        if not self.should_reply(decision):
            logger.debug(f"Decision {decision} above gate, staying silent")
            return None

        content = await self.selector.select()
        if not content:
            return None

        try:
            reply = await self.oracle.generate(self.selector.render_prompt(content))
        except ProviderFailureError as e:
            logger.error(f"Oracle failed for chat {chat_id}: {e}")
            reply = self.failure_text

        delivered = await self.sink.deliver(chat_id, reply)
        if delivered and self.record_sink is not None:
            await self.record_sink.append(CycleRecord(
                target=str(chat_id),
                actor=self.actor,
                content=content,
                response=reply,
                type=RECORD_TYPE_REPLY,
            ))
        return reply if delivered else None

    async def __call__(self, update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
        message = update.effective_message
        if message is None or not message.text:
            return
        try:
            await self.respond(message.chat_id)
        except StarvedBufferError as e:
            logger.warning(f"Reply deferred: {e}")
        except Exception as e:
            logger.exception(f"Reply handler failed: {e}")

    def as_handler(self) -> MessageHandler:
        return MessageHandler(filters.TEXT, self)
