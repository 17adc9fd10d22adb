"""
qoracle Broadcast Scheduler

produce -> oracle -> send -> log -> pace, until stopped.

Every step of a cycle sits inside one recoverable scope: a failed cycle is
logged and the loop still paces and runs the next one. The stop event is
checked after the availability step, after sending, and during pacing.
"""

from __future__ import annotations
import asyncio
import logging
from dataclasses import dataclass
from enum import Enum
from typing import Optional, Protocol, Union

from qoracle.bot.config import PacingConfig
from qoracle.bot.sinks import CycleRecord, JsonlRecordSink
from qoracle.constants import DEFAULT_ACTOR, RECORD_TYPE_BROADCAST
from qoracle.content.base import ContentSelector
from qoracle.core.buffer import QuantumBuffer
from qoracle.core.codec import delay_seconds
from qoracle.errors import ProviderFailureError, StarvedBufferError
from qoracle.oracle.base import OracleClient

logger = logging.getLogger(__name__)


class MessageSink(Protocol):
    async def deliver(self, chat_id: Union[int, str], text: str) -> bool:
        ...


class SchedulerState(str, Enum):
    IDLE = "idle"
    CYCLE_RUNNING = "cycle_running"


@dataclass
class CycleResult:
    """Outcome of one broadcast cycle."""
    content: str = ""
    response: Optional[str] = None
    delivered: bool = False
    logged: bool = False
    skipped: bool = False
    delay: Optional[int] = None
    error: Optional[str] = None


class BroadcastScheduler:
    """
    Autonomous broadcast loop.

    States: IDLE -> CYCLE_RUNNING on loop entry, back to IDLE only after
    pacing completes.
    """

    def __init__(
        self,
        buffer: QuantumBuffer,
        selector: ContentSelector,
        oracle: OracleClient,
        sink: MessageSink,
        target: Union[int, str],
        record_sink: Optional[JsonlRecordSink] = None,
        pacing: Optional[PacingConfig] = None,
        actor: str = DEFAULT_ACTOR,
        min_available: int = 1
    ):
        """
        Initialize scheduler.

        Args:
            buffer: Shared quantum buffer (content and pacing draw from it)
            selector: Content strategy
            oracle: Translation or generative provider
            sink: Messaging sink
            target: Chat that receives broadcasts
            record_sink: Optional exchange log
            pacing: Jitter window (default 3-9 s)
            actor: Identity written to records
            min_available: Values ensured at the start of each cycle
        """
        self.buffer = buffer
        self.selector = selector
        self.oracle = oracle
        self.sink = sink
        self.target = target
        self.record_sink = record_sink
        self.pacing = pacing or PacingConfig()
        self.actor = actor
        self.min_available = min_available

        self.state = SchedulerState.IDLE
        self.cycles = 0
        self.failures = 0
        self.last_result: Optional[CycleResult] = None

    async def run_cycle(self, stop: Optional[asyncio.Event] = None) -> CycleResult:
        """Produce, consult the oracle, deliver and log one message."""
        result = CycleResult()
        try:
            await self.buffer.ensure_available(self.min_available)
            if stop is not None and stop.is_set():
                result.skipped = True
                return result

            result.content = await self.selector.select()
            if not result.content:
                logger.info("Empty content, nothing to broadcast this cycle")
                result.skipped = True
                return result

            result.response = await self.oracle.generate(self.selector.render_prompt(result.content))
            result.delivered = await self.sink.deliver(self.target, result.response)

            if result.delivered and self.record_sink is not None:
                record = CycleRecord(
                    target=str(self.target),
                    actor=self.actor,
                    content=result.content,
                    response=result.response,
                    type=RECORD_TYPE_BROADCAST,
                )
                result.logged = await self.record_sink.append(record)

        except StarvedBufferError as e:
            result.skipped = True
            result.error = str(e)
            logger.warning(f"Cycle deferred: {e}")
        except ProviderFailureError as e:
            result.error = str(e)
            logger.error(f"Oracle failed, skipping send: {e}")
        except Exception as e:
            result.error = f"{type(e).__name__}: {e}"
            logger.exception(f"Broadcast cycle failed: {e}")

        if result.error:
            self.failures += 1
        return result

    async def next_delay(self) -> int:
        """Jittered delay from one fresh quantum value."""
        try:
            raw = await self.buffer.draw()
        except StarvedBufferError:
            return self.pacing.min_seconds
        except Exception as e:
            logger.exception(f"Pacing draw failed: {e}")
            return self.pacing.min_seconds
        return delay_seconds(raw, self.pacing.min_seconds, self.pacing.range_seconds)

    async def pace(self, stop: Optional[asyncio.Event] = None) -> int:
        """
        Wait for the next cycle.

        Returns early if stop is set during the wait.
        """
        delay = await self.next_delay()
        logger.debug(f"Next broadcast in {delay}s")
        if stop is None:
            await asyncio.sleep(delay)
        else:
            try:
                await asyncio.wait_for(stop.wait(), timeout=delay)
            except asyncio.TimeoutError:
                pass
        return delay

    async def run(self, stop: Optional[asyncio.Event] = None, max_cycles: Optional[int] = None) -> int:
        """
        Loop until stop is set or max_cycles cycles have run.

        Returns:
            Number of cycles executed
        """
        logger.info(
            f"Broadcast loop started: {self.selector.kind} via {self.oracle.name} -> {self.target}"
        )
        executed = 0
        try:
            while stop is None or not stop.is_set():
                self.state = SchedulerState.CYCLE_RUNNING
                result = await self.run_cycle(stop)
                if stop is None or not stop.is_set():
                    result.delay = await self.pace(stop)
                self.last_result = result
                executed += 1
                self.cycles += 1
                self.state = SchedulerState.IDLE

                if max_cycles is not None and executed >= max_cycles:
                    break
        finally:
            self.state = SchedulerState.IDLE
            logger.info(f"Broadcast loop stopped after {executed} cycles ({self.failures} failed)")
        return executed
