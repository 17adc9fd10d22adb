"""
qoracle Quantum Buffer

FIFO of consumed-once quantum values shared by every consumer.

Refill, availability checks and multi-value takes serialize on one
asyncio.Lock, so a consumer that checked for k values gets k values (or
the starvation policy) even while other tasks are suspended mid-refill.
"""

from __future__ import annotations
import asyncio
import logging
from collections import deque
from dataclasses import dataclass
from enum import Enum
from typing import Any, Deque, List, Optional, Protocol

from qoracle.constants import STACK_SIZE, LOW_WATERMARK
from qoracle.errors import SourceUnavailableError, StarvedBufferError

logger = logging.getLogger(__name__)

_MISSING = object()


class RandomSource(Protocol):
    """Anything that can fetch a batch of uint16 values."""

    async def fetch(self, count: int) -> List[int]:
        ...


class StarvationPolicy(str, Enum):
    """What take() does when a refill could not supply enough values."""
    FALLBACK = "fallback"   # Substitute fallback_value for missing positions
    DEFER = "defer"         # Consume nothing, raise StarvedBufferError


@dataclass
class BufferStats:
    """Buffer counters."""
    appended: int = 0
    consumed: int = 0
    refills: int = 0
    failed_refills: int = 0
    starved: int = 0


class QuantumBuffer:
    """
    Shared queue of quantum values with low-watermark refill.

    Created empty; grown only by successful refills (appended in source
    order); shrunk only by consumption.
    """

    def __init__(
        self,
        source: RandomSource,
        batch_size: int = STACK_SIZE,
        low_watermark: int = LOW_WATERMARK,
        policy: StarvationPolicy = StarvationPolicy.FALLBACK,
        fallback_value: int = 0
    ):
        """
        Initialize buffer.

        Args:
            source: Random source used for refills
            batch_size: Values requested per refill
            low_watermark: Default minimum for ensure_available()
            policy: Starvation policy for take()
            fallback_value: Substitute used by StarvationPolicy.FALLBACK
        """
        if batch_size < 1:
            raise ValueError(f"batch_size must be at least 1, got {batch_size}")
        self.source = source
        self.batch_size = batch_size
        self.low_watermark = low_watermark
        self.policy = StarvationPolicy(policy)
        self.fallback_value = fallback_value
        self.stats = BufferStats()
        self._values: Deque[int] = deque()
        self._lock = asyncio.Lock()

    def __len__(self) -> int:
        return len(self._values)

    @property
    def size(self) -> int:
        return len(self._values)

    # -------------------------------------------------------------------------
    # Refill
    # -------------------------------------------------------------------------

    async def _refill(self) -> int:
        self.stats.refills += 1
        try:
            values = await self.source.fetch(self.batch_size)
        except SourceUnavailableError as e:
            self.stats.failed_refills += 1
            logger.warning(f"Quantum refill failed: {e}")
            return 0
        except Exception as e:
            self.stats.failed_refills += 1
            logger.exception(f"Quantum refill failed unexpectedly: {e}")
            return 0

        self._values.extend(values)
        self.stats.appended += len(values)
        logger.debug(f"Quantum refill +{len(values)} (size={len(self._values)})")
        return len(values)

    async def refill(self) -> int:
        """
        Request one batch from the source and append it.

        Never raises; a failed refill leaves the buffer unchanged.

        Returns:
            Number of values appended
        """
        async with self._lock:
            return await self._refill()

    async def _ensure(self, k: int) -> bool:
        if len(self._values) < k:
            await self._refill()
        return len(self._values) >= k

    async def ensure_available(self, k: Optional[int] = None) -> bool:
        """
        Refill once if fewer than k values are buffered.

        Args:
            k: Minimum wanted (default: low watermark)

        Returns:
            True if at least k values are now available
        """
        if k is None:
            k = self.low_watermark
        async with self._lock:
            return await self._ensure(k)

    # -------------------------------------------------------------------------
    # Consumption
    # -------------------------------------------------------------------------

    def pop(self, default: Any = _MISSING) -> int:
        """
        Remove and return the head value.

        Raises:
            StarvedBufferError: buffer is empty and no default was given
        """
        if not self._values:
            if default is _MISSING:
                raise StarvedBufferError(1, 0)
            return default
        self.stats.consumed += 1
        return self._values.popleft()

    async def take(self, k: int) -> List[int]:
        """
        Atomically ensure k values and pop them.

        Real values are consumed first, in order. Missing positions follow
        the starvation policy.

        Raises:
            StarvedBufferError: under StarvationPolicy.DEFER when short
        """
        if k < 0:
            raise ValueError(f"k must be non-negative, got {k}")
        async with self._lock:
            await self._ensure(k)
            available = len(self._values)
            if available < k and self.policy is StarvationPolicy.DEFER:
                raise StarvedBufferError(k, available)

            taken = [self.pop() for _ in range(min(k, available))]
            missing = k - len(taken)
            if missing:
                self.stats.starved += missing
                logger.warning(
                    f"Quantum buffer starved: substituting {missing} x {self.fallback_value}"
                )
                taken.extend([self.fallback_value] * missing)
            return taken

    async def draw(self) -> int:
        """Take a single value."""
        return (await self.take(1))[0]
