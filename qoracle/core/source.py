"""
qoracle Random Source

Batches of true-random uint16 values from the ANU quantum RNG.

Response shape: {"type": "uint16", "length": N, "data": [...], "success": true}
Anything else is treated as a failure.
"""

from __future__ import annotations
import logging
from typing import Any, List, Optional, Sequence

import httpx

from qoracle.constants import (
    QRNG_URL,
    QRNG_VALUE_TYPE,
    QRNG_TIMEOUT_SEC,
    STACK_SIZE,
    UINT16_MAX,
)
from qoracle.errors import SourceUnavailableError

logger = logging.getLogger(__name__)


def parse_qrng_payload(payload: Any) -> List[int]:
    """
    Validate an ANU response body and return its values.

    Raises:
        SourceUnavailableError: success flag missing/false or data malformed
    """
    if not isinstance(payload, dict):
        raise SourceUnavailableError(f"Unexpected payload type: {type(payload).__name__}")
    if payload.get("success") is not True:
        raise SourceUnavailableError(f"Source reported failure: {payload.get('message', 'no message')}")

    data = payload.get("data")
    if not isinstance(data, list):
        raise SourceUnavailableError("Payload has no data array")

    values = []
    for value in data:
        # bool is an int subclass
        if isinstance(value, bool) or not isinstance(value, int):
            raise SourceUnavailableError(f"Non-integer value in data: {value!r}")
        if not 0 <= value <= UINT16_MAX:
            raise SourceUnavailableError(f"Value out of uint16 range: {value}")
        values.append(value)
    return values


class QRNGSource:
    """
    ANU quantum random number client.

    One HTTP GET per fetch, parameterized by batch size and value type.
    """

    name = "anu-qrng"

    def __init__(
        self,
        url: str = QRNG_URL,
        timeout: float = QRNG_TIMEOUT_SEC,
        client: Optional[httpx.AsyncClient] = None
    ):
        """
        Initialize source.

        Args:
            url: JSON API endpoint
            timeout: Request timeout in seconds
            client: Shared httpx client (one is created lazily if omitted)
        """
        self.url = url
        self.timeout = timeout
        self._client = client
        self._owns_client = client is None

    def _get_client(self) -> httpx.AsyncClient:
        if self._client is None:
            self._client = httpx.AsyncClient(timeout=self.timeout)
        return self._client

    async def fetch(self, count: int = STACK_SIZE) -> List[int]:
        """
        Fetch count random values.

        Raises:
            SourceUnavailableError: on any network, HTTP or shape failure
        """
        params = {"length": count, "type": QRNG_VALUE_TYPE}
        try:
            response = await self._get_client().get(self.url, params=params)
            response.raise_for_status()
            payload = response.json()
        except httpx.HTTPError as e:
            raise SourceUnavailableError(f"QRNG request failed: {e}") from e
        except httpx.InvalidURL as e:
            raise SourceUnavailableError(f"QRNG URL rejected: {e}") from e
        except ValueError as e:
            raise SourceUnavailableError(f"QRNG returned invalid JSON: {e}") from e

        values = parse_qrng_payload(payload)
        logger.debug(f"Fetched {len(values)} quantum values")
        return values

    async def aclose(self) -> None:
        if self._client is not None and self._owns_client:
            await self._client.aclose()
            self._client = None


class MockRandomSource:
    """
    Mock random source for testing.

    Serves scripted values without network access. Each fetch returns up
    to count values from the script; failing=True makes every fetch raise.
    """

    name = "mock"

    def __init__(self, values: Sequence[int] = (), failing: bool = False):
        self._values = list(values)
        self.failing = failing
        self.fetch_count = 0

    def feed(self, values: Sequence[int]) -> None:
        """Queue more values for later fetches."""
        self._values.extend(values)

    async def fetch(self, count: int = STACK_SIZE) -> List[int]:
        self.fetch_count += 1
        if self.failing:
            raise SourceUnavailableError("Mock source offline")
        batch, self._values = self._values[:count], self._values[count:]
        return batch

    async def aclose(self) -> None:
        pass
