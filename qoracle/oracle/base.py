"""
qoracle Oracle Client Interface

An oracle takes text and returns text, or raises ProviderFailureError.
Callers never retry within a cycle.
"""

from __future__ import annotations
import logging
from abc import ABC, abstractmethod
from typing import Any, Dict, List, Optional, Sequence, Union

import httpx

from qoracle.constants import ORACLE_TIMEOUT_SEC
from qoracle.errors import ProviderFailureError

logger = logging.getLogger(__name__)


class OracleClient(ABC):
    """Text in, text out."""

    name: str = "oracle"

    @abstractmethod
    async def generate(self, text: str) -> str:
        """
        Run the provider on text.

        Raises:
            ProviderFailureError: network error, bad status or unexpected shape
        """

    async def aclose(self) -> None:
        pass


class HTTPOracleClient(OracleClient):
    """Oracle backed by one JSON POST per call."""

    def __init__(
        self,
        timeout: float = ORACLE_TIMEOUT_SEC,
        client: Optional[httpx.AsyncClient] = None
    ):
        self.timeout = timeout
        self._client = client
        self._owns_client = client is None

    def _get_client(self) -> httpx.AsyncClient:
        if self._client is None:
            self._client = httpx.AsyncClient(timeout=self.timeout)
        return self._client

    async def _post_json(self, url: str, body: Dict[str, Any], params: Optional[Dict[str, str]] = None) -> Any:
        try:
            response = await self._get_client().post(url, json=body, params=params)
            response.raise_for_status()
            return response.json()
        except httpx.HTTPStatusError as e:
            raise ProviderFailureError(self.name, f"HTTP {e.response.status_code}") from e
        except httpx.HTTPError as e:
            raise ProviderFailureError(self.name, f"request failed: {e}") from e
        except ValueError as e:
            raise ProviderFailureError(self.name, f"invalid JSON: {e}") from e

    async def aclose(self) -> None:
        if self._client is not None and self._owns_client:
            await self._client.aclose()
            self._client = None


def dig(payload: Any, path: Sequence[Union[str, int]], provider: str) -> Any:
    """
    Walk nested dicts/lists, raising ProviderFailureError on any miss.

    dig(body, ["data", "translations", 0, "translatedText"], "translate")
    """
    node = payload
    for step in path:
        try:
            node = node[step]
        except (KeyError, IndexError, TypeError):
            where = ".".join(str(s) for s in path)
            raise ProviderFailureError(provider, f"response missing {where}") from None
    return node


class MockOracle(OracleClient):
    """
    Mock oracle for testing.

    Returns scripted responses in order (the last one repeats), or echoes
    the prompt when none are scripted. failing=True makes every call fail.
    """

    name = "mock"

    def __init__(self, responses: Sequence[str] = (), failing: bool = False):
        self.responses: List[str] = list(responses)
        self.failing = failing
        self.prompts: List[str] = []

    async def generate(self, text: str) -> str:
        self.prompts.append(text)
        if self.failing:
            raise ProviderFailureError(self.name, "mock provider offline")
        if not self.responses:
            return text
        if len(self.responses) > 1:
            return self.responses.pop(0)
        return self.responses[0]
