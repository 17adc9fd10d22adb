"""
qoracle Gemini Oracle

generateContent REST call; the reply is the first candidate's first text
part.
"""

from __future__ import annotations
from typing import Optional

import httpx

from qoracle.constants import GEMINI_BASE_URL, GEMINI_DEFAULT_MODEL, ORACLE_TIMEOUT_SEC
from qoracle.errors import ProviderFailureError
from qoracle.oracle.base import HTTPOracleClient, dig


class GeminiClient(HTTPOracleClient):
    """Google Generative Language API client."""

    name = "gemini"

    def __init__(
        self,
        api_key: Optional[str],
        model: str = GEMINI_DEFAULT_MODEL,
        base_url: str = GEMINI_BASE_URL,
        timeout: float = ORACLE_TIMEOUT_SEC,
        client: Optional[httpx.AsyncClient] = None
    ):
        super().__init__(timeout=timeout, client=client)
        self.api_key = api_key or ""
        self.model = model
        self.base_url = base_url.rstrip("/")

    @property
    def url(self) -> str:
        return f"{self.base_url}/{self.model}:generateContent"

    async def generate(self, text: str) -> str:
        body = {"contents": [{"parts": [{"text": text}]}]}
        payload = await self._post_json(self.url, body, params={"key": self.api_key})
        reply = dig(payload, ["candidates", 0, "content", "parts", 0, "text"], self.name)
        if not isinstance(reply, str) or not reply.strip():
            raise ProviderFailureError(self.name, "empty candidate text")
        return reply.strip()
