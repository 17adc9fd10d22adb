"""
qoracle OpenAI Oracle

Single-turn chat completion through the official async client.
"""

from __future__ import annotations
import logging
from typing import Any, Optional

from openai import AsyncOpenAI, OpenAIError

from qoracle.constants import OPENAI_DEFAULT_MODEL, ORACLE_TIMEOUT_SEC
from qoracle.errors import ProviderFailureError
from qoracle.oracle.base import OracleClient

logger = logging.getLogger(__name__)

SYSTEM_PROMPT = (
    "You are a terse oracle. Answer in plain text, two to four sentences, "
    "without lists or emoji."
)


class OpenAIChatClient(OracleClient):
    """OpenAI chat completions provider."""

    name = "openai"

    def __init__(
        self,
        api_key: Optional[str],
        model: str = OPENAI_DEFAULT_MODEL,
        max_tokens: int = 300,
        timeout: float = ORACLE_TIMEOUT_SEC,
        system_prompt: str = SYSTEM_PROMPT,
        client: Optional[Any] = None
    ):
        self.model = model
        self.max_tokens = max_tokens
        self.system_prompt = system_prompt
        self._api_key = api_key
        self._timeout = timeout
        self._client = client

    def _get_client(self) -> Any:
        # Created lazily: AsyncOpenAI refuses to construct without a key
        if self._client is None:
            self._client = AsyncOpenAI(api_key=self._api_key, timeout=self._timeout)
        return self._client

    async def generate(self, text: str) -> str:
        messages = [
            {"role": "system", "content": self.system_prompt},
            {"role": "user", "content": text},
        ]
        try:
            client = self._get_client()
            response = await client.chat.completions.create(
                model=self.model,
                max_tokens=self.max_tokens,
                messages=messages,
            )
        except OpenAIError as e:
            logger.error(f"OpenAI request failed: {e}")
            raise ProviderFailureError(self.name, str(e)) from e

        try:
            content = response.choices[0].message.content
        except (AttributeError, IndexError) as e:
            raise ProviderFailureError(self.name, "response missing choices[0].message.content") from e
        if not content:
            raise ProviderFailureError(self.name, "empty completion")
        return content.strip()

    async def aclose(self) -> None:
        if self._client is not None and hasattr(self._client, "close"):
            await self._client.close()
            self._client = None
