"""
qoracle Google Translate Oracle

Translates gematria phrases (Hebrew by default) into the target language.
"""

from __future__ import annotations
import logging
from typing import Optional

import httpx

from qoracle.constants import (
    GOOGLE_TRANSLATE_URL,
    NO_TRANSLATION_TEXT,
    ORACLE_TIMEOUT_SEC,
    TRANSLATE_SOURCE_LANG,
    TRANSLATE_TARGET_LANG,
)
from qoracle.oracle.base import HTTPOracleClient, dig

logger = logging.getLogger(__name__)


class GoogleTranslateClient(HTTPOracleClient):
    """Cloud Translation v2 REST client."""

    name = "google-translate"

    def __init__(
        self,
        api_key: Optional[str],
        source: str = TRANSLATE_SOURCE_LANG,
        target: str = TRANSLATE_TARGET_LANG,
        url: str = GOOGLE_TRANSLATE_URL,
        timeout: float = ORACLE_TIMEOUT_SEC,
        client: Optional[httpx.AsyncClient] = None
    ):
        super().__init__(timeout=timeout, client=client)
        self.api_key = api_key or ""
        self.source = source
        self.target = target
        self.url = url

    async def generate(self, text: str) -> str:
        body = {
            "q": text,
            "source": self.source,
            "target": self.target,
            "format": "text",
        }
        payload = await self._post_json(self.url, body, params={"key": self.api_key})
        translated = dig(payload, ["data", "translations", 0, "translatedText"], self.name)
        if not translated:
            logger.info("Translation came back empty")
            return NO_TRANSLATION_TEXT
        return str(translated)
