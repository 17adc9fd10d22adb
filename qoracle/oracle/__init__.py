"""
qoracle Oracle Providers

translate: Google Cloud Translation (gematria phrases)
gemini: Google Generative Language (numerology readings)
openai: OpenAI chat completions
"""

from __future__ import annotations
from typing import Optional

from qoracle.constants import (
    GEMINI_DEFAULT_MODEL,
    OPENAI_DEFAULT_MODEL,
    ORACLE_TIMEOUT_SEC,
    TRANSLATE_SOURCE_LANG,
    TRANSLATE_TARGET_LANG,
)
from qoracle.errors import ConfigError
from qoracle.oracle.base import OracleClient, HTTPOracleClient, MockOracle
from qoracle.oracle.gemini import GeminiClient
from qoracle.oracle.translate import GoogleTranslateClient

PROVIDERS = ("translate", "gemini", "openai", "mock")


def build_oracle(
    provider: str,
    google_api_key: Optional[str] = None,
    gemini_api_key: Optional[str] = None,
    openai_api_key: Optional[str] = None,
    gemini_model: str = GEMINI_DEFAULT_MODEL,
    openai_model: str = OPENAI_DEFAULT_MODEL,
    source_lang: str = TRANSLATE_SOURCE_LANG,
    target_lang: str = TRANSLATE_TARGET_LANG,
    timeout: float = ORACLE_TIMEOUT_SEC
) -> OracleClient:
    """
    Create the provider named by provider.

    Credentials are not checked here; a missing key fails at first call.
    """
    if provider == "translate":
        return GoogleTranslateClient(google_api_key, source=source_lang, target=target_lang, timeout=timeout)
    if provider == "gemini":
        return GeminiClient(gemini_api_key, model=gemini_model, timeout=timeout)
    if provider == "openai":
        from qoracle.oracle.openai_chat import OpenAIChatClient
        return OpenAIChatClient(openai_api_key, model=openai_model, timeout=timeout)
    if provider == "mock":
        return MockOracle()
    raise ConfigError(f"Unknown oracle provider {provider!r} (expected one of {', '.join(PROVIDERS)})")


__all__ = [
    "OracleClient",
    "HTTPOracleClient",
    "MockOracle",
    "GeminiClient",
    "GoogleTranslateClient",
    "PROVIDERS",
    "build_oracle",
]
