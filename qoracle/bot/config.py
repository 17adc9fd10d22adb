"""
qoracle Bot Configuration

Environment variables (optionally from a .env file) collected into
dataclasses. Credentials are not enforced here: a missing key makes the
corresponding call fail when it is first used.
"""

from __future__ import annotations
import logging
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import List, Mapping, Optional, Union

from dotenv import load_dotenv

from qoracle.constants import (
    QRNG_URL,
    QRNG_TIMEOUT_SEC,
    STACK_SIZE,
    UINT16_MAX,
    LOW_WATERMARK,
    ENERGY_DECAY_FACTOR,
    PACING_MIN_SECONDS,
    PACING_RANGE_SECONDS,
    GEMINI_DEFAULT_MODEL,
    OPENAI_DEFAULT_MODEL,
    ORACLE_TIMEOUT_SEC,
    TRANSLATE_SOURCE_LANG,
    TRANSLATE_TARGET_LANG,
    FAILURE_TEXT,
    DEFAULT_ACTOR,
)
from qoracle.errors import ConfigError

logger = logging.getLogger(__name__)

MODES = ("broadcast", "reply", "both")


def _get_int(env: Mapping[str, str], name: str, default: int) -> int:
    raw = env.get(name)
    if raw is None or raw.strip() == "":
        return default
    try:
        return int(raw)
    except ValueError:
        raise ConfigError(f"{name} must be an integer, got {raw!r}") from None


def _get_float(env: Mapping[str, str], name: str, default: float) -> float:
    raw = env.get(name)
    if raw is None or raw.strip() == "":
        return default
    try:
        return float(raw)
    except ValueError:
        raise ConfigError(f"{name} must be a number, got {raw!r}") from None


def _get_str(env: Mapping[str, str], name: str, default: Optional[str] = None) -> Optional[str]:
    raw = env.get(name)
    if raw is None or raw.strip() == "":
        return default
    return raw.strip()


@dataclass
class TelegramConfig:
    """Telegram credentials and broadcast target."""
    token: Optional[str] = None
    chat_id: Optional[str] = None


@dataclass
class QuantumConfig:
    """Random source and buffer configuration."""
    url: str = QRNG_URL
    batch_size: int = STACK_SIZE
    low_watermark: int = LOW_WATERMARK
    timeout_sec: float = QRNG_TIMEOUT_SEC
    starvation_policy: str = "fallback"
    fallback_value: int = 0


@dataclass
class OracleConfig:
    """Provider selection and credentials."""
    provider: str = "translate"
    google_api_key: Optional[str] = None
    gemini_api_key: Optional[str] = None
    openai_api_key: Optional[str] = None
    gemini_model: str = GEMINI_DEFAULT_MODEL
    openai_model: str = OPENAI_DEFAULT_MODEL
    source_lang: str = TRANSLATE_SOURCE_LANG
    target_lang: str = TRANSLATE_TARGET_LANG
    timeout_sec: float = ORACLE_TIMEOUT_SEC

    def credential(self) -> Optional[str]:
        """Key used by the selected provider."""
        return {
            "translate": self.google_api_key,
            "gemini": self.gemini_api_key,
            "openai": self.openai_api_key,
        }.get(self.provider, "")


@dataclass
class PacingConfig:
    """Jittered delay between broadcast cycles."""
    min_seconds: int = PACING_MIN_SECONDS
    range_seconds: int = PACING_RANGE_SECONDS


@dataclass
class LogConfig:
    """Logging configuration."""
    level: str = "INFO"
    file: Optional[str] = None
    format: str = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
    max_size_mb: int = 10
    backup_count: int = 3
    record_file: Optional[str] = None


@dataclass
class BotConfig:
    """
    Complete bot configuration.

    mode selects broadcast loop, reply handler or both; strategy selects
    the content selector.
    """
    mode: str = "broadcast"
    strategy: str = "phrase"
    actor: str = DEFAULT_ACTOR
    reply_chance: float = 1.0
    failure_text: str = FAILURE_TEXT
    dictionary_path: Optional[str] = None
    decay_factor: float = ENERGY_DECAY_FACTOR

    telegram: TelegramConfig = field(default_factory=TelegramConfig)
    quantum: QuantumConfig = field(default_factory=QuantumConfig)
    oracle: OracleConfig = field(default_factory=OracleConfig)
    pacing: PacingConfig = field(default_factory=PacingConfig)
    log: LogConfig = field(default_factory=LogConfig)

    @property
    def broadcasts(self) -> bool:
        return self.mode in ("broadcast", "both")

    @property
    def replies(self) -> bool:
        return self.mode in ("reply", "both")

    @classmethod
    def from_env(
        cls,
        env: Optional[Mapping[str, str]] = None,
        env_file: Optional[Union[str, Path]] = None
    ) -> "BotConfig":
        """
        Build configuration from environment variables.

        Args:
            env: Mapping to read instead of os.environ
            env_file: .env file loaded into os.environ first (ignored when
                env is given)

        Raises:
            ConfigError: a numeric variable does not parse
        """
        if env is None:
            if env_file is not None:
                load_dotenv(env_file)
            else:
                load_dotenv()
            env = os.environ

        return cls(
            mode=_get_str(env, "BOT_MODE", "broadcast").lower(),
            strategy=_get_str(env, "BOT_STRATEGY", "phrase").lower(),
            actor=_get_str(env, "BOT_ACTOR", DEFAULT_ACTOR),
            reply_chance=_get_float(env, "REPLY_CHANCE", 1.0),
            failure_text=_get_str(env, "FAILURE_TEXT", FAILURE_TEXT),
            dictionary_path=_get_str(env, "GEMATRIA_DICTIONARY"),
            decay_factor=_get_float(env, "ENERGY_DECAY", ENERGY_DECAY_FACTOR),
            telegram=TelegramConfig(
                token=_get_str(env, "TELEGRAM_TOKEN"),
                chat_id=_get_str(env, "TELEGRAM_CHAT_ID"),
            ),
            quantum=QuantumConfig(
                url=_get_str(env, "QRNG_URL", QRNG_URL),
                batch_size=_get_int(env, "QRNG_BATCH_SIZE", STACK_SIZE),
                low_watermark=_get_int(env, "QRNG_LOW_WATERMARK", LOW_WATERMARK),
                timeout_sec=_get_float(env, "QRNG_TIMEOUT", QRNG_TIMEOUT_SEC),
                starvation_policy=_get_str(env, "QRNG_STARVATION_POLICY", "fallback").lower(),
                fallback_value=_get_int(env, "QRNG_FALLBACK_VALUE", 0),
            ),
            oracle=OracleConfig(
                provider=_get_str(env, "ORACLE_PROVIDER", "translate").lower(),
                google_api_key=_get_str(env, "GOOGLE_API_KEY"),
                gemini_api_key=_get_str(env, "GEMINI_API_KEY"),
                openai_api_key=_get_str(env, "OPENAI_API_KEY"),
                gemini_model=_get_str(env, "GEMINI_MODEL", GEMINI_DEFAULT_MODEL),
                openai_model=_get_str(env, "OPENAI_MODEL", OPENAI_DEFAULT_MODEL),
                source_lang=_get_str(env, "TRANSLATE_SOURCE", TRANSLATE_SOURCE_LANG),
                target_lang=_get_str(env, "TRANSLATE_TARGET", TRANSLATE_TARGET_LANG),
                timeout_sec=_get_float(env, "ORACLE_TIMEOUT", ORACLE_TIMEOUT_SEC),
            ),
            pacing=PacingConfig(
                min_seconds=_get_int(env, "PACING_MIN_SECONDS", PACING_MIN_SECONDS),
                range_seconds=_get_int(env, "PACING_RANGE_SECONDS", PACING_RANGE_SECONDS),
            ),
            log=LogConfig(
                level=_get_str(env, "LOG_LEVEL", "INFO").upper(),
                file=_get_str(env, "LOG_FILE"),
                record_file=_get_str(env, "RECORD_FILE"),
            ),
        )

    def validate(self) -> List[str]:
        """
        Validate configuration.

        Returns:
            List of validation errors (empty if valid). Credentials are
            checked separately by missing_credentials().
        """
        from qoracle.content import STRATEGIES
        from qoracle.oracle import PROVIDERS

        errors = []

        if self.mode not in MODES:
            errors.append(f"Invalid mode: {self.mode}")
        if self.strategy not in STRATEGIES:
            errors.append(f"Invalid strategy: {self.strategy}")
        if self.oracle.provider not in PROVIDERS:
            errors.append(f"Invalid oracle provider: {self.oracle.provider}")
        if self.quantum.starvation_policy not in ("fallback", "defer"):
            errors.append(f"Invalid starvation policy: {self.quantum.starvation_policy}")

        if not 1 <= self.quantum.batch_size <= STACK_SIZE:
            errors.append(f"QRNG batch size must be 1-{STACK_SIZE}, got {self.quantum.batch_size}")
        if self.quantum.low_watermark < 0:
            errors.append("QRNG low watermark cannot be negative")
        if not 0 <= self.quantum.fallback_value <= UINT16_MAX:
            errors.append(f"QRNG fallback value must be within 0-{UINT16_MAX}, got {self.quantum.fallback_value}")
        if not 0.0 <= self.reply_chance <= 1.0:
            errors.append(f"Reply chance must be within 0-1, got {self.reply_chance}")
        if not 0.0 < self.decay_factor <= 1.0:
            errors.append(f"Energy decay must be within (0, 1], got {self.decay_factor}")
        if self.pacing.min_seconds < 0 or self.pacing.range_seconds < 0:
            errors.append("Pacing seconds cannot be negative")

        return errors

    def missing_credentials(self) -> List[str]:
        """Credentials that are not set. Not fatal: calls fail at first use."""
        missing = []
        if not self.telegram.token:
            missing.append("TELEGRAM_TOKEN not set")
        if self.broadcasts and not self.telegram.chat_id:
            missing.append("TELEGRAM_CHAT_ID not set (broadcast has no target)")
        if self.oracle.credential() is None:
            missing.append(f"No API key for oracle provider {self.oracle.provider}")
        return missing


def setup_logging(config: LogConfig) -> None:
    """Configure logging based on config."""
    level = getattr(logging, config.level.upper(), logging.INFO)

    handlers: List[logging.Handler] = [logging.StreamHandler()]

    if config.file:
        from logging.handlers import RotatingFileHandler
        file_handler = RotatingFileHandler(
            config.file,
            maxBytes=config.max_size_mb * 1024 * 1024,
            backupCount=config.backup_count,
        )
        handlers.append(file_handler)

    logging.basicConfig(
        level=level,
        format=config.format,
        handlers=handlers,
        force=True,
    )

    # httpx logs every polling request, bot token included
    logging.getLogger("httpx").setLevel(logging.WARNING)
