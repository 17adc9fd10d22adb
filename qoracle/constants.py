"""
qoracle Constants

All tunable defaults defined here for single source of truth.
"""

from typing import Final

# ==============================================================================
# QUANTUM RANDOM SOURCE
# ==============================================================================

QRNG_URL: Final[str] = "https://qrng.anu.edu.au/API/jsonI.php"
QRNG_VALUE_TYPE: Final[str] = "uint16"
QRNG_TIMEOUT_SEC: Final[float] = 10.0

STACK_SIZE: Final[int] = 1024                  # ANU maximum per request
LOW_WATERMARK: Final[int] = 24                 # Refill trigger for reply handling

UINT16_MAX: Final[int] = 65535
UINT16_SCALE: Final[int] = 65535               # Denominator for proportional scaling
REPLY_GATE_SCALE: Final[int] = 65536           # Denominator for the reply chance gate

# ==============================================================================
# DECISION CODEC
# ==============================================================================

ENERGY_DECAY_FACTOR: Final[float] = 0.8
ENERGY_DIGITS: Final[int] = 5
ENERGY_CLASSES: Final[tuple] = (1, 2, 3, 4, 5, 6, 7, 8, 9)
ZERO_DIGIT_CLASS: Final[int] = 9
NO_ENERGIES_TEXT: Final[str] = "No numerological energies are present."

# ==============================================================================
# PACING
# ==============================================================================

PACING_MIN_SECONDS: Final[int] = 3
PACING_RANGE_SECONDS: Final[int] = 7

# ==============================================================================
# ORACLE PROVIDERS
# ==============================================================================

GOOGLE_TRANSLATE_URL: Final[str] = "https://translation.googleapis.com/language/translate/v2"
GEMINI_BASE_URL: Final[str] = "https://generativelanguage.googleapis.com/v1beta/models"
GEMINI_DEFAULT_MODEL: Final[str] = "gemini-1.5-flash"
OPENAI_DEFAULT_MODEL: Final[str] = "gpt-4o-mini"
ORACLE_TIMEOUT_SEC: Final[float] = 30.0

TRANSLATE_SOURCE_LANG: Final[str] = "iw"
TRANSLATE_TARGET_LANG: Final[str] = "en"
NO_TRANSLATION_TEXT: Final[str] = "[no translation]"
FAILURE_TEXT: Final[str] = "Translation failed."

# ==============================================================================
# MESSAGING
# ==============================================================================

TELEGRAM_MAX_MESSAGE: Final[int] = 4096
DEFAULT_ACTOR: Final[str] = "qoracle"

RECORD_TYPE_BROADCAST: Final[str] = "broadcast"
RECORD_TYPE_REPLY: Final[str] = "reply"
