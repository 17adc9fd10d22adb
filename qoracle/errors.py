"""
qoracle Errors

Every failure in the bot is recoverable; these types only mark where it
was contained.
"""


class QOracleError(Exception):
    """Base class for qoracle errors."""


class SourceUnavailableError(QOracleError):
    """Random-number fetch failed or returned malformed data."""


class StarvedBufferError(QOracleError):
    """A consumer needed more values than the buffer could supply."""

    def __init__(self, requested: int, available: int):
        self.requested = requested
        self.available = available
        super().__init__(f"Quantum buffer starved: needed {requested}, have {available}")


class ProviderFailureError(QOracleError):
    """Translation or generation call failed or returned an unexpected shape."""

    def __init__(self, provider: str, reason: str):
        self.provider = provider
        self.reason = reason
        super().__init__(f"{provider}: {reason}")


class SinkFailureError(QOracleError):
    """Delivery or record logging failed."""


class ConfigError(QOracleError):
    """Invalid configuration value."""
