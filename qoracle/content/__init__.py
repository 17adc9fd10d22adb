"""
qoracle Content Strategies

phrase: gematria word assembly (translated by the oracle)
numerology: digit-energy reading (narrated by the oracle)
"""

from __future__ import annotations
from pathlib import Path
from typing import Optional, Union

from qoracle.constants import ENERGY_DECAY_FACTOR
from qoracle.content.base import ContentSelector
from qoracle.content.dictionary import GematriaDictionary
from qoracle.content.numerology import NumerologySelector
from qoracle.content.phrase import PhraseSelector
from qoracle.core.buffer import QuantumBuffer
from qoracle.errors import ConfigError

STRATEGIES = ("phrase", "numerology")


def build_selector(
    strategy: str,
    buffer: QuantumBuffer,
    dictionary_path: Optional[Union[str, Path]] = None,
    decay_factor: float = ENERGY_DECAY_FACTOR,
    min_available: int = 1
) -> ContentSelector:
    """Create the selector named by strategy."""
    if strategy == "phrase":
        return PhraseSelector(buffer, GematriaDictionary.load(dictionary_path))
    if strategy == "numerology":
        return NumerologySelector(buffer, decay_factor=decay_factor, min_available=min_available)
    raise ConfigError(f"Unknown strategy {strategy!r} (expected one of {', '.join(STRATEGIES)})")


__all__ = [
    "ContentSelector",
    "GematriaDictionary",
    "NumerologySelector",
    "PhraseSelector",
    "STRATEGIES",
    "build_selector",
]
