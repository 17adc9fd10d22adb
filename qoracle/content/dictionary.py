"""
qoracle Gematria Dictionary

Category key -> candidate words, loaded once and never mutated.
"""

from __future__ import annotations
import json
import logging
from pathlib import Path
from types import MappingProxyType
from collections.abc import Iterable
from typing import Dict, Mapping, Optional, Sequence, Tuple, Union

from qoracle.errors import ConfigError

logger = logging.getLogger(__name__)

DEFAULT_DICTIONARY_PATH = Path(__file__).resolve().parent.parent / "data" / "gematria_words.json"


class GematriaDictionary:
    """
    Read-only keyed word dictionary.

    Key order is the order of the source mapping; scaled indices depend on
    it. Categories may be empty and are skipped by selectors.
    """

    def __init__(self, entries: Mapping[str, Sequence[str]]):
        frozen: Dict[str, Tuple[str, ...]] = {}
        for key, words in entries.items():
            if isinstance(words, str) or not isinstance(words, Iterable):
                raise ConfigError(f"Category {key!r} must map to a list of words")
            frozen[str(key)] = tuple(str(w) for w in words)
        self._entries = MappingProxyType(frozen)
        self._keys = tuple(frozen)

    @classmethod
    def load(cls, path: Optional[Union[str, Path]] = None) -> "GematriaDictionary":
        """
        Load dictionary from a JSON object file.

        Args:
            path: JSON file (default: packaged gematria_words.json)
        """
        path = Path(path) if path else DEFAULT_DICTIONARY_PATH
        try:
            with open(path, "r", encoding="utf-8") as f:
                data = json.load(f)
        except (OSError, json.JSONDecodeError) as e:
            raise ConfigError(f"Cannot load dictionary {path}: {e}") from e

        if not isinstance(data, dict):
            raise ConfigError(f"Dictionary {path} must be a JSON object")

        dictionary = cls(data)
        logger.info(
            f"Loaded dictionary {path.name}: {len(dictionary)} categories, "
            f"{dictionary.word_count()} words"
        )
        return dictionary

    def __len__(self) -> int:
        return len(self._keys)

    def __contains__(self, key: object) -> bool:
        return key in self._entries

    @property
    def keys(self) -> Tuple[str, ...]:
        return self._keys

    def candidates(self, key: str) -> Tuple[str, ...]:
        return self._entries.get(key, ())

    def word_count(self) -> int:
        return sum(len(words) for words in self._entries.values())
