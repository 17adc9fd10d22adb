"""
qoracle Phrase Selector

Gematria phrase assembly: one value picks how many words, then each word
costs two values, one for the category and one for the candidate within
it.
"""

from __future__ import annotations
import logging
from typing import List

from qoracle.content.base import ContentSelector
from qoracle.content.dictionary import GematriaDictionary
from qoracle.core.buffer import QuantumBuffer
from qoracle.core.codec import digital_root, scaled_index

logger = logging.getLogger(__name__)


class PhraseSelector(ContentSelector):
    """Builds a space-joined phrase from a GematriaDictionary."""

    kind = "phrase"

    def __init__(self, buffer: QuantumBuffer, dictionary: GematriaDictionary):
        super().__init__(buffer)
        self.dictionary = dictionary

    def pick(self, category_raw: int, candidate_raw: int) -> str | None:
        """Word for one draw pair, or None if the category is empty."""
        keys = self.dictionary.keys
        key = keys[scaled_index(category_raw, len(keys))]
        candidates = self.dictionary.candidates(key)
        if not candidates:
            return None
        return candidates[scaled_index(candidate_raw, len(candidates))]

    async def select(self) -> str:
        """
        Assemble a phrase.

        Returns:
            Words joined by single spaces; empty if every draw landed on an
            empty category or the dictionary has no categories
        """
        if not len(self.dictionary):
            logger.warning("Dictionary is empty, no phrase")
            return ""

        await self.buffer.ensure_available(2)
        count = digital_root(await self.buffer.draw())

        words: List[str] = []
        for _ in range(count):
            category_raw, candidate_raw = await self.buffer.take(2)
            word = self.pick(category_raw, candidate_raw)
            if word is not None:
                words.append(word)

        phrase = " ".join(words)
        logger.debug(f"Phrase: {count} draws -> {len(words)} words")
        return phrase
