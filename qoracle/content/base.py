"""
qoracle Content Selector Interface
"""

from __future__ import annotations
from abc import ABC, abstractmethod

from qoracle.core.buffer import QuantumBuffer


class ContentSelector(ABC):
    """
    Strategy that turns quantum values into cycle content.

    An empty string from select() means "nothing to say this cycle" and is
    not an error.
    """

    kind: str = "base"

    def __init__(self, buffer: QuantumBuffer):
        self.buffer = buffer

    @abstractmethod
    async def select(self) -> str:
        """Draw values from the buffer and build content."""

    def render_prompt(self, content: str) -> str:
        """Text handed to the oracle for this content."""
        return content
