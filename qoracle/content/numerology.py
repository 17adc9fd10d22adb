"""
qoracle Numerology Selector

Digit-energy oracle: one quantum value becomes a five-digit number whose
digits are weighted by position, ranked, and described. The description is
wrapped in a reading prompt for a generative provider.
"""

from __future__ import annotations
import logging

from qoracle.constants import ENERGY_DECAY_FACTOR
from qoracle.content.base import ContentSelector
from qoracle.core.buffer import QuantumBuffer
from qoracle.core.codec import reading_for

logger = logging.getLogger(__name__)

DEFAULT_PROMPT_TEMPLATE = (
    "You are a numerology oracle. A quantum random draw produced these "
    "digit energies, strongest first: {energies} "
    "Write a short reading (three or four sentences) for the people in this "
    "chat, describing how the dominant energy colours the moment and how the "
    "others temper it. Do not mention numbers or weights explicitly."
)


class NumerologySelector(ContentSelector):
    """Energy-narrative strategy."""

    kind = "numerology"

    def __init__(
        self,
        buffer: QuantumBuffer,
        decay_factor: float = ENERGY_DECAY_FACTOR,
        min_available: int = 1,
        prompt_template: str = DEFAULT_PROMPT_TEMPLATE
    ):
        """
        Args:
            buffer: Shared quantum buffer
            decay_factor: Per-position weight decay
            min_available: Values to ensure before drawing (4 when the same
                buffer also paces the loop)
            prompt_template: Format string with an {energies} field
        """
        super().__init__(buffer)
        self.decay_factor = decay_factor
        self.min_available = min_available
        self.prompt_template = prompt_template

    async def select(self) -> str:
        await self.buffer.ensure_available(self.min_available)
        raw = await self.buffer.draw()
        energies, description = reading_for(raw, self.decay_factor)
        logger.debug(f"Numerology draw {raw:05d}: dominant {energies.dominant()}")
        return description

    def render_prompt(self, content: str) -> str:
        return self.prompt_template.format(energies=content)
