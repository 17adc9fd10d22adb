"""
qoracle
Quantum-random Telegram oracle

True random numbers from the ANU quantum vacuum, turned into gematria
phrases or numerology readings, passed through a translation or
generative provider and posted to a chat.
"""

__version__ = "1.0.0"
__author__ = "qoracle"

from qoracle.constants import STACK_SIZE, UINT16_SCALE, ENERGY_DECAY_FACTOR

__all__ = [
    "STACK_SIZE",
    "UINT16_SCALE",
    "ENERGY_DECAY_FACTOR",
    "__version__",
]
