"""
qoracle Core

Random source, quantum buffer and the decision codec.
"""

from qoracle.core.buffer import QuantumBuffer, StarvationPolicy, BufferStats
from qoracle.core.codec import (
    digital_root,
    scaled_index,
    delay_seconds,
    split_digits,
    energy_weights,
    describe_energies,
    NumerologyEnergyMap,
)
from qoracle.core.source import QRNGSource, MockRandomSource

__all__ = [
    "QuantumBuffer",
    "StarvationPolicy",
    "BufferStats",
    "digital_root",
    "scaled_index",
    "delay_seconds",
    "split_digits",
    "energy_weights",
    "describe_energies",
    "NumerologyEnergyMap",
    "QRNGSource",
    "MockRandomSource",
]
