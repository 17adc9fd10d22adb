"""
qoracle Decision Codec

Pure mappings from raw 16-bit quantum values to selection decisions.

Scaling uses floor(raw / 65535 * length) rather than modulo indexing; the
two give different distributions and the scaled form is the one every
consumer relies on.
"""

from __future__ import annotations
import math
from dataclasses import dataclass, field
from typing import Dict, List, Sequence, Tuple

from qoracle.constants import (
    UINT16_SCALE,
    ENERGY_DECAY_FACTOR,
    ENERGY_DIGITS,
    ENERGY_CLASSES,
    ZERO_DIGIT_CLASS,
    NO_ENERGIES_TEXT,
)


# =============================================================================
# Scalar decisions
# =============================================================================

def digital_root(raw: int) -> int:
    """
    Reduce a raw value to a single digit in [1, 9].

    The value is taken modulo 65535 and digit-summed until one digit
    remains. A result of 0 maps to 1.
    """
    n = abs(raw) % UINT16_SCALE
    while n > 9:
        n = sum(int(d) for d in str(n))
    return n or 1


def scaled_index(raw: int, length: int) -> int:
    """
    Map a raw value onto [0, length - 1] by proportional scaling.

    Args:
        raw: Quantum value in [0, 65535]
        length: Size of the target range (>= 1)

    Returns:
        Index, clamped to length - 1 when raw reaches the top of the scale
    """
    if length < 1:
        raise ValueError(f"length must be at least 1, got {length}")
    index = math.floor(raw / UINT16_SCALE * length)
    return min(max(index, 0), length - 1)


def delay_seconds(raw: int, min_seconds: int, range_seconds: int) -> int:
    """Pacing delay in [min_seconds, min_seconds + range_seconds - 1]."""
    if range_seconds <= 0:
        return min_seconds
    offset = math.floor(raw / UINT16_SCALE * range_seconds)
    return min_seconds + min(max(offset, 0), range_seconds - 1)


def split_digits(raw: int, width: int = ENERGY_DIGITS) -> List[int]:
    """Zero-padded decimal digits of raw, e.g. 321 -> [0, 0, 3, 2, 1]."""
    if raw < 0:
        raise ValueError(f"raw must be non-negative, got {raw}")
    return [int(d) for d in str(raw).zfill(width)]


# =============================================================================
# Numerology energies
# =============================================================================

@dataclass
class NumerologyEnergyMap:
    """
    Accumulated weight per digit class 1-9.

    Digit 0 is folded into class 9.
    """
    weights: Dict[int, float] = field(
        default_factory=lambda: {c: 0.0 for c in ENERGY_CLASSES}
    )

    def add(self, digit: int, weight: float) -> None:
        if not 0 <= digit <= 9:
            raise ValueError(f"digit must be 0-9, got {digit}")
        cls = ZERO_DIGIT_CLASS if digit == 0 else digit
        self.weights[cls] = self.weights.get(cls, 0.0) + weight

    def total(self) -> float:
        return sum(self.weights.values())

    def ranked(self) -> List[Tuple[int, float]]:
        """Non-zero classes by weight descending, ties by class ascending."""
        present = [(c, w) for c, w in self.weights.items() if w > 0]
        return sorted(present, key=lambda item: (-item[1], item[0]))

    def dominant(self) -> int | None:
        ranked = self.ranked()
        return ranked[0][0] if ranked else None


def energy_weights(
    digits: Sequence[int],
    decay_factor: float = ENERGY_DECAY_FACTOR
) -> NumerologyEnergyMap:
    """
    Weight each digit position by decay_factor ** i.

    The leftmost digit dominates; repeated digits accumulate.
    """
    energies = NumerologyEnergyMap()
    for i, digit in enumerate(digits):
        energies.add(digit, decay_factor ** i)
    return energies


def describe_energies(energies: NumerologyEnergyMap) -> str:
    """
    Render a ranked summary.

    "Dominant 5 (1.00), then 4 (0.80), followed by 3 (0.64), 2 (0.51)."
    """
    ranked = energies.ranked()
    if not ranked:
        return NO_ENERGIES_TEXT

    parts = [f"Dominant {ranked[0][0]} ({ranked[0][1]:.2f})"]
    if len(ranked) > 1:
        parts.append(f"then {ranked[1][0]} ({ranked[1][1]:.2f})")
    if len(ranked) > 2:
        rest = ", ".join(f"{c} ({w:.2f})" for c, w in ranked[2:])
        parts.append(f"followed by {rest}")
    return ", ".join(parts) + "."


def reading_for(raw: int, decay_factor: float = ENERGY_DECAY_FACTOR) -> Tuple[NumerologyEnergyMap, str]:
    """Energy map and description for one raw quantum value."""
    energies = energy_weights(split_digits(raw), decay_factor)
    return energies, describe_energies(energies)
