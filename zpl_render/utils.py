"""Shared helpers for the schematic barcode rendering."""

from __future__ import annotations

from typing import List

BARCODE_MAX_WIDTH = 560
ESTIMATED_BITS_PER_CHAR = 8


def char_bit_pattern(char: str) -> str:
    """Binary digits of the character's code point, most significant first."""

    return format(ord(char), "b")


def encoded_bit_count(content: str) -> int:
    """Modules used by the schematic encoding, including one gap per character."""

    return sum(len(char_bit_pattern(ch)) + 1 for ch in content)


def shrink_module_width(
    content: str,
    module_width: int,
    max_width: float = BARCODE_MAX_WIDTH,
) -> int:
    """Return the module width to draw with so ``content`` stays under ``max_width``."""

    module = module_width if module_width > 0 else 2
    estimated_bits = ESTIMATED_BITS_PER_CHAR * len(content)
    if estimated_bits and estimated_bits * module > max_width:
        module = max(1, int(max_width // estimated_bits))
    return module


def bar_runs(content: str, x: float, module: int) -> List[tuple[float, int]]:
    """Return ``(left, width)`` of each dark bar, one per ``1`` bit.

    A ``0`` bit advances without drawing; each character is followed by a
    one-module gap.
    """

    bars: List[tuple[float, int]] = []
    cursor = x
    for ch in content:
        for bit in char_bit_pattern(ch):
            if bit == "1":
                bars.append((cursor, module))
            cursor += module
        cursor += module
    return bars
