"""Derive the logical label size, in dots, from ZPL text."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from zpl_interpreter import interpret
from zpl_render import SymbolGenerator, get_symbol_generator
from zpl_render.geometry import content_bounds

FALLBACK_WIDTH = 596
FALLBACK_HEIGHT = 900


@dataclass(frozen=True)
class LabelDimensions:
    width: float
    height: float


def resolve_dimensions(
    text: Optional[str],
    symbol_generator: Optional[SymbolGenerator] = None,
) -> LabelDimensions:
    """Return the label size declared by, or implied by, ``text``.

    Width prefers the ``^PW`` directive, then the furthest element extent,
    then 596. Height always comes from the element extents, else 900.
    """

    document = interpret(text)
    generator = symbol_generator or get_symbol_generator()
    bounds = content_bounds(document.elements, generator)

    if document.declared_width is not None and document.declared_width > 0:
        width: float = document.declared_width
    elif bounds is not None and bounds.right > 0:
        width = bounds.right
    else:
        width = FALLBACK_WIDTH

    if bounds is not None and bounds.bottom > 0:
        height: float = bounds.bottom
    else:
        height = FALLBACK_HEIGHT

    return LabelDimensions(width=width, height=height)
