"""Element extents and content bounds in logical dots."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, Optional

from zpl_types import (
    BarcodeElement,
    BoxElement,
    Element,
    ImageElement,
    QrcodeElement,
    TextElement,
)
from . import get_symbol_generator
from .base import SymbolGenerationError, SymbolGenerator
from .utils import encoded_bit_count

TEXT_WIDTH_FACTOR = 0.6


@dataclass(frozen=True)
class ContentBounds:
    left: float
    top: float
    right: float
    bottom: float

    @property
    def width(self) -> float:
        return max(self.right - self.left, 0.0)

    @property
    def height(self) -> float:
        return max(self.bottom - self.top, 0.0)


def estimate_text_width(content: str, font_size: float) -> float:
    return len(content) * font_size * TEXT_WIDTH_FACTOR


def element_extent(
    element: Element,
    symbol_generator: Optional[SymbolGenerator] = None,
) -> tuple[float, float]:
    """Return the ``(width, height)`` an element occupies from its origin.

    QR extents need the module count from ``symbol_generator`` (the default
    generator when omitted); content that cannot be encoded has no extent.
    """

    if isinstance(element, (BoxElement, ImageElement)):
        return float(element.width), float(element.height)
    if isinstance(element, TextElement):
        return (
            estimate_text_width(element.content, element.font_size),
            float(element.font_size),
        )
    if isinstance(element, BarcodeElement):
        width = element.module_width * encoded_bit_count(element.content)
        return float(width), float(element.height)
    if isinstance(element, QrcodeElement):
        if element.size > 0:
            return float(element.size), float(element.size)
        generator = symbol_generator or get_symbol_generator()
        try:
            grid = generator.generate(element.content)
        except SymbolGenerationError:
            return 0.0, 0.0
        side = float(grid.module_count * element.dot_size)
        return side, side
    return 0.0, 0.0


def content_bounds(
    elements: Iterable[Element],
    symbol_generator: Optional[SymbolGenerator] = None,
) -> Optional[ContentBounds]:
    """Bounding box of all elements, or ``None`` for an empty document."""

    left = top = float("inf")
    right = bottom = float("-inf")
    for element in elements:
        width, height = element_extent(element, symbol_generator)
        left = min(left, element.x)
        top = min(top, element.y)
        right = max(right, element.x + width)
        bottom = max(bottom, element.y + height)

    if left == float("inf"):
        return None
    return ContentBounds(left=left, top=top, right=right, bottom=bottom)


def centering_offset(
    bounds: Optional[ContentBounds],
    logical_width: float,
) -> tuple[float, float]:
    """Horizontal shift that centres narrower content on the canvas."""

    if bounds is None or bounds.width >= logical_width:
        return 0.0, 0.0
    return (logical_width - bounds.width) / 2.0 - bounds.left, 0.0
