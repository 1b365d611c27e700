"""Rendering pipeline for one ZPL preview pass."""

from __future__ import annotations

import math
from dataclasses import dataclass
from io import BytesIO
from typing import Optional

from PIL import Image

from logger import get_logger
from zpl_dimensions import resolve_dimensions
from zpl_interpreter import interpret
from zpl_render import SymbolGenerator, get_symbol_generator
from zpl_render.compositor import BACKGROUND, Viewport, render_png
from zpl_render.geometry import centering_offset, content_bounds
from zpl_types import LabelDocument

LOGGER = get_logger(__name__)

MAX_PREVIEW_WIDTH = 600
MAX_PREVIEW_HEIGHT = 900


@dataclass(frozen=True)
class PreviewResult:
    """Raster at full logical resolution plus how the host should display it."""

    document: LabelDocument
    png: bytes
    logical_width: int
    logical_height: int
    offset_x: float
    offset_y: float
    display_scale: float

    @property
    def display_width(self) -> int:
        return max(1, round(self.logical_width * self.display_scale))

    @property
    def display_height(self) -> int:
        return max(1, round(self.logical_height * self.display_scale))

    def image(self) -> Image.Image:
        with Image.open(BytesIO(self.png)) as img:
            return img.convert("RGB")

    def display_image(self) -> Image.Image:
        """Return the raster resized to the display size."""

        img = self.image()
        if self.display_scale >= 1:
            return img
        return img.resize((self.display_width, self.display_height), Image.Resampling.LANCZOS)


def display_scale_for(
    logical_width: float,
    logical_height: float,
    max_width: float = MAX_PREVIEW_WIDTH,
    max_height: float = MAX_PREVIEW_HEIGHT,
) -> float:
    """Single downscale factor that fits the label into the preview area."""

    if logical_width <= 0 or logical_height <= 0:
        return 1.0
    return min(max_width / logical_width, max_height / logical_height, 1.0)


def _is_positive(value: Optional[float]) -> bool:
    return value is not None and math.isfinite(value) and value > 0


def build_viewport(
    document: LabelDocument,
    width_dots: float,
    height_dots: float,
    *,
    center: bool = True,
    symbol_generator: Optional[SymbolGenerator] = None,
    background: str = BACKGROUND,
) -> Viewport:
    offset_x, offset_y = 0.0, 0.0
    if center:
        bounds = content_bounds(document.elements, symbol_generator)
        offset_x, offset_y = centering_offset(bounds, width_dots)
    return Viewport(
        width=width_dots,
        height=height_dots,
        offset_x=offset_x,
        offset_y=offset_y,
        background=background,
    )


def render_preview(
    zpl: str,
    width_dots: Optional[float] = None,
    height_dots: Optional[float] = None,
    *,
    center: bool = True,
    max_preview: tuple[float, float] = (MAX_PREVIEW_WIDTH, MAX_PREVIEW_HEIGHT),
    symbol_generator: Optional[SymbolGenerator] = None,
    background: str = BACKGROUND,
) -> Optional[PreviewResult]:
    """Parse ``zpl`` and paint it; ``None`` when the canvas would be degenerate.

    Missing or non-positive sizes fall back to the dimensions the label
    text implies.
    """

    generator = symbol_generator or get_symbol_generator()
    document = interpret(zpl)

    width = width_dots if _is_positive(width_dots) else None
    height = height_dots if _is_positive(height_dots) else None
    if width is None or height is None:
        resolved = resolve_dimensions(zpl, generator)
        width = width if width is not None else resolved.width
        height = height if height is not None else resolved.height

    logical_width = round(width)
    logical_height = round(height)
    viewport = build_viewport(
        document,
        logical_width,
        logical_height,
        center=center,
        symbol_generator=generator,
        background=background,
    )

    png = render_png(document.elements, viewport, generator)
    if png is None:
        return None

    max_width, max_height = max_preview
    scale = display_scale_for(logical_width, logical_height, max_width, max_height)
    LOGGER.info(
        "Rendered %d elements on %dx%d dots (display scale %.3f)",
        len(document),
        logical_width,
        logical_height,
        scale,
    )
    return PreviewResult(
        document=document,
        png=png,
        logical_width=logical_width,
        logical_height=logical_height,
        offset_x=viewport.offset_x,
        offset_y=viewport.offset_y,
        display_scale=scale,
    )
