"""Paint a label document onto a raster surface."""

from __future__ import annotations

import math
from dataclasses import dataclass
from io import BytesIO
from typing import Iterable, Optional

import fitz
from PIL import Image
from reportlab.lib import colors
from reportlab.lib.utils import ImageReader
from reportlab.pdfgen import canvas

from fonts import resolve_text, text_ascent
from logger import get_logger
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
from .utils import bar_runs, shrink_module_width

LOGGER = get_logger(__name__)

RASTER_DPI = 72
QR_PREVIEW_SCALE = 0.85
DEFAULT_QR_DOT_SIZE = 4
DEFAULT_BAR_HEIGHT = 80
BACKGROUND = "#ffffff"
INK = colors.black
PAPER = colors.white


@dataclass(frozen=True)
class Viewport:
    """Logical canvas in dots plus the paint offset applied to every element."""

    width: float
    height: float
    offset_x: float = 0.0
    offset_y: float = 0.0
    background: str = BACKGROUND

    @property
    def is_degenerate(self) -> bool:
        return not (
            math.isfinite(self.width)
            and math.isfinite(self.height)
            and self.width > 0
            and self.height > 0
        )


def render_png(
    elements: Iterable[Element],
    viewport: Viewport,
    symbol_generator: Optional[SymbolGenerator] = None,
) -> Optional[bytes]:
    """Return PNG bytes of exactly ``viewport.width`` x ``viewport.height`` pixels.

    Returns ``None`` without allocating a surface when the viewport is
    degenerate. QR codes use the default symbol generator unless one is
    given.
    """

    if viewport.is_degenerate:
        LOGGER.warning(
            "Skipping render for degenerate canvas %sx%s", viewport.width, viewport.height
        )
        return None

    generator = symbol_generator or get_symbol_generator()

    buffer = BytesIO()
    canvas_obj = canvas.Canvas(
        buffer,
        pagesize=(viewport.width, viewport.height),
        bottomup=0,
    )

    canvas_obj.saveState()
    canvas_obj.setFillColor(colors.HexColor(viewport.background))
    canvas_obj.rect(0, 0, viewport.width, viewport.height, stroke=0, fill=1)

    if viewport.offset_x or viewport.offset_y:
        canvas_obj.translate(viewport.offset_x, viewport.offset_y)

    for element in elements:
        if isinstance(element, TextElement):
            _draw_text(canvas_obj, element)
        elif isinstance(element, BoxElement):
            _draw_box(canvas_obj, element)
        elif isinstance(element, BarcodeElement):
            _draw_barcode(canvas_obj, element)
        elif isinstance(element, QrcodeElement):
            _draw_qrcode(canvas_obj, element, generator)
        elif isinstance(element, ImageElement):
            _draw_image(canvas_obj, element)

    canvas_obj.restoreState()
    canvas_obj.showPage()
    canvas_obj.save()

    pdf_bytes = buffer.getvalue()
    with fitz.open(stream=pdf_bytes, filetype="pdf") as doc:
        page = doc.load_page(0)
        pix = page.get_pixmap(dpi=RASTER_DPI, alpha=False)
        return pix.tobytes("png")


def render_image(
    elements: Iterable[Element],
    viewport: Viewport,
    symbol_generator: Optional[SymbolGenerator] = None,
) -> Optional[Image.Image]:
    png_bytes = render_png(elements, viewport, symbol_generator)
    if png_bytes is None:
        return None
    with Image.open(BytesIO(png_bytes)) as img:
        return img.convert("RGB")


def _draw_text(canvas_obj: canvas.Canvas, element: TextElement) -> None:
    resolved = resolve_text(element.content, element.font_name)
    if not resolved.text:
        return
    ascent = text_ascent(resolved.font_name, element.font_size)

    canvas_obj.saveState()
    canvas_obj.setFillColor(INK)
    canvas_obj.setFont(resolved.font_name, element.font_size)
    canvas_obj.translate(element.x, element.y)
    if element.rotation.degrees:
        canvas_obj.rotate(element.rotation.degrees)
    # top of the em box sits on the anchor
    canvas_obj.drawString(0, ascent, resolved.text)
    canvas_obj.restoreState()


def _draw_box(canvas_obj: canvas.Canvas, element: BoxElement) -> None:
    canvas_obj.saveState()
    canvas_obj.setStrokeColor(INK)
    canvas_obj.setLineWidth(element.border_thickness)
    if element.is_rule:
        if element.height == 0:
            canvas_obj.line(element.x, element.y, element.x + element.width, element.y)
        else:
            canvas_obj.line(element.x, element.y, element.x, element.y + element.height)
    else:
        canvas_obj.rect(
            element.x, element.y, element.width, element.height, stroke=1, fill=0
        )
    canvas_obj.restoreState()


def _draw_barcode(canvas_obj: canvas.Canvas, element: BarcodeElement) -> None:
    bar_height = element.height or DEFAULT_BAR_HEIGHT
    module = shrink_module_width(element.content, element.module_width)

    canvas_obj.saveState()
    canvas_obj.setFillColor(INK)
    for left, width in bar_runs(element.content, element.x, module):
        canvas_obj.rect(left, element.y, width, bar_height, stroke=0, fill=1)
    canvas_obj.restoreState()


def _draw_qrcode(
    canvas_obj: canvas.Canvas,
    element: QrcodeElement,
    symbol_generator: SymbolGenerator,
) -> None:
    try:
        grid = symbol_generator.generate(element.content)
    except SymbolGenerationError as exc:
        LOGGER.warning("Skipping QR code at %s,%s: %s", element.x, element.y, exc)
        return

    module_count = grid.module_count
    if module_count == 0:
        return
    dot_size = element.dot_size if element.dot_size > 0 else DEFAULT_QR_DOT_SIZE
    base_size = element.size if element.size > 0 else module_count * dot_size
    size = base_size * QR_PREVIEW_SCALE
    cell = size / module_count

    canvas_obj.saveState()
    canvas_obj.setFillColor(INK)
    canvas_obj.rect(element.x, element.y, size, size, stroke=0, fill=1)
    # dark modules are the square showing through
    canvas_obj.setFillColor(PAPER)
    for row in range(module_count):
        for col in range(module_count):
            if not grid.is_dark(row, col):
                canvas_obj.rect(
                    element.x + col * cell,
                    element.y + row * cell,
                    cell,
                    cell,
                    stroke=0,
                    fill=1,
                )
    canvas_obj.restoreState()


def _draw_image(canvas_obj: canvas.Canvas, element: ImageElement) -> None:
    if element.width <= 0 or element.height <= 0 or not element.pixel_data:
        return
    expected = element.width * element.height * 4
    if len(element.pixel_data) != expected:
        LOGGER.warning(
            "Skipping image at %s,%s: expected %d RGBA bytes, got %d",
            element.x,
            element.y,
            expected,
            len(element.pixel_data),
        )
        return

    bitmap = Image.frombytes("RGBA", (element.width, element.height), element.pixel_data)
    canvas_obj.saveState()
    # images are placed bottom-up; flip locally so row 0 lands at element.y
    canvas_obj.translate(element.x, element.y + element.height)
    canvas_obj.scale(1, -1)
    canvas_obj.drawImage(
        ImageReader(bitmap),
        0,
        0,
        width=element.width,
        height=element.height,
        mask="auto",
    )
    canvas_obj.restoreState()
