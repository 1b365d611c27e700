"""Fold ZPL directives into a document model of positioned elements."""

from __future__ import annotations

import math
import re
from dataclasses import dataclass, replace
from typing import Callable, Dict, Iterable, List, Optional, Sequence, Tuple

from logger import get_logger
from zpl_tokenizer import tokenize
from zpl_types import (
    BarcodeElement,
    BoxElement,
    Element,
    ImageElement,
    LabelDocument,
    PendingBarcode,
    PendingConstruct,
    PendingImage,
    PendingQrcode,
    QrcodeElement,
    Rotation,
    TextElement,
    Token,
)

LOGGER = get_logger(__name__)

DEFAULT_FONT = "Helvetica"
DEFAULT_FONT_SIZE = 16
DEFAULT_MODULE_WIDTH = 2
DEFAULT_BARCODE_HEIGHT = 80
DEFAULT_QR_MAGNIFICATION = 4
DEFAULT_IMAGE_SIZE = 80

_LEADING_INT = re.compile(r"^\s*([+-]?\d+)")

# Mode prefixes seen in front of QR field data, e.g. "D03040C,LA,<payload>".
_QR_STRUCTURED_PREFIX = re.compile(r"^[A-Za-z]\d+[A-Za-z]*,(?:[A-Za-z]+,)?")
_QR_MODE_PREFIX = re.compile(r"^[A-Za-z]{1,2},")

_IGNORED_CODES = frozenset({"CI", "MM", "CW"})


def parse_int(value: Optional[str], default: Optional[int] = None) -> Optional[int]:
    """Parse the leading integer of ``value``; ``default`` when there is none."""

    if not value:
        return default
    match = _LEADING_INT.match(value)
    if match is None:
        return default
    return int(match.group(1))


def split_arguments(arguments: str) -> List[str]:
    return arguments.split(",")


def _arg(parts: Sequence[str], index: int) -> str:
    return parts[index] if index < len(parts) else ""


def _first_present(parts: Sequence[str], *indexes: int, fallback: str) -> str:
    """Return the first non-empty argument among ``indexes``, else ``fallback``."""

    for index in indexes:
        value = _arg(parts, index)
        if value:
            return value
    return fallback


def clean_qr_payload(content: str) -> str:
    """Strip a leading QR mode indicator from field data.

    Best-effort: any payload that happens to start like a mode prefix is
    trimmed the same way.
    """

    match = _QR_STRUCTURED_PREFIX.match(content)
    if match is None:
        match = _QR_MODE_PREFIX.match(content)
    if match is None:
        return content
    return content[match.end():]


@dataclass(frozen=True)
class InterpreterState:
    """Everything a directive may read or change while a label is parsed."""

    origin_x: int = 0
    origin_y: int = 0
    cursor_x: int = 0
    cursor_y: int = 0
    font_name: str = DEFAULT_FONT
    font_size: int = DEFAULT_FONT_SIZE
    rotation: Rotation = Rotation.NORMAL
    module_width: int = DEFAULT_MODULE_WIDTH
    barcode_height: int = DEFAULT_BARCODE_HEIGHT
    qr_magnification: int = DEFAULT_QR_MAGNIFICATION
    declared_width: Optional[int] = None
    pending: PendingConstruct = None
    pending_content: Optional[str] = None


Step = Tuple[InterpreterState, Optional[Element]]
Handler = Callable[[InterpreterState, str], Step]


def _label_home(state: InterpreterState, arguments: str) -> Step:
    parts = split_arguments(arguments)
    return (
        replace(
            state,
            origin_x=parse_int(_arg(parts, 0), 0),
            origin_y=parse_int(_arg(parts, 1), 0),
        ),
        None,
    )


def _field_origin(state: InterpreterState, arguments: str) -> Step:
    parts = split_arguments(arguments)
    return (
        replace(
            state,
            cursor_x=parse_int(_arg(parts, 0), 0) + state.origin_x,
            cursor_y=parse_int(_arg(parts, 1), 0) + state.origin_y,
        ),
        None,
    )


def _print_width(state: InterpreterState, arguments: str) -> Step:
    width = parse_int(_arg(split_arguments(arguments), 0))
    if width is None or width <= 0:
        return state, None
    return replace(state, declared_width=width), None


def _font_select(state: InterpreterState, arguments: str) -> Step:
    # ^A@o,h,w,f
    parts = split_arguments(arguments)
    size = parse_int(_arg(parts, 1))
    return (
        replace(
            state,
            rotation=Rotation.from_code(_arg(parts, 0), Rotation.NORMAL),
            font_size=size if size is not None and size > 0 else state.font_size,
            font_name=DEFAULT_FONT,
        ),
        None,
    )


def _default_font(state: InterpreterState, arguments: str) -> Step:
    parts = split_arguments(arguments)
    if len(parts) < 2:
        return state, None
    size = parse_int(parts[1])
    if size is None or size <= 0:
        return state, None
    return replace(state, font_size=size), None


def _barcode_defaults(state: InterpreterState, arguments: str) -> Step:
    # ^BYw,r,h
    parts = split_arguments(arguments)
    module_width = parse_int(_first_present(parts, 0, fallback="2"))
    height = parse_int(_first_present(parts, 2, 1, fallback="80"))
    if module_width is not None and module_width > 0:
        state = replace(state, module_width=module_width)
    if height is not None and height > 0:
        state = replace(state, barcode_height=height)
    return state, None


def _begin_barcode(state: InterpreterState, arguments: str) -> Step:
    # ^BCo,h,f,g,e,m
    parts = split_arguments(arguments)
    height = parse_int(_arg(parts, 1))
    return (
        replace(
            state,
            rotation=Rotation.from_code(_arg(parts, 0), state.rotation),
            pending=PendingBarcode(height=height if height is not None and height > 0 else None),
        ),
        None,
    )


def _begin_qrcode(state: InterpreterState, arguments: str) -> Step:
    # ^BQa,b,c: magnification is the third field, or the second when it is absent
    parts = split_arguments(arguments)
    magnification = parse_int(_first_present(parts, 2, 1, fallback=str(DEFAULT_QR_MAGNIFICATION)))
    if magnification is None or magnification <= 0:
        magnification = DEFAULT_QR_MAGNIFICATION
    return replace(state, qr_magnification=magnification, pending=PendingQrcode()), None


def _graphic_box(state: InterpreterState, arguments: str) -> Step:
    # ^GBw,h,t,c,r
    parts = split_arguments(arguments)
    box = BoxElement(
        x=state.cursor_x,
        y=state.cursor_y,
        width=parse_int(_arg(parts, 0), 0),
        height=parse_int(_arg(parts, 1), 0),
        border_thickness=parse_int(_first_present(parts, 2, fallback="1"), 1),
    )
    return state, box


def _graphic_field(state: InterpreterState, arguments: str) -> Step:
    # ^GFa,b,c,d,data: b total bytes, c field bytes, d bytes per row
    parts = split_arguments(arguments)
    header = ",".join(parts[:4])
    total_bytes = parse_int(_first_present(parts, 1, fallback="0"), 0)
    bytes_per_row = parse_int(_first_present(parts, 3, fallback="0"), 0)
    if bytes_per_row > 0:
        width = bytes_per_row * 8
    else:
        width = DEFAULT_IMAGE_SIZE
    if bytes_per_row > 0 and total_bytes > 0:
        height = max(1, math.ceil(total_bytes / bytes_per_row))
    else:
        height = DEFAULT_IMAGE_SIZE
    image = ImageElement(x=state.cursor_x, y=state.cursor_y, width=width, height=height)
    return replace(state, pending=PendingImage(header=header)), image


def _field_data(state: InterpreterState, arguments: str) -> Step:
    return replace(state, pending_content=arguments), None


def _field_separator(state: InterpreterState, arguments: str) -> Step:
    content = state.pending_content
    pending = state.pending
    cleared = replace(state, pending=None, pending_content=None)
    if content is None:
        return cleared, None

    if isinstance(pending, PendingBarcode):
        return cleared, BarcodeElement(
            x=state.cursor_x,
            y=state.cursor_y,
            height=pending.height or state.barcode_height,
            module_width=state.module_width,
            content=content,
        )
    if isinstance(pending, PendingQrcode):
        return cleared, QrcodeElement(
            x=state.cursor_x,
            y=state.cursor_y,
            dot_size=state.qr_magnification,
            content=clean_qr_payload(content),
        )
    return cleared, TextElement(
        x=state.cursor_x,
        y=state.cursor_y,
        font_name=state.font_name,
        font_size=state.font_size,
        rotation=state.rotation,
        content=content,
    )


_HANDLERS: Dict[str, Handler] = {
    "LH": _label_home,
    "FO": _field_origin,
    "PW": _print_width,
    "A@": _font_select,
    "CF": _default_font,
    "BY": _barcode_defaults,
    "BC": _begin_barcode,
    "BQ": _begin_qrcode,
    "GB": _graphic_box,
    "GF": _graphic_field,
    "FD": _field_data,
    "FS": _field_separator,
}


def apply_token(state: InterpreterState, token: Token) -> Step:
    """Apply one directive, returning the new state and any emitted element."""

    handler = _HANDLERS.get(token.code)
    if handler is None:
        if token.code not in _IGNORED_CODES:
            LOGGER.debug("Skipping unsupported directive ^%s", token.code)
        return state, None
    return handler(state, token.arguments)


def interpret_tokens(tokens: Iterable[Token]) -> LabelDocument:
    """Run the directive fold over ``tokens`` from a fresh state."""

    state = InterpreterState()
    elements: List[Element] = []
    for token in tokens:
        state, element = apply_token(state, token)
        if element is not None:
            elements.append(element)

    if state.pending is not None or state.pending_content is not None:
        LOGGER.debug("Discarding unterminated field at end of label: %r", state.pending)

    return LabelDocument(elements=tuple(elements), declared_width=state.declared_width)


def interpret(text: Optional[str]) -> LabelDocument:
    """Parse raw ZPL text into a :class:`LabelDocument`."""

    return interpret_tokens(tokenize(text))


def parse_zpl(text: Optional[str]) -> List[Element]:
    """Return only the ordered elements of ``text``."""

    return list(interpret(text).elements)


__all__ = [
    "DEFAULT_FONT",
    "InterpreterState",
    "apply_token",
    "clean_qr_payload",
    "interpret",
    "interpret_tokens",
    "parse_int",
    "parse_zpl",
]
