"""Document model shared by the interpreter, resolver and compositor."""

from __future__ import annotations

from dataclasses import dataclass
from enum import StrEnum
from typing import Union


class Rotation(StrEnum):
    """Field orientation letters accepted by the font and barcode directives."""

    NORMAL = "N"
    ROTATED = "R"
    INVERTED = "I"
    BOTTOM_UP = "B"

    @property
    def degrees(self) -> int:
        """Canvas rotation in degrees, clockwise positive."""

        return _ROTATION_DEGREES[self]

    @classmethod
    def from_code(cls, code: str, default: "Rotation") -> "Rotation":
        letter = (code or "")[:1].upper()
        if letter in cls._value2member_map_:
            return cls(letter)
        return default


_ROTATION_DEGREES = {
    Rotation.NORMAL: 0,
    Rotation.ROTATED: -90,
    Rotation.INVERTED: 180,
    Rotation.BOTTOM_UP: 90,
}


@dataclass(frozen=True)
class Token:
    """One directive: two-character code plus the raw argument remainder."""

    code: str
    arguments: str


@dataclass(frozen=True)
class TextElement:
    x: int
    y: int
    font_name: str
    font_size: int
    rotation: Rotation
    content: str


@dataclass(frozen=True)
class BoxElement:
    """Rectangle outline, or a rule when exactly one dimension is zero."""

    x: int
    y: int
    width: int
    height: int
    border_thickness: int

    @property
    def is_rule(self) -> bool:
        return self.width == 0 or self.height == 0


@dataclass(frozen=True)
class BarcodeElement:
    x: int
    y: int
    height: int
    module_width: int
    content: str


@dataclass(frozen=True)
class QrcodeElement:
    """Matrix code; ``size`` of 0 means derive it from the module grid."""

    x: int
    y: int
    dot_size: int
    content: str
    size: int = 0


@dataclass(frozen=True)
class ImageElement:
    """Bitmap at its origin; ``pixel_data`` is raw RGBA, empty for placeholders."""

    x: int
    y: int
    width: int
    height: int
    pixel_data: bytes = b""


Element = Union[TextElement, BoxElement, BarcodeElement, QrcodeElement, ImageElement]


@dataclass(frozen=True)
class PendingBarcode:
    height: int | None = None


@dataclass(frozen=True)
class PendingQrcode:
    pass


@dataclass(frozen=True)
class PendingImage:
    header: str = ""


PendingConstruct = Union[PendingBarcode, PendingQrcode, PendingImage, None]


@dataclass(frozen=True)
class LabelDocument:
    """Ordered elements (paint order) plus the declared label width, if any."""

    elements: tuple[Element, ...] = ()
    declared_width: int | None = None

    def __len__(self) -> int:
        return len(self.elements)

    def __iter__(self):
        return iter(self.elements)


__all__ = [
    "BarcodeElement",
    "BoxElement",
    "Element",
    "ImageElement",
    "LabelDocument",
    "PendingBarcode",
    "PendingConstruct",
    "PendingImage",
    "PendingQrcode",
    "QrcodeElement",
    "Rotation",
    "TextElement",
    "Token",
]
