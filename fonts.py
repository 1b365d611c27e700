# pyright: reportUnknownVariableType=false, reportUnknownMemberType=false
# pyright: reportMissingTypeStubs=false

"""Font management utilities for the label compositor."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from fontTools.ttLib import TTFont as FontToolsTTFont
from reportlab.pdfbase import pdfmetrics
from reportlab.pdfbase.cidfonts import UnicodeCIDFont
from reportlab.pdfbase.ttfonts import TTFont as ReportLabTTFont

from logger import get_logger

LOGGER = get_logger(__name__)

DEFAULT_FACE = "Helvetica"
CJK_FALLBACK_FACE = "STSong-Light"
STANDARD_ENCODING = "cp1252"

# Blocks the Adobe-GB1 CID face can draw
_CJK_RANGES = (
    (0x2E80, 0x2FDF),  # radicals
    (0x3000, 0x303F),  # CJK punctuation
    (0x3040, 0x30FF),  # kana
    (0x3100, 0x312F),  # bopomofo
    (0x3400, 0x4DBF),  # extension A
    (0x4E00, 0x9FFF),  # unified ideographs
    (0xF900, 0xFAFF),  # compatibility ideographs
    (0xFF00, 0xFFEF),  # full and half width forms
)


@dataclass(frozen=True)
class ResolvedText:
    font_name: str
    text: str


@dataclass(frozen=True)
class LocalTrueTypeFont:
    family_name: str
    font_name: str
    path: Path
    codepoints: frozenset[int]

    def covers(self, text: str) -> bool:
        return all(ord(ch) in self.codepoints for ch in text if not ch.isspace())


def _is_standard_encodable(text: str) -> bool:
    try:
        text.encode(STANDARD_ENCODING)
    except UnicodeEncodeError:
        return False
    return True


def _is_cjk_char(ch: str) -> bool:
    code = ord(ch)
    return any(low <= code <= high for low, high in _CJK_RANGES)


def _safe_font_name(family: str) -> str:
    cleaned = "".join(ch for ch in family if ch.isalnum() or ch == "-")
    return cleaned[:63] or "LabelFace"


class FontRegistry:
    """Resolve a reportlab font name able to draw a given piece of text."""

    def __init__(self) -> None:
        self._truetype: Optional[LocalTrueTypeFont] = None
        self._cid_registered = False

    @property
    def truetype(self) -> Optional[LocalTrueTypeFont]:
        return self._truetype

    def register_truetype(self, path: Path | str) -> LocalTrueTypeFont:
        """Load a TrueType face that takes precedence for text it covers."""

        font_path = Path(path).expanduser().resolve()
        if not font_path.exists():
            raise ValueError(f"Font file '{font_path}' is missing.")

        with FontToolsTTFont(str(font_path), lazy=True) as font:
            family = font["name"].getBestFamilyName() or font_path.stem
            cmap = font.getBestCmap() or {}
            codepoints = frozenset(cmap)

        font_name = _safe_font_name(family)
        pdfmetrics.registerFont(ReportLabTTFont(font_name, str(font_path)))
        self._truetype = LocalTrueTypeFont(
            family_name=family,
            font_name=font_name,
            path=font_path,
            codepoints=codepoints,
        )
        return self._truetype

    def clear_truetype(self) -> None:
        self._truetype = None

    def font_for(self, text: str, requested: str = DEFAULT_FACE) -> str:
        return self.resolve(text, requested).font_name

    def resolve(self, text: str, requested: str = DEFAULT_FACE) -> ResolvedText:
        """Pick a face for ``text``, dropping characters no available face can draw."""

        if self._truetype is not None and self._truetype.covers(text):
            return ResolvedText(self._truetype.font_name, text)

        drawable = "".join(ch for ch in text if _is_standard_encodable(ch) or _is_cjk_char(ch))
        if drawable != text:
            LOGGER.warning("Dropping characters without a usable glyph from %r", text)

        if _is_standard_encodable(drawable):
            face = requested if requested in pdfmetrics.standardFonts else DEFAULT_FACE
            return ResolvedText(face, drawable)
        return ResolvedText(self._cjk_face(), drawable)

    def _cjk_face(self) -> str:
        if not self._cid_registered:
            pdfmetrics.registerFont(UnicodeCIDFont(CJK_FALLBACK_FACE))
            self._cid_registered = True
        return CJK_FALLBACK_FACE


_REGISTRY = FontRegistry()


def get_font_registry() -> FontRegistry:
    return _REGISTRY


def resolve_text(text: str, requested: str = DEFAULT_FACE) -> ResolvedText:
    """Return the registered font name and the drawable part of ``text``."""

    return _REGISTRY.resolve(text, requested)


def text_ascent(font_name: str, font_size: float) -> float:
    """Distance from the top of the em box to the baseline."""

    return pdfmetrics.getAscent(font_name, font_size)


__all__ = [
    "CJK_FALLBACK_FACE",
    "DEFAULT_FACE",
    "FontRegistry",
    "LocalTrueTypeFont",
    "ResolvedText",
    "get_font_registry",
    "resolve_text",
    "text_ascent",
]
