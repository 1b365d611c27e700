"""QR symbol generator backed by the ``qrcode`` package."""

from __future__ import annotations

from functools import lru_cache

import qrcode
from qrcode.constants import ERROR_CORRECT_L
from qrcode.exceptions import DataOverflowError

from .base import SymbolGenerationError, SymbolGenerator, SymbolGrid


@lru_cache(maxsize=128)
def _build_grid(content: str) -> SymbolGrid:
    qr = qrcode.QRCode(version=None, error_correction=ERROR_CORRECT_L, border=0)
    try:
        qr.add_data(content)
        qr.make(fit=True)
    except (DataOverflowError, ValueError) as exc:
        raise SymbolGenerationError(
            f"Cannot encode {len(content)} characters as a QR code: {exc}"
        ) from exc
    return SymbolGrid.from_rows(qr.get_matrix())


class Generator(SymbolGenerator):
    """Smallest QR version that fits, low error correction, no quiet zone."""

    name = "qrcode"

    def generate(self, content: str) -> SymbolGrid:
        return _build_grid(content)
