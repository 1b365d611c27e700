"""Host-side configuration and a headless preview session."""

from __future__ import annotations

import os
from dataclasses import dataclass, replace
from pathlib import Path
from typing import Mapping, Optional

from dotenv import load_dotenv

from fonts import get_font_registry
from label_preview import MAX_PREVIEW_HEIGHT, MAX_PREVIEW_WIDTH, PreviewResult, render_preview
from logger import get_logger
from units import Density, Unit, convert, to_dots, to_unit
from zpl_dimensions import LabelDimensions, resolve_dimensions
from zpl_interpreter import interpret
from zpl_render import SymbolGenerator, get_symbol_generator
from zpl_types import LabelDocument

LOGGER = get_logger(__name__)

_TRUE_VALUES = {"1", "true", "yes", "on"}
_FALSE_VALUES = {"0", "false", "no", "off"}


@dataclass(frozen=True)
class PreviewConfig:
    """Display settings supplied by the host."""

    dpi: Density = Density.DPI_203
    unit: Unit = Unit.MILLIMETER
    label_width: Optional[float] = 76.0
    label_height: Optional[float] = 130.0
    max_preview_width: int = MAX_PREVIEW_WIDTH
    max_preview_height: int = MAX_PREVIEW_HEIGHT
    center_content: bool = True
    font_path: Optional[Path] = None

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> "PreviewConfig":
        """Build a config from ``ZPL_PREVIEW_*`` variables (``.env`` is loaded first)."""

        if environ is None:
            load_dotenv()
            environ = os.environ

        defaults = cls()
        font = (environ.get("ZPL_PREVIEW_FONT") or "").strip()
        return cls(
            dpi=_env_density(environ, "ZPL_PREVIEW_DPI", defaults.dpi),
            unit=_env_unit(environ, "ZPL_PREVIEW_UNIT", defaults.unit),
            label_width=_env_float(environ, "ZPL_PREVIEW_WIDTH", defaults.label_width),
            label_height=_env_float(environ, "ZPL_PREVIEW_HEIGHT", defaults.label_height),
            max_preview_width=_env_int(
                environ, "ZPL_PREVIEW_MAX_WIDTH", defaults.max_preview_width),
            max_preview_height=_env_int(
                environ, "ZPL_PREVIEW_MAX_HEIGHT", defaults.max_preview_height),
            center_content=_env_bool(
                environ, "ZPL_PREVIEW_CENTER", defaults.center_content),
            font_path=Path(font) if font else None,
        )

    @property
    def width_dots(self) -> Optional[float]:
        if self.label_width is None:
            return None
        return to_dots(self.label_width, self.unit, self.dpi)

    @property
    def height_dots(self) -> Optional[float]:
        if self.label_height is None:
            return None
        return to_dots(self.label_height, self.unit, self.dpi)


def _env_value(environ: Mapping[str, str], name: str) -> Optional[str]:
    value = environ.get(name)
    if value is None or not value.strip():
        return None
    return value.strip()


def _env_density(environ: Mapping[str, str], name: str, default: Density) -> Density:
    value = _env_value(environ, name)
    if value is None:
        return default
    try:
        return Density.parse(value)
    except ValueError as exc:
        raise ValueError(f"{name}: {exc}") from exc


def _env_unit(environ: Mapping[str, str], name: str, default: Unit) -> Unit:
    value = _env_value(environ, name)
    if value is None:
        return default
    try:
        return Unit.parse(value)
    except ValueError as exc:
        raise ValueError(f"{name}: {exc}") from exc


def _env_float(
    environ: Mapping[str, str], name: str, default: Optional[float]
) -> Optional[float]:
    value = _env_value(environ, name)
    if value is None:
        return default
    try:
        parsed = float(value)
    except ValueError as exc:
        raise ValueError(f"{name}: expected a number, got '{value}'") from exc
    if parsed <= 0:
        raise ValueError(f"{name}: expected a positive number, got '{value}'")
    return parsed


def _env_int(environ: Mapping[str, str], name: str, default: int) -> int:
    value = _env_value(environ, name)
    if value is None:
        return default
    try:
        parsed = int(value)
    except ValueError as exc:
        raise ValueError(f"{name}: expected an integer, got '{value}'") from exc
    if parsed <= 0:
        raise ValueError(f"{name}: expected a positive integer, got '{value}'")
    return parsed


def _env_bool(environ: Mapping[str, str], name: str, default: bool) -> bool:
    value = _env_value(environ, name)
    if value is None:
        return default
    lowered = value.lower()
    if lowered in _TRUE_VALUES:
        return True
    if lowered in _FALSE_VALUES:
        return False
    raise ValueError(f"{name}: expected a boolean, got '{value}'")


class PreviewSession:
    """Holds the latest host inputs; each ``render`` is one synchronous pass."""

    def __init__(
        self,
        config: Optional[PreviewConfig] = None,
        text: str = "",
        symbol_generator: Optional[SymbolGenerator] = None,
    ) -> None:
        self.config = config or PreviewConfig()
        self.text = text
        self._generator = symbol_generator or get_symbol_generator()
        if self.config.font_path is not None:
            get_font_registry().register_truetype(self.config.font_path)

    def set_text(self, text: str) -> None:
        """Store new label text and adopt the size it implies, in the current unit."""

        self.text = text
        dims = resolve_dimensions(text, self._generator)
        if dims.width > 0 and dims.height > 0:
            self.config = replace(
                self.config,
                label_width=to_unit(dims.width, self.config.unit, self.config.dpi),
                label_height=to_unit(dims.height, self.config.unit, self.config.dpi),
            )

    def set_unit(self, unit: Unit | str) -> None:
        """Switch units while keeping the physical label size."""

        new_unit = Unit.parse(unit)
        cfg = self.config
        width = cfg.label_width
        height = cfg.label_height
        if width is not None and height is not None:
            width = convert(width, cfg.unit, new_unit, cfg.dpi)
            height = convert(height, cfg.unit, new_unit, cfg.dpi)
        self.config = replace(cfg, unit=new_unit, label_width=width, label_height=height)

    def set_density(self, dpi: Density | int | str) -> None:
        """Change print density only; a physical size then covers more dots."""

        self.config = replace(self.config, dpi=Density.parse(dpi))

    def set_size(self, width: Optional[float], height: Optional[float]) -> None:
        self.config = replace(self.config, label_width=width, label_height=height)

    def set_max_preview(self, width: int, height: int) -> None:
        self.config = replace(self.config, max_preview_width=width, max_preview_height=height)

    def document(self) -> LabelDocument:
        return interpret(self.text)

    def dimensions_dots(self) -> LabelDimensions:
        """Logical size for the next pass: configured size, else the implied one."""

        resolved = resolve_dimensions(self.text, self._generator)
        width = self.config.width_dots
        height = self.config.height_dots
        return LabelDimensions(
            width=width if width is not None and width > 0 else resolved.width,
            height=height if height is not None and height > 0 else resolved.height,
        )

    def render(self) -> Optional[PreviewResult]:
        cfg = self.config
        return render_preview(
            self.text,
            cfg.width_dots,
            cfg.height_dots,
            center=cfg.center_content,
            max_preview=(cfg.max_preview_width, cfg.max_preview_height),
            symbol_generator=self._generator,
        )
