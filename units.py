"""Conversions between physical label units and printer dots."""

from __future__ import annotations

from enum import IntEnum, StrEnum

MM_PER_INCH = 25.4
CM_PER_INCH = 2.54


class Unit(StrEnum):
    MILLIMETER = "mm"
    CENTIMETER = "cm"
    INCH = "inches"
    DOTS = "dots"

    @classmethod
    def parse(cls, value: "str | Unit") -> "Unit":
        key = str(value).strip().lower()
        if key in ("in", "inch"):
            key = cls.INCH.value
        if key not in cls._value2member_map_:
            available = ", ".join(u.value for u in cls)
            raise ValueError(f"Unknown unit '{value}'. Available: {available}")
        return cls(key)


class Density(IntEnum):
    """Print densities offered for preview, in dots per inch."""

    DPI_152 = 152
    DPI_203 = 203
    DPI_300 = 300
    DPI_600 = 600

    @property
    def dots_per_mm(self) -> float:
        return self.value / MM_PER_INCH

    @classmethod
    def parse(cls, value: "int | str") -> "Density":
        try:
            dpi = int(str(value).strip())
        except ValueError as exc:
            raise ValueError(f"Invalid print density '{value}'") from exc
        if dpi not in cls._value2member_map_:
            available = ", ".join(str(d.value) for d in cls)
            raise ValueError(f"Unsupported print density {dpi}. Available: {available}")
        return cls(dpi)


def dots_per_unit(unit: "Unit | str", dpi: float) -> float:
    """Return how many dots make up one ``unit`` at ``dpi``."""

    if dpi <= 0:
        raise ValueError(f"Print density must be positive, got {dpi}")
    unit = Unit.parse(unit)
    if unit is Unit.MILLIMETER:
        return dpi / MM_PER_INCH
    if unit is Unit.CENTIMETER:
        return dpi / CM_PER_INCH
    if unit is Unit.INCH:
        return float(dpi)
    return 1.0


def to_dots(value: float, unit: "Unit | str", dpi: float) -> float:
    """Convert ``value`` expressed in ``unit`` to dots. No rounding is applied."""

    if Unit.parse(unit) is Unit.DOTS:
        return value
    return value * dots_per_unit(unit, dpi)


def to_unit(dots: float, unit: "Unit | str", dpi: float) -> float:
    """Convert ``dots`` back into ``unit``; the inverse of :func:`to_dots`."""

    if Unit.parse(unit) is Unit.DOTS:
        return dots
    return dots / dots_per_unit(unit, dpi)


def convert(value: float, source: "Unit | str", target: "Unit | str", dpi: float) -> float:
    """Re-express a physical length in another unit at the same density."""

    return to_unit(to_dots(value, source, dpi), target, dpi)
