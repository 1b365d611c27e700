"""Symbol generator loader for the label compositor."""

from __future__ import annotations

from importlib import import_module
from typing import Iterable

from .base import SymbolGenerationError, SymbolGenerator, SymbolGrid

_GENERATOR_MODULES = {"qrcode": "qr"}
DEFAULT_GENERATOR = "qrcode"


def get_symbol_generator(name: str = DEFAULT_GENERATOR) -> SymbolGenerator:
    """Instantiate the matrix symbol generator registered as ``name``."""

    key = name.lower()
    module_name = _GENERATOR_MODULES.get(key)
    if module_name is None:
        available = ", ".join(sorted(_GENERATOR_MODULES))
        raise ValueError(
            f"Unknown symbol generator '{name}'. Available generators: {available}"
        )

    module = import_module(f"{__name__}.{module_name}")
    generator_cls: type[SymbolGenerator] | None = getattr(module, "Generator", None)
    if not generator_cls or not issubclass(generator_cls, SymbolGenerator):
        raise ValueError(
            f"Generator module '{module_name}' does not export a valid Generator class"
        )
    return generator_cls()


def list_symbol_generators() -> Iterable[str]:
    """Return the generator identifiers."""

    return sorted(_GENERATOR_MODULES)


__all__ = [
    "DEFAULT_GENERATOR",
    "SymbolGenerationError",
    "SymbolGenerator",
    "SymbolGrid",
    "get_symbol_generator",
    "list_symbol_generators",
]
