"""Abstract interface for matrix symbol generators."""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Sequence


class SymbolGenerationError(ValueError):
    """Raised when a generator cannot encode the requested content."""


@dataclass(frozen=True)
class SymbolGrid:
    """Square module grid; ``True`` marks a dark module."""

    modules: tuple[tuple[bool, ...], ...]

    @classmethod
    def from_rows(cls, rows: Sequence[Sequence[object]]) -> "SymbolGrid":
        grid = tuple(tuple(bool(cell) for cell in row) for row in rows)
        if any(len(row) != len(grid) for row in grid):
            raise SymbolGenerationError("Symbol grid must be square.")
        return cls(modules=grid)

    @property
    def module_count(self) -> int:
        return len(self.modules)

    def is_dark(self, row: int, col: int) -> bool:
        return self.modules[row][col]


class SymbolGenerator(ABC):
    """Turns content into a module grid; identical content gives identical grids."""

    name: str = ""

    @abstractmethod
    def generate(self, content: str) -> SymbolGrid:
        """Return the module grid for ``content``.

        Implementations raise :class:`SymbolGenerationError` when the
        content cannot be encoded.
        """
