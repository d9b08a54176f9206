"""Ordered mapping from characters to glyph indexes."""

from __future__ import annotations

from typing import Iterator

__all__ = ["CharacterGlyphMap"]


class CharacterGlyphMap:
    """Keeps characters and their glyph indexes in insertion order."""

    def __init__(self) -> None:
        self._positions: dict[str, int] = {}
        self._keys: list[str] = []
        self._values: list[int] = []

    def set(self, char: str, glyph: int) -> None:
        """Append ``char`` with its glyph index."""
        self._positions[char] = len(self._keys)
        self._keys.append(char)
        self._values.append(glyph)

    def index(self, char: str) -> int:
        """Return the position of ``char``; raise KeyError if it is absent."""
        return self._positions[char]

    def glyph(self, char: str) -> int:
        """Return the glyph index of ``char``; raise KeyError if it is absent."""
        return self._values[self._positions[char]]

    def keys(self) -> list[str]:
        """All characters in insertion order."""
        return list(self._keys)

    def values(self) -> list[int]:
        """All glyph indexes in insertion order."""
        return list(self._values)

    def __contains__(self, char: object) -> bool:
        return char in self._positions

    def __len__(self) -> int:
        return len(self._keys)

    def __iter__(self) -> Iterator[str]:
        return iter(list(self._keys))