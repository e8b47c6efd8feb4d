"""Glyph rectangles for the bitmap font atlas."""

from __future__ import annotations

from dataclasses import dataclass

__all__ = ["Rect", "letter_rect", "UNSUPPORTED_RECT"]


@dataclass(frozen=True)
class Rect:
    """An integer rectangle: position and size in pixels."""

    x: int
    y: int
    w: int
    h: int


_GLYPH_HEIGHT = 20

_LOWERCASE = (
    ("a", 0, 10), ("b", 10, 10), ("c", 20, 10), ("d", 30, 10),
    ("e", 40, 10), ("f", 50, 5), ("g", 55, 10), ("h", 65, 10),
    ("i", 75, 3), ("j", 80, 3), ("k", 83, 8), ("l", 91, 5),
    ("m", 96, 15), ("n", 110, 10), ("o", 120, 10), ("p", 130, 10),
    ("q", 140, 10), ("r", 150, 7), ("s", 157, 9), ("t", 166, 5),
    ("u", 171, 10), ("v", 181, 9), ("w", 190, 12), ("x", 202, 10),
    ("y", 212, 9), ("z", 221, 9),
)

_UPPERCASE = (
    ("A", 0, 12), ("B", 12, 12), ("C", 24, 13), ("D", 37, 12),
    ("E", 49, 13), ("F", 62, 12), ("G", 74, 13), ("H", 87, 13),
    ("I", 100, 5), ("J", 105, 9), ("K", 113, 13), ("L", 126, 11),
    ("M", 137, 14), ("N", 151, 13), ("O", 164, 14), ("P", 178, 12),
    ("Q", 190, 14), ("R", 204, 14), ("S", 217, 12), ("T", 229, 12),
    ("U", 241, 12), ("V", 253, 12), ("W", 265, 17), ("X", 282, 12),
    ("Y", 294, 12), ("Z", 306, 11),
)

_PUNCTUATION = ".:,;(*!?}^)#${%&-+@"
_PUNCTUATION_RECT = Rect(10, 106, 20, 20)
_SPACE_RECT = Rect(300, 0, 12, 20)

UNSUPPORTED_RECT = Rect(0, 0, 0, 10)

_GLYPHS: dict[str, Rect] = {}
_GLYPHS.update({c: Rect(x, 0, w, _GLYPH_HEIGHT) for c, x, w in _LOWERCASE})
_GLYPHS.update({c: Rect(x, 20, w, _GLYPH_HEIGHT) for c, x, w in _UPPERCASE})
_GLYPHS.update({str(d): Rect(10 * d, 40, 10, _GLYPH_HEIGHT) for d in range(10)})
_GLYPHS.update({c: _PUNCTUATION_RECT for c in _PUNCTUATION})
_GLYPHS[" "] = _SPACE_RECT


def letter_rect(letter: str) -> Rect:
    """Return the atlas rectangle of one character.

    Characters the font does not hold map to a zero-width rectangle.
    """
    if not isinstance(letter, str) or len(letter) != 1:
        raise ValueError(f"expected a single character, got {letter!r}")
    return _GLYPHS.get(letter, UNSUPPORTED_RECT)