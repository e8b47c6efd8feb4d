"""Collects textured quads, sorts them and groups them into draw batches."""

from __future__ import annotations

import enum
import math
from dataclasses import dataclass, field

__all__ = [
    "Color",
    "Vertex",
    "GlyphSortType",
    "RenderBatch",
    "Glyph",
    "SpriteBatch",
]

_VERTICES_PER_GLYPH = 6


def _channel(value: float) -> int:
    return max(0, min(255, int(value)))


@dataclass
class Color:
    """An RGBA colour with byte channels."""

    r: int = 0
    g: int = 0
    b: int = 0
    a: int = 255

    def __mul__(self, factor: float) -> "Color":
        return Color(
            _channel(self.r * factor),
            _channel(self.g * factor),
            _channel(self.b * factor),
            _channel(self.a * factor),
        )

    __rmul__ = __mul__

    def __add__(self, other: "Color") -> "Color":
        if not isinstance(other, Color):
            return NotImplemented
        return Color(
            _channel(self.r + other.r),
            _channel(self.g + other.g),
            _channel(self.b + other.b),
            _channel(self.a + other.a),
        )


@dataclass
class Vertex:
    position: tuple[float, float, float] = (0.0, 0.0, 0.0)
    color: Color = field(default_factory=lambda: Color(0, 0, 0, 0))
    uv: tuple[float, float] = (0.0, 0.0)


class GlyphSortType(enum.Enum):
    NONE = enum.auto()
    FRONT_TO_BACK = enum.auto()
    BACK_TO_FRONT = enum.auto()
    TEXTURE = enum.auto()


@dataclass
class RenderBatch:
    offset: int
    num_vertices: int
    texture: int


class Glyph:
    """A quad rotated about its centre by ``angle`` degrees."""

    def __init__(self, dest_rect, uv_rect, texture, depth, color, angle=0.0):
        self.texture = texture
        self.depth = depth

        x, y, w, h = dest_rect
        u, v, uw, vh = uv_rect
        cx = x + w / 2.0
        cy = y + h / 2.0
        radians = math.radians(angle)
        cos_a, sin_a = math.cos(radians), math.sin(radians)

        def corner(px, py, uv):
            dx, dy = px - cx, py - cy
            position = (
                cx + dx * cos_a - dy * sin_a,
                cy + dx * sin_a + dy * cos_a,
                depth,
            )
            return Vertex(position, color, uv)

        self.top_left = corner(x, y, (u, v))
        self.bottom_left = corner(x, y + h, (u, v + vh))
        self.bottom_right = corner(x + w, y + h, (u + uw, v + vh))
        self.top_right = corner(x + w, y, (u + uw, v))

    def vertices(self) -> tuple[Vertex, ...]:
        """The two triangles of the quad, six vertices."""
        return (
            self.top_left,
            self.bottom_left,
            self.bottom_right,
            self.bottom_right,
            self.top_right,
            self.top_left,
        )


_SORT_KEYS = {
    GlyphSortType.FRONT_TO_BACK: (lambda g: g.depth, False),
    GlyphSortType.BACK_TO_FRONT: (lambda g: g.depth, True),
    GlyphSortType.TEXTURE: (lambda g: g.texture, False),
}


class SpriteBatch:
    """Gathers glyphs between ``begin`` and ``end`` into render batches."""

    def __init__(self) -> None:
        self.sort_type = GlyphSortType.TEXTURE
        self._pending: list[Glyph] = []
        self.glyphs: list[Glyph] = []
        self.vertices: list[Vertex] = []
        self.render_batches: list[RenderBatch] = []

    def begin(self, sort_type: GlyphSortType = GlyphSortType.TEXTURE) -> None:
        self.sort_type = sort_type
        self.render_batches.clear()
        self._pending.clear()

    def draw(self, dest_rect, uv_rect, texture, depth, color, angle=0.0) -> None:
        self._pending.append(Glyph(dest_rect, uv_rect, texture, depth, color, angle))

    def end(self) -> None:
        """Sort the glyphs and build the vertex list and render batches."""
        self.glyphs = self._sorted(self._pending)
        self._create_render_batches()

    def _sorted(self, glyphs: list[Glyph]) -> list[Glyph]:
        if self.sort_type not in _SORT_KEYS:
            return list(glyphs)
        key, reverse = _SORT_KEYS[self.sort_type]
        return sorted(glyphs, key=key, reverse=reverse)

    def _create_render_batches(self) -> None:
        self.vertices = []
        if not self.glyphs:
            return
        first_texture = self.glyphs[0].texture
        offset = 0
        previous = None
        for glyph in self.glyphs:
            if previous is None or glyph.texture != previous.texture:
                # New batches take the first glyph's texture.
                self.render_batches.append(
                    RenderBatch(offset, _VERTICES_PER_GLYPH, first_texture)
                )
            else:
                self.render_batches[-1].num_vertices += _VERTICES_PER_GLYPH
            self.vertices.extend(glyph.vertices())
            offset += _VERTICES_PER_GLYPH
            previous = glyph