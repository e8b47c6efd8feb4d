"""Line geometry for outlining boxes and circles while debugging."""

from __future__ import annotations

import math
from dataclasses import dataclass

from mujin.spritebatch import Color

__all__ = ["DebugVertex", "DebugRenderer", "NUM_CIRCLE_VERTS"]

NUM_CIRCLE_VERTS = 255


@dataclass
class DebugVertex:
    """A coloured point, without texture coordinates."""

    position: tuple[float, float]
    color: Color


class DebugRenderer:
    """Collects outline vertices and line indices until ``end`` closes the batch.

    Every pair of indices is one line segment.
    """

    def __init__(self) -> None:
        self._vertices: list[DebugVertex] = []
        self._indices: list[int] = []
        self.batch_vertices: tuple[DebugVertex, ...] = ()
        self.batch_indices: tuple[int, ...] = ()
        self.num_elements = 0

    @property
    def vertices(self) -> tuple[DebugVertex, ...]:
        """Vertices collected since the last ``end``."""
        return tuple(self._vertices)

    @property
    def indices(self) -> tuple[int, ...]:
        """Line indices collected since the last ``end``."""
        return tuple(self._indices)

    def end(self) -> None:
        """Close the batch: keep its geometry for drawing and start a new one."""
        self.batch_vertices = tuple(self._vertices)
        self.batch_indices = tuple(self._indices)
        self.num_elements = len(self._indices)
        self._vertices.clear()
        self._indices.clear()

    def draw_box(self, dest_rect, color: Color, angle: float) -> None:
        """Outline a rectangle (x, y, w, h) rotated ``angle`` degrees about its centre."""
        x, y, w, h = dest_rect
        cx = x + w / 2.0
        cy = y + h / 2.0
        radians = math.radians(angle)
        cos_a, sin_a = math.cos(radians), math.sin(radians)

        def rotate(px: float, py: float) -> tuple[float, float]:
            dx, dy = px - cx, py - cy
            return (cx + dx * cos_a - dy * sin_a, cy + dx * sin_a + dy * cos_a)

        start = len(self._vertices)
        corners = ((x, y + h), (x, y), (x + w, y), (x + w, y + h))
        self._vertices.extend(DebugVertex(rotate(px, py), color) for px, py in corners)
        for i in range(4):
            self._indices.extend((start + i, start + (i + 1) % 4))

    def draw_circle(self, center, color: Color, radius: float) -> None:
        """Outline a circle with a closed loop of ``NUM_CIRCLE_VERTS`` points."""
        cx, cy = center
        start = len(self._vertices)
        for i in range(NUM_CIRCLE_VERTS):
            angle = i / NUM_CIRCLE_VERTS * 2.0 * math.pi
            position = (math.cos(angle) * radius + cx, math.sin(angle) * radius + cy)
            self._vertices.append(DebugVertex(position, color))
        for i in range(NUM_CIRCLE_VERTS - 1):
            self._indices.extend((start + i, start + i + 1))
        self._indices.extend((start + NUM_CIRCLE_VERTS - 1, start))