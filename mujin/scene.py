"""Start positions and camera rectangles of the game's scenes."""

from __future__ import annotations

from mujin.letters import Rect

__all__ = ["SceneManager"]


def _checked(items: list, index: int, what: str):
    if not 0 <= index < len(items):
        raise IndexError(f"no {what} at index {index}")
    return items[index]


class SceneManager:
    """Keeps where the player starts in each scene and each scene's camera."""

    def __init__(self) -> None:
        self._startup_positions: list[tuple[int, int]] = [(64, 33)]
        self._cameras: list[Rect] = []

    def startup_position(self, index: int) -> tuple[int, int]:
        return _checked(self._startup_positions, index, "scene startup position")

    def scene_camera(self, index: int) -> Rect:
        return _checked(self._cameras, index, "scene camera")

    def add_scene_camera(self, rect: Rect) -> None:
        self._cameras.append(rect)