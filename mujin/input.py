"""Keyboard and mouse state tracking."""

from __future__ import annotations

__all__ = ["InputManager"]


class InputManager:
    """Tracks which keys are held, which were held last frame, and the mouse."""

    def __init__(self) -> None:
        self._keys: dict[int, bool] = {}
        self._previous: dict[int, bool] = {}
        self._mouse: tuple[float, float] = (0.0, 0.0)

    def update(self) -> None:
        """Remember the current key state as the previous frame's."""
        self._previous.update(self._keys)

    def press_key(self, key: int) -> None:
        self._keys[key] = True

    def release_key(self, key: int) -> None:
        self._keys[key] = False

    def is_key_down(self, key: int) -> bool:
        """True while the key is held down."""
        return self._keys.get(key, False)

    def is_key_pressed(self, key: int) -> bool:
        """True only on the frame the key went down."""
        return self.is_key_down(key) and not self._was_key_down(key)

    def _was_key_down(self, key: int) -> bool:
        return self._previous.get(key, False)

    def check_mouse_collision(self, position, size) -> bool:
        """True if the mouse lies strictly inside the given rectangle."""
        px, py = position
        width, height = size
        mx, my = self._mouse
        return px < mx < px + width and py < my < py + height

    def set_mouse_coords(self, x: float, y: float) -> None:
        self._mouse = (float(x), float(y))

    @property
    def mouse_coords(self) -> tuple[float, float]:
        return self._mouse