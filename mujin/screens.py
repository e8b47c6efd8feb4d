"""Game screens and the list that moves between them."""

from __future__ import annotations

import enum
from abc import ABC, abstractmethod
from typing import Any, Optional

__all__ = [
    "ScreenState",
    "GameScreen",
    "ScreenList",
    "SCREEN_INDEX_NO_SCREEN",
    "SCREEN_INDEX_MAIN_MENU",
    "SCREEN_INDEX_GAMEPLAY",
]

SCREEN_INDEX_NO_SCREEN = -1
SCREEN_INDEX_MAIN_MENU = 0
SCREEN_INDEX_GAMEPLAY = 1


class ScreenState(enum.Enum):
    NONE = enum.auto()
    RUNNING = enum.auto()
    EXIT_APPLICATION = enum.auto()
    CHANGE_NEXT = enum.auto()
    CHANGE_PREVIOUS = enum.auto()


class GameScreen(ABC):
    """One screen of a game: a menu, the gameplay view, and so on."""

    def __init__(self) -> None:
        self.state = ScreenState.NONE
        self.game: Any = None
        self.screen_index = SCREEN_INDEX_NO_SCREEN
        self.render_debug = False

    @abstractmethod
    def next_screen_index(self) -> int:
        """Index of the screen to move to on CHANGE_NEXT."""

    @abstractmethod
    def previous_screen_index(self) -> int:
        """Index of the screen to move to on CHANGE_PREVIOUS."""

    @abstractmethod
    def build(self) -> None:
        """Called once when the screen is added."""

    @abstractmethod
    def destroy(self) -> None:
        """Called once when the screen list is torn down."""

    @abstractmethod
    def on_entry(self) -> None:
        """Called when the screen gains focus."""

    @abstractmethod
    def on_exit(self) -> None:
        """Called when the screen loses focus."""

    @abstractmethod
    def update(self, delta_time: float) -> None: ...

    @abstractmethod
    def draw(self) -> None: ...

    @abstractmethod
    def update_ui(self) -> None: ...

    def set_running(self) -> None:
        self.state = ScreenState.RUNNING


class ScreenList:
    """Ordered screens of a game and the index of the current one."""

    def __init__(self, game: Any = None) -> None:
        self._game = game
        self._screens: list[GameScreen] = []
        self._current_index = SCREEN_INDEX_NO_SCREEN

    @property
    def screens(self) -> tuple[GameScreen, ...]:
        return tuple(self._screens)

    def _require_current(self) -> GameScreen:
        screen = self.current()
        if screen is None:
            raise RuntimeError("no current screen")
        return screen

    def move_next(self) -> Optional[GameScreen]:
        """Switch to the current screen's next screen, if it names one."""
        index = self._require_current().next_screen_index()
        if index != SCREEN_INDEX_NO_SCREEN:
            self._current_index = index
        return self.current()

    def move_previous(self) -> Optional[GameScreen]:
        """Switch to the current screen's previous screen, if it names one."""
        index = self._require_current().previous_screen_index()
        if index != SCREEN_INDEX_NO_SCREEN:
            self._current_index = index
        return self.current()

    def set_screen(self, index: int) -> None:
        self._current_index = index

    def add_screen(self, screen: GameScreen) -> None:
        """Append a screen, build it and attach it to the game."""
        screen.screen_index = len(self._screens)
        self._screens.append(screen)
        screen.build()
        screen.game = self._game

    def destroy(self) -> None:
        """Destroy every screen and forget them."""
        for screen in self._screens:
            screen.destroy()
        self._screens.clear()
        self._current_index = SCREEN_INDEX_NO_SCREEN

    def current(self) -> Optional[GameScreen]:
        if self._current_index == SCREEN_INDEX_NO_SCREEN:
            return None
        return self._screens[self._current_index]