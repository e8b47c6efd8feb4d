"""The main game loop, its window and the events it reacts to."""

from __future__ import annotations

import enum
import time
from dataclasses import dataclass
from typing import Callable, Optional

from mujin.input import InputManager
from mujin.screens import GameScreen, ScreenList, ScreenState
from mujin.timing import FPSLimiter

__all__ = [
    "WindowFlags",
    "Window",
    "EventType",
    "Event",
    "MainGame",
    "DESIRED_FPS",
    "DESIRED_FRAME_TIME",
    "MAX_PHYSICS_STEPS",
    "MAX_DELTA_TIME",
    "KEY_ESCAPE",
]

DESIRED_FPS = 60.0
MS_PER_SECOND = 1000.0
DESIRED_FRAME_TIME = MS_PER_SECOND / DESIRED_FPS
MAX_PHYSICS_STEPS = 6
MAX_DELTA_TIME = 1.0
FPS_REPORT_INTERVAL = 10

KEY_ESCAPE = 27


class WindowFlags(enum.IntFlag):
    INVISIBLE = 0x1
    VISIBLE = 0x2
    FULLSCREEN = 0x4
    BORDERLESS = 0x8


@dataclass
class Window:
    """The game window's size, scale and display options."""

    name: str = ""
    screen_width: int = 0
    screen_height: int = 0
    scale: float = 1.0
    resizable: bool = True
    hidden: bool = False
    fullscreen: bool = False
    borderless: bool = False
    created: bool = False
    frames_presented: int = 0

    def create(
        self,
        name: str,
        screen_width: int,
        screen_height: int,
        scale: float = 1.0,
        flags: WindowFlags = WindowFlags.VISIBLE,
    ) -> None:
        """Set the window up; the stored size is the requested size times ``scale``."""
        flags = WindowFlags(flags)
        self.name = name
        self.screen_width = int(screen_width * scale)
        self.screen_height = int(screen_height * scale)
        self.scale = scale
        self.resizable = True
        self.hidden = bool(flags & WindowFlags.INVISIBLE)
        self.fullscreen = bool(flags & WindowFlags.FULLSCREEN)
        self.borderless = bool(flags & WindowFlags.BORDERLESS)
        self.created = True

    def swap_buffer(self) -> None:
        """Present the finished frame."""
        self.frames_presented += 1


class EventType(enum.Enum):
    QUIT = enum.auto()
    KEY_DOWN = enum.auto()
    KEY_UP = enum.auto()
    MOUSE_MOTION = enum.auto()
    MOUSE_BUTTON_DOWN = enum.auto()
    MOUSE_BUTTON_UP = enum.auto()
    WINDOW_RESIZED = enum.auto()


@dataclass(frozen=True)
class Event:
    """An input or window event; only the fields of its type are meaningful."""

    type: EventType
    key: int = 0
    button: int = 0
    x: float = 0.0
    y: float = 0.0
    width: int = 0
    height: int = 0


def _default_clock() -> float:
    return time.monotonic() * MS_PER_SECOND


class MainGame:
    """Runs a list of screens in a fixed-step update loop.

    Subclasses register their screens in ``add_screens``. ``clock``
    returns milliseconds.
    """

    def __init__(
        self,
        clock: Optional[Callable[[], float]] = None,
        limiter: Optional[FPSLimiter] = None,
    ) -> None:
        self.clock = clock if clock is not None else _default_clock
        self.limiter = limiter if limiter is not None else FPSLimiter(DESIRED_FPS)
        self.input = InputManager()
        self.window = Window()
        self.screen_list: Optional[ScreenList] = ScreenList(self)
        self.current_screen: Optional[GameScreen] = None
        self.is_running = False
        self.fps = 0.0
        self._frame_counter = 0

    def on_init(self) -> None:
        """Called once the window exists, before the screens are added."""

    def add_screens(self) -> None:
        """Register the game's screens with ``self.screen_list``."""

    def on_exit(self) -> None:
        """Hook for subclasses to release their own resources."""

    def init_systems(self) -> bool:
        self.window.create("Mujin", 800, 640, 1.0, WindowFlags.VISIBLE)
        return True

    def init(self) -> bool:
        """Create the window, add the screens and enter the first one."""
        if not self.init_systems():
            return False
        self.on_init()
        self.add_screens()
        current = self.screen_list.current() if self.screen_list is not None else None
        if current is None:
            raise RuntimeError("the game has no screen to start with")
        self.current_screen = current
        current.on_entry()
        current.set_running()
        return True

    @staticmethod
    def frame_steps(frame_time: float) -> list[float]:
        """Split a frame's duration in milliseconds into physics delta times.

        A delta of 1.0 is one frame at the desired rate; at most
        ``MAX_PHYSICS_STEPS`` steps are taken.
        """
        total = frame_time / DESIRED_FRAME_TIME
        steps: list[float] = []
        while total > 0.0 and len(steps) < MAX_PHYSICS_STEPS:
            delta = min(total, MAX_DELTA_TIME)
            steps.append(delta)
            total -= delta
        return steps

    def run(self, max_frames: Optional[int] = None) -> int:
        """Run the loop until the game exits or ``max_frames`` frames have passed.

        Returns the number of frames run.
        """
        if not self.init():
            return 0
        previous = self.clock()
        self.limiter.set_max_fps(DESIRED_FPS)
        self.is_running = True
        frames = 0
        while self.is_running:
            self.limiter.begin()
            now = self.clock()
            frame_time = now - previous
            previous = now

            for delta in self.frame_steps(frame_time):
                self.update(delta)
                if not self.is_running:
                    break
                self.draw()

            self.fps = self.limiter.end()
            self._frame_counter += 1
            if self._frame_counter == FPS_REPORT_INTERVAL:
                print(self.fps)
                self._frame_counter = 0

            self.update_ui()
            self.window.swap_buffer()
            frames += 1
            if max_frames is not None and frames >= max_frames:
                break
        return frames

    def exit_game(self) -> None:
        """Leave the current screen, tear the screens down and stop the loop."""
        if self.current_screen is not None:
            self.current_screen.on_exit()
            self.current_screen = None
        if self.screen_list is not None:
            self.screen_list.destroy()
            self.screen_list = None
        self.is_running = False

    def on_event(self, event: Event) -> None:
        """Feed an event to the input manager and the window."""
        kind = event.type
        if kind is EventType.QUIT:
            self.exit_game()
        elif kind is EventType.KEY_DOWN:
            self.input.press_key(event.key)
        elif kind is EventType.KEY_UP:
            self.input.release_key(event.key)
        elif kind is EventType.MOUSE_MOTION:
            scale = self.window.scale
            self.input.set_mouse_coords(event.x / scale, event.y / scale)
        elif kind is EventType.MOUSE_BUTTON_DOWN:
            self.input.press_key(event.button)
        elif kind is EventType.MOUSE_BUTTON_UP:
            self.input.release_key(event.button)
        elif kind is EventType.WINDOW_RESIZED:
            self.window.screen_width = event.width
            self.window.screen_height = event.height
        if self.input.is_key_down(KEY_ESCAPE):
            self.exit_game()

    def update(self, delta_time: float) -> None:
        """Update the current screen or carry out the screen change it asked for."""
        screen = self.current_screen
        if screen is None:
            self.exit_game()
            return
        state = screen.state
        if state is ScreenState.RUNNING:
            screen.update(delta_time)
        elif state is ScreenState.CHANGE_NEXT:
            screen.on_exit()
            self.current_screen = self.screen_list.move_next()
            if self.current_screen is not None:
                self.current_screen.set_running()
                self.current_screen.on_entry()
        elif state is ScreenState.CHANGE_PREVIOUS:
            screen.on_exit()
            self.current_screen = self.screen_list.move_previous()
            if self.current_screen is not None:
                self.current_screen.set_running()
        elif state is ScreenState.EXIT_APPLICATION:
            self.exit_game()

    def _running_screen(self) -> Optional[GameScreen]:
        screen = self.current_screen
        if screen is not None and screen.state is ScreenState.RUNNING:
            return screen
        return None

    def draw(self) -> None:
        screen = self._running_screen()
        if screen is not None:
            screen.draw()

    def update_ui(self) -> None:
        screen = self._running_screen()
        if screen is not None:
            screen.update_ui()