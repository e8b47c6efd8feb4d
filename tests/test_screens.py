import pytest

from mujin.screens import (
    SCREEN_INDEX_NO_SCREEN,
    GameScreen,
    ScreenList,
    ScreenState,
)


class RecordingScreen(GameScreen):
    def __init__(self, next_index=SCREEN_INDEX_NO_SCREEN, previous_index=SCREEN_INDEX_NO_SCREEN):
        super().__init__()
        self._next = next_index
        self._previous = previous_index
        self.calls = []

    def next_screen_index(self):
        return self._next

    def previous_screen_index(self):
        return self._previous

    def build(self):
        self.calls.append("build")

    def destroy(self):
        self.calls.append("destroy")

    def on_entry(self):
        self.calls.append("entry")

    def on_exit(self):
        self.calls.append("exit")

    def update(self, delta_time):
        self.calls.append("update")

    def draw(self):
        self.calls.append("draw")

    def update_ui(self):
        self.calls.append("ui")


def test_base_class_is_abstract():
    with pytest.raises(TypeError):
        GameScreen()


def test_new_screen_state():
    screens = ScreenList()
    screens.add_screen(RecordingScreen())
    screens.set_screen(0)
    current = screens.current()
    assert current.state is ScreenState.NONE
    current.set_running()
    assert screens.current().state is ScreenState.RUNNING


def test_add_screen_indexes_builds_and_attaches():
    game = object()
    screens = ScreenList(game)
    first, second = RecordingScreen(), RecordingScreen()
    screens.add_screen(first)
    screens.add_screen(second)
    assert (first.screen_index, second.screen_index) == (0, 1)
    assert first.calls == ["build"]
    assert first.game is game
    assert screens.screens == (first, second)


def test_no_current_until_set():
    screens = ScreenList()
    screens.add_screen(RecordingScreen())
    assert screens.current() is None
    screens.set_screen(0)
    assert screens.current() is screens.screens[0]


def test_move_next_and_previous():
    screens = ScreenList()
    menu = RecordingScreen(next_index=1)
    play = RecordingScreen(previous_index=0)
    screens.add_screen(menu)
    screens.add_screen(play)
    screens.set_screen(0)
    assert screens.move_next() is play
    assert screens.move_previous() is menu


def test_move_to_no_screen_stays():
    screens = ScreenList()
    only = RecordingScreen()
    screens.add_screen(only)
    screens.set_screen(0)
    assert screens.move_next() is only
    assert screens.move_previous() is only


def test_move_without_current_raises():
    screens = ScreenList()
    with pytest.raises(RuntimeError):
        screens.move_next()


def test_destroy_tears_down_everything():
    screens = ScreenList()
    a, b = RecordingScreen(), RecordingScreen()
    screens.add_screen(a)
    screens.add_screen(b)
    screens.set_screen(1)
    screens.destroy()
    assert a.calls[-1] == "destroy"
    assert b.calls[-1] == "destroy"
    assert screens.current() is None
    assert screens.screens == ()