from mujin.input import InputManager


def test_unknown_key_is_up():
    manager = InputManager()
    assert manager.is_key_down(42) is False
    assert manager.is_key_pressed(42) is False


def test_press_and_release():
    manager = InputManager()
    manager.press_key(7)
    assert manager.is_key_down(7) is True
    manager.release_key(7)
    assert manager.is_key_down(7) is False


def test_pressed_only_on_first_frame():
    manager = InputManager()
    manager.press_key(5)
    assert manager.is_key_pressed(5) is True
    manager.update()
    assert manager.is_key_down(5) is True
    assert manager.is_key_pressed(5) is False


def test_pressed_again_after_release():
    manager = InputManager()
    manager.press_key(5)
    manager.update()
    manager.release_key(5)
    manager.update()
    manager.press_key(5)
    assert manager.is_key_pressed(5) is True


def test_mouse_coords_start_at_origin():
    assert InputManager().mouse_coords == (0.0, 0.0)


def test_set_mouse_coords():
    manager = InputManager()
    manager.set_mouse_coords(12, 34.5)
    assert manager.mouse_coords == (12.0, 34.5)


def test_mouse_collision_inside():
    manager = InputManager()
    manager.set_mouse_coords(15, 25)
    assert manager.check_mouse_collision((10, 20), (10, 10)) is True


def test_mouse_collision_is_strict_on_edges():
    manager = InputManager()
    manager.set_mouse_coords(10, 25)
    assert manager.check_mouse_collision((10, 20), (10, 10)) is False
    manager.set_mouse_coords(20, 25)
    assert manager.check_mouse_collision((10, 20), (10, 10)) is False


def test_mouse_collision_outside():
    manager = InputManager()
    manager.set_mouse_coords(100, 100)
    assert manager.check_mouse_collision((10, 20), (10, 10)) is False