from types import SimpleNamespace

import pytest
from PIL import Image

from mujin.components import ColliderComponent, GridComponent, TransformComponent
from mujin.ecs import Group, Layer, Manager
from mujin.letters import Rect, letter_rect
from mujin.spritebatch import Color
from mujin.sprites import (
    ButtonComponent,
    ButtonState,
    Flip,
    LightComponent,
    LightTextureComponent,
    RectangleComponent,
    SpriteComponent,
    TileComponent,
    UILabel,
)
from mujin.textures import TextureManager


class RecordingBatch:
    def __init__(self):
        self.calls = []

    def draw(self, dest_rect, uv_rect, texture, depth, color, angle=0.0):
        self.calls.append(
            SimpleNamespace(
                dest=dest_rect, uv=uv_rect, texture=texture,
                depth=depth, color=color, angle=angle,
            )
        )


def make_entity(position=(0, 0), size=(16, 16), scale=1):
    manager = Manager()
    entity = manager.add_entity()
    entity.add_component(TransformComponent(position, Layer.ACTION, size, scale))
    return manager, entity


@pytest.fixture
def sheet_id(tmp_path):
    path = tmp_path / "sheet.png"
    Image.new("RGBA", (64, 32), (255, 0, 0, 255)).save(path, format="PNG")
    TextureManager.instance().add_texture("sprites-test-sheet", path)
    return "sprites-test-sheet"


def test_sprite_init_sizes_rects_from_transform():
    _, entity = make_entity((10.7, 20.2), (16, 8), 2)
    sprite = entity.add_component(SpriteComponent())
    t = entity.get_component(TransformComponent)
    assert sprite.src_rect == Rect(0, 0, t.width, t.height)
    assert sprite.dest_rect.x == int(t.x)
    assert sprite.dest_rect.w == t.width * t.scale


def test_sprite_adds_transform_when_missing():
    entity = Manager().add_entity()
    sprite = entity.add_component(SpriteComponent())
    assert sprite.transform is entity.get_component(TransformComponent)


def test_sprite_update_follows_transform():
    _, entity = make_entity()
    sprite = entity.add_component(SpriteComponent())
    t = entity.get_component(TransformComponent)
    t.x, t.y = 40.9, 12.3
    sprite.update(1.0)
    assert (sprite.dest_rect.x, sprite.dest_rect.y) == (40, 12)


def test_draw_without_texture_draws_nothing():
    _, entity = make_entity()
    sprite = entity.add_component(SpriteComponent("unknown-texture"))
    batch = RecordingBatch()
    sprite.draw(batch, SimpleNamespace(scale=1.0))
    assert batch.calls == []


def test_draw_uses_texture_and_window_scale(sheet_id):
    _, entity = make_entity((4, 6))
    sprite = entity.add_component(SpriteComponent(sheet_id))
    batch = RecordingBatch()
    sprite.draw(batch, SimpleNamespace(scale=2.0))
    (call,) = batch.calls
    d = sprite.dest_rect
    assert call.dest == (d.x * 2.0, d.y * 2.0, d.w * 2.0, d.h * 2.0)
    assert call.texture == TextureManager.instance().get(sheet_id).id
    assert call.uv[2] * 64 == sprite.src_rect.w


def test_horizontal_flip_mirrors_uv(sheet_id):
    _, entity = make_entity()
    sprite = entity.add_component(SpriteComponent(sheet_id))
    window = SimpleNamespace(scale=1.0)
    batch = RecordingBatch()
    sprite.draw(batch, window)
    sprite.flip = Flip.HORIZONTAL
    sprite.draw(batch, window)
    plain, flipped = batch.calls
    assert flipped.uv[2] == -plain.uv[2]
    assert flipped.uv[0] == plain.uv[0] + plain.uv[2]


def test_destroy_texture_stops_drawing(sheet_id):
    _, entity = make_entity()
    sprite = entity.add_component(SpriteComponent(sheet_id))
    sprite.destroy_texture()
    batch = RecordingBatch()
    sprite.draw(batch, SimpleNamespace(scale=1.0))
    assert batch.calls == []


def test_set_current_frame():
    _, entity = make_entity(size=(16, 8))
    sprite = entity.add_component(SpriteComponent())
    sprite.set_animation(2, 3, 4, 0.1, "looped")
    sprite.animation.cur_frame_index = 1
    sprite.set_current_frame()
    assert sprite.src_rect.x == 2 * 16 + sprite.src_rect.w
    assert sprite.src_rect.y == 3 * 8


def test_moving_animation_single_step_keeps_frame_count():
    _, entity = make_entity()
    sprite = entity.add_component(SpriteComponent())
    sprite.set_moving_animation(0, 0, 20, 1, "play_n_times", [(0, 1)], [0], [0], 1)
    assert sprite.moving_animation.total_frames == 20
    assert sprite.moving_animation.reps == 1


def test_moving_animation_path_has_frame_per_position():
    _, entity = make_entity()
    sprite = entity.add_component(SpriteComponent())
    sprite.set_moving_animation(0, 0, 20, 1, "back_forth", [(0, 0), (1, 1), (2, 2)], [1, 3, 2], [0, 90, 45])
    assert sprite.moving_animation.total_frames == 3


def test_moving_animation_mismatched_lists_raise():
    _, entity = make_entity()
    sprite = entity.add_component(SpriteComponent())
    with pytest.raises(ValueError):
        sprite.set_moving_animation(0, 0, 3, 1, "looped", [(0, 0), (1, 1)], [0], [0, 0])


def test_set_move_frame_steps_by_position():
    _, entity = make_entity((10, 20))
    sprite = entity.add_component(SpriteComponent())
    sprite.set_moving_animation(2, 3, 20, 1, "looped", [(5, -1)], [0], [0])
    sprite.moving_animation.cur_frame_index = 3
    sprite.set_move_frame()
    before = sprite.dest_rect
    sprite.moving_animation.cur_frame_index = 4
    sprite.set_move_frame()
    after = sprite.dest_rect
    assert (after.x - before.x, after.y - before.y) == (5, -1)


def test_set_specific_move_frame_uses_path_position():
    _, entity = make_entity((10, 20))
    sprite = entity.add_component(SpriteComponent())
    sprite.set_moving_animation(0, 0, 3, 1, "looped", [(0, 0), (150, 250), (-200, -300)], [1, 3, 2], [0, 90, 45])
    sprite.moving_animation.cur_frame_index = 0
    sprite.set_specific_move_frame()
    start = sprite.dest_rect
    sprite.moving_animation.cur_frame_index = 1
    sprite.set_specific_move_frame()
    assert (sprite.dest_rect.x - start.x, sprite.dest_rect.y - start.y) == (150, 250)


def test_flash_frame_blends_between_colours():
    _, entity = make_entity()
    sprite = entity.add_component(SpriteComponent())
    flash = Color(255, 0, 0, 50)
    sprite.set_flash_animation(0, 0, 4, 0, "looped", [0.2, 1.0, 0.2, 1.0], flash)
    sprite.flash_animation.interpolation_a = 0.0
    sprite.set_flash_frame()
    assert sprite.color == sprite.default_color
    sprite.flash_animation.interpolation_a = 1.0
    sprite.set_flash_frame()
    assert sprite.color == flash


def test_rectangle_draws_untextured_quad():
    _, entity = make_entity((3, 4), (10, 6))
    rectangle = entity.add_component(RectangleComponent(45.0))
    rectangle.color = Color(1, 2, 3, 4)
    rectangle.update(1.0)
    batch = RecordingBatch()
    rectangle.draw(batch, SimpleNamespace(scale=1.0))
    (call,) = batch.calls
    assert call.texture == 0
    assert call.uv == (-1.0, -1.0, 2.0, 2.0)
    assert call.angle == 45.0
    assert call.color == Color(1, 2, 3, 4)
    assert call.depth == entity.get_component(TransformComponent).z_index


def test_light_component_follows_transform_and_scales():
    _, entity = make_entity((3.9, 4.2), (10, 6), 2)
    light = entity.add_component(LightComponent())
    light.update(1.0)
    batch = RecordingBatch()
    light.draw(batch, SimpleNamespace(scale=3.0))
    d = light.dest_rect
    assert (d.x, d.y) == (3, 4)
    assert batch.calls[0].dest == (d.x * 3.0, d.y * 3.0, d.w * 3.0, d.h * 3.0)


def test_light_texture_component_sets_radius_and_depth():
    _, entity = make_entity()
    light = entity.add_component(LightTextureComponent(1.0))
    assert entity.has_component(SpriteComponent)
    assert (light.sprite.dest_rect.w, light.sprite.dest_rect.h) == (20, 20)
    batch = RecordingBatch()
    light.draw(batch, SimpleNamespace(scale=1.0))
    assert batch.calls[0].depth == 5.0


def test_solid_tile_adds_grid_and_collider():
    entity = Manager().add_entity()
    tile = entity.add_component(TileComponent(32, 64, 100, 200, 32, 1, "missing-tile", True))
    assert entity.get_component(TransformComponent).position == (100.0, 200.0)
    assert tile.sprite.src_rect == Rect(32, 64, 32, 32)
    assert tile.grid is entity.get_component(GridComponent)
    assert entity.get_component(ColliderComponent).collider == Rect(100, 200, 32, 32)


def test_non_solid_tile_has_no_grid():
    entity = Manager().add_entity()
    tile = entity.add_component(TileComponent(0, 0, 5, 5, 32, 1, "missing-tile", False))
    assert tile.grid is None
    assert not entity.has_component(GridComponent)


def test_ui_label_creates_one_entity_per_letter():
    manager, entity = make_entity((5, 7), (1, 1))
    label = entity.add_component(UILabel(manager, "Hi!", "font"))
    assert len(label.letters) == 3
    sprite = label.letters[0].get_component(SpriteComponent)
    assert sprite.src_rect == letter_rect("H")
    assert all(letter.is_hud for letter in label.letters)


def test_ui_label_layout_and_width():
    manager, entity = make_entity((5, 7), (1, 1))
    label = entity.add_component(UILabel(manager, "Hi", "font"))
    label.update(1.0)
    first, second = (l.get_component(TransformComponent) for l in label.letters)
    assert first.position == (5.0, 7.0)
    assert second.x == 5 + letter_rect("H").w
    assert label.transform.width == letter_rect("H").w + letter_rect("i").w


def test_button_pressed_calls_callback_once():
    clicks = []
    _, entity = make_entity()
    button = entity.add_component(ButtonComponent(lambda: clicks.append(1)))
    button.state = ButtonState.PRESSED
    button.update(1.0)
    button.update(1.0)
    assert clicks == [1]
    assert button.state is ButtonState.NORMAL


def test_button_not_pressed_does_not_call():
    clicks = []
    _, entity = make_entity()
    button = entity.add_component(ButtonComponent(lambda: clicks.append(1)))
    button.state = ButtonState.HOVERED
    button.update(1.0)
    assert clicks == []
    assert button.state is ButtonState.NORMAL


def test_button_builds_label_and_background():
    manager, entity = make_entity()
    grey = Color(128, 128, 128, 255)
    entity.add_component(ButtonComponent(None, "Go", (40, 20), grey))
    (label_entity,) = manager.get_group(Group.BUTTON_LABELS)
    (panel,) = manager.get_group(Group.BACKGROUND_PANELS)
    assert label_entity.parent is entity
    assert label_entity.get_component(UILabel).label == "Go"
    assert panel.parent is entity
    assert panel.get_component(RectangleComponent).color == grey
    assert panel.get_component(TransformComponent).width == 40


def test_button_without_label_or_size_adds_nothing():
    manager, entity = make_entity()
    entity.add_component(ButtonComponent(None))
    assert len(manager.entities) == 1
    assert manager.get_group(Group.BUTTON_LABELS) == []