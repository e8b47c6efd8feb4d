import pytest

from mujin.components import (
    GRID_COLUMNS,
    GRID_ELEMENT_HEIGHT,
    GRID_ELEMENT_WIDTH,
    ColliderComponent,
    GridComponent,
    RigidBodyComponent,
    TransformComponent,
)
from mujin.ecs import Component, Layer, Manager
from mujin.letters import Rect


class Counter(Component):
    def __init__(self):
        self.calls = 0

    def update(self, delta_time):
        self.calls += 1


def entity_with_transform(**kwargs):
    manager = Manager()
    entity = manager.add_entity()
    transform = entity.add_component(TransformComponent(**kwargs))
    return manager, entity, transform


def test_transform_defaults():
    _, _, t = entity_with_transform()
    assert (t.width, t.height, t.scale, t.speed) == (32, 32, 1.0, 1)
    assert t.z_index == -5.0
    assert t.position == (0.0, 0.0)


def test_transform_layer_sets_depth():
    _, entity, t = entity_with_transform(
        position=(1, 2), layer=Layer.BACKGROUND, size=(10, 20), scale=2.0
    )
    assert t.z_index == entity.layer_value(Layer.BACKGROUND)
    assert (t.width, t.height) == (10, 20)
    assert t.size_center() == (t.width * t.scale / 2, t.height * t.scale / 2)


def test_velocity_is_truncated():
    _, _, t = entity_with_transform()
    t.velocity_x = 2.7
    t.velocity_y = -1.5
    assert t.velocity == (2, -1)


def test_transform_update_moves_x_by_velocity():
    _, _, t = entity_with_transform(speed=3)
    t.velocity_x = 2.0
    t.transform_start = t.x
    t.update(0.5)
    assert t.x == pytest.approx(t.transform_start + 2.0 * 3 * 0.5)


def test_small_vertical_step_ignores_delta_time():
    _, _, t = entity_with_transform()
    t.velocity_y = 0.5
    t.update(0.5)
    assert t.y == pytest.approx(0.5)


def test_large_vertical_step_uses_delta_time():
    _, _, t = entity_with_transform()
    t.velocity_y = 4.0
    t.update(0.5)
    assert t.y == pytest.approx(4.0 * 0.5)


def test_culling_pauses_offscreen_entity_and_stops_updates():
    manager, entity, t = entity_with_transform(position=(1000, 1000))
    counter = entity.add_component(Counter())
    manager.camera = Rect(0, 0, 100, 100)
    entity.update(1.0)
    assert entity.paused is True
    assert counter.calls == 0


def test_onscreen_entity_runs_all_components():
    manager, entity, t = entity_with_transform(position=(10, 10))
    counter = entity.add_component(Counter())
    manager.camera = Rect(0, 0, 100, 100)
    entity.paused = True
    entity.update(1.0)
    assert entity.paused is False
    assert counter.calls == 1


def test_paused_without_camera_stays_paused():
    _, entity, _ = entity_with_transform()
    counter = entity.add_component(Counter())
    entity.paused = True
    entity.update(1.0)
    assert counter.calls == 0


def test_child_is_centred_on_parent():
    manager = Manager()
    parent = manager.add_entity()
    parent_t = parent.add_component(TransformComponent(position=(100, 50), size=(64, 32)))
    child = manager.add_entity()
    child_t = child.add_component(TransformComponent(size=(16, 16)))
    child.parent = parent
    child_t.update(1.0)
    assert child_t.center() == pytest.approx(parent_t.center())


def test_rigid_body_on_ground():
    _, entity, t = entity_with_transform()
    body = entity.add_component(RigidBodyComponent())
    body.on_ground = True
    body.update(1.0)
    assert t.velocity == (0, 1)
    assert body.gravity_force == 0.0


def test_rigid_body_jump_goes_airborne():
    _, entity, _ = entity_with_transform()
    body = entity.add_component(RigidBodyComponent())
    body.on_ground = True
    body.just_jumped = True
    body.update(1.0)
    assert body.just_jumped is False
    assert body.gravity_force > 0


def test_rigid_body_falls_to_max_speed():
    _, entity, t = entity_with_transform()
    body = entity.add_component(RigidBodyComponent(accel_gravity=0.5, max_gravity=3.0))
    for _ in range(200):
        body.update(1.0)
        assert t.velocity[1] <= int(body.max_gravity)
    assert t.velocity[1] == int(body.max_gravity)


def test_collider_adds_transform_and_keeps_terrain_rect():
    entity = Manager().add_entity()
    collider = entity.add_component(ColliderComponent.square("terrain", 5, 6, 8))
    assert entity.has_component(TransformComponent)
    assert collider.transform is entity.get_component(TransformComponent)
    collider.update(1.0)
    assert collider.rect == Rect(5, 6, 8, 8)


def test_moving_collider_follows_transform():
    _, entity, t = entity_with_transform()
    collider = entity.add_component(ColliderComponent("player"))
    collider.update(1.0)
    before = collider.rect
    t.x += 40
    collider.update(1.0)
    after = collider.rect
    assert after.x - before.x == 40
    assert (after.y, after.w, after.h) == (before.y, before.w, before.h)


def test_update_collider_offsets_by_grid_position():
    _, entity, _ = entity_with_transform(position=(10, 20))
    collider = entity.add_component(ColliderComponent.square("terrain", 0, 0, 8))
    collider.update_collider((0, 0))
    base = collider.rect
    collider.update_collider((8, 16))
    moved = collider.rect
    assert (moved.x - base.x, moved.y - base.y) == (8, 16)
    assert (moved.w, moved.h) == (base.w, base.h)


def test_full_grid_makes_one_tile_collider():
    entity = Manager().add_entity()
    entity.add_component(GridComponent(64, 96, 32))
    colliders = [c for c in entity.components if isinstance(c, ColliderComponent)]
    size = GRID_ELEMENT_WIDTH * GRID_COLUMNS
    assert [c.rect for c in colliders] == [Rect(64, 96, size, size)]
    assert colliders[0].tag == "terrain"


def test_partial_grid_makes_part_colliders():
    entity = Manager().add_entity()
    grid = GridComponent(100, 200, 32)
    grid.bits = (1 << 0) | (1 << 5)
    entity.add_component(grid)
    rects = [c.rect for c in entity.components if isinstance(c, ColliderComponent)]
    assert rects == [
        Rect(100, 200, GRID_ELEMENT_WIDTH, GRID_ELEMENT_WIDTH),
        Rect(
            100 + GRID_ELEMENT_WIDTH,
            200 + GRID_ELEMENT_HEIGHT,
            GRID_ELEMENT_WIDTH,
            GRID_ELEMENT_WIDTH,
        ),
    ]


def test_update_colliders_grid_uses_addition_order():
    entity = Manager().add_entity()
    grid = GridComponent(100, 200, 32)
    grid.bits = (1 << 0) | (1 << 5)
    entity.add_component(grid)
    grid.update_colliders_grid()
    first, second = [c.rect for c in entity.components if isinstance(c, ColliderComponent)]
    assert second.x - first.x == GRID_ELEMENT_WIDTH
    assert second.y == first.y