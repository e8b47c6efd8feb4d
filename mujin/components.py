"""Core components: transform, rigid body, collider and collision grid."""

from __future__ import annotations

from dataclasses import replace
from typing import Optional

from mujin.ecs import Component, Entity, component_type_id, layer_value
from mujin.letters import Rect

__all__ = [
    "TransformComponent",
    "RigidBodyComponent",
    "ColliderComponent",
    "GridComponent",
    "COL_POS_OFFSET",
    "GRID_ROWS",
    "GRID_COLUMNS",
    "GRID_ELEMENT_WIDTH",
    "GRID_ELEMENT_HEIGHT",
    "TILE_NUM_GRID_ELEMENTS",
]

COL_POS_OFFSET = 8

GRID_ROWS = 4
GRID_COLUMNS = 4
GRID_ELEMENT_WIDTH = 8
GRID_ELEMENT_HEIGHT = 8
TILE_NUM_GRID_ELEMENTS = GRID_ROWS * GRID_COLUMNS
_FULL_TILE = (1 << TILE_NUM_GRID_ELEMENTS) - 1


class TransformComponent(Component):
    """Position, size, scale, depth, rotation and velocity of an entity."""

    def __init__(
        self,
        position=(0.0, 0.0),
        layer: Optional[int] = None,
        size=(32, 32),
        scale: float = 1.0,
        speed: int = 1,
    ) -> None:
        self.x = float(position[0])
        self.y = float(position[1])
        self.width, self.height = size
        self.scale = scale
        self.speed = speed
        self.z_index = -5.0 if layer is None else layer_value(layer)
        self.rotation = 0.0
        self.velocity_x = 0.0
        self.velocity_y = 0.0
        self.activated_movement = False

    @property
    def position(self) -> tuple[float, float]:
        return (self.x, self.y)

    @position.setter
    def position(self, value) -> None:
        self.x, self.y = float(value[0]), float(value[1])

    @property
    def velocity(self) -> tuple[int, int]:
        """The velocity truncated to whole pixels."""
        return (int(self.velocity_x), int(self.velocity_y))

    def size_center(self) -> tuple[float, float]:
        return (self.width * self.scale / 2, self.height * self.scale / 2)

    def center(self) -> tuple[float, float]:
        cx, cy = self.size_center()
        return (self.x + cx, self.y + cy)

    def init(self) -> None:
        self.velocity_x = 0.0
        self.velocity_y = 0.0

    def update(self, delta_time: float) -> None:
        entity = self.entity
        camera = entity.manager.camera
        if camera is not None:
            bounds = Rect(int(self.x), int(self.y), self.width, self.height)
            entity.paused = not entity.check_collision(bounds, camera)

        if entity.parent is not None:
            parent = entity.parent.get_component(TransformComponent)
            parent_cx, parent_cy = parent.size_center()
            own_cx, own_cy = self.size_center()
            self.x = parent.x + parent_cx - own_cx
            self.y = parent.y + parent_cy - own_cy

        self.x += self.velocity_x * self.speed * delta_time
        distance_y = self.velocity_y * self.speed * delta_time
        if distance_y < 1:
            self.y += self.velocity_y * self.speed
        else:
            self.y += distance_y


# The transform takes type id 0: a paused entity updates only up to it.
component_type_id(TransformComponent)


class RigidBodyComponent(Component):
    """Applies gravity to the entity's transform."""

    def __init__(self, accel_gravity: float = 0.045, max_gravity: float = 3.0) -> None:
        self.gravity_force = 1.0
        self.accel_gravity = accel_gravity
        self.max_gravity = max_gravity
        self.on_ground = False
        self.just_jumped = False
        self.transform: Optional[TransformComponent] = None

    def init(self) -> None:
        self.transform = self.entity.get_component(TransformComponent)

    def update(self, delta_time: float) -> None:
        transform = self.transform
        if self.on_ground and not self.just_jumped:
            self.gravity_force = 1.0
            transform.velocity_y = int(self.gravity_force)
            self.gravity_force = 0.0
            return
        self.just_jumped = False
        self.gravity_force += self.accel_gravity * delta_time
        transform.velocity_y = transform.velocity[1] + int(self.gravity_force) * delta_time
        cap = int(self.max_gravity)
        if transform.velocity[1] > cap:
            transform.velocity_y = cap


class ColliderComponent(Component):
    """A tagged collision rectangle; non-terrain colliders follow the transform."""

    def __init__(self, tag: str, collider: Optional[Rect] = None) -> None:
        self.tag = tag
        self.collider = collider if collider is not None else Rect(0, 0, 0, 0)
        self.src_rect = Rect(0, 0, 0, 0)
        self.dest_rect = Rect(0, 0, 0, 0)
        self.transform: Optional[TransformComponent] = None

    @classmethod
    def square(cls, tag: str, x: int, y: int, size: int) -> "ColliderComponent":
        return cls(tag, Rect(x, y, size, size))

    @property
    def rect(self) -> Rect:
        return self.collider

    def init(self) -> None:
        entity: Entity = self.entity
        if not entity.has_component(TransformComponent):
            entity.add_component(TransformComponent())
        self.transform = entity.get_component(TransformComponent)
        self.src_rect = Rect(0, 0, 8, 8)
        self.dest_rect = self.collider

    def update(self, delta_time: float) -> None:
        if self.tag == "terrain":
            return
        t = self.transform
        s = t.scale
        self.collider = Rect(
            int(int(t.x) + 2 * s * COL_POS_OFFSET),
            int(int(t.y) + 2 * s * COL_POS_OFFSET),
            int(t.width * s - 4 * s * COL_POS_OFFSET),
            int(t.height * s - 2 * s * COL_POS_OFFSET),
        )

    def update_collider(self, grid_pos) -> None:
        """Place the collider at an offset inside its tile."""
        gx, gy = grid_pos
        t = self.transform
        self.collider = replace(
            self.collider,
            x=int(int(t.x) + t.scale + gx),
            y=int(int(t.y) + t.scale + gy),
        )


class GridComponent(Component):
    """Splits a tile into a 4x4 grid and adds a collider for each solid part.

    ``bits`` marks the solid parts; a new component is fully solid.
    """

    def __init__(self, x: int = 0, y: int = 0, scaled_tile: int = 0) -> None:
        self.position = (x, y)
        self.scaled_tile = scaled_tile
        self.bits = _FULL_TILE

    def init(self) -> None:
        x, y = self.position
        if self.bits & _FULL_TILE == _FULL_TILE:
            self.entity.add_component(
                ColliderComponent.square("terrain", x, y, GRID_ELEMENT_WIDTH * GRID_COLUMNS)
            )
            return
        for index in range(TILE_NUM_GRID_ELEMENTS):
            if self.bits >> index & 1:
                gx, gy = _grid_offset(index)
                self.entity.add_component(
                    ColliderComponent.square("terrain", x + gx, y + gy, GRID_ELEMENT_WIDTH)
                )

    def update_colliders_grid(self) -> None:
        """Lay the entity's colliders out over the grid in the order they were added."""
        colliders = (c for c in self.entity.components if isinstance(c, ColliderComponent))
        for index, collider in enumerate(colliders):
            collider.update_collider(_grid_offset(index))


def _grid_offset(index: int) -> tuple[int, int]:
    return (
        (index % GRID_COLUMNS) * GRID_ELEMENT_WIDTH,
        (index // GRID_ROWS) * GRID_ELEMENT_HEIGHT,
    )