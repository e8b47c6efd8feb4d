"""Entities, components, the spatial grid and the entity manager."""

from __future__ import annotations

import enum
import math
from dataclasses import dataclass, field
from typing import Any, Optional, TypeVar

from mujin.letters import Rect

__all__ = [
    "CULLING_OFFSET",
    "MAX_GROUPS",
    "Group",
    "Layer",
    "Component",
    "Entity",
    "Cell",
    "Grid",
    "Manager",
    "component_type_id",
    "layer_value",
]

CULLING_OFFSET = 100
MAX_GROUPS = 64

_C = TypeVar("_C", bound="Component")

_type_ids: dict[type, int] = {}


def component_type_id(component_type: type) -> int:
    """A number unique to each component class, handed out in first-use order."""
    return _type_ids.setdefault(component_type, len(_type_ids))


def layer_value(layer: int) -> float:
    """The depth value of a drawing layer."""
    return layer / 100.0


class Group(enum.IntEnum):
    """Named entity groups."""

    BACKGROUND_LAYER = 0
    BACK_ACTION_LAYER = 1
    BACKGROUND_PANELS = 2
    ACTION_LAYER = 3
    PLAYERS = 4
    EQUIPMENT = 5
    BACKGROUNDS = 6
    COLLIDERS = 7
    MYSTERY_BOXES = 8
    GEMS = 9
    WINNING_TILES = 10
    SLICES = 11
    ENEMY_SLICES = 12
    LIGHTS = 13
    TEXTURE_LIGHTS = 14
    RAIN_DROP = 15
    SNOW = 16
    PROJECTILES = 17
    WARRIOR_PROJECTILES = 18
    SKELETONS = 19
    LABELS = 20
    SLOTS = 21
    SHOPS = 22
    INVENTORIES = 23
    GREEN_KOOPA_TROOPAS = 24
    FORE_ACTION_LAYER = 25
    MARKET = 26
    SCREEN_SHAPES = 27
    HP_BARS = 28
    FOG = 29
    ENVIRONMENT_GENERATORS = 30
    START_GAME = 31
    EXIT_GAME = 32
    BUTTON_LABELS = 33
    CIRCLES = 34


class Layer(enum.IntEnum):
    """Drawing layers, front to back."""

    FOG = -10000
    FOREGROUND = -5000
    ACTION = 0
    CLOUDS = 1000
    BACKGROUND = 5000
    MENU_BACKGROUND = 10000


def _group_index(group: int) -> int:
    index = int(group)
    if not 0 <= index < MAX_GROUPS:
        raise IndexError(f"group {index} outside 0..{MAX_GROUPS - 1}")
    return index


class Component:
    """A piece of behaviour attached to an entity."""

    entity: Optional["Entity"] = None
    id: int = 0

    def init(self) -> None:
        """Called once, right after the component is attached."""

    def update(self, delta_time: float) -> None:
        """Called every frame."""

    def draw(self, batch: Any, window: Any) -> None:
        """Called when the entity is drawn."""

    @property
    def rect(self) -> Rect:
        return Rect(0, 0, 0, 0)

    @property
    def has_grid_above(self) -> bool:
        return False


class Entity:
    """A game object: an ordered collection of components plus group flags."""

    def __init__(self, manager: "Manager", is_hud: bool = False) -> None:
        self.manager = manager
        self.is_hud = is_hud
        self.active = True
        self.paused = False
        self.parent: Optional[Entity] = None
        self.owner_cell: Optional[Cell] = None
        self.components: list[Component] = []
        self._by_type: dict[type, Component] = {}
        self._groups: set[int] = set()

    @staticmethod
    def check_collision(rect_a: Rect, rect_b: Rect) -> bool:
        """True if the rectangles overlap once ``rect_b`` is widened by the culling margin."""
        return not (
            rect_a.x > rect_b.x + rect_b.w + CULLING_OFFSET
            or rect_a.x + rect_a.w < rect_b.x - CULLING_OFFSET
            or rect_a.y > rect_b.y + rect_b.h + CULLING_OFFSET
            or rect_a.y + rect_a.h < rect_b.y - CULLING_OFFSET
        )

    def update(self, delta_time: float) -> None:
        """Update components in the order they were added.

        A paused entity stops after the component whose type id is 0.
        HUD entities get a full update first.
        """
        if self.is_hud:
            self.update_fully(delta_time)
        for component in list(self.components):
            component.update(delta_time)
            if component.id == 0 and self.paused:
                break

    def update_fully(self, delta_time: float) -> None:
        for component in list(self.components):
            component.update(delta_time)

    def draw(self, batch: Any, window: Any) -> None:
        for component in self.components:
            component.draw(batch, window)

    def destroy(self) -> None:
        """Mark the entity for removal at the manager's next refresh."""
        self.active = False

    def has_group(self, group: int) -> bool:
        return _group_index(group) in self._groups

    def add_group(self, group: int) -> None:
        index = _group_index(group)
        self._groups.add(index)
        self.manager.add_to_group(self, index)

    def del_group(self, group: int) -> None:
        self._groups.discard(_group_index(group))

    def layer_value(self, layer: int) -> float:
        return layer_value(layer)

    def has_component(self, component_type: type) -> bool:
        return component_type in self._by_type

    def add_component(self, component: _C) -> _C:
        """Attach a component, initialise it and return it."""
        component.entity = self
        self.components.append(component)
        component_class = type(component)
        self._by_type[component_class] = component
        component.id = component_type_id(component_class)
        component.init()
        return component

    def get_component(self, component_type: type[_C]) -> _C:
        try:
            return self._by_type[component_type]  # type: ignore[return-value]
        except KeyError:
            raise KeyError(f"entity has no {component_type.__name__}") from None


@dataclass(eq=False)
class Cell:
    """One square of the spatial grid."""

    entities: list[Entity] = field(default_factory=list)


class Grid:
    """Uniform grid of cells used to find nearby entities."""

    def __init__(self, width: int, height: int, cell_size: int) -> None:
        if cell_size <= 0:
            raise ValueError("cell size must be positive")
        if width <= 0 or height <= 0:
            raise ValueError("grid dimensions must be positive")
        self.width = width
        self.height = height
        self.cell_size = cell_size
        self.num_x_cells = math.ceil(width / cell_size)
        self.num_y_cells = math.ceil(height / cell_size)
        self._cells = [Cell() for _ in range(self.num_x_cells * self.num_y_cells)]

    @property
    def cells(self) -> tuple[Cell, ...]:
        return tuple(self._cells)

    def add_entity(self, entity: Entity, cell: Optional[Cell] = None) -> None:
        """Put an entity in a cell, by default the one under its position."""
        if cell is None:
            cell = self.cell_for(entity)
        cell.entities.append(entity)
        entity.owner_cell = cell

    def remove_entity(self, entity: Entity) -> None:
        cell = entity.owner_cell
        if cell is None:
            raise ValueError("entity is not in the grid")
        cell.entities[:] = [e for e in cell.entities if e is not entity]

    def cell_at(self, x: int, y: int) -> Cell:
        """The cell at grid coordinates, clamped to the grid."""
        x = min(max(x, 0), self.num_x_cells - 1)
        y = min(max(y, 0), self.num_y_cells - 1)
        return self._cells[y * self.num_x_cells + x]

    def _coords(self, entity: Entity) -> tuple[int, int]:
        from mujin.components import TransformComponent

        x, y = entity.get_component(TransformComponent).position
        return int(x / self.cell_size), int(y / self.cell_size)

    def cell_for(self, entity: Entity) -> Cell:
        return self.cell_at(*self._coords(entity))

    def adjacent_cells(self, entity: Entity) -> list[Optional[Cell]]:
        """The entity's own cell and every neighbouring cell inside the grid."""
        cell_x, cell_y = self._coords(entity)
        cells: list[Optional[Cell]] = []
        for dx in (-1, 0, 1):
            for dy in (-1, 0, 1):
                if dx == 0 and dy == 0:
                    cells.append(entity.owner_cell)
                    continue
                nx, ny = cell_x + dx, cell_y + dy
                if 0 <= nx < self.num_x_cells and 0 <= ny < self.num_y_cells:
                    cells.append(self.cell_at(nx, ny))
        return cells


class Manager:
    """Owns the entities, their groups and the optional spatial grid.

    ``camera`` is the visible area used to pause off-screen entities.
    """

    def __init__(self, grid: Optional[Grid] = None) -> None:
        self._entities: list[Entity] = []
        self._groups: list[list[Entity]] = [[] for _ in range(MAX_GROUPS)]
        self.grid = grid
        self.camera: Optional[Rect] = None

    @property
    def entities(self) -> tuple[Entity, ...]:
        return tuple(self._entities)

    def _rehome(self, entity: Entity) -> None:
        if entity.owner_cell is None or self.grid is None:
            return
        new_cell = self.grid.cell_for(entity)
        if new_cell is not entity.owner_cell:
            self.grid.remove_entity(entity)
            self.grid.add_entity(entity, new_cell)

    def update(self, delta_time: float = 1.0) -> None:
        for entity in list(self._entities):
            if not entity.active:
                continue
            entity.update(delta_time)
            self._rehome(entity)

    def update_fully(self, delta_time: float = 1.0) -> None:
        for entity in list(self._entities):
            if not entity.active:
                continue
            entity.update_fully(delta_time)
            self._rehome(entity)

    def draw(self, batch: Any, window: Any) -> None:
        for entity in self._entities:
            entity.draw(batch, window)

    def refresh(self) -> None:
        """Drop destroyed entities and stale group memberships."""
        for index, members in enumerate(self._groups):
            members[:] = [e for e in members if e.active and e.has_group(index)]

        survivors = []
        for entity in self._entities:
            if entity.active:
                survivors.append(entity)
            elif entity.owner_cell is not None:
                if self.grid is not None:
                    self.grid.remove_entity(entity)
                entity.owner_cell = None
        self._entities = survivors

    def add_to_group(self, entity: Entity, group: int) -> None:
        self._groups[_group_index(group)].append(entity)

    def get_group(self, group: int) -> list[Entity]:
        return list(self._groups[_group_index(group)])

    def add_entity(self, is_hud: bool = False) -> Entity:
        entity = Entity(self, is_hud)
        self._entities.append(entity)
        return entity

    def clear_all_entities(self) -> None:
        for members in self._groups:
            members.clear()
        self._entities.clear()

    def adjacent_entities(self, entity: Entity, group: int) -> list[Entity]:
        """Entities of a group in the cells around ``entity``, itself included."""
        if self.grid is None:
            raise RuntimeError("manager has no grid")
        found = []
        for cell in self.grid.adjacent_cells(entity):
            if cell is None:
                continue
            found.extend(n for n in cell.entities if n.has_group(group))
        return found