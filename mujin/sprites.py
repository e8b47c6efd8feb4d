"""Drawable components: sprites, coloured rectangles, lights, tiles, labels and buttons."""

from __future__ import annotations

import enum
from dataclasses import replace
from typing import Any, Callable, Optional, Sequence

from mujin.animation import AnimTypeLike, Animation, FlashAnimation, MovingAnimation
from mujin.components import GridComponent, TransformComponent
from mujin.ecs import Component, Entity, Group, Layer, Manager
from mujin.letters import Rect, letter_rect
from mujin.spritebatch import Color
from mujin.textures import Texture, TextureManager

__all__ = [
    "Flip",
    "SpriteComponent",
    "RectangleComponent",
    "LightComponent",
    "LightTextureComponent",
    "TileComponent",
    "UILabel",
    "ButtonState",
    "ButtonComponent",
]

_FULL_UV = (-1.0, -1.0, 2.0, 2.0)
_NO_TEXTURE = 0


def _white() -> Color:
    return Color(255, 255, 255, 255)


def _scaled(rect: Rect, scale: float) -> tuple[float, float, float, float]:
    return (rect.x * scale, rect.y * scale, rect.w * scale, rect.h * scale)


def _ensure_transform(entity: Entity) -> TransformComponent:
    if not entity.has_component(TransformComponent):
        entity.add_component(TransformComponent())
    return entity.get_component(TransformComponent)


def _sized_rect(transform: TransformComponent) -> Rect:
    return Rect(
        int(transform.x),
        int(transform.y),
        int(transform.width * transform.scale),
        int(transform.height * transform.scale),
    )


class Flip(enum.Enum):
    NONE = enum.auto()
    HORIZONTAL = enum.auto()
    VERTICAL = enum.auto()


class SpriteComponent(Component):
    """Draws a region of a texture at the entity's transform."""

    def __init__(
        self,
        texture_id: Optional[str] = None,
        color: Optional[Color] = None,
        is_main_menu: bool = False,
    ) -> None:
        self.texture: Optional[Texture] = None
        self.is_main_menu = is_main_menu
        self.default_color = color if color is not None else _white()
        self.color = replace(self.default_color)
        self.transform: Optional[TransformComponent] = None
        self.src_rect = Rect(0, 0, 0, 0)
        self.dest_rect = Rect(0, 0, 0, 0)
        self.animation = Animation()
        self.moving_animation = MovingAnimation()
        self.flash_animation = FlashAnimation()
        self.flip = Flip.NONE
        if texture_id is not None:
            self.set_texture(texture_id)

    def set_texture(self, texture_id: str) -> None:
        """Switch to the texture registered under ``texture_id`` (None if unknown)."""
        self.texture = TextureManager.instance().get(texture_id)

    def init(self) -> None:
        self.transform = _ensure_transform(self.entity)
        t = self.transform
        self.src_rect = Rect(0, 0, t.width, t.height)
        self.dest_rect = _sized_rect(t)

    def update(self, delta_time: float) -> None:
        t = self.transform
        self.dest_rect = replace(self.dest_rect, x=int(t.x), y=int(t.y))

    def draw(self, batch: Any, window: Any) -> None:
        texture = self.texture
        if texture is None:
            return
        pos = _scaled(self.dest_rect, window.scale)
        src = self.src_rect
        if self.flip is Flip.HORIZONTAL:
            u = (src.x + src.w) / texture.width
            uw = -src.w / texture.width
        else:
            u = src.x / texture.width
            uw = src.w / texture.width
        v = src.y / texture.height
        vh = src.h / texture.height
        t = self.transform
        batch.draw(pos, (u, v, uw, vh), texture.id, t.z_index, self.color, t.rotation)

    def set_animation(
        self,
        index_x: int,
        index_y: int,
        frames: int,
        speed: float,
        anim_type: AnimTypeLike,
        reps: int = 0,
    ) -> None:
        self.animation = Animation(index_x, index_y, frames, speed, anim_type, reps)

    def set_moving_animation(
        self,
        index_x: int,
        index_y: int,
        frames: int,
        speed: float,
        anim_type: AnimTypeLike,
        positions: Sequence[Sequence[float]],
        z_indices: Sequence[int],
        rotations: Sequence[int],
        reps: int = 0,
    ) -> None:
        """Set the movement; one position means a constant step for ``frames`` frames."""
        positions = list(positions)
        if len(positions) == 1 and len(z_indices) == 1 and len(rotations) == 1:
            dx, dy = positions[0]
            animation = MovingAnimation.from_distance(
                index_x, index_y, frames, speed, anim_type, dx, dy, reps
            )
            animation.z_indices = list(z_indices)
            animation.rotations = list(rotations)
        else:
            animation = MovingAnimation(
                index_x, index_y, frames, speed, anim_type,
                positions, z_indices, rotations, reps,
            )
        self.moving_animation = animation

    def set_flash_animation(
        self,
        index_x: int,
        index_y: int,
        frames: int,
        speed: float,
        anim_type: AnimTypeLike,
        flash_times: Sequence[float],
        flash_color: Color,
        reps: int = 0,
    ) -> None:
        self.flash_animation = FlashAnimation(
            index_x, index_y, frames, speed, anim_type, flash_times, flash_color, reps
        )

    def set_current_frame(self) -> None:
        """Point the source rectangle at the animation's current frame."""
        animation = self.animation
        t = self.transform
        self.src_rect = replace(
            self.src_rect,
            x=animation.index_x * t.width + self.src_rect.w * animation.cur_frame_index,
            y=animation.index_y * t.height,
        )

    def _move_to(self, dx: float, dy: float) -> None:
        animation = self.moving_animation
        t = self.transform
        self.dest_rect = replace(
            self.dest_rect,
            x=int(int(t.x) + animation.index_x + dx),
            y=int(int(t.y) + animation.index_y + dy),
        )

    def set_move_frame(self) -> None:
        """Offset the sprite by the constant step times the current frame."""
        animation = self.moving_animation
        step_x, step_y = animation.positions[0]
        frame = animation.cur_frame_index
        self._move_to(step_x * frame, step_y * frame)

    def set_specific_move_frame(self) -> None:
        """Offset the sprite by the path position of the current frame."""
        animation = self.moving_animation
        self._move_to(*animation.positions[animation.cur_frame_index])

    def set_flash_frame(self) -> None:
        """Blend the default colour towards the flash colour."""
        a = self.flash_animation.interpolation_a
        self.color = self.flash_animation.flash_color * a + self.default_color * (1 - a)

    def destroy_texture(self) -> None:
        self.texture = None


class RectangleComponent(Component):
    """A solid coloured rectangle the size of the transform."""

    def __init__(self, rotation: float = 0.0) -> None:
        self.color = _white()
        self.rotation = rotation
        self.dest_rect = Rect(0, 0, 0, 0)
        self.transform: Optional[TransformComponent] = None

    def init(self) -> None:
        self.transform = self.entity.get_component(TransformComponent)
        self.dest_rect = _sized_rect(self.transform)

    def update(self, delta_time: float) -> None:
        t = self.transform
        self.dest_rect = replace(self.dest_rect, x=int(t.x), y=int(t.y))

    def draw(self, batch: Any, window: Any) -> None:
        pos = _scaled(self.dest_rect, window.scale)
        batch.draw(pos, _FULL_UV, _NO_TEXTURE, self.transform.z_index, self.color, self.rotation)


class LightComponent(Component):
    """A coloured light quad following the transform."""

    def __init__(self) -> None:
        self.color = Color()
        self.radius = 0.0
        self.dest_rect = Rect(0, 0, 0, 0)
        self.transform: Optional[TransformComponent] = None

    def init(self) -> None:
        self.transform = self.entity.get_component(TransformComponent)
        self.dest_rect = _sized_rect(self.transform)

    def update(self, delta_time: float) -> None:
        t = self.transform
        self.dest_rect = replace(self.dest_rect, x=int(t.x), y=int(t.y))

    def draw(self, batch: Any, window: Any) -> None:
        t = self.transform
        pos = _scaled(self.dest_rect, window.scale)
        batch.draw(pos, _FULL_UV, _NO_TEXTURE, t.z_index, self.color, t.rotation)


class LightTextureComponent(Component):
    """A light drawn with the entity's sprite colour at a fixed radius."""

    DEPTH = 5.0

    def __init__(self, z_index: float = 0.0) -> None:
        self.z_index = z_index
        self.radius = 20.0
        self.transform: Optional[TransformComponent] = None
        self.sprite: Optional[SpriteComponent] = None

    def init(self) -> None:
        entity = self.entity
        if not entity.has_component(SpriteComponent):
            entity.add_component(SpriteComponent())
        self.transform = entity.get_component(TransformComponent)
        self.sprite = entity.get_component(SpriteComponent)
        size = int(self.radius)
        self.sprite.dest_rect = replace(self.sprite.dest_rect, w=size, h=size)

    def draw(self, batch: Any, window: Any) -> None:
        pos = _scaled(self.sprite.dest_rect, window.scale)
        batch.draw(pos, _FULL_UV, _NO_TEXTURE, self.DEPTH, self.sprite.color)


class TileComponent(Component):
    """A map tile: a sprite region plus, when solid, a collision grid."""

    def __init__(
        self,
        src_x: int,
        src_y: int,
        x: int,
        y: int,
        tile_size: int,
        tile_scale: int,
        texture_id: str,
        is_solid: bool,
    ) -> None:
        self.texture_id = texture_id
        self.position = (x, y)
        self.full_solid = is_solid
        self.has_grid = False
        self.scaled_tile = tile_size * tile_scale
        self.src_rect = Rect(src_x, src_y, tile_size, tile_size)
        self.dest_rect = Rect(x, y, self.scaled_tile, self.scaled_tile)
        self.transform: Optional[TransformComponent] = None
        self.sprite: Optional[SpriteComponent] = None
        self.grid: Optional[GridComponent] = None

    def init(self) -> None:
        entity = self.entity
        x, y = self.position
        if not entity.has_component(TransformComponent):
            transform = entity.add_component(
                TransformComponent((x, y), Layer.ACTION, (32, 32), 1)
            )
            transform.velocity_x = 0.0
            transform.velocity_y = 0.0
        self.transform = entity.get_component(TransformComponent)

        if not entity.has_component(SpriteComponent):
            entity.add_component(SpriteComponent(self.texture_id))
        self.sprite = entity.get_component(SpriteComponent)
        self.sprite.src_rect = self.src_rect
        self.sprite.dest_rect = self.dest_rect

        if not entity.has_component(GridComponent) and self.full_solid:
            entity.add_component(GridComponent(x, y, self.scaled_tile))
        if entity.has_component(GridComponent):
            self.grid = entity.get_component(GridComponent)
            self.has_grid = True


class UILabel(Component):
    """A line of text made of one sprite entity per character."""

    def __init__(
        self,
        manager: Optional[Manager] = None,
        label: str = "",
        font_family: str = "",
    ) -> None:
        self._manager = manager
        self.label = label
        self.font_family = font_family
        self._letters: list[Entity] = []
        self.transform: Optional[TransformComponent] = None

    @property
    def letters(self) -> tuple[Entity, ...]:
        return tuple(self._letters)

    def init(self) -> None:
        if self._manager is None:
            self._manager = self.entity.manager
        self.transform = _ensure_transform(self.entity)
        self.set_letters(self.label)

    def update(self, delta_time: float) -> None:
        """Lay the letters out left to right from the label's position."""
        offset = 0
        for letter in self._letters:
            t = letter.get_component(TransformComponent)
            t.x = float(int(self.transform.x + offset))
            t.y = float(int(self.transform.y))
            offset += t.width
        if offset > self.transform.width:
            self.transform.width = offset

    def draw(self, batch: Any, window: Any) -> None:
        for letter in self._letters:
            letter.draw(batch, window)

    def set_letters(self, label: str) -> None:
        """Create one HUD entity per character of ``label``."""
        self._letters.clear()
        self.label = label
        for char in label:
            rect = letter_rect(char)
            letter = self._manager.add_entity(True)
            letter.add_component(
                TransformComponent(self.transform.position, Layer.ACTION, (rect.w, rect.h), 1)
            )
            sprite = letter.add_component(SpriteComponent(self.font_family))
            sprite.src_rect = replace(sprite.src_rect, x=rect.x, y=rect.y)
            self._letters.append(letter)


class ButtonState(enum.Enum):
    NORMAL = enum.auto()
    HOVERED = enum.auto()
    PRESSED = enum.auto()


class ButtonComponent(Component):
    """Calls ``on_click`` on the update after the button was pressed."""

    def __init__(
        self,
        on_click: Optional[Callable[[], None]],
        label: str = "",
        dimensions: tuple[int, int] = (0, 0),
        background: Optional[Color] = None,
    ) -> None:
        self.state = ButtonState.NORMAL
        self.on_click = on_click
        self.label = label
        self.dimensions = tuple(dimensions)
        self.background = background if background is not None else Color()
        self.ui_label: Optional[Entity] = None
        self.background_entity: Optional[Entity] = None

    def init(self) -> None:
        manager = self.entity.manager
        if self.label:
            label_entity = manager.add_entity(True)
            label_entity.add_component(TransformComponent((0, 0), Layer.ACTION, (32, 32), 1))
            label_entity.add_component(UILabel(manager, self.label, "arial"))
            label_entity.parent = self.entity
            label_entity.add_group(Group.BUTTON_LABELS)
            self.ui_label = label_entity
        if self.dimensions != (0, 0):
            panel = manager.add_entity(True)
            panel.add_component(TransformComponent((0, 0), Layer.ACTION, self.dimensions, 1))
            rectangle = panel.add_component(RectangleComponent())
            rectangle.color = self.background
            panel.parent = self.entity
            panel.add_group(Group.BACKGROUND_PANELS)
            self.background_entity = panel

    def update(self, delta_time: float) -> None:
        if self.state is ButtonState.PRESSED and self.on_click:
            self.on_click()
        self.state = ButtonState.NORMAL