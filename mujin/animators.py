"""Components that drive sprite animations and keyboard movement."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Optional

from mujin.animation import Animation, AnimatorManager, FlashAnimation, MovingAnimation
from mujin.components import RigidBodyComponent, TransformComponent
from mujin.ecs import Component
from mujin.input import InputManager
from mujin.letters import Rect
from mujin.sprites import Flip, SpriteComponent

__all__ = [
    "AnimatorComponent",
    "MovingAnimatorComponent",
    "FlashAnimatorComponent",
    "KeyBindings",
    "KeyboardControllerComponent",
    "WALKING_SPEED",
    "RUNNING_SPEED",
    "JUMPING_SPEED",
]

WALKING_SPEED = 3.5
RUNNING_SPEED = 8.5
JUMPING_SPEED = 3.0


class AnimatorComponent(Component):
    """Plays named sprite-sheet animations on the entity's sprite.

    Animations are looked up in ``manager``, by default the shared
    ``AnimatorManager``. A finished animation falls back to the idle one.
    """

    START_ANIMATION = "P1Idle"
    RESET_ANIMATION = "P1Idle"

    def __init__(
        self,
        texture_id: Optional[str] = None,
        manager: Optional[AnimatorManager] = None,
    ) -> None:
        self.texture_id = texture_id
        self._manager = manager
        self.sprite: Optional[SpriteComponent] = None
        self.animation_name: Optional[str] = None
        self.resume_time = 0

    @property
    def manager(self) -> AnimatorManager:
        return self._manager if self._manager is not None else AnimatorManager.instance()

    def _attach_sprite(self) -> None:
        entity = self.entity
        if not entity.has_component(SpriteComponent):
            entity.add_component(SpriteComponent(self.texture_id))
        self.sprite = entity.get_component(SpriteComponent)

    def _apply_texture(self) -> None:
        if self.texture_id is None:
            self.sprite.destroy_texture()
        else:
            self.sprite.set_texture(self.texture_id)

    def init(self) -> None:
        self._attach_sprite()
        self.play(self.START_ANIMATION)
        self._apply_texture()

    def update(self, delta_time: float) -> None:
        animation = self.sprite.animation
        if animation.has_finished:
            animation.finished = False
            animation.times_played = 0
            self.reset_animation()
        self.sprite.animation.advance_frame(delta_time)
        self.sprite.set_current_frame()

    def draw(self, batch: Any, window: Any) -> None:
        """Drawing is left to the sprite."""

    @staticmethod
    def _lookup(table: dict, name: str, kind: str):
        try:
            return table[name]
        except KeyError:
            raise KeyError(f"no {kind} named {name!r}") from None

    def play(self, name: str, reps: int = 0) -> None:
        """Start the named animation; ``reps`` overrides its repetitions if non-zero."""
        animation: Animation = self._lookup(self.manager.animations, name, "animation")
        self.animation_name = name
        self.sprite.set_animation(
            animation.index_x,
            animation.index_y,
            animation.total_frames,
            animation.speed,
            animation.type,
            reps or animation.reps,
        )

    def reset_animation(self) -> None:
        """Go back to the idle animation, repeating without end."""
        name = self.RESET_ANIMATION
        animation: Animation = self._lookup(self.manager.animations, name, "animation")
        self.animation_name = name
        self.sprite.set_animation(
            animation.index_x,
            animation.index_y,
            animation.total_frames,
            animation.speed,
            animation.type,
        )

    def destroy_texture(self) -> None:
        self.sprite.destroy_texture()


class MovingAnimatorComponent(AnimatorComponent):
    """Moves the sprite along a named movement animation."""

    START_ANIMATION = "Default"
    RESET_ANIMATION = "Default"

    def init(self) -> None:
        self._attach_sprite()
        self.play(self.START_ANIMATION)
        self._apply_texture()

    def update(self, delta_time: float) -> None:
        sprite = self.sprite
        animation = sprite.moving_animation
        if animation.has_finished:
            animation.finished = False
            animation.times_played = 0
            self.reset_animation()

        t = sprite.transform
        sprite.dest_rect = Rect(
            int(t.x), int(t.y), int(t.width * t.scale), int(t.height * t.scale)
        )

        sprite.moving_animation.advance_frame(delta_time)
        if len(sprite.moving_animation.positions) == 1:
            sprite.set_move_frame()
        else:
            sprite.set_specific_move_frame()

    def _set(self, name: str, reps: int) -> None:
        animation: MovingAnimation = self._lookup(
            self.manager.moving_animations, name, "moving animation"
        )
        self.animation_name = name
        self.sprite.set_moving_animation(
            animation.index_x,
            animation.index_y,
            animation.total_frames,
            animation.speed,
            animation.type,
            animation.positions,
            animation.z_indices,
            animation.rotations,
            reps,
        )

    def play(self, name: str, reps: int = 0) -> None:
        animation = self._lookup(self.manager.moving_animations, name, "moving animation")
        self._set(name, reps or animation.reps)

    def reset_animation(self) -> None:
        self._set(self.RESET_ANIMATION, 0)


class FlashAnimatorComponent(AnimatorComponent):
    """Blends the sprite's colour through a named flash animation."""

    START_ANIMATION = "Default"
    RESET_ANIMATION = "Default"

    def init(self) -> None:
        self._attach_sprite()
        self.play(self.START_ANIMATION)
        self._apply_texture()

    def update(self, delta_time: float) -> None:
        animation = self.sprite.flash_animation
        if animation.has_finished:
            animation.finished = False
            animation.times_played = 0
            self.reset_animation()
        self.sprite.flash_animation.advance_frame(delta_time)
        self.sprite.set_flash_frame()

    def _set(self, name: str, reps: int) -> None:
        animation: FlashAnimation = self._lookup(
            self.manager.flash_animations, name, "flash animation"
        )
        self.animation_name = name
        self.sprite.set_flash_animation(
            animation.index_x,
            animation.index_y,
            animation.total_frames,
            animation.speed,
            animation.type,
            animation.speeds_as_list(),
            animation.flash_color,
            reps,
        )

    def play(self, name: str, reps: int = 0) -> None:
        animation = self._lookup(self.manager.flash_animations, name, "flash animation")
        self._set(name, reps or animation.reps)

    def reset_animation(self) -> None:
        self._set(self.RESET_ANIMATION, 0)


@dataclass(frozen=True)
class KeyBindings:
    """Key codes of the player controls."""

    jump: int
    walk_left: int
    walk_right: int
    attack: int
    ability1: int
    pick_up: int
    inventory: int
    down: int
    run: int


class KeyboardControllerComponent(Component):
    """Turns held keys into walking, running and jumping velocities."""

    def __init__(
        self,
        input_manager: InputManager,
        keys: KeyBindings,
        idle_animation: str = "P1Idle",
        jump_animation: str = "P1Jump",
        walk_animation: str = "P1Walk",
        attack_animation: str = "P1Attack",
        ability1_animation: str = "P1Ability1",
    ) -> None:
        self.input = input_manager
        self.keys = keys
        self.idle_animation = idle_animation
        self.jump_animation = jump_animation
        self.walk_animation = walk_animation
        self.attack_animation = attack_animation
        self.ability1_animation = ability1_animation
        self.transform: Optional[TransformComponent] = None
        self.animator: Optional[AnimatorComponent] = None
        self.rigidbody: Optional[RigidBodyComponent] = None
        self.sprite: Optional[SpriteComponent] = None

    def init(self) -> None:
        entity = self.entity
        self.transform = entity.get_component(TransformComponent)
        self.animator = entity.get_component(AnimatorComponent)
        self.rigidbody = entity.get_component(RigidBodyComponent)
        self.sprite = entity.get_component(SpriteComponent)

    def update(self, delta_time: float) -> None:
        down = self.input.is_key_down
        keys = self.keys
        transform = self.transform
        left = down(keys.walk_left)
        right = down(keys.walk_right)

        if down(keys.jump) and self.rigidbody.on_ground:
            self.rigidbody.just_jumped = True
            transform.velocity_y = -JUMPING_SPEED

        if left:
            transform.velocity_x = -RUNNING_SPEED
            self.sprite.flip = Flip.HORIZONTAL
        if right:
            if self.sprite.flip is Flip.HORIZONTAL:
                self.animator.sprite.flip = Flip.NONE
            transform.velocity_x = RUNNING_SPEED
        if not left and not right:
            transform.velocity_x = 0.0

        if not down(keys.run):
            if left:
                transform.velocity_x = -WALKING_SPEED
            elif right:
                transform.velocity_x = WALKING_SPEED