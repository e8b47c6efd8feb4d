"""Sprite-sheet, movement and colour-flash animations and their registry."""

from __future__ import annotations

import enum
from typing import Iterable, Optional, Sequence, Union

from mujin.spritebatch import Color

__all__ = [
    "AnimType",
    "Animation",
    "MovingAnimation",
    "FlashState",
    "FlashAnimation",
    "AnimatorManager",
]


class AnimType(enum.IntEnum):
    """How an animation walks through its frames."""

    NONE = 0
    PLAY_N_TIMES = 1  # runs through the frames, repeating ``reps`` times
    LOOPED = 2  # runs through the frames again and again
    BACK_FORTH = 3  # runs to the last frame and back to the first

    @classmethod
    def coerce(cls, value: Union["AnimType", str]) -> "AnimType":
        """Accept an ``AnimType`` or its lower-case name; unknown names are NONE."""
        if isinstance(value, AnimType):
            return value
        return _TYPE_NAMES.get(value, cls.NONE)


_TYPE_NAMES = {
    "play_n_times": AnimType.PLAY_N_TIMES,
    "back_forth": AnimType.BACK_FORTH,
    "looped": AnimType.LOOPED,
}

AnimTypeLike = Union[AnimType, str]


class Animation:
    """Frame counter for a row of frames on a sprite sheet."""

    def __init__(
        self,
        index_x: int = 0,
        index_y: int = 0,
        total_frames: int = 0,
        speed: float = 0.0,
        anim_type: AnimTypeLike = AnimType.NONE,
        reps: int = 0,
    ) -> None:
        self.index_x = index_x
        self.index_y = index_y
        self.total_frames = total_frames
        self.speed = speed
        self.type = AnimType.coerce(anim_type)
        self.reps = reps

        self.frame_times_played = 0
        self.cur_frame_index = 0
        self.cur_frame_index_f = 0.0
        self.times_played = 0
        self.flow_direction = 1
        self.finished = False

    def __repr__(self) -> str:
        return (
            f"{type(self).__name__}(index_x={self.index_x}, index_y={self.index_y}, "
            f"total_frames={self.total_frames}, speed={self.speed}, "
            f"type={self.type.name}, reps={self.reps})"
        )

    @property
    def has_finished(self) -> bool:
        return self.finished

    def reset_frame_index(self) -> None:
        self.cur_frame_index = 0
        self.cur_frame_index_f = 0.0
        self.frame_times_played = 0

    def advance_frame(self, delta_time: float) -> None:
        """Move the animation on by ``delta_time`` frames' worth of time."""
        previous = self.cur_frame_index
        if self.type in (AnimType.LOOPED, AnimType.PLAY_N_TIMES):
            self._step_forward(delta_time)
            self._track_frame_change(previous)
            self._wrap_after_last_frame()
        elif self.type is AnimType.BACK_FORTH:
            self._step_back_forth(delta_time)
            self._track_frame_change(previous)

    def _step_forward(self, delta_time: float) -> None:
        self.cur_frame_index_f += self.speed * delta_time
        self.cur_frame_index = int(self.cur_frame_index_f)

    def _track_frame_change(self, previous: int) -> bool:
        changed = previous != self.cur_frame_index
        if changed:
            self.frame_times_played = 1
        else:
            self.frame_times_played += 1
        return changed

    def _count_repetition(self) -> None:
        self.times_played += 1
        if self.reps and self.times_played >= self.reps:
            self.finished = True

    def _wrap_after_last_frame(self) -> None:
        if self.cur_frame_index > self.total_frames - 1:
            self.reset_frame_index()
            self._count_repetition()

    def _step_back_forth(self, delta_time: float) -> None:
        if self.flow_direction == 1:
            self.cur_frame_index_f += self.speed * delta_time
            if self.cur_frame_index_f > self.total_frames:
                self.cur_frame_index_f -= self.speed
                self.flow_direction = -1
            self.cur_frame_index = int(self.cur_frame_index_f)
        elif self.flow_direction == -1:
            if self.cur_frame_index > 0:
                self.cur_frame_index_f -= self.speed * delta_time
                self.cur_frame_index = int(self.cur_frame_index_f)
            else:
                self.times_played += 1
                self.flow_direction = 1
                self.reset_frame_index()
                if self.reps and self.times_played >= self.reps:
                    self.finished = True


class MovingAnimation(Animation):
    """An animation that moves a sprite along a path of offsets.

    Every position has a matching z-index and rotation.
    """

    def __init__(
        self,
        index_x: int = 0,
        index_y: int = 0,
        total_frames: int = 0,
        speed: float = 0.0,
        anim_type: AnimTypeLike = AnimType.NONE,
        positions: Optional[Iterable[Sequence[float]]] = None,
        z_indices: Optional[Iterable[int]] = None,
        rotations: Optional[Iterable[int]] = None,
        reps: int = 0,
    ) -> None:
        self.positions = [(float(x), float(y)) for x, y in positions or ()]
        self.z_indices = list(z_indices or ())
        self.rotations = list(rotations or ())
        # A path animation has one frame per position.
        super().__init__(index_x, index_y, len(self.positions), speed, anim_type, reps)
        self._validate()

    @classmethod
    def from_distance(
        cls,
        index_x: int,
        index_y: int,
        total_frames: int,
        speed: float,
        anim_type: AnimTypeLike,
        dx: int,
        dy: int,
        reps: int = 0,
    ) -> "MovingAnimation":
        """An animation that moves by (dx, dy) every frame for ``total_frames``."""
        animation = cls(index_x, index_y, total_frames, speed, anim_type, [(dx, dy)], [0], [0], reps)
        animation.total_frames = total_frames
        return animation

    def _validate(self) -> None:
        count = len(self.positions)
        if count != len(self.z_indices) or count != len(self.rotations):
            raise ValueError(
                "All vectors (positions, zIndices, rotations) must have the same length."
            )


class FlashState(enum.IntEnum):
    FLASH_OUT = 0
    EASE_IN = 1
    FLASH_IN = 2
    EASE_OUT = 3


class FlashAnimation(Animation):
    """Blends a sprite towards a flash colour, cycling through four phases."""

    def __init__(
        self,
        index_x: int = 0,
        index_y: int = 0,
        total_frames: int = 0,
        speed: float = 0.0,
        anim_type: AnimTypeLike = AnimType.NONE,
        flash_times: Optional[Sequence[float]] = None,
        flash_color: Optional[Color] = None,
        reps: int = 0,
    ) -> None:
        super().__init__(index_x, index_y, total_frames, speed, anim_type, reps)
        self.interpolation_a = 0.0
        self.current_state = FlashState.FLASH_OUT
        self.flash_color = flash_color if flash_color is not None else Color()
        if flash_times is None:
            self.speeds: dict[FlashState, float] = {}
        else:
            times = list(flash_times)
            if len(times) < len(FlashState):
                raise ValueError(
                    f"flash_times needs {len(FlashState)} values, got {len(times)}"
                )
            self.speeds = {state: float(times[state]) for state in FlashState}

    def speeds_as_list(self) -> list[float]:
        """The phase speeds in FlashState order."""
        return [self.speeds[state] for state in FlashState]

    def _interpolation(self) -> float:
        fraction = self.cur_frame_index_f - int(self.cur_frame_index_f)
        if self.current_state is FlashState.EASE_IN:
            return fraction
        if self.current_state is FlashState.EASE_OUT:
            return 1.0 - fraction
        if self.current_state is FlashState.FLASH_IN:
            return 1.0
        return 0.0

    def advance_frame(self, delta_time: float) -> None:
        previous = self.cur_frame_index
        self.speed = self.speeds[self.current_state]
        self.interpolation_a = self._interpolation()

        if self.type in (AnimType.LOOPED, AnimType.PLAY_N_TIMES):
            self._step_forward(delta_time)
            if self._track_frame_change(previous):
                self.current_state = FlashState(
                    (self.current_state + 1) % len(self.speeds)
                )
            self._wrap_after_last_frame()


class AnimatorManager:
    """Registry of named animations shared by the animator components."""

    _instance: Optional["AnimatorManager"] = None

    def __init__(self) -> None:
        self.animations: dict[str, Animation] = {}
        self.moving_animations: dict[str, MovingAnimation] = {}
        self.flash_animations: dict[str, FlashAnimation] = {}

    @classmethod
    def instance(cls) -> "AnimatorManager":
        """The process-wide manager."""
        if cls._instance is None:
            cls._instance = cls()
        return cls._instance

    def initialize_animators(self) -> None:
        """Register the built-in animations; existing names are left alone."""
        animations = {
            "Default": Animation(6, 2, 1, 0.04, "looped"),
            "P1Idle": Animation(0, 0, 4, 0.1, "looped"),
            "P1Walk": Animation(0, 3, 8, 0.1, "looped"),
            "P1Jump": Animation(0, 2, 2, 0.1, "looped"),
            "P1Attack": Animation(0, 1, 4, 0.2, "play_n_times", 1),
            "P1Ability1": Animation(0, 1, 4, 0.04, "play_n_times", 1),
            "QuestionMark": Animation(1, 9, 3, 0.05, "back_forth"),
            "BrownBlock": Animation(3, 0, 1, 0.005, "looped"),
            "DarkBlock": Animation(2, 12, 1, 0.005, "looped"),
            "CoinFlip": Animation(1, 7, 2, 0.2, "looped"),
            "SkeletonIdle": Animation(0, 0, 4, 0.04, "looped"),
            "SkeletonWalk": Animation(0, 1, 4, 0.04, "looped"),
            "SkeletonAttack": Animation(0, 2, 8, 0.05, "play_n_times", 1),
            "GreenKoopaTroopaIdle": Animation(0, 0, 4, 0.1, "looped"),
            "GreenKoopaTroopaWalk": Animation(0, 2, 10, 0.1, "looped"),
            "GreenKoopaTroopaAttack": Animation(0, 1, 8, 0.1, "play_n_times", 1),
            "GreenShell": Animation(0, 0, 4, 0.1, "play_n_times", 5),
        }
        for name, animation in animations.items():
            self.animations.setdefault(name, animation)

        moving = {
            "Default": MovingAnimation.from_distance(0, 0, 0, 0.0, "looped", 0, 0),
            "PlayerVertTransition": MovingAnimation.from_distance(0, 0, 20, 1, "play_n_times", 0, 1, 1),
            "PlayerHorTransition": MovingAnimation.from_distance(0, 0, 20, 0.2, "play_n_times", 5, 0, 1),
            "BlockBounce": MovingAnimation.from_distance(0, 0, 10, 0.5, "back_forth", 0, -4, 1),
            "CoinBounce": MovingAnimation.from_distance(0, 0, 20, 1, "back_forth", 0, -2, 1),
            "SwordPlayAround": MovingAnimation(
                0, 0, 20, 1, "back_forth",
                [(0, 0), (150, 250), (-200, -300)],
                [1, 3, 2],
                [0, 90, 45],
                1,
            ),
        }
        for name, animation in moving.items():
            self.moving_animations.setdefault(name, animation)

        flashes = {
            "Default": FlashAnimation(
                0, 0, 4, 0, "looped", [0.2, 1.0, 0.2, 1.0], Color(255, 255, 255, 255)
            ),
            "PlayerHit": FlashAnimation(
                0, 0, 4, 0, "play_n_times", [0.2, 0.2, 0.2, 0.2], Color(255, 0, 0, 50), 10
            ),
            "RandomParticle": FlashAnimation(
                0, 0, 4, 0, "play_n_times", [0.2, 0.02, 0.2, 0.02], Color(0, 0, 255, 50), 5
            ),
        }
        for name, animation in flashes.items():
            self.flash_animations.setdefault(name, animation)