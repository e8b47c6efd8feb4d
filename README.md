# mujin

This package is the core of a small 2D game engine. It makes no graphics calls of its own. It provides:

- an entity–component system (`mujin.ecs`). It has entity groups (`Group`), drawing layers (`Layer`), and a spatial `Grid` for finding nearby entities.
- transform, rigid-body (gravity), collider and tile-collision-grid components (`mujin.components`).
- sprite, coloured rectangle, light, tile, text label and button components (`mujin.sprites`).
- frame animations of four kinds: looped, play-n-times, back-and-forth, and moving or flashing variants. They are in `mujin.animation`. `mujin.animators` holds the components that drive them, and a keyboard movement controller.
- a sprite batch that turns drawn quads into sorted render batches grouped by texture (`mujin.spritebatch`).
- keyboard and mouse state (`mujin.input`) and a frame-rate limiter (`mujin.timing`).
- game screens, the screen list that moves between them (`mujin.screens`), and a fixed-step main loop (`mujin.game`).
- PNG texture loading through Pillow (`mujin.textures`).
- a debug renderer that builds line geometry for boxes and circles (`mujin.debug_renderer`).
- the rectangles of a bitmap font sheet (`mujin.letters`).

It needs Python 3.10 or later and Pillow.

## Input

`InputManager` keeps track of which keys are down now and which were down on the previous frame:

```python
from mujin.input import InputManager

keys = InputManager()
keys.press_key(32)
assert keys.is_key_down(32)
assert keys.is_key_pressed(32)   # down now, up last frame

keys.update()                    # call once per frame
assert not keys.is_key_pressed(32)

keys.set_mouse_coords(15.0, 15.0)
assert keys.check_mouse_collision((10.0, 10.0), (20, 20))
```

## Bitmap font lookup

`letter_rect` returns the region of the font sheet that holds a character. A character the sheet does not have gets a zero-width rectangle, `UNSUPPORTED_RECT`. Anything other than a single character raises `ValueError`:

```python
from mujin.letters import letter_rect

rect = letter_rect("a")   # Rect(x=0, y=0, w=10, h=20)
```

## Animations

`AnimatorManager.instance()` is the shared registry of named animations. `initialize_animators()` adds the built-in set and leaves names that are already registered alone:

```python
from mujin.animation import AnimatorManager

animations = AnimatorManager.instance()
animations.initialize_animators()
idle = animations.animations["P1Idle"]
idle.advance_frame(1.0)
```

`Animation.advance_frame(delta_time)` moves an animation forward. Its `AnimType` decides what happens after the last frame:

- a looped animation starts again;
- a play-n-times animation finishes after `reps` repetitions;
- a back-and-forth animation runs in reverse to the first frame and then starts again.

`MovingAnimation` follows a path of offsets. Each position has a matching z-index and rotation, and lists of different lengths raise `ValueError`. `FlashAnimation` cycles through the four `FlashState` phases and blends towards a flash colour.

## Entities

```python
from mujin.ecs import Manager
from mujin.components import TransformComponent

manager = Manager()
player = manager.add_entity(False)
player.add_component(TransformComponent((10, 20)))
manager.update(1.0)
player.destroy()
manager.refresh()   # drops destroyed entities and stale group memberships
```

- `Entity.add_component` attaches a component and calls its `init`. `Entity.get_component(ComponentType)` finds it again.
- Set `Manager.camera` to a `Rect` and transforms outside it, plus a culling margin, pause their entity.
- Give the manager a `Grid` and `Manager.adjacent_entities` returns the entities of a group in the surrounding cells.

## Sprite batching

Call `SpriteBatch.begin`, then `draw` once for each quad, then `SpriteBatch.end`. Each `draw` call adds a quad with a texture id, a depth and a `Color`, rotated by an angle in degrees about its centre. `end` does three things:

- it sorts the quads in the chosen `GlyphSortType` order;
- it fills `vertices` with six vertices per quad;
- it fills `render_batches` with `RenderBatch` runs, split wherever the texture changes.

## Screens and the main loop

- Subclass `GameScreen` for each screen.
- Subclass `MainGame` and register the screens in `add_screens`, using `self.screen_list.add_screen(...)` and `self.screen_list.set_screen(0)`.
- Call `run(max_frames)` to start the loop.
- Pass input to `on_event` as `Event` values. Pressing key code 27 (`KEY_ESCAPE`) ends the game.

`MainGame.frame_steps(frame_time)` splits a frame's duration in milliseconds into physics steps. A step of 1.0 is one frame at 60 FPS, and a frame is split into at most six steps.

## What the package does not do

The package opens no window, draws nothing to the screen and plays no sound. `Window` only records a size, a scale and display options, and counts presented frames. Sprite batches and the debug renderer produce vertex data but do not draw it. Events are not read from any device. The program that embeds the engine must supply them through `MainGame.on_event`.

## Running tests

The tests use pytest. Install it with the `test` extra.