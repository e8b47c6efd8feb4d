"""A small 2D game engine core: entities, components, animation, sprite batching, input and screens."""

__version__ = "0.1.0"