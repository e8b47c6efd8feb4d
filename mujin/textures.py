"""Loading PNG images into textures and keeping them by name."""

from __future__ import annotations

import itertools
import os
from dataclasses import dataclass, field
from typing import Optional, Union

from PIL import Image, UnidentifiedImageError

__all__ = ["Texture", "TextureManager"]

PathLike = Union[str, "os.PathLike[str]"]


@dataclass(frozen=True)
class Texture:
    """A decoded image: a handle, its size and its RGBA pixel bytes."""

    id: int
    width: int
    height: int
    pixels: bytes = field(default=b"", repr=False)


class TextureManager:
    """Decodes PNG files into textures and stores them under string ids."""

    _instance: Optional["TextureManager"] = None

    def __init__(self) -> None:
        self._textures: dict[str, Texture] = {}
        self._ids = itertools.count(1)

    @classmethod
    def instance(cls) -> "TextureManager":
        """The process-wide texture manager."""
        if cls._instance is None:
            cls._instance = cls()
        return cls._instance

    def load_png(self, path: PathLike) -> Texture:
        """Decode a PNG file into a new RGBA texture.

        Raises ``OSError`` if the file cannot be read and ``ValueError``
        if it is not a PNG image.
        """
        name = os.fspath(path)
        try:
            with Image.open(name) as image:
                if image.format != "PNG":
                    raise ValueError(f"{name}: not a PNG image")
                rgba = image.convert("RGBA")
        except UnidentifiedImageError as exc:
            raise ValueError(f"{name}: cannot decode image") from exc
        return Texture(next(self._ids), rgba.width, rgba.height, rgba.tobytes())

    def add_texture(self, texture_id: str, path: PathLike) -> Texture:
        """Load a PNG and store it under ``texture_id``, replacing any earlier one."""
        texture = self.load_png(path)
        self._textures[texture_id] = texture
        return texture

    def get(self, texture_id: str) -> Optional[Texture]:
        """The texture stored under ``texture_id``, or None."""
        return self._textures.get(texture_id)

    def __contains__(self, texture_id: object) -> bool:
        return texture_id in self._textures