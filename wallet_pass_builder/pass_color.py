"""
Pass colors, written in the descriptor as CSS-style RGB triples.
"""

from typing import NamedTuple

from PIL import ImageColor


class PassColor(NamedTuple):
    """Immutable RGB color. ``str()`` gives the descriptor form ``rgb(r, g, b)``."""

    red: int
    green: int
    blue: int

    @classmethod
    def parse(cls, value) -> "PassColor":
        """
        Builds a color from a CSS color string, an (r, g, b) sequence or another PassColor.

        Any color string understood by Pillow's ImageColor is accepted,
        e.g. ``rgb(23, 187, 82)``, ``#17bb52`` or ``green``.

        Raises:
            TypeError: when the value can't be understood as a color
        """
        if isinstance(value, PassColor):
            return value
        if isinstance(value, str):
            try:
                rgb = ImageColor.getrgb(value.strip())
            except ValueError:
                raise TypeError(f"Invalid color value {value!r}") from None
            return cls(*rgb[:3])
        if isinstance(value, (tuple, list)) and len(value) in (3, 4):
            channels = value[:3]
            if not all(isinstance(c, int) and not isinstance(c, bool) for c in channels):
                raise TypeError(f"Color channels must be integers, received {value!r}")
            if not all(0 <= c <= 255 for c in channels):
                raise TypeError(f"Color channels must be in 0..255 range, received {value!r}")
            return cls(*channels)
        raise TypeError(f"Invalid color value {value!r}")

    def __str__(self) -> str:
        return f"rgb({self.red}, {self.green}, {self.blue})"
