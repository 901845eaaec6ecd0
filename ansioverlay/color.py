"""RGBA colours and integer pairs used for positions and dimensions."""

from __future__ import annotations

from dataclasses import dataclass, replace


@dataclass(frozen=True)
class Color:
    """An RGBA colour with 8-bit channels."""

    r: int = 255
    g: int = 255
    b: int = 255
    a: int = 255

    def __post_init__(self) -> None:
        for name in ("r", "g", "b", "a"):
            value = getattr(self, name)
            if not isinstance(value, int) or not 0 <= value <= 255:
                raise ValueError(f"colour channel {name}={value!r} is not in the range 0..255")

    def with_alpha(self, alpha: float) -> Color:
        """Return the same colour with another alpha; fractions are truncated."""
        return replace(self, a=int(alpha))


@dataclass(frozen=True)
class IntPair:
    """A pair of integers that serves both as a position and as a dimension."""

    x: int = 0
    y: int = 0

    @property
    def w(self) -> int:
        return self.x

    @property
    def h(self) -> int:
        return self.y