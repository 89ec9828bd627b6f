"""Two-dimensional unsigned integer vectors used for sizes and positions."""

from __future__ import annotations

from collections.abc import Iterator
from dataclasses import dataclass
from typing import Union

VecLike = Union["Vec2d", int, tuple[int, int]]


@dataclass(frozen=True)
class Vec2d:
    """A pair of non-negative integers, used for sizes and positions in pixels."""

    x: int = 0
    y: int = 0

    def __post_init__(self) -> None:
        if self.x < 0 or self.y < 0:
            raise ValueError(f"Vec2d components must be non-negative, got {self.x}, {self.y}")

    @classmethod
    def square(cls, size: int) -> Vec2d:
        """A vector whose two components are equal to ``size``."""
        return cls(size, size)

    @classmethod
    def _coerce(cls, other: VecLike) -> Vec2d:
        if isinstance(other, Vec2d):
            return other
        if isinstance(other, int):
            return cls.square(other)
        x, y = other
        return cls(x, y)

    def max(self, other: VecLike) -> Vec2d:
        """Component-wise maximum."""
        other = self._coerce(other)
        return Vec2d(max(self.x, other.x), max(self.y, other.y))

    def min(self, other: VecLike) -> Vec2d:
        """Component-wise minimum."""
        other = self._coerce(other)
        return Vec2d(min(self.x, other.x), min(self.y, other.y))

    def ceil_div(self, other: VecLike) -> Vec2d:
        """Component-wise division, rounding up."""
        other = self._coerce(other)
        return Vec2d(-(-self.x // other.x), -(-self.y // other.y))

    def area(self) -> int:
        return self.x * self.y

    def fits_inside(self, other: VecLike) -> bool:
        other = self._coerce(other)
        return self.x <= other.x and self.y <= other.y

    def __iter__(self) -> Iterator[int]:
        yield self.x
        yield self.y

    def __add__(self, other: VecLike) -> Vec2d:
        other = self._coerce(other)
        return Vec2d(self.x + other.x, self.y + other.y)

    def __sub__(self, other: VecLike) -> Vec2d:
        """Component-wise subtraction, saturating at zero."""
        other = self._coerce(other)
        return Vec2d(max(self.x - other.x, 0), max(self.y - other.y, 0))

    def __mul__(self, other: VecLike) -> Vec2d:
        other = self._coerce(other)
        return Vec2d(self.x * other.x, self.y * other.y)

    __rmul__ = __mul__

    def __floordiv__(self, other: VecLike) -> Vec2d:
        other = self._coerce(other)
        return Vec2d(self.x // other.x, self.y // other.y)

    def __str__(self) -> str:
        return f"x={self.x} y={self.y}"


def max_size_in_rect(position: Vec2d, tile_size: Vec2d, canvas_size: Vec2d) -> Vec2d:
    """The largest size a tile at ``position`` can have while staying inside the canvas."""
    return (position + tile_size).min(canvas_size) - position


def tile_positions(size: Vec2d, tile_size: Vec2d) -> Iterator[Vec2d]:
    """Column/row positions of the tiles covering an image, row by row."""
    grid = size.ceil_div(tile_size)
    for y in range(grid.y):
        for x in range(grid.x):
            yield Vec2d(x, y)