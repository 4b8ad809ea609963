from __future__ import annotations
from math import prod
from typing import Any, Sequence, Tuple
from pydantic import BaseModel, ConfigDict, Field, model_validator


class Run(BaseModel):
    model_config = ConfigDict(frozen=True)

    length: int = Field(..., ge=1)
    value: Any


class ImageRegion(BaseModel):
    """
    Rectangular region in NumPy axis order; the last axis is the scanline axis.
    `index` is the first pixel, `size` the extent per axis.
    """
    model_config = ConfigDict(frozen=True)

    index: Tuple[int, ...]
    size: Tuple[int, ...]

    @model_validator(mode="after")
    def _check_shape(self) -> "ImageRegion":
        if len(self.index) == 0:
            raise ValueError("region needs at least one axis")
        if len(self.index) != len(self.size):
            raise ValueError(f"index has {len(self.index)} axes but size has {len(self.size)}")
        if any(s < 0 for s in self.size):
            raise ValueError(f"negative region size {self.size}")
        return self

    @classmethod
    def from_shape(cls, shape: Sequence[int]) -> "ImageRegion":
        return cls(index=(0,) * len(shape), size=tuple(int(s) for s in shape))

    @property
    def dimension(self) -> int: return len(self.size)
    @property
    def upper_index(self) -> Tuple[int, ...]:
        return tuple(i + s for i, s in zip(self.index, self.size))
    @property
    def begin_col(self) -> int: return self.index[-1]
    @property
    def end_col(self) -> int: return self.index[-1] + self.size[-1]
    @property
    def line_count(self) -> int: return prod(self.size[:-1])
    @property
    def number_of_pixels(self) -> int: return prod(self.size)
    @property
    def is_empty(self) -> bool: return self.number_of_pixels == 0

    def is_inside(self, other: "ImageRegion | Sequence[int]") -> bool:
        """True if a pixel index, or a whole region, lies within this region."""
        if isinstance(other, ImageRegion):
            if other.dimension != self.dimension:
                return False
            if other.is_empty:
                return all(lo <= i <= hi for lo, i, hi in zip(self.index, other.index, self.upper_index))
            return all(
                lo <= i and i + s <= hi
                for lo, i, s, hi in zip(self.index, other.index, other.size, self.upper_index)
            )
        idx = tuple(other)
        if len(idx) != self.dimension:
            return False
        return all(lo <= i < hi for lo, i, hi in zip(self.index, idx, self.upper_index))
