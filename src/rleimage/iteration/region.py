from __future__ import annotations
from typing import Generic, Iterator, Optional, Sequence, Tuple
from rleimage.models.common import ImageRegion
from rleimage.models.image import RLEImage
from .scanline import PixelT, RLEScanlineConstIterator


class RLERegionConstIterator(Generic[PixelT]):
    """
    Pixel-at-a-time walk over a region, wrapping from one line to the next.
    Built on a scanline cursor; `step()` is a forward step plus `next_line()`
    whenever the line runs out.
    """
    __slots__ = ("_cursor",)

    def __init__(self, image: RLEImage, region: Optional[ImageRegion] = None, *, checked: Optional[bool] = None):
        self._cursor: RLEScanlineConstIterator[PixelT] = RLEScanlineConstIterator(image, region, checked=checked)

    @property
    def image(self) -> RLEImage: return self._cursor.image
    @property
    def region(self) -> ImageRegion: return self._cursor.region
    @property
    def checked(self) -> bool: return self._cursor.checked
    @property
    def index(self) -> Tuple[int, ...]: return self._cursor.index

    def value(self) -> PixelT: return self._cursor.value()
    def go_to_begin(self) -> None: self._cursor.go_to_begin()
    def is_at_end(self) -> bool: return self._cursor.is_at_end()
    def set_index(self, index: Sequence[int]) -> None: self._cursor.set_index(index)

    def step(self) -> "RLERegionConstIterator[PixelT]":
        c = self._cursor
        c.step_forward()
        if c.is_at_end_of_line():
            c.next_line()
        return self

    def scanline(self) -> RLEScanlineConstIterator[PixelT]:
        """A scanline cursor standing where this iterator stands."""
        return RLEScanlineConstIterator.from_iterator(self)

    def __iter__(self) -> Iterator[PixelT]:
        c = self._cursor
        while not c.is_at_end():
            yield c.value()
            self.step()

    def copy(self) -> "RLERegionConstIterator[PixelT]":
        other = RLERegionConstIterator.__new__(type(self))
        other._cursor = self._cursor.copy()
        return other

    __copy__ = copy
