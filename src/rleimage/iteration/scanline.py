from __future__ import annotations
import logging
from typing import Any, Generic, Iterator, List, Optional, Sequence, Tuple, TypeVar
from rleimage.codec.line_codec import locate
from rleimage.config import get_settings
from rleimage.models.common import ImageRegion, Run
from rleimage.models.image import RLEImage
from .walker import LineWalker

log = logging.getLogger(__name__)

PixelT = TypeVar("PixelT")


class ScanlineBoundsError(IndexError):
    """A cursor was stepped or read past a line boundary (checked mode only)."""


class RLEScanlineConstIterator(Generic[PixelT]):
    """
    Read-only cursor walking a region of an RLEImage scanline by scanline.

    Position along the current line is kept as a triple:
      col        absolute column of the pixel under the cursor
      run_idx    index of the run holding `col`
      remaining  pixels left in that run, counting the one at `col`

    Stepping only touches the run table when a run boundary is crossed, so a
    line of W pixels in R runs costs W cheap steps plus R lookups.

    At end of line `col == end_col`. If the region ends on a run boundary,
    `remaining` is 0 and `run_idx` names the run that held the last pixel;
    otherwise `remaining` is what is left of that run past `end_col`.
    Stepping forward at end of line, or backward at the first column, is a
    contract violation: undefined unless the cursor is `checked`, in which
    case it raises ScanlineBoundsError.
    """
    __slots__ = ("col", "run_idx", "remaining", "_walker", "_line", "_begin_col", "_end_col", "_width", "_checked")

    def __init__(self, image: RLEImage, region: Optional[ImageRegion] = None, *, checked: Optional[bool] = None):
        self._walker = LineWalker(image, region)
        self._begin_col = self._walker.begin_col
        self._end_col = self._walker.end_col
        self._width = image.width
        self._checked = get_settings().checked if checked is None else bool(checked)
        self._line: Optional[List[Run]] = None
        self.col = self._begin_col
        self.run_idx = 0
        self.remaining = 0
        self.go_to_begin()

    @classmethod
    def from_iterator(cls, other: Any, *, checked: Optional[bool] = None) -> "RLEScanlineConstIterator[PixelT]":
        """
        Explicit conversion from another region iterator (anything exposing
        `image`, `region` and `index`). The source must walk an RLEImage and
        stand inside its region, or be at its end.
        """
        image = getattr(other, "image", None)
        if not isinstance(image, RLEImage):
            raise TypeError(
                f"cannot convert {type(other).__name__} to a scanline iterator: "
                f"it walks {type(image).__name__}, not RLEImage"
            )
        if checked is None:
            checked = getattr(other, "checked", None)
        it = cls(image, other.region, checked=checked)
        at_end = getattr(other, "is_at_end", None)
        if callable(at_end) and at_end():
            it._go_to_end()
        else:
            it.set_index(other.index)
        log.debug("converted %s at %s", type(other).__name__, it.index)
        return it

    # position and pixel access
    @property
    def image(self) -> RLEImage: return self._walker.image
    @property
    def region(self) -> ImageRegion: return self._walker.region
    @property
    def checked(self) -> bool: return self._checked
    @property
    def index(self) -> Tuple[int, ...]: return self._walker.line_index + (self.col,)
    @property
    def position(self) -> Tuple[int, int, int]: return self.col, self.run_idx, self.remaining
    @property
    def runs(self) -> Optional[List[Run]]: return self._line

    def value(self) -> PixelT:
        if self._checked and (self._line is None or self.col == self._end_col):
            raise ScanlineBoundsError(f"no pixel under cursor at {self.index}")
        return self._line[self.run_idx].value

    # whole region
    def go_to_begin(self) -> None:
        self._walker.go_to_begin()
        if self._walker.is_at_end():
            self._line = None
            self.col = self._begin_col
        else:
            self._line = self._walker.runs
            self.go_to_begin_of_line()

    def _go_to_end(self) -> None:
        w = self._walker
        while not w.is_at_end():
            w.next_line()
        self._line = None
        self.col = self._begin_col

    def is_at_end(self) -> bool: return self._walker.is_at_end()

    def set_index(self, index: Sequence[int]) -> None:
        idx = tuple(index)
        if not self.region.is_inside(idx):
            raise ValueError(f"index {idx} outside region {self.region.index}+{self.region.size}")
        self._walker.set_line(idx[:-1])
        self._line = self._walker.runs
        self.col = idx[-1]
        self.run_idx, self.remaining = locate(self._line, self.col)

    # current line
    def go_to_begin_of_line(self) -> None:
        self.col = self._begin_col
        if self._begin_col == 0:
            self.run_idx = 0
            self.remaining = self._line[0].length
        else:
            self.run_idx, self.remaining = locate(self._line, self._begin_col)

    def go_to_end_of_line(self) -> None:
        self.col = self._end_col
        if self._end_col == self._width:
            self.run_idx = len(self._line) - 1
            self.remaining = 0
        else:
            self.run_idx, rem = locate(self._line, self._end_col - 1)
            self.remaining = rem - 1

    def is_at_end_of_line(self) -> bool:
        return self.col == self._end_col

    def next_line(self) -> None:
        """Move to the first column of the next line; past the last line the cursor is at end."""
        w = self._walker
        w.next_line()
        if not w.is_at_end():
            self._line = w.runs
            self.go_to_begin_of_line()
        else:
            self._line = None
            self.col = self._begin_col

    # prefix steps along the line
    def step_forward(self) -> "RLEScanlineConstIterator[PixelT]":
        if self._checked and (self._line is None or self.col == self._end_col):
            raise ScanlineBoundsError(f"step forward past end of line at {self.index}")
        self.col += 1
        self.remaining -= 1
        if self.remaining > 0:
            return self
        if self.col == self._end_col:
            return self
        self.run_idx += 1
        self.remaining = self._line[self.run_idx].length
        return self

    def step_backward(self) -> "RLEScanlineConstIterator[PixelT]":
        if self._checked and (self._line is None or self.col == self._begin_col):
            raise ScanlineBoundsError(f"step backward before begin of line at {self.index}")
        self.col -= 1
        self.remaining += 1
        if self.remaining <= self._line[self.run_idx].length:
            return self
        # now on the last pixel of the previous run
        self.run_idx -= 1
        self.remaining = 1
        return self

    # python iteration
    def iter_line(self) -> Iterator[PixelT]:
        """Yield values from the cursor to the end of the current line, advancing it."""
        while self.col != self._end_col:
            yield self._line[self.run_idx].value
            self.step_forward()

    def __iter__(self) -> Iterator[PixelT]:
        # consumes the cursor, like any input iterator
        while not self._walker.is_at_end():
            yield from self.iter_line()
            self.next_line()

    def copy(self) -> "RLEScanlineConstIterator[PixelT]":
        other = RLEScanlineConstIterator.__new__(type(self))
        for name in RLEScanlineConstIterator.__slots__:
            setattr(other, name, getattr(self, name))
        other._walker = self._walker.copy()
        return other

    __copy__ = copy

    def __repr__(self) -> str:
        if self.is_at_end():
            return f"{type(self).__name__}(at_end, region={self.region.index}+{self.region.size})"
        return f"{type(self).__name__}(index={self.index}, run_idx={self.run_idx}, remaining={self.remaining})"
