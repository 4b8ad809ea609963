from __future__ import annotations
import logging
from typing import List, Optional, Sequence, Tuple
from rleimage.models.common import ImageRegion, Run
from rleimage.models.image import RLEImage

log = logging.getLogger(__name__)


class LineWalker:
    """
    Steps through the scanlines of a region, last leading axis fastest,
    and exposes the run sequence of the line it stands on.
    """
    __slots__ = ("image", "region", "begin_col", "end_col", "line_index", "runs", "_at_end")

    def __init__(self, image: RLEImage, region: Optional[ImageRegion] = None):
        region = image.largest_region if region is None else region
        if not image.largest_region.is_inside(region):
            raise ValueError(f"region {region.index}+{region.size} not inside image of shape {image.shape}")
        self.image = image
        self.region = region
        self.begin_col = region.begin_col
        self.end_col = region.end_col
        self.line_index: Tuple[int, ...] = region.index[:-1]
        self.runs: Optional[List[Run]] = None
        self._at_end = True
        self.go_to_begin()
        log.debug("walker over %d lines of image %s", region.line_count, image.shape)

    def go_to_begin(self) -> None:
        self.line_index = self.region.index[:-1]
        self._at_end = self.region.is_empty
        self.runs = None if self._at_end else self.image.runs(self.line_index)

    def is_at_end(self) -> bool: return self._at_end

    def next_line(self) -> None:
        """Move to the next line of the region; past the last one, the walker is at end."""
        if self._at_end:
            return
        idx = list(self.line_index)
        lo = self.region.index
        hi = self.region.upper_index
        for axis in range(len(idx) - 1, -1, -1):
            idx[axis] += 1
            if idx[axis] < hi[axis]:
                self.line_index = tuple(idx)
                self.runs = self.image.runs(self.line_index)
                return
            idx[axis] = lo[axis]
        self._at_end = True
        self.runs = None

    def set_line(self, line_index: Sequence[int]) -> None:
        li = tuple(line_index)
        lo, hi = self.region.index[:-1], self.region.upper_index[:-1]
        if len(li) != len(lo) or not all(a <= i < b for a, i, b in zip(lo, li, hi)):
            raise ValueError(f"line {li} not inside region {self.region.index}+{self.region.size}")
        if self.region.is_empty:
            raise ValueError("cannot bind a line of an empty region")
        self.line_index = li
        self.runs = self.image.runs(li)
        self._at_end = False

    def copy(self) -> "LineWalker":
        other = LineWalker.__new__(LineWalker)
        for name in LineWalker.__slots__:
            setattr(other, name, getattr(self, name))
        return other
