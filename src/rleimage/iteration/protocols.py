from __future__ import annotations
from typing import TYPE_CHECKING, Any, Iterator, List, Protocol, runtime_checkable

if TYPE_CHECKING:
    from rleimage.models.common import ImageRegion


@runtime_checkable
class ScanlineCursor(Protocol):
    """What a scanline-major traversal needs from a cursor, whatever the storage."""

    def go_to_begin_of_line(self) -> None: ...
    def go_to_end_of_line(self) -> None: ...
    def is_at_end_of_line(self) -> bool: ...
    def next_line(self) -> None: ...
    def step_forward(self) -> "ScanlineCursor": ...
    def step_backward(self) -> "ScanlineCursor": ...


@runtime_checkable
class RegionScanlineCursor(ScanlineCursor, Protocol):
    """A scanline cursor that also knows its region and can read the pixel under it."""

    @property
    def region(self) -> "ImageRegion": ...
    def value(self) -> Any: ...
    def is_at_end(self) -> bool: ...


def iter_lines(cursor: RegionScanlineCursor, *, reverse: bool = False) -> Iterator[List[Any]]:
    """
    Yield the pixel values of each remaining line of the cursor's region.
    With `reverse`, every line is read from its last pixel back to its first.
    """
    width = cursor.region.size[-1]
    while not cursor.is_at_end():
        if reverse:
            cursor.go_to_end_of_line()
            out = []
            for _ in range(width):
                cursor.step_backward()
                out.append(cursor.value())
        else:
            cursor.go_to_begin_of_line()
            out = []
            while not cursor.is_at_end_of_line():
                out.append(cursor.value())
                cursor.step_forward()
        yield out
        cursor.next_line()
