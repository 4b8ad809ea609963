from __future__ import annotations
import logging
from math import prod
from typing import Any, List, Optional, Sequence, Tuple, Union
import numpy as np
from pydantic import BaseModel, Field, field_validator, model_validator
from .common import ImageRegion, Run
from ..codec.line_codec import decode_line, encode_line, line_width, locate

log = logging.getLogger(__name__)

RunLike = Union[Run, Tuple[int, Any]]


def _counter_dtype(name: str) -> np.dtype:
    try:
        dt = np.dtype(name)
    except TypeError as e:
        raise ValueError(f"unknown counter_dtype {name!r}") from e
    if dt.kind != "u":
        raise ValueError(f"counter_dtype must be an unsigned integer type, got {name!r}")
    return dt


class RLEImage(BaseModel):
    """
    Image stored as one run sequence per scanline.

    `shape` is in NumPy order and the last axis is the scanline axis.
    `lines` holds the run sequences row-major over `shape[:-1]`.
    `counter_dtype` names the unsigned integer type run lengths are counted in;
    no run may be longer than its maximum.
    """

    shape: Tuple[int, ...]
    counter_dtype: str = "uint16"
    lines: List[List[Run]] = Field(default_factory=list)

    @field_validator("shape")
    @classmethod
    def _check_shape(cls, v: Tuple[int, ...]) -> Tuple[int, ...]:
        if len(v) == 0:
            raise ValueError("image needs at least one axis")
        if any(s < 0 for s in v):
            raise ValueError(f"negative image shape {v}")
        return v

    @field_validator("counter_dtype")
    @classmethod
    def _check_counter(cls, v: str) -> str:
        dt = _counter_dtype(v)
        return dt.name

    @model_validator(mode="after")
    def _check_lines(self) -> "RLEImage":
        expected = prod(self.shape[:-1])
        if len(self.lines) != expected:
            raise ValueError(f"expected {expected} lines for shape {self.shape}, got {len(self.lines)}")
        width = self.shape[-1]
        cap = self.max_run_length
        for n, runs in enumerate(self.lines):
            w = line_width(runs)
            if w != width:
                raise ValueError(f"line {n}: run lengths sum to {w}, image width is {width}")
            for r in runs:
                if r.length > cap:
                    raise ValueError(f"line {n}: run of {r.length} overflows {self.counter_dtype} counter")
        return self

    # constructors
    @classmethod
    def from_array(cls, array: np.ndarray | Sequence, *, counter_dtype: str = "uint16") -> "RLEImage":
        arr = np.asarray(array)
        if arr.ndim == 0:
            raise ValueError("cannot build an image from a scalar")
        cap = int(np.iinfo(_counter_dtype(counter_dtype)).max)
        rows = arr.reshape(prod(arr.shape[:-1]), arr.shape[-1])
        lines = [encode_line(row, max_run_length=cap) for row in rows]
        img = cls(shape=tuple(int(s) for s in arr.shape), counter_dtype=counter_dtype, lines=lines)
        log.debug("encoded %s array into %d runs over %d lines", arr.shape, img.total_runs, img.line_count)
        return img

    @classmethod
    def from_lines(
        cls,
        lines: Sequence[Sequence[RunLike]],
        shape: Optional[Sequence[int]] = None,
        *,
        counter_dtype: str = "uint16",
    ) -> "RLEImage":
        """
        Build from explicit run sequences. Runs may be `Run` objects or
        (length, value) pairs. Without `shape`, the lines form a 2-D image.
        """
        built = [[r if isinstance(r, Run) else Run(length=r[0], value=r[1]) for r in line] for line in lines]
        if shape is None:
            width = line_width(built[0]) if built else 0
            shape = (len(built), width)
        return cls(shape=tuple(int(s) for s in shape), counter_dtype=counter_dtype, lines=built)

    # geometry
    @property
    def dimension(self) -> int: return len(self.shape)
    @property
    def width(self) -> int: return self.shape[-1]
    @property
    def line_count(self) -> int: return len(self.lines)
    @property
    def total_runs(self) -> int: return sum(len(runs) for runs in self.lines)
    @property
    def max_run_length(self) -> int: return int(np.iinfo(np.dtype(self.counter_dtype)).max)
    @property
    def largest_region(self) -> ImageRegion: return ImageRegion.from_shape(self.shape)

    def line_offset(self, line_index: Sequence[int]) -> int:
        """Row-major position of a line among `lines`; the last leading axis varies fastest."""
        lead = self.shape[:-1]
        if len(line_index) != len(lead):
            raise ValueError(f"line index {tuple(line_index)} needs {len(lead)} axes")
        off = 0
        for i, n in zip(line_index, lead):
            if not (0 <= i < n):
                raise ValueError(f"line index {tuple(line_index)} outside shape {self.shape}")
            off = off * n + i
        return off

    # read access
    def runs(self, line_index: Sequence[int]) -> List[Run]:
        return self.lines[self.line_offset(line_index)]

    def run_count(self, line_index: Sequence[int]) -> int:
        return len(self.runs(line_index))

    def get_pixel(self, index: Sequence[int]) -> Any:
        idx = tuple(index)
        if not self.largest_region.is_inside(idx):
            raise ValueError(f"pixel index {idx} outside shape {self.shape}")
        runs = self.runs(idx[:-1])
        run_idx, _ = locate(runs, idx[-1])
        return runs[run_idx].value

    def to_array(self, dtype: Any = None) -> np.ndarray:
        rows = [decode_line(runs) for runs in self.lines]
        return np.asarray(rows, dtype=dtype).reshape(self.shape)

    def __repr__(self) -> str:
        return f"RLEImage(shape={self.shape}, lines={self.line_count}, runs={self.total_runs}, counter={self.counter_dtype})"
