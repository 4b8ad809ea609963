from __future__ import annotations
from typing import Any, Iterable, List, Optional, Sequence, Tuple
import numpy as np
from rleimage.models.common import Run


def _split_run(length: int, value: Any, max_run_length: Optional[int]) -> List[Run]:
    """Cut one logical run into pieces no longer than the counter allows."""
    if max_run_length is None or length <= max_run_length:
        return [Run(length=length, value=value)]
    out = []
    while length > 0:
        n = min(length, max_run_length)
        out.append(Run(length=n, value=value))
        length -= n
    return out


def encode_line(values: Iterable[Any] | np.ndarray, *, max_run_length: Optional[int] = None) -> List[Run]:
    """
    Collapse a dense scanline into runs of equal neighbours.

    Works on any 1-D sequence; NumPy scalars come back as Python scalars.
    An empty line encodes to an empty run list.
    """
    if max_run_length is not None and max_run_length < 1:
        raise ValueError(f"max_run_length must be >= 1, got {max_run_length}")
    arr = np.asarray(values)
    if arr.ndim != 1:
        raise ValueError(f"scanline must be 1-D, got shape {arr.shape}")
    n = arr.shape[0]
    if n == 0:
        return []

    # run starts are wherever a pixel differs from its left neighbour
    cuts = np.flatnonzero(arr[1:] != arr[:-1]) + 1
    starts = np.concatenate(([0], cuts))
    ends = np.concatenate((cuts, [n]))
    vals = arr[starts].tolist()

    runs: List[Run] = []
    for start, end, v in zip(starts.tolist(), ends.tolist(), vals):
        runs.extend(_split_run(end - start, v, max_run_length))
    return runs


def decode_line(runs: Sequence[Run]) -> List[Any]:
    out: List[Any] = []
    for r in runs:
        out.extend([r.value] * r.length)
    return out


def line_width(runs: Sequence[Run]) -> int:
    return sum(r.length for r in runs)


def locate(runs: Sequence[Run], col: int) -> Tuple[int, int]:
    """
    Find the run holding column `col` (0 is the line's first pixel).
    Returns (run_idx, remaining) where remaining counts the pixel at `col`
    and the rest of that run.
    """
    if col < 0:
        raise ValueError(f"column {col} before start of line")
    run_end = 0
    for run_idx, r in enumerate(runs):
        run_end += r.length
        if col < run_end:
            return run_idx, run_end - col
    raise ValueError(f"column {col} past end of line (width {run_end})")
