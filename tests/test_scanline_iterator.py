import copy
from types import SimpleNamespace

import numpy as np
import pytest

from rleimage.codec.line_codec import decode_line
from rleimage.config import set_checked
from rleimage.iteration.protocols import RegionScanlineCursor, ScanlineCursor, iter_lines
from rleimage.iteration.region import RLERegionConstIterator
from rleimage.iteration.scanline import RLEScanlineConstIterator, ScanlineBoundsError
from rleimage.models.common import ImageRegion
from rleimage.models.image import RLEImage


def random_runs(rng, width, alphabet="abcd"):
    runs, left = [], width
    while left:
        n = int(rng.integers(1, left + 1))
        runs.append((n, str(rng.choice(list(alphabet)))))
        left -= n
    return runs

def abc_cursor(**kw):
    img = RLEImage.from_lines([[(3, "a"), (2, "b"), (1, "c")]])
    return RLEScanlineConstIterator(img, **kw)


def test_run_crossing_trace():
    it = abc_cursor()
    assert it.position == (0, 0, 3)
    seen = []
    while not it.is_at_end_of_line():
        seen.append((it.col, it.run_idx, it.value()))
        it.step_forward()
    assert [v for _, _, v in seen] == list("aaabbc")
    assert [c for c, _, _ in seen] == [0, 1, 2, 3, 4, 5]
    assert [r for _, r, _ in seen] == [0, 0, 0, 1, 1, 2]
    assert it.position == (6, 2, 0)

def test_end_of_line_sentinel_matches_forward_walk():
    it = abc_cursor()
    it.go_to_end_of_line()
    assert it.is_at_end_of_line()
    assert it.position == (6, 2, 0)
    walked = abc_cursor()
    for _ in range(6):
        walked.step_forward()
    assert walked.is_at_end_of_line()
    assert walked.position == it.position

def test_backward_from_end():
    it = abc_cursor()
    it.go_to_end_of_line()
    trail = []
    for _ in range(6):
        it.step_backward()
        trail.append((it.position, it.value()))
    assert trail == [
        ((5, 2, 1), "c"), ((4, 1, 1), "b"), ((3, 1, 2), "b"),
        ((2, 0, 1), "a"), ((1, 0, 2), "a"), ((0, 0, 3), "a"),
    ]

def test_go_to_begin_of_line_resets():
    it = abc_cursor()
    it.step_forward().step_forward().step_forward()
    assert it.position == (3, 1, 2)
    it.go_to_begin_of_line()
    assert it.position == (0, 0, 3)

@pytest.mark.parametrize("seed", range(8))
def test_forward_backward_symmetry(seed):
    rng = np.random.default_rng(seed)
    width = int(rng.integers(1, 20))
    img = RLEImage.from_lines([random_runs(rng, width)])
    it = RLEScanlineConstIterator(img)
    for col in range(width):
        it.go_to_begin_of_line()
        for _ in range(col):
            it.step_forward()
        before = it.position
        it.step_forward().step_backward()
        assert it.position == before
    for col in range(1, width + 1):
        it.go_to_begin_of_line()
        for _ in range(col):
            it.step_forward()
        before = it.position
        it.step_backward().step_forward()
        assert it.position == before

@pytest.mark.parametrize("seed", range(8))
def test_full_traversal_matches_decoded_lines(seed):
    rng = np.random.default_rng(100 + seed)
    width = int(rng.integers(1, 16))
    lines = [random_runs(rng, width) for _ in range(int(rng.integers(1, 5)))]
    img = RLEImage.from_lines(lines)
    expected = [v for line in img.lines for v in decode_line(line)]
    it = RLEScanlineConstIterator(img)
    got = []
    steps = 0
    while not it.is_at_end():
        while not it.is_at_end_of_line():
            got.append(it.value())
            it.step_forward()
            steps += 1
        assert it.col == width
        it.next_line()
        assert steps % width == 0
    assert got == expected

def test_line_transition():
    img = RLEImage.from_lines([[(1, "x"), (3, "y")], [(2, "p"), (2, "q")]])
    it = RLEScanlineConstIterator(img)
    for _ in range(4):
        it.step_forward()
    assert it.is_at_end_of_line()
    assert it.index == (0, 4)
    it.next_line()
    assert not it.is_at_end()
    assert it.index == (1, 0)
    assert it.position == (0, 0, 2)
    for _ in range(4):
        it.step_forward()
    it.next_line()
    assert it.is_at_end()
    assert it.col == 0

def test_line_transition_in_narrow_region():
    arr = np.array([[1, 1, 2, 2, 2, 3],
                    [4, 5, 5, 5, 6, 6]])
    img = RLEImage.from_array(arr)
    it = RLEScanlineConstIterator(img, ImageRegion(index=(0, 1), size=(2, 3)))
    assert it.position == (1, 0, 1)
    assert list(it.iter_line()) == [1, 2, 2]
    assert it.position == (4, 1, 1)
    it.next_line()
    assert it.index == (1, 1)
    assert it.position == (1, 1, 3)
    assert list(it.iter_line()) == [5, 5, 5]
    it.next_line()
    assert it.is_at_end()
    assert it.col == 1

def test_narrow_region_end_of_line():
    img = RLEImage.from_array(np.array([[1, 1, 2, 2, 2, 3]]))
    it = RLEScanlineConstIterator(img, ImageRegion(index=(0, 1), size=(1, 3)))
    it.go_to_end_of_line()
    assert it.position == (4, 1, 1)
    it.step_backward()
    assert (it.position, it.value()) == ((3, 1, 2), 2)
    # region ending on a run boundary
    it = RLEScanlineConstIterator(img, ImageRegion(index=(0, 0), size=(1, 5)))
    it.go_to_end_of_line()
    assert it.position == (5, 1, 0)
    it.step_backward()
    assert (it.position, it.value()) == ((4, 1, 1), 2)

def test_single_run_line_behaves_like_dense():
    n = 5
    img = RLEImage.from_lines([[(n, 7)]])
    dense = [7] * n
    it = RLEScanlineConstIterator(img)
    for col in range(n):
        assert it.position == (col, 0, n - col)
        assert it.value() == dense[col]
        it.step_forward()
    assert it.position == (n, 0, 0)
    for col in reversed(range(n)):
        it.step_backward()
        assert it.position == (col, 0, n - col)
        assert it.value() == dense[col]

def test_iterates_regions_in_scanline_order():
    arr = np.arange(60).reshape(3, 4, 5) // 4
    img = RLEImage.from_array(arr)
    assert list(RLEScanlineConstIterator(img)) == arr.ravel().tolist()
    region = ImageRegion(index=(1, 1, 2), size=(2, 2, 3))
    assert list(RLEScanlineConstIterator(img, region)) == arr[1:3, 1:3, 2:5].ravel().tolist()

def test_one_dimensional_image():
    img = RLEImage.from_array(np.array([0, 0, 1]))
    it = RLEScanlineConstIterator(img)
    assert it.index == (0,)
    assert list(it) == [0, 0, 1]
    assert it.is_at_end()

def test_empty_region_is_at_end():
    img = RLEImage.from_array(np.zeros((2, 3)))
    it = RLEScanlineConstIterator(img, ImageRegion(index=(0, 1), size=(2, 0)))
    assert it.is_at_end()
    assert list(it) == []

def test_region_outside_image():
    img = RLEImage.from_array(np.zeros((2, 3)))
    with pytest.raises(ValueError):
        RLEScanlineConstIterator(img, ImageRegion(index=(1, 1), size=(2, 2)))

def test_checked_mode_raises_on_misuse():
    it = abc_cursor(checked=True)
    with pytest.raises(ScanlineBoundsError):
        it.step_backward()
    it.go_to_end_of_line()
    with pytest.raises(ScanlineBoundsError):
        it.step_forward()
    with pytest.raises(ScanlineBoundsError):
        it.value()
    assert it.position == (6, 2, 0)

def test_checked_mode_from_settings():
    assert not abc_cursor().checked
    set_checked(True)
    it = abc_cursor()
    assert it.checked
    assert not abc_cursor(checked=False).checked
    with pytest.raises(IndexError):
        it.step_backward()

def test_set_index_and_copy():
    img = RLEImage.from_array(np.array([[1, 1, 2, 2, 2, 3], [4, 5, 5, 5, 6, 6]]))
    it = RLEScanlineConstIterator(img)
    it.set_index((1, 3))
    assert it.position == (3, 1, 1)
    assert it.value() == 5
    twin = copy.copy(it)
    twin.step_forward()
    assert twin.value() == 6
    assert it.index == (1, 3)
    twin.next_line()
    assert twin.is_at_end() and not it.is_at_end()
    with pytest.raises(ValueError):
        it.set_index((2, 0))

def test_from_region_iterator():
    img = RLEImage.from_array(np.arange(12).reshape(3, 4) // 3)
    src = RLERegionConstIterator(img, checked=True)
    for _ in range(6):
        src.step()
    it = RLEScanlineConstIterator.from_iterator(src)
    assert it.index == src.index == (1, 2)
    assert it.value() == src.value()
    assert it.checked
    assert list(it.iter_line()) == [2, 2]

def test_from_iterator_at_end():
    img = RLEImage.from_array(np.zeros((2, 2)))
    src = RLERegionConstIterator(img)
    for _ in range(4):
        src.step()
    assert src.is_at_end()
    assert RLEScanlineConstIterator.from_iterator(src).is_at_end()

def test_from_iterator_rejects_other_storage():
    dense = SimpleNamespace(image=np.zeros((2, 2)), region=ImageRegion.from_shape((2, 2)), index=(0, 0))
    with pytest.raises(TypeError):
        RLEScanlineConstIterator.from_iterator(dense)
    img = RLEImage.from_array(np.zeros((2, 2)))
    stray = SimpleNamespace(image=img, region=ImageRegion.from_shape((2, 2)), index=(5, 0))
    with pytest.raises(ValueError):
        RLEScanlineConstIterator.from_iterator(stray)

def test_capability_protocols():
    it = abc_cursor()
    assert isinstance(it, ScanlineCursor)
    assert isinstance(it, RegionScanlineCursor)
    assert not isinstance(object(), ScanlineCursor)

def test_iter_lines_both_directions():
    img = RLEImage.from_lines([[(3, "a"), (2, "b"), (1, "c")], [(2, "d"), (4, "e")]])
    assert list(iter_lines(RLEScanlineConstIterator(img))) == [list("aaabbc"), list("ddeeee")]
    assert list(iter_lines(RLEScanlineConstIterator(img), reverse=True)) == [list("cbbaaa"), list("eeeedd")]
