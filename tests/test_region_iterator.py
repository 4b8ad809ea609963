import numpy as np

from rleimage.iteration.region import RLERegionConstIterator
from rleimage.models.common import ImageRegion
from rleimage.models.image import RLEImage


def test_walks_whole_image():
    arr = np.array([[0, 0, 1], [2, 2, 2]])
    it = RLERegionConstIterator(RLEImage.from_array(arr))
    assert list(it) == [0, 0, 1, 2, 2, 2]
    assert it.is_at_end()
    it.go_to_begin()
    assert it.index == (0, 0)

def test_step_wraps_lines():
    arr = np.arange(9).reshape(3, 3)
    it = RLERegionConstIterator(RLEImage.from_array(arr), ImageRegion(index=(1, 1), size=(2, 2)))
    seen = []
    while not it.is_at_end():
        seen.append((it.index, it.value()))
        it.step()
    assert seen == [((1, 1), 4), ((1, 2), 5), ((2, 1), 7), ((2, 2), 8)]

def test_scanline_view_and_copy():
    img = RLEImage.from_lines([[(2, "a"), (2, "b")], [(4, "c")]])
    it = RLERegionConstIterator(img)
    it.set_index((0, 1))
    line = it.scanline()
    assert line.position == (1, 0, 1)
    assert list(line.iter_line()) == ["a", "b", "b"]
    assert it.index == (0, 1)
    twin = it.copy()
    twin.step().step().step()
    assert twin.value() == "c"
    assert it.value() == "a"
