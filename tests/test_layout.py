import pytest

from bootimglib.header import initHeader
from bootimglib.layout import calculateLayout, getHeaderLayout, getPageCount


def test_page_count_rounds_up():
    assert getPageCount(0, 2048) == 0
    assert getPageCount(1, 2048) == 1
    assert getPageCount(2048, 2048) == 1
    assert getPageCount(2049, 2048) == 2
    assert getPageCount(5000, 2048) == 3


def test_page_count_rejects_zero_page_size():
    with pytest.raises(ValueError):
        getPageCount(100, 0)


def test_layout_concrete_scenario():
    layout = calculateLayout(2048, 5000, 100, 0)

    assert layout.kernelPages == 3
    assert layout.kernelOffset == 2048
    assert layout.ramdiskOffset == 8192
    assert layout.ramdiskPages == 1
    assert layout.secondOffset == 10240
    assert layout.secondPages == 0
    assert layout.totalSize == 10240


@pytest.mark.parametrize('pageSize', [1, 512, 2048, 4096, 16384])
@pytest.mark.parametrize('sizes', [(1, 0, 0), (5000, 100, 0), (4096, 4096, 4096), (12345, 1, 77777)])
def test_layout_offsets_are_ordered_and_aligned(pageSize, sizes):
    kernelSize, ramdiskSize, secondSize = sizes
    layout = calculateLayout(pageSize, kernelSize, ramdiskSize, secondSize)

    assert pageSize <= layout.kernelOffset
    assert layout.kernelOffset + kernelSize <= layout.ramdiskOffset
    assert layout.ramdiskOffset + ramdiskSize <= layout.secondOffset
    assert layout.secondOffset + secondSize <= layout.totalSize

    for offset in (layout.kernelOffset, layout.ramdiskOffset, layout.secondOffset, layout.totalSize):
        assert offset % pageSize == 0


def test_layout_from_header():
    header = initHeader()
    header.kernelSize = 2048
    header.ramdiskSize = 2049
    header.secondSize = 1

    layout = getHeaderLayout(header)

    assert layout.pageSize == 2048
    assert layout.ramdiskOffset == 2 * 2048
    assert layout.secondOffset == 4 * 2048
    assert layout.totalSize == 5 * 2048
