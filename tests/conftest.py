from pathlib import Path

import pytest

from bootimglib.types import BlockDeviceInfo


class FakeInspector:
    def __init__(self, info: BlockDeviceInfo) -> None:
        self.info = info

    def probe(self, path: Path) -> BlockDeviceInfo:
        return self.info


def makeData(size: int, seed: int) -> bytes:
    return bytes((i * 7 + seed) & 0xFF for i in range(size))


@pytest.fixture
def segments(tmp_path):
    kernel = tmp_path / 'kernel'
    ramdisk = tmp_path / 'ramdisk'
    second = tmp_path / 'second'

    kernel.write_bytes(makeData(5000, 1))
    ramdisk.write_bytes(makeData(3000, 2))
    second.write_bytes(makeData(700, 3))

    return kernel, ramdisk, second
