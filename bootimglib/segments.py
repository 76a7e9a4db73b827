import errno
import logging
from pathlib import Path
from typing import BinaryIO

from .errors import FormatError, ImageIOError
from .io import readBytesFromPath
from .layout import getHeaderLayout
from .types import BootImg, BootImgHeader
from .utils import MAX_UINT32

_log = logging.getLogger(__name__)


def loadSegmentFromFile(path: Path) -> bytes:
    if not isinstance(path, Path):
        raise TypeError(f'Path must be of type: {Path}')

    return readBytesFromPath(path)


def checkSegmentSize(data: bytes, what: str, name: str) -> int:
    # Header size fields are unsigned 32-bit
    size = len(data)

    if size > MAX_UINT32:
        raise FormatError(f'{name}: {what} is too big ({size} bytes, max {MAX_UINT32})')

    return size


def loadSegmentFromImage(stream: BinaryIO, offset: int, size: int, name: str = '<image>') -> bytes:
    if not isinstance(offset, int):
        raise TypeError(f'Offset must be of type: {int}')

    if not isinstance(size, int):
        raise TypeError(f'Size must be of type: {int}')

    try:
        stream.seek(offset)
        data = stream.read(size)
    except OSError as e:
        raise ImageIOError(e.errno, e.strerror, name) from e

    if len(data) != size:
        raise ImageIOError(errno.EIO, f'Short read at offset {offset} (expected {size}, got {len(data)} bytes)', name)

    return data


def updateSegments(img: BootImg, stream: BinaryIO | None, origHeader: BootImgHeader | None,
                   kernelPath: Path | None = None, ramdiskPath: Path | None = None,
                   secondPath: Path | None = None) -> BootImg:
    '''
    Load replacement segments and carry forward the ones that move.

    A new kernel without a new ramdisk copies the ramdisk out of the
    original image. A ramdisk (new or copied) without a new second stage
    does the same for the second stage when the original has one. Offsets
    of copied segments come from origHeader, taken before any config was
    applied. Anything else not supplied stays where it is on disk.
    '''

    if not isinstance(img, BootImg):
        raise TypeError(f'img must be of type: {BootImg}')

    canCarry = stream is not None and origHeader is not None
    origLayout = getHeaderLayout(origHeader) if canCarry else None

    if kernelPath is not None:
        _log.info('reading kernel from %s', kernelPath)
        img.kernel = loadSegmentFromFile(kernelPath)
        img.header.kernelSize = checkSegmentSize(img.kernel, 'kernel', img.name)

    if ramdiskPath is not None:
        _log.info('reading ramdisk from %s', ramdiskPath)
        img.ramdisk = loadSegmentFromFile(ramdiskPath)
        img.header.ramdiskSize = checkSegmentSize(img.ramdisk, 'ramdisk', img.name)

    elif img.kernel is not None and canCarry:
        img.ramdisk = loadSegmentFromImage(stream, origLayout.ramdiskOffset, origHeader.ramdiskSize, img.name)

    if secondPath is not None:
        _log.info('reading second stage from %s', secondPath)
        img.second = loadSegmentFromFile(secondPath)
        img.header.secondSize = checkSegmentSize(img.second, 'second stage', img.name)

    elif img.ramdisk is not None and canCarry and origHeader.secondSize:
        img.second = loadSegmentFromImage(stream, origLayout.secondOffset, origHeader.secondSize, img.name)

    if not img.header.pageSize:
        raise FormatError(f'{img.name}: image page size is null!')

    totalSize = getHeaderLayout(img.header).totalSize

    if not img.size:
        img.size = totalSize

    elif totalSize > img.size:
        raise FormatError(f'{img.name}: update is too big for the boot image ({totalSize} vs {img.size} bytes)')

    return img
