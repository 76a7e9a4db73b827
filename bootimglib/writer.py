import errno
from typing import BinaryIO

from .errors import FormatError, ImageIOError
from .header import HEADER_SIZE, headerToBytes
from .layout import getHeaderLayout
from .types import BootImg
from .utils import getPaddingSize


def writeAt(stream: BinaryIO, offset: int, data: bytes, name: str) -> None:
    try:
        stream.seek(offset)
        written = stream.write(data)
    except OSError as e:
        raise ImageIOError(e.errno, e.strerror, name) from e

    if written is not None and written != len(data):
        raise ImageIOError(errno.EIO, f'Short write at offset {offset}', name)


def writeSegment(stream: BinaryIO, offset: int, data: bytes, pageSize: int, name: str) -> None:
    padding = b'\x00' * getPaddingSize(len(data), pageSize)
    writeAt(stream, offset, data + padding, name)


def writeBootImg(img: BootImg, stream: BinaryIO) -> None:
    '''
    Serialize img into stream. Every segment is written at the offset the
    layout gives it, padded with zeros to the next page boundary. Regular
    files are then truncated to img.size.
    '''

    if not isinstance(img, BootImg):
        raise TypeError(f'img must be of type: {BootImg}')

    header = img.header
    pageSize = header.pageSize

    if not pageSize:
        raise FormatError(f'{img.name}: image page size is null!')

    if pageSize < HEADER_SIZE:
        raise FormatError(f'{img.name}: page size ({pageSize}) is smaller than the header ({HEADER_SIZE})')

    layout = getHeaderLayout(header)

    writeSegment(stream, 0, headerToBytes(header), pageSize, img.name)

    if img.kernel is not None:
        writeSegment(stream, layout.kernelOffset, img.kernel, pageSize, img.name)

    if img.ramdisk is not None:
        writeSegment(stream, layout.ramdiskOffset, img.ramdisk, pageSize, img.name)

    if img.second is not None and header.secondSize:
        writeSegment(stream, layout.secondOffset, img.second, pageSize, img.name)

    try:
        stream.flush()

        # Block devices have a fixed size
        if not img.isBlkdev:
            stream.truncate(img.size)
    except OSError as e:
        raise ImageIOError(e.errno, e.strerror, img.name) from e
