import logging
from struct import calcsize, pack, unpack

from .errors import FormatError
from .layout import getHeaderLayout
from .types import BootImgHeader

_log = logging.getLogger(__name__)

BOOT_MAGIC = b'ANDROID!'
BOOT_MAGIC_SIZE = 8
BOOT_NAME_SIZE = 16
BOOT_ARGS_SIZE = 512
BOOT_ID_SIZE = 32
BOOT_EXTRA_ARGS_SIZE = 1024
BOOT_UNUSED_SIZE = 8

DEFAULT_PAGE_SIZE = 2048

# Native byte order, standard sizes
HEADER_FORMAT = (
    f'={BOOT_MAGIC_SIZE}s8I{BOOT_UNUSED_SIZE}s{BOOT_NAME_SIZE}s'
    f'{BOOT_ARGS_SIZE}s{BOOT_ID_SIZE}s{BOOT_EXTRA_ARGS_SIZE}s'
)
HEADER_SIZE = calcsize(HEADER_FORMAT)


def initHeader() -> BootImgHeader:
    return BootImgHeader(
        BOOT_MAGIC, 0, 0, 0, 0, 0, 0, 0, DEFAULT_PAGE_SIZE,
        b'\x00' * BOOT_UNUSED_SIZE,
        b'\x00' * BOOT_NAME_SIZE,
        b'\x00' * BOOT_ARGS_SIZE,
        b'\x00' * BOOT_ID_SIZE,
        b'\x00' * BOOT_EXTRA_ARGS_SIZE
    )


def readHeader(data: bytes) -> BootImgHeader:
    if not isinstance(data, bytes):
        raise TypeError(f'Data must be of type: {bytes}')

    if len(data) < HEADER_SIZE:
        raise FormatError(f'Not enough data to read header! Expected {HEADER_SIZE}, got {len(data)}')

    fields = unpack(HEADER_FORMAT, data[:HEADER_SIZE])
    header = BootImgHeader(*fields)

    if header.magic != BOOT_MAGIC:
        raise FormatError('No Android magic value!')

    return header


def headerToBytes(header: BootImgHeader) -> bytes:
    if not isinstance(header, BootImgHeader):
        raise TypeError(f'Header must be of type: {BootImgHeader}')

    headerData = pack(HEADER_FORMAT,
        header.magic,
        header.kernelSize,
        header.kernelAddr,
        header.ramdiskSize,
        header.ramdiskAddr,
        header.secondSize,
        header.secondAddr,
        header.tagsAddr,
        header.pageSize,
        header.unused,
        header.name,
        header.cmdline,
        header.id,
        header.extraCmdline
    )

    if len(headerData) != HEADER_SIZE:
        raise ValueError(f'Header buffer is not of size: {HEADER_SIZE}!')

    return headerData


def checkHeader(header: BootImgHeader, size: int, name: str = '<image>') -> None:
    '''
    Sanity check a header against the capacity of its image.

    A missing ramdisk only warns: devices using system as rootfs
    boot without an initrd.
    '''

    if not isinstance(header, BootImgHeader):
        raise TypeError(f'Header must be of type: {BootImgHeader}')

    if not isinstance(size, int):
        raise TypeError(f'Size must be of type: {int}')

    if header.magic != BOOT_MAGIC:
        raise FormatError(f'{name}: no Android magic value!')

    if not header.kernelSize:
        raise FormatError(f'{name}: kernel size is null!')

    if not header.ramdiskSize:
        _log.warning('%s: ramdisk size is null', name)

    if not header.pageSize:
        raise FormatError(f'{name}: image page size is null!')

    if header.pageSize < HEADER_SIZE:
        raise FormatError(f'{name}: page size ({header.pageSize}) is smaller than the header ({HEADER_SIZE})')

    totalSize = getHeaderLayout(header).totalSize

    if totalSize > size:
        raise FormatError(f'{name}: sizes mismatch in boot image ({totalSize} vs {size} bytes)!')


def getCmdline(header: BootImgHeader) -> str:
    if not isinstance(header, BootImgHeader):
        raise TypeError(f'Header must be of type: {BootImgHeader}')

    cmdline = header.cmdline.split(b'\x00', 1)[0]
    return cmdline.decode('utf-8', errors='surrogateescape')


def getName(header: BootImgHeader) -> str:
    if not isinstance(header, BootImgHeader):
        raise TypeError(f'Header must be of type: {BootImgHeader}')

    name = header.name.split(b'\x00', 1)[0]
    return name.decode('utf-8', errors='replace')


def setCmdline(header: BootImgHeader, value: str) -> BootImgHeader:
    if not isinstance(header, BootImgHeader):
        raise TypeError(f'Header must be of type: {BootImgHeader}')

    if not isinstance(value, str):
        raise TypeError(f'Value must be of type: {str}')

    cmdline = value.encode('utf-8', errors='surrogateescape')

    if len(cmdline) >= BOOT_ARGS_SIZE:
        raise ValueError(f'cmdline length ({len(cmdline)}) is too long (max {BOOT_ARGS_SIZE - 1})')

    header.cmdline = cmdline.ljust(BOOT_ARGS_SIZE, b'\x00')
    return header
