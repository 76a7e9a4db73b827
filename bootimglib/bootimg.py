import errno
import logging
import os
import shutil
import tempfile
from dataclasses import replace
from pathlib import Path
from struct import unpack
from typing import BinaryIO

from .blkdev import BlockDeviceInspector
from .config import ConfigArgs, configToText, updateHeader
from .errors import ConfigError, FormatError, ImageIOError
from .header import (BOOT_ID_SIZE, HEADER_SIZE, checkHeader, getCmdline,
                     getName, initHeader, readHeader)
from .io import writeBytesToPath, writeTextToPath
from .layout import getHeaderLayout
from .segments import loadSegmentFromImage, updateSegments
from .types import BlockDeviceInfo, BootImg
from .writer import writeBootImg

_log = logging.getLogger(__name__)

DEFAULT_CONFIG_NAME = 'boot.info'
DEFAULT_KERNEL_NAME = 'Image'
DEFAULT_RAMDISK_NAME = 'ramdisk.img'
DEFAULT_SECOND_NAME = 'stage2.img'


def initBootImg(name: str) -> BootImg:
    return BootImg(name, initHeader(), 0, False, None, None, None)


def openImageStream(path: Path, mode: str) -> BinaryIO:
    if not isinstance(path, Path):
        raise TypeError(f'Path must be of type: {Path}')

    try:
        return open(path, mode)
    except OSError as e:
        raise ImageIOError(e.errno, e.strerror, str(path)) from e


def readBootImg(stream: BinaryIO, img: BootImg, info: BlockDeviceInfo) -> BootImg:
    if not isinstance(img, BootImg):
        raise TypeError(f'img must be of type: {BootImg}')

    if not isinstance(info, BlockDeviceInfo):
        raise TypeError(f'Info must be of type: {BlockDeviceInfo}')

    try:
        stream.seek(0)
        data = stream.read(HEADER_SIZE)
    except OSError as e:
        raise ImageIOError(e.errno, e.strerror, img.name) from e

    try:
        img.header = readHeader(data)
    except FormatError as e:
        raise FormatError(f'{img.name}: {e}') from e

    img.size = info.size
    img.isBlkdev = info.isBlockDevice

    checkHeader(img.header, img.size, img.name)
    return img


def loadBootImg(path: Path, inspector: BlockDeviceInspector | None = None) -> BootImg:
    inspector = inspector or BlockDeviceInspector()
    img = initBootImg(str(path))
    info = inspector.probe(path)

    with openImageStream(path, 'rb') as stream:
        readBootImg(stream, img, info)

    return img


def extractBootImg(path: Path, configPath: Path | None = None, kernelPath: Path | None = None,
                   ramdiskPath: Path | None = None, secondPath: Path | None = None,
                   inspector: BlockDeviceInspector | None = None) -> BootImg:
    inspector = inspector or BlockDeviceInspector()

    configPath = configPath or Path(DEFAULT_CONFIG_NAME)
    kernelPath = kernelPath or Path(DEFAULT_KERNEL_NAME)
    ramdiskPath = ramdiskPath or Path(DEFAULT_RAMDISK_NAME)
    secondPath = secondPath or Path(DEFAULT_SECOND_NAME)

    img = initBootImg(str(path))
    info = inspector.probe(path)

    with openImageStream(path, 'rb') as stream:
        readBootImg(stream, img, info)

        header = img.header
        layout = getHeaderLayout(header)

        writeTextToPath(configPath, configToText(header))

        img.kernel = loadSegmentFromImage(stream, layout.kernelOffset, header.kernelSize, img.name)
        writeBytesToPath(kernelPath, img.kernel)

        img.ramdisk = loadSegmentFromImage(stream, layout.ramdiskOffset, header.ramdiskSize, img.name)
        writeBytesToPath(ramdiskPath, img.ramdisk)

        if header.secondSize:
            img.second = loadSegmentFromImage(stream, layout.secondOffset, header.secondSize, img.name)
            writeBytesToPath(secondPath, img.second)

    return img


def writeBootImgAtomic(img: BootImg, path: Path, seed: BinaryIO | None = None) -> None:
    '''
    Write img to a temporary file beside path and rename it over path
    once the write succeeded. seed, when given, is copied into the
    temporary file first so segments that are not rewritten survive.
    '''

    fd, tmpName = tempfile.mkstemp(prefix=f'.{path.name}.', dir=path.parent)
    tmpPath = Path(tmpName)

    try:
        with os.fdopen(fd, 'r+b') as tmp:
            if seed is not None:
                seed.seek(0)
                shutil.copyfileobj(seed, tmp)

            writeBootImg(img, tmp)
            os.fsync(tmp.fileno())

        if path.exists():
            shutil.copymode(path, tmpPath)
        else:
            os.chmod(tmpPath, 0o644)

        os.replace(tmpPath, path)

    except OSError as e:
        tmpPath.unlink(missing_ok=True)

        if isinstance(e, ImageIOError):
            raise

        raise ImageIOError(e.errno, e.strerror, str(path)) from e

    except BaseException:
        tmpPath.unlink(missing_ok=True)
        raise


def segmentsLeftInPlace(img: BootImg) -> bool:
    header = img.header

    if img.kernel is None and header.kernelSize:
        return True

    if img.ramdisk is None and header.ramdiskSize:
        return True

    return img.second is None and bool(header.secondSize)


def updateBootImg(path: Path, configPath: Path | None = None, configArgs: ConfigArgs | None = None,
                  kernelPath: Path | None = None, ramdiskPath: Path | None = None,
                  secondPath: Path | None = None, atomic: bool = False,
                  inspector: BlockDeviceInspector | None = None) -> BootImg:
    inspector = inspector or BlockDeviceInspector()
    img = initBootImg(str(path))
    info = inspector.probe(path)

    if atomic and info.isBlockDevice:
        raise ConfigError(f'{img.name}: atomic write is not possible on a block device')

    with openImageStream(path, 'rb' if atomic else 'r+b') as stream:
        readBootImg(stream, img, info)
        origHeader = replace(img.header)

        updateHeader(img, configPath, configArgs)
        updateSegments(img, stream, origHeader, kernelPath, ramdiskPath, secondPath)
        checkHeader(img.header, img.size, img.name)

        if img.header.pageSize != origHeader.pageSize and segmentsLeftInPlace(img):
            _log.warning('%s: page size changed from %d to %d but some segments are not rewritten',
                         img.name, origHeader.pageSize, img.header.pageSize)

        if atomic:
            writeBootImgAtomic(img, path, stream)
        else:
            writeBootImg(img, stream)

    return img


def createBootImg(path: Path, configPath: Path | None = None, configArgs: ConfigArgs | None = None,
                  kernelPath: Path | None = None, ramdiskPath: Path | None = None,
                  secondPath: Path | None = None, atomic: bool = False,
                  inspector: BlockDeviceInspector | None = None) -> BootImg:
    if kernelPath is None or ramdiskPath is None:
        raise ConfigError('kernel and ramdisk are required to create a boot image')

    inspector = inspector or BlockDeviceInspector()
    img = initBootImg(str(path))
    info = inspector.probe(path)

    if info.isBlockDevice:
        if info.fsType:
            raise ImageIOError(errno.EBUSY, f'refuse to write on a valid partition type ({info.fsType})', img.name)

        if atomic:
            raise ConfigError(f'{img.name}: atomic write is not possible on a block device')

        img.isBlkdev = True
        img.size = info.size

    updateHeader(img, configPath, configArgs)
    updateSegments(img, None, None, kernelPath, ramdiskPath, secondPath)
    checkHeader(img.header, img.size, img.name)

    if atomic:
        writeBootImgAtomic(img, path)
        return img

    with openImageStream(path, 'wb') as stream:
        writeBootImg(img, stream)

    return img


def printBootImgInfo(img: BootImg) -> None:
    if not isinstance(img, BootImg):
        raise TypeError(f'img must be of type: {BootImg}')

    header = img.header
    layout = getHeaderLayout(header)
    ids = unpack(f'={BOOT_ID_SIZE // 4}I', header.id)

    print('Android Boot Image Info:')
    print(f'* file name = {img.name} {"[block device]" if img.isBlkdev else ""}'.rstrip())
    print(f'* image size = {img.size} bytes ({img.size / 0x100000:.2f} MB)')
    print(f'  page size  = {header.pageSize} bytes')
    print(f'* Boot Name = "{getName(header)}"')
    print(f'* kernel size       = {header.kernelSize} bytes ({header.kernelSize / 0x100000:.2f} MB)')
    print(f'  ramdisk size      = {header.ramdiskSize} bytes ({header.ramdiskSize / 0x100000:.2f} MB)')

    if header.secondSize:
        print(f'  second stage size = {header.secondSize} bytes ({header.secondSize / 0x100000:.2f} MB)')

    print(f'* used size = {layout.totalSize} bytes')
    print('* load addresses:')
    print(f'  kernel:       0x{header.kernelAddr:08x}')
    print(f'  ramdisk:      0x{header.ramdiskAddr:08x}')

    if header.secondSize:
        print(f'  second stage: 0x{header.secondAddr:08x}')

    print(f'  tags:         0x{header.tagsAddr:08x}')

    cmdline = getCmdline(header)

    if cmdline:
        print(f'* cmdline = {cmdline}')
    else:
        print('* empty cmdline')

    print(f'* id = {" ".join(f"0x{i:08x}" for i in ids)}')
