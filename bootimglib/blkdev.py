import errno
import os
import stat
import subprocess
import sys
from pathlib import Path
from struct import unpack

from .errors import ImageIOError
from .types import BlockDeviceInfo

# _IOR(0x12, 114, size_t)
BLKGETSIZE64 = 0x80081272


def getBlockDeviceSize(path: Path) -> int:
    if not sys.platform.startswith('linux'):
        raise ImageIOError(errno.ENOTSUP, 'Block device size query is only supported on Linux', str(path))

    import fcntl

    try:
        fd = os.open(path, os.O_RDONLY)
    except OSError as e:
        raise ImageIOError(e.errno, e.strerror, str(path)) from e

    try:
        buf = fcntl.ioctl(fd, BLKGETSIZE64, b'\x00' * 8)
    except OSError as e:
        raise ImageIOError(e.errno, e.strerror, str(path)) from e
    finally:
        os.close(fd)

    return unpack('=Q', buf)[0]


def getFilesystemType(path: Path) -> str | None:
    '''
    Ask blkid for the filesystem type on path. Returns None when the
    device holds no recognized filesystem or blkid is not installed.
    '''

    try:
        result = subprocess.run(
            ['blkid', '-o', 'value', '-s', 'TYPE', str(path)],
            capture_output=True,
            text=True,
            check=False
        )
    except FileNotFoundError:
        return

    fsType = result.stdout.strip()
    return fsType if result.returncode == 0 and fsType else None


class BlockDeviceInspector:
    def probe(self, path: Path) -> BlockDeviceInfo:
        if not isinstance(path, Path):
            raise TypeError(f'Path must be of type: {Path}')

        try:
            st = os.stat(path)
        except FileNotFoundError:
            return BlockDeviceInfo(False, 0, None)
        except OSError as e:
            raise ImageIOError(e.errno, e.strerror, str(path)) from e

        if not stat.S_ISBLK(st.st_mode):
            return BlockDeviceInfo(False, st.st_size, None)

        return BlockDeviceInfo(True, getBlockDeviceSize(path), getFilesystemType(path))
