import errno
from pathlib import Path

from .errors import ImageIOError


def readBytesFromPath(path: Path) -> bytes:
    if not isinstance(path, Path):
        raise TypeError(f'Path must be of type: {Path}')

    try:
        return path.read_bytes()
    except OSError as e:
        raise ImageIOError(e.errno, e.strerror, str(path)) from e


def writeBytesToPath(path: Path, data: bytes) -> int:
    if not isinstance(path, Path):
        raise TypeError(f'Path must be of type: {Path}')

    if not isinstance(data, bytes):
        raise TypeError(f'Data must be of type: {bytes}')

    try:
        written = path.write_bytes(data)
    except OSError as e:
        raise ImageIOError(e.errno, e.strerror, str(path)) from e

    if written != len(data):
        raise ImageIOError(errno.EIO, 'Short write', str(path))

    return written


def readTextFromPath(path: Path) -> str:
    if not isinstance(path, Path):
        raise TypeError(f'Path must be of type: {Path}')

    try:
        return path.read_text(encoding='utf-8', errors='surrogateescape')
    except OSError as e:
        raise ImageIOError(e.errno, e.strerror, str(path)) from e


def writeTextToPath(path: Path, text: str) -> int:
    if not isinstance(path, Path):
        raise TypeError(f'Path must be of type: {Path}')

    if not isinstance(text, str):
        raise TypeError(f'Text must be of type: {str}')

    try:
        return path.write_text(text, encoding='utf-8', errors='surrogateescape')
    except OSError as e:
        raise ImageIOError(e.errno, e.strerror, str(path)) from e
