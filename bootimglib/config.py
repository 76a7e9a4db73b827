import logging
from pathlib import Path

from .errors import ConfigError
from .header import getCmdline, setCmdline
from .io import readTextFromPath
from .types import BootImg, BootImgHeader
from .utils import MAX_UINT32, parseNumber

_log = logging.getLogger(__name__)

MAX_CONF_LEN = 4096

CONFIG_KEYS = (
    'cmdline', 'bootsize', 'pagesize',
    'kerneladdr', 'ramdiskaddr', 'secondaddr',
    'tagsaddr'
)

# Config key -> header attribute
HEADER_NUMBER_KEYS = {
    'pagesize': 'pageSize',
    'kerneladdr': 'kernelAddr',
    'ramdiskaddr': 'ramdiskAddr',
    'secondaddr': 'secondAddr',
    'tagsaddr': 'tagsAddr'
}


class ConfigArgs:
    '''
    Bounded buffer of "key=value" overrides given on the command line.
    Each argument costs its length plus a line separator.
    '''

    def __init__(self, maxSize: int = MAX_CONF_LEN) -> None:
        self.maxSize = maxSize
        self.used = 0
        self.lines = []

    def append(self, arg: str) -> None:
        if not isinstance(arg, str):
            raise TypeError(f'Arg must be of type: {str}')

        argSize = len(arg.encode('utf-8', errors='surrogateescape'))

        if self.used + argSize + 1 >= self.maxSize:
            raise ConfigError('too many config parameters.')

        self.used += argSize + 1
        self.lines.extend(arg.split('\n'))

    def __len__(self) -> int:
        return len(self.lines)

    def __iter__(self):
        return iter(self.lines)


def parseConfigLine(line: str) -> tuple[str, str] | None:
    if not isinstance(line, str):
        raise TypeError(f'Line must be of type: {str}')

    line = line.split('\n', 1)[0]

    if not line.strip():
        return

    p = line.lstrip(' \t')
    end = 0

    while end < len(p) and p[end] not in ' =\t':
        end += 1

    key = p[:end]
    rest = p[end:].lstrip(' \t')

    if not rest.startswith('='):
        raise ConfigError(f'{key}: bad config entry (missing "=")')

    value = rest[1:].lstrip(' \t')
    return key, value


def parseConfigNumber(key: str, value: str) -> int:
    try:
        number = parseNumber(value)
    except ValueError as e:
        raise ConfigError(f'{key}: bad config value {value!r}') from e

    if number > MAX_UINT32:
        raise ConfigError(f'{key}: value {value!r} does not fit in 32 bits')

    return number


def updateHeaderEntry(img: BootImg, line: str) -> BootImg:
    if not isinstance(img, BootImg):
        raise TypeError(f'img must be of type: {BootImg}')

    entry = parseConfigLine(line)

    if entry is None:
        return img

    key, value = entry

    if key not in CONFIG_KEYS:
        raise ConfigError(f'{key}: bad config entry (unknown key)')

    if key == 'cmdline':
        try:
            setCmdline(img.header, value)
        except ValueError as e:
            raise ConfigError(str(e)) from e

    elif key == 'bootsize':
        size = parseConfigNumber(key, value)

        if img.isBlkdev and img.size != size:
            raise ConfigError(f'{img.name}: cannot change boot image size for a block device')

        img.size = size

    else:
        setattr(img.header, HEADER_NUMBER_KEYS[key], parseConfigNumber(key, value))

    return img


def updateHeader(img: BootImg, configPath: Path | None = None, configArgs: ConfigArgs | None = None) -> BootImg:
    '''
    Apply the config file first, then the command line overrides,
    so overrides win on conflicting keys.
    '''

    if not isinstance(img, BootImg):
        raise TypeError(f'img must be of type: {BootImg}')

    if configPath is not None:
        for line in readTextFromPath(configPath).split('\n'):
            updateHeaderEntry(img, line)

    if configArgs:
        _log.info('reading config args')

        for line in configArgs:
            updateHeaderEntry(img, line)

    return img


def configToText(header: BootImgHeader) -> str:
    if not isinstance(header, BootImgHeader):
        raise TypeError(f'Header must be of type: {BootImgHeader}')

    lines = [
        f'pagesize = 0x{header.pageSize:x}',
        f'kerneladdr = 0x{header.kernelAddr:x}',
        f'ramdiskaddr = 0x{header.ramdiskAddr:x}',
        f'secondaddr = 0x{header.secondAddr:x}',
        f'tagsaddr = 0x{header.tagsAddr:x}',
        f'cmdline = {getCmdline(header)}'
    ]

    return '\n'.join(lines) + '\n'
