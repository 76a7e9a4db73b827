import logging

import pytest

from bootimglib.errors import FormatError
from bootimglib.header import (BOOT_ARGS_SIZE, BOOT_MAGIC, DEFAULT_PAGE_SIZE,
                               HEADER_SIZE, checkHeader, getCmdline,
                               headerToBytes, initHeader, readHeader,
                               setCmdline)


def makeHeader(kernelSize=5000, ramdiskSize=100, secondSize=0, pageSize=2048):
    header = initHeader()
    header.kernelSize = kernelSize
    header.ramdiskSize = ramdiskSize
    header.secondSize = secondSize
    header.pageSize = pageSize
    return header


def test_header_size():
    assert HEADER_SIZE == 1632


def test_default_header():
    header = initHeader()

    assert header.magic == BOOT_MAGIC
    assert header.pageSize == DEFAULT_PAGE_SIZE
    assert header.kernelSize == header.ramdiskSize == header.secondSize == 0
    assert headerToBytes(header)[40:] == b'\x00' * (HEADER_SIZE - 40)


def test_encode_decode_keeps_opaque_fields():
    header = makeHeader()
    header.unused = b'\x01' * 8
    header.name = b'boardname'.ljust(16, b'\x00')
    header.id = bytes(range(32))
    header.extraCmdline = b'extra'.ljust(1024, b'\x00')
    setCmdline(header, 'console=ttyS0')

    data = headerToBytes(header)

    assert len(data) == HEADER_SIZE
    assert readHeader(data) == header
    assert readHeader(data + b'\xff' * 100) == header


def test_decode_short_data():
    with pytest.raises(FormatError):
        readHeader(headerToBytes(makeHeader())[:HEADER_SIZE - 1])


def test_decode_bad_magic():
    data = bytearray(headerToBytes(makeHeader()))
    data[7] ^= 1

    with pytest.raises(FormatError):
        readHeader(bytes(data))


def test_check_header_ok():
    checkHeader(makeHeader(), 10240, 'boot.img')


def test_check_header_zero_kernel():
    with pytest.raises(FormatError, match='kernel size'):
        checkHeader(makeHeader(kernelSize=0), 10240, 'boot.img')


def test_check_header_zero_page_size():
    with pytest.raises(FormatError, match='page size'):
        checkHeader(makeHeader(pageSize=0), 10240, 'boot.img')


def test_check_header_zero_ramdisk_warns(caplog):
    with caplog.at_level(logging.WARNING):
        checkHeader(makeHeader(ramdiskSize=0), 8192, 'boot.img')

    assert 'ramdisk size is null' in caplog.text


def test_check_header_too_big_for_capacity():
    with pytest.raises(FormatError, match='sizes mismatch'):
        checkHeader(makeHeader(), 10239, 'boot.img')


def test_cmdline_boundary():
    header = initHeader()

    setCmdline(header, 'a' * (BOOT_ARGS_SIZE - 1))
    assert getCmdline(header) == 'a' * (BOOT_ARGS_SIZE - 1)

    with pytest.raises(ValueError):
        setCmdline(header, 'a' * BOOT_ARGS_SIZE)


def test_cmdline_is_cleared_on_set():
    header = initHeader()

    setCmdline(header, 'console=ttyS0,115200 quiet')
    setCmdline(header, 'ro')

    assert getCmdline(header) == 'ro'
    assert header.cmdline == b'ro'.ljust(BOOT_ARGS_SIZE, b'\x00')


def test_check_header_page_smaller_than_header():
    with pytest.raises(FormatError, match='smaller than the header'):
        checkHeader(makeHeader(pageSize=1024), 0x100000, 'boot.img')
