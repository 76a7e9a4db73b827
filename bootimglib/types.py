from dataclasses import dataclass


@dataclass
class BootImgHeader:
    magic: bytes
    kernelSize: int
    kernelAddr: int
    ramdiskSize: int
    ramdiskAddr: int
    secondSize: int
    secondAddr: int
    tagsAddr: int
    pageSize: int
    unused: bytes
    name: bytes
    cmdline: bytes
    id: bytes
    extraCmdline: bytes


# Offsets and page counts derived from a header, never stored in the image
@dataclass
class BootImgLayout:
    pageSize: int
    kernelPages: int
    ramdiskPages: int
    secondPages: int
    kernelOffset: int
    ramdiskOffset: int
    secondOffset: int
    totalSize: int


@dataclass
class BootImg:
    name: str
    header: BootImgHeader
    size: int
    isBlkdev: bool
    kernel: bytes | None
    ramdisk: bytes | None
    second: bytes | None


@dataclass
class BlockDeviceInfo:
    isBlockDevice: bool
    size: int
    fsType: str | None
