from .types import BootImgHeader, BootImgLayout

# Header sizes are unsigned 32-bit and capacities are capped at 0xFFFFFFFF
# by the config parser, so images stay below 4 GiB.


def getPageCount(size: int, pageSize: int) -> int:
    if not isinstance(size, int):
        raise TypeError(f'Size must be of type: {int}')

    if not isinstance(pageSize, int):
        raise TypeError(f'pageSize must be of type: {int}')

    if size < 0:
        raise ValueError('Size must not be negative!')

    if pageSize <= 0:
        raise ValueError('Page size must be greater than 0!')

    return (size + pageSize - 1) // pageSize


def calculateLayout(pageSize: int, kernelSize: int, ramdiskSize: int, secondSize: int) -> BootImgLayout:
    kernelPages = getPageCount(kernelSize, pageSize)
    ramdiskPages = getPageCount(ramdiskSize, pageSize)
    secondPages = getPageCount(secondSize, pageSize)

    # Page 0 holds the header
    kernelOffset = pageSize
    ramdiskOffset = (1 + kernelPages) * pageSize
    secondOffset = (1 + kernelPages + ramdiskPages) * pageSize
    totalSize = (1 + kernelPages + ramdiskPages + secondPages) * pageSize

    return BootImgLayout(
        pageSize,
        kernelPages,
        ramdiskPages,
        secondPages,
        kernelOffset,
        ramdiskOffset,
        secondOffset,
        totalSize
    )


def getHeaderLayout(header: BootImgHeader) -> BootImgLayout:
    if not isinstance(header, BootImgHeader):
        raise TypeError(f'Header must be of type: {BootImgHeader}')

    return calculateLayout(header.pageSize, header.kernelSize, header.ramdiskSize, header.secondSize)
