import re

MAX_UINT32 = 0xFFFFFFFF

_HEX_RE = re.compile(r'0[xX][0-9a-fA-F]+')
_OCT_RE = re.compile(r'0[0-7]+')
_DEC_RE = re.compile(r'[0-9]+')


def padNumber(n: int, align: int) -> int:
    if not isinstance(n, int):
        raise TypeError(f'N must be of type: {int}')

    if not isinstance(align, int):
        raise TypeError(f'Align must be of type: {int}')

    if align <= 0:
        raise ValueError('Align must be greater than 0!')

    return (n + align - 1) // align * align


def getPaddingSize(n: int, align: int) -> int:
    return padNumber(n, align) - n


def parseNumber(value: str) -> int:
    '''
    Parse an unsigned number the way strtoul does with base 0:
    0x for hex, a leading 0 for octal, decimal otherwise.
    '''

    if not isinstance(value, str):
        raise TypeError(f'Value must be of type: {str}')

    value = value.strip()

    if _HEX_RE.fullmatch(value):
        return int(value[2:], 16)

    if len(value) > 1 and value.startswith('0'):
        if not _OCT_RE.fullmatch(value):
            raise ValueError(f'{value!r} is not an octal number!')

        return int(value[1:], 8)

    if _DEC_RE.fullmatch(value):
        return int(value, 10)

    raise ValueError(f'{value!r} is not a number!')
