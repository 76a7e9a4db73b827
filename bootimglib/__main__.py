import logging
import sys
from argparse import ArgumentParser
from pathlib import Path

from .bootimg import (createBootImg, extractBootImg, loadBootImg,
                      printBootImgInfo, updateBootImg)
from .config import ConfigArgs
from .errors import ConfigError, FormatError, ImageIOError


def makeParser() -> ArgumentParser:
    parser = ArgumentParser(
        prog='bootimglib',
        description='Manipulate (read, modify, create) Android boot images'
    )

    commands = parser.add_mutually_exclusive_group()

    commands.add_argument('-x', nargs='+', help='extract: image [config] [kernel] [ramdisk] [second]', metavar='file', type=Path)
    commands.add_argument('-u', help='update an existing boot image in place', metavar='image', type=Path)
    commands.add_argument('-t', help='create a new boot image', metavar='image', type=Path)
    commands.add_argument('-i', help='print boot image info', metavar='image', type=Path)

    parser.add_argument('-c', action='append', default=[], help='config entry, may be repeated', metavar='key=value')
    parser.add_argument('-f', help='config file', metavar='config', type=Path)
    parser.add_argument('-k', help='kernel', metavar='kernel', type=Path)
    parser.add_argument('-r', help='ramdisk', metavar='ramdisk', type=Path)
    parser.add_argument('-s', help='second stage', metavar='second', type=Path)

    parser.add_argument('--atomic', action='store_true', help='write to a temporary file and rename it over the image')
    parser.add_argument('-q', action='store_true', help='only print warnings and errors')

    return parser


def main(argv: list[str] | None = None) -> int:
    parser = makeParser()
    args = parser.parse_args(argv)

    if not (args.x or args.u or args.t or args.i):
        parser.error('one of -x, -u, -t or -i is required')

    editArgs = args.c or args.f or args.k or args.r or args.s or args.atomic

    if (args.x or args.i) and editArgs:
        parser.error('-c, -f, -k, -r, -s and --atomic only apply to -u and -t')

    if args.x and len(args.x) > 5:
        parser.error('-x takes at most 5 files')

    if args.t and not (args.k and args.r):
        parser.error('-t requires -k and -r')

    logging.basicConfig(level=logging.WARNING if args.q else logging.INFO, format='%(message)s')

    try:
        configArgs = ConfigArgs()

        for arg in args.c:
            configArgs.append(arg)

        if args.x:
            extractBootImg(*args.x)

        elif args.i:
            printBootImgInfo(loadBootImg(args.i))

        elif args.u:
            updateBootImg(args.u, args.f, configArgs, args.k, args.r, args.s, args.atomic)

        elif args.t:
            createBootImg(args.t, args.f, configArgs, args.k, args.r, args.s, args.atomic)

    except (FormatError, ConfigError) as e:
        print(e, file=sys.stderr)
        return 1

    except ImageIOError as e:
        print(e, file=sys.stderr)
        return e.errno or 1

    return 0


if __name__ == '__main__':
    sys.exit(main())
