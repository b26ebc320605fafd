import argparse
from collections.abc import Iterator

from termtint.ansi import Ansi
from termtint.color import AnsiColor, Color, EightBitColor, lightness, Profile, TrueColor, to_rgb256
from termtint.output import Output


def create_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description='print a chart of the 16 ANSI and 240 other 8-bit colors'
    )
    group = parser.add_mutually_exclusive_group()
    group.add_argument(
        '--ansi-only',
        action='store_const',
        const=Profile.ANSI,
        dest='profile',
        help='downgrade all colors to ANSI colors',
    )
    group.add_argument(
        '--eight-bit-only',
        action='store_const',
        const=Profile.ANSI256,
        dest='profile',
        help='use 8-bit colors only',
    )
    return parser


def reset(output: Output) -> str:
    return Ansi.sgr('0') if output.profile > Profile.ASCII else ''


def swatch(output: Output, color: AnsiColor | EightBitColor, width: int) -> str:
    """Format a swatch with the color as background and a legible foreground."""
    code = TrueColor(*to_rgb256(color)).hex
    text: Color = AnsiColor(0) if lightness(color) >= 0.5 else AnsiColor(15)
    label = f' {color.index:>{width}} {code} '
    return Ansi.sgr(
        output.convert(text).sequence(),
        output.convert(color).sequence(True),
    ) + label + reset(output)


def rows(
    colors: range, per_row: int
) -> Iterator[range]:
    for start in range(colors.start, colors.stop, per_row):
        yield range(start, min(start + per_row, colors.stop))


def main() -> None:
    options = create_parser().parse_args()
    output = Output(profile=options.profile)

    for title, colors, per_row, width in (
        ('Basic ANSI colors', range(16), 8, 2),
        ('Extended ANSI colors', range(16, 232), 6, 3),
        ('Extended ANSI grayscale', range(232, 256), 6, 3),
    ):
        if output.profile > Profile.ASCII:
            print(Ansi.sgr('1'), title, reset(output), sep='')
        else:
            print(title)
        print()
        for row in rows(colors, per_row):
            print(''.join(
                swatch(output, AnsiColor(i) if i < 16 else EightBitColor(i), width)
                for i in row
            ))
        print()


if __name__ == '__main__':
    main()
