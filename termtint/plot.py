"""
Visualizing how colors are downgraded to terminal colors.
"""
import sys

try:
    import matplotlib.pyplot as plt
except ImportError:
    print("termtint.plot requires matplotlib. Please install the package,")
    print("e.g., by executing `pip install matplotlib`, and then")
    print("run `python -m termtint.plot` again.")
    sys.exit(1)

import argparse
from typing import Any

from .color import AnsiColor, EightBitColor, Profile, to_rgb256, TrueColor
from .color.conversion import rgb256_to_cielab
from .color.lores import eight_bit_to_rgb256


def create_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="""
            Plot the 256 8-bit terminal colors on the a*/b* plane of CIE Lab
            while ignoring their lightness. Each color given with -c/--color is
            plotted as well, connected to the 8-bit and ANSI colors it is
            downgraded to.
        """,
        epilog="""
            Colors must be in hashed hexadecimal notation, e.g., #abcdef.
        """,
    )
    parser.add_argument(
        "-c", "--color",
        action="append",
        dest="colors",
        default=[],
        help="also plot color and its downgrades",
    )
    parser.add_argument(
        "--ansi-only",
        action="store_true",
        help="only plot the sixteen extended ANSI colors of the palette",
    )
    parser.add_argument(
        "-o", "--output",
        help="write color plot to the named file"
    )
    return parser


def _hex(rgb: tuple[int, int, int]) -> str:
    return '#{:02x}{:02x}{:02x}'.format(*rgb)


def _plot_point(axes: Any, rgb: tuple[int, int, int], **kwargs: Any) -> tuple[float, float]:
    _, a, b = rgb256_to_cielab(*rgb)
    axes.scatter([a], [b], c=[_hex(rgb)], edgecolors='#333333', linewidths=0.5, **kwargs)
    return a, b


def create_figure(colors: list[TrueColor], ansi_only: bool = False) -> Any:
    fig, axes = plt.subplots(figsize=(6, 6))

    for index in range(16 if ansi_only else 256):
        _plot_point(axes, eight_bit_to_rgb256(index), s=20 if index < 16 else 10)

    for color in colors:
        origin = _plot_point(axes, (color.r, color.g, color.b), s=60, marker='D')
        for profile, style in ((Profile.ANSI256, '--'), (Profile.ANSI, ':')):
            downgraded = profile.convert(color)
            assert isinstance(downgraded, (AnsiColor, EightBitColor))
            target = _plot_point(axes, to_rgb256(downgraded), s=40)
            axes.plot(
                [origin[0], target[0]], [origin[1], target[1]],
                linestyle=style, color='#333333', linewidth=0.8,
            )

    axes.set_xlabel('a*')
    axes.set_ylabel('b*')
    axes.set_aspect('equal')
    axes.set_title('Terminal Colors in CIE Lab')
    return fig


def main() -> None:
    options = create_parser().parse_args()

    try:
        colors = [TrueColor.from_hex(c) for c in options.colors]
    except ValueError as x:
        print(x)
        sys.exit(1)

    fig = create_figure(colors, options.ansi_only)
    if options.output:
        fig.savefig(options.output, bbox_inches='tight')
    else:
        plt.show()


if __name__ == '__main__':
    main()
