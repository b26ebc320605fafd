"""
A depth-independent model of terminal colors.

Terminals support colors at one of four levels of fidelity, which are captured
by :class:`Profile`. Colors are one of the four variants of the :data:`Color`
union: :class:`NoColor`, :class:`AnsiColor` for the sixteen extended ANSI
colors, :class:`EightBitColor` for the 256 8-bit colors, and :class:`TrueColor`
for 24-bit colors. Each variant renders itself as the parameters of an SGR
escape sequence, and :meth:`Profile.convert` downgrades colors that exceed a
terminal's fidelity to the perceptually closest color the terminal can display.
"""
import dataclasses
import enum
import re
from typing import assert_never, Self, TypeAlias

from .conversion import rgb256_to_lightness
from .lores import eight_bit_to_ansi, eight_bit_to_rgb256, rgb256_to_eight_bit


__all__ = [
    'NoColor',
    'AnsiColor',
    'EightBitColor',
    'TrueColor',
    'Color',
    'Profile',
    'convert',
    'parse_color',
    'to_rgb256',
    'lightness',
]


_FOREGROUND = '38'
_BACKGROUND = '48'

_HEX_COLOR = re.compile(r'#(?:[0-9a-fA-F]{3}|[0-9a-fA-F]{6})')


@dataclasses.dataclass(frozen=True, slots=True)
class NoColor:
    """The absence of color, e.g., for terminals without color support."""

    def sequence(self, is_background: bool = False) -> str:
        return ''


@dataclasses.dataclass(frozen=True, slots=True)
class AnsiColor:
    """
    One of the sixteen extended ANSI colors. The first eight colors are the
    base colors, the second eight colors their bright versions.
    """
    index: int

    def __post_init__(self) -> None:
        if not 0 <= self.index <= 15:
            raise ValueError(f'{self.index} is not a valid ANSI color')

    def sequence(self, is_background: bool = False) -> str:
        offset = 10 if is_background else 0
        if self.index < 8:
            return str(30 + offset + self.index)
        return str(90 + offset + self.index - 8)


@dataclasses.dataclass(frozen=True, slots=True)
class EightBitColor:
    """One of the 256 8-bit terminal colors."""
    index: int

    def __post_init__(self) -> None:
        if not 0 <= self.index <= 255:
            raise ValueError(f'{self.index} is not a valid 8-bit terminal color')

    def sequence(self, is_background: bool = False) -> str:
        prefix = _BACKGROUND if is_background else _FOREGROUND
        return f'{prefix};5;{self.index}'


@dataclasses.dataclass(frozen=True, slots=True)
class TrueColor:
    """A 24-bit RGB color."""
    r: int
    g: int
    b: int

    def __post_init__(self) -> None:
        for value in (self.r, self.g, self.b):
            if not 0 <= value <= 255:
                raise ValueError(
                    f'{self.r}, {self.g}, {self.b} is not a valid 24-bit color'
                )

    @classmethod
    def from_hex(cls, text: str) -> Self:
        """
        Parse the hashed hexadecimal notation, with one or two digits per
        coordinate, e.g., ``#abc`` or ``#abcdef``.
        """
        if _HEX_COLOR.fullmatch(text) is None:
            raise ValueError(f'"{text}" is not a valid hexadecimal color')

        digits = text[1:]
        if len(digits) == 3:
            digits = ''.join(d + d for d in digits)
        return cls(int(digits[0:2], 16), int(digits[2:4], 16), int(digits[4:6], 16))

    @property
    def hex(self) -> str:
        """This color in hashed hexadecimal notation."""
        return f'#{self.r:02x}{self.g:02x}{self.b:02x}'

    def sequence(self, is_background: bool = False) -> str:
        prefix = _BACKGROUND if is_background else _FOREGROUND
        return f'{prefix};2;{self.r};{self.g};{self.b}'


Color: TypeAlias = NoColor | AnsiColor | EightBitColor | TrueColor


def to_rgb256(color: AnsiColor | EightBitColor | TrueColor) -> tuple[int, int, int]:
    """
    Determine the 24-bit RGB value of the given color. Low-resolution colors
    are looked up in the reference palette.
    """
    match color:
        case AnsiColor(index) | EightBitColor(index):
            return eight_bit_to_rgb256(index)
        case TrueColor(r, g, b):
            return r, g, b
        case _:
            assert_never(color)


def lightness(color: AnsiColor | EightBitColor | TrueColor) -> float:
    """Determine the HSL lightness of the given color."""
    return rgb256_to_lightness(*to_rgb256(color))


def parse_color(text: str) -> None | Color:
    """
    Parse the given string as a color. A string starting with a hash must be
    in hexadecimal notation and results in a 24-bit color. A decimal integer
    results in an ANSI color if less than 16 and an 8-bit color if less than
    256. This function returns ``None`` for all other strings.
    """
    if not text:
        return None

    if text.startswith('#'):
        try:
            return TrueColor.from_hex(text)
        except ValueError:
            return None

    if not text.isdecimal():
        return None

    index = int(text)
    if index < 16:
        return AnsiColor(index)
    if index < 256:
        return EightBitColor(index)
    return None


class Profile(enum.IntEnum):
    """
    A terminal's color profile, i.e., the highest fidelity of colors it can
    display.

    Attributes:
        ASCII: no colors at all
        ANSI: the sixteen extended ANSI colors
        ANSI256: the 256 8-bit colors
        TRUECOLOR: 24-bit colors

    Profiles are ordered by fidelity, so that comparisons such as
    ``profile >= Profile.ANSI256`` work as expected.
    """
    ASCII = 0
    ANSI = 1
    ANSI256 = 2
    TRUECOLOR = 3

    def convert(self, color: Color) -> Color:
        """
        Convert the given color to a color that is displayable with this
        profile. Colors that this profile can display are returned as is.
        Others are downgraded to the perceptually closest color.
        """
        if self is Profile.ASCII:
            return NoColor()

        match color:
            case NoColor() | AnsiColor():
                return color
            case EightBitColor(index):
                if self is Profile.ANSI:
                    return AnsiColor(eight_bit_to_ansi(index))
                return color
            case TrueColor(r, g, b):
                if self is Profile.TRUECOLOR:
                    return color
                downgraded = rgb256_to_eight_bit(r, g, b)
                if self is Profile.ANSI:
                    return AnsiColor(eight_bit_to_ansi(downgraded))
                return EightBitColor(downgraded)
            case _:
                assert_never(color)

    def color(self, text: str) -> None | Color:
        """
        Parse the given string as a color with :func:`parse_color` and then
        convert the result to this profile.
        """
        color = parse_color(text)
        return None if color is None else self.convert(color)


def convert(color: Color, profile: Profile) -> Color:
    """Convert the color to the given profile."""
    return profile.convert(color)
