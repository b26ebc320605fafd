"""
Support for low-resolution terminal colors, i.e., the sixteen extended ANSI
colors and the 256 8-bit colors.
"""
from .conversion import rgb256_to_cielab
from .difference import closest_lab, delta_e_lab


_RGB6_TO_RGB256 = (0, 0x5F, 0x87, 0xAF, 0xD7, 0xFF)

# The reference values for the extended ANSI colors. They are the VGA-derived
# defaults used by xterm and most other terminals that do not have a theme.
_ANSI_TO_RGB256 = (
    (0x00, 0x00, 0x00),
    (0x80, 0x00, 0x00),
    (0x00, 0x80, 0x00),
    (0x80, 0x80, 0x00),
    (0x00, 0x00, 0x80),
    (0x80, 0x00, 0x80),
    (0x00, 0x80, 0x80),
    (0xC0, 0xC0, 0xC0),
    (0x80, 0x80, 0x80),
    (0xFF, 0x00, 0x00),
    (0x00, 0xFF, 0x00),
    (0xFF, 0xFF, 0x00),
    (0x00, 0x00, 0xFF),
    (0xFF, 0x00, 0xFF),
    (0x00, 0xFF, 0xFF),
    (0xFF, 0xFF, 0xFF),
)


def rgb6_to_eight_bit(r: int, g: int, b: int) -> int:
    """
    Convert the given color from the 6x6x6 RGB cube of 8-bit terminal colors to
    an actual 8-bit terminal color.
    """
    assert 0 <= r <= 5 and 0 <= g <= 5 and 0 <= b <= 5
    return 16 + 36 * r + 6 * g + b


def eight_bit_to_rgb6(color: int) -> tuple[int, int, int]:
    """
    Convert the given 8-bit color to the three components of the 6x6x6 RGB cube.
    The color value must be between 16 and 231, inclusive.
    """
    assert 16 <= color <= 231

    b = color - 16
    r = b // 36
    b -= 36 * r
    g = b // 6
    b -= 6 * g
    return r, g, b


def rgb6_to_rgb256(r: int, g: int, b: int) -> tuple[int, int, int]:
    """Convert the given color in RGB6 format to RGB256 format."""
    assert 0 <= r <= 5 and 0 <= g <= 5 and 0 <= b <= 5
    return _RGB6_TO_RGB256[r], _RGB6_TO_RGB256[g], _RGB6_TO_RGB256[b]


def ansi_to_rgb256(color: int) -> tuple[int, int, int]:
    """Convert the given ANSI color to its reference RGB256 value."""
    assert 0 <= color <= 15
    return _ANSI_TO_RGB256[color]


def _eight_bit_gray_to_rgb256(color: int) -> tuple[int, int, int]:
    """Convert the given 8-bit gray to RGB256 format."""
    assert 232 <= color <= 255
    c = 10 * (color - 232) + 8
    return c, c, c


def eight_bit_to_rgb256(color: int) -> tuple[int, int, int]:
    """
    Convert the given 8-bit terminal color to 24-bit RGB by looking it up in
    the fixed 256-entry reference palette.
    """
    if 0 <= color <= 15:
        return ansi_to_rgb256(color)
    if 16 <= color <= 231:
        return rgb6_to_rgb256(*eight_bit_to_rgb6(color))
    if 232 <= color <= 255:
        return _eight_bit_gray_to_rgb256(color)

    raise ValueError(f'{color} is not a valid 8-bit terminal color')


# --------------------------------------------------------------------------------------


def _rgb256_to_rgb6_coordinate(value: int) -> int:
    # The thresholds are the midpoints between successive levels of the cube.
    if value < 48:
        return 0
    if value < 115:
        return 1
    return min((value - 35) // 40, 5)


def _rgb6_to_gray_index(r: int, g: int, b: int) -> int:
    # Average of cube coordinates, not 24-bit coordinates
    average = (r + g + b) // 3
    if average > 238:
        return 23
    # Truncate towards zero so that small averages map to the first gray.
    return int((average - 3) / 10)


def rgb256_to_eight_bit(r: int, g: int, b: int) -> int:
    """
    Convert the given 24-bit color to an 8-bit terminal color.

    This function determines two candidates, the color from the 6x6x6 RGB cube
    whose coordinates are closest to the given coordinates and a gray from the
    24-step gradient based on the average of the cube coordinates. It then
    returns the candidate that is perceptually closer to the original color, as
    measured in CIE Lab. If both candidates are equally close, it returns the
    cube color.
    """
    assert 0 <= r <= 255 and 0 <= g <= 255 and 0 <= b <= 255

    r6 = _rgb256_to_rgb6_coordinate(r)
    g6 = _rgb256_to_rgb6_coordinate(g)
    b6 = _rgb256_to_rgb6_coordinate(b)
    gray = _rgb6_to_gray_index(r6, g6, b6)

    origin = rgb256_to_cielab(r, g, b)
    cube_ΔE = delta_e_lab(*origin, *rgb256_to_cielab(*rgb6_to_rgb256(r6, g6, b6)))
    gray_ΔE = delta_e_lab(
        *origin, *rgb256_to_cielab(*_eight_bit_gray_to_rgb256(232 + gray))
    )

    if cube_ΔE <= gray_ΔE:
        return rgb6_to_eight_bit(r6, g6, b6)
    return 232 + gray


class _LUT:

    def __init__(self) -> None:
        self._ansi: None | tuple[tuple[float, float, float], ...] = None

    @property
    def ansi(self) -> tuple[tuple[float, float, float], ...]:
        if self._ansi is None:
            self._ansi = tuple(rgb256_to_cielab(*c) for c in _ANSI_TO_RGB256)
        return self._ansi

_look_up_table = _LUT()


def eight_bit_to_ansi(color: int) -> int:
    """
    Convert the given 8-bit terminal color to the perceptually closest of the
    sixteen extended ANSI colors. If several ANSI colors are equally close, the
    one with the lowest index wins.
    """
    origin = rgb256_to_cielab(*eight_bit_to_rgb256(color))
    index, _ = closest_lab(origin, _look_up_table.ansi)
    return index


def rgb256_to_ansi(r: int, g: int, b: int) -> int:
    """
    Convert the given 24-bit color to one of the sixteen extended ANSI colors.
    This function goes through the 8-bit color first, so that the result is the
    same as two successive downgrades.
    """
    return eight_bit_to_ansi(rgb256_to_eight_bit(r, g, b))
