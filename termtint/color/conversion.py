"""Conversion from 24-bit RGB to the color spaces used for comparing colors"""
import math
from typing import cast, TypeAlias


# See https://github.com/color-js/color.js/blob/a77e080a070039c534dda3965a769675aac5f75e/src/spaces/srgb-linear.js

_LINEAR_SRGB_TO_XYZ = (
	( 0.41239079926595934, 0.357584339383878,   0.1804807884018343  ),
	( 0.21263900587151027, 0.715168678767756,   0.07219231536073371 ),
	( 0.01933081871559182, 0.11919477979462598, 0.9505321522496607  ),
)

# D65 reference white with Y normalized to 1
_D65 = (0.95047, 1.00000, 1.08883)

_LAB_EPSILON = (6 / 29) ** 3


# --------------------------------------------------------------------------------------


_Vector: TypeAlias = tuple[float, float, float]
_Matrix: TypeAlias = tuple[_Vector, _Vector, _Vector]

def _multiply(matrix: _Matrix, vector: _Vector) -> _Vector:
    return cast(
        _Vector,
        tuple(sum(r * c for r, c in zip(row, vector)) for row in matrix)
    )


# --------------------------------------------------------------------------------------
# 24-bit RGB


def rgb256_to_srgb(r: int, g: int, b: int) -> tuple[float, float, float]:
    """Convert the given color from 24-bit RGB to sRGB."""
    return cast(_Vector, tuple(map(lambda c: c / 255.0, (r, g, b))))


# --------------------------------------------------------------------------------------
# sRGB and Linear sRGB
# See https://github.com/color-js/color.js/blob/a77e080a070039c534dda3965a769675aac5f75e/src/spaces/srgb.js


def srgb_to_linear_srgb(r: float, g: float, b: float) -> tuple[float, float, float]:
    """Convert the given color from sRGB to linear sRGB."""
    def convert(value: float) -> float:
        magnitude = math.fabs(value)

        if magnitude <= 0.04045:
            return value / 12.92

        return math.copysign(math.pow((magnitude + 0.055) / 1.055, 2.4), value)

    return convert(r), convert(g), convert(b)


def linear_srgb_to_xyz(r: float, g: float, b: float) -> tuple[float, float, float]:
    """Convert the given color from linear sRGB to XYZ."""
    return _multiply(_LINEAR_SRGB_TO_XYZ, (r, g, b))


# --------------------------------------------------------------------------------------
# CIE Lab


def xyz_to_cielab(X: float, Y: float, Z: float) -> tuple[float, float, float]:
    """
    Convert the given color from XYZ to CIE Lab relative to the D65 white point.

    The lightness is scaled to range from 0 to 1, not 0 to 100. Since this
    module only uses Lab coordinates for comparing colors with each other, the
    scale does not matter as long as it is consistent.
    """
    def f(t: float) -> float:
        if t > _LAB_EPSILON:
            return math.cbrt(t)
        return t / 3 * (29 / 6) * (29 / 6) + 4 / 29

    fx = f(X / _D65[0])
    fy = f(Y / _D65[1])
    fz = f(Z / _D65[2])
    return 1.16 * fy - 0.16, 5 * (fx - fy), 2 * (fy - fz)


def rgb256_to_cielab(r: int, g: int, b: int) -> tuple[float, float, float]:
    """Convert the given color from 24-bit RGB to CIE Lab."""
    return xyz_to_cielab(*linear_srgb_to_xyz(*srgb_to_linear_srgb(
        *rgb256_to_srgb(r, g, b)
    )))


# --------------------------------------------------------------------------------------
# HSL


def rgb256_to_lightness(r: int, g: int, b: int) -> float:
    """
    Determine the HSL lightness of the given color, which is the mean of the
    largest and smallest sRGB coordinates and ranges from 0 to 1.
    """
    coordinates = rgb256_to_srgb(r, g, b)
    return (max(coordinates) + min(coordinates)) / 2
