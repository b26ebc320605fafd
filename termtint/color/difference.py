"""Support for computing the difference between two or more colors"""
from collections.abc import Iterable
import math


def delta_e_lab(
    L1: float, a1: float, b1: float,
    L2: float, a2: float, b2: float,
) -> float:
    """
    Determine the difference between two CIE Lab colors, which is the Euclidian
    distance between their coordinates (also known as ΔE*76).
    """
    ΔL = L1 - L2
    Δa = a1 - a2
    Δb = b1 - b2
    return math.sqrt(ΔL * ΔL + Δa * Δa + Δb * Δb)


def closest_lab(
    origin: tuple[float, float, float],
    candidates: Iterable[tuple[float, float, float]],
) -> tuple[int, float]:
    """
    Find the color closest to the origin amongst candidate colors.

    Args:
        origin: is the reference color in CIE Lab coordinates
        candidates: are the colors to compare to, also in CIE Lab coordinates
    Returns:
        the index of the candidate color closest to the origin and its distance,
        which are -1 and infinity if the iterable is empty.

    Only a strictly smaller distance replaces the current minimum. Hence, if
    several candidates are equally close, the one with the lowest index wins.
    This function iterates over the candidates only once and hence the iterable
    may also be an iterator.
    """
    min_ΔE = math.inf
    min_index = -1

    for index, color in enumerate(candidates):
        ΔE = delta_e_lab(*origin, *color)
        if ΔE < min_ΔE:
            min_ΔE = ΔE
            min_index = index

    return min_index, min_ΔE
