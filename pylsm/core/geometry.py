"""pylsm.core.geometry
Small geometric kernels shared by the boundary extraction and area integration.
"""
from functools import cmp_to_key
from typing import Sequence

import numpy as np


def distance(p1, p2) -> float:
    """Euclidean distance between two points."""
    dx = float(p1[0]) - float(p2[0])
    dy = float(p1[1]) - float(p2[1])
    return float(np.sqrt(dx * dx + dy * dy))


def edge_point(origin, edge: int, d: float) -> np.ndarray:
    """
    Position at distance ``d`` from ``origin`` along local element edge ``edge``.

    Edges are walked CCW from the lower-left corner, so the bottom edge runs
    in +x, the right edge in +y, the top edge in -x and the left edge in -y.
    """
    x, y = float(origin[0]), float(origin[1])
    if edge == 0:
        return np.array([x + d, y])
    elif edge == 1:
        return np.array([x, y + d])
    elif edge == 2:
        return np.array([x - d, y])
    return np.array([x, y - d])


def is_clockwise(p1, p2, centre) -> bool:
    """
    Sort predicate: whether ``p1`` precedes ``p2`` in an anticlockwise sweep
    around ``centre`` that starts at 12 o'clock.
    """
    dx1, dy1 = p1[0] - centre[0], p1[1] - centre[1]
    dx2, dy2 = p2[0] - centre[0], p2[1] - centre[1]

    if dx1 >= 0 and dx2 < 0:
        return False
    if dx1 < 0 and dx2 >= 0:
        return True

    if dx1 == 0 and dx2 == 0:
        if dy1 >= 0 or dy2 >= 0:
            return not p1[1] > p2[1]
        return not p2[1] > p1[1]

    # Cross product (centre -> p1) x (centre -> p2).
    det = dx1 * dy2 - dx2 * dy1
    return not det < 0


def sort_clockwise(vertices: Sequence, centre) -> list:
    """Order polygon vertices anticlockwise around ``centre``."""
    def _cmp(a, b):
        return -1 if is_clockwise(a, b, centre) else 1
    return sorted(vertices, key=cmp_to_key(_cmp))


def polygon_area(vertices: Sequence, centre=None) -> float:
    """
    Shoelace area of a polygon.  When ``centre`` is given the vertices are
    first sorted around it, otherwise they are taken in the given order.
    """
    if len(vertices) < 3:
        return 0.0
    if centre is not None:
        vertices = sort_clockwise(vertices, centre)
    xy = np.asarray(vertices, dtype=float)
    x, y = xy[:, 0], xy[:, 1]
    return 0.5 * abs(float(np.dot(x, np.roll(y, -1)) - np.dot(y, np.roll(x, -1))))
