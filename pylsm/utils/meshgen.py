"""pylsm.utils.meshgen
Structured grid generators.
"""
import numpy as np
import numba
from typing import Tuple

__all__ = ["structured_quad"]


@numba.jit(nopython=True, cache=True)
def _structured_q1_numba(width: int, height: int):
    """
    Generates raw data for a unit-spaced structured Q1 grid using Numba.
    """
    num_nodes_x = width + 1
    num_nodes_y = height + 1
    nodes_coords = np.zeros((num_nodes_x * num_nodes_y, 2), dtype=np.float64)

    for j in range(num_nodes_y):
        for i in range(num_nodes_x):
            node_id = j * num_nodes_x + i
            nodes_coords[node_id, 0] = i
            nodes_coords[node_id, 1] = j

    elements = np.empty((width * height, 4), dtype=np.int64)
    for el_j in range(height):
        for el_i in range(width):
            el_idx = el_j * width + el_i
            bl = el_j * num_nodes_x + el_i
            # Corners in CCW order: bottom-left, bottom-right, top-right, top-left.
            elements[el_idx, 0] = bl
            elements[el_idx, 1] = bl + 1
            elements[el_idx, 2] = bl + 1 + num_nodes_x
            elements[el_idx, 3] = bl + num_nodes_x

    return nodes_coords, elements


def structured_quad(width: int, height: int) -> Tuple[np.ndarray, np.ndarray]:
    """
    Raw data for a ``width`` x ``height`` grid of unit square elements.

    Returns:
        tuple: (nodes_coords, elements)
            nodes_coords (np.ndarray): (n_nodes, 2) coordinates, row-major in x.
            elements (np.ndarray): (n_elements, 4) corner connectivity (CCW).
    """
    if int(width) < 1 or int(height) < 1:
        raise ValueError("Grid width and height must be positive integers.")
    return _structured_q1_numba(int(width), int(height))

