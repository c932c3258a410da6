"""pylsm.io.text
Plain-text and raw binary dumps of the level set, boundary and area fractions.
"""
import logging
import os
from typing import Optional

import numpy as np

logger = logging.getLogger(__name__)


def datapoint_filename(prefix: str, datapoint: int, ext: str, directory: Optional[str] = None) -> str:
    """``<directory>/<prefix>_<datapoint:04d>.<ext>``, e.g. ``level-set_0007.txt``."""
    name = f"{prefix}_{int(datapoint):04d}.{ext}"
    return os.path.join(directory, name) if directory else name


def save_level_set_txt(filename: str, level_set, is_xy: bool = False) -> None:
    """One line per node: ``[x y] phi velocity gradient``."""
    cols = [level_set.signed_distance, level_set.velocity, level_set.gradient]
    if is_xy:
        xy = level_set.mesh.nodes_x_y_pos
        cols = [xy[:, 0], xy[:, 1]] + cols
    np.savetxt(filename, np.column_stack(cols), fmt="%f")
    logger.debug("Wrote level set to %s", filename)


def load_level_set_txt(filename: str, level_set, is_xy: bool = False) -> np.ndarray:
    """Read the signed distance written by :func:`save_level_set_txt`."""
    data = np.atleast_2d(np.loadtxt(filename, dtype=float))
    if data.shape[0] != level_set.mesh.n_nodes:
        raise ValueError(f"{filename} contains {data.shape[0]} nodes, expected {level_set.mesh.n_nodes}.")
    column = 2 if is_xy else 0
    level_set.set_signed_distance(data[:, column])
    return level_set.signed_distance


def save_level_set_bin(filename: str, level_set) -> None:
    """Raw float64 signed distance."""
    np.asarray(level_set.signed_distance, dtype=np.float64).tofile(filename)


def load_level_set_bin(filename: str, level_set) -> np.ndarray:
    values = np.fromfile(filename, dtype=np.float64)
    if values.size != level_set.mesh.n_nodes:
        raise ValueError(f"{filename} contains {values.size} values, expected {level_set.mesh.n_nodes}.")
    level_set.set_signed_distance(values)
    return level_set.signed_distance


def save_boundary_points_txt(filename: str, boundary) -> None:
    """One line per point: ``x y length``."""
    with open(filename, "w") as f:
        for p in boundary.points:
            f.write(f"{p.coord[0]:f} {p.coord[1]:f} {p.length:f}\n")


def save_boundary_segments_txt(filename: str, boundary) -> None:
    """Start and end coordinates of each segment, segments separated by a blank line."""
    with open(filename, "w") as f:
        for s in boundary.segments:
            start = boundary.points[s.start].coord
            end = boundary.points[s.end].coord
            f.write(f"{start[0]:f} {start[1]:f}\n")
            f.write(f"{end[0]:f} {end[1]:f}\n\n")


def save_area_fractions_txt(filename: str, mesh, is_xy: bool = False) -> None:
    """One line per element: ``[x y] area`` with ``x y`` the element centre."""
    with open(filename, "w") as f:
        for e in mesh.elements_list:
            if is_xy:
                f.write(f"{e.centroid_x:f} {e.centroid_y:f} ")
            f.write(f"{e.area:f}\n")
