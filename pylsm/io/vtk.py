import logging

import numpy as np
import meshio

logger = logging.getLogger(__name__)


def _mesh_geometry(mesh):
    points_3d = np.pad(mesh.nodes_x_y_pos, ((0, 0), (0, 1)), constant_values=0)
    cells = [meshio.CellBlock("quad", mesh.corner_connectivity)]
    return points_3d, cells


def export_level_set_vtk(filename: str, level_set, is_velocity: bool = False, is_gradient: bool = False):
    """
    Exports the nodal signed distance (and optionally the nodal velocity and
    gradient) to a VTK file for visualization.

    Args:
        filename: The path to the output file (e.g., 'results/level-set_0001.vtu').
        level_set: The LevelSet to export.
        is_velocity: Also write ``level_set.velocity``.
        is_gradient: Also write ``level_set.gradient``.
    """
    points_3d, cells = _mesh_geometry(level_set.mesh)
    point_data = {"distance": np.asarray(level_set.signed_distance, dtype=float)}
    if is_velocity:
        point_data["velocity"] = np.asarray(level_set.velocity, dtype=float)
    if is_gradient:
        point_data["gradient"] = np.asarray(level_set.gradient, dtype=float)

    meshio.Mesh(points_3d, cells, point_data=point_data).write(filename)
    logger.info("Level set exported to %s", filename)


def export_area_fractions_vtk(filename: str, mesh):
    """Exports the element area fractions as cell data."""
    points_3d, cells = _mesh_geometry(mesh)
    cell_data = {"area": [mesh.area_fractions()]}
    meshio.Mesh(points_3d, cells, cell_data=cell_data).write(filename)
    logger.info("Area fractions exported to %s", filename)
