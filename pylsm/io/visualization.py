"""pylsm.io.visualization"""
import numpy as np
from matplotlib.collections import LineCollection, PolyCollection
import matplotlib.pyplot as plt

from pylsm.core.topology import ElementStatus


_ELEM_FILL = {
    ElementStatus.INSIDE: (0.4, 0.6, 1.0, 0.7),
    ElementStatus.OUTSIDE: (1.0, 1.0, 1.0, 0.0),
    ElementStatus.NONE: (1.0, 0.55, 0.0, 0.7),
    ElementStatus.CENTRE_INSIDE: (1.0, 0.55, 0.0, 0.7),
    ElementStatus.CENTRE_OUTSIDE: (1.0, 0.55, 0.0, 0.7),
}


def plot_boundary(mesh, boundary, *, fill_elements=True, plot_points=True,
                  plot_normals=False, normal_scale=0.5, show=False, ax=None):
    """
    Plots the discretised boundary on top of the element grid.

    Args:
        mesh (Mesh): Mesh whose element status has been set by
                     ``Boundary.discretise``.
        boundary (Boundary): The discretised boundary.
        fill_elements (bool, optional): Fill elements by status (inside,
                                        cut, outside).
        plot_points (bool, optional): Mark the boundary points.
        plot_normals (bool, optional): Draw ``point.normal`` at each point.
        normal_scale (float, optional): Arrow length in grid units.
        show (bool, optional): Call ``plt.show()`` at the end.
        ax (matplotlib.axes.Axes, optional): An existing axes object to plot on.
    Returns:
        matplotlib.axes.Axes: The axes object containing the plot.
    """
    if ax is None:
        fig, ax = plt.subplots(figsize=(8, 8))

    xy = mesh.nodes_x_y_pos
    polys = [xy[conn] for conn in mesh.corner_connectivity]
    if fill_elements:
        colors = [_ELEM_FILL[e.status] for e in mesh.elements_list]
    else:
        colors = "none"
    ax.add_collection(PolyCollection(polys, facecolors=colors, edgecolors="lightgray", linewidths=0.5))

    if boundary.segments:
        lines = [(boundary.points[s.start].coord, boundary.points[s.end].coord)
                 for s in boundary.segments]
        ax.add_collection(LineCollection(lines, colors="green", linewidths=2.0))

    if boundary.points:
        pts = np.array([p.coord for p in boundary.points])
        if plot_points:
            ax.plot(pts[:, 0], pts[:, 1], "k.", markersize=4)
        if plot_normals:
            normals = np.array([p.normal for p in boundary.points])
            ax.quiver(pts[:, 0], pts[:, 1], normals[:, 0], normals[:, 1],
                      angles="xy", scale_units="xy", scale=1.0 / normal_scale, color="red")

    ax.set_xlim(0, mesh.width)
    ax.set_ylim(0, mesh.height)
    ax.set_aspect("equal", adjustable="box")
    ax.set_title(f"Boundary: {len(boundary.points)} points, {len(boundary.segments)} segments")

    if show:
        plt.show()
    return ax
