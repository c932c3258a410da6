"""pylsm.integration.cut_area
Material area fraction of elements cut by the discretised boundary.
"""
import numpy as np

from pylsm.core.topology import NodeStatus, ElementStatus
from pylsm.core.geometry import polygon_area


def cut_polygon(mesh, boundary, elem) -> list:
    """
    Vertices of the clip polygon of a cut element (unordered).

    The polygon is built from the corners on the wanted side (outside for
    ``CENTRE_OUTSIDE`` elements, inside otherwise), boundary corners whose two
    edge-neighbours are both inside, and the end points of every boundary
    segment owned by the element.
    """
    if elem.status is ElementStatus.CENTRE_OUTSIDE:
        wanted = NodeStatus.OUTSIDE
    else:
        wanted = NodeStatus.INSIDE

    nodes = mesh.nodes_list
    vertices = []
    for i, nid in enumerate(elem.nodes):
        node = nodes[nid]
        if node.status is wanted:
            vertices.append(node.coord)
        elif node.status is NodeStatus.BOUNDARY:
            after = nodes[elem.nodes[(i + 1) % 4]]
            before = nodes[elem.nodes[(i - 1) % 4]]
            # Not part of a boundary segment: a clip vertex.
            if after.status is NodeStatus.INSIDE and before.status is NodeStatus.INSIDE:
                vertices.append(node.coord)

    for s in elem.boundary_segments:
        segment = boundary.segments[s]
        vertices.append(boundary.points[segment.start].coord)
        vertices.append(boundary.points[segment.end].coord)
    return vertices


def cut_area(mesh, boundary, elem) -> float:
    """Area fraction of a unit element cut by the boundary."""
    centre = np.array(elem.centroid(), dtype=float)
    area = polygon_area(cut_polygon(mesh, boundary, elem), centre=centre)
    if elem.status is ElementStatus.CENTRE_OUTSIDE:
        return 1.0 - area
    return area


def area_fractions(mesh, boundary) -> np.ndarray:
    """
    Set ``elem.area`` for every element and return the fractions:
    1.0 inside, 0.0 outside, polygon clipping otherwise.
    """
    theta = np.zeros(mesh.n_elements, dtype=float)
    for elem in mesh.elements_list:
        if elem.status is ElementStatus.INSIDE:
            elem.area = 1.0
        elif elem.status is ElementStatus.OUTSIDE:
            elem.area = 0.0
        else:
            elem.area = cut_area(mesh, boundary, elem)
        theta[elem.id] = elem.area
    return theta
