"""pylsm.cutters.element_cutter
Classify nodes and elements against a nodal signed-distance field.
"""
import numpy as np

from pylsm.core.topology import NodeStatus, ElementStatus
from pylsm.core.sideconvention import SIDE


def classify_nodes(mesh, phi_nodes, side=SIDE):
    """
    Set ``node.status`` for every node and clear its boundary point lookup.
    Returns the indices of inside, outside and boundary nodes.
    """
    phi_nodes = np.asarray(phi_nodes, dtype=float)
    if phi_nodes.shape[0] != mesh.n_nodes:
        raise ValueError(f"Expected {mesh.n_nodes} nodal values, got {phi_nodes.shape[0]}.")

    for node, phi in zip(mesh.nodes_list, phi_nodes):
        node.boundary_points = []
        node.status = side.status(phi)

    statuses = np.array([n.status for n in mesh.nodes_list], dtype=object)
    inside_inds = np.flatnonzero(statuses == NodeStatus.INSIDE)
    outside_inds = np.flatnonzero(statuses == NodeStatus.OUTSIDE)
    boundary_inds = np.flatnonzero(statuses == NodeStatus.BOUNDARY)
    return inside_inds, outside_inds, boundary_inds


def classify_elements(mesh):
    """
    Classify each element from its corner statuses:
    no outside corners -> INSIDE, no inside corners -> OUTSIDE, otherwise NONE.
    Node statuses must be current.  Clears each element's segment lookup.
    """
    for elem in mesh.elements_list:
        elem.boundary_segments = []
        tally_inside = 0
        tally_outside = 0
        for nid in elem.nodes:
            status = mesh.nodes_list[nid].status
            if status is NodeStatus.INSIDE:
                tally_inside += 1
            elif status is NodeStatus.OUTSIDE:
                tally_outside += 1

        if tally_outside == 0:
            elem.status = ElementStatus.INSIDE
        elif tally_inside == 0:
            elem.status = ElementStatus.OUTSIDE
        else:
            elem.status = ElementStatus.NONE


def compute_mesh_status(mesh, phi_nodes, side=SIDE):
    """Classify nodes then elements for one discretisation pass."""
    classify_nodes(mesh, phi_nodes, side=side)
    classify_elements(mesh)
