"""pylsm.cutters.edge_cutter
Element-edge tests used while tracing the boundary.

Criteria
--------
1. An edge is *cut* when one endpoint is inside and the other outside; the
   boundary crosses it at ``t = phi1 / (phi1 - phi2)`` from the first node.
2. An edge whose endpoints both lie on the boundary is itself a boundary
   segment and needs no interpolation.
"""
from typing import Optional

from pylsm.core.topology import NodeStatus
from pylsm.core.sideconvention import SIDE


def is_cut(status1: NodeStatus, status2: NodeStatus) -> bool:
    """One endpoint inside, the other outside."""
    return {status1, status2} == {NodeStatus.INSIDE, NodeStatus.OUTSIDE}


def is_boundary_edge(status1: NodeStatus, status2: NodeStatus) -> bool:
    """Both endpoints lie on the zero contour."""
    return status1 is NodeStatus.BOUNDARY and status2 is NodeStatus.BOUNDARY


def cut_distance(phi1: float, phi2: float) -> float:
    """Fraction of the (unit) edge from node 1 to the zero crossing."""
    denom = phi1 - phi2
    if denom == 0.0:
        raise ValueError("Edge is not cut: both endpoints carry the same signed distance.")
    return phi1 / denom


def find_point(points, candidates, coord, tol: float = None) -> Optional[int]:
    """
    Index of the boundary point among ``candidates`` whose coordinate matches
    ``coord`` to within ``tol`` on both axes, or None if there is none.
    """
    if tol is None:
        tol = SIDE.tol
    for index in candidates:
        other = points[index].coord
        if abs(coord[0] - other[0]) < tol and abs(coord[1] - other[1]) < tol:
            return index
    return None
