# pylsm/core/sideconvention.py
from dataclasses import dataclass

from pylsm.core.topology import NodeStatus


@dataclass
class SideConvention:
    """
    Defines the convention for classifying nodes relative to the signed distance (phi).
    """
    # If True, the structure (inside) corresponds to phi > 0.
    inside_is_positive: bool = True
    # Nodes with abs(phi) < tol lie on the boundary. Also used as the
    # coincidence tolerance when deduplicating boundary points (grid units).
    tol: float = 1e-6

    def is_boundary(self, phi: float, tol: float = None) -> bool:
        if tol is None:
            tol = self.tol
        return abs(phi) < tol

    def is_inside(self, phi: float, tol: float = None) -> bool:
        if self.is_boundary(phi, tol):
            return False
        return phi > 0.0 if self.inside_is_positive else phi < 0.0

    def status(self, phi: float, tol: float = None) -> NodeStatus:
        """Returns the NodeStatus for a given phi value."""
        if self.is_boundary(phi, tol):
            return NodeStatus.BOUNDARY
        if self.is_inside(phi, tol):
            return NodeStatus.INSIDE
        return NodeStatus.OUTSIDE


# Global, editable in one place:
SIDE = SideConvention(inside_is_positive=True, tol=1e-6)
