import enum
from dataclasses import dataclass, field
from typing import Tuple, List, Optional

import numpy as np


class NodeStatus(enum.Enum):
    """Position of a mesh node relative to the zero contour."""
    INSIDE = "inside"
    OUTSIDE = "outside"
    BOUNDARY = "boundary"


class ElementStatus(enum.Enum):
    """Position of an element relative to the zero contour.

    ``NONE`` marks an element with both inside and outside corners.  Elements
    whose four edges are all cut are resolved to ``CENTRE_INSIDE`` or
    ``CENTRE_OUTSIDE`` during discretisation.
    """
    INSIDE = "inside"
    OUTSIDE = "outside"
    NONE = "none"
    CENTRE_INSIDE = "centre_inside"
    CENTRE_OUTSIDE = "centre_outside"


class Node:
    def __init__(self, id, x, y, tag=None):
        self.x = x
        self.y = y
        self.id = id
        self.tag = tag
        self.status: NodeStatus = NodeStatus.OUTSIDE
        self.is_domain = False          # lies on the mesh boundary
        self.is_active = True           # lies inside the narrow band
        self.neighbours: List[int] = []      # left, right, down, up (None on the domain edge)
        self.boundary_points: List[int] = []

    def __repr__(self):
        return f"Node {self.id}({self.x:.3f}, {self.y:.3f}, status='{self.status.value}')"

    @property
    def coord(self) -> np.ndarray:
        return np.array([self.x, self.y], dtype=float)


@dataclass(slots=True)
class Element:
    id: int                     # Element ID
    nodes: Tuple[int, ...]      # Corner node indices, CCW from the lower-left corner
    centroid_x: float = None
    centroid_y: float = None
    status: ElementStatus = ElementStatus.NONE
    area: float = 0.0           # Material area fraction
    boundary_segments: List[int] = field(default_factory=list)
    neighbors: List[Optional[int]] = field(default_factory=list)

    def centroid(self) -> Tuple[float, float]:
        """Calculate the centroid of the element."""
        if self.centroid_x is None or self.centroid_y is None:
            raise ValueError("Centroid coordinates are not set. Please calculate the centroid first.")
        return self.centroid_x, self.centroid_y

    def edge_nodes(self, j: int) -> Tuple[int, int]:
        """Corner pair of local edge ``j`` (0: bottom, 1: right, 2: top, 3: left)."""
        return self.nodes[j], self.nodes[(j + 1) % 4]
