import numpy as np
from typing import List, Optional

from pylsm.core.topology import Node, Element, NodeStatus, ElementStatus
from pylsm.utils.meshgen import structured_quad


class Mesh:
    """
    A structured grid of unit square elements.

    Node ``(x, y)`` has index ``y * (width + 1) + x`` and every element holds
    its four corner nodes in CCW order starting from the lower-left corner,
    so local edge ``j`` runs from corner ``j`` to corner ``j + 1`` (bottom,
    right, top, left).  Besides geometry the mesh carries per-node and
    per-element scratch fields (status, boundary point / segment lookups,
    area fraction) that :class:`pylsm.core.boundary.Boundary` rewrites on
    every discretisation pass.
    """

    def __init__(self, width: int, height: int):
        self.width = int(width)
        self.height = int(height)
        nodes_coords, elements = structured_quad(self.width, self.height)

        self.nodes_x_y_pos = np.asarray(nodes_coords, dtype=float)
        self.corner_connectivity = np.asarray(elements, dtype=int)
        self.nodes_list: List[Node] = self._create_nodes()
        self.elements_list: List[Element] = []
        self.n_nodes = len(self.nodes_list)
        self.n_elements = len(self.corner_connectivity)

        # (x, y) -> node index lookup.
        self.xy_to_index = np.arange(self.n_nodes).reshape(self.height + 1, self.width + 1).T.copy()
        self._neighbors: List[List[int]] = [[] for _ in range(self.n_elements)]
        self._build_topology()

    def _create_nodes(self) -> List[Node]:
        """Tagged Node objects; nodes on the edge of the grid are domain nodes."""
        nodes: List[Node] = []
        for i, (x, y) in enumerate(self.nodes_x_y_pos):
            tags = []
            if np.isclose(x, 0): tags.append("boundary_left")
            if np.isclose(x, self.width): tags.append("boundary_right")
            if np.isclose(y, 0): tags.append("boundary_bottom")
            if np.isclose(y, self.height): tags.append("boundary_top")
            if not tags: tags.append("interior")
            node = Node(id=i, x=float(x), y=float(y), tag=",".join(tags))
            node.is_domain = tags[0] != "interior"
            nodes.append(node)
        return nodes

    def _build_topology(self):
        """Create Element objects and node/element neighbour lookups."""
        for eid, corners in enumerate(self.corner_connectivity):
            centroid = self.nodes_x_y_pos[corners].mean(axis=0)
            self.elements_list.append(Element(
                id=eid,
                nodes=tuple(int(c) for c in corners),
                centroid_x=float(centroid[0]),
                centroid_y=float(centroid[1]),
            ))

        for node in self.nodes_list:
            x, y = int(round(node.x)), int(round(node.y))
            node.neighbours = [
                self.node_index(x - 1, y), self.node_index(x + 1, y),
                self.node_index(x, y - 1), self.node_index(x, y + 1),
            ]

        for elem in self.elements_list:
            i, j = elem.id % self.width, elem.id // self.width
            elem.neighbors = [
                self.element_index(i, j - 1), self.element_index(i + 1, j),
                self.element_index(i, j + 1), self.element_index(i - 1, j),
            ]
            self._neighbors[elem.id] = [nb for nb in elem.neighbors if nb is not None]

    # --- Public API ---
    def node_index(self, x: int, y: int) -> Optional[int]:
        """Index of the node at grid position ``(x, y)``, or None outside the grid."""
        if 0 <= x <= self.width and 0 <= y <= self.height:
            return int(self.xy_to_index[x, y])
        return None

    def element_index(self, i: int, j: int) -> Optional[int]:
        """Index of the element in column ``i`` and row ``j``, or None outside the grid."""
        if 0 <= i < self.width and 0 <= j < self.height:
            return j * self.width + i
        return None

    def neighbors(self) -> List[List[int]]:
        return self._neighbors

    def reset_boundary_state(self):
        """Clear the boundary point and segment lookups left by a previous pass."""
        for node in self.nodes_list:
            node.boundary_points = []
        for elem in self.elements_list:
            elem.boundary_segments = []

    def element_status_array(self) -> np.ndarray:
        return np.array([e.status.value for e in self.elements_list])

    def element_indices(self, status: ElementStatus) -> np.ndarray:
        return np.fromiter((e.id for e in self.elements_list if e.status is status), dtype=int)

    def node_indices(self, status: NodeStatus) -> np.ndarray:
        return np.fromiter((n.id for n in self.nodes_list if n.status is status), dtype=int)

    def area_fractions(self) -> np.ndarray:
        return np.array([e.area for e in self.elements_list], dtype=float)

    def areas(self) -> np.ndarray:
        """Calculates the geometric area of each element."""
        corner_coords = self.nodes_x_y_pos[self.corner_connectivity]
        x, y = corner_coords[..., 0], corner_coords[..., 1]
        return 0.5 * np.abs(np.sum(x * np.roll(y, -1, axis=1) - y * np.roll(x, -1, axis=1), axis=1))

    def __repr__(self):
        return (f"<Mesh width={self.width}, height={self.height}, "
                f"n_nodes={self.n_nodes}, n_elems={self.n_elements}>")
