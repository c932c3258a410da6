"""pylsm.core.boundary
Piecewise-linear reconstruction of the zero contour of the signed distance
and the geometric measures derived from it.
"""
from __future__ import annotations
import logging
from dataclasses import dataclass, field
from typing import List

import numpy as np

from pylsm.core.topology import NodeStatus, ElementStatus
from pylsm.core.sideconvention import SIDE
from pylsm.core.geometry import distance, edge_point
from pylsm.cutters.element_cutter import compute_mesh_status
from pylsm.cutters.edge_cutter import is_cut, is_boundary_edge, cut_distance, find_point
from pylsm.integration.cut_area import area_fractions
from pylsm.utils.graph import adjacency_matrix, count_components

logger = logging.getLogger(__name__)


@dataclass(slots=True)
class BoundaryPoint:
    coord: np.ndarray               # Position vector
    length: float = 0.0             # Integral length (half of each incident segment)
    negative_limit: float = 0.0     # Movement limit inwards (<= 0)
    positive_limit: float = 0.0     # Movement limit outwards (>= 0)
    is_domain: bool = False         # Lies on the edge of the mesh
    sensitivities: List[float] = field(default_factory=lambda: [0.0, 0.0])
    normal: np.ndarray = field(default_factory=lambda: np.zeros(2))
    neighbours: List[int] = field(default_factory=list)
    segments: List[int] = field(default_factory=list)


@dataclass(slots=True)
class BoundarySegment:
    start: int                      # Index of start point
    end: int                        # Index of end point
    element: int                    # Element that owns the segment
    length: float = 0.0
    weight: float = 1.0


class Boundary:
    """
    The discretised boundary of a level-set structure.

    The boundary is traced by looking for mesh nodes that lie on the zero
    contour and by linear interpolation along element edges where the signed
    distance changes sign.  Points are shared between neighbouring elements,
    so every pass yields a set of polylines whose segments each live in a
    single element.

    Mesh state touched by this class:

    * ``discretise`` writes ``node.status``, ``node.boundary_points``,
      ``elem.status`` and ``elem.boundary_segments``; it reads
      ``node.is_active`` and the nodal signed distance.
    * ``compute_area_fractions`` reads statuses and segment lookups, writes
      ``elem.area``.
    * ``compute_normal_vectors`` reads ``node.boundary_points``,
      ``node.is_domain`` and the narrow band; writes ``point.normal``.
    * ``compute_holes`` and ``compute_perimeter`` only read boundary data.

    A Boundary owns one mesh snapshot; passes must not overlap.
    """

    def __init__(self, mesh, level_set, n_constraints: int = 1, side=SIDE):
        if n_constraints < 0:
            raise ValueError("Number of constraints cannot be negative.")
        self.mesh = mesh
        self.level_set = level_set
        self.n_constraints = int(n_constraints)
        self.side = side

        self.points: List[BoundaryPoint] = []
        self.segments: List[BoundarySegment] = []
        self.n_points = 0
        self.n_segments = 0
        self.n_holes = 0
        self.length = 0.0
        self.area = 0.0

    # ------------------------------------------------------------------ #
    # Discretisation                                                     #
    # ------------------------------------------------------------------ #
    def discretise(self, is_target: bool = False) -> float:
        """
        Trace the boundary of the current (or target) signed distance.

        Only edges whose end nodes are both in the narrow band are examined,
        unless the target field is discretised, in which case the whole
        domain is active.  Returns the total boundary length.
        """
        mesh = self.mesh
        phi = self.level_set.field(is_target)

        # 20% of the node count is a reasonable first estimate.
        size = max(4, int(0.2 * mesh.n_nodes))
        self.points = [None] * size
        self.segments = [None] * size
        self.n_points = self.n_segments = 0
        self.length = 0.0

        compute_mesh_status(mesh, phi, side=self.side)
        nodes = mesh.nodes_list

        for elem in mesh.elements_list:
            if elem.status is ElementStatus.OUTSIDE:
                continue

            cut_points: List[int] = []

            for j in range(4):
                n1, n2 = elem.edge_nodes(j)
                node1, node2 = nodes[n1], nodes[n2]

                if not (is_target or (node1.is_active and node2.is_active)):
                    continue

                if is_cut(node1.status, node2.status):
                    d = cut_distance(phi[n1], phi[n2])
                    coord = edge_point(mesh.nodes_x_y_pos[n1], j, d)
                    index = find_point(self.points, node1.boundary_points, coord, self.side.tol)
                    if index is None:
                        index = self._add_point(coord)
                        node1.boundary_points.append(index)
                        node2.boundary_points.append(index)
                    cut_points.append(index)

                elif is_boundary_edge(node1.status, node2.status):
                    self._add_segment(self._node_point(n1), self._node_point(n2), elem.id)

            n_cut = len(cut_points)

            if n_cut == 2:
                self._add_segment(cut_points[0], cut_points[1], elem.id)

            elif n_cut == 1:
                # The boundary also passes through a corner with an outside neighbour.
                for j, nid in enumerate(elem.nodes):
                    if nodes[nid].status is not NodeStatus.BOUNDARY:
                        continue
                    after = nodes[elem.nodes[(j + 1) % 4]]
                    before = nodes[elem.nodes[(j - 1) % 4]]
                    if after.status is NodeStatus.OUTSIDE or before.status is NodeStatus.OUTSIDE:
                        self._add_segment(cut_points[0], self._node_point(nid), elem.id)

            elif n_cut == 4:
                self._resolve_saddle(elem, cut_points, phi)

            elif n_cut == 0 and elem.status is not ElementStatus.INSIDE:
                # The boundary runs along the diagonal.
                corners = [nid for nid in elem.nodes if nodes[nid].status is NodeStatus.BOUNDARY]
                if len(corners) >= 2:
                    self._add_segment(self._node_point(corners[0]), self._node_point(corners[1]), elem.id)

        del self.points[self.n_points:]
        del self.segments[self.n_segments:]

        self._compute_point_lengths()

        logger.info("Discretised boundary: %d points, %d segments, length %.6g",
                    self.n_points, self.n_segments, self.length)
        return self.length

    def _resolve_saddle(self, elem, cut_points, phi):
        """Pair the four cut points of a fully ambiguous element."""
        nodes = self.mesh.nodes_list
        lsf_sum = float(sum(phi[nid] for nid in elem.nodes))
        if not self.side.inside_is_positive:
            lsf_sum = -lsf_sum

        status = nodes[elem.nodes[0]].status
        if (status is NodeStatus.INSIDE and lsf_sum > 0) or (status is NodeStatus.OUTSIDE and lsf_sum < 0):
            pairs = ((0, 1), (2, 3))
        else:
            pairs = ((0, 3), (1, 2))

        for a, b in pairs:
            self._add_segment(cut_points[a], cut_points[b], elem.id)

        elem.status = ElementStatus.CENTRE_INSIDE if lsf_sum > 0 else ElementStatus.CENTRE_OUTSIDE

    def _node_point(self, nid: int) -> int:
        """Boundary point lying on node ``nid``, created on first use."""
        node = self.mesh.nodes_list[nid]
        coord = self.mesh.nodes_x_y_pos[nid]
        index = find_point(self.points, node.boundary_points, coord, self.side.tol)
        if index is None:
            index = self._add_point(coord)
            node.boundary_points.append(index)
        return index

    def _add_point(self, coord) -> int:
        if self.n_points == len(self.points):
            logger.debug("Growing boundary point storage from %d", len(self.points))
            self.points.extend([None] * max(4, len(self.points)))
        index = self.n_points
        self.points[index] = self._initialise_point(coord)
        self.n_points += 1
        return index

    def _initialise_point(self, coord) -> BoundaryPoint:
        """New point with movement limits from the move limit and the domain edge."""
        coord = np.array(coord, dtype=float)
        move_limit = self.level_set.move_limit
        point = BoundaryPoint(
            coord=coord,
            negative_limit=-move_limit,
            positive_limit=move_limit,
            sensitivities=[0.0] * (1 + self.n_constraints),
        )

        # Closest distance to the domain edge.
        min_boundary = min(coord[0], self.mesh.width - coord[0],
                           coord[1], self.mesh.height - coord[1])

        # Within half a grid spacing of the edge: the point may not move out of the domain.
        if min_boundary < 0.5:
            point.negative_limit = max(-move_limit, -max(min_boundary, 0.0))
            if min_boundary < self.side.tol:
                point.is_domain = True
        return point

    def _add_segment(self, start: int, end: int, element: int) -> int:
        if start == end:
            raise ValueError(f"Degenerate boundary segment in element {element}: start == end == {start}.")
        length = distance(self.points[start].coord, self.points[end].coord)
        if length <= 0.0:
            raise ValueError(f"Zero-length boundary segment in element {element}.")

        if self.n_segments == len(self.segments):
            logger.debug("Growing boundary segment storage from %d", len(self.segments))
            self.segments.extend([None] * max(4, len(self.segments)))
        index = self.n_segments
        self.segments[index] = BoundarySegment(start=start, end=end, element=element, length=length)
        self.n_segments += 1

        self.length += length
        self.mesh.elements_list[element].boundary_segments.append(index)
        return index

    def _compute_point_lengths(self):
        """Integral length, segment and neighbour lookups for each point."""
        for i, segment in enumerate(self.segments):
            start, end = self.points[segment.start], self.points[segment.end]
            start.length += 0.5 * segment.length
            end.length += 0.5 * segment.length
            start.segments.append(i)
            end.segments.append(i)
            start.neighbours.append(segment.end)
            end.neighbours.append(segment.start)

    # ------------------------------------------------------------------ #
    # Measures                                                           #
    # ------------------------------------------------------------------ #
    def compute_area_fractions(self) -> float:
        """Material area fraction of every element; returns the total area."""
        self.area = float(area_fractions(self.mesh, self).sum())
        return self.area

    def compute_normal_vectors(self):
        """
        Unit normal at every boundary point that is not on the domain edge,
        pointing along the signed-distance gradient (away from the voids).

        Each narrow-band node next to the boundary estimates the normal from
        a central-difference gradient of the signed distance; the estimates
        are averaged onto the node's boundary points with inverse squared
        distance weights.  A point lying on a node takes that node's normal.
        """
        mesh = self.mesh
        phi = self.level_set.signed_distance
        is_set = np.zeros(self.n_points, dtype=bool)
        weight = np.zeros(self.n_points, dtype=float)
        for point in self.points:
            point.normal = np.zeros(2)

        for nid in self.level_set.narrow_band:
            node = mesh.nodes_list[nid]
            if not node.boundary_points or node.is_domain:
                continue

            x, y = int(round(node.x)), int(round(node.y))
            grad_x = 0.5 * (phi[mesh.xy_to_index[x + 1, y]] - phi[mesh.xy_to_index[x - 1, y]])
            grad_y = 0.5 * (phi[mesh.xy_to_index[x, y + 1]] - phi[mesh.xy_to_index[x, y - 1]])
            grad = np.hypot(grad_x, grad_y)
            if grad == 0.0:
                raise ValueError(f"Zero signed-distance gradient at node {nid}; cannot estimate a normal.")
            normal = np.array([grad_x, grad_y]) / grad

            for p in node.boundary_points:
                point = self.points[p]
                r_sqd = float(np.sum((node.coord - point.coord) ** 2))

                if r_sqd < self.side.tol:
                    point.normal = normal.copy()
                    weight[p] = 1.0
                    is_set[p] = True
                elif not is_set[p]:
                    point.normal = point.normal + normal / r_sqd
                    weight[p] += 1.0 / r_sqd

        for i, point in enumerate(self.points):
            if point.is_domain:
                continue
            if weight[i] == 0.0:
                raise ValueError(f"Boundary point {i} at {point.coord} has no narrow-band node to estimate its normal.")
            point.normal = point.normal / weight[i]
            norm = np.linalg.norm(point.normal)
            if norm == 0.0:
                raise ValueError(f"Normal estimates cancel at boundary point {i}.")
            point.normal = point.normal / norm

    def compute_holes(self) -> int:
        """
        Number of holes: connected boundary loops beyond the first one,
        which is taken to be the outer boundary of the structure.
        """
        A = adjacency_matrix(self.n_points, self.segments)
        n_loops = count_components(A)
        self.n_holes = max(n_loops - 1, 0)
        logger.debug("Boundary has %d loops, %d holes", n_loops, self.n_holes)
        return self.n_holes

    def compute_perimeter(self, point: BoundaryPoint) -> float:
        """Sum of the distances from a point to each of its neighbours."""
        return sum(distance(point.coord, self.points[nb].coord) for nb in point.neighbours)

    def __repr__(self):
        return (f"<Boundary n_points={self.n_points}, n_segments={self.n_segments}, "
                f"length={self.length:.6g}>")
