import numpy as np
import pytest

from pylsm.core import Mesh
from pylsm.core.boundary import BoundaryPoint
from pylsm.core.sideconvention import SideConvention, SIDE
from pylsm.core.topology import NodeStatus, ElementStatus
from pylsm.cutters.element_cutter import classify_nodes, classify_elements, compute_mesh_status
from pylsm.cutters.edge_cutter import is_cut, is_boundary_edge, cut_distance, find_point


def test_side_convention():
    assert SIDE.status(0.5) is NodeStatus.INSIDE
    assert SIDE.status(-0.5) is NodeStatus.OUTSIDE
    assert SIDE.status(5e-7) is NodeStatus.BOUNDARY
    assert SIDE.status(-5e-7) is NodeStatus.BOUNDARY

    flipped = SideConvention(inside_is_positive=False)
    assert flipped.status(0.5) is NodeStatus.OUTSIDE
    assert flipped.is_inside(-0.5)


def test_node_and_element_classification():
    """
    Tests classification on a 2x1 mesh:

        phi:  1 -- 0 -- -1        (top row)
              1 -- 0 -- -1        (bottom row)
    """
    mesh = Mesh(2, 1)
    phi = np.array([1.0, 0.0, -1.0, 1.0, 0.0, -1.0])
    mesh.nodes_list[0].boundary_points = [7]

    inside, outside, boundary = classify_nodes(mesh, phi)
    assert inside.tolist() == [0, 3]
    assert outside.tolist() == [2, 5]
    assert boundary.tolist() == [1, 4]
    assert mesh.nodes_list[0].boundary_points == []

    classify_elements(mesh)
    # Left element has no outside corner, right element no inside corner.
    assert mesh.elements_list[0].status is ElementStatus.INSIDE
    assert mesh.elements_list[1].status is ElementStatus.OUTSIDE


def test_mixed_element_is_none():
    mesh = Mesh(1, 1)
    compute_mesh_status(mesh, np.array([1.0, -1.0, 1.0, -1.0]))
    assert mesh.elements_list[0].status is ElementStatus.NONE


def test_classification_size_mismatch():
    with pytest.raises(ValueError):
        classify_nodes(Mesh(1, 1), np.zeros(3))


def test_edge_predicates():
    assert is_cut(NodeStatus.INSIDE, NodeStatus.OUTSIDE)
    assert is_cut(NodeStatus.OUTSIDE, NodeStatus.INSIDE)
    assert not is_cut(NodeStatus.INSIDE, NodeStatus.BOUNDARY)
    assert is_boundary_edge(NodeStatus.BOUNDARY, NodeStatus.BOUNDARY)
    assert not is_boundary_edge(NodeStatus.BOUNDARY, NodeStatus.INSIDE)


def test_cut_distance():
    assert cut_distance(0.3, -0.7) == pytest.approx(0.3)
    assert cut_distance(-1.0, 3.0) == pytest.approx(0.25)
    with pytest.raises(ValueError):
        cut_distance(0.5, 0.5)


def test_find_point():
    points = [BoundaryPoint(coord=np.array([0.5, 0.0])), BoundaryPoint(coord=np.array([1.0, 0.25]))]
    assert find_point(points, [0, 1], np.array([1.0, 0.25 + 5e-7])) == 1
    assert find_point(points, [0], np.array([1.0, 0.25])) is None
    assert find_point(points, [], np.array([0.5, 0.0])) is None
