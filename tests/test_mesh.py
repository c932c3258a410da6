import numpy as np
import pytest

from pylsm.core import Mesh
from pylsm.core.topology import NodeStatus, ElementStatus
from pylsm.utils.meshgen import structured_quad


def test_structured_quad_counts_and_orientation():
    nodes, elements = structured_quad(3, 2)
    assert nodes.shape == (12, 2)
    assert elements.shape == (6, 4)
    # Lower-left element, corners CCW from the lower-left.
    assert elements[0].tolist() == [0, 1, 5, 4]
    assert np.allclose(nodes[elements[0]], [[0, 0], [1, 0], [1, 1], [0, 1]])


def test_structured_quad_rejects_empty_grid():
    with pytest.raises(ValueError):
        structured_quad(0, 3)


def test_indexing_and_neighbours():
    mesh = Mesh(3, 2)
    assert mesh.n_nodes == 12 and mesh.n_elements == 6
    assert mesh.xy_to_index.shape == (4, 3)
    assert mesh.node_index(3, 2) == 11
    assert mesh.node_index(4, 0) is None
    assert mesh.element_index(2, 1) == 5
    assert mesh.element_index(-1, 0) is None

    # Node neighbours are left, right, down, up.
    assert mesh.nodes_list[0].neighbours == [None, 1, None, 4]
    assert mesh.nodes_list[5].neighbours == [4, 6, 1, 9]

    # Element neighbours are below, right, above, left.
    assert mesh.elements_list[0].neighbors == [None, 1, 3, None]
    assert mesh.neighbors()[0] == [1, 3]
    assert mesh.neighbors()[4] == [1, 5, 3]


def test_domain_flags_and_centroids():
    mesh = Mesh(3, 2)
    domain = [n.id for n in mesh.nodes_list if n.is_domain]
    assert sorted(domain) == [0, 1, 2, 3, 4, 7, 8, 9, 10, 11]
    assert mesh.nodes_list[5].tag == "interior"
    assert "boundary_left" in mesh.nodes_list[0].tag
    assert mesh.elements_list[4].centroid() == (1.5, 1.5)
    assert np.allclose(mesh.areas(), 1.0)


def test_status_queries_and_reset():
    mesh = Mesh(2, 1)
    mesh.nodes_list[0].status = NodeStatus.BOUNDARY
    mesh.elements_list[1].status = ElementStatus.OUTSIDE
    mesh.nodes_list[0].boundary_points = [3]
    mesh.elements_list[0].boundary_segments = [1]

    assert mesh.node_indices(NodeStatus.BOUNDARY).tolist() == [0]
    assert mesh.element_indices(ElementStatus.OUTSIDE).tolist() == [1]
    assert mesh.element_status_array().tolist() == ["none", "outside"]

    mesh.reset_boundary_state()
    assert mesh.nodes_list[0].boundary_points == []
    assert mesh.elements_list[0].boundary_segments == []
    assert "width=2" in repr(mesh)


def test_node_coord_and_element_edges():
    mesh = Mesh(3, 2)
    node = mesh.nodes_list[5]
    assert node.coord.tolist() == [1.0, 1.0]
    assert repr(node).startswith("Node 5(1.000, 1.000")
    with pytest.raises(TypeError):
        x, y = node

    elem = mesh.elements_list[0]
    assert [elem.edge_nodes(j) for j in range(4)] == [(0, 1), (1, 5), (5, 4), (4, 0)]
