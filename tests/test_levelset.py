import numpy as np
import pytest

from pylsm.core import Mesh, LevelSet, CircleLevelSet, AffineLevelSet, DomainLevelSet, CompositeLevelSet


def test_analytic_shapes():
    circle = CircleLevelSet(center=(1.0, 1.0), radius=0.5)
    assert circle(np.array([1.0, 1.0])) == pytest.approx(-0.5)
    assert circle(np.array([[2.0, 1.0], [1.0, 1.5]])) == pytest.approx([0.5, 0.0])

    line = AffineLevelSet(3.0, 4.0, -5.0).normalised()
    assert line(np.array([3.0, 4.0])) == pytest.approx((9 + 16 - 5) / 5.0)

    box = DomainLevelSet(4, 2)
    assert box(np.array([[0.0, 1.0], [2.0, 1.0], [3.5, 0.25]])) == pytest.approx([0.0, 1.0, 0.25])

    both = CompositeLevelSet([box, circle])
    assert both(np.array([1.0, 1.0])) == pytest.approx(-0.5)
    with pytest.raises(ValueError):
        CompositeLevelSet([])


def test_invalid_parameters():
    mesh = Mesh(2, 2)
    with pytest.raises(ValueError):
        LevelSet(mesh, move_limit=0.0)
    with pytest.raises(ValueError):
        LevelSet(mesh, band_width=-1.0)


def test_set_signed_distance_validation():
    mesh = Mesh(2, 2)
    ls = LevelSet(mesh)
    with pytest.raises(ValueError):
        ls.set_signed_distance(np.ones(5))
    phi = np.ones(mesh.n_nodes)
    phi[3] = np.nan
    with pytest.raises(ValueError):
        ls.set_signed_distance(phi)
    with pytest.raises(ValueError):
        ls.field(is_target=True)


def test_narrow_band_flags_nodes():
    mesh = Mesh(4, 1)
    ls = LevelSet(mesh, band_width=1.5)
    ls.interpolate(AffineLevelSet(1.0, 0.0, -1.0))     # phi = x - 1

    band = {n.id for n in mesh.nodes_list if n.is_active}
    assert set(ls.narrow_band.tolist()) == band
    # x = 0, 1, 2 lie within 1.5 of the contour on both rows.
    assert ls.n_narrow_band == 6
    assert not mesh.nodes_list[mesh.node_index(3, 0)].is_active


def test_init_holes():
    mesh = Mesh(10, 10)
    ls = LevelSet(mesh)
    ls.init_holes([((5.0, 5.0), 2.0)])
    phi = ls.signed_distance
    assert phi[mesh.node_index(0, 4)] == pytest.approx(0.0)
    assert phi[mesh.node_index(5, 5)] == pytest.approx(-2.0)
    assert phi[mesh.node_index(2, 5)] == pytest.approx(1.0)
    assert phi[mesh.node_index(7, 5)] == pytest.approx(0.0)


def test_target_field():
    mesh = Mesh(2, 2)
    ls = LevelSet(mesh)
    target = np.linspace(-1.0, 1.0, mesh.n_nodes)
    ls.set_target(target)
    assert np.allclose(ls.field(is_target=True), target)
    assert np.allclose(ls.field(), 0.0)
