import numpy as np
import pytest
from scipy.optimize import OptimizeResult

import pylsm.solvers.velocity_solver as velocity_solver
from pylsm.core.boundary import BoundaryPoint
from pylsm.solvers import VelocitySolver, OptimiserParameters, solve_velocities


def _points(sensitivities, lengths=None, limit=0.5):
    lengths = lengths or [1.0] * len(sensitivities)
    return [
        BoundaryPoint(coord=np.array([float(i), 0.0]), length=l,
                      negative_limit=-limit, positive_limit=limit, sensitivities=list(s))
        for i, (s, l) in enumerate(zip(sensitivities, lengths))
    ]


def test_callback_value_and_gradient():
    points = _points([[1.0], [0.5]], lengths=[1.0, 2.0], limit=10.0)
    solver = VelocitySolver(points)

    value, grad = solver.callback(np.array([0.2]), 0)
    assert np.allclose(solver.velocities, [0.2, 0.1])
    assert value == pytest.approx(0.2 * 1.0 * 1.0 + 0.1 * 0.5 * 2.0)
    assert grad == pytest.approx([1.0 + 0.25 * 2.0])


def test_clamped_points_have_no_gradient():
    points = _points([[1.0], [0.5]], limit=0.25)
    solver = VelocitySolver(points)

    value, grad = solver.callback(np.array([1.0]), 0)
    assert np.allclose(solver.velocities, [0.25, 0.25])
    assert solver.is_side_limit.tolist() == [True, True]
    assert grad == pytest.approx([0.0])
    assert value == pytest.approx(0.25 + 0.125)


def test_objective_only_moves_to_limits():
    points = _points([[1.0, 0.0]] * 4)
    lambdas, velocities = solve_velocities(points, params=OptimiserParameters(bound_factor=1.0))

    assert lambdas[0] > 0.0
    assert np.allclose(velocities, 0.5)
    assert np.all(velocities <= 0.5 + 1e-12)


def test_pinned_points_do_not_move():
    points = _points([[1.0], [1.0], [1.0]])
    points[1].negative_limit = points[1].positive_limit = 0.0
    solver = VelocitySolver(points, params=OptimiserParameters(bound_factor=1.0))
    _, velocities = solver.solve()

    assert velocities[1] == 0.0
    assert solver.is_side_limit[1]
    assert np.allclose(velocities[[0, 2]], 0.5)


def test_constraint_limits_the_step():
    """Objective and constraint share the same sensitivity: the constraint caps the velocity."""
    points = _points([[1.0, 1.0], [1.0, 1.0]])
    solver = VelocitySolver(points, constraint_distances=[0.2])
    lambdas, velocities = solver.solve()

    assert np.allclose(velocities, 0.1, atol=1e-6)
    constraint_change = np.sum(velocities * solver.sensitivities[:, 1] * solver.lengths)
    assert constraint_change <= 0.2 + 1e-8
    assert lambdas.shape == (2,)
    # Returned multipliers reproduce the velocities in unscaled units.
    assert np.allclose(solver.sensitivities @ lambdas, velocities, atol=1e-8)


def test_non_convergence_raises(monkeypatch):
    def _failed(*args, **kwargs):
        return OptimizeResult(x=np.zeros(1), success=False, message="Iteration limit reached", nit=500)

    monkeypatch.setattr(velocity_solver, "minimize", _failed)
    with pytest.raises(RuntimeError, match="Iteration limit"):
        VelocitySolver(_points([[1.0]])).solve()


def test_input_validation():
    with pytest.raises(ValueError):
        VelocitySolver(_points([[1.0]]), constraint_distances=[0.1])
    with pytest.raises(ValueError):
        VelocitySolver(_points([[np.inf, 0.0]]))

    bad = _points([[1.0]])
    bad[0].negative_limit = 0.1
    with pytest.raises(ValueError):
        VelocitySolver(bad)

    with pytest.raises(ValueError):
        VelocitySolver([]).solve()


def test_scaling_is_undone_in_lambdas():
    points = _points([[100.0], [50.0]], limit=1e3)
    solver = VelocitySolver(points)
    assert solver.scale_factors == pytest.approx([0.01])
    solver.compute_velocities(np.array([1.0]))
    assert np.allclose(solver.velocities, [1.0, 0.5])
