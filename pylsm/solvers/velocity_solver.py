r"""
velocity_solver.py  –  Boundary velocities from objective/constraint sensitivities
==============================================================================
The velocity of boundary point *p* is a weighted sum of its sensitivities,

    v(p) = Σᵢ λᵢ · s(p, i),      clamped to [negative_limit(p), positive_limit(p)],

where *i = 0* is the objective and *i = 1..K* are the constraints.  The
weights λ are found by a small constrained optimisation problem over the
K + 1 multipliers: maximise the predicted first-order change in the objective

    Δ₀(λ) = Σₚ v(p) s(p, 0) length(p)

subject to Δₖ(λ) ≤ distanceₖ for every constraint, where distanceₖ is the
distance from violation (negative when the constraint is currently violated).
Sensitivities are rates of *improvement* of the objective per unit outward
displacement; negate them for a quantity that should decrease.

Each function is exposed to the optimiser as a pure map
``λ -> (value, gradient)``; points whose velocity is clamped contribute no
gradient.  Any SLSQP-like solver with inequality constraints and box bounds
can host it; scipy's SLSQP is used here.
"""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from typing import Sequence, Tuple

import numpy as np
from scipy.optimize import minimize

logger = logging.getLogger(__name__)

_debug = os.getenv("PYLSM_DEBUG", "").lower() in {"1", "true", "yes"}


@dataclass
class OptimiserParameters:
    """Settings that govern a single velocity solve."""

    tol: float = 1e-10                  # SLSQP convergence tolerance
    max_iter: int = 500                 # hard cap on SLSQP iterations
    bound_factor: float = 10.0          # |λ| ≤ bound_factor · max move limit (scaled units)
    disp: bool = False


class VelocitySolver:
    """
    Solve for the optimum multipliers λ and boundary velocities.

    Parameters
    ----------
    points : sequence of BoundaryPoint
        Uses ``sensitivities`` (objective first, then constraints),
        ``length``, ``negative_limit`` and ``positive_limit``.
    constraint_distances : sequence of float
        Distance from violation for each constraint.
    params : OptimiserParameters, optional
    """

    def __init__(self, points: Sequence, constraint_distances: Sequence[float] = (),
                 params: OptimiserParameters | None = None):
        self.params = params or OptimiserParameters()
        self.constraint_distances = np.asarray(constraint_distances, dtype=float).ravel()
        self.n_constraints = self.constraint_distances.size
        self.n_functions = 1 + self.n_constraints
        self.n_points = len(points)

        S = np.zeros((self.n_points, self.n_functions), dtype=float)
        for i, point in enumerate(points):
            if len(point.sensitivities) < self.n_functions:
                raise ValueError(
                    f"Boundary point {i} has {len(point.sensitivities)} sensitivities, "
                    f"{self.n_functions} are required.")
            S[i] = point.sensitivities[:self.n_functions]
        if not np.all(np.isfinite(S)):
            raise ValueError("Sensitivities contain non-finite values.")

        self.lengths = np.array([p.length for p in points], dtype=float)
        self.lower = np.array([p.negative_limit for p in points], dtype=float)
        self.upper = np.array([p.positive_limit for p in points], dtype=float)
        if np.any(self.lower > 0) or np.any(self.upper < 0):
            raise ValueError("Movement limits must satisfy negative_limit <= 0 <= positive_limit.")

        # Normalise each function's sensitivities to unit maximum magnitude.
        s_max = np.abs(S).max(axis=0) if self.n_points else np.zeros(self.n_functions)
        self.scale_factors = np.where(s_max > 0, 1.0 / np.where(s_max > 0, s_max, 1.0), 1.0)
        self.sensitivities = S
        self._scaled = S * self.scale_factors

        limit = max(np.abs(self.lower).max(initial=0.0), np.abs(self.upper).max(initial=0.0))
        self._limit_scale = limit if limit > 0 else 1.0

        self.velocities = np.zeros(self.n_points, dtype=float)
        self.is_side_limit = np.zeros(self.n_points, dtype=bool)
        self.lambdas = np.zeros(self.n_functions, dtype=float)

    # ------------------------------------------------------------------ #
    # Function evaluations (scaled λ)                                    #
    # ------------------------------------------------------------------ #
    def compute_velocities(self, lambda_: np.ndarray) -> np.ndarray:
        """Clamped velocities for the scaled multipliers ``lambda_``."""
        v = self._scaled @ np.asarray(lambda_, dtype=float)
        self.is_side_limit = (v < self.lower) | (v > self.upper) | (self.lower == self.upper)
        self.velocities = np.clip(v, self.lower, self.upper)
        return self.velocities

    def compute_function(self, index: int) -> float:
        """Scaled change in function ``index`` for the current velocities."""
        return float(np.sum(self.velocities * self._scaled[:, index] * self.lengths))

    def compute_gradients(self, index: int) -> np.ndarray:
        """Gradient of function ``index`` with respect to each scaled λ."""
        free = ~self.is_side_limit
        w = self._scaled[free, index] * self.lengths[free]
        return w @ self._scaled[free, :]

    def callback(self, lambda_: np.ndarray, index: int) -> Tuple[float, np.ndarray]:
        """Value and gradient of function ``index`` at the scaled multipliers ``lambda_``."""
        self.compute_velocities(lambda_)
        return self.compute_function(index), self.compute_gradients(index)

    # ------------------------------------------------------------------ #
    # Driver                                                             #
    # ------------------------------------------------------------------ #
    def solve(self) -> Tuple[np.ndarray, np.ndarray]:
        """
        Returns
        -------
        lambdas : (K+1,) ndarray
            Multipliers in the units of the supplied sensitivities.
        velocities : (n_points,) ndarray

        Raises
        ------
        RuntimeError
            If the optimiser does not converge.
        """
        if self.n_points == 0:
            raise ValueError("Cannot solve for velocities without boundary points.")

        p = self.params
        lam_max = p.bound_factor * self._limit_scale
        bounds = [(0.0, lam_max)] + [(-lam_max, lam_max)] * self.n_constraints
        x0 = np.zeros(self.n_functions)
        x0[0] = self._limit_scale

        def objective(x):
            value, grad = self.callback(x, 0)
            return -value, -grad

        constraints = []
        for k in range(1, self.n_functions):
            distance = self.scale_factors[k] * self.constraint_distances[k - 1]
            constraints.append({
                "type": "ineq",
                "fun": lambda x, k=k, d=distance: d - self.callback(x, k)[0],
                "jac": lambda x, k=k: -self.callback(x, k)[1],
            })

        iteration = [0]

        def _log_iteration(x):
            iteration[0] += 1
            logger.debug("SLSQP iter %d: lambda=%s", iteration[0], x)

        result = minimize(
            objective, x0, jac=True, method="SLSQP", bounds=bounds,
            constraints=constraints, tol=p.tol, callback=_log_iteration,
            options={"maxiter": p.max_iter, "disp": p.disp or _debug},
        )

        if not result.success:
            raise RuntimeError(f"Velocity optimisation failed to converge: {result.message}")

        self.compute_velocities(result.x)
        self.lambdas = np.asarray(result.x, dtype=float) * self.scale_factors

        logger.info("Velocity solve converged in %d iterations: lambda=%s",
                    int(getattr(result, "nit", iteration[0])), self.lambdas)
        return self.lambdas.copy(), self.velocities.copy()


def solve_velocities(points, constraint_distances=(), params: OptimiserParameters | None = None):
    """Convenience wrapper around :class:`VelocitySolver`."""
    return VelocitySolver(points, constraint_distances, params).solve()
