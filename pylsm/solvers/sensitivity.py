"""pylsm.solvers.sensitivity
Finite-difference boundary point sensitivities.
"""
import logging
from typing import Callable, Sequence

import numpy as np

logger = logging.getLogger(__name__)

# f(point) -> value of a function with the point at its (displaced) position.
SensitivityCallback = Callable[["BoundaryPoint"], float]


class Sensitivity:
    """
    Central finite differences of an arbitrary function with respect to the
    normal displacement of a single boundary point.

    Parameters
    ----------
    delta : float
        Perturbation length in units of the grid spacing.
    """

    def __init__(self, delta: float = 1e-4):
        if delta <= 0:
            raise ValueError(f"Finite-difference perturbation must be positive, got {delta}.")
        self.delta = float(delta)

    def compute_sensitivity(self, point, callback: SensitivityCallback) -> float:
        """
        ``(f(x + δn) - f(x - δn)) / 2δ`` for the point's unit normal ``n``.
        The point coordinate is restored afterwards, also when the callback raises.
        """
        normal = np.asarray(point.normal, dtype=float)
        if not np.any(normal):
            raise ValueError(f"Boundary point at {point.coord} has no normal vector.")
        coord = np.array(point.coord, dtype=float)
        try:
            point.coord = coord + self.delta * normal
            f1 = float(callback(point))
            point.coord = coord - self.delta * normal
            f2 = float(callback(point))
        finally:
            point.coord = coord
        return (f1 - f2) / (2.0 * self.delta)

    def assign_sensitivities(self, points: Sequence, callbacks: Sequence[SensitivityCallback]) -> np.ndarray:
        """
        Fill ``point.sensitivities`` for every point, one callback per
        function (objective first, then constraints).  Domain points whose
        normal is undefined get zero sensitivity.  Returns an
        ``(n_points, n_functions)`` array.
        """
        out = np.zeros((len(points), len(callbacks)), dtype=float)
        for i, point in enumerate(points):
            if point.is_domain:
                point.sensitivities = [0.0] * len(callbacks)
                continue
            for j, callback in enumerate(callbacks):
                out[i, j] = self.compute_sensitivity(point, callback)
            point.sensitivities = out[i].tolist()
        logger.debug("Computed %d x %d finite-difference sensitivities", *out.shape)
        return out
