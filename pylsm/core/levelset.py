"""pylsm.core.levelset
Nodal signed-distance storage plus a few analytic shapes to initialise it.

Sign convention: the structure (inside) is where phi > 0, voids are phi < 0.
"""
from __future__ import annotations
import logging
from typing import Sequence, Tuple, Optional

import numpy as np

logger = logging.getLogger(__name__)


class LevelSetFunction:
    """Abstract base class"""
    def __call__(self, x: np.ndarray) -> float:
        raise NotImplementedError
    def evaluate_on_nodes(self, mesh) -> np.ndarray:
        return np.asarray(self(mesh.nodes_x_y_pos), dtype=float)


class CircleLevelSet(LevelSetFunction):
    """A circular hole: negative inside the circle, positive in the material."""
    def __init__(self, center: Tuple[float,float]=(0.,0.), radius: float=1.0):
        self.center=np.asarray(center,dtype=float)
        self.radius=float(radius)
    def __call__(self, x):
        """Signed distance; works for shape (..., 2) or plain (2,)."""
        x = np.asarray(x, dtype=float)
        rel = x - self.center
        # norm along the last axis keeps the leading shape intact
        return np.linalg.norm(rel, axis=-1) - self.radius


class AffineLevelSet(LevelSetFunction):
    """
    φ(x, y) = a * x + b * y + c
    Any straight line: choose (a, b, c) so that φ=0 is the line.
    """
    def __init__(self, a: float, b: float, c: float):
        self.a, self.b, self.c = float(a), float(b), float(c)

    def __call__(self, x: np.ndarray) -> np.ndarray:
        x = np.asarray(x, dtype=float)
        return self.a * x[..., 0] + self.b * x[..., 1] + self.c

    def normalised(self):
        """Return a copy scaled so that ‖∇φ‖ = 1 (signed-distance)."""
        norm = np.hypot(self.a, self.b)
        return AffineLevelSet(self.a / norm, self.b / norm, self.c / norm)


class DomainLevelSet(LevelSetFunction):
    """Distance to the edge of a [0, width] x [0, height] box (zero on the edge)."""
    def __init__(self, width: float, height: float):
        self.width, self.height = float(width), float(height)
    def __call__(self, x):
        x = np.asarray(x, dtype=float)
        return np.minimum(np.minimum(x[..., 0], self.width - x[..., 0]),
                          np.minimum(x[..., 1], self.height - x[..., 1]))


class CompositeLevelSet(LevelSetFunction):
    """Intersection of several material regions: the pointwise minimum."""
    def __init__(self, levelsets: Sequence[LevelSetFunction]):
        self.levelsets=list(levelsets)
        if not self.levelsets:
            raise ValueError("CompositeLevelSet needs at least one level set.")
    def __call__(self, x):
        return np.minimum.reduce([np.asarray(ls(x), dtype=float) for ls in self.levelsets])


class LevelSet:
    """
    Signed-distance field on the nodes of a structured :class:`Mesh`.

    Holds the current field, an optional target field, the narrow band of
    active nodes and the move limit (maximum boundary displacement per step,
    in grid units).  ``velocity`` and ``gradient`` are nodal scratch arrays
    for the advection step.
    """

    def __init__(self, mesh, move_limit: float = 0.5, band_width: float = 6.0):
        if move_limit <= 0:
            raise ValueError(f"Move limit must be positive, got {move_limit}.")
        if band_width <= 0:
            raise ValueError(f"Narrow band width must be positive, got {band_width}.")
        self.mesh = mesh
        self.move_limit = float(move_limit)
        self.band_width = float(band_width)
        self.signed_distance = np.zeros(mesh.n_nodes, dtype=float)
        self.target: Optional[np.ndarray] = None
        self.velocity = np.zeros(mesh.n_nodes, dtype=float)
        self.gradient = np.zeros(mesh.n_nodes, dtype=float)
        self.narrow_band = np.arange(mesh.n_nodes)

    @property
    def n_narrow_band(self) -> int:
        return len(self.narrow_band)

    # --------------------- population / update ---------------------
    def _check(self, values) -> np.ndarray:
        values = np.asarray(values, dtype=float).ravel()
        if values.shape[0] != self.mesh.n_nodes:
            raise ValueError(f"Size mismatch: {values.shape[0]} values for {self.mesh.n_nodes} nodes.")
        if not np.all(np.isfinite(values)):
            raise ValueError("Signed distance contains non-finite values.")
        return values

    def set_signed_distance(self, values) -> None:
        self.signed_distance = self._check(values).copy()
        self.update_narrow_band()

    def set_target(self, values) -> None:
        self.target = self._check(values).copy()

    def interpolate(self, level_set: LevelSetFunction) -> None:
        """Fill the signed distance from an analytic level set."""
        self.set_signed_distance(level_set.evaluate_on_nodes(self.mesh))

    def init_holes(self, holes: Sequence[Tuple[Tuple[float, float], float]]) -> None:
        """
        Initialise the domain as solid material perforated by circular holes,
        each given as ``((cx, cy), radius)``.  The domain edge is part of the
        boundary.
        """
        shapes = [DomainLevelSet(self.mesh.width, self.mesh.height)]
        shapes += [CircleLevelSet(center, radius) for center, radius in holes]
        self.interpolate(CompositeLevelSet(shapes))

    def update_narrow_band(self) -> None:
        """Flag nodes within ``band_width`` of the zero contour as active."""
        mask = np.abs(self.signed_distance) <= self.band_width
        self.narrow_band = np.flatnonzero(mask)
        for node, active in zip(self.mesh.nodes_list, mask):
            node.is_active = bool(active)
        logger.debug("Narrow band holds %d of %d nodes", len(self.narrow_band), self.mesh.n_nodes)

    def field(self, is_target: bool = False) -> np.ndarray:
        """The signed distance used for discretisation."""
        if is_target:
            if self.target is None:
                raise ValueError("No target signed distance has been set.")
            return self.target
        return self.signed_distance
