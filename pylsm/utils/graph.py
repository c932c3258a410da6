"""pylsm.utils.graph
Connectivity of the discretised boundary.
"""
import numpy as np
import scipy.sparse as sp


def adjacency_matrix(n_points: int, segments) -> sp.csr_matrix:
    """
    Symmetric boolean adjacency matrix of the boundary points, one edge per
    boundary segment.
    """
    if n_points == 0:
        return sp.csr_matrix((0, 0), dtype=bool)
    rows = np.fromiter((s.start for s in segments), dtype=np.int64)
    cols = np.fromiter((s.end for s in segments), dtype=np.int64)
    data = np.ones(2 * len(rows), dtype=bool)
    A = sp.coo_matrix((data, (np.concatenate([rows, cols]), np.concatenate([cols, rows]))),
                      shape=(n_points, n_points))
    # Duplicate entries are summed; keep the pattern only.
    A = A.tocsr()
    A.data[:] = True
    return A


def count_components(adjacency: sp.csr_matrix) -> int:
    """Number of connected components, by depth-first search with an explicit stack."""
    n = adjacency.shape[0]
    indptr, indices = adjacency.indptr, adjacency.indices
    visited = np.zeros(n, dtype=bool)
    n_components = 0

    for start in range(n):
        if visited[start]:
            continue
        n_components += 1
        visited[start] = True
        stack = [start]
        while stack:
            point = stack.pop()
            for nb in indices[indptr[point]:indptr[point + 1]]:
                if not visited[nb]:
                    visited[nb] = True
                    stack.append(nb)
    return n_components
