"""
Filtered Vietoris-Rips complex up to 2-simplices, and its total order.

Vertices enter at 0, edges at their pairwise time, triangles at the max of
their three edge times. The complex is the full one over all n points; a
threshold is only applied later, by whoever reads the pairs.
"""

import logging
from dataclasses import dataclass, field
from itertools import combinations

import numpy as np

from wphviz.solver import solve_pair_time
from wphviz.weights import as_points, pairwise_distances

logger = logging.getLogger(__name__)

MODES = ("weighted", "rips")


@dataclass(frozen=True)
class Simplex:
    dim: int
    vertices: tuple[int, ...]
    value: float


def simplex_sort_key(s: Simplex):
    """Filtration value, then dimension, then the ascending vertex tuple."""
    return (s.value, s.dim, s.vertices)


@dataclass
class Filtration:
    """Simplices in total order; positions index the boundary matrix."""
    simplices: list[Simplex]
    max_value: float = 0.0
    position: dict[tuple[int, ...], int] = field(default_factory=dict)

    def __post_init__(self):
        if not self.position:
            self.position = {s.vertices: idx for idx, s in enumerate(self.simplices)}

    def __len__(self) -> int:
        return len(self.simplices)

    @property
    def dims(self) -> np.ndarray:
        return np.array([s.dim for s in self.simplices], dtype=np.int8)

    @property
    def values(self) -> np.ndarray:
        return np.array([s.value for s in self.simplices], dtype=float)


# -----------------------------
# Edge values
# -----------------------------
def edge_value_matrix(points, weights=None, p: float = 1.0, mode: str = "weighted") -> np.ndarray:
    """
    Symmetric (n, n) matrix of edge filtration values.

    mode="weighted": solved time at which the two weighted balls touch.
    mode="rips":     plain Euclidean distance.
    """
    if mode not in MODES:
        raise ValueError(f"unknown filtration mode: {mode!r} (expected one of {MODES})")

    pts = as_points(points)
    n = int(pts.shape[0])
    dist = pairwise_distances(pts)
    if mode == "rips":
        return dist

    w = np.zeros(n, dtype=float) if weights is None else np.asarray(weights, dtype=float)
    if w.shape != (n,):
        raise ValueError(f"weights must have shape ({n},), got {w.shape}")

    out = np.zeros((n, n), dtype=float)
    for i, j in combinations(range(n), 2):
        t = solve_pair_time(float(dist[i, j]), float(w[i]), float(w[j]), p)
        out[i, j] = t
        out[j, i] = t
    return out


# -----------------------------
# Complex construction + order
# -----------------------------
def enumerate_simplices(edge_values: np.ndarray, maxdim: int = 1) -> tuple[list[Simplex], float]:
    """
    All 0-, 1- and (if maxdim >= 1) 2-simplices with their values.
    Returns (simplices, max filtration value).
    """
    n = int(edge_values.shape[0])
    simplices = [Simplex(0, (i,), 0.0) for i in range(n)]
    max_value = 0.0

    for i, j in combinations(range(n), 2):
        f = float(edge_values[i, j])
        max_value = max(max_value, f)
        simplices.append(Simplex(1, (i, j), f))

    # H0 does not see triangles, and a triangle's value never exceeds its edges
    if maxdim >= 1:
        for i, j, k in combinations(range(n), 3):
            f = float(max(edge_values[i, j], edge_values[i, k], edge_values[j, k]))
            max_value = max(max_value, f)
            simplices.append(Simplex(2, (i, j, k), f))

    return simplices, max_value


def order_simplices(simplices: list[Simplex]) -> list[Simplex]:
    """Strict total order compatible with the filtration and the face relation."""
    return sorted(simplices, key=simplex_sort_key)


def build_filtration(
    points,
    weights=None,
    p: float = 1.0,
    maxdim: int = 1,
    mode: str = "weighted",
) -> Filtration:
    edge_values = edge_value_matrix(points, weights=weights, p=p, mode=mode)
    simplices, max_value = enumerate_simplices(edge_values, maxdim=maxdim)
    ordered = order_simplices(simplices)
    logger.debug(
        "build_filtration: n=%d simplices=%d max_value=%.6f mode=%s",
        edge_values.shape[0], len(ordered), max_value, mode,
    )
    return Filtration(simplices=ordered, max_value=max_value)
