"""Per-point density weights from k-nearest-neighbor distances."""

import logging

import numpy as np

logger = logging.getLogger(__name__)


def as_points(points) -> np.ndarray:
    """Coerce input to a float (n, 2) array; empty input becomes (0, 2)."""
    pts = np.asarray(points, dtype=float)
    if pts.size == 0:
        return np.zeros((0, 2), dtype=float)
    if pts.ndim != 2 or pts.shape[1] != 2:
        raise ValueError(f"points must have shape (n, 2), got {pts.shape}")
    if not np.all(np.isfinite(pts)):
        raise ValueError("points contain non-finite coordinates")
    return pts


def pairwise_distances(points: np.ndarray) -> np.ndarray:
    """Full symmetric Euclidean distance matrix, zero diagonal."""
    pts = as_points(points)
    diff = pts[:, None, :] - pts[None, :, :]
    return np.sqrt(np.sum(diff * diff, axis=2))


def clamp_k(k, n: int) -> int:
    """Neighbor count clamped to [0, n-1]."""
    try:
        kk = int(np.floor(float(k)))
    except (TypeError, ValueError, OverflowError):
        kk = 0
    return int(max(0, min(kk, n - 1)))


def compute_knn_weights(points, k: int, dist: np.ndarray | None = None) -> np.ndarray:
    """
    Weight w_i = mean distance from point i to its k nearest neighbors.

    k is clamped to [0, n-1]; k == 0 gives all-zero weights. Ties in the
    neighbor distances do not change the averaged sum.
    """
    pts = as_points(points)
    n = int(pts.shape[0])
    kk = clamp_k(k, n)
    w = np.zeros(n, dtype=float)
    if kk <= 0:
        return w

    if dist is None:
        dist = pairwise_distances(pts)
    dist = np.array(dist, dtype=float, copy=True)
    np.fill_diagonal(dist, np.inf)

    nearest = np.sort(dist, axis=1, kind="stable")[:, :kk]
    w[:] = nearest.mean(axis=1)
    logger.debug("knn weights: n=%d k=%d mean=%.6f", n, kk, float(w.mean()))
    return w
