"""Persistence pairs from a reduced boundary matrix, plus interval helpers."""

import logging

import numpy as np

from wphviz.config import get as get_config
from wphviz.filtration import Filtration
from wphviz.reduction import Reduction

logger = logging.getLogger(__name__)


def _as_intervals(rows: list[tuple[float, float]]) -> np.ndarray:
    if not rows:
        return np.zeros((0, 2), dtype=float)
    return np.array(rows, dtype=float)


def extract_pairs(
    filtration: Filtration,
    reduction: Reduction,
    maxdim: int = 1,
    include_essential: bool = False,
    keep_diagonal_h1: bool | None = None,
) -> tuple[np.ndarray, np.ndarray]:
    """
    (H0, H1) interval arrays of shape (m, 2).

    A column J owning low L gives the pair (f[L], f[J]) in degree dim(L).
    Zero-length H1 pairs are dropped unless keep_diagonal_h1; zero-length
    H0 pairs are always kept (there are exactly n-1 finite H0 pairs).
    Unpaired classes are dropped unless include_essential, in which case
    they are appended with death = inf.
    """
    if keep_diagonal_h1 is None:
        keep_diagonal_h1 = bool(get_config("pairs.keep_diagonal_h1", False))

    dims = filtration.dims
    values = filtration.values
    h0: list[tuple[float, float]] = []
    h1: list[tuple[float, float]] = []

    for low, j in reduction.pairs():
        d = int(dims[low])
        if d == 0:
            h0.append((float(values[low]), float(values[j])))
        elif d == 1 and maxdim >= 1:
            birth, death = float(values[low]), float(values[j])
            if death > birth or keep_diagonal_h1:
                h1.append((birth, death))

    if include_essential:
        for j in reduction.unpaired():
            d = int(dims[j])
            if d == 0:
                h0.append((float(values[j]), np.inf))
            elif d == 1 and maxdim >= 1:
                h1.append((float(values[j]), np.inf))

    logger.debug("extract_pairs: H0=%d H1=%d", len(h0), len(h1))
    return _as_intervals(h0), _as_intervals(h1)


def axis_scale(max_value: float) -> float:
    """Diagram axis maximum: floored and padded for rendering headroom."""
    floor = get_config("scale.floor", 1e-6)
    headroom = get_config("scale.headroom", 1.05)
    return max(floor, float(max_value)) * headroom


# -----------------------------
# Interval queries
# -----------------------------
def alive_mask(intervals: np.ndarray, eps: float) -> np.ndarray:
    if intervals.size == 0:
        return np.zeros((0,), dtype=bool)
    b = intervals[:, 0]
    d = intervals[:, 1]
    return (b <= eps) & ((eps < d) | np.isinf(d))


def betti_from_intervals(intervals: np.ndarray, eps: float) -> int:
    return int(np.sum(alive_mask(intervals, eps)))
