"""
Request/response boundary of the persistence engine.

One request is a snapshot of the points and the parameters (k, p, maxdim);
the engine recomputes everything from scratch and returns the H0/H1
intervals plus an axis scale. Degenerate parameters are clamped, not
raised on.

Usage:
    from wphviz.engine import compute_persistence
    result = compute_persistence(points, k=3, p=2.0)
    result.h0, result.h1, result.max_val
"""

import logging
import math
from dataclasses import dataclass, field

import numpy as np

from wphviz.config import get as get_config
from wphviz.filtration import MODES, build_filtration
from wphviz.pairs import axis_scale, extract_pairs
from wphviz.reduction import boundary_columns, reduce_boundary
from wphviz.weights import as_points, clamp_k, compute_knn_weights

logger = logging.getLogger(__name__)


@dataclass
class PersistenceRequest:
    points: np.ndarray
    k: int = 0
    p: float = 1.0
    maxdim: int = 1
    mode: str = "weighted"
    include_essential: bool = False
    request_id: int = 0


@dataclass
class PersistenceResult:
    h0: np.ndarray
    h1: np.ndarray
    max_val: float
    request_id: int = 0
    p: float = 1.0
    weights: np.ndarray = field(default_factory=lambda: np.zeros(0, dtype=float))
    n_simplices: int = 0

    def to_dict(self) -> dict:
        """Wire shape: {"id", "H0", "H1", "maxVal"} with plain lists."""
        return {
            "id": self.request_id,
            "H0": [[float(b), float(d)] for b, d in self.h0],
            "H1": [[float(b), float(d)] for b, d in self.h1],
            "maxVal": float(self.max_val),
        }


def normalize_parameters(n: int, k, p, maxdim) -> tuple[int, float, int]:
    """
    Clamp request parameters:
      k      -> integer in [0, n-1]
      p      -> positive finite float, else the configured default
      maxdim -> 0 or 1
    """
    kk = clamp_k(k, n) if n > 0 else 0
    if n > 0 and kk != k:
        logger.warning("k=%r clamped to %d (n=%d)", k, kk, n)

    default_p = float(get_config("defaults.p", 1.0))
    try:
        pp = float(p)
    except (TypeError, ValueError):
        pp = math.nan
    if not (math.isfinite(pp) and pp > 0):
        logger.warning("p=%r is not a positive finite number; using %g", p, default_p)
        pp = default_p

    try:
        md = int(maxdim)
    except (TypeError, ValueError, OverflowError):
        md = int(get_config("defaults.maxdim", 1))
    md_clamped = max(0, min(1, md))
    if md_clamped != md:
        logger.warning("maxdim=%r clamped to %d", maxdim, md_clamped)

    return kk, pp, md_clamped


def run_request(request: PersistenceRequest) -> PersistenceResult:
    """Weights -> edge times -> ordered complex -> reduction -> pairs."""
    if request.mode not in MODES:
        raise ValueError(f"unknown filtration mode: {request.mode!r} (expected one of {MODES})")

    pts = as_points(request.points)
    n = int(pts.shape[0])
    k, p, maxdim = normalize_parameters(n, request.k, request.p, request.maxdim)

    weights = compute_knn_weights(pts, k) if request.mode == "weighted" else np.zeros(n, dtype=float)
    filtration = build_filtration(pts, weights=weights, p=p, maxdim=maxdim, mode=request.mode)
    reduction = reduce_boundary(boundary_columns(filtration))
    h0, h1 = extract_pairs(
        filtration, reduction, maxdim=maxdim, include_essential=request.include_essential,
    )
    max_val = axis_scale(filtration.max_value)

    logger.info(
        "persistence: id=%d n=%d k=%d p=%g maxdim=%d mode=%s | H0=%d H1=%d maxVal=%.6f",
        request.request_id, n, k, p, maxdim, request.mode, len(h0), len(h1), max_val,
    )
    return PersistenceResult(
        h0=h0,
        h1=h1,
        max_val=max_val,
        request_id=request.request_id,
        p=p,
        weights=weights,
        n_simplices=len(filtration),
    )


def compute_persistence(
    points,
    k=None,
    p=None,
    maxdim=None,
    mode: str | None = None,
    include_essential: bool | None = None,
    request_id: int = 0,
) -> PersistenceResult:
    """Synchronous entry point; unset parameters come from CONFIG["defaults"]."""
    request = PersistenceRequest(
        points=points,
        k=get_config("defaults.k", 0) if k is None else k,
        p=get_config("defaults.p", 1.0) if p is None else p,
        maxdim=get_config("defaults.maxdim", 1) if maxdim is None else maxdim,
        mode=get_config("defaults.mode", "weighted") if mode is None else mode,
        include_essential=(
            get_config("defaults.include_essential", False)
            if include_essential is None else include_essential
        ),
        request_id=request_id,
    )
    return run_request(request)
