"""
wphviz: persistent homology (H0/H1) of small planar point clouds under a
weighted Vietoris-Rips filtration.

Each point gets a weight from its k nearest neighbors; its ball only
starts growing once t passes that weight, with radius
max(t^p - w^p, 0)^(1/p). Edges enter when two balls touch, triangles when
their last edge does, and a GF(2) column reduction yields the pairs.

    from wphviz import compute_persistence
    result = compute_persistence(points, k=3, p=2.0)
"""

__version__ = "0.1.0"

from wphviz.engine import (
    PersistenceRequest,
    PersistenceResult,
    compute_persistence,
    run_request,
)

__all__ = [
    "PersistenceRequest",
    "PersistenceResult",
    "compute_persistence",
    "run_request",
]
