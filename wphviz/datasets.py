"""Toy point clouds in the unit square, used to seed the viewer."""

import numpy as np

from wphviz.config import get as get_config


def _clamp(pts: np.ndarray, margin: float) -> np.ndarray:
    return np.clip(pts, margin, 1.0 - margin)


def make_circle_points(n=None, margin=None, radius=None, sigma=None, seed=None) -> np.ndarray:
    """
    n points at evenly spaced angles around (0.5, 0.5), radius jittered by
    N(0, sigma), clamped to [margin, 1-margin], then shuffled.
    """
    cfg = get_config("datasets.circle", {})
    n = int(cfg.get("n", 50) if n is None else n)
    margin = float(cfg.get("margin", 0.04) if margin is None else margin)
    radius = float(cfg.get("radius", 0.34) if radius is None else radius)
    sigma = float(cfg.get("sigma", 0.03) if sigma is None else sigma)

    rng = np.random.default_rng(seed)
    ang = 2.0 * np.pi * np.arange(n) / max(n, 1)
    rad = radius + rng.normal(0.0, sigma, size=n)
    pts = np.c_[0.5 + rad * np.cos(ang), 0.5 + rad * np.sin(ang)]
    pts = _clamp(pts, margin)
    return pts[rng.permutation(n)]


def make_two_clusters(n=None, sep=None, noise=None, margin=None, seed=None) -> np.ndarray:
    cfg = get_config("datasets.two_clusters", {})
    n = int(cfg.get("n", 50) if n is None else n)
    sep = float(cfg.get("sep", 0.5) if sep is None else sep)
    noise = float(cfg.get("noise", 0.06) if noise is None else noise)
    margin = float(cfg.get("margin", 0.04) if margin is None else margin)

    rng = np.random.default_rng(seed)
    n1 = n // 2
    n2 = n - n1
    c1 = np.array([0.5 - sep / 2.0, 0.5])
    c2 = np.array([0.5 + sep / 2.0, 0.5])
    x1 = c1 + rng.normal(0.0, noise, size=(n1, 2))
    x2 = c2 + rng.normal(0.0, noise, size=(n2, 2))
    return _clamp(np.vstack([x1, x2]), margin)


DATASETS = {
    "Circle (1 loop)": make_circle_points,
    "Two clusters (H0 merge)": make_two_clusters,
}
