"""
Configuration for the weighted filtration engine and its viewer.

Every tunable constant lives in CONFIG. Requests may override the engine
defaults; nothing here is mutated at runtime.

Usage:
    from wphviz.config import CONFIG, get
    headroom = get("scale.headroom")
"""

CONFIG = {

    # -----------------------------
    # Request defaults
    # -----------------------------
    "defaults": {
        "k": 0,
        "p": 1.0,
        "maxdim": 1,
        "mode": "weighted",
        "include_essential": False,
    },

    # -----------------------------
    # Pairwise time solver
    # -----------------------------
    "solver": {
        "bracket_iterations": 60,
        "bisection_iterations": 50,
        "min_step": 1e-6,
    },

    # -----------------------------
    # Pair extraction
    # -----------------------------
    "pairs": {
        # H1 pairs with birth == death appear whenever a triangle fills a cycle
        # at the value of the edge that closed it; True keeps them
        "keep_diagonal_h1": False,
    },

    # -----------------------------
    # Diagram axis scale
    # -----------------------------
    "scale": {
        "floor": 1e-6,
        "headroom": 1.05,
    },

    # -----------------------------
    # Point-cloud initializers (normalized [0,1]^2)
    # -----------------------------
    "datasets": {
        "circle": {
            "n": 50,
            "margin": 0.04,
            "radius": 0.34,
            "sigma": 0.03,
        },
        "two_clusters": {
            "n": 50,
            "sep": 0.5,
            "noise": 0.06,
            "margin": 0.04,
        },
    },

    # -----------------------------
    # Viewer
    # -----------------------------
    "viewer": {
        "window_size": (1300, 720),
        "background": (255, 255, 255),
        "foreground": (30, 30, 30),
        "h0_color": (37, 99, 235),
        "h1_color": (249, 115, 22),
        "ball_color": (253, 186, 116, 70),
        "point_color": (17, 24, 39),
        "slider_steps": 1000,
        "max_k": 49,
        "max_n": 200,
    },
}


def get(path: str, default=None):
    """
    Get a config value by dot-separated path.

    Usage:
        get("solver.bisection_iterations")  → 50
        get("datasets.circle.sigma")        → 0.03
    """
    keys = path.split(".")
    val = CONFIG
    for key in keys:
        if isinstance(val, dict) and key in val:
            val = val[key]
        else:
            return default
    return val
