"""
Weighted ball growth and the pairwise edge-time solver.

Each point i carries a weight w_i. At filtration time t its ball has radius

    r(t, w, p) = max(t^p - w^p, 0)^(1/p)

so a ball only starts growing once t passes the point's weight. The edge
time of a pair is the smallest t at which the two balls touch.
"""

import logging

from wphviz.config import get as get_config

logger = logging.getLogger(__name__)


def radius_at(t: float, w: float, p: float) -> float:
    """Ball radius at time t; zero for t <= 0 or p <= 0."""
    if t <= 0 or p <= 0:
        return 0.0
    w = max(0.0, w)
    if w <= 0:
        return t
    if w >= t:
        return 0.0
    # t * (1 - (w/t)^p)^(1/p) == (t^p - w^p)^(1/p), without overflowing t^p
    v = 1.0 - (w / t) ** p
    if v <= 0:
        return 0.0
    return t * v ** (1.0 / p)


def ball_sum(t: float, wi: float, wj: float, p: float) -> float:
    return radius_at(t, wi, p) + radius_at(t, wj, p)


def solve_pair_time(
    d: float,
    wi: float,
    wj: float,
    p: float,
    bracket_iterations: int | None = None,
    bisection_iterations: int | None = None,
) -> float:
    """
    Smallest t >= max(wi, wj) with radius_at(t, wi, p) + radius_at(t, wj, p) >= d.

    The ball sum is continuous and non-decreasing in t, so the root is
    bracketed from lo = max(wi, wj) by doubling hi, then refined by a fixed
    number of bisection steps. The time never drops below max(wi, wj), the
    same floor as for coincident points. If the bracket budget runs out,
    the last hi is returned instead of failing.
    """
    if bracket_iterations is None:
        bracket_iterations = get_config("solver.bracket_iterations", 60)
    if bisection_iterations is None:
        bisection_iterations = get_config("solver.bisection_iterations", 50)

    wi = max(0.0, float(wi))
    wj = max(0.0, float(wj))
    wmax = max(wi, wj)

    if not d > 0:
        return wmax

    if wmax == 0 and p == 1:
        return 0.5 * d

    # no edge enters before both balls have started growing
    lo = wmax
    if ball_sum(lo, wi, wj, p) >= d:
        return lo

    step = max(d, get_config("solver.min_step", 1e-6))
    hi = wmax + d
    it = 0
    while ball_sum(hi, wi, wj, p) < d:
        if it >= bracket_iterations:
            logger.warning(
                "solve_pair_time: bracket budget exhausted | d=%.6g wi=%.6g wj=%.6g p=%.6g hi=%.6g",
                d, wi, wj, p, hi,
            )
            return hi
        hi = max(hi * 2.0, hi + step)
        it += 1

    for _ in range(bisection_iterations):
        mid = 0.5 * (lo + hi)
        if ball_sum(mid, wi, wj, p) >= d:
            hi = mid
        else:
            lo = mid
    return hi
