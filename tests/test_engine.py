"""Tests for the engine boundary: clamping, scenarios, result contract."""
import math

import numpy as np
import pytest

from wphviz.engine import (
    PersistenceRequest,
    compute_persistence,
    normalize_parameters,
    run_request,
)


def _ring(n, r=0.3):
    ang = 2.0 * np.pi * np.arange(n) / n
    return np.c_[0.5 + r * np.cos(ang), 0.5 + r * np.sin(ang)]


def _all_pairs_ordered(result):
    for arr in (result.h0, result.h1):
        if arr.size:
            assert np.all(arr[:, 0] <= arr[:, 1])


class TestScenarios:
    def test_near_equilateral_triangle(self):
        pts = np.array([[0.0, 0.0], [1.0, 0.0], [0.5, 0.87]])
        res = compute_persistence(pts, k=0, p=1.0)
        assert len(res.h0) == 2
        assert np.all(res.h0[:, 0] == 0.0)
        assert len(res.h1) <= 1
        for b, d in res.h1:
            assert d - b < 1e-9
        longest = max(1.0, float(np.hypot(0.5, 0.87)))
        assert res.max_val == pytest.approx(0.5 * longest * 1.05)

    def test_ring_has_one_persistent_loop(self):
        n = 12
        res = compute_persistence(_ring(n), k=0, p=1.0)
        assert len(res.h0) == n - 1
        lifetimes = res.h1[:, 1] - res.h1[:, 0]
        assert np.sum(lifetimes > 1e-3) == 1
        birth, death = res.h1[np.argmax(lifetimes)]
        # adjacent chords enter at r*sin(pi/n); the loop fills at r*sin(pi/3)
        assert birth == pytest.approx(0.3 * math.sin(math.pi / n), abs=1e-9)
        assert death == pytest.approx(0.3 * math.sin(math.pi / 3), abs=1e-9)
        _all_pairs_ordered(res)

    def test_coincident_points(self):
        pts = np.full((6, 2), 0.4)
        for k in (0, 2):
            res = compute_persistence(pts, k=k, p=2.0)
            assert len(res.h0) == 5
            assert np.all(res.h0 == 0.0)
            assert len(res.h1) == 0
            assert res.max_val == pytest.approx(1e-6 * 1.05)

    def test_k_zero_weighted_is_half_rips(self):
        pts = np.random.default_rng(4).uniform(size=(9, 2))
        for p in (1.0, 2.0):
            weighted = compute_persistence(pts, k=0, p=p, mode="weighted")
            rips = compute_persistence(pts, k=0, p=p, mode="rips")
            np.testing.assert_allclose(np.sort(weighted.h0[:, 1]), np.sort(rips.h0[:, 1]) / 2, atol=1e-12)
            assert weighted.max_val == pytest.approx(rips.max_val / 2)

    def test_weights_delay_merges(self):
        np.random.seed(42)
        pts = np.random.rand(12, 2)
        plain = compute_persistence(pts, k=0, p=1.0)
        weighted = compute_persistence(pts, k=3, p=1.0)
        assert weighted.h0[:, 1].max() >= plain.h0[:, 1].max()
        assert np.all(weighted.weights > 0)

    def test_random_pairs_ordered(self):
        rng = np.random.default_rng(8)
        for k, p in ((0, 1.0), (1, 2.0), (4, 0.7), (11, 3.0)):
            res = compute_persistence(rng.uniform(size=(12, 2)), k=k, p=p)
            assert len(res.h0) == 11
            _all_pairs_ordered(res)
            assert res.max_val > 0


class TestDegenerate:
    def test_no_points(self):
        res = compute_persistence([], k=3, p=2.0)
        assert res.h0.shape == (0, 2)
        assert res.h1.shape == (0, 2)
        assert res.max_val == pytest.approx(1e-6 * 1.05)
        assert res.n_simplices == 0

    def test_one_point(self):
        res = compute_persistence([[0.2, 0.3]], k=5, p=2.0)
        assert len(res.h0) == 0
        assert len(res.h1) == 0
        assert res.max_val == pytest.approx(1e-6 * 1.05)

    def test_two_points(self):
        res = compute_persistence([[0.0, 0.0], [0.4, 0.0]], k=0, p=1.0)
        assert res.h0.tolist() == [[0.0, 0.2]]

    @pytest.mark.parametrize("bad_p", [0, -1.0, float("nan"), float("inf"), "abc", None])
    def test_bad_p_uses_default(self, bad_p):
        pts = np.random.default_rng(2).uniform(size=(7, 2))
        ref = run_request(PersistenceRequest(points=pts, k=2, p=1.0))
        res = run_request(PersistenceRequest(points=pts, k=2, p=bad_p))
        np.testing.assert_array_equal(res.h0, ref.h0)
        np.testing.assert_array_equal(res.h1, ref.h1)

    def test_k_clamped(self):
        pts = np.random.default_rng(3).uniform(size=(6, 2))
        np.testing.assert_array_equal(
            compute_persistence(pts, k=-4).h0, compute_persistence(pts, k=0).h0,
        )
        np.testing.assert_array_equal(
            compute_persistence(pts, k=99).h0, compute_persistence(pts, k=5).h0,
        )

    def test_maxdim_clamped(self):
        pts = _ring(10)
        assert len(compute_persistence(pts, maxdim=-2).h1) == 0
        np.testing.assert_array_equal(
            compute_persistence(pts, maxdim=7).h1, compute_persistence(pts, maxdim=1).h1,
        )

    def test_maxdim_infinite_clamped(self):
        pts = _ring(8)
        assert normalize_parameters(8, 0, 1.0, float("inf")) == (0, 1.0, 1)
        res = compute_persistence(pts, maxdim=float("inf"))
        np.testing.assert_array_equal(res.h1, compute_persistence(pts, maxdim=1).h1)

    def test_maxdim_zero_keeps_h0(self):
        pts = np.random.default_rng(6).uniform(size=(10, 2))
        full = compute_persistence(pts, k=2, p=2.0, maxdim=1)
        h0_only = compute_persistence(pts, k=2, p=2.0, maxdim=0)
        np.testing.assert_array_equal(np.sort(full.h0[:, 1]), np.sort(h0_only.h0[:, 1]))
        assert h0_only.max_val == full.max_val
        assert len(h0_only.h1) == 0

    def test_normalize_parameters(self):
        assert normalize_parameters(10, 3, 2.0, 1) == (3, 2.0, 1)
        assert normalize_parameters(10, 30, -1, 4) == (9, 1.0, 1)
        assert normalize_parameters(0, 3, 2.0, 0) == (0, 2.0, 0)

    def test_bad_points(self):
        with pytest.raises(ValueError):
            compute_persistence([[0.1, 0.2, 0.3]])

    def test_unknown_mode(self):
        with pytest.raises(ValueError):
            compute_persistence([[0.1, 0.2]], mode="cech")


class TestContract:
    def test_idempotent(self):
        pts = np.random.default_rng(12).uniform(size=(15, 2))
        a = compute_persistence(pts, k=3, p=2.0)
        b = compute_persistence(pts, k=3, p=2.0)
        np.testing.assert_array_equal(a.h0, b.h0)
        np.testing.assert_array_equal(a.h1, b.h1)
        assert a.max_val == b.max_val

    def test_to_dict(self):
        res = compute_persistence(_ring(8), k=1, p=2.0, request_id=17)
        out = res.to_dict()
        assert set(out) == {"id", "H0", "H1", "maxVal"}
        assert out["id"] == 17
        assert len(out["H0"]) == 7
        assert all(len(pair) == 2 for pair in out["H0"] + out["H1"])
        assert isinstance(out["maxVal"], float)

    def test_essential_classes_opt_in(self):
        pts = np.random.default_rng(13).uniform(size=(8, 2))
        dropped = compute_persistence(pts, include_essential=False)
        kept = compute_persistence(pts, include_essential=True)
        assert len(kept.h0) == len(dropped.h0) + 1
        assert np.isinf(kept.h0[-1, 1])
        assert kept.h0[-1, 0] == 0.0
        assert not np.any(np.isinf(kept.h1))

    def test_result_carries_normalized_p(self):
        pts = np.random.default_rng(15).uniform(size=(5, 2))
        assert compute_persistence(pts, k=2, p=2.5).p == 2.5
        assert compute_persistence(pts, k=2, p=-1).p == 1.0
        assert compute_persistence(pts, k=2, p="abc").p == 1.0

    def test_result_carries_weights(self):
        pts = np.random.default_rng(14).uniform(size=(5, 2))
        res = compute_persistence(pts, k=2)
        assert res.weights.shape == (5,)
        assert res.n_simplices == 5 + 10 + 10
