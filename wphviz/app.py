#!/usr/bin/env python3
"""
Weighted ball filtration viewer (H0/H1).

- Left: the point cloud with every ball r_i(t) = max(t^p - w_i^p, 0)^(1/p)
  drawn at the slider threshold t.
- Right: persistence diagram (H0: o, H1: x) on [0, maxVal].
- k (neighbors averaged into each weight) and p (exponent) are live;
  every change goes through the single-slot controller, so the UI never
  blocks on a recomputation.

Run:
  wphviz --n 50 --k 3 --p 2
"""

import argparse
import logging
import sys

import numpy as np
import pyqtgraph as pg
from PyQt6 import QtCore, QtWidgets

from wphviz.config import get as get_config
from wphviz.datasets import DATASETS
from wphviz.pairs import betti_from_intervals
from wphviz.scheduler import PersistenceController
from wphviz.solver import radius_at

logger = logging.getLogger(__name__)


# -----------------------------
# Plotting helpers (pyqtgraph)
# -----------------------------
def finite_intervals(intervals: np.ndarray) -> np.ndarray:
    if intervals.size == 0:
        return np.zeros((0, 2), dtype=float)
    return intervals[np.isfinite(intervals[:, 1])]


def balls_are_current(result, latest_id: int, n_points: int) -> bool:
    """Weights in result belong to the points on screen (latest request, same count)."""
    return (
        result is not None
        and result.request_id == latest_id
        and len(result.weights) == n_points
    )


def plot_persistence_diagram(plot: pg.PlotWidget, h0: np.ndarray, h1: np.ndarray, max_val: float):
    plot.clear()
    plot.setTitle("Persistence diagram (H0: o, H1: x)")
    plot.showGrid(x=True, y=True, alpha=0.2)

    plot.addItem(
        pg.PlotDataItem([0, max_val], [0, max_val], pen=pg.mkPen((120, 120, 120), width=1, style=QtCore.Qt.PenStyle.DashLine))
    )

    pts0 = finite_intervals(h0)
    pts1 = finite_intervals(h1)
    if pts0.size:
        plot.addItem(pg.ScatterPlotItem(
            x=pts0[:, 0], y=pts0[:, 1], symbol="o", size=7,
            brush=pg.mkBrush(*get_config("viewer.h0_color")), pen=None,
        ))
    if pts1.size:
        plot.addItem(pg.ScatterPlotItem(
            x=pts1[:, 0], y=pts1[:, 1], symbol="x", size=9,
            brush=pg.mkBrush(*get_config("viewer.h1_color")), pen=None,
        ))

    plot.setXRange(0, max_val)
    plot.setYRange(0, max_val)
    plot.setLabel("bottom", "birth")
    plot.setLabel("left", "death")


class BallLayer:
    """Balls of the weighted filtration at one threshold, in ViewBox coords."""
    def __init__(self, plot: pg.PlotWidget):
        self.vb = plot.getViewBox()
        self.items = []

    def clear(self):
        for it in self.items:
            self.vb.removeItem(it)
        self.items.clear()

    def draw(self, points: np.ndarray, weights: np.ndarray, t: float, p: float):
        self.clear()
        brush = pg.mkBrush(*get_config("viewer.ball_color"))
        for (x, y), w in zip(points, weights):
            r = radius_at(t, float(w), p)
            if r <= 0:
                continue
            item = QtWidgets.QGraphicsEllipseItem(x - r, y - r, 2 * r, 2 * r)
            item.setBrush(brush)
            item.setPen(pg.mkPen(None))
            item.setZValue(-10)
            self.vb.addItem(item)
            self.items.append(item)


# -----------------------------
# Main GUI
# -----------------------------
class WeightedFiltrationViewer(QtWidgets.QMainWindow):
    def __init__(self, n: int = 50, k: int = 0, p: float = 1.0, seed: int = 0):
        super().__init__()
        self.setWindowTitle("Weighted Rips persistence: H0/H1")

        cw = QtWidgets.QWidget()
        self.setCentralWidget(cw)
        root = QtWidgets.QVBoxLayout(cw)

        upper = QtWidgets.QWidget()
        upper_layout = QtWidgets.QHBoxLayout(upper)
        root.addWidget(upper, stretch=1)

        self.geom = pg.PlotWidget()
        self.geom.setAspectLocked(True)
        self.geom.showGrid(x=True, y=True, alpha=0.2)
        self.geom.setXRange(0, 1)
        self.geom.setYRange(0, 1)
        self.geom.setTitle("Points and weighted balls at t")
        upper_layout.addWidget(self.geom, stretch=1)

        self.scatter = pg.ScatterPlotItem(size=8, brush=pg.mkBrush(*get_config("viewer.point_color")))
        self.geom.getViewBox().addItem(self.scatter)
        self.balls = BallLayer(self.geom)

        self.pdiag = pg.PlotWidget()
        self.pdiag.setAspectLocked(True)
        upper_layout.addWidget(self.pdiag, stretch=1)
        self.tline = pg.InfiniteLine(angle=0, movable=False, pen=pg.mkPen((120, 120, 120), width=1))

        # Controls
        controls = QtWidgets.QWidget()
        c = QtWidgets.QHBoxLayout(controls)
        root.addWidget(controls, stretch=0)

        self.dataset = QtWidgets.QComboBox()
        self.dataset.addItems(list(DATASETS))
        c.addWidget(QtWidgets.QLabel("Dataset:"))
        c.addWidget(self.dataset)

        self.n_nodes = QtWidgets.QSpinBox()
        self.n_nodes.setRange(1, int(get_config("viewer.max_n", 200)))
        self.n_nodes.setValue(n)
        c.addWidget(QtWidgets.QLabel("N:"))
        c.addWidget(self.n_nodes)

        self.k_knn = QtWidgets.QSpinBox()
        self.k_knn.setRange(0, int(get_config("viewer.max_k", 49)))
        self.k_knn.setValue(k)
        c.addWidget(QtWidgets.QLabel("k:"))
        c.addWidget(self.k_knn)

        self.p_exp = QtWidgets.QDoubleSpinBox()
        self.p_exp.setRange(0.1, 20.0)
        self.p_exp.setSingleStep(0.1)
        self.p_exp.setValue(p)
        c.addWidget(QtWidgets.QLabel("p:"))
        c.addWidget(self.p_exp)

        self.seed = QtWidgets.QSpinBox()
        self.seed.setRange(0, 9999)
        self.seed.setValue(seed)
        c.addWidget(QtWidgets.QLabel("Seed:"))
        c.addWidget(self.seed)

        self.reset_btn = QtWidgets.QPushButton("Reset points")
        c.addWidget(self.reset_btn)

        self.steps = int(get_config("viewer.slider_steps", 1000))
        self.t_slider = QtWidgets.QSlider(QtCore.Qt.Orientation.Horizontal)
        self.t_slider.setMinimum(0)
        self.t_slider.setMaximum(self.steps)
        self.t_slider.setValue(self.steps // 5)
        c.addWidget(QtWidgets.QLabel("t:"))
        c.addWidget(self.t_slider, stretch=1)

        self.t_label = QtWidgets.QLabel("t = 0.000")
        c.addWidget(self.t_label)
        self.betti_label = QtWidgets.QLabel("β0=0, β1=0")
        c.addWidget(self.betti_label)

        self.points = np.zeros((0, 2), dtype=float)
        self.result = None

        self.controller = PersistenceController(self)
        self.controller.resultReady.connect(self.on_result)

        self.reset_btn.clicked.connect(self.reset_points)
        self.dataset.currentIndexChanged.connect(lambda _=None: self.reset_points())
        self.seed.valueChanged.connect(lambda _=None: self.reset_points())
        self.n_nodes.valueChanged.connect(lambda _=None: self.reset_points())
        self.k_knn.valueChanged.connect(lambda _=None: self.request_compute())
        self.p_exp.valueChanged.connect(lambda _=None: self.request_compute())
        self.t_slider.valueChanged.connect(self.on_t_changed)

        self.reset_points()

    def slider_to_t(self, v: int) -> float:
        max_val = self.result.max_val if self.result is not None else 1.0
        return float(v) / float(self.steps) * float(max_val)

    def reset_points(self):
        make = DATASETS[self.dataset.currentText()]
        self.points = make(n=int(self.n_nodes.value()), seed=int(self.seed.value()))
        self.scatter.setData(self.points[:, 0], self.points[:, 1])
        self.request_compute()

    def request_compute(self):
        rid = self.controller.submit(
            self.points,
            k=int(self.k_knn.value()),
            p=float(self.p_exp.value()),
            maxdim=1,
        )
        logger.debug("requested id=%d", rid)

    def on_result(self, result):
        self.result = result
        plot_persistence_diagram(self.pdiag, result.h0, result.h1, result.max_val)
        self.pdiag.addItem(self.tline)
        self.on_t_changed(self.t_slider.value())

    def on_t_changed(self, v: int):
        t = self.slider_to_t(v)
        self.t_label.setText(f"t = {t:.3f}")
        if self.result is None:
            return
        self.tline.setValue(t)
        b0 = betti_from_intervals(self.result.h0, t)
        b1 = betti_from_intervals(self.result.h1, t)
        self.betti_label.setText(f"β0={b0}, β1={b1}")
        if balls_are_current(self.result, self.controller.scheduler.latest_id, len(self.points)):
            self.balls.draw(self.points, self.result.weights, t, self.result.p)
        else:
            # inputs changed since this result; wait for the next one
            self.balls.clear()

    def closeEvent(self, event):
        self.controller.shutdown()
        super().closeEvent(event)


def parse_args(argv=None):
    parser = argparse.ArgumentParser(description="Weighted Rips persistence viewer (H0/H1)")
    parser.add_argument("--n", type=int, default=get_config("datasets.circle.n", 50))
    parser.add_argument("--k", type=int, default=get_config("defaults.k", 0))
    parser.add_argument("--p", type=float, default=get_config("defaults.p", 1.0))
    parser.add_argument("--seed", type=int, default=0)
    parser.add_argument("--log-level", default="INFO")
    return parser.parse_args(argv)


def main(argv=None):
    args = parse_args(argv)
    logging.basicConfig(
        level=getattr(logging, str(args.log_level).upper(), logging.INFO),
        format="%(asctime)s | %(name)s | %(levelname)s | %(message)s",
    )

    app = QtWidgets.QApplication(sys.argv[:1])
    pg.setConfigOptions(
        antialias=True,
        background=get_config("viewer.background"),
        foreground=get_config("viewer.foreground"),
    )
    w = WeightedFiltrationViewer(n=args.n, k=args.k, p=args.p, seed=args.seed)
    w.resize(*get_config("viewer.window_size", (1300, 720)))
    w.show()
    sys.exit(app.exec())


if __name__ == "__main__":
    main()
