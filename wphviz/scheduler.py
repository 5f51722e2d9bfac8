"""
Single-slot scheduling of persistence requests.

At most one request is in flight. New submissions overwrite the single
pending slot, so a burst of parameter changes collapses to one trailing
recomputation. Results whose id is not the latest submitted id are stale
and discarded.

SingleSlotScheduler is plain Python and takes any dispatch callable.
PersistenceController wires it to an EngineWorker living in a QThread.
"""

import logging
from typing import Callable, Optional

import numpy as np
from PyQt6 import QtCore

from wphviz.config import get as get_config
from wphviz.engine import PersistenceRequest, PersistenceResult, run_request

logger = logging.getLogger(__name__)


class SingleSlotScheduler:
    def __init__(self, dispatch: Callable[[PersistenceRequest], None]):
        self._dispatch = dispatch
        self.latest_id = 0
        self.in_flight = False
        self.pending: Optional[PersistenceRequest] = None
        self.latest_result: Optional[PersistenceResult] = None

    def submit(self, points, k=None, p=None, maxdim=None, mode=None, include_essential=None) -> int:
        """Queue a snapshot of points + parameters; returns its request id."""
        self.latest_id += 1
        self.pending = PersistenceRequest(
            points=np.array(points, dtype=float, copy=True),
            k=get_config("defaults.k", 0) if k is None else k,
            p=get_config("defaults.p", 1.0) if p is None else p,
            maxdim=get_config("defaults.maxdim", 1) if maxdim is None else maxdim,
            mode=get_config("defaults.mode", "weighted") if mode is None else mode,
            include_essential=(
                get_config("defaults.include_essential", False)
                if include_essential is None else include_essential
            ),
            request_id=self.latest_id,
        )
        self.pump()
        return self.latest_id

    def pump(self) -> bool:
        """Dispatch the pending request if nothing is in flight."""
        if self.pending is None or self.in_flight:
            return False
        request, self.pending = self.pending, None
        self.in_flight = True
        logger.debug("dispatch request id=%d", request.request_id)
        self._dispatch(request)
        return True

    def deliver(self, result: PersistenceResult) -> bool:
        """Accept or discard a finished result, then start the next request."""
        if not self.in_flight:
            raise RuntimeError(f"result id={result.request_id} delivered with nothing in flight")
        self.in_flight = False

        accepted = result.request_id == self.latest_id
        if accepted:
            self.latest_result = result
            logger.debug("accepted result id=%d", result.request_id)
        else:
            logger.warning("discarding stale result id=%d (latest=%d)", result.request_id, self.latest_id)

        self.pump()
        return accepted

    def fail(self, request_id: int) -> None:
        """Release the in-flight slot after a failed computation."""
        if not self.in_flight:
            raise RuntimeError(f"failure for id={request_id} reported with nothing in flight")
        self.in_flight = False
        self.pump()


# -----------------------------
# Qt transport
# -----------------------------
class EngineWorker(QtCore.QObject):
    finished = QtCore.pyqtSignal(object)
    failed = QtCore.pyqtSignal(int, str)

    @QtCore.pyqtSlot(object)
    def compute(self, request):
        try:
            result = run_request(request)
        except ValueError as exc:
            logger.error("request id=%d failed: %s", request.request_id, exc)
            self.failed.emit(request.request_id, str(exc))
            return
        self.finished.emit(result)


class PersistenceController(QtCore.QObject):
    """
    Owns the scheduler and the worker thread.

    threaded=False runs the worker in the caller's thread (signals are then
    delivered synchronously), which is what the tests use.
    """
    requested = QtCore.pyqtSignal(object)
    resultReady = QtCore.pyqtSignal(object)
    requestFailed = QtCore.pyqtSignal(int, str)

    def __init__(self, parent=None, threaded: bool = True):
        super().__init__(parent)
        self.scheduler = SingleSlotScheduler(self.requested.emit)
        self.worker = EngineWorker()
        self._thread = None
        if threaded:
            self._thread = QtCore.QThread(self)
            self.worker.moveToThread(self._thread)
            self._thread.finished.connect(self.worker.deleteLater)
            self._thread.start()

        self.requested.connect(self.worker.compute)
        self.worker.finished.connect(self._on_finished)
        self.worker.failed.connect(self._on_failed)

    @property
    def latest_result(self) -> Optional[PersistenceResult]:
        return self.scheduler.latest_result

    def submit(self, points, **params) -> int:
        return self.scheduler.submit(points, **params)

    @QtCore.pyqtSlot(object)
    def _on_finished(self, result):
        if self.scheduler.deliver(result):
            self.resultReady.emit(result)

    @QtCore.pyqtSlot(int, str)
    def _on_failed(self, request_id, message):
        self.scheduler.fail(request_id)
        self.requestFailed.emit(request_id, message)

    def shutdown(self):
        if self._thread is not None:
            self._thread.quit()
            self._thread.wait()
            self._thread = None
