from __future__ import annotations

import asyncio
import logging
from typing import Optional

from PyQt6.QtCore import QObject, pyqtSignal, pyqtSlot

from HanziHandwriting.services.normalize.normalizer import ImageNormalizer
from HanziHandwriting.services.recognition import RecognitionEngine

logger = logging.getLogger(__name__)


class RecognitionWorker(QObject):
    """Worker that runs the recognition engine in a background QThread.

    The worker owns one asyncio event loop for its whole life so the engine's
    cached backend and in-flight load stay bound to a single loop.

    Emits:
        - statusChanged(status): every status published by the engine
        - resultsReady(results): list[RankedResult] for each request
    """
    statusChanged = pyqtSignal(str)
    resultsReady = pyqtSignal(list)

    def __init__(self, engine: RecognitionEngine, normalizer: ImageNormalizer, top_k: int = 5):
        super().__init__()
        self._engine = engine
        self._normalizer = normalizer
        self._top_k = top_k
        self._loop: Optional[asyncio.AbstractEventLoop] = None
        engine.set_status_observer(self.statusChanged.emit)

    def _run(self, coro):
        if self._loop is None:
            self._loop = asyncio.new_event_loop()
        return self._loop.run_until_complete(coro)

    @pyqtSlot()
    def preload(self):
        self._run(self._engine.load_backend())

    @pyqtSlot(object)
    def recognize(self, raster):
        image = self._normalizer.normalize(raster)
        results = self._run(self._engine.recognize(image, self._top_k))
        logger.debug('Recognition produced %d results (blank=%s)', len(results), image.is_blank)
        self.resultsReady.emit(results)

    @pyqtSlot()
    def shutdown(self):
        if self._loop is not None:
            self._loop.close()
            self._loop = None
