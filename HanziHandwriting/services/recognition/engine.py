"""Recognition engine: backend lifecycle, inference and top-k ranking.

Lifecycle is an explicit state machine::

    UNLOADED -> LOADING -> READY       (real backend acquired)
                        -> DEGRADED    (acquisition failed, synthetic backend)

Transitions only move forward and the backend handle is written once. All
public coroutines are meant to run on a single event loop; concurrent
`load_backend()` calls share one in-flight load, and `recognize()` calls are
serialized.

The engine never lets a backend problem reach the caller: acquisition
failures degrade to the synthetic backend, inference failures return the
fixed demonstration ranking. Problems are reported on the status channel.
"""
from __future__ import annotations

import asyncio
import enum
import logging
from dataclasses import dataclass
from typing import Awaitable, Callable, List, Optional

import numpy as np

from HanziHandwriting.core.config import RecognitionConfig
from HanziHandwriting.core.models import RankedResult
from . import status as st
from .backend_factory import acquire_backend
from .engines.base import RecognitionBackend
from .engines.synthetic_backend import SyntheticBackend, demonstration_scores
from .errors import BackendAcquisitionFailure, InferenceFailure
from .tensor import image_to_tensor

logger = logging.getLogger(__name__)


class EngineState(str, enum.Enum):
    UNLOADED = 'unloaded'
    LOADING = 'loading'
    READY = 'ready'
    DEGRADED = 'degraded'


@dataclass(frozen=True)
class BackendHandle:
    backend: RecognitionBackend
    state: EngineState
    error: Optional[str] = None  # why the engine degraded, if it did

    @property
    def degraded(self) -> bool:
        return self.state is EngineState.DEGRADED


Acquirer = Callable[[], Awaitable[RecognitionBackend]]


def rank_scores(scores: np.ndarray, k: int, catalog) -> List[RankedResult]:
    """Top-k of `scores`: descending score, ties broken by ascending index."""
    k = max(0, min(int(k), len(scores)))
    if k == 0:
        return []
    # stable sort on negated scores keeps equal scores in index order
    order = np.argsort(-scores, kind='stable')[:k]
    results = []
    for idx in order:
        rec = catalog.resolve(int(idx))
        results.append(RankedResult(character=rec.character, pinyin=rec.pinyin, confidence=float(scores[idx])))
    return results


class RecognitionEngine:
    """Owns the inference backend and turns normalized images into rankings.

    Usage:
        engine = RecognitionEngine(catalog)
        engine.set_status_observer(print)
        results = await engine.recognize(normalizer.normalize(raster), k=5)
    """

    def __init__(self, catalog, config: RecognitionConfig | None = None, acquire: Acquirer | None = None):
        self._catalog = catalog
        self._config = config or RecognitionConfig()
        self._acquire = acquire or (lambda: acquire_backend(self._config, self._catalog))
        self._state = EngineState.UNLOADED
        self._handle: Optional[BackendHandle] = None
        self._load_task: Optional[asyncio.Future] = None
        self._lock = asyncio.Lock()
        self.status = st.StatusChannel()

    # -------- State --------
    @property
    def state(self) -> EngineState:
        return self._state

    @property
    def handle(self) -> Optional[BackendHandle]:
        return self._handle

    @property
    def catalog(self):
        return self._catalog

    # -------- Status --------
    def set_status_observer(self, callback: Optional[st.StatusObserver]) -> None:
        """Register the single primary observer; a later call replaces it."""
        self.status.set_observer(callback)

    def subscribe(self, callback: st.StatusObserver) -> Callable[[], None]:
        return self.status.subscribe(callback)

    # -------- Backend lifecycle --------
    async def load_backend(self) -> BackendHandle:
        if self._handle is not None:
            return self._handle
        if self._load_task is not None and self._is_stale(self._load_task):
            logger.warning('Previous backend load was abandoned; starting a new one')
            self._load_task = None
            self._state = EngineState.UNLOADED
        if self._load_task is None:
            self._state = EngineState.LOADING
            self._load_task = asyncio.ensure_future(self._load())
        # shield: a cancelled waiter must not cancel the shared load
        return await asyncio.shield(self._load_task)

    @staticmethod
    def _is_stale(task: asyncio.Future) -> bool:
        # cancelled (e.g. its loop shut down mid-load) or bound to another loop
        return task.cancelled() or task.get_loop() is not asyncio.get_running_loop()

    async def _load(self) -> BackendHandle:
        self.status.publish(st.LOADING)
        error = None
        try:
            backend = await self._acquire()
            if backend is None:
                raise BackendAcquisitionFailure('backend acquisition returned nothing')
        except Exception as exc:
            error = str(exc) or type(exc).__name__
            logger.warning('Recognition backend unavailable, using synthetic backend: %s', error)
            self.status.publish(st.error_status(f"backend load failed: {error}"))
            backend = SyntheticBackend(self._catalog)
            self.status.publish(st.FALLBACK)

        state = EngineState.DEGRADED if backend.synthetic else EngineState.READY
        self._handle = BackendHandle(backend=backend, state=state, error=error)
        self._state = state
        self.status.publish(st.READY)
        return self._handle

    # -------- Inference --------
    def _scores_from_output(self, output) -> np.ndarray:
        try:
            scores = np.asarray(output, dtype=np.float64).reshape(-1)
        except (TypeError, ValueError) as exc:
            raise InferenceFailure(f"backend output is not numeric: {exc}") from exc
        if scores.size != self._catalog.size:
            raise InferenceFailure(f"backend returned {scores.size} scores, expected {self._catalog.size}")
        if not np.all(np.isfinite(scores)):
            raise InferenceFailure('backend returned non-finite scores')
        return scores

    async def recognize(self, image, k: int | None = None) -> List[RankedResult]:
        """Rank the most likely characters for a normalized image.

        Always returns `min(k, catalog.size)` results sorted by confidence.
        """
        k = self._config.top_k if k is None else max(0, int(k))
        async with self._lock:
            handle = await self.load_backend()
            self.status.publish(st.ANALYZING)
            try:
                tensor = image_to_tensor(image, invert=self._config.invert, channels_last=self._config.channels_last)
                output = await asyncio.to_thread(handle.backend.predict, tensor)
                scores = self._scores_from_output(output)
            except Exception as exc:
                logger.exception('Recognition failed on %r; returning demonstration results', handle.backend)
                self.status.publish(st.error_status(f"recognition failed: {exc}"))
                scores = demonstration_scores(self._catalog)
            results = rank_scores(scores, k, self._catalog)
            self.status.publish(st.READY)
            return results
