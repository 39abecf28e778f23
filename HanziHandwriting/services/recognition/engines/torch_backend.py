"""Adapter for a TorchScript handwriting classifier.

Provides a thin lazy-loading wrapper so importing this module won't fail if
`torch` is not installed. The adapter exposes `available()`, `load(config)`
and `predict(tensor)`.

The model is expected to take a float tensor shaped (1, 1, 64, 64) (or
channels-last, see `RecognitionConfig.channels_last`) and return one score per
class, 3755 for the GB2312 level-1 character set.
"""
from __future__ import annotations

import logging
import os
from pathlib import Path
from urllib.parse import urlparse

import numpy as np
import requests

from ..errors import BackendAcquisitionFailure
from .base import RecognitionBackend

logger = logging.getLogger(__name__)


def available() -> bool:
    try:
        # Import only when queried; may raise ImportError if not installed.
        import torch  # type: ignore  # noqa: F401
        return True
    except ImportError as exc:
        logger.debug("torch import failed: %s", exc, exc_info=True)
        return False
    except Exception as exc:
        # some environments raise non-ImportError issues on import (broken CUDA libs)
        logger.warning("torch import raised unexpected error: %s", exc)
        return False


def fetch_model(url: str, cache_dir: str | Path, timeout: float = 30.0) -> Path:
    """Download `url` into `cache_dir` unless already cached; return the local path."""
    cache_dir = Path(cache_dir)
    name = Path(urlparse(url).path).name or 'model.pt'
    target = cache_dir / name
    if target.exists():
        logger.debug('Using cached model %s', target)
        return target
    cache_dir.mkdir(parents=True, exist_ok=True)
    tmp = target.with_suffix(target.suffix + '.tmp')
    logger.info('Downloading model from %s', url)
    try:
        with requests.get(url, stream=True, timeout=timeout) as resp:
            resp.raise_for_status()
            with tmp.open('wb') as fh:
                for chunk in resp.iter_content(chunk_size=1 << 16):
                    if chunk:
                        fh.write(chunk)
        # atomic replace so a half-written file is never picked up as cached
        os.replace(str(tmp), str(target))
    except requests.RequestException as exc:
        raise BackendAcquisitionFailure(f"model download failed: {exc}") from exc
    finally:
        if tmp.exists():
            tmp.unlink()
    return target


class TorchBackend(RecognitionBackend):
    """Wrapper around a loaded TorchScript module.

    Usage:
        backend = TorchBackend.load(config.recognition)
        scores = backend.predict(tensor)
    """
    name = 'torch'

    def __init__(self, model, device: str = 'cpu'):
        self._model = model
        self._device = device

    @classmethod
    def load(cls, config) -> "TorchBackend":
        if not available():
            raise BackendAcquisitionFailure('torch is not installed')
        import torch  # type: ignore

        path = Path(config.model_path)
        if config.model_url:
            path = fetch_model(config.model_url, config.cache_dir, timeout=config.download_timeout)
        if not path.exists():
            raise BackendAcquisitionFailure(f"model file not found: {path}")
        try:
            model = torch.jit.load(str(path), map_location=config.device)
            model.eval()
        except Exception as exc:
            logger.exception('Failed loading TorchScript model %s', path)
            raise BackendAcquisitionFailure(f"could not load model {path}: {exc}") from exc
        logger.info('Loaded torch backend from %s (device=%s)', path, config.device)
        return cls(model, device=config.device)

    def predict(self, tensor: np.ndarray) -> np.ndarray:
        import torch  # type: ignore

        # inference_mode scopes every intermediate tensor to this call
        with torch.inference_mode():
            batch = torch.from_numpy(np.ascontiguousarray(tensor)).to(self._device)
            out = self._model(batch)
            if isinstance(out, (list, tuple)):
                out = out[0]
            return out.detach().cpu().numpy().reshape(-1)
