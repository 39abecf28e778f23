"""Factory and acquisition interface for recognition backends.

`acquire_backend(config, catalog)` prefers the environment variable
`HANZI_BACKEND`, then falls back to `config.backend`. Supported backends are
registered in `BACKEND_REGISTRY`: `torch` (TorchScript model) and `synthetic`.
With no explicit choice the torch backend is attempted.

Acquisition failures are raised as `BackendAcquisitionFailure`; substituting
the synthetic backend is the engine's decision, not the factory's.
"""
from __future__ import annotations

import asyncio
import logging
import os

from HanziHandwriting.core.registry import BACKEND_REGISTRY
from .engines.base import RecognitionBackend
from .engines.synthetic_backend import SyntheticBackend
from .engines.torch_backend import TorchBackend
from .errors import BackendAcquisitionFailure

logger = logging.getLogger(__name__)

DEFAULT_BACKEND = 'torch'

BACKEND_REGISTRY.register('torch', lambda config, catalog: TorchBackend.load(config))
BACKEND_REGISTRY.register('synthetic', lambda config, catalog: SyntheticBackend(catalog))

_ALIASES = {
    'pytorch': 'torch',
    'torchscript': 'torch',
    'demo': 'synthetic',
    'dummy': 'synthetic',
    'stub': 'synthetic',
}


def select_backend_name(config) -> str:
    # Env var takes precedence
    be = os.getenv('HANZI_BACKEND') or getattr(config, 'backend', None)
    if not be:
        return DEFAULT_BACKEND
    name = str(be).strip().lower()
    return _ALIASES.get(name, name)


def create_backend(config, catalog) -> RecognitionBackend:
    """Synchronously build the configured backend; raises BackendAcquisitionFailure."""
    name = select_backend_name(config)
    if name not in BACKEND_REGISTRY:
        supported = ', '.join(sorted(BACKEND_REGISTRY.list()))
        raise BackendAcquisitionFailure(f"Unknown recognition backend '{name}'. Supported: {supported}")
    try:
        backend = BACKEND_REGISTRY.create(name, config, catalog)
    except BackendAcquisitionFailure:
        raise
    except Exception as exc:
        logger.exception("Failed initializing '%s' backend", name)
        raise BackendAcquisitionFailure(f"{name} backend failed to initialize: {exc}") from exc
    if backend is None:
        raise BackendAcquisitionFailure(f"{name} backend factory returned nothing")
    logger.info('Using %s recognition backend', name)
    return backend


async def acquire_backend(config, catalog) -> RecognitionBackend:
    """Async acquisition; loading runs in a worker thread so the loop stays responsive."""
    return await asyncio.to_thread(create_backend, config, catalog)
