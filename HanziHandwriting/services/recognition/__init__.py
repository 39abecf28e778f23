"""Recognition package: engine factory and helpers.

This package provides a `create_engine(config=None, catalog=None)` factory and
the `RecognitionEngine` it builds. Heavy dependencies (torch) are imported
lazily so the package stays importable without them; the engine then runs on
the synthetic backend.
"""
from __future__ import annotations

from HanziHandwriting.core.config import AppConfig
from HanziHandwriting.services.catalog.catalog import load_catalog
from .engine import BackendHandle, EngineState, RecognitionEngine


def create_engine(config: AppConfig | None = None, catalog=None) -> RecognitionEngine:
    config = config or AppConfig()
    if catalog is None:
        catalog = load_catalog(config.paths.catalog_path, class_count=config.recognition.class_count)
    return RecognitionEngine(catalog, config.recognition)


__all__ = ["create_engine", "RecognitionEngine", "EngineState", "BackendHandle"]
