"""Configuration schema.

Dataclass structures plus `load_config`, which merges an optional nested dict
(e.g. parsed from a JSON settings file) and environment overrides.
"""
from __future__ import annotations

import logging
import os
from dataclasses import dataclass, field, fields
from typing import Any, Dict

logger = logging.getLogger(__name__)


@dataclass
class SurfaceConfig:
    width: int = 400
    height: int = 400
    stroke_width: int = 8

@dataclass
class NormalizerConfig:
    canonical_size: int = 64
    margin: int = 4
    threshold: int = 0  # ink values above this count as drawn

@dataclass
class RecognitionConfig:
    backend: str | None = None  # "torch" | "synthetic"; None tries torch then falls back
    model_path: str = "data/models/hanzi_classifier.pt"
    model_url: str | None = None
    cache_dir: str = "data/models"
    device: str = "cpu"
    class_count: int = 3755
    top_k: int = 5
    invert: bool = True
    channels_last: bool = False
    download_timeout: float = 30.0

@dataclass
class PathsConfig:
    data_root: str = "data"
    catalog_path: str | None = None  # None uses the bundled characters.json

@dataclass
class AppConfig:
    surface: SurfaceConfig = field(default_factory=SurfaceConfig)
    normalizer: NormalizerConfig = field(default_factory=NormalizerConfig)
    recognition: RecognitionConfig = field(default_factory=RecognitionConfig)
    paths: PathsConfig = field(default_factory=PathsConfig)


# env var -> (section, key, converter)
_ENV_OVERRIDES = {
    'HANZI_BACKEND': ('recognition', 'backend', lambda v: v.strip().lower() or None),
    'HANZI_MODEL_PATH': ('recognition', 'model_path', str),
    'HANZI_MODEL_URL': ('recognition', 'model_url', str),
    'HANZI_DEVICE': ('recognition', 'device', str),
    'HANZI_TOP_K': ('recognition', 'top_k', int),
}


def _apply_section(section, values: Dict[str, Any], name: str) -> None:
    known = {f.name for f in fields(section)}
    for key, value in values.items():
        if key not in known:
            logger.warning("Ignoring unknown config key '%s.%s'", name, key)
            continue
        setattr(section, key, value)


def load_config(cfg: Dict | None = None) -> AppConfig:
    """Build an `AppConfig` from an optional nested dict, then env vars.

    Env vars take precedence over dict values, mirroring how backend selection
    prefers `HANZI_BACKEND` over the configured backend.
    """
    app = AppConfig()
    if cfg:
        for name, values in cfg.items():
            section = getattr(app, name, None)
            if section is None or not isinstance(values, dict):
                logger.warning("Ignoring unknown config section '%s'", name)
                continue
            _apply_section(section, values, name)

    for env, (name, key, convert) in _ENV_OVERRIDES.items():
        raw = os.getenv(env)
        if raw is None or raw == '':
            continue
        try:
            setattr(getattr(app, name), key, convert(raw))
        except ValueError:
            logger.warning("Ignoring invalid value for %s: %r", env, raw)
    return app
