import sys
from pathlib import Path

# Add the project root (one level up from 'test') to sys.path
project_root = Path(__file__).resolve().parents[1]
if str(project_root) not in sys.path:
    sys.path.insert(0, str(project_root))

import asyncio

import numpy as np
import pytest

from HanziHandwriting.core.config import AppConfig
from HanziHandwriting.services.pipeline import HandwritingPipeline
from HanziHandwriting.services.recognition import status as st
from HanziHandwriting.services.recognition.engine import EngineState


@pytest.fixture
def synthetic_config(monkeypatch):
    monkeypatch.delenv('HANZI_BACKEND', raising=False)
    cfg = AppConfig()
    cfg.recognition.backend = 'synthetic'
    return cfg


def draw_horizontal(surface):
    surface.begin_stroke((40, 200))
    for x in range(60, 361, 20):
        surface.extend_stroke((x, 200))
    surface.end_stroke()


def test_draw_clear_then_recognize_uses_blank_image(synthetic_config):
    pipeline = HandwritingPipeline.from_config(synthetic_config)
    draw_horizontal(pipeline.surface)
    assert pipeline.surface.has_content()
    pipeline.surface.clear()

    first = asyncio.run(pipeline.recognize(5))
    assert pipeline.last_image.is_blank
    assert np.all(pipeline.last_image.to_array() == 255)
    second = asyncio.run(pipeline.recognize(5))
    assert len(first) == 5
    assert first == second
    assert [r.character for r in first] == ['人', '大', '木', '火', '水']


def test_explicit_synthetic_backend_is_degraded_without_error(synthetic_config):
    pipeline = HandwritingPipeline.from_config(synthetic_config)
    handle = asyncio.run(pipeline.preload())
    assert pipeline.engine.state is EngineState.DEGRADED
    assert handle.error is None


def test_missing_model_falls_back_and_reports(monkeypatch, tmp_path):
    monkeypatch.delenv('HANZI_BACKEND', raising=False)
    cfg = AppConfig()
    cfg.recognition.model_path = str(tmp_path / 'missing.pt')
    pipeline = HandwritingPipeline.from_config(cfg)
    seen = []
    pipeline.engine.set_status_observer(seen.append)
    draw_horizontal(pipeline.surface)
    results = asyncio.run(pipeline.recognize(6))
    assert len(results) == 6
    assert pipeline.engine.state is EngineState.DEGRADED
    assert st.FALLBACK in seen


def test_drawn_stroke_reaches_backend_as_bright_pixels(synthetic_config):
    pipeline = HandwritingPipeline.from_config(synthetic_config)
    captured = []
    backend = asyncio.run(pipeline.preload()).backend
    original = backend.predict

    def spy(tensor):
        captured.append(tensor)
        return original(tensor)

    backend.predict = spy
    draw_horizontal(pipeline.surface)
    asyncio.run(pipeline.recognize(1))
    tensor = captured[0]
    assert tensor.shape == (1, 1, 64, 64)
    assert tensor.max() > 0.9
    # a horizontal stroke fills the middle rows across the canonical width
    rows = np.nonzero(tensor[0, 0].max(axis=1) > 0.3)[0]
    cols = np.nonzero(tensor[0, 0].max(axis=0) > 0.3)[0]
    assert cols.min() <= 8 and cols.max() >= 55
    assert rows.min() > 20 and rows.max() < 44
