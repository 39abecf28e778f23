"""Raster drawing surface fed by pointer events.

The surface keeps a transparent RGBA raster with opaque black ink, the same
shape a browser canvas produces, plus the history of finished strokes.
Pointer handlers (Qt widget, tests, scripts) call `begin_stroke`,
`extend_stroke` and `end_stroke`; none of them ever raise.
"""
from __future__ import annotations

import logging
import math
from typing import List, Optional, Tuple

from PIL import Image, ImageDraw

from HanziHandwriting.core.models import Point, Stroke

logger = logging.getLogger(__name__)

BACKGROUND = (0, 0, 0, 0)
INK = (0, 0, 0, 255)


class DrawingSurface:
    def __init__(self, width: int = 400, height: int = 400, stroke_width: int = 8):
        self.stroke_width = max(1, int(stroke_width))
        self._strokes: List[Stroke] = []
        self._active: Optional[List[Point]] = None
        self._last: Optional[Point] = None
        self._allocate(width, height)

    @classmethod
    def from_config(cls, cfg) -> "DrawingSurface":
        return cls(width=cfg.width, height=cfg.height, stroke_width=cfg.stroke_width)

    def _allocate(self, width: int, height: int) -> None:
        self.width = max(1, int(width))
        self.height = max(1, int(height))
        self._image = Image.new('RGBA', (self.width, self.height), BACKGROUND)
        self._draw = ImageDraw.Draw(self._image)

    # -------- Pointer API --------
    def begin_stroke(self, point) -> None:
        p = self._clamp(point)
        if p is None:
            logger.debug('Ignoring stroke start at malformed point %r', point)
            return
        if self._active is not None:
            self.end_stroke()
        self._active = [p]
        self._last = p

    def extend_stroke(self, point) -> None:
        if self._active is None:
            return
        p = self._clamp(point)
        if p is None:
            return
        self._segment(self._last, p)
        self._active.append(p)
        self._last = p

    def end_stroke(self) -> None:
        if self._active is not None:
            self._strokes.append(Stroke(tuple(self._active)))
        self._active = None

    def clear(self) -> None:
        self._draw.rectangle((0, 0, self.width, self.height), fill=BACKGROUND)
        self._strokes = []
        self._active = None
        self._last = None

    def resize(self, width: int, height: int) -> None:
        """Reallocate the raster; like a canvas resize this discards the drawing."""
        self._allocate(width, height)
        self._strokes = []
        self._active = None
        self._last = None
        self._active = None
        self._last = None

    # -------- Queries --------
    @property
    def is_drawing(self) -> bool:
        return self._active is not None

    @property
    def last_point(self) -> Optional[Point]:
        return self._last

    @property
    def strokes(self) -> Tuple[Stroke, ...]:
        return tuple(self._strokes)

    def has_content(self) -> bool:
        return self._image.getchannel('A').getbbox() is not None

    def snapshot(self) -> Image.Image:
        """Copy of the current raster; callers cannot mutate the surface through it."""
        return self._image.copy()

    # -------- Helpers --------
    def _clamp(self, point) -> Optional[Point]:
        try:
            x, y = float(point[0]), float(point[1])
        except (TypeError, ValueError, IndexError):
            return None
        if not (math.isfinite(x) and math.isfinite(y)):
            return None
        x = min(max(x, 0.0), float(self.width - 1))
        y = min(max(y, 0.0), float(self.height - 1))
        return (x, y)

    def _segment(self, start: Point, end: Point) -> None:
        # line + end discs give round caps and joins between consecutive segments
        self._draw.line([start, end], fill=INK, width=self.stroke_width, joint='curve')
        r = self.stroke_width / 2.0
        for x, y in (start, end):
            self._draw.ellipse((x - r, y - r, x + r, y + r), fill=INK)
