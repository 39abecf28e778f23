"""Core data model schema.

Dataclass definitions shared by the drawing surface, the normalizer, the
recognition engine and the character catalog. No operational logic beyond
small derived properties.
"""
from __future__ import annotations
from dataclasses import dataclass, field
from typing import Tuple

Point = Tuple[float, float]

# ---- Drawing Structures ----
@dataclass(frozen=True)
class Stroke:
    points: Tuple[Point, ...]  # surface coordinates, pointer-down to pointer-up

    def __len__(self) -> int:
        return len(self.points)

    @property
    def bbox(self) -> Tuple[float, float, float, float]:
        """(minx, miny, maxx, maxy) of the stroke points."""
        if not self.points:
            return (0.0, 0.0, 0.0, 0.0)
        xs = [p[0] for p in self.points]
        ys = [p[1] for p in self.points]
        return (min(xs), min(ys), max(xs), max(ys))


@dataclass(frozen=True)
class BoundingBox:
    # inclusive pixel bounds
    min_x: int
    min_y: int
    max_x: int
    max_y: int

    @property
    def width(self) -> int:
        return self.max_x - self.min_x + 1

    @property
    def height(self) -> int:
        return self.max_y - self.min_y + 1

    @property
    def crop_box(self) -> Tuple[int, int, int, int]:
        """PIL-style (left, upper, right, lower) box, right/lower exclusive."""
        return (self.min_x, self.min_y, self.max_x + 1, self.max_y + 1)


# ---- Recognition Structures ----
@dataclass(frozen=True)
class RankedResult:
    character: str
    pinyin: str
    confidence: float  # raw backend score, not necessarily normalized

    @property
    def percent(self) -> int:
        return int(round(self.confidence * 100))


@dataclass(frozen=True)
class CharacterRecord:
    character: str
    pinyin: str
    meaning: str
    stroke_count: int = 0
    examples: Tuple[str, ...] = field(default_factory=tuple)
    radical: str = ""
    etymology: str = "Etymology not available."
    pronunciation_tips: str = "Pronunciation tips not available."
    mnemonics: str = "Mnemonics not available."
