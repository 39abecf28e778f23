"""Normalize a drawn raster into the fixed canonical square the classifier expects.

The drawing is cropped to its ink bounding box, scaled uniformly so the longer
side fills the square minus a margin on each side, and centered. Output is a
white 'L' image with black content, always `canonical_size` pixels square.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Optional, Tuple

import cv2
import numpy as np
from PIL import Image

from HanziHandwriting.core.models import BoundingBox
from .preprocess import ink_layer

logger = logging.getLogger(__name__)

CANONICAL_SIZE = 64
MARGIN = 4
BACKGROUND = 255
FOREGROUND = 0


@dataclass(frozen=True)
class NormalizedImage:
    image: Image.Image
    source_bounds: Optional[BoundingBox] = None
    content_box: Optional[Tuple[int, int, int, int]] = None  # (left, top, width, height) in canonical space
    scale: float = 0.0

    @property
    def size(self) -> int:
        return self.image.width

    @property
    def is_blank(self) -> bool:
        return self.source_bounds is None

    def to_array(self) -> np.ndarray:
        return np.asarray(self.image, dtype=np.uint8)


def _ink_mask(ink: Image.Image, threshold: int) -> np.ndarray:
    return (np.asarray(ink, dtype=np.uint8) > threshold).astype(np.uint8)


def _bounds_from_mask(mask: np.ndarray) -> Optional[BoundingBox]:
    if cv2.countNonZero(mask) == 0:
        return None
    x, y, w, h = cv2.boundingRect(mask)
    return BoundingBox(min_x=x, min_y=y, max_x=x + w - 1, max_y=y + h - 1)


def find_bounds(raster, threshold: int = 0) -> Optional[BoundingBox]:
    """Bounding box of pixels whose ink value exceeds `threshold`, or None."""
    return _bounds_from_mask(_ink_mask(ink_layer(raster), threshold))


def blank_image(canonical_size: int = CANONICAL_SIZE) -> NormalizedImage:
    return NormalizedImage(Image.new('L', (canonical_size, canonical_size), BACKGROUND))


class ImageNormalizer:
    """Crop, scale and center drawings into a `canonical_size` square.

    Usage:
        normalizer = ImageNormalizer()
        norm = normalizer.normalize(surface.snapshot())
        norm.image  # 64x64 'L' image
    """

    def __init__(self, canonical_size: int = CANONICAL_SIZE, margin: int = MARGIN, threshold: int = 0):
        if canonical_size - 2 * margin <= 0:
            raise ValueError(f"margin {margin} leaves no room in a {canonical_size}px canonical image")
        self.canonical_size = int(canonical_size)
        self.margin = int(margin)
        self.threshold = int(threshold)

    @classmethod
    def from_config(cls, cfg) -> "ImageNormalizer":
        return cls(canonical_size=cfg.canonical_size, margin=cfg.margin, threshold=cfg.threshold)

    def normalize(self, raster) -> NormalizedImage:
        size = self.canonical_size
        ink = ink_layer(raster)
        bounds = _bounds_from_mask(_ink_mask(ink, self.threshold))
        if bounds is None:
            return blank_image(size)

        content_size = max(bounds.width, bounds.height)
        if content_size <= 0:
            return blank_image(size)

        scale = (size - 2 * self.margin) / content_size
        scaled_w = max(1, int(round(bounds.width * scale)))
        scaled_h = max(1, int(round(bounds.height * scale)))
        offset_x = int(round((size - scaled_w) / 2))
        offset_y = int(round((size - scaled_h) / 2))

        content = ink.crop(bounds.crop_box).resize((scaled_w, scaled_h), Image.Resampling.BILINEAR)
        canvas = Image.new('L', (size, size), BACKGROUND)
        canvas.paste(FOREGROUND, (offset_x, offset_y, offset_x + scaled_w, offset_y + scaled_h), mask=content)
        logger.debug('Normalized %s -> %dx%d at (%d, %d), scale=%.3f',
                     bounds, scaled_w, scaled_h, offset_x, offset_y, scale)
        return NormalizedImage(
            image=canvas,
            source_bounds=bounds,
            content_box=(offset_x, offset_y, scaled_w, scaled_h),
            scale=scale,
        )


def normalize(raster, canonical_size: int = CANONICAL_SIZE, margin: int = MARGIN, threshold: int = 0) -> NormalizedImage:
    return ImageNormalizer(canonical_size, margin, threshold).normalize(raster)
