"""Image -> backend tensor conversion."""
from __future__ import annotations

import numpy as np
from PIL import Image

from HanziHandwriting.services.normalize.normalizer import NormalizedImage


def image_to_tensor(image, invert: bool = True, channels_last: bool = False) -> np.ndarray:
    """Convert a canonical image into a float32 batch of one.

    Values are scaled to [0, 1]. With `invert`, white-background/black-ink
    images become black background with bright strokes, which is what most
    handwriting classifiers are trained on. Shape is (1, 1, H, W), or
    (1, H, W, 1) when `channels_last`.
    """
    img = image.image if isinstance(image, NormalizedImage) else image
    if not isinstance(img, Image.Image):
        img = Image.fromarray(np.asarray(img, dtype=np.uint8))
    arr = np.asarray(img.convert('L'), dtype=np.float32) / 255.0
    if invert:
        arr = 1.0 - arr
    if channels_last:
        return arr[np.newaxis, :, :, np.newaxis]
    return arr[np.newaxis, np.newaxis, :, :]
