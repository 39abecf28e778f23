"""Small image conversion helpers used by the normalizer.

Rasters arrive as PIL images (the drawing surface), numpy arrays (tests and
scripts) or PyQt6 `QImage`s (the desktop canvas). Everything is funnelled into
PIL here, then reduced to a single-channel "ink" layer where drawn pixels are
high and background is zero.
"""
from __future__ import annotations

import logging

import numpy as np
from PIL import Image, ImageOps

logger = logging.getLogger(__name__)


def qimage_to_pil(qimage) -> Image.Image:
    """Convert a PyQt6 `QImage` to an RGBA PIL `Image`.

    If the passed object is already a PIL Image, it is returned unchanged.
    """
    if isinstance(qimage, Image.Image):
        return qimage

    # Defer import of PyQt types to avoid hard dependency at import time.
    try:
        from PyQt6.QtGui import QImage
    except ImportError:
        QImage = None

    if QImage is not None and isinstance(qimage, QImage):
        converted = qimage.convertToFormat(QImage.Format.Format_RGBA8888)
        ptr = converted.constBits()
        buf = ptr.asstring(converted.sizeInBytes())
        return Image.frombuffer(
            'RGBA', (converted.width(), converted.height()), buf,
            'raw', 'RGBA', converted.bytesPerLine(), 1,
        ).copy()

    raise TypeError('Expected QImage or PIL.Image')


def to_pil(raster) -> Image.Image:
    """Accept a PIL image, numpy array or QImage and return a PIL image."""
    if isinstance(raster, Image.Image):
        return raster
    if isinstance(raster, np.ndarray):
        arr = raster
        if arr.dtype != np.uint8:
            arr = np.clip(arr, 0, 255).astype(np.uint8)
        if arr.ndim == 3 and arr.shape[2] == 1:
            arr = arr[:, :, 0]
        return Image.fromarray(arr)
    return qimage_to_pil(raster)


def ink_layer(raster) -> Image.Image:
    """Return an 'L' image where ink is bright and background is 0.

    Rasters with alpha use the alpha channel (transparent canvas, opaque ink).
    Opaque rasters are treated as dark ink on a light background and inverted.
    """
    img = to_pil(raster)
    if img.mode in ('PA', 'La', 'RGBa') or (img.mode == 'P' and 'transparency' in img.info):
        img = img.convert('RGBA')
    if img.mode in ('RGBA', 'LA'):
        return img.getchannel('A')
    return ImageOps.invert(img.convert('L'))
