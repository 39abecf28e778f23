"""Drawing -> canonical image -> ranked characters."""
from __future__ import annotations

import logging
from typing import List

from HanziHandwriting.core.config import AppConfig
from HanziHandwriting.core.models import RankedResult
from HanziHandwriting.services.drawing.surface import DrawingSurface
from HanziHandwriting.services.normalize.normalizer import ImageNormalizer, NormalizedImage
from HanziHandwriting.services.recognition import RecognitionEngine, create_engine

logger = logging.getLogger(__name__)


class HandwritingPipeline:
    def __init__(self, surface: DrawingSurface, normalizer: ImageNormalizer, engine: RecognitionEngine):
        self.surface = surface
        self.normalizer = normalizer
        self.engine = engine
        self.last_image: NormalizedImage | None = None

    @classmethod
    def from_config(cls, config: AppConfig | None = None, catalog=None) -> "HandwritingPipeline":
        config = config or AppConfig()
        return cls(
            DrawingSurface.from_config(config.surface),
            ImageNormalizer.from_config(config.normalizer),
            create_engine(config, catalog=catalog),
        )

    async def preload(self):
        """Start the backend load before the first recognition."""
        return await self.engine.load_backend()

    async def recognize(self, k: int | None = None) -> List[RankedResult]:
        self.last_image = self.normalizer.normalize(self.surface.snapshot())
        if self.last_image.is_blank:
            logger.debug('Recognizing an empty drawing')
        return await self.engine.recognize(self.last_image, k)
