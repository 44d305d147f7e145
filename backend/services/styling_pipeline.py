"""Sequential styling run: analyze once, then render one image per suggestion."""

from __future__ import annotations

import logging
from typing import Callable, Optional

from backend.services.generation.base import GenerationClient
from models.styling import AnalysisResult, OutfitType, StyledOutfit, StylingResult

logger = logging.getLogger(__name__)

ProgressCallback = Callable[[str], None]

ANALYZING_STEP = "Analyzing your item..."


def crafting_step(outfit_type: OutfitType) -> str:
    return f"Crafting your {outfit_type.value} look..."


class StylingPipeline:
    """
    Turn one item image into an ordered list of styled outfits.

    Remote calls are awaited one after another so that each step has a
    progress label. Nothing is published until every suggestion has an image.
    """

    def __init__(self, client: GenerationClient):
        self.client = client

    async def analyze(self, image: str, progress: Optional[ProgressCallback] = None) -> AnalysisResult:
        self._report(progress, ANALYZING_STEP)
        return await self.client.analyze(image)

    async def style(
        self,
        image: str,
        analysis: AnalysisResult,
        progress: Optional[ProgressCallback] = None,
    ) -> list[StyledOutfit]:
        """
        Render every suggestion of ``analysis``.

        Args:
            image: Item image as data URL, used as reference for each render
            analysis: Result of :meth:`analyze`
            progress: Optional callback receiving one label per step

        Returns:
            One StyledOutfit per suggestion, in suggestion order

        Raises:
            Whatever the client raises; the partial accumulator is dropped.
        """
        generated: list[StyledOutfit] = []
        total = len(analysis.outfits)
        for position, suggestion in enumerate(analysis.outfits, start=1):
            self._report(progress, crafting_step(suggestion.type))
            logger.info("[StylingPipeline] Rendering look %d/%d (%s)", position, total, suggestion.type.value)
            image_url = await self.client.synthesize(image, suggestion.image_prompt)
            generated.append(StyledOutfit.from_suggestion(suggestion, image_url))
        return generated

    async def run(self, image: str, progress: Optional[ProgressCallback] = None) -> StylingResult:
        analysis = await self.analyze(image, progress)
        outfits = await self.style(image, analysis, progress)
        return StylingResult(analysis=analysis, outfits=outfits)

    @staticmethod
    def _report(progress: Optional[ProgressCallback], step: str) -> None:
        if progress is not None:
            progress(step)
