from __future__ import annotations

from typing import Protocol, runtime_checkable

from models.styling import AnalysisResult


@runtime_checkable
class GenerationClient(Protocol):
    name: str

    async def analyze(self, image: str) -> AnalysisResult:
        """Describe the item in ``image`` and suggest one look per outfit type."""
        ...

    async def synthesize(self, reference_image: str, instruction: str) -> str:
        """Compose a new flat-lay image around ``reference_image``; returns a data URL."""
        ...

    async def edit(self, source_image: str, instruction: str) -> str:
        """Apply ``instruction`` to ``source_image``; returns a data URL."""
        ...
