"""Structured models for the item analysis and outfit styling flow."""

from __future__ import annotations

from enum import Enum

from pydantic import BaseModel, ConfigDict, Field


class OutfitType(str, Enum):
    """Closed set of looks the stylist produces."""

    CASUAL = "Casual"
    BUSINESS = "Business"
    NIGHT_OUT = "Night Out"


class OutfitSuggestion(BaseModel):
    """One suggested look as returned by the analysis model."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    type: OutfitType
    description: str
    image_prompt: str = Field(..., alias="imagePrompt")
    pieces: list[str] = Field(...)


class AnalysisResult(BaseModel):
    """Analysis of the uploaded item plus the looks to render."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    item_name: str = Field(..., alias="itemName")
    style: str
    colors: list[str]
    outfits: list[OutfitSuggestion]


class StyledOutfit(BaseModel):
    """A suggestion combined with its generated image.

    Only ``image_url`` ever changes after creation, and only by replacing the
    whole object with a copy (see :meth:`with_image`).
    """

    model_config = ConfigDict(frozen=True)

    type: OutfitType
    description: str
    image_url: str
    original_prompt: str

    @classmethod
    def from_suggestion(cls, suggestion: OutfitSuggestion, image_url: str) -> "StyledOutfit":
        return cls(
            type=suggestion.type,
            description=suggestion.description,
            image_url=image_url,
            original_prompt=suggestion.image_prompt,
        )

    def with_image(self, image_url: str) -> "StyledOutfit":
        return self.model_copy(update={"image_url": image_url})


class StylingResult(BaseModel):
    """Output of a complete styling run."""

    model_config = ConfigDict(frozen=True)

    analysis: AnalysisResult
    outfits: list[StyledOutfit]
