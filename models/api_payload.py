"""API payload schemas for frontend contracts."""

from __future__ import annotations

from typing import Literal, Optional

from pydantic import BaseModel, Field, computed_field

from models.styling import AnalysisResult, StyledOutfit

SessionPhase = Literal["idle", "item_selected", "analyzed", "styling", "styled"]


class ItemUploadRequest(BaseModel):
    """JSON body for uploading an item as a data URL."""

    image: str = Field(..., min_length=1, description="data:<mime>;base64,<payload>")


class EditRequest(BaseModel):
    """Free-text refinement for one generated look."""

    instruction: str = Field(..., description="e.g. 'Add a retro filter'")


class SessionSnapshot(BaseModel):
    """Everything the frontend needs to render the current session."""

    session_id: str
    phase: SessionPhase
    image: Optional[str] = None
    analysis: Optional[AnalysisResult] = None
    outfits: list[StyledOutfit] = Field(default_factory=list)
    is_loading: bool = False
    loading_step: str = ""
    editing: list[int] = Field(default_factory=list)

    @computed_field  # type: ignore[prop-decorator]
    @property
    def look_count(self) -> int:
        return len(self.outfits)


class ErrorPayload(BaseModel):
    """Error body returned by the API."""

    error: str
    message: Optional[str] = None
