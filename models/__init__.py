"""Models package - styling domain and API payloads."""

from models.api_payload import EditRequest, ErrorPayload, ItemUploadRequest, SessionSnapshot
from models.styling import (
    AnalysisResult,
    OutfitSuggestion,
    OutfitType,
    StyledOutfit,
    StylingResult,
)

__all__ = [
    # Styling domain
    "OutfitType",
    "OutfitSuggestion",
    "AnalysisResult",
    "StyledOutfit",
    "StylingResult",
    # API payload models
    "ItemUploadRequest",
    "EditRequest",
    "SessionSnapshot",
    "ErrorPayload",
]
