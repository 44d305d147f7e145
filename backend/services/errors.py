"""Error types raised by the stylist backend."""

from __future__ import annotations


class StylistError(Exception):
    """Base class for all stylist errors."""


class AnalysisError(StylistError):
    """The remote analysis failed or returned unusable structured data."""


class GenerationError(StylistError):
    """A synthesis or edit response carried no inline image."""


class InvalidImageError(StylistError):
    """The payload is not a readable image or not a valid data URL."""


class InvalidStateError(StylistError):
    """The requested action does not apply to the current session phase."""


class PipelineBusyError(InvalidStateError):
    """A styling run is already in flight for this session."""


class EditInProgressError(InvalidStateError):
    """The outfit card already has an edit in flight."""


class OutfitNotFoundError(StylistError):
    """No outfit exists at the requested position."""

    def __init__(self, index: int):
        super().__init__(f"No outfit at position {index}")
        self.index = index


class InvalidInstructionError(StylistError):
    """An edit instruction was empty or blank."""
