"""Per-user stylist session: item image, analysis, outfits and progress flags.

All transitions go through :class:`StylistSession`. The web layer holds one
session per browser tab inside a :class:`SessionRegistry` owned by the app.

Phases::

    idle -> item_selected -> (styling) -> analyzed / styled

``upload`` and ``reset`` are allowed from every phase and discard analysis and
outfits. A run or edit still in flight when that happens finishes against an
older epoch and its result is dropped.
"""

from __future__ import annotations

import logging
import threading
import uuid
from typing import Optional

from backend.services import image_data
from backend.services.errors import (
    EditInProgressError,
    InvalidInstructionError,
    InvalidStateError,
    OutfitNotFoundError,
    PipelineBusyError,
)
from backend.services.generation.base import GenerationClient
from backend.services.styling_pipeline import StylingPipeline
from models.api_payload import SessionPhase, SessionSnapshot
from models.styling import AnalysisResult, StyledOutfit

logger = logging.getLogger(__name__)


class StylistSession:
    def __init__(self, client: GenerationClient, session_id: Optional[str] = None):
        self.session_id = session_id or str(uuid.uuid4())
        self.client = client
        self.pipeline = StylingPipeline(client)

        self.image: Optional[str] = None
        self.analysis: Optional[AnalysisResult] = None
        self.outfits: list[StyledOutfit] = []
        self.is_loading = False
        self.loading_step = ""

        self._editing: set[int] = set()
        self._epoch = 0
        self._lock = threading.Lock()

    @property
    def phase(self) -> SessionPhase:
        if self.is_loading:
            return "styling"
        if self.image is None:
            return "idle"
        if self.outfits:
            return "styled"
        if self.analysis is not None:
            return "analyzed"
        return "item_selected"

    # --------------------------- transitions ---------------------------
    def upload(self, image: str) -> None:
        """Replace the item image and drop everything derived from the old one."""
        normalized = image_data.normalize(image)
        with self._lock:
            self._clear()
            self.image = normalized
        logger.info("[StylistSession] %s: new item uploaded", self.session_id)

    def reset(self) -> None:
        """Start over from scratch."""
        with self._lock:
            self._clear()
        logger.info("[StylistSession] %s: reset", self.session_id)

    async def style(self) -> list[StyledOutfit]:
        """
        Run the styling pipeline for the current item.

        Returns:
            The published outfits, or an empty list when the run was
            superseded by an upload/reset while it was in flight.

        Raises:
            InvalidStateError: no item, or the item is already styled
            PipelineBusyError: a run is already in flight
            AnalysisError / GenerationError / transport errors from the client
        """
        with self._lock:
            if self.image is None:
                raise InvalidStateError("Upload an item before styling")
            if self.is_loading:
                raise PipelineBusyError("Styling is already in progress")
            if self.outfits:
                raise InvalidStateError("Item is already styled; start over to restyle it")
            epoch = self._epoch
            image = self.image
            self.is_loading = True
            self.loading_step = ""

        def progress(step: str) -> None:
            with self._lock:
                if epoch == self._epoch:
                    self.loading_step = step

        try:
            analysis = await self.pipeline.analyze(image, progress)
            with self._lock:
                if epoch != self._epoch:
                    self._log_superseded("styling run")
                    return []
                self.analysis = analysis

            outfits = await self.pipeline.style(image, analysis, progress)
            with self._lock:
                if epoch != self._epoch:
                    self._log_superseded("styling run")
                    return []
                self.outfits = outfits
            logger.info("[StylistSession] %s: %d looks published", self.session_id, len(outfits))
            return outfits
        finally:
            with self._lock:
                if epoch == self._epoch:
                    self.is_loading = False
                    self.loading_step = ""

    async def edit(self, index: int, instruction: str) -> Optional[StyledOutfit]:
        """
        Refine one generated look.

        Only ``outfits[index].image_url`` changes; every other entry stays the
        same object. On failure the previous image is kept.

        Returns:
            The updated outfit, or None when the session moved on meanwhile.
        """
        instruction = (instruction or "").strip()
        if not instruction:
            raise InvalidInstructionError("Edit instruction must not be empty")

        with self._lock:
            if not self.outfits:
                raise InvalidStateError("There are no looks to refine yet")
            if not 0 <= index < len(self.outfits):
                raise OutfitNotFoundError(index)
            if index in self._editing:
                raise EditInProgressError(f"Look {index} is already being refined")
            self._editing.add(index)
            epoch = self._epoch
            source = self.outfits[index].image_url

        try:
            new_url = await self.client.edit(source, instruction)
        finally:
            with self._lock:
                if epoch == self._epoch:
                    self._editing.discard(index)

        with self._lock:
            if epoch != self._epoch:
                self._log_superseded("edit")
                return None
            updated = self.outfits[index].with_image(new_url)
            outfits = list(self.outfits)
            outfits[index] = updated
            self.outfits = outfits
        logger.info("[StylistSession] %s: look %d refined", self.session_id, index)
        return updated

    def snapshot(self) -> SessionSnapshot:
        with self._lock:
            return SessionSnapshot(
                session_id=self.session_id,
                phase=self.phase,
                image=self.image,
                analysis=self.analysis,
                outfits=list(self.outfits),
                is_loading=self.is_loading,
                loading_step=self.loading_step,
                editing=sorted(self._editing),
            )

    # --------------------------- helpers ---------------------------
    def _clear(self) -> None:
        self._epoch += 1
        self.image = None
        self.analysis = None
        self.outfits = []
        self.is_loading = False
        self.loading_step = ""
        self._editing = set()

    def _log_superseded(self, what: str) -> None:
        logger.info("[StylistSession] %s: dropping result of superseded %s", self.session_id, what)


class SessionRegistry:
    """Sessions of one app instance, keyed by id."""

    def __init__(self, client: GenerationClient):
        self.client = client
        self._sessions: dict[str, StylistSession] = {}
        self._lock = threading.Lock()

    def create(self) -> StylistSession:
        session = StylistSession(self.client)
        with self._lock:
            self._sessions[session.session_id] = session
        return session

    def get(self, session_id: str) -> Optional[StylistSession]:
        with self._lock:
            return self._sessions.get(session_id)

    def remove(self, session_id: str) -> bool:
        with self._lock:
            return self._sessions.pop(session_id, None) is not None

    def __len__(self) -> int:
        with self._lock:
            return len(self._sessions)
