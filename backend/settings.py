from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv

logger = logging.getLogger(__name__)

PROJECT_ROOT = Path(__file__).resolve().parent.parent
ENV_PATH = PROJECT_ROOT / ".env"

# Load .env early (if present) to make settings available across the app
if ENV_PATH.exists():
    load_dotenv(ENV_PATH)
else:  # Fallback to default search path
    load_dotenv()

DEFAULT_ANALYSIS_MODEL = "gemini-3-flash-preview"
DEFAULT_IMAGE_MODEL = "gemini-2.5-flash-image"
DEFAULT_ASPECT_RATIO = "1:1"


@dataclass
class Settings:
    gemini_api_key: Optional[str] = None
    analysis_model: str = DEFAULT_ANALYSIS_MODEL
    image_model: str = DEFAULT_IMAGE_MODEL
    image_aspect_ratio: str = DEFAULT_ASPECT_RATIO

    def __post_init__(self) -> None:
        self.gemini_api_key = (self.gemini_api_key or "").strip() or None
        self.analysis_model = self.analysis_model or DEFAULT_ANALYSIS_MODEL
        self.image_model = self.image_model or DEFAULT_IMAGE_MODEL
        self.image_aspect_ratio = self.image_aspect_ratio or DEFAULT_ASPECT_RATIO

    def gemini_ready(self) -> bool:
        return bool(self.gemini_api_key)


def _first_env(*names: str) -> Optional[str]:
    for name in names:
        value = os.getenv(name)
        if value:
            return value
    return None


_settings: Optional[Settings] = None


def get_settings(*, force_reload: bool = False, env_file: Optional[str | os.PathLike[str]] = None) -> Settings:
    """Load generation settings from ENV/.env and cache them for the process."""
    global _settings
    if force_reload or _settings is None:
        if env_file:
            load_dotenv(env_file, override=True)
        _settings = Settings(
            gemini_api_key=_first_env("GEMINI_API_KEY", "API_KEY", "GOOGLE_API_KEY"),
            analysis_model=os.getenv("ANALYSIS_MODEL", DEFAULT_ANALYSIS_MODEL),
            image_model=os.getenv("IMAGE_MODEL", DEFAULT_IMAGE_MODEL),
            image_aspect_ratio=os.getenv("IMAGE_ASPECT_RATIO", DEFAULT_ASPECT_RATIO),
        )
        if not _settings.gemini_ready():
            logger.info("[Settings] Gemini disabled: missing GEMINI_API_KEY")
    return _settings
