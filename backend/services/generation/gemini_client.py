from __future__ import annotations

import logging
from typing import Any, Optional

from google import genai
from google.genai import types
from pydantic import ValidationError

from backend.prompts.loader import PromptLoader
from backend.settings import get_settings
from backend.services import image_data
from backend.services.errors import AnalysisError, GenerationError
from models.styling import AnalysisResult, OutfitType

from .base import GenerationClient

logger = logging.getLogger(__name__)

_STRING = types.Schema(type=types.Type.STRING)
_STRING_LIST = types.Schema(type=types.Type.ARRAY, items=_STRING)

OUTFIT_SCHEMA = types.Schema(
    type=types.Type.OBJECT,
    properties={
        "type": types.Schema(type=types.Type.STRING, enum=[t.value for t in OutfitType]),
        "description": _STRING,
        "imagePrompt": _STRING,
        "pieces": _STRING_LIST,
    },
    required=["type", "description", "imagePrompt", "pieces"],
)

ANALYSIS_SCHEMA = types.Schema(
    type=types.Type.OBJECT,
    properties={
        "itemName": _STRING,
        "style": _STRING,
        "colors": _STRING_LIST,
        "outfits": types.Schema(type=types.Type.ARRAY, items=OUTFIT_SCHEMA),
    },
    required=["itemName", "style", "colors", "outfits"],
)


class GeminiClient(GenerationClient):
    name = "gemini"

    def __init__(
        self,
        api_key: str | None = None,
        *,
        analysis_model: str | None = None,
        image_model: str | None = None,
        aspect_ratio: str | None = None,
        prompt_loader: PromptLoader | None = None,
        client: Any | None = None,
    ):
        settings = get_settings()
        self.api_key = api_key or settings.gemini_api_key
        self.analysis_model = analysis_model or settings.analysis_model
        self.image_model = image_model or settings.image_model
        self.aspect_ratio = aspect_ratio or settings.image_aspect_ratio
        self.prompt_loader = prompt_loader or PromptLoader()
        if client is not None:
            self.client = client
        else:
            self.client = genai.Client(api_key=self.api_key) if self.api_key else None
        if self.client is None:
            logger.warning("[GeminiClient] No API key configured; remote calls will fail")

    # --------------------------- public API ---------------------------
    async def analyze(self, image: str) -> AnalysisResult:
        logger.info("[GeminiClient] Requesting analysis (model=%s)", self.analysis_model)
        try:
            client = self._require_client()
            part = self._image_part(image)
            instruction = self.prompt_loader.analysis_prompt()
            response = await client.aio.models.generate_content(
                model=self.analysis_model,
                contents=[part, instruction],
                config=types.GenerateContentConfig(
                    response_mime_type="application/json",
                    response_schema=ANALYSIS_SCHEMA,
                ),
            )
        except Exception as exc:
            raise AnalysisError(f"Analysis request failed: {exc}") from exc

        return self._parse_analysis(getattr(response, "text", None))

    async def synthesize(self, reference_image: str, instruction: str) -> str:
        prompt = self.prompt_loader.synthesis_prompt(instruction)
        logger.info("[GeminiClient] Requesting outfit image (model=%s)", self.image_model)
        response = await self._generate_image(reference_image, prompt)
        result = self._first_inline_image(response)
        if result is None:
            raise GenerationError("Failed to generate image")
        return result

    async def edit(self, source_image: str, instruction: str) -> str:
        prompt = self.prompt_loader.edit_prompt(instruction)
        logger.info("[GeminiClient] Requesting image edit (model=%s)", self.image_model)
        response = await self._generate_image(source_image, prompt)
        result = self._first_inline_image(response)
        if result is None:
            raise GenerationError("Failed to edit image")
        return result

    # --------------------------- helpers ---------------------------
    def _require_client(self) -> Any:
        if self.client is None:
            raise RuntimeError("Gemini disabled: missing GEMINI_API_KEY")
        return self.client

    @staticmethod
    def _image_part(image: str) -> types.Part:
        decoded = image_data.decode(image)
        return types.Part.from_bytes(data=decoded.data, mime_type=decoded.mime_type)

    async def _generate_image(self, image: str, prompt: str) -> Any:
        client = self._require_client()
        return await client.aio.models.generate_content(
            model=self.image_model,
            contents=[self._image_part(image), prompt],
            config=types.GenerateContentConfig(
                image_config=types.ImageConfig(aspect_ratio=self.aspect_ratio),
            ),
        )

    @staticmethod
    def _parse_analysis(raw: Optional[str]) -> AnalysisResult:
        if not raw or not raw.strip():
            logger.warning("[GeminiClient] Analysis returned an empty payload")
            raise AnalysisError("Analysis returned no structured data")
        try:
            result = AnalysisResult.model_validate_json(raw)
        except ValidationError as exc:
            logger.warning("[GeminiClient] Analysis payload rejected (%d chars): %s", len(raw), exc)
            raise AnalysisError("Analysis returned malformed structured data") from exc
        logger.info(
            "[GeminiClient] Analysis parsed: %s, %d outfit suggestions",
            result.item_name,
            len(result.outfits),
        )
        return result

    @staticmethod
    def _first_inline_image(response: Any) -> Optional[str]:
        candidates = getattr(response, "candidates", None) or []
        if not candidates:
            return None
        content = getattr(candidates[0], "content", None)
        for part in getattr(content, "parts", None) or []:
            inline = getattr(part, "inline_data", None)
            if inline is not None and inline.data:
                return image_data.encode(inline.data, inline.mime_type)
        return None
