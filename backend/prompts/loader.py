"""Prompt templates for the three Gemini calls.

Each call has one Markdown/Jinja file under ``stylist/``. Rendered prompts are
collapsed to a single line, and ``base_rules.md`` is available to every
template as ``{{ base_rules }}``.
"""

from __future__ import annotations

import logging
from functools import cached_property
from pathlib import Path
from typing import Any

from jinja2 import Environment, FileSystemLoader, StrictUndefined, TemplateNotFound

logger = logging.getLogger(__name__)

PROMPT_ROOT = Path(__file__).parent / "stylist"

ANALYSIS_TEMPLATE = "analysis.md"
SYNTHESIS_TEMPLATE = "synthesis.md"
EDIT_TEMPLATE = "edit.md"
BASE_RULES_FILE = "base_rules.md"


def _one_line(text: str) -> str:
    return " ".join(text.split())


class PromptLoader:
    def __init__(self, root: Path | None = None):
        self.root = Path(root or PROMPT_ROOT)
        self.env = Environment(loader=FileSystemLoader(self.root), undefined=StrictUndefined)

    @cached_property
    def base_rules(self) -> str:
        """Shared styling rules; empty when the directory has none."""
        path = self.root / BASE_RULES_FILE
        return path.read_text(encoding="utf-8").strip() if path.exists() else ""

    # --------------------------- stylist prompts ---------------------------
    def analysis_prompt(self) -> str:
        return self.load_template(ANALYSIS_TEMPLATE)

    def synthesis_prompt(self, description: str) -> str:
        """Flat-lay composition prompt around the suggestion's image prompt."""
        return self.render_template(SYNTHESIS_TEMPLATE, {"prompt": description})

    def edit_prompt(self, instruction: str) -> str:
        """Frame a user instruction as a modification of an existing look."""
        return self.render_template(EDIT_TEMPLATE, {"instruction": instruction})

    # --------------------------- generic access ---------------------------
    def load_template(self, name: str) -> str:
        """Template source as one line, without rendering."""
        try:
            source, _, _ = self.env.loader.get_source(self.env, name)
        except TemplateNotFound as exc:
            raise FileNotFoundError(f"Template not found: {self.root / name}") from exc
        return _one_line(source)

    def render_template(self, name: str, variables: dict[str, Any]) -> str:
        """Render ``name``; ``base_rules`` may be overridden through ``variables``."""
        try:
            template = self.env.get_template(name)
        except TemplateNotFound as exc:
            raise FileNotFoundError(f"Template not found: {name}") from exc

        rendered = template.render({"base_rules": self.base_rules, **variables})
        logger.debug("[PromptLoader] Rendered %s (%d chars)", name, len(rendered))
        return _one_line(rendered)
