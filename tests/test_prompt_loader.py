import sys
from pathlib import Path

import pytest
from jinja2 import UndefinedError

project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

from backend.prompts.loader import PromptLoader


def test_synthesis_prompt_includes_description_and_base_rules():
    prompt = PromptLoader().render_template(
        "synthesis.md", {"prompt": "navy chinos, white sneakers and the scarf"}
    )

    assert prompt.startswith("Create a professional flat-lay fashion photography image.")
    assert "according to this description: navy chinos, white sneakers and the scarf." in prompt
    assert "minimalist on a soft neutral background" in prompt
    assert "\n" not in prompt


def test_edit_prompt_frames_instruction_as_modification():
    prompt = PromptLoader().render_template("edit.md", {"instruction": "add a retro filter"})

    assert prompt.startswith("Modify this fashion flat-lay image")
    assert "add a retro filter" in prompt
    assert "Maintain the same clothing items" in prompt


def test_analysis_prompt_asks_for_three_looks():
    prompt = PromptLoader().load_template("analysis.md")

    assert "Casual, Business, and Night Out" in prompt
    assert "flat-lay" in prompt


def test_base_rules_can_be_overridden(tmp_path):
    (tmp_path / "base_rules.md").write_text("DEFAULT RULES", encoding="utf-8")
    (tmp_path / "t.md").write_text("{{ prompt }} / {{ base_rules }}", encoding="utf-8")
    loader = PromptLoader(root=tmp_path)

    assert loader.render_template("t.md", {"prompt": "x"}) == "x / DEFAULT RULES"
    assert loader.render_template("t.md", {"prompt": "x", "base_rules": "OWN"}) == "x / OWN"


def test_missing_template_raises_file_not_found(tmp_path):
    loader = PromptLoader(root=tmp_path)
    with pytest.raises(FileNotFoundError):
        loader.render_template("nope.md", {})
    with pytest.raises(FileNotFoundError):
        loader.load_template("nope.md")


def test_missing_variable_is_an_error():
    with pytest.raises(UndefinedError):
        PromptLoader().render_template("edit.md", {})


def test_named_prompts_match_their_templates():
    loader = PromptLoader()

    assert loader.analysis_prompt() == loader.load_template("analysis.md")
    assert loader.synthesis_prompt("denim") == loader.render_template("synthesis.md", {"prompt": "denim"})
    assert loader.edit_prompt("warmer") == loader.render_template("edit.md", {"instruction": "warmer"})


def test_base_rules_empty_when_file_missing(tmp_path):
    (tmp_path / "t.md").write_text("[{{ base_rules }}]", encoding="utf-8")
    assert PromptLoader(root=tmp_path).render_template("t.md", {}) == "[]"
