import sys
from pathlib import Path

import pytest

project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

import backend.settings as settings
from backend.settings import DEFAULT_ANALYSIS_MODEL, DEFAULT_IMAGE_MODEL, get_settings
from config.settings import AppSettings

ENV_KEYS = ["GEMINI_API_KEY", "API_KEY", "GOOGLE_API_KEY", "ANALYSIS_MODEL", "IMAGE_MODEL", "IMAGE_ASPECT_RATIO"]


def reset_settings():
    settings._settings = None  # type: ignore


@pytest.fixture
def clean_env(monkeypatch):
    # setenv first so monkeypatch restores these keys even after load_dotenv(override=True)
    for key in ENV_KEYS:
        monkeypatch.setenv(key, "")
        monkeypatch.delenv(key)
    reset_settings()
    yield monkeypatch
    reset_settings()


def test_settings_loads_env_file(tmp_path, clean_env):
    for key in ENV_KEYS:
        clean_env.setenv(key, "placeholder")
    env_file = tmp_path / ".env"
    env_file.write_text(
        "\n".join(
            [
                "GEMINI_API_KEY=file-key",
                "API_KEY=",
                "GOOGLE_API_KEY=",
                "ANALYSIS_MODEL=custom-analysis",
                "IMAGE_MODEL=custom-image",
                "IMAGE_ASPECT_RATIO=4:3",
            ]
        )
    )
    loaded = get_settings(force_reload=True, env_file=env_file)
    assert loaded.gemini_api_key == "file-key"
    assert loaded.analysis_model == "custom-analysis"
    assert loaded.image_model == "custom-image"
    assert loaded.image_aspect_ratio == "4:3"
    assert loaded.gemini_ready() is True


def test_settings_defaults_without_key(clean_env):
    loaded = get_settings(force_reload=True)
    assert loaded.gemini_api_key is None
    assert loaded.gemini_ready() is False
    assert loaded.analysis_model == DEFAULT_ANALYSIS_MODEL
    assert loaded.image_model == DEFAULT_IMAGE_MODEL
    assert loaded.image_aspect_ratio == "1:1"


def test_settings_accepts_legacy_api_key_name(clean_env):
    clean_env.setenv("API_KEY", "legacy-key")
    loaded = get_settings(force_reload=True)
    assert loaded.gemini_api_key == "legacy-key"


def test_settings_are_cached_until_reload(clean_env):
    clean_env.setenv("GEMINI_API_KEY", "first")
    first = get_settings(force_reload=True)
    clean_env.setenv("GEMINI_API_KEY", "second")
    assert get_settings() is first
    assert get_settings(force_reload=True).gemini_api_key == "second"


def test_app_settings_from_env(monkeypatch):
    monkeypatch.setenv("MAX_UPLOAD_MB", "2")
    monkeypatch.setenv("LOG_LEVEL", "debug")
    monkeypatch.setenv("FLASK_DEBUG", "true")
    app_settings = AppSettings()
    assert app_settings.max_content_length == 2 * 1024 * 1024
    assert app_settings.log_level == "debug"
    assert app_settings.flask_debug is True
