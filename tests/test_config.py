try:
    from . import _bootstrap  # noqa: F401
except Exception:  # pragma: no cover - fallback for direct execution
    import _bootstrap  # type: ignore # noqa: F401

import pytest
from pydantic import ValidationError

from app.core.config import AppSettings, GeminiSettings


def test_settings_read_environment(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("APP_LOG_LEVEL", " debug ")
    monkeypatch.setenv("APP_MAX_ROWS", "1000")
    monkeypatch.setenv("GEMINI_MODEL_NAME", "gemini-1.5-pro")

    settings = AppSettings()

    assert settings.log_level == "DEBUG"
    assert settings.max_rows == 1000
    assert settings.gemini.model_name == "gemini-1.5-pro"
    assert settings.gemini.enabled is False


def test_blank_api_key_disables_reports(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("GEMINI_API_KEY", "   ")
    assert GeminiSettings().enabled is False

    monkeypatch.setenv("GEMINI_API_KEY", "key-123")
    assert GeminiSettings().enabled is True


def test_row_limit_must_be_positive(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("APP_MAX_ROWS", "0")
    with pytest.raises(ValidationError):
        AppSettings()
