"""Unit tests for application settings configuration."""

from pathlib import Path

from pharmagenie.config import Settings


def test_settings_uses_backend_env_file_independent_of_cwd():
    """Settings should always include backend/.env as an env source."""
    env_files = Settings.model_config.get("env_file")
    assert env_files is not None

    normalized = {str(Path(item)) for item in env_files}
    expected_backend_env = str(Path(__file__).resolve().parents[2] / ".env")

    assert expected_backend_env in normalized
    assert str(Path(".env")) in normalized


def test_defaults_select_mock_provider_and_shared_page_size(monkeypatch):
    for name in ("GENAI_PROVIDER", "RECORD_PAGE_SIZE", "RATE_LIMIT_MAX_REQUESTS"):
        monkeypatch.delenv(name, raising=False)
    settings = Settings(_env_file=None)
    assert settings.genai_provider == "mock"
    assert settings.record_page_size == 50
    assert settings.rate_limit_max_requests == 20
    assert settings.rate_limit_window_seconds == 60


def test_environment_overrides(monkeypatch):
    monkeypatch.setenv("GENAI_PROVIDER", "hcl-aicafe")
    monkeypatch.setenv("RECORD_PAGE_SIZE", "25")
    monkeypatch.setenv("TAGGER_ENABLED", "false")
    settings = Settings(_env_file=None)
    assert settings.genai_provider == "hcl-aicafe"
    assert settings.record_page_size == 25
    assert settings.tagger_enabled is False
