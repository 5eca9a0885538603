"""
Unit tests for application settings.
"""

import pytest

from swingcoach.config.settings import Settings


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    for name in ("ANTHROPIC_API_KEY", "ANTHROPIC_MODEL", "CORS_ORIGINS", "MAX_VIDEO_SIZE_MB"):
        monkeypatch.delenv(name, raising=False)


class TestSettings:

    def test_defaults(self):
        settings = Settings(_env_file=None)

        assert settings.anthropic_model == "claude-sonnet-4-20250514"
        assert settings.anthropic_max_tokens == 2000
        assert settings.max_video_size_bytes == 100 * 1024 * 1024

    def test_reads_environment(self, monkeypatch):
        monkeypatch.setenv("ANTHROPIC_API_KEY", "sk-test")
        monkeypatch.setenv("MAX_VIDEO_SIZE_MB", "5")

        settings = Settings(_env_file=None)

        assert settings.anthropic_api_key == "sk-test"
        assert settings.max_video_size_mb == 5

    def test_missing_api_key_is_reported(self):
        assert Settings(_env_file=None).validate_required_fields() == ["ANTHROPIC_API_KEY"]

    def test_present_api_key_passes(self):
        assert Settings(_env_file=None, anthropic_api_key="k").validate_required_fields() == []

    def test_cors_origins_list(self):
        settings = Settings(_env_file=None, cors_origins="http://a.test, http://b.test,")
        assert settings.cors_origins_list == ["http://a.test", "http://b.test"]

    def test_cors_wildcard(self):
        assert Settings(_env_file=None, cors_origins="*").cors_origins_list == ["*"]
