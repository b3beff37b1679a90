# tests/core/test_config.py
import pytest
from pydantic import ValidationError

from crud_scaffold.config import AppEnv, Settings, get_settings, set_settings


class TestSettings:
    def test_defaults(self, monkeypatch):
        monkeypatch.delenv("DATABASE_URL", raising=False)
        settings = Settings(_env_file=None)

        assert settings.APP_ENV is AppEnv.DEVELOPMENT
        assert settings.DATABASE_URL.startswith("sqlite")
        assert settings.MAX_PAGE_SIZE == 100

    def test_cors_origins_from_comma_separated_env(self, monkeypatch):
        monkeypatch.setenv("CORS_ORIGINS", "http://localhost:3000, https://example.org")

        settings = Settings(_env_file=None)

        assert settings.CORS_ORIGINS == ["http://localhost:3000", "https://example.org"]

    def test_cors_origins_from_json_env(self, monkeypatch):
        monkeypatch.setenv("CORS_ORIGINS", '["https://a.example"]')

        assert Settings(_env_file=None).CORS_ORIGINS == ["https://a.example"]

    def test_api_prefix_is_normalized(self):
        assert Settings(API_PREFIX="api/v1/").API_PREFIX == "/api/v1"
        assert Settings(API_PREFIX="").API_PREFIX == ""

    def test_page_size_must_be_positive(self):
        with pytest.raises(ValidationError):
            Settings(MAX_PAGE_SIZE=0)

    def test_get_and_set_settings(self):
        custom = Settings(APP_NAME="custom")
        set_settings(custom)
        try:
            assert get_settings() is custom
        finally:
            set_settings(None)

        assert get_settings() is not custom
        set_settings(None)
