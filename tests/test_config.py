"""Tests for Settings loading."""

from pathlib import Path

import pytest
from pydantic import ValidationError

from funnel_landing.config import Settings


class TestSettings:
    """Tests for defaults, YAML and environment overrides."""

    def test_defaults(self) -> None:
        settings = Settings.load(env={})
        assert settings.nicoka_subdomain == "rubix-consulting"
        assert settings.nicoka_api_token is None
        assert settings.db_path == Path("funnel_landing.db")
        assert settings.cache_max_age == 1800
        assert settings.page_size == 200
        assert settings.max_retries == 3

    def test_yaml_nested_nicoka(self, tmp_path: Path) -> None:
        path = tmp_path / "settings.yaml"
        path.write_text(
            "nicoka:\n"
            "  subdomain: acme\n"
            "  api_token: from-file\n"
            "db_path: /tmp/landing.db\n"
            "cache_max_age: 600\n"
        )
        settings = Settings.load(path, env={})
        assert settings.nicoka_subdomain == "acme"
        assert settings.nicoka_api_token == "from-file"
        assert settings.db_path == Path("/tmp/landing.db")
        assert settings.cache_max_age == 600

    def test_env_overrides_file(self, tmp_path: Path) -> None:
        path = tmp_path / "settings.yaml"
        path.write_text("nicoka:\n  api_token: from-file\n")
        settings = Settings.load(
            path,
            env={"NICOKA_API_TOKEN": "from-env", "FUNNEL_LANDING_CACHE_MAX_AGE": "120"},
        )
        assert settings.nicoka_api_token == "from-env"
        assert settings.cache_max_age == 120

    def test_empty_env_value_ignored(self) -> None:
        settings = Settings.load(env={"NICOKA_SUBDOMAIN": ""})
        assert settings.nicoka_subdomain == "rubix-consulting"

    def test_token_hidden_from_repr(self) -> None:
        settings = Settings.load(env={"NICOKA_API_TOKEN": "s3cret"})
        assert "s3cret" not in repr(settings)

    def test_invalid_max_age(self) -> None:
        with pytest.raises(ValidationError):
            Settings.load(env={"FUNNEL_LANDING_CACHE_MAX_AGE": "0"})

    def test_connector_kwargs(self) -> None:
        kwargs = Settings.load(env={"NICOKA_API_TOKEN": "t"}).connector_kwargs()
        assert kwargs["subdomain"] == "rubix-consulting"
        assert kwargs["api_token"] == "t"
        assert kwargs["timeout"] == 30.0
