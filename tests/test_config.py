"""
Tests for Configuration Loading
"""

import pytest

from github_relay.config import (
    ConfigurationError,
    EventToggles,
    Settings,
    load_settings,
    resolve_config_path,
)

CONFIG_TOML = """
[app]
debug = true
port = 8080
log_level = "debug"

[github]
secret = "from-file"

[discord]
webhook_url = "https://discord.com/api/webhooks/1/abc"

[events]
issues = false

[events_config.push]
max_commits_shown = 3
embed_color = 0x123456
"""


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    for name in ("CONFIG", "RELAY_ENV", "RELAY_GITHUB__SECRET", "RELAY_APP__PORT"):
        monkeypatch.delenv(name, raising=False)


@pytest.fixture
def config_file(tmp_path):
    path = tmp_path / "config.toml"
    path.write_text(CONFIG_TOML)
    return path


class TestSettings:
    """Test suite for Settings and load_settings."""

    def test_defaults(self):
        settings = Settings()

        assert settings.app.port == 3000
        assert settings.app.debug is False
        assert settings.github.secret == ""
        assert settings.verification_enabled is False
        assert settings.events_config.push.max_commits_shown == 5
        assert settings.events_config.workflow_job.embed_color == 0x6600CC

    def test_load_from_toml(self, config_file):
        settings = load_settings(config_file)

        assert settings.app.debug is True
        assert settings.app.port == 8080
        assert settings.app.log_level == "DEBUG"
        assert settings.github.secret == "from-file"
        assert settings.verification_enabled is True
        assert settings.events.issues is False
        assert settings.events.push is True
        assert settings.events_config.push.max_commits_shown == 3
        assert settings.events_config.push.embed_color == 0x123456
        assert settings.events_config.push.show_file_changes is True

    def test_environment_overrides_file(self, config_file, monkeypatch):
        monkeypatch.setenv("RELAY_GITHUB__SECRET", "from-env")

        settings = load_settings(config_file)

        assert settings.github.secret == "from-env"
        assert settings.app.port == 8080

    def test_missing_explicit_file(self, tmp_path):
        with pytest.raises(ConfigurationError):
            load_settings(tmp_path / "nope.toml")

    def test_missing_default_file_uses_defaults(self, tmp_path, monkeypatch):
        monkeypatch.chdir(tmp_path)

        settings = load_settings()

        assert settings.app.port == 3000

    def test_invalid_value_rejected(self, tmp_path):
        path = tmp_path / "config.toml"
        path.write_text('[app]\nlog_level = "LOUD"\n')

        with pytest.raises(ConfigurationError):
            load_settings(path)

    def test_settings_are_frozen(self):
        settings = Settings()

        with pytest.raises(ValueError):
            settings.github = None


class TestResolveConfigPath:

    def test_default(self):
        assert resolve_config_path().name == "config.toml"

    def test_development(self, monkeypatch):
        monkeypatch.setenv("RELAY_ENV", "development")
        assert resolve_config_path().name == "config.dev.toml"

    def test_explicit_env(self, monkeypatch, config_file):
        monkeypatch.setenv("CONFIG", str(config_file))

        assert resolve_config_path() == config_file
        assert load_settings().github.secret == "from-file"

    def test_explicit_env_missing_file(self, monkeypatch, tmp_path):
        monkeypatch.setenv("CONFIG", str(tmp_path / "missing.toml"))

        with pytest.raises(ConfigurationError):
            load_settings()


class TestEventToggles:

    def test_is_enabled(self):
        toggles = EventToggles(push=False)

        assert toggles.is_enabled("push") is False
        assert toggles.is_enabled("issues") is True
        assert toggles.is_enabled("ping") is False
        assert toggles.is_enabled("model_config") is False
