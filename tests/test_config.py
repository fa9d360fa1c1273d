"""
Ticketeer - Configuration Tests
===============================

Tests for loading settings from environment variables.
"""

from pathlib import Path

import pytest

from ticketeer.core.config import (
    TRANSCRIPT_POLICY_ABORT,
    TRANSCRIPT_POLICY_CONTINUE,
    ConfigValidationError,
    is_hex_color,
    load_config,
)


ENV_VARS = (
    "DISCORD_TOKEN",
    "DATABASE_PATH",
    "DEFAULT_PANEL_COLOR",
    "ADMINS_ARE_STAFF",
    "TRANSCRIPT_FAILURE_POLICY",
    "TRANSCRIPT_EMBED_IMAGES",
    "ERROR_WEBHOOK_URL",
    "SYNC_GUILD_ID",
)


@pytest.fixture
def env(monkeypatch):
    """Clean environment with only the token set."""
    for name in ENV_VARS:
        monkeypatch.delenv(name, raising=False)
    monkeypatch.setenv("DISCORD_TOKEN", "token")
    return monkeypatch


class TestLoadConfig:
    """Tests for load_config()."""

    def test_defaults(self, env):
        config = load_config()

        assert config.discord_token == "token"
        assert config.database_path == Path("data") / "tickets.db"
        assert config.default_panel_color == "#FFC0CB"
        assert config.admins_are_staff is False
        assert config.transcript_failure_policy == TRANSCRIPT_POLICY_CONTINUE
        assert config.abort_on_transcript_failure is False
        assert config.transcript_embed_images is True
        assert config.error_webhook_url is None
        assert config.sync_guild_id is None

    def test_missing_token(self, env):
        env.delenv("DISCORD_TOKEN")
        with pytest.raises(ConfigValidationError, match="DISCORD_TOKEN"):
            load_config()

    def test_overrides(self, env):
        env.setenv("DATABASE_PATH", "/tmp/t.db")
        env.setenv("DEFAULT_PANEL_COLOR", "#00ff00")
        env.setenv("ADMINS_ARE_STAFF", "yes")
        env.setenv("TRANSCRIPT_FAILURE_POLICY", "Abort")
        env.setenv("TRANSCRIPT_EMBED_IMAGES", "0")
        env.setenv("SYNC_GUILD_ID", "42")
        config = load_config()

        assert config.database_path == Path("/tmp/t.db")
        assert config.default_panel_color == "#00FF00"
        assert config.admins_are_staff is True
        assert config.transcript_failure_policy == TRANSCRIPT_POLICY_ABORT
        assert config.abort_on_transcript_failure is True
        assert config.transcript_embed_images is False
        assert config.sync_guild_id == 42

    @pytest.mark.parametrize("name,value", [
        ("DEFAULT_PANEL_COLOR", "pink"),
        ("TRANSCRIPT_FAILURE_POLICY", "retry"),
        ("ADMINS_ARE_STAFF", "maybe"),
        ("SYNC_GUILD_ID", "abc"),
    ])
    def test_invalid_values(self, env, name, value):
        env.setenv(name, value)
        with pytest.raises(ConfigValidationError):
            load_config()

    def test_bad_webhook_ignored(self, env):
        """A malformed webhook URL is dropped rather than fatal."""
        env.setenv("ERROR_WEBHOOK_URL", "not-a-url")
        assert load_config().error_webhook_url is None


class TestHexColor:
    @pytest.mark.parametrize("value", ["#FFC0CB", "#00ff00", "#123abc"])
    def test_valid(self, value):
        assert is_hex_color(value)

    @pytest.mark.parametrize("value", ["FFC0CB", "#FFF", "#GGGGGG", "pink", "#FFC0CB0"])
    def test_invalid(self, value):
        assert not is_hex_color(value)
