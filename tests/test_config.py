"""Tests for environment-driven bootstrap settings."""

import pytest

from linux_stats_agent.core.config import AgentSettings, ConfigError, MountFixMode


class TestAgentSettings:
    def test_defaults(self):
        settings = AgentSettings.from_env({})

        assert settings.port == 9955
        assert settings.interval_ms == 1000
        assert settings.token is None
        assert settings.auth_enabled is False
        assert settings.log_level == "info"
        assert settings.mount_fix is MountFixMode.AUTO

    def test_values_from_environment(self):
        settings = AgentSettings.from_env(
            {
                "AGENT_PORT": "8080",
                "AGENT_INTERVAL_MS": "250",
                "AGENT_TOKEN": "s3cret",
                "AGENT_LOG_LEVEL": "DEBUG",
                "MENUBAR_TRUENAS_MNT_FIX": "off",
            }
        )

        assert settings.port == 8080
        assert settings.interval_seconds == 0.25
        assert settings.token == "s3cret"
        assert settings.auth_enabled is True
        assert settings.log_level == "debug"
        assert settings.mount_fix is MountFixMode.OFF

    @pytest.mark.parametrize("interval", ["99", "abc", "-5"])
    def test_invalid_interval_is_fatal(self, interval):
        with pytest.raises(ConfigError):
            AgentSettings.from_env({"AGENT_INTERVAL_MS": interval})

    @pytest.mark.parametrize("port", ["0", "70000", "http"])
    def test_invalid_port_is_fatal(self, port):
        with pytest.raises(ConfigError):
            AgentSettings.from_env({"AGENT_PORT": port})

    def test_empty_token_disables_auth(self):
        assert AgentSettings.from_env({"AGENT_TOKEN": ""}).auth_enabled is False


class TestMountFixMode:
    @pytest.mark.parametrize(
        "raw, expected",
        [
            ("on", MountFixMode.ON),
            ("TRUE", MountFixMode.ON),
            ("1", MountFixMode.ON),
            ("off", MountFixMode.OFF),
            (" false ", MountFixMode.OFF),
            ("0", MountFixMode.OFF),
            ("auto", MountFixMode.AUTO),
            ("", MountFixMode.AUTO),
            (None, MountFixMode.AUTO),
            ("maybe", MountFixMode.AUTO),
        ],
    )
    def test_parse(self, raw, expected):
        assert MountFixMode.parse(raw) is expected
