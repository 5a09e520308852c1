"""Tests for askbot.config."""

from __future__ import annotations

from pathlib import Path
from unittest.mock import patch

import pytest

from askbot.chunker import InvalidConfigurationError
from askbot.config import (
    DEFAULT_MODEL,
    DEFAULT_PROMPT_PREFIX,
    BotConfig,
    load_bot_section,
    resolve_config_path,
)

REQUIRED_ENV = {
    "SLACK_BOT_TOKEN": "xoxb-test",
    "SLACK_APP_TOKEN": "xapp-test",
    "ANTHROPIC_API_KEY": "sk-ant-test",
}


def _write_yaml(tmp_path: Path, text: str) -> Path:
    path = tmp_path / "askbot.yaml"
    path.write_text(text)
    return path


class TestFromEnv:
    def test_success_with_defaults(self, tmp_path: Path) -> None:
        with patch.dict("os.environ", REQUIRED_ENV, clear=True):
            cfg = BotConfig.from_env(tmp_path / "missing.yaml")
        assert cfg.slack_bot_token == "xoxb-test"
        assert cfg.slack_app_token == "xapp-test"
        assert cfg.anthropic_api_key == "sk-ant-test"
        assert cfg.model == DEFAULT_MODEL
        assert cfg.prompt_prefix == DEFAULT_PROMPT_PREFIX
        assert cfg.max_message_len == 2000
        assert cfg.command == "/ask"
        assert cfg.webhook_url == ""
        assert cfg.can_register_commands is False

    def test_missing_vars_raises(self, tmp_path: Path) -> None:
        with (
            patch.dict("os.environ", {}, clear=True),
            pytest.raises(ValueError, match="SLACK_BOT_TOKEN"),
        ):
            BotConfig.from_env(tmp_path / "missing.yaml")

    def test_missing_vars_all_named(self, tmp_path: Path) -> None:
        env = {"SLACK_BOT_TOKEN": "xoxb-test"}
        with (
            patch.dict("os.environ", env, clear=True),
            pytest.raises(ValueError) as excinfo,
        ):
            BotConfig.from_env(tmp_path / "missing.yaml")
        assert "SLACK_APP_TOKEN" in str(excinfo.value)
        assert "ANTHROPIC_API_KEY" in str(excinfo.value)
        assert "SLACK_BOT_TOKEN" not in str(excinfo.value)

    def test_empty_var_counts_as_missing(self, tmp_path: Path) -> None:
        env = {**REQUIRED_ENV, "ANTHROPIC_API_KEY": ""}
        with (
            patch.dict("os.environ", env, clear=True),
            pytest.raises(ValueError, match="ANTHROPIC_API_KEY"),
        ):
            BotConfig.from_env(tmp_path / "missing.yaml")

    def test_reads_yaml_bot_section(self, tmp_path: Path) -> None:
        path = _write_yaml(
            tmp_path,
            "bot:\n"
            "  model: claude-opus-4-20250514\n"
            "  max_message_len: 1500\n"
            "  prompt_prefix: ''\n"
            "  command: /question\n"
            "  unknown_key: ignored\n",
        )
        with patch.dict("os.environ", REQUIRED_ENV, clear=True):
            cfg = BotConfig.from_env(path)
        assert cfg.model == "claude-opus-4-20250514"
        assert cfg.max_message_len == 1500
        assert cfg.prompt_prefix == ""
        assert cfg.command == "/question"

    def test_env_webhook_overrides_yaml(self, tmp_path: Path) -> None:
        path = _write_yaml(tmp_path, "bot:\n  webhook_url: https://yaml.example/\n")
        env = {**REQUIRED_ENV, "WEBHOOK_URL": "https://env.example/"}
        with patch.dict("os.environ", env, clear=True):
            cfg = BotConfig.from_env(path)
        assert cfg.webhook_url == "https://env.example/"

    def test_yaml_webhook_used_without_env(self, tmp_path: Path) -> None:
        path = _write_yaml(tmp_path, "bot:\n  webhook_url: https://yaml.example/\n")
        with patch.dict("os.environ", REQUIRED_ENV, clear=True):
            cfg = BotConfig.from_env(path)
        assert cfg.webhook_url == "https://yaml.example/"

    def test_registration_credentials(self, tmp_path: Path) -> None:
        env = {**REQUIRED_ENV, "SLACK_APP_ID": "A123", "SLACK_CONFIG_TOKEN": "xoxe-1"}
        with patch.dict("os.environ", env, clear=True):
            cfg = BotConfig.from_env(tmp_path / "missing.yaml")
        assert cfg.slack_app_id == "A123"
        assert cfg.can_register_commands is True

    def test_config_path_from_env(self, tmp_path: Path) -> None:
        path = _write_yaml(tmp_path, "bot:\n  max_response_tokens: 77\n")
        env = {**REQUIRED_ENV, "ASKBOT_CONFIG": str(path)}
        with patch.dict("os.environ", env, clear=True):
            cfg = BotConfig.from_env()
        assert cfg.max_response_tokens == 77

    def test_invalid_max_message_len(self, tmp_path: Path) -> None:
        path = _write_yaml(tmp_path, "bot:\n  max_message_len: 0\n")
        with (
            patch.dict("os.environ", REQUIRED_ENV, clear=True),
            pytest.raises(InvalidConfigurationError),
        ):
            BotConfig.from_env(path)


    @pytest.mark.parametrize(
        "line",
        [
            "command: 123",
            "model: [a, b]",
            "prompt_prefix: null",
            "max_response_tokens: lots",
            "max_message_len: yes",
        ],
    )
    def test_wrong_yaml_type_rejected(self, tmp_path: Path, line: str) -> None:
        path = _write_yaml(tmp_path, f"bot:\n  {line}\n")
        key = line.split(":")[0]
        with (
            patch.dict("os.environ", REQUIRED_ENV, clear=True),
            pytest.raises(InvalidConfigurationError, match=key),
        ):
            BotConfig.from_env(path)


class TestLoadBotSection:
    def test_missing_file(self, tmp_path: Path) -> None:
        assert load_bot_section(tmp_path / "nope.yaml") == {}

    def test_malformed_yaml(self, tmp_path: Path) -> None:
        path = _write_yaml(tmp_path, "bot: [unclosed\n")
        assert load_bot_section(path) == {}

    def test_no_bot_section(self, tmp_path: Path) -> None:
        path = _write_yaml(tmp_path, "other:\n  key: value\n")
        assert load_bot_section(path) == {}

    def test_bot_section_not_a_dict(self, tmp_path: Path) -> None:
        path = _write_yaml(tmp_path, "bot: just a string\n")
        assert load_bot_section(path) == {}


class TestResolveConfigPath:
    def test_explicit_wins(self, tmp_path: Path) -> None:
        with patch.dict("os.environ", {"ASKBOT_CONFIG": "/env.yaml"}, clear=True):
            assert resolve_config_path(tmp_path) == tmp_path

    def test_default_filename(self) -> None:
        with patch.dict("os.environ", {}, clear=True):
            assert resolve_config_path() == Path("askbot.yaml")


class TestDescribe:
    def test_hides_secrets(self) -> None:
        cfg = BotConfig(
            slack_bot_token="xoxb-secret",
            slack_app_token="xapp-secret",
            anthropic_api_key="sk-secret",
            webhook_url="https://hooks.example/secret",
            slack_config_token="xoxe-secret",
        )
        info = cfg.describe()
        assert "secret" not in repr(info)
        assert info["webhook_configured"] is True
        assert info["model"] == DEFAULT_MODEL
