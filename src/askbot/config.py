"""Configuration for the askbot process.

Secrets come from environment variables; tunables come from the ``bot:``
section of an optional YAML file (``askbot.yaml`` in the working directory,
or the path in ASKBOT_CONFIG).
"""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass, fields
from pathlib import Path
from typing import Any

from askbot.chunker import (
    DEFAULT_MAX_LEN,
    InvalidConfigurationError,
    validate_max_len,
)

logger = logging.getLogger(__name__)

DEFAULT_CONFIG_FILENAME = "askbot.yaml"
DEFAULT_MODEL = "claude-sonnet-4-20250514"
DEFAULT_PROMPT_PREFIX = "Answer briefly and in less than 200 words:"

REQUIRED_ENV_VARS = ("SLACK_BOT_TOKEN", "SLACK_APP_TOKEN", "ANTHROPIC_API_KEY")

# Keys of the YAML ``bot:`` section that map onto BotConfig fields
_YAML_KEYS = (
    "model",
    "prompt_prefix",
    "max_response_tokens",
    "max_message_len",
    "command",
    "webhook_url",
    "webhook_username",
    "startup_notice",
)

_FIELD_TYPES = {"str": str, "int": int}


@dataclass(frozen=True)
class BotConfig:
    """Configuration for the askbot process."""

    slack_bot_token: str
    slack_app_token: str
    anthropic_api_key: str
    model: str = DEFAULT_MODEL
    prompt_prefix: str = DEFAULT_PROMPT_PREFIX
    max_response_tokens: int = 1024
    max_message_len: int = DEFAULT_MAX_LEN
    command: str = "/ask"
    webhook_url: str = ""
    webhook_username: str = "Notification Bot"
    startup_notice: str = "Bot started -- webhook test"
    slack_app_id: str = ""
    slack_config_token: str = ""

    def __post_init__(self) -> None:
        # YAML can hand us any scalar; field annotations are strings here
        for f in fields(self):
            value = getattr(self, f.name)
            expected = _FIELD_TYPES[f.type]
            if isinstance(value, bool) or not isinstance(value, expected):
                raise InvalidConfigurationError(
                    f"{f.name} must be {f.type}, got {value!r}"
                )
        validate_max_len(self.max_message_len)

    @property
    def can_register_commands(self) -> bool:
        """Whether credentials for pushing the app manifest are present."""
        return bool(self.slack_app_id and self.slack_config_token)

    @classmethod
    def from_env(cls, config_path: Path | None = None) -> BotConfig:
        """Create config from environment variables and the YAML file.

        Required env vars: SLACK_BOT_TOKEN, SLACK_APP_TOKEN, ANTHROPIC_API_KEY.
        Optional env vars: WEBHOOK_URL, SLACK_APP_ID, SLACK_CONFIG_TOKEN,
        ASKBOT_CONFIG.

        Args:
            config_path: YAML file to read. Defaults to ASKBOT_CONFIG, then
                askbot.yaml in the working directory.

        Raises:
            ValueError: If required environment variables are missing.
            InvalidConfigurationError: If max_message_len is not positive.
        """
        missing = [name for name in REQUIRED_ENV_VARS if not os.environ.get(name)]
        if missing:
            raise ValueError(
                f"Missing required environment variables: {', '.join(missing)}"
            )

        bot_cfg = load_bot_section(resolve_config_path(config_path))

        overrides = {k: bot_cfg[k] for k in _YAML_KEYS if k in bot_cfg}
        webhook_url = os.environ.get("WEBHOOK_URL", "")
        if webhook_url:
            overrides["webhook_url"] = webhook_url

        return cls(
            slack_bot_token=os.environ["SLACK_BOT_TOKEN"],
            slack_app_token=os.environ["SLACK_APP_TOKEN"],
            anthropic_api_key=os.environ["ANTHROPIC_API_KEY"],
            slack_app_id=os.environ.get("SLACK_APP_ID", ""),
            slack_config_token=os.environ.get("SLACK_CONFIG_TOKEN", ""),
            **overrides,
        )

    def describe(self) -> dict[str, Any]:
        """Return non-secret settings, for startup logging."""
        hidden = {
            "slack_bot_token",
            "slack_app_token",
            "anthropic_api_key",
            "slack_config_token",
            "webhook_url",
        }
        info = {
            f.name: getattr(self, f.name) for f in fields(self) if f.name not in hidden
        }
        info["webhook_configured"] = bool(self.webhook_url)
        return info


def resolve_config_path(config_path: Path | None = None) -> Path:
    """Explicit path, else ASKBOT_CONFIG, else askbot.yaml in the cwd."""
    if config_path is not None:
        return config_path
    return Path(os.environ.get("ASKBOT_CONFIG", "") or DEFAULT_CONFIG_FILENAME)


def load_bot_section(config_path: Path) -> dict[str, Any]:
    """Load the ``bot:`` section from a YAML file, returning {} on failure."""
    try:
        import yaml

        if not config_path.exists():
            return {}
        raw = yaml.safe_load(config_path.read_text())
        if isinstance(raw, dict) and isinstance(raw.get("bot"), dict):
            return raw["bot"]
    except Exception:
        logger.debug("Could not read bot config from %s", config_path, exc_info=True)
    return {}
