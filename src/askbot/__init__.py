"""askbot: Slack slash-command bot that relays questions to the model."""

__version__ = "0.1.0"

from askbot.chunker import (
    DEFAULT_MAX_LEN,
    InvalidConfigurationError,
    split_message,
)

__all__ = [
    "DEFAULT_MAX_LEN",
    "InvalidConfigurationError",
    "split_message",
]
