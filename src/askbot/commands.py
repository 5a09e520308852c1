"""Slash-command definitions and app-manifest registration.

Slack registers slash commands through the app manifest rather than a
per-command endpoint. ``build_manifest`` renders the manifest for the
commands the bot serves; ``register_commands`` pushes it with
``apps.manifest.update`` when an app-configuration token is available.
"""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass
from typing import Any

logger = logging.getLogger(__name__)

# Bot scopes needed to answer: receive commands, post/edit messages, upload files
BOT_SCOPES = ("commands", "chat:write", "files:write")


class CommandRegistrationError(Exception):
    """Pushing the app manifest to Slack failed."""


@dataclass(frozen=True)
class SlashCommand:
    """A slash command as declared in the app manifest."""

    command: str
    description: str
    usage_hint: str = ""

    def to_manifest(self) -> dict[str, Any]:
        entry: dict[str, Any] = {
            "command": self.command,
            "description": self.description,
            "should_escape": False,
        }
        if self.usage_hint:
            entry["usage_hint"] = self.usage_hint
        return entry


def ask_command(name: str = "/ask") -> SlashCommand:
    """The question command, under a configurable name."""
    if not name.startswith("/"):
        name = f"/{name}"
    return SlashCommand(
        command=name,
        description="Ask the model a question",
        usage_hint="[your question]",
    )


def build_manifest(
    app_name: str,
    commands: list[SlashCommand],
) -> dict[str, Any]:
    """Build a Socket Mode app manifest declaring the given commands.

    Args:
        app_name: Display name of the app and its bot user.
        commands: Slash commands to declare.

    Returns:
        Manifest dict, ready for YAML/JSON serialization.
    """
    return {
        "display_information": {"name": app_name},
        "features": {
            "bot_user": {"display_name": app_name, "always_online": True},
            "slash_commands": [c.to_manifest() for c in commands],
        },
        "oauth_config": {"scopes": {"bot": list(BOT_SCOPES)}},
        "settings": {
            "interactivity": {"is_enabled": True},
            "org_deploy_enabled": False,
            "socket_mode_enabled": True,
            "token_rotation_enabled": False,
        },
    }


def register_commands(client: Any, app_id: str, manifest: dict[str, Any]) -> None:
    """Push the manifest to Slack so the commands become available.

    Args:
        client: slack_sdk WebClient authenticated with an app-configuration
            token.
        app_id: ID of the app to update.
        manifest: Manifest from build_manifest().

    Raises:
        CommandRegistrationError: If Slack rejects the update.
    """
    names = [c["command"] for c in manifest["features"]["slash_commands"]]
    logger.info("Registering slash commands %s for app %s", names, app_id)
    try:
        client.apps_manifest_update(app_id=app_id, manifest=json.dumps(manifest))
    except Exception as exc:
        logger.error("Failed to register commands: %s", exc)
        raise CommandRegistrationError(str(exc)) from exc
    logger.info("Registered commands for app %s", app_id)
