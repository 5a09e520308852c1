"""Slack bot that answers a slash-command question with the model.

Flow for each ``/ask`` command: acknowledge immediately, post a placeholder
message (the primary reply), ask the model, then edit the primary reply
with the first chunk of the answer and post the remaining chunks, in order,
as thread replies. Failures are reported through an ``error.txt``
attachment, with a plain-text fallback if the upload itself fails.

Connects via Socket Mode. Lifecycle is ``AskBot(...)`` -> ``start()`` ->
``stop()``; nothing is kept at module level.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any

from askbot.answer import AnswerClient
from askbot.chunker import split_message
from askbot.commands import ask_command, build_manifest, register_commands
from askbot.config import BotConfig
from askbot.webhook import send_webhook_message

logger = logging.getLogger(__name__)

APP_NAME = "askbot"

PLACEHOLDER_TEXT = "Thinking..."
NO_RESPONSE_TEXT = "No response from the model."
USAGE_TEXT = "Usage: {command} [your question]"
ERROR_ATTACHMENT_TEXT = ":x: Error -- see attached file."
ERROR_FALLBACK_TEXT = ":x: Error fetching response from the model."
UNKNOWN_ERROR_TEXT = "Unknown error from the model"
ERROR_FILENAME = "error.txt"


@dataclass
class AskBot:
    """Slash-command question relay between Slack and the model.

    Args:
        config: Bot configuration.
        app: Optional pre-built slack_bolt.App (for testing).
        answer_client: Optional pre-built AnswerClient (for testing).
    """

    config: BotConfig
    app: Any = field(default=None, repr=False)
    answer_client: AnswerClient | None = field(default=None, repr=False)
    _bot_user_id: str = field(default="", init=False, repr=False)
    _handler: Any = field(default=None, init=False, repr=False)

    def __post_init__(self) -> None:
        if self.app is None:
            from slack_bolt import App

            self.app = App(token=self.config.slack_bot_token)

        if self.answer_client is None:
            self.answer_client = AnswerClient(
                api_key=self.config.anthropic_api_key,
                model=self.config.model,
                max_tokens=self.config.max_response_tokens,
            )

        self.app.command(ask_command(self.config.command).command)(self.handle_ask)

    # -- Lifecycle ----------------------------------------------------------

    def start(self) -> None:
        """Register commands, announce startup, and connect (blocking)."""
        from slack_bolt.adapter.socket_mode import SocketModeHandler

        self.register()

        try:
            auth = self.app.client.auth_test()
            self._bot_user_id = auth.get("user_id", "")
            logger.info("Logged in as %s (%s)", auth.get("user", ""), self._bot_user_id)
        except Exception:
            logger.warning("Could not resolve bot identity via auth.test")

        if self.config.startup_notice:
            send_webhook_message(
                self.config.startup_notice,
                self.config.webhook_url,
                username=self.config.webhook_username,
            )

        logger.info("Starting Slack bot via Socket Mode...")
        self._handler = SocketModeHandler(self.app, self.config.slack_app_token)
        self._handler.start()

    def stop(self) -> None:
        """Close the Socket Mode connection. Safe to call more than once."""
        handler, self._handler = self._handler, None
        if handler is None:
            return
        logger.info("Shutting down Slack bot")
        try:
            handler.close()
        except Exception:
            logger.exception("Error closing Socket Mode handler")

    def register(self) -> bool:
        """Push the slash-command manifest. Failures are logged, not raised.

        Returns:
            True if the commands were registered.
        """
        if not self.config.can_register_commands:
            logger.info(
                "SLACK_APP_ID/SLACK_CONFIG_TOKEN not set -- "
                "skipping command registration"
            )
            return False

        from slack_sdk import WebClient

        manifest = build_manifest(APP_NAME, [ask_command(self.config.command)])
        try:
            register_commands(
                WebClient(token=self.config.slack_config_token),
                self.config.slack_app_id,
                manifest,
            )
        except Exception:
            logger.error("Command registration error (continuing)", exc_info=True)
            return False
        return True

    # -- Command handling ---------------------------------------------------

    def handle_ask(
        self,
        ack: Any,
        command: dict[str, Any],
        client: Any,
        respond: Any,
    ) -> None:
        """Answer one slash command. Never raises into slack_bolt."""
        ack()

        question = command.get("text", "").strip()
        channel = command.get("channel_id", "")
        user_id = command.get("user_id", "")
        logger.info("%s from user=%s channel=%s", self.config.command, user_id, channel)

        if not question:
            respond(
                text=USAGE_TEXT.format(command=self.config.command),
                response_type="ephemeral",
            )
            return

        primary_ts = ""
        try:
            posted = client.chat_postMessage(channel=channel, text=PLACEHOLDER_TEXT)
            primary_ts = posted["ts"]

            answer = self.answer_client.ask(
                question,
                prefix=self.config.prompt_prefix,
                model=self.config.model,
            )
            if not answer:
                client.chat_update(channel=channel, ts=primary_ts, text=NO_RESPONSE_TEXT)
                return

            self.send_chunks(client, channel, primary_ts, answer)

        except Exception as exc:
            logger.exception("Error handling %s", self.config.command)
            self.report_error(client, respond, channel, primary_ts, exc)

    def send_chunks(
        self,
        client: Any,
        channel: str,
        primary_ts: str,
        answer: str,
    ) -> int:
        """Edit the primary reply with the first chunk, then post the rest.

        Returns:
            Number of messages the answer was spread over.
        """
        chunks = split_message(answer, self.config.max_message_len)
        first, rest = chunks[0], chunks[1:]
        client.chat_update(channel=channel, ts=primary_ts, text=first)
        for chunk in rest:
            client.chat_postMessage(channel=channel, text=chunk, thread_ts=primary_ts)
        if rest:
            logger.info("Answer split into %d messages", len(chunks))
        return len(chunks)

    def report_error(
        self,
        client: Any,
        respond: Any,
        channel: str,
        primary_ts: str,
        exc: BaseException,
    ) -> None:
        """Tell the user the command failed, attaching the error text."""
        details = str(exc) or UNKNOWN_ERROR_TEXT
        try:
            if primary_ts:
                client.chat_update(
                    channel=channel, ts=primary_ts, text=ERROR_ATTACHMENT_TEXT
                )
            else:
                respond(text=ERROR_ATTACHMENT_TEXT, response_type="ephemeral")
            upload: dict[str, Any] = {
                "channel": channel,
                "content": details,
                "filename": ERROR_FILENAME,
                "title": ERROR_FILENAME,
                "initial_comment": ERROR_ATTACHMENT_TEXT,
            }
            if primary_ts:
                upload["thread_ts"] = primary_ts
            client.files_upload_v2(**upload)
        except Exception:
            logger.exception("Fallback file send failed")
            try:
                if primary_ts:
                    client.chat_update(
                        channel=channel, ts=primary_ts, text=ERROR_FALLBACK_TEXT
                    )
                else:
                    respond(text=ERROR_FALLBACK_TEXT, response_type="ephemeral")
            except Exception:
                logger.exception("Could not deliver error message")
