"""Outbound webhook notifier.

Posts a JSON payload to an incoming-webhook URL. The message goes in both
``text`` (Slack incoming webhooks) and ``content`` (Discord-style hooks),
so either kind of endpoint accepts it.
Stdlib-only (urllib). Never raises -- failures are logged and reported
through the return value so callers are never crashed by a notification.
"""

from __future__ import annotations

import json
import logging
import urllib.error
import urllib.request

logger = logging.getLogger(__name__)

DEFAULT_USERNAME = "Notification Bot"
WEBHOOK_TIMEOUT_S = 30


def send_webhook_message(
    content: str,
    url: str,
    *,
    username: str = DEFAULT_USERNAME,
) -> bool:
    """Post a message to the webhook URL.

    Args:
        content: Message text.
        url: Webhook URL. Empty means the notifier is not configured.
        username: Display name sent along with the message.

    Returns:
        True if the webhook accepted the message, False otherwise.
    """
    if not url:
        logger.info("WEBHOOK_URL not configured -- skipping webhook send")
        return False

    payload = {"text": content, "content": content, "username": username}
    body = json.dumps(payload).encode("utf-8")
    req = urllib.request.Request(
        url,
        data=body,
        headers={"Content-Type": "application/json"},
        method="POST",
    )

    try:
        with urllib.request.urlopen(req, timeout=WEBHOOK_TIMEOUT_S):
            pass
    except urllib.error.HTTPError as exc:
        logger.error("Webhook failed: %s %s", exc.code, exc.reason)
        return False
    except (urllib.error.URLError, OSError):
        logger.exception("Webhook error")
        return False

    logger.info("Webhook message sent")
    return True
