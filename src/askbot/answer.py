"""Anthropic Messages API wrapper that turns a question into answer text."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any

from askbot.config import DEFAULT_MODEL

logger = logging.getLogger(__name__)


class AnswerError(Exception):
    """The model call failed. The provider exception is chained as __cause__."""


def build_prompt(question: str, prefix: str | None = None) -> str:
    """Prepend an instruction prefix to the user's question."""
    if prefix:
        return f"{prefix} {question}"
    return question


@dataclass
class AnswerClient:
    """Ask the model one question at a time.

    Args:
        api_key: Anthropic API key.
        model: Default model name.
        max_tokens: Maximum tokens in the answer.
        client: Optional pre-built anthropic.Anthropic (for testing).
    """

    api_key: str
    model: str = DEFAULT_MODEL
    max_tokens: int = 1024
    client: Any = field(default=None, repr=False)

    def __post_init__(self) -> None:
        if self.client is None:
            import anthropic

            self.client = anthropic.Anthropic(api_key=self.api_key)

    def ask(
        self,
        question: str,
        *,
        prefix: str | None = None,
        model: str | None = None,
    ) -> str:
        """Send the question and return the answer text.

        Text blocks of the response are joined with newlines. A response
        without any text gives an empty string.

        Raises:
            AnswerError: If the API call fails for any reason.
        """
        model_name = model or self.model
        try:
            response = self.client.messages.create(
                model=model_name,
                max_tokens=self.max_tokens,
                messages=[
                    {"role": "user", "content": build_prompt(question, prefix)}
                ],
            )
        except Exception as exc:
            logger.exception("Model call failed (model=%s)", model_name)
            raise AnswerError(str(exc)) from exc

        parts = [block.text for block in response.content if hasattr(block, "text")]
        return "\n".join(parts)
