"""Split long model answers into messages that fit the chat platform limit.

Pure functions -- no I/O, no shared state. Paragraph boundaries (a blank
line, i.e. ``"\\n\\n"``) are the only soft break points; a paragraph that
is longer than the limit on its own is hard-sliced into fixed-width pieces.
"""

from __future__ import annotations

# Single-message character ceiling of the chat platform
DEFAULT_MAX_LEN = 2000

PARAGRAPH_SEPARATOR = "\n\n"


class InvalidConfigurationError(ValueError):
    """Raised when a message length limit is not a positive integer."""


def validate_max_len(max_len: int) -> int:
    """Return max_len unchanged, or raise if it cannot bound a chunk."""
    if isinstance(max_len, bool) or not isinstance(max_len, int) or max_len < 1:
        raise InvalidConfigurationError(
            f"max_len must be a positive integer, got {max_len!r}"
        )
    return max_len


def hard_slice(text: str, max_len: int) -> list[str]:
    """Cut text into consecutive max_len pieces (the last may be shorter)."""
    return [text[i : i + max_len] for i in range(0, len(text), max_len)]


def split_message(text: str, max_len: int = DEFAULT_MAX_LEN) -> list[str]:
    """Split text into chunks of at most max_len characters.

    Paragraphs are packed greedily, joined with a blank line, and a chunk is
    flushed when the next paragraph would push it past max_len. Joining the
    chunks back with ``"\\n\\n"`` at paragraph splits (and with nothing at
    hard-slice splits) reproduces the input.

    Args:
        text: Text to split. May be empty.
        max_len: Maximum characters per chunk.

    Returns:
        Ordered chunks. Empty input gives an empty list.

    Raises:
        InvalidConfigurationError: If max_len is less than 1.
    """
    validate_max_len(max_len)
    if not text:
        return []
    if len(text) <= max_len:
        return [text]

    chunks: list[str] = []
    # None means nothing buffered; "" is a buffered empty paragraph
    buffer: str | None = None

    for paragraph in text.split(PARAGRAPH_SEPARATOR):
        if buffer is None:
            candidate = paragraph
        else:
            candidate = buffer + PARAGRAPH_SEPARATOR + paragraph
        if len(candidate) <= max_len:
            buffer = candidate
            continue

        if buffer:
            chunks.append(buffer)
            pending = paragraph
        else:
            # An empty paragraph cannot be sent alone; keep its separator
            pending = candidate
        # Text that cannot fit even on its own is sliced right away
        if len(pending) > max_len:
            chunks.extend(hard_slice(pending, max_len))
            buffer = None
        else:
            buffer = pending

    if buffer:
        chunks.append(buffer)
    return chunks
