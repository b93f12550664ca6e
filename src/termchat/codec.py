"""String-level JSON handling for chat-completion requests and responses.

The request body is assembled by hand and the reply is located by substring
search instead of a full parse. Only backslash, double quote, newline,
carriage return and tab are escaped; any other control character in message
content produces invalid JSON.

The reply decoder takes the first ``"content":"`` in the body. A response that
carries that key earlier (metadata, nested objects) is mis-extracted.
"""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass
from typing import Iterable

from termchat.history import ChatMessage

logger = logging.getLogger(__name__)

FALLBACK_TEXT = "Unable to parse response"
CONTENT_MARKER = '"content":"'

_ROLE_FIELD = '"role": "'
_CONTENT_FIELD = '"content": "'

_ESCAPES = (
    ("\\", "\\\\"),
    ('"', '\\"'),
    ("\n", "\\n"),
    ("\r", "\\r"),
    ("\t", "\\t"),
)

# Quote before backslash: a raw `\\"` is ambiguous under sequential replacement.
_UNESCAPES = (
    ('\\"', '"'),
    ("\\\\", "\\"),
    ("\\n", "\n"),
    ("\\r", "\r"),
    ("\\t", "\t"),
)


@dataclass(frozen=True)
class Reply:
    text: str
    parsed: bool = True


def escape_json(value: str | None) -> str:
    if value is None:
        return ""
    for raw, escaped in _ESCAPES:
        value = value.replace(raw, escaped)
    return value


def unescape_json(value: str | None) -> str:
    if value is None:
        return ""
    for escaped, raw in _UNESCAPES:
        value = value.replace(escaped, raw)
    return value


def encode_request(
    messages: Iterable[ChatMessage],
    model: str,
    max_tokens: int = 1000,
    temperature: float = 0.7,
) -> str:
    entries = [
        f'{{"role": "{escape_json(m.role.value)}","content": "{escape_json(m.content)}"}}'
        for m in messages
    ]
    return (
        f'{{"model": "{escape_json(model)}",'
        f'"messages": [{",".join(entries)}],'
        f'"max_tokens": {max_tokens},'
        f'"temperature": {temperature}}}'
    )


def find_string_end(text: str, start: int) -> int:
    """Index of the first unescaped double quote at or after ``start``, or -1.

    A quote is escaped when an odd number of backslashes sits directly in
    front of it (not counting anything before ``start``).
    """
    for i in range(start, len(text)):
        if text[i] != '"':
            continue
        backslashes = 0
        j = i - 1
        while j >= start and text[j] == "\\":
            backslashes += 1
            j -= 1
        if backslashes % 2 == 0:
            return i
    return -1


def extract_reply(body: str) -> Reply:
    start = body.find(CONTENT_MARKER)
    if start == -1:
        logger.warning("Response has no %s marker, using fallback text", CONTENT_MARKER)
        return Reply(FALLBACK_TEXT, parsed=False)

    start += len(CONTENT_MARKER)
    end = find_string_end(body, start)
    if end == -1:
        logger.warning("Reply content is not terminated, using fallback text")
        return Reply(FALLBACK_TEXT, parsed=False)

    return Reply(unescape_json(body[start:end]))


def _read_field(payload: str, marker: str, pos: int) -> tuple[str, int] | None:
    idx = payload.find(marker, pos)
    if idx == -1:
        return None
    start = idx + len(marker)
    end = find_string_end(payload, start)
    if end == -1:
        raise ValueError(f"Unterminated string after {marker!r} at offset {idx}")
    # The literal is a valid JSON string, so let json undo the escapes in one pass.
    return json.loads(f'"{payload[start:end]}"'), end + 1


def decode_messages(payload: str) -> list[ChatMessage]:
    """Read the ``messages`` array back out of a body built by ``encode_request``."""
    pos = payload.find('"messages": [')
    if pos == -1:
        raise ValueError("Payload has no messages array")

    messages: list[ChatMessage] = []
    while True:
        role = _read_field(payload, _ROLE_FIELD, pos)
        if role is None:
            break
        role_value, pos = role
        content = _read_field(payload, _CONTENT_FIELD, pos)
        if content is None:
            raise ValueError(f"Message {len(messages)} has a role but no content")
        content_value, pos = content
        messages.append(ChatMessage.create(role_value, content_value))
    return messages
