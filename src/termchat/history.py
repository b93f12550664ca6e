from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Iterator, Optional, Tuple


class Role(str, Enum):
    SYSTEM = "system"
    USER = "user"
    ASSISTANT = "assistant"


@dataclass(frozen=True)
class ChatMessage:
    role: Role
    content: str

    @classmethod
    def create(cls, role: Role | str, content: Optional[str]) -> "ChatMessage":
        return cls(role=Role(role), content=content or "")


class MessageHistory:
    """Append-only conversation log. The system prompt is always first."""

    def __init__(self, system_prompt: str):
        self._messages: list[ChatMessage] = [ChatMessage.create(Role.SYSTEM, system_prompt)]

    @property
    def system_prompt(self) -> str:
        return self._messages[0].content

    def append(self, role: Role | str, content: Optional[str]) -> ChatMessage:
        message = ChatMessage.create(role, content)
        self._messages.append(message)
        return message

    def add_user_message(self, content: str) -> ChatMessage:
        return self.append(Role.USER, content)

    def add_assistant_message(self, content: str) -> ChatMessage:
        return self.append(Role.ASSISTANT, content)

    def snapshot(self) -> Tuple[ChatMessage, ...]:
        return tuple(self._messages)

    def window(self, max_messages: Optional[int] = None) -> Tuple[ChatMessage, ...]:
        """Messages to send on the next turn.

        With ``max_messages`` set, the oldest non-system messages are left out
        so that at most ``max_messages`` go over the wire. The store itself is
        never trimmed.
        """
        if max_messages is None or len(self._messages) <= max_messages:
            return self.snapshot()
        if max_messages < 2:
            raise ValueError("max_messages must leave room for the system prompt and one message")
        recent = self._messages[len(self._messages) - (max_messages - 1):]
        return (self._messages[0], *recent)

    def __len__(self) -> int:
        return len(self._messages)

    def __iter__(self) -> Iterator[ChatMessage]:
        return iter(self.snapshot())
