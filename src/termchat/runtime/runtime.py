import logging
from enum import Enum
from typing import Callable, Optional

from termchat.codec import Reply, encode_request, extract_reply
from termchat.config import ChatConfig
from termchat.history import MessageHistory
from termchat.transport import ChatTransport

logger = logging.getLogger(__name__)

REPLY_PREFIX = "AI : "
ERROR_REPLY = "Sorry, there was an error processing your request. Please try again."
EMPTY_REPLY = "Sorry, I couldn't generate a response. Please try again."


class TurnOutcome(Enum):
    EXIT = "exit"
    SKIPPED = "skipped"
    REPLIED = "replied"
    EMPTY_REPLY = "empty_reply"
    FAILED = "failed"


class ChatRuntime:
    def __init__(
        self,
        config: ChatConfig,
        transport: Optional[ChatTransport] = None,
        output_fn: Callable[[str], None] = print,
    ):
        self.config = config
        self.history = MessageHistory(config.system_prompt)
        self.transport = transport or ChatTransport(
            config.api_url, config.api_key, timeout=config.timeout
        )
        self.output = output_fn
        self.last_reply: Optional[Reply] = None

    def request_reply(self) -> Reply:
        messages = self.history.window(self.config.max_context_messages)
        body = encode_request(
            messages,
            self.config.model,
            max_tokens=self.config.max_tokens,
            temperature=self.config.temperature,
        )
        logger.debug("Sending %d of %d messages", len(messages), len(self.history))
        return extract_reply(self.transport.post(body))

    def process_user_message(self, text: str) -> TurnOutcome:
        self.history.add_user_message(text)

        try:
            reply = self.request_reply()
        except Exception as e:
            logger.error("Error getting AI response: %s", e)
            logger.debug("Turn failed", exc_info=True)
            self.output(REPLY_PREFIX + ERROR_REPLY)
            return TurnOutcome.FAILED

        self.last_reply = reply
        if not reply.text:
            self.output(REPLY_PREFIX + EMPTY_REPLY)
            return TurnOutcome.EMPTY_REPLY

        if not reply.parsed:
            logger.warning("Recording fallback text as the assistant reply")
        self.history.add_assistant_message(reply.text)
        self.output(REPLY_PREFIX + reply.text)
        return TurnOutcome.REPLIED
