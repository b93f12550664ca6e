from termchat.codec import FALLBACK_TEXT, Reply, encode_request, extract_reply
from termchat.config import ChatConfig, ConfigError
from termchat.history import ChatMessage, MessageHistory, Role
from termchat.transport import ChatTransport, TransportError

__version__ = "0.1.0"

__all__ = [
    "FALLBACK_TEXT",
    "ChatConfig",
    "ChatMessage",
    "ChatTransport",
    "ConfigError",
    "MessageHistory",
    "Reply",
    "Role",
    "TransportError",
    "encode_request",
    "extract_reply",
]
