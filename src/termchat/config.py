import logging
import os
from dataclasses import dataclass, fields
from typing import Any, Optional

logger = logging.getLogger(__name__)

DEFAULT_API_URL = "https://openrouter.ai/api/v1/chat/completions"
DEFAULT_MODEL = "mistralai/mixtral-8x7b-instruct"
DEFAULT_SYSTEM_PROMPT = (
    "You are a helpful AI assistant. Provide accurate, concise, and friendly responses."
)
MAX_TOKENS = 1000
TEMPERATURE = 0.7


class ConfigError(Exception):
    pass


def get_required_env(name: str) -> str:
    value = os.environ.get(name)
    if not value or not value.strip():
        raise ConfigError(f"Required environment variable {name} is not set")
    return value.strip()


def get_optional_env(name: str, default: str) -> str:
    return os.environ.get(name, default)


def _optional_number(name: str, kind: type) -> Any:
    raw = os.environ.get(name)
    if raw is None or not raw.strip():
        return None
    try:
        return kind(raw.strip())
    except ValueError:
        raise ConfigError(f"{name} must be a valid {kind.__name__}, got {raw!r}") from None


@dataclass
class ChatConfig:
    api_key: str
    api_url: str = DEFAULT_API_URL
    model: str = DEFAULT_MODEL
    system_prompt: str = DEFAULT_SYSTEM_PROMPT
    max_tokens: int = MAX_TOKENS
    temperature: float = TEMPERATURE
    max_context_messages: Optional[int] = None
    timeout: Optional[float] = None

    @classmethod
    def from_env(cls, **overrides: Any) -> "ChatConfig":
        """Resolve configuration once: overrides, then environment, then defaults.

        Call ``dotenv.load_dotenv()`` first to pull in a ``.env`` file; it does
        not replace variables that are already set.
        """
        known = {f.name for f in fields(cls)}
        unknown = set(overrides) - known
        if unknown:
            raise ConfigError(f"Unknown config option(s): {', '.join(sorted(unknown))}")

        values: dict[str, Any] = {
            "api_url": get_optional_env("TERMCHAT_API_URL", DEFAULT_API_URL),
            "model": get_optional_env("TERMCHAT_MODEL", DEFAULT_MODEL),
            "system_prompt": get_optional_env("TERMCHAT_SYSTEM_PROMPT", DEFAULT_SYSTEM_PROMPT),
            "max_context_messages": _optional_number("TERMCHAT_MAX_CONTEXT_MESSAGES", int),
            "timeout": _optional_number("TERMCHAT_TIMEOUT", float),
        }
        values.update(overrides)
        if "api_key" not in values:
            values["api_key"] = get_required_env("OPENROUTER_API_KEY")

        config = cls(**values)
        config.validate()
        logger.debug(
            "Resolved config: url=%s model=%s max_context_messages=%s timeout=%s",
            config.api_url,
            config.model,
            config.max_context_messages,
            config.timeout,
        )
        return config

    def validate(self) -> None:
        if not self.api_key or not self.api_key.strip():
            raise ConfigError("api_key must not be empty")
        if not self.api_url.startswith("https://"):
            raise ConfigError(f"api_url must use https, got {self.api_url!r}")
        if not self.model.strip():
            raise ConfigError("model must not be empty")
        if self.max_context_messages is not None and self.max_context_messages < 2:
            raise ConfigError("max_context_messages must be at least 2")
        if self.timeout is not None and self.timeout <= 0:
            raise ConfigError("timeout must be > 0 when set")
