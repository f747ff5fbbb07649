"""Conversation data models."""
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Any, Dict, Optional

USER_ROLE = "user"
ASSISTANT_ROLE = "assistant"
SYSTEM_ROLE = "system"


@dataclass(frozen=True)
class Exchange:
    """One persisted user message and the bot reply it received."""
    user: str
    bot: str
    timestamp: Optional[datetime]

    @classmethod
    def create(cls, user: str, bot: str) -> "Exchange":
        """Create an exchange stamped with the current UTC time."""
        return cls(user=user, bot=bot, timestamp=datetime.now(timezone.utc))

    def to_dict(self) -> Dict[str, Optional[str]]:
        return {
            "timestamp": format_timestamp(self.timestamp) if self.timestamp else None,
            "user": self.user,
            "bot": self.bot,
        }

    @classmethod
    def from_dict(cls, data: Any) -> "Exchange":
        """
        Build an exchange from its stored form.

        A missing or unparseable timestamp becomes None; only `user` and
        `bot` are required.

        Raises:
            KeyError, TypeError: If the entry is not an object with string `user` and `bot`
        """
        if not isinstance(data, dict):
            raise TypeError(f"Expected an exchange object, got {type(data).__name__}")
        user, bot = data["user"], data["bot"]
        if not isinstance(user, str) or not isinstance(bot, str):
            raise TypeError("Exchange `user` and `bot` must be strings")

        try:
            timestamp = parse_timestamp(data.get("timestamp"))
        except (TypeError, ValueError):
            timestamp = None

        return cls(user=user, bot=bot, timestamp=timestamp)


@dataclass(frozen=True)
class SessionTurn:
    """A single role-tagged message in live session memory."""
    role: str
    content: str

    def to_message(self) -> Dict[str, str]:
        return {"role": self.role, "content": self.content}


def format_timestamp(timestamp: datetime) -> str:
    """Render a datetime as ISO-8601 UTC with millisecond precision and a trailing Z."""
    if timestamp.tzinfo is None:
        timestamp = timestamp.replace(tzinfo=timezone.utc)
    utc = timestamp.astimezone(timezone.utc)
    return utc.strftime("%Y-%m-%dT%H:%M:%S.") + f"{utc.microsecond // 1000:03d}Z"


def parse_timestamp(timestamp_str: Any) -> datetime:
    """
    Parse a stored timestamp.

    Stored values end in 'Z', which older fromisoformat() versions reject,
    so it is normalized to '+00:00' first.

    Raises:
        TypeError: If the value is not a string
        ValueError: If the string is not ISO-8601
    """
    if not isinstance(timestamp_str, str):
        raise TypeError(f"Expected a timestamp string, got {type(timestamp_str).__name__}")
    return datetime.fromisoformat(timestamp_str.replace("Z", "+00:00"))
