"""Per-session conversation memory and the store that keeps it alive."""
import logging
import time
import uuid
from dataclasses import dataclass
from typing import Callable, Dict, List, Optional

from models.conversation import SessionTurn, USER_ROLE, ASSISTANT_ROLE

logger = logging.getLogger(__name__)


def short_session_id(session_id: Optional[str]) -> str:
    """Session id prefix for log lines: `sess_` plus 8 hex characters, or `-` when absent."""
    return (session_id or "-")[:13]


class SessionMemory:
    """Ordered turns of the live conversation, capped at `max_turns` after each round."""

    def __init__(self, max_turns: int = 30):
        self.max_turns = max_turns
        self._turns: List[SessionTurn] = []

    def append_user(self, text: str) -> None:
        self._turns.append(SessionTurn(role=USER_ROLE, content=text))

    def append_assistant(self, text: str) -> None:
        self._turns.append(SessionTurn(role=ASSISTANT_ROLE, content=text))

    def trim(self) -> None:
        """Drop the oldest turns beyond `max_turns`. Called once per completed round."""
        if len(self._turns) > self.max_turns:
            self._turns = self._turns[-self.max_turns:]

    def reset(self) -> None:
        self._turns = []

    def turns(self) -> List[SessionTurn]:
        return list(self._turns)

    def messages(self) -> List[Dict[str, str]]:
        return [turn.to_message() for turn in self._turns]

    def __len__(self) -> int:
        return len(self._turns)


@dataclass
class _SessionEntry:
    memory: SessionMemory
    last_access: float


class SessionStore:
    """
    In-process mapping from session id to SessionMemory.

    Entries expire after `ttl_seconds` without access. Nothing serializes
    concurrent requests on the same session.
    """

    def __init__(
        self,
        ttl_seconds: int = 24 * 60 * 60,
        max_turns: int = 30,
        clock: Callable[[], float] = time.monotonic
    ):
        self.ttl_seconds = ttl_seconds
        self.max_turns = max_turns
        self._clock = clock
        self._sessions: Dict[str, _SessionEntry] = {}

    def new_session_id(self) -> str:
        """Generate an opaque session identifier."""
        return f"sess_{uuid.uuid4().hex}"

    def get(self, session_id: Optional[str]) -> Optional[SessionMemory]:
        """Return the live memory for `session_id`, or None if unknown or expired."""
        if not session_id:
            return None

        self.purge_expired()
        entry = self._sessions.get(session_id)
        if entry is None:
            return None

        entry.last_access = self._clock()
        return entry.memory

    def get_or_create(self, session_id: str) -> SessionMemory:
        """Return the memory for `session_id`, creating an empty one on first use."""
        memory = self.get(session_id)
        if memory is not None:
            return memory

        memory = SessionMemory(max_turns=self.max_turns)
        self._sessions[session_id] = _SessionEntry(memory=memory, last_access=self._clock())
        logger.info(f"Created session memory: {short_session_id(session_id)}")
        return memory

    def is_active(self, session_id: Optional[str]) -> bool:
        return self.get(session_id) is not None

    def purge_expired(self) -> int:
        """
        Evict sessions idle for longer than the TTL.

        Returns:
            Number of sessions evicted
        """
        now = self._clock()
        expired = [
            session_id for session_id, entry in self._sessions.items()
            if now - entry.last_access > self.ttl_seconds
        ]
        for session_id in expired:
            del self._sessions[session_id]

        if expired:
            logger.info(f"Expired {len(expired)} idle sessions")
        return len(expired)

    def __len__(self) -> int:
        return len(self._sessions)
