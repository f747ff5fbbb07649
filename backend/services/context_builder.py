"""Long-term memory context derived from the durable conversation log."""
import logging
from typing import Dict, List

from models.conversation import USER_ROLE, ASSISTANT_ROLE
from services.conversation_log import ConversationLog

logger = logging.getLogger(__name__)


class ContextBuilder:
    """Replays the most recent exchanges as role-tagged chat messages."""

    def __init__(self, conversation_log: ConversationLog, max_exchanges: int = 30):
        self.conversation_log = conversation_log
        self.max_exchanges = max_exchanges

    async def build(self) -> List[Dict[str, str]]:
        """
        Build the context window from the log's current stored state.

        Returns:
            Two messages (user, then assistant) per exchange for the last
            `max_exchanges` exchanges, oldest first; empty for an empty log
        """
        exchanges = await self.conversation_log.load()
        recent = exchanges[-self.max_exchanges:] if self.max_exchanges > 0 else []

        messages: List[Dict[str, str]] = []
        for exchange in recent:
            messages.append({"role": USER_ROLE, "content": exchange.user})
            messages.append({"role": ASSISTANT_ROLE, "content": exchange.bot})

        logger.debug(f"Built context from {len(recent)} of {len(exchanges)} exchanges")
        return messages
