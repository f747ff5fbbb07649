"""Durable conversation log: every exchange across all sessions."""
import logging
from typing import List

from models.conversation import Exchange
from services.storage import StorageBackend, StorageError

logger = logging.getLogger(__name__)


class ConversationLog:
    """
    Append-only record of exchanges, persisted as one JSON array.

    Every operation reads or writes the whole array. There is no locking:
    two appends running concurrently can both load the same array and the
    later write drops the earlier exchange.
    """

    def __init__(self, storage: StorageBackend):
        self.storage = storage

    async def load(self) -> List[Exchange]:
        """
        Load every stored exchange in insertion order.

        Returns:
            List of Exchange objects; empty when nothing is stored yet or
            when the stored value cannot be read or is not a list. Entries
            without string `user`/`bot` are skipped.
        """
        try:
            data = await self.storage.read()
            if data is None:
                return []
            if not isinstance(data, list):
                raise StorageError(f"Expected a list of exchanges, got {type(data).__name__}")
        except StorageError as e:
            logger.error(f"Load error, treating history as empty: {e}", exc_info=True)
            return []

        exchanges: List[Exchange] = []
        for index, entry in enumerate(data):
            try:
                exchanges.append(Exchange.from_dict(entry))
            except (KeyError, TypeError) as e:
                logger.warning(f"Skipping malformed exchange at index {index}: {e!r}")
        return exchanges

    async def append(self, user_text: str, bot_text: str) -> None:
        """
        Persist one exchange. Failures are logged and never raised.

        Args:
            user_text: The user's message
            bot_text: The bot's reply
        """
        try:
            exchanges = await self.load()
            exchanges.append(Exchange.create(user=user_text, bot=bot_text))
            await self.storage.write([exchange.to_dict() for exchange in exchanges])
            logger.debug(f"Saved exchange, log now holds {len(exchanges)} exchanges")
        except StorageError as e:
            logger.error(f"Save error: {e}", exc_info=True)

    async def clear(self) -> None:
        """
        Truncate the log to empty.

        Raises:
            StorageError: If the store cannot be overwritten
        """
        await self.storage.write([])
        logger.info("Cleared conversation log")
