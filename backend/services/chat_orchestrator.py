"""Turns one user message into one bot reply, coordinating all memory."""
import logging
from typing import Any, Dict, List, Optional

from services.context_builder import ContextBuilder
from services.conversation_log import ConversationLog
from services.llm_client import LLMClient
from services.session_memory import SessionStore, short_session_id

logger = logging.getLogger(__name__)


class MessageValidationError(ValueError):
    """Raised when the incoming user message is missing or blank."""


class ChatOrchestrator:
    """
    Single entry point for chat and reset requests.

    Per request: validate, append the user turn to session memory, build the
    long-term context, call the model, then on success record the reply in
    session memory and the durable log. A failed model call leaves the user
    turn in session memory and persists nothing.
    """

    def __init__(
        self,
        llm_client: LLMClient,
        conversation_log: ConversationLog,
        context_builder: ContextBuilder,
        session_store: SessionStore,
        model: str,
        system_prompt: str,
        max_tokens: int = 500,
        temperature: float = 0.7,
        token_encoder: Optional[Any] = None
    ):
        self.llm_client = llm_client
        self.conversation_log = conversation_log
        self.context_builder = context_builder
        self.session_store = session_store
        self.model = model
        self.system_prompt = system_prompt
        self.max_tokens = max_tokens
        self.temperature = temperature
        self.token_encoder = token_encoder

    async def chat(self, session_id: str, message: Optional[str]) -> str:
        """
        Answer one user message.

        Args:
            session_id: Opaque id of the caller's session
            message: Raw user message

        Returns:
            The model's reply text (possibly empty)

        Raises:
            MessageValidationError: If the message is missing or blank; no state is touched
            LLMClientError: If the completion call fails
        """
        if message is None or not message.strip():
            raise MessageValidationError("Message must not be empty")

        session = self.session_store.get_or_create(session_id)
        session.append_user(message)

        context_messages = await self.context_builder.build()
        messages = LLMClient.build_messages(
            system_prompt=self.system_prompt,
            context_messages=context_messages,
            session_messages=session.messages()
        )
        logger.info(
            f"Chat request: session={short_session_id(session_id)}, message_chars={len(message)}, "
            f"context_messages={len(context_messages)}, session_turns={len(session)}, "
            f"prompt_tokens~{self._count_tokens(messages)}"
        )

        llm_response = await self.llm_client.generate(
            model=self.model,
            messages=messages,
            max_tokens=self.max_tokens,
            temperature=self.temperature
        )
        reply = llm_response.text

        session.append_assistant(reply)
        await self.conversation_log.append(message, reply)
        session.trim()

        return reply

    async def reset(self, session_id: Optional[str]) -> None:
        """
        Forget everything: the durable log and the caller's session memory.

        Raises:
            StorageError: If the durable log cannot be cleared; session memory is left as is
        """
        await self.conversation_log.clear()

        session = self.session_store.get(session_id)
        if session is not None:
            session.reset()
        logger.info(f"Reset conversations for session={short_session_id(session_id)}")

    def _count_tokens(self, messages: List[Dict[str, str]]) -> Optional[int]:
        """Estimate prompt size for logging; None when no encoder is configured."""
        if self.token_encoder is None:
            return None
        return sum(len(self.token_encoder.encode(m["content"])) for m in messages)
