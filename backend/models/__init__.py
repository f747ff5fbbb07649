"""Data models for the Remembering Chatbot."""
from .conversation import Exchange, SessionTurn, USER_ROLE, ASSISTANT_ROLE, SYSTEM_ROLE
from .api import ChatRequest, ChatResponse, ErrorResponse, ResetResponse

__all__ = [
    "Exchange",
    "SessionTurn",
    "USER_ROLE",
    "ASSISTANT_ROLE",
    "SYSTEM_ROLE",
    "ChatRequest",
    "ChatResponse",
    "ErrorResponse",
    "ResetResponse",
]
