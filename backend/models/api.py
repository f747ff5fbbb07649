"""Request and response models for the HTTP API."""
from typing import Optional
from pydantic import BaseModel, Field


class ChatRequest(BaseModel):
    """Body of POST /api/chat. Emptiness is checked by the orchestrator, not here."""
    message: Optional[str] = Field(None, description="User's latest message")


class ChatResponse(BaseModel):
    reply: str


class ErrorResponse(BaseModel):
    error: str
    details: Optional[str] = None


class ResetResponse(BaseModel):
    success: bool = True
    message: str
