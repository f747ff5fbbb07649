"""Main entry point for the Remembering Chatbot API."""
import json
import logging
import os
from typing import Any, Dict, Optional, Tuple

import tiktoken
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import FileResponse, JSONResponse
from fastapi.staticfiles import StaticFiles
from pydantic import ValidationError

from config import (
    PORT, LOG_LEVEL, LOG_FORMAT, CORS_ORIGINS, CHAT_MODEL, MAX_TOKENS, TEMPERATURE,
    SYSTEM_PROMPT, CONTEXT_EXCHANGES, SESSION_MAX_TURNS, STORAGE_BACKEND,
    CONVERSATIONS_FILE, SUPABASE_URL, SUPABASE_KEY, SUPABASE_TABLE, SUPABASE_LOG_KEY,
    SESSION_COOKIE_NAME, SESSION_TTL_SECONDS,
)
from logger import setup_logging
from models.api import ChatRequest, ChatResponse, ErrorResponse, ResetResponse
from services.chat_orchestrator import ChatOrchestrator, MessageValidationError
from services.context_builder import ContextBuilder
from services.conversation_log import ConversationLog
from services.llm_client import LLMClient, LLMClientError
from services.session_memory import SessionStore
from services.storage import create_storage

# Initialize logging
setup_logging(LOG_LEVEL, LOG_FORMAT)
logger = logging.getLogger(__name__)

STATIC_DIR = os.path.join(os.path.dirname(os.path.abspath(__file__)), "static")

# Initialize FastAPI app
app = FastAPI(
    title="Remembering Chatbot",
    description="Chatbot that remembers every previous conversation",
    version="1.0.0"
)

# Configure CORS
app.add_middleware(
    CORSMiddleware,
    allow_origins=CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.mount("/static", StaticFiles(directory=STATIC_DIR), name="static")

# Initialize services (will be done on startup)
session_store: SessionStore = SessionStore(ttl_seconds=SESSION_TTL_SECONDS, max_turns=SESSION_MAX_TURNS)
orchestrator: ChatOrchestrator = None


@app.on_event("startup")
async def startup_event():
    """Initialize services on startup."""
    global orchestrator

    logger.info("Initializing Remembering Chatbot services...")

    try:
        storage = create_storage(
            STORAGE_BACKEND,
            file_path=CONVERSATIONS_FILE,
            supabase_url=SUPABASE_URL,
            supabase_key=SUPABASE_KEY,
            table_name=SUPABASE_TABLE,
            key=SUPABASE_LOG_KEY
        )
        logger.info(f"Initialized storage backend: {STORAGE_BACKEND}")

        conversation_log = ConversationLog(storage)
        context_builder = ContextBuilder(conversation_log, max_exchanges=CONTEXT_EXCHANGES)

        llm_client = LLMClient()
        logger.info("Initialized LLMClient")

        # Only used to estimate prompt size in logs
        token_encoder = tiktoken.get_encoding("o200k_base")

        orchestrator = ChatOrchestrator(
            llm_client=llm_client,
            conversation_log=conversation_log,
            context_builder=context_builder,
            session_store=session_store,
            model=CHAT_MODEL,
            system_prompt=SYSTEM_PROMPT,
            max_tokens=MAX_TOKENS,
            temperature=TEMPERATURE,
            token_encoder=token_encoder
        )
        logger.info(f"All services initialized successfully (model={CHAT_MODEL})")
    except Exception as e:
        logger.error(f"Failed to initialize services: {e}", exc_info=True)
        raise


def _resolve_session_id(request: Request) -> Tuple[str, bool]:
    """
    Return (session_id, is_new). A missing, unknown or expired cookie gets a fresh id.
    """
    session_id: Optional[str] = request.cookies.get(SESSION_COOKIE_NAME)
    if session_store.is_active(session_id):
        return session_id, False
    return session_store.new_session_id(), True


async def _read_message(request: Request) -> Optional[str]:
    """
    Extract `message` from a JSON or form-encoded body.

    A missing body, unparseable JSON or a non-string message comes back as
    None, which the orchestrator rejects as empty.
    """
    content_type = request.headers.get("content-type", "")
    payload: Dict[str, Any] = {}

    if content_type.startswith(("application/x-www-form-urlencoded", "multipart/form-data")):
        payload = dict(await request.form())
    else:
        raw = await request.body()
        if raw.strip():
            try:
                parsed = json.loads(raw)
            except ValueError:
                logger.warning("Ignoring chat request body that is not valid JSON")
                parsed = None
            if isinstance(parsed, dict):
                payload = parsed

    try:
        return ChatRequest.model_validate(payload).message
    except ValidationError:
        return None


def _with_session_cookie(response: JSONResponse, session_id: str, is_new: bool) -> JSONResponse:
    if is_new:
        response.set_cookie(
            SESSION_COOKIE_NAME,
            session_id,
            max_age=SESSION_TTL_SECONDS,
            httponly=True,
            samesite="lax"
        )
    return response


@app.get("/")
async def index():
    """Landing page."""
    return FileResponse(os.path.join(STATIC_DIR, "index.html"))


@app.get("/chat")
async def chat_page():
    """Chat page."""
    return FileResponse(os.path.join(STATIC_DIR, "chat.html"))


@app.get("/health")
async def health():
    """Detailed health check."""
    return {
        "status": "healthy",
        "service": "remembering-chatbot",
        "version": "1.0.0",
        "active_sessions": len(session_store)
    }


@app.post("/api/chat")
async def chat_endpoint(request: Request) -> JSONResponse:
    """
    Answer one chat message using session memory and the durable conversation log.

    Returns:
        200 {reply} on success, 400 {error, details} for an empty message,
        500 {error, details} when the model call or anything else fails
    """
    session_id, is_new = _resolve_session_id(request)

    try:
        reply = await orchestrator.chat(session_id, await _read_message(request))
        response = JSONResponse(status_code=200, content=ChatResponse(reply=reply).model_dump())

    except MessageValidationError as e:
        response = JSONResponse(
            status_code=400,
            content=ErrorResponse(error="Message must not be empty", details=str(e)).model_dump()
        )
    except LLMClientError as e:
        logger.error(f"Chat error: {e.error.code}: {e.error.message}")
        response = JSONResponse(
            status_code=500,
            content=ErrorResponse(
                error="An error occurred",
                details=str(e.error.details.get("original_error", e.error.message))
            ).model_dump()
        )
    except Exception as e:
        logger.error(f"Unexpected chat error: {e}", exc_info=True)
        response = JSONResponse(
            status_code=500,
            content=ErrorResponse(error="An error occurred", details=str(e)).model_dump()
        )

    return _with_session_cookie(response, session_id, is_new)


@app.post("/api/reset")
async def reset_endpoint(request: Request) -> JSONResponse:
    """Delete all stored conversations and the caller's session memory."""
    session_id, is_new = _resolve_session_id(request)

    try:
        await orchestrator.reset(session_id)
        response = JSONResponse(
            status_code=200,
            content=ResetResponse(message="All conversations deleted").model_dump()
        )
    except Exception as e:
        logger.error(f"Reset error: {e}", exc_info=True)
        response = JSONResponse(
            status_code=500,
            content=ErrorResponse(error=str(e)).model_dump(exclude_none=True)
        )

    return _with_session_cookie(response, session_id, is_new)


if __name__ == "__main__":
    import uvicorn
    logger.info(f"Starting Remembering Chatbot API on port {PORT}")
    uvicorn.run(app, host="0.0.0.0", port=PORT)
