"""Configuration management for the Remembering Chatbot."""
import os
import logging
from dotenv import load_dotenv

# Load environment variables
load_dotenv()

# API Keys
GROQ_API_KEY = os.getenv("GROQ_API_KEY")
SUPABASE_URL = os.getenv("SUPABASE_URL")
SUPABASE_KEY = os.getenv("SUPABASE_KEY")

# Server Configuration
PORT = int(os.getenv("PORT", "8000"))
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")
LOG_FORMAT = os.getenv("LOG_FORMAT", "text")

# CORS Configuration
CORS_ORIGINS = os.getenv(
    "CORS_ORIGINS",
    "http://localhost:3000,http://localhost:8000"
).split(",")

# Model Configuration (fixed per deployment)
CHAT_MODEL = os.getenv("CHAT_MODEL", "llama-3.1-8b-instant")
MAX_TOKENS = 500
TEMPERATURE = 0.7

SYSTEM_PROMPT = (
    "You are a helpful chatbot with a perfect memory. You remember ALL previous "
    "conversations with the user and refer back to them. Use what you learned "
    "earlier to give better answers."
)

# Memory Configuration
CONTEXT_EXCHANGES = 30  # exchanges replayed from the durable log
SESSION_MAX_TURNS = 30  # role-tagged turns kept per session

# Storage Configuration
STORAGE_BACKEND = os.getenv("STORAGE_BACKEND", "file")  # file | supabase | memory
CONVERSATIONS_FILE = os.getenv("CONVERSATIONS_FILE", "/tmp/conversations.json")
SUPABASE_TABLE = os.getenv("SUPABASE_TABLE", "memory_store")
SUPABASE_LOG_KEY = os.getenv("SUPABASE_LOG_KEY", "conversations")

# Session Configuration
SESSION_COOKIE_NAME = os.getenv("SESSION_COOKIE_NAME", "chat_session")
SESSION_TTL_SECONDS = int(os.getenv("SESSION_TTL_SECONDS", str(24 * 60 * 60)))

# Logging Configuration
logging.basicConfig(
    level=getattr(logging, LOG_LEVEL),
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
)
