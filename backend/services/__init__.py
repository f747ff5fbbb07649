"""Services for the Remembering Chatbot."""
from .storage import StorageBackend, StorageError, JsonFileStorage, SupabaseStorage, InMemoryStorage, create_storage
from .conversation_log import ConversationLog
from .context_builder import ContextBuilder
from .session_memory import SessionMemory, SessionStore
from .llm_client import LLMClient, LLMResponse, LLMError, LLMClientError
from .chat_orchestrator import ChatOrchestrator, MessageValidationError

__all__ = ['StorageBackend', 'StorageError', 'JsonFileStorage', 'SupabaseStorage', 'InMemoryStorage', 'create_storage', 'ConversationLog', 'ContextBuilder', 'SessionMemory', 'SessionStore', 'LLMClient', 'LLMResponse', 'LLMError', 'LLMClientError', 'ChatOrchestrator', 'MessageValidationError']
