"""Integration tests for LLMClient with Groq API.

These tests require a valid GROQ_API_KEY in the environment.
They will be skipped if the API key is not available.
"""
import sys
import os
sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..', 'backend'))

import asyncio
import pytest
from services.llm_client import LLMClient, LLMResponse

MODEL = os.getenv("CHAT_MODEL", "llama-3.1-8b-instant")


@pytest.mark.skipif(
    not os.getenv("GROQ_API_KEY"),
    reason="GROQ_API_KEY not set in environment"
)
class TestLLMClientIntegration:
    """Integration tests for LLMClient with real Groq API."""

    @pytest.fixture
    def client(self):
        """Create LLMClient instance."""
        return LLMClient()

    def test_generate_replies(self, client):
        messages = LLMClient.build_messages(
            system_prompt="You are a helpful chatbot. Answer in one short sentence.",
            session_messages=[{"role": "user", "content": "Say hello."}]
        )

        response = asyncio.run(client.generate(model=MODEL, messages=messages, max_tokens=30))

        assert isinstance(response, LLMResponse)
        assert len(response.text) > 0
        assert response.tokens_input > 0
        assert response.tokens_output > 0
        assert response.model_used == MODEL

    def test_generate_uses_replayed_context(self, client):
        messages = LLMClient.build_messages(
            system_prompt="You have a perfect memory of earlier conversations.",
            context_messages=[
                {"role": "user", "content": "My favourite colour is teal."},
                {"role": "assistant", "content": "Got it, teal is your favourite colour."},
            ],
            session_messages=[{"role": "user", "content": "What is my favourite colour? One word."}]
        )

        response = asyncio.run(client.generate(model=MODEL, messages=messages, max_tokens=10))

        assert "teal" in response.text.lower()
