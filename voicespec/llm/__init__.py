"""Chat completion client module."""

from voicespec.llm.client import ChatClient, ChatClientError, LLMResponse

__all__ = ["ChatClient", "ChatClientError", "LLMResponse"]
