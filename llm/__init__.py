"""
Chat model clients for LLM-guided chunking.

Usage:
    from llm import OpenAIChatClient, ChatOptions

    client = OpenAIChatClient()
    reply = await client.complete(system_prompt, message, ChatOptions(temperature=0.1))
"""

from .base import ChatClient, ChatOptions
from .openai_client import OpenAIChatClient

__all__ = ["ChatClient", "ChatOptions", "OpenAIChatClient"]
