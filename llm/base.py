"""Chat client interface."""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Optional


@dataclass
class ChatOptions:
    """Per-call generation settings."""

    temperature: float = 0.1
    max_tokens: Optional[int] = None


class ChatClient(ABC):
    """Single-turn chat completion."""

    @abstractmethod
    async def complete(
        self, system_prompt: str, user_message: str, options: Optional[ChatOptions] = None
    ) -> str:
        """Return the assistant reply text."""
