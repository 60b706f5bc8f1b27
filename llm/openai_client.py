"""
OpenAI chat client with circuit breaker protection.
"""

import logging
from typing import Optional

from chunking.exceptions import ExternalCallError
from shared.circuit_breaker import CircuitOpenError, get_llm_breaker
from shared.config import get_settings

from .base import ChatClient, ChatOptions

logger = logging.getLogger(__name__)


class OpenAIChatClient(ChatClient):
    """
    Async OpenAI chat completions.

    Usage:
        client = OpenAIChatClient(model="gpt-4.1-mini")
        reply = await client.complete("You are ...", "ID 0: ...")
    """

    def __init__(
        self,
        api_key: str = None,
        model: str = None,
        max_tokens: int = None,
        timeout: int = None,
        client=None,
    ):
        settings = get_settings()
        self.api_key = api_key or settings.OPENAI_API_KEY
        self.model = model or settings.llm.model
        self.max_tokens = max_tokens or settings.llm.max_tokens
        self.timeout = timeout or settings.llm.timeout
        self._client = client

    @property
    def client(self):
        """Lazy load OpenAI client."""
        if self._client is None:
            from openai import AsyncOpenAI

            self._client = AsyncOpenAI(api_key=self.api_key, timeout=self.timeout)
        return self._client

    async def complete(
        self, system_prompt: str, user_message: str, options: Optional[ChatOptions] = None
    ) -> str:
        options = options or ChatOptions()
        breaker = get_llm_breaker()

        messages = [
            {"role": "system", "content": system_prompt},
            {"role": "user", "content": user_message},
        ]
        try:
            response = await breaker.call_async(
                self.client.chat.completions.create,
                model=self.model,
                messages=messages,
                temperature=options.temperature,
                max_tokens=options.max_tokens or self.max_tokens,
            )
        except CircuitOpenError:
            raise
        except Exception as e:
            logger.error(f"Chat completion failed: {e}")
            raise ExternalCallError("Chat completion failed.") from e

        content = response.choices[0].message.content or ""
        logger.debug(f"Chat model {self.model} replied: {content!r}")
        return content
