"""
LLM-guided chunking ("LumberChunker").

Elements are gathered until the budget would overflow; a chat model then
reads the gathered paragraphs and names the first one where the topic
shifts. Everything before it becomes a run, the rest carries over.
"""

import logging
import re
from typing import List, Optional

from documents import Document, Element
from llm.base import ChatClient, ChatOptions

from .base import DocumentChunker
from .chunk import Chunk
from .options import ChunkerOptions
from .text_splitting import TextSplittingStrategy

logger = logging.getLogger(__name__)

LUMBER_SYSTEM_PROMPT = (
    "You will receive as input an english document with paragraphs identified "
    "by 'ID XXXX: <text>'.\n\n"
    "Task: Find the first paragraph (not the first one) where the content "
    "clearly changes compared to the previous paragraphs.\n\n"
    "Output: Return the ID of the paragraph with the content shift as in the "
    "exemplified format: 'Answer: ID XXXX'.\n\n"
    "Additional Considerations: Avoid very long groups of paragraphs. Aim for a "
    "good balance between identifying content shifts and keeping groups "
    "manageable.\n\n"
    "If there is no clear content shift, return 'Answer: ID -1'."
)

ANSWER_PATTERN = re.compile(r"Answer:\s*ID\s*(-?\d+)", re.IGNORECASE)


def parse_split_answer(reply: str) -> int:
    """
    Extract the paragraph ID from a model reply.

    Returns:
        The ID, -1 for "no shift", or 0 when the reply has no usable answer
    """
    match = ANSWER_PATTERN.search(reply or "")
    if not match:
        logger.warning(f"Unparseable split answer: {reply!r}")
        return 0
    return int(match.group(1))


class LumberChunker(DocumentChunker):
    """
    Usage:
        chunker = LumberChunker(OpenAIChatClient(), options)
        chunks = await chunker.process(document)
    """

    def __init__(
        self,
        chat_client: ChatClient,
        options: Optional[ChunkerOptions] = None,
        chat_options: Optional[ChatOptions] = None,
        splitting_strategy: Optional[TextSplittingStrategy] = None,
    ):
        super().__init__(options, splitting_strategy)
        self.chat_client = chat_client
        self.chat_options = chat_options or ChatOptions(temperature=0.1)

    async def _chunk(self, document: Document) -> List[Chunk]:
        max_tokens = self.options.max_tokens_per_chunk
        separator_tokens = self.options.count_tokens("\n")
        chunks: List[Chunk] = []
        pending: List[Element] = []
        pending_tokens: List[int] = []

        for element in document:
            content = element.semantic_content
            if not content.strip():
                continue
            tokens = self.options.count_tokens(content)

            if tokens > max_tokens:
                # Oversized element: flush what is pending, then pack it alone.
                await self._drain(document, pending, pending_tokens, chunks)
                chunks.extend(await self._pack_run(document, "", [element]))
                continue

            while pending and (
                sum(pending_tokens) + len(pending) * separator_tokens + tokens > max_tokens
            ):
                await self._split_once(document, pending, pending_tokens, chunks)

            pending.append(element)
            pending_tokens.append(tokens)

        await self._drain(document, pending, pending_tokens, chunks)
        return chunks

    async def _drain(
        self,
        document: Document,
        pending: List[Element],
        pending_tokens: List[int],
        chunks: List[Chunk],
    ):
        while pending:
            await self._split_once(document, pending, pending_tokens, chunks)

    async def _split_once(
        self,
        document: Document,
        pending: List[Element],
        pending_tokens: List[int],
        chunks: List[Chunk],
    ):
        """Ask for the first topic shift and pack everything before it."""
        if len(pending) == 1:
            index = 1
        else:
            transcript = "\n".join(
                f"ID {i}: {element.semantic_content}" for i, element in enumerate(pending)
            )
            reply = await self.chat_client.complete(
                LUMBER_SYSTEM_PROMPT, transcript, self.chat_options
            )
            index = parse_split_answer(reply)
            if index < 0 or index > len(pending):
                index = len(pending)
            index = max(index, 1)
            logger.debug(f"Topic shift at ID {index} of {len(pending)} pending")

        run = pending[:index]
        del pending[:index]
        del pending_tokens[:index]
        chunks.extend(await self._pack_run(document, "", run))
