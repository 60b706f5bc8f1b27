"""
Command-line chunking tool.

    rag-chunk chunk document.json --strategy header --max-tokens 500

Reads a DocumentPayload JSON file, runs the selected chunker and prints one
ChunkRecord JSON object per line.
"""

import asyncio
import logging
from enum import Enum
from pathlib import Path
from typing import Optional

import typer

from chunking import (
    BudgetExceededError,
    ChunkerOptions,
    ChunkingError,
    DocumentChunker,
    DocumentTokenChunker,
    HeaderChunker,
    InvalidArgumentError,
    LumberChunker,
    MarkdownChunker,
    SectionChunker,
    SemanticSimilarityChunker,
    SlidingWindowNeuralSplittingStrategy,
    StrategyChunker,
)
from shared.config import Settings, get_settings
from shared.logging_config import configure_logging
from shared.schemas import ChunkRecord, DocumentPayload
from tokenization import TiktokenTokenizer

app = typer.Typer(help="Element-aware document chunking")
logger = logging.getLogger(__name__)


class Strategy(str, Enum):
    header = "header"
    section = "section"
    markdown = "markdown"
    token = "token"
    semantic = "semantic"
    lumber = "lumber"
    neural = "neural"


def build_chunker(
    strategy: Strategy, options: ChunkerOptions, settings: Settings
) -> DocumentChunker:
    """Instantiate a chunker, wiring external adapters from settings."""
    if strategy == Strategy.header:
        return HeaderChunker(options)
    if strategy == Strategy.section:
        return SectionChunker(options)
    if strategy == Strategy.markdown:
        return MarkdownChunker(
            options,
            header_level_to_split_on=settings.chunking.markdown_split_level,
            strip_headers=settings.chunking.markdown_strip_headers,
        )
    if strategy == Strategy.token:
        return DocumentTokenChunker(options)
    if strategy == Strategy.semantic:
        from embeddings import EmbeddingConfig, get_embedding_generator

        generator = get_embedding_generator(
            EmbeddingConfig(
                model_name=settings.embedding.model_name,
                normalize=settings.embedding.normalize,
            )
        )
        return SemanticSimilarityChunker(
            generator,
            options,
            threshold_percentile=settings.chunking.semantic_threshold_percentile,
        )
    if strategy == Strategy.neural:
        if not settings.chunking.neural_model_path:
            raise InvalidArgumentError("NEURAL_MODEL_PATH must point to an ONNX boundary model.")
        splitter = SlidingWindowNeuralSplittingStrategy.from_pretrained(
            tokenizer_name=settings.chunking.neural_tokenizer,
            model_path=settings.chunking.neural_model_path,
            probability_threshold=settings.chunking.neural_probability_threshold,
            window_size=settings.chunking.neural_window_size,
        )
        # The budget is measured in the boundary model's own vocabulary.
        neural_options = ChunkerOptions(
            tokenizer=splitter.tokenizer,
            max_tokens_per_chunk=options.max_tokens_per_chunk,
            overlap_tokens=options.overlap_tokens,
            consider_pre_tokenization=options.consider_pre_tokenization,
            consider_normalization=splitter.normalize,
        )
        return StrategyChunker(splitter, neural_options)
    from llm import ChatOptions, OpenAIChatClient

    return LumberChunker(
        OpenAIChatClient(),
        options,
        chat_options=ChatOptions(temperature=settings.llm.temperature),
    )


@app.command("chunk")
def chunk(
    input_path: Path = typer.Argument(..., exists=True, dir_okay=False, help="DocumentPayload JSON"),
    strategy: Strategy = typer.Option(Strategy.header, "--strategy", "-s"),
    max_tokens: Optional[int] = typer.Option(None, "--max-tokens", help="Token budget per chunk"),
    overlap: Optional[int] = typer.Option(None, "--overlap", help="Overlap tokens (token strategy)"),
    debug: bool = typer.Option(False, "--debug", help="Verbose logging"),
):
    """Chunk a document and print chunks as JSON lines."""
    settings = get_settings()
    configure_logging(settings.LOG_LEVEL, debug=debug or settings.DEBUG)

    payload = DocumentPayload.model_validate_json(input_path.read_text(encoding="utf-8"))
    document = payload.to_document()

    try:
        options = ChunkerOptions.from_config(
            settings.chunking, TiktokenTokenizer(settings.tokenizer.encoding_name)
        )
        if max_tokens is not None:
            if options.overlap_tokens >= max_tokens:
                options.overlap_tokens = 0
            options.max_tokens_per_chunk = max_tokens
        if overlap is not None:
            options.overlap_tokens = overlap

        chunker = build_chunker(strategy, options, settings)
        chunks = asyncio.run(chunker.process(document))
    except BudgetExceededError as e:
        typer.echo(f"Error: {e}", err=True)
        raise typer.Exit(code=2)
    except ChunkingError as e:
        typer.echo(f"Error: {e}", err=True)
        raise typer.Exit(code=1)

    for c in chunks:
        typer.echo(ChunkRecord.from_chunk(c).model_dump_json())
    logger.info(f"Wrote {len(chunks)} chunks for {document.identifier!r}")


@app.callback()
def main():
    """Element-aware document chunking."""


if __name__ == "__main__":
    app()
