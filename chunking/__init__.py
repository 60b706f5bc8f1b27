"""
Element-aware chunking engine.

Chunking determines what the retriever can find. Boundary strategies decide
where runs of elements start and end; the element packer fills token-bounded
chunks from each run and attaches the structural context.

Strategies:
- HeaderChunker: header hierarchy, context = header path
- SectionChunker: section tree, context = ancestor section headers
- MarkdownChunker: recursive markdown headers up to a split level
- SemanticSimilarityChunker: embedding distance between neighbours
- LumberChunker: chat model picks the topic shift
- DocumentTokenChunker: plain token windows with overlap
- StrategyChunker: whole-text splitting (delimiter or neural)

Usage:
    from chunking import ChunkerOptions, HeaderChunker

    options = ChunkerOptions(max_tokens_per_chunk=500, overlap_tokens=50)
    chunks = await HeaderChunker(options).process(document)
"""

from .base import DocumentChunker
from .chunk import Chunk, SourceSpan
from .element_packer import ElementPacker
from .exceptions import (
    BudgetExceededError,
    ChunkingError,
    ExternalCallError,
    InvalidArgumentError,
    SingularMatrixError,
)
from .header_chunker import HeaderChunker
from .lumber_chunker import LumberChunker
from .markdown_chunker import MarkdownChunker
from .neural_splitter import (
    BoundaryClassifier,
    OnnxBoundaryClassifier,
    SlidingWindowNeuralSplittingStrategy,
    TransformersBoundaryClassifier,
)
from .options import ChunkerOptions
from .section_chunker import SectionChunker
from .semantic_similarity_chunker import SemanticSimilarityChunker
from .strategy_chunker import StrategyChunker
from .text_splitting import DelimiterSplittingStrategy, TextSplittingStrategy
from .token_chunker import DocumentTokenChunker

__all__ = [
    "Chunk",
    "SourceSpan",
    "ChunkerOptions",
    "ElementPacker",
    "DocumentChunker",
    "HeaderChunker",
    "SectionChunker",
    "MarkdownChunker",
    "SemanticSimilarityChunker",
    "LumberChunker",
    "DocumentTokenChunker",
    "StrategyChunker",
    "TextSplittingStrategy",
    "DelimiterSplittingStrategy",
    "SlidingWindowNeuralSplittingStrategy",
    "BoundaryClassifier",
    "OnnxBoundaryClassifier",
    "TransformersBoundaryClassifier",
    "ChunkingError",
    "InvalidArgumentError",
    "BudgetExceededError",
    "SingularMatrixError",
    "ExternalCallError",
]
