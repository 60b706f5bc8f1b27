"""Errors raised by the chunking engine."""


class ChunkingError(Exception):
    """Base class for all chunking failures."""


class InvalidArgumentError(ChunkingError, ValueError):
    """An option or argument is outside its valid range."""


class BudgetExceededError(ChunkingError):
    """Content cannot fit a fresh chunk under the token budget."""


class SingularMatrixError(ChunkingError):
    """Matrix inversion hit a near-zero pivot."""


class ExternalCallError(ChunkingError):
    """An external collaborator (embeddings, chat, inference) failed."""
