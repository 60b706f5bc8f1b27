"""
Configuration for the chunking service.
Reads environment variables into dataclass settings.
"""

import os
from dataclasses import dataclass, field
from functools import lru_cache


def _env_bool(name: str, default: str) -> bool:
    return os.getenv(name, default).lower() == "true"


@dataclass
class TokenizerConfig:
    """Tokenizer used for budget accounting."""
    encoding_name: str = field(
        default_factory=lambda: os.getenv("TOKENIZER_ENCODING", "cl100k_base")
    )


@dataclass
class ChunkingConfig:
    """Chunk budget and strategy defaults."""
    max_tokens: int = field(
        default_factory=lambda: int(os.getenv("CHUNK_MAX_TOKENS", "2000"))
    )
    overlap_tokens: int = field(
        default_factory=lambda: int(os.getenv("CHUNK_OVERLAP_TOKENS", "500"))
    )
    consider_pre_tokenization: bool = field(
        default_factory=lambda: _env_bool("CHUNK_PRE_TOKENIZATION", "true")
    )
    consider_normalization: bool = field(
        default_factory=lambda: _env_bool("CHUNK_NORMALIZATION", "true")
    )
    semantic_threshold_percentile: float = 95.0
    markdown_split_level: int = 3
    markdown_strip_headers: bool = True
    neural_tokenizer: str = field(
        default_factory=lambda: os.getenv("NEURAL_TOKENIZER", "bert-base-multilingual-cased")
    )
    neural_model_path: str = field(
        default_factory=lambda: os.getenv("NEURAL_MODEL_PATH", "")
    )
    neural_probability_threshold: float = 0.5
    neural_window_size: int = 255


@dataclass
class EmbeddingConfig:
    """Embedding model used by the semantic chunker."""
    model_name: str = field(
        default_factory=lambda: os.getenv("EMBEDDING_MODEL", "all-MiniLM-L6-v2")
    )
    normalize: bool = True


@dataclass
class LLMConfig:
    """Chat model used by the LumberChunker."""
    model: str = field(default_factory=lambda: os.getenv("LLM_MODEL", "gpt-4.1-mini"))
    temperature: float = 0.1
    max_tokens: int = 64
    timeout: int = 30


@dataclass
class Settings:
    """Main settings loaded from environment."""

    # OpenAI settings
    OPENAI_API_KEY: str = field(default_factory=lambda: os.getenv("OPENAI_API_KEY", ""))

    # Application settings
    DEBUG: bool = field(default_factory=lambda: _env_bool("DEBUG", "false"))
    LOG_LEVEL: str = field(default_factory=lambda: os.getenv("LOG_LEVEL", "INFO"))

    # Nested configs
    tokenizer: TokenizerConfig = field(default_factory=TokenizerConfig)
    chunking: ChunkingConfig = field(default_factory=ChunkingConfig)
    embedding: EmbeddingConfig = field(default_factory=EmbeddingConfig)
    llm: LLMConfig = field(default_factory=LLMConfig)


@lru_cache()
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
