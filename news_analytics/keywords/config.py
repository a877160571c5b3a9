"""Configuration for the keyword ranking service.

Uses Pydantic settings for environment-based configuration,
following the same pattern as other service configs in the project.
"""

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class KeywordsConfig(BaseSettings):
    """
    Configuration for the term-frequency keyword ranker.

    All settings can be overridden via environment variables with KEYWORDS_ prefix.
    Example: KEYWORDS_TOP_N=15

    Attributes:
        top_n: Default number of keywords returned by single-document ranking.
        min_token_length: Tokens shorter than this are discarded.
        extra_stop_words: Additional stop words on top of the built-in set.
        max_text_length: Maximum text length to process (truncate longer texts).
    """

    model_config = SettingsConfigDict(
        env_prefix="KEYWORDS_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    top_n: int = Field(
        default=10,
        ge=1,
        le=100,
        description="Default number of keywords to extract per document.",
    )
    min_token_length: int = Field(
        default=3,
        ge=1,
        le=20,
        description="Minimum token length kept after tokenization.",
    )
    extra_stop_words: list[str] = Field(
        default_factory=list,
        description="Additional stop words (lowercase) merged into the built-in set.",
    )

    max_text_length: int = Field(
        default=100_000,
        ge=100,
        description="Maximum text length to process. Longer texts are truncated.",
    )
