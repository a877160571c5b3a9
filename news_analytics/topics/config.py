"""Configuration for topic modeling.

Covers both the pure aggregation step (keywords per topic) and the way the
pipeline gathers embeddings for a batch before clustering.
"""

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class TopicsConfig(BaseSettings):
    """
    Configuration for topic modeling.

    All settings can be overridden via environment variables with TOPICS_ prefix.
    Example: TOPICS_DEFAULT_NUM_TOPICS=4

    Attributes:
        default_num_topics: Cluster count used when a caller does not give one.
        keywords_per_topic: Keywords kept per topic record.
        max_articles: Largest batch accepted for one topic modeling call.
        embedding_batch_size: Texts sent per embedding request.
        max_concurrency: Concurrent upstream requests per batch.
    """

    model_config = SettingsConfigDict(
        env_prefix="TOPICS_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    default_num_topics: int = Field(
        default=2,
        ge=1,
        le=50,
        description="Number of topics when the caller does not specify one.",
    )
    keywords_per_topic: int = Field(
        default=5,
        ge=1,
        le=50,
        description="Maximum keywords in each topic record.",
    )
    max_articles: int = Field(
        default=200,
        ge=1,
        le=5000,
        description="Maximum articles per topic modeling request.",
    )

    # Embedding fan-out
    embedding_batch_size: int = Field(
        default=1,
        ge=1,
        le=128,
        description="Texts per embedding request. 1 = one request per article.",
    )
    max_concurrency: int = Field(
        default=8,
        ge=1,
        le=64,
        description="Maximum concurrent upstream requests while gathering a batch.",
    )
