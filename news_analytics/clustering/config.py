"""
K-means clustering configuration.

Provides Pydantic settings for the embedding clusterer. The algorithm itself
is deterministic (first-k-distinct seeding), so the only tunable is the
iteration bound.

Parameter Tuning Guide:
    - max_iterations: k-means over a few hundred sentence embeddings usually
      converges in well under 20 passes. The bound only matters for
      pathological inputs; 100 keeps worst-case latency predictable.
"""

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class ClusteringConfig(BaseSettings):
    """
    Configuration for the k-means embedding clusterer.

    All settings can be overridden via environment variables prefixed with CLUSTERING_.

    Example:
        CLUSTERING_MAX_ITERATIONS=50
    """

    model_config = SettingsConfigDict(
        env_prefix="CLUSTERING_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    max_iterations: int = Field(
        default=100,
        ge=1,
        le=10_000,
        description="Upper bound on assign/update passes before stopping unconverged.",
    )
