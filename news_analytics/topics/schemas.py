"""Schema definitions for topic modeling.

Provides the per-request Document (text plus optional embedding) and the
TopicRecord emitted for every cluster.
"""

from dataclasses import dataclass, field
from typing import Any


@dataclass
class Document:
    """
    Article text with an optional pre-computed embedding.

    Documents carry no identifier; their position in the input batch is
    their identity for the duration of one request.

    Attributes:
        text: Article text.
        embedding: Embedding vector, or None if not yet computed.
    """

    text: str
    embedding: list[float] | None = None

    @property
    def has_embedding(self) -> bool:
        """Whether an embedding vector is attached."""
        return self.embedding is not None

    def with_embedding(self, embedding: list[float]) -> "Document":
        """Return a copy of this document carrying ``embedding``."""
        return Document(text=self.text, embedding=list(embedding))


@dataclass
class TopicRecord:
    """
    One discovered topic.

    Attributes:
        topic_label: Display label, "Topic 1" .. "Topic k".
        keywords: Most frequent terms of the cluster, most frequent first.
        document_indices: Input positions of the documents in this cluster.

    Example:
        >>> TopicRecord("Topic 1", ["football", "league"], [0, 2]).to_dict()
        {'topic': 'Topic 1', 'keywords': ['football', 'league'], 'document_count': 2, 'document_indices': [0, 2]}
    """

    topic_label: str
    keywords: list[str] = field(default_factory=list)
    document_indices: list[int] = field(default_factory=list)

    @property
    def document_count(self) -> int:
        """Number of documents in the topic."""
        return len(self.document_indices)

    @property
    def is_empty(self) -> bool:
        """True when no document landed in this cluster."""
        return not self.document_indices

    def to_dict(self) -> dict[str, Any]:
        """Convert topic to dictionary for JSON serialization."""
        return {
            "topic": self.topic_label,
            "keywords": list(self.keywords),
            "document_count": self.document_count,
            "document_indices": list(self.document_indices),
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "TopicRecord":
        """
        Create a topic record from dictionary.

        Raises:
            KeyError: If required fields are missing.
        """
        return cls(
            topic_label=data["topic"],
            keywords=list(data.get("keywords", [])),
            document_indices=list(data.get("document_indices", [])),
        )
