"""Value types returned by external collaborators.

Adapters translate provider-specific payloads into these dataclasses so the
pipeline and API never depend on a vendor's response shape.
"""

from dataclasses import dataclass
from datetime import datetime
from typing import Any


@dataclass
class Article:
    """
    Structured content of a fetched news article.

    Attributes:
        headline: Article headline.
        body: Full article text.
        url: Source URL, when known.
    """

    headline: str
    body: str
    url: str | None = None

    @property
    def text(self) -> str:
        """Headline and body joined for analysis."""
        if not self.headline:
            return self.body
        return f"{self.headline}\n\n{self.body}"

    def to_dict(self) -> dict[str, Any]:
        return {"headline": self.headline, "body": self.body, "url": self.url}


@dataclass
class ArticleSummary:
    """
    Article metadata returned by a search provider.

    Attributes:
        title: Article title.
        url: Link to the article.
        description: Short description or lede.
        source: Publisher name.
        author: Byline, if provided.
        published_at: Publication timestamp, if provided.
    """

    title: str
    url: str
    description: str | None = None
    source: str | None = None
    author: str | None = None
    published_at: datetime | None = None

    def to_dict(self) -> dict[str, Any]:
        return {
            "title": self.title,
            "url": self.url,
            "description": self.description,
            "source": self.source,
            "author": self.author,
            "published_at": self.published_at.isoformat() if self.published_at else None,
        }


@dataclass
class SentimentResult:
    """
    One sentiment label with its confidence.

    Attributes:
        label: Classifier label (e.g. POSITIVE, NEGATIVE).
        score: Confidence from 0.0 to 1.0.
    """

    label: str
    score: float

    def to_dict(self) -> dict[str, Any]:
        return {"label": self.label, "score": self.score}


@dataclass
class EntityMention:
    """
    A named entity found in text.

    Attributes:
        entity_group: Entity type (PER, ORG, LOC, MISC).
        word: Text span of the entity.
        score: Confidence from 0.0 to 1.0.
        start: Character offset where the entity starts.
        end: Character offset where the entity ends.
    """

    entity_group: str
    word: str
    score: float
    start: int | None = None
    end: int | None = None

    def to_dict(self) -> dict[str, Any]:
        return {
            "entity_group": self.entity_group,
            "word": self.word,
            "score": self.score,
            "start": self.start,
            "end": self.end,
        }
