"""Schema definitions for ranked terms.

Provides a lightweight dataclass for representing a scored term,
with serialization methods for API responses.
"""

from dataclasses import dataclass
from typing import Any


@dataclass(frozen=True)
class TermScore:
    """
    A single ranked term.

    Attributes:
        term: Normalized (lowercase) token.
        score: Non-negative importance score (TF-IDF or summed frequency).
        count: Raw number of occurrences in the ranked text(s).

    Example:
        >>> TermScore(term="football", score=3.0, count=3).to_dict()
        {'term': 'football', 'score': 3.0, 'count': 3}
    """

    term: str
    score: float
    count: int = 1

    def to_dict(self) -> dict[str, Any]:
        """
        Convert term score to dictionary for JSON serialization.

        Returns:
            Dictionary representation suitable for an API response.
        """
        return {
            "term": self.term,
            "score": self.score,
            "count": self.count,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "TermScore":
        """
        Create a term score from dictionary.

        Raises:
            KeyError: If required fields are missing.
        """
        return cls(
            term=data["term"],
            score=data["score"],
            count=data.get("count", 1),
        )
