"""
Term-frequency keyword ranking for news articles.

Two ranking variants serve two different call sites:

- ``rank`` scores the terms of a single document with TF-IDF. The document
  frequency table is built from the target document plus any ``background``
  texts handed to the same call, and discarded when the call returns.
- ``rank_corpus`` sums raw term frequencies across a group of texts. Topic
  keyword extraction uses it for each cluster, where every text already
  belongs to the same theme and IDF dampening would penalize exactly the
  terms that the cluster shares.

Both variants are pure: no table, counter or document list survives a call.
"""

import logging
import re
from collections.abc import Iterable, Sequence

import numpy as np
from scipy.sparse import csr_matrix
from sklearn.feature_extraction.text import CountVectorizer, TfidfTransformer

from news_analytics.keywords.config import KeywordsConfig
from news_analytics.keywords.schemas import TermScore

logger = logging.getLogger(__name__)

# Basic English stop words
STOP_WORDS: frozenset[str] = frozenset(
    {"the", "is", "in", "and", "a", "of", "to", "for", "with", "that", "on", "as", "at"}
)

_SPLIT_RE = re.compile(r"\W+")


class RankingError(Exception):
    """Raised when ranking input is malformed (non-string text, bad top_n)."""


def tokenize(
    text: str,
    min_length: int = 3,
    stop_words: Iterable[str] = STOP_WORDS,
) -> list[str]:
    """
    Split text into normalized ranking tokens.

    Lowercases, splits on runs of non-word characters, and drops tokens
    shorter than ``min_length`` or present in ``stop_words``.

    Args:
        text: Raw text.
        min_length: Minimum token length to keep.
        stop_words: Lowercase words to discard.

    Returns:
        Tokens in order of appearance (duplicates preserved).
    """
    stop = stop_words if isinstance(stop_words, (set, frozenset)) else set(stop_words)
    return [
        token
        for token in _SPLIT_RE.split(text.lower())
        if len(token) >= min_length and token not in stop
    ]


def _sorted_scores(
    vocabulary: dict[str, int],
    scores: np.ndarray,
    counts: np.ndarray,
) -> list[TermScore]:
    # vocabulary is built in first-seen order and sorted() is stable, so
    # equal scores stay in order of first occurrence
    terms = [
        TermScore(term=term, score=float(scores[col]), count=int(counts[col]))
        for term, col in vocabulary.items()
    ]
    return sorted(terms, key=lambda ts: ts.score, reverse=True)


class TermFrequencyRanker:
    """
    Stateless term ranking over one text or a group of texts.

    The instance only holds configuration (stop words, minimum token
    length, truncation limit); every call builds its own frequency tables.

    Usage:
        >>> ranker = TermFrequencyRanker()
        >>> ranker.rank("the cat sat on the mat and the cat ran", 3)
        ['cat', 'sat', 'mat']
        >>> ranker.rank_corpus(["Football final tonight", "Football transfer news"])
        ['football', 'final', 'tonight', 'transfer', 'news']
    """

    def __init__(self, config: KeywordsConfig | None = None):
        """
        Initialize the ranker.

        Args:
            config: Keywords configuration. If None, uses default config.
        """
        self.config = config or KeywordsConfig()
        self._stop_words = STOP_WORDS | frozenset(
            word.lower() for word in self.config.extra_stop_words
        )

    @property
    def stop_words(self) -> frozenset[str]:
        """Effective stop-word set (built-in plus configured extras)."""
        return self._stop_words

    def tokenize(self, text: str) -> list[str]:
        """Tokenize text using this ranker's configuration."""
        self._check_text(text)
        if len(text) > self.config.max_text_length:
            text = text[: self.config.max_text_length]
            logger.debug(f"Text truncated to {self.config.max_text_length} chars")
        return tokenize(text, self.config.min_token_length, self._stop_words)

    # Single-document TF-IDF

    def score(
        self,
        text: str,
        background: Sequence[str] | None = None,
    ) -> list[TermScore]:
        """
        Score every term of ``text`` with TF-IDF.

        tf is the raw count of the term in ``text``; idf is the smoothed
        ``ln((1 + N) / (1 + df)) + 1`` where N counts ``text`` plus the
        background documents of this call (``TfidfTransformer`` with
        ``smooth_idf`` and no normalization).

        Args:
            text: Document to score.
            background: Optional other documents for the document-frequency table.

        Returns:
            TermScores sorted by descending score, ties in first-seen order.

        Raises:
            RankingError: If text or any background entry is not a string.
        """
        tokens = self.tokenize(text)
        background_docs = self._check_texts(background, "background") if background else []
        if not tokens:
            return []

        vectorizer, counts = self._count_terms([text, *background_docs], tokens)
        tfidf = TfidfTransformer(norm=None, smooth_idf=True).fit_transform(counts)

        row = tfidf[0].toarray().ravel()
        term_counts = counts[0].toarray().ravel()
        return _sorted_scores(vectorizer.vocabulary_, row, term_counts)

    def rank(
        self,
        text: str,
        top_n: int | None = None,
        background: Sequence[str] | None = None,
    ) -> list[str]:
        """
        Return the top ``top_n`` TF-IDF terms of a single document.

        Args:
            text: Document to rank. Empty text yields an empty list.
            top_n: Maximum terms to return (default from config). Fewer are
                returned when the document has fewer distinct terms.
            background: Optional other documents for the document-frequency table.

        Raises:
            RankingError: On non-string input or negative/non-integer top_n.
        """
        limit = self._resolve_top_n(top_n, self.config.top_n)
        return [ts.term for ts in self.score(text, background)[:limit]]

    # Corpus-level frequency

    def score_corpus(self, texts: Sequence[str]) -> list[TermScore]:
        """
        Score terms by their summed frequency across ``texts``.

        Args:
            texts: Group of texts (e.g. the members of one topic cluster).

        Returns:
            TermScores sorted by descending frequency, ties in first-seen order.

        Raises:
            RankingError: If texts is not a sequence of strings.
        """
        docs = self._check_texts(texts, "texts")
        tokens = [token for doc in docs for token in self.tokenize(doc)]
        if not tokens:
            return []

        vectorizer, counts = self._count_terms(docs, tokens)
        totals = np.asarray(counts.sum(axis=0)).ravel()
        return _sorted_scores(vectorizer.vocabulary_, totals.astype(float), totals)

    def rank_corpus(self, texts: Sequence[str], top_n: int | None = None) -> list[str]:
        """
        Return terms of a group of texts ordered by summed frequency.

        Args:
            texts: Group of texts. An empty group yields an empty list.
            top_n: Maximum terms to return; None returns all terms.

        Raises:
            RankingError: On malformed input.
        """
        ranked = [ts.term for ts in self.score_corpus(texts)]
        if top_n is None:
            return ranked
        return ranked[: self._resolve_top_n(top_n, len(ranked))]

    def _count_terms(
        self,
        docs: list[str],
        tokens: list[str],
    ) -> tuple[CountVectorizer, csr_matrix]:
        """
        Count term occurrences per document.

        The vocabulary is fixed to ``tokens`` in first-seen order, so column
        order matches first occurrence rather than the vectorizer's default
        alphabetical order. Terms outside ``tokens`` are ignored.
        """
        vocabulary = {term: col for col, term in enumerate(dict.fromkeys(tokens))}
        vectorizer = CountVectorizer(
            tokenizer=self.tokenize,
            lowercase=False,
            token_pattern=None,
            vocabulary=vocabulary,
        )
        return vectorizer, vectorizer.fit_transform(docs)

    # Validation helpers

    @staticmethod
    def _check_text(text: object) -> None:
        if not isinstance(text, str):
            raise RankingError(f"Expected text of type str, got {type(text).__name__}")

    @staticmethod
    def _check_texts(texts: object, name: str) -> list[str]:
        if isinstance(texts, (str, bytes)) or not isinstance(texts, Sequence):
            raise RankingError(
                f"Expected {name} to be a sequence of str, got {type(texts).__name__}"
            )
        for index, entry in enumerate(texts):
            if not isinstance(entry, str):
                raise RankingError(
                    f"{name}[{index}] must be str, got {type(entry).__name__}"
                )
        return list(texts)

    @staticmethod
    def _resolve_top_n(top_n: int | None, default: int) -> int:
        if top_n is None:
            return default
        if isinstance(top_n, bool) or not isinstance(top_n, int):
            raise RankingError(f"top_n must be an integer, got {type(top_n).__name__}")
        if top_n < 0:
            raise RankingError(f"top_n must be non-negative, got {top_n}")
        return top_n
