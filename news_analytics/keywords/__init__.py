"""
Keyword ranking for news text using term frequency.

This module provides stateless term ranking in two variants: single-document
TF-IDF for keyword extraction and summed corpus frequency for topic keywords.

Components:
- KeywordsConfig: Configuration for the ranker
- TermScore: Dataclass representing a scored term
- TermFrequencyRanker: Ranking service
- RankingError: Raised on malformed ranking input
"""

from news_analytics.keywords.config import KeywordsConfig
from news_analytics.keywords.ranker import STOP_WORDS, RankingError, TermFrequencyRanker, tokenize
from news_analytics.keywords.schemas import TermScore

__all__ = [
    "KeywordsConfig",
    "TermScore",
    "TermFrequencyRanker",
    "RankingError",
    "STOP_WORDS",
    "tokenize",
]
