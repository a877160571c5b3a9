"""Tests for TermFrequencyRanker."""

import math

import pytest
from sklearn.feature_extraction.text import TfidfVectorizer

from news_analytics.keywords.config import KeywordsConfig
from news_analytics.keywords.ranker import STOP_WORDS, RankingError, TermFrequencyRanker, tokenize
from news_analytics.keywords.schemas import TermScore


@pytest.fixture
def ranker():
    return TermFrequencyRanker()


class TestTokenize:
    """Tests for the module-level tokenizer."""

    def test_lowercases_and_splits_on_non_word(self):
        assert tokenize("Chip-Makers, RALLY!") == ["chip", "makers", "rally"]

    def test_drops_short_tokens(self):
        assert tokenize("an ox ate hay") == ["ate", "hay"]

    def test_drops_stop_words(self):
        assert tokenize("the cat with that hat") == ["cat", "hat"]

    def test_keeps_duplicates_in_order(self):
        assert tokenize("cat dog cat") == ["cat", "dog", "cat"]

    def test_custom_stop_words_and_length(self):
        assert tokenize("go big or go home", min_length=2, stop_words=["big"]) == [
            "go",
            "or",
            "go",
            "home",
        ]

    def test_underscore_and_digits_are_word_characters(self):
        assert tokenize("gpu_h100 2024 q3") == ["gpu_h100", "2024"]


class TestRank:
    """Tests for single-document TF-IDF ranking."""

    def test_cat_scenario(self, ranker):
        """Most frequent term first, ties in order of first occurrence."""
        assert ranker.rank("the cat sat on the mat and the cat ran", 3) == ["cat", "sat", "mat"]

    def test_excludes_stop_words_and_short_tokens(self, ranker):
        result = ranker.rank("the cat sat on the mat and the cat ran", 10)
        assert result == ["cat", "sat", "mat", "ran"]
        assert not set(result) & STOP_WORDS
        assert all(len(term) >= 3 for term in result)

    @pytest.mark.parametrize("top_n", [0, 1, 5, 100])
    def test_empty_text_returns_empty(self, ranker, top_n):
        assert ranker.rank("", top_n) == []

    def test_whitespace_and_punctuation_only(self, ranker):
        assert ranker.rank("   \n\t ... !!! ", 5) == []

    def test_only_stop_words(self, ranker):
        assert ranker.rank("the and of to", 5) == []

    def test_top_n_larger_than_terms_returns_all(self, ranker):
        assert ranker.rank("alpha beta gamma", 50) == ["alpha", "beta", "gamma"]

    def test_top_n_zero(self, ranker):
        assert ranker.rank("alpha beta gamma", 0) == []

    def test_default_top_n_from_config(self):
        ranker = TermFrequencyRanker(KeywordsConfig(top_n=2))
        assert ranker.rank("alpha beta gamma delta") == ["alpha", "beta"]

    def test_negative_top_n_raises(self, ranker):
        with pytest.raises(RankingError):
            ranker.rank("alpha beta", -1)

    def test_non_integer_top_n_raises(self, ranker):
        with pytest.raises(RankingError):
            ranker.rank("alpha beta", 2.5)

    def test_bool_top_n_raises(self, ranker):
        with pytest.raises(RankingError):
            ranker.rank("alpha beta", True)

    @pytest.mark.parametrize("bad", [None, 42, b"bytes", ["list"]])
    def test_non_string_text_raises(self, ranker, bad):
        with pytest.raises(RankingError):
            ranker.rank(bad, 3)

    def test_sorted_by_non_increasing_score(self, ranker):
        text = "chip chip chip demand demand supply export chip demand"
        values = [ts.score for ts in ranker.score(text)]
        assert values == sorted(values, reverse=True)

    def test_deterministic_and_stateless(self, ranker):
        """Earlier calls never influence later results."""
        first = ranker.rank("nvidia earnings beat estimates", 5)
        ranker.rank("completely unrelated cooking recipe with pasta", 5)
        ranker.rank("nvidia nvidia nvidia", 5)
        assert ranker.rank("nvidia earnings beat estimates", 5) == first

    def test_truncates_long_text(self):
        ranker = TermFrequencyRanker(KeywordsConfig(max_text_length=100))
        # 16 * "alpha " is 96 chars; padding ends the kept prefix at 100
        text = "alpha " * 16 + "    " + "omega " * 50
        assert ranker.rank(text, 5) == ["alpha"]
        assert ranker.score(text)[0].count == 16

    def test_extra_stop_words(self):
        ranker = TermFrequencyRanker(KeywordsConfig(extra_stop_words=["Said"]))
        assert "said" in ranker.stop_words
        assert ranker.rank("officials said exports said", 5) == ["officials", "exports"]


class TestScore:
    """Tests for TF-IDF scores with a background corpus."""

    def test_scores_without_background_equal_counts(self, ranker):
        assert ranker.score("chip chip demand") == [
            TermScore(term="chip", score=2.0, count=2),
            TermScore(term="demand", score=1.0, count=1),
        ]

    def test_background_lowers_common_terms(self, ranker):
        background = ["market demand rises", "demand outlook"]
        scores = {ts.term: ts.score for ts in ranker.score("chip demand", background=background)}

        # N = 3 documents; chip appears in 1, demand in all 3
        assert scores["chip"] == pytest.approx(math.log(4 / 2) + 1)
        assert scores["demand"] == pytest.approx(1.0)
        assert ranker.rank("chip demand", 2, background=background) == ["chip", "demand"]

    def test_background_does_not_persist(self, ranker):
        ranker.score("chip demand", background=["demand demand"])
        assert [ts.score for ts in ranker.score("chip demand")] == [1.0, 1.0]

    def test_scores_are_non_negative(self, ranker):
        background = ["alpha beta", "alpha gamma", "alpha delta"]
        assert all(ts.score >= 0 for ts in ranker.score("alpha beta", background=background))

    def test_bad_background_entry_raises(self, ranker):
        with pytest.raises(RankingError):
            ranker.score("chip", background=["ok", 3])

    def test_matches_sklearn_smoothed_idf(self, ranker):
        background = ["memory chip shortage", "chip exports", "shortage eases"]
        vectorizer = TfidfVectorizer(norm=None, smooth_idf=True)
        expected = vectorizer.fit_transform(["chip shortage chip demand", *background])

        scores = {
            ts.term: ts.score
            for ts in ranker.score("chip shortage chip demand", background=background)
        }

        for term in ("chip", "shortage", "demand"):
            assert scores[term] == pytest.approx(expected[0, vectorizer.vocabulary_[term]])

    def test_ties_keep_first_seen_not_alphabetical(self, ranker):
        assert ranker.rank("zebra yacht apple", 3) == ["zebra", "yacht", "apple"]
        assert ranker.rank_corpus(["zebra yacht", "apple zebra"]) == ["zebra", "yacht", "apple"]


class TestRankCorpus:
    """Tests for corpus-level summed frequency ranking."""

    def test_sums_frequency_across_texts(self, ranker):
        texts = ["football final tonight", "football transfer news", "transfer window"]
        assert ranker.rank_corpus(texts) == [
            "football",
            "transfer",
            "final",
            "tonight",
            "news",
            "window",
        ]

    def test_top_n_truncates(self, ranker):
        assert ranker.rank_corpus(["football final tonight", "football news"], top_n=2) == [
            "football",
            "final",
        ]

    def test_no_idf_dampening(self, ranker):
        """A term present in every text keeps its full count."""
        scores = ranker.score_corpus(["pasta sauce", "pasta basil", "pasta oven"])
        assert scores[0] == TermScore(term="pasta", score=3.0, count=3)

    def test_empty_group(self, ranker):
        assert ranker.rank_corpus([]) == []
        assert ranker.rank_corpus([], top_n=5) == []

    def test_group_of_empty_texts(self, ranker):
        assert ranker.rank_corpus(["", "   "]) == []

    def test_tuple_input(self, ranker):
        assert ranker.rank_corpus(("alpha beta", "beta")) == ["beta", "alpha"]

    @pytest.mark.parametrize("bad", ["a plain string", None, 7, {"alpha", "beta"}])
    def test_non_sequence_raises(self, ranker, bad):
        with pytest.raises(RankingError):
            ranker.rank_corpus(bad)

    def test_non_string_entry_raises(self, ranker):
        with pytest.raises(RankingError, match=r"texts\[1\]"):
            ranker.rank_corpus(["fine", None])

    def test_negative_top_n_raises(self, ranker):
        with pytest.raises(RankingError):
            ranker.rank_corpus(["alpha"], top_n=-2)


class TestTermScore:
    """Tests for TermScore serialization."""

    def test_to_dict(self):
        assert TermScore(term="gpu", score=1.5, count=2).to_dict() == {
            "term": "gpu",
            "score": 1.5,
            "count": 2,
        }

    def test_from_dict_default_count(self):
        assert TermScore.from_dict({"term": "gpu", "score": 1.0}) == TermScore("gpu", 1.0, 1)
