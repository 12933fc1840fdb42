"""
Tests for hashtag tokenization and TF-IDF relevance scoring.

Run with: pytest tests/test_text_processor.py -v
"""

import math

import numpy as np
import pytest

from engagement_forecast.text_processor import (
    HashtagRelevanceScorer,
    compute_relevance_vector,
    fit_relevance_width,
    hashtag_pairs,
    pair_key,
    tokenize_hashtags,
)


# ---------------------------------------------------------------------------
# tokenization and pair keys
# ---------------------------------------------------------------------------

class TestTokenizeHashtags:
    def test_lowercases_and_drops_repeats(self):
        assert tokenize_hashtags("#Proud   #scalingPeaks #proud") == ['#proud', '#scalingpeaks']

    def test_empty_string(self):
        assert tokenize_hashtags("") == []
        assert tokenize_hashtags("   ") == []


class TestHashtagPairs:
    def test_pair_key_is_order_independent(self):
        assert pair_key('#b', '#a') == pair_key('#a', '#b') == '#a|#b'

    def test_all_unordered_pairs(self):
        assert sorted(hashtag_pairs("#c #a #b")) == ['#a|#b', '#a|#c', '#b|#c']

    @pytest.mark.parametrize("hashtags", ["", "#solo", "#same #SAME", "  #x  "])
    def test_no_pairs_below_two_distinct_tokens(self, hashtags):
        assert hashtag_pairs(hashtags) == []

    def test_reordered_string_gives_same_keys(self):
        assert sorted(hashtag_pairs("#x #y #z")) == sorted(hashtag_pairs("#z #x #y"))


# ---------------------------------------------------------------------------
# relevance scoring
# ---------------------------------------------------------------------------

class TestFitRelevanceWidth:
    def test_pads_short_input(self):
        np.testing.assert_array_equal(fit_relevance_width([1.5, 2.0]), [1.5, 2.0, 0, 0, 0])

    def test_truncates_long_input(self):
        np.testing.assert_array_equal(fit_relevance_width(range(1, 9)), [1, 2, 3, 4, 5])


class TestRelevanceScorer:
    CORPUS = ['#sun #beach', '#beach', '#snow']

    def test_empty_corpus_gives_zero_vector(self):
        np.testing.assert_array_equal(compute_relevance_vector('#beach', []), np.zeros(5))

    def test_one_score_per_document_then_padding(self):
        # df(beach) = 2 of 3 documents, so idf = 1 + ln(3 / 3) = 1
        vector = compute_relevance_vector('#beach', self.CORPUS)
        np.testing.assert_allclose(vector, [1.0, 1.0, 0.0, 0.0, 0.0])

    def test_rare_term_weighs_more(self):
        vector = compute_relevance_vector('#sun', self.CORPUS)
        np.testing.assert_allclose(vector, [1 + math.log(3 / 2), 0, 0, 0, 0])

    def test_case_insensitive(self):
        np.testing.assert_allclose(
            compute_relevance_vector('#BEACH', self.CORPUS),
            compute_relevance_vector('#beach', self.CORPUS),
        )

    def test_only_first_five_documents_reported(self):
        corpus = ['#beach'] * 4 + ['#snow', '#beach', '#beach']
        vector = compute_relevance_vector('#beach', corpus)
        assert vector.shape == (5,)
        assert vector[4] == 0
        assert (vector[:4] > 0).all()

    def test_unknown_terms_score_zero(self):
        np.testing.assert_array_equal(compute_relevance_vector('#nowhere', self.CORPUS), np.zeros(5))

    @pytest.mark.parametrize("hashtags", ["", "#the", "#beach #beach #sun", "#Snow #new", "plain words"])
    @pytest.mark.parametrize("corpus", [[], ['#one'], ['#sun #beach', '#beach', '#snow', '#sun', '#a #b', '#beach #snow']])
    def test_always_five_non_negative_scores(self, hashtags, corpus):
        vector = compute_relevance_vector(hashtags, corpus)
        assert vector.shape == (5,)
        assert (vector >= 0).all()

    def test_memoized_scorer_matches_fresh_scoring(self):
        scorer = HashtagRelevanceScorer().fit(self.CORPUS)
        for hashtags in ['#beach', '#sun #snow', '']:
            np.testing.assert_allclose(scorer.score(hashtags), compute_relevance_vector(hashtags, self.CORPUS))

    def test_score_requires_fit(self):
        with pytest.raises(ValueError):
            HashtagRelevanceScorer().score('#beach')
