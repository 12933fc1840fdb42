# engagement_forecast/text_processor.py
"""Hashtag tokenization and TF-IDF relevance scoring."""

from collections import Counter
from functools import lru_cache
from itertools import combinations
from typing import Callable, FrozenSet, List, Sequence
import logging
import math

import nltk
import numpy as np
from sklearn.feature_extraction.text import CountVectorizer, ENGLISH_STOP_WORDS

from .config import PAIR_SEPARATOR, RELEVANCE_WIDTH

logger = logging.getLogger(__name__)


@lru_cache(maxsize=1)
def _english_stopwords() -> FrozenSet[str]:
    """NLTK English stopwords, downloaded on first use."""
    try:
        nltk.data.find('corpora/stopwords')
    except LookupError:
        nltk.download('stopwords', quiet=True)

    from nltk.corpus import stopwords
    try:
        return frozenset(stopwords.words('english'))
    except LookupError:
        logger.warning(
            "NLTK stopwords corpus unavailable. "
            "Falling back to scikit-learn's English stop word list."
        )
        return frozenset(ENGLISH_STOP_WORDS)


@lru_cache(maxsize=1)
def _term_analyzer() -> Callable[[str], List[str]]:
    """Lower-cased word tokens with stopwords removed; '#' is not part of a term."""
    vectorizer = CountVectorizer(
        lowercase=True,
        token_pattern=r'(?u)\b\w+\b',
        stop_words=sorted(_english_stopwords()),
    )
    return vectorizer.build_analyzer()


def extract_terms(text: str) -> List[str]:
    """Terms used for relevance scoring."""
    if not text:
        return []
    return _term_analyzer()(text)


def tokenize_hashtags(hashtags: str) -> List[str]:
    """
    Split a hashtag string into distinct lower-cased tokens.

    Args:
        hashtags: Whitespace separated hashtags, e.g. "#Proud #scalingpeaks"

    Returns:
        Tokens in first-seen order, without empties or repeats
    """
    if not hashtags:
        return []
    tokens = (token.strip().lower() for token in hashtags.split())
    return list(dict.fromkeys(token for token in tokens if token))


def pair_key(first: str, second: str) -> str:
    """Order-independent key for two hashtags."""
    return PAIR_SEPARATOR.join(sorted((first, second)))


def hashtag_pairs(hashtags: str) -> List[str]:
    """Keys for every unordered pair of distinct hashtags in the string."""
    return [pair_key(a, b) for a, b in combinations(tokenize_hashtags(hashtags), 2)]


def fit_relevance_width(scores: Sequence[float], width: int = RELEVANCE_WIDTH) -> np.ndarray:
    """Truncate or zero-pad scores to exactly `width` entries."""
    vector = np.zeros(width, dtype=float)
    head = list(scores)[:width]
    vector[:len(head)] = head
    return vector


class HashtagRelevanceScorer:
    """
    TF-IDF relevance of a hashtag string against a corpus of hashtag strings.

    One score is produced per corpus document, in corpus order:
    the sum over the query's terms of the raw term count in that document
    times ``1 + ln(N / (1 + df))``. Only the first ``width`` documents are
    ever reported, so only their term counts are kept; document frequencies
    cover the whole corpus.
    """

    def __init__(self, width: int = RELEVANCE_WIDTH):
        self.width = width
        self.fitted = False
        self.n_documents = 0
        self.document_frequency: Counter = Counter()
        self.leading_term_counts: List[Counter] = []

    def fit(self, corpus: Sequence[str]) -> 'HashtagRelevanceScorer':
        """Collect document frequencies from the corpus."""
        self.n_documents = len(corpus)
        self.document_frequency = Counter()
        self.leading_term_counts = []

        for position, document in enumerate(corpus):
            terms = extract_terms(document)
            self.document_frequency.update(set(terms))
            if position < self.width:
                self.leading_term_counts.append(Counter(terms))

        self.fitted = True
        logger.debug(f"Fitted relevance scorer on {self.n_documents} documents, "
                     f"{len(self.document_frequency)} distinct terms")
        return self

    def idf(self, term: str) -> float:
        return 1.0 + math.log(self.n_documents / (1 + self.document_frequency[term]))

    def score(self, hashtags: str) -> np.ndarray:
        """
        Relevance vector of fixed width.

        Returns:
            Array of `width` non-negative scores; zero-padded when the corpus
            has fewer documents than `width`
        """
        if not self.fitted:
            raise ValueError("Must fit before score")

        terms = extract_terms(hashtags)
        if not self.leading_term_counts:
            return fit_relevance_width([], self.width)

        idf ={term: self.idf(term) for term in set(terms)}
        scores = [
            sum(counts[term] * idf[term] for term in terms)
            for counts in self.leading_term_counts
        ]
        return fit_relevance_width(scores, self.width)


def compute_relevance_vector(hashtags: str, corpus: Sequence[str],
                             width: int = RELEVANCE_WIDTH) -> np.ndarray:
    """Score one hashtag string against a freshly built corpus."""
    return HashtagRelevanceScorer(width).fit(corpus).score(hashtags)
