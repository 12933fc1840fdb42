# engagement_forecast/feature_engineering.py
"""Feature assembly for engagement regression."""

from collections import defaultdict
from enum import Enum
from typing import Dict, List, Optional, Sequence
import logging

import numpy as np
import pandas as pd

from .config import GOLDEN_HOUR_COUNT, HOUR_BOOST, RELEVANCE_WIDTH, STATIC_PEAK_HOURS
from .text_processor import HashtagRelevanceScorer, hashtag_pairs

logger = logging.getLogger(__name__)

PairCommentSum = Dict[str, float]

FEATURE_COLUMNS = (
    [f'relevance_{i}' for i in range(1, RELEVANCE_WIDTH + 1)]
    + ['hour', 'day_of_week', 'pair_comment_sum', 'hour_boost']
)


class BoostPolicy(Enum):
    """How the hour boost feature is decided."""
    STATIC = "static"  # fixed evening window
    GOLDEN_HOURS = "golden_hours"  # top hours from history


def build_pair_comment_sums(records: pd.DataFrame) -> PairCommentSum:
    """
    Sum comments per hashtag pair.

    Args:
        records: Rows with 'hashtags' and 'comments' columns

    Returns:
        Mapping from pair key to total comments of rows containing the pair
    """
    sums: PairCommentSum = defaultdict(float)
    for hashtags, comments in zip(records['hashtags'], records['comments']):
        for pair in hashtag_pairs(hashtags):
            sums[pair] += comments
    return dict(sums)


def pair_comment_total(hashtags: str, pair_sums: PairCommentSum) -> float:
    """Sum of the mapping over the string's pairs; unseen pairs add 0."""
    return float(sum(pair_sums.get(pair, 0) for pair in hashtag_pairs(hashtags)))


def compute_golden_hours(df: pd.DataFrame, top_n: int = GOLDEN_HOUR_COUNT) -> List[int]:
    """
    Hours of day with the most total interaction.

    Args:
        df: Enriched records with hour, likes, shares and comments
        top_n: Number of hours to return

    Returns:
        Hours ordered by interaction, ties broken by the lower hour
    """
    interaction = df['likes'] + df['shares'] + df['comments']
    by_hour = interaction.groupby(df['hour']).sum().reindex(range(24), fill_value=0)
    ranked = sorted(range(24), key=lambda hour: -by_hour[hour])
    return ranked[:top_n]


def hour_boost(hour: int, policy: BoostPolicy,
               golden_hours: Optional[Sequence[int]] = None) -> float:
    """Boost multiplier for a posting hour."""
    if policy is BoostPolicy.STATIC:
        peak_hours = STATIC_PEAK_HOURS
    else:
        if golden_hours is None:
            raise ValueError("Golden hour boost requires precomputed golden hours")
        peak_hours = golden_hours
    return HOUR_BOOST if hour in peak_hours else 1.0


class FeatureEngineer:
    """Turn post records into the nine-column regression input."""

    def __init__(self, golden_hours: Optional[Sequence[int]] = None):
        self.golden_hours = list(golden_hours) if golden_hours is not None else None
        self.fitted = False
        self.pair_comment_sums: PairCommentSum = {}
        self.scorer = HashtagRelevanceScorer(RELEVANCE_WIDTH)

    def fit(self, train: pd.DataFrame, corpus: Sequence[str]) -> 'FeatureEngineer':
        """
        Learn run-scoped statistics.

        Args:
            train: Training rows; only these feed the pair co-occurrence index
            corpus: Hashtag strings the relevance scores are measured against
        """
        self.pair_comment_sums = build_pair_comment_sums(train)
        self.scorer.fit(corpus)
        self.fitted = True
        logger.debug(f"Fitted on {len(train)} rows, {len(self.pair_comment_sums)} hashtag pairs")
        return self

    def transform(self, records: pd.DataFrame,
                  boost_policy: BoostPolicy = BoostPolicy.STATIC) -> np.ndarray:
        """Feature matrix with one row per record, columns as FEATURE_COLUMNS."""
        if not self.fitted:
            raise ValueError("Must fit before transform")

        rows = [
            self._assemble(hashtags, hour, day_of_week, boost_policy)
            for hashtags, hour, day_of_week in zip(
                records['hashtags'], records['hour'], records['day_of_week'])
        ]
        if not rows:
            return np.empty((0, len(FEATURE_COLUMNS)))
        return np.vstack(rows)

    def fit_transform(self, train: pd.DataFrame, corpus: Sequence[str],
                      boost_policy: BoostPolicy = BoostPolicy.STATIC) -> np.ndarray:
        """Fit and transform in one step."""
        return self.fit(train, corpus).transform(train, boost_policy)

    def candidate_features(self, hashtags: str, hour: int, day_of_week: int) -> np.ndarray:
        """
        Feature vector for the post being forecast.

        Pair sum and boost are always taken from this run's pair index and
        the golden hours, whatever the generic assembly produced.
        """
        if not self.fitted:
            raise ValueError("Must fit before transform")

        vector = self._assemble(hashtags, hour, day_of_week, BoostPolicy.STATIC)
        vector[-2] = pair_comment_total(hashtags, self.pair_comment_sums)
        vector[-1] = hour_boost(hour, BoostPolicy.GOLDEN_HOURS, self.golden_hours)
        return vector

    def _assemble(self, hashtags: str, hour: int, day_of_week: int,
                  boost_policy: BoostPolicy) -> np.ndarray:
        relevance = self.scorer.score(hashtags)
        return np.concatenate([
            relevance,
            [
                hour,
                day_of_week,
                pair_comment_total(hashtags, self.pair_comment_sums),
                hour_boost(hour, boost_policy, self.golden_hours),
            ],
        ]).astype(float)
