"""Class balancing and reproducible train/test splitting."""

from dataclasses import dataclass
from enum import Enum
import logging
import math
import random

import pandas as pd

from .config import NO_ENGAGEMENT_CAP, TEST_SIZE

logger = logging.getLogger(__name__)


class EngagementFilter(Enum):
    """Which records count as having engagement signal."""
    COMMENTS = "comments"
    COMMENTS_AND_LIKES = "comments-and-likes"

    def mask(self, df: pd.DataFrame) -> pd.Series:
        positive = df['comments'] > 0
        if self is EngagementFilter.COMMENTS_AND_LIKES:
            positive &= df['likes'] > 0
        return positive


@dataclass
class SplitResult:
    """Train/test partition of one run."""
    train: pd.DataFrame
    test: pd.DataFrame
    seed: str


def balance_dataset(df: pd.DataFrame,
                    engagement_filter: EngagementFilter = EngagementFilter.COMMENTS,
                    cap: int = NO_ENGAGEMENT_CAP) -> pd.DataFrame:
    """
    Keep every engaged record and at most `cap` zero-comment records.

    Zero-comment records are taken in encounter order, not sampled.
    Engaged records come first in the result.
    """
    engaged = df[engagement_filter.mask(df)]
    silent = df[df['comments'] == 0].head(cap)
    balanced = pd.concat([engaged, silent]).reset_index(drop=True)

    logger.info(f"Balanced dataset: {len(engaged)} engaged + {len(silent)} "
                f"zero-comment records (filter={engagement_filter.value})")
    return balanced


def make_run_seed(created_at: str, hashtags: str, run: int) -> str:
    """Seed string for one ensemble run."""
    return f"{created_at}{hashtags}{run}"


def shuffle_records(df: pd.DataFrame, rng: random.Random) -> pd.DataFrame:
    """Fisher-Yates permutation of the rows driven by `rng`."""
    order = list(range(len(df)))
    for i in range(len(order) - 1, 0, -1):
        j = math.floor(rng.random() * (i + 1))
        order[i], order[j] = order[j], order[i]
    return df.iloc[order].reset_index(drop=True)


def seeded_train_test_split(df: pd.DataFrame, seed: str,
                            test_size: float = TEST_SIZE) -> SplitResult:
    """
    Shuffle with a seeded generator, then hold out the tail.

    Args:
        df: Balanced dataset
        seed: Seed string; identical seeds give identical partitions
        test_size: Fraction held out, rounded down

    Returns:
        SplitResult whose test part is the last floor(n * test_size) rows
    """
    if not 0 <= test_size < 1:
        raise ValueError(f"test_size must be in [0, 1), got {test_size}")

    shuffled = shuffle_records(df, random.Random(seed))
    test_count = math.floor(len(shuffled) * test_size)
    cut = len(shuffled) - test_count

    logger.debug(f"Split {len(shuffled)} rows into {cut} train / {test_count} test")
    return SplitResult(
        train=shuffled.iloc[:cut].reset_index(drop=True),
        test=shuffled.iloc[cut:].reset_index(drop=True),
        seed=seed,
    )
