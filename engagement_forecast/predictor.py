"""Ensembled engagement prediction for a not-yet-published post."""

from dataclasses import dataclass, field, asdict
from pathlib import Path
from typing import Dict, List, Optional
import logging
import math
import time

import numpy as np
import pandas as pd

from .config import BATCH_RUNS, COMMENTS_PATH, POSTS_PATH, SERVING_RUNS, TARGETS, TEST_SIZE
from .data_loader import load_training_data, parse_candidate_time
from .exceptions import NoValidPostsError, PredictionDeadlineExceeded
from .feature_engineering import BoostPolicy, FeatureEngineer, compute_golden_hours
from .modeling import RegressionTrainer
from .sampling import EngagementFilter, balance_dataset, make_run_seed, seeded_train_test_split

logger = logging.getLogger(__name__)


@dataclass
class CandidatePost:
    """Post to forecast. Only the timestamp and hashtags feed the model."""
    created_at: str
    hashtags: str = ''
    text: Optional[str] = None


@dataclass
class EngagementPrediction:
    """Non-negative integer engagement forecast."""
    likes: int
    shares: int
    comments: int

    def to_dict(self) -> Dict[str, int]:
        return asdict(self)

    def __str__(self):
        return f"likes={self.likes}, shares={self.shares}, comments={self.comments}"


@dataclass
class EnsembleResult:
    """Averaged prediction plus what went into it."""
    prediction: EngagementPrediction
    runs: List[EngagementPrediction] = field(default_factory=list)
    golden_hours: List[int] = field(default_factory=list)
    balanced_size: int = 0
    train_size: int = 0
    test_size: int = 0


def round_half_up(value: float) -> int:
    """Round to the nearest integer, halves away from zero for positives."""
    return int(math.floor(value + 0.5))


class EnsemblePredictor:
    """Repeat seeded sample, train, predict runs and average the results."""

    def __init__(
        self,
        runs: int = BATCH_RUNS,
        engagement_filter: EngagementFilter = EngagementFilter.COMMENTS,
        test_size: float = TEST_SIZE,
        training_boost_policy: BoostPolicy = BoostPolicy.STATIC,
        trainer: Optional[RegressionTrainer] = None,
    ):
        """
        Initialize predictor.

        Args:
            runs: Number of independently seeded runs to average
            engagement_filter: Which records count as engaged when balancing
            test_size: Fraction of the balanced dataset held out per run
            training_boost_policy: Hour boost used for training rows
            trainer: Regression trainer, defaults to one model per target
        """
        if runs < 1:
            raise ValueError(f"runs must be at least 1, got {runs}")
        self.runs = runs
        self.engagement_filter = engagement_filter
        self.test_size = test_size
        self.training_boost_policy = training_boost_policy
        self.trainer = trainer or RegressionTrainer(list(TARGETS))

    def predict(self, data: pd.DataFrame, candidate: CandidatePost,
                deadline: Optional[float] = None) -> EnsembleResult:
        """
        Forecast engagement for the candidate post.

        Args:
            data: Enriched post records (all valid timestamps, unbalanced)
            candidate: Post to forecast
            deadline: Seconds allowed; checked before each run starts

        Returns:
            EnsembleResult with the averaged prediction

        Raises:
            NoValidPostsError: If `data` is empty
            InvalidCandidateError: If the candidate timestamp does not parse
            DegenerateRegressionError: If any run cannot be fit
            PredictionDeadlineExceeded: If the deadline passes between runs
        """
        if data.empty:
            raise NoValidPostsError("No valid posts to train on")

        started = time.monotonic()
        hashtags = candidate.hashtags or ''
        scheduled = parse_candidate_time(candidate.created_at)
        hour = int(scheduled.hour)
        day_of_week = (scheduled.dayofweek + 1) % 7

        golden_hours = compute_golden_hours(data)
        logger.info(f"Golden hours: {golden_hours}")

        balanced = balance_dataset(data, self.engagement_filter)
        corpus = balanced['hashtags'].tolist()

        result = EnsembleResult(
            prediction=EngagementPrediction(0, 0, 0),
            golden_hours=golden_hours,
            balanced_size=len(balanced),
        )
        totals = np.zeros(len(self.trainer.targets))

        for run in range(self.runs):
            if deadline is not None and time.monotonic() - started >= deadline:
                raise PredictionDeadlineExceeded(run, self.runs)

            seed = make_run_seed(candidate.created_at, hashtags, run)
            split = seeded_train_test_split(balanced, seed, self.test_size)
            result.train_size, result.test_size = len(split.train), len(split.test)

            engineer = FeatureEngineer(golden_hours)
            X_train = engineer.fit_transform(split.train, corpus, self.training_boost_policy)
            models = self.trainer.fit(X_train, split.train)

            x_candidate = engineer.candidate_features(hashtags, hour, day_of_week)
            run_values = np.array([
                max(0, round_half_up(models[target].predict(x_candidate)[0]))
                for target in self.trainer.targets
            ])
            totals += run_values

            run_prediction = EngagementPrediction(*(int(v) for v in run_values))
            result.runs.append(run_prediction)
            logger.info(f"Run {run + 1}/{self.runs}: {run_prediction}")

        result.prediction = EngagementPrediction(
            *(round_half_up(total / self.runs) for total in totals)
        )
        logger.info(f"Averaged prediction over {self.runs} runs: {result.prediction}")
        return result


def predict_engagement(
    candidate: CandidatePost,
    posts_path: Path = POSTS_PATH,
    comments_path: Path = COMMENTS_PATH,
    runs: int = SERVING_RUNS,
    engagement_filter: EngagementFilter = EngagementFilter.COMMENTS_AND_LIKES,
    deadline: Optional[float] = None,
) -> EnsembleResult:
    """Load the exports and forecast the candidate in one call."""
    data = load_training_data(posts_path, comments_path)
    predictor = EnsemblePredictor(runs=runs, engagement_filter=engagement_filter)
    return predictor.predict(data, candidate, deadline=deadline)
