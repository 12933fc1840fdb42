"""
Engagement Forecast
===================

Predicts likes, shares and comments for a not-yet-published social post from
its scheduled time and hashtags, using linear models trained on historical
posts and averaged over several seeded runs.

Modules:
--------
- data_loader: CSV ingestion and comment counting
- text_processor: hashtag tokenization and TF-IDF relevance
- feature_engineering: pair co-occurrence, golden hours, feature assembly
- sampling: class balancing and seeded splitting
- modeling: per-target least-squares regression
- predictor: ensembled prediction
- api / cli: HTTP and command line entry points
"""

from .predictor import CandidatePost, EngagementPrediction, EnsemblePredictor, predict_engagement

__version__ = "1.0.0"

__all__ = ["CandidatePost", "EngagementPrediction", "EnsemblePredictor", "predict_engagement"]
