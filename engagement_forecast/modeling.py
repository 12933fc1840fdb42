# engagement_forecast/modeling.py
"""Least-squares regression for engagement targets."""

import numpy as np
import pandas as pd
from typing import Dict, List, Optional
from sklearn.linear_model import LinearRegression
import logging
from dataclasses import dataclass

from .config import TARGETS
from .exceptions import DegenerateRegressionError

logger = logging.getLogger(__name__)


@dataclass
class FittedModel:
    """One fitted target model."""
    target: str
    model: LinearRegression
    n_samples: int

    @property
    def coefficients(self) -> np.ndarray:
        return self.model.coef_

    @property
    def intercept(self) -> float:
        return float(self.model.intercept_)

    def predict(self, X: np.ndarray) -> np.ndarray:
        return self.model.predict(np.atleast_2d(X))

    def __str__(self):
        return (f"{self.target} model on {self.n_samples} rows: "
                f"intercept={self.intercept:.3f}")


class RegressionTrainer:
    """Fit independent ordinary least-squares models, one per target."""

    def __init__(self, targets: Optional[List[str]] = None):
        """
        Initialize trainer.

        Args:
            targets: Target column names, defaults to likes, shares, comments
        """
        self.targets = targets or list(TARGETS)

    def fit_target(self, X: np.ndarray, y: np.ndarray, target: str) -> FittedModel:
        """
        Fit one target with intercept.

        Args:
            X: Feature matrix, rows aligned with y
            y: Target values
            target: Target name for reporting

        Returns:
            FittedModel

        Raises:
            DegenerateRegressionError: Too few rows, rank-deficient design
                or non-finite coefficients
        """
        X = np.asarray(X, dtype=float)
        y = np.asarray(y, dtype=float)
        n_samples, n_features = X.shape

        if n_samples != len(y):
            raise ValueError(f"X has {n_samples} rows but {target} has {len(y)} values")
        if n_samples < n_features + 1:
            raise DegenerateRegressionError(
                target, f"{n_samples} rows for {n_features} features plus intercept")
        if not (np.isfinite(X).all() and np.isfinite(y).all()):
            raise DegenerateRegressionError(target, "non-finite values in training data")

        model = LinearRegression(fit_intercept=True)
        model.fit(X, y)

        # rank_ is computed on the centred matrix, i.e. alongside the intercept
        if model.rank_ < n_features:
            raise DegenerateRegressionError(
                target, f"design matrix rank {model.rank_} < {n_features} features")
        if not (np.isfinite(model.coef_).all() and np.isfinite(model.intercept_)):
            raise DegenerateRegressionError(target, "non-finite coefficients")

        fitted = FittedModel(target=target, model=model, n_samples=n_samples)
        logger.debug(str(fitted))
        return fitted

    def fit(self, X: np.ndarray, targets: pd.DataFrame) -> Dict[str, FittedModel]:
        """
        Fit every target against the same feature matrix.

        Args:
            X: Shared feature matrix
            targets: Frame holding one column per target name

        Returns:
            Mapping from target name to its model
        """
        return {
            target: self.fit_target(X, targets[target].to_numpy(), target)
            for target in self.targets
        }
