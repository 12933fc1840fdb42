"""Errors raised by the engagement forecasting pipeline."""


class EngagementForecastError(Exception):
    """Base class for pipeline failures."""


class NoValidPostsError(EngagementForecastError):
    """No post survived timestamp filtering."""


class DataSourceError(EngagementForecastError):
    """A post or comment source could not be read."""


class InvalidCandidateError(EngagementForecastError, ValueError):
    """The candidate post cannot be turned into features."""


class DegenerateRegressionError(EngagementForecastError):
    """Training data cannot support a stable least-squares fit."""

    def __init__(self, target: str, reason: str):
        self.target = target
        self.reason = reason
        super().__init__(f"Cannot fit {target} model: {reason}")


class PredictionDeadlineExceeded(EngagementForecastError):
    """The caller's deadline passed before the ensemble finished."""

    def __init__(self, completed_runs: int, total_runs: int):
        self.completed_runs = completed_runs
        self.total_runs = total_runs
        super().__init__(
            f"Deadline exceeded after {completed_runs} of {total_runs} runs"
        )
