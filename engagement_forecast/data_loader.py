"""Data loading functionality for post and comment exports."""

from dataclasses import dataclass
import json
import re
from typing import List, Dict, Any, Union
import numpy as np
import pandas as pd
from pathlib import Path
import logging

from .config import POST_COLUMNS, COMMENT_COLUMNS
from .exceptions import DataSourceError, InvalidCandidateError, NoValidPostsError
from .validator import DataValidator, RequiredColumnsRule, UniqueIdsRule

logger = logging.getLogger(__name__)

CommentIndex = Dict[str, int]

_TRAILING_COMMA = re.compile(r',(\s*[\]}])')


def _clean_json_string(text: str) -> str:
    """Undo CSV quote doubling and drop trailing commas."""
    cleaned = text.replace('""', '"')
    return _TRAILING_COMMA.sub(r'\1', cleaned)


def parse_engagement_count(value: Any) -> float:
    """
    Read a likes/shares cell.

    Exports store either a plain number or a JSON array of user ids;
    arrays count by length. Anything unreadable counts as 0.

    Args:
        value: Raw cell value

    Returns:
        Non-negative count
    """
    if value is None or (isinstance(value, float) and np.isnan(value)):
        return 0.0

    text = str(value).strip()
    if not text:
        return 0.0

    if text.startswith('['):
        try:
            parsed = json.loads(_clean_json_string(text))
        except json.JSONDecodeError:
            return 0.0
        return float(len(parsed)) if isinstance(parsed, list) else 0.0

    try:
        number = float(text)
    except ValueError:
        return 0.0

    if not np.isfinite(number) or number < 0:
        return 0.0
    return number


def parse_timestamps(values: pd.Series) -> pd.Series:
    """Strict ISO-8601 parse; invalid entries become NaT."""
    return pd.to_datetime(values, errors='coerce', format='ISO8601', utc=True)


def calendar_fields(timestamps: pd.Series) -> pd.DataFrame:
    """Hour of day and day of week (0 = Sunday)."""
    return pd.DataFrame({
        'hour': timestamps.dt.hour.astype(int),
        'day_of_week': ((timestamps.dt.dayofweek + 1) % 7).astype(int),
    }, index=timestamps.index)


def parse_candidate_time(created_at: Union[str, None]) -> pd.Timestamp:
    """
    Parse the candidate post's scheduled timestamp.

    Raises:
        InvalidCandidateError: If the timestamp is missing or not ISO-8601
    """
    parsed = parse_timestamps(pd.Series([created_at if created_at is not None else '']))
    if parsed.isna().iloc[0]:
        raise InvalidCandidateError(f"Unparseable candidate timestamp: {created_at!r}")
    return parsed.iloc[0]


@dataclass
class DataLoadResult:
    """Result of data loading operation."""
    dataframe: pd.DataFrame
    errors: List[Dict[str, Any]]
    metadata: Dict[str, Any]


class _CsvLoader:
    """Shared CSV reading and schema validation."""

    required_columns: List[str] = []

    def __init__(self, filepath: Path):
        """
        Initialize data loader.

        Args:
            filepath: Path to the CSV export
        """
        self.filepath = Path(filepath)
        self._validate_file_exists()

    def _validate_file_exists(self) -> None:
        """Ensure the data file exists."""
        if not self.filepath.exists():
            raise DataSourceError(f"Data file not found: {self.filepath}")

    def _read(self) -> pd.DataFrame:
        logger.info(f"Loading data from {self.filepath}")
        try:
            df = pd.read_csv(self.filepath, dtype=str, keep_default_na=False)
        except pd.errors.EmptyDataError:
            df = pd.DataFrame(columns=self.required_columns)
        except (OSError, pd.errors.ParserError, UnicodeDecodeError) as e:
            raise DataSourceError(f"Could not read {self.filepath}: {e}") from e

        report = self._validator().validate(df)
        if not report['is_valid']:
            messages = '; '.join(error['message'] for error in report['errors'])
            raise DataSourceError(f"{self.filepath}: {messages}")
        for warning in report['warnings']:
            logger.warning(f"{self.filepath}: {warning['message']}")

        return df

    def _validator(self) -> DataValidator:
        return DataValidator().add_rule(RequiredColumnsRule(self.required_columns))


class PostsDataLoader(_CsvLoader):
    """Load post rows into PostRecord form."""

    required_columns = POST_COLUMNS

    def _validator(self) -> DataValidator:
        return super()._validator().add_warning(UniqueIdsRule('id'))

    def load(self) -> DataLoadResult:
        """
        Load posts, dropping rows whose timestamp does not parse.

        Returns:
            DataLoadResult with columns id, hashtags, hour, day_of_week,
            likes, shares in file order
        """
        raw = self._read()
        timestamps = parse_timestamps(raw['created_at'])
        valid = timestamps.notna()

        errors = [
            {'line': int(idx) + 2, 'error': 'invalid created_at', 'content': raw.at[idx, 'created_at'][:100]}
            for idx in raw.index[~valid]
        ]

        kept = raw[valid]
        df = pd.DataFrame({
            'id': kept['id'].astype(str),
            'hashtags': kept['hashtags'].fillna('').astype(str),
        })
        df = df.join(calendar_fields(timestamps[valid]))
        df['likes'] = kept['likes'].map(parse_engagement_count)
        df['shares'] = kept['share'].map(parse_engagement_count)
        df = df.reset_index(drop=True)

        metadata = {
            'total_rows': len(raw),
            'successful_records': len(df),
            'failed_records': len(errors),
            'file_size_mb': self.filepath.stat().st_size / (1024 * 1024)
        }

        logger.info(f"Loaded {len(df)} posts, skipped {len(errors)} with invalid timestamps")

        return DataLoadResult(dataframe=df, errors=errors, metadata=metadata)


class CommentsDataLoader(_CsvLoader):
    """Count comment rows per referenced post."""

    required_columns = COMMENT_COLUMNS

    def load(self) -> CommentIndex:
        """
        Build the comment index.

        Returns:
            Mapping from post id to number of comment rows
        """
        raw = self._read()
        post_ids = raw['post_id'].astype(str)
        counts = post_ids[post_ids != ''].value_counts()
        logger.info(f"Counted {len(post_ids)} comments across {len(counts)} posts")
        return {post_id: int(count) for post_id, count in counts.items()}


def enrich_posts(posts: pd.DataFrame, comment_index: CommentIndex) -> pd.DataFrame:
    """Attach comment counts to posts, 0 where a post has none."""
    enriched = posts.copy()
    enriched['comments'] = enriched['id'].map(comment_index).fillna(0).astype(int)
    return enriched


def load_training_data(posts_path: Path, comments_path: Path) -> pd.DataFrame:
    """
    Read both exports and merge them into enriched post records.

    Raises:
        DataSourceError: If either export cannot be read
        NoValidPostsError: If no post has a valid timestamp
    """
    posts = PostsDataLoader(posts_path).load().dataframe
    comment_index = CommentsDataLoader(comments_path).load()

    if posts.empty:
        raise NoValidPostsError(f"No valid posts in {posts_path}")

    return enrich_posts(posts, comment_index)
