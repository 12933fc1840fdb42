"""Shared fixtures: synthetic post histories and their CSV exports."""

import numpy as np
import pandas as pd
import pytest

TAGS = [
    '#proud', '#scalingpeaks', '#motivation', '#olympics', '#team', '#growth',
    '#launch', '#tech', '#travel', '#food', '#music', '#fitness',
]

# Distinct leading documents keep the relevance columns independent
LEADING_HASHTAGS = [
    '#proud #scalingpeaks',
    '#motivation #olympics #team',
    '#growth',
    '#launch #tech',
    '#travel #food #music',
]

COLUMNS = ['id', 'hashtags', 'hour', 'day_of_week', 'likes', 'shares', 'comments']

# 2025-05-18 is a Sunday, so day offsets match day_of_week
WEEK_START = pd.Timestamp('2025-05-18')


def make_enriched(n_engaged: int = 70, n_silent: int = 50, seed: int = 7) -> pd.DataFrame:
    """Enriched records: engaged rows first, then zero-comment rows."""
    rng = np.random.default_rng(seed)
    rows = []
    for i in range(n_engaged + n_silent):
        if i < len(LEADING_HASHTAGS):
            hashtags = LEADING_HASHTAGS[i]
        else:
            size = int(rng.integers(1, 5))
            hashtags = ' '.join(rng.choice(TAGS, size=size, replace=False))
        engaged = i < n_engaged
        rows.append({
            'id': f'p{i}',
            'hashtags': hashtags,
            'hour': int(rng.integers(0, 24)),
            'day_of_week': int(rng.integers(0, 7)),
            'likes': float(rng.integers(1, 200)),
            'shares': float(rng.integers(0, 40)),
            'comments': int(rng.integers(1, 30)) if engaged else 0,
        })
    return pd.DataFrame(rows, columns=COLUMNS)


def write_exports(df: pd.DataFrame, directory):
    """Write posts and comments CSVs that load back into `df`."""
    created_at = [
        (WEEK_START + pd.Timedelta(days=dow, hours=hour)).strftime('%Y-%m-%d %H:%M:%S')
        for hour, dow in zip(df['hour'], df['day_of_week'])
    ]
    posts = pd.DataFrame({
        'id': df['id'],
        'hashtags': df['hashtags'],
        'created_at': created_at,
        'likes': df['likes'].astype(int),
        'share': df['shares'].astype(int),
    })
    comments = pd.DataFrame({
        'post_id': [post_id for post_id, count in zip(df['id'], df['comments']) for _ in range(count)],
    })

    posts_path = directory / 'posts_rows.csv'
    comments_path = directory / 'comments_rows.csv'
    posts.to_csv(posts_path, index=False)
    comments.to_csv(comments_path, index=False)
    return posts_path, comments_path


@pytest.fixture
def enriched():
    """120 balanced-ready records plus 30 extra zero-comment rows."""
    return make_enriched(n_engaged=70, n_silent=80)


@pytest.fixture
def exports(tmp_path, enriched):
    return write_exports(enriched, tmp_path)
