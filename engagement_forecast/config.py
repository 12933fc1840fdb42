import os
from pathlib import Path

# Project root
PROJECT_ROOT = Path(__file__).parent.parent

# Data paths
DATA_DIR = PROJECT_ROOT / "data"
POSTS_PATH = Path(os.getenv("ENGAGEMENT_POSTS_PATH", DATA_DIR / "posts_rows.csv"))
COMMENTS_PATH = Path(os.getenv("ENGAGEMENT_COMMENTS_PATH", DATA_DIR / "comments_rows.csv"))

# Serving
PORT = int(os.getenv("PORT", "3000"))
# Seconds; unset means no deadline
PREDICT_DEADLINE = float(os.getenv("ENGAGEMENT_PREDICT_DEADLINE", "0")) or None

# Raw table schema
POST_COLUMNS = ["id", "hashtags", "created_at", "likes", "share"]
COMMENT_COLUMNS = ["post_id"]

# Feature scheme
RELEVANCE_WIDTH = 5
HOUR_BOOST = 1.15
STATIC_PEAK_HOURS = (19, 20, 21)
GOLDEN_HOUR_COUNT = 3
PAIR_SEPARATOR = "|"

# Sampling
NO_ENGAGEMENT_CAP = 50
TEST_SIZE = 0.2

# Ensemble run counts
SERVING_RUNS = 1
BATCH_RUNS = 3

TARGETS = ["likes", "shares", "comments"]
