"""
Command line entry point for batch forecasts and the HTTP server.
"""

import json
import logging
from pathlib import Path

import click

from . import config
from .exceptions import EngagementForecastError
from .predictor import CandidatePost, predict_engagement
from .sampling import EngagementFilter

logger = logging.getLogger(__name__)


@click.group()
@click.version_option(version='1.0.0')
@click.option("--verbose", is_flag=True, help="Log per-run details")
def cli(verbose: bool):
    """
    Engagement Forecast - predict likes, shares and comments for a scheduled post
    from historical post and comment exports.
    """
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.INFO,
        format="[%(asctime)s] %(levelname)s: %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S"
    )


@cli.command(name="predict")
@click.option("--posts", "posts_path", type=click.Path(path_type=Path), default=config.POSTS_PATH,
              show_default=True, help="Posts CSV export")
@click.option("--comments", "comments_path", type=click.Path(path_type=Path), default=config.COMMENTS_PATH,
              show_default=True, help="Comments CSV export")
@click.option("--created-at", required=True, help="Scheduled publish time, e.g. '2025-05-15 20:00:00'")
@click.option("--hashtags", default="", help="Hashtags, e.g. '#proud #scalingpeaks'")
@click.option("--runs", type=click.IntRange(min=1), default=config.BATCH_RUNS, show_default=True,
              help="Seeded runs to average")
@click.option("--filter", "filter_name", type=click.Choice([f.value for f in EngagementFilter]),
              default=EngagementFilter.COMMENTS.value, show_default=True,
              help="Which posts count as engaged when balancing")
@click.option("--json", "as_json", is_flag=True, help="Print the prediction as JSON")
def predict_command(posts_path: Path, comments_path: Path, created_at: str, hashtags: str,
                    runs: int, filter_name: str, as_json: bool):
    """
    Forecast engagement for one post.

    Example:
        python -m engagement_forecast predict --created-at "2025-05-15 20:00:00" --hashtags "#proud #scalingpeaks"
    """
    candidate = CandidatePost(created_at=created_at, hashtags=hashtags)
    try:
        result = predict_engagement(
            candidate,
            posts_path=posts_path,
            comments_path=comments_path,
            runs=runs,
            engagement_filter=EngagementFilter(filter_name),
        )
    except EngagementForecastError as e:
        raise click.ClickException(str(e)) from e

    prediction = result.prediction
    if as_json:
        click.echo(json.dumps(prediction.to_dict()))
        return

    click.echo(f"Average prediction over {runs} run(s):")
    click.echo(f"  Likes:    {prediction.likes}")
    click.echo(f"  Shares:   {prediction.shares}")
    click.echo(f"  Comments: {prediction.comments}")


@cli.command(name="serve")
@click.option("--host", default="0.0.0.0", show_default=True)
@click.option("--port", type=int, default=config.PORT, show_default=True)
def serve_command(host: str, port: int):
    """Run the HTTP prediction API."""
    import uvicorn

    logger.info(f"Starting server on {host}:{port}")
    uvicorn.run("engagement_forecast.api:app", host=host, port=port)


if __name__ == '__main__':
    cli()
