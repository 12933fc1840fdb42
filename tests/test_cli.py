"""
Tests for the batch command line.

Run with: pytest tests/test_cli.py -v
"""

import json

from click.testing import CliRunner

from engagement_forecast.cli import cli
from engagement_forecast.predictor import CandidatePost, EnsemblePredictor


def _args(posts_path, comments_path, *extra):
    return [
        'predict',
        '--posts', str(posts_path),
        '--comments', str(comments_path),
        '--created-at', '2025-05-15 20:00:00',
        '--hashtags', '#proud #scalingpeaks',
        *extra,
    ]


class TestPredictCommand:
    def test_json_output_matches_batch_pipeline(self, exports, enriched):
        result = CliRunner().invoke(cli, _args(*exports, '--json'))
        assert result.exit_code == 0, result.output

        printed = json.loads(result.output.strip().splitlines()[-1])
        expected = EnsemblePredictor(runs=3).predict(
            enriched, CandidatePost('2025-05-15 20:00:00', '#proud #scalingpeaks'))
        assert printed == expected.prediction.to_dict()

    def test_human_readable_output(self, exports):
        result = CliRunner().invoke(cli, _args(*exports, '--runs', '1', '--filter', 'comments-and-likes'))
        assert result.exit_code == 0, result.output
        assert 'Average prediction over 1 run(s):' in result.output
        assert 'Comments:' in result.output

    def test_missing_export_reports_error(self, tmp_path):
        result = CliRunner().invoke(cli, _args(tmp_path / 'none.csv', tmp_path / 'none.csv'))
        assert result.exit_code == 1
        assert 'Data file not found' in result.output

    def test_requires_created_at(self, exports):
        result = CliRunner().invoke(cli, ['predict', '--posts', str(exports[0])])
        assert result.exit_code == 2
