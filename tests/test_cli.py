"""Tests for CLI commands."""

from unittest.mock import MagicMock, patch

import pytest
from typer.testing import CliRunner

from instasight.cli.main import app
from instasight.models.insights import AccountInsights, DailyTotals, InstagramMedia
from instasight.services.ai.analyzer import AnalysisResult
from instasight.services.graph.client import FacebookGraphError

runner = CliRunner()

ACCOUNT_ARGS = ["--token", "page-token", "--account", "ig-1"]


@pytest.fixture
def graph_client():
    with patch("instasight.cli.report.get_client") as mock_get_client:
        client = MagicMock()
        client.__enter__.return_value = client
        mock_get_client.return_value = client
        yield client


class TestVersionCommand:
    """Tests for version command."""

    def test_version_shows_version(self):
        """Test version command shows version number."""
        result = runner.invoke(app, ["version"])

        assert result.exit_code == 0
        assert "instasight v" in result.output.lower()


class TestStatusCommand:
    """Tests for status command."""

    def test_status(self, mock_settings):
        """Test status lists the configuration."""
        with patch("instasight.cli.main.get_settings", return_value=mock_settings):
            result = runner.invoke(app, ["status"])

        assert result.exit_code == 0
        assert "Graph API version: v17.0" in result.output
        assert "gpt-4o-mini" in result.output


class TestServeCommand:
    """Tests for serve command."""

    def test_serve_uses_settings(self, mock_settings):
        """Test serve runs uvicorn with the configured address."""
        with patch("instasight.cli.main.get_settings", return_value=mock_settings), \
                patch("uvicorn.run") as mock_run:
            result = runner.invoke(app, ["serve", "--port", "9000"])

        assert result.exit_code == 0
        mock_run.assert_called_once()
        args, kwargs = mock_run.call_args
        assert args == ("instasight.web.app:app",)
        assert kwargs["host"] == "127.0.0.1"
        assert kwargs["port"] == 9000


class TestReportCommands:
    """Tests for report commands."""

    def test_media_no_posts(self, graph_client):
        """Test media listing with no posts."""
        graph_client.fetch_media.return_value = []

        result = runner.invoke(app, ["report", "media", *ACCOUNT_ARGS])

        assert result.exit_code == 0
        assert "no posts found" in result.output.lower()

    def test_media_lists_posts(self, graph_client, sample_media_payload):
        """Test media listing shows every post."""
        graph_client.fetch_media.return_value = [
            InstagramMedia.model_validate(item) for item in sample_media_payload
        ]

        result = runner.invoke(app, ["report", "media", *ACCOUNT_ARGS, "--limit", "3"])

        assert result.exit_code == 0
        graph_client.fetch_media.assert_called_once_with(limit=3)
        assert "m1" in result.output
        assert "m3" in result.output

    def test_media_expired_token(self, graph_client):
        """Test a revoked token exits with an error."""
        graph_client.fetch_media.side_effect = FacebookGraphError(
            "Error validating access token",
            status_code=400,
            payload={"error": {"code": 190}},
        )

        result = runner.invoke(app, ["report", "media", *ACCOUNT_ARGS])

        assert result.exit_code == 1
        assert "reconnect" in result.output.lower()

    def test_token_from_environment(self, graph_client, monkeypatch):
        """Test the token and account can come from the environment."""
        monkeypatch.setenv("INSTAGRAM_PAGE_TOKEN", "env-token")
        monkeypatch.setenv("INSTAGRAM_BUSINESS_ID", "env-account")
        graph_client.fetch_media.return_value = []

        with patch("instasight.cli.report.get_client") as mock_get_client:
            mock_get_client.return_value = graph_client
            result = runner.invoke(app, ["report", "media"])

        assert result.exit_code == 0
        mock_get_client.assert_called_once_with("env-token", "env-account")

    def test_account_insights(self, graph_client):
        """Test account insights render the rollups."""
        graph_client.fetch_account_insights.return_value = AccountInsights(
            follower_count=1234,
            daily_totals={"reach": DailyTotals(last_7_days=70, last_28_days=280)},
        )

        result = runner.invoke(app, ["report", "insights", *ACCOUNT_ARGS, "--days", "7"])

        assert result.exit_code == 0
        graph_client.fetch_account_insights.assert_called_once_with(period_days=7)
        assert "1,234" in result.output
        assert "280" in result.output

    def test_post_insights_empty(self, graph_client):
        """Test a post without insights."""
        graph_client.fetch_media_insights.return_value = {}

        result = runner.invoke(app, ["report", "post", "m1", *ACCOUNT_ARGS, "--type", "REELS"])

        assert result.exit_code == 0
        graph_client.fetch_media_insights.assert_called_once_with("m1", "REELS")
        assert "no insights" in result.output.lower()

    def test_leaderboard(self, graph_client, sample_media_payload):
        """Test the leaderboard ranks posts."""
        graph_client.fetch_media.return_value = [
            InstagramMedia.model_validate(item) for item in sample_media_payload
        ]

        result = runner.invoke(app, ["report", "leaderboard", *ACCOUNT_ARGS])

        assert result.exit_code == 0
        assert result.output.index("m2") < result.output.index("m1")

    def test_analyze_without_key(self, mock_settings, graph_client):
        """Test analyze refuses to run without an OpenAI key."""
        settings = mock_settings.model_copy(update={"openai_api_key": None})

        with patch("instasight.cli.report.get_settings", return_value=settings):
            result = runner.invoke(app, ["report", "analyze", *ACCOUNT_ARGS])

        assert result.exit_code == 1
        assert "openai api key not configured" in result.output.lower()
        graph_client.fetch_media.assert_not_called()

    def test_analyze(self, mock_settings, graph_client):
        """Test analyze prints the model summary."""
        with patch("instasight.cli.report.get_settings", return_value=mock_settings), \
                patch("instasight.cli.report.InsightsAnalyzer") as mock_analyzer:
            analyzer = mock_analyzer.return_value
            analyzer.collect_post_summaries.return_value = ["post"]
            analyzer.analyze.return_value = AnalysisResult(
                model="gpt-4o-mini", summary="Top Post is m2", analyzed_posts=1
            )

            result = runner.invoke(app, ["report", "analyze", *ACCOUNT_ARGS])

        assert result.exit_code == 0
        assert "Top Post is m2" in result.output
        assert "Reviewed posts: 1" in result.output
